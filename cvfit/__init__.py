"""
CVFIT - Content Volume Fitting for Templated resumes

Decides what résumé content goes on the page, and in which format, so that it fits
a theme's finite layout budget measured in abstract content units.

Architecture:
- Layout Context: Content unit costs, zones and theme capacity schema
- Fitting Context: Greedy allocation engine, validation and statistics
"""

__version__ = "0.1.0"
