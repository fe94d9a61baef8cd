"""
Text reduction helpers: word truncation, achievement scoring and selection.
"""

import re
from typing import List, Sequence, Tuple

from cvfit.contexts.layout.content_units import ExperienceFormat, SummaryFormat

ELLIPSIS = "..."

# Bullet caps per experience format (further capped by the theme's max_bullet_points_per_exp)
DETAILED_BULLET_LIMIT = 5
STANDARD_BULLET_LIMIT = 3
COMPACT_SENTENCE_WORDS = 15

# Word limits per summary format (None keeps the pitch untouched)
SUMMARY_WORD_LIMITS = {
    SummaryFormat.ELEVATOR: None,
    SummaryFormat.STANDARD: 70,
    SummaryFormat.SHORT: 40,
}

BASE_ACHIEVEMENT_SCORE = 50
QUANTIFIED_BONUS = 30
IMPACT_VERB_BONUS = 10
LONG_DESCRIPTION_BONUS = 10
LONG_DESCRIPTION_CHARS = 80

QUANTIFICATION_PATTERNS = [
    re.compile(r"\d+\s*%"),
    re.compile(r"\d+\s*(k|K|M|millions?)\b"),
    re.compile(r"\d+\s*€"),
    re.compile(r"\$\s*\d+|\d+\s*\$"),
    re.compile(r"\d+x\b"),
    re.compile(r"\d+\s*(times|fois)\b"),
    re.compile(r"\d+\s*(users?|clients?|customers?|utilisateurs?)\b"),
    re.compile(r"\d+\s*(days?|weeks?|months?|years?|hours?|jours|mois|ans|heures)\b"),
    re.compile(r"\d+\+"),
]

IMPACT_KEYWORDS = (
    "increased",
    "reduced",
    "optimized",
    "improved",
    "developed",
    "created",
    "launched",
    "led",
    "managed",
    "augmenté",
    "réduit",
    "optimisé",
    "amélioré",
    "développé",
    "créé",
    "lancé",
    "piloté",
    "dirigé",
    "géré",
)

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def truncate_words(text: str, max_words: int) -> str:
    """
    Cut ``text`` to at most ``max_words`` words, appending an ellipsis when cut.

    Examples:
        >>> truncate_words("one two three four", 2)
        'one two...'
        >>> truncate_words("one two", 5)
        'one two'
    """
    words = text.split()
    if len(words) <= max_words:
        return text.strip()
    kept = " ".join(words[:max_words]).rstrip(",;:.-")
    return f"{kept}{ELLIPSIS}"


def word_count(text: str) -> int:
    return len(text.split())


def first_sentence(text: str) -> str:
    return _SENTENCE_END.split(text.strip(), maxsplit=1)[0]


def compact_sentence(text: str, max_words: int = COMPACT_SENTENCE_WORDS) -> str:
    """One-sentence synthesis of an achievement for the compact format."""
    return truncate_words(first_sentence(text), max_words)


def has_quantification(text: str) -> bool:
    return any(pattern.search(text) for pattern in QUANTIFICATION_PATTERNS)


def score_achievement(description: str) -> int:
    """
    Heuristic impact score (0-100) for an unscored achievement.

    Base 50, +30 when quantified, +10 for an impact verb, +10 for a long description.
    """
    score = BASE_ACHIEVEMENT_SCORE
    if has_quantification(description):
        score += QUANTIFIED_BONUS
    lowered = description.lower()
    if any(keyword in lowered for keyword in IMPACT_KEYWORDS):
        score += IMPACT_VERB_BONUS
    if len(description) > LONG_DESCRIPTION_CHARS:
        score += LONG_DESCRIPTION_BONUS
    return min(100, score)


def rank_achievements(achievements: Sequence) -> List[str]:
    """
    Achievement descriptions ordered by impact, highest first.

    Missing impact scores are filled with ``score_achievement``; ties keep the
    original order.
    """
    scored = [
        (a.impact_score if a.impact_score is not None else score_achievement(a.description), a)
        for a in achievements
    ]
    return [a.description for _, a in sorted(scored, key=lambda pair: -pair[0])]


def select_achievements(
    achievements: Sequence, fmt: ExperienceFormat, max_bullets: int
) -> Tuple[str, ...]:
    """
    Reduce an experience's achievements to what ``fmt`` renders.

    - detailed: top ``min(5, max_bullets)`` bullets
    - standard: top ``min(3, max_bullets)`` bullets
    - compact: one sentence from the top bullet, at most 15 words
    - minimal: nothing
    """
    if fmt is ExperienceFormat.MINIMAL or not achievements:
        return ()

    ranked = rank_achievements(achievements)
    if fmt is ExperienceFormat.DETAILED:
        return tuple(ranked[: min(DETAILED_BULLET_LIMIT, max_bullets)])
    if fmt is ExperienceFormat.STANDARD:
        return tuple(ranked[: min(STANDARD_BULLET_LIMIT, max_bullets)])
    return (compact_sentence(ranked[0]),)
