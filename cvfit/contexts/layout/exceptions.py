"""Custom exceptions for the layout context with theme references."""

from pathlib import Path
from typing import Iterable, Optional


class UnknownThemeError(KeyError):
    """
    Exception raised when a theme id is not in the registry.

    Public lookups catch this and fall back to the default theme; it surfaces only
    through the explicit ``ThemeRegistry.find`` lookup.

    Attributes:
        theme_id: The id that was requested
        available: Ids known to the registry
    """

    def __init__(self, theme_id: str, available: Iterable[str] = ()):
        self.theme_id = theme_id
        self.available = sorted(available)
        self.message = f"Theme not found: {theme_id!r}"
        if self.available:
            self.message += f". Available themes: {self.available}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidThemeConfigError(ValueError):
    """
    Exception raised when a theme configuration file is malformed.

    Attributes:
        message: Error description
        theme_id: Theme being loaded when the error occurred
        config_path: Path of the configuration file
    """

    def __init__(
        self,
        message: str,
        theme_id: Optional[str] = None,
        config_path: Optional[Path] = None,
    ):
        self.message = message
        self.theme_id = theme_id
        self.config_path = config_path

        parts = [message]
        if theme_id:
            parts.append(f"Theme: {theme_id}")
        if config_path:
            parts.append(f"Config: {config_path}")

        super().__init__("\n".join(parts))
