"""Settings resolution utilities for paginated models."""

from __future__ import annotations

from dataclasses import dataclass

from pagewise.utils.exceptions import OrderingError
from pagewise.utils.types import CURSOR_VERSION, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


@dataclass(frozen=True)
class PaginationSettings:
    """Per-endpoint pagination configuration."""

    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE
    cursor_version: int = CURSOR_VERSION
    cursor_secret: str | bytes | None = None

    def __post_init__(self) -> None:
        if self.max_page_size < 1:
            raise ValueError("max_page_size must be >= 1")
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError("default_page_size must be between 1 and max_page_size")


class SettingsResolver:
    """Resolves pagination settings from a model's inner Settings class.

    Example:
        class Article(BaseModel):
            id: int
            published_at: datetime

            class Settings:
                ordering = "-published_at"
                tie_breaker = "id"
                max_page_size = 50
    """

    @staticmethod
    def get_ordering(cls: type) -> str:
        """Get the primary ordering field (``"-field"`` for descending).

        Args:
            cls: Model class

        Returns:
            Ordering spec string

        Raises:
            OrderingError: If the model declares no ordering
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "ordering"):
            return settings.ordering
        raise OrderingError(
            f"{cls.__name__}.Settings must declare 'ordering' to be paginated"
        )

    @staticmethod
    def get_tie_breaker(cls: type) -> str:
        """Get the tie-breaker field from Settings or default to ``id``.

        Args:
            cls: Model class

        Returns:
            Tie-breaker field name
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "tie_breaker"):
            return settings.tie_breaker
        return "id"

    @staticmethod
    def get_pagination_settings(cls: type) -> PaginationSettings:
        """Build PaginationSettings from Settings, falling back to defaults.

        Args:
            cls: Model class

        Returns:
            PaginationSettings instance
        """
        settings = getattr(cls, "Settings", None)
        overrides = {}
        for name in ("default_page_size", "max_page_size", "cursor_version", "cursor_secret"):
            if settings and hasattr(settings, name):
                overrides[name] = getattr(settings, name)
        # A lowered max_page_size also caps the default page size
        if "max_page_size" in overrides and "default_page_size" not in overrides:
            overrides["default_page_size"] = min(DEFAULT_PAGE_SIZE, overrides["max_page_size"])
        return PaginationSettings(**overrides)
