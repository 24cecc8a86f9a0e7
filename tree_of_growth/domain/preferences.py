"""User preference models."""

from tree_of_growth.domain.base import CamelModel


class AppSettings(CamelModel):
    """Display and notification preferences; not used by the progression engine."""

    is_dark_mode: bool = False
    notifications_enabled: bool = True
    selected_theme: str | None = None
    selected_background: str | None = None


class AppSettingsUpdate(CamelModel):
    """Partial settings update."""

    is_dark_mode: bool | None = None
    notifications_enabled: bool | None = None
    selected_theme: str | None = None
    selected_background: str | None = None
