"""User-changeable application settings (theme palette, completion counting)."""
from typing import Dict, NamedTuple, Optional

from nutriplan.utilities.config import COMPLETION_COUNTS_BLANK, DEFAULT_THEME


class ThemePalette(NamedTuple):
    key: str
    name: str
    primary: str
    accent: str
    background: str


THEME_PALETTES: Dict[str, ThemePalette] = {
    p.key: p for p in (
        ThemePalette("nature", "Naturaleza", "#16a34a", "#84cc16", "#f0fdf4"),
        ThemePalette("ocean", "Océano", "#0284c7", "#06b6d4", "#f0f9ff"),
        ThemePalette("sunset", "Atardecer", "#ea580c", "#f59e0b", "#fff7ed"),
        ThemePalette("forest", "Bosque", "#166534", "#65a30d", "#f7fee7"),
        ThemePalette("berry", "Frutos Rojos", "#be123c", "#db2777", "#fff1f2"),
        ThemePalette("earth", "Tierra", "#92400e", "#a16207", "#fefce8"),
        ThemePalette("mint", "Menta", "#0d9488", "#34d399", "#f0fdfa"),
        ThemePalette("citrus", "Cítricos", "#ca8a04", "#f97316", "#fefce8"),
    )
}

FALLBACK_THEME = "nature"


class AppSettings:
    def __init__(self, theme: Optional[str] = None, completion_counts_blank: Optional[bool] = None):
        theme = theme or DEFAULT_THEME
        self.theme = theme if theme in THEME_PALETTES else FALLBACK_THEME
        self.completion_counts_blank = COMPLETION_COUNTS_BLANK if completion_counts_blank is None \
            else bool(completion_counts_blank)

    @property
    def palette(self) -> ThemePalette:
        return THEME_PALETTES[self.theme]

    def __str__(self) -> str:
        return f"AppSettings(theme={self.theme}, completion_counts_blank={self.completion_counts_blank})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "AppSettings":
        d = data if isinstance(data, dict) else {}
        return AppSettings(theme=d.get("theme"), completion_counts_blank=d.get("completion_counts_blank"))

    def to_dict(self):
        return {
            "theme": self.theme,
            "completion_counts_blank": self.completion_counts_blank,
            "palette": self.palette._asdict(),
        }
