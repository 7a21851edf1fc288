from typing import Final

# Filenames carry the export date as YYYY-MM-DD
FILENAME_DATE_FORMAT: Final[str] = "%Y-%m-%d"
DISPLAY_DATE_FORMAT: Final[str] = "%d/%m/%Y"

DAYS_PER_WEEK: Final[int] = 7
MEALS_PER_DAY: Final[int] = 5
TOTAL_MEAL_SLOTS: Final[int] = DAYS_PER_WEEK * MEALS_PER_DAY

EMPTY_SLOT_PLACEHOLDER: Final[str] = "-"

# Tabular export metadata (character widths)
SHEET_NAME: Final[str] = "Plan Nutricional"
SHEET_DAY_COLUMN_WIDTH: Final[int] = 12
SHEET_MEAL_COLUMN_WIDTH: Final[int] = 25

# Document export metadata (millimetres)
PDF_DAY_COLUMN_WIDTH_MM: Final[int] = 25
PDF_MEAL_COLUMN_WIDTH_MM: Final[int] = 48
PDF_PRIMARY_COLOR: Final[str] = "#16A34A"
PDF_TEXT_COLOR: Final[str] = "#1F2937"

# Image export
DEFAULT_RENDER_TARGET: Final[str] = "plan-grid-container"
IMAGE_BACKGROUND: Final[str] = "#ffffff"
IMAGE_SCALE: Final[int] = 2

WHATSAPP_BASE_URL: Final[str] = "https://wa.me"
SHARE_FALLBACK_NAME: Final[str] = "estimado/a cliente"

CUSTOMER_SEARCH_MIN_LENGTH: Final[int] = 2
COPY_SUFFIX: Final[str] = " (Copia)"
