"""Configuration management for the NutriPlan application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = _flag('DEBUG', 'False')
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# Sharing
PHONE_COUNTRY_CODE: Final[str] = os.getenv('PHONE_COUNTRY_CODE', '593')

# Completion badge: count raw entries (True) or only slots with a description (False)
COMPLETION_COUNTS_BLANK: Final[bool] = _flag('COMPLETION_COUNTS_BLANK', 'True')

# Theme palette used until the user picks one on /config
DEFAULT_THEME: Final[str] = os.getenv('DEFAULT_THEME', 'nature')

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('NUTRIPLAN_DATA_DIR', str(BASE_DIR / 'data')))
STATIC_DIR: Final[Path] = BASE_DIR / 'static'
TEMPLATES_DIR: Final[Path] = BASE_DIR / 'templates'
