from pathlib import Path

from nutriplan.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIGURED_DATA_DIR).resolve()
CUSTOMERS_FILE = DATA_DIR / 'customers.json'
PLANS_FILE = DATA_DIR / 'plans.json'
SETTINGS_FILE = DATA_DIR / 'settings.json'

__all__ = ['DATA_DIR', 'CUSTOMERS_FILE', 'PLANS_FILE', 'SETTINGS_FILE']
