from pathlib import Path
from typing import Optional

from nutriplan.domain.AppSettings import AppSettings
from nutriplan.infra import paths
from nutriplan.infra.json_store import STORE_LOCK, atomic_write, load_json


class SettingsRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else paths.SETTINGS_FILE

    def load(self) -> AppSettings:
        with STORE_LOCK:
            return AppSettings.from_dict(load_json(self.path, {}))

    def save(self, settings: AppSettings) -> AppSettings:
        data = settings.to_dict()
        data.pop("palette", None)
        with STORE_LOCK:
            atomic_write(self.path, data)
        return settings
