"""JSON file helpers shared by the repositories: tolerant reads and atomic writes."""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import RLock
from typing import Any

logger = logging.getLogger(__name__)

# One process-wide lock; the data files are small and writes are rare
STORE_LOCK = RLock()


class StorageError(Exception):
    """Raised when a data file cannot be written."""


def load_json(path: Path, default: Any):
    """Parsed content of `path`, or `default` when the file is missing or corrupt."""
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Corrupt data file %s; treating it as empty", path)
        return default
    return data if isinstance(data, type(default)) else default


def atomic_write(path: Path, data: Any):
    path = Path(path)
    try:
        os.makedirs(path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".json")
    except OSError as e:
        raise StorageError(f"Cannot write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(data, tmp, indent=2, ensure_ascii=False)
        shutil.move(tmp_path, path)
    except (OSError, TypeError, ValueError) as e:
        raise StorageError(f"Cannot write {path}: {e}") from e
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                logger.warning("Could not remove temp file %s", tmp_path)


__all__ = ["STORE_LOCK", "StorageError", "load_json", "atomic_write"]
