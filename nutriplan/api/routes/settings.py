from typing import Optional

from fastapi import APIRouter, Query

from nutriplan.api.responses import ok
from nutriplan.domain.AppSettings import THEME_PALETTES
from nutriplan.events.web_observers import get_events
from nutriplan.infra.Settings_Repository import SettingsRepository
from nutriplan.utilities.validators import SettingsInput

router = APIRouter(tags=["settings"])


def save_settings(payload: SettingsInput):
    repo = SettingsRepository()
    settings = repo.load()
    if payload.theme is not None:
        settings.theme = payload.theme
    if payload.completion_counts_blank is not None:
        settings.completion_counts_blank = payload.completion_counts_blank
    return repo.save(settings)


@router.get("/api/settings")
def get_settings():
    data = SettingsRepository().load().to_dict()
    data["palettes"] = [p._asdict() for p in THEME_PALETTES.values()]
    return ok(data)


@router.put("/api/settings")
def update_settings(payload: SettingsInput):
    return ok(save_settings(payload).to_dict())


@router.get("/api/notifications")
def notifications(since: Optional[int] = Query(default=None)):
    """Toast feed: events newer than `since`, plus the cursor for the next poll."""
    return get_events(since)
