"""Shared Jinja2 environment for the HTML pages and the image export snapshot."""
from datetime import datetime

from fastapi.templating import Jinja2Templates

from nutriplan.domain.Slots import DAYS, MEAL_TYPES
from nutriplan.logic.grid.plan_grid import form_field_name
from nutriplan.logic.health.bmi import classify_imc
from nutriplan.utilities.config import TEMPLATES_DIR
from nutriplan.utilities.constants import DISPLAY_DATE_FORMAT

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _display_date(value) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT) if value else "-"


def _ts() -> int:
    """Cache-busting timestamp for static assets."""
    return int(datetime.now().timestamp())


templates.env.globals.update(
    days=DAYS,
    meal_types=MEAL_TYPES,
    field_name=form_field_name,
    classify_imc=classify_imc,
    asset_version=_ts,
)
templates.env.filters["display_date"] = _display_date


def render_grid_snapshot(plan, grid) -> str:
    """Standalone HTML of the plan grid, the document the image exporter rasterizes."""
    return templates.get_template("partials/grid_snapshot.html").render(plan=plan, grid=grid)
