from fastapi import FastAPI, Request, Query, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from typing import Optional
import logging

from nutriplan.api.responses import (
    ApiError, fail, first_error_message,
    CONFLICT, DATABASE_ERROR, EXPORT_ERROR, NOT_FOUND, VALIDATION_ERROR
)
from nutriplan.api.templating import templates
from nutriplan.api.routes import customers, plans, exports, settings as settings_routes
from nutriplan.domain.AppSettings import THEME_PALETTES
from nutriplan.domain.Customer import ACTIVITY_LABELS, GENDER_LABELS, GOAL_LABELS, ActivityLevel, Gender, Goal
from nutriplan.domain.NutritionalPlan import PlanStatus
from nutriplan.events.web_observers import start as start_event_observers
from nutriplan.infra.Customer_Repository import CustomerRepository
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.infra.Settings_Repository import SettingsRepository
from nutriplan.infra.json_store import StorageError
from nutriplan.logic.export.errors import (
    ExportError, ExportInProgressError, MissingPhoneError, RenderTargetNotFoundError
)
from nutriplan.logic.export.share import share_available
from nutriplan.logic.export.tasks import EXPORT_GUARD
from nutriplan.logic.grid.completion import completion
from nutriplan.logic.grid.plan_grid import MealDraft, PlanGrid
from nutriplan.utilities.config import STATIC_DIR
from nutriplan.utilities.validators import (
    CustomerInput, CustomerUpdate, PlanCopyInput, PlanInput, PlanUpdate, SettingsInput
)

# Logging
logger = logging.getLogger("nutriplan_app")

EXPORT_KINDS = ("sheet", "pdf", "image", "whatsapp")

# Initialize FastAPI app
app = FastAPI(title="NutriPlan")

# Include routers
app.include_router(customers.router)
app.include_router(plans.router)
app.include_router(exports.router)
app.include_router(settings_routes.router)

# Static files
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for page notifications when the app starts."""
    start_event_observers()
    logger.info("Web observers for notifications started")


# -------------------- Error handlers --------------------
@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    return fail(first_error_message(exc.errors()), VALIDATION_ERROR, 400)


@app.exception_handler(ApiError)
async def _api_error(request: Request, exc: ApiError):
    return fail(exc.message, exc.code, exc.status_code)


@app.exception_handler(ExportError)
async def _export_error(request: Request, exc: ExportError):
    if isinstance(exc, ExportInProgressError):
        return fail(str(exc), CONFLICT, 409)
    if isinstance(exc, RenderTargetNotFoundError):
        return fail("No se encontró el elemento para exportar", NOT_FOUND, 404)
    if isinstance(exc, MissingPhoneError):
        return fail(str(exc), VALIDATION_ERROR, 400)
    return fail(str(exc), EXPORT_ERROR, 500)


@app.exception_handler(StorageError)
async def _storage_error(request: Request, exc: StorageError):
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    return fail("Error al guardar los datos", DATABASE_ERROR, 500)


# -------------------- Helpers --------------------
def _page(request: Request, name: str, context: dict, status_code: int = 200):
    app_settings = SettingsRepository().load()
    ctx = {"settings": app_settings, "palette": app_settings.palette}
    ctx.update(context)
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)


def _form_dict(form) -> dict:
    return {k: v for k, v in form.items() if isinstance(v, str)}


def _customer_choices():
    return CustomerRepository().list()


def _plan_form_context(plan=None, draft=None, error=None, values=None, customer_id=None):
    draft = draft or (MealDraft.from_entries(plan.meal_entries) if plan else MealDraft())
    return {
        "plan": plan,
        "values": values or (plan.to_dict() if plan else {"customer_id": customer_id}),
        "grid": PlanGrid.for_draft(draft),
        "customers": _customer_choices(),
        "statuses": list(PlanStatus),
        "error": error,
    }


def _customer_form_context(customer=None, error=None, values=None):
    return {
        "customer": customer,
        "values": values or (customer.to_dict() if customer else {}),
        "genders": [(g.value, GENDER_LABELS[g]) for g in Gender],
        "activity_levels": [(a.value, ACTIVITY_LABELS[a]) for a in ActivityLevel],
        "goals": [(g.value, GOAL_LABELS[g]) for g in Goal],
        "error": error,
    }


_NOTICES = {
    "created": "Guardado exitosamente",
    "updated": "Cambios guardados",
    "deleted": "Eliminado exitosamente",
    "copied": "Plan copiado exitosamente",
    "settings": "Configuración guardada",
}


# -------------------- UI PAGES: plans --------------------
@app.get("/", response_class=HTMLResponse)
@app.get("/plans", response_class=HTMLResponse)
def plans_page(request: Request, customer_id: Optional[str] = Query(default=None),
               notice: Optional[str] = Query(default=None)):
    counts_blank = SettingsRepository().load().completion_counts_blank
    customers_by_id = {c.id: c for c in CustomerRepository().list()}
    rows = []
    for plan in PlanRepository().list(customer_id):
        rows.append({
            "plan": plan,
            "customer": customers_by_id.get(plan.customer_id),
            "completion": completion(plan.meal_entries, count_blank=counts_blank),
        })
    return _page(request, "plans.html", {
        "rows": rows,
        "customer_filter": customers_by_id.get(customer_id) if customer_id else None,
        "notice_message": _NOTICES.get(notice),
    })


@app.get("/plans/new", response_class=HTMLResponse)
def new_plan_page(request: Request, customer_id: Optional[str] = Query(default=None)):
    return _page(request, "plan_form.html", _plan_form_context(customer_id=customer_id))


@app.post("/plans/new")
async def create_plan_form(request: Request):
    fields = _form_dict(await request.form())
    draft = MealDraft.from_form(fields)
    try:
        payload = PlanInput(**fields, meals=draft.to_payload())
        plan = plans.create_plan_record(payload)
    except ValidationError as e:
        ctx = _plan_form_context(draft=draft, error=first_error_message(e.errors()), values=fields)
        return _page(request, "plan_form.html", ctx, status_code=400)
    except ApiError as e:
        ctx = _plan_form_context(draft=draft, error=e.message, values=fields)
        return _page(request, "plan_form.html", ctx, status_code=e.status_code)
    return RedirectResponse(url=f"/plans/{plan.id}?notice=created", status_code=303)


@app.get("/plans/{plan_id}", response_class=HTMLResponse)
def plan_detail_page(request: Request, plan_id: str, notice: Optional[str] = Query(default=None)):
    plan = PlanRepository().get(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Plan not found")
    customer = CustomerRepository().get(plan.customer_id) if plan.customer_id else None
    counts_blank = SettingsRepository().load().completion_counts_blank
    return _page(request, "plan_detail.html", {
        "plan": plan,
        "customer": customer,
        "grid": PlanGrid(plan.meal_entries),
        "completion": completion(plan.meal_entries, count_blank=counts_blank),
        "can_share": share_available(customer),
        "running": {k: EXPORT_GUARD.is_running(k, plan.id) for k in EXPORT_KINDS},
        "customers": _customer_choices(),
        "notice_message": _NOTICES.get(notice),
    })


@app.get("/plans/{plan_id}/edit", response_class=HTMLResponse)
def edit_plan_page(request: Request, plan_id: str):
    plan = PlanRepository().get(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Plan not found")
    return _page(request, "plan_form.html", _plan_form_context(plan=plan))


@app.post("/plans/{plan_id}/edit")
async def update_plan_form(request: Request, plan_id: str):
    plan = PlanRepository().get(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Plan not found")
    fields = _form_dict(await request.form())
    fields.pop("customer_id", None)
    draft = MealDraft.from_form(fields)
    try:
        payload = PlanUpdate(**fields, meals=draft.to_payload())
        plans.update_plan_record(plan_id, payload)
    except ValidationError as e:
        ctx = _plan_form_context(plan=plan, draft=draft, error=first_error_message(e.errors()), values=fields)
        return _page(request, "plan_form.html", ctx, status_code=400)
    return RedirectResponse(url=f"/plans/{plan_id}?notice=updated", status_code=303)


@app.post("/plans/{plan_id}/delete")
def delete_plan_form(plan_id: str):
    if not PlanRepository().delete(plan_id):
        raise HTTPException(status_code=404, detail="Plan not found")
    return RedirectResponse(url="/?notice=deleted", status_code=303)


@app.post("/plans/{plan_id}/copy")
async def copy_plan_form(request: Request, plan_id: str):
    fields = _form_dict(await request.form())
    try:
        clone = plans.copy_plan_record(plan_id, PlanCopyInput(**fields))
    except ApiError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RedirectResponse(url=f"/plans/{clone.id}?notice=copied", status_code=303)


# -------------------- UI PAGES: customers --------------------
@app.get("/customers", response_class=HTMLResponse)
def customers_page(request: Request, search: Optional[str] = Query(default=None),
                   notice: Optional[str] = Query(default=None)):
    plan_counts = {}
    for plan in PlanRepository().list():
        plan_counts[plan.customer_id] = plan_counts.get(plan.customer_id, 0) + 1
    return _page(request, "customers.html", {
        "customers": CustomerRepository().list(search),
        "plan_counts": plan_counts,
        "search": search or "",
        "notice_message": _NOTICES.get(notice),
    })


@app.get("/customers/new", response_class=HTMLResponse)
def new_customer_page(request: Request):
    return _page(request, "customer_form.html", _customer_form_context())


@app.post("/customers/new")
async def create_customer_form(request: Request):
    fields = _form_dict(await request.form())
    try:
        customer = customers.create_customer_record(CustomerInput(**fields))
    except ValidationError as e:
        ctx = _customer_form_context(error=first_error_message(e.errors()), values=fields)
        return _page(request, "customer_form.html", ctx, status_code=400)
    except ApiError as e:
        ctx = _customer_form_context(error=e.message, values=fields)
        return _page(request, "customer_form.html", ctx, status_code=e.status_code)
    return RedirectResponse(url=f"/customers/{customer.id}?notice=created", status_code=303)


@app.get("/customers/{customer_id}", response_class=HTMLResponse)
def customer_detail_page(request: Request, customer_id: str, notice: Optional[str] = Query(default=None)):
    customer = CustomerRepository().get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    counts_blank = SettingsRepository().load().completion_counts_blank
    customer_plans = [(p, completion(p.meal_entries, count_blank=counts_blank))
                      for p in PlanRepository().list(customer_id)]
    return _page(request, "customer_detail.html", {
        "customer": customer,
        "plans": customer_plans,
        "notice_message": _NOTICES.get(notice),
    })


@app.get("/customers/{customer_id}/edit", response_class=HTMLResponse)
def edit_customer_page(request: Request, customer_id: str):
    customer = CustomerRepository().get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return _page(request, "customer_form.html", _customer_form_context(customer=customer))


@app.post("/customers/{customer_id}/edit")
async def update_customer_form(request: Request, customer_id: str):
    customer = CustomerRepository().get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    fields = _form_dict(await request.form())
    try:
        customers.update_customer_record(customer_id, CustomerUpdate(**fields))
    except ValidationError as e:
        ctx = _customer_form_context(customer=customer, error=first_error_message(e.errors()), values=fields)
        return _page(request, "customer_form.html", ctx, status_code=400)
    except ApiError as e:
        ctx = _customer_form_context(customer=customer, error=e.message, values=fields)
        return _page(request, "customer_form.html", ctx, status_code=e.status_code)
    return RedirectResponse(url=f"/customers/{customer_id}?notice=updated", status_code=303)


@app.post("/customers/{customer_id}/delete")
def delete_customer_form(customer_id: str):
    try:
        customers.delete_customer_record(customer_id)
    except ApiError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RedirectResponse(url="/customers?notice=deleted", status_code=303)


# -------------------- UI PAGES: configuration --------------------
@app.get("/config", response_class=HTMLResponse)
def config_page(request: Request, notice: Optional[str] = Query(default=None)):
    return _page(request, "config.html", {
        "palettes": list(THEME_PALETTES.values()),
        "notice_message": _NOTICES.get(notice),
    })


@app.post("/config")
async def update_config(request: Request):
    fields = _form_dict(await request.form())
    try:
        payload = SettingsInput(theme=fields.get("theme") or None,
                                completion_counts_blank=fields.get("completion_counts_blank") == "on")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=first_error_message(e.errors()))
    settings_routes.save_settings(payload)
    return RedirectResponse(url="/config?notice=settings", status_code=303)
