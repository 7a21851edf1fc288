import logging
from typing import Optional

from fastapi import APIRouter, Body, Query

from nutriplan.api.responses import not_found, ok, plan_json
from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.events.event_helpers import publish_plan_saved
from nutriplan.infra.Customer_Repository import CustomerRepository
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.infra.Settings_Repository import SettingsRepository
from nutriplan.utilities.validators import PlanCopyInput, PlanInput, PlanUpdate

router = APIRouter(prefix="/api/plans", tags=["plans"])
logger = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = "Cliente no encontrado"
PLAN_NOT_FOUND = "Plan nutricional no encontrado"


def _require_customer(customer_id: str):
    customer = CustomerRepository().get(customer_id)
    if customer is None:
        raise not_found(CUSTOMER_NOT_FOUND)
    return customer


def create_plan_record(payload: PlanInput) -> NutritionalPlan:
    _require_customer(payload.customer_id)
    plan = NutritionalPlan(**payload.plan_attributes())
    plan.replace_entries(payload.entries())
    PlanRepository().save(plan)
    publish_plan_saved(plan, action="created")
    logger.info("Plan %s created with %d meals", plan.id, len(plan.meal_entries))
    return plan


def update_plan_record(plan_id: str, payload: PlanUpdate) -> NutritionalPlan:
    repo = PlanRepository()
    plan = repo.get(plan_id)
    if plan is None:
        raise not_found(PLAN_NOT_FOUND)
    for field, value in payload.plan_attributes().items():
        if field == "status" and value is None:
            continue
        setattr(plan, field, value)
    # meals, when present, replace the whole grid
    if payload.has_meals():
        plan.replace_entries(payload.entries())
    repo.save(plan)
    publish_plan_saved(plan)
    return plan


def copy_plan_record(plan_id: str, payload: Optional[PlanCopyInput] = None) -> NutritionalPlan:
    payload = payload or PlanCopyInput()
    if payload.customer_id:
        _require_customer(payload.customer_id)
    clone = PlanRepository().copy(plan_id, name=payload.name, customer_id=payload.customer_id)
    if clone is None:
        raise not_found(PLAN_NOT_FOUND)
    publish_plan_saved(clone, action="copied")
    return clone


def _plan_response(plan: NutritionalPlan, status_code: int = 200):
    customer = CustomerRepository().get(plan.customer_id) if plan.customer_id else None
    counts_blank = SettingsRepository().load().completion_counts_blank
    return ok(plan_json(plan, customer, counts_blank), status_code=status_code)


@router.get("")
def list_plans(customer_id: Optional[str] = Query(default=None)):
    customers = {c.id: c for c in CustomerRepository().list()}
    counts_blank = SettingsRepository().load().completion_counts_blank
    plans = PlanRepository().list(customer_id)
    return ok([plan_json(p, customers.get(p.customer_id), counts_blank) for p in plans])


@router.post("")
def create_plan(payload: PlanInput):
    return _plan_response(create_plan_record(payload), status_code=201)


@router.get("/{plan_id}")
def get_plan(plan_id: str):
    plan = PlanRepository().get(plan_id)
    if plan is None:
        raise not_found(PLAN_NOT_FOUND)
    return _plan_response(plan)


@router.put("/{plan_id}")
def update_plan(plan_id: str, payload: PlanUpdate):
    return _plan_response(update_plan_record(plan_id, payload))


@router.delete("/{plan_id}")
def delete_plan(plan_id: str):
    if not PlanRepository().delete(plan_id):
        raise not_found(PLAN_NOT_FOUND)
    return ok({"id": plan_id})


@router.post("/{plan_id}/copy")
def copy_plan(plan_id: str, payload: Optional[PlanCopyInput] = Body(default=None)):
    return _plan_response(copy_plan_record(plan_id, payload), status_code=201)
