import logging
from typing import Optional

from fastapi import APIRouter, Query

from nutriplan.api.responses import ApiError, customer_json, not_found, ok
from nutriplan.domain.Customer import Customer
from nutriplan.events.event_helpers import publish_customer_saved
from nutriplan.infra.Customer_Repository import CustomerRepository, DuplicateIdCardError
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.utilities.validators import CustomerInput, CustomerUpdate

router = APIRouter(prefix="/api/customers", tags=["customers"])
logger = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = "Cliente no encontrado"


def create_customer_record(payload: CustomerInput) -> Customer:
    """Persist a new customer; shared by the JSON API and the HTML form."""
    try:
        customer = CustomerRepository().create(Customer(**payload.model_dump()))
    except DuplicateIdCardError as e:
        raise ApiError(str(e)) from e
    publish_customer_saved(customer, action="created")
    return customer


def update_customer_record(customer_id: str, payload: CustomerUpdate) -> Customer:
    repo = CustomerRepository()
    customer = repo.get(customer_id)
    if customer is None:
        raise not_found(CUSTOMER_NOT_FOUND)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)
    try:
        customer = repo.update(customer)
    except DuplicateIdCardError as e:
        raise ApiError(str(e)) from e
    publish_customer_saved(customer)
    return customer


def delete_customer_record(customer_id: str):
    repo = CustomerRepository()
    if repo.get(customer_id) is None:
        raise not_found(CUSTOMER_NOT_FOUND)
    PlanRepository().delete_for_customer(customer_id)
    repo.delete(customer_id)


@router.get("")
def list_customers(search: Optional[str] = Query(default=None)):
    customers = CustomerRepository().list(search)
    plans = PlanRepository().list()
    by_customer = {}
    for p in plans:
        by_customer.setdefault(p.customer_id, []).append(p)
    return ok([customer_json(c, by_customer.get(c.id, [])) for c in customers])


@router.post("")
def create_customer(payload: CustomerInput):
    customer = create_customer_record(payload)
    return ok(customer_json(customer), status_code=201)


@router.get("/{customer_id}")
def get_customer(customer_id: str):
    customer = CustomerRepository().get(customer_id)
    if customer is None:
        raise not_found(CUSTOMER_NOT_FOUND)
    return ok(customer_json(customer, PlanRepository().list(customer_id), full_plans=True))


@router.put("/{customer_id}")
def update_customer(customer_id: str, payload: CustomerUpdate):
    customer = update_customer_record(customer_id, payload)
    return ok(customer_json(customer, PlanRepository().list(customer_id)))


@router.delete("/{customer_id}")
def delete_customer(customer_id: str):
    delete_customer_record(customer_id)
    logger.info("Customer %s and its plans deleted", customer_id)
    return ok({"id": customer_id})
