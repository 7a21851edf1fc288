"""JSON envelope shared by the API routes: {"success": bool, "data" | "error", "code"}."""
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from nutriplan.domain.Customer import Customer
from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.logic.grid.completion import completion

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
DATABASE_ERROR = "DATABASE_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"
EXPORT_ERROR = "EXPORT_ERROR"
CONFLICT = "CONFLICT"


class ApiError(Exception):
    def __init__(self, message: str, code: str = VALIDATION_ERROR, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


def not_found(message: str) -> ApiError:
    return ApiError(message, NOT_FOUND, 404)


def ok(data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": True, "data": jsonable_encoder(data)})


def fail(message: str, code: str = INTERNAL_ERROR, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, "code": code})


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback plus the RFC 5987 UTF-8 name."""
    fallback = filename.encode("ascii", "ignore").decode("ascii") or "export"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def plan_json(plan: NutritionalPlan, customer: Optional[Customer] = None, count_blank: bool = True) -> Dict[str, Any]:
    data = plan.to_dict()
    metric = completion(plan.meal_entries, count_blank=count_blank)
    data["completion"] = {"count": metric.count, "total": metric.total, "percentage": metric.percentage}
    data["customer"] = customer.to_dict() if customer else None
    return data


def plan_summary(plan: NutritionalPlan) -> Dict[str, Any]:
    return {
        "id": plan.id,
        "name": plan.name,
        "status": plan.status.value,
        "created_at": plan.created_at,
        "meal_count": len(plan.meal_entries),
    }


def customer_json(customer: Customer, plans: Iterable[NutritionalPlan] = (), full_plans: bool = False) -> Dict[str, Any]:
    data = customer.to_dict()
    data["nutritional_plans"] = [p.to_dict() if full_plans else plan_summary(p) for p in plans]
    return data


def first_error_message(errors) -> str:
    """User-facing text of the first pydantic error, without pydantic's "Value error, " prefix."""
    if not errors:
        return "Datos inválidos"
    err = errors[0]
    msg = str(err.get("msg", "Datos inválidos"))
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    return f"{field}: {msg}" if field else msg
