"""Download and share endpoints for a plan: spreadsheet, PDF, PNG and WhatsApp link.

Each export runs under the per-plan guard, settles its task exactly once and
publishes a single success or failure notification. Failures never touch the
stored plan.
"""
import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import APIRouter, Query, Response
from fastapi.responses import RedirectResponse

from nutriplan.api.responses import content_disposition, not_found, ok
from nutriplan.api.templating import render_grid_snapshot
from nutriplan.events.event_helpers import FAILURE_MESSAGES, publish_export_failed, publish_export_succeeded
from nutriplan.infra.Customer_Repository import CustomerRepository
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.infra.image_utils import PillowRasterizer
from nutriplan.infra.pdf_utils import render_pdf
from nutriplan.infra.sheet_utils import SHEET_MEDIA_TYPE, write_sheet_xlsx
from nutriplan.logic.export.document import build_document
from nutriplan.logic.export.errors import ExportError
from nutriplan.logic.export.image import export_image
from nutriplan.logic.export.share import ShareVariant, build_whatsapp_link
from nutriplan.logic.export.tabular import build_sheet
from nutriplan.logic.export.tasks import EXPORT_GUARD
from nutriplan.logic.grid.plan_grid import PlanGrid
from nutriplan.utilities.constants import DEFAULT_RENDER_TARGET

router = APIRouter(tags=["exports"])
logger = logging.getLogger(__name__)

PLAN_NOT_FOUND = "Plan nutricional no encontrado"


def _load(plan_id: str):
    plan = PlanRepository().get(plan_id)
    if plan is None:
        raise not_found(PLAN_NOT_FOUND)
    customer = CustomerRepository().get(plan.customer_id) if plan.customer_id else None
    return plan, customer


@contextmanager
def _export(kind: str, plan_id: str):
    """Guarded export run: settles the task and publishes exactly one notification."""
    with EXPORT_GUARD.running(kind, plan_id) as task:
        try:
            yield task
        except ExportError as e:
            task.settle(error=e)
            logger.warning("%s export of plan %s failed: %s", kind, plan_id, e)
            publish_export_failed(kind, plan_id, str(e))
            raise
        except Exception as e:
            task.settle(error=e)
            logger.exception("%s export of plan %s failed", kind, plan_id)
            publish_export_failed(kind, plan_id)
            raise ExportError(FAILURE_MESSAGES.get(kind, "Error al exportar"), kind=kind) from e
        if task.error is None:
            publish_export_succeeded(kind, plan_id, getattr(task.result, "filename", "") or "")


def _download(content: bytes, filename: str, media_type: str) -> Response:
    return Response(content=content, media_type=media_type,
                    headers={"Content-Disposition": content_disposition(filename)})


@router.get("/plans/{plan_id}/export/sheet")
def export_sheet(plan_id: str, uppercase: bool = Query(default=False)):
    plan, _ = _load(plan_id)
    with _export("sheet", plan_id) as task:
        sheet = build_sheet(plan, uppercase=uppercase)
        content = write_sheet_xlsx(sheet)
        task.settle(sheet)
    return _download(content, sheet.filename, SHEET_MEDIA_TYPE)


@router.get("/plans/{plan_id}/export/pdf")
def export_pdf(plan_id: str):
    plan, customer = _load(plan_id)
    with _export("pdf", plan_id) as task:
        document = build_document(plan, customer)
        content = render_pdf(document)
        task.settle(document)
    return _download(content, document.filename, "application/pdf")


@router.get("/plans/{plan_id}/export/image")
async def export_plan_image(plan_id: str, target: str = Query(default=DEFAULT_RENDER_TARGET)):
    plan, _ = _load(plan_id)
    with _export("image", plan_id) as task:
        html = render_grid_snapshot(plan, PlanGrid(plan.meal_entries))
        artifact = await export_image(html, plan, target_id=target, rasterizer=PillowRasterizer())
        task.settle(artifact)
    return _download(artifact.content, artifact.filename, artifact.media_type)


@router.get("/plans/{plan_id}/share/whatsapp")
def share_whatsapp(plan_id: str, variant: ShareVariant = Query(default=ShareVariant.LISTING),
                   redirect: Optional[int] = Query(default=None)):
    """wa.me link for the plan's customer.

    The attachment variant also returns `pdf_url`; the plan page downloads that
    PDF first and opens the link only after the download succeeded.
    """
    plan, customer = _load(plan_id)
    with _export("whatsapp", plan_id) as task:
        # phone first: the page only downloads the PDF once a link exists
        link = build_whatsapp_link(plan, customer, variant)
        task.settle(link)
    if redirect:
        return RedirectResponse(url=link.url, status_code=303)
    data = {"url": link.url, "phone": link.phone, "message": link.message, "variant": variant.value}
    if variant is ShareVariant.ATTACHMENT:
        data["pdf_url"] = f"/plans/{plan_id}/export/pdf"
    return ok(data)
