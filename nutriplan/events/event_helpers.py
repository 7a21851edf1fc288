"""Event helper utilities.

Publish helpers for the notifications shown as toasts on the pages.

Quick import:
    from nutriplan.events.event_helpers import (
        publish_export_succeeded, publish_export_failed, publish_plan_saved, publish_customer_saved
    )
"""
from __future__ import annotations
from .Event_Bus import (
    publish,
    EXPORT_SUCCEEDED, EXPORT_FAILED, PLAN_SAVED, CUSTOMER_SAVED,
)

__all__ = [
    'publish_export_succeeded', 'publish_export_failed', 'publish_plan_saved', 'publish_customer_saved',
    'SUCCESS_MESSAGES', 'FAILURE_MESSAGES'
]

SUCCESS_MESSAGES = {
    'sheet': 'Plan exportado exitosamente',
    'pdf': 'PDF exportado exitosamente',
    'image': 'Imagen exportada exitosamente',
    'whatsapp': 'Abriendo WhatsApp...',
}

FAILURE_MESSAGES = {
    'sheet': 'Error al exportar el plan',
    'pdf': 'Error al exportar el PDF',
    'image': 'Error al exportar la imagen. Intenta con Exportar PDF.',
    'whatsapp': 'Error al compartir por WhatsApp',
}


def publish_export_succeeded(kind: str, plan_id: str, filename: str = ''):
    publish(EXPORT_SUCCEEDED, {
        'kind': kind,
        'plan_id': plan_id,
        'filename': filename,
        'message': SUCCESS_MESSAGES.get(kind, 'Exportación completada'),
    })


def publish_export_failed(kind: str, plan_id: str, message: str | None = None):
    """Publish an export.failed event; message defaults to the generic text for the kind."""
    publish(EXPORT_FAILED, {
        'kind': kind,
        'plan_id': plan_id,
        'message': message or FAILURE_MESSAGES.get(kind, 'Error al exportar'),
    })


def publish_plan_saved(plan, action: str = 'updated'):
    publish(PLAN_SAVED, {'plan_id': plan.id, 'name': plan.name, 'action': action})


def publish_customer_saved(customer, action: str = 'updated'):
    publish(CUSTOMER_SAVED, {'customer_id': customer.id, 'name': customer.full_name, 'action': action})
