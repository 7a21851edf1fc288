"""WhatsApp sharing: message text for a plan and the wa.me deep link that carries it."""
from enum import Enum
from typing import List, NamedTuple, Optional
from urllib.parse import quote

from nutriplan.domain.Customer import Customer
from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.logic.export.errors import MissingPhoneError
from nutriplan.logic.export.grid_walk import walk_grid
from nutriplan.utilities.constants import SHARE_FALLBACK_NAME, WHATSAPP_BASE_URL
from nutriplan.utilities.formatting import normalize_phone

# characters encodeURIComponent leaves alone besides alphanumerics and -_.
_URI_COMPONENT_SAFE = "!~*'()"


class ShareVariant(str, Enum):
    LISTING = "listing"        # full day-by-day meals in the message body
    ATTACHMENT = "attachment"  # cordial note pointing at the downloaded PDF


class ShareLink(NamedTuple):
    phone: str
    message: str
    url: str


def share_available(customer: Optional[Customer]) -> bool:
    return bool(customer and customer.cell_phone)


def _greeting_name(customer: Optional[Customer]) -> str:
    if customer and customer.first_name:
        return customer.first_name
    return SHARE_FALLBACK_NAME


def _listing_lines(plan: NutritionalPlan) -> List[str]:
    lines = []
    for day_cells in walk_grid(plan.meal_entries):
        filled = day_cells.filled()
        if not filled:
            continue
        lines.append(f"*{day_cells.day.label.upper()}*")
        for meal_type, text in filled:
            lines.append(f"• {meal_type.label}: {text}")
        lines.append("")
    return lines


def _listing_message(plan: NutritionalPlan, customer: Optional[Customer]) -> List[str]:
    lines = [f"¡Hola {_greeting_name(customer)}! 👋", "", f"Te comparto tu plan nutricional *\"{plan.name}\"*:", ""]
    if plan.description:
        lines += [f"📝 {plan.description}", ""]
    lines += _listing_lines(plan)
    lines.append("¡Mucho éxito con tu alimentación! 🥗🌿")
    return lines


def _attachment_message(plan: NutritionalPlan, customer: Optional[Customer]) -> List[str]:
    lines = [
        f"¡Hola {_greeting_name(customer)}! 👋",
        "",
        "Espero que te encuentres muy bien. 🌟",
        "",
        f"Te envío tu plan nutricional *\"{plan.name}\"* en formato PDF para que puedas consultarlo fácilmente.",
        "",
        "📎 *El archivo PDF ha sido descargado en tu dispositivo.* "
        "Por favor, adjúntalo a esta conversación para compartirlo.",
        "",
    ]
    if plan.description:
        lines += [f"📝 {plan.description}", ""]
    lines += [
        "Si tienes alguna duda o necesitas ajustes en el plan, no dudes en escribirme. "
        "Estoy aquí para ayudarte a alcanzar tus objetivos. 💪",
        "",
        "¡Mucho éxito con tu alimentación! 🥗🌿",
        "",
        "_— Tu nutricionista de confianza_",
    ]
    return lines


def build_share_message(plan: NutritionalPlan, customer: Optional[Customer] = None,
                        variant: ShareVariant = ShareVariant.LISTING) -> str:
    if ShareVariant(variant) is ShareVariant.ATTACHMENT:
        return "\n".join(_attachment_message(plan, customer))
    return "\n".join(_listing_message(plan, customer)).rstrip("\n")


def whatsapp_url(phone: str, message: str) -> str:
    return f"{WHATSAPP_BASE_URL}/{phone}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def build_whatsapp_link(plan: NutritionalPlan, customer: Optional[Customer],
                        variant: ShareVariant = ShareVariant.LISTING) -> ShareLink:
    """Raises MissingPhoneError when the customer has no usable phone number."""
    phone = normalize_phone(customer.cell_phone if customer else None)
    if not phone:
        raise MissingPhoneError()
    message = build_share_message(plan, customer, variant)
    return ShareLink(phone, message, whatsapp_url(phone, message))


__all__ = ["ShareVariant", "ShareLink", "share_available", "build_share_message", "build_whatsapp_link",
           "whatsapp_url"]
