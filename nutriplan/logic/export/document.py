"""PDF document export, expressed as an ordered list of layout blocks.

The blocks are renderer-agnostic; infra.pdf_utils turns them into a reportlab
story. Keeping the layout here lets tests assert on content without parsing PDF.
"""
from datetime import date, datetime
from typing import List, NamedTuple, Optional, Sequence, Union

from nutriplan.domain.Customer import ACTIVITY_LABELS, GENDER_LABELS, GOAL_LABELS, Customer
from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.logic.export.grid_walk import meal_header, walk_grid
from nutriplan.logic.health.bmi import classify_imc
from nutriplan.utilities.constants import (
    DISPLAY_DATE_FORMAT, EMPTY_SLOT_PLACEHOLDER, MEALS_PER_DAY, PDF_DAY_COLUMN_WIDTH_MM,
    PDF_MEAL_COLUMN_WIDTH_MM
)
from nutriplan.utilities.formatting import export_filename, underscore_spaces

_MONTHS = ("enero", "febrero", "marzo", "abril", "mayo", "junio", "julio", "agosto",
           "septiembre", "octubre", "noviembre", "diciembre")


class TextBlock(NamedTuple):
    text: str
    style: str = "body"   # title | subtitle | muted | heading | subheading | body | small | footer
    align: str = "left"


class TableBlock(NamedTuple):
    rows: List[List[str]]
    head: Optional[List[str]] = None
    col_widths_mm: Optional[List[float]] = None
    style: str = "grid"   # grid | keyvalue
    name: str = ""


class SpacerBlock(NamedTuple):
    height: float = 6


Block = Union[TextBlock, TableBlock, SpacerBlock]


class PlanDocument(NamedTuple):
    blocks: List[Block]
    filename: str
    title: str

    def texts(self) -> List[str]:
        return [b.text for b in self.blocks if isinstance(b, TextBlock)]

    def table(self, name: str) -> Optional[TableBlock]:
        for b in self.blocks:
            if isinstance(b, TableBlock) and b.name == name:
                return b
        return None


def format_generated_at(moment: datetime) -> str:
    """`19 de octubre de 2026, 14:05`, the long Spanish date used in the footer."""
    return f"{moment.day} de {_MONTHS[moment.month - 1]} de {moment.year}, {moment:%H:%M}"


def _or_dash(value, suffix: str = "") -> str:
    return f"{value}{suffix}" if value else EMPTY_SLOT_PLACEHOLDER


def _label(labels, value) -> str:
    return labels.get(value, EMPTY_SLOT_PLACEHOLDER) if value else EMPTY_SLOT_PLACEHOLDER


def _display_date(d: date) -> str:
    return d.strftime(DISPLAY_DATE_FORMAT)


def _customer_blocks(customer: Customer) -> List[Block]:
    personal = [
        ["Nombre completo", f"{customer.first_name} {customer.last_name}"],
        ["Cédula", customer.id_card or EMPTY_SLOT_PLACEHOLDER],
        ["Email", _or_dash(customer.email)],
        ["Teléfono", _or_dash(customer.cell_phone)],
        ["Género", _label(GENDER_LABELS, customer.gender)],
        ["Edad", _or_dash(customer.age, " años")],
    ]
    imc = EMPTY_SLOT_PLACEHOLDER
    if customer.imc:
        imc = f"{customer.imc} ({classify_imc(customer.imc).label})"
    physical = [
        ["Peso", _or_dash(customer.weight, " kg")],
        ["Altura", _or_dash(customer.height, " m")],
        ["IMC", imc],
        ["% Grasa corporal", _or_dash(customer.body_fat_percentage, "%")],
        ["Nivel de actividad", _label(ACTIVITY_LABELS, customer.activity_level)],
        ["Objetivo", _label(GOAL_LABELS, customer.goal)],
    ]
    blocks: List[Block] = [
        SpacerBlock(5),
        TextBlock("Información del Cliente", "heading"),
        TableBlock(personal, head=["Datos Personales", ""], col_widths_mm=[40, 55], style="keyvalue",
                   name="personal"),
        TableBlock(physical, head=["Datos Físicos", ""], col_widths_mm=[40, 55], style="keyvalue",
                   name="physical"),
    ]
    medical = []
    if customer.allergies:
        medical.append(["Alergias", customer.allergies])
    if customer.dietary_restrictions:
        medical.append(["Restricciones dietéticas", customer.dietary_restrictions])
    if customer.medical_conditions:
        medical.append(["Condiciones médicas", customer.medical_conditions])
    if customer.medications:
        medical.append(["Medicamentos", customer.medications])
    if medical:
        blocks.append(TextBlock("Información Médica", "subheading"))
        blocks.append(TableBlock(medical, col_widths_mm=[50, None], style="keyvalue", name="medical"))
    return blocks


def _targets_line(plan: NutritionalPlan) -> Optional[str]:
    if not plan.has_targets():
        return None
    parts = []
    if plan.daily_calories:
        parts.append(f"Calorías: {plan.daily_calories} kcal")
    if plan.protein_grams:
        parts.append(f"Proteínas: {plan.protein_grams}g")
    if plan.carbs_grams:
        parts.append(f"Carbohidratos: {plan.carbs_grams}g")
    if plan.fat_grams:
        parts.append(f"Grasas: {plan.fat_grams}g")
    if plan.fiber_grams:
        parts.append(f"Fibra: {plan.fiber_grams}g")
    if plan.water_liters:
        parts.append(f"Agua: {plan.water_liters}L")
    return "Objetivos: " + "  |  ".join(parts)


def grid_rows(plan: NutritionalPlan) -> List[List[str]]:
    return [[d.day.label, *d.cells] for d in walk_grid(plan.meal_entries, placeholder=EMPTY_SLOT_PLACEHOLDER)]


def pdf_filename(plan: NutritionalPlan, customer: Optional[Customer] = None, on: Optional[date] = None) -> str:
    suffix = underscore_spaces(f"_{customer.first_name}_{customer.last_name}") if customer else ""
    return export_filename(plan.name, "pdf", on=on, prefix="Plan_", suffix=suffix)


def build_document(plan: NutritionalPlan, customer: Optional[Customer] = None,
                   generated_at: Optional[datetime] = None) -> PlanDocument:
    generated_at = generated_at or datetime.now()
    blocks: List[Block] = [
        TextBlock("Plan Nutricional", "title", "center"),
        TextBlock(plan.name, "subtitle", "center"),
    ]
    if plan.description:
        blocks.append(TextBlock(plan.description, "muted", "center"))

    if customer is not None:
        blocks.extend(_customer_blocks(customer))

    status = [f"Estado: {plan.status.label}"]
    if plan.start_date:
        status.append(f"Inicio: {_display_date(plan.start_date)}")
    if plan.end_date:
        status.append(f"Fin: {_display_date(plan.end_date)}")
    blocks.append(SpacerBlock(3))
    blocks.append(TextBlock("  |  ".join(status), "muted"))

    targets = _targets_line(plan)
    if targets:
        blocks.append(TextBlock(targets, "small"))

    blocks.append(SpacerBlock(6))
    blocks.append(TextBlock("Plan Semanal", "heading"))
    blocks.append(TableBlock(
        grid_rows(plan),
        head=meal_header(),
        col_widths_mm=[PDF_DAY_COLUMN_WIDTH_MM] + [PDF_MEAL_COLUMN_WIDTH_MM] * MEALS_PER_DAY,
        name="grid",
    ))

    if plan.notes:
        blocks.append(SpacerBlock(8))
        blocks.append(TextBlock("Notas del Plan:", "subheading"))
        blocks.append(TextBlock(plan.notes, "body"))

    blocks.append(SpacerBlock(10))
    blocks.append(TextBlock(f"Generado el {format_generated_at(generated_at)}", "footer", "center"))

    return PlanDocument(blocks, pdf_filename(plan, customer, on=generated_at.date()), plan.name)


__all__ = ["TextBlock", "TableBlock", "SpacerBlock", "PlanDocument", "build_document", "pdf_filename",
           "format_generated_at", "grid_rows"]
