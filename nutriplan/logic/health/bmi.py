"""BMI (IMC) classification into the WHO bands shown on customer pages."""
from enum import Enum
from typing import NamedTuple, Optional


class ImcBand(str, Enum):
    UNSET = "UNSET"
    LOW = "LOW"
    HEALTHY = "HEALTHY"
    ELEVATED = "ELEVATED"
    HIGH = "HIGH"
    SEVERE = "SEVERE"


class ImcClassification(NamedTuple):
    label: str
    band: ImcBand
    css_class: str


# (upper bound exclusive, label, band); the last band has no upper bound
_BANDS = (
    (18.5, "Bajo peso", ImcBand.LOW),
    (25.0, "Normal", ImcBand.HEALTHY),
    (30.0, "Sobrepeso", ImcBand.ELEVATED),
    (35.0, "Obesidad I", ImcBand.HIGH),
    (40.0, "Obesidad II", ImcBand.SEVERE),
    (None, "Obesidad III", ImcBand.SEVERE),
)

_CSS = {
    ImcBand.UNSET: "imc-unset",
    ImcBand.LOW: "imc-low",
    ImcBand.HEALTHY: "imc-healthy",
    ImcBand.ELEVATED: "imc-elevated",
    ImcBand.HIGH: "imc-high",
    ImcBand.SEVERE: "imc-severe",
}


def classify_imc(imc: Optional[float]) -> ImcClassification:
    if imc is None or imc <= 0:
        return ImcClassification("No calculado", ImcBand.UNSET, _CSS[ImcBand.UNSET])
    for upper, label, band in _BANDS:
        if upper is None or imc < upper:
            return ImcClassification(label, band, _CSS[band])


__all__ = ["ImcBand", "ImcClassification", "classify_imc"]
