"""Exceptions raised by the exporters. The HTTP layer maps each one to a status code."""


class ExportError(Exception):
    """Base class for every export/share failure."""
    kind = "export"

    def __init__(self, message: str, kind: str = None):
        super().__init__(message)
        if kind:
            self.kind = kind


class RenderTargetNotFoundError(ExportError):
    def __init__(self, target_id: str):
        super().__init__(f"Render target #{target_id} not found", kind="image")
        self.target_id = target_id


class RasterizationError(ExportError):
    def __init__(self, message: str = "Error al generar la imagen"):
        super().__init__(message, kind="image")


class DocumentGenerationError(ExportError):
    def __init__(self, message: str = "Error al generar el PDF"):
        super().__init__(message, kind="pdf")


class SheetGenerationError(ExportError):
    def __init__(self, message: str = "Error al exportar a Excel"):
        super().__init__(message, kind="sheet")


class MissingPhoneError(ExportError):
    def __init__(self, message: str = "El cliente no tiene número de teléfono registrado"):
        super().__init__(message, kind="whatsapp")


class ExportInProgressError(ExportError):
    def __init__(self, kind: str, plan_id: str):
        super().__init__(f"A {kind} export for plan {plan_id} is already running", kind=kind)
        self.plan_id = plan_id


__all__ = ["ExportError", "RenderTargetNotFoundError", "RasterizationError", "DocumentGenerationError",
           "SheetGenerationError", "MissingPhoneError", "ExportInProgressError"]
