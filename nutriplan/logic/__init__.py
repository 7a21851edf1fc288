"""Core business logic layer.

Subpackages:
- grid: weekly slot resolution, grid view model, edit drafts and completion
- health: BMI (IMC) classification
- export: spreadsheet, PDF, image and WhatsApp exporters

Everything here is synchronous and free of I/O except the image exporter,
which awaits its rasterizer.
"""
__all__ = ["grid", "health", "export"]
