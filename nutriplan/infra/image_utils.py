"""PNG rasterizer for the rendered plan grid (Pillow).

Draws the captured grid subtree as a table: optional heading lines above,
header row filled with the primary colour, wrapped cell text, alternating rows.
"""
import io
import logging
from typing import List

from PIL import Image, ImageDraw, ImageFont

from nutriplan.logic.export.errors import RasterizationError
from nutriplan.logic.export.image import RasterOptions, RenderNode
from nutriplan.utilities.constants import PDF_PRIMARY_COLOR, PDF_TEXT_COLOR

logger = logging.getLogger(__name__)

FONT_SIZE = 12
DAY_COLUMN_WIDTH = 110
MEAL_COLUMN_WIDTH = 190
PADDING = 8
LINE_SPACING = 4
GRID_COLOR = "#d1d5db"
ALT_ROW_COLOR = "#f5f5f5"
_HEADING_TAGS = ("h1", "h2", "h3", "h4", "caption")


def _rows(node: RenderNode) -> List[List[str]]:
    rows = []
    for tr in node.iter("tr"):
        cells = [c.text() for c in tr.children if isinstance(c, RenderNode) and c.tag in ("th", "td")]
        if cells:
            rows.append(cells)
    return rows


def _headings(node: RenderNode) -> List[str]:
    return [h.text() for h in node.iter(*_HEADING_TAGS) if h.text()]


def _wrap(draw: ImageDraw.ImageDraw, text: str, font, width: int) -> List[str]:
    lines, current = [], ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if current and draw.textlength(candidate, font=font) > width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines or [""]


class PillowRasterizer:
    def __init__(self, font_size: int = FONT_SIZE):
        self.font_size = font_size

    def rasterize(self, node: RenderNode, options: RasterOptions) -> bytes:
        scale = max(1, int(options.scale))
        font = ImageFont.load_default(size=self.font_size * scale)
        bold = ImageFont.load_default(size=(self.font_size + 2) * scale)
        pad = PADDING * scale
        line_h = (self.font_size + LINE_SPACING) * scale

        rows = _rows(node)
        headings = _headings(node)
        if not rows:
            text = node.text()
            if not text:
                raise RasterizationError("No hay contenido para exportar")
            rows = [[text]]

        n_cols = max(len(r) for r in rows)
        widths = [DAY_COLUMN_WIDTH * scale] + [MEAL_COLUMN_WIDTH * scale] * (n_cols - 1)
        scratch = ImageDraw.Draw(Image.new("RGB", (1, 1)))

        wrapped = []
        for row in rows:
            cells = [_wrap(scratch, row[i] if i < len(row) else "", font, widths[i] - 2 * pad)
                     for i in range(n_cols)]
            wrapped.append((cells, max(len(c) for c in cells) * line_h + 2 * pad))

        heading_h = len(headings) * (line_h + pad)
        width = sum(widths) + 2 * pad
        height = heading_h + sum(h for _, h in wrapped) + 2 * pad

        img = Image.new("RGB", (width, height), options.bgcolor)
        draw = ImageDraw.Draw(img)
        y = pad
        for heading in headings:
            draw.text((pad, y), heading, fill=PDF_PRIMARY_COLOR, font=bold)
            y += line_h + pad

        for r, (cells, row_h) in enumerate(wrapped):
            x = pad
            header = r == 0 and len(rows) > 1
            for c, lines in enumerate(cells):
                box = (x, y, x + widths[c], y + row_h)
                if header:
                    draw.rectangle(box, fill=PDF_PRIMARY_COLOR)
                elif r % 2 == 0:
                    draw.rectangle(box, fill=ALT_ROW_COLOR)
                draw.rectangle(box, outline=GRID_COLOR, width=scale)
                ty = y + pad
                for line in lines:
                    draw.text((x + pad, ty), line, fill="#ffffff" if header else PDF_TEXT_COLOR,
                              font=bold if header or c == 0 else font)
                    ty += line_h
                x += widths[c]
            y += row_h

        out = io.BytesIO()
        img.save(out, format="PNG", optimize=True)
        logger.debug("Rasterized #%s to %dx%d PNG", node.attrs.get("id"), width, height)
        return out.getvalue()
