import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from nutriplan.logic.export.document import PlanDocument, SpacerBlock, TableBlock, TextBlock
from nutriplan.logic.export.errors import DocumentGenerationError
from nutriplan.utilities.constants import PDF_PRIMARY_COLOR, PDF_TEXT_COLOR

logger = logging.getLogger(__name__)

PRIMARY = colors.HexColor(PDF_PRIMARY_COLOR)
TEXT = colors.HexColor(PDF_TEXT_COLOR)
MUTED = colors.HexColor("#646464")
ALT_ROW = colors.HexColor("#F5F5F5")


def _styles():
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("npTitle", parent=base["Title"], fontSize=20, leading=24, textColor=PRIMARY),
        "subtitle": ParagraphStyle("npSubtitle", parent=base["Heading2"], fontSize=16, leading=20, textColor=TEXT),
        "muted": ParagraphStyle("npMuted", parent=base["Normal"], fontSize=10, leading=13, textColor=MUTED),
        "heading": ParagraphStyle("npHeading", parent=base["Heading3"], fontSize=14, leading=18, textColor=PRIMARY),
        "subheading": ParagraphStyle("npSubheading", parent=base["Heading4"], fontSize=11, leading=14, textColor=PRIMARY),
        "body": ParagraphStyle("npBody", parent=base["Normal"], fontSize=9, leading=12, textColor=TEXT),
        "small": ParagraphStyle("npSmall", parent=base["Normal"], fontSize=9, leading=12, textColor=MUTED),
        "footer": ParagraphStyle("npFooter", parent=base["Normal"], fontSize=8, leading=10,
                                 textColor=colors.HexColor("#969696")),
        "cell": ParagraphStyle("npCell", parent=base["Normal"], fontSize=8, leading=10, textColor=TEXT),
        "cell_bold": ParagraphStyle("npCellBold", parent=base["Normal"], fontName="Helvetica-Bold",
                                    fontSize=9, leading=11, textColor=TEXT),
        "head": ParagraphStyle("npHead", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=10,
                               leading=12, textColor=colors.white, alignment=TA_CENTER),
    }


def _para(text, style, align=None):
    if align is not None:
        style = ParagraphStyle(f"{style.name}-{align}", parent=style,
                               alignment=TA_CENTER if align == "center" else TA_LEFT)
    return Paragraph(escape(str(text)).replace("\n", "<br/>"), style)


def _table(block: TableBlock, styles):
    widths = [w * mm if w else None for w in block.col_widths_mm] if block.col_widths_mm else None
    keyvalue = block.style == "keyvalue"
    data = []
    if block.head:
        data.append([_para(h, styles["head"]) if h else "" for h in block.head])
    for row in block.rows:
        cells = []
        for i, value in enumerate(row):
            style = styles["cell_bold"] if i == 0 else styles["cell"]
            cells.append(_para(value, style, "center" if (i == 0 and not keyvalue) else None))
        data.append(cells)

    table = Table(data, colWidths=widths, repeatRows=1 if block.head else 0, hAlign="LEFT")
    commands = [
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    if block.head:
        commands += [
            ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
            ("SPAN", (0, 0), (-1, 0)) if keyvalue else ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ]
    if not keyvalue:
        first_body = 1 if block.head else 0
        for r in range(first_body + 1, len(data), 2):
            commands.append(("BACKGROUND", (0, r), (-1, r), ALT_ROW))
    table.setStyle(TableStyle(commands))
    return table


def _story(document: PlanDocument):
    styles = _styles()
    story = []
    pending_side = None
    for block in document.blocks:
        if isinstance(block, TableBlock) and block.style == "keyvalue" and block.head:
            # two headed key/value tables in a row are laid out side by side
            if pending_side is None:
                pending_side = _table(block, styles)
                continue
            pair = Table([[pending_side, _table(block, styles)]], hAlign="LEFT")
            pair.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP"),
                                      ("LEFTPADDING", (0, 0), (-1, -1), 0)]))
            story.append(pair)
            pending_side = None
            continue
        if pending_side is not None:
            story.append(pending_side)
            pending_side = None
        if isinstance(block, TextBlock):
            story.append(_para(block.text, styles.get(block.style, styles["body"]), block.align))
        elif isinstance(block, TableBlock):
            story.append(_table(block, styles))
        elif isinstance(block, SpacerBlock):
            story.append(Spacer(1, block.height * mm / 2))
    if pending_side is not None:
        story.append(pending_side)
    return story


def render_pdf(document: PlanDocument) -> bytes:
    """Render the document's layout blocks to landscape A4 PDF bytes."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=14 * mm, leftMargin=14 * mm, topMargin=14 * mm, bottomMargin=14 * mm,
        title=document.title,
    )
    try:
        doc.build(_story(document))
    except Exception as e:
        logger.exception("PDF rendering failed for %s", document.filename)
        raise DocumentGenerationError() from e
    return buf.getvalue()
