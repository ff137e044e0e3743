"""PDF rendering of Markdown answers.

Hidden design decisions:
- Using markdown-it-py for CommonMark-compliant parsing
- Mapping Markdown block tokens onto reportlab platypus flowables
- Page size and paragraph styles
"""

import logging
import re
import time
from io import BytesIO
from xml.sax.saxutils import escape

from markdown_it import MarkdownIt
from markdown_it.token import Token
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Flowable, Paragraph, Preformatted, SimpleDocTemplate, Spacer

from ..config import DEFAULT_PDF_FILENAME, DEFAULT_PDF_TITLE
from ..errors import ExportError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\r\n]+')


def pdf_filename(title: str | None = None) -> str:
    """Attachment filename for a title, e.g. 'Ohm's Law.pdf'."""
    stem = _UNSAFE_FILENAME_CHARS.sub(" ", title or "").strip() or DEFAULT_PDF_FILENAME
    return f"{stem}.pdf"


def timestamped_filename() -> str:
    """Filename used for exports without a title: solution-<millis>.pdf."""
    return f"{DEFAULT_PDF_FILENAME}-{int(time.time() * 1000)}.pdf"


class PdfRenderer:
    """Renders a title and a Markdown body into PDF bytes."""

    def __init__(self, pagesize: tuple[float, float] = A4):
        self._pagesize = pagesize
        self._md = MarkdownIt()
        styles = getSampleStyleSheet()
        self._title_style = ParagraphStyle(
            "DoubtTitle", parent=styles["Title"], fontSize=20, spaceAfter=18
        )
        self._body_style = ParagraphStyle(
            "DoubtBody", parent=styles["BodyText"], fontSize=12, leading=16, spaceAfter=5
        )
        self._heading_styles = {
            1: styles["Heading1"],
            2: styles["Heading2"],
            3: styles["Heading3"],
        }
        self._bullet_style = ParagraphStyle(
            "DoubtBullet", parent=self._body_style, leftIndent=18, bulletIndent=6
        )
        self._quote_style = ParagraphStyle(
            "DoubtQuote", parent=self._body_style, leftIndent=18, textColor=HexColor("#444444")
        )
        self._code_style = ParagraphStyle(
            "DoubtCode", parent=styles["Code"], fontSize=9, leading=11, backColor=HexColor("#f4f4f4")
        )

    def render(self, content: str, title: str | None = None) -> bytes:
        """Render a PDF document.

        Args:
            content: Markdown answer text
            title: Document title (defaults to 'Doubt Solution')

        Returns:
            PDF file bytes

        Raises:
            ExportError: If the document cannot be built
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self._pagesize,
            leftMargin=inch,
            rightMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
            title=title or DEFAULT_PDF_TITLE,
        )

        story: list[Flowable] = [Paragraph(escape(title or DEFAULT_PDF_TITLE), self._title_style)]
        try:
            story.extend(self._markdown_to_flowables(content))
            doc.build(story)
        except Exception as e:
            logger.error("PDF rendering failed: %s", e)
            raise ExportError(f"Failed to generate PDF: {e}") from e

        return buffer.getvalue()

    def _markdown_to_flowables(self, content: str) -> list[Flowable]:
        tokens = self._md.parse(content)
        flowables: list[Flowable] = []
        list_stack: list[dict] = []  # {"ordered": bool, "counter": int}
        quote_depth = 0
        heading_level: int | None = None

        for token in tokens:
            if token.type == "heading_open":
                heading_level = int(token.tag[1])
            elif token.type == "heading_close":
                heading_level = None
            elif token.type in ("bullet_list_open", "ordered_list_open"):
                start = int(token.attrGet("start") or 1)
                list_stack.append({"ordered": token.type == "ordered_list_open", "counter": start})
            elif token.type in ("bullet_list_close", "ordered_list_close"):
                list_stack.pop()
            elif token.type == "blockquote_open":
                quote_depth += 1
            elif token.type == "blockquote_close":
                quote_depth -= 1
            elif token.type == "inline":
                markup = self._inline_markup(token)
                if heading_level is not None:
                    style = self._heading_styles.get(heading_level, self._heading_styles[3])
                    flowables.append(Paragraph(markup, style))
                elif list_stack:
                    current = list_stack[-1]
                    if current["ordered"]:
                        bullet = f"{current['counter']}."
                        current["counter"] += 1
                    else:
                        bullet = "•"
                    flowables.append(Paragraph(markup, self._bullet_style, bulletText=bullet))
                elif quote_depth:
                    flowables.append(Paragraph(markup, self._quote_style))
                else:
                    flowables.append(Paragraph(markup, self._body_style))
            elif token.type in ("fence", "code_block"):
                flowables.append(Preformatted(token.content.rstrip("\n"), self._code_style))
                flowables.append(Spacer(1, 6))
            elif token.type == "hr":
                flowables.append(Spacer(1, 12))

        return flowables

    def _inline_markup(self, token: Token) -> str:
        """Convert an inline token to reportlab paragraph markup."""
        parts: list[str] = []
        for child in token.children or []:
            if child.type == "text":
                parts.append(escape(child.content))
            elif child.type == "code_inline":
                parts.append(f'<font face="Courier">{escape(child.content)}</font>')
            elif child.type == "strong_open":
                parts.append("<b>")
            elif child.type == "strong_close":
                parts.append("</b>")
            elif child.type == "em_open":
                parts.append("<i>")
            elif child.type == "em_close":
                parts.append("</i>")
            elif child.type == "softbreak":
                parts.append(" ")
            elif child.type == "hardbreak":
                parts.append("<br/>")
            elif child.type == "image":
                parts.append(escape(child.content or "[image]"))
        return "".join(parts)


def render_pdf(content: str, title: str | None = None) -> bytes:
    """Render Markdown content into PDF bytes with the default renderer."""
    return PdfRenderer().render(content, title)
