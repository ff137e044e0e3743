"""PDF export of answers."""

from .renderer import PdfRenderer, pdf_filename, render_pdf, timestamped_filename

__all__ = ["PdfRenderer", "pdf_filename", "render_pdf", "timestamped_filename"]
