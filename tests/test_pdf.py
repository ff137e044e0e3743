"""Tests for PDF rendering."""
import re

import pytest

from doubtsolver.errors import ExportError
from doubtsolver.pdf import PdfRenderer, pdf_filename, render_pdf, timestamped_filename

ANSWER = """## Introduction
A **transistor** is a semiconductor device.

## Detailed Explanation
1. It has three terminals: *emitter*, base and collector.
2. A small base current controls a larger collector current.

- Used as a switch
- Used as an amplifier

> Remember: I_C = beta * I_B

```
V = I * R
```

---
Summary with `inline code` and <angle brackets> & ampersands."""


class TestPdfRenderer:
    """Tests for PdfRenderer."""

    def test_render_returns_pdf(self):
        data = PdfRenderer().render(ANSWER, title="Transistors")

        assert data.startswith(b"%PDF")
        assert data.rstrip().endswith(b"%%EOF")

    def test_render_default_title(self):
        assert render_pdf("Plain answer").startswith(b"%PDF")

    def test_render_empty_body(self):
        assert render_pdf("").startswith(b"%PDF")

    def test_render_escapes_markup_in_title(self):
        assert render_pdf("x", title="<b>Unclosed & odd").startswith(b"%PDF")

    def test_render_failure_raises_export_error(self, monkeypatch):
        renderer = PdfRenderer()

        def broken(content):
            raise RuntimeError("layout failed")

        monkeypatch.setattr(renderer, "_markdown_to_flowables", broken)

        with pytest.raises(ExportError, match="layout failed"):
            renderer.render("content")


class TestFilenames:
    """Tests for export file names."""

    def test_pdf_filename_from_title(self):
        assert pdf_filename("Ohm's Law") == "Ohm's Law.pdf"

    def test_pdf_filename_default(self):
        assert pdf_filename(None) == "solution.pdf"
        assert pdf_filename("   ") == "solution.pdf"

    def test_pdf_filename_strips_path_separators(self):
        name = pdf_filename('../etc/"passwd"')
        assert "/" not in name
        assert '"' not in name
        assert name.endswith(".pdf")

    def test_timestamped_filename(self):
        assert re.fullmatch(r"solution-\d{13}\.pdf", timestamped_filename())
