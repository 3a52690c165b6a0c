"""
Render a stored analysis as a downloadable report.
HTML via Jinja2 (autoescaped), PDF via reportlab. Both are deterministic for a given record.
"""
from io import BytesIO
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from resume_analyzer.app.core.config import (
    PDF_FONT_SIZE_BODY,
    PDF_FONT_SIZE_HEADING,
    PDF_FONT_SIZE_TITLE,
    PDF_LINE_HEIGHT,
    PDF_MAX_LINE_CHARS,
    REPORT_FILENAME_TEMPLATE,
    SECTION_NAMES,
)
from resume_analyzer.app.models.resume_analysis import ResumeAnalysis
from resume_analyzer.app.schemas.analysis import StructuredAnalysis

TEMPLATE_DIR = Path(__file__).resolve().parent.parent.parent / "templates"

_KEYWORD_LABELS = (("technical", "Technical"), ("soft", "Soft Skills"), ("industry", "Industry"))

_env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), autoescape=True)


def report_filename(record: ResumeAnalysis, ext: str = "html") -> str:
    return REPORT_FILENAME_TEMPLATE.format(id=record.id, ext=ext)


def build_report_context(record: ResumeAnalysis) -> dict:
    analysis = StructuredAnalysis.model_validate(record.analysis)
    return {
        "file_name": record.file_name,
        "created_date": record.created_at.strftime("%Y-%m-%d"),
        "analysis": analysis,
        "keyword_rows": [(label, getattr(analysis.keywordMatch, key)) for key, label in _KEYWORD_LABELS],
        "section_rows": [(name.title(), getattr(analysis.sections, name)) for name in SECTION_NAMES],
    }


def render_report_html(record: ResumeAnalysis) -> str:
    """Self-contained HTML report. All record and AI text is escaped by Jinja2."""
    template = _env.get_template("report.html")
    return template.render(**build_report_context(record))


def _wrap(text: str, width: int = PDF_MAX_LINE_CHARS) -> list[str]:
    lines = []
    for paragraph in (text or "").replace("\r\n", "\n").split("\n"):
        words = paragraph.split()
        line = ""
        for word in words:
            if line and len(line) + 1 + len(word) > width:
                lines.append(line)
                line = word
            else:
                line = f"{line} {word}" if line else word
        lines.append(line)
    return lines


class _PdfWriter:
    """Top-down text cursor over a reportlab canvas with automatic page breaks."""

    def __init__(self, buffer: BytesIO):
        self.c = canvas.Canvas(buffer, pagesize=letter, invariant=1)
        self.width, self.height = letter
        self.margin = inch
        self.y = self.height - self.margin

    def _ensure_room(self) -> None:
        if self.y < self.margin + PDF_LINE_HEIGHT:
            self.c.showPage()
            self.y = self.height - self.margin

    def line(self, text: str, size: int = PDF_FONT_SIZE_BODY, font: str = "Helvetica", indent: float = 0) -> None:
        for chunk in _wrap(text):
            self._ensure_room()
            self.c.setFont(font, size)
            self.c.drawString(self.margin + indent, self.y, chunk)
            self.y -= PDF_LINE_HEIGHT * (1.3 if size > PDF_FONT_SIZE_BODY else 1)

    def heading(self, text: str) -> None:
        self.y -= PDF_LINE_HEIGHT / 2
        self.line(text, size=PDF_FONT_SIZE_HEADING, font="Helvetica-Bold")

    def save(self) -> None:
        self.c.save()


def render_report_pdf(record: ResumeAnalysis) -> bytes:
    """PDF rendering of the same report content. Returns file bytes."""
    ctx = build_report_context(record)
    analysis: StructuredAnalysis = ctx["analysis"]

    buffer = BytesIO()
    pdf = _PdfWriter(buffer)
    pdf.line("Resume Analysis Report", size=PDF_FONT_SIZE_TITLE, font="Helvetica-Bold")
    pdf.line(f"File: {ctx['file_name']}")
    pdf.line(f"Date: {ctx['created_date']}")
    pdf.heading(f"Score: {analysis.score}/100")
    pdf.line(analysis.summary)

    pdf.heading("Strengths")
    for s in analysis.strengths:
        pdf.line(f"+ {s}", indent=10)

    pdf.heading("Areas for Improvement")
    for i in analysis.improvements:
        pdf.line(f"- {i}", indent=10)

    pdf.heading("Keyword Match")
    for label, value in ctx["keyword_rows"]:
        pdf.line(f"{label}: {value}%", indent=10)

    pdf.heading("Section Review")
    for name, section in ctx["section_rows"]:
        pdf.line(f"{name} [{section.status}]: {section.message}", indent=10)

    pdf.heading("AI Suggestions")
    for s in analysis.suggestions:
        pdf.line(s.title, font="Helvetica-Bold", indent=10)
        pdf.line(s.description, indent=10)
        pdf.line(f"Example: {s.example}", indent=10)

    pdf.save()
    return buffer.getvalue()
