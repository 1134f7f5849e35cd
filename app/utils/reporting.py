from __future__ import annotations

from datetime import datetime
from html import escape
from pathlib import Path
from typing import Any

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.config import get_settings
from app.models import Project
from app.services.threat_composer import STAGES, stage_label


def _export_dir() -> Path:
    path = get_settings().export_dir
    path.mkdir(parents=True, exist_ok=True)
    return path


def _pdf_text(value: Any) -> str:
    return escape(" ".join(str(value or "").split()).strip())


def _summary_rows(entries: list[dict[str, Any]]) -> list[list[str]]:
    rows = [["Stage", "Statements"]]
    for stage in STAGES:
        rows.append([stage_label(stage), str(len([e for e in entries if e.get("stage") == stage]))])
    linked = len([e for e in entries if e.get("controls")])
    rows.append(["Statements with controls", str(linked)])
    return rows


def render_threat_register_pdf(project: Project, entries: list[dict[str, Any]]) -> Path:
    stamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    pdf_path = _export_dir() / f"threat_register_{project.id}_{stamp}.pdf"

    doc = SimpleDocTemplate(str(pdf_path), pagesize=A4, leftMargin=28, rightMargin=28, topMargin=24)
    styles = getSampleStyleSheet()

    story = []
    story.append(Paragraph(f"Threat Register - {_pdf_text(project.name)}", styles["Title"]))
    if str(project.description or "").strip():
        story.append(Paragraph(_pdf_text(project.description), styles["Normal"]))
    story.append(Paragraph(f"Generated: {datetime.utcnow().isoformat()} UTC", styles["Normal"]))
    story.append(Spacer(1, 10))

    summary = Table(_summary_rows(entries), hAlign="LEFT")
    summary.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#111827")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("BACKGROUND", (0, 1), (-1, -1), colors.HexColor("#F8FAFC")),
            ]
        )
    )
    story.append(summary)
    story.append(Spacer(1, 10))

    for stage in STAGES:
        stage_entries = [e for e in entries if e.get("stage") == stage]
        story.append(Paragraph(stage_label(stage), styles["Heading2"]))
        if not stage_entries:
            story.append(Paragraph("No statements saved at this stage.", styles["BodyText"]))
            continue
        for entry in stage_entries:
            story.append(Paragraph(f"#{entry['number']} {_pdf_text(entry['threat_statement'])}", styles["BodyText"]))
            family = int(entry.get("family_size", 1) or 1)
            controls = [_pdf_text(c) for c in entry.get("controls") or []]
            line = f"&nbsp;&nbsp;Threat family: {family} statement{'s' if family != 1 else ''}"
            if controls:
                line += f" | Controls: {', '.join(controls)}"
            story.append(Paragraph(line, styles["BodyText"]))
        story.append(Spacer(1, 6))

    doc.build(story)
    return pdf_path
