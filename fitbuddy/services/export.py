from __future__ import annotations

import csv
import io
from typing import List, Sequence

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from fitbuddy.models.routine import DatedRoutine
from .routine_ops import completion_status


def to_csv(history: Sequence[DatedRoutine]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["date", "position", "exercise_name", "sets", "reps", "rest_time", "completed_sets"])
    for dated in history:
        for i, ex in enumerate(dated.routine.routine):
            writer.writerow([dated.date, i + 1, ex.name, ex.sets, ex.reps, ex.rest_time, ex.completed])
    return output.getvalue().encode("utf-8")


def to_markdown(history: Sequence[DatedRoutine]) -> str:
    lines: List[str] = [f"# Workout History ({len(history)} days)\n"]
    for dated in history:
        lines.append(f"\n## {dated.date}")
        if not dated.routine.routine:
            lines.append("- (no exercises)")
        for ex in dated.routine.routine:
            lines.append(
                f"- {ex.name}: {ex.sets} x {ex.reps}, rest {ex.rest_time} ({completion_status(ex)} sets done)"
            )
        if dated.routine.notes:
            lines.append(f"\n> {dated.routine.notes}")
    return "\n".join(lines) + "\n"


def to_pdf(history: Sequence[DatedRoutine]) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    width, height = letter

    margin = 36
    x = margin
    y = height - margin

    def ensure_room(needed: float) -> None:
        nonlocal y
        if y < margin + needed:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - margin

    c.setFont("Helvetica-Bold", 16)
    c.drawString(x, y, f"Workout History ({len(history)} days)")
    y -= 24

    c.setFont("Helvetica", 10)
    for dated in history:
        ensure_room(60)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(x, y, dated.date)
        c.setFont("Helvetica", 10)
        y -= 16
        for ex in dated.routine.routine:
            line = f"- {ex.name}: {ex.sets} x {ex.reps}, rest {ex.rest_time} ({completion_status(ex)})"
            max_chars = 95
            for part in (line[i:i + max_chars] for i in range(0, len(line), max_chars)):
                ensure_room(24)
                c.drawString(x + 12, y, part)
                y -= 14
        y -= 6

    c.showPage()
    c.save()
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes
