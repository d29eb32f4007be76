import io
from sqlalchemy.orm import Session
from sqlalchemy import select
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from bandtrack.models.assignment import EquipmentAssignment, AssignmentStatus
from bandtrack.models.equipment import Equipment
from bandtrack.services.assignment_service import is_damaged, is_overdue

_STATUS_LABELS = {
    AssignmentStatus.pending_checkout: "Čeká na vydání",
    AssignmentStatus.checked_out: "Vypůjčeno",
    AssignmentStatus.pending_return: "Čeká na schválení",
    AssignmentStatus.returned: "Vráceno",
    AssignmentStatus.overdue: "Po termínu",
    AssignmentStatus.lost: "Ztraceno",
    AssignmentStatus.damaged: "Poškozeno",
}

_HEADER_FILL = PatternFill(start_color="1C2D42", end_color="1C2D42", fill_type="solid")
_HEADER_FONT = Font(bold=True, color="F5A623", size=11)


def _write_header(ws, headers: list[str]) -> None:
    for col, h in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=h)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(horizontal="center")
    ws.row_dimensions[1].height = 22
    ws.freeze_panes = "A2"


def _set_widths(ws, widths: list[int]) -> None:
    for i, w in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(i)].width = w


def _fmt(dt, pattern: str = "%d.%m.%Y %H:%M") -> str:
    return dt.strftime(pattern) if dt else ""


def export_assignments_excel(db: Session) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Výpůjčky"

    _write_header(ws, [
        "ID", "QR kód", "Vybavení", "Student", "Akce", "Účel", "Stav",
        "Vydáno", "Vrátit do", "Vráceno", "Stav při vydání", "Stav při vrácení",
        "Poškozeno", "Po termínu", "Poznámka k poškození",
    ])

    assignments = db.scalars(
        select(EquipmentAssignment).order_by(EquipmentAssignment.checkout_date.desc())
    ).all()
    for row_num, a in enumerate(assignments, 2):
        ws.cell(row=row_num, column=1, value=a.id)
        ws.cell(row=row_num, column=2, value=a.equipment.qr_code)
        ws.cell(row=row_num, column=3, value=f"{a.equipment.make} {a.equipment.model}")
        ws.cell(row=row_num, column=4, value=a.student.full_name or a.student.username)
        ws.cell(row=row_num, column=5, value=a.event.name if a.event else "")
        ws.cell(row=row_num, column=6, value=a.assignment_purpose or "")
        ws.cell(row=row_num, column=7, value=_STATUS_LABELS.get(a.status, a.status.value))
        ws.cell(row=row_num, column=8, value=_fmt(a.checkout_date))
        ws.cell(row=row_num, column=9, value=_fmt(a.expected_return_date))
        ws.cell(row=row_num, column=10, value=_fmt(a.actual_return_date))
        ws.cell(row=row_num, column=11, value=a.checkout_condition.value if a.checkout_condition else "")
        ws.cell(row=row_num, column=12, value=a.return_condition.value if a.return_condition else "")
        ws.cell(row=row_num, column=13, value="Ano" if is_damaged(a) else "Ne")
        ws.cell(row=row_num, column=14, value="Ano" if is_overdue(a) else "Ne")
        ws.cell(row=row_num, column=15, value=a.damage_notes or "")

    _set_widths(ws, [6, 18, 28, 24, 24, 14, 18, 18, 18, 18, 14, 14, 10, 10, 40])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def export_equipment_excel(db: Session) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Vybavení"

    _write_header(ws, [
        "ID", "QR kód", "Značka", "Model", "Kategorie", "S/N", "Technický stav", "Stav",
        "Umístění", "Vypůjčil", "Vrátit do", "Cena", "Příští údržba", "Aktivní",
    ])

    rows = db.scalars(select(Equipment).order_by(Equipment.category, Equipment.qr_code)).all()
    for row_num, e in enumerate(rows, 2):
        ws.cell(row=row_num, column=1, value=e.id)
        ws.cell(row=row_num, column=2, value=e.qr_code)
        ws.cell(row=row_num, column=3, value=e.make)
        ws.cell(row=row_num, column=4, value=e.model)
        ws.cell(row=row_num, column=5, value=e.category.value)
        ws.cell(row=row_num, column=6, value=e.serial_number or "")
        ws.cell(row=row_num, column=7, value=e.condition.value)
        ws.cell(row=row_num, column=8, value=e.status.value)
        ws.cell(row=row_num, column=9, value=e.location or "")
        ws.cell(row=row_num, column=10, value=e.assigned_to.username if e.assigned_to else "")
        ws.cell(row=row_num, column=11, value=_fmt(e.expected_return_date))
        ws.cell(row=row_num, column=12, value=float(e.purchase_price) if e.purchase_price else None)
        ws.cell(row=row_num, column=13, value=_fmt(e.next_maintenance_date, "%d.%m.%Y"))
        ws.cell(row=row_num, column=14, value="Ano" if e.is_active else "Ne")

    _set_widths(ws, [6, 18, 18, 22, 14, 20, 14, 16, 20, 18, 18, 12, 14, 8])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
