import io
import logging
import os
import qrcode
from qrcode.image.pil import PilImage
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib import colors
from reportlab.pdfgen import canvas
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from sqlalchemy.orm import Session
from bandtrack.config import settings
from bandtrack.models.equipment import Equipment
import bandtrack.services.equipment_service as equipment_svc

logger = logging.getLogger(__name__)


# ── Fonty (diakritika v názvech) ──────────────────────────────────────────────
_FONT_REGULAR = "Helvetica"
_FONT_BOLD = "Helvetica-Bold"
_UNICODE_FONT = False

_FONT_PAIRS = [
    (
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "DejaVu", "DejaVuBold",
    ),
    (
        "/usr/share/fonts/ttf-dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/ttf-dejavu/DejaVuSans-Bold.ttf",
        "DejaVu", "DejaVuBold",
    ),
]


def _init_fonts() -> None:
    global _FONT_REGULAR, _FONT_BOLD, _UNICODE_FONT
    for reg_path, bold_path, reg_name, bold_name in _FONT_PAIRS:
        if not os.path.exists(reg_path):
            continue
        try:
            pdfmetrics.registerFont(TTFont(reg_name, reg_path))
            _FONT_REGULAR = reg_name
            if os.path.exists(bold_path):
                pdfmetrics.registerFont(TTFont(bold_name, bold_path))
                _FONT_BOLD = bold_name
            else:
                _FONT_BOLD = reg_name
            _UNICODE_FONT = True
            break
        except Exception:
            logger.warning("Font %s nelze načíst, zkouším další", reg_path)
            continue


_init_fonts()

_CZECH_MAP = str.maketrans(
    "áčďéěíňóřšťúůýžÁČĎÉĚÍŇÓŘŠŤÚŮÝŽ",
    "acdeeinorstuuyzACDEEINORSTUUYZ",
)


def _t(text: str) -> str:
    if _UNICODE_FONT:
        return text
    return text.translate(_CZECH_MAP)


def scan_url(code: str) -> str:
    return f"{settings.BASE_URL}/scan/{code}"


def _make_qr_bytes(payload: str) -> bytes:
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(payload)
    qr.make(fit=True)
    img: PilImage = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_equipment_qr(db: Session, equipment_id: int) -> bytes:
    equipment = equipment_svc.get_equipment(db, equipment_id)
    return _make_qr_bytes(scan_url(equipment.qr_code))


def generate_batch_pdf(db: Session, equipment_ids: list[int]) -> bytes:
    """Arch štítků A4: QR 3.3 cm, kód, značka + model a kategorie. Neexistující ID se přeskočí."""
    rows = [e for e in (db.get(Equipment, eid) for eid in equipment_ids) if e is not None]

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    page_width, page_height = A4

    label_w = 50 * mm
    label_h = 52 * mm
    qr_size = 33 * mm
    margin = 8 * mm

    cols = int((page_width - margin) / (label_w + margin))
    rows_per_page = int((page_height - margin) / (label_h + margin))

    for idx, equipment in enumerate(rows):
        col = idx % cols
        row = (idx // cols) % rows_per_page
        if idx > 0 and idx % (cols * rows_per_page) == 0:
            c.showPage()

        x = margin + col * (label_w + margin)
        y = page_height - margin - (row + 1) * (label_h + margin)

        qr_png = _make_qr_bytes(scan_url(equipment.qr_code))
        c.drawImage(
            ImageReader(io.BytesIO(qr_png)),
            x + (label_w - qr_size) / 2, y + 17 * mm,
            width=qr_size, height=qr_size,
        )

        c.setFont(_FONT_BOLD, 8)
        c.drawCentredString(x + label_w / 2, y + 11.5 * mm, _t(equipment.qr_code))

        c.setFont(_FONT_REGULAR, 7)
        c.drawCentredString(x + label_w / 2, y + 7 * mm, _t(f"{equipment.make} {equipment.model}"[:30]))
        c.setFillColor(colors.grey)
        c.drawCentredString(x + label_w / 2, y + 3 * mm, equipment.category.value.upper())
        c.setFillColor(colors.black)

        c.setStrokeColor(colors.black)
        c.setLineWidth(0.5)
        c.rect(x, y, label_w, label_h)

    c.save()
    return buf.getvalue()
