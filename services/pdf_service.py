"""
PDF confirmation builder.
Renders a booking into a fixed A4 layout with reportlab.
"""

from io import BytesIO
from typing import Any, Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.config import settings
from core.utils_datetime import format_date_id
from domain.enums import (
    GENDER_LABELS,
    MARITAL_STATUS_LABELS,
    PAYMENT_METHOD_LABELS,
    RELATIONSHIP_LABELS,
    STATUS_LABELS,
    BookingStatus,
    Gender,
    MaritalStatus,
    PaymentMethod,
    Relationship,
    enum_label,
)
from services.booking_validation import as_bool, illness_required


PdfRow = Tuple[str, str]
PdfSection = Tuple[str, List[PdfRow]]

PDF_REQUIRED_FIELDS = (
    'name',
    'email',
    'phone_number',
    'umrah_package',
    'payment_method',
)

EMPTY_VALUE = '-'

PRIMARY_COLOR = colors.HexColor('#1F4E3D')
LABEL_BACKGROUND = colors.HexColor('#F2F5F3')
GRID_COLOR = colors.HexColor('#C9D3CE')

LABEL_COLUMN_WIDTH = 62 * mm
VALUE_COLUMN_WIDTH = 112 * mm


def format_yes_no(value: Any) -> str:
    return 'Ya' if as_bool(value) else 'Tidak'


def _text(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    text = str(value).strip()
    return text or EMPTY_VALUE


def missing_pdf_fields(data: Dict[str, Any]) -> List[str]:
    """Fields that must be filled before a confirmation can be rendered."""
    return [name for name in PDF_REQUIRED_FIELDS if not str(data.get(name) or '').strip()]


def build_sections(data: Dict[str, Any], booking_id: Optional[str] = None) -> List[PdfSection]:
    """
    Lay out the booking as titled sections of (label, value) rows.

    The illness row appears only when a specific disease is declared.
    Dates are rendered dd/mm/yyyy, booleans Ya/Tidak, enums by label.
    """
    marital_status = data.get('marital_status') or data.get('mariage_status')

    health_rows: List[PdfRow] = [
        ('Memiliki Penyakit Khusus', format_yes_no(data.get('specific_disease'))),
    ]
    if illness_required(data):
        health_rows.append(('Detail Penyakit', _text(data.get('illness'))))
    health_rows.extend([
        ('Membutuhkan Penanganan Khusus', format_yes_no(data.get('special_needs'))),
        ('Membutuhkan Kursi Roda', format_yes_no(data.get('wheelchair'))),
    ])

    return [
        ('Data Pribadi', [
            ('ID Pemesanan', _text(booking_id or data.get('booking_id'))),
            ('Nama sesuai Paspor', _text(data.get('name'))),
            ('Tanggal Pendaftaran', format_date_id(data.get('register_date'))),
            ('Jenis Kelamin', enum_label(Gender, data.get('gender'), GENDER_LABELS)),
            ('Tempat Lahir', _text(data.get('place_of_birth'))),
            ('Tanggal Lahir', format_date_id(data.get('birth_date'))),
            ('Nama Ayah', _text(data.get('father_name'))),
            ('Nama Ibu', _text(data.get('mother_name'))),
            ('Status Pernikahan', enum_label(MaritalStatus, marital_status, MARITAL_STATUS_LABELS)),
            ('Pekerjaan', _text(data.get('occupation'))),
        ]),
        ('Data Kontak', [
            ('Nomor Telepon', _text(data.get('phone_number'))),
            ('Nomor WhatsApp', _text(data.get('whatsapp_number'))),
            ('Email', _text(data.get('email'))),
        ]),
        ('Data Alamat', [
            ('Alamat Lengkap', _text(data.get('address'))),
            ('Kota', _text(data.get('city'))),
            ('Provinsi', _text(data.get('province'))),
            ('Kode Pos', _text(data.get('postal_code'))),
        ]),
        ('Data Dokumen', [
            ('NIK', _text(data.get('nik_number'))),
            ('Nomor Paspor', _text(data.get('passport_number'))),
            ('Tanggal Terbit Paspor', format_date_id(data.get('date_of_issue'))),
            ('Tanggal Berakhir Paspor', format_date_id(data.get('expiry_date'))),
            ('Tempat Terbit Paspor', _text(data.get('place_of_issue'))),
        ]),
        ('Data Kesehatan', health_rows),
        ('Riwayat Ibadah', [
            ('Sudah Pernah Umroh', format_yes_no(data.get('has_performed_umrah'))),
            ('Sudah Pernah Haji', format_yes_no(data.get('has_performed_hajj'))),
        ]),
        ('Kontak Darurat', [
            ('Nama Kontak Darurat', _text(data.get('emergency_contact_name'))),
            ('Hubungan', enum_label(Relationship, data.get('relationship'), RELATIONSHIP_LABELS)),
            ('Nomor Telepon Kontak Darurat', _text(data.get('emergency_contact_phone'))),
        ]),
        ('Paket & Pembayaran', [
            ('Paket Umroh', _text(data.get('umrah_package'))),
            ('Metode Pembayaran', enum_label(PaymentMethod, data.get('payment_method'), PAYMENT_METHOD_LABELS)),
            ('Persetujuan Syarat dan Ketentuan', format_yes_no(data.get('terms_of_service'))),
        ]),
    ]


def _styles() -> Dict[str, ParagraphStyle]:
    sample = getSampleStyleSheet()
    return {
        'company': ParagraphStyle(
            'Company', parent=sample['Title'], fontSize=18, textColor=PRIMARY_COLOR, spaceAfter=2,
        ),
        'title': ParagraphStyle(
            'DocumentTitle', parent=sample['Heading2'], alignment=TA_CENTER, spaceAfter=4,
        ),
        'subtitle': ParagraphStyle(
            'Subtitle', parent=sample['Normal'], alignment=TA_CENTER, fontSize=10,
        ),
        'section': ParagraphStyle(
            'Section', parent=sample['Heading4'], textColor=PRIMARY_COLOR, spaceBefore=8, spaceAfter=4,
        ),
        'label': ParagraphStyle('Label', parent=sample['Normal'], fontName='Helvetica-Bold', fontSize=9),
        'value': ParagraphStyle('Value', parent=sample['Normal'], fontSize=9),
        'footer': ParagraphStyle(
            'Footer', parent=sample['Normal'], alignment=TA_CENTER, fontSize=8, textColor=colors.grey,
        ),
    }


def _section_table(rows: List[PdfRow], styles: Dict[str, ParagraphStyle]) -> Table:
    table = Table(
        [
            [Paragraph(escape(label), styles['label']), Paragraph(escape(value), styles['value'])]
            for label, value in rows
        ],
        colWidths=[LABEL_COLUMN_WIDTH, VALUE_COLUMN_WIDTH],
    )
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (0, -1), LABEL_BACKGROUND),
        ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('TOPPADDING', (0, 0), (-1, -1), 3),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
    ]))
    return table


def build_confirmation_pdf(data: Dict[str, Any], booking_id: Optional[str] = None) -> bytes:
    """
    Render the booking confirmation document.

    The output depends only on the input: the same data yields
    byte-identical documents.

    Args:
        data: Booking form data (BookingRecord.to_form_data() or raw form)
        booking_id: Code printed on the document (default: data's booking_id)

    Returns:
        PDF bytes
    """
    booking_id = booking_id or data.get('booking_id') or EMPTY_VALUE
    styles = _styles()
    buffer = BytesIO()

    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=16 * mm,
        bottomMargin=16 * mm,
        title=f"Konfirmasi Pemesanan {booking_id}",
        author=settings.company_name,
        invariant=1,
    )

    story = [
        Paragraph(escape(settings.company_name), styles['company']),
        Paragraph('KONFIRMASI PEMESANAN UMROH', styles['title']),
        Paragraph(f"ID Pemesanan: <b>{escape(booking_id)}</b>", styles['subtitle']),
    ]

    status = data.get('status')
    if status:
        story.append(Paragraph(
            f"Status: {escape(enum_label(BookingStatus, status, STATUS_LABELS))}",
            styles['subtitle'],
        ))
    story.append(Spacer(1, 6 * mm))

    for title, rows in build_sections(data, booking_id):
        story.append(Paragraph(escape(title), styles['section']))
        story.append(_section_table(rows, styles))

    story.extend([
        Spacer(1, 8 * mm),
        Paragraph(
            'Dokumen ini merupakan bukti pendaftaran. Kami akan menghubungi Anda '
            'untuk informasi selanjutnya.',
            styles['footer'],
        ),
        Paragraph(
            escape(f"{settings.company_name} | {settings.company_phone} | {settings.company_website}"),
            styles['footer'],
        ),
    ])

    document.build(story)
    return buffer.getvalue()
