from io import BytesIO

from django.conf import settings
from django.contrib.humanize.templatetags.humanize import intcomma
from django.utils import timezone
# PDF Generation imports
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer


def _money(amount):
    return intcomma(f"{amount:.2f}")


BALANCE_COLUMNS = (
    ["Name", "Total Owed", "Total Paid", "Balance", "Status"],
    lambda s: [s.name or "N/A", _money(s.total_owed), _money(s.total_paid),
               _money(s.balance), s.payment_status or "N/A"],
)

CLEARANCE_COLUMNS = (
    ["Name", "Email", "Balance", "Clearance"],
    lambda s: [s.name or "N/A", s.email, _money(s.balance),
               "Yes" if s.clearance else "No"],
)

REPORTS = {
    'balances': ("Student Balances", BALANCE_COLUMNS),
    'clearance': ("Student Clearance", CLEARANCE_COLUMNS),
}


def build_student_report(students, kind='balances'):
    """
    Render a PDF table of ``StudentData`` records and return its bytes.

    ``kind`` is ``'balances'`` or ``'clearance'``.
    """
    title, (header, row) = REPORTS[kind]

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4,
                            rightMargin=48, leftMargin=48,
                            topMargin=48, bottomMargin=48)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor('#7F1D1D'),
        spaceAfter=12,
        alignment=TA_CENTER,
    )

    elements = [
        Paragraph(f"{settings.SMIS_SCHOOL_NAME}: {title}", title_style),
        Paragraph(
            f"Generated {timezone.now():%B %d, %Y}, amounts in {settings.SMIS_CURRENCY}",
            styles['Normal'],
        ),
        Spacer(1, 0.2 * inch),
    ]

    data = [header] + [row(s) for s in students]
    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#7F1D1D')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F3F4F6')]),
        ('PADDING', (0, 0), (-1, -1), 5),
    ]))
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()
