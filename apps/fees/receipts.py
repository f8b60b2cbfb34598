# fees/receipts.py

"""
Official receipts for posted payments.

generate_receipt / generate_enrollment_receipt are read-only: they
build a receipt dict from stored rows and never touch the database
beyond reading. render_receipt_pdf turns that dict into a PDF.
"""

from io import BytesIO
from xml.sax.saxutils import escape
import logging

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A5
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from core.utils import format_money, round_to_currency
from fees.ledger import sum_amounts, ZERO

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


class PaymentNotFoundError(LookupError):
    """No payment exists at the requested index."""

    def __init__(self, message="Payment not found"):
        super().__init__(message)


def _select_payment(payments, payment_index):
    if not isinstance(payment_index, int) or payment_index < 0 or payment_index >= len(payments):
        raise PaymentNotFoundError()
    return payments[payment_index]


def _student_fields(student):
    if student is None:
        return NOT_AVAILABLE, NOT_AVAILABLE
    return student.student_id or NOT_AVAILABLE, student.get_full_name()


# =============================================================================
# RECEIPT DATA
# =============================================================================

def generate_receipt(record, payment_index):
    """
    Build the official receipt for one payment on a financial record.

    Args:
        record: FinancialRecord instance
        payment_index: 0-based index into the record's payments

    Returns:
        dict with receipt_number, student_id, student_name, date,
        academic_year, semester, payment_details, breakdown, total_due,
        previous_payments, current_payment, remaining_balance, notes

    Raises:
        PaymentNotFoundError: empty payments or index out of range
    """
    payments = list(record.payments.order_by('position'))
    payment = _select_payment(payments, payment_index)
    student_id, student_name = _student_fields(record.student)
    subtotals = record.get_subtotals()

    return {
        'receipt_number': payment.receipt_number,
        'student_id': student_id,
        'student_name': student_name,
        'date': payment.payment_date,
        'academic_year': record.academic_year.name,
        'semester': record.semester,
        'payment_details': {
            'amount': payment.amount,
            'method': payment.payment_method,
            'reference': payment.reference_number or payment.check_number or None,
            'received_by': payment.received_by_id,
        },
        'breakdown': {
            'tuition': subtotals['tuition'],
            'miscellaneous': subtotals['miscellaneous'],
            'laboratory': subtotals['laboratory'],
            'others': subtotals['other'],
        },
        'total_due': record.total_due,
        'previous_payments': sum_amounts(p.amount for p in payments[:payment_index]),
        'current_payment': payment.amount,
        'remaining_balance': record.remaining_balance,
        'notes': payment.notes,
    }


def generate_enrollment_receipt(enrollment, payment_index):
    """
    Receipt for a payment recorded directly on an enrollment.
    Same shape as generate_receipt; enrollments carry no 'others' fees
    and their payments have no receipt number of their own.
    """
    payments = list(enrollment.payments.order_by('position'))
    payment = _select_payment(payments, payment_index)
    student_id, student_name = _student_fields(enrollment.student)

    total_due = round_to_currency(
        enrollment.total_fees - enrollment.total_fees * enrollment.discount / 100
    )

    return {
        'receipt_number': payment.reference_number or NOT_AVAILABLE,
        'student_id': student_id,
        'student_name': student_name,
        'date': payment.payment_date,
        'academic_year': enrollment.academic_year.name,
        'semester': enrollment.semester,
        'payment_details': {
            'amount': payment.amount,
            'method': payment.payment_method,
            'reference': payment.reference_number or None,
            'received_by': payment.received_by_id,
        },
        'breakdown': {
            'tuition': enrollment.tuition_fee,
            'miscellaneous': enrollment.misc_fees,
            'laboratory': enrollment.lab_fees,
            'others': ZERO,
        },
        'total_due': total_due,
        'previous_payments': sum_amounts(p.amount for p in payments[:payment_index]),
        'current_payment': payment.amount,
        'remaining_balance': enrollment.balance,
        'notes': payment.notes,
    }


# =============================================================================
# PDF
# =============================================================================

def render_receipt_pdf(receipt, school_name=None):
    """
    Render a receipt dict as a one-page PDF.

    Returns:
        bytes: PDF document
    """
    if school_name is None:
        from core.models import SchoolConfiguration
        school_name = SchoolConfiguration.get_instance().school_name

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A5,
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        title=f"Official Receipt {receipt['receipt_number']}",
    )
    elements = []

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReceiptTitle',
        parent=styles['Heading1'],
        fontSize=16,
        textColor=colors.HexColor('#1a1a1a'),
        spaceAfter=6,
        alignment=TA_CENTER
    )
    subtitle_style = ParagraphStyle(
        'ReceiptSubtitle',
        parent=styles['Normal'],
        alignment=TA_CENTER,
    )

    elements.append(Paragraph(escape(school_name), subtitle_style))
    elements.append(Paragraph('Official Receipt', title_style))
    elements.append(Spacer(1, 10))

    details = receipt['payment_details']
    date = receipt['date']
    header_data = [
        ['Receipt No.', receipt['receipt_number']],
        ['Date', date.strftime('%Y-%m-%d %H:%M') if date else ''],
        ['Student ID', receipt['student_id']],
        ['Student Name', receipt['student_name']],
        ['Term', f"{receipt['academic_year']} {receipt['semester']}"],
        ['Method', details['method']],
        ['Reference', details['reference'] or ''],
    ]
    header_table = Table(header_data, colWidths=[1.4 * inch, 3.2 * inch])
    header_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements.append(header_table)
    elements.append(Spacer(1, 12))

    breakdown = receipt['breakdown']
    amount_data = [
        ['Description', 'Amount'],
        ['Tuition', format_money(breakdown['tuition'])],
        ['Miscellaneous', format_money(breakdown['miscellaneous'])],
        ['Laboratory', format_money(breakdown['laboratory'])],
        ['Others', format_money(breakdown['others'])],
        ['Total Due', format_money(receipt['total_due'])],
        ['Previous Payments', format_money(receipt['previous_payments'])],
        ['This Payment', format_money(receipt['current_payment'])],
        ['Remaining Balance', format_money(receipt['remaining_balance'])],
    ]
    amount_table = Table(amount_data, colWidths=[2.6 * inch, 2.0 * inch])
    amount_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#4472C4')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('FONTNAME', (0, 5), (-1, 5), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.black)
    ]))
    elements.append(amount_table)

    if receipt.get('notes'):
        elements.append(Spacer(1, 10))
        elements.append(Paragraph(f"Notes: {escape(receipt['notes'])}", styles['Normal']))

    doc.build(elements)
    pdf = buffer.getvalue()
    buffer.close()

    logger.info(f"Rendered receipt PDF {receipt['receipt_number']} ({len(pdf)} bytes)")
    return pdf
