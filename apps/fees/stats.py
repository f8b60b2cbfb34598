# fees/stats.py

"""
Financial summary statistics and spreadsheet export for financial records.
"""

from decimal import Decimal
from io import BytesIO
import logging

from django.db.models import Count, Sum, F, DecimalField, ExpressionWrapper
from django.db.models.functions import Coalesce
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
MONEY = DecimalField(max_digits=14, decimal_places=2)


def _filtered_records(filters=None):
    from fees.models import FinancialRecord

    records = FinancialRecord.objects.select_related('student', 'academic_year')

    if filters:
        if filters.get('academic_year'):
            records = records.filter(academic_year=filters['academic_year'])
        if filters.get('semester'):
            records = records.filter(semester=filters['semester'])
        if filters.get('status'):
            records = records.filter(status=filters['status'])

    return records


# =============================================================================
# FINANCIAL SUMMARY
# =============================================================================

def get_financial_summary(filters=None):
    """
    Totals per academic year + semester and a breakdown by status.

    Args:
        filters (dict): Optional filters
            - academic_year: AcademicYear instance or id
            - semester: '1st' | '2nd' | 'Summer'
            - status: ledger status

    Returns:
        dict: {
            'totals': overall sums,
            'by_term': [per academic year + semester sums],
            'by_status': {status: {'count', 'total_due', 'outstanding'}},
        }

    Collected amounts are total_due - remaining_balance, so overpayments
    count in full.
    """
    records = _filtered_records(filters)

    # aliases must not shadow the model's own field names
    sums = {
        'sum_assessment': Coalesce(Sum('total_assessment'), ZERO, output_field=MONEY),
        'sum_discounts': Coalesce(Sum('total_discounts'), ZERO, output_field=MONEY),
        'sum_due': Coalesce(Sum('total_due'), ZERO, output_field=MONEY),
        'sum_collected': Coalesce(
            Sum(ExpressionWrapper(F('total_due') - F('remaining_balance'), output_field=MONEY)),
            ZERO,
            output_field=MONEY,
        ),
        'sum_outstanding': Coalesce(Sum('remaining_balance'), ZERO, output_field=MONEY),
        'record_count': Count('id'),
    }

    totals = _summary_row(records.aggregate(**sums))

    by_term = [
        dict(
            academic_year=row['academic_year__name'],
            semester=row['semester'],
            **_summary_row(row),
        )
        for row in (
            records
            .values('academic_year__name', 'semester')
            .annotate(**sums)
            .order_by('-academic_year__name', 'semester')
        )
    ]

    by_status = {}
    for row in (
        records.values('status')
        .annotate(
            record_count=Count('id'),
            sum_due=Coalesce(Sum('total_due'), ZERO, output_field=MONEY),
            sum_outstanding=Coalesce(Sum('remaining_balance'), ZERO, output_field=MONEY),
        )
        .order_by('status')
    ):
        by_status[row['status']] = {
            'count': row['record_count'],
            'total_due': row['sum_due'],
            'outstanding': row['sum_outstanding'],
        }

    return {
        'totals': totals,
        'by_term': by_term,
        'by_status': by_status,
    }


def _summary_row(row):
    return {
        'record_count': row['record_count'],
        'total_assessment': row['sum_assessment'],
        'total_discounts': row['sum_discounts'],
        'total_due': row['sum_due'],
        'total_collected': row['sum_collected'],
        'total_outstanding': row['sum_outstanding'],
    }


# =============================================================================
# EXPORT
# =============================================================================

EXPORT_HEADERS = [
    'Student ID', 'Student Name', 'Academic Year', 'Semester',
    'Total Assessment', 'Total Discounts', 'Total Due',
    'Amount Paid', 'Remaining Balance', 'Status', 'Scholarship',
]


def export_financial_records_xlsx(filters=None, actor=None):
    """
    Export financial records to an Excel workbook.

    Returns:
        bytes: .xlsx file content
    """
    from utils.audit import log_financial_activity

    records = _filtered_records(filters).order_by('academic_year__name', 'semester', 'student__student_id')

    wb = Workbook()
    ws = wb.active
    ws.title = "Financial Records"

    ws.append(EXPORT_HEADERS)
    for cell in ws[1]:
        cell.fill = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
        cell.font = Font(bold=True, color='FFFFFF')
        cell.alignment = Alignment(horizontal='center')

    count = 0
    for record in records:
        ws.append([
            record.student.student_id,
            record.student.get_full_name(),
            record.academic_year.name,
            record.semester,
            record.total_assessment,
            record.total_discounts,
            record.total_due,
            record.amount_paid,
            record.remaining_balance,
            record.get_status_display(),
            record.get_scholarship_type_display(),
        ])
        count += 1

    for row in ws.iter_rows(min_row=2, min_col=5, max_col=9):
        for cell in row:
            cell.number_format = '#,##0.00'

    for column_cells in ws.columns:
        width = max(len(str(cell.value or '')) for cell in column_cells)
        ws.column_dimensions[column_cells[0].column_letter].width = min(width + 2, 40)

    output = BytesIO()
    wb.save(output)

    log_financial_activity(
        'FINANCIAL_DATA_EXPORT',
        actor=actor,
        additional_data={'records': count, 'filters': {k: str(v) for k, v in (filters or {}).items()}},
        notes=f"Exported {count} financial records",
    )
    logger.info(f"Exported {count} financial records to xlsx")
    return output.getvalue()
