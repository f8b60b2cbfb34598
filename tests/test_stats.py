from decimal import Decimal
from io import BytesIO

import pytest
from openpyxl import load_workbook

from academics.models import Enrollment
from academics.stats import get_enrollment_summary
from fees.services import FinancialRecordService
from fees.stats import get_financial_summary, export_financial_records_xlsx, EXPORT_HEADERS
from utils.models import FinancialAuditLog

pytestmark = pytest.mark.django_db


@pytest.fixture
def records(make_student, academic_year, financial_settings):
    def create(student, semester, units):
        return FinancialRecordService.create_record({
            'student': student,
            'academic_year': academic_year,
            'semester': semester,
            'per_unit_fee': 1000,
            'total_units': units,
        })

    first = create(make_student(), '1st', 3)
    second = create(make_student(), '1st', 2)
    summer = create(make_student(), 'Summer', 1)

    FinancialRecordService.add_payment(first, {'amount': 1000, 'payment_method': 'cash'})
    FinancialRecordService.add_payment(second, {'amount': 2000, 'payment_method': 'cash'})
    return first, second, summer


def test_summary_totals(records):
    summary = get_financial_summary()

    totals = summary['totals']
    assert totals['record_count'] == 3
    assert totals['total_assessment'] == Decimal('6000.00')
    assert totals['total_due'] == Decimal('6000.00')
    assert totals['total_collected'] == Decimal('3000.00')
    assert totals['total_outstanding'] == Decimal('3000.00')


def test_summary_status_breakdown(records):
    by_status = get_financial_summary()['by_status']
    assert by_status['fully paid']['count'] == 1
    assert by_status['partially paid']['count'] == 1
    assert by_status['pending']['count'] == 1
    assert by_status['pending']['outstanding'] == Decimal('1000.00')


def test_summary_filtered_by_semester(records, academic_year):
    summary = get_financial_summary({'academic_year': academic_year, 'semester': '1st'})
    assert summary['totals']['record_count'] == 2
    assert summary['totals']['total_collected'] == Decimal('3000.00')
    assert [row['semester'] for row in summary['by_term']] == ['1st']


def test_summary_of_nothing_is_zero(db):
    totals = get_financial_summary()['totals']
    assert totals['record_count'] == 0
    assert totals['total_due'] == Decimal('0.00')


def test_export_writes_one_row_per_record(records):
    content = export_financial_records_xlsx({'semester': '1st'})

    ws = load_workbook(BytesIO(content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert list(rows[0]) == EXPORT_HEADERS
    assert len(rows) == 3
    assert FinancialAuditLog.objects.filter(action='FINANCIAL_DATA_EXPORT').count() == 1


def test_summary_by_term_uses_readable_keys(records):
    (row,) = get_financial_summary({'semester': 'Summer'})['by_term']
    assert row['academic_year'] == '2026-2027'
    assert row['total_due'] == Decimal('1000.00')
    assert row['total_collected'] == Decimal('0.00')


# =============================================================================
# ENROLLMENT SUMMARY
# =============================================================================

@pytest.fixture
def enrollments(make_student, academic_year):
    def enroll(student, semester, status='pending'):
        return Enrollment.objects.create(
            student=student, academic_year=academic_year, semester=semester,
            year_level=student.year_level, department=student.department,
            program=student.department, status=status,
        )

    return [
        enroll(make_student(), '1st'),
        enroll(make_student(year_level=2), '1st', status='approved'),
        enroll(make_student(department='BSN', student_id='m26-160-101'), '1st', status='approved'),
        enroll(make_student(), '2nd', status='rejected'),
    ]


def test_enrollment_summary_breakdowns(enrollments):
    summary = get_enrollment_summary()

    assert summary['total'] == 4
    assert summary['by_status'] == [
        {'status': 'approved', 'count': 2},
        {'status': 'pending', 'count': 1},
        {'status': 'rejected', 'count': 1},
    ]
    assert summary['by_department'] == [
        {'department': 'BSIT', 'count': 3},
        {'department': 'BSN', 'count': 1},
    ]
    assert summary['by_year_level'] == [
        {'year_level': 1, 'count': 3},
        {'year_level': 2, 'count': 1},
    ]


def test_enrollment_summary_filters(enrollments, academic_year):
    summary = get_enrollment_summary({'academic_year': academic_year, 'semester': '2nd'})
    assert summary['total'] == 1
    assert summary['by_status'] == [{'status': 'rejected', 'count': 1}]

    assert get_enrollment_summary({'semester': 'Summer'})['total'] == 0
