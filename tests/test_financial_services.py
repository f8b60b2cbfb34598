from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from academics.models import Enrollment
from fees.models import FinancialRecord, LedgerPayment
from fees.services import FinancialRecordService, recompute_financial_record
from utils.context import RequestContext
from utils.models import FinancialAuditLog

pytestmark = pytest.mark.django_db


@pytest.fixture
def record(student, academic_year, financial_settings):
    return FinancialRecordService.create_record({
        'student': student,
        'academic_year': academic_year,
        'semester': '1st',
        'per_unit_fee': 1000,
        'total_units': 3,
        'miscellaneous_fees': [
            {'name': 'Registration Fee', 'amount': 500},
            {'name': 'ID Fee', 'amount': 75},
        ],
    })


def test_create_record_computes_assessment(record):
    assert record.tuition_total == Decimal('3000.00')
    assert record.total_assessment == Decimal('3575.00')
    assert record.total_due == Decimal('3575.00')
    assert record.remaining_balance == Decimal('3575.00')
    assert record.status == 'pending'
    assert FinancialAuditLog.objects.filter(action='RECORD_CREATE').count() == 1


def test_duplicate_record_for_term_is_rejected(record, student, academic_year):
    with pytest.raises(ValidationError):
        FinancialRecordService.create_record({
            'student': student, 'academic_year': academic_year, 'semester': '1st',
        })


def test_worked_example_discount_then_payment(record):
    FinancialRecordService.add_discount(record, {'discount_type': 'academic', 'percentage': 10})
    FinancialRecordService.add_payment(record, {'amount': 1000, 'payment_method': 'cash'})

    record.refresh_from_db()
    assert record.total_discounts == Decimal('357.50')
    assert record.total_due == Decimal('3217.50')
    assert record.remaining_balance == Decimal('2217.50')
    assert record.status == 'partially paid'


def test_percentage_discount_amount_tracks_assessment(record):
    discount = FinancialRecordService.add_discount(record, {'discount_type': 'sibling', 'percentage': 10})
    assert discount.amount == Decimal('357.50')

    FinancialRecordService.update_fees(record, {'total_units': 4})
    discount.refresh_from_db()
    assert discount.amount == Decimal('457.50')


def test_payment_gets_sequential_receipt_numbers_and_positions(record, registrar):
    with RequestContext(user=registrar):
        first = FinancialRecordService.add_payment(record, {'amount': 500, 'payment_method': 'cash'})
    second = FinancialRecordService.add_payment(
        record, {'amount': 250, 'payment_method': 'check', 'check_number': 'CHK-1'}, actor=registrar
    )

    assert first.receipt_number == 'RCPT-000001'
    assert second.receipt_number == 'RCPT-000002'
    assert (first.position, second.position) == (0, 1)
    assert first.received_by_id == str(registrar.pk)
    assert second.received_by_id == str(registrar.pk)


@pytest.mark.parametrize('amount', [0, -100, None])
def test_non_positive_payment_is_rejected(record, amount):
    with pytest.raises(ValidationError):
        FinancialRecordService.add_payment(record, {'amount': amount, 'payment_method': 'cash'})
    assert LedgerPayment.objects.count() == 0


def test_unknown_payment_method_is_rejected(record):
    with pytest.raises(ValidationError):
        FinancialRecordService.add_payment(record, {'amount': 100, 'payment_method': 'barter'})


def test_overpayment_is_not_clamped(record):
    FinancialRecordService.add_payment(record, {'amount': 4000, 'payment_method': 'bank transfer'})
    record.refresh_from_db()
    assert record.remaining_balance == Decimal('-425.00')
    assert record.status == 'fully paid'
    assert record.amount_paid == Decimal('4000.00')


def test_scholarship_stacks_with_discount(record):
    FinancialRecordService.add_discount(record, {'discount_type': 'promotional', 'amount': 100})
    FinancialRecordService.set_scholarship(record, {
        'type': 'academic',
        'name': "Dean's Lister",
        'coverage': {'tuition': 50},
    })

    record.refresh_from_db()
    assert record.total_discounts == Decimal('1600.00')
    assert record.total_due == Decimal('1975.00')
    assert FinancialAuditLog.objects.filter(action='SCHOLARSHIP_APPLY').exists()


def test_removing_scholarship_restores_due(record):
    FinancialRecordService.set_scholarship(record, {'type': 'government', 'coverage': {'tuition': 100}})
    FinancialRecordService.set_scholarship(record, {'type': 'none'})

    record.refresh_from_db()
    assert record.total_due == Decimal('3575.00')
    assert record.tuition_coverage == Decimal('0')
    assert FinancialAuditLog.objects.filter(action='SCHOLARSHIP_REMOVE').exists()


def test_coverage_above_hundred_is_rejected(record):
    with pytest.raises(ValidationError):
        FinancialRecordService.set_scholarship(record, {'type': 'private', 'coverage': {'tuition': 150}})


def test_overdue_when_unpaid_past_due_date(record):
    record.due_date = date(2026, 6, 30)
    recompute_financial_record(record, today=date(2026, 7, 1))
    assert record.status == 'overdue'


def test_recompute_is_idempotent(record):
    FinancialRecordService.add_discount(record, {'discount_type': 'employee', 'percentage': 25})
    before = FinancialRecord.objects.values().get(pk=record.pk)
    recompute_financial_record(record)
    after = FinancialRecord.objects.values().get(pk=record.pk)
    before.pop('updated_at')
    after.pop('updated_at')
    assert before == after


def test_payment_is_audited(record, registrar):
    FinancialRecordService.add_payment(record, {'amount': 1000, 'payment_method': 'cash'}, actor=registrar)
    log = FinancialAuditLog.objects.get(action='PAYMENT_RECEIVE')
    assert log.amount_involved == Decimal('1000.00')
    assert log.user_id == str(registrar.pk)
    assert log.student_number == record.student.student_id
    assert log.currency == 'PHP'


def test_full_payment_approves_pending_enrollment(student, academic_year, make_subject, registrar):
    enrollment = Enrollment.objects.create(
        student=student, academic_year=academic_year, semester='1st',
        year_level=1, department='BSIT', program='BSIT',
    )
    record = FinancialRecordService.create_for_enrollment(enrollment, [make_subject('IT101')])

    FinancialRecordService.add_payment(
        record, {'amount': record.total_due, 'payment_method': 'cash'}, actor=registrar
    )

    enrollment.refresh_from_db()
    assert enrollment.status == 'approved'
    assert enrollment.approved_by_id == str(registrar.pk)
    assert enrollment.date_approved is not None


def test_create_for_enrollment_uses_fee_schedule(student, academic_year, make_subject, financial_settings):
    enrollment = Enrollment.objects.create(
        student=student, academic_year=academic_year, semester='1st',
        year_level=1, department='BSIT', program='BSIT',
    )
    subjects = [
        make_subject('IT101', lecture_units=3),
        make_subject('IT102', lecture_units=2, lab_units=1),
        make_subject('GE100', lecture_units=0, total_units=Decimal('0')),
    ]

    record = FinancialRecordService.create_for_enrollment(enrollment, subjects, penalty_fee=Decimal('250'))

    assert record.total_units == Decimal('9')
    assert record.tuition_total == Decimal('9000.00')
    assert list(record.miscellaneous_fees.values_list('name', flat=True)) == [
        'Registration Fee', 'Library Fee', 'Computer Fee',
    ]
    assert list(record.laboratory_fees.values_list('subject_code', 'amount')) == [('IT102', Decimal('500.00'))]
    assert list(record.other_fees.values_list('amount', flat=True)) == [Decimal('250.00')]
    assert record.total_assessment == Decimal('11050.00')
    assert record.enrollment == enrollment


def test_direct_record_edits_keep_enrollment_fees_in_sync(student, academic_year, make_subject, financial_settings):
    enrollment = Enrollment.objects.create(
        student=student, academic_year=academic_year, semester='1st',
        year_level=1, department='BSIT', program='BSIT',
    )
    FinancialRecordService.create_for_enrollment(enrollment, [make_subject('IT101')])

    # a fresh instance, as a registrar screen would load it
    record = FinancialRecord.objects.get(enrollment=enrollment)
    FinancialRecordService.update_fees(record, {
        'other_fees': [{'name': 'Transcript Fee', 'amount': 999}],
    })

    enrollment.refresh_from_db()
    assert enrollment.tuition_fee == Decimal('3000.00')
    assert enrollment.misc_fees == Decimal('2299.00')
    assert enrollment.total_fees == record.total_assessment == Decimal('5299.00')
    assert enrollment.balance == Decimal('5299.00')
    assert enrollment.status == 'pending'

    FinancialRecordService.update_fees(record, {'total_units': 6})
    enrollment.refresh_from_db()
    assert enrollment.tuition_fee == Decimal('6000.00')
    assert enrollment.balance == Decimal('8299.00')
