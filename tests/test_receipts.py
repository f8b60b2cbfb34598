from decimal import Decimal

import pytest

from academics.models import Enrollment
from academics.services import EnrollmentService
from fees.receipts import (
    PaymentNotFoundError, generate_receipt, generate_enrollment_receipt, render_receipt_pdf,
)
from fees.models import FinancialRecord
from fees.services import FinancialRecordService

pytestmark = pytest.mark.django_db


@pytest.fixture
def record(student, academic_year, financial_settings):
    record = FinancialRecordService.create_record({
        'student': student,
        'academic_year': academic_year,
        'semester': '1st',
        'per_unit_fee': 1000,
        'total_units': 3,
        'miscellaneous_fees': [{'name': 'Registration Fee', 'amount': 500}],
        'laboratory_fees': [{'subject_code': 'IT102', 'amount': 500}],
        'other_fees': [{'name': 'Late Enrollment Penalty', 'amount': 250}],
    })
    FinancialRecordService.add_payment(record, {
        'amount': 1000, 'payment_method': 'cash', 'notes': 'Downpayment',
    })
    FinancialRecordService.add_payment(record, {
        'amount': 750, 'payment_method': 'check', 'check_number': 'CHK-77', 'bank': 'BPI',
    })
    FinancialRecordService.add_payment(record, {
        'amount': 500, 'payment_method': 'online payment', 'reference_number': 'GC-123',
    })
    return record


def test_receipt_fields(record, student):
    receipt = generate_receipt(record, 1)

    assert receipt['receipt_number'] == 'RCPT-000002'
    assert receipt['student_id'] == student.student_id
    assert receipt['student_name'] == 'Maria Santos'
    assert receipt['academic_year'] == '2026-2027'
    assert receipt['semester'] == '1st'
    assert receipt['payment_details'] == {
        'amount': Decimal('750.00'),
        'method': 'check',
        'reference': 'CHK-77',
        'received_by': None,
    }
    assert receipt['breakdown'] == {
        'tuition': Decimal('3000.00'),
        'miscellaneous': Decimal('500.00'),
        'laboratory': Decimal('500.00'),
        'others': Decimal('250.00'),
    }
    assert receipt['total_due'] == Decimal('4250.00')
    assert receipt['previous_payments'] == Decimal('1000.00')
    assert receipt['current_payment'] == Decimal('750.00')
    assert receipt['remaining_balance'] == Decimal('2000.00')


def test_reference_number_preferred_over_check_number(record):
    assert generate_receipt(record, 2)['payment_details']['reference'] == 'GC-123'
    assert generate_receipt(record, 0)['payment_details']['reference'] is None


def test_first_receipt_has_no_previous_payments(record):
    receipt = generate_receipt(record, 0)
    assert receipt['previous_payments'] == Decimal('0.00')
    assert receipt['notes'] == 'Downpayment'


def test_previous_payments_sum_lower_indices(record):
    assert generate_receipt(record, 2)['previous_payments'] == Decimal('1750.00')


@pytest.mark.parametrize('index', [-1, 3, 99])
def test_out_of_range_index_raises_without_mutation(record, index):
    before = FinancialRecord.objects.values().get(pk=record.pk)

    with pytest.raises(PaymentNotFoundError, match="Payment not found"):
        generate_receipt(record, index)

    assert FinancialRecord.objects.values().get(pk=record.pk) == before
    assert record.payments.count() == 3


def test_receipt_on_record_without_payments(student, academic_year, financial_settings):
    empty = FinancialRecordService.create_record({
        'student': student, 'academic_year': academic_year, 'semester': '2nd',
    })
    with pytest.raises(PaymentNotFoundError):
        generate_receipt(empty, 0)


def test_payment_not_found_is_a_lookup_error():
    assert issubclass(PaymentNotFoundError, LookupError)


def test_enrollment_receipt(student, academic_year, registrar):
    enrollment = Enrollment.objects.create(
        student=student, academic_year=academic_year, semester='1st',
        year_level=1, department='BSIT', program='BSIT',
    )
    EnrollmentService.update_fees(enrollment, tuition_fee=3000, misc_fees=575, lab_fees=0)
    EnrollmentService.set_discount(enrollment, 10)
    EnrollmentService.add_payment(enrollment, {'amount': 1000, 'payment_method': 'cash'}, actor=registrar)
    EnrollmentService.add_payment(
        enrollment, {'amount': 500, 'payment_method': 'bank transfer', 'reference_number': 'BDO-9'}
    )

    receipt = generate_enrollment_receipt(enrollment, 1)

    assert receipt['receipt_number'] == 'BDO-9'
    assert receipt['total_due'] == Decimal('3217.50')
    assert receipt['previous_payments'] == Decimal('1000.00')
    assert receipt['current_payment'] == Decimal('500.00')
    assert receipt['remaining_balance'] == Decimal('1717.50')
    assert receipt['breakdown']['others'] == Decimal('0.00')
    assert generate_enrollment_receipt(enrollment, 0)['payment_details']['received_by'] == str(registrar.pk)

    with pytest.raises(PaymentNotFoundError):
        generate_enrollment_receipt(enrollment, 2)


def test_receipt_pdf_renders(record, school_config):
    pdf = render_receipt_pdf(generate_receipt(record, 0))
    assert pdf.startswith(b'%PDF')
    assert len(pdf) > 1000
