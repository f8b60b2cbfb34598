from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from academics.models import Enrollment, EnrolledSubject
from academics.services import EnrollmentService
from academics.utils import recompute_balance
from utils.context import RequestContext

pytestmark = pytest.mark.django_db

IN_REGULAR_PERIOD = date(2026, 6, 10)
IN_LATE_PERIOD = date(2026, 6, 20)
AFTER_ENROLLMENT = date(2026, 8, 1)


@pytest.fixture
def subjects(make_subject):
    return [
        make_subject('IT101', lecture_units=3),
        make_subject('IT102', lecture_units=2, lab_units=1),
    ]


@pytest.fixture
def enrollment(student, academic_year, first_semester, subjects, financial_settings):
    return EnrollmentService.submit_enrollment(
        student, academic_year, '1st',
        [{'subject': s, 'section': 'A'} for s in subjects],
        now=IN_REGULAR_PERIOD,
    )


@pytest.fixture
def plain_enrollment(student, academic_year):
    return Enrollment.objects.create(
        student=student, academic_year=academic_year, semester='1st',
        year_level=1, department='BSIT', program='BSIT',
    )


# =============================================================================
# SUBMISSION
# =============================================================================

def test_submit_creates_pending_enrollment_and_financial_record(enrollment, student):
    assert enrollment.status == 'pending'
    assert enrollment.program == 'BSIT'
    assert enrollment.enrolled_subjects.count() == 2

    record = enrollment.financial_record
    assert record.student == student
    assert record.tuition_total == Decimal('6000.00')
    assert record.total_assessment == Decimal('7800.00')

    assert enrollment.tuition_fee == Decimal('6000.00')
    assert enrollment.misc_fees == Decimal('1300.00')
    assert enrollment.lab_fees == Decimal('500.00')
    assert enrollment.total_fees == Decimal('7800.00')
    assert enrollment.balance == Decimal('7800.00')


def test_late_submission_adds_penalty(student, academic_year, first_semester, subjects, financial_settings):
    enrollment = EnrollmentService.submit_enrollment(
        student, academic_year, '1st', [{'subject': subjects[0], 'section': 'B'}],
        now=IN_LATE_PERIOD,
    )
    record = enrollment.financial_record
    assert list(record.other_fees.values_list('amount', flat=True)) == [Decimal('250.00')]
    assert enrollment.misc_fees == Decimal('1550.00')


def test_submission_outside_window_is_rejected(student, academic_year, first_semester, subjects):
    with pytest.raises(ValidationError, match="closed"):
        EnrollmentService.submit_enrollment(
            student, academic_year, '1st', [{'subject': subjects[0], 'section': 'A'}],
            now=AFTER_ENROLLMENT,
        )
    assert Enrollment.objects.count() == 0


def test_window_check_can_be_bypassed(student, academic_year, first_semester, subjects, financial_settings):
    enrollment = EnrollmentService.submit_enrollment(
        student, academic_year, '1st', [{'subject': subjects[0], 'section': 'A'}],
        check_window=False,
    )
    assert enrollment.status == 'pending'


def test_duplicate_enrollment_is_rejected(enrollment, student, academic_year, subjects):
    with pytest.raises(ValidationError, match="Already enrolled"):
        EnrollmentService.submit_enrollment(
            student, academic_year, '1st', [{'subject': subjects[0], 'section': 'A'}],
            check_window=False,
        )


def test_subjects_from_other_departments_are_rejected(student, academic_year, first_semester, make_subject):
    nursing = make_subject('NCM100', department='BSN')
    with pytest.raises(ValidationError, match="invalid"):
        EnrollmentService.submit_enrollment(
            student, academic_year, '1st', [{'subject': nursing, 'section': 'A'}],
            check_window=False,
        )


# =============================================================================
# STATUS
# =============================================================================

def test_approve_stamps_actor_from_context(enrollment, registrar):
    with RequestContext(user=registrar):
        EnrollmentService.approve(enrollment)

    enrollment.refresh_from_db()
    assert enrollment.status == 'approved'
    assert enrollment.approved_by_id == str(registrar.pk)
    assert enrollment.date_approved is not None


def test_reject_records_reason(enrollment, registrar):
    EnrollmentService.reject(enrollment, reason="Incomplete documents", actor=registrar)

    enrollment.refresh_from_db()
    assert enrollment.status == 'rejected'
    assert enrollment.rejected_by_id == str(registrar.pk)
    assert enrollment.rejection_reason == "Incomplete documents"


def test_only_pending_enrollments_change_status(enrollment):
    EnrollmentService.approve(enrollment)
    with pytest.raises(ValidationError):
        EnrollmentService.reject(enrollment, reason="late")
    with pytest.raises(ValidationError):
        EnrollmentService.approve(enrollment)


# =============================================================================
# FINANCIALS
# =============================================================================

def test_enrollment_balance_worked_example(plain_enrollment):
    EnrollmentService.update_fees(plain_enrollment, tuition_fee=3000, misc_fees=575, lab_fees=0)
    EnrollmentService.set_discount(plain_enrollment, 10)
    EnrollmentService.add_payment(plain_enrollment, {'amount': 1000, 'payment_method': 'cash'})

    plain_enrollment.refresh_from_db()
    assert plain_enrollment.total_fees == Decimal('3575.00')
    assert plain_enrollment.balance == Decimal('2217.50')


def test_enrollment_payment_must_be_positive(plain_enrollment):
    with pytest.raises(ValidationError):
        EnrollmentService.add_payment(plain_enrollment, {'amount': 0, 'payment_method': 'cash'})


def test_enrollment_discount_outside_range_is_rejected(plain_enrollment):
    with pytest.raises(ValidationError):
        EnrollmentService.set_discount(plain_enrollment, 120)


def test_recompute_balance_is_stable(plain_enrollment):
    EnrollmentService.update_fees(plain_enrollment, tuition_fee=1000)
    first = recompute_balance(plain_enrollment).balance
    second = recompute_balance(plain_enrollment).balance
    assert first == second == Decimal('1000.00')


# =============================================================================
# SUBJECTS
# =============================================================================

def test_record_grades_derives_final_grade(enrollment):
    row = enrollment.enrolled_subjects.first()
    EnrollmentService.record_grades(row, {'attendance': 100, 'projects': 90, 'midterm': 85})
    assert row.final_grade is None

    EnrollmentService.record_grades(row, {'finals': 88})
    row.refresh_from_db()
    assert row.final_grade == Decimal('89')


def test_unknown_grade_component_is_rejected(enrollment):
    row = enrollment.enrolled_subjects.first()
    with pytest.raises(ValidationError):
        EnrollmentService.record_grades(row, {'recitation': 90})


def test_subject_transitions_only_from_enrolled(enrollment):
    row = enrollment.enrolled_subjects.first()
    EnrollmentService.transition_subject(row, 'completed')
    with pytest.raises(ValidationError):
        EnrollmentService.transition_subject(row, 'dropped')
    with pytest.raises(ValidationError):
        EnrollmentService.transition_subject(enrollment.enrolled_subjects.last(), 'enrolled')


def test_add_drop_reassesses_fees(enrollment, make_subject):
    EnrollmentService.approve(enrollment)
    it102 = enrollment.enrolled_subjects.get(subject__code='IT102').subject
    it103 = make_subject('IT103', lecture_units=3, lab_units=2, total_units=Decimal('4'))

    EnrollmentService.add_drop_subjects(
        enrollment,
        add_subjects=[{'subject': it103, 'section': 'C'}],
        drop_subjects=[it102],
        now=date(2026, 7, 1),
    )

    dropped = enrollment.enrolled_subjects.get(subject=it102)
    assert dropped.status == EnrolledSubject.STATUS_DROPPED
    assert dropped.remarks == "Dropped during add/drop period"

    record = enrollment.financial_record
    record.refresh_from_db()
    assert record.total_units == Decimal('7')
    assert record.tuition_total == Decimal('7000.00')
    assert list(record.laboratory_fees.values_list('subject_code', 'amount')) == [('IT103', Decimal('1000.00'))]

    enrollment.refresh_from_db()
    assert enrollment.tuition_fee == Decimal('7000.00')
    assert enrollment.lab_fees == Decimal('1000.00')


def test_add_drop_outside_window_is_rejected(enrollment, subjects):
    EnrollmentService.approve(enrollment)
    with pytest.raises(ValidationError, match="not currently active"):
        EnrollmentService.add_drop_subjects(enrollment, drop_subjects=[subjects[0]], now=date(2026, 9, 1))


def test_add_drop_requires_approved_enrollment(enrollment, subjects):
    with pytest.raises(ValidationError, match="approved"):
        EnrollmentService.add_drop_subjects(enrollment, drop_subjects=[subjects[0]], now=date(2026, 7, 1))


def test_add_drop_rejects_subject_already_enrolled(enrollment, subjects):
    EnrollmentService.approve(enrollment)

    with pytest.raises(ValidationError, match="IT101"):
        EnrollmentService.add_drop_subjects(
            enrollment, add_subjects=[{'subject': subjects[0], 'section': 'B'}], now=date(2026, 7, 1),
        )

    assert enrollment.enrolled_subjects.filter(subject=subjects[0]).count() == 1
    enrollment.financial_record.refresh_from_db()
    assert enrollment.financial_record.total_units == Decimal('6')


def test_add_drop_can_readd_a_subject_dropped_in_the_same_request(enrollment, subjects):
    EnrollmentService.approve(enrollment)

    EnrollmentService.add_drop_subjects(
        enrollment,
        add_subjects=[{'subject': subjects[0], 'section': 'B'}],
        drop_subjects=[subjects[0]],
        now=date(2026, 7, 1),
    )

    active = enrollment.get_active_subjects().get(subject=subjects[0])
    assert active.section == 'B'


def test_window_bypass_still_requires_approval(enrollment, subjects):
    with pytest.raises(ValidationError, match="approved"):
        EnrollmentService.add_drop_subjects(
            enrollment, drop_subjects=[subjects[0]], check_window=False,
        )

    EnrollmentService.add_drop_subjects(
        enrollment, drop_subjects=[subjects[0]], check_window=False, require_approval=False,
    )
    assert enrollment.get_active_subjects().count() == 1
