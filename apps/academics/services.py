# academics/services.py

"""
Enrollment Services

Workflows with database writes:
- Enrollment submission (window, duplicate and department checks; fee assessment)
- Approval / rejection
- Enrollment-level payments, fees and discount
- Grade recording and subject status transitions
- Add/drop with fee re-assessment

For pure calculations and queries, see academics/utils.py
"""

from django.db import transaction
from django.core.exceptions import ValidationError
import logging

from academics.models import (
    Enrollment, EnrolledSubject, EnrollmentPayment, Subject, Semester,
)
from academics.utils import (
    resolve_current_term, get_enrollment_window, is_add_drop_open,
    recompute_balance, calculate_final_grade,
)
from core.utils import get_school_current_time, safe_decimal, round_to_currency
from fees.ledger import sum_amounts
from fees.utils import next_position
from utils.audit import log_financial_activity
from utils.context import resolve_actor_id

logger = logging.getLogger(__name__)

ENROLLMENT_FEE_FIELDS = [
    'tuition_fee', 'misc_fees', 'lab_fees', 'total_fees', 'balance',
    'updated_at', 'updated_by_id',
]

SUBJECT_TRANSITIONS = {
    EnrolledSubject.STATUS_ENROLLED: {
        EnrolledSubject.STATUS_DROPPED,
        EnrolledSubject.STATUS_INCOMPLETE,
        EnrolledSubject.STATUS_COMPLETED,
    },
}


class EnrollmentService:
    """
    Enrollment lifecycle. Every financial mutation ends with
    recompute_balance().
    """

    # -------------------------------------------------------------------------
    # SUBMISSION
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def submit_enrollment(student, academic_year, semester, subjects,
                          program=None, check_window=True, now=None):
        """
        Submit a pending enrollment and create its financial record.

        Args:
            student: StudentProfile
            academic_year: AcademicYear
            semester: '1st' | '2nd' | 'Summer'
            subjects: list of {'subject': Subject, 'section': str,
                'teacher': TeacherProfile (optional)}
            program: defaults to the student's program, then department
            check_window: False lets registrars enroll outside the period

        Returns:
            Enrollment instance

        Raises:
            ValidationError: closed window, duplicate enrollment, or
                subjects outside the student's department.
        """
        from fees.services import FinancialRecordService

        window = {'open': True, 'is_late': False, 'penalty_fee': None}
        if check_window:
            term = EnrollmentService._term_for(academic_year, semester, now)
            window = get_enrollment_window(term, now)
            if not window['open']:
                raise ValidationError("Enrollment is currently closed")

        if Enrollment.objects.filter(
            student=student, academic_year=academic_year, semester=semester
        ).exists():
            raise ValidationError("Already enrolled for this semester")

        subject_objs = EnrollmentService._validate_subjects(student, subjects)

        enrollment = Enrollment.objects.create(
            student=student,
            academic_year=academic_year,
            semester=semester,
            year_level=student.year_level,
            department=student.department,
            program=program or student.program or student.department,
            status=Enrollment.STATUS_PENDING,
            date_submitted=get_school_current_time(),
        )
        for row in subjects:
            EnrolledSubject.objects.create(
                enrollment=enrollment,
                subject=row['subject'],
                section=row['section'],
                teacher=row.get('teacher'),
            )

        FinancialRecordService.create_for_enrollment(
            enrollment, subject_objs, penalty_fee=window.get('penalty_fee')
        )

        logger.info(
            f"Enrollment submitted for {student.student_id} {academic_year} {semester} "
            f"({len(subject_objs)} subjects{', late' if window.get('is_late') else ''})"
        )
        return enrollment

    @staticmethod
    def _term_for(academic_year, semester, now=None):
        term = resolve_current_term(now)
        if term is None or term.academic_year != academic_year:
            return None
        semester_obj = Semester.objects.filter(academic_year=academic_year, name=semester).first()
        return term._replace(semester=semester_obj)

    @staticmethod
    def _validate_subjects(student, subjects):
        subject_objs = [row['subject'] for row in subjects]
        if not subject_objs:
            raise ValidationError("At least one subject is required")

        valid = Subject.objects.filter(
            pk__in=[s.pk for s in subject_objs],
            department=student.department,
        ).count()
        if valid != len(subject_objs):
            raise ValidationError("One or more subjects are invalid")
        return subject_objs

    @staticmethod
    def sync_fees_from_record(enrollment, record):
        """
        Mirror the record's assessment onto the enrollment summary.
        Misc fees carry the record's other fees (late penalty included).
        Called from every financial record recompute.
        """
        subtotals = record.get_subtotals()
        enrollment.tuition_fee = subtotals['tuition']
        enrollment.misc_fees = sum_amounts([subtotals['miscellaneous'], subtotals['other']])
        enrollment.lab_fees = subtotals['laboratory']
        recompute_balance(enrollment, update_fields=ENROLLMENT_FEE_FIELDS)

    # -------------------------------------------------------------------------
    # STATUS
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def approve(enrollment, actor=None, notes=None, automated=False):
        """Approve a pending enrollment."""
        EnrollmentService._require_pending(enrollment, 'approved')

        enrollment.status = Enrollment.STATUS_APPROVED
        enrollment.date_approved = get_school_current_time()
        enrollment.approved_by_id = resolve_actor_id(actor)
        if notes:
            enrollment.notes = notes
        enrollment.save()

        log_financial_activity(
            'ENROLLMENT_APPROVE',
            actor=enrollment.approved_by_id,
            target_object=enrollment,
            student=enrollment.student,
            new_values={'status': enrollment.status},
            is_automated=automated,
        )
        logger.info(f"Enrollment {enrollment.pk} approved by {enrollment.approved_by_id or 'system'}")
        return enrollment

    @staticmethod
    @transaction.atomic
    def reject(enrollment, reason='', actor=None, notes=None):
        """Reject a pending enrollment."""
        EnrollmentService._require_pending(enrollment, 'rejected')

        enrollment.status = Enrollment.STATUS_REJECTED
        enrollment.date_rejected = get_school_current_time()
        enrollment.rejected_by_id = resolve_actor_id(actor)
        enrollment.rejection_reason = reason or ''
        if notes:
            enrollment.notes = notes
        enrollment.save()

        log_financial_activity(
            'ENROLLMENT_REJECT',
            actor=enrollment.rejected_by_id,
            target_object=enrollment,
            student=enrollment.student,
            new_values={'status': enrollment.status, 'reason': enrollment.rejection_reason},
        )
        logger.info(f"Enrollment {enrollment.pk} rejected: {enrollment.rejection_reason}")
        return enrollment

    @staticmethod
    def _require_pending(enrollment, target):
        if enrollment.status != Enrollment.STATUS_PENDING:
            raise ValidationError(
                f"Only pending enrollments can be {target} (current status: {enrollment.status})"
            )

    # -------------------------------------------------------------------------
    # FINANCIALS
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def add_payment(enrollment, payment_data, actor=None):
        """
        Record a payment on the enrollment and recompute its balance.

        Args:
            payment_data (dict): amount, payment_method; optional
                payment_date, reference_number, notes
        """
        amount = safe_decimal(payment_data.get('amount'))
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")

        method = payment_data.get('payment_method')
        if method not in dict(EnrollmentPayment.METHOD_CHOICES):
            raise ValidationError(f"Unsupported payment method: {method!r}")

        payment = EnrollmentPayment.objects.create(
            enrollment=enrollment,
            position=next_position(enrollment.payments.all()),
            amount=round_to_currency(amount),
            payment_date=payment_data.get('payment_date') or get_school_current_time(),
            payment_method=method,
            reference_number=payment_data.get('reference_number', ''),
            received_by_id=resolve_actor_id(actor),
            notes=payment_data.get('notes', ''),
        )
        recompute_balance(enrollment)

        log_financial_activity(
            'PAYMENT_RECEIVE',
            actor=payment.received_by_id,
            target_object=enrollment,
            amount=payment.amount,
            student=enrollment.student,
            new_values={'balance': str(enrollment.balance)},
        )
        logger.info(f"Enrollment {enrollment.pk} payment {payment.amount}; balance {enrollment.balance}")
        return payment

    @staticmethod
    @transaction.atomic
    def update_fees(enrollment, tuition_fee=None, misc_fees=None, lab_fees=None, actor=None):
        old_total = enrollment.total_fees
        if tuition_fee is not None:
            enrollment.tuition_fee = round_to_currency(tuition_fee)
        if misc_fees is not None:
            enrollment.misc_fees = round_to_currency(misc_fees)
        if lab_fees is not None:
            enrollment.lab_fees = round_to_currency(lab_fees)
        enrollment.full_clean(validate_unique=False)
        recompute_balance(enrollment)

        log_financial_activity(
            'FEES_UPDATE',
            actor=actor,
            target_object=enrollment,
            amount=enrollment.total_fees,
            student=enrollment.student,
            old_values={'total_fees': str(old_total)},
            new_values={'total_fees': str(enrollment.total_fees)},
        )
        return enrollment

    @staticmethod
    @transaction.atomic
    def set_discount(enrollment, percentage, scholarship_type=None, actor=None):
        old_discount = enrollment.discount
        enrollment.discount = safe_decimal(percentage)
        if scholarship_type is not None:
            enrollment.scholarship_type = scholarship_type
        enrollment.full_clean(validate_unique=False)
        recompute_balance(enrollment)

        log_financial_activity(
            'DISCOUNT_APPLY',
            actor=actor,
            target_object=enrollment,
            student=enrollment.student,
            old_values={'discount': str(old_discount)},
            new_values={'discount': str(enrollment.discount), 'balance': str(enrollment.balance)},
            risk_level='MEDIUM',
        )
        return enrollment

    # -------------------------------------------------------------------------
    # GRADES & SUBJECT STATUS
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def record_grades(enrolled_subject, grades, weights=None):
        """
        Update grade components and re-derive the final grade.

        Args:
            grades (dict): any of attendance, quizzes, assignments,
                projects, midterm, finals (0-100)
        """
        for name, value in grades.items():
            if name not in EnrolledSubject.GRADE_COMPONENTS:
                raise ValidationError(f"Unknown grade component: {name}")
            setattr(enrolled_subject, name, None if value is None else safe_decimal(value))

        enrolled_subject.final_grade = calculate_final_grade(
            enrolled_subject.get_grade_components(), weights
        )
        enrolled_subject.full_clean(validate_unique=False)
        enrolled_subject.save()

        logger.info(
            f"Grades recorded for {enrolled_subject.subject.code} "
            f"({enrolled_subject.enrollment.student.student_id}): final {enrolled_subject.final_grade}"
        )
        return enrolled_subject

    @staticmethod
    @transaction.atomic
    def transition_subject(enrolled_subject, new_status, remarks=None):
        """Move an enrolled subject to dropped/incomplete/completed."""
        allowed = SUBJECT_TRANSITIONS.get(enrolled_subject.status, set())
        if new_status not in allowed:
            raise ValidationError(
                f"Cannot change subject status from {enrolled_subject.status} to {new_status}"
            )

        enrolled_subject.status = new_status
        if remarks is not None:
            enrolled_subject.remarks = remarks
        enrolled_subject.save()
        logger.info(f"Subject {enrolled_subject.subject.code} on enrollment {enrolled_subject.enrollment_id} -> {new_status}")
        return enrolled_subject

    # -------------------------------------------------------------------------
    # ADD / DROP
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def add_drop_subjects(enrollment, add_subjects=None, drop_subjects=None,
                          check_window=True, require_approval=True, now=None):
        """
        Drop and/or add subjects during the add/drop period, then
        re-assess tuition units and lab fees from the active subjects.

        Args:
            add_subjects: list of {'subject', 'section', 'teacher'}
            drop_subjects: list of Subject instances
            check_window: False lets registrars bypass the period
            require_approval: False lets registrars edit a pending enrollment

        Returns:
            Enrollment instance

        Raises:
            ValidationError: not approved, period closed or undefined, or
                an added subject that is already actively enrolled.
        """
        from fees.services import FinancialRecordService

        add_subjects = add_subjects or []
        drop_subjects = drop_subjects or []

        if require_approval and enrollment.status != Enrollment.STATUS_APPROVED:
            raise ValidationError("Cannot modify subjects. Enrollment must be approved first")

        if check_window:
            semester = Semester.objects.filter(
                academic_year=enrollment.academic_year, name=enrollment.semester
            ).first()
            if semester is None or not semester.has_add_drop_period:
                raise ValidationError("Add/Drop period not defined")
            if not is_add_drop_open(semester, now):
                raise ValidationError("Add/Drop period is not currently active")

        for subject in drop_subjects:
            rows = enrollment.enrolled_subjects.filter(
                subject=subject, status=EnrolledSubject.STATUS_ENROLLED
            )
            for row in rows:
                EnrollmentService.transition_subject(
                    row, EnrolledSubject.STATUS_DROPPED, remarks="Dropped during add/drop period"
                )

        if add_subjects:
            EnrollmentService._validate_subjects(enrollment.student, add_subjects)
            active_codes = {row.subject.code for row in enrollment.get_active_subjects()}
            duplicates = sorted(
                row['subject'].code for row in add_subjects if row['subject'].code in active_codes
            )
            if duplicates or len({row['subject'].pk for row in add_subjects}) != len(add_subjects):
                raise ValidationError(
                    f"Subject already enrolled: {', '.join(duplicates) or 'duplicate in request'}"
                )
            for row in add_subjects:
                EnrolledSubject.objects.create(
                    enrollment=enrollment,
                    subject=row['subject'],
                    section=row['section'],
                    teacher=row.get('teacher'),
                    remarks="Added during add/drop period",
                )

        record = getattr(enrollment, 'financial_record', None)
        if record is not None:
            active = [row.subject for row in enrollment.get_active_subjects()]
            total_units, lab_fees = FinancialRecordService.build_subject_assessment(active)
            FinancialRecordService.update_fees(record, {
                'total_units': total_units,
                'laboratory_fees': lab_fees,
            })

        logger.info(
            f"Add/drop on enrollment {enrollment.pk}: +{len(add_subjects)} -{len(drop_subjects)}"
        )
        return enrollment
