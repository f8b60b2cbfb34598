# fees/services.py

"""
Financial Record Operations

Creates and mutates per-term financial records: fee assessment, payments,
discounts and scholarships. Every mutation ends with
recompute_financial_record() so the derived totals never go stale.

For the pure arithmetic see fees/ledger.py; for receipts see
fees/receipts.py.
"""

from decimal import Decimal
from django.db import transaction
from django.core.exceptions import ValidationError
import logging

from core.models import FinancialSettings
from core.utils import get_school_current_time, get_school_today, safe_decimal, round_to_currency
from fees.ledger import compute_ledger, STATUS_FULLY_PAID, NO_SCHOLARSHIP, FEE_CATEGORIES
from fees.models import (
    FinancialRecord, MiscellaneousFee, LaboratoryFee, OtherFee,
    FeeDiscount, LedgerPayment,
)
from fees.utils import generate_receipt_number, next_position
from utils.audit import log_financial_activity
from utils.context import resolve_actor_id

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_UNITS = Decimal('3')


# =============================================================================
# RECOMPUTE
# =============================================================================

def recompute_financial_record(record, today=None):
    """
    Write every derived field of a financial record from its lines.

    Percentage discounts get their amount rewritten from the assessment.
    A linked enrollment gets its fee summary mirrored from the result.
    Idempotent: calling it twice without changes leaves the record as is.

    Returns:
        FinancialRecord: the saved record
    """
    discounts = list(record.discounts.all())

    ledger = compute_ledger(
        base_fee=record.base_fee,
        per_unit_fee=record.per_unit_fee,
        total_units=record.total_units,
        miscellaneous_fees=record.miscellaneous_fees.values_list('amount', flat=True),
        laboratory_fees=record.laboratory_fees.values_list('amount', flat=True),
        other_fees=record.other_fees.values_list('amount', flat=True),
        discounts=[(d.percentage, d.amount) for d in discounts],
        scholarship_type=record.scholarship_type,
        scholarship_coverage=record.get_scholarship_coverage(),
        payments=record.payments.values_list('amount', flat=True),
        due_date=record.due_date,
        today=today or get_school_today(),
    )

    for discount, amount in zip(discounts, ledger['discount_amounts']):
        if discount.amount != amount:
            discount.amount = amount
            discount.save(update_fields=['amount'])

    previous_status = record.status

    record.tuition_total = ledger['tuition_total']
    record.total_assessment = ledger['total_assessment']
    record.total_discounts = ledger['total_discounts']
    record.total_due = ledger['total_due']
    record.remaining_balance = ledger['remaining_balance']
    record.status = ledger['status']
    record.save()

    if previous_status != record.status:
        logger.info(f"Financial record {record.pk} status {previous_status} -> {record.status}")

    if record.enrollment_id:
        from academics.services import EnrollmentService
        EnrollmentService.sync_fees_from_record(record.enrollment, record)

    return record


# =============================================================================
# FINANCIAL RECORD SERVICE
# =============================================================================

class FinancialRecordService:
    """
    Ledger workflows for a student's term.
    """

    @staticmethod
    @transaction.atomic
    def create_record(record_data):
        """
        Create a financial record with its fee lines.

        Args:
            record_data (dict):
                Required:
                    - student: StudentProfile
                    - academic_year: AcademicYear
                    - semester: '1st' | '2nd' | 'Summer'
                Optional:
                    - enrollment: Enrollment
                    - base_fee, per_unit_fee, total_units
                    - miscellaneous_fees: [{'name', 'amount', 'description'}]
                    - laboratory_fees: [{'subject_code', 'amount'}]
                    - other_fees: [{'name', 'amount', 'description'}]
                    - due_date, notes

        Returns:
            FinancialRecord instance

        Example:
            record = FinancialRecordService.create_record({
                'student': student,
                'academic_year': year,
                'semester': '1st',
                'per_unit_fee': 1000,
                'total_units': 3,
                'miscellaneous_fees': [{'name': 'Registration Fee', 'amount': 500}],
            })
        """
        student = record_data['student']
        academic_year = record_data['academic_year']
        semester = record_data['semester']

        if FinancialRecord.objects.filter(
            student=student, academic_year=academic_year, semester=semester
        ).exists():
            raise ValidationError(
                f"A financial record already exists for {student.student_id} "
                f"in {academic_year} {semester}."
            )

        record = FinancialRecord(
            student=student,
            academic_year=academic_year,
            semester=semester,
            enrollment=record_data.get('enrollment'),
            base_fee=safe_decimal(record_data.get('base_fee')),
            per_unit_fee=safe_decimal(record_data.get('per_unit_fee')),
            total_units=safe_decimal(record_data.get('total_units'), default=Decimal('0')),
            due_date=record_data.get('due_date'),
            notes=record_data.get('notes', ''),
        )
        record.full_clean(exclude=['enrollment'], validate_unique=False)
        record.save()

        FinancialRecordService._replace_fee_lines(record, record_data)
        recompute_financial_record(record)

        log_financial_activity(
            'RECORD_CREATE',
            target_object=record,
            amount=record.total_assessment,
            student=student,
            new_values={'total_assessment': str(record.total_assessment)},
        )
        logger.info(
            f"Created financial record for {student.student_id} {academic_year} {semester}: "
            f"assessment {record.total_assessment}"
        )
        return record

    @staticmethod
    def _replace_fee_lines(record, data):
        """Replace any fee collection present in data."""
        if 'miscellaneous_fees' in data:
            record.miscellaneous_fees.all().delete()
            MiscellaneousFee.objects.bulk_create([
                MiscellaneousFee(
                    record=record,
                    name=fee['name'],
                    amount=round_to_currency(fee['amount']),
                    description=fee.get('description', ''),
                )
                for fee in data['miscellaneous_fees']
            ])
        if 'laboratory_fees' in data:
            record.laboratory_fees.all().delete()
            LaboratoryFee.objects.bulk_create([
                LaboratoryFee(
                    record=record,
                    subject_code=fee.get('subject_code', ''),
                    amount=round_to_currency(fee['amount']),
                )
                for fee in data['laboratory_fees']
            ])
        if 'other_fees' in data:
            record.other_fees.all().delete()
            OtherFee.objects.bulk_create([
                OtherFee(
                    record=record,
                    name=fee['name'],
                    amount=round_to_currency(fee['amount']),
                    description=fee.get('description', ''),
                )
                for fee in data['other_fees']
            ])

    # -------------------------------------------------------------------------
    # PAYMENTS
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def add_payment(record, payment_data, actor=None):
        """
        Post a payment to a financial record.

        Args:
            record: FinancialRecord instance
            payment_data (dict):
                Required:
                    - amount: Decimal
                    - payment_method: one of LedgerPayment.METHOD_CHOICES
                Optional:
                    - payment_date (defaults to now)
                    - receipt_number (auto-generated if not provided)
                    - bank, check_number, reference_number, notes
            actor: who received the payment (defaults to the request context)

        Returns:
            LedgerPayment instance

        Example:
            payment = FinancialRecordService.add_payment(record, {
                'amount': 1000,
                'payment_method': 'cash',
            })
        """
        amount = safe_decimal(payment_data.get('amount'))
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")

        method = payment_data.get('payment_method')
        if method not in dict(LedgerPayment.METHOD_CHOICES):
            raise ValidationError(f"Unsupported payment method: {method!r}")

        received_by_id = resolve_actor_id(actor)
        old_balance = record.remaining_balance

        payment = LedgerPayment.objects.create(
            record=record,
            position=next_position(record.payments.all()),
            receipt_number=payment_data.get('receipt_number') or generate_receipt_number(),
            payment_date=payment_data.get('payment_date') or get_school_current_time(),
            amount=round_to_currency(amount),
            payment_method=method,
            bank=payment_data.get('bank', ''),
            check_number=payment_data.get('check_number', ''),
            reference_number=payment_data.get('reference_number', ''),
            received_by_id=received_by_id,
            notes=payment_data.get('notes', ''),
        )

        recompute_financial_record(record)

        log_financial_activity(
            'PAYMENT_RECEIVE',
            actor=received_by_id,
            target_object=record,
            amount=payment.amount,
            student=record.student,
            old_values={'remaining_balance': str(old_balance)},
            new_values={'remaining_balance': str(record.remaining_balance), 'status': record.status},
            additional_data={'receipt_number': payment.receipt_number, 'method': method},
        )
        logger.info(
            f"Processed payment {payment.receipt_number} for {record.student.student_id}: "
            f"{payment.amount}, remaining {record.remaining_balance}"
        )

        if record.status == STATUS_FULLY_PAID:
            FinancialRecordService._approve_linked_enrollment(record, received_by_id)

        return payment

    @staticmethod
    def _approve_linked_enrollment(record, actor_id):
        enrollment = record.enrollment
        if enrollment is None or not enrollment.is_pending:
            return

        from academics.services import EnrollmentService

        EnrollmentService.approve(enrollment, actor=actor_id, automated=True)
        logger.info(f"Enrollment {enrollment.pk} auto-approved after full payment")

    # -------------------------------------------------------------------------
    # DISCOUNTS & SCHOLARSHIPS
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def add_discount(record, discount_data, actor=None):
        """
        Add a discount line.

        Args:
            discount_data (dict): discount_type, and percentage (0-100) or
                a flat amount; optional description.
        """
        percentage = safe_decimal(discount_data.get('percentage'))
        amount = safe_decimal(discount_data.get('amount'))

        discount = FeeDiscount(
            record=record,
            discount_type=discount_data['discount_type'],
            percentage=percentage,
            amount=amount,
            description=discount_data.get('description', ''),
        )
        discount.full_clean(exclude=['record'])
        discount.save()

        old_due = record.total_due
        recompute_financial_record(record)
        discount.refresh_from_db()

        log_financial_activity(
            'DISCOUNT_APPLY',
            actor=actor,
            target_object=record,
            amount=discount.amount,
            student=record.student,
            old_values={'total_due': str(old_due)},
            new_values={'total_due': str(record.total_due)},
            additional_data={'discount_type': discount.discount_type, 'percentage': str(percentage)},
            risk_level='MEDIUM',
        )
        logger.info(f"Applied {discount} to record {record.pk}; total due {record.total_due}")
        return discount

    @staticmethod
    @transaction.atomic
    def set_scholarship(record, scholarship_data, actor=None):
        """
        Set or clear (type 'none') the record's scholarship.

        Args:
            scholarship_data (dict): type, name, sponsor, and coverage dict
                keyed by tuition/miscellaneous/laboratory/other.
        """
        scholarship_type = scholarship_data.get('type') or NO_SCHOLARSHIP
        coverage = scholarship_data.get('coverage') or {}

        old_values = {
            'type': record.scholarship_type,
            'coverage': {k: str(v) for k, v in record.get_scholarship_coverage().items()},
        }

        record.scholarship_type = scholarship_type
        record.scholarship_name = scholarship_data.get('name', '')
        record.scholarship_sponsor = scholarship_data.get('sponsor', '')
        record.scholarship_contact_person = scholarship_data.get('contact_person', '')
        record.scholarship_sponsor_contact = scholarship_data.get('sponsor_contact', '')
        record.scholarship_notes = scholarship_data.get('notes', '')
        for category in FEE_CATEGORIES:
            setattr(record, f"{category}_coverage", safe_decimal(coverage.get(category)))

        record.full_clean(exclude=['enrollment'], validate_unique=False)
        recompute_financial_record(record)

        action = 'SCHOLARSHIP_REMOVE' if scholarship_type == NO_SCHOLARSHIP else 'SCHOLARSHIP_APPLY'
        log_financial_activity(
            action,
            actor=actor,
            target_object=record,
            amount=record.total_discounts,
            student=record.student,
            old_values=old_values,
            new_values={
                'type': scholarship_type,
                'coverage': {k: str(v) for k, v in record.get_scholarship_coverage().items()},
            },
            risk_level='MEDIUM',
        )
        logger.info(f"Scholarship on record {record.pk} set to {scholarship_type}")
        return record

    # -------------------------------------------------------------------------
    # FEES
    # -------------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def update_fees(record, fee_data, actor=None):
        """
        Update tuition inputs and/or replace fee collections.

        Args:
            fee_data (dict): any of base_fee, per_unit_fee, total_units,
                due_date, miscellaneous_fees, laboratory_fees, other_fees.
        """
        old_assessment = record.total_assessment

        for field in ('base_fee', 'per_unit_fee'):
            if field in fee_data:
                setattr(record, field, safe_decimal(fee_data[field]))
        if 'total_units' in fee_data:
            record.total_units = safe_decimal(fee_data['total_units'], default=Decimal('0'))
        if 'due_date' in fee_data:
            record.due_date = fee_data['due_date']

        record.full_clean(exclude=['enrollment'], validate_unique=False)
        FinancialRecordService._replace_fee_lines(record, fee_data)
        recompute_financial_record(record)

        log_financial_activity(
            'FEES_UPDATE',
            actor=actor,
            target_object=record,
            amount=record.total_assessment,
            student=record.student,
            old_values={'total_assessment': str(old_assessment)},
            new_values={'total_assessment': str(record.total_assessment)},
        )
        return record

    # -------------------------------------------------------------------------
    # ENROLLMENT ASSESSMENT
    # -------------------------------------------------------------------------

    @staticmethod
    def build_subject_assessment(subjects, settings=None):
        """
        Tuition units and lab fee lines for a set of subjects.

        Units default to 3 when a subject has none; lab fees are charged
        per lab unit.

        Returns:
            tuple: (Decimal total_units, [{'subject_code', 'amount'}])
        """
        settings = settings or FinancialSettings.get_instance()
        total_units = Decimal('0')
        lab_fees = []

        for subject in subjects:
            total_units += subject.total_units or DEFAULT_SUBJECT_UNITS
            if subject.lab_units and subject.lab_units > 0:
                lab_fees.append({
                    'subject_code': subject.code,
                    'amount': round_to_currency(subject.lab_units * settings.lab_fee_per_unit),
                })

        return total_units, lab_fees

    @staticmethod
    @transaction.atomic
    def create_for_enrollment(enrollment, subjects, penalty_fee=None):
        """
        Assess a new enrollment: per-unit tuition, lab fees per lab unit and
        the default miscellaneous fees; a late enrollment penalty becomes
        an other-fee line.
        """
        settings = FinancialSettings.get_instance()
        total_units, lab_fees = FinancialRecordService.build_subject_assessment(subjects, settings)

        other_fees = []
        if penalty_fee and safe_decimal(penalty_fee) > 0:
            other_fees.append({
                'name': 'Late Enrollment Penalty',
                'amount': safe_decimal(penalty_fee),
                'description': 'Enrollment submitted during the late enrollment period',
            })

        return FinancialRecordService.create_record({
            'student': enrollment.student,
            'academic_year': enrollment.academic_year,
            'semester': enrollment.semester,
            'enrollment': enrollment,
            'base_fee': Decimal('0.00'),
            'per_unit_fee': settings.per_unit_fee,
            'total_units': total_units,
            'miscellaneous_fees': [
                {'name': name, 'amount': amount}
                for name, amount in settings.get_default_miscellaneous_fees()
            ],
            'laboratory_fees': lab_fees,
            'other_fees': other_fees,
        })
