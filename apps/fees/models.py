# fees/models.py

from decimal import Decimal
import logging

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from core.models import SEMESTER_CHOICES
from utils.models import BaseModel

logger = logging.getLogger(__name__)

PERCENT_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
MONEY_VALIDATORS = [MinValueValidator(Decimal('0.00'))]


# =============================================================================
# FINANCIAL RECORD
# =============================================================================

class FinancialRecord(BaseModel):
    """
    Per-student, per-term ledger: fee assessment, discounts, scholarship
    and payments.

    Derived fields (tuition_total, total_assessment, total_discounts,
    total_due, remaining_balance, status) are written only by
    fees.services.recompute_financial_record.
    """

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('partially paid', 'Partially Paid'),
        ('fully paid', 'Fully Paid'),
        ('overdue', 'Overdue'),
    ]

    SCHOLARSHIP_TYPE_CHOICES = [
        ('academic', 'Academic'),
        ('athletic', 'Athletic'),
        ('government', 'Government'),
        ('private', 'Private'),
        ('institutional', 'Institutional'),
        ('none', 'None'),
    ]

    student = models.ForeignKey(
        'students.StudentProfile',
        on_delete=models.PROTECT,
        related_name='financial_records',
    )
    academic_year = models.ForeignKey(
        'academics.AcademicYear',
        on_delete=models.PROTECT,
        related_name='financial_records',
    )
    semester = models.CharField(max_length=10, choices=SEMESTER_CHOICES)
    enrollment = models.OneToOneField(
        'academics.Enrollment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='financial_record',
    )

    # -------------------------------------------------------------------------
    # TUITION
    # -------------------------------------------------------------------------

    base_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=MONEY_VALIDATORS)
    per_unit_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=MONEY_VALIDATORS)
    total_units = models.DecimalField(max_digits=5, decimal_places=1, default=Decimal('0'), validators=[MinValueValidator(Decimal('0'))])
    tuition_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)

    # -------------------------------------------------------------------------
    # SCHOLARSHIP
    # -------------------------------------------------------------------------

    scholarship_type = models.CharField(max_length=20, choices=SCHOLARSHIP_TYPE_CHOICES, default='none')
    scholarship_name = models.CharField(max_length=200, blank=True)
    scholarship_sponsor = models.CharField(max_length=200, blank=True)
    scholarship_contact_person = models.CharField(max_length=100, blank=True)
    scholarship_sponsor_contact = models.CharField(max_length=100, blank=True)
    scholarship_notes = models.TextField(blank=True)
    tuition_coverage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)
    miscellaneous_coverage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)
    laboratory_coverage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)
    other_coverage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)

    # -------------------------------------------------------------------------
    # SUMMARY
    # -------------------------------------------------------------------------

    total_assessment = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)
    total_discounts = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)
    total_due = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)
    remaining_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    due_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = "Financial Record"
        verbose_name_plural = "Financial Records"
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'academic_year', 'semester'],
                name='unique_financial_record_per_term',
            ),
        ]
        indexes = [
            models.Index(fields=['academic_year', 'semester', 'status'], name='fin_record_term_status_idx'),
        ]

    def __str__(self):
        return f"{self.student.student_id} - {self.academic_year.name} {self.semester} ({self.status})"

    def get_scholarship_coverage(self):
        return {
            'tuition': self.tuition_coverage,
            'miscellaneous': self.miscellaneous_coverage,
            'laboratory': self.laboratory_coverage,
            'other': self.other_coverage,
        }

    def get_subtotals(self):
        """Per-category fee totals as stored."""
        from fees.ledger import sum_amounts

        return {
            'tuition': self.tuition_total,
            'miscellaneous': sum_amounts(self.miscellaneous_fees.values_list('amount', flat=True)),
            'laboratory': sum_amounts(self.laboratory_fees.values_list('amount', flat=True)),
            'other': sum_amounts(self.other_fees.values_list('amount', flat=True)),
        }

    @property
    def amount_paid(self):
        return self.total_due - self.remaining_balance


# =============================================================================
# FEE LINES
# =============================================================================

class MiscellaneousFee(models.Model):
    record = models.ForeignKey(FinancialRecord, on_delete=models.CASCADE, related_name='miscellaneous_fees')
    name = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=MONEY_VALIDATORS)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name}: {self.amount}"


class LaboratoryFee(models.Model):
    record = models.ForeignKey(FinancialRecord, on_delete=models.CASCADE, related_name='laboratory_fees')
    subject_code = models.CharField(max_length=20, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=MONEY_VALIDATORS)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"Lab {self.subject_code}: {self.amount}"


class OtherFee(models.Model):
    record = models.ForeignKey(FinancialRecord, on_delete=models.CASCADE, related_name='other_fees')
    name = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=MONEY_VALIDATORS)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name}: {self.amount}"


class FeeDiscount(models.Model):
    """
    A discount line. When percentage > 0 the amount is recomputed from the
    total assessment on every recompute; otherwise amount is a flat value.
    """

    TYPE_CHOICES = [
        ('academic', 'Academic'),
        ('employee', 'Employee'),
        ('sibling', 'Sibling'),
        ('promotional', 'Promotional'),
        ('other', 'Other'),
    ]

    record = models.ForeignKey(FinancialRecord, on_delete=models.CASCADE, related_name='discounts')
    discount_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), validators=PERCENT_VALIDATORS)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=MONEY_VALIDATORS)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        if self.percentage:
            return f"{self.get_discount_type_display()} {self.percentage}%"
        return f"{self.get_discount_type_display()} {self.amount}"


# =============================================================================
# PAYMENTS
# =============================================================================

class LedgerPayment(BaseModel):
    """A payment posted to a financial record. Ordered by position."""

    METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('check', 'Check'),
        ('bank transfer', 'Bank Transfer'),
        ('credit card', 'Credit Card'),
        ('debit card', 'Debit Card'),
        ('online payment', 'Online Payment'),
        ('scholarship', 'Scholarship'),
    ]

    record = models.ForeignKey(FinancialRecord, on_delete=models.CASCADE, related_name='payments')
    position = models.PositiveIntegerField(help_text="0-based order of the payment on its record")
    receipt_number = models.CharField(max_length=30, unique=True, db_index=True)
    payment_date = models.DateTimeField()
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    bank = models.CharField(max_length=100, blank=True)
    check_number = models.CharField(max_length=50, blank=True)
    reference_number = models.CharField(max_length=100, blank=True)
    received_by_id = models.CharField(max_length=50, null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = "Ledger Payment"
        verbose_name_plural = "Ledger Payments"
        ordering = ['record', 'position']
        constraints = [
            models.UniqueConstraint(fields=['record', 'position'], name='unique_ledger_payment_position'),
        ]

    def __str__(self):
        return f"{self.receipt_number}: {self.amount} ({self.payment_method})"
