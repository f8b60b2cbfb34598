# core/models.py

from decimal import Decimal, InvalidOperation
import logging

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# SHARED CHOICES
# =============================================================================

DEPARTMENT_CHOICES = [
    ('BSIT', 'BS Information Technology'),
    ('BSCS', 'BS Computer Science'),
    ('BSN', 'BS Nursing'),
    ('BS RADTECH', 'BS Radiologic Technology'),
    ('SHS', 'Senior High School'),
    ('JHS', 'Junior High School'),
]

SEMESTER_CHOICES = [
    ('1st', '1st Semester'),
    ('2nd', '2nd Semester'),
    ('Summer', 'Summer'),
]

YEAR_LEVEL_VALIDATORS = [MinValueValidator(1), MaxValueValidator(6)]

# (minimum percentage, grade point), checked top-down
DEFAULT_GRADING_SCALE = [
    [95, '4.0'],
    [90, '3.75'],
    [85, '3.5'],
    [80, '3.0'],
    [75, '2.5'],
]

DEFAULT_GRADE_WEIGHTS = {
    'attendance': '0.10',
    'projects': '0.20',
    'midterm': '0.30',
    'finals': '0.40',
}

DEFAULT_MISCELLANEOUS_FEES = [
    {'name': 'Registration Fee', 'amount': '500.00'},
    {'name': 'Library Fee', 'amount': '300.00'},
    {'name': 'Computer Fee', 'amount': '500.00'},
]


# =============================================================================
# SCHOOL CONFIGURATION
# =============================================================================

class SchoolConfiguration(BaseModel):
    """
    Institution-wide academic settings.
    Singleton model - only one instance allowed per school.
    """

    id = models.PositiveSmallIntegerField(primary_key=True, default=1, editable=False)

    school_name = models.CharField(
        "School Name",
        max_length=200,
        default='University of Perpetual Help System Laguna - Manila',
    )
    student_email_domain = models.CharField(
        "Student Email Domain",
        max_length=100,
        default='manila.uphsl.edu.ph',
        help_text="Institutional student emails are <student id>@<domain>",
    )
    grading_scale = models.JSONField(
        "Grading Scale",
        default=list,
        blank=True,
        help_text="List of [minimum percentage, grade point] pairs, highest first",
    )
    grade_weights = models.JSONField(
        "Grade Component Weights",
        default=dict,
        blank=True,
        help_text="Fractional weight per grade component; should sum to 1",
    )
    passing_grade = models.DecimalField(
        "Passing Grade",
        max_digits=5,
        decimal_places=2,
        default=Decimal('75.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Minimum final grade that satisfies a prerequisite",
    )

    class Meta:
        verbose_name = "School Configuration"
        verbose_name_plural = "School Configuration"

    def __str__(self):
        return f"School Configuration - {self.school_name}"

    # -------------------------------------------------------------------------
    # SINGLETON PATTERN
    # -------------------------------------------------------------------------

    @classmethod
    def get_instance(cls):
        """Get or create the singleton instance of SchoolConfiguration."""
        instance, created = cls.objects.get_or_create(
            pk=1,
            defaults={
                'student_email_domain': 'manila.uphsl.edu.ph',
                'grading_scale': DEFAULT_GRADING_SCALE,
                'grade_weights': DEFAULT_GRADE_WEIGHTS,
                'passing_grade': Decimal('75.00'),
            }
        )
        if created:
            logger.info("Created default SchoolConfiguration")
        return instance

    def save(self, *args, **kwargs):
        """Ensure only one instance exists (singleton pattern)"""
        self.pk = 1
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion of the singleton instance"""
        logger.warning("Attempted to delete SchoolConfiguration singleton instance - operation blocked")

    def clean(self):
        errors = {}

        for row in self.grading_scale or []:
            if not isinstance(row, (list, tuple)) or len(row) != 2:
                errors['grading_scale'] = "Each grading scale entry must be a [minimum, point] pair."
                break

        try:
            total = sum(Decimal(str(w)) for w in (self.grade_weights or {}).values())
        except (InvalidOperation, TypeError, ValueError):
            errors['grade_weights'] = "Grade weights must be numeric."
        else:
            if self.grade_weights and total != Decimal('1'):
                errors['grade_weights'] = f"Grade weights must sum to 1 (got {total})."

        if errors:
            raise ValidationError(errors)

    # -------------------------------------------------------------------------
    # ACCESSORS
    # -------------------------------------------------------------------------

    def get_grading_scale(self):
        """Scale as [(Decimal minimum, Decimal point)], highest minimum first."""
        rows = self.grading_scale or DEFAULT_GRADING_SCALE
        scale = [(Decimal(str(minimum)), Decimal(str(point))) for minimum, point in rows]
        return sorted(scale, key=lambda row: row[0], reverse=True)

    def get_grade_weights(self):
        weights = self.grade_weights or DEFAULT_GRADE_WEIGHTS
        return {name: Decimal(str(weight)) for name, weight in weights.items()}


# =============================================================================
# FINANCIAL SETTINGS
# =============================================================================

class FinancialSettings(BaseModel):
    """
    Fee schedule and receipt settings used when assessing enrollments.
    Singleton model.
    """

    CURRENCY_POSITION_CHOICES = [
        ('BEFORE', 'Before amount'),
        ('AFTER', 'After amount'),
    ]

    id = models.PositiveSmallIntegerField(primary_key=True, default=1, editable=False)

    currency = models.CharField("Currency", max_length=3, default='PHP')
    currency_position = models.CharField(
        max_length=10,
        choices=CURRENCY_POSITION_CHOICES,
        default='BEFORE',
    )
    receipt_prefix = models.CharField(
        "Receipt Prefix",
        max_length=10,
        default='RCPT',
        help_text="Receipt numbers are <prefix>-<6 digit sequence>",
    )
    per_unit_fee = models.DecimalField(
        "Tuition per Unit",
        max_digits=10,
        decimal_places=2,
        default=Decimal('1000.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    lab_fee_per_unit = models.DecimalField(
        "Laboratory Fee per Lab Unit",
        max_digits=10,
        decimal_places=2,
        default=Decimal('500.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    default_miscellaneous_fees = models.JSONField(
        "Default Miscellaneous Fees",
        default=list,
        blank=True,
        help_text="List of {name, amount} applied to every new enrollment assessment",
    )

    class Meta:
        verbose_name = "Financial Settings"
        verbose_name_plural = "Financial Settings"

    def __str__(self):
        return f"Financial Settings - {self.currency}"

    @classmethod
    def get_instance(cls):
        """Get or create the singleton instance of FinancialSettings."""
        instance, created = cls.objects.get_or_create(
            pk=1,
            defaults={
                'currency': 'PHP',
                'receipt_prefix': 'RCPT',
                'per_unit_fee': Decimal('1000.00'),
                'lab_fee_per_unit': Decimal('500.00'),
                'default_miscellaneous_fees': DEFAULT_MISCELLANEOUS_FEES,
            }
        )
        if created:
            logger.info("Created default FinancialSettings")
        return instance

    def save(self, *args, **kwargs):
        """Ensure only one instance exists (singleton pattern)"""
        self.pk = 1
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion of the singleton instance"""
        logger.warning("Attempted to delete FinancialSettings singleton instance - operation blocked")

    def get_default_miscellaneous_fees(self):
        """Default fees as [(name, Decimal amount)]."""
        return [
            (row['name'], Decimal(str(row['amount'])))
            for row in (self.default_miscellaneous_fees or [])
        ]

    def format_currency(self, amount, include_symbol=True):
        """Format amount based on school settings."""
        try:
            formatted = f"{Decimal(str(amount or 0)):,.2f}"
        except (ValueError, TypeError, InvalidOperation) as e:
            logger.warning(f"Error formatting currency: {e}")
            formatted = "0.00"

        if not include_symbol:
            return formatted
        if self.currency_position == 'AFTER':
            return f"{formatted} {self.currency}"
        return f"{self.currency} {formatted}"
