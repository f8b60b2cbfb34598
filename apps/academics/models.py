# academics/models.py

from decimal import Decimal
import logging

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models, transaction

from core.models import DEPARTMENT_CHOICES, SEMESTER_CHOICES, YEAR_LEVEL_VALIDATORS
from utils.models import BaseModel

logger = logging.getLogger(__name__)

PERCENT_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
MONEY_VALIDATORS = [MinValueValidator(Decimal('0.00'))]


# =============================================================================
# ACADEMIC CALENDAR
# =============================================================================

class AcademicYear(BaseModel):
    """
    A school year, e.g. "2026-2027". At most one year is flagged current.
    """

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('ongoing', 'Ongoing'),
        ('completed', 'Completed'),
    ]

    name = models.CharField("Name", max_length=20, unique=True)
    start_date = models.DateField("Start Date")
    end_date = models.DateField("End Date")
    is_current = models.BooleanField("Current Year", default=False, db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')

    class Meta:
        verbose_name = "Academic Year"
        verbose_name_plural = "Academic Years"
        ordering = ['-start_date']

    def __str__(self):
        return self.name

    def clean(self):
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError({'end_date': "End date must be after start date."})

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_current:
                demoted = (
                    AcademicYear.objects
                    .filter(is_current=True)
                    .exclude(pk=self.pk)
                    .update(is_current=False)
                )
                if demoted:
                    logger.info(f"Academic year {self.name} set as current; {demoted} other year(s) cleared")
            super().save(*args, **kwargs)

    def contains(self, day):
        return self.start_date <= day <= self.end_date


class Semester(BaseModel):
    """A term within an academic year, with its enrollment calendar."""

    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.CASCADE,
        related_name='semesters',
    )
    name = models.CharField(max_length=10, choices=SEMESTER_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()

    enrollment_start = models.DateField("Enrollment Opens")
    enrollment_end = models.DateField("Enrollment Closes")

    late_enrollment_start = models.DateField(null=True, blank=True)
    late_enrollment_end = models.DateField(null=True, blank=True)
    late_enrollment_penalty = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=MONEY_VALIDATORS,
    )

    add_drop_start = models.DateField(null=True, blank=True)
    add_drop_end = models.DateField(null=True, blank=True)

    class Meta:
        verbose_name = "Semester"
        verbose_name_plural = "Semesters"
        ordering = ['academic_year', 'start_date']
        constraints = [
            models.UniqueConstraint(fields=['academic_year', 'name'], name='unique_semester_per_year'),
        ]

    def __str__(self):
        return f"{self.academic_year.name} {self.get_name_display()}"

    def clean(self):
        errors = {}
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            errors['end_date'] = "End date must be after start date."
        if self.enrollment_start and self.enrollment_end and self.enrollment_start > self.enrollment_end:
            errors['enrollment_end'] = "Enrollment period ends before it starts."
        if bool(self.late_enrollment_start) != bool(self.late_enrollment_end):
            errors['late_enrollment_end'] = "Late enrollment period needs both a start and an end."
        if bool(self.add_drop_start) != bool(self.add_drop_end):
            errors['add_drop_end'] = "Add/drop period needs both a start and an end."
        if errors:
            raise ValidationError(errors)

    def contains(self, day):
        return self.start_date <= day <= self.end_date

    @property
    def has_add_drop_period(self):
        return bool(self.add_drop_start and self.add_drop_end)


# =============================================================================
# SUBJECTS
# =============================================================================

class Subject(BaseModel):

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    code = models.CharField("Subject Code", max_length=20, unique=True)
    title = models.CharField("Title", max_length=200)
    description = models.TextField(blank=True)

    lecture_units = models.DecimalField(max_digits=4, decimal_places=1, default=Decimal('0'))
    lab_units = models.DecimalField(max_digits=4, decimal_places=1, default=Decimal('0'))
    total_units = models.DecimalField(
        max_digits=4,
        decimal_places=1,
        null=True,
        blank=True,
        help_text="Defaults to lecture + lab units",
    )

    department = models.CharField(max_length=20, choices=DEPARTMENT_CHOICES)
    year_level = models.PositiveSmallIntegerField(validators=YEAR_LEVEL_VALIDATORS)
    semester = models.CharField(max_length=10, choices=SEMESTER_CHOICES)
    prerequisites = models.ManyToManyField(
        'self',
        symmetrical=False,
        blank=True,
        related_name='required_for',
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    class Meta:
        verbose_name = "Subject"
        verbose_name_plural = "Subjects"
        ordering = ['code']

    def __str__(self):
        return f"{self.code} - {self.title}"

    def save(self, *args, **kwargs):
        if self.total_units is None:
            self.total_units = (self.lecture_units or 0) + (self.lab_units or 0)
        super().save(*args, **kwargs)


# =============================================================================
# ENROLLMENT
# =============================================================================

class Enrollment(BaseModel):
    """
    A student's enrollment for one academic year + semester.

    total_fees and balance are derived; write them through
    academics.utils.recompute_balance.
    """

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    student = models.ForeignKey(
        'students.StudentProfile',
        on_delete=models.PROTECT,
        related_name='enrollments',
    )
    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.PROTECT,
        related_name='enrollments',
    )
    semester = models.CharField(max_length=10, choices=SEMESTER_CHOICES)
    year_level = models.PositiveSmallIntegerField(validators=YEAR_LEVEL_VALIDATORS)
    department = models.CharField(max_length=20, choices=DEPARTMENT_CHOICES)
    program = models.CharField(max_length=100)

    status = models.CharField(
        "Enrollment Status",
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )

    # -------------------------------------------------------------------------
    # FINANCIAL SUMMARY
    # -------------------------------------------------------------------------

    tuition_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=MONEY_VALIDATORS)
    misc_fees = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=MONEY_VALIDATORS)
    lab_fees = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=MONEY_VALIDATORS)
    total_fees = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)
    discount = models.DecimalField(
        "Discount (%)",
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=PERCENT_VALIDATORS,
    )
    scholarship_type = models.CharField(max_length=50, blank=True)
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), editable=False)

    # -------------------------------------------------------------------------
    # TRACKING
    # -------------------------------------------------------------------------

    date_submitted = models.DateTimeField(null=True, blank=True)
    date_approved = models.DateTimeField(null=True, blank=True)
    date_rejected = models.DateTimeField(null=True, blank=True)
    approved_by_id = models.CharField(max_length=50, null=True, blank=True)
    rejected_by_id = models.CharField(max_length=50, null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = "Enrollment"
        verbose_name_plural = "Enrollments"
        ordering = ['-date_submitted']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'academic_year', 'semester'],
                name='unique_enrollment_per_term',
            ),
        ]

    def __str__(self):
        return f"{self.student.student_id} - {self.academic_year.name} {self.semester}"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    def get_active_subjects(self):
        return self.enrolled_subjects.filter(status=EnrolledSubject.STATUS_ENROLLED).select_related('subject')


class EnrolledSubject(BaseModel):
    """One subject row on an enrollment, with its grade components."""

    STATUS_ENROLLED = 'enrolled'
    STATUS_DROPPED = 'dropped'
    STATUS_INCOMPLETE = 'incomplete'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = [
        (STATUS_ENROLLED, 'Enrolled'),
        (STATUS_DROPPED, 'Dropped'),
        (STATUS_INCOMPLETE, 'Incomplete'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    GRADE_COMPONENTS = ('attendance', 'quizzes', 'assignments', 'projects', 'midterm', 'finals')

    enrollment = models.ForeignKey(
        Enrollment,
        on_delete=models.CASCADE,
        related_name='enrolled_subjects',
    )
    subject = models.ForeignKey(Subject, on_delete=models.PROTECT, related_name='enrollments')
    section = models.CharField(max_length=20)
    teacher = models.ForeignKey(
        'hr.TeacherProfile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='handled_subjects',
    )

    attendance = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)
    quizzes = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)
    assignments = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)
    projects = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)
    midterm = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)
    finals = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)
    final_grade = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=PERCENT_VALIDATORS)

    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default=STATUS_ENROLLED)
    remarks = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = "Enrolled Subject"
        verbose_name_plural = "Enrolled Subjects"
        ordering = ['enrollment', 'subject__code']

    def __str__(self):
        return f"{self.subject.code} ({self.section}) - {self.get_status_display()}"

    def get_grade_components(self):
        return {name: getattr(self, name) for name in self.GRADE_COMPONENTS}


class ScheduleSlot(models.Model):

    DAY_CHOICES = [
        (day, day) for day in
        ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')
    ]

    enrolled_subject = models.ForeignKey(
        EnrolledSubject,
        on_delete=models.CASCADE,
        related_name='schedule',
    )
    day = models.CharField(max_length=10, choices=DAY_CHOICES)
    start_time = models.TimeField()
    end_time = models.TimeField()
    room = models.CharField(max_length=50, blank=True)

    class Meta:
        ordering = ['enrolled_subject', 'day', 'start_time']

    def __str__(self):
        return f"{self.day} {self.start_time:%H:%M}-{self.end_time:%H:%M} {self.room}"

    def clean(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError({'end_time': "End time must be after start time."})


class EnrollmentPayment(BaseModel):
    """Payment recorded directly against an enrollment."""

    METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('bank transfer', 'Bank Transfer'),
        ('credit card', 'Credit Card'),
        ('scholarship', 'Scholarship'),
    ]

    enrollment = models.ForeignKey(
        Enrollment,
        on_delete=models.CASCADE,
        related_name='payments',
    )
    position = models.PositiveIntegerField(help_text="0-based order of the payment on its enrollment")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_date = models.DateTimeField()
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    reference_number = models.CharField(max_length=100, blank=True)
    received_by_id = models.CharField(max_length=50, null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = "Enrollment Payment"
        verbose_name_plural = "Enrollment Payments"
        ordering = ['enrollment', 'position']
        constraints = [
            models.UniqueConstraint(fields=['enrollment', 'position'], name='unique_enrollment_payment_position'),
        ]

    def __str__(self):
        return f"{self.amount} ({self.payment_method}) on {self.payment_date:%Y-%m-%d}"
