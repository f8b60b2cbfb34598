# students/models.py

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django_countries.fields import CountryField
import logging

from core.models import DEPARTMENT_CHOICES, YEAR_LEVEL_VALIDATORS
from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# STUDENT PROFILE
# =============================================================================

class StudentProfile(BaseModel):
    """Core model for student identity and academic placement"""

    # -------------------------------------------------------------------------
    # CHOICE FIELDS
    # -------------------------------------------------------------------------

    GENDER_CHOICES = (
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    )

    ACADEMIC_STATUS_CHOICES = (
        ('regular', 'Regular'),
        ('irregular', 'Irregular'),
        ('probation', 'Probation'),
        ('LOA', 'Leave of Absence'),
        ('graduated', 'Graduated'),
        ('transferred', 'Transferred'),
    )

    # -------------------------------------------------------------------------
    # IDENTIFICATION
    # -------------------------------------------------------------------------

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='student_profile',
    )
    student_id = models.CharField(
        "Student ID",
        max_length=20,
        unique=True,
        db_index=True,
        help_text="Issued on registration, e.g. m26-147-100",
    )
    email = models.EmailField("Institutional Email", unique=True)

    # Derived from student_id on save; one sequence per cohort
    cohort_prefix = models.CharField(max_length=10, null=True, blank=True, editable=False)
    sequence = models.PositiveSmallIntegerField(null=True, blank=True, editable=False)

    first_name = models.CharField("First Name", max_length=50)
    middle_name = models.CharField("Middle Name", max_length=50, blank=True)
    last_name = models.CharField("Last Name", max_length=50)
    birth_date = models.DateField("Birth Date", null=True, blank=True)
    gender = models.CharField("Gender", max_length=10, choices=GENDER_CHOICES, blank=True)
    nationality = CountryField("Nationality", blank=True, default='PH')

    guardian_name = models.CharField(max_length=100, blank=True)
    guardian_contact = models.CharField(max_length=30, blank=True)
    emergency_contact = models.CharField(max_length=30, blank=True)

    # -------------------------------------------------------------------------
    # ACADEMIC INFORMATION
    # -------------------------------------------------------------------------

    department = models.CharField("Department", max_length=20, choices=DEPARTMENT_CHOICES)
    program = models.CharField("Program", max_length=100, blank=True)
    year_level = models.PositiveSmallIntegerField("Year Level", validators=YEAR_LEVEL_VALIDATORS)
    academic_status = models.CharField(
        max_length=20,
        choices=ACADEMIC_STATUS_CHOICES,
        default='regular',
    )
    enrollment_year = models.PositiveIntegerField(
        "Enrollment Year",
        help_text="Calendar year of admission; must match the ID's year segment",
    )

    class Meta:
        verbose_name = "Student Profile"
        verbose_name_plural = "Student Profiles"
        ordering = ['last_name', 'first_name']
        constraints = [
            models.UniqueConstraint(
                fields=['cohort_prefix', 'sequence'],
                name='unique_student_cohort_sequence',
            ),
        ]

    def __str__(self):
        return f"{self.get_full_name()} ({self.student_id})"

    def save(self, *args, **kwargs):
        from students.utils import split_student_id

        self.cohort_prefix, self.sequence = split_student_id(self.student_id)
        super().save(*args, **kwargs)

    def get_full_name(self):
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    def clean(self):
        from students.utils import (
            validate_student_id, validate_student_email, validate_enrollment_year
        )

        errors = {}

        try:
            validate_student_id(self.student_id)
        except ValidationError as e:
            errors['student_id'] = e.messages
        else:
            try:
                validate_student_email(self.student_id, self.email)
            except ValidationError as e:
                errors['email'] = e.messages
            try:
                validate_enrollment_year(self.student_id, self.enrollment_year)
            except ValidationError as e:
                errors['enrollment_year'] = e.messages

        if errors:
            raise ValidationError(errors)
