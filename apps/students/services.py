# students/services.py

"""
Student Services

Workflows with database operations:
- Student ID generation (cohort sequence with row locking)
- Student registration (ID + derived email + validation, retried on collision)

For pure formatting/validation without DB access, see students/utils.py
"""

from django.db import transaction, IntegrityError
from django.core.exceptions import ValidationError
import logging

from core.utils import get_school_today
from students.models import StudentProfile
from students.utils import (
    build_student_id_prefix, format_student_id, next_student_sequence,
    generate_student_email,
)

logger = logging.getLogger(__name__)

MAX_REGISTRATION_ATTEMPTS = 5


# =============================================================================
# STUDENT ID GENERATION SERVICE
# =============================================================================

class StudentIDGenerationService:
    """
    Allocate the next student ID for a department+year cohort.
    """

    @staticmethod
    @transaction.atomic
    def generate_student_id(department, admission_year=None):
        """
        Generate the next student ID WITH database locking.

        The random digit in the middle segment means IDs do not sort by
        sequence, so every issued ID in the cohort is parsed and the
        highest sequence wins.

        Examples:
            generate_student_id('BSIT', 2026) → "m26-14?-100" (empty cohort)
            generate_student_id('BSIT', 2026) → "m26-14?-101" (next)
        """
        year = admission_year or get_school_today().year
        prefix = build_student_id_prefix(year, department)

        issued = list(
            StudentProfile.objects
            .select_for_update()
            .filter(cohort_prefix=prefix)
            .values_list('student_id', flat=True)
        )
        sequence = next_student_sequence(issued)

        student_id = format_student_id(prefix, sequence)
        logger.info(f"Generated student ID: {student_id}")
        return student_id


# =============================================================================
# STUDENT REGISTRATION SERVICE
# =============================================================================

class StudentRegistrationService:

    @staticmethod
    def register_student(*, first_name, last_name, department, year_level,
                         admission_year=None, user=None, **extra_fields):
        """
        Create a StudentProfile with a freshly issued ID and derived email.

        Two registrations racing for the same sequence collide on the
        (cohort_prefix, sequence) constraint even when their random digits
        differ; the loser retries with a new sequence.

        Raises:
            ValidationError: invalid profile data or exhausted sequence.
        """
        year = admission_year or get_school_today().year
        last_error = None

        for attempt in range(1, MAX_REGISTRATION_ATTEMPTS + 1):
            try:
                with transaction.atomic():
                    student_id = StudentIDGenerationService.generate_student_id(department, year)
                    student = StudentProfile(
                        user=user,
                        student_id=student_id,
                        email=generate_student_email(student_id),
                        first_name=first_name,
                        last_name=last_name,
                        department=department,
                        year_level=year_level,
                        enrollment_year=year,
                        **extra_fields,
                    )
                    student.full_clean(validate_unique=False)
                    student.save()

                    if user is not None:
                        user.email = student.email
                        user.save(update_fields=['email'])

                logger.info(f"Registered student {student.student_id} ({student.get_full_name()})")
                return student

            except IntegrityError as e:
                last_error = e
                logger.warning(
                    f"Student ID collision on attempt {attempt}/{MAX_REGISTRATION_ATTEMPTS} "
                    f"for {department} {year}: {e}"
                )

        raise ValidationError(
            f"Could not allocate a unique student ID after {MAX_REGISTRATION_ATTEMPTS} attempts: {last_error}"
        )
