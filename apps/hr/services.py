# hr/services.py

"""
HR Services

Workflows with database operations:
- Employee ID generation (WITH DB locking)
- Teacher registration

For pure helpers without DB writes, see hr/utils.py
"""

from django.db import transaction, IntegrityError
from django.core.exceptions import ValidationError
import logging

from core.utils import get_school_today
from hr.models import TeacherProfile
from hr.utils import build_employee_id_prefix, format_employee_id, next_employee_sequence

logger = logging.getLogger(__name__)

MAX_REGISTRATION_ATTEMPTS = 5


# =============================================================================
# EMPLOYEE ID GENERATION SERVICE
# =============================================================================

class EmployeeIDGenerationService:

    @staticmethod
    @transaction.atomic
    def generate_employee_id(department, joining_year=None):
        """
        Generate the next employee ID WITH database locking.

        Format: {deptPrefix}{YY}-{NNNN}

        Examples:
            generate_employee_id('BSIT', 2026) → "T1426-1001" (first of the year)
        """
        year = joining_year or get_school_today().year
        prefix = build_employee_id_prefix(year, department)

        issued = list(
            TeacherProfile.objects
            .select_for_update()
            .filter(employee_id__startswith=prefix)
            .values_list('employee_id', flat=True)
        )
        employee_id = format_employee_id(prefix, next_employee_sequence(issued))

        logger.info(f"Generated employee ID: {employee_id}")
        return employee_id


# =============================================================================
# TEACHER REGISTRATION SERVICE
# =============================================================================

class TeacherRegistrationService:

    @staticmethod
    def register_teacher(*, first_name, last_name, email, department, position,
                         date_hired=None, user=None, **extra_fields):
        """
        Create a TeacherProfile with a freshly issued employee ID.
        The joining year is taken from date_hired.
        """
        date_hired = date_hired or get_school_today()
        last_error = None

        for attempt in range(1, MAX_REGISTRATION_ATTEMPTS + 1):
            try:
                with transaction.atomic():
                    employee_id = EmployeeIDGenerationService.generate_employee_id(
                        department, date_hired.year
                    )
                    teacher = TeacherProfile(
                        user=user,
                        employee_id=employee_id,
                        first_name=first_name,
                        last_name=last_name,
                        email=email,
                        department=department,
                        position=position,
                        date_hired=date_hired,
                        **extra_fields,
                    )
                    teacher.full_clean(validate_unique=False)
                    teacher.save()

                logger.info(f"Registered teacher {teacher.employee_id} ({teacher.get_full_name()})")
                return teacher

            except IntegrityError as e:
                last_error = e
                logger.warning(
                    f"Employee ID collision on attempt {attempt}/{MAX_REGISTRATION_ATTEMPTS} "
                    f"for {department} {date_hired.year}: {e}"
                )

        raise ValidationError(
            f"Could not allocate a unique employee ID after {MAX_REGISTRATION_ATTEMPTS} attempts: {last_error}"
        )
