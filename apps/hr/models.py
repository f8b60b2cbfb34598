# hr/models.py

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
import logging

from core.models import DEPARTMENT_CHOICES
from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# TEACHER PROFILE
# =============================================================================

class TeacherProfile(BaseModel):
    """Teaching staff with an institutional employee ID"""

    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('on leave', 'On Leave'),
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='teacher_profile',
    )
    employee_id = models.CharField(
        "Employee ID",
        max_length=20,
        unique=True,
        db_index=True,
        help_text="Issued on registration, e.g. T1426-1001",
    )

    first_name = models.CharField("First Name", max_length=50)
    middle_name = models.CharField("Middle Name", max_length=50, blank=True)
    last_name = models.CharField("Last Name", max_length=50)
    email = models.EmailField("Email")
    contact_number = models.CharField(max_length=30, blank=True)

    department = models.CharField("Department", max_length=20, choices=DEPARTMENT_CHOICES)
    position = models.CharField("Position", max_length=100)
    specializations = models.JSONField(default=list, blank=True)
    date_hired = models.DateField("Date Hired")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    class Meta:
        verbose_name = "Teacher Profile"
        verbose_name_plural = "Teacher Profiles"
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return f"{self.get_full_name()} ({self.employee_id})"

    def get_full_name(self):
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)

    def clean(self):
        from hr.utils import validate_employee_id

        try:
            validate_employee_id(self.employee_id)
        except ValidationError as e:
            raise ValidationError({'employee_id': e.messages})
