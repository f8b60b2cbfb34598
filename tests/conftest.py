from datetime import date
from decimal import Decimal

import pytest

from academics.models import AcademicYear, Semester, Subject
from core.models import FinancialSettings, SchoolConfiguration
from students.models import StudentProfile


@pytest.fixture
def school_config(db):
    return SchoolConfiguration.get_instance()


@pytest.fixture
def financial_settings(db):
    return FinancialSettings.get_instance()


@pytest.fixture
def academic_year(db):
    return AcademicYear.objects.create(
        name="2026-2027",
        start_date=date(2026, 6, 1),
        end_date=date(2027, 5, 31),
        is_current=True,
    )


@pytest.fixture
def first_semester(academic_year):
    return Semester.objects.create(
        academic_year=academic_year,
        name='1st',
        start_date=date(2026, 6, 1),
        end_date=date(2026, 10, 31),
        enrollment_start=date(2026, 6, 1),
        enrollment_end=date(2026, 6, 15),
        late_enrollment_start=date(2026, 6, 16),
        late_enrollment_end=date(2026, 6, 30),
        late_enrollment_penalty=Decimal('250.00'),
        add_drop_start=date(2026, 6, 16),
        add_drop_end=date(2026, 7, 15),
    )


@pytest.fixture
def make_student(db, school_config):
    counter = {'n': 100}

    def _make(department='BSIT', year_level=1, enrollment_year=2026, **kwargs):
        counter['n'] += 1
        student_id = kwargs.pop('student_id', f"m{enrollment_year % 100:02d}-140-{counter['n']}")
        return StudentProfile.objects.create(
            student_id=student_id,
            email=f"{student_id}@{school_config.student_email_domain}",
            first_name=kwargs.pop('first_name', 'Juan'),
            last_name=kwargs.pop('last_name', 'Dela Cruz'),
            department=department,
            year_level=year_level,
            enrollment_year=enrollment_year,
            **kwargs,
        )

    return _make


@pytest.fixture
def student(make_student):
    return make_student(first_name='Maria', last_name='Santos')


@pytest.fixture
def make_subject(db):
    def _make(code, department='BSIT', lecture_units=3, lab_units=0, total_units=None, **kwargs):
        return Subject.objects.create(
            code=code,
            title=kwargs.pop('title', f"Subject {code}"),
            lecture_units=Decimal(lecture_units),
            lab_units=Decimal(lab_units),
            total_units=total_units,
            department=department,
            year_level=kwargs.pop('year_level', 1),
            semester=kwargs.pop('semester', '1st'),
            **kwargs,
        )

    return _make


@pytest.fixture
def registrar(django_user_model):
    return django_user_model.objects.create_user(username='registrar', password='x')
