from datetime import date, datetime
from decimal import Decimal

import pytest

from academics.models import AcademicYear
from academics.utils import resolve_current_term, get_enrollment_window, is_add_drop_open

pytestmark = pytest.mark.django_db


def test_only_one_current_academic_year(academic_year):
    next_year = AcademicYear.objects.create(
        name="2027-2028", start_date=date(2027, 6, 1), end_date=date(2028, 5, 31), is_current=True,
    )
    academic_year.refresh_from_db()
    assert academic_year.is_current is False
    assert AcademicYear.objects.filter(is_current=True).get() == next_year


def test_current_term_from_flag(academic_year, first_semester):
    term = resolve_current_term(date(2026, 7, 1))
    assert term.academic_year == academic_year
    assert term.semester == first_semester


def test_current_term_accepts_datetime(academic_year, first_semester):
    term = resolve_current_term(datetime(2026, 7, 1, 9, 30))
    assert term.semester == first_semester


def test_current_term_falls_back_to_dates(academic_year, first_semester):
    academic_year.is_current = False
    academic_year.save()

    assert resolve_current_term(date(2026, 7, 1)).academic_year == academic_year
    assert resolve_current_term(date(2030, 1, 1)) is None


def test_no_semester_between_terms(academic_year, first_semester):
    term = resolve_current_term(date(2026, 12, 1))
    assert term.academic_year == academic_year
    assert term.semester is None
    assert get_enrollment_window(term, date(2026, 12, 1))['open'] is False


@pytest.mark.parametrize('day, expected', [
    (date(2026, 6, 1), {'open': True, 'is_late': False, 'penalty_fee': Decimal('0.00')}),
    (date(2026, 6, 15), {'open': True, 'is_late': False, 'penalty_fee': Decimal('0.00')}),
    (date(2026, 6, 20), {'open': True, 'is_late': True, 'penalty_fee': Decimal('250.00')}),
    (date(2026, 7, 1), {'open': False, 'is_late': False, 'penalty_fee': Decimal('0.00')}),
])
def test_enrollment_window(first_semester, day, expected):
    term = resolve_current_term(day)
    assert get_enrollment_window(term, day) == expected


def test_enrollment_window_without_term():
    assert get_enrollment_window(None)['open'] is False


def test_add_drop_window(first_semester):
    assert is_add_drop_open(first_semester, date(2026, 6, 16)) is True
    assert is_add_drop_open(first_semester, date(2026, 7, 16)) is False
