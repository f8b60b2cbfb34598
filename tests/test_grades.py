from decimal import Decimal

import pytest

from academics.models import Enrollment, EnrolledSubject
from academics.utils import (
    calculate_final_grade, get_grade_point, calculate_gpa, check_prerequisites,
    get_eligible_subjects,
)
from core.models import DEFAULT_GRADE_WEIGHTS


WEIGHTS = {name: Decimal(w) for name, w in DEFAULT_GRADE_WEIGHTS.items()}
SCALE = [(Decimal('95'), Decimal('4.0')), (Decimal('90'), Decimal('3.75')),
         (Decimal('85'), Decimal('3.5')), (Decimal('80'), Decimal('3.0')),
         (Decimal('75'), Decimal('2.5'))]


@pytest.mark.parametrize('percentage, point', [
    (100, '4.0'), (95, '4.0'), (94.99, '3.75'), (90, '3.75'), (85, '3.5'),
    (80, '3.0'), (79, '2.5'), (75, '2.5'), (74.99, '0'), (0, '0'),
])
def test_grade_point_thresholds(percentage, point):
    assert get_grade_point(percentage, SCALE) == Decimal(point)


def test_final_grade_weighted_and_rounded_half_up():
    components = {'attendance': 100, 'projects': 90, 'midterm': 85, 'finals': 88}
    assert calculate_final_grade(components, WEIGHTS) == Decimal('89')

    # 90*.1 + 80*.2 + 75*.3 + 70*.4 = 75.5
    components = {'attendance': 90, 'projects': 80, 'midterm': 75, 'finals': 70}
    assert calculate_final_grade(components, WEIGHTS) == Decimal('76')


def test_final_grade_missing_until_all_weighted_components_present():
    assert calculate_final_grade({'attendance': 100, 'projects': 90, 'midterm': 85}, WEIGHTS) is None
    # quizzes carry no weight by default
    assert calculate_final_grade(
        {'attendance': 100, 'projects': 100, 'midterm': 100, 'finals': 100, 'quizzes': None}, WEIGHTS
    ) == Decimal('100')


@pytest.mark.django_db
def test_configured_scale_is_used(school_config):
    school_config.grading_scale = [[60, '1.0']]
    school_config.save()
    assert get_grade_point(65) == Decimal('1.0')
    assert get_grade_point(59) == Decimal('0')


# =============================================================================
# GPA
# =============================================================================

@pytest.fixture
def enrollment(student, academic_year):
    return Enrollment.objects.create(
        student=student, academic_year=academic_year, semester='1st',
        year_level=1, department='BSIT', program='BSIT',
        status=Enrollment.STATUS_APPROVED,
    )


def _row(enrollment, subject, final_grade=None, status=EnrolledSubject.STATUS_COMPLETED):
    return EnrolledSubject.objects.create(
        enrollment=enrollment, subject=subject, section='A',
        final_grade=final_grade, status=status,
    )


@pytest.mark.django_db
def test_gpa_is_zero_without_units(enrollment):
    assert calculate_gpa(enrollment) == Decimal('0')


@pytest.mark.django_db
def test_gpa_is_unit_weighted_over_completed_subjects(enrollment, make_subject):
    _row(enrollment, make_subject('IT101', lecture_units=3), final_grade=Decimal('96'))
    _row(enrollment, make_subject('IT102', lecture_units=2, lab_units=1, total_units=Decimal('5')),
         final_grade=Decimal('82'))
    _row(enrollment, make_subject('IT103'), final_grade=Decimal('70'), status=EnrolledSubject.STATUS_DROPPED)
    _row(enrollment, make_subject('IT104'), final_grade=None)

    # (4.0*3 + 3.0*5) / 8 = 3.375
    assert calculate_gpa(enrollment) == Decimal('3.38')


@pytest.mark.django_db
def test_gpa_defaults_missing_units_to_three(enrollment, make_subject):
    _row(enrollment, make_subject('GE100', lecture_units=0, total_units=Decimal('0')), final_grade=Decimal('90'))
    _row(enrollment, make_subject('GE101', lecture_units=6), final_grade=Decimal('75'))

    # (3.75*3 + 2.5*6) / 9 = 2.9166
    assert calculate_gpa(enrollment) == Decimal('2.92')


# =============================================================================
# PREREQUISITES
# =============================================================================

@pytest.mark.django_db
def test_prerequisites_need_passing_grade_in_approved_enrollment(enrollment, student, make_subject):
    it101 = make_subject('IT101')
    it102 = make_subject('IT102')
    it201 = make_subject('IT201', year_level=2)
    it201.prerequisites.set([it101, it102])

    _row(enrollment, it101, final_grade=Decimal('80'))
    assert check_prerequisites(it201, student) is False

    _row(enrollment, it102, final_grade=Decimal('74'))
    assert check_prerequisites(it201, student) is False

    EnrolledSubject.objects.filter(subject=it102).update(final_grade=Decimal('75'))
    assert check_prerequisites(it201, student) is True


@pytest.mark.django_db
def test_prerequisites_ignore_unapproved_enrollments(enrollment, student, make_subject):
    it101 = make_subject('IT101')
    it201 = make_subject('IT201', year_level=2)
    it201.prerequisites.add(it101)
    _row(enrollment, it101, final_grade=Decimal('99'))

    enrollment.status = Enrollment.STATUS_PENDING
    enrollment.save()

    assert check_prerequisites(it201, student) is False


@pytest.mark.django_db
def test_subject_without_prerequisites_is_open(student, make_subject):
    assert check_prerequisites(make_subject('GE100'), student) is True


@pytest.mark.django_db
def test_eligible_subjects_filter_by_placement_and_prerequisites(student, make_subject):
    open_subject = make_subject('IT101')
    locked = make_subject('IT102')
    locked.prerequisites.add(make_subject('IT100', year_level=2))
    make_subject('NCM100', department='BSN')
    make_subject('IT150', semester='2nd')

    assert get_eligible_subjects(student, '1st') == [open_subject]
