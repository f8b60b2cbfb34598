# academics/utils.py

"""
Academic Utility Functions

- Current term resolution and enrollment/add-drop windows
- Enrollment balance recomputation
- Final grade, grade point and GPA calculation
- Prerequisite checks

Queries only; the single write is recompute_balance(), which saves the
enrollment's derived fields.
"""

from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP
import logging

from core.utils import get_school_today, safe_decimal

logger = logging.getLogger(__name__)

Term = namedtuple('Term', ['academic_year', 'semester'])

DEFAULT_SUBJECT_UNITS = Decimal('3')


# =============================================================================
# CURRENT TERM
# =============================================================================

def get_current_academic_year(today=None):
    """
    The academic year flagged current; otherwise the one whose dates
    contain today.
    """
    from academics.models import AcademicYear

    current = AcademicYear.objects.filter(is_current=True).first()
    if current:
        return current

    today = today or get_school_today()
    current = AcademicYear.objects.filter(start_date__lte=today, end_date__gte=today).first()
    if current is None:
        logger.warning(f"No academic year covers {today}")
    return current


def resolve_current_term(now=None):
    """
    Resolve the current academic year and semester.

    Args:
        now: date or datetime to resolve against (defaults to school today)

    Returns:
        Term(academic_year, semester) or None when no academic year
        applies. semester is None between semesters.
    """
    today = _as_date(now)
    academic_year = get_current_academic_year(today)
    if academic_year is None:
        return None

    semester = (
        academic_year.semesters
        .filter(start_date__lte=today, end_date__gte=today)
        .first()
    )
    return Term(academic_year, semester)


def _as_date(value):
    if value is None:
        return get_school_today()
    if hasattr(value, 'date'):
        return value.date()
    return value


def get_enrollment_window(term, now=None):
    """
    Whether enrollment is open for a term.

    Returns:
        dict: {'open': bool, 'is_late': bool, 'penalty_fee': Decimal}
    """
    closed = {'open': False, 'is_late': False, 'penalty_fee': Decimal('0.00')}
    if term is None or term.semester is None:
        return closed

    today = _as_date(now)
    semester = term.semester

    if semester.enrollment_start <= today <= semester.enrollment_end:
        return {'open': True, 'is_late': False, 'penalty_fee': Decimal('0.00')}

    if (semester.late_enrollment_start and semester.late_enrollment_end
            and semester.late_enrollment_start <= today <= semester.late_enrollment_end):
        return {'open': True, 'is_late': True, 'penalty_fee': semester.late_enrollment_penalty}

    return closed


def is_add_drop_open(semester, now=None):
    if semester is None or not semester.has_add_drop_period:
        return False
    today = _as_date(now)
    return semester.add_drop_start <= today <= semester.add_drop_end


# =============================================================================
# ENROLLMENT BALANCE
# =============================================================================

def recompute_balance(enrollment, update_fields=None):
    """
    Recompute total_fees and balance from the enrollment's fees, discount
    and payments, then save (only update_fields when given).

    Returns:
        Enrollment: the saved enrollment
    """
    from fees.ledger import compute_enrollment_balance

    total_fees, balance = compute_enrollment_balance(
        enrollment.tuition_fee,
        enrollment.misc_fees,
        enrollment.lab_fees,
        enrollment.discount,
        enrollment.payments.values_list('amount', flat=True),
    )
    enrollment.total_fees = total_fees
    enrollment.balance = balance
    enrollment.save(update_fields=update_fields)
    return enrollment


# =============================================================================
# GRADES
# =============================================================================

def calculate_final_grade(components, weights=None):
    """
    Weighted final grade, rounded half up to a whole number.

    Args:
        components: dict of component name → score (0-100) or None
        weights: dict of component name → fractional weight; defaults to
            the school's configured weights

    Returns:
        Decimal or None when any weighted component is missing

    Example:
        >>> calculate_final_grade({'attendance': 100, 'projects': 90,
        ...                        'midterm': 85, 'finals': 88})
        Decimal('89')
    """
    if weights is None:
        from core.models import SchoolConfiguration
        weights = SchoolConfiguration.get_instance().get_grade_weights()

    total = Decimal('0')
    for name, weight in weights.items():
        weight = safe_decimal(weight)
        if weight == 0:
            continue
        score = components.get(name)
        if score is None:
            return None
        total += safe_decimal(score) * weight

    return total.quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def get_grade_point(percentage, scale=None):
    """
    Convert a percentage grade to a grade point.

    Default scale: ≥95 → 4.0, ≥90 → 3.75, ≥85 → 3.5, ≥80 → 3.0,
    ≥75 → 2.5, below → 0.
    """
    if scale is None:
        from core.models import SchoolConfiguration
        scale = SchoolConfiguration.get_instance().get_grading_scale()

    percentage = safe_decimal(percentage)
    for minimum, point in scale:
        if percentage >= Decimal(str(minimum)):
            return Decimal(str(point))
    return Decimal('0')


def calculate_gpa(enrollment, scale=None):
    """
    Unit-weighted GPA over completed subjects that have a final grade.
    Subjects without units count as 3. Returns Decimal('0') when no units
    qualify.
    """
    from academics.models import EnrolledSubject

    if scale is None:
        from core.models import SchoolConfiguration
        scale = SchoolConfiguration.get_instance().get_grading_scale()

    rows = (
        enrollment.enrolled_subjects
        .filter(status=EnrolledSubject.STATUS_COMPLETED, final_grade__isnull=False)
        .select_related('subject')
    )

    total_points = Decimal('0')
    total_units = Decimal('0')
    for row in rows:
        units = row.subject.total_units or DEFAULT_SUBJECT_UNITS
        total_units += units
        total_points += get_grade_point(row.final_grade, scale) * units

    if total_units == 0:
        return Decimal('0')
    return (total_points / total_units).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


# =============================================================================
# PREREQUISITES
# =============================================================================

def check_prerequisites(subject, student, passing_grade=None):
    """
    True when the student passed every prerequisite of the subject in an
    approved enrollment.
    """
    from academics.models import EnrolledSubject, Enrollment

    if passing_grade is None:
        from core.models import SchoolConfiguration
        passing_grade = SchoolConfiguration.get_instance().passing_grade

    for prerequisite in subject.prerequisites.all():
        passed = EnrolledSubject.objects.filter(
            enrollment__student=student,
            enrollment__status=Enrollment.STATUS_APPROVED,
            subject=prerequisite,
            final_grade__gte=passing_grade,
        ).exists()
        if not passed:
            logger.debug(f"{student.student_id} has not passed {prerequisite.code} for {subject.code}")
            return False
    return True


def get_eligible_subjects(student, semester):
    """Active subjects for the student's department, year level and semester whose prerequisites are met."""
    from academics.models import Subject

    subjects = Subject.objects.filter(
        department=student.department,
        year_level=student.year_level,
        semester=semester,
        status='active',
    ).prefetch_related('prerequisites')
    return [s for s in subjects if check_prerequisites(s, student)]
