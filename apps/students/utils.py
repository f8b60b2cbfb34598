# students/utils.py

"""
Student ID helpers.

Pure functions only: formatting, parsing and validation of institutional
student IDs and emails. Sequence allocation (which reads the database)
lives in students/services.py.

Format:
    m{YY}-{DD}{S}-{NNN}
    YY  = 2-digit admission year
    DD  = department code (BSIT=14 ... JHS=19)
    S   = one random digit
    NNN = 3-digit cohort sequence starting at 100

Legacy IDs carry a 4-digit middle segment (e.g. m23-1470-578); both
widths validate.
"""

import random
import re
import logging

from django.core.exceptions import ValidationError

from core.utils import get_year_suffix

logger = logging.getLogger(__name__)

DEPARTMENT_STUDENT_CODES = {
    'BSIT': '14',
    'BSCS': '15',
    'BSN': '16',
    'BS RADTECH': '17',
    'SHS': '18',
    'JHS': '19',
}
DEFAULT_STUDENT_CODE = DEPARTMENT_STUDENT_CODES['BSIT']

STUDENT_SEQUENCE_START = 100
STUDENT_SEQUENCE_MAX = 999

STUDENT_ID_PATTERN = re.compile(r'^m\d{2}-\d{3,4}-\d{3}$')
STUDENT_ID_PARTS = re.compile(r'^(m\d{2}-\d{2})\d{1,2}-(\d{3})$')


# =============================================================================
# DEPARTMENT CODES
# =============================================================================

def get_department_code(department):
    """
    Two-digit student code for a department.
    Unknown departments fall back to BSIT's code.
    """
    code = DEPARTMENT_STUDENT_CODES.get(department)
    if code is None:
        logger.warning(f"Unknown department {department!r}, using default code {DEFAULT_STUDENT_CODE}")
        return DEFAULT_STUDENT_CODE
    return code


# =============================================================================
# FORMATTING & PARSING
# =============================================================================

def build_student_id_prefix(admission_year, department):
    """
    Cohort lookup prefix, e.g. (2026, 'BSIT') → "m26-14".
    """
    return f"m{get_year_suffix(admission_year)}-{get_department_code(department)}"


def format_student_id(prefix, sequence, random_digit=None):
    """
    Assemble a full student ID from its cohort prefix and sequence.

    Examples:
        format_student_id("m26-14", 100, 7) → "m26-147-100"
    """
    if sequence > STUDENT_SEQUENCE_MAX:
        raise ValidationError(
            f"Student ID sequence for cohort {prefix} is exhausted "
            f"(next would be {sequence}, max {STUDENT_SEQUENCE_MAX})."
        )
    if random_digit is None:
        random_digit = random.randint(0, 9)
    return f"{prefix}{random_digit}-{sequence:03d}"


def parse_student_sequence(student_id):
    """
    Trailing numeric sequence of a student ID, or None if unparseable.

    Examples:
        "m23-1470-578" → 578
        "m26-14x-abc"  → None
    """
    try:
        return int(student_id.rsplit('-', 1)[1])
    except (AttributeError, IndexError, ValueError):
        return None


def split_student_id(student_id):
    """
    Cohort prefix and sequence of a student ID, or (None, None).

    Examples:
        "m26-147-100"  → ("m26-14", 100)
        "m23-1470-578" → ("m23-14", 578)
    """
    match = STUDENT_ID_PARTS.match(student_id or '')
    if not match:
        return None, None
    return match.group(1), int(match.group(2))


def next_student_sequence(existing_ids):
    """
    Next sequence for a cohort given its issued IDs: highest parsed + 1,
    or the start value when nothing parses.
    """
    sequences = [s for s in (parse_student_sequence(i) for i in existing_ids) if s is not None]
    if not sequences:
        return STUDENT_SEQUENCE_START
    return max(sequences) + 1


def get_student_id_year_suffix(student_id):
    """'m23-1470-578' → '23'"""
    match = re.match(r'^m(\d{2})-', student_id or '')
    return match.group(1) if match else None


# =============================================================================
# VALIDATION
# =============================================================================

def is_valid_student_id(student_id):
    return bool(STUDENT_ID_PATTERN.match(student_id or ''))


def validate_student_id(student_id):
    """Raise ValidationError unless the ID matches the institutional format."""
    if not is_valid_student_id(student_id):
        raise ValidationError(
            f"Student ID '{student_id}' does not match the format mYY-XXXX-XXX."
        )


def generate_student_email(student_id, domain=None):
    """
    Institutional email for a student ID.

    Example:
        generate_student_email("m23-1470-578") → "m23-1470-578@manila.uphsl.edu.ph"
    """
    if domain is None:
        from core.models import SchoolConfiguration
        domain = SchoolConfiguration.get_instance().student_email_domain
    return f"{student_id}@{domain}"


def validate_student_email(student_id, email, domain=None):
    """The email must be exactly the one derived from the student ID."""
    expected = generate_student_email(student_id, domain)
    if (email or '') != expected:
        raise ValidationError(
            f"Email '{email}' does not match student ID; expected '{expected}'."
        )


def validate_enrollment_year(student_id, enrollment_year):
    """The enrollment year's last two digits must equal the ID's year segment."""
    suffix = get_student_id_year_suffix(student_id)
    if suffix is None or enrollment_year is None:
        raise ValidationError("Enrollment year cannot be checked against student ID.")
    if get_year_suffix(enrollment_year) != suffix:
        raise ValidationError(
            f"Enrollment year {enrollment_year} does not match student ID year '{suffix}'."
        )
