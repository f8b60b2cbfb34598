# hr/utils.py

"""
HR Utility Functions

Pure helpers for employee IDs:
- Department prefix lookup
- ID prefix building and parsing (logic only, not allocation)

NO DATABASE WRITES. For allocation see hr/services.py
"""

import re
import logging

from django.core.exceptions import ValidationError

from core.utils import get_year_suffix

logger = logging.getLogger(__name__)

DEPARTMENT_EMPLOYEE_PREFIXES = {
    'BSIT': 'T14',
    'BSCS': 'T15',
    'BSN': 'T16',
    'BS RADTECH': 'T17',
    'SHS': 'T18',
    'JHS': 'T19',
}
DEFAULT_EMPLOYEE_PREFIX = DEPARTMENT_EMPLOYEE_PREFIXES['BSIT']

EMPLOYEE_SEQUENCE_START = 1001
EMPLOYEE_SEQUENCE_MAX = 9999

EMPLOYEE_ID_PATTERN = re.compile(r'^(T\d{2})(\d{2})-(\d{4})$')


def get_employee_prefix(department):
    """Unknown departments fall back to BSIT's prefix."""
    prefix = DEPARTMENT_EMPLOYEE_PREFIXES.get(department)
    if prefix is None:
        logger.warning(f"Unknown department {department!r}, using default prefix {DEFAULT_EMPLOYEE_PREFIX}")
        return DEFAULT_EMPLOYEE_PREFIX
    return prefix


def build_employee_id_prefix(joining_year, department):
    """
    Examples:
        (2026, 'BSIT') → "T1426-"
        (2026, 'JHS')  → "T1926-"
    """
    return f"{get_employee_prefix(department)}{get_year_suffix(joining_year)}-"


def format_employee_id(prefix, sequence):
    if sequence > EMPLOYEE_SEQUENCE_MAX:
        raise ValidationError(
            f"Employee ID sequence for {prefix} is exhausted "
            f"(next would be {sequence}, max {EMPLOYEE_SEQUENCE_MAX})."
        )
    return f"{prefix}{sequence:04d}"


def parse_employee_id_components(employee_id):
    """
    Parse an employee ID into its components.

    Returns:
        dict with 'prefix', 'year_suffix', 'sequence', or None if the ID
        is not in the current format.

    Examples:
        "T1426-1001" → {'prefix': 'T14', 'year_suffix': '26', 'sequence': 1001}
    """
    match = EMPLOYEE_ID_PATTERN.match(employee_id or '')
    if not match:
        return None
    prefix, year_suffix, sequence = match.groups()
    return {'prefix': prefix, 'year_suffix': year_suffix, 'sequence': int(sequence)}


def next_employee_sequence(existing_ids):
    sequences = [
        c['sequence'] for c in (parse_employee_id_components(i) for i in existing_ids) if c
    ]
    if not sequences:
        return EMPLOYEE_SEQUENCE_START
    return max(sequences) + 1


def validate_employee_id(employee_id):
    if parse_employee_id_components(employee_id) is None:
        raise ValidationError(
            f"Employee ID '{employee_id}' does not match the format TDDYY-NNNN."
        )
