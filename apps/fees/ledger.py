# fees/ledger.py

"""
Ledger arithmetic for financial records and enrollments.

Pure functions over Decimal amounts: no database access, no rounding
surprises. Every derived amount is quantized to cents (half up), so the
same inputs always produce the same outputs.

Discounts and scholarship coverage stack. Balances are not clamped: an
overpayment shows as a negative remaining balance.
"""

from collections import namedtuple
from decimal import Decimal

from core.utils import round_to_currency, safe_decimal

ZERO = Decimal('0.00')
HUNDRED = Decimal('100')

FEE_CATEGORIES = ('tuition', 'miscellaneous', 'laboratory', 'other')

STATUS_PENDING = 'pending'
STATUS_PARTIALLY_PAID = 'partially paid'
STATUS_FULLY_PAID = 'fully paid'
STATUS_OVERDUE = 'overdue'

NO_SCHOLARSHIP = 'none'

DiscountLine = namedtuple('DiscountLine', ['percentage', 'amount'])


# =============================================================================
# COMPONENT CALCULATIONS
# =============================================================================

def sum_amounts(amounts):
    """Sum of an iterable of money values, quantized."""
    return round_to_currency(sum((safe_decimal(a) for a in amounts), ZERO))


def calculate_tuition_total(base_fee, per_unit_fee, total_units):
    """
    Tuition = base fee + per-unit fee × units.

    Example:
        >>> calculate_tuition_total(0, 1000, 3)   # Decimal('3000.00')
    """
    base = safe_decimal(base_fee)
    per_unit = safe_decimal(per_unit_fee)
    units = safe_decimal(total_units, default=Decimal('0'))
    return round_to_currency(base + per_unit * units)


def calculate_discount_amounts(total_assessment, discounts):
    """
    Resolve each discount line to an amount.

    A line with a positive percentage is recomputed from the assessment;
    otherwise its flat amount stands.

    Args:
        total_assessment: Assessment before any discount.
        discounts: iterable of objects/tuples with percentage and amount.

    Returns:
        tuple: ([Decimal per line], Decimal total)
    """
    assessment = safe_decimal(total_assessment)
    amounts = []

    for line in discounts:
        percentage, amount = _discount_parts(line)
        if percentage > 0:
            amounts.append(round_to_currency(assessment * percentage / HUNDRED))
        else:
            amounts.append(round_to_currency(amount))

    return amounts, sum_amounts(amounts)


def _discount_parts(line):
    if isinstance(line, dict):
        return safe_decimal(line.get('percentage')), safe_decimal(line.get('amount'))
    if isinstance(line, tuple):
        return safe_decimal(line[0]), safe_decimal(line[1])
    return safe_decimal(getattr(line, 'percentage', None)), safe_decimal(getattr(line, 'amount', None))


def calculate_scholarship_discount(subtotals, scholarship_type, coverage):
    """
    Scholarship discount as Σ subtotal[category] × coverage[category] / 100.

    Args:
        subtotals: dict keyed by FEE_CATEGORIES.
        scholarship_type: 'none' (or empty) disables the scholarship.
        coverage: dict of percentages keyed by FEE_CATEGORIES; missing
            categories count as 0.
    """
    if not scholarship_type or scholarship_type == NO_SCHOLARSHIP:
        return ZERO

    coverage = coverage or {}
    discount = sum(
        (safe_decimal(subtotals.get(category)) * safe_decimal(coverage.get(category)) / HUNDRED
         for category in FEE_CATEGORIES),
        ZERO,
    )
    return round_to_currency(discount)


def derive_payment_status(remaining_balance, total_paid, due_date=None, today=None):
    """
    First match wins:
        remaining ≤ 0             → 'fully paid'
        paid > 0                  → 'partially paid'
        due date before today     → 'overdue'
        otherwise                 → 'pending'
    """
    if safe_decimal(remaining_balance) <= 0:
        return STATUS_FULLY_PAID
    if safe_decimal(total_paid) > 0:
        return STATUS_PARTIALLY_PAID
    if due_date is not None and today is not None and due_date < today:
        return STATUS_OVERDUE
    return STATUS_PENDING


# =============================================================================
# FULL LEDGER
# =============================================================================

def compute_ledger(*, base_fee=ZERO, per_unit_fee=ZERO, total_units=0,
                   miscellaneous_fees=(), laboratory_fees=(), other_fees=(),
                   discounts=(), scholarship_type=NO_SCHOLARSHIP,
                   scholarship_coverage=None, payments=(), due_date=None, today=None):
    """
    Derive every computed field of a financial record.

    Fee and payment collections are iterables of amounts. Discounts are
    (percentage, amount) lines as accepted by calculate_discount_amounts.

    Example:
        >>> ledger = compute_ledger(per_unit_fee=1000, total_units=3,
        ...                         miscellaneous_fees=[500, 75],
        ...                         discounts=[(10, 0)], payments=[1000])
        >>> ledger['total_due'], ledger['remaining_balance'], ledger['status']
        (Decimal('3217.50'), Decimal('2217.50'), 'partially paid')
    """
    tuition_total = calculate_tuition_total(base_fee, per_unit_fee, total_units)

    subtotals = {
        'tuition': tuition_total,
        'miscellaneous': sum_amounts(miscellaneous_fees),
        'laboratory': sum_amounts(laboratory_fees),
        'other': sum_amounts(other_fees),
    }
    total_assessment = sum_amounts(subtotals.values())

    discount_amounts, discount_total = calculate_discount_amounts(total_assessment, discounts)
    scholarship_discount = calculate_scholarship_discount(
        subtotals, scholarship_type, scholarship_coverage
    )
    total_discounts = round_to_currency(discount_total + scholarship_discount)

    total_due = round_to_currency(total_assessment - total_discounts)
    total_payments = sum_amounts(payments)
    remaining_balance = round_to_currency(total_due - total_payments)

    return {
        'tuition_total': tuition_total,
        'subtotals': subtotals,
        'total_assessment': total_assessment,
        'discount_amounts': discount_amounts,
        'scholarship_discount': scholarship_discount,
        'total_discounts': total_discounts,
        'total_due': total_due,
        'total_payments': total_payments,
        'remaining_balance': remaining_balance,
        'status': derive_payment_status(remaining_balance, total_payments, due_date, today),
    }


def compute_enrollment_balance(tuition_fee, misc_fees, lab_fees, discount_percentage, payments):
    """
    Enrollment-level balance:
        total_fees = tuition + misc + lab
        balance    = total_fees − total_fees × discount% − Σ payments

    Returns:
        tuple: (total_fees, balance)

    Example:
        >>> compute_enrollment_balance(3000, 575, 0, 10, [1000])
        (Decimal('3575.00'), Decimal('2217.50'))
    """
    total_fees = sum_amounts([tuition_fee, misc_fees, lab_fees])
    discount_amount = round_to_currency(total_fees * safe_decimal(discount_percentage) / HUNDRED)
    balance = round_to_currency(total_fees - discount_amount - sum_amounts(payments))
    return total_fees, balance
