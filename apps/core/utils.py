# core/utils.py

"""
Central utilities shared by every app: school timezone, money handling.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


# =============================================================================
# CURRENCY & MONEY
# =============================================================================

def get_base_currency():
    """
    Get base currency from school financial settings.

    Returns:
        str: Currency code (defaults to 'PHP')
    """
    try:
        from core.models import FinancialSettings
        return FinancialSettings.get_instance().currency
    except Exception as e:
        logger.warning(f"Could not fetch currency from settings: {e}")
        return 'PHP'


def format_money(amount, include_symbol=True):
    """
    Format money amount according to school financial settings.

    Example:
        >>> format_money(3575)          # "PHP 3,575.00"
        >>> format_money(3575, False)   # "3,575.00"
    """
    try:
        from core.models import FinancialSettings
        return FinancialSettings.get_instance().format_currency(amount, include_symbol)
    except Exception as e:
        logger.warning(f"Could not format using settings: {e}")

    try:
        formatted = f"{Decimal(str(amount or 0)):,.2f}"
    except (ValueError, TypeError, InvalidOperation):
        formatted = "0.00"
    return f"PHP {formatted}" if include_symbol else formatted


def safe_decimal(value, default=Decimal('0.00')):
    """
    Convert a value to Decimal, returning default for None/blank/garbage.

    Example:
        >>> safe_decimal("12.5")    # Decimal('12.5')
        >>> safe_decimal(None)      # Decimal('0.00')
    """
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        logger.warning(f"Could not convert {value!r} to Decimal, using {default}")
        return default


def round_to_currency(amount):
    """Quantize to cents, rounding half up."""
    return safe_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_percentage(part, whole, decimal_places=2):
    """
    Calculate percentage with safe division.

    Returns:
        Decimal: Percentage value, 0 if whole is 0
    """
    part = safe_decimal(part)
    whole = safe_decimal(whole)

    if whole == 0:
        return Decimal('0.00')

    quantum = Decimal(1).scaleb(-decimal_places)
    return ((part / whole) * 100).quantize(quantum, rounding=ROUND_HALF_UP)


# =============================================================================
# TIMEZONE UTILITY FUNCTIONS
# =============================================================================

def get_school_timezone():
    """
    Get the school's operational timezone (Django's TIME_ZONE setting).

    Returns:
        ZoneInfo: School's operational timezone
    """
    from zoneinfo import ZoneInfo
    from django.conf import settings

    return ZoneInfo(getattr(settings, 'TIME_ZONE', None) or 'Asia/Manila')


def get_school_current_time():
    """
    Get current time in school's operational timezone.

    Example:
        >>> payment.payment_date = get_school_current_time()
    """
    from django.utils import timezone
    return timezone.now().astimezone(get_school_timezone())


def get_school_today():
    """
    Get today's date in school's operational timezone.

    Always use this instead of date.today() for enrollment windows,
    due dates and overdue checks.
    """
    return get_school_current_time().date()


def localize_datetime(dt):
    """Convert a naive or aware datetime to the school's timezone."""
    from django.utils import timezone
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, get_school_timezone())
    return dt.astimezone(get_school_timezone())


def get_year_suffix(year):
    """
    Two-digit year suffix, century safe.

    Example:
        >>> get_year_suffix(2026)   # "26"
        >>> get_year_suffix(2105)   # "05"
    """
    return f"{int(year) % 100:02d}"
