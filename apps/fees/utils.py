# fees/utils.py

"""
Fee helpers that read (but do not mutate) ledger rows.
"""

from django.db import transaction
from django.db.models import Max
import logging

logger = logging.getLogger(__name__)

RECEIPT_SEQUENCE_WIDTH = 6


def generate_receipt_number():
    """
    Generate unique receipt number using financial settings.
    Format: RCPT-000001 or 000001 when no prefix is configured.

    Returns:
        str: Unique receipt number
    """
    from fees.models import LedgerPayment
    from core.models import FinancialSettings

    settings = FinancialSettings.get_instance()
    prefix = settings.receipt_prefix.strip() if settings.receipt_prefix else ""
    search_prefix = f"{prefix}-" if prefix else ""

    with transaction.atomic():
        if search_prefix:
            queryset = LedgerPayment.objects.filter(
                receipt_number__startswith=search_prefix
            ).select_for_update()
        else:
            queryset = LedgerPayment.objects.exclude(receipt_number='').select_for_update()

        numbers = []
        for receipt_num in queryset.values_list('receipt_number', flat=True):
            try:
                numbers.append(int(receipt_num[len(search_prefix):]))
            except ValueError:
                logger.warning(f"Skipping unparseable receipt number {receipt_num!r}")

        new_number = max(numbers) + 1 if numbers else 1
        receipt_number = f"{search_prefix}{new_number:0{RECEIPT_SEQUENCE_WIDTH}d}"

    logger.debug(f"Generated receipt number: {receipt_number}")
    return receipt_number


def next_position(queryset):
    """Next 0-based position for an ordered child collection."""
    last = queryset.aggregate(last=Max('position'))['last']
    return 0 if last is None else last + 1
