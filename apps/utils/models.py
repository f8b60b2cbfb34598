# utils/models.py

"""
Base models for the enrollment ledger with audit trail support
and timezone-aware timestamp handling.

Key Features:
- School timezone for all timestamps
- Actor tracking (who created/updated) from the request context
- Change reason tracking
- Financial audit logging
"""

from django.db import models
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from decimal import Decimal, InvalidOperation
import uuid
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# BASE MODEL
# =============================================================================

class BaseModel(models.Model):
    """
    Abstract base model with audit trail fields.

    - created_at / updated_at are set in the school's operational timezone
    - created_by_id / updated_by_id come from the thread-local request context
    - change_reason can be set by callers before saving
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    created_at = models.DateTimeField(
        "Created At",
        db_index=True,
        blank=True,
        editable=False,
        help_text="When this record was created (in school's operational timezone)"
    )
    updated_at = models.DateTimeField(
        "Updated At",
        db_index=True,
        blank=True,
        editable=False,
        help_text="When this record was last updated (in school's operational timezone)"
    )

    # CharField so actors can come from any auth backend
    created_by_id = models.CharField(
        "Created By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who created this record"
    )
    updated_by_id = models.CharField(
        "Updated By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who last updated this record"
    )

    change_reason = models.CharField(
        "Change Reason",
        max_length=255,
        blank=True,
        null=True,
        help_text="Explanation for why this change was made"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        """
        Set timestamps in school timezone and populate actor fields
        from the request context before saving.
        """
        from utils.context import get_current_actor_id
        from core.utils import get_school_current_time

        is_new = self._state.adding
        now = get_school_current_time()

        if is_new:
            if not self.created_at:
                self.created_at = now
            if not self.updated_at:
                self.updated_at = now
        else:
            self.updated_at = now

        actor_id = get_current_actor_id()
        if actor_id:
            if is_new and not self.created_by_id:
                self.created_by_id = actor_id
            self.updated_by_id = actor_id
        elif is_new:
            logger.debug(
                f"No request context available when creating {self.__class__.__name__}. "
                f"Audit fields will not be populated."
            )

        return super().save(*args, **kwargs)

    def get_audit_trail(self):
        """Audit information for this record."""
        return {
            'created_at': self.created_at,
            'created_by_id': self.created_by_id,
            'updated_at': self.updated_at,
            'updated_by_id': self.updated_by_id,
            'change_reason': self.change_reason,
        }


# =============================================================================
# FINANCIAL AUDIT LOG
# =============================================================================

class FinancialAuditLog(models.Model):
    """
    Audit log for ledger mutations (payments, discounts, scholarships,
    enrollment approvals). Timestamps use the school timezone.
    """

    FINANCIAL_ACTIONS = [
        ('RECORD_CREATE', 'Financial Record Created'),
        ('FEES_UPDATE', 'Fees Updated'),
        ('PAYMENT_RECEIVE', 'Payment Received'),
        ('DISCOUNT_APPLY', 'Discount Applied'),
        ('SCHOLARSHIP_APPLY', 'Scholarship Applied'),
        ('SCHOLARSHIP_REMOVE', 'Scholarship Removed'),
        ('ENROLLMENT_APPROVE', 'Enrollment Approved'),
        ('ENROLLMENT_REJECT', 'Enrollment Rejected'),
        ('FINANCIAL_DATA_EXPORT', 'Financial Data Exported'),
    ]

    RISK_LEVEL_CHOICES = [
        ('LOW', 'Low Risk'),
        ('MEDIUM', 'Medium Risk'),
        ('HIGH', 'High Risk'),
        ('CRITICAL', 'Critical Risk'),
    ]

    id = models.AutoField(primary_key=True)

    timestamp = models.DateTimeField(
        db_index=True,
        help_text="When this financial action occurred (in school's operational timezone)"
    )
    action = models.CharField(max_length=30, choices=FINANCIAL_ACTIONS, db_index=True)

    user_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who performed this action"
    )

    # Target object (what was changed)
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True
    )
    object_id = models.CharField(max_length=100, null=True, blank=True)
    content_object = GenericForeignKey('content_type', 'object_id')
    object_description = models.CharField(max_length=500, null=True, blank=True)

    amount_involved = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Monetary amount involved in the action"
    )
    currency = models.CharField(max_length=3, null=True, blank=True, default='PHP')

    student_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    student_number = models.CharField(max_length=50, null=True, blank=True)

    old_values = models.JSONField(null=True, blank=True, help_text="Values before change")
    new_values = models.JSONField(null=True, blank=True, help_text="Values after change")

    risk_level = models.CharField(
        max_length=10,
        choices=RISK_LEVEL_CHOICES,
        default='LOW',
        db_index=True
    )
    additional_data = models.JSONField(default=dict, blank=True)
    notes = models.TextField(null=True, blank=True)
    is_automated = models.BooleanField(default=False)

    class Meta:
        verbose_name = "Financial Audit Log"
        verbose_name_plural = "Financial Audit Logs"
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['timestamp', 'action'], name='fin_audit_time_action_idx'),
            models.Index(fields=['user_id', 'timestamp'], name='fin_audit_user_time_idx'),
            models.Index(fields=['student_id', 'timestamp'], name='fin_audit_student_time_idx'),
        ]

    def __str__(self):
        return f"{self.get_action_display()} at {self.timestamp}"

    def save(self, *args, **kwargs):
        from core.utils import get_school_current_time

        if not self.timestamp:
            self.timestamp = get_school_current_time()
        return super().save(*args, **kwargs)

    @classmethod
    def log_financial_action(
        cls,
        action,
        user_id=None,
        target_object=None,
        amount=None,
        student=None,
        old_values=None,
        new_values=None,
        risk_level='LOW',
        additional_data=None,
        notes=None,
        currency=None,
        is_automated=False,
    ):
        """
        Create a financial audit log entry.

        Example:
            FinancialAuditLog.log_financial_action(
                action='PAYMENT_RECEIVE',
                user_id='42',
                target_object=record,
                amount=payment.amount,
                student=record.student,
            )
        """
        log_data = {
            'action': action,
            'risk_level': risk_level,
            'notes': (notes or '')[:2000],
            'old_values': old_values,
            'new_values': new_values,
            'additional_data': additional_data or {},
            'is_automated': is_automated,
            'user_id': str(user_id) if user_id else None,
        }

        if currency:
            log_data['currency'] = str(currency)[:3].upper()
        else:
            from core.models import FinancialSettings
            log_data['currency'] = FinancialSettings.get_instance().currency[:3].upper()

        if amount is not None:
            try:
                log_data['amount_involved'] = Decimal(str(amount))
            except (ValueError, InvalidOperation, TypeError):
                logger.warning(f"Invalid amount for financial audit log: {amount}")

        if target_object is not None:
            log_data['content_type'] = ContentType.objects.get_for_model(target_object)
            log_data['object_id'] = str(target_object.pk)
            log_data['object_description'] = str(target_object)[:500]

        if student is not None:
            log_data['student_id'] = str(student.pk)
            log_data['student_number'] = getattr(student, 'student_id', None)

        return cls.objects.create(**log_data)
