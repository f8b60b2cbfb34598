# utils/audit.py

import logging

audit_logger = logging.getLogger("financial_audit")
logger = logging.getLogger(__name__)


def log_financial_activity(
    action,
    actor=None,
    target_object=None,
    amount=None,
    student=None,
    old_values=None,
    new_values=None,
    notes=None,
    risk_level='LOW',
    additional_data=None,
    is_automated=False,
):
    """
    Log financial activity for audit purposes using FinancialAuditLog.

    Args:
        action (str): Type of financial action (e.g., PAYMENT_RECEIVE).
        actor (User instance or id, optional): Who performed the action.
            Falls back to the request context.
        target_object (Model instance, optional): Object affected.
        amount (Decimal, optional): Amount involved in the action.
        student (StudentProfile, optional): Related student.
        old_values / new_values (dict, optional): Values before/after.
        notes (str, optional): Additional notes.
        risk_level (str, optional): 'LOW', 'MEDIUM', 'HIGH', 'CRITICAL'.
        additional_data (dict, optional): Extra context-specific data.
        is_automated (bool, optional): Whether action is automated.
    """
    from utils.context import resolve_actor_id

    user_id = resolve_actor_id(actor)
    audit_logger.info(
        f"{action} by={user_id or 'system'} target={target_object} amount={amount}"
    )

    try:
        from utils.models import FinancialAuditLog

        return FinancialAuditLog.log_financial_action(
            action=action,
            user_id=user_id,
            target_object=target_object,
            amount=amount,
            student=student,
            old_values=old_values,
            new_values=new_values,
            notes=notes,
            risk_level=risk_level,
            additional_data=additional_data or {},
            is_automated=is_automated,
        )
    except Exception as e:
        logger.error(f"Error in financial activity logging: {e}", exc_info=True)
        return None
