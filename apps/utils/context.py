# utils/context.py

"""
Thread-local actor context.

The authentication layer sets the current actor at the start of a request
(or a management command sets it explicitly). Services read it to stamp
approvers, payment receivers and created/updated-by fields.
"""

from threading import local
import logging

logger = logging.getLogger(__name__)

_thread_locals = local()


def set_request_context(user=None, ip_address=None, request_path=None):
    """
    Set the current request context for this thread.

    Args:
        user: The authenticated user (or None)
        ip_address: Client IP address
        request_path: The request path/URL
    """
    _thread_locals.request_context = {
        'user': user if user is not None and getattr(user, 'is_authenticated', True) else None,
        'ip_address': ip_address,
        'request_path': request_path or '',
    }

    logger.debug(f"Set request context: user={user}, ip={ip_address}")


def get_request_context():
    """
    Get the current request context for this thread.

    Returns:
        dict or None if no context is set.
    """
    return getattr(_thread_locals, 'request_context', None)


def clear_request_context():
    """Clear the request context for this thread."""
    if hasattr(_thread_locals, 'request_context'):
        delattr(_thread_locals, 'request_context')
        logger.debug("Cleared request context")


def get_current_actor_id():
    """ID of the user in the current context, as a string, or None."""
    context = get_request_context()
    if not context or not context.get('user'):
        return None
    return str(context['user'].pk)


def resolve_actor_id(actor=None):
    """
    Normalise an explicit actor (user instance or id) to a string id,
    falling back to the request context.
    """
    if actor is None:
        return get_current_actor_id()
    if hasattr(actor, 'pk'):
        return str(actor.pk)
    return str(actor)


# ============================================================================
# CONTEXT MANAGER
# ============================================================================

class RequestContext:
    """
    Context manager for temporarily setting the actor.

    Example:
        with RequestContext(user=registrar):
            FinancialRecordService.add_payment(record, {...})
    """

    def __init__(self, user=None, ip_address=None, request_path=None):
        self.context = {
            'user': user,
            'ip_address': ip_address,
            'request_path': request_path or '',
        }
        self.previous_context = None

    def __enter__(self):
        self.previous_context = get_request_context()
        _thread_locals.request_context = self.context
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.previous_context:
            _thread_locals.request_context = self.previous_context
        else:
            clear_request_context()
