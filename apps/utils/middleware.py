# utils/middleware.py

import logging
from utils.context import set_request_context, clear_request_context

logger = logging.getLogger(__name__)


class ActorContextMiddleware:
    """
    Puts the authenticated user and client address into the thread-local
    context for the duration of a request, so services can stamp
    approvers and payment receivers without having the request passed in.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        user = getattr(request, 'user', None)
        set_request_context(
            user=user if user is not None and user.is_authenticated else None,
            ip_address=self._get_client_ip(request),
            request_path=request.path,
        )

        try:
            response = self.get_response(request)
        finally:
            clear_request_context()

        return response

    def _get_client_ip(self, request):
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')

        if x_forwarded_for:
            # first hop is the client
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')
