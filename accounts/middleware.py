import logging

from django.shortcuts import redirect
from django.urls import reverse

from .session import is_logged_in

logger = logging.getLogger(__name__)


class LoginRequiredMiddleware:
    """Every /api/ route except the login endpoints needs a logged-in session."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith('/api/') and not self._is_exempt(request.path) and not is_logged_in(request):
            logger.debug('Rejected unauthenticated %s %s', request.method, request.path)
            return redirect('/')
        return self.get_response(request)

    @staticmethod
    def _is_exempt(path):
        return path in (reverse('login'), reverse('logout'), reverse('logout_beacon'))
