import logging

from django.conf import settings
from django.utils.crypto import constant_time_compare
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import session
from .serializers import LoginSerializer

logger = logging.getLogger(__name__)


class LoginView(APIView):

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data['username']
        password = serializer.validated_data['password']
        valid = constant_time_compare(username, settings.POS_USERNAME) & constant_time_compare(
            password, settings.POS_PASSWORD
        )
        if not valid:
            logger.warning('Failed login attempt for %r', username)
            return Response({'error': 'Invalid username or password'}, status=status.HTTP_401_UNAUTHORIZED)
        session.login(request, username)
        logger.info('%s logged in', username)
        return Response({'message': 'Login successful', 'username': username})


class LogoutView(APIView):

    def post(self, request):
        session.logout(request)
        return Response({'message': 'Logged out'})


class LogoutBeaconView(APIView):
    """Fired by navigator.sendBeacon when the till page closes; nobody reads the reply."""

    def post(self, request):
        session.logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)
