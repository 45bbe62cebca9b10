"""
Authentication views.

Login issues both a DRF token (``Authorization: Token <key>``) and a JWT
pair; refresh and logout work on the JWT refresh token. These views live
apart from ``hms.authentication`` so that REST framework can import the
authentication class without importing views.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from hms.serializers.auth import LoginSerializer
from hms.services.audit import log_activity
from hms.services.formatting import format_user

from .models import User

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle])
def login_view(request):
    """Username/password login. A ``role`` in the body is ignored."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']

    user = authenticate(request, username=username, password=password)
    if not user:
        log_activity(user=None, action='LOGIN', module='AUTH',
                     description=f'Failed login for {username} from {request.META.get("REMOTE_ADDR")}')
        logger.warning('failed login for %s', username)
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Invalid username or password'}}, status=400)

    log_activity(user=user, action='LOGIN', module='AUTH', record_id=user.id,
                 description=f'Login from {request.META.get("REMOTE_ADDR")}')

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.display_name,
            'role': user.role,
        },
    }, status=200)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    user: User = request.user
    data = format_user(user)
    doctor = getattr(user, 'doctor_profile', None) if user.role == User.ROLE_DOCTOR else None
    data['doctorId'] = doctor.id if doctor else None
    return Response({'ok': True, 'user': data})


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        if 'refresh' in data:
            data['jwt_refresh'] = data.pop('refresh')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the user's tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            return Response({'ok': False, 'error': {'code': 'invalid_token', 'message': str(e)}}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'ok': True, 'blacklisted': count})
