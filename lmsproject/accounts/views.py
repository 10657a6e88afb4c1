"""
Accounts views - registration, session login/logout, users and tenants
"""
import logging

from django.contrib.auth import authenticate, login as auth_login, logout as auth_logout
from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.exceptions import NotFound, PermissionDenied, AuthenticationFailed
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .models import Tenant, User
from .permissions import IsAdmin, IsSuperAdmin, ensure_same_tenant, is_staff_role
from .serializers import (
    TenantSerializer, UserSerializer, UserUpdateSerializer, RegisterSerializer, LoginSerializer
)

logger = logging.getLogger(__name__)


# ============ Authentication Endpoints ============

@api_view(['POST'])
@permission_classes([AllowAny])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def register(request):
    """Create an account and sign it in. Multipart so a profile photo can ride along."""
    serializer = RegisterSerializer(data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        user = serializer.save()

    logger.info("Registered user %s (role=%s, tenant=%s)", user.username, user.role, user.tenant_id)

    # An admin creating accounts for others keeps their own session
    if not request.user.is_authenticated:
        auth_login(request._request, user, backend='django.contrib.auth.backends.ModelBackend')

    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate(
        request._request,
        username=serializer.validated_data['username'],
        password=serializer.validated_data['password'],
    )
    if user is None:
        raise AuthenticationFailed('Invalid username or password')

    auth_login(request._request, user)
    return Response(UserSerializer(user).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    auth_logout(request._request)
    return Response(status=status.HTTP_200_OK)


@api_view(['GET'])
def current_user(request):
    return Response(UserSerializer(request.user).data)


# ============ Tenants ============

@api_view(['GET'])
def tenant_detail(request):
    """The caller's own tenant."""
    return Response(TenantSerializer(request.user.tenant).data)


@api_view(['GET', 'POST'])
@permission_classes([IsSuperAdmin])
def admin_tenants(request):
    if request.method == 'GET':
        return Response(TenantSerializer(Tenant.objects.all(), many=True).data)

    serializer = TenantSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    tenant = serializer.save()
    logger.info("Tenant %s created by %s", tenant.subdomain, request.user.username)
    return Response(TenantSerializer(tenant).data, status=status.HTTP_201_CREATED)


# ============ Users ============

@api_view(['GET'])
@permission_classes([IsAdmin])
def user_list(request):
    users = User.objects.filter(tenant_id=request.user.tenant_id)
    return Response(UserSerializer(users, many=True).data)


def _get_user(user_id):
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise NotFound('User not found')


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def user_detail(request, user_id):
    if request.method == 'GET':
        if not IsAdmin().has_permission(request, None):
            raise PermissionDenied(IsAdmin.message)
        user = _get_user(user_id)
        ensure_same_tenant(request.user, user.tenant_id, 'Access denied to this user')
        return Response(UserSerializer(user).data)

    if user_id != request.user.id and not is_staff_role(request.user):
        raise PermissionDenied('You can only update your own profile')

    user = _get_user(user_id)
    ensure_same_tenant(request.user, user.tenant_id, 'Access denied to this user')

    serializer = UserUpdateSerializer(user, data=request.data, partial=True, context={'request': request})
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    return Response(UserSerializer(user).data)
