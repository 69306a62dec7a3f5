from django.contrib.auth import login, logout
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .models import User
from .serializers import LoginSerializer, UserCreateSerializer, UserSerializer, UserUpdateSerializer
from .services import (
    authenticate_by_role,
    build_user_payload,
    create_user,
    delete_user,
    get_current_user,
    list_users,
    update_user,
)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user, message = authenticate_by_role(**serializer.validated_data)
    if user is None:
        return Response({'success': False, 'user': None, 'message': message})

    login(request, user, backend='django.contrib.auth.backends.ModelBackend')
    return Response({
        'success': True,
        'user': build_user_payload(user),
        'message': message,
    })


@api_view(['POST'])
def logout_view(request):
    logout(request)
    return Response({'success': True, 'message': 'Logout successful'})


@api_view(['GET'])
def me(request):
    return Response(build_user_payload(request.user))


@api_view(['GET'])
def user_profile(request, user_id):
    if request.user.role != User.ROLE_ADMIN and request.user.id != user_id:
        raise PermissionDenied('You can only view your own profile.')
    return Response(get_current_user(user_id))


@api_view(['GET', 'POST'])
@role_required(User.ROLE_ADMIN)
def user_list(request):
    if request.method == 'GET':
        return Response(UserSerializer(list_users(), many=True).data)

    serializer = UserCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = create_user(**serializer.validated_data)
    log_audit_event(request, 'user.create', target=user, details=f"Role={user.role}")
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@role_required(User.ROLE_ADMIN)
def user_detail(request, user_id):
    if request.method == 'DELETE':
        result = delete_user(user_id)
        log_audit_event(request, 'user.delete', details=f"User={user_id}")
        return Response(result)

    serializer = UserUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = update_user(user_id, **serializer.validated_data)
    log_audit_event(request, 'user.update', target=user, details=', '.join(sorted(serializer.validated_data)))
    return Response(UserSerializer(user).data)
