from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import require_role, role_required

from .serializers import TeacherCreateSerializer, TeacherSerializer, TeacherUpdateSerializer
from .services import create_guru, delete_guru, get_guru, list_guru, update_guru


@api_view(['GET', 'POST'])
@role_required(['admin', 'guru'])
def guru_list(request):
    if request.method == 'GET':
        return Response(TeacherSerializer(list_guru(), many=True).data)

    require_role(request.user, 'admin')
    serializer = TeacherCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    guru = create_guru(**serializer.validated_data)
    log_audit_event(request, 'guru.create', target=guru, details=f"NIP={guru.nip}")
    return Response(TeacherSerializer(guru).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@role_required(['admin', 'guru'])
def guru_detail(request, guru_id):
    if request.method == 'GET':
        guru = get_guru(guru_id)
        return Response(TeacherSerializer(guru).data if guru else None)

    require_role(request.user, 'admin')
    if request.method == 'DELETE':
        result = delete_guru(guru_id)
        log_audit_event(request, 'guru.delete', details=f"Guru={guru_id}")
        return Response(result)

    serializer = TeacherUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    guru = update_guru(guru_id, **serializer.validated_data)
    log_audit_event(request, 'guru.update', target=guru)
    return Response(TeacherSerializer(guru).data)
