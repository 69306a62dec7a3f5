from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import require_role, role_required

from .serializers import (
    StudentCreateSerializer,
    StudentFilterSerializer,
    StudentSerializer,
    StudentUpdateSerializer,
)
from .services import (
    create_siswa,
    delete_siswa,
    ensure_student_access,
    get_siswa,
    list_siswa,
    list_siswa_by_kelas,
    update_siswa,
)


@api_view(['GET', 'POST'])
@role_required(['admin', 'guru'])
def siswa_list(request):
    if request.method == 'GET':
        filters = StudentFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        kelas_id = filters.validated_data.get('kelas_id')
        if kelas_id is not None:
            queryset = list_siswa_by_kelas(kelas_id)
        else:
            queryset = list_siswa()
        return Response(StudentSerializer(queryset, many=True).data)

    serializer = StudentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    siswa = create_siswa(**serializer.validated_data)
    log_audit_event(request, 'siswa.create', target=siswa, details=f"NISN={siswa.nisn}")
    return Response(StudentSerializer(siswa).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
def siswa_detail(request, siswa_id):
    if request.method == 'GET':
        ensure_student_access(request.user, siswa_id)
        siswa = get_siswa(siswa_id)
        return Response(StudentSerializer(siswa).data if siswa else None)

    require_role(request.user, ['admin', 'guru'])
    if request.method == 'DELETE':
        result = delete_siswa(siswa_id)
        log_audit_event(request, 'siswa.delete', details=f"Siswa={siswa_id}")
        return Response(result)

    serializer = StudentUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    siswa = update_siswa(siswa_id, **serializer.validated_data)
    log_audit_event(request, 'siswa.update', target=siswa)
    return Response(StudentSerializer(siswa).data)
