from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import require_role, role_required

from .serializers import (
    SchoolClassCreateSerializer,
    SchoolClassFilterSerializer,
    SchoolClassSerializer,
    SchoolClassUpdateSerializer,
)
from .services import (
    create_kelas,
    delete_kelas,
    get_kelas,
    list_kelas,
    list_kelas_by_wali_kelas,
    update_kelas,
)


@api_view(['GET', 'POST'])
@role_required(['admin', 'guru'])
def kelas_list(request):
    if request.method == 'GET':
        filters = SchoolClassFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        wali_kelas_id = filters.validated_data.get('wali_kelas_id')
        if wali_kelas_id is not None:
            queryset = list_kelas_by_wali_kelas(wali_kelas_id)
        else:
            queryset = list_kelas()
        return Response(SchoolClassSerializer(queryset, many=True).data)

    require_role(request.user, 'admin')
    serializer = SchoolClassCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    kelas = create_kelas(**serializer.validated_data)
    log_audit_event(request, 'kelas.create', target=kelas, details=kelas.nama_kelas)
    return Response(SchoolClassSerializer(kelas).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@role_required(['admin', 'guru'])
def kelas_detail(request, kelas_id):
    if request.method == 'GET':
        kelas = get_kelas(kelas_id)
        return Response(SchoolClassSerializer(kelas).data if kelas else None)

    require_role(request.user, 'admin')
    if request.method == 'DELETE':
        result = delete_kelas(kelas_id)
        log_audit_event(request, 'kelas.delete', details=f"Kelas={kelas_id}")
        return Response(result)

    serializer = SchoolClassUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    kelas = update_kelas(kelas_id, **serializer.validated_data)
    log_audit_event(request, 'kelas.update', target=kelas)
    return Response(SchoolClassSerializer(kelas).data)
