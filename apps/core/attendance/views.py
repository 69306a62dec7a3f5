from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from apps.core.students.services import ensure_student_access, student_for_user
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import require_role, role_required

from .serializers import (
    AttendanceCreateSerializer,
    AttendanceFilterSerializer,
    AttendanceHistorySerializer,
    AttendanceSerializer,
    AttendanceUpdateSerializer,
    SiswaActionSerializer,
)
from .services import (
    absen_masuk,
    absen_pulang,
    create_absensi,
    delete_absensi,
    get_absensi_history,
    get_absensi_stats,
    get_today_absensi,
    update_absensi,
)


def _scope_to_own_siswa(request, filters):
    """Siswa accounts only ever see their own absensi rows."""
    if request.user.role != 'siswa':
        return filters

    siswa = student_for_user(request.user)
    if siswa is None:
        raise PermissionDenied('No siswa profile is linked to this account.')
    filters['siswa_id'] = siswa.id
    return filters


@api_view(['GET', 'POST'])
def absensi_list(request):
    if request.method == 'GET':
        serializer = AttendanceHistorySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        filters = _scope_to_own_siswa(request, dict(serializer.validated_data))
        return Response(AttendanceSerializer(get_absensi_history(**filters), many=True).data)

    require_role(request.user, ['admin', 'guru'])
    serializer = AttendanceCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    absensi = create_absensi(**serializer.validated_data)
    log_audit_event(
        request,
        'absensi.create',
        target=absensi,
        details=f"Siswa={absensi.siswa_id}, Status={absensi.status}",
    )
    return Response(AttendanceSerializer(absensi).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@role_required(['admin', 'guru'])
def absensi_detail(request, absensi_id):
    if request.method == 'DELETE':
        result = delete_absensi(absensi_id)
        log_audit_event(request, 'absensi.delete', details=f"Absensi={absensi_id}")
        return Response(result)

    serializer = AttendanceUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    absensi = update_absensi(absensi_id, **serializer.validated_data)
    log_audit_event(request, 'absensi.update', target=absensi, details=f"Status={absensi.status}")
    return Response(AttendanceSerializer(absensi).data)


@api_view(['GET'])
def absensi_today(request):
    serializer = AttendanceFilterSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    filters = {
        key: value
        for key, value in serializer.validated_data.items()
        if key in {'siswa_id', 'kelas_id'}
    }
    filters = _scope_to_own_siswa(request, filters)
    return Response(AttendanceSerializer(get_today_absensi(**filters), many=True).data)


@api_view(['GET'])
@role_required(['admin', 'guru'])
def absensi_stats(request):
    serializer = AttendanceFilterSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    filters = dict(serializer.validated_data)
    filters.pop('siswa_id', None)
    return Response(get_absensi_stats(**filters))


@api_view(['POST'])
def absensi_check_in(request):
    serializer = SiswaActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    siswa_id = serializer.validated_data['siswa_id']
    ensure_student_access(request.user, siswa_id)

    absensi = absen_masuk(siswa_id=siswa_id)
    log_audit_event(request, 'absensi.check_in', target=absensi, details=f"Siswa={siswa_id}")
    return Response(AttendanceSerializer(absensi).data)


@api_view(['POST'])
def absensi_check_out(request):
    serializer = SiswaActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    siswa_id = serializer.validated_data['siswa_id']
    ensure_student_access(request.user, siswa_id)

    absensi = absen_pulang(siswa_id=siswa_id)
    log_audit_event(request, 'absensi.check_out', target=absensi, details=f"Siswa={siswa_id}")
    return Response(AttendanceSerializer(absensi).data)
