from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.students.services import ensure_student_access, student_for_user
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .serializers import (
    LeaveRequestCreateSerializer,
    LeaveRequestFilterSerializer,
    LeaveRequestReviewSerializer,
    LeaveRequestSerializer,
)
from .services import (
    create_pengajuan_izin,
    delete_pengajuan_izin,
    get_all_pengajuan_izin,
    get_pending_pengajuan_izin,
    get_pengajuan_izin_by_siswa,
    review_pengajuan_izin,
)


@api_view(['GET', 'POST'])
def pengajuan_izin_list(request):
    if request.method == 'GET':
        serializer = LeaveRequestFilterSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        siswa_id = serializer.validated_data.get('siswa_id')

        if request.user.role == 'siswa':
            own = student_for_user(request.user)
            siswa_id = siswa_id or getattr(own, 'id', None)
            ensure_student_access(request.user, siswa_id)

        if siswa_id is not None:
            queryset = get_pengajuan_izin_by_siswa(siswa_id)
        else:
            queryset = get_all_pengajuan_izin()
        return Response(LeaveRequestSerializer(queryset, many=True).data)

    serializer = LeaveRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    ensure_student_access(request.user, serializer.validated_data['siswa_id'])

    pengajuan = create_pengajuan_izin(**serializer.validated_data)
    log_audit_event(
        request,
        'pengajuan_izin.create',
        target=pengajuan,
        details=f"Siswa={pengajuan.siswa_id}, Jenis={pengajuan.jenis}, Tanggal={pengajuan.tanggal}",
    )
    return Response(LeaveRequestSerializer(pengajuan).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@role_required(['admin', 'guru'])
def pengajuan_izin_pending(request):
    serializer = LeaveRequestFilterSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    queryset = get_pending_pengajuan_izin(serializer.validated_data.get('kelas_id'))
    return Response(LeaveRequestSerializer(queryset, many=True).data)


@api_view(['DELETE'])
@role_required(['admin', 'guru'])
def pengajuan_izin_detail(request, pengajuan_id):
    result = delete_pengajuan_izin(pengajuan_id)
    log_audit_event(request, 'pengajuan_izin.delete', details=f"Pengajuan={pengajuan_id}")
    return Response(result)


@api_view(['POST'])
@role_required(['admin', 'guru'])
def pengajuan_izin_review(request, pengajuan_id):
    serializer = LeaveRequestReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    pengajuan = review_pengajuan_izin(
        pengajuan_id,
        status=serializer.validated_data['status'],
        reviewer=request.user,
    )
    log_audit_event(
        request,
        'pengajuan_izin.review',
        target=pengajuan,
        details=f"Status={pengajuan.status}",
    )
    return Response(LeaveRequestSerializer(pengajuan).data)
