from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.attendance.serializers import AttendanceHistorySerializer
from apps.core.users.audit import log_audit_event
from apps.core.users.decorators import role_required

from .serializers import RekapAbsensiSerializer
from .services import export_absensi_excel, export_absensi_pdf, generate_rekap_absensi


def _run_export(request, action, exporter, serializer_class):
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = exporter(**serializer.validated_data)
    if result['success']:
        log_audit_event(request, action, details=result['download_url'])
    return Response(result)


@api_view(['POST'])
@role_required(['admin', 'guru'])
def export_pdf(request):
    return _run_export(request, 'absensi.export_pdf', export_absensi_pdf, AttendanceHistorySerializer)


@api_view(['POST'])
@role_required(['admin', 'guru'])
def export_excel(request):
    return _run_export(request, 'absensi.export_excel', export_absensi_excel, AttendanceHistorySerializer)


@api_view(['POST'])
@role_required(['admin', 'guru'])
def rekap(request):
    return _run_export(request, 'absensi.rekap', generate_rekap_absensi, RekapAbsensiSerializer)
