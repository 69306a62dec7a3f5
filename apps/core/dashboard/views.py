from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.core.students.services import ensure_student_access
from apps.core.teachers.models import Teacher
from apps.core.users.decorators import role_required

from .services import get_dashboard_stats, get_guru_dashboard_stats, get_siswa_dashboard_stats


@api_view(['GET'])
@role_required('admin')
def dashboard(request):
    return Response(get_dashboard_stats())


@api_view(['GET'])
@role_required(['admin', 'guru'])
def guru_dashboard(request, guru_id):
    if request.user.role == 'guru':
        own = Teacher.objects.filter(user=request.user).first()
        if own is None or own.id != guru_id:
            raise PermissionDenied('Guru can only view their own dashboard.')
    return Response(get_guru_dashboard_stats(guru_id))


@api_view(['GET'])
def siswa_dashboard(request, siswa_id):
    ensure_student_access(request.user, siswa_id)
    return Response(get_siswa_dashboard_stats(siswa_id))


@api_view(['GET'])
@permission_classes([AllowAny])
def healthcheck(request):
    return Response({'status': 'ok', 'timestamp': timezone.now().isoformat()})
