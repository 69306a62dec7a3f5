from __future__ import annotations

from django.utils import timezone

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.attendance.services import count_by_status
from apps.core.leaves.models import LeaveRequest
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.utils.lookups import get_or_raise


def _pending_requests():
    return LeaveRequest.objects.filter(status=LeaveRequest.STATUS_PENDING)


def get_dashboard_stats():
    today = timezone.localdate()
    return {
        'total_siswa': Student.objects.count(),
        'total_guru': Teacher.objects.count(),
        'total_kelas': SchoolClass.objects.count(),
        'absensi_hari_ini': count_by_status(Attendance.objects.filter(tanggal=today)),
        'pengajuan_pending': _pending_requests().count(),
    }


def get_guru_dashboard_stats(guru_id):
    """Counts scoped to the classes the guru is wali kelas of."""
    guru = get_or_raise(Teacher, 'Guru not found', id=guru_id)
    today = timezone.localdate()

    return {
        'total_siswa_kelas': Student.objects.filter(kelas__wali_kelas=guru).count(),
        'absensi_hari_ini': count_by_status(
            Attendance.objects.filter(siswa__kelas__wali_kelas=guru, tanggal=today)
        ),
        'pengajuan_pending': _pending_requests().filter(siswa__kelas__wali_kelas=guru).count(),
    }


def get_siswa_dashboard_stats(siswa_id):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)
    today = timezone.localdate()

    absensi_bulan_ini = count_by_status(
        Attendance.objects.filter(
            siswa=siswa,
            tanggal__year=today.year,
            tanggal__month=today.month,
        )
    )

    today_row = Attendance.objects.filter(siswa=siswa, tanggal=today).first()
    absensi_hari_ini = {
        'status': today_row.status if today_row else None,
        'waktu_masuk': today_row.waktu_masuk if today_row else None,
        'waktu_pulang': today_row.waktu_pulang if today_row else None,
    }

    return {
        'absensi_bulan_ini': absensi_bulan_ini,
        'pengajuan_pending': _pending_requests().filter(siswa=siswa).count(),
        'absensi_hari_ini': absensi_hari_ini,
    }
