from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.utils.exceptions import NotFoundError
from apps.core.utils.lookups import get_or_raise

from .models import LeaveRequest

logger = logging.getLogger(__name__)


@transaction.atomic
def create_pengajuan_izin(*, siswa_id, tanggal, alasan, jenis):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)

    pengajuan = LeaveRequest(
        siswa=siswa,
        tanggal=tanggal,
        alasan=alasan,
        jenis=jenis,
        status=LeaveRequest.STATUS_PENDING,
    )
    pengajuan.full_clean()
    pengajuan.save()
    logger.info('Siswa %s submitted pengajuan izin %s for %s', siswa.pk, pengajuan.pk, tanggal)
    return pengajuan


def _apply_approved_leave(pengajuan, reviewer):
    status = Attendance.STATUS_SAKIT if pengajuan.jenis == LeaveRequest.JENIS_SAKIT else Attendance.STATUS_IZIN
    guru = Teacher.objects.filter(user=reviewer).first() if reviewer else None

    attendance, created = Attendance.objects.update_or_create(
        siswa=pengajuan.siswa,
        tanggal=pengajuan.tanggal,
        defaults={
            'kelas': pengajuan.siswa.kelas,
            'guru': guru,
            'status': status,
            'waktu_masuk': None,
            'waktu_pulang': None,
            'keterangan': f"Approved: {pengajuan.alasan}",
        },
    )
    logger.info(
        '%s absensi %s from pengajuan izin %s',
        'Created' if created else 'Overwrote',
        attendance.pk,
        pengajuan.pk,
    )
    return attendance


@transaction.atomic
def review_pengajuan_izin(pengajuan_id, *, status, reviewer=None):
    pengajuan = LeaveRequest.objects.select_for_update().filter(id=pengajuan_id).first()
    if pengajuan is None:
        raise NotFoundError('Pengajuan izin not found')

    if pengajuan.status != LeaveRequest.STATUS_PENDING:
        raise ValidationError('Pengajuan izin has already been reviewed')

    if status not in {LeaveRequest.STATUS_APPROVED, LeaveRequest.STATUS_REJECTED}:
        raise ValidationError('Invalid review status')

    pengajuan.status = status
    pengajuan.reviewer = reviewer
    pengajuan.reviewed_at = timezone.now()
    pengajuan.save(update_fields=['status', 'reviewer', 'reviewed_at', 'updated_at'])

    if status == LeaveRequest.STATUS_APPROVED:
        _apply_approved_leave(pengajuan, reviewer)

    logger.info('Pengajuan izin %s %s by user %s', pengajuan.pk, status, getattr(reviewer, 'pk', None))
    return pengajuan


def get_pengajuan_izin_by_siswa(siswa_id):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)
    return LeaveRequest.objects.filter(siswa=siswa).order_by('-created_at', '-id')


def get_pending_pengajuan_izin(kelas_id=None):
    queryset = LeaveRequest.objects.filter(status=LeaveRequest.STATUS_PENDING).select_related('siswa')
    if kelas_id is not None:
        kelas = get_or_raise(SchoolClass, 'Kelas not found', id=kelas_id)
        queryset = queryset.filter(siswa__kelas=kelas)
    return queryset.order_by('created_at', 'id')


def get_all_pengajuan_izin():
    return LeaveRequest.objects.select_related('siswa').order_by('-created_at', '-id')


@transaction.atomic
def delete_pengajuan_izin(pengajuan_id):
    pengajuan = get_or_raise(LeaveRequest, 'Pengajuan izin not found', id=pengajuan_id)
    pengajuan.delete()
    logger.info('Deleted pengajuan izin %s', pengajuan_id)
    return {'success': True, 'message': 'Pengajuan izin deleted successfully'}
