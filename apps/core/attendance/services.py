from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from apps.core.academics.models import SchoolClass
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.utils.lookups import get_or_raise

from .models import Attendance

logger = logging.getLogger(__name__)


def _history_default_limit() -> int:
    return int(getattr(settings, 'ABSENSI_HISTORY_DEFAULT_LIMIT', 50))


def current_time():
    return timezone.localtime().time().replace(microsecond=0)


def empty_status_counts():
    return {status: 0 for status in Attendance.STATUSES}


def count_by_status(queryset):
    """Group ``queryset`` by status; every status key is present, defaulting to zero."""
    counts = empty_status_counts()
    rows = queryset.order_by().values('status').annotate(total=Count('id'))
    for row in rows:
        counts[row['status']] = row['total']
    return counts


def filter_absensi(queryset=None, *, siswa_id=None, kelas_id=None, start_date=None, end_date=None):
    if queryset is None:
        queryset = Attendance.objects.all()

    if siswa_id is not None:
        queryset = queryset.filter(siswa_id=siswa_id)
    if kelas_id is not None:
        queryset = queryset.filter(kelas_id=kelas_id)
    if start_date is not None:
        queryset = queryset.filter(tanggal__gte=start_date)
    if end_date is not None:
        queryset = queryset.filter(tanggal__lte=end_date)
    return queryset


def _ensure_single_record_per_day(siswa, tanggal, exclude_pk=None):
    duplicates = Attendance.objects.filter(siswa=siswa, tanggal=tanggal)
    if exclude_pk is not None:
        duplicates = duplicates.exclude(pk=exclude_pk)
    if duplicates.exists():
        raise ValidationError('Absensi already recorded for this siswa on this date')


@transaction.atomic
def create_absensi(
    *,
    siswa_id,
    kelas_id,
    status,
    tanggal,
    guru_id=None,
    waktu_masuk=None,
    waktu_pulang=None,
    keterangan=None,
):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)
    kelas = get_or_raise(SchoolClass, 'Kelas not found', id=kelas_id)
    guru = get_or_raise(Teacher, 'Guru not found', id=guru_id) if guru_id else None

    _ensure_single_record_per_day(siswa, tanggal)

    absensi = Attendance(
        siswa=siswa,
        guru=guru,
        kelas=kelas,
        status=status,
        tanggal=tanggal,
        waktu_masuk=waktu_masuk,
        waktu_pulang=waktu_pulang,
        keterangan=keterangan,
    )
    absensi.full_clean()
    absensi.save()
    logger.info('Recorded absensi %s for siswa %s on %s as %s', absensi.pk, siswa.pk, tanggal, status)
    return absensi


@transaction.atomic
def update_absensi(absensi_id, **changes):
    absensi = get_or_raise(Attendance, 'Absensi not found', id=absensi_id)

    for field_name in ('status', 'waktu_masuk', 'waktu_pulang', 'keterangan'):
        if field_name in changes:
            setattr(absensi, field_name, changes[field_name])

    absensi.full_clean()
    absensi.save()
    return absensi


@transaction.atomic
def delete_absensi(absensi_id):
    absensi = get_or_raise(Attendance, 'Absensi not found', id=absensi_id)
    absensi.delete()
    logger.info('Deleted absensi %s', absensi_id)
    return {'success': True, 'message': 'Absensi deleted successfully'}


@transaction.atomic
def absen_masuk(*, siswa_id):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)
    today = timezone.localdate()

    absensi = Attendance.objects.select_for_update().filter(siswa=siswa, tanggal=today).first()
    if absensi is None:
        absensi = Attendance.objects.create(
            siswa=siswa,
            kelas=siswa.kelas,
            status=Attendance.STATUS_HADIR,
            tanggal=today,
            waktu_masuk=current_time(),
        )
        logger.info('Siswa %s checked in at %s', siswa.pk, absensi.waktu_masuk)
        return absensi

    if absensi.waktu_pulang:
        raise ValidationError('Absen pulang already recorded for today')

    absensi.status = Attendance.STATUS_HADIR
    absensi.waktu_masuk = current_time()
    absensi.save(update_fields=['status', 'waktu_masuk', 'updated_at'])
    logger.info('Siswa %s checked in at %s (existing record %s)', siswa.pk, absensi.waktu_masuk, absensi.pk)
    return absensi


@transaction.atomic
def absen_pulang(*, siswa_id):
    absensi = Attendance.objects.select_for_update().filter(
        siswa_id=siswa_id,
        tanggal=timezone.localdate(),
    ).first()
    if absensi is None:
        raise ValidationError('No absensi entry found for today. Please absen masuk first.')

    if absensi.waktu_masuk is None:
        raise ValidationError('No absen masuk recorded for today. Please absen masuk first.')

    waktu_pulang = current_time()
    if waktu_pulang <= absensi.waktu_masuk:
        raise ValidationError('Absen pulang must be after absen masuk')

    absensi.waktu_pulang = waktu_pulang
    absensi.save(update_fields=['waktu_pulang', 'updated_at'])
    logger.info('Siswa %s checked out at %s', siswa_id, absensi.waktu_pulang)
    return absensi


def get_absensi_history(
    *,
    siswa_id=None,
    kelas_id=None,
    start_date=None,
    end_date=None,
    limit=None,
    offset=0,
):
    if limit is None:
        limit = _history_default_limit()

    queryset = filter_absensi(
        siswa_id=siswa_id,
        kelas_id=kelas_id,
        start_date=start_date,
        end_date=end_date,
    ).order_by('-tanggal', '-id')
    return queryset[offset:offset + limit]


def get_today_absensi(*, siswa_id=None, kelas_id=None):
    queryset = filter_absensi(
        Attendance.objects.filter(tanggal=timezone.localdate()),
        siswa_id=siswa_id,
        kelas_id=kelas_id,
    )
    return queryset.order_by('-created_at', '-id')


def get_absensi_stats(*, kelas_id=None, start_date=None, end_date=None):
    return count_by_status(
        filter_absensi(kelas_id=kelas_id, start_date=start_date, end_date=end_date)
    )
