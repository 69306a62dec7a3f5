"""Attendance report assembly.

Reports are built in memory and logged; file rendering is not wired up yet, so
the returned ``download_url`` points at where the file would be published.
"""
from __future__ import annotations

import logging
from collections import OrderedDict

from django.conf import settings
from django.utils import timezone

from apps.core.attendance.models import Attendance
from apps.core.attendance.services import count_by_status, empty_status_counts, filter_absensi

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = 'Tidak ada data absensi yang ditemukan untuk kriteria yang diberikan'
NO_REKAP_DATA_MESSAGE = 'Tidak ada data absensi yang ditemukan untuk periode yang dipilih'

FORMAT_EXTENSIONS = {
    'pdf': 'pdf',
    'excel': 'xlsx',
}


def _rekap_max_rows() -> int:
    return int(getattr(settings, 'REKAP_ABSENSI_MAX_ROWS', 1000))


def _format_date(value):
    return value.strftime('%d/%m/%Y') if value else 'Semua'


def _file_stamp():
    return timezone.localtime().strftime('%Y%m%d_%H%M%S')


def _fetch_records(*, siswa_id=None, kelas_id=None, start_date=None, end_date=None, limit=None, offset=0):
    if limit is None:
        limit = settings.ABSENSI_HISTORY_DEFAULT_LIMIT

    queryset = filter_absensi(
        Attendance.objects.select_related('siswa', 'kelas', 'guru'),
        siswa_id=siswa_id,
        kelas_id=kelas_id,
        start_date=start_date,
        end_date=end_date,
    ).order_by('-tanggal', '-id')

    return [
        {
            'id': absensi.id,
            'siswa_id': absensi.siswa_id,
            'tanggal': absensi.tanggal,
            'siswa': absensi.siswa.nama,
            'nisn': absensi.siswa.nisn,
            'kelas': absensi.kelas.nama_kelas,
            'status': absensi.status,
            'waktu_masuk': absensi.waktu_masuk,
            'waktu_pulang': absensi.waktu_pulang,
            'guru': absensi.guru.nama if absensi.guru else None,
            'keterangan': absensi.keterangan,
        }
        for absensi in queryset[offset:offset + limit]
    ]


def _period_stats(*, kelas_id=None, start_date=None, end_date=None):
    return count_by_status(
        filter_absensi(kelas_id=kelas_id, start_date=start_date, end_date=end_date)
    )


def export_absensi_pdf(*, siswa_id=None, kelas_id=None, start_date=None, end_date=None, limit=None, offset=0):
    records = _fetch_records(
        siswa_id=siswa_id,
        kelas_id=kelas_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    if not records:
        return {'success': False, 'message': NO_DATA_MESSAGE}

    file_name = f"absensi_report_{_file_stamp()}.pdf"
    report = {
        'title': 'Laporan Absensi Siswa',
        'generated_at': timezone.now(),
        'date_range': {'start': _format_date(start_date), 'end': _format_date(end_date)},
        'total_records': len(records),
        'statistics': _period_stats(kelas_id=kelas_id, start_date=start_date, end_date=end_date),
        'records': [
            {
                'tanggal': _format_date(record['tanggal']),
                'siswa': record['siswa'],
                'nisn': record['nisn'],
                'kelas': record['kelas'],
                'status': record['status'].upper(),
                'waktu_masuk': record['waktu_masuk'] or '-',
                'waktu_pulang': record['waktu_pulang'] or '-',
                'guru': record['guru'] or '-',
                'keterangan': record['keterangan'] or '-',
            }
            for record in records
        ],
    }

    logger.info(
        'PDF export %s: %s records, statistics=%s, range=%s',
        file_name,
        report['total_records'],
        report['statistics'],
        report['date_range'],
    )
    return {
        'success': True,
        'download_url': f"/exports/pdf/{file_name}",
        'message': f"PDF berhasil dibuat dengan {len(records)} record absensi",
    }


def export_absensi_excel(*, siswa_id=None, kelas_id=None, start_date=None, end_date=None, limit=None, offset=0):
    records = _fetch_records(
        siswa_id=siswa_id,
        kelas_id=kelas_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    if not records:
        return {'success': False, 'message': NO_DATA_MESSAGE}

    stats = _period_stats(kelas_id=kelas_id, start_date=start_date, end_date=end_date)
    file_name = f"absensi_export_{_file_stamp()}.xlsx"

    statistik = [{'Status': status.upper(), 'Jumlah': total} for status, total in stats.items()]
    statistik.append({'Status': 'TOTAL', 'Jumlah': sum(stats.values())})
    sheets = OrderedDict([
        ('Data Absensi', [
            {
                'Tanggal': _format_date(record['tanggal']),
                'NISN': record['nisn'],
                'Nama Siswa': record['siswa'],
                'Kelas': record['kelas'],
                'Status': record['status'].upper(),
                'Waktu Masuk': record['waktu_masuk'] or '',
                'Waktu Pulang': record['waktu_pulang'] or '',
                'Guru Pencatat': record['guru'] or '',
                'Keterangan': record['keterangan'] or '',
            }
            for record in records
        ]),
        ('Statistik', statistik),
    ])

    logger.info(
        'Excel export %s: %s records, sheets=%s, statistics=%s',
        file_name,
        len(records),
        list(sheets),
        stats,
    )
    return {
        'success': True,
        'download_url': f"/exports/excel/{file_name}",
        'message': f"Excel berhasil dibuat dengan {len(records)} record absensi dalam {len(sheets)} sheet",
    }


def _attendance_rate(hadir, total, precision):
    if not total:
        return '0%'
    return f"{hadir / total * 100:.{precision}f}%"


def generate_rekap_absensi(*, start_date, end_date, format, kelas_id=None):
    records = _fetch_records(
        kelas_id=kelas_id,
        start_date=start_date,
        end_date=end_date,
        limit=_rekap_max_rows(),
    )
    if not records:
        return {'success': False, 'message': NO_REKAP_DATA_MESSAGE}

    stats = _period_stats(kelas_id=kelas_id, start_date=start_date, end_date=end_date)
    total_records = sum(stats.values())
    total_days = (end_date - start_date).days + 1

    per_siswa = OrderedDict()
    per_day = OrderedDict()
    for record in records:
        siswa_stats = per_siswa.setdefault(record['siswa_id'], {
            'siswa_nama': record['siswa'],
            'siswa_nisn': record['nisn'],
            'kelas_nama': record['kelas'],
            **empty_status_counts(),
            'total': 0,
        })
        siswa_stats[record['status']] += 1
        siswa_stats['total'] += 1

        day_stats = per_day.setdefault(record['tanggal'].isoformat(), {
            'tanggal': _format_date(record['tanggal']),
            **empty_status_counts(),
        })
        day_stats[record['status']] += 1

    for siswa_stats in per_siswa.values():
        siswa_stats['attendance_rate'] = _attendance_rate(siswa_stats['hadir'], siswa_stats['total'], 1)

    file_name = (
        f"rekap_absensi_{start_date.strftime('%Y%m%d')}_{end_date.strftime('%Y%m%d')}"
        f".{FORMAT_EXTENSIONS[format]}"
    )
    rekap = {
        'metadata': {
            'title': 'Rekap Absensi Siswa',
            'periode': f"{_format_date(start_date)} - {_format_date(end_date)}",
            'total_hari': total_days,
            'kelas_filter': 'Kelas Tertentu' if kelas_id else 'Semua Kelas',
        },
        'summary': {
            'total_records': total_records,
            'attendance_rate': _attendance_rate(stats['hadir'], total_records, 2),
            'statistics': stats,
        },
        'student_details': list(per_siswa.values()),
        'daily_breakdown': per_day,
    }

    logger.info(
        'Rekap absensi %s (%s): %s records, rate=%s, siswa=%s, days=%s',
        file_name,
        rekap['metadata']['periode'],
        total_records,
        rekap['summary']['attendance_rate'],
        len(per_siswa),
        len(per_day),
    )
    return {
        'success': True,
        'download_url': f"/exports/{format}/{file_name}",
        'message': (
            f"Rekap absensi berhasil dibuat dalam format {format.upper()} "
            f"dengan {total_records} record dari {len(per_siswa)} siswa"
        ),
    }
