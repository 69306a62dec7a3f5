from datetime import date, time, timedelta
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from apps.core.academics.models import SchoolClass
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.users.models import User
from apps.core.utils.exceptions import NotFoundError

from .models import Attendance
from .services import (
    absen_masuk,
    absen_pulang,
    create_absensi,
    get_absensi_history,
    get_absensi_stats,
    update_absensi,
)

CURRENT_TIME = 'apps.core.attendance.services.current_time'


class AttendanceBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='absensi_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='199001', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0071111111', password='pass12345')
        self.other_siswa_user = User.objects.create_account(role='siswa', nisn='0072222222', password='pass12345')

        self.guru = Teacher.objects.create(user=self.guru_user, nip='199001', nama='Pak Hadi')
        self.kelas = SchoolClass.objects.create(nama_kelas='VIII C', wali_kelas=self.guru)
        self.siswa = Student.objects.create(user=self.siswa_user, nisn='0071111111', nama='Citra', kelas=self.kelas)
        self.other_siswa = Student.objects.create(
            user=self.other_siswa_user,
            nisn='0072222222',
            nama='Dimas',
            kelas=self.kelas,
        )
        self.today = timezone.localdate()


class AttendanceServiceTests(AttendanceBaseTestCase):
    def test_create_absensi_rejects_missing_references(self):
        with self.assertRaisesMessage(NotFoundError, 'Siswa not found'):
            create_absensi(siswa_id=999999, kelas_id=self.kelas.id, status='hadir', tanggal=self.today)

        with self.assertRaisesMessage(NotFoundError, 'Kelas not found'):
            create_absensi(siswa_id=self.siswa.id, kelas_id=999999, status='hadir', tanggal=self.today)

        with self.assertRaisesMessage(NotFoundError, 'Guru not found'):
            create_absensi(
                siswa_id=self.siswa.id,
                kelas_id=self.kelas.id,
                guru_id=999999,
                status='hadir',
                tanggal=self.today,
            )

    def test_one_record_per_siswa_per_day(self):
        create_absensi(siswa_id=self.siswa.id, kelas_id=self.kelas.id, status='alpha', tanggal=date(2026, 8, 3))

        with self.assertRaisesMessage(ValidationError, 'Absensi already recorded for this siswa on this date'):
            create_absensi(siswa_id=self.siswa.id, kelas_id=self.kelas.id, status='hadir', tanggal=date(2026, 8, 3))

    def test_update_rejects_check_out_before_check_in(self):
        absensi = create_absensi(
            siswa_id=self.siswa.id,
            kelas_id=self.kelas.id,
            status='hadir',
            tanggal=date(2026, 8, 3),
            waktu_masuk=time(7, 0),
        )

        with self.assertRaises(ValidationError):
            update_absensi(absensi.id, waktu_pulang=time(6, 30))

        updated = update_absensi(absensi.id, waktu_pulang=time(14, 0), keterangan='Pulang normal')
        self.assertEqual(updated.waktu_pulang, time(14, 0))

    def test_check_in_creates_todays_row_in_siswa_kelas(self):
        absensi = absen_masuk(siswa_id=self.siswa.id)

        self.assertEqual(absensi.tanggal, self.today)
        self.assertEqual(absensi.kelas, self.kelas)
        self.assertEqual(absensi.status, Attendance.STATUS_HADIR)
        self.assertIsNotNone(absensi.waktu_masuk)
        self.assertIsNone(absensi.guru)

    def test_check_in_updates_existing_row(self):
        existing = Attendance.objects.create(
            siswa=self.siswa,
            kelas=self.kelas,
            status=Attendance.STATUS_ALPHA,
            tanggal=self.today,
        )

        absensi = absen_masuk(siswa_id=self.siswa.id)

        self.assertEqual(absensi.pk, existing.pk)
        self.assertEqual(absensi.status, Attendance.STATUS_HADIR)
        self.assertEqual(Attendance.objects.filter(siswa=self.siswa, tanggal=self.today).count(), 1)

    def test_check_in_for_missing_siswa(self):
        with self.assertRaisesMessage(NotFoundError, 'Siswa not found'):
            absen_masuk(siswa_id=999999)

    def test_check_out_requires_check_in(self):
        with self.assertRaisesMessage(ValidationError, 'No absensi entry found for today. Please absen masuk first.'):
            absen_pulang(siswa_id=self.siswa.id)

        with mock.patch(CURRENT_TIME, side_effect=[time(7, 0), time(14, 0)]):
            absen_masuk(siswa_id=self.siswa.id)
            absensi = absen_pulang(siswa_id=self.siswa.id)
        self.assertEqual(absensi.waktu_pulang, time(14, 0))

    def test_check_in_after_check_out_is_rejected(self):
        with mock.patch(CURRENT_TIME, side_effect=[time(7, 0), time(14, 0)]):
            absen_masuk(siswa_id=self.siswa.id)
            absen_pulang(siswa_id=self.siswa.id)

        with self.assertRaisesMessage(ValidationError, 'Absen pulang already recorded for today'):
            absen_masuk(siswa_id=self.siswa.id)

    def test_check_out_on_leave_day_without_check_in_is_rejected(self):
        absensi = Attendance.objects.create(
            siswa=self.siswa,
            kelas=self.kelas,
            status=Attendance.STATUS_SAKIT,
            tanggal=self.today,
            keterangan='Approved: Demam',
        )

        with self.assertRaisesMessage(ValidationError, 'No absen masuk recorded for today. Please absen masuk first.'):
            absen_pulang(siswa_id=self.siswa.id)

        absensi.refresh_from_db()
        self.assertIsNone(absensi.waktu_pulang)
        self.assertEqual(update_absensi(absensi.id, keterangan='catatan').keterangan, 'catatan')

    def test_check_out_in_same_second_as_check_in_is_rejected(self):
        with mock.patch(CURRENT_TIME, return_value=time(7, 0)):
            absensi = absen_masuk(siswa_id=self.siswa.id)
            with self.assertRaisesMessage(ValidationError, 'Absen pulang must be after absen masuk'):
                absen_pulang(siswa_id=self.siswa.id)

        absensi.refresh_from_db()
        self.assertIsNone(absensi.waktu_pulang)
        self.assertEqual(update_absensi(absensi.id, keterangan='catatan').keterangan, 'catatan')

    def test_history_is_newest_first_and_paginated(self):
        for offset_days in range(3):
            Attendance.objects.create(
                siswa=self.siswa,
                kelas=self.kelas,
                status=Attendance.STATUS_HADIR,
                tanggal=date(2026, 8, 3) + timedelta(days=offset_days),
            )

        history = list(get_absensi_history(siswa_id=self.siswa.id, limit=2))
        self.assertEqual([row.tanggal for row in history], [date(2026, 8, 5), date(2026, 8, 4)])

        rest = list(get_absensi_history(siswa_id=self.siswa.id, limit=2, offset=2))
        self.assertEqual([row.tanggal for row in rest], [date(2026, 8, 3)])

    @override_settings(ABSENSI_HISTORY_DEFAULT_LIMIT=1)
    def test_history_default_limit_comes_from_settings(self):
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='hadir', tanggal=date(2026, 8, 3))
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='izin', tanggal=date(2026, 8, 4))

        self.assertEqual(len(list(get_absensi_history())), 1)

    def test_stats_include_every_status(self):
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='hadir', tanggal=date(2026, 8, 3))
        Attendance.objects.create(siswa=self.other_siswa, kelas=self.kelas, status='hadir', tanggal=date(2026, 8, 3))
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='sakit', tanggal=date(2026, 8, 4))

        self.assertEqual(
            get_absensi_stats(kelas_id=self.kelas.id),
            {'hadir': 2, 'izin': 0, 'sakit': 1, 'alpha': 0},
        )
        self.assertEqual(
            get_absensi_stats(start_date=date(2026, 8, 4), end_date=date(2026, 8, 4)),
            {'hadir': 0, 'izin': 0, 'sakit': 1, 'alpha': 0},
        )


class AttendanceApiTests(AttendanceBaseTestCase):
    def test_siswa_checks_in_and_out_for_self(self):
        self.client.force_login(self.siswa_user)

        with mock.patch(CURRENT_TIME, side_effect=[time(7, 0), time(14, 0)]):
            check_in = self.client.post(
                reverse('absensi_check_in'),
                {'siswa_id': self.siswa.id},
                content_type='application/json',
            )
            check_out = self.client.post(
                reverse('absensi_check_out'),
                {'siswa_id': self.siswa.id},
                content_type='application/json',
            )

        self.assertEqual(check_in.status_code, 200)
        self.assertEqual(check_in.json()['status'], 'hadir')
        self.assertEqual(check_out.status_code, 200)
        self.assertIsNotNone(check_out.json()['waktu_pulang'])

    def test_siswa_cannot_check_in_for_someone_else(self):
        self.client.force_login(self.siswa_user)
        response = self.client.post(
            reverse('absensi_check_in'),
            {'siswa_id': self.other_siswa.id},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 403)
        self.assertFalse(Attendance.objects.filter(siswa=self.other_siswa).exists())

    def test_check_out_without_check_in_is_400(self):
        self.client.force_login(self.siswa_user)
        response = self.client.post(
            reverse('absensi_check_out'),
            {'siswa_id': self.siswa.id},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'No absensi entry found for today. Please absen masuk first.')

    def test_guru_records_absensi(self):
        self.client.force_login(self.guru_user)
        response = self.client.post(
            reverse('absensi_list'),
            {
                'siswa_id': self.siswa.id,
                'guru_id': self.guru.id,
                'kelas_id': self.kelas.id,
                'status': 'alpha',
                'tanggal': '2026-08-03',
            },
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['guru_id'], self.guru.id)

    def test_siswa_cannot_record_absensi(self):
        self.client.force_login(self.siswa_user)
        response = self.client.post(
            reverse('absensi_list'),
            {'siswa_id': self.siswa.id, 'kelas_id': self.kelas.id, 'status': 'hadir', 'tanggal': '2026-08-03'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)

    def test_siswa_history_is_scoped_to_own_rows(self):
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='hadir', tanggal=date(2026, 8, 3))
        Attendance.objects.create(siswa=self.other_siswa, kelas=self.kelas, status='alpha', tanggal=date(2026, 8, 3))
        self.client.force_login(self.siswa_user)

        response = self.client.get(reverse('absensi_list'), {'siswa_id': self.other_siswa.id})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row['siswa_id'] for row in response.json()], [self.siswa.id])

    def test_history_rejects_inverted_date_range(self):
        self.client.force_login(self.admin)
        response = self.client.get(
            reverse('absensi_list'),
            {'start_date': '2026-08-10', 'end_date': '2026-08-01'},
        )
        self.assertEqual(response.status_code, 400)

    def test_stats_endpoint(self):
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='izin', tanggal=date(2026, 8, 3))
        self.client.force_login(self.guru_user)

        response = self.client.get(reverse('absensi_stats'), {'kelas_id': self.kelas.id})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'hadir': 0, 'izin': 1, 'sakit': 0, 'alpha': 0})
