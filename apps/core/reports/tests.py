import re
from datetime import date, time

from django.test import TestCase, override_settings
from django.urls import reverse

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.users.models import User

from .services import export_absensi_excel, export_absensi_pdf, generate_rekap_absensi


class ReportsBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='laporan_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='196501', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0101111111', password='pass12345')
        self.other_siswa_user = User.objects.create_account(role='siswa', nisn='0102222222', password='pass12345')

        self.guru = Teacher.objects.create(user=self.guru_user, nip='196501', nama='Bu Yanti')
        self.kelas = SchoolClass.objects.create(nama_kelas='XI IPA 1', wali_kelas=self.guru)
        self.siswa = Student.objects.create(user=self.siswa_user, nisn='0101111111', nama='Indra', kelas=self.kelas)
        self.other_siswa = Student.objects.create(
            user=self.other_siswa_user,
            nisn='0102222222',
            nama='Joko',
            kelas=self.kelas,
        )

        Attendance.objects.create(
            siswa=self.siswa,
            guru=self.guru,
            kelas=self.kelas,
            status='hadir',
            tanggal=date(2026, 10, 5),
            waktu_masuk=time(7, 0),
        )
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='alpha', tanggal=date(2026, 10, 6))
        Attendance.objects.create(siswa=self.other_siswa, kelas=self.kelas, status='hadir', tanggal=date(2026, 10, 6))


class ExportServiceTests(ReportsBaseTestCase):
    def test_pdf_export(self):
        result = export_absensi_pdf(kelas_id=self.kelas.id)

        self.assertTrue(result['success'])
        self.assertRegex(result['download_url'], r'^/exports/pdf/absensi_report_\d{8}_\d{6}\.pdf$')
        self.assertEqual(result['message'], 'PDF berhasil dibuat dengan 3 record absensi')

    def test_excel_export(self):
        result = export_absensi_excel(siswa_id=self.siswa.id)

        self.assertTrue(result['success'])
        self.assertRegex(result['download_url'], r'^/exports/excel/absensi_export_\d{8}_\d{6}\.xlsx$')
        self.assertEqual(result['message'], 'Excel berhasil dibuat dengan 2 record absensi dalam 2 sheet')

    def test_export_without_rows(self):
        result = export_absensi_pdf(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))

        self.assertEqual(result, {
            'success': False,
            'message': 'Tidak ada data absensi yang ditemukan untuk kriteria yang diberikan',
        })

    def test_rekap_names_file_after_period(self):
        result = generate_rekap_absensi(start_date=date(2026, 10, 1), end_date=date(2026, 10, 31), format='excel')

        self.assertTrue(result['success'])
        self.assertEqual(result['download_url'], '/exports/excel/rekap_absensi_20261001_20261031.xlsx')
        self.assertEqual(
            result['message'],
            'Rekap absensi berhasil dibuat dalam format EXCEL dengan 3 record dari 2 siswa',
        )

    def test_rekap_without_rows(self):
        result = generate_rekap_absensi(start_date=date(2025, 1, 1), end_date=date(2025, 1, 2), format='pdf')

        self.assertFalse(result['success'])
        self.assertEqual(result['message'], 'Tidak ada data absensi yang ditemukan untuk periode yang dipilih')

    @override_settings(REKAP_ABSENSI_MAX_ROWS=1)
    def test_rekap_student_count_follows_row_limit(self):
        result = generate_rekap_absensi(start_date=date(2026, 10, 1), end_date=date(2026, 10, 31), format='pdf')

        self.assertTrue(result['success'])
        self.assertTrue(re.search(r'dari 1 siswa$', result['message']))


class ExportApiTests(ReportsBaseTestCase):
    def test_guru_exports_pdf(self):
        self.client.force_login(self.guru_user)
        response = self.client.post(
            reverse('export_pdf'),
            {'kelas_id': self.kelas.id, 'start_date': '2026-10-01', 'end_date': '2026-10-31'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])

    def test_siswa_cannot_export(self):
        self.client.force_login(self.siswa_user)
        response = self.client.post(reverse('export_excel'), {}, content_type='application/json')
        self.assertEqual(response.status_code, 403)

    def test_export_rejects_invalid_paging(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('export_excel'),
            {'kelas_id': self.kelas.id, 'limit': 0},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('limit', response.json())

    def test_rekap_requires_valid_format_and_period(self):
        self.client.force_login(self.admin)

        bad_format = self.client.post(
            reverse('rekap_absensi'),
            {'start_date': '2026-10-01', 'end_date': '2026-10-31', 'format': 'csv'},
            content_type='application/json',
        )
        self.assertEqual(bad_format.status_code, 400)

        inverted = self.client.post(
            reverse('rekap_absensi'),
            {'start_date': '2026-10-31', 'end_date': '2026-10-01', 'format': 'pdf'},
            content_type='application/json',
        )
        self.assertEqual(inverted.status_code, 400)

        ok = self.client.post(
            reverse('rekap_absensi'),
            {'start_date': '2026-10-01', 'end_date': '2026-10-31', 'format': 'pdf'},
            content_type='application/json',
        )
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()['download_url'], '/exports/pdf/rekap_absensi_20261001_20261031.pdf')
