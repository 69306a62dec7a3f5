from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.leaves.models import LeaveRequest
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.users.models import User
from apps.core.utils.exceptions import NotFoundError

from .services import get_dashboard_stats, get_guru_dashboard_stats, get_siswa_dashboard_stats


class DashboardBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='dash_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='196901', password='pass12345')
        self.other_guru_user = User.objects.create_account(role='guru', nip='196902', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0091111111', password='pass12345')
        self.other_siswa_user = User.objects.create_account(role='siswa', nisn='0092222222', password='pass12345')

        self.guru = Teacher.objects.create(user=self.guru_user, nip='196901', nama='Pak Agus')
        self.other_guru = Teacher.objects.create(user=self.other_guru_user, nip='196902', nama='Bu Wati')
        self.kelas = SchoolClass.objects.create(nama_kelas='X A', wali_kelas=self.guru)
        self.other_kelas = SchoolClass.objects.create(nama_kelas='X B', wali_kelas=self.other_guru)
        self.siswa = Student.objects.create(user=self.siswa_user, nisn='0091111111', nama='Gita', kelas=self.kelas)
        self.other_siswa = Student.objects.create(
            user=self.other_siswa_user,
            nisn='0092222222',
            nama='Hana',
            kelas=self.other_kelas,
        )

        self.today = timezone.localdate()
        Attendance.objects.create(siswa=self.siswa, kelas=self.kelas, status='hadir', tanggal=self.today)
        Attendance.objects.create(siswa=self.other_siswa, kelas=self.other_kelas, status='sakit', tanggal=self.today)
        LeaveRequest.objects.create(siswa=self.siswa, tanggal=self.today, alasan='a', jenis='izin')
        LeaveRequest.objects.create(
            siswa=self.other_siswa,
            tanggal=self.today,
            alasan='b',
            jenis='sakit',
            status=LeaveRequest.STATUS_REJECTED,
        )


class DashboardServiceTests(DashboardBaseTestCase):
    def test_admin_stats(self):
        self.assertEqual(get_dashboard_stats(), {
            'total_siswa': 2,
            'total_guru': 2,
            'total_kelas': 2,
            'absensi_hari_ini': {'hadir': 1, 'izin': 0, 'sakit': 1, 'alpha': 0},
            'pengajuan_pending': 1,
        })

    def test_empty_day_reports_zero_for_every_status(self):
        Attendance.objects.all().delete()
        self.assertEqual(
            get_dashboard_stats()['absensi_hari_ini'],
            {'hadir': 0, 'izin': 0, 'sakit': 0, 'alpha': 0},
        )

    def test_guru_stats_are_scoped_to_wali_kelas(self):
        self.assertEqual(get_guru_dashboard_stats(self.guru.id), {
            'total_siswa_kelas': 1,
            'absensi_hari_ini': {'hadir': 1, 'izin': 0, 'sakit': 0, 'alpha': 0},
            'pengajuan_pending': 1,
        })
        self.assertEqual(get_guru_dashboard_stats(self.other_guru.id)['pengajuan_pending'], 0)

    def test_guru_stats_for_missing_guru(self):
        with self.assertRaisesMessage(NotFoundError, 'Guru not found'):
            get_guru_dashboard_stats(999999)

    def test_siswa_stats(self):
        stats = get_siswa_dashboard_stats(self.siswa.id)

        self.assertEqual(stats['absensi_bulan_ini']['hadir'], 1)
        self.assertEqual(stats['pengajuan_pending'], 1)
        self.assertEqual(stats['absensi_hari_ini']['status'], 'hadir')
        self.assertIsNone(stats['absensi_hari_ini']['waktu_masuk'])

    def test_siswa_stats_ignore_other_months(self):
        Attendance.objects.create(
            siswa=self.siswa,
            kelas=self.kelas,
            status='alpha',
            tanggal=self.today.replace(day=1) - timedelta(days=1),
        )
        self.assertEqual(get_siswa_dashboard_stats(self.siswa.id)['absensi_bulan_ini']['alpha'], 0)

    def test_siswa_without_absensi_today(self):
        Attendance.objects.filter(siswa=self.siswa).delete()
        self.assertEqual(
            get_siswa_dashboard_stats(self.siswa.id)['absensi_hari_ini'],
            {'status': None, 'waktu_masuk': None, 'waktu_pulang': None},
        )


class DashboardApiTests(DashboardBaseTestCase):
    def test_healthcheck_is_public(self):
        response = self.client.get(reverse('healthcheck'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ok')
        self.assertIn('timestamp', response.json())

    def test_admin_dashboard_requires_admin(self):
        self.client.force_login(self.guru_user)
        self.assertEqual(self.client.get(reverse('dashboard')).status_code, 403)

        self.client.force_login(self.admin)
        response = self.client.get(reverse('dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['total_kelas'], 2)

    def test_guru_sees_only_own_dashboard(self):
        self.client.force_login(self.guru_user)

        own = self.client.get(reverse('guru_dashboard', args=[self.guru.id]))
        self.assertEqual(own.status_code, 200)
        self.assertEqual(own.json()['total_siswa_kelas'], 1)

        other = self.client.get(reverse('guru_dashboard', args=[self.other_guru.id]))
        self.assertEqual(other.status_code, 403)

    def test_siswa_sees_only_own_dashboard(self):
        self.client.force_login(self.siswa_user)

        own = self.client.get(reverse('siswa_dashboard', args=[self.siswa.id]))
        self.assertEqual(own.status_code, 200)
        self.assertEqual(own.json()['absensi_hari_ini']['status'], 'hadir')

        other = self.client.get(reverse('siswa_dashboard', args=[self.other_siswa.id]))
        self.assertEqual(other.status_code, 403)
