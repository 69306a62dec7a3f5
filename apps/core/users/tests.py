from datetime import date
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.leaves.models import LeaveRequest
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.utils.exceptions import NotFoundError

from .models import AuditLog, User
from .services import authenticate_by_role, create_user, delete_user, get_current_user, update_user


class UsersBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='admin1', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='198001', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0051234567', password='pass12345')


class AuthenticateByRoleTests(UsersBaseTestCase):
    def test_admin_logs_in_with_username(self):
        user, message = authenticate_by_role(role='admin', username='admin1', password='pass12345')
        self.assertEqual(user, self.admin)
        self.assertEqual(message, 'Login successful')

    def test_guru_logs_in_with_nip(self):
        user, message = authenticate_by_role(role='guru', nip='198001', password='pass12345')
        self.assertEqual(user, self.guru_user)
        self.assertEqual(message, 'Login successful')

    def test_missing_identifier_is_reported_per_role(self):
        self.assertEqual(
            authenticate_by_role(role='siswa', password='pass12345'),
            (None, 'NISN is required for siswa login'),
        )
        self.assertEqual(
            authenticate_by_role(role='guru', password='pass12345'),
            (None, 'NIP is required for guru login'),
        )

    def test_identifier_of_another_role_is_not_found(self):
        user, message = authenticate_by_role(role='siswa', nisn='198001', password='pass12345')
        self.assertIsNone(user)
        self.assertEqual(message, 'User not found')

    def test_wrong_password_is_rejected(self):
        user, message = authenticate_by_role(role='admin', username='admin1', password='wrong')
        self.assertIsNone(user)
        self.assertEqual(message, 'Invalid password')

    def test_unknown_role_is_rejected(self):
        self.assertEqual(
            authenticate_by_role(role='kepala', username='admin1', password='pass12345'),
            (None, 'Invalid role specified'),
        )

    def test_inactive_user_is_not_found(self):
        self.guru_user.is_active = False
        self.guru_user.save(update_fields=['is_active'])

        user, message = authenticate_by_role(role='guru', nip='198001', password='pass12345')
        self.assertIsNone(user)
        self.assertEqual(message, 'User not found')


class UserServiceTests(UsersBaseTestCase):
    def test_password_is_hashed(self):
        user = create_user(role='siswa', nisn='0059999999', password='secret1')
        self.assertNotEqual(user.password, 'secret1')
        self.assertTrue(user.check_password('secret1'))

    def test_duplicate_nip_is_rejected(self):
        with self.assertRaisesMessage(ValidationError, 'NIP already exists'):
            create_user(role='guru', nip='198001', password='pass12345')

    def test_role_identifier_is_required(self):
        with self.assertRaisesMessage(ValidationError, 'NISN is required for siswa accounts'):
            create_user(role='siswa', password='pass12345')

    def test_update_rejects_identifier_taken_by_other_user(self):
        with self.assertRaisesMessage(ValidationError, 'Username already exists'):
            update_user(self.guru_user.id, username='admin1')

    def test_update_changes_password(self):
        update_user(self.siswa_user.id, password='newpass1')
        self.siswa_user.refresh_from_db()
        self.assertTrue(self.siswa_user.check_password('newpass1'))

    def test_delete_rejects_guru_who_is_wali_kelas(self):
        guru = Teacher.objects.create(user=self.guru_user, nip='198001', nama='Bu Sari')
        SchoolClass.objects.create(nama_kelas='X IPA 1', wali_kelas=guru)

        with self.assertRaises(ValidationError):
            delete_user(self.guru_user.id)
        self.assertTrue(User.objects.filter(id=self.guru_user.id).exists())

    def test_delete_missing_user_raises_not_found(self):
        with self.assertRaisesMessage(NotFoundError, 'User not found'):
            delete_user(999999)

    def test_current_user_includes_guru_profile(self):
        guru = Teacher.objects.create(user=self.guru_user, nip='198001', nama='Bu Sari')
        payload = get_current_user(self.guru_user.id)

        self.assertEqual(payload['role'], 'guru')
        self.assertEqual(payload['profile'], {'id': guru.id, 'nama': 'Bu Sari', 'foto': None})

    def test_current_user_missing_returns_none(self):
        self.assertIsNone(get_current_user(999999))

    def test_current_user_includes_siswa_profile_with_kelas(self):
        guru = Teacher.objects.create(user=self.guru_user, nip='198001', nama='Bu Sari')
        kelas = SchoolClass.objects.create(nama_kelas='X IPA 1', wali_kelas=guru)
        siswa = Student.objects.create(user=self.siswa_user, nisn='0051234567', nama='Rudi', kelas=kelas)

        payload = get_current_user(self.siswa_user.id)

        self.assertEqual(payload['role'], 'siswa')
        self.assertEqual(payload['nisn'], '0051234567')
        self.assertEqual(
            payload['profile'],
            {'id': siswa.id, 'nama': 'Rudi', 'foto': None, 'kelas_id': kelas.id},
        )

    def test_delete_siswa_user_removes_profile_absensi_and_pengajuan(self):
        guru = Teacher.objects.create(user=self.guru_user, nip='198001', nama='Bu Sari')
        kelas = SchoolClass.objects.create(nama_kelas='X IPA 1', wali_kelas=guru)
        siswa = Student.objects.create(user=self.siswa_user, nisn='0051234567', nama='Rudi', kelas=kelas)
        Attendance.objects.create(siswa=siswa, kelas=kelas, status='hadir', tanggal=date(2026, 8, 3))
        LeaveRequest.objects.create(siswa=siswa, tanggal=date(2026, 8, 4), alasan='Demam', jenis='sakit')

        delete_user(self.siswa_user.id)

        self.assertFalse(Student.objects.filter(id=siswa.id).exists())
        self.assertFalse(Attendance.objects.filter(siswa_id=siswa.id).exists())
        self.assertFalse(LeaveRequest.objects.filter(siswa_id=siswa.id).exists())
        self.assertTrue(SchoolClass.objects.filter(id=kelas.id).exists())

    def test_delete_guru_user_keeps_recorded_absensi_without_guru(self):
        wali_user = User.objects.create_account(role='guru', nip='198002', password='pass12345')
        wali_kelas = Teacher.objects.create(user=wali_user, nip='198002', nama='Pak Tono')
        pencatat = Teacher.objects.create(user=self.guru_user, nip='198001', nama='Bu Sari')
        kelas = SchoolClass.objects.create(nama_kelas='X IPA 1', wali_kelas=wali_kelas)
        siswa = Student.objects.create(user=self.siswa_user, nisn='0051234567', nama='Rudi', kelas=kelas)
        absensi = Attendance.objects.create(
            siswa=siswa,
            guru=pencatat,
            kelas=kelas,
            status='alpha',
            tanggal=date(2026, 8, 3),
        )

        delete_user(self.guru_user.id)

        self.assertFalse(Teacher.objects.filter(id=pencatat.id).exists())
        absensi.refresh_from_db()
        self.assertIsNone(absensi.guru)
        self.assertEqual(absensi.status, 'alpha')


class AuthApiTests(UsersBaseTestCase):
    def test_login_success_starts_session_and_writes_audit_log(self):
        response = self.client.post(
            reverse('login'),
            {'role': 'admin', 'username': 'admin1', 'password': 'pass12345'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['user']['id'], self.admin.id)
        self.assertEqual(body['user']['profile']['nama'], 'admin1')
        self.assertTrue(AuditLog.objects.filter(action='user.login', user=self.admin).exists())

        me = self.client.get(reverse('me'))
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['id'], self.admin.id)

    def test_logout_ends_session_and_writes_audit_log(self):
        self.client.force_login(self.guru_user)

        response = self.client.post(reverse('logout'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'message': 'Logout successful'})
        entry = AuditLog.objects.get(action='user.logout')
        self.assertEqual(entry.user, self.guru_user)
        self.assertEqual(entry.details, 'Role=guru')
        self.assertIn(self.client.get(reverse('me')).status_code, (401, 403))

    def test_login_failure_returns_message_without_error_status(self):
        response = self.client.post(
            reverse('login'),
            {'role': 'admin', 'username': 'admin1', 'password': 'wrong'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': False, 'user': None, 'message': 'Invalid password'})

    def test_anonymous_user_cannot_list_users(self):
        response = self.client.get(reverse('user_list'))
        self.assertIn(response.status_code, (401, 403))

    def test_guru_cannot_manage_users(self):
        self.client.force_login(self.guru_user)
        response = self.client.post(
            reverse('user_list'),
            {'role': 'siswa', 'nisn': '0050000001', 'password': 'pass12345'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)

    def test_admin_creates_user_and_duplicate_is_400(self):
        self.client.force_login(self.admin)
        payload = {'role': 'siswa', 'nisn': '0050000001', 'password': 'pass12345'}

        created = self.client.post(reverse('user_list'), payload, content_type='application/json')
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()['nisn'], '0050000001')
        self.assertNotIn('password', created.json())

        duplicate = self.client.post(reverse('user_list'), payload, content_type='application/json')
        self.assertEqual(duplicate.status_code, 400)
        self.assertEqual(duplicate.json()['detail'], 'NISN already exists')

    def test_admin_delete_missing_user_is_404(self):
        self.client.force_login(self.admin)
        response = self.client.delete(reverse('user_detail', args=[999999]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['detail'], 'User not found')

    def test_siswa_cannot_view_another_profile(self):
        self.client.force_login(self.siswa_user)
        response = self.client.get(reverse('user_profile', args=[self.admin.id]))
        self.assertEqual(response.status_code, 403)

        own = self.client.get(reverse('user_profile', args=[self.siswa_user.id]))
        self.assertEqual(own.status_code, 200)
        self.assertIsNone(own.json()['profile'])


class SeedCommandTests(TestCase):
    def test_seed_creates_linked_demo_data(self):
        call_command('seed', kelas=1, siswa_per_kelas=2, days=2, seed=7, stdout=StringIO())

        self.assertTrue(User.objects.filter(role='admin', username='admin').exists())
        self.assertEqual(Teacher.objects.count(), 1)
        self.assertEqual(Student.objects.count(), 2)
        self.assertEqual(Attendance.objects.count(), 4)

        call_command('seed', kelas=1, siswa_per_kelas=2, days=2, stdout=StringIO())
        self.assertEqual(Student.objects.count(), 2)
