from datetime import date

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from apps.core.attendance.models import Attendance
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.users.models import User
from apps.core.utils.exceptions import NotFoundError

from .models import SchoolClass
from .services import create_kelas, delete_kelas, list_kelas_by_wali_kelas, update_kelas


class AcademicsBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='kelas_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='196601', password='pass12345')
        self.other_guru_user = User.objects.create_account(role='guru', nip='196602', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0031111111', password='pass12345')

        self.guru = Teacher.objects.create(user=self.guru_user, nip='196601', nama='Bu Rina')
        self.other_guru = Teacher.objects.create(user=self.other_guru_user, nip='196602', nama='Pak Joko')


class SchoolClassServiceTests(AcademicsBaseTestCase):
    def test_create_kelas_requires_existing_wali_kelas(self):
        with self.assertRaisesMessage(NotFoundError, 'Wali kelas (guru) not found'):
            create_kelas(nama_kelas='X IPA 1', wali_kelas_id=999999)

    def test_update_kelas_changes_wali_kelas(self):
        kelas = create_kelas(nama_kelas='X IPA 1', wali_kelas_id=self.guru.id)
        updated = update_kelas(kelas.id, wali_kelas_id=self.other_guru.id)

        self.assertEqual(updated.wali_kelas, self.other_guru)
        self.assertEqual(updated.nama_kelas, 'X IPA 1')

    def test_list_by_wali_kelas(self):
        create_kelas(nama_kelas='X IPA 1', wali_kelas_id=self.guru.id)
        create_kelas(nama_kelas='X IPA 2', wali_kelas_id=self.other_guru.id)

        names = [kelas.nama_kelas for kelas in list_kelas_by_wali_kelas(self.guru.id)]
        self.assertEqual(names, ['X IPA 1'])

    def test_kelas_with_students_cannot_be_deleted(self):
        kelas = create_kelas(nama_kelas='X IPA 1', wali_kelas_id=self.guru.id)
        Student.objects.create(user=self.siswa_user, nisn='0031111111', nama='Andi', kelas=kelas)

        with self.assertRaisesMessage(ValidationError, 'Cannot delete kelas with assigned students'):
            delete_kelas(kelas.id)
        self.assertTrue(SchoolClass.objects.filter(id=kelas.id).exists())

    def test_kelas_with_absensi_cannot_be_deleted(self):
        kelas = create_kelas(nama_kelas='X IPA 1', wali_kelas_id=self.guru.id)
        other_kelas = create_kelas(nama_kelas='X IPA 2', wali_kelas_id=self.guru.id)
        siswa = Student.objects.create(user=self.siswa_user, nisn='0031111111', nama='Andi', kelas=other_kelas)
        Attendance.objects.create(
            siswa=siswa,
            kelas=kelas,
            status=Attendance.STATUS_HADIR,
            tanggal=date(2026, 7, 14),
        )

        with self.assertRaisesMessage(ValidationError, 'Cannot delete kelas with recorded absensi'):
            delete_kelas(kelas.id)

    def test_delete_empty_kelas(self):
        kelas = create_kelas(nama_kelas='X IPA 1', wali_kelas_id=self.guru.id)
        self.assertEqual(delete_kelas(kelas.id)['message'], 'Kelas deleted successfully')

    def test_delete_missing_kelas(self):
        with self.assertRaisesMessage(NotFoundError, 'Kelas not found'):
            delete_kelas(999999)


class SchoolClassApiTests(AcademicsBaseTestCase):
    def test_admin_creates_kelas(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('kelas_list'),
            {'nama_kelas': 'XII IPA 3', 'wali_kelas_id': self.guru.id},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['wali_kelas_id'], self.guru.id)

    def test_create_with_missing_wali_kelas_is_404(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('kelas_list'),
            {'nama_kelas': 'XII IPA 3', 'wali_kelas_id': 999999},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['detail'], 'Wali kelas (guru) not found')

    def test_guru_filters_by_wali_kelas_but_cannot_delete(self):
        kelas = SchoolClass.objects.create(nama_kelas='X IPA 1', wali_kelas=self.guru)
        SchoolClass.objects.create(nama_kelas='X IPA 2', wali_kelas=self.other_guru)
        self.client.force_login(self.guru_user)

        response = self.client.get(reverse('kelas_list'), {'wali_kelas_id': self.guru.id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([row['id'] for row in response.json()], [kelas.id])

        delete_response = self.client.delete(reverse('kelas_detail', args=[kelas.id]))
        self.assertEqual(delete_response.status_code, 403)

    def test_non_numeric_wali_kelas_filter_is_400(self):
        self.client.force_login(self.guru_user)
        response = self.client.get(reverse('kelas_list'), {'wali_kelas_id': 'abc'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('wali_kelas_id', response.json())

    def test_delete_kelas_with_students_is_400(self):
        kelas = SchoolClass.objects.create(nama_kelas='X IPA 1', wali_kelas=self.guru)
        Student.objects.create(user=self.siswa_user, nisn='0031111111', nama='Andi', kelas=kelas)
        self.client.force_login(self.admin)

        response = self.client.delete(reverse('kelas_detail', args=[kelas.id]))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'Cannot delete kelas with assigned students')
