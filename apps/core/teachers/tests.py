from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from apps.core.academics.models import SchoolClass
from apps.core.users.models import User
from apps.core.utils.exceptions import NotFoundError

from .models import Teacher
from .services import create_guru, delete_guru, update_guru


class TeachersBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='guru_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='197501', password='pass12345')
        self.other_guru_user = User.objects.create_account(role='guru', nip='197502', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0041111111', password='pass12345')


class TeacherServiceTests(TeachersBaseTestCase):
    def test_create_guru_requires_guru_role(self):
        with self.assertRaisesMessage(ValidationError, 'User must have guru role'):
            create_guru(user_id=self.siswa_user.id, nip='197599', nama='Salah Peran')

    def test_create_guru_for_missing_user(self):
        with self.assertRaisesMessage(NotFoundError, 'User not found'):
            create_guru(user_id=999999, nip='197599', nama='Tidak Ada')

    def test_one_profile_per_user_and_unique_nip(self):
        create_guru(user_id=self.guru_user.id, nip='197501', nama='Pak Budi')

        with self.assertRaisesMessage(ValidationError, 'Guru profile already exists for this user'):
            create_guru(user_id=self.guru_user.id, nip='197503', nama='Pak Budi')

        with self.assertRaisesMessage(ValidationError, 'NIP already exists'):
            create_guru(user_id=self.other_guru_user.id, nip='197501', nama='Bu Ani')

    def test_update_guru_changes_name_only(self):
        guru = create_guru(user_id=self.guru_user.id, nip='197501', nama='Pak Budi')
        updated = update_guru(guru.id, nama='Pak Budi Santoso')

        self.assertEqual(updated.nama, 'Pak Budi Santoso')
        self.assertEqual(updated.nip, '197501')

    def test_wali_kelas_cannot_be_deleted(self):
        guru = create_guru(user_id=self.guru_user.id, nip='197501', nama='Pak Budi')
        SchoolClass.objects.create(nama_kelas='XI IPS 2', wali_kelas=guru)

        with self.assertRaisesMessage(ValidationError, 'Cannot delete guru who is wali kelas of a kelas'):
            delete_guru(guru.id)
        self.assertTrue(Teacher.objects.filter(id=guru.id).exists())

    def test_delete_guru_without_kelas(self):
        guru = create_guru(user_id=self.guru_user.id, nip='197501', nama='Pak Budi')
        result = delete_guru(guru.id)

        self.assertTrue(result['success'])
        self.assertFalse(Teacher.objects.filter(id=guru.id).exists())


class TeacherApiTests(TeachersBaseTestCase):
    def test_admin_creates_guru(self):
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse('guru_list'),
            {'user_id': self.guru_user.id, 'nip': '197501', 'nama': 'Pak Budi'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['user_id'], self.guru_user.id)
        self.assertIsNone(response.json()['foto'])

    def test_guru_can_list_but_not_create(self):
        Teacher.objects.create(user=self.guru_user, nip='197501', nama='Pak Budi')
        self.client.force_login(self.guru_user)

        listing = self.client.get(reverse('guru_list'))
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(len(listing.json()), 1)

        response = self.client.post(
            reverse('guru_list'),
            {'user_id': self.other_guru_user.id, 'nip': '197502', 'nama': 'Bu Ani'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)

    def test_siswa_cannot_list_guru(self):
        self.client.force_login(self.siswa_user)
        response = self.client.get(reverse('guru_list'))
        self.assertEqual(response.status_code, 403)

    def test_missing_guru_detail_is_null(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('guru_detail', args=[999999]))

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json())
