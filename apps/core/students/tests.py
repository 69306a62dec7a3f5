from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from apps.core.academics.models import SchoolClass
from apps.core.teachers.models import Teacher
from apps.core.users.models import User
from apps.core.utils.exceptions import NotFoundError

from .models import Student
from .services import create_siswa, delete_siswa, list_siswa_by_kelas, update_siswa


class StudentsBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='siswa_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='198801', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0061111111', password='pass12345')
        self.other_siswa_user = User.objects.create_account(role='siswa', nisn='0062222222', password='pass12345')

        self.guru = Teacher.objects.create(user=self.guru_user, nip='198801', nama='Bu Dewi')
        self.kelas = SchoolClass.objects.create(nama_kelas='VII A', wali_kelas=self.guru)
        self.other_kelas = SchoolClass.objects.create(nama_kelas='VII B', wali_kelas=self.guru)


class StudentServiceTests(StudentsBaseTestCase):
    def test_create_siswa_requires_siswa_user(self):
        with self.assertRaisesMessage(ValidationError, 'Invalid user_id or user is not a siswa'):
            create_siswa(user_id=self.guru_user.id, nisn='0069999999', nama='Salah', kelas_id=self.kelas.id)

    def test_create_siswa_in_missing_kelas(self):
        with self.assertRaisesMessage(NotFoundError, 'Kelas not found'):
            create_siswa(user_id=self.siswa_user.id, nisn='0061111111', nama='Andi', kelas_id=999999)

    def test_duplicate_nisn_is_rejected(self):
        create_siswa(user_id=self.siswa_user.id, nisn='0061111111', nama='Andi', kelas_id=self.kelas.id)

        with self.assertRaisesMessage(ValidationError, 'NISN already exists'):
            create_siswa(
                user_id=self.other_siswa_user.id,
                nisn='0061111111',
                nama='Budi',
                kelas_id=self.kelas.id,
            )

    def test_second_profile_for_same_user_is_rejected(self):
        create_siswa(user_id=self.siswa_user.id, nisn='0061111111', nama='Andi', kelas_id=self.kelas.id)

        with self.assertRaisesMessage(ValidationError, 'Siswa profile already exists for this user'):
            create_siswa(user_id=self.siswa_user.id, nisn='0063333333', nama='Andi', kelas_id=self.kelas.id)

    def test_update_moves_siswa_to_other_kelas(self):
        siswa = create_siswa(user_id=self.siswa_user.id, nisn='0061111111', nama='Andi', kelas_id=self.kelas.id)
        updated = update_siswa(siswa.id, kelas_id=self.other_kelas.id, foto='https://cdn.example.com/andi.jpg')

        self.assertEqual(updated.kelas, self.other_kelas)
        self.assertEqual(updated.foto, 'https://cdn.example.com/andi.jpg')

    def test_list_by_kelas(self):
        andi = create_siswa(user_id=self.siswa_user.id, nisn='0061111111', nama='Andi', kelas_id=self.kelas.id)
        create_siswa(user_id=self.other_siswa_user.id, nisn='0062222222', nama='Budi', kelas_id=self.other_kelas.id)

        self.assertEqual(list(list_siswa_by_kelas(self.kelas.id)), [andi])
        with self.assertRaisesMessage(NotFoundError, 'Kelas not found'):
            list_siswa_by_kelas(999999)

    def test_delete_missing_siswa(self):
        with self.assertRaisesMessage(NotFoundError, 'Siswa not found'):
            delete_siswa(999999)


class StudentApiTests(StudentsBaseTestCase):
    def setUp(self):
        super().setUp()
        self.andi = Student.objects.create(user=self.siswa_user, nisn='0061111111', nama='Andi', kelas=self.kelas)
        self.budi = Student.objects.create(
            user=self.other_siswa_user,
            nisn='0062222222',
            nama='Budi',
            kelas=self.other_kelas,
        )

    def test_guru_lists_siswa_by_kelas(self):
        self.client.force_login(self.guru_user)
        response = self.client.get(reverse('siswa_list'), {'kelas_id': self.kelas.id})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row['nisn'] for row in response.json()], ['0061111111'])

    def test_non_numeric_kelas_filter_is_400(self):
        self.client.force_login(self.guru_user)
        response = self.client.get(reverse('siswa_list'), {'kelas_id': 'abc'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('kelas_id', response.json())

    def test_filter_by_missing_kelas_is_404(self):
        self.client.force_login(self.guru_user)
        response = self.client.get(reverse('siswa_list'), {'kelas_id': 999999})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['detail'], 'Kelas not found')

    def test_siswa_cannot_list_siswa(self):
        self.client.force_login(self.siswa_user)
        response = self.client.get(reverse('siswa_list'))
        self.assertEqual(response.status_code, 403)

    def test_siswa_reads_only_own_profile(self):
        self.client.force_login(self.siswa_user)

        own = self.client.get(reverse('siswa_detail', args=[self.andi.id]))
        self.assertEqual(own.status_code, 200)
        self.assertEqual(own.json()['nama'], 'Andi')

        other = self.client.get(reverse('siswa_detail', args=[self.budi.id]))
        self.assertEqual(other.status_code, 403)

    def test_duplicate_nisn_via_api_is_400(self):
        third_user = User.objects.create_account(role='siswa', nisn='0064444444', password='pass12345')
        self.client.force_login(self.admin)

        response = self.client.post(
            reverse('siswa_list'),
            {'user_id': third_user.id, 'nisn': '0061111111', 'nama': 'Citra', 'kelas_id': self.kelas.id},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'NISN already exists')

    def test_admin_updates_siswa(self):
        self.client.force_login(self.admin)
        response = self.client.patch(
            reverse('siswa_detail', args=[self.andi.id]),
            {'nama': 'Andi Pratama'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['nama'], 'Andi Pratama')
