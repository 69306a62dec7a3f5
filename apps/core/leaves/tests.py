from datetime import date

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.users.models import User
from apps.core.utils.exceptions import NotFoundError

from .models import LeaveRequest
from .services import (
    create_pengajuan_izin,
    get_pending_pengajuan_izin,
    get_pengajuan_izin_by_siswa,
    review_pengajuan_izin,
)


class LeavesBaseTestCase(TestCase):
    def setUp(self):
        self.admin = User.objects.create_account(role='admin', username='izin_admin', password='pass12345')
        self.guru_user = User.objects.create_account(role='guru', nip='197001', password='pass12345')
        self.siswa_user = User.objects.create_account(role='siswa', nisn='0081111111', password='pass12345')
        self.other_siswa_user = User.objects.create_account(role='siswa', nisn='0082222222', password='pass12345')

        self.guru = Teacher.objects.create(user=self.guru_user, nip='197001', nama='Bu Lestari')
        self.kelas = SchoolClass.objects.create(nama_kelas='IX A', wali_kelas=self.guru)
        self.other_kelas = SchoolClass.objects.create(nama_kelas='IX B', wali_kelas=self.guru)
        self.siswa = Student.objects.create(user=self.siswa_user, nisn='0081111111', nama='Eka', kelas=self.kelas)
        self.other_siswa = Student.objects.create(
            user=self.other_siswa_user,
            nisn='0082222222',
            nama='Fajar',
            kelas=self.other_kelas,
        )


class LeaveRequestServiceTests(LeavesBaseTestCase):
    def test_new_request_is_pending(self):
        pengajuan = create_pengajuan_izin(
            siswa_id=self.siswa.id,
            tanggal=date(2026, 9, 1),
            alasan='Acara keluarga',
            jenis='izin',
        )
        self.assertEqual(pengajuan.status, LeaveRequest.STATUS_PENDING)
        self.assertIsNone(pengajuan.reviewer)

    def test_request_for_missing_siswa(self):
        with self.assertRaisesMessage(NotFoundError, 'Siswa not found'):
            create_pengajuan_izin(siswa_id=999999, tanggal=date(2026, 9, 1), alasan='x', jenis='izin')

    def test_approving_sick_request_records_sakit_absensi(self):
        pengajuan = create_pengajuan_izin(
            siswa_id=self.siswa.id,
            tanggal=date(2026, 9, 2),
            alasan='Demam',
            jenis='sakit',
        )

        reviewed = review_pengajuan_izin(pengajuan.id, status='approved', reviewer=self.guru_user)

        self.assertEqual(reviewed.status, LeaveRequest.STATUS_APPROVED)
        self.assertEqual(reviewed.reviewer, self.guru_user)
        self.assertIsNotNone(reviewed.reviewed_at)

        absensi = Attendance.objects.get(siswa=self.siswa, tanggal=date(2026, 9, 2))
        self.assertEqual(absensi.status, Attendance.STATUS_SAKIT)
        self.assertEqual(absensi.kelas, self.kelas)
        self.assertEqual(absensi.guru, self.guru)
        self.assertEqual(absensi.keterangan, 'Approved: Demam')

    def test_approval_by_admin_leaves_guru_empty(self):
        pengajuan = create_pengajuan_izin(
            siswa_id=self.siswa.id,
            tanggal=date(2026, 9, 2),
            alasan='Lomba',
            jenis='izin',
        )
        review_pengajuan_izin(pengajuan.id, status='approved', reviewer=self.admin)

        absensi = Attendance.objects.get(siswa=self.siswa, tanggal=date(2026, 9, 2))
        self.assertEqual(absensi.status, Attendance.STATUS_IZIN)
        self.assertIsNone(absensi.guru)

    def test_approval_overwrites_existing_absensi(self):
        Attendance.objects.create(
            siswa=self.siswa,
            kelas=self.kelas,
            status=Attendance.STATUS_ALPHA,
            tanggal=date(2026, 9, 3),
        )
        pengajuan = create_pengajuan_izin(
            siswa_id=self.siswa.id,
            tanggal=date(2026, 9, 3),
            alasan='Ke dokter',
            jenis='sakit',
        )

        review_pengajuan_izin(pengajuan.id, status='approved', reviewer=self.guru_user)

        rows = Attendance.objects.filter(siswa=self.siswa, tanggal=date(2026, 9, 3))
        self.assertEqual(rows.count(), 1)
        self.assertEqual(rows.get().status, Attendance.STATUS_SAKIT)

    def test_rejection_records_no_absensi(self):
        pengajuan = create_pengajuan_izin(
            siswa_id=self.siswa.id,
            tanggal=date(2026, 9, 4),
            alasan='Liburan',
            jenis='izin',
        )
        review_pengajuan_izin(pengajuan.id, status='rejected', reviewer=self.guru_user)

        self.assertFalse(Attendance.objects.filter(siswa=self.siswa).exists())

    def test_request_can_only_be_reviewed_once(self):
        pengajuan = create_pengajuan_izin(
            siswa_id=self.siswa.id,
            tanggal=date(2026, 9, 4),
            alasan='Liburan',
            jenis='izin',
        )
        review_pengajuan_izin(pengajuan.id, status='rejected', reviewer=self.guru_user)

        with self.assertRaisesMessage(ValidationError, 'Pengajuan izin has already been reviewed'):
            review_pengajuan_izin(pengajuan.id, status='approved', reviewer=self.guru_user)

    def test_review_missing_request(self):
        with self.assertRaisesMessage(NotFoundError, 'Pengajuan izin not found'):
            review_pengajuan_izin(999999, status='approved', reviewer=self.admin)

    def test_pending_is_oldest_first_and_filterable_by_kelas(self):
        first = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='a', jenis='izin')
        second = create_pengajuan_izin(siswa_id=self.other_siswa.id, tanggal=date(2026, 9, 5), alasan='b', jenis='izin')
        reviewed = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 6), alasan='c', jenis='izin')
        review_pengajuan_izin(reviewed.id, status='rejected', reviewer=self.admin)

        self.assertEqual(list(get_pending_pengajuan_izin()), [first, second])
        self.assertEqual(list(get_pending_pengajuan_izin(self.other_kelas.id)), [second])
        with self.assertRaisesMessage(NotFoundError, 'Kelas not found'):
            get_pending_pengajuan_izin(999999)

    def test_by_siswa_is_newest_first(self):
        first = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='a', jenis='izin')
        second = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 6), alasan='b', jenis='sakit')

        self.assertEqual(list(get_pengajuan_izin_by_siswa(self.siswa.id)), [second, first])


class LeaveRequestApiTests(LeavesBaseTestCase):
    def test_siswa_submits_own_request(self):
        self.client.force_login(self.siswa_user)
        response = self.client.post(
            reverse('pengajuan_izin_list'),
            {'siswa_id': self.siswa.id, 'tanggal': '2026-09-10', 'alasan': 'Sakit gigi', 'jenis': 'sakit'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['status'], 'pending')

    def test_siswa_cannot_submit_for_someone_else(self):
        self.client.force_login(self.siswa_user)
        response = self.client.post(
            reverse('pengajuan_izin_list'),
            {'siswa_id': self.other_siswa.id, 'tanggal': '2026-09-10', 'alasan': 'x', 'jenis': 'izin'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)

    def test_siswa_lists_only_own_requests(self):
        create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='a', jenis='izin')
        create_pengajuan_izin(siswa_id=self.other_siswa.id, tanggal=date(2026, 9, 5), alasan='b', jenis='izin')
        self.client.force_login(self.siswa_user)

        response = self.client.get(reverse('pengajuan_izin_list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([row['siswa_id'] for row in response.json()], [self.siswa.id])

        other = self.client.get(reverse('pengajuan_izin_list'), {'siswa_id': self.other_siswa.id})
        self.assertEqual(other.status_code, 403)

    def test_siswa_cannot_review(self):
        pengajuan = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='a', jenis='izin')
        self.client.force_login(self.siswa_user)

        response = self.client.post(
            reverse('pengajuan_izin_review', args=[pengajuan.id]),
            {'status': 'approved'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)

    def test_guru_approves_and_second_review_is_400(self):
        pengajuan = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='Flu', jenis='sakit')
        self.client.force_login(self.guru_user)
        url = reverse('pengajuan_izin_review', args=[pengajuan.id])

        approved = self.client.post(url, {'status': 'approved'}, content_type='application/json')
        self.assertEqual(approved.status_code, 200)
        self.assertEqual(approved.json()['reviewer_id'], self.guru_user.id)

        again = self.client.post(url, {'status': 'rejected'}, content_type='application/json')
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json()['detail'], 'Pengajuan izin has already been reviewed')

    def test_review_status_must_be_decision(self):
        pengajuan = create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='a', jenis='izin')
        self.client.force_login(self.guru_user)

        response = self.client.post(
            reverse('pengajuan_izin_review', args=[pengajuan.id]),
            {'status': 'pending'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)

    def test_guru_lists_pending(self):
        create_pengajuan_izin(siswa_id=self.siswa.id, tanggal=date(2026, 9, 5), alasan='a', jenis='izin')
        self.client.force_login(self.guru_user)

        response = self.client.get(reverse('pengajuan_izin_pending'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)
