import random
from datetime import time, timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from faker import Faker

from apps.core.academics.models import SchoolClass
from apps.core.attendance.models import Attendance
from apps.core.leaves.models import LeaveRequest
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.users.models import User

DEFAULT_PASSWORD = 'password'


class Command(BaseCommand):
    help = 'Seeds the database with demo admin, guru, kelas, siswa and absensi data.'

    def add_arguments(self, parser):
        parser.add_argument('--kelas', type=int, default=3, help='Number of kelas to create.')
        parser.add_argument('--siswa-per-kelas', type=int, default=10, help='Siswa per kelas.')
        parser.add_argument('--days', type=int, default=5, help='Past days of absensi to generate.')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable data.')

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding database...')

        fake = Faker('id_ID')
        if options['seed'] is not None:
            Faker.seed(options['seed'])
            random.seed(options['seed'])

        if not User.objects.filter(username='admin').exists():
            User.objects.create_account(role=User.ROLE_ADMIN, username='admin', password=DEFAULT_PASSWORD)
            self.stdout.write(self.style.SUCCESS('Successfully created admin user.'))

        kelas_list = []
        for index in range(1, options['kelas'] + 1):
            nip = f"1980{index:04d}"
            guru = Teacher.objects.filter(nip=nip).first()
            if guru is None:
                user = User.objects.create_account(role=User.ROLE_GURU, nip=nip, password=DEFAULT_PASSWORD)
                guru = Teacher.objects.create(user=user, nip=nip, nama=fake.name())
                self.stdout.write(self.style.SUCCESS(f'Successfully created guru: {guru.nama} ({nip})'))

            kelas, created = SchoolClass.objects.get_or_create(
                nama_kelas=f"X-{index}",
                defaults={'wali_kelas': guru},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Successfully created kelas: {kelas.nama_kelas}'))
            kelas_list.append(kelas)

        for kelas_index, kelas in enumerate(kelas_list, start=1):
            for index in range(1, options['siswa_per_kelas'] + 1):
                nisn = f"00{kelas_index:02d}{index:06d}"
                if Student.objects.filter(nisn=nisn).exists():
                    continue

                user = User.objects.create_account(role=User.ROLE_SISWA, nisn=nisn, password=DEFAULT_PASSWORD)
                siswa = Student.objects.create(user=user, nisn=nisn, nama=fake.name(), kelas=kelas)
                self.stdout.write(self.style.SUCCESS(f'  - Successfully created siswa: {siswa.nama} ({nisn})'))

        today = timezone.localdate()
        statuses = [
            Attendance.STATUS_HADIR,
            Attendance.STATUS_HADIR,
            Attendance.STATUS_HADIR,
            Attendance.STATUS_HADIR,
            Attendance.STATUS_IZIN,
            Attendance.STATUS_SAKIT,
            Attendance.STATUS_ALPHA,
        ]
        created_rows = 0
        for siswa in Student.objects.select_related('kelas__wali_kelas'):
            for days_ago in range(1, options['days'] + 1):
                status = random.choice(statuses)
                hadir = status == Attendance.STATUS_HADIR
                _, created = Attendance.objects.get_or_create(
                    siswa=siswa,
                    tanggal=today - timedelta(days=days_ago),
                    defaults={
                        'kelas': siswa.kelas,
                        'guru': siswa.kelas.wali_kelas,
                        'status': status,
                        'waktu_masuk': time(7, random.randint(0, 30)) if hadir else None,
                        'waktu_pulang': time(14, random.randint(0, 30)) if hadir else None,
                        'keterangan': None if hadir else fake.sentence(nb_words=4),
                    },
                )
                created_rows += int(created)

            if random.random() < 0.2:
                LeaveRequest.objects.get_or_create(
                    siswa=siswa,
                    tanggal=today + timedelta(days=1),
                    defaults={
                        'alasan': fake.sentence(nb_words=6),
                        'jenis': random.choice([LeaveRequest.JENIS_IZIN, LeaveRequest.JENIS_SAKIT]),
                    },
                )

        self.stdout.write(self.style.SUCCESS(f'Successfully created {created_rows} absensi rows.'))
        self.stdout.write(self.style.SUCCESS('Database seeding complete!'))
