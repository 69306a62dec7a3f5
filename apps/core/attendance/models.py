from django.core.exceptions import ValidationError
from django.db import models

from apps.core.academics.models import SchoolClass
from apps.core.students.models import Student
from apps.core.teachers.models import Teacher


class Attendance(models.Model):
    STATUS_HADIR = 'hadir'
    STATUS_IZIN = 'izin'
    STATUS_SAKIT = 'sakit'
    STATUS_ALPHA = 'alpha'
    STATUS_CHOICES = (
        (STATUS_HADIR, 'Hadir'),
        (STATUS_IZIN, 'Izin'),
        (STATUS_SAKIT, 'Sakit'),
        (STATUS_ALPHA, 'Alpha'),
    )
    STATUSES = tuple(value for value, _ in STATUS_CHOICES)

    siswa = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='absensi',
    )
    guru = models.ForeignKey(
        Teacher,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='absensi_dicatat',
    )
    kelas = models.ForeignKey(
        SchoolClass,
        on_delete=models.PROTECT,
        related_name='absensi',
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    tanggal = models.DateField()
    waktu_masuk = models.TimeField(null=True, blank=True)
    waktu_pulang = models.TimeField(null=True, blank=True)
    keterangan = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-tanggal', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['siswa', 'tanggal'],
                name='unique_absensi_per_siswa_per_day',
            ),
        ]
        indexes = [
            models.Index(fields=['tanggal', 'status'], name='attendance_tanggal_status_idx'),
            models.Index(fields=['kelas', 'tanggal'], name='attendance_kelas_tanggal_idx'),
        ]

    def clean(self):
        super().clean()

        if self.waktu_pulang and not self.waktu_masuk:
            raise ValidationError({'waktu_masuk': 'Waktu masuk is required when waktu pulang is provided.'})

        if self.waktu_masuk and self.waktu_pulang and self.waktu_pulang <= self.waktu_masuk:
            raise ValidationError({'waktu_pulang': 'Waktu pulang must be after waktu masuk.'})

    def __str__(self):
        return f"{self.siswa.nisn} - {self.tanggal} ({self.status})"
