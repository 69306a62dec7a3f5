from django.conf import settings
from django.db import models

from apps.core.students.models import Student


class LeaveRequest(models.Model):
    JENIS_IZIN = 'izin'
    JENIS_SAKIT = 'sakit'
    JENIS_CHOICES = (
        (JENIS_IZIN, 'Izin'),
        (JENIS_SAKIT, 'Sakit'),
    )

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    )

    siswa = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='pengajuan_izin',
    )
    tanggal = models.DateField()
    alasan = models.TextField()
    jenis = models.CharField(max_length=10, choices=JENIS_CHOICES)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_pengajuan_izin',
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='leaves_status_created_idx'),
        ]

    def __str__(self):
        return f"{self.siswa.nisn} {self.tanggal} ({self.jenis}, {self.status})"
