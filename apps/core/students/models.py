from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from apps.core.academics.models import SchoolClass


class Student(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='student_profile',
    )
    nisn = models.CharField(max_length=30, unique=True)
    nama = models.CharField(max_length=150)
    kelas = models.ForeignKey(
        SchoolClass,
        on_delete=models.PROTECT,
        related_name='siswa',
    )
    foto = models.CharField(max_length=500, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['nama', 'id']
        indexes = [
            models.Index(fields=['kelas'], name='students_siswa_kelas_idx'),
        ]

    def clean(self):
        super().clean()

        if self.user_id and self.user.role != 'siswa':
            raise ValidationError({'user': 'Invalid user_id or user is not a siswa'})

    def __str__(self):
        return f"{self.nisn} - {self.nama}"
