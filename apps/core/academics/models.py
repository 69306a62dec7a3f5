from django.core.exceptions import ValidationError
from django.db import models

from apps.core.teachers.models import Teacher


class SchoolClass(models.Model):
    nama_kelas = models.CharField(max_length=50)  # e.g. X IPA 1
    wali_kelas = models.ForeignKey(
        Teacher,
        on_delete=models.PROTECT,
        related_name='kelas_wali',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['nama_kelas', 'id']
        indexes = [
            models.Index(fields=['wali_kelas'], name='academics_kelas_wali_idx'),
        ]

    def delete(self, *args, **kwargs):
        if self.siswa.exists():
            raise ValidationError('Cannot delete kelas with assigned students')
        if self.absensi.exists():
            raise ValidationError('Cannot delete kelas with recorded absensi')
        return super().delete(*args, **kwargs)

    def __str__(self):
        return self.nama_kelas
