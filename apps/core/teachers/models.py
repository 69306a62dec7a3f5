from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Teacher(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='teacher_profile',
    )
    nip = models.CharField(max_length=30, unique=True)
    nama = models.CharField(max_length=150)
    foto = models.CharField(max_length=500, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['nama', 'id']

    def clean(self):
        super().clean()

        if self.user_id and self.user.role != 'guru':
            raise ValidationError({'user': 'User must have guru role'})

    def __str__(self):
        return f"{self.nip} - {self.nama}"
