from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.contrib.auth.validators import UnicodeUsernameValidator
from django.db import models


class UserManager(DjangoUserManager):
    def create_account(self, role, password, username=None, nip=None, nisn=None, **extra_fields):
        """Create a user identified by the field its role logs in with."""
        user = self.model(
            role=role,
            username=self.model.normalize_username(username) if username else None,
            nip=nip or None,
            nisn=nisn or None,
            **extra_fields,
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', 'admin')
        return super().create_superuser(username, email=email, password=password, **extra_fields)


class User(AbstractUser):
    ROLE_ADMIN = 'admin'
    ROLE_GURU = 'guru'
    ROLE_SISWA = 'siswa'

    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Admin'),
        (ROLE_GURU, 'Guru'),
        (ROLE_SISWA, 'Siswa'),
    )

    # Field that identifies an account at login, per role.
    IDENTIFIER_FIELDS = {
        ROLE_ADMIN: 'username',
        ROLE_GURU: 'nip',
        ROLE_SISWA: 'nisn',
    }
    IDENTIFIER_LABELS = {
        'username': 'Username',
        'nip': 'NIP',
        'nisn': 'NISN',
    }

    username = models.CharField(
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        validators=[UnicodeUsernameValidator()],
    )
    nip = models.CharField(max_length=30, unique=True, null=True, blank=True)
    nisn = models.CharField(max_length=30, unique=True, null=True, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['role'], name='users_user_role_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.is_superuser and self.role != self.ROLE_ADMIN:
            self.role = self.ROLE_ADMIN

        # Blank identifiers are stored as NULL so unique columns accept many of them.
        for field_name in self.IDENTIFIER_FIELDS.values():
            if getattr(self, field_name) == '':
                setattr(self, field_name, None)

        super().save(*args, **kwargs)

    @property
    def identifier_field(self):
        return self.IDENTIFIER_FIELDS.get(self.role)

    @property
    def login_identifier(self):
        field_name = self.identifier_field
        return getattr(self, field_name) if field_name else None

    def __str__(self):
        return f"{self.login_identifier or self.pk} ({self.role})"


class AuditLog(models.Model):
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )

    action = models.CharField(max_length=100)
    target_model = models.CharField(max_length=100, blank=True)
    target_id = models.CharField(max_length=64, blank=True)
    details = models.TextField(blank=True)

    method = models.CharField(max_length=10, blank=True)
    path = models.CharField(max_length=255, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='users_audit_user_created_idx'),
            models.Index(fields=['action'], name='users_audit_action_idx'),
        ]

    def __str__(self):
        return f"{self.action} by {self.user_id or 'system'}"
