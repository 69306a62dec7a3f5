from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction

from apps.core.academics.models import SchoolClass
from apps.core.utils.lookups import get_or_raise

from .models import Student

logger = logging.getLogger(__name__)


def student_for_user(user):
    if not user or not getattr(user, 'is_authenticated', False) or user.role != 'siswa':
        return None
    return Student.objects.filter(user=user).first()


def ensure_student_access(user, siswa_id):
    """Siswa accounts may only act on their own profile; admin and guru are unrestricted."""
    if user.role != 'siswa':
        return

    own = student_for_user(user)
    if own is None or own.id != siswa_id:
        raise PermissionDenied('Siswa can only access their own data')


@transaction.atomic
def create_siswa(*, user_id, nisn, nama, kelas_id, foto=None):
    user = get_user_model().objects.filter(id=user_id).first()
    if user is None or user.role != 'siswa':
        raise ValidationError('Invalid user_id or user is not a siswa')

    kelas = get_or_raise(SchoolClass, 'Kelas not found', id=kelas_id)

    if Student.objects.filter(nisn=nisn).exists():
        raise ValidationError('NISN already exists')

    if Student.objects.filter(user=user).exists():
        raise ValidationError('Siswa profile already exists for this user')

    siswa = Student(user=user, nisn=nisn, nama=nama, kelas=kelas, foto=foto)
    siswa.full_clean()
    siswa.save()
    logger.info('Created siswa %s in kelas %s', siswa.pk, kelas.pk)
    return siswa


@transaction.atomic
def update_siswa(siswa_id, **changes):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)

    update_fields = ['updated_at']
    if changes.get('kelas_id') is not None:
        siswa.kelas = get_or_raise(SchoolClass, 'Kelas not found', id=changes['kelas_id'])
        update_fields.append('kelas')

    for field_name in ('nama', 'foto'):
        if field_name in changes:
            setattr(siswa, field_name, changes[field_name])
            update_fields.append(field_name)

    siswa.save(update_fields=update_fields)
    return siswa


@transaction.atomic
def delete_siswa(siswa_id):
    siswa = get_or_raise(Student, 'Siswa not found', id=siswa_id)
    siswa.delete()
    logger.info('Deleted siswa %s', siswa_id)
    return {'success': True, 'message': 'Siswa deleted successfully'}


def list_siswa():
    return Student.objects.order_by('id')


def list_siswa_by_kelas(kelas_id):
    get_or_raise(SchoolClass, 'Kelas not found', id=kelas_id)
    return Student.objects.filter(kelas_id=kelas_id).order_by('id')


def get_siswa(siswa_id):
    return Student.objects.filter(id=siswa_id).first()
