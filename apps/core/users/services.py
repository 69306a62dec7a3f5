from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.students.models import Student
from apps.core.teachers.models import Teacher
from apps.core.utils.lookups import get_or_raise

from .models import User

logger = logging.getLogger(__name__)

MISSING_IDENTIFIER_MESSAGES = {
    User.ROLE_ADMIN: 'Username is required for admin login',
    User.ROLE_GURU: 'NIP is required for guru login',
    User.ROLE_SISWA: 'NISN is required for siswa login',
}


def authenticate_by_role(*, role, password, username=None, nip=None, nisn=None):
    """Resolve a login attempt to ``(user, message)``; ``user`` is None on failure."""
    if role not in User.IDENTIFIER_FIELDS:
        return None, 'Invalid role specified'

    identifiers = {'username': username, 'nip': nip, 'nisn': nisn}
    field_name = User.IDENTIFIER_FIELDS[role]
    identifier = identifiers[field_name]
    if not identifier:
        return None, MISSING_IDENTIFIER_MESSAGES[role]

    user = User.objects.filter(role=role, **{field_name: identifier}).first()
    if user is None or not user.is_active:
        return None, 'User not found'

    if not user.check_password(password):
        logger.info('Rejected %s login for %s=%s: invalid password', role, field_name, identifier)
        return None, 'Invalid password'

    return user, 'Login successful'


def _profile_for(user):
    if user.role == User.ROLE_SISWA:
        siswa = Student.objects.filter(user=user).first()
        if siswa:
            return {
                'id': siswa.id,
                'nama': siswa.nama,
                'foto': siswa.foto,
                'kelas_id': siswa.kelas_id,
            }
        return None

    if user.role == User.ROLE_GURU:
        guru = Teacher.objects.filter(user=user).first()
        if guru:
            return {
                'id': guru.id,
                'nama': guru.nama,
                'foto': guru.foto,
            }
        return None

    return {
        'id': user.id,
        'nama': user.username or 'Admin',
        'foto': None,
    }


def build_user_payload(user):
    return {
        'id': user.id,
        'role': user.role,
        'username': user.username,
        'nip': user.nip,
        'nisn': user.nisn,
        'profile': _profile_for(user),
    }


def get_current_user(user_id):
    user = User.objects.filter(id=user_id).first()
    if user is None:
        return None
    return build_user_payload(user)


def _ensure_identifiers_available(identifiers, exclude_pk=None):
    for field_name, value in identifiers.items():
        if not value:
            continue

        conflicts = User.objects.filter(**{field_name: value})
        if exclude_pk is not None:
            conflicts = conflicts.exclude(pk=exclude_pk)
        if conflicts.exists():
            raise ValidationError(f"{User.IDENTIFIER_LABELS[field_name]} already exists")


def _ensure_role_identifier(user):
    field_name = user.identifier_field
    if not getattr(user, field_name):
        label = User.IDENTIFIER_LABELS[field_name]
        raise ValidationError(f"{label} is required for {user.role} accounts")


@transaction.atomic
def create_user(*, role, password, username=None, nip=None, nisn=None):
    identifiers = {'username': username, 'nip': nip, 'nisn': nisn}
    _ensure_role_identifier(User(role=role, **identifiers))
    _ensure_identifiers_available(identifiers)

    user = User.objects.create_account(role=role, password=password, **identifiers)
    logger.info('Created %s user %s', role, user.pk)
    return user


@transaction.atomic
def update_user(user_id, **changes):
    user = get_or_raise(User, 'User not found', id=user_id)

    identifiers = {
        field_name: changes[field_name]
        for field_name in ('username', 'nip', 'nisn')
        if field_name in changes and changes[field_name] != getattr(user, field_name)
    }
    _ensure_identifiers_available(identifiers, exclude_pk=user.pk)

    for field_name, value in identifiers.items():
        setattr(user, field_name, value or None)
    if 'role' in changes:
        user.role = changes['role']
    _ensure_role_identifier(user)

    if changes.get('password') is not None:
        user.set_password(changes['password'])

    user.save()
    logger.info('Updated user %s', user.pk)
    return user


@transaction.atomic
def delete_user(user_id):
    user = get_or_raise(User, 'User not found', id=user_id)

    guru = Teacher.objects.filter(user=user).first()
    if guru and guru.kelas_wali.exists():
        raise ValidationError('Cannot delete user whose guru profile is wali kelas of a kelas')

    user.delete()
    logger.info('Deleted user %s', user_id)
    return {'success': True, 'message': 'User deleted successfully'}


def list_users():
    return User.objects.order_by('id')
