from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.utils.lookups import get_or_raise

from .models import Teacher

logger = logging.getLogger(__name__)


@transaction.atomic
def create_guru(*, user_id, nip, nama, foto=None):
    user = get_or_raise(get_user_model(), 'User not found', id=user_id)
    if user.role != 'guru':
        raise ValidationError('User must have guru role')

    if Teacher.objects.filter(user=user).exists():
        raise ValidationError('Guru profile already exists for this user')

    if Teacher.objects.filter(nip=nip).exists():
        raise ValidationError('NIP already exists')

    guru = Teacher(user=user, nip=nip, nama=nama, foto=foto)
    guru.full_clean()
    guru.save()
    logger.info('Created guru %s for user %s', guru.pk, user.pk)
    return guru


@transaction.atomic
def update_guru(guru_id, **changes):
    guru = get_or_raise(Teacher, 'Guru not found', id=guru_id)

    update_fields = ['updated_at']
    for field_name in ('nama', 'foto'):
        if field_name in changes:
            setattr(guru, field_name, changes[field_name])
            update_fields.append(field_name)

    guru.save(update_fields=update_fields)
    return guru


@transaction.atomic
def delete_guru(guru_id):
    guru = get_or_raise(Teacher, 'Guru not found', id=guru_id)

    if guru.kelas_wali.exists():
        raise ValidationError('Cannot delete guru who is wali kelas of a kelas')

    guru.delete()
    logger.info('Deleted guru %s', guru_id)
    return {'success': True, 'message': 'Guru deleted successfully'}


def list_guru():
    return Teacher.objects.order_by('id')


def get_guru(guru_id):
    return Teacher.objects.filter(id=guru_id).first()
