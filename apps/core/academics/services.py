from __future__ import annotations

import logging

from django.db import transaction

from apps.core.teachers.models import Teacher
from apps.core.utils.lookups import get_or_raise

from .models import SchoolClass

logger = logging.getLogger(__name__)

WALI_KELAS_NOT_FOUND = 'Wali kelas (guru) not found'


@transaction.atomic
def create_kelas(*, nama_kelas, wali_kelas_id):
    wali_kelas = get_or_raise(Teacher, WALI_KELAS_NOT_FOUND, id=wali_kelas_id)

    kelas = SchoolClass.objects.create(nama_kelas=nama_kelas, wali_kelas=wali_kelas)
    logger.info('Created kelas %s with wali kelas %s', kelas.pk, wali_kelas.pk)
    return kelas


@transaction.atomic
def update_kelas(kelas_id, **changes):
    kelas = get_or_raise(SchoolClass, 'Kelas not found', id=kelas_id)

    update_fields = ['updated_at']
    if 'nama_kelas' in changes:
        kelas.nama_kelas = changes['nama_kelas']
        update_fields.append('nama_kelas')

    if 'wali_kelas_id' in changes:
        kelas.wali_kelas = get_or_raise(Teacher, WALI_KELAS_NOT_FOUND, id=changes['wali_kelas_id'])
        update_fields.append('wali_kelas')

    kelas.save(update_fields=update_fields)
    return kelas


@transaction.atomic
def delete_kelas(kelas_id):
    kelas = get_or_raise(SchoolClass, 'Kelas not found', id=kelas_id)
    kelas.delete()
    logger.info('Deleted kelas %s', kelas_id)
    return {'success': True, 'message': 'Kelas deleted successfully'}


def list_kelas():
    return SchoolClass.objects.order_by('id')


def list_kelas_by_wali_kelas(guru_id):
    return SchoolClass.objects.filter(wali_kelas_id=guru_id).order_by('id')


def get_kelas(kelas_id):
    return SchoolClass.objects.filter(id=kelas_id).first()
