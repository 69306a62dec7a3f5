from django.apps import AppConfig


class LeavesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core.leaves'
    label = 'leaves'
    verbose_name = 'Pengajuan Izin'
