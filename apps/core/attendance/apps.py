from django.apps import AppConfig


class AttendanceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core.attendance'
    label = 'attendance'
    verbose_name = 'Absensi'
