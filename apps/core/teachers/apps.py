from django.apps import AppConfig


class TeachersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core.teachers'
    label = 'teachers'
    verbose_name = 'Guru'
