from django.apps import AppConfig


class AcademicsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core.academics'
    label = 'academics'
    verbose_name = 'Kelas'
