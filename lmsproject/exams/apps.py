from django.apps import AppConfig


class ExamsConfig(AppConfig):
    default_auto_field = 'django.db.models.AutoField'
    name = 'exams'
    verbose_name = 'Exams'
