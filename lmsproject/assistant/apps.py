from django.apps import AppConfig


class AssistantConfig(AppConfig):
    default_auto_field = 'django.db.models.AutoField'
    name = 'assistant'
    verbose_name = 'AI Assistant'
