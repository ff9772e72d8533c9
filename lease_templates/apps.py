from django.apps import AppConfig


class LeaseTemplatesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'lease_templates'
    verbose_name = 'Lease Templates'
