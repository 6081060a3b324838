from django.apps import AppConfig


class SendsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'sends'
    verbose_name = 'Sent mail'

    def ready(self):
        from . import signals  # noqa: F401
        from .contracts import autodiscover

        autodiscover(self.apps)
