from django.apps import AppConfig


class AgentApplicationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'agent_applications'
    verbose_name = 'Agent Applications'

    def ready(self):
        import agent_applications.signals  # noqa: F401
