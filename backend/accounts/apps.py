from django.apps import AppConfig


class AccountsConfig(AppConfig):
    name = 'accounts'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        from .services import ThemeContext, log_theme_change
        self.theme_context = ThemeContext()
        self.theme_context.subscribe(log_theme_change)
