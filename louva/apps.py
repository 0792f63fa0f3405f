from django.apps import AppConfig


class LouvaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "louva"
    verbose_name = "Louva - Salon Loyalty"
