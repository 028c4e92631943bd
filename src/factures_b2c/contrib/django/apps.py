"""Configuration de l'application Django pour la facturation B2C."""

from django.apps import AppConfig


class FacturesB2CConfig(AppConfig):
    """Configuration de l'app Django factures-b2c."""

    name = "factures_b2c.contrib.django"
    label = "factures_b2c"
    verbose_name = "Facturation B2C et OSS"
    default_auto_field = "django.db.models.BigAutoField"
