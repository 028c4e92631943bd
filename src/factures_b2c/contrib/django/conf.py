"""Configuration de la facturation B2C via settings Django.

FR: Helper pour accéder aux paramètres FACTURES_B2C définis dans
    settings.py. Fournit des valeurs par défaut et instancie le backend
    de stockage et les composants du moteur.
EN: Helper for accessing FACTURES_B2C settings defined in settings.py.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.utils.module_loading import import_string

from factures_b2c.invoicing.assembler import InvoiceAssembler
from factures_b2c.models.enums import ThresholdScope
from factures_b2c.oss.threshold import OssThresholdTracker
from factures_b2c.storage.base import BaseStorage

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, object] = {
    "STORAGE_CLASS": "factures_b2c.contrib.django.storage.DjangoStorage",
    "OSS_THRESHOLD_SCOPE": ThresholdScope.PER_COUNTRY.value,
    "DEFAULT_LANGUAGE": "FR",
}


def get_setting(name: str) -> object:
    """Retourne la valeur d'un paramètre FACTURES_B2C.

    FR: Cherche dans settings.FACTURES_B2C[name], puis dans les défauts.
    EN: Looks up settings.FACTURES_B2C[name], then falls back to defaults.
    """
    if name not in DEFAULTS:
        msg = f"Paramètre FACTURES_B2C inconnu : {name}"
        raise KeyError(msg)
    user_settings = getattr(settings, "FACTURES_B2C", {})
    return user_settings.get(name, DEFAULTS[name])


def get_storage_instance() -> BaseStorage:
    """Instancie dynamiquement le backend de stockage configuré.

    Raises:
        ValueError: Si STORAGE_CLASS n'est pas configuré.
    """
    storage_class_path = get_setting("STORAGE_CLASS")
    if not storage_class_path:
        msg = (
            "FACTURES_B2C['STORAGE_CLASS'] n'est pas configuré. "
            "Spécifiez le chemin complet de la classe de stockage."
        )
        raise ValueError(msg)

    storage_class = import_string(storage_class_path)
    return storage_class()


def get_threshold_tracker(storage: BaseStorage) -> OssThresholdTracker:
    """Crée le suivi du seuil OSS avec la portée configurée."""
    scope = ThresholdScope(get_setting("OSS_THRESHOLD_SCOPE"))
    logger.debug("Portée du seuil OSS : %s", scope)
    return OssThresholdTracker(storage, scope=scope)


def get_assembler(storage: BaseStorage | None = None) -> InvoiceAssembler:
    """Crée l'assembleur de factures sur le stockage configuré."""
    storage = storage or get_storage_instance()
    return InvoiceAssembler(storage, tracker=get_threshold_tracker(storage))
