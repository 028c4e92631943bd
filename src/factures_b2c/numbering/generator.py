"""Générateur de numéros de facture séquentiels.

FR: Les numéros sont uniques et strictement croissants par boutique et
    par année civile. La séquence repart à 1 au changement d'année.
    L'incrément est délégué au stockage, qui le réalise de façon
    atomique : deux émissions concurrentes n'obtiennent jamais le même
    numéro. Une date d'émission antérieure à l'année en cours est
    refusée dès qu'un numéro a été émis : la séquence ne revient
    jamais en arrière.
EN: Numbers are unique and strictly increasing per shop and calendar
    year. The sequence restarts at 1 on year change. The increment is
    delegated to the storage, which performs it atomically. The sequence
    never moves back to an earlier year once a number is issued.

Jetons du gabarit / Template tokens:
    {PREFIX} préfixe, {YYYY} année, {YY} année sur 2 chiffres, {MM} mois,
    {DD} jour, {NNNN}/{NNN}/{NN} séquence complétée par des zéros.
"""

import logging
import re
from datetime import UTC, datetime

from factures_b2c.errors import ConfigurationError, ValidationError
from factures_b2c.storage.base import BaseStorage

logger = logging.getLogger(__name__)

# Alternance du plus long au plus court : {NNNN} avant {NNN} avant {NN}
_TOKEN_RE = re.compile(r"\{(PREFIX|YYYY|YY|MM|DD|NNNN|NNN|NN)\}")


def render_invoice_number(
    template: str,
    prefix: str,
    sequence: int,
    issued_at: datetime,
) -> str:
    """Produit un numéro de facture à partir d'un gabarit.

    FR: Substitution en une seule passe ; les jetons inconnus sont
        laissés tels quels. Une séquence plus longue que la largeur du
        jeton n'est pas tronquée.
    EN: Single-pass substitution; unknown tokens are left untouched. A
        sequence wider than its token is not truncated.

    Args:
        template: Gabarit, par ex. ``"{PREFIX}-{YYYY}-{NNNN}"``.
        prefix: Préfixe de la boutique.
        sequence: Numéro de séquence attribué.
        issued_at: Date d'émission.

    Returns:
        Le numéro rendu, par ex. ``"FAC-2025-0001"``.
    """
    values = {
        "PREFIX": prefix,
        "YYYY": f"{issued_at.year:04d}",
        "YY": f"{issued_at.year % 100:02d}",
        "MM": f"{issued_at.month:02d}",
        "DD": f"{issued_at.day:02d}",
        "NNNN": f"{sequence:04d}",
        "NNN": f"{sequence:03d}",
        "NN": f"{sequence:02d}",
    }
    return _TOKEN_RE.sub(lambda m: values[m.group(1)], template)


class InvoiceNumberGenerator:
    """Attribue le prochain numéro de facture d'une boutique.

    Args:
        storage: Backend de stockage fournissant l'incrément atomique.
    """

    def __init__(self, storage: BaseStorage) -> None:
        self._storage = storage

    def next_invoice_number(
        self,
        shop: str,
        issued_at: datetime | None = None,
    ) -> str:
        """Attribue et retourne le prochain numéro de facture.

        Args:
            shop: Domaine de la boutique.
            issued_at: Date d'émission (défaut : maintenant, UTC).

        Returns:
            Le numéro de facture rendu selon le gabarit de la boutique.

        Raises:
            ConfigurationError: Si la boutique n'a pas de paramètres.
            ValidationError: Si ``issued_at`` précède l'exercice déjà
                entamé (facture antidatée).
        """
        issued_at = issued_at or datetime.now(UTC)
        settings = self._storage.get_shop_settings(shop)
        if settings is None:
            msg = f"Paramètres de facturation introuvables pour la boutique : {shop}"
            raise ConfigurationError(msg)

        if settings.current_sequence > 0 and issued_at.year < settings.current_year:
            msg = (
                f"Date d'émission {issued_at.date()} antérieure à l'exercice de "
                f"numérotation {settings.current_year} pour la boutique : {shop}"
            )
            raise ValidationError(msg, errors=[msg])

        sequence = self._storage.increment_invoice_sequence(shop, issued_at.year)
        number = render_invoice_number(
            settings.invoice_format,
            settings.invoice_prefix,
            sequence,
            issued_at,
        )
        logger.info("Numéro de facture attribué : %s (boutique %s)", number, shop)
        return number
