"""Interface abstraite pour les backends de stockage.

FR: Définit les opérations de persistance consommées par le moteur :
    paramètres de boutique, séquence de numérotation, factures, cumuls
    OSS et registre des ventes OSS. Les mises à jour concurrentes
    (séquence, cumuls) sont des opérations atomiques du backend, jamais
    des lectures-écritures côté appelant.
EN: Defines the persistence operations consumed by the engine. Concurrent
    updates (sequence, totals) are atomic backend operations, never
    read-then-write in calling code.
"""

from abc import ABCMeta, abstractmethod
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from typing import Any

from factures_b2c.models.invoice import Invoice
from factures_b2c.models.oss import OssSale, OssThreshold
from factures_b2c.models.settings import SEQUENCE_FIELDS, ShopSettings

ThresholdUpdate = Callable[[OssThreshold], OssThreshold]


def merge_settings(
    shop: str,
    current: ShopSettings | None,
    patch: Mapping[str, Any],
) -> ShopSettings:
    """Applique un patch aux paramètres d'une boutique.

    FR: Part des valeurs par défaut si la boutique n'a pas encore de
        paramètres. Les champs de séquence sont ignorés : seul
        ``increment_invoice_sequence`` les modifie.
    EN: Starts from defaults when the shop has no settings yet. Sequence
        fields are ignored: only ``increment_invoice_sequence`` changes them.
    """
    base = current.model_dump() if current is not None else {"shop": shop}
    updates = {k: v for k, v in patch.items() if k not in SEQUENCE_FIELDS}
    return ShopSettings.model_validate({**base, **updates})


class BaseStorage(metaclass=ABCMeta):
    """Classe de base abstraite pour les backends de stockage.

    FR: Les backends concrets (mémoire, Django ORM) héritent de cette
        classe et sont injectés dans les composants du moteur.
    EN: Concrete backends (memory, Django ORM) inherit from this class
        and are injected into the engine components.
    """

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Ouvre une unité de travail tout-ou-rien.

        FR: Toutes les écritures faites dans le bloc sont validées
            ensemble, ou annulées si une exception en sort.
        EN: Every write made inside the block is committed together, or
            rolled back when an exception escapes it.
        """
        ...

    # --- Paramètres de boutique ---

    @abstractmethod
    def get_shop_settings(self, shop: str) -> ShopSettings | None:
        """Retourne les paramètres de la boutique, ou None."""
        ...

    @abstractmethod
    def update_shop_settings(
        self, shop: str, patch: Mapping[str, Any]
    ) -> ShopSettings:
        """Met à jour (ou crée) les paramètres de la boutique.

        Args:
            shop: Domaine de la boutique.
            patch: Champs à modifier (les champs de séquence sont ignorés).

        Returns:
            Les paramètres enregistrés.
        """
        ...

    @abstractmethod
    def increment_invoice_sequence(self, shop: str, year: int) -> int:
        """Incrémente atomiquement la séquence de numérotation.

        FR: En une seule opération verrouillée : si ``year`` est postérieure
            à l'année stockée, remet la séquence à 0 et enregistre ``year`` ;
            puis incrémente et retourne la nouvelle valeur. L'année stockée
            ne recule jamais une fois un numéro émis.
        EN: In one locked operation: reset to 0 and store ``year`` when it is
            later than the stored year, then increment and return the new
            value. The stored year never moves back once a number is issued.

        Raises:
            NotFoundError: Si la boutique n'a pas de paramètres.
            SequenceYearError: Si ``year`` est antérieure à l'année stockée.
        """
        ...

    # --- Factures ---

    @abstractmethod
    def find_invoice_by_order_id(self, order_id: str) -> Invoice | None:
        """Retourne la facture de la commande, ou None."""
        ...

    @abstractmethod
    def get_invoice(self, invoice_id: str) -> Invoice:
        """Retourne une facture par identifiant.

        Raises:
            NotFoundError: Si la facture n'existe pas.
        """
        ...

    @abstractmethod
    def create_invoice_with_lines(self, invoice: Invoice) -> Invoice:
        """Enregistre une facture et ses lignes en une seule unité.

        Raises:
            DuplicateOrderError: Si une facture existe déjà pour la commande.
        """
        ...

    @abstractmethod
    def attach_invoice_document(
        self,
        invoice_id: str,
        pdf_path: str | None,
        pdf_url: str | None,
    ) -> Invoice:
        """Rattache le document rendu à une facture existante.

        Raises:
            NotFoundError: Si la facture n'existe pas.
        """
        ...

    # --- Cumuls OSS ---

    @abstractmethod
    def get_oss_threshold(
        self, shop: str, year: int, country_code: str
    ) -> OssThreshold | None:
        """Retourne le cumul OSS d'un pays pour l'année, ou None."""
        ...

    @abstractmethod
    def upsert_oss_threshold(
        self,
        shop: str,
        year: int,
        country_code: str,
        data: Mapping[str, Any],
    ) -> OssThreshold:
        """Crée ou remplace les champs d'un cumul OSS."""
        ...

    @abstractmethod
    def update_oss_threshold(
        self,
        shop: str,
        year: int,
        country_code: str,
        apply: ThresholdUpdate,
    ) -> OssThreshold:
        """Met à jour atomiquement un cumul OSS.

        FR: Verrouille la ligne (créée à zéro si absente), applique
            ``apply`` à l'état courant et enregistre le résultat. Les ventes
            concurrentes vers le même pays sont ainsi sérialisées.
        EN: Locks the row (created zeroed when missing), applies ``apply``
            to the current state and saves the result.
        """
        ...

    @abstractmethod
    def list_oss_thresholds(self, shop: str, year: int) -> list[OssThreshold]:
        """Retourne tous les cumuls OSS de la boutique pour l'année."""
        ...

    # --- Registre des ventes OSS ---

    @abstractmethod
    def create_oss_sale(self, sale: OssSale) -> OssSale:
        """Ajoute une vente au registre OSS (jamais modifiée ensuite)."""
        ...

    @abstractmethod
    def list_oss_sales(self, shop: str, year: int, quarter: int) -> list[OssSale]:
        """Retourne les ventes OSS du trimestre, par date croissante."""
        ...
