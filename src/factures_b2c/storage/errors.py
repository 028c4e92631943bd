"""Hiérarchie d'exceptions pour la couche de stockage.

FR: Exceptions typées pour les pannes de persistance, les ressources
    introuvables et les doublons de commande.
EN: Typed exceptions for persistence failures, missing resources and
    duplicate orders.
"""


class StorageError(Exception):
    """Erreur de base de la couche de stockage.

    FR: Panne de persistance générique. Aucune relance automatique dans
        le moteur : la politique de relance appartient à l'appelant.
    EN: Generic persistence failure. No automatic retry in the engine.
    """


class NotFoundError(StorageError):
    """Ressource introuvable (facture, paramètres de boutique)."""


class DuplicateOrderError(StorageError):
    """Une facture existe déjà pour cette commande.

    FR: Erreur « douce » : l'assembleur la résout en renvoyant la facture
        existante (contrainte d'unicité sur ``order_id``).
    EN: Soft error: the assembler resolves it by returning the existing
        invoice (uniqueness constraint on ``order_id``).
    """

    def __init__(self, message: str, order_id: str) -> None:
        super().__init__(message)
        self.order_id = order_id


class SequenceYearError(StorageError):
    """Année de numérotation antérieure à l'année en cours.

    FR: La séquence ne revient jamais sur une année close : numéroter
        une facture antidatée réattribuerait un numéro déjà émis.
    EN: The sequence never goes back to a closed year: numbering a
        back-dated invoice would reissue an existing number.
    """
