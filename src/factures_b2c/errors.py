"""Hiérarchie d'exceptions du moteur de facturation.

FR: Exceptions typées pour les paramètres de boutique absents et les
    données de facturation incomplètes. Aucune n'est réessayable sans
    action de l'utilisateur.
EN: Typed exceptions for missing shop settings and incomplete invoicing
    data. None is retryable without user action.
"""


class InvoicingError(Exception):
    """Erreur de base du moteur de facturation.

    FR: Classe parente des erreurs « attendues » converties en résultat
        d'échec par l'assembleur de factures.
    EN: Base class for expected errors turned into a failure result by
        the invoice assembler.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors: list[str] = errors or []


class ConfigurationError(InvoicingError):
    """Paramètres de boutique absents ou inutilisables.

    FR: Levée quand aucun paramétrage n'existe pour la boutique.
    EN: Raised when no settings exist for the shop.
    """


class ValidationError(InvoicingError):
    """Données insuffisantes pour émettre une facture.

    FR: Porte la liste complète des champs obligatoires manquants
        (dénomination, adresse, SIREN, n° TVA hors franchise).
    EN: Carries the full list of missing mandatory fields.
    """
