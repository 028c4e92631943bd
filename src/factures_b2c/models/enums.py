"""Énumérations pour la facturation B2C française et le régime OSS.

FR: Langues, thèmes de rendu, régimes de TVA et portée du seuil OSS.
EN: Languages, rendering themes, VAT regimes and OSS threshold scope.
"""

from enum import StrEnum


class Language(StrEnum):
    """Langue des mentions légales et des documents.

    FR: Toute valeur autre que FR est rendue en anglais.
    EN: Any value other than FR is rendered in English.
    """

    FR = "FR"
    """Français / French"""

    EN = "EN"
    """Anglais / English"""


class PdfTheme(StrEnum):
    """Thème de rendu de la facture / Invoice rendering theme."""

    COMPACT = "Compact"
    STANDARD = "Standard"
    DETAIL = "Detail"


class TaxRegime(StrEnum):
    """Régime de TVA appliqué à une vente.

    FR: Les trois régimes sont mutuellement exclusifs et évalués dans
        l'ordre : franchise en base, OSS, puis domestique.
    EN: The three regimes are mutually exclusive and evaluated in order:
        franchise, OSS, then domestic.
    """

    FRANCHISE = "franchise"
    """Franchise en base (art. 293 B du CGI) : pas de TVA / No VAT"""

    OSS = "oss"
    """Guichet unique OSS : TVA du pays de destination / Destination VAT"""

    DOMESTIC = "domestic"
    """TVA française au taux normal / French standard VAT"""


class ThresholdScope(StrEnum):
    """Portée du seuil OSS de 10 000 €.

    FR: ``per_country`` suit le seuil pays par pays (comportement
        historique) ; ``eu_wide`` cumule toutes les ventes UE du vendeur,
        comme le prévoit la réglementation OSS.
    EN: ``per_country`` tracks the threshold per destination country
        (historical behaviour); ``eu_wide`` sums all EU sales of the seller,
        as OSS rules define it.
    """

    PER_COUNTRY = "per_country"
    EU_WIDE = "eu_wide"
