"""Mentions légales obligatoires des factures B2C.

FR: Conservation (art. L123-22 C. com.), garantie légale de conformité
    (art. L217-4 C. conso.), pénalités de retard et indemnité forfaitaire
    (art. L441-10 C. com.), puis la mention du régime de TVA : franchise
    en base (art. 293 B du CGI) ou OSS.
EN: Storage, warranty and late-payment notices, then the VAT regime
    notice (franchise or OSS).
"""

from factures_b2c.models.enums import Language

LEGAL_MENTIONS: dict[Language, dict[str, str]] = {
    Language.FR: {
        "storage": (
            "Facture à conserver 10 ans conformément à l'article L123-22 "
            "du Code de commerce."
        ),
        "warranty": (
            "Garantie légale de conformité de 2 ans pour les produits "
            "conformément aux articles L217-4 et suivants du Code de la "
            "consommation."
        ),
        "late_payment": (
            "En cas de retard de paiement, des pénalités de retard seront "
            "appliquées ainsi qu'une indemnité forfaitaire de 40€ pour frais "
            "de recouvrement (articles L441-3 et L441-10 du Code de commerce)."
        ),
        "franchise_en_base": "TVA non applicable, art. 293 B du CGI",
        "oss": "TVA acquittée dans le cadre du régime de l'OSS (One Stop Shop)",
    },
    Language.EN: {
        "storage": (
            "Invoice to be kept for 10 years in accordance with Article "
            "L123-22 of the Commercial Code."
        ),
        "warranty": (
            "2-year legal warranty of conformity for products in accordance "
            "with Articles L217-4 et seq. of the Consumer Code."
        ),
        "late_payment": (
            "In case of late payment, late payment penalties will be applied "
            "as well as a flat-rate compensation of €40 for collection costs "
            "(Articles L441-3 and L441-10 of the Commercial Code)."
        ),
        "franchise_en_base": "VAT not applicable, art. 293 B of the CGI",
        "oss": "VAT paid under the OSS (One Stop Shop) regime",
    },
}


def resolve_language(language: str) -> Language:
    """FR si la langue vaut « FR » (casse ignorée), EN sinon."""
    return Language.FR if str(language).upper() == Language.FR else Language.EN


def generate_legal_mentions(
    oss_applied: bool,
    franchise_en_base: bool,
    language: str = Language.FR,
) -> str:
    """Compose le bloc de mentions légales d'une facture.

    Args:
        oss_applied: La facture est taxée sous le régime OSS.
        franchise_en_base: Le vendeur est en franchise en base de TVA.
        language: Code langue ; toute valeur autre que FR donne l'anglais.

    Returns:
        Les mentions séparées par une ligne vide.
    """
    texts = LEGAL_MENTIONS[resolve_language(language)]
    mentions = [texts["storage"], texts["warranty"], texts["late_payment"]]
    if franchise_en_base:
        mentions.append(texts["franchise_en_base"])
    elif oss_applied:
        mentions.append(texts["oss"])
    return "\n\n".join(mentions)
