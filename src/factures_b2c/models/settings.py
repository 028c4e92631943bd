"""Paramètres fiscaux et de numérotation d'une boutique.

FR: Identité légale du vendeur, régimes de TVA, configuration de la
    numérotation des factures et valeurs par défaut de présentation.
EN: Seller legal identity, VAT regimes, invoice numbering configuration
    and presentation defaults.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from factures_b2c.models.enums import Language, PdfTheme

DEFAULT_INVOICE_PREFIX = "FAC"
DEFAULT_INVOICE_FORMAT = "{PREFIX}-{YYYY}-{NNNN}"

# Champs gérés exclusivement par le générateur de numéros
SEQUENCE_FIELDS: frozenset[str] = frozenset({"shop", "current_year", "current_sequence"})


class ShopSettings(BaseModel):
    """Configuration fiscale d'une boutique.

    FR: Une instance par boutique. ``current_year`` et ``current_sequence``
        ne sont modifiés que par l'incrément atomique du stockage.
    EN: One instance per shop. ``current_year`` and ``current_sequence``
        are only mutated by the storage's atomic increment.
    """

    shop: str = Field(..., min_length=1, description="Domaine de la boutique / Shop domain")

    # --- Identité légale ---
    company_name: str | None = Field(
        default=None,
        description="Dénomination sociale / Company name",
    )
    address: str | None = Field(default=None, description="Adresse du siège / Address")
    postal_code: str | None = Field(default=None, description="Code postal / Postal code")
    city: str | None = Field(default=None, description="Ville / City")
    country: str = Field(
        default="FR",
        min_length=2,
        max_length=2,
        description="Pays du vendeur ISO 3166-1 alpha-2 / Seller country",
    )
    legal_form: str | None = Field(
        default=None,
        description="Forme juridique (SAS, SARL...) / Legal form",
    )
    share_capital: str | None = Field(
        default=None,
        description="Capital social / Share capital",
    )
    siren: str | None = Field(
        default=None,
        pattern=r"^\d{9}$",
        description="Numéro SIREN (9 chiffres) / SIREN number",
    )
    siret: str | None = Field(
        default=None,
        pattern=r"^\d{14}$",
        description="Numéro SIRET (14 chiffres) / SIRET number",
    )
    rcs: str | None = Field(
        default=None,
        description="Immatriculation RCS / Trade register entry",
    )
    vat_number: str | None = Field(
        default=None,
        description="Numéro de TVA intracommunautaire / EU VAT number",
    )

    # --- Régimes de TVA ---
    franchise_en_base: bool = Field(
        default=False,
        description="Franchise en base de TVA (art. 293 B du CGI) / VAT franchise",
    )
    oss_enabled: bool = Field(
        default=False,
        description="Inscription au guichet unique OSS / OSS registration",
    )
    oss_number: str | None = Field(
        default=None,
        description="Numéro d'identification OSS / OSS identification number",
    )

    # --- Numérotation ---
    invoice_prefix: str = Field(
        default=DEFAULT_INVOICE_PREFIX,
        description="Préfixe des numéros de facture / Invoice number prefix",
    )
    invoice_format: str = Field(
        default=DEFAULT_INVOICE_FORMAT,
        min_length=1,
        description=(
            "Gabarit de numérotation ({PREFIX}, {YYYY}, {YY}, {MM}, {DD}, "
            "{NNNN}, {NNN}, {NN}) / Numbering template"
        ),
    )
    current_year: int = Field(
        default_factory=lambda: datetime.now(UTC).year,
        description="Année de la séquence courante / Current sequence year",
    )
    current_sequence: int = Field(
        default=0,
        ge=0,
        description="Dernier numéro de séquence attribué / Last issued sequence",
    )

    # --- Présentation ---
    default_language: Language = Field(
        default=Language.FR,
        description="Langue des mentions légales / Legal mentions language",
    )
    default_currency: str = Field(
        default="EUR",
        description="Code devise ISO 4217 / Currency code",
    )
    pdf_theme: PdfTheme = Field(
        default=PdfTheme.STANDARD,
        description="Thème de rendu par défaut / Default rendering theme",
    )
    payment_terms: str | None = Field(
        default=None,
        description="Conditions de paiement / Payment terms",
    )
    late_penalty_rate: str | None = Field(
        default=None,
        description="Taux des pénalités de retard / Late payment penalty rate",
    )
    late_penalty_amount: str = Field(
        default="40",
        description="Indemnité forfaitaire de recouvrement (€) / Recovery fee",
    )
