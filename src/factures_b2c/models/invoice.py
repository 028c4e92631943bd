"""Modèles des factures B2C : entrées, calculs de TVA et enregistrements.

FR: Données normalisées issues d'une commande (InvoiceInput), résultat du
    calcul de TVA (VatResult) et facture émise avec ses lignes (Invoice).
EN: Normalized order data (InvoiceInput), VAT computation result
    (VatResult) and issued invoice with its lines (Invoice).
"""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from factures_b2c.models.enums import TaxRegime


class VatLineInput(BaseModel):
    """Ligne soumise au calcul de TVA.

    FR: Quantité, prix unitaire HT et taux de TVA optionnel. Un taux
        explicite remplace le taux du régime, sauf en franchise en base.
    EN: Quantity, unit price excl. tax and optional VAT rate. An explicit
        rate overrides the regime rate, except under franchise.
    """

    quantity: Decimal = Field(..., description="Quantité / Quantity")
    unit_price_ht: Decimal = Field(..., description="Prix unitaire HT / Unit price excl. tax")
    tax_rate: Decimal | None = Field(
        default=None,
        ge=0,
        description="Taux de TVA imposé en % / Forced VAT rate in %",
    )


class InvoiceLineInput(VatLineInput):
    """Ligne de commande normalisée / Normalized order line."""

    sku: str | None = Field(default=None, description="Référence article / SKU")
    product_title: str = Field(..., description="Titre du produit / Product title")
    variant_title: str | None = Field(default=None, description="Variante / Variant title")
    description: str | None = Field(default=None, description="Désignation / Description")


class InvoiceInput(BaseModel):
    """Commande normalisée à facturer.

    FR: Produite par un adaptateur externe (voir ``adapters.shopify``)
        et consommée telle quelle par l'assembleur de factures.
    EN: Produced by an external adapter and consumed as-is by the
        invoice assembler.
    """

    shop: str = Field(..., min_length=1, description="Domaine de la boutique / Shop domain")
    order_id: str = Field(..., min_length=1, description="Identifiant de commande / Order ID")
    order_number: str | None = Field(default=None, description="Numéro de commande / Order number")
    order_name: str | None = Field(default=None, description="Nom de commande / Order name")
    customer_name: str = Field(..., description="Nom du client / Customer name")
    customer_email: str | None = Field(default=None, description="Email du client / Email")
    customer_address: str | None = Field(default=None, description="Adresse / Address")
    customer_postal_code: str | None = Field(default=None, description="Code postal / Postal code")
    customer_city: str | None = Field(default=None, description="Ville / City")
    customer_country: str = Field(
        ...,
        min_length=2,
        max_length=2,
        description="Pays du client ISO 3166-1 alpha-2 / Customer country",
    )
    lines: list[InvoiceLineInput] = Field(
        ...,
        min_length=1,
        description="Lignes de commande / Order lines",
    )
    payment_status: str | None = Field(
        default=None, description="Statut de paiement / Payment status"
    )
    paid_at: datetime | None = Field(default=None, description="Date de paiement / Payment date")

    @field_validator("customer_country")
    @classmethod
    def _upper_country(cls, value: str) -> str:
        return value.upper()


class LineCalculation(BaseModel):
    """Résultat du calcul de TVA pour une ligne (montants arrondis)."""

    line_index: int
    quantity: Decimal
    unit_price_ht: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_ht: Decimal
    total_ttc: Decimal


class VatResult(BaseModel):
    """Résultat du calcul de TVA d'une facture.

    FR: Les totaux sont la somme des montants de ligne déjà arrondis.
    EN: Totals are sums of already-rounded line amounts.
    """

    total_ht: Decimal
    total_tva: Decimal
    total_ttc: Decimal
    oss_applied: bool
    franchise_en_base: bool
    regime: TaxRegime
    vat_rate: Decimal = Field(..., description="Taux du régime en % / Regime rate in %")
    line_calculations: list[LineCalculation]


class SellerSnapshot(BaseModel):
    """Copie de l'identité du vendeur au moment de l'émission.

    FR: Figée sur la facture, indépendante des modifications ultérieures
        des paramètres de la boutique.
    EN: Frozen on the invoice, independent of later settings changes.
    """

    name: str
    address: str | None = None
    siren: str | None = None
    siret: str | None = None
    rcs: str | None = None
    vat_number: str | None = None
    legal_form: str | None = None
    capital: str | None = None


class InvoiceLine(BaseModel):
    """Ligne de facture émise / Issued invoice line."""

    line_order: int = Field(..., ge=0, description="Position d'origine / Input position")
    sku: str | None = None
    product_title: str
    variant_title: str | None = None
    description: str | None = None
    quantity: Decimal
    unit_price_ht: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_ht: Decimal
    total_ttc: Decimal


class Invoice(BaseModel):
    """Facture B2C émise.

    FR: Créée une seule fois par commande (``order_id`` unique). Les données
        fiscales ne changent plus ; seul le document rendu (chemin/URL)
        peut être rattaché ensuite.
    EN: Created once per order (unique ``order_id``). Fiscal data never
        changes afterwards; only the rendered document path/URL is attached.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    shop: str
    invoice_number: str
    order_id: str
    order_number: str | None = None
    order_name: str | None = None

    # --- Client ---
    customer_name: str
    customer_email: str | None = None
    customer_address: str | None = None
    customer_postal_code: str | None = None
    customer_city: str | None = None
    customer_country: str

    # --- Vendeur ---
    seller: SellerSnapshot

    # --- Montants ---
    total_ht: Decimal
    total_tva: Decimal
    total_ttc: Decimal
    oss_applied: bool = False
    franchise_en_base: bool = False

    # --- Paiement ---
    payment_terms: str | None = None
    payment_status: str | None = None
    paid_at: datetime | None = None

    legal_mentions: str = ""
    issued_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    lines: list[InvoiceLine] = Field(default_factory=list)

    # --- Document rendu ---
    pdf_path: str | None = None
    pdf_url: str | None = None


class InvoiceCreationResult(BaseModel):
    """Résultat de la création d'une facture.

    FR: ``success`` à False porte le message d'erreur et, pour les erreurs
        de configuration, la liste des champs manquants.
    EN: ``success`` False carries the error message and, for configuration
        errors, the list of missing fields.
    """

    success: bool
    invoice: Invoice | None = None
    error: str | None = None
    errors: list[str] = Field(default_factory=list)
