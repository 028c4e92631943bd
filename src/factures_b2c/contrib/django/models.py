"""Modèles Django pour la facturation B2C et le suivi OSS.

FR: Modèles Django mappés sur les modèles Pydantic de la lib. Design plat
    (seller_* directement sur le modèle Invoice : copie de l'identité du
    vendeur au moment de l'émission). Les champs texte optionnels sont
    stockés vides et restitués à None côté Pydantic.
EN: Django models mapped to the library's Pydantic models. Flat design
    (seller_* directly on the Invoice model). Optional text fields are
    stored empty and returned as None on the Pydantic side.
"""

from __future__ import annotations

from django.db import models, transaction

from factures_b2c.models.enums import Language, PdfTheme
from factures_b2c.models.invoice import Invoice as PydanticInvoice
from factures_b2c.models.invoice import InvoiceLine as PydanticInvoiceLine
from factures_b2c.models.invoice import SellerSnapshot
from factures_b2c.models.oss import OssSale as PydanticOssSale
from factures_b2c.models.oss import OssThreshold as PydanticOssThreshold
from factures_b2c.models.settings import (
    DEFAULT_INVOICE_FORMAT,
    DEFAULT_INVOICE_PREFIX,
)
from factures_b2c.models.settings import ShopSettings as PydanticShopSettings

_SETTINGS_TEXT_FIELDS = (
    "company_name",
    "address",
    "postal_code",
    "city",
    "legal_form",
    "share_capital",
    "siren",
    "siret",
    "rcs",
    "vat_number",
    "oss_number",
    "payment_terms",
    "late_penalty_rate",
)
_SETTINGS_VALUE_FIELDS = (
    "country",
    "franchise_en_base",
    "oss_enabled",
    "invoice_prefix",
    "invoice_format",
    "current_year",
    "current_sequence",
    "default_language",
    "default_currency",
    "pdf_theme",
    "late_penalty_amount",
)


class ShopSettings(models.Model):
    """Paramètres fiscaux et de numérotation d'une boutique."""

    shop = models.CharField("boutique", max_length=255, unique=True)

    # --- Identité légale ---
    company_name = models.CharField("dénomination sociale", max_length=200, blank=True, default="")
    address = models.CharField("adresse", max_length=300, blank=True, default="")
    postal_code = models.CharField("code postal", max_length=10, blank=True, default="")
    city = models.CharField("ville", max_length=100, blank=True, default="")
    country = models.CharField("pays", max_length=2, default="FR")
    legal_form = models.CharField("forme juridique", max_length=50, blank=True, default="")
    share_capital = models.CharField("capital social", max_length=50, blank=True, default="")
    siren = models.CharField("SIREN", max_length=9, blank=True, default="")
    siret = models.CharField("SIRET", max_length=14, blank=True, default="")
    rcs = models.CharField("RCS", max_length=100, blank=True, default="")
    vat_number = models.CharField(
        "n° TVA intracommunautaire", max_length=20, blank=True, default=""
    )

    # --- Régimes de TVA ---
    franchise_en_base = models.BooleanField("franchise en base de TVA", default=False)
    oss_enabled = models.BooleanField("inscrit à l'OSS", default=False)
    oss_number = models.CharField("n° OSS", max_length=30, blank=True, default="")

    # --- Numérotation ---
    invoice_prefix = models.CharField("préfixe", max_length=20, default=DEFAULT_INVOICE_PREFIX)
    invoice_format = models.CharField(
        "gabarit de numérotation", max_length=100, default=DEFAULT_INVOICE_FORMAT
    )
    current_year = models.PositiveIntegerField("année de la séquence")
    current_sequence = models.PositiveIntegerField("séquence courante", default=0)

    # --- Présentation ---
    default_language = models.CharField(
        "langue",
        max_length=2,
        choices=[(lang.value, lang.value) for lang in Language],
        default=Language.FR,
    )
    default_currency = models.CharField("devise", max_length=3, default="EUR")
    pdf_theme = models.CharField(
        "thème PDF",
        max_length=10,
        choices=[(theme.value, theme.value) for theme in PdfTheme],
        default=PdfTheme.STANDARD,
    )
    payment_terms = models.TextField("conditions de paiement", blank=True, default="")
    late_penalty_rate = models.CharField(
        "taux des pénalités de retard", max_length=50, blank=True, default=""
    )
    late_penalty_amount = models.CharField(
        "indemnité forfaitaire (€)", max_length=20, default="40"
    )

    # --- Métadonnées ---
    created_at = models.DateTimeField("date de création", auto_now_add=True)
    updated_at = models.DateTimeField("date de modification", auto_now=True)

    class Meta:
        verbose_name = "paramètres de boutique"
        verbose_name_plural = "paramètres de boutiques"

    def __str__(self) -> str:
        return self.company_name or self.shop

    def to_pydantic(self) -> PydanticShopSettings:
        """Convertit le modèle Django en modèle Pydantic."""
        data: dict[str, object] = {"shop": self.shop}
        data.update({name: getattr(self, name) or None for name in _SETTINGS_TEXT_FIELDS})
        data.update({name: getattr(self, name) for name in _SETTINGS_VALUE_FIELDS})
        return PydanticShopSettings.model_validate(data)

    def apply_pydantic(self, settings: PydanticShopSettings) -> None:
        """Recopie les valeurs d'un modèle Pydantic (sans sauvegarder)."""
        for name in _SETTINGS_TEXT_FIELDS:
            setattr(self, name, getattr(settings, name) or "")
        for name in _SETTINGS_VALUE_FIELDS:
            setattr(self, name, getattr(settings, name))


class Invoice(models.Model):
    """Facture B2C émise.

    FR: Une seule facture par commande (``order_id`` unique). Seuls
        ``pdf_path`` et ``pdf_url`` changent après l'émission.
    EN: One invoice per order (unique ``order_id``). Only ``pdf_path``
        and ``pdf_url`` change after issuance.
    """

    id = models.CharField(primary_key=True, max_length=36, editable=False)
    shop = models.CharField("boutique", max_length=255)
    invoice_number = models.CharField("numéro de facture", max_length=50)
    order_id = models.CharField("identifiant de commande", max_length=100, unique=True)
    order_number = models.CharField("numéro de commande", max_length=50, blank=True, default="")
    order_name = models.CharField("nom de commande", max_length=100, blank=True, default="")

    # --- Client ---
    customer_name = models.CharField("nom du client", max_length=200)
    customer_email = models.CharField("email du client", max_length=254, blank=True, default="")
    customer_address = models.CharField("adresse du client", max_length=300, blank=True, default="")
    customer_postal_code = models.CharField(
        "code postal du client", max_length=20, blank=True, default=""
    )
    customer_city = models.CharField("ville du client", max_length=100, blank=True, default="")
    customer_country = models.CharField("pays du client", max_length=2)

    # --- Vendeur ---
    seller_name = models.CharField("raison sociale vendeur", max_length=200)
    seller_address = models.CharField("adresse vendeur", max_length=300, blank=True, default="")
    seller_siren = models.CharField("SIREN vendeur", max_length=9, blank=True, default="")
    seller_siret = models.CharField("SIRET vendeur", max_length=14, blank=True, default="")
    seller_rcs = models.CharField("RCS vendeur", max_length=100, blank=True, default="")
    seller_vat_number = models.CharField("n° TVA vendeur", max_length=20, blank=True, default="")
    seller_legal_form = models.CharField(
        "forme juridique vendeur", max_length=50, blank=True, default=""
    )
    seller_capital = models.CharField("capital vendeur", max_length=50, blank=True, default="")

    # --- Montants ---
    total_ht = models.DecimalField("total HT", max_digits=12, decimal_places=2)
    total_tva = models.DecimalField("total TVA", max_digits=12, decimal_places=2)
    total_ttc = models.DecimalField("total TTC", max_digits=12, decimal_places=2)
    oss_applied = models.BooleanField("OSS appliqué", default=False)
    franchise_en_base = models.BooleanField("franchise en base", default=False)

    # --- Paiement ---
    payment_terms = models.TextField("conditions de paiement", blank=True, default="")
    payment_status = models.CharField("statut de paiement", max_length=30, blank=True, default="")
    paid_at = models.DateTimeField("date de paiement", blank=True, null=True)

    legal_mentions = models.TextField("mentions légales", blank=True, default="")
    issued_at = models.DateTimeField("date d'émission")

    # --- Document rendu ---
    pdf_path = models.CharField("chemin du PDF", max_length=500, blank=True, default="")
    pdf_url = models.URLField("URL du PDF", max_length=500, blank=True, default="")

    class Meta:
        verbose_name = "facture"
        verbose_name_plural = "factures"
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "invoice_number"],
                name="unique_shop_invoice_number",
            ),
        ]
        indexes = [
            models.Index(fields=["shop", "issued_at"], name="idx_shop_issued_at"),
        ]

    def __str__(self) -> str:
        return f"Facture {self.invoice_number}"

    def to_pydantic(self) -> PydanticInvoice:
        """Convertit le modèle Django en modèle Pydantic, lignes comprises."""
        return PydanticInvoice(
            id=self.id,
            shop=self.shop,
            invoice_number=self.invoice_number,
            order_id=self.order_id,
            order_number=self.order_number or None,
            order_name=self.order_name or None,
            customer_name=self.customer_name,
            customer_email=self.customer_email or None,
            customer_address=self.customer_address or None,
            customer_postal_code=self.customer_postal_code or None,
            customer_city=self.customer_city or None,
            customer_country=self.customer_country,
            seller=SellerSnapshot(
                name=self.seller_name,
                address=self.seller_address or None,
                siren=self.seller_siren or None,
                siret=self.seller_siret or None,
                rcs=self.seller_rcs or None,
                vat_number=self.seller_vat_number or None,
                legal_form=self.seller_legal_form or None,
                capital=self.seller_capital or None,
            ),
            total_ht=self.total_ht,
            total_tva=self.total_tva,
            total_ttc=self.total_ttc,
            oss_applied=self.oss_applied,
            franchise_en_base=self.franchise_en_base,
            payment_terms=self.payment_terms or None,
            payment_status=self.payment_status or None,
            paid_at=self.paid_at,
            legal_mentions=self.legal_mentions,
            issued_at=self.issued_at,
            lines=[line.to_pydantic() for line in self.lines.all()],
            pdf_path=self.pdf_path or None,
            pdf_url=self.pdf_url or None,
        )

    @classmethod
    def from_pydantic(cls, invoice: PydanticInvoice) -> Invoice:
        """Crée une instance Django (non sauvée) depuis un modèle Pydantic."""
        seller = invoice.seller
        return cls(
            id=invoice.id,
            shop=invoice.shop,
            invoice_number=invoice.invoice_number,
            order_id=invoice.order_id,
            order_number=invoice.order_number or "",
            order_name=invoice.order_name or "",
            customer_name=invoice.customer_name,
            customer_email=invoice.customer_email or "",
            customer_address=invoice.customer_address or "",
            customer_postal_code=invoice.customer_postal_code or "",
            customer_city=invoice.customer_city or "",
            customer_country=invoice.customer_country,
            seller_name=seller.name,
            seller_address=seller.address or "",
            seller_siren=seller.siren or "",
            seller_siret=seller.siret or "",
            seller_rcs=seller.rcs or "",
            seller_vat_number=seller.vat_number or "",
            seller_legal_form=seller.legal_form or "",
            seller_capital=seller.capital or "",
            total_ht=invoice.total_ht,
            total_tva=invoice.total_tva,
            total_ttc=invoice.total_ttc,
            oss_applied=invoice.oss_applied,
            franchise_en_base=invoice.franchise_en_base,
            payment_terms=invoice.payment_terms or "",
            payment_status=invoice.payment_status or "",
            paid_at=invoice.paid_at,
            legal_mentions=invoice.legal_mentions,
            issued_at=invoice.issued_at,
            pdf_path=invoice.pdf_path or "",
            pdf_url=invoice.pdf_url or "",
        )

    @classmethod
    @transaction.atomic
    def create_with_lines(cls, invoice: PydanticInvoice) -> Invoice:
        """Crée une facture avec ses lignes en une transaction.

        FR: Crée l'Invoice Django + toutes les InvoiceLines depuis
            le modèle Pydantic, en une seule transaction atomique.
        EN: Creates the Django Invoice + all InvoiceLines from the
            Pydantic model in a single atomic transaction.
        """
        django_invoice = cls.from_pydantic(invoice)
        django_invoice.save(force_insert=True)
        InvoiceLine.objects.bulk_create(
            [InvoiceLine.from_pydantic(line, django_invoice) for line in invoice.lines]
        )
        return django_invoice


class InvoiceLine(models.Model):
    """Ligne de facture, dans l'ordre de la commande."""

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="lines",
        verbose_name="facture",
    )
    line_order = models.PositiveIntegerField("position")
    sku = models.CharField("référence", max_length=100, blank=True, default="")
    product_title = models.CharField("produit", max_length=300)
    variant_title = models.CharField("variante", max_length=300, blank=True, default="")
    description = models.CharField("désignation", max_length=500, blank=True, default="")
    quantity = models.DecimalField("quantité", max_digits=12, decimal_places=4)
    unit_price_ht = models.DecimalField("prix unitaire HT", max_digits=12, decimal_places=4)
    tax_rate = models.DecimalField("taux de TVA (%)", max_digits=5, decimal_places=2)
    tax_amount = models.DecimalField("montant TVA", max_digits=12, decimal_places=2)
    total_ht = models.DecimalField("total HT", max_digits=12, decimal_places=2)
    total_ttc = models.DecimalField("total TTC", max_digits=12, decimal_places=2)

    class Meta:
        verbose_name = "ligne de facture"
        verbose_name_plural = "lignes de facture"
        ordering = ["line_order"]

    def __str__(self) -> str:
        return f"Ligne {self.line_order} : {self.product_title}"

    def to_pydantic(self) -> PydanticInvoiceLine:
        """Convertit la ligne Django en ligne Pydantic."""
        return PydanticInvoiceLine(
            line_order=self.line_order,
            sku=self.sku or None,
            product_title=self.product_title,
            variant_title=self.variant_title or None,
            description=self.description or None,
            quantity=self.quantity,
            unit_price_ht=self.unit_price_ht,
            tax_rate=self.tax_rate,
            tax_amount=self.tax_amount,
            total_ht=self.total_ht,
            total_ttc=self.total_ttc,
        )

    @classmethod
    def from_pydantic(cls, line: PydanticInvoiceLine, invoice: Invoice) -> InvoiceLine:
        """Crée une instance Django (non sauvée) depuis une ligne Pydantic."""
        return cls(
            invoice=invoice,
            line_order=line.line_order,
            sku=line.sku or "",
            product_title=line.product_title,
            variant_title=line.variant_title or "",
            description=line.description or "",
            quantity=line.quantity,
            unit_price_ht=line.unit_price_ht,
            tax_rate=line.tax_rate,
            tax_amount=line.tax_amount,
            total_ht=line.total_ht,
            total_ttc=line.total_ttc,
        )


class OssThreshold(models.Model):
    """Cumul annuel des ventes d'une boutique vers un pays de l'UE."""

    shop = models.CharField("boutique", max_length=255)
    year = models.PositiveIntegerField("année")
    country_code = models.CharField("pays", max_length=2)
    total_sales_ht = models.DecimalField("ventes HT", max_digits=14, decimal_places=2, default=0)
    total_sales_ttc = models.DecimalField("ventes TTC", max_digits=14, decimal_places=2, default=0)
    order_count = models.PositiveIntegerField("nombre de commandes", default=0)
    threshold_reached = models.BooleanField("seuil atteint", default=False)
    threshold_date = models.DateTimeField("date de franchissement", blank=True, null=True)
    last_updated = models.DateTimeField("dernière mise à jour", auto_now=True)

    class Meta:
        verbose_name = "seuil OSS"
        verbose_name_plural = "seuils OSS"
        constraints = [
            models.UniqueConstraint(
                fields=["shop", "year", "country_code"],
                name="unique_oss_threshold",
            ),
        ]

    def __str__(self) -> str:
        return f"OSS {self.country_code} {self.year} ({self.shop})"

    def to_pydantic(self) -> PydanticOssThreshold:
        """Convertit le cumul Django en modèle Pydantic."""
        return PydanticOssThreshold(
            shop=self.shop,
            year=self.year,
            country_code=self.country_code,
            total_sales_ht=self.total_sales_ht,
            total_sales_ttc=self.total_sales_ttc,
            order_count=self.order_count,
            threshold_reached=self.threshold_reached,
            threshold_date=self.threshold_date,
            last_updated=self.last_updated,
        )

    def apply_pydantic(self, threshold: PydanticOssThreshold) -> None:
        """Recopie les cumuls d'un modèle Pydantic (sans sauvegarder)."""
        self.total_sales_ht = threshold.total_sales_ht
        self.total_sales_ttc = threshold.total_sales_ttc
        self.order_count = threshold.order_count
        self.threshold_reached = threshold.threshold_reached
        self.threshold_date = threshold.threshold_date


class OssSale(models.Model):
    """Vente taxée sous le régime OSS (registre, jamais modifiée)."""

    id = models.CharField(primary_key=True, max_length=36, editable=False)
    shop = models.CharField("boutique", max_length=255)
    year = models.PositiveIntegerField("année")
    quarter = models.PositiveSmallIntegerField("trimestre")
    month = models.PositiveSmallIntegerField("mois")
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.PROTECT,
        related_name="oss_sales",
        verbose_name="facture",
    )
    invoice_number = models.CharField("numéro de facture", max_length=50)
    order_id = models.CharField("identifiant de commande", max_length=100)
    customer_country = models.CharField("pays du client", max_length=2)
    base_ht = models.DecimalField("base HT", max_digits=12, decimal_places=2)
    tax_rate = models.DecimalField("taux de TVA (%)", max_digits=5, decimal_places=2)
    tax_amount = models.DecimalField("montant TVA", max_digits=12, decimal_places=2)
    total_ttc = models.DecimalField("total TTC", max_digits=12, decimal_places=2)
    sale_date = models.DateTimeField("date de vente")

    class Meta:
        verbose_name = "vente OSS"
        verbose_name_plural = "ventes OSS"
        ordering = ["sale_date"]
        indexes = [
            models.Index(fields=["shop", "year", "quarter"], name="idx_oss_sale_period"),
        ]

    def __str__(self) -> str:
        return f"Vente OSS {self.invoice_number} ({self.customer_country})"

    def to_pydantic(self) -> PydanticOssSale:
        """Convertit la vente Django en modèle Pydantic."""
        return PydanticOssSale(
            id=self.id,
            shop=self.shop,
            year=self.year,
            quarter=self.quarter,
            month=self.month,
            invoice_id=self.invoice_id,
            invoice_number=self.invoice_number,
            order_id=self.order_id,
            customer_country=self.customer_country,
            base_ht=self.base_ht,
            tax_rate=self.tax_rate,
            tax_amount=self.tax_amount,
            total_ttc=self.total_ttc,
            sale_date=self.sale_date,
        )

    @classmethod
    def from_pydantic(cls, sale: PydanticOssSale) -> OssSale:
        """Crée une instance Django (non sauvée) depuis un modèle Pydantic."""
        return cls(
            id=sale.id,
            shop=sale.shop,
            year=sale.year,
            quarter=sale.quarter,
            month=sale.month,
            invoice_id=sale.invoice_id,
            invoice_number=sale.invoice_number,
            order_id=sale.order_id,
            customer_country=sale.customer_country,
            base_ht=sale.base_ht,
            tax_rate=sale.tax_rate,
            tax_amount=sale.tax_amount,
            total_ttc=sale.total_ttc,
            sale_date=sale.sale_date,
        )
