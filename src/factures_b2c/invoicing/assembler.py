"""Assemblage des factures B2C à partir des commandes normalisées.

FR: Orchestre la création d'une facture : validation des paramètres du
    vendeur, idempotence par commande, numérotation, calcul de la TVA,
    mentions légales, enregistrement, puis mise à jour de l'état OSS
    (cumul du pays et registre des ventes OSS). De la numérotation à la
    vente OSS, tout se fait dans une seule unité de travail du stockage.
    Les erreurs ne sont pas propagées : elles sont converties en
    résultat d'échec.
EN: Orchestrates invoice creation: seller settings validation, per-order
    idempotency, numbering, VAT computation, legal mentions, persistence,
    then OSS state update. Numbering through the OSS sale runs in a
    single storage unit of work. Errors are not propagated: they become
    a failure result.
"""

import logging
from datetime import UTC, datetime

from factures_b2c.errors import ConfigurationError, InvoicingError, ValidationError
from factures_b2c.invoicing.legal import generate_legal_mentions
from factures_b2c.models.enums import PdfTheme
from factures_b2c.models.invoice import (
    Invoice,
    InvoiceCreationResult,
    InvoiceInput,
    InvoiceLine,
    SellerSnapshot,
    VatResult,
)
from factures_b2c.models.oss import OssSale
from factures_b2c.models.settings import ShopSettings
from factures_b2c.numbering.generator import InvoiceNumberGenerator
from factures_b2c.oss.threshold import OssThresholdTracker
from factures_b2c.rendering.base import BaseRenderer
from factures_b2c.storage.base import BaseStorage
from factures_b2c.storage.errors import DuplicateOrderError
from factures_b2c.tax.rates import is_eu_foreign, quarter_from_month
from factures_b2c.vat.calculator import VatCalculator

logger = logging.getLogger(__name__)


def validate_seller(settings: ShopSettings) -> list[str]:
    """Vérifie les mentions obligatoires du vendeur.

    FR: Dénomination, adresse et SIREN sont toujours requis ; le numéro
        de TVA intracommunautaire l'est sauf en franchise en base.
    EN: Company name, address and SIREN are always required; the EU VAT
        number is required unless under franchise.

    Returns:
        La liste des champs manquants (vide si tout est renseigné).
    """
    errors: list[str] = []
    if not settings.company_name:
        errors.append("Dénomination sociale obligatoire")
    if not settings.address:
        errors.append("Adresse du siège obligatoire")
    if not settings.siren:
        errors.append("Numéro SIREN obligatoire")
    if not settings.franchise_en_base and not settings.vat_number:
        errors.append(
            "Numéro de TVA intracommunautaire obligatoire (hors franchise en base)"
        )
    return errors


def seller_snapshot(settings: ShopSettings) -> SellerSnapshot:
    """Copie l'identité légale du vendeur pour la figer sur la facture."""
    return SellerSnapshot(
        name=settings.company_name or "",
        address=settings.address,
        siren=settings.siren,
        siret=settings.siret,
        rcs=settings.rcs,
        vat_number=settings.vat_number,
        legal_form=settings.legal_form,
        capital=settings.share_capital,
    )


class InvoiceAssembler:
    """Crée les factures B2C et maintient l'état OSS associé.

    Args:
        storage: Backend de stockage.
        tracker: Suivi du seuil OSS (défaut : suivi par pays).
        numbering: Générateur de numéros (défaut : sur ``storage``).
        calculator: Calculateur de TVA (défaut : sur ``storage`` et ``tracker``).
    """

    def __init__(
        self,
        storage: BaseStorage,
        tracker: OssThresholdTracker | None = None,
        numbering: InvoiceNumberGenerator | None = None,
        calculator: VatCalculator | None = None,
    ) -> None:
        self._storage = storage
        self._tracker = tracker or OssThresholdTracker(storage)
        self._numbering = numbering or InvoiceNumberGenerator(storage)
        self._calculator = calculator or VatCalculator(storage, self._tracker)

    def _load_settings(self, shop: str) -> ShopSettings:
        settings = self._storage.get_shop_settings(shop)
        if settings is None:
            msg = (
                f"Paramètres de facturation introuvables pour la boutique : {shop}. "
                "Configurez la boutique avant d'émettre des factures."
            )
            raise ConfigurationError(msg, errors=[msg])
        errors = validate_seller(settings)
        if errors:
            raise ValidationError("; ".join(errors), errors=errors)
        return settings

    def create_invoice(
        self,
        data: InvoiceInput,
        *,
        issued_at: datetime | None = None,
    ) -> InvoiceCreationResult:
        """Crée la facture d'une commande.

        FR: Idempotent par ``order_id`` : une commande déjà facturée
            retourne la facture existante sans aucun recalcul.
        EN: Idempotent per ``order_id``: an already invoiced order returns
            the existing invoice without recomputation.

        Args:
            data: Commande normalisée.
            issued_at: Date d'émission (défaut : maintenant, UTC).

        Returns:
            InvoiceCreationResult ; ``success`` à False porte le message
            d'erreur et la liste des champs manquants le cas échéant.
        """
        try:
            return self._create_invoice(data, issued_at or datetime.now(UTC))
        except InvoicingError as exc:
            logger.warning("Facture non émise pour la commande %s : %s", data.order_id, exc)
            return InvoiceCreationResult(success=False, error=str(exc), errors=exc.errors)
        except Exception as exc:
            logger.exception("Erreur lors de la création de la facture %s", data.order_id)
            return InvoiceCreationResult(success=False, error=str(exc) or type(exc).__name__)

    def _create_invoice(self, data: InvoiceInput, issued_at: datetime) -> InvoiceCreationResult:
        settings = self._load_settings(data.shop)

        existing = self._storage.find_invoice_by_order_id(data.order_id)
        if existing is not None:
            return InvoiceCreationResult(success=True, invoice=existing)

        try:
            with self._storage.atomic():
                invoice = self._issue_invoice(data, settings, issued_at)
        except DuplicateOrderError:
            winner = self._storage.find_invoice_by_order_id(data.order_id)
            if winner is None:
                raise
            logger.warning(
                "Commande %s déjà facturée (%s)", data.order_id, winner.invoice_number
            )
            return InvoiceCreationResult(success=True, invoice=winner)

        logger.info(
            "Facture %s émise pour la commande %s (%s € TTC)",
            invoice.invoice_number,
            invoice.order_id,
            invoice.total_ttc,
        )
        return InvoiceCreationResult(success=True, invoice=invoice)

    def _issue_invoice(
        self,
        data: InvoiceInput,
        settings: ShopSettings,
        issued_at: datetime,
    ) -> Invoice:
        """Numérote, calcule, enregistre la facture et met à jour l'état OSS.

        FR: Appelé dans ``storage.atomic()`` : un échec à n'importe quelle
            étape annule aussi le numéro consommé.
        EN: Called inside ``storage.atomic()``: a failure at any step also
            rolls back the consumed number.
        """
        invoice_number = self._numbering.next_invoice_number(data.shop, issued_at)
        vat = self._calculator.calculate(
            data.shop,
            data.customer_country,
            data.lines,
            settings=settings,
            year=issued_at.year,
        )
        invoice = self._storage.create_invoice_with_lines(
            self._build_invoice(data, settings, invoice_number, vat, issued_at)
        )

        if is_eu_foreign(data.customer_country):
            self._tracker.record_sale(
                data.shop,
                data.customer_country,
                vat.total_ht,
                vat.total_ttc,
                year=issued_at.year,
                at=issued_at,
            )

        if vat.oss_applied:
            self._storage.create_oss_sale(self._build_oss_sale(invoice, vat))
        return invoice

    def _build_invoice(
        self,
        data: InvoiceInput,
        settings: ShopSettings,
        invoice_number: str,
        vat: VatResult,
        issued_at: datetime,
    ) -> Invoice:
        lines = [
            InvoiceLine(
                line_order=calc.line_index,
                sku=line.sku,
                product_title=line.product_title,
                variant_title=line.variant_title,
                description=line.description,
                quantity=calc.quantity,
                unit_price_ht=calc.unit_price_ht,
                tax_rate=calc.tax_rate,
                tax_amount=calc.tax_amount,
                total_ht=calc.total_ht,
                total_ttc=calc.total_ttc,
            )
            for line, calc in zip(data.lines, vat.line_calculations, strict=True)
        ]
        return Invoice(
            shop=data.shop,
            invoice_number=invoice_number,
            order_id=data.order_id,
            order_number=data.order_number,
            order_name=data.order_name,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_address=data.customer_address,
            customer_postal_code=data.customer_postal_code,
            customer_city=data.customer_city,
            customer_country=data.customer_country,
            seller=seller_snapshot(settings),
            total_ht=vat.total_ht,
            total_tva=vat.total_tva,
            total_ttc=vat.total_ttc,
            oss_applied=vat.oss_applied,
            franchise_en_base=vat.franchise_en_base,
            payment_terms=settings.payment_terms,
            payment_status=data.payment_status,
            paid_at=data.paid_at,
            legal_mentions=generate_legal_mentions(
                vat.oss_applied,
                vat.franchise_en_base,
                settings.default_language,
            ),
            issued_at=issued_at,
            lines=lines,
        )

    @staticmethod
    def _build_oss_sale(invoice: Invoice, vat: VatResult) -> OssSale:
        # Taux de la première ligne : une vente OSS a un taux par pays
        return OssSale(
            shop=invoice.shop,
            year=invoice.issued_at.year,
            quarter=quarter_from_month(invoice.issued_at.month),
            month=invoice.issued_at.month,
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            order_id=invoice.order_id,
            customer_country=invoice.customer_country,
            base_ht=vat.total_ht,
            tax_rate=vat.line_calculations[0].tax_rate,
            tax_amount=vat.total_tva,
            total_ttc=vat.total_ttc,
            sale_date=invoice.issued_at,
        )

    def attach_document(
        self,
        invoice_id: str,
        renderer: BaseRenderer,
        theme: PdfTheme | None = None,
    ) -> Invoice:
        """Produit le document d'une facture et l'y rattache.

        FR: Seule modification autorisée après émission. Le thème par
            défaut est celui des paramètres de la boutique.
        EN: The only change allowed after issuance. The theme defaults to
            the shop's settings.

        Raises:
            NotFoundError: Si la facture n'existe pas.
        """
        invoice = self._storage.get_invoice(invoice_id)
        if theme is None:
            settings = self._storage.get_shop_settings(invoice.shop)
            theme = settings.pdf_theme if settings else PdfTheme.STANDARD
        result = renderer.render(invoice, theme)
        logger.info(
            "Document rattaché à la facture %s : %s",
            invoice.invoice_number,
            result.path or result.url,
        )
        return self._storage.attach_invoice_document(invoice_id, result.path, result.url)
