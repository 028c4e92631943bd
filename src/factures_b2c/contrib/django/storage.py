"""Backend de stockage Django ORM.

FR: Implémente BaseStorage sur les modèles de l'app. L'incrément de la
    séquence et la mise à jour des cumuls OSS verrouillent la ligne
    concernée (``select_for_update``) dans une transaction atomique.
EN: Implements BaseStorage on the app's models. The sequence increment
    and OSS totals update lock the row (``select_for_update``) inside an
    atomic transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from django.db import IntegrityError, transaction

from factures_b2c.contrib.django.models import Invoice, OssSale, OssThreshold, ShopSettings
from factures_b2c.models.invoice import Invoice as PydanticInvoice
from factures_b2c.models.oss import OssSale as PydanticOssSale
from factures_b2c.models.oss import OssThreshold as PydanticOssThreshold
from factures_b2c.models.settings import ShopSettings as PydanticShopSettings
from factures_b2c.storage.base import BaseStorage, ThresholdUpdate, merge_settings
from factures_b2c.storage.errors import (
    DuplicateOrderError,
    NotFoundError,
    SequenceYearError,
    StorageError,
)

logger = logging.getLogger(__name__)


class DjangoStorage(BaseStorage):
    """Backend de stockage sur la base de données Django."""

    def atomic(self) -> transaction.Atomic:
        return transaction.atomic()

    # --- Paramètres de boutique ---

    def get_shop_settings(self, shop: str) -> PydanticShopSettings | None:
        row = ShopSettings.objects.filter(shop=shop).first()
        return row.to_pydantic() if row else None

    @transaction.atomic
    def update_shop_settings(
        self, shop: str, patch: Mapping[str, Any]
    ) -> PydanticShopSettings:
        row = ShopSettings.objects.select_for_update().filter(shop=shop).first()
        settings = merge_settings(shop, row.to_pydantic() if row else None, patch)
        if row is None:
            row = ShopSettings(shop=shop)
        row.apply_pydantic(settings)
        row.save()
        return row.to_pydantic()

    def increment_invoice_sequence(self, shop: str, year: int) -> int:
        with transaction.atomic():
            row = ShopSettings.objects.select_for_update().filter(shop=shop).first()
            if row is None:
                msg = f"Paramètres introuvables pour la boutique : {shop}"
                raise NotFoundError(msg)
            if year < row.current_year and row.current_sequence > 0:
                msg = (
                    f"Année de numérotation {year} antérieure à l'année en cours "
                    f"{row.current_year} pour la boutique : {shop}"
                )
                raise SequenceYearError(msg)
            if row.current_year != year:
                row.current_year = year
                row.current_sequence = 0
            row.current_sequence += 1
            row.save(update_fields=["current_year", "current_sequence", "updated_at"])
            return row.current_sequence

    # --- Factures ---

    def find_invoice_by_order_id(self, order_id: str) -> PydanticInvoice | None:
        row = Invoice.objects.prefetch_related("lines").filter(order_id=order_id).first()
        return row.to_pydantic() if row else None

    def get_invoice(self, invoice_id: str) -> PydanticInvoice:
        try:
            row = Invoice.objects.prefetch_related("lines").get(pk=invoice_id)
        except Invoice.DoesNotExist:
            msg = f"Facture introuvable : {invoice_id}"
            raise NotFoundError(msg) from None
        return row.to_pydantic()

    def create_invoice_with_lines(self, invoice: PydanticInvoice) -> PydanticInvoice:
        try:
            Invoice.create_with_lines(invoice)
        except IntegrityError as exc:
            if Invoice.objects.filter(order_id=invoice.order_id).exists():
                msg = f"Une facture existe déjà pour la commande : {invoice.order_id}"
                raise DuplicateOrderError(msg, order_id=invoice.order_id) from exc
            logger.exception("Erreur d'enregistrement de la facture %s", invoice.invoice_number)
            raise StorageError(str(exc)) from exc
        return self.get_invoice(invoice.id)

    def attach_invoice_document(
        self,
        invoice_id: str,
        pdf_path: str | None,
        pdf_url: str | None,
    ) -> PydanticInvoice:
        updated = Invoice.objects.filter(pk=invoice_id).update(
            pdf_path=pdf_path or "",
            pdf_url=pdf_url or "",
        )
        if not updated:
            msg = f"Facture introuvable : {invoice_id}"
            raise NotFoundError(msg)
        return self.get_invoice(invoice_id)

    # --- Cumuls OSS ---

    def get_oss_threshold(
        self, shop: str, year: int, country_code: str
    ) -> PydanticOssThreshold | None:
        row = OssThreshold.objects.filter(
            shop=shop, year=year, country_code=country_code
        ).first()
        return row.to_pydantic() if row else None

    def upsert_oss_threshold(
        self,
        shop: str,
        year: int,
        country_code: str,
        data: Mapping[str, Any],
    ) -> PydanticOssThreshold:
        with transaction.atomic():
            row, _ = OssThreshold.objects.select_for_update().get_or_create(
                shop=shop, year=year, country_code=country_code
            )
            threshold = PydanticOssThreshold.model_validate(
                {
                    **row.to_pydantic().model_dump(),
                    **data,
                    "shop": shop,
                    "year": year,
                    "country_code": country_code,
                }
            )
            row.apply_pydantic(threshold)
            row.save()
            return row.to_pydantic()

    def update_oss_threshold(
        self,
        shop: str,
        year: int,
        country_code: str,
        apply: ThresholdUpdate,
    ) -> PydanticOssThreshold:
        with transaction.atomic():
            row, _ = OssThreshold.objects.select_for_update().get_or_create(
                shop=shop, year=year, country_code=country_code
            )
            row.apply_pydantic(apply(row.to_pydantic()))
            row.save()
            return row.to_pydantic()

    def list_oss_thresholds(self, shop: str, year: int) -> list[PydanticOssThreshold]:
        rows = OssThreshold.objects.filter(shop=shop, year=year).order_by("country_code")
        return [row.to_pydantic() for row in rows]

    # --- Registre des ventes OSS ---

    def create_oss_sale(self, sale: PydanticOssSale) -> PydanticOssSale:
        row = OssSale.from_pydantic(sale)
        row.save(force_insert=True)
        return row.to_pydantic()

    def list_oss_sales(self, shop: str, year: int, quarter: int) -> list[PydanticOssSale]:
        rows = OssSale.objects.filter(shop=shop, year=year, quarter=quarter).order_by("sale_date")
        return [row.to_pydantic() for row in rows]
