"""Stockage en mémoire pour les tests et le développement.

FR: Implémente l'interface BaseStorage complète en mémoire. Chaque
    lecture-modification-écriture est protégée par un verrou réentrant,
    ce qui reproduit les garanties d'atomicité d'un backend relationnel.
    Les objets retournés sont des copies : les modifier n'affecte pas
    l'état stocké.
EN: Implements the full BaseStorage interface in memory. Every
    read-modify-write is guarded by a reentrant lock. Returned objects
    are copies.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from factures_b2c.models.invoice import Invoice
from factures_b2c.models.oss import OssSale, OssThreshold
from factures_b2c.models.settings import ShopSettings
from factures_b2c.storage.base import BaseStorage, ThresholdUpdate, merge_settings
from factures_b2c.storage.errors import DuplicateOrderError, NotFoundError, SequenceYearError

_ThresholdKey = tuple[str, int, str]


class MemoryStorage(BaseStorage):
    """Backend de stockage en mémoire, sûr entre threads."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._settings: dict[str, ShopSettings] = {}
        self._invoices: dict[str, Invoice] = {}
        self._invoice_ids_by_order: dict[str, str] = {}
        self._thresholds: dict[_ThresholdKey, OssThreshold] = {}
        self._sales: list[OssSale] = []

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Unité de travail : tout ou rien sous le verrou.

        FR: Les valeurs stockées sont remplacées, jamais modifiées en
            place : une copie superficielle des conteneurs suffit à
            restaurer l'état en cas d'exception.
        EN: Stored values are replaced, never mutated in place: a shallow
            copy of the containers is enough to restore state on error.
        """
        with self._lock:
            snapshot = (
                dict(self._settings),
                dict(self._invoices),
                dict(self._invoice_ids_by_order),
                dict(self._thresholds),
                list(self._sales),
            )
            try:
                yield
            except Exception:
                (
                    self._settings,
                    self._invoices,
                    self._invoice_ids_by_order,
                    self._thresholds,
                    self._sales,
                ) = snapshot
                raise

    def _get_stored_invoice(self, invoice_id: str) -> Invoice:
        """Récupère une facture stockée ou lève NotFoundError."""
        invoice = self._invoices.get(invoice_id)
        if invoice is None:
            msg = f"Facture introuvable : {invoice_id}"
            raise NotFoundError(msg)
        return invoice

    # --- Paramètres de boutique ---

    def get_shop_settings(self, shop: str) -> ShopSettings | None:
        with self._lock:
            settings = self._settings.get(shop)
            return settings.model_copy(deep=True) if settings else None

    def update_shop_settings(
        self, shop: str, patch: Mapping[str, Any]
    ) -> ShopSettings:
        with self._lock:
            settings = merge_settings(shop, self._settings.get(shop), patch)
            self._settings[shop] = settings
            return settings.model_copy(deep=True)

    def increment_invoice_sequence(self, shop: str, year: int) -> int:
        with self._lock:
            settings = self._settings.get(shop)
            if settings is None:
                msg = f"Paramètres introuvables pour la boutique : {shop}"
                raise NotFoundError(msg)
            if year < settings.current_year and settings.current_sequence > 0:
                msg = (
                    f"Année de numérotation {year} antérieure à l'année en cours "
                    f"{settings.current_year} pour la boutique : {shop}"
                )
                raise SequenceYearError(msg)
            sequence = settings.current_sequence
            if settings.current_year != year:
                sequence = 0
            sequence += 1
            self._settings[shop] = settings.model_copy(
                update={"current_year": year, "current_sequence": sequence}
            )
            return sequence

    # --- Factures ---

    def find_invoice_by_order_id(self, order_id: str) -> Invoice | None:
        with self._lock:
            invoice_id = self._invoice_ids_by_order.get(order_id)
            if invoice_id is None:
                return None
            return self._invoices[invoice_id].model_copy(deep=True)

    def get_invoice(self, invoice_id: str) -> Invoice:
        with self._lock:
            return self._get_stored_invoice(invoice_id).model_copy(deep=True)

    def create_invoice_with_lines(self, invoice: Invoice) -> Invoice:
        with self._lock:
            if invoice.order_id in self._invoice_ids_by_order:
                msg = f"Une facture existe déjà pour la commande : {invoice.order_id}"
                raise DuplicateOrderError(msg, order_id=invoice.order_id)
            stored = invoice.model_copy(deep=True)
            self._invoices[stored.id] = stored
            self._invoice_ids_by_order[stored.order_id] = stored.id
            return stored.model_copy(deep=True)

    def attach_invoice_document(
        self,
        invoice_id: str,
        pdf_path: str | None,
        pdf_url: str | None,
    ) -> Invoice:
        with self._lock:
            stored = self._get_stored_invoice(invoice_id)
            updated = stored.model_copy(update={"pdf_path": pdf_path, "pdf_url": pdf_url})
            self._invoices[invoice_id] = updated
            return updated.model_copy(deep=True)

    # --- Cumuls OSS ---

    def get_oss_threshold(
        self, shop: str, year: int, country_code: str
    ) -> OssThreshold | None:
        with self._lock:
            row = self._thresholds.get((shop, year, country_code))
            return row.model_copy() if row else None

    def upsert_oss_threshold(
        self,
        shop: str,
        year: int,
        country_code: str,
        data: Mapping[str, Any],
    ) -> OssThreshold:
        with self._lock:
            key = (shop, year, country_code)
            current = self._thresholds.get(key) or OssThreshold(
                shop=shop, year=year, country_code=country_code
            )
            row = OssThreshold.model_validate(
                {
                    **current.model_dump(),
                    **data,
                    "shop": shop,
                    "year": year,
                    "country_code": country_code,
                }
            )
            self._thresholds[key] = row
            return row.model_copy()

    def update_oss_threshold(
        self,
        shop: str,
        year: int,
        country_code: str,
        apply: ThresholdUpdate,
    ) -> OssThreshold:
        with self._lock:
            key = (shop, year, country_code)
            current = self._thresholds.get(key) or OssThreshold(
                shop=shop, year=year, country_code=country_code
            )
            row = apply(current.model_copy())
            row = row.model_copy(update={"last_updated": datetime.now(UTC)})
            self._thresholds[key] = row
            return row.model_copy()

    def list_oss_thresholds(self, shop: str, year: int) -> list[OssThreshold]:
        with self._lock:
            return [
                row.model_copy()
                for (row_shop, row_year, _), row in self._thresholds.items()
                if row_shop == shop and row_year == year
            ]

    # --- Registre des ventes OSS ---

    def create_oss_sale(self, sale: OssSale) -> OssSale:
        with self._lock:
            self._sales.append(sale.model_copy())
            return sale.model_copy()

    def list_oss_sales(self, shop: str, year: int, quarter: int) -> list[OssSale]:
        with self._lock:
            sales = [
                s.model_copy()
                for s in self._sales
                if s.shop == shop and s.year == year and s.quarter == quarter
            ]
        return sorted(sales, key=lambda s: s.sale_date)
