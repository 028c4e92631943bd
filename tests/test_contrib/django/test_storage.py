"""Tests du backend de stockage Django ORM."""

from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from factures_b2c.contrib.django.storage import DjangoStorage
from factures_b2c.invoicing.assembler import InvoiceAssembler
from factures_b2c.models.invoice import Invoice, InvoiceInput
from factures_b2c.models.settings import ShopSettings
from factures_b2c.storage.errors import (
    DuplicateOrderError,
    NotFoundError,
    SequenceYearError,
    StorageError,
)
from tests.conftest import ISSUED_AT, SHOP


@pytest.fixture
def issued_invoice(
    storage: DjangoStorage,
    shop_settings: ShopSettings,
    make_input: Callable[..., InvoiceInput],
) -> Invoice:
    """Facture domestique émise le 14 mai 2025."""
    result = InvoiceAssembler(storage).create_invoice(make_input(), issued_at=ISSUED_AT)
    assert result.success
    return result.invoice


class TestShopSettings:
    """Tests des paramètres de boutique."""

    def test_missing(self, storage: DjangoStorage) -> None:
        assert storage.get_shop_settings(SHOP) is None

    def test_create_then_patch(self, storage: DjangoStorage) -> None:
        storage.update_shop_settings(SHOP, {"company_name": "Lunettes & Co SAS"})
        settings = storage.update_shop_settings(SHOP, {"city": "Créteil"})
        assert settings.company_name == "Lunettes & Co SAS"
        assert settings.city == "Créteil"
        assert storage.get_shop_settings(SHOP) == settings

    def test_sequence_fields_ignored(self, storage: DjangoStorage) -> None:
        storage.update_shop_settings(SHOP, {})
        settings = storage.update_shop_settings(SHOP, {"current_sequence": 99})
        assert settings.current_sequence == 0


class TestSequence:
    """Tests de l'incrément de séquence."""

    def test_increment(self, storage: DjangoStorage) -> None:
        storage.update_shop_settings(SHOP, {})
        assert [storage.increment_invoice_sequence(SHOP, 2025) for _ in range(3)] == [1, 2, 3]

    def test_new_year_resets(self, storage: DjangoStorage) -> None:
        storage.update_shop_settings(SHOP, {})
        storage.increment_invoice_sequence(SHOP, 2025)
        storage.increment_invoice_sequence(SHOP, 2025)
        assert storage.increment_invoice_sequence(SHOP, 2026) == 1
        settings = storage.get_shop_settings(SHOP)
        assert settings.current_year == 2026
        assert settings.current_sequence == 1

    def test_earlier_year_rejected_once_issued(self, storage: DjangoStorage) -> None:
        storage.update_shop_settings(SHOP, {})
        storage.increment_invoice_sequence(SHOP, 2025)
        storage.increment_invoice_sequence(SHOP, 2026)
        with pytest.raises(SequenceYearError):
            storage.increment_invoice_sequence(SHOP, 2025)
        settings = storage.get_shop_settings(SHOP)
        assert settings.current_year == 2026
        assert settings.current_sequence == 1

    def test_missing_shop(self, storage: DjangoStorage) -> None:
        with pytest.raises(NotFoundError):
            storage.increment_invoice_sequence(SHOP, 2025)


class TestInvoices:
    """Tests des factures."""

    def test_roundtrip(self, storage: DjangoStorage, issued_invoice: Invoice) -> None:
        assert storage.get_invoice(issued_invoice.id) == issued_invoice
        assert storage.find_invoice_by_order_id(issued_invoice.order_id) == issued_invoice

    def test_unknown_invoice(self, storage: DjangoStorage) -> None:
        with pytest.raises(NotFoundError):
            storage.get_invoice("inconnue")
        assert storage.find_invoice_by_order_id("gid://shopify/Order/404") is None

    def test_duplicate_order(self, storage: DjangoStorage, issued_invoice: Invoice) -> None:
        duplicate = issued_invoice.model_copy(
            update={"id": str(uuid4()), "invoice_number": "FAC-2025-0999"}
        )
        with pytest.raises(DuplicateOrderError) as exc_info:
            storage.create_invoice_with_lines(duplicate)
        assert exc_info.value.order_id == issued_invoice.order_id

    def test_duplicate_number_is_storage_error(
        self, storage: DjangoStorage, issued_invoice: Invoice
    ) -> None:
        clash = issued_invoice.model_copy(
            update={"id": str(uuid4()), "order_id": "gid://shopify/Order/2002"}
        )
        with pytest.raises(StorageError) as exc_info:
            storage.create_invoice_with_lines(clash)
        assert not isinstance(exc_info.value, DuplicateOrderError)

    def test_attach_document(self, storage: DjangoStorage, issued_invoice: Invoice) -> None:
        updated = storage.attach_invoice_document(
            issued_invoice.id, "/factures/FAC-2025-0001.pdf", "https://cdn.example.com/f.pdf"
        )
        assert updated.pdf_path == "/factures/FAC-2025-0001.pdf"
        assert updated.pdf_url == "https://cdn.example.com/f.pdf"
        assert updated.total_ttc == issued_invoice.total_ttc

    def test_attach_unknown(self, storage: DjangoStorage) -> None:
        with pytest.raises(NotFoundError):
            storage.attach_invoice_document("inconnue", "/tmp/x.pdf", None)


class TestOssThresholds:
    """Tests des cumuls OSS."""

    def test_upsert_creates_and_merges(self, storage: DjangoStorage) -> None:
        storage.upsert_oss_threshold(SHOP, 2025, "DE", {})
        row = storage.upsert_oss_threshold(SHOP, 2025, "DE", {"order_count": 3})
        assert row.order_count == 3
        assert row.total_sales_ttc == Decimal("0")

    def test_update_applies_function(self, storage: DjangoStorage) -> None:
        crossed_at = datetime(2025, 5, 20, tzinfo=UTC)

        def _apply(row):
            return row.model_copy(
                update={
                    "total_sales_ttc": row.total_sales_ttc + Decimal("10500"),
                    "threshold_reached": True,
                    "threshold_date": crossed_at,
                }
            )

        row = storage.update_oss_threshold(SHOP, 2025, "IT", _apply)
        assert row.total_sales_ttc == Decimal("10500")
        assert row.threshold_date == crossed_at
        assert storage.get_oss_threshold(SHOP, 2025, "IT") == row

    def test_list_sorted_by_country(self, storage: DjangoStorage) -> None:
        for country in ("IT", "BE", "DE"):
            storage.upsert_oss_threshold(SHOP, 2025, country, {})
        storage.upsert_oss_threshold(SHOP, 2024, "AT", {})
        assert [t.country_code for t in storage.list_oss_thresholds(SHOP, 2025)] == [
            "BE",
            "DE",
            "IT",
        ]


class TestOssFlow:
    """Tests du flux OSS complet sur la base."""

    def test_oss_sale_recorded(
        self,
        storage: DjangoStorage,
        shop_settings: ShopSettings,
        make_input: Callable[..., InvoiceInput],
    ) -> None:
        storage.upsert_oss_threshold(
            SHOP, 2025, "DE", {"total_sales_ttc": Decimal("12000"), "threshold_reached": True}
        )
        result = InvoiceAssembler(storage).create_invoice(
            make_input(country="DE"), issued_at=ISSUED_AT
        )
        assert result.success
        assert result.invoice.oss_applied
        assert result.invoice.total_ttc == Decimal("119.00")

        sales = storage.list_oss_sales(SHOP, 2025, 2)
        assert len(sales) == 1
        assert sales[0].invoice_id == result.invoice.id
        assert sales[0].order_id == "gid://shopify/Order/1001"
        assert sales[0].month == 5
        assert storage.list_oss_sales(SHOP, 2025, 1) == []

        row = storage.get_oss_threshold(SHOP, 2025, "DE")
        assert row.total_sales_ttc == Decimal("12119.00")
        assert row.order_count == 1

    def test_threshold_failure_rolls_back_invoice(
        self,
        storage: DjangoStorage,
        shop_settings: ShopSettings,
        make_input: Callable[..., InvoiceInput],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _fail(*args, **kwargs):
            raise RuntimeError("cumul OSS indisponible")

        monkeypatch.setattr(storage, "update_oss_threshold", _fail)
        assembler = InvoiceAssembler(storage)
        data = make_input(country="DE")

        result = assembler.create_invoice(data, issued_at=ISSUED_AT)
        assert not result.success
        assert storage.find_invoice_by_order_id(data.order_id) is None
        assert storage.get_shop_settings(SHOP).current_sequence == 0
        assert storage.get_oss_threshold(SHOP, 2025, "DE") is None

        monkeypatch.undo()
        retried = assembler.create_invoice(data, issued_at=ISSUED_AT)
        assert retried.invoice.invoice_number == "FAC-2025-0001"
        assert storage.get_oss_threshold(SHOP, 2025, "DE").order_count == 1
