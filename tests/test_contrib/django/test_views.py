"""Tests des vues Django (rapport OSS, création de facture, paramètres)."""

import json
from collections.abc import Callable
from decimal import Decimal

import pytest
from django.test import override_settings
from django.urls import reverse

from factures_b2c.contrib.django.conf import get_assembler
from factures_b2c.contrib.django.storage import DjangoStorage
from factures_b2c.models.invoice import InvoiceInput
from factures_b2c.models.settings import ShopSettings
from tests.conftest import ISSUED_AT, SHOP


def _post_json(client, url: str, payload) -> object:
    return client.post(url, data=json.dumps(payload), content_type="application/json")


@pytest.fixture
def oss_sales(
    storage: DjangoStorage,
    shop_settings: ShopSettings,
    make_input: Callable[..., InvoiceInput],
) -> None:
    """Deux ventes OSS vers l'Allemagne au deuxième trimestre 2025."""
    storage.upsert_oss_threshold(
        SHOP, 2025, "DE", {"total_sales_ttc": Decimal("12000"), "threshold_reached": True}
    )
    assembler = get_assembler(storage)
    for order_id in ("gid://shopify/Order/1001", "gid://shopify/Order/1002"):
        result = assembler.create_invoice(
            make_input(order_id=order_id, country="DE"), issued_at=ISSUED_AT
        )
        assert result.success


class TestOssReportView:
    """Tests de OssReportView."""

    def _url(self) -> str:
        return reverse("factures_b2c:oss-report", kwargs={"shop": SHOP})

    def test_json_report(self, client, oss_sales: None) -> None:
        response = client.get(self._url(), {"year": 2025, "quarter": 2})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        report = data["report"]
        assert report["period"] == {"year": 2025, "quarter": 2}
        assert [e["order_id"] for e in report["entries"]] == [
            "gid://shopify/Order/1001",
            "gid://shopify/Order/1002",
        ]
        assert report["summary"]["DE"]["order_count"] == 2
        assert Decimal(report["grand_total_ttc"]) == Decimal("238.00")

    def test_csv_report(self, client, oss_sales: None) -> None:
        response = client.get(self._url(), {"year": 2025, "quarter": 2, "format": "csv"})
        assert response.status_code == 200
        assert response["Content-Type"].startswith("text/csv")
        assert response["Content-Disposition"] == (
            'attachment; filename="oss-report-2025-Q2.csv"'
        )
        lines = response.content.decode("utf-8").splitlines()
        assert lines[0] == "OSS Report,Q2 2025"
        assert lines[-1] == "GRAND TOTAL,,200.00,38.00,238.00"

    def test_empty_quarter(self, client, storage: DjangoStorage) -> None:
        response = client.get(self._url(), {"year": 2025, "quarter": 1})
        assert response.status_code == 200
        assert response.json()["report"]["entries"] == []

    def test_invalid_quarter(self, client, storage: DjangoStorage) -> None:
        response = client.get(self._url(), {"year": 2025, "quarter": 5})
        assert response.status_code == 400
        assert "Trimestre invalide" in response.json()["error"]

    def test_non_numeric_year(self, client, storage: DjangoStorage) -> None:
        response = client.get(self._url(), {"year": "deux-mille", "quarter": 1})
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestCreateInvoiceView:
    """Tests de CreateInvoiceView."""

    def _url(self) -> str:
        return reverse("factures_b2c:create-invoice", kwargs={"shop": SHOP})

    def test_create_then_replay(
        self,
        client,
        shop_settings: ShopSettings,
        make_input: Callable[..., InvoiceInput],
    ) -> None:
        payload = make_input().model_dump(mode="json")
        first = _post_json(client, self._url(), payload)
        assert first.status_code == 201
        invoice = first.json()["invoice"]
        assert invoice["total_ttc"] == "120.00"
        assert invoice["customer_country"] == "FR"

        second = _post_json(client, self._url(), payload)
        assert second.status_code == 200
        assert second.json()["invoice"]["id"] == invoice["id"]

    def test_shop_taken_from_url(
        self,
        client,
        shop_settings: ShopSettings,
        make_input: Callable[..., InvoiceInput],
    ) -> None:
        payload = {**make_input().model_dump(mode="json"), "shop": "autre.myshopify.com"}
        response = _post_json(client, self._url(), payload)
        assert response.status_code == 201
        assert response.json()["invoice"]["shop"] == SHOP

    def test_invalid_payload(self, client, storage: DjangoStorage) -> None:
        response = _post_json(client, self._url(), {"order_id": "gid://shopify/Order/1"})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Données de commande invalides."
        assert any(detail.startswith("customer_name") for detail in data["details"])

    def test_malformed_json(self, client, storage: DjangoStorage) -> None:
        response = client.post(self._url(), data="{pas du json", content_type="application/json")
        assert response.status_code == 400
        assert response.json()["details"] == []

    def test_missing_settings(
        self,
        client,
        storage: DjangoStorage,
        make_input: Callable[..., InvoiceInput],
    ) -> None:
        response = _post_json(client, self._url(), make_input().model_dump(mode="json"))
        assert response.status_code == 400
        data = response.json()
        assert "introuvables" in data["error"]
        assert data["errors"]

    def test_incomplete_seller(
        self,
        client,
        storage: DjangoStorage,
        make_input: Callable[..., InvoiceInput],
    ) -> None:
        storage.update_shop_settings(SHOP, {"company_name": "Lunettes & Co SAS"})
        response = _post_json(client, self._url(), make_input().model_dump(mode="json"))
        assert response.status_code == 400
        assert "Numéro SIREN obligatoire" in response.json()["errors"]

    def test_get_not_allowed(self, client, storage: DjangoStorage) -> None:
        assert client.get(self._url()).status_code == 405


class TestShopSettingsView:
    """Tests de ShopSettingsView."""

    def _url(self) -> str:
        return reverse("factures_b2c:shop-settings", kwargs={"shop": SHOP})

    def test_get_creates_defaults(self, client, storage: DjangoStorage) -> None:
        response = client.get(self._url())
        assert response.status_code == 200
        settings = response.json()["settings"]
        assert settings["shop"] == SHOP
        assert settings["default_language"] == "FR"
        assert settings["current_sequence"] == 0
        assert storage.get_shop_settings(SHOP) is not None

    @override_settings(FACTURES_B2C={"DEFAULT_LANGUAGE": "EN"})
    def test_get_uses_configured_language(self, client, storage: DjangoStorage) -> None:
        assert client.get(self._url()).json()["settings"]["default_language"] == "EN"

    def test_post_updates(self, client, storage: DjangoStorage) -> None:
        response = _post_json(
            client,
            self._url(),
            {"company_name": "Lunettes & Co SAS", "oss_enabled": True, "current_sequence": 42},
        )
        assert response.status_code == 200
        settings = response.json()["settings"]
        assert settings["company_name"] == "Lunettes & Co SAS"
        assert settings["oss_enabled"] is True
        assert settings["current_sequence"] == 0

    def test_post_invalid_value(self, client, storage: DjangoStorage) -> None:
        response = _post_json(client, self._url(), {"default_language": "XX"})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Paramètres invalides."
        assert data["details"]

    def test_post_non_object_body(self, client, storage: DjangoStorage) -> None:
        response = _post_json(client, self._url(), ["company_name"])
        assert response.status_code == 400
