"""Fixtures partagées : stockage en mémoire et boutique configurée."""

from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from factures_b2c.models.invoice import InvoiceInput, InvoiceLineInput
from factures_b2c.models.settings import ShopSettings
from factures_b2c.storage.memory import MemoryStorage

SHOP = "lunettes-and-co.myshopify.com"
ISSUED_AT = datetime(2025, 5, 14, 10, 30, tzinfo=UTC)

SELLER_SETTINGS: dict[str, object] = {
    "company_name": "Lunettes & Co SAS",
    "legal_form": "SAS",
    "share_capital": "10 000 €",
    "address": "12 rue des Opticiens",
    "postal_code": "94000",
    "city": "Créteil",
    "siren": "123456789",
    "siret": "12345678900012",
    "rcs": "RCS Créteil 123 456 789",
    "vat_number": "FR12123456789",
    "payment_terms": "Paiement à la commande",
}


@pytest.fixture
def storage() -> MemoryStorage:
    """Stockage en mémoire vide."""
    return MemoryStorage()


@pytest.fixture
def shop_settings(storage: MemoryStorage) -> ShopSettings:
    """Boutique configurée et inscrite à l'OSS."""
    return storage.update_shop_settings(SHOP, {**SELLER_SETTINGS, "oss_enabled": True})


@pytest.fixture
def make_input() -> Callable[..., InvoiceInput]:
    """Fabrique de commandes normalisées."""

    def _make(
        order_id: str = "gid://shopify/Order/1001",
        country: str = "FR",
        unit_price_ht: str = "100.00",
        quantity: str = "1",
        tax_rate: str | None = None,
    ) -> InvoiceInput:
        return InvoiceInput(
            shop=SHOP,
            order_id=order_id,
            order_number="#1001",
            order_name="#1001",
            customer_name="Marie Dupont",
            customer_email="marie.dupont@example.com",
            customer_address="5 avenue de la Vision",
            customer_postal_code="75011",
            customer_city="Paris",
            customer_country=country,
            lines=[
                InvoiceLineInput(
                    sku="RB-3025",
                    product_title="Monture Aviator",
                    variant_title="Or",
                    quantity=Decimal(quantity),
                    unit_price_ht=Decimal(unit_price_ht),
                    tax_rate=Decimal(tax_rate) if tax_rate is not None else None,
                ),
            ],
            payment_status="paid",
        )

    return _make
