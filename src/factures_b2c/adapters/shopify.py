"""Adaptateur des commandes Shopify vers InvoiceInput.

FR: Conversion pure d'un instantané de commande Shopify (réponse de
    l'API Admin GraphQL, clés en camelCase) en commande normalisée. La
    récupération de la commande reste à la charge de l'appelant.
EN: Pure conversion of a Shopify order snapshot (Admin GraphQL response,
    camelCase keys) into a normalized order. Fetching the order is the
    caller's job.

Règles / Rules:
    - adresse de livraison prioritaire, sinon adresse de facturation ;
    - nom du client : adresse, sinon fiche client, sinon « Client » ;
    - pays par défaut : FR ;
    - si la ligne porte une taxe, son taux devient le taux imposé et le
      prix unitaire TTC est converti en HT (4 décimales) ; sinon le prix
      est considéré HT et le taux du régime s'applique.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from factures_b2c.models.invoice import InvoiceInput, InvoiceLineInput
from factures_b2c.tax.rates import HOME_COUNTRY

UNIT_PRICE_PRECISION = Decimal("0.0001")
DEFAULT_CUSTOMER_NAME = "Client"


class _ShopifyModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShopifyMoney(_ShopifyModel):
    amount: Decimal
    currency_code: str | None = None


class ShopifyMoneyBag(_ShopifyModel):
    shop_money: ShopifyMoney


class ShopifyTaxLine(_ShopifyModel):
    rate: Decimal = Field(..., description="Taux en fraction (0.2 = 20 %) / Rate as fraction")
    title: str | None = None


class ShopifyLineItem(_ShopifyModel):
    id: str | None = None
    title: str
    variant_title: str | None = None
    sku: str | None = None
    quantity: Decimal
    original_unit_price_set: ShopifyMoneyBag
    tax_lines: list[ShopifyTaxLine] = Field(default_factory=list)


class ShopifyLineItemConnection(_ShopifyModel):
    nodes: list[ShopifyLineItem] = Field(default_factory=list)


class ShopifyAddress(_ShopifyModel):
    first_name: str | None = None
    last_name: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    zip: str | None = None
    country_code: str | None = None
    province: str | None = None


class ShopifyCustomer(_ShopifyModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class ShopifyOrder(_ShopifyModel):
    """Instantané d'une commande Shopify / Shopify order snapshot."""

    id: str
    name: str | None = None
    created_at: datetime
    financial_status: str | None = None
    customer: ShopifyCustomer | None = None
    shipping_address: ShopifyAddress | None = None
    billing_address: ShopifyAddress | None = None
    line_items: ShopifyLineItemConnection


def _full_name(first_name: str | None, last_name: str | None) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()


def _line_from_item(item: ShopifyLineItem) -> InvoiceLineInput:
    unit_price = item.original_unit_price_set.shop_money.amount
    tax_rate = None
    if item.tax_lines and item.tax_lines[0].rate:
        tax_rate = item.tax_lines[0].rate * 100
        unit_price = (unit_price / (1 + tax_rate / 100)).quantize(
            UNIT_PRICE_PRECISION, rounding=ROUND_HALF_UP
        )
    return InvoiceLineInput(
        sku=item.sku,
        product_title=item.title,
        variant_title=item.variant_title or None,
        description=" - ".join(part for part in (item.title, item.variant_title) if part),
        quantity=item.quantity,
        unit_price_ht=unit_price,
        tax_rate=tax_rate,
    )


def invoice_input_from_order(order: ShopifyOrder | dict, shop: str) -> InvoiceInput:
    """Convertit une commande Shopify en commande normalisée.

    Args:
        order: Commande Shopify (modèle ou dictionnaire issu de l'API).
        shop: Domaine de la boutique.

    Returns:
        InvoiceInput prêt pour l'assembleur de factures.
    """
    if not isinstance(order, ShopifyOrder):
        order = ShopifyOrder.model_validate(order)

    address = order.shipping_address or order.billing_address
    customer_name = ""
    if address is not None:
        customer_name = _full_name(address.first_name, address.last_name)
    if not customer_name and order.customer is not None:
        customer_name = _full_name(order.customer.first_name, order.customer.last_name)

    customer_address = None
    if address is not None:
        customer_address = ", ".join(p for p in (address.address1, address.address2) if p) or None

    financial_status = order.financial_status
    return InvoiceInput(
        shop=shop,
        order_id=order.id,
        order_number=order.name,
        order_name=order.name,
        customer_name=customer_name or DEFAULT_CUSTOMER_NAME,
        customer_email=order.customer.email if order.customer else None,
        customer_address=customer_address,
        customer_postal_code=address.zip if address else None,
        customer_city=address.city if address else None,
        customer_country=(address.country_code if address else None) or HOME_COUNTRY,
        lines=[_line_from_item(item) for item in order.line_items.nodes],
        payment_status=financial_status.lower() if financial_status else None,
        paid_at=order.created_at if financial_status == "PAID" else None,
    )
