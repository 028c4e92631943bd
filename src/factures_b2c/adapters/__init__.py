"""Adaptateurs des sources de commandes vers InvoiceInput."""

from factures_b2c.adapters.shopify import ShopifyOrder, invoice_input_from_order

__all__ = ["ShopifyOrder", "invoice_input_from_order"]
