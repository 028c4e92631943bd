"""Numérotation séquentielle des factures."""

from factures_b2c.numbering.generator import InvoiceNumberGenerator, render_invoice_number

__all__ = ["InvoiceNumberGenerator", "render_invoice_number"]
