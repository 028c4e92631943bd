"""Assemblage des factures et mentions légales."""

from factures_b2c.invoicing.assembler import InvoiceAssembler, seller_snapshot, validate_seller
from factures_b2c.invoicing.legal import LEGAL_MENTIONS, generate_legal_mentions

__all__ = [
    "LEGAL_MENTIONS",
    "InvoiceAssembler",
    "generate_legal_mentions",
    "seller_snapshot",
    "validate_seller",
]
