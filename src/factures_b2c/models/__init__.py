"""Modèles de données Pydantic pour la facturation B2C et l'OSS."""

from factures_b2c.models.enums import Language, PdfTheme, TaxRegime, ThresholdScope
from factures_b2c.models.invoice import (
    Invoice,
    InvoiceCreationResult,
    InvoiceInput,
    InvoiceLine,
    InvoiceLineInput,
    LineCalculation,
    SellerSnapshot,
    VatLineInput,
    VatResult,
)
from factures_b2c.models.oss import (
    CountrySummary,
    EuSalesOverview,
    OssReport,
    OssReportEntry,
    OssSale,
    OssThreshold,
    ReportPeriod,
    ThresholdStatus,
    ThresholdWarning,
)
from factures_b2c.models.settings import ShopSettings

__all__ = [
    "CountrySummary",
    "EuSalesOverview",
    "Invoice",
    "InvoiceCreationResult",
    "InvoiceInput",
    "InvoiceLine",
    "InvoiceLineInput",
    "Language",
    "LineCalculation",
    "OssReport",
    "OssReportEntry",
    "OssSale",
    "OssThreshold",
    "PdfTheme",
    "ReportPeriod",
    "SellerSnapshot",
    "ShopSettings",
    "TaxRegime",
    "ThresholdScope",
    "ThresholdStatus",
    "ThresholdWarning",
    "VatLineInput",
    "VatResult",
]
