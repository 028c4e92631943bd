"""Modèles du guichet unique OSS (One-Stop-Shop).

FR: Cumuls annuels par pays pour le suivi du seuil de 10 000 €, registre
    des ventes taxées sous OSS et rapport trimestriel.
EN: Yearly per-country totals for the €10,000 threshold, ledger of
    OSS-taxed sales and quarterly report.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field


class OssThreshold(BaseModel):
    """Cumul des ventes UE d'une boutique vers un pays pour une année.

    FR: Créé à la première vente vers ce pays dans l'année, puis mis à jour
        de façon additive. ``threshold_date`` est fixée au premier
        franchissement et n'est jamais modifiée ensuite.
    EN: Created on the first sale to that country in the year, then updated
        additively. ``threshold_date`` is set on first crossing and never
        changed afterwards.
    """

    shop: str
    year: int
    country_code: str = Field(..., min_length=2, max_length=2)
    total_sales_ht: Decimal = Decimal("0")
    total_sales_ttc: Decimal = Decimal("0")
    order_count: int = Field(default=0, ge=0)
    threshold_reached: bool = False
    threshold_date: datetime | None = None
    last_updated: datetime | None = None


class ThresholdStatus(BaseModel):
    """État du seuil OSS avant une vente / OSS threshold state before a sale."""

    threshold_reached: bool
    current_total: Decimal
    threshold_amount: Decimal
    remaining_amount: Decimal


class ThresholdWarning(BaseModel):
    """Progression d'un pays vers le seuil OSS / Country progress to threshold."""

    country: str
    total_sales: Decimal
    percentage: Decimal
    threshold_reached: bool


class EuSalesOverview(BaseModel):
    """Ventes UE cumulées d'une boutique pour une année."""

    total_sales: Decimal
    by_country: dict[str, Decimal]
    threshold_reached: bool


class OssSale(BaseModel):
    """Vente taxée sous le régime OSS.

    FR: Enregistrement dénormalisé, horodaté par période, jamais modifié.
        Source du rapport trimestriel.
    EN: Denormalized, period-stamped record, never modified. Source of the
        quarterly report.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    shop: str
    year: int
    quarter: int = Field(..., ge=1, le=4)
    month: int = Field(..., ge=1, le=12)
    invoice_id: str
    invoice_number: str
    order_id: str
    customer_country: str = Field(..., min_length=2, max_length=2)
    base_ht: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_ttc: Decimal
    sale_date: datetime = Field(default_factory=lambda: datetime.now(UTC))


class OssReportEntry(BaseModel):
    """Ligne de détail du rapport OSS / OSS report detail row."""

    order_id: str
    invoice_number: str
    date: date
    country: str
    base_ht: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_ttc: Decimal


class CountrySummary(BaseModel):
    """Totaux d'un pays sur la période / Per-country totals for the period."""

    total_ht: Decimal = Decimal("0")
    total_tva: Decimal = Decimal("0")
    total_ttc: Decimal = Decimal("0")
    order_count: int = 0


class ReportPeriod(BaseModel):
    """Trimestre couvert par un rapport / Quarter covered by a report."""

    year: int
    quarter: int = Field(..., ge=1, le=4)


class OssReport(BaseModel):
    """Rapport OSS trimestriel.

    FR: Détail des ventes OSS et synthèse par pays. Les montants ne sont
        arrondis qu'à l'export.
    EN: OSS sales detail and per-country summary. Amounts are only
        rounded on export.
    """

    period: ReportPeriod
    entries: list[OssReportEntry]
    summary: dict[str, CountrySummary]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_total_ht(self) -> Decimal:
        """Total HT tous pays / Grand total excl. tax."""
        return sum((s.total_ht for s in self.summary.values()), Decimal("0"))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_total_tva(self) -> Decimal:
        """Total TVA tous pays / Grand total VAT."""
        return sum((s.total_tva for s in self.summary.values()), Decimal("0"))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_total_ttc(self) -> Decimal:
        """Total TTC tous pays / Grand total incl. tax."""
        return sum((s.total_ttc for s in self.summary.values()), Decimal("0"))
