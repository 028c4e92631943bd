"""Rapport OSS trimestriel.

FR: Agrège le registre des ventes OSS d'un trimestre en détail et en
    synthèse par pays, et l'exporte au format CSV pour la déclaration
    trimestrielle au guichet unique.
EN: Aggregates a quarter's OSS sales ledger into detail rows and a
    per-country summary, and exports it as CSV for the quarterly OSS
    return.
"""

import csv
import io

from factures_b2c.models.oss import (
    CountrySummary,
    OssReport,
    OssReportEntry,
    ReportPeriod,
)
from factures_b2c.storage.base import BaseStorage
from factures_b2c.utils.money import format_amount

DETAIL_HEADER = [
    "Order ID",
    "Invoice Number",
    "Date",
    "Country",
    "Base HT (€)",
    "Tax Rate (%)",
    "Tax Amount (€)",
    "Total TTC (€)",
]
SUMMARY_HEADER = ["Country", "Order Count", "Total HT (€)", "Total VAT (€)", "Total TTC (€)"]


class OssReporter:
    """Générateur de rapports OSS trimestriels.

    Args:
        storage: Backend de stockage du registre des ventes OSS.
    """

    def __init__(self, storage: BaseStorage) -> None:
        self._storage = storage

    def generate_report(self, shop: str, year: int, quarter: int) -> OssReport:
        """Construit le rapport OSS d'un trimestre.

        FR: Les lignes de détail sont triées par date de vente ; la
            synthèse par pays suit l'ordre de première apparition.
        EN: Detail rows are sorted by sale date; the per-country summary
            follows first-seen order.

        Raises:
            ValueError: Si le trimestre n'est pas compris entre 1 et 4.
        """
        if not 1 <= quarter <= 4:
            msg = f"Trimestre invalide : {quarter} (1 à 4 attendu)"
            raise ValueError(msg)

        sales = sorted(
            self._storage.list_oss_sales(shop, year, quarter),
            key=lambda s: s.sale_date,
        )
        entries = [
            OssReportEntry(
                order_id=sale.order_id,
                invoice_number=sale.invoice_number,
                date=sale.sale_date.date(),
                country=sale.customer_country,
                base_ht=sale.base_ht,
                tax_rate=sale.tax_rate,
                tax_amount=sale.tax_amount,
                total_ttc=sale.total_ttc,
            )
            for sale in sales
        ]

        summary: dict[str, CountrySummary] = {}
        for entry in entries:
            totals = summary.setdefault(entry.country, CountrySummary())
            totals.total_ht += entry.base_ht
            totals.total_tva += entry.tax_amount
            totals.total_ttc += entry.total_ttc
            totals.order_count += 1

        return OssReport(
            period=ReportPeriod(year=year, quarter=quarter),
            entries=entries,
            summary=summary,
        )

    @staticmethod
    def export_to_csv(report: OssReport) -> str:
        """Exporte le rapport au format CSV (montants à 2 décimales)."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        writer.writerow(["OSS Report", f"Q{report.period.quarter} {report.period.year}"])
        writer.writerow([])

        writer.writerow(DETAIL_HEADER)
        for entry in report.entries:
            writer.writerow(
                [
                    entry.order_id,
                    entry.invoice_number,
                    entry.date.isoformat(),
                    entry.country,
                    format_amount(entry.base_ht),
                    format_amount(entry.tax_rate),
                    format_amount(entry.tax_amount),
                    format_amount(entry.total_ttc),
                ]
            )
        writer.writerow([])

        writer.writerow(["Summary by Country"])
        writer.writerow(SUMMARY_HEADER)
        for country, totals in report.summary.items():
            writer.writerow(
                [
                    country,
                    str(totals.order_count),
                    format_amount(totals.total_ht),
                    format_amount(totals.total_tva),
                    format_amount(totals.total_ttc),
                ]
            )
        writer.writerow([])

        writer.writerow(
            [
                "GRAND TOTAL",
                "",
                format_amount(report.grand_total_ht),
                format_amount(report.grand_total_tva),
                format_amount(report.grand_total_ttc),
            ]
        )
        return buffer.getvalue()
