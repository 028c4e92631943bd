"""Tests du rapport OSS trimestriel."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from factures_b2c.models.oss import OssSale
from factures_b2c.oss.report import OssReporter
from factures_b2c.storage.memory import MemoryStorage
from tests.conftest import SHOP


def _sale(
    order_id: str,
    country: str,
    sale_date: datetime,
    base_ht: str,
    rate: str,
    tax: str,
    ttc: str,
) -> OssSale:
    return OssSale(
        shop=SHOP,
        year=sale_date.year,
        quarter=(sale_date.month - 1) // 3 + 1,
        month=sale_date.month,
        invoice_id=f"inv-{order_id}",
        invoice_number=f"FAC-{order_id}",
        order_id=order_id,
        customer_country=country,
        base_ht=Decimal(base_ht),
        tax_rate=Decimal(rate),
        tax_amount=Decimal(tax),
        total_ttc=Decimal(ttc),
        sale_date=sale_date,
    )


@pytest.fixture
def reporter(storage: MemoryStorage) -> OssReporter:
    """Rapport sur trois ventes OSS (deux pays) au deuxième trimestre 2025."""
    storage.create_oss_sale(
        _sale("1003", "IT", datetime(2025, 6, 2, tzinfo=UTC), "50", "22.0", "11.00", "61.00")
    )
    storage.create_oss_sale(
        _sale("1001", "DE", datetime(2025, 4, 10, tzinfo=UTC), "100", "19.0", "19.00", "119.00")
    )
    storage.create_oss_sale(
        _sale("1002", "DE", datetime(2025, 5, 20, tzinfo=UTC), "200", "19.0", "38.00", "238.00")
    )
    # Hors période
    storage.create_oss_sale(
        _sale("0999", "DE", datetime(2025, 3, 30, tzinfo=UTC), "999", "19.0", "189.81", "1188.81")
    )
    return OssReporter(storage)


class TestGenerateReport:
    """Tests de construction du rapport."""

    def test_entries_sorted_by_date(self, reporter: OssReporter) -> None:
        report = reporter.generate_report(SHOP, 2025, 2)
        assert [e.order_id for e in report.entries] == ["1001", "1002", "1003"]
        assert report.entries[0].date == date(2025, 4, 10)
        assert report.entries[0].invoice_number == "FAC-1001"

    def test_summary_by_country(self, reporter: OssReporter) -> None:
        report = reporter.generate_report(SHOP, 2025, 2)
        assert list(report.summary) == ["DE", "IT"]
        de = report.summary["DE"]
        assert de.order_count == 2
        assert de.total_ht == Decimal("300")
        assert de.total_tva == Decimal("57.00")
        assert de.total_ttc == Decimal("357.00")

    def test_grand_totals(self, reporter: OssReporter) -> None:
        report = reporter.generate_report(SHOP, 2025, 2)
        assert report.grand_total_ht == Decimal("350")
        assert report.grand_total_tva == Decimal("68.00")
        assert report.grand_total_ttc == Decimal("418.00")

    def test_empty_quarter(self, reporter: OssReporter) -> None:
        report = reporter.generate_report(SHOP, 2025, 4)
        assert report.entries == []
        assert report.summary == {}
        assert report.grand_total_ttc == Decimal("0")

    @pytest.mark.parametrize("quarter", [0, 5, -1])
    def test_invalid_quarter(self, reporter: OssReporter, quarter: int) -> None:
        with pytest.raises(ValueError, match="Trimestre invalide"):
            reporter.generate_report(SHOP, 2025, quarter)

    def test_json_dump_includes_grand_totals(self, reporter: OssReporter) -> None:
        data = reporter.generate_report(SHOP, 2025, 2).model_dump(mode="json")
        assert data["period"] == {"year": 2025, "quarter": 2}
        assert "grand_total_ttc" in data


class TestExportToCsv:
    """Tests de l'export CSV."""

    def test_layout(self, reporter: OssReporter) -> None:
        csv_text = OssReporter.export_to_csv(reporter.generate_report(SHOP, 2025, 2))
        assert csv_text.splitlines() == [
            "OSS Report,Q2 2025",
            "",
            "Order ID,Invoice Number,Date,Country,Base HT (€),"
            "Tax Rate (%),Tax Amount (€),Total TTC (€)",
            "1001,FAC-1001,2025-04-10,DE,100.00,19.00,19.00,119.00",
            "1002,FAC-1002,2025-05-20,DE,200.00,19.00,38.00,238.00",
            "1003,FAC-1003,2025-06-02,IT,50.00,22.00,11.00,61.00",
            "",
            "Summary by Country",
            "Country,Order Count,Total HT (€),Total VAT (€),Total TTC (€)",
            "DE,2,300.00,57.00,357.00",
            "IT,1,50.00,11.00,61.00",
            "",
            "GRAND TOTAL,,350.00,68.00,418.00",
        ]

    def test_empty_report(self, reporter: OssReporter) -> None:
        csv_text = OssReporter.export_to_csv(reporter.generate_report(SHOP, 2025, 4))
        assert csv_text.endswith("GRAND TOTAL,,0.00,0.00,0.00\n")
