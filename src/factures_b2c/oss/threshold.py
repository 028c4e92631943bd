"""Suivi du seuil OSS de 10 000 € sur les ventes à distance UE.

FR: Maintient, par boutique, année et pays de destination, le cumul des
    ventes HT/TTC et le nombre de commandes. Le seuil est évalué sur le
    cumul TTC. La décision de régime pour une vente se fait toujours sur
    l'état *avant* cette vente : la vente qui franchit le seuil reste
    taxée au taux français.
EN: Maintains per shop, year and destination country the cumulative
    sales and order count. The threshold is evaluated on the TTC total.
    The regime decision for a sale always uses the state *before* that
    sale: the crossing sale itself stays at the French rate.

Portée / Scope:
    ``per_country`` compare le cumul du seul pays de destination au
    seuil. ``eu_wide`` compare la somme de tous les pays UE étrangers.
    Dans les deux cas les cumuls restent enregistrés pays par pays.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal

from factures_b2c.models.enums import ThresholdScope
from factures_b2c.models.oss import (
    EuSalesOverview,
    OssThreshold,
    ThresholdStatus,
    ThresholdWarning,
)
from factures_b2c.storage.base import BaseStorage
from factures_b2c.tax.rates import OSS_THRESHOLD_EUR, is_eu_foreign

logger = logging.getLogger(__name__)


class OssThresholdTracker:
    """Suivi des cumuls de ventes UE par pays et du seuil OSS.

    Args:
        storage: Backend de stockage des cumuls.
        threshold: Montant du seuil en euros (défaut : 10 000).
        scope: Portée du seuil (défaut : par pays).
    """

    def __init__(
        self,
        storage: BaseStorage,
        threshold: Decimal = OSS_THRESHOLD_EUR,
        scope: ThresholdScope = ThresholdScope.PER_COUNTRY,
    ) -> None:
        self._storage = storage
        self.threshold = threshold
        self.scope = ThresholdScope(scope)

    def check_threshold(
        self,
        shop: str,
        country_code: str,
        year: int | None = None,
    ) -> ThresholdStatus:
        """Retourne l'état du seuil pour une vente vers ``country_code``.

        FR: Pour la France et les pays hors UE, retourne « non atteint »
            sans accéder au stockage. Sinon crée le cumul à zéro s'il
            n'existe pas encore.
        EN: For France and non-EU countries, returns "not reached"
            without touching storage. Otherwise creates a zeroed row when
            missing.
        """
        country_code = country_code.upper()
        if not is_eu_foreign(country_code):
            return ThresholdStatus(
                threshold_reached=False,
                current_total=Decimal("0"),
                threshold_amount=self.threshold,
                remaining_amount=self.threshold,
            )

        year = year or datetime.now(UTC).year
        row = self._storage.get_oss_threshold(shop, year, country_code)
        if row is None:
            row = self._storage.upsert_oss_threshold(shop, year, country_code, {})

        if self.scope == ThresholdScope.EU_WIDE:
            current_total = sum(
                (r.total_sales_ttc for r in self._storage.list_oss_thresholds(shop, year)),
                Decimal("0"),
            )
            reached = current_total >= self.threshold
        else:
            current_total = row.total_sales_ttc
            reached = row.threshold_reached

        return ThresholdStatus(
            threshold_reached=reached,
            current_total=current_total,
            threshold_amount=self.threshold,
            remaining_amount=max(Decimal("0"), self.threshold - current_total),
        )

    def record_sale(
        self,
        shop: str,
        country_code: str,
        total_ht: Decimal,
        total_ttc: Decimal,
        year: int | None = None,
        at: datetime | None = None,
    ) -> OssThreshold | None:
        """Ajoute une vente au cumul du pays de destination.

        FR: Sans effet pour la France et les pays hors UE. La mise à jour
            est atomique côté stockage ; ``threshold_date`` n'est fixée
            qu'au premier franchissement.
        EN: No-op for France and non-EU countries. The update is atomic
            in storage; ``threshold_date`` is only set on first crossing.

        Returns:
            Le cumul mis à jour, ou None si le pays n'est pas concerné.
        """
        country_code = country_code.upper()
        if not is_eu_foreign(country_code):
            return None

        at = at or datetime.now(UTC)
        year = year or at.year

        def _apply(row: OssThreshold) -> OssThreshold:
            total_sales_ttc = row.total_sales_ttc + total_ttc
            reached = total_sales_ttc >= self.threshold
            update: dict[str, object] = {
                "total_sales_ht": row.total_sales_ht + total_ht,
                "total_sales_ttc": total_sales_ttc,
                "order_count": row.order_count + 1,
                "threshold_reached": row.threshold_reached or reached,
            }
            if reached and not row.threshold_reached:
                update["threshold_date"] = at
                logger.info(
                    "Seuil OSS franchi : boutique %s, pays %s, année %s (%s € TTC)",
                    shop,
                    country_code,
                    year,
                    total_sales_ttc,
                )
            return row.model_copy(update=update)

        return self._storage.update_oss_threshold(shop, year, country_code, _apply)

    def threshold_warnings(
        self,
        shop: str,
        year: int | None = None,
    ) -> list[ThresholdWarning]:
        """Progression de chaque pays vers le seuil, par ventes décroissantes."""
        year = year or datetime.now(UTC).year
        rows = sorted(
            self._storage.list_oss_thresholds(shop, year),
            key=lambda r: r.total_sales_ttc,
            reverse=True,
        )
        return [
            ThresholdWarning(
                country=row.country_code,
                total_sales=row.total_sales_ttc,
                percentage=(row.total_sales_ttc / self.threshold * 100).quantize(Decimal("0.01")),
                threshold_reached=row.threshold_reached,
            )
            for row in rows
        ]

    def total_eu_sales(self, shop: str, year: int | None = None) -> EuSalesOverview:
        """Cumul des ventes UE étrangères de l'année, total et par pays."""
        year = year or datetime.now(UTC).year
        rows = self._storage.list_oss_thresholds(shop, year)
        by_country = {row.country_code: row.total_sales_ttc for row in rows}
        total = sum(by_country.values(), Decimal("0"))
        reached = any(row.threshold_reached for row in rows)
        if self.scope == ThresholdScope.EU_WIDE:
            reached = reached or total >= self.threshold
        return EuSalesOverview(
            total_sales=total,
            by_country=by_country,
            threshold_reached=reached,
        )
