"""Calcul de la TVA d'une facture B2C.

FR: Trois régimes mutuellement exclusifs, évalués dans l'ordre :

    1. Franchise en base (art. 293 B du CGI) : aucune TVA sur aucune
       ligne, les taux imposés sont ignorés.
    2. OSS : client dans un autre État membre, vendeur inscrit à l'OSS
       et seuil déjà atteint *avant* la vente ; taux normal du pays de
       destination.
    3. Domestique : taux normal français (20 %).

    Un taux imposé sur une ligne remplace le taux du régime (sauf en
    franchise). Les montants sont arrondis au centime par ligne
    (arrondi commercial, demi vers le haut) et les totaux sont la somme
    des montants de ligne arrondis.
EN: Three mutually exclusive regimes evaluated in order: franchise,
    OSS, domestic. A per-line rate overrides the regime rate except
    under franchise. Amounts are rounded per line (half-up) and totals
    are sums of rounded line amounts.
"""

from collections.abc import Sequence
from decimal import Decimal

from factures_b2c.errors import ConfigurationError
from factures_b2c.models.enums import TaxRegime
from factures_b2c.models.invoice import LineCalculation, VatLineInput, VatResult
from factures_b2c.models.settings import ShopSettings
from factures_b2c.oss.threshold import OssThresholdTracker
from factures_b2c.storage.base import BaseStorage
from factures_b2c.tax.rates import DEFAULT_VAT_RATE, is_eu_foreign, standard_vat_rate
from factures_b2c.utils.money import round_amount

ZERO = Decimal("0")


def calculate_line(index: int, line: VatLineInput, rate: Decimal) -> LineCalculation:
    """Calcule les montants arrondis d'une ligne au taux donné."""
    total_ht = round_amount(line.quantity * line.unit_price_ht)
    tax_amount = round_amount(total_ht * rate / 100)
    return LineCalculation(
        line_index=index,
        quantity=line.quantity,
        unit_price_ht=line.unit_price_ht,
        tax_rate=rate,
        tax_amount=tax_amount,
        total_ht=total_ht,
        total_ttc=total_ht + tax_amount,
    )


class VatCalculator:
    """Détermine le régime de TVA et calcule les montants d'une facture.

    Args:
        storage: Backend de stockage (paramètres de boutique).
        tracker: Suivi du seuil OSS (défaut : suivi par pays sur ``storage``).
    """

    def __init__(
        self,
        storage: BaseStorage,
        tracker: OssThresholdTracker | None = None,
    ) -> None:
        self._storage = storage
        self._tracker = tracker or OssThresholdTracker(storage)

    def determine_regime(
        self,
        settings: ShopSettings,
        customer_country: str,
        year: int | None = None,
    ) -> tuple[TaxRegime, Decimal]:
        """Retourne le régime applicable et son taux.

        FR: Le seuil est consulté uniquement pour un client UE étranger
            d'un vendeur inscrit à l'OSS.
        EN: The threshold is only checked for an EU-foreign customer of
            an OSS-registered seller.
        """
        if settings.franchise_en_base:
            return TaxRegime.FRANCHISE, ZERO

        country = customer_country.upper()
        if settings.oss_enabled and is_eu_foreign(country):
            status = self._tracker.check_threshold(settings.shop, country, year)
            if status.threshold_reached:
                return TaxRegime.OSS, standard_vat_rate(country)

        return TaxRegime.DOMESTIC, DEFAULT_VAT_RATE

    def calculate(
        self,
        shop: str,
        customer_country: str,
        lines: Sequence[VatLineInput],
        *,
        settings: ShopSettings | None = None,
        year: int | None = None,
    ) -> VatResult:
        """Calcule la TVA d'une facture.

        Args:
            shop: Domaine de la boutique.
            customer_country: Code pays ISO du client.
            lines: Lignes à taxer, dans l'ordre de la commande.
            settings: Paramètres déjà chargés (évite une relecture).
            year: Année de référence du seuil OSS (défaut : année courante).

        Returns:
            Les montants par ligne, les totaux et le régime retenu.

        Raises:
            ConfigurationError: Si la boutique n'a pas de paramètres.
        """
        if settings is None:
            settings = self._storage.get_shop_settings(shop)
        if settings is None:
            msg = f"Paramètres de facturation introuvables pour la boutique : {shop}"
            raise ConfigurationError(msg)

        regime, vat_rate = self.determine_regime(settings, customer_country, year)

        calculations = []
        for index, line in enumerate(lines):
            if regime == TaxRegime.FRANCHISE:
                rate = ZERO
            elif line.tax_rate is not None:
                rate = line.tax_rate
            else:
                rate = vat_rate
            calculations.append(calculate_line(index, line, rate))

        total_ht = sum((c.total_ht for c in calculations), ZERO)
        total_tva = sum((c.tax_amount for c in calculations), ZERO)
        return VatResult(
            total_ht=total_ht,
            total_tva=total_tva,
            total_ttc=total_ht + total_tva,
            oss_applied=regime == TaxRegime.OSS,
            franchise_en_base=regime == TaxRegime.FRANCHISE,
            regime=regime,
            vat_rate=vat_rate,
            line_calculations=calculations,
        )
