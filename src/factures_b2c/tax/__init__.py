"""Tables de taux de TVA et de juridictions."""

from factures_b2c.tax.rates import (
    DEFAULT_VAT_RATE,
    EU_COUNTRIES,
    EU_VAT_RATES,
    FRENCH_VAT_RATES,
    HOME_COUNTRY,
    OSS_THRESHOLD_EUR,
    is_eu_foreign,
    is_eu_member,
    quarter_from_month,
    standard_vat_rate,
)

__all__ = [
    "DEFAULT_VAT_RATE",
    "EU_COUNTRIES",
    "EU_VAT_RATES",
    "FRENCH_VAT_RATES",
    "HOME_COUNTRY",
    "OSS_THRESHOLD_EUR",
    "is_eu_foreign",
    "is_eu_member",
    "quarter_from_month",
    "standard_vat_rate",
]
