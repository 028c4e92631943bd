"""Tables de taux de TVA et de juridictions UE.

FR: Appartenance à l'UE, taux normaux par pays, seuil OSS et trimestres.
    La France est le pays du vendeur : elle est membre de l'UE mais
    jamais « UE étrangère » au sens de l'OSS.
EN: EU membership, standard rates per country, OSS threshold and
    quarters. France is the seller's country: an EU member but never
    "EU-foreign" for OSS purposes.
"""

from decimal import Decimal

HOME_COUNTRY = "FR"

# Membres de l'UE hors France
EU_COUNTRIES: frozenset[str] = frozenset(
    {
        "AT", "BE", "BG", "CY", "CZ", "DE", "DK", "EE", "ES", "FI",
        "GR", "HR", "HU", "IE", "IT", "LT", "LU", "LV", "MT", "NL",
        "PL", "PT", "RO", "SE", "SI", "SK",
    }
)

# Seuil annuel des ventes à distance intracommunautaires (EUR)
OSS_THRESHOLD_EUR = Decimal("10000")

FRENCH_VAT_RATES: dict[str, Decimal] = {
    "standard": Decimal("20.0"),
    "reduced": Decimal("10.0"),
    "super_reduced": Decimal("5.5"),
    "special": Decimal("2.1"),
}

DEFAULT_VAT_RATE = FRENCH_VAT_RATES["standard"]

# Taux normaux par pays membre
EU_VAT_RATES: dict[str, Decimal] = {
    "AT": Decimal("20.0"),
    "BE": Decimal("21.0"),
    "BG": Decimal("20.0"),
    "CY": Decimal("19.0"),
    "CZ": Decimal("21.0"),
    "DE": Decimal("19.0"),
    "DK": Decimal("25.0"),
    "EE": Decimal("22.0"),
    "ES": Decimal("21.0"),
    "FI": Decimal("25.5"),
    "FR": Decimal("20.0"),
    "GR": Decimal("24.0"),
    "HR": Decimal("25.0"),
    "HU": Decimal("27.0"),
    "IE": Decimal("23.0"),
    "IT": Decimal("22.0"),
    "LT": Decimal("21.0"),
    "LU": Decimal("17.0"),
    "LV": Decimal("21.0"),
    "MT": Decimal("18.0"),
    "NL": Decimal("21.0"),
    "PL": Decimal("23.0"),
    "PT": Decimal("23.0"),
    "RO": Decimal("19.0"),
    "SE": Decimal("25.0"),
    "SI": Decimal("22.0"),
    "SK": Decimal("20.0"),
}

def is_eu_member(country_code: str) -> bool:
    """Indique si le pays est membre de l'UE (France incluse)."""
    code = country_code.upper()
    return code in EU_COUNTRIES or code == HOME_COUNTRY


def is_eu_foreign(country_code: str) -> bool:
    """Indique si le pays est un autre État membre que la France.

    FR: Seuls ces pays peuvent relever du régime OSS.
    EN: Only these countries can fall under the OSS regime.
    """
    return country_code.upper() in EU_COUNTRIES


def standard_vat_rate(country_code: str) -> Decimal:
    """Taux normal de TVA du pays, 20 % (taux français) si inconnu."""
    return EU_VAT_RATES.get(country_code.upper(), DEFAULT_VAT_RATE)


def quarter_from_month(month: int) -> int:
    """Trimestre civil (1 à 4) d'un mois (1 à 12)."""
    if not 1 <= month <= 12:
        msg = f"Mois invalide : {month} (1 à 12 attendu)"
        raise ValueError(msg)
    return (month - 1) // 3 + 1
