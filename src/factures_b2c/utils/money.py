"""Utilitaires pour les montants monétaires."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_amount(value: Decimal) -> Decimal:
    """Arrondit un montant au centime, demi vers le haut.

    Args:
        value: Montant à arrondir.

    Returns:
        Le montant à 2 décimales (``1.005`` donne ``1.01``).
    """
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Formate un montant avec exactement 2 décimales."""
    return str(round_amount(value))
