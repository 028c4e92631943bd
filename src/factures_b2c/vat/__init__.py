"""Calcul de la TVA selon le régime applicable."""

from factures_b2c.vat.calculator import VatCalculator, calculate_line

__all__ = ["VatCalculator", "calculate_line"]
