"""Interface de rendu des documents de facture."""

from factures_b2c.rendering.base import BaseRenderer, RenderResult

__all__ = ["BaseRenderer", "RenderResult"]
