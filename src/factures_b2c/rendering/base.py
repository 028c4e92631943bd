"""Interface abstraite pour le rendu des factures (PDF, HTML).

FR: Le moteur ne produit pas de document : un moteur de rendu externe
    reçoit la facture émise et retourne l'emplacement du document.
EN: The engine does not produce documents: an external renderer takes
    the issued invoice and returns where the document was stored.
"""

from abc import ABC, abstractmethod

from factures_b2c.models.enums import PdfTheme
from factures_b2c.models.invoice import Invoice


class RenderResult:
    """Résultat du rendu d'une facture.

    FR: Chemin local et/ou URL publique du document produit.
    EN: Local path and/or public URL of the produced document.
    """

    def __init__(self, path: str | None = None, url: str | None = None) -> None:
        self.path = path
        self.url = url


class BaseRenderer(ABC):
    """Classe de base abstraite pour les moteurs de rendu de factures."""

    @abstractmethod
    def render(self, invoice: Invoice, theme: PdfTheme) -> RenderResult:
        """Produit le document de la facture.

        Args:
            invoice: La facture émise, lignes comprises.
            theme: Thème de présentation.

        Returns:
            RenderResult indiquant où le document a été enregistré.
        """
        ...
