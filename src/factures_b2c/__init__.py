"""factures-b2c : facturation B2C française et guichet unique OSS.

FR: Calcul de la TVA (domestique, OSS, franchise en base), suivi du seuil
    OSS de 10 000 €, numérotation séquentielle des factures et rapports
    OSS trimestriels.
EN: VAT computation (domestic, OSS, franchise), OSS €10,000 threshold
    tracking, sequential invoice numbering and quarterly OSS reports.
"""

__version__ = "0.1.0"
