"""Intégration Django : stockage ORM, vues et administration."""
