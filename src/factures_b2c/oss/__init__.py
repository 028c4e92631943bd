"""Guichet unique OSS : suivi du seuil et rapports trimestriels."""

from factures_b2c.oss.report import OssReporter
from factures_b2c.oss.threshold import OssThresholdTracker

__all__ = ["OssReporter", "OssThresholdTracker"]
