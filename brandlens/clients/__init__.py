"""Clients for external services."""

from brandlens.clients.analysis import AnalysisTriggerResult, AnalysisWebhookClient

__all__ = ["AnalysisTriggerResult", "AnalysisWebhookClient"]
