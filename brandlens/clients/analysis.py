"""Client for the external analysis automation.

The analysis run (query execution against each model, source and competitor
extraction) happens outside brandlens. This client only starts it by POSTing
to a webhook; the run writes its rows straight into the results tables.
"""

from __future__ import annotations

import httpx
import structlog
from typing_extensions import TypedDict

from brandlens.errors import AnalysisTriggerError

logger = structlog.get_logger()


class AnalysisTriggerResult(TypedDict):
    project_id: str
    models: list[str]
    status_code: int
    body: str


class AnalysisWebhookClient:
    """Posts ``{"project_id", "models"}`` to the configured webhook."""

    def __init__(self, webhook_url: str = "", timeout: float = 30.0) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        return bool(self.webhook_url)

    def trigger(self, project_id: str, models: list[str]) -> AnalysisTriggerResult:
        """Start an analysis run.

        Raises:
            AnalysisTriggerError: webhook not configured, unreachable, or
                answered with a non-2xx status.
        """
        if not self.is_available:
            raise AnalysisTriggerError("Analysis webhook URL is not configured")

        payload = {"project_id": project_id, "models": models}
        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.post(self.webhook_url, json=payload)
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Analysis webhook rejected request",
                project_id=project_id,
                status_code=exc.response.status_code,
            )
            raise AnalysisTriggerError(
                f"Analysis webhook returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Analysis webhook unreachable", project_id=project_id, error=str(exc))
            raise AnalysisTriggerError(f"Analysis webhook request failed: {exc}") from exc

        logger.info("Analysis triggered", project_id=project_id, models=models)
        return {
            "project_id": project_id,
            "models": models,
            "status_code": resp.status_code,
            "body": resp.text,
        }
