"""Domain exceptions raised by the repository, tasks and API layer."""

from __future__ import annotations


class BrandlensError(Exception):
    """Base class for all brandlens errors."""


class NotFoundError(BrandlensError):
    """Entity is absent or belongs to another tenant."""


class ProjectNotFoundError(NotFoundError):
    def __init__(self, ref: str = "") -> None:
        super().__init__("Project not found" + (f": {ref}" if ref else ""))


class TopicNotFoundError(NotFoundError):
    def __init__(self, ref: str = "") -> None:
        super().__init__("Topic not found" + (f": {ref}" if ref else ""))


class QueryNotFoundError(NotFoundError):
    def __init__(self, ref: str = "") -> None:
        super().__init__("Query not found" + (f": {ref}" if ref else ""))


class AuthenticationError(BrandlensError):
    """No valid session, or bad credentials."""


class AuthorizationError(BrandlensError):
    """Session user has no membership row for the target project."""


class GenerationError(BrandlensError):
    """LLM output could not be decoded into the expected shape."""


class AnalysisTriggerError(BrandlensError):
    """The external analysis webhook rejected or failed the request."""
