"""API request/response schemas (separate from domain models)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from brandlens.models import Project

# --- Responses ---


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    version: str
    db_connected: bool


class ConfigCheckResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    configured: dict[str, bool]


class UserResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str


class AuthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: UserResponse
    token: str
    expires_at: datetime


class SessionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    authenticated: bool
    user: UserResponse | None = None


class ProjectListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    projects: list[Project]
    total: int


class TriggerResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    task_id: str | None = None


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_id: str
    models: list[str]
    status_code: int


class TaskStatusResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    task_id: str
    status: str
    result: Any = None
    error: str | None = None


# --- Requests ---


class SignupRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=8)
    name: str = ""


class SigninRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    password: str


class PromptRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str = ""


class CompanyCompletionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    websiteUrl: str = ""  # noqa: N815


class SuggestedTopicsRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    websiteUrl: str = ""  # noqa: N815
    name: str | None = None
    country: str | None = None
    language: str | None = None
    sector: str | None = None
    description: str | None = None


class ExistingQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    queryType: str = "sector"  # noqa: N815


class QueryCompletionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    companyName: str = ""  # noqa: N815
    topicName: str = ""  # noqa: N815
    topicDescription: str | None = None  # noqa: N815
    companyDescription: str | None = None  # noqa: N815
    existingQueries: list[ExistingQuery] = Field(default_factory=list)  # noqa: N815


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    models: list[str] | None = None
