"""SQLAlchemy ORM models mapping to the brandlens database tables."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow_str() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


# --- Auth ---


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (UniqueConstraint("email", name="users_email_key"),)


class AccountRow(Base):
    """Credential store. provider_id='credential' rows hold a password hash."""

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    provider_id: Mapped[str] = mapped_column(Text, nullable=False)
    account_id: Mapped[str] = mapped_column(Text, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        UniqueConstraint("provider_id", "account_id", name="accounts_provider_account_key"),
    )


class SessionRow(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[str] = mapped_column(Text, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (UniqueConstraint("token", name="sessions_token_key"),)


# --- Tenancy ---


class ProjectRow(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    url: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    region: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    sector: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    language: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    last_analysis: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        UniqueConstraint("slug", name="projects_slug_key"),
        Index("projects_status_idx", "status"),
    )


class MembershipRow(Base):
    __tablename__ = "projects_users"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(Text, nullable=False, default="member")
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="projects_users_project_id_user_id_key"),
        Index("projects_users_project_id_idx", "project_id"),
        Index("projects_users_user_id_idx", "user_id"),
    )


# --- Research configuration ---


class TopicRow(Base):
    __tablename__ = "topics"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (Index("topics_project_id_idx", "project_id"),)


class QueryRow(Base):
    __tablename__ = "queries"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    topic_id: Mapped[str] = mapped_column(
        Text, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    country: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    query_type: Mapped[str] = mapped_column(Text, nullable=False, default="sector")
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)
    updated_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        CheckConstraint("query_type IN ('sector', 'product')", name="ck_queries_query_type"),
        Index("queries_project_id_idx", "project_id"),
        Index("queries_topic_id_idx", "topic_id"),
    )


# --- Results (written by the external analysis run) ---


class ModelRow(Base):
    __tablename__ = "models"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    model: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    color: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)


class ProjectModelRow(Base):
    __tablename__ = "project_models"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    model_id: Mapped[str] = mapped_column(
        Text, ForeignKey("models.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("project_id", "model_id", name="project_models_project_id_model_id_key"),
    )


class ExecutionRow(Base):
    __tablename__ = "executions"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    executed_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (Index("executions_project_id_idx", "project_id", "executed_at"),)


class QueryExecutionRow(Base):
    __tablename__ = "query_executions"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    execution_id: Mapped[str] = mapped_column(
        Text, ForeignKey("executions.id", ondelete="CASCADE"), nullable=False
    )
    query_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("queries.id", ondelete="CASCADE"), nullable=True
    )
    model_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("models.id", ondelete="CASCADE"), nullable=True
    )
    response: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    __table_args__ = (Index("query_executions_execution_id_idx", "execution_id"),)


class DomainRow(Base):
    __tablename__ = "domains"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="domains_project_name_key"),
        Index("domains_category_idx", "category"),
    )


class SourceRow(Base):
    __tablename__ = "sources"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    domain_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("domains.id", ondelete="CASCADE"), nullable=True
    )
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    model_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("models.id"), nullable=True, default=None
    )
    query_execution_id: Mapped[str | None] = mapped_column(
        Text, ForeignKey("query_executions.id", ondelete="CASCADE"), nullable=True
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    query_text: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    query_type: Mapped[str | None] = mapped_column(Text, nullable=True, default="sector")

    __table_args__ = (
        UniqueConstraint("query_execution_id", "url", name="sources_exec_url_key"),
        CheckConstraint(
            "query_type IS NULL OR query_type IN ('sector', 'product')",
            name="check_query_type",
        ),
        Index("idx_sources_query_type", "query_type"),
        Index("sources_project_id_idx", "project_id"),
    )


class CompetitorRow(Base):
    __tablename__ = "competitors"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    project_id: Mapped[str] = mapped_column(
        Text, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    alternative_names: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    mention_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_mention_date: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    __table_args__ = (UniqueConstraint("project_id", "name", name="competitors_project_name_key"),)


class MentionRow(Base):
    __tablename__ = "mentions"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    source_id: Mapped[str] = mapped_column(
        Text, ForeignKey("sources.id", ondelete="CASCADE"), nullable=False
    )
    competitor_id: Mapped[str] = mapped_column(
        Text, ForeignKey("competitors.id", ondelete="CASCADE"), nullable=False
    )
    mentioned_at: Mapped[str] = mapped_column(Text, nullable=False, default=_utcnow_str)

    __table_args__ = (
        UniqueConstraint("source_id", "competitor_id", name="mentions_source_id_competitor_id_key"),
    )
