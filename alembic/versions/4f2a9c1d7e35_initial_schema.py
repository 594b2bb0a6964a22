"""initial schema

Revision ID: 4f2a9c1d7e35
Revises:
Create Date: 2026-10-19 09:12:41.208113

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e35"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:  # type: ignore[type-arg]
    return [
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("updated_at", sa.Text, nullable=False),
    ]


def _fk(
    name: str, target: str, nullable: bool = False, cascade: bool = True
) -> sa.Column:  # type: ignore[type-arg]
    return sa.Column(
        name,
        sa.Text,
        sa.ForeignKey(target, ondelete="CASCADE" if cascade else None),
        nullable=nullable,
    )


def upgrade() -> None:
    """Create all brandlens tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False, server_default=""),
        sa.Column("email_verified", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("image", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_table(
        "accounts",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("user_id", "users.id"),
        sa.Column("provider_id", sa.Text, nullable=False),
        sa.Column("account_id", sa.Text, nullable=False),
        sa.Column("password_hash", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("provider_id", "account_id", name="accounts_provider_account_key"),
    )
    op.create_table(
        "sessions",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("user_id", "users.id"),
        sa.Column("token", sa.Text, nullable=False),
        sa.Column("expires_at", sa.Text, nullable=False),
        sa.Column("ip_address", sa.Text, nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("token", name="sessions_token_key"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("slug", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("url", sa.Text, nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("region", sa.Text, nullable=True),
        sa.Column("sector", sa.Text, nullable=True),
        sa.Column("language", sa.Text, nullable=True),
        sa.Column("last_analysis", sa.Text, nullable=True),
        sa.Column("logo", sa.Text, nullable=True),
        _fk("user_id", "users.id"),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="projects_slug_key"),
    )
    op.create_index("projects_status_idx", "projects", ["status"])

    op.create_table(
        "projects_users",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("project_id", "projects.id"),
        _fk("user_id", "users.id"),
        sa.Column("role", sa.Text, nullable=False, server_default="member"),
        *_timestamps(),
        sa.UniqueConstraint(
            "project_id", "user_id", name="projects_users_project_id_user_id_key"
        ),
    )
    op.create_index("projects_users_project_id_idx", "projects_users", ["project_id"])
    op.create_index("projects_users_user_id_idx", "projects_users", ["user_id"])

    op.create_table(
        "topics",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("project_id", "projects.id"),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("topics_project_id_idx", "topics", ["project_id"])

    op.create_table(
        "queries",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("topic_id", "topics.id"),
        _fk("project_id", "projects.id"),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("country", sa.Text, nullable=True),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("query_type", sa.Text, nullable=False, server_default="sector"),
        *_timestamps(),
        sa.CheckConstraint("query_type IN ('sector', 'product')", name="ck_queries_query_type"),
    )
    op.create_index("queries_project_id_idx", "queries", ["project_id"])
    op.create_index("queries_topic_id_idx", "queries", ["topic_id"])

    op.create_table(
        "models",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("model", sa.Text, nullable=True),
        sa.Column("color", sa.Text, nullable=True),
    )
    op.create_table(
        "project_models",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("project_id", "projects.id"),
        _fk("model_id", "models.id"),
        sa.UniqueConstraint(
            "project_id", "model_id", name="project_models_project_id_model_id_key"
        ),
    )

    op.create_table(
        "executions",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("project_id", "projects.id"),
        sa.Column("executed_at", sa.Text, nullable=False),
    )
    op.create_index("executions_project_id_idx", "executions", ["project_id", "executed_at"])

    op.create_table(
        "query_executions",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("execution_id", "executions.id"),
        _fk("query_id", "queries.id", nullable=True),
        _fk("model_id", "models.id", nullable=True),
        sa.Column("response", sa.Text, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
    )
    op.create_index("query_executions_execution_id_idx", "query_executions", ["execution_id"])

    op.create_table(
        "domains",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("project_id", "projects.id"),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("category", sa.Text, nullable=True),
        sa.UniqueConstraint("project_id", "name", name="domains_project_name_key"),
    )
    op.create_index("domains_category_idx", "domains", ["category"])

    op.create_table(
        "sources",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("domain_id", "domains.id", nullable=True),
        _fk("project_id", "projects.id"),
        _fk("model_id", "models.id", nullable=True, cascade=False),
        _fk("query_execution_id", "query_executions.id", nullable=True),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=True),
        sa.Column("query_text", sa.Text, nullable=True),
        sa.Column("query_type", sa.Text, nullable=True, server_default="sector"),
        sa.UniqueConstraint("query_execution_id", "url", name="sources_exec_url_key"),
        sa.CheckConstraint(
            "query_type IS NULL OR query_type IN ('sector', 'product')",
            name="check_query_type",
        ),
    )
    op.create_index("idx_sources_query_type", "sources", ["query_type"])
    op.create_index("sources_project_id_idx", "sources", ["project_id"])

    op.create_table(
        "competitors",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("project_id", "projects.id"),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("alternative_names", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("mention_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_mention_date", sa.Text, nullable=True),
        sa.UniqueConstraint("project_id", "name", name="competitors_project_name_key"),
    )

    op.create_table(
        "mentions",
        sa.Column("id", sa.Text, primary_key=True),
        _fk("source_id", "sources.id"),
        _fk("competitor_id", "competitors.id"),
        sa.Column("mentioned_at", sa.Text, nullable=False),
        sa.UniqueConstraint(
            "source_id", "competitor_id", name="mentions_source_id_competitor_id_key"
        ),
    )


def downgrade() -> None:
    """Drop all brandlens tables."""
    for table in (
        "mentions",
        "competitors",
        "sources",
        "domains",
        "query_executions",
        "executions",
        "project_models",
        "models",
        "queries",
        "topics",
        "projects_users",
        "projects",
        "sessions",
        "accounts",
        "users",
    ):
        op.drop_table(table)
