"""Database package: engine, ORM rows, and the repository facade."""

from brandlens.db.engine import create_db_engine, create_session_factory, database_url
from brandlens.db.facade import CREDENTIAL_PROVIDER, Database
from brandlens.db.orm import (
    AccountRow,
    Base,
    CompetitorRow,
    DomainRow,
    ExecutionRow,
    MembershipRow,
    MentionRow,
    ModelRow,
    ProjectModelRow,
    ProjectRow,
    QueryExecutionRow,
    QueryRow,
    SessionRow,
    SourceRow,
    TopicRow,
    UserRow,
)

__all__ = [
    "CREDENTIAL_PROVIDER",
    "AccountRow",
    "Base",
    "CompetitorRow",
    "Database",
    "DomainRow",
    "ExecutionRow",
    "MembershipRow",
    "MentionRow",
    "ModelRow",
    "ProjectModelRow",
    "ProjectRow",
    "QueryExecutionRow",
    "QueryRow",
    "SessionRow",
    "SourceRow",
    "TopicRow",
    "UserRow",
    "create_db_engine",
    "create_session_factory",
    "database_url",
]
