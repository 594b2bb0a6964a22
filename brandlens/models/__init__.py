"""Re-exports all domain models."""

from brandlens.models.generation import (
    BootstrapTopic,
    BootstrapTopics,
    CompanyProfile,
    GeneratedQuery,
    GeneratedQueryBatch,
    SuggestedTopic,
    SuggestedTopics,
)
from brandlens.models.project import (
    Membership,
    MembershipRole,
    Project,
    ProjectDetail,
    TopicSummary,
)
from brandlens.models.results import (
    AIModel,
    Competitor,
    Domain,
    Execution,
    Mention,
    QueryExecution,
    Source,
)
from brandlens.models.topic import (
    NewQuery,
    NewTopic,
    Query,
    QueryDetail,
    QueryType,
    Topic,
    TopicDetail,
)
from brandlens.models.user import AuthSession, User

__all__ = [
    "AIModel",
    "AuthSession",
    "BootstrapTopic",
    "BootstrapTopics",
    "CompanyProfile",
    "Competitor",
    "Domain",
    "Execution",
    "GeneratedQuery",
    "GeneratedQueryBatch",
    "Membership",
    "MembershipRole",
    "Mention",
    "NewQuery",
    "NewTopic",
    "Project",
    "ProjectDetail",
    "Query",
    "QueryDetail",
    "QueryExecution",
    "QueryType",
    "Source",
    "SuggestedTopic",
    "SuggestedTopics",
    "Topic",
    "TopicDetail",
    "TopicSummary",
    "User",
]
