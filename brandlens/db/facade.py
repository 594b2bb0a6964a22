"""SQLAlchemy-backed database connection and repository helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, select, text

from brandlens.db.engine import create_db_engine, create_session_factory
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
from brandlens.models import (
    AIModel,
    AuthSession,
    Competitor,
    Domain,
    Execution,
    Membership,
    MembershipRole,
    Mention,
    NewQuery,
    NewTopic,
    Project,
    ProjectDetail,
    Query,
    QueryDetail,
    QueryExecution,
    QueryType,
    Source,
    Topic,
    TopicDetail,
    TopicSummary,
    User,
)

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine
    from sqlalchemy.orm import Session, sessionmaker

CREDENTIAL_PROVIDER = "credential"

_PROJECT_FIELDS = frozenset(
    {"name", "description", "url", "status", "region", "sector", "language", "logo"}
)


class Database:
    """Repository over the brandlens schema.

    Every public method opens its own session and returns frozen domain
    models, never ORM rows.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        self._engine: Engine = create_db_engine(self.db_path)
        self._session_factory: sessionmaker[Session] = create_session_factory(self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def Session(self) -> sessionmaker[Session]:  # noqa: N802
        """Expose the session factory for consumers that need direct access."""
        return self._session_factory

    def init_schema(self) -> None:
        """Create all tables via ORM metadata."""
        Base.metadata.create_all(self._engine)

    def close(self) -> None:
        self._engine.dispose()

    def check_connection(self) -> bool:
        """Verify the database is reachable. Returns True or raises."""
        with self._session_factory() as session:
            session.execute(text("SELECT 1"))
        return True

    # --- Users & credentials ---

    def create_user(self, email: str, name: str, password_hash: str) -> User:
        """Insert a user and its credential account in one transaction.

        Raises ``sqlalchemy.exc.IntegrityError`` when the email is taken.
        """
        with self._session_factory() as session:
            row = UserRow(email=email.lower(), name=name)
            session.add(row)
            session.flush()
            session.add(
                AccountRow(
                    user_id=row.id,
                    provider_id=CREDENTIAL_PROVIDER,
                    account_id=row.id,
                    password_hash=password_hash,
                )
            )
            session.commit()
            return self._row_to_user(row)

    def get_user(self, user_id: str) -> User | None:
        with self._session_factory() as session:
            row = session.get(UserRow, user_id)
            return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> User | None:
        with self._session_factory() as session:
            row = session.scalars(select(UserRow).where(UserRow.email == email.lower())).first()
            return self._row_to_user(row) if row else None

    def get_password_hash(self, user_id: str) -> str | None:
        with self._session_factory() as session:
            stmt = select(AccountRow.password_hash).where(
                AccountRow.user_id == user_id,
                AccountRow.provider_id == CREDENTIAL_PROVIDER,
            )
            return session.scalars(stmt).first()

    # --- Sessions ---

    def create_session(
        self,
        user_id: str,
        token: str,
        expires_at: datetime,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthSession:
        with self._session_factory() as session:
            row = SessionRow(
                user_id=user_id,
                token=token,
                expires_at=_dt_to_str(expires_at),
                ip_address=ip_address,
                user_agent=user_agent,
            )
            session.add(row)
            session.commit()
            return self._row_to_session(row)

    def get_session_by_token(self, token: str) -> AuthSession | None:
        with self._session_factory() as session:
            row = session.scalars(select(SessionRow).where(SessionRow.token == token)).first()
            return self._row_to_session(row) if row else None

    def delete_session(self, token: str) -> bool:
        with self._session_factory() as session:
            result = session.execute(delete(SessionRow).where(SessionRow.token == token))
            session.commit()
            return bool(result.rowcount)  # type: ignore[attr-defined]

    def delete_expired_sessions(self, now: datetime | None = None) -> int:
        cutoff = _dt_to_str(now or datetime.now(UTC))
        with self._session_factory() as session:
            result = session.execute(delete(SessionRow).where(SessionRow.expires_at <= cutoff))
            session.commit()
            return int(result.rowcount)  # type: ignore[attr-defined]

    # --- Projects & memberships ---

    def slug_exists(self, slug: str) -> bool:
        with self._session_factory() as session:
            stmt = select(ProjectRow.id).where(ProjectRow.slug == slug)
            return session.scalars(stmt).first() is not None

    def create_project(
        self,
        *,
        name: str,
        slug: str,
        user_id: str,
        url: str | None = None,
        description: str | None = None,
        region: str | None = None,
        sector: str | None = None,
        language: str | None = None,
        topics: list[NewTopic] | None = None,
    ) -> Project:
        """Create a project, its admin membership and initial topics/queries.

        All rows are written in a single transaction. Raises
        ``sqlalchemy.exc.IntegrityError`` on a slug collision.
        """
        with self._session_factory() as session:
            project = ProjectRow(
                name=name,
                slug=slug,
                user_id=user_id,
                url=url,
                description=description,
                region=region,
                sector=sector,
                language=language,
            )
            session.add(project)
            session.flush()
            session.add(
                MembershipRow(
                    project_id=project.id,
                    user_id=user_id,
                    role=MembershipRole.ADMIN.value,
                )
            )
            for new_topic in topics or []:
                topic = TopicRow(
                    project_id=project.id,
                    name=new_topic.name,
                    description=new_topic.description,
                )
                session.add(topic)
                session.flush()
                for new_query in new_topic.queries:
                    session.add(
                        QueryRow(
                            topic_id=topic.id,
                            project_id=project.id,
                            text=new_query.text,
                            query_type=new_query.query_type.value,
                            active=new_query.active,
                            country=region,
                        )
                    )
            session.commit()
            return self._row_to_project(project)

    def get_project(self, project_id: str) -> Project | None:
        with self._session_factory() as session:
            row = session.get(ProjectRow, project_id)
            return self._row_to_project(row) if row else None

    def get_project_by_slug(self, slug: str) -> Project | None:
        with self._session_factory() as session:
            row = session.scalars(select(ProjectRow).where(ProjectRow.slug == slug)).first()
            return self._row_to_project(row) if row else None

    def get_project_detail(self, slug: str) -> ProjectDetail | None:
        """Project with its topics (ordered by name) and their query counts."""
        with self._session_factory() as session:
            row = session.scalars(select(ProjectRow).where(ProjectRow.slug == slug)).first()
            if row is None:
                return None
            stmt = (
                select(TopicRow, func.count(QueryRow.id))
                .outerjoin(QueryRow, QueryRow.topic_id == TopicRow.id)
                .where(TopicRow.project_id == row.id)
                .group_by(TopicRow.id)
                .order_by(TopicRow.name)
            )
            topics = [
                TopicSummary(
                    id=topic.id,
                    name=topic.name,
                    description=topic.description,
                    query_count=count,
                )
                for topic, count in session.execute(stmt).all()
            ]
            return ProjectDetail(project=self._row_to_project(row), topics=topics)

    def list_projects_for_user(self, user_id: str) -> list[Project]:
        with self._session_factory() as session:
            stmt = (
                select(ProjectRow)
                .join(MembershipRow, MembershipRow.project_id == ProjectRow.id)
                .where(MembershipRow.user_id == user_id)
                .order_by(ProjectRow.name)
            )
            return [self._row_to_project(r) for r in session.scalars(stmt).all()]

    def list_projects(self) -> list[Project]:
        with self._session_factory() as session:
            rows = session.scalars(select(ProjectRow).order_by(ProjectRow.created_at)).all()
            return [self._row_to_project(r) for r in rows]

    def update_project(self, project_id: str, **fields: Any) -> Project | None:
        unknown = set(fields) - _PROJECT_FIELDS
        if unknown:
            raise ValueError(f"Unknown project fields: {', '.join(sorted(unknown))}")
        with self._session_factory() as session:
            row = session.get(ProjectRow, project_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = _utcnow_str()
            session.commit()
            return self._row_to_project(row)

    def set_last_analysis(self, project_id: str, day: date) -> None:
        with self._session_factory() as session:
            row = session.get(ProjectRow, project_id)
            if row is None:
                return
            row.last_analysis = day.isoformat()
            row.updated_at = _utcnow_str()
            session.commit()

    def delete_project(self, project_id: str) -> bool:
        """Delete a project; the schema cascades to everything it owns."""
        with self._session_factory() as session:
            row = session.get(ProjectRow, project_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def get_membership(self, project_id: str, user_id: str) -> Membership | None:
        with self._session_factory() as session:
            stmt = select(MembershipRow).where(
                MembershipRow.project_id == project_id,
                MembershipRow.user_id == user_id,
            )
            row = session.scalars(stmt).first()
            return self._row_to_membership(row) if row else None

    def add_member(
        self, project_id: str, user_id: str, role: MembershipRole = MembershipRole.MEMBER
    ) -> Membership:
        with self._session_factory() as session:
            row = MembershipRow(project_id=project_id, user_id=user_id, role=role.value)
            session.add(row)
            session.commit()
            return self._row_to_membership(row)

    # --- Topics ---

    def create_topic(self, project_id: str, name: str, description: str | None = None) -> Topic:
        with self._session_factory() as session:
            row = TopicRow(project_id=project_id, name=name, description=description)
            session.add(row)
            session.commit()
            return self._row_to_topic(row)

    def get_topic(self, topic_id: str) -> Topic | None:
        with self._session_factory() as session:
            row = session.get(TopicRow, topic_id)
            return self._row_to_topic(row) if row else None

    def list_topics(self, project_id: str) -> list[Topic]:
        with self._session_factory() as session:
            stmt = select(TopicRow).where(TopicRow.project_id == project_id).order_by(TopicRow.name)
            return [self._row_to_topic(r) for r in session.scalars(stmt).all()]

    def update_topic(
        self, topic_id: str, name: str, description: str | None = None
    ) -> Topic | None:
        with self._session_factory() as session:
            row = session.get(TopicRow, topic_id)
            if row is None:
                return None
            row.name = name
            row.description = description
            row.updated_at = _utcnow_str()
            session.commit()
            return self._row_to_topic(row)

    def delete_topic(self, topic_id: str) -> bool:
        with self._session_factory() as session:
            row = session.get(TopicRow, topic_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def get_topic_detail(self, topic_id: str) -> TopicDetail | None:
        """Topic with its project and queries ordered by text."""
        with self._session_factory() as session:
            topic = session.get(TopicRow, topic_id)
            if topic is None:
                return None
            project = session.get(ProjectRow, topic.project_id)
            if project is None:
                return None
            stmt = select(QueryRow).where(QueryRow.topic_id == topic_id).order_by(QueryRow.text)
            return TopicDetail(
                topic=self._row_to_topic(topic),
                project=self._row_to_project(project),
                queries=[self._row_to_query(r) for r in session.scalars(stmt).all()],
            )

    # --- Queries ---

    def create_query(
        self,
        topic_id: str,
        project_id: str,
        text: str,
        query_type: QueryType = QueryType.SECTOR,
        country: str | None = None,
        active: bool = True,
    ) -> Query:
        with self._session_factory() as session:
            row = QueryRow(
                topic_id=topic_id,
                project_id=project_id,
                text=text,
                query_type=query_type.value,
                country=country,
                active=active,
            )
            session.add(row)
            session.commit()
            return self._row_to_query(row)

    def add_queries(
        self,
        topic_id: str,
        project_id: str,
        queries: list[NewQuery],
        country: str | None = None,
    ) -> list[Query]:
        """Bulk insert queries for one topic in a single transaction."""
        if not queries:
            return []
        with self._session_factory() as session:
            rows = [
                QueryRow(
                    topic_id=topic_id,
                    project_id=project_id,
                    text=q.text,
                    query_type=q.query_type.value,
                    active=q.active,
                    country=country,
                )
                for q in queries
            ]
            session.add_all(rows)
            session.commit()
            return [self._row_to_query(r) for r in rows]

    def get_query(self, query_id: str) -> Query | None:
        with self._session_factory() as session:
            row = session.get(QueryRow, query_id)
            return self._row_to_query(row) if row else None

    def list_queries(self, topic_id: str) -> list[Query]:
        with self._session_factory() as session:
            stmt = (
                select(QueryRow)
                .where(QueryRow.topic_id == topic_id)
                .order_by(QueryRow.created_at)
            )
            return [self._row_to_query(r) for r in session.scalars(stmt).all()]

    def update_query(
        self,
        query_id: str,
        text: str | None = None,
        query_type: QueryType | None = None,
        active: bool | None = None,
    ) -> Query | None:
        with self._session_factory() as session:
            row = session.get(QueryRow, query_id)
            if row is None:
                return None
            if text is not None:
                row.text = text
            if query_type is not None:
                row.query_type = query_type.value
            if active is not None:
                row.active = active
            row.updated_at = _utcnow_str()
            session.commit()
            return self._row_to_query(row)

    def delete_query(self, query_id: str) -> bool:
        with self._session_factory() as session:
            row = session.get(QueryRow, query_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def get_query_detail(self, query_id: str) -> QueryDetail | None:
        with self._session_factory() as session:
            query = session.get(QueryRow, query_id)
            if query is None:
                return None
            topic = session.get(TopicRow, query.topic_id)
            project = session.get(ProjectRow, query.project_id)
            if topic is None or project is None:
                return None
            return QueryDetail(
                query=self._row_to_query(query),
                topic=self._row_to_topic(topic),
                project=self._row_to_project(project),
            )

    # --- AI models ---

    def upsert_model(
        self, name: str, model: str | None = None, color: str | None = None
    ) -> AIModel:
        with self._session_factory() as session:
            row = session.scalars(select(ModelRow).where(ModelRow.name == name)).first()
            if row is None:
                row = ModelRow(name=name, model=model, color=color)
                session.add(row)
            else:
                row.model = model
                row.color = color
            session.commit()
            return self._row_to_model(row)

    def list_models(self) -> list[AIModel]:
        with self._session_factory() as session:
            rows = session.scalars(select(ModelRow).order_by(ModelRow.name)).all()
            return [self._row_to_model(r) for r in rows]

    def attach_model(self, project_id: str, model_id: str) -> None:
        with self._session_factory() as session:
            stmt = select(ProjectModelRow).where(
                ProjectModelRow.project_id == project_id,
                ProjectModelRow.model_id == model_id,
            )
            if session.scalars(stmt).first() is None:
                session.add(ProjectModelRow(project_id=project_id, model_id=model_id))
                session.commit()

    def list_project_models(self, project_id: str) -> list[AIModel]:
        with self._session_factory() as session:
            stmt = (
                select(ModelRow)
                .join(ProjectModelRow, ProjectModelRow.model_id == ModelRow.id)
                .where(ProjectModelRow.project_id == project_id)
                .order_by(ModelRow.name)
            )
            return [self._row_to_model(r) for r in session.scalars(stmt).all()]

    # --- Results: writes ---

    def record_execution(self, project_id: str, executed_at: datetime | None = None) -> Execution:
        with self._session_factory() as session:
            row = ExecutionRow(project_id=project_id)
            if executed_at is not None:
                row.executed_at = _dt_to_str(executed_at)
            session.add(row)
            session.commit()
            return Execution(
                id=row.id,
                project_id=row.project_id,
                executed_at=self._parse_dt(row.executed_at),
            )

    def record_query_execution(
        self,
        execution_id: str,
        query_id: str | None,
        model_id: str | None,
        response: str | None = None,
        error_message: str | None = None,
    ) -> QueryExecution:
        with self._session_factory() as session:
            row = QueryExecutionRow(
                execution_id=execution_id,
                query_id=query_id,
                model_id=model_id,
                response=response,
                error_message=error_message,
            )
            session.add(row)
            session.commit()
            return QueryExecution(
                id=row.id,
                execution_id=row.execution_id,
                query_id=row.query_id,
                model_id=row.model_id,
                response=row.response,
                error_message=row.error_message,
            )

    def upsert_domain(self, project_id: str, name: str, category: str | None = None) -> Domain:
        with self._session_factory() as session:
            stmt = select(DomainRow).where(
                DomainRow.project_id == project_id, DomainRow.name == name
            )
            row = session.scalars(stmt).first()
            if row is None:
                row = DomainRow(project_id=project_id, name=name, category=category)
                session.add(row)
            elif category is not None:
                row.category = category
            session.commit()
            return self._row_to_domain(row)

    def record_source(
        self,
        project_id: str,
        url: str,
        *,
        query_execution_id: str | None = None,
        domain_id: str | None = None,
        model_id: str | None = None,
        title: str | None = None,
        query_text: str | None = None,
        query_type: QueryType | None = QueryType.SECTOR,
    ) -> Source:
        """Insert a source, returning the existing one for a repeated (execution, url)."""
        with self._session_factory() as session:
            if query_execution_id is not None:
                stmt = select(SourceRow).where(
                    SourceRow.query_execution_id == query_execution_id,
                    SourceRow.url == url,
                )
                existing = session.scalars(stmt).first()
                if existing is not None:
                    existing_domain = (
                        session.get(DomainRow, existing.domain_id) if existing.domain_id else None
                    )
                    return self._row_to_source(existing, existing_domain)
            row = SourceRow(
                project_id=project_id,
                url=url,
                query_execution_id=query_execution_id,
                domain_id=domain_id,
                model_id=model_id,
                title=title,
                query_text=query_text,
                query_type=query_type.value if query_type else None,
            )
            session.add(row)
            session.commit()
            domain = session.get(DomainRow, domain_id) if domain_id else None
            return self._row_to_source(row, domain)

    def upsert_competitor(
        self, project_id: str, name: str, alternative_names: list[str] | None = None
    ) -> Competitor:
        with self._session_factory() as session:
            stmt = select(CompetitorRow).where(
                CompetitorRow.project_id == project_id,
                CompetitorRow.name == name,
            )
            row = session.scalars(stmt).first()
            if row is None:
                row = CompetitorRow(
                    project_id=project_id,
                    name=name,
                    alternative_names=list(alternative_names or []),
                )
                session.add(row)
            elif alternative_names is not None:
                row.alternative_names = list(alternative_names)
            session.commit()
            return self._row_to_competitor(row)

    def record_mention(
        self, source_id: str, competitor_id: str, mentioned_at: datetime | None = None
    ) -> Mention:
        """Link a competitor to a source, bumping its counter on first link only."""
        when = _dt_to_str(mentioned_at) if mentioned_at else _utcnow_str()
        with self._session_factory() as session:
            stmt = select(MentionRow).where(
                MentionRow.source_id == source_id,
                MentionRow.competitor_id == competitor_id,
            )
            row = session.scalars(stmt).first()
            if row is None:
                row = MentionRow(
                    source_id=source_id, competitor_id=competitor_id, mentioned_at=when
                )
                session.add(row)
                competitor = session.get(CompetitorRow, competitor_id)
                if competitor is not None:
                    competitor.mention_count += 1
                    if competitor.last_mention_date is None or competitor.last_mention_date < when:
                        competitor.last_mention_date = when
                session.commit()
            return Mention(
                id=row.id,
                source_id=row.source_id,
                competitor_id=row.competitor_id,
                mentioned_at=self._parse_dt(row.mentioned_at),
            )

    # --- Results: reads ---

    def list_executions(self, project_id: str, limit: int = 10) -> list[Execution]:
        """Latest executions first, each with its query executions."""
        with self._session_factory() as session:
            stmt = (
                select(ExecutionRow)
                .where(ExecutionRow.project_id == project_id)
                .order_by(ExecutionRow.executed_at.desc())
                .limit(limit)
            )
            executions = session.scalars(stmt).all()
            if not executions:
                return []
            qe_stmt = (
                select(QueryExecutionRow, QueryRow.text, QueryRow.query_type, ModelRow.name)
                .outerjoin(QueryRow, QueryRow.id == QueryExecutionRow.query_id)
                .outerjoin(ModelRow, ModelRow.id == QueryExecutionRow.model_id)
                .where(QueryExecutionRow.execution_id.in_([e.id for e in executions]))
                .order_by(QueryExecutionRow.id)
            )
            grouped: dict[str, list[QueryExecution]] = {e.id: [] for e in executions}
            for qe, query_text, query_type, model_name in session.execute(qe_stmt).all():
                grouped[qe.execution_id].append(
                    QueryExecution(
                        id=qe.id,
                        execution_id=qe.execution_id,
                        query_id=qe.query_id,
                        model_id=qe.model_id,
                        response=qe.response,
                        error_message=qe.error_message,
                        query_text=query_text,
                        query_type=QueryType(query_type) if query_type else None,
                        model_name=model_name,
                    )
                )
            return [
                Execution(
                    id=e.id,
                    project_id=e.project_id,
                    executed_at=self._parse_dt_opt(e.executed_at),
                    query_executions=grouped[e.id],
                )
                for e in executions
            ]

    def list_sources(
        self, project_id: str, limit: int = 20, execution_id: str | None = None
    ) -> list[Source]:
        with self._session_factory() as session:
            stmt = (
                select(SourceRow, DomainRow)
                .outerjoin(DomainRow, DomainRow.id == SourceRow.domain_id)
                .where(SourceRow.project_id == project_id)
            )
            if execution_id is not None:
                stmt = stmt.join(
                    QueryExecutionRow, QueryExecutionRow.id == SourceRow.query_execution_id
                ).where(QueryExecutionRow.execution_id == execution_id)
            stmt = stmt.order_by(SourceRow.id).limit(limit)
            return [self._row_to_source(s, d) for s, d in session.execute(stmt).all()]

    def list_competitors(self, project_id: str, limit: int = 15) -> list[Competitor]:
        with self._session_factory() as session:
            stmt = (
                select(CompetitorRow)
                .where(CompetitorRow.project_id == project_id)
                .order_by(CompetitorRow.last_mention_date.desc().nulls_last(), CompetitorRow.name)
                .limit(limit)
            )
            return [self._row_to_competitor(r) for r in session.scalars(stmt).all()]

    def list_domains(self, project_id: str, limit: int = 10) -> list[Domain]:
        with self._session_factory() as session:
            stmt = (
                select(DomainRow)
                .where(DomainRow.project_id == project_id)
                .order_by(DomainRow.name)
                .limit(limit)
            )
            return [self._row_to_domain(r) for r in session.scalars(stmt).all()]

    def count_sources(self, project_id: str, execution_id: str | None = None) -> int:
        with self._session_factory() as session:
            stmt = select(func.count(SourceRow.id)).where(SourceRow.project_id == project_id)
            if execution_id is not None:
                stmt = stmt.join(
                    QueryExecutionRow, QueryExecutionRow.id == SourceRow.query_execution_id
                ).where(QueryExecutionRow.execution_id == execution_id)
            return int(session.scalar(stmt) or 0)

    def count_competitors(self, project_id: str, with_mentions: bool = False) -> int:
        with self._session_factory() as session:
            stmt = select(func.count(CompetitorRow.id)).where(
                CompetitorRow.project_id == project_id
            )
            if with_mentions:
                stmt = stmt.where(CompetitorRow.mention_count > 0)
            return int(session.scalar(stmt) or 0)

    def query_execution_counts_by_model(
        self, project_id: str, execution_id: str | None = None
    ) -> dict[str, int]:
        """Number of query executions per model name."""
        with self._session_factory() as session:
            stmt = (
                select(func.coalesce(ModelRow.name, "unknown"), func.count(QueryExecutionRow.id))
                .select_from(QueryExecutionRow)
                .join(ExecutionRow, ExecutionRow.id == QueryExecutionRow.execution_id)
                .outerjoin(ModelRow, ModelRow.id == QueryExecutionRow.model_id)
                .where(ExecutionRow.project_id == project_id)
                .group_by(ModelRow.name)
            )
            if execution_id is not None:
                stmt = stmt.where(ExecutionRow.id == execution_id)
            return {name: int(count) for name, count in session.execute(stmt).all()}

    def domain_source_counts(
        self, project_id: str, execution_id: str | None = None, limit: int = 10
    ) -> list[tuple[str, int]]:
        """Domains ranked by how many sources point at them."""
        with self._session_factory() as session:
            count = func.count(SourceRow.id)
            stmt = (
                select(DomainRow.name, count)
                .join(SourceRow, SourceRow.domain_id == DomainRow.id)
                .where(DomainRow.project_id == project_id)
            )
            if execution_id is not None:
                stmt = stmt.join(
                    QueryExecutionRow, QueryExecutionRow.id == SourceRow.query_execution_id
                ).where(QueryExecutionRow.execution_id == execution_id)
            stmt = stmt.group_by(DomainRow.name).order_by(count.desc(), DomainRow.name).limit(limit)
            return [(name, int(n)) for name, n in session.execute(stmt).all()]

    # --- Helpers ---

    @staticmethod
    def _parse_dt(value: str) -> datetime:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    @staticmethod
    def _parse_dt_opt(value: str | None) -> datetime | None:
        if value is None:
            return None
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    @staticmethod
    def _row_to_user(row: UserRow) -> User:
        return User(
            id=row.id,
            email=row.email,
            name=row.name,
            email_verified=row.email_verified,
            image=row.image,
            created_at=Database._parse_dt(row.created_at),
        )

    @staticmethod
    def _row_to_session(row: SessionRow) -> AuthSession:
        return AuthSession(
            id=row.id,
            user_id=row.user_id,
            token=row.token,
            expires_at=Database._parse_dt(row.expires_at),
            ip_address=row.ip_address,
            user_agent=row.user_agent,
            created_at=Database._parse_dt(row.created_at),
        )

    @staticmethod
    def _row_to_project(row: ProjectRow) -> Project:
        return Project(
            id=row.id,
            name=row.name,
            slug=row.slug,
            description=row.description,
            url=row.url,
            status=row.status,
            region=row.region,
            sector=row.sector,
            language=row.language,
            last_analysis=date.fromisoformat(row.last_analysis) if row.last_analysis else None,
            logo=row.logo,
            user_id=row.user_id,
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_membership(row: MembershipRow) -> Membership:
        return Membership(
            id=row.id,
            project_id=row.project_id,
            user_id=row.user_id,
            role=MembershipRole(row.role),
            created_at=Database._parse_dt(row.created_at),
        )

    @staticmethod
    def _row_to_topic(row: TopicRow) -> Topic:
        return Topic(
            id=row.id,
            project_id=row.project_id,
            name=row.name,
            description=row.description,
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_query(row: QueryRow) -> Query:
        return Query(
            id=row.id,
            topic_id=row.topic_id,
            project_id=row.project_id,
            text=row.text,
            country=row.country,
            active=row.active,
            query_type=QueryType(row.query_type),
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_model(row: ModelRow) -> AIModel:
        return AIModel(id=row.id, name=row.name, model=row.model, color=row.color)

    @staticmethod
    def _row_to_domain(row: DomainRow) -> Domain:
        return Domain(id=row.id, project_id=row.project_id, name=row.name, category=row.category)

    @staticmethod
    def _row_to_source(row: SourceRow, domain: DomainRow | None) -> Source:
        return Source(
            id=row.id,
            project_id=row.project_id,
            url=row.url,
            title=row.title,
            domain_id=row.domain_id,
            domain_name=domain.name if domain else None,
            domain_category=domain.category if domain else None,
            model_id=row.model_id,
            query_execution_id=row.query_execution_id,
            query_text=row.query_text,
            query_type=QueryType(row.query_type) if row.query_type else None,
        )

    @staticmethod
    def _row_to_competitor(row: CompetitorRow) -> Competitor:
        return Competitor(
            id=row.id,
            project_id=row.project_id,
            name=row.name,
            alternative_names=list(row.alternative_names or []),
            mention_count=row.mention_count,
            last_mention_date=Database._parse_dt_opt(row.last_mention_date),
        )


def _utcnow_str() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _dt_to_str(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
