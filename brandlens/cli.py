"""Click CLI entry point for brandlens."""

from __future__ import annotations

import sys

import click
from sqlalchemy.exc import IntegrityError

from brandlens.config import Settings
from brandlens.db import Database
from brandlens.logging import configure_logging

DEFAULT_MODELS: tuple[tuple[str, str, str], ...] = (
    ("ChatGPT", "gpt-4o", "#10a37f"),
    ("Claude", "claude-sonnet-4-5", "#d97757"),
)


def _get_db(settings: Settings) -> Database:
    settings.ensure_data_dir()
    db = Database(settings.db_url)
    db.init_schema()
    return db


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Brandlens: brand visibility research across AI assistants."""
    ctx.ensure_object(dict)
    settings = Settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, log_format=settings.log_format)
    ctx.obj["settings"] = settings
    ctx.obj["log_level"] = log_level


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    db.close()
    click.echo(f"Database ready: {settings.db_url}")


@cli.command("create-user")
@click.argument("email")
@click.option("--name", default="", help="Display name")
@click.password_option()
@click.pass_context
def create_user(ctx: click.Context, email: str, name: str, password: str) -> None:
    """Create a user with an email/password credential."""
    from brandlens.auth import hash_password

    db = _get_db(ctx.obj["settings"])
    try:
        user = db.create_user(email, name, hash_password(password))
    except IntegrityError:
        click.echo(f"Error: a user with email {email} already exists", err=True)
        sys.exit(1)
    finally:
        db.close()
    click.echo(f"Created user {user.email} ({user.id})")


@cli.command("prune-sessions")
@click.pass_context
def prune_sessions(ctx: click.Context) -> None:
    """Delete expired login sessions."""
    db = _get_db(ctx.obj["settings"])
    try:
        removed = db.delete_expired_sessions()
    finally:
        db.close()
    click.echo(f"Removed {removed} expired sessions")


@cli.command()
@click.option("--user", "email", default=None, help="Only projects this user belongs to")
@click.pass_context
def projects(ctx: click.Context, email: str | None) -> None:
    """List projects."""
    db = _get_db(ctx.obj["settings"])
    try:
        if email:
            user = db.get_user_by_email(email)
            if user is None:
                click.echo(f"Error: no user with email {email}", err=True)
                sys.exit(1)
            rows = db.list_projects_for_user(user.id)
        else:
            rows = db.list_projects()

        if not rows:
            click.echo("No projects found.")
            return
        for p in rows:
            last = p.last_analysis.isoformat() if p.last_analysis else "never"
            click.echo(f"  {p.slug:<30} {p.name:<30} region={p.region or '-'} last_analysis={last}")
    finally:
        db.close()


@cli.command()
@click.argument("slug")
@click.pass_context
def topics(ctx: click.Context, slug: str) -> None:
    """Show a project's topics with their query counts."""
    db = _get_db(ctx.obj["settings"])
    try:
        detail = db.get_project_detail(slug)
        if detail is None:
            click.echo(f"Error: project {slug} not found", err=True)
            sys.exit(1)
        click.echo(f"{detail.project.name} ({detail.project.slug})")
        if not detail.topics:
            click.echo("  (no topics)")
        for t in detail.topics:
            click.echo(f"  [{t.id}] {t.name}: {t.query_count} queries")
    finally:
        db.close()


@cli.command()
@click.argument("slug")
@click.option("--topic", "topic_id", default=None, help="Only this topic")
@click.option("--bootstrap", is_flag=True, help="Create starter topics and queries first")
@click.option("--enqueue", "use_queue", is_flag=True, help="Enqueue to the worker instead")
@click.pass_context
def generate(
    ctx: click.Context, slug: str, topic_id: str | None, bootstrap: bool, use_queue: bool
) -> None:
    """Generate supplemental queries for a project's topics."""
    settings = ctx.obj["settings"]
    db = _get_db(settings)
    try:
        project = db.get_project_by_slug(slug)
        if project is None:
            click.echo(f"Error: project {slug} not found", err=True)
            sys.exit(1)

        if use_queue:
            from brandlens import tasks

            if bootstrap:
                result = tasks.create_topics_and_queries_task(project.id)
            elif topic_id:
                result = tasks.generate_queries_for_topic_task(topic_id)
            else:
                result = tasks.generate_initial_queries_task(project.id)
            click.echo(f"Task enqueued: {result.id}")
            return

        from brandlens.generation import QueryGenerator
        from brandlens.llm import LLMClient

        generator = QueryGenerator(db=db, llm=LLMClient(settings), settings=settings)
        if bootstrap:
            created = generator.bootstrap_topics(project.id)
            click.echo(f"Created {len(created['topics'])} topics")

        topic_ids = [topic_id] if topic_id else [t.id for t in db.list_topics(project.id)]
        for tid in topic_ids:
            summary = generator.generate_for_topic(tid)
            click.echo(f"  {summary['topic_name']}: +{summary['queries_generated']} queries")
    finally:
        db.close()


@cli.command("seed-models")
@click.option("--project", "slug", default=None, help="Also attach the models to this project")
@click.pass_context
def seed_models(ctx: click.Context, slug: str | None) -> None:
    """Register the default AI models."""
    db = _get_db(ctx.obj["settings"])
    try:
        seeded = [db.upsert_model(name, model, color) for name, model, color in DEFAULT_MODELS]
        click.echo(f"Seeded {len(seeded)} models: {', '.join(m.name for m in seeded)}")
        if slug:
            project = db.get_project_by_slug(slug)
            if project is None:
                click.echo(f"Error: project {slug} not found", err=True)
                sys.exit(1)
            for m in seeded:
                db.attach_model(project.id, m.id)
            click.echo(f"Attached to {project.slug}")
    finally:
        db.close()


@cli.command()
@click.option("--workers", default=None, type=int, help="Number of worker threads")
@click.pass_context
def worker(ctx: click.Context, workers: int | None) -> None:
    """Start Huey worker consumer."""
    from brandlens.tasks import huey

    settings = ctx.obj["settings"]
    configure_logging(
        log_level=ctx.obj["log_level"], log_format=settings.log_format, service="brandlens-worker"
    )
    count = workers or settings.huey_workers
    click.echo(f"Starting Huey consumer with {count} workers...")
    consumer = huey.create_consumer(workers=count)
    consumer.run()


@cli.command()
@click.option("--host", type=str, default=None, help="Bind host")
@click.option("--port", type=int, default=None, help="Bind port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the FastAPI API server."""
    import uvicorn

    settings = ctx.obj["settings"]
    uvicorn.run(
        "brandlens.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
    )
