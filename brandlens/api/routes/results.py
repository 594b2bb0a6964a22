"""Results page endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from brandlens.api.deps import CurrentUserDep, DbDep, member_project
from brandlens.results import ResultsView, build_results_view

router = APIRouter(prefix="/projects", tags=["results"])


@router.get("/{slug}/results", response_model=ResultsView)
def get_results(
    slug: str,
    db: DbDep,
    user: CurrentUserDep,
    execution_id: str | None = None,
) -> ResultsView:
    member_project(db, slug, user)
    return build_results_view(db, slug, execution_id)
