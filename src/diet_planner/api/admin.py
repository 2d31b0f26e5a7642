"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from diet_planner.api.models import OverrideRequest  # noqa: TC001
from diet_planner.api.serializers import serialize_override

if TYPE_CHECKING:
    from diet_planner.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/catalog", dependencies=[Depends(require_admin)])
async def catalog_report(request: Request) -> dict[str, object]:
    """Return catalog size and per-framework coverage."""
    container: AppContainer = request.app.state.container
    return container.diet_plan_service.catalog_report()


@router.post("/catalog/reload", dependencies=[Depends(require_admin)])
async def reload_catalog(request: Request) -> dict[str, object]:
    """Re-read the catalog source."""
    container: AppContainer = request.app.state.container
    foods = container.catalog.reload()
    return {"foods": len(foods), "rejected_rows": container.catalog.rejected_rows}


@router.post(
    "/overrides",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_override(body: OverrideRequest, request: Request) -> dict[str, object]:
    """Record a practitioner override."""
    container: AppContainer = request.app.state.container
    try:
        record = container.override_service.create_override(
            user_id=body.user_id,
            item_id=body.item_id,
            action=body.action,
            reason=body.reason,
            new_score=body.new_score,
            original_score=body.original_score,
            applied_by=body.applied_by,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return serialize_override(record)


@router.get("/overrides/{user_id}", dependencies=[Depends(require_admin)])
async def list_overrides(
    user_id: str, request: Request, limit: int = 50
) -> dict[str, object]:
    """Return a user's overrides, newest first."""
    container: AppContainer = request.app.state.container
    records = container.override_service.list_user_overrides(user_id, limit)
    return {"overrides": [serialize_override(record) for record in records]}


@router.get("/overrides/{user_id}/{item_id}", dependencies=[Depends(require_admin)])
async def get_override(
    user_id: str, item_id: str, request: Request
) -> dict[str, object]:
    """Return the latest override for a user and item."""
    container: AppContainer = request.app.state.container
    record = container.override_service.get_override(user_id, item_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_override(record)
