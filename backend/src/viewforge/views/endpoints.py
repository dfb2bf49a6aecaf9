"""View configuration API endpoints."""

from typing import Any, Callable

from fastapi import APIRouter, Body, HTTPException, Query, Request

from viewforge.views.errors import (
    ConflictError,
    NotFoundError,
    TransactionError,
    ValidationError,
    ViewStoreError,
)
from viewforge.views.roles import default_role, normalize_role
from viewforge.views.service import ViewService
from viewforge.views.types import ViewKind


def _acting_role(request: Request) -> str:
    """Role of the caller: set by an upstream auth layer, or the X-Role header."""
    role = getattr(request.state, "acting_role", None) or request.headers.get("X-Role")
    return normalize_role(role) or default_role()


def _to_http(e: ViewStoreError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(404, str(e))
    if isinstance(e, ValidationError):
        return HTTPException(400, {"message": str(e), "errors": e.errors})
    if isinstance(e, ConflictError):
        return HTTPException(409, str(e))
    if isinstance(e, TransactionError):
        return HTTPException(503, "View store unavailable, retry the request")
    return HTTPException(500, str(e))


def _add_kind_routes(
    router: APIRouter,
    kind: ViewKind,
    get_service: Callable[[], ViewService | None],
) -> None:
    """Register list/resolve/save/delete routes for one view kind."""
    base = f"/entity-types/{{type_ref}}/{kind.value}"

    def service() -> ViewService:
        svc = get_service()
        if not svc:
            raise HTTPException(500, "Service not initialized")
        return svc

    @router.get(f"{base}-views", name=f"list_{kind.value}_views")
    def list_views(
        type_ref: str,
        role: str | None = None,
        include_all: bool = Query(False, alias="all"),
    ) -> dict[str, Any]:
        """List views for an entity type, optionally filtered to a role."""
        try:
            views = service().list_views(type_ref, kind, role=role, include_all=include_all)
        except ViewStoreError as e:
            raise _to_http(e) from e
        return {"data": [view.to_dict() for view in views]}

    @router.get(f"{base}-view", name=f"resolve_{kind.value}_view")
    def resolve_view(
        type_ref: str,
        http_request: Request,
        role: str | None = None,
    ) -> dict[str, Any]:
        """Return the view that applies to a role (the caller's role by default)."""
        try:
            view = service().resolve_view(type_ref, kind, role or _acting_role(http_request))
        except ViewStoreError as e:
            raise _to_http(e) from e
        return {"data": view.to_dict()}

    @router.put(f"{base}-view", name=f"save_{kind.value}_view")
    def save_view(
        type_ref: str,
        http_request: Request,
        body: dict[str, Any] = Body(...),
    ) -> dict[str, Any]:
        """Create or update a view."""
        try:
            view = service().save_view(type_ref, kind, body, acting_role=_acting_role(http_request))
        except ViewStoreError as e:
            raise _to_http(e) from e
        return {"data": view.to_dict()}

    @router.delete(f"{base}-view/{{slug}}", name=f"delete_{kind.value}_view")
    def delete_view(type_ref: str, slug: str, role: str | None = None) -> dict[str, Any]:
        """Delete a view, or only one role's membership when role is given."""
        try:
            deleted = service().delete_view(type_ref, kind, slug, role=role)
        except ViewStoreError as e:
            raise _to_http(e) from e
        return {"success": True, "deleted": deleted}


def create_views_router(
    get_service: Callable[[], ViewService | None],
) -> APIRouter:
    """Create the views router with injected dependencies."""
    router = APIRouter(prefix="/api", tags=["views"])
    for kind in ViewKind:
        _add_kind_routes(router, kind, get_service)
    return router
