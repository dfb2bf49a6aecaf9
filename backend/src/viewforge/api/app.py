"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from viewforge.catalog import EntityTypeCatalog
from viewforge.paths import database_config, resolve_paths
from viewforge.views import ViewSeedLoader, ViewService, ViewStore
from viewforge.views.endpoints import create_views_router


# Global instances (initialized on startup)
catalog: EntityTypeCatalog | None = None
view_store: ViewStore | None = None
view_service: ViewService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize on startup, cleanup on shutdown."""
    global catalog, view_store, view_service

    base_path, metadata_path, _ = resolve_paths()

    catalog = EntityTypeCatalog(metadata_path / "entity_types")
    catalog.load_all()

    # Initialize database (supports DATABASE_URL or VIEWFORGE_DB_PATH env vars)
    db_config = database_config(base_path)

    view_store = ViewStore(db_config.sqlalchemy_url)
    view_service = ViewService(view_store, catalog)

    seed_loader = ViewSeedLoader(metadata_path / "views")
    seed_loader.load_all()
    seed_loader.apply(view_service)

    yield

    # Cleanup
    if view_store:
        view_store.dispose()


app = FastAPI(title="ViewForge API", lifespan=lifespan)

# CORS for frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(create_views_router(get_service=lambda: view_service))


@app.get("/api/entity-types")
async def list_entity_types() -> dict[str, Any]:
    """List entity types that views can be defined for."""
    if not catalog:
        raise HTTPException(500, "Catalog not initialized")

    return {
        "data": [
            {
                "id": et.id,
                "slug": et.slug,
                "label": et.label,
                "fields": [{"key": f.key, "label": f.label, "type": f.type} for f in et.fields],
            }
            for et in catalog.list_entity_types()
        ]
    }
