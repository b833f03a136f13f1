"""classdesk API - School Table Views Service.

This API serves tabular views over school records:
- Table definitions (columns, search keys, page size, export names)
- Table projections (search, sort, paginate) as JSON or HTML
- CSV export of the filtered and sorted rows
- Record CRUD over the demo store
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from classdesk import __version__
from classdesk.api.routes import records, tables
from classdesk.records.store import get_record_store
from classdesk.tables.registry import get_table_registry
from classdesk.tables.renderers import list_renderers

LOG_LEVEL = os.environ.get("CLASSDESK_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CLASSDESK_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: pre-load table definitions and seed records
    logger.info("Loading table definitions...")
    table_registry = get_table_registry()
    logger.info(f"Loaded {table_registry.count()} tables, {len(list_renderers())} renderers")

    logger.info("Seeding record store...")
    store = get_record_store()
    logger.info(f"Loaded {store.count()} records in {len(store.list_collections())} collections")

    logger.info("classdesk API ready")
    yield
    # Shutdown
    logger.info("Shutting down classdesk API")


# Create FastAPI app
app = FastAPI(
    title="classdesk API",
    description="""
## School Table Views Service

Serves searchable, sortable, paginated tables over school records.

### Key Endpoints

- `GET /v1/tables` - List all tables
- `GET /v1/tables/{key}/view` - One page of a table as JSON
- `GET /v1/tables/{key}/render` - One page of a table as HTML (grid or cards)
- `GET /v1/tables/{key}/export` - Filtered and sorted table as CSV
- `GET /v1/records/{collection}` - Records of a collection
""",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with /v1 prefix
app.include_router(tables.router, prefix="/v1")
app.include_router(records.router, prefix="/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "classdesk API",
        "version": __version__,
        "description": "School table views service",
        "docs": "/docs",
        "endpoints": {
            "tables": "/v1/tables",
            "records": "/v1/records",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    table_registry = get_table_registry()
    store = get_record_store()

    return {
        "status": "healthy",
        "tables_loaded": table_registry.count(),
        "renderers_available": len(list_renderers()),
        "collections": len(store.list_collections()),
        "records_loaded": store.count(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "classdesk.api.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )
