import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from archrepo_api.config import settings
from archrepo_api.db import engine
from archrepo_api.models import Base
from archrepo_api.routes import (
    artifacts_router,
    components_router,
    organizations_router,
    projects_router,
    relationships_router,
    users_router,
)
from archrepo_api.services import ArchRepoError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Create tables on startup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(
    title="Architecture Repository API",
    description="Enterprise architecture graph: organizations, projects, "
    "components, relationships, artifacts and members",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for frontend (dev server)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ArchRepoError)
async def handle_domain_error(request: Request, exc: ArchRepoError) -> JSONResponse:
    logger.info(
        "%s %s rejected (%s): %s",
        request.method,
        request.url.path,
        exc.rule,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(organizations_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(projects_router, prefix="/api/v1")
app.include_router(components_router, prefix="/api/v1")
app.include_router(relationships_router, prefix="/api/v1")
app.include_router(artifacts_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
