from archrepo_api.routes.artifacts import router as artifacts_router
from archrepo_api.routes.components import router as components_router
from archrepo_api.routes.organizations import router as organizations_router
from archrepo_api.routes.projects import router as projects_router
from archrepo_api.routes.relationships import router as relationships_router
from archrepo_api.routes.users import router as users_router

__all__ = [
    "artifacts_router",
    "components_router",
    "organizations_router",
    "projects_router",
    "relationships_router",
    "users_router",
]
