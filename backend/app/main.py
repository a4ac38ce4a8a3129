import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.adventures import router as adventures_router
from app.api.routing import router as routing_router
from app.api.tags import router as tags_router
from app.api.tracks import router as tracks_router
from app.api.users import router as users_router
from app.core.config import settings, configure_logging
from app.core.errors import AdventureError, RoutingProviderError
from app.db import Base, engine
# imports ensure every table is registered before create_all
from app.models.user import User  # noqa: F401
from app.models.adventure import Adventure  # noqa: F401
from app.models.track import Track  # noqa: F401
from app.models.waypoint import Waypoint  # noqa: F401
from app.models.picture import Picture  # noqa: F401
from app.models.share import AdventureShare  # noqa: F401
from app.models.tag import Tag  # noqa: F401

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Adventures")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(users_router)
app.include_router(adventures_router)
app.include_router(tracks_router)
app.include_router(tags_router)
app.include_router(routing_router)


@app.exception_handler(AdventureError)
async def handle_adventure_error(request: Request, exc: AdventureError):
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    content = {"detail": exc.detail}
    if isinstance(exc, RoutingProviderError):
        content["provider_status"] = exc.status
        content["provider_body"] = exc.body
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/")
def root():
    return {"message": "Adventures backend is running"}


@app.get("/health")
def health():
    return {"status": "ok"}
