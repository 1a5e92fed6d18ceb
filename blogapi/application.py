import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from blogapi.api.v1 import auth, user
from blogapi.core.config import Settings, load_settings
from blogapi.core.errors import register_exception_handlers
from blogapi.db.base import Base
import blogapi.db.models.comment
import blogapi.db.models.like
import blogapi.db.models.post
import blogapi.db.models.user
from blogapi.db.session import build_engine, build_session_factory, ensure_database
from blogapi.routers import comment, like, post
from blogapi.services.assets import AssetGateway

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Optional[Settings] = None, asset_gateway=None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_database(settings.database_url)
        Base.metadata.create_all(bind=engine)
        logger.info("Blog API started")
        yield
        engine.dispose()

    app = FastAPI(title="Blog API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.asset_gateway = asset_gateway or AssetGateway(settings)

    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(user.router, prefix="/api/users", tags=["Users"])
    app.include_router(like.router, prefix="/api/posts", tags=["Likes"])
    app.include_router(post.router, prefix="/api/posts", tags=["Posts"])
    app.include_router(comment.router, prefix="/api/comments", tags=["Comments"])
    return app
