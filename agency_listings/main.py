from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from .api.routes import router as api_router
from .config import Settings, get_settings
from .db import Base, create_db_engine, create_mongo_client, create_session_factory, get_agency_collection
from .utils import logger, set_log_level
from . import models  # noqa: F401 ensure models are imported so tables are known


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    set_log_level(settings.log_level)
    engine = create_db_engine(settings)
    mongo_client = create_mongo_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Ensure curated tables exist; migrations may own this in production
        Base.metadata.create_all(bind=engine)
        logger.info("Listings service started")
        yield
        mongo_client.close()
        engine.dispose()

    app = FastAPI(title="Agency listings", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.agency_collection = get_agency_collection(mongo_client, settings)
    app.include_router(api_router)
    return app
