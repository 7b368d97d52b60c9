# agency_listings/db.py
"""Store construction for the curated (SQL) and bulk (MongoDB) stores.

Nothing here connects at import time: `create_app` builds the engine, the
session factory and the Mongo client once and hands them to the request
dependencies below.
"""
from fastapi import Request
from pymongo import MongoClient
from pymongo.collection import Collection
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import Settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    if not settings.database_url:
        raise RuntimeError("POSTGRES_URL not set")
    if settings.database_url.startswith("sqlite"):
        # one shared connection so an in-memory database is visible to every thread
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    # tuned pool settings for cloud DB
    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_mongo_client(settings: Settings) -> MongoClient:
    # connect=False: the first query opens the connection, not app startup
    return MongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        socketTimeoutMS=45000,
        connect=False,
    )


def get_agency_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.mongodb_db][settings.mongodb_collection]


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_collection(request: Request) -> Collection:
    return request.app.state.agency_collection
