"""
ParuShop - Application Context
===============================
Everything a request handler needs that is built once at startup:
settings, engine, session factory, and the token service.
Stored on app.state.ctx by main.create_app().
"""

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from config.settings import Settings
from config.database import build_engine, build_session_factory
from common.security import TokenService


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    tokens: TokenService

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings.database_url)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            tokens=TokenService(settings),
        )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency: the AppContext of the running app."""
    return request.app.state.ctx
