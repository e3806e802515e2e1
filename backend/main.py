from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from routes import buzz, session, teams
from store import SessionRegistry
from sweeper import ExpirySweeper

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(registry: Optional[SessionRegistry] = None, sweep: bool = True) -> FastAPI:
    """
    Builds the API around `registry` (a fresh one if omitted).
    With `sweep`, an ExpirySweeper runs for the lifetime of the app.
    """
    registry = registry if registry is not None else SessionRegistry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = None
        if sweep:
            sweeper = ExpirySweeper(registry, config.SESSION_TTL, config.SWEEP_INTERVAL_SECONDS)
            sweeper.start()
        app.state.sweeper = sweeper

        try:
            yield
        finally:
            if sweeper is not None:
                await sweeper.stop()
        logger.info("Shutdown with %d live session(s)", len(registry))

    app = FastAPI(title="Buzzer API", version="0.1.0", lifespan=lifespan)
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(session.router)
    app.include_router(teams.router)
    app.include_router(buzz.router)

    @app.get("/")
    def health():
        return {"status": "ok", "service": "buzzer"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
