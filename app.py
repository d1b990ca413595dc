from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    from endpoints.scoreboard_endpoints import SCOREBOARD_REPO

    yield
    await SCOREBOARD_REPO.close()


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.scoreboard_endpoints import (
        ScoreboardRequestError,
        router as scoreboard_router,
        scoreboard_error_handler,
    )
    from settings import get_settings

    settings = get_settings()

    app = FastAPI(title="Scoreboard API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ScoreboardRequestError, scoreboard_error_handler)
    app.include_router(scoreboard_router)

    # Mounted last so the API routes take precedence over files at "/".
    if settings.static_dir is not None:
        if settings.static_dir.is_dir():
            app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        else:
            logger.warning("STATIC_DIR %s is not a directory; static assets disabled", settings.static_dir)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    from settings import get_settings

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = get_settings()
    logger.info("Server running at http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
