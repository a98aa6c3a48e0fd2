import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from arcade import __version__
from arcade.api.endpoints import tournaments as tournament_endpoints
from arcade.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Arcade tournament API %s starting", __version__)
    yield


app = FastAPI(title="Arcade Tournament API", version=__version__, lifespan=lifespan)

app.include_router(tournament_endpoints.router, prefix="/api/tournament", tags=["Tournament"])


@app.get("/")
async def read_root():
    return RedirectResponse(url="/api/tournament/bracket/view")


@app.get("/health")
async def health():
    return {"status": "ok"}
