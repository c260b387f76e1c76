from fastapi import FastAPI

from gamehub.api.v1.health import router as health_router
from gamehub.api.v1.players import router as players_router
from gamehub.core.logging import setup_logging
from gamehub.core.settings import settings

setup_logging()

app = FastAPI(title=settings.PROJECT_NAME)

app.include_router(
    health_router,
    prefix=settings.API_V1_STR,
    tags=["Health"],
)
app.include_router(
    players_router,
    prefix=settings.API_V1_STR,
    tags=["Players"],
)
