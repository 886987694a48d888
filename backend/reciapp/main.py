"""FastAPI 앱 진입점"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reciapp.config import get_settings
from reciapp.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_json)

from reciapp.api import gatherers, routes, shifts, users  # noqa: E402
from reciapp.api.deps import get_time_helper  # noqa: E402
from reciapp.core.errors import register_exception_handlers  # noqa: E402

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 잘못된 TIMEZONE이면 기동 실패
    time_helper = get_time_helper()
    log.info("startup", timezone=time_helper.timezone)
    yield


app = FastAPI(
    title="Reciapp Server",
    description="재활용 수거 루트 배정/수행 API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(routes.router)
app.include_router(shifts.router)
app.include_router(gatherers.router)
app.include_router(users.router)


@app.get("/health")
def health():
    return {"status": "ok"}
