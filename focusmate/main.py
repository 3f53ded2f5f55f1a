"""FocusMate - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from focusmate.core.config import get_settings
from focusmate.core.errors import FocusMateError
from focusmate.db.base import Base
from focusmate.db.session import engine
from focusmate.routers import api, auth, coach

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("focusmate")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)

    yield
    await engine.dispose()


app = FastAPI(
    title="FocusMate",
    description="Study log, monthly analytics and AI coach",
    lifespan=lifespan,
)


@app.exception_handler(FocusMateError)
async def focusmate_error_handler(request: Request, exc: FocusMateError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


app.include_router(auth.router)
app.include_router(api.router)
app.include_router(coach.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
