"""
Studio Command Interpreter
FastAPI app exposing the natural-language command endpoint:
free text → classifier → validated action → single scoped write → localized reply.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uuid
from contextlib import asynccontextmanager
import logging

from app.config import get_settings
from app import services
from app.domain.messages import translate
from database.connection import create_tables
from app.routers import all_routers

settings = get_settings()
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    try:
        create_tables()
        logger.info("🚀 Studio Command Interpreter started")
    except Exception as e:
        logger.warning(f"⚠️  Database initialization failed: {e}. Commands will fail until the database is reachable.")
    yield
    logger.info("👋 Lifespan shutdown")

app = FastAPI(
    title="Studio Command Interpreter",
    description="Natural-language commands for the studio-management platform",
    version="1.0.0",
    lifespan=lifespan,
)


def _include_routers(app: FastAPI):
    for router in all_routers:
        app.include_router(router)
        app.include_router(router, prefix="/v1")


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    response = await call_next(request)
    response.headers["X-Request-ID"] = rid
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):  # pragma: no cover
    logger.exception("Unhandled error")
    return JSONResponse(status_code=500, content={
        "error": "Internal server error",
        "success": False,
        "message": translate("error.internal"),
        "request_id": getattr(request.state, "request_id", None)
    })


@app.get("/")
async def root():
    return {
        "name": "Studio Command Interpreter",
        "version": "1.0.0",
        "status": "running",
        "classifier_enabled": services.intent_classifier.llm_enabled,
    }

_include_routers(app)

if __name__ == "__main__":  # pragma: no cover
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
