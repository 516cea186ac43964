import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from shorturl_app.config import settings
from shorturl_app.logging_config import setup_logging
from shorturl_app.database.connection import engine, init_db
from shorturl_app.sequence.factory import SequenceAllocatorFactory
from shorturl_app.api import shorturl
from shorturl_app.api.errors import register_exception_handlers

setup_logging(settings.log_level)
logger = logging.getLogger("shorturl_app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup, release connections on shutdown"""
    await init_db()
    logger.info(
        "%s %s started (sequence backend: %s)",
        settings.app_name, settings.app_version, settings.sequence_backend
    )
    yield
    await SequenceAllocatorFactory.close()
    await engine.dispose()
    logger.info("%s stopped", settings.app_name)


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener microservice built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def allow_any_origin(request: Request, call_next):
    """Send the wildcard origin header on every response, not only on CORS requests"""
    response = await call_next(request)
    if "*" in settings.cors_origins:
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
    return response


register_exception_handlers(app)


@app.get("/", response_class=PlainTextResponse)
def read_root():
    """Root endpoint with usage information"""
    return "URL Shortener Microservice - POST /api/shorturl"


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers
app.include_router(shorturl.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
