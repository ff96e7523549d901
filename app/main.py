from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.core.dependencies import get_synchronizer
from app.core.logging_config import configure_logging
from app.core.middleware import RequestLoggingMiddleware
from app.api import api_router
from app.services.currencies import seed_currencies
from app.services.scheduler import SyncScheduler

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables and load reference currencies
    Base.metadata.create_all(bind=engine)
    if settings.SEED_CURRENCIES:
        with SessionLocal() as db:
            seed_currencies(db)

    scheduler = None
    if settings.SYNC_ENABLED:
        scheduler = SyncScheduler(get_synchronizer(), settings.SYNC_INTERVAL_SECONDS)
        scheduler.start()

    yield

    if scheduler is not None:
        scheduler.stop()


app = FastAPI(
    title="Currency Converter API",
    description="API for currency conversion and exchange rate management",
    version="0.0.1",
    contact={"name": "Currency Converter Team", "email": "api@example.com"},
    license_info={"name": "API License"},
    servers=[{"url": "http://localhost:8000", "description": "Development Server"}],
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware, log_bodies=settings.LOG_HTTP_BODIES)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,  # not allowed together with allow_origins=["*"]
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    # Not found answers carry no body
    if exc.status_code == 404:
        return Response(status_code=404, headers=exc.headers)
    return await http_exception_handler(request, exc)


@app.get("/")
def root():
    return {"message": "Currency Converter API", "version": "0.0.1"}


@app.get("/health")
def health():
    return {"status": "ok"}
