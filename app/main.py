from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import DomainError
from app.core.logging import configure_logging
from app import models  # noqa: F401
from app.routers.admin_finance import router as admin_finance_router
from app.routers.admin_inventory import router as admin_inventory_router
from app.routers.admin_machines import router as admin_machines_router
from app.routers.admin_parties import router as admin_parties_router
from app.routers.admin_projects import router as admin_projects_router
from app.routers.auth import router as auth_router
from app.routers.notifications import router as notifications_router
from app.routers.site_core import router as site_core_router
from app.routers.site_inventory import router as site_inventory_router
from app.routers.site_payments import router as site_payments_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="Sitebook",
    lifespan=lifespan,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.info(
        "domain error",
        extra={"path": request.url.path, "error": exc.message, "status_code": exc.status_code},
    )
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return _error(400, message)


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception")
        return _error(500, "Internal Server Error")


app.include_router(auth_router)
app.include_router(admin_projects_router)
app.include_router(admin_parties_router)
app.include_router(admin_finance_router)
app.include_router(admin_inventory_router)
app.include_router(admin_machines_router)
app.include_router(notifications_router)
app.include_router(site_core_router)
app.include_router(site_inventory_router)
app.include_router(site_payments_router)


@app.get("/")
def root():
    return {"status": "Sitebook running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": "1.0.0",
    }
