import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette import status as starlette_status

from config import settings
from db import database, models  # noqa: F401  (registers the tables on Base)
from routers import health, leaderboard, scores, session

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_AUTO_CREATE:
        database.Base.metadata.create_all(bind=database.engine)
        logger.info("Database tables ensured")
    yield


_docs_enabled = settings.ENV != "production"

app = FastAPI(
    title="Leaderboard",
    lifespan=lifespan,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url=None,
    openapi_url="/openapi.json" if _docs_enabled else None,
)
# "/score/" is a different route, not a redirect to "/score"
app.router.redirect_slashes = False

# === CORS: one fixed origin on every response ===
CORS_HEADERS = {
    "Access-Control-Allow-Origin": settings.ALLOWED_ORIGIN,
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    # Preflight for any path, routed or not
    if request.method == "OPTIONS":
        return Response(status_code=starlette_status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


app.include_router(leaderboard.router)
app.include_router(session.router)
app.include_router(scores.router)
app.include_router(health.router)


# === Consistent error handlers ===
@app.exception_handler(StarletteHTTPException)
async def http_exc_handler(request: Request, exc: StarletteHTTPException):
    status_code = exc.status_code
    detail = exc.detail
    # Known path, wrong method: same answer as an unknown route
    if status_code == starlette_status.HTTP_405_METHOD_NOT_ALLOWED:
        status_code = starlette_status.HTTP_404_NOT_FOUND
        detail = "Not Found"
    return JSONResponse(
        status_code=status_code,
        content={
            "error": status_code,
            "message": detail or "HTTP error",
            "path": str(request.url.path),
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exc_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=starlette_status.HTTP_400_BAD_REQUEST,
        content={
            "error": 400,
            "message": "Bad Request",
            "details": jsonable_errors(exc),
            "path": str(request.url.path),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exc_handler(request: Request, exc: Exception):
    # The server logs the traceback once the exception is re-raised
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    # Runs outside the middleware stack, so the CORS headers go on here
    return JSONResponse(
        status_code=starlette_status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": 500,
            "message": "Unexpected error",
            "path": str(request.url.path),
        },
        headers=CORS_HEADERS,
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may hold the raw ValueError, which JSONResponse cannot encode
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
