import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import all models to ensure they're registered with SQLAlchemy Base
from . import models  # noqa: F401
from .auth import ensure_active, resolve_user, verify_access_token
from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED
from .database import Base, engine, get_db
from .domain.admin.router import router as admin_router
from .domain.bookings.router import router as bookings_router
from .domain.businesses.router import router as businesses_router
from .domain.favorites.router import router as favorites_router
from .domain.messages.router import router as messages_router
from .domain.notifications.router import router as notifications_router
from .domain.payments.router import router as payments_router
from .domain.reviews.router import router as reviews_router
from .domain.services.router import router as services_router
from .domain.staff.router import router as staff_router
from .errors import database_exception_handler, error_response, http_exception_handler
from .realtime import manager
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Booking Directory API", version="1.0.0", lifespan=lifespan)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return error_response(
                401,
                "Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return error_response(422, jsonable_encoder(exc.errors()), category="validation")


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(businesses_router)
app.include_router(services_router)
app.include_router(staff_router)
app.include_router(bookings_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(reviews_router)
app.include_router(favorites_router)
app.include_router(admin_router)
app.include_router(payments_router)


@app.websocket("/ws")
async def realtime_feed(websocket: WebSocket, token: str = Query(...), db: Session = Depends(get_db)):
    """Push the caller's new messages and notifications"""
    try:
        user = ensure_active(resolve_user(db, verify_access_token(token)))
    except HTTPException as e:
        logger.warning(f"⚠️ Realtime connection rejected: {e.detail}")
        await websocket.close(code=1008)
        return

    user_id = user.id
    await manager.connect(user_id, websocket)
    try:
        while True:
            # Inbound frames are keep-alives only
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"🔌 Realtime subscriber for user {user_id} disconnected")
    finally:
        manager.disconnect(user_id, websocket)


@app.get("/service-worker.js", include_in_schema=False)
def service_worker():
    return FileResponse(
        STATIC_DIR / "service-worker.js",
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache", "Service-Worker-Allowed": "/"},
    )


@app.get("/")
def root():
    return {"message": "Booking Directory API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
