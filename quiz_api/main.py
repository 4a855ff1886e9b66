"""
Main FastAPI application
Quiz backend: accounts, teacher-authored questions, scoring and reports
"""
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio
import logging
import time

from quiz_api.config import Settings
from quiz_api.database import Database
from quiz_api.exceptions import QuizAPIError
from quiz_api.api import auth, questions, quiz, reports
from quiz_api.services.credential_service import CredentialService
from quiz_api.services.token_service import TokenService
from quiz_api.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its service handles

    Settings are read from the environment when not given; a missing
    JWT_SECRET fails here, before the server accepts any request.
    """
    settings = settings or Settings()
    configure_logging(settings)

    database = Database(
        settings.database_url,
        echo=settings.DEBUG,
        statement_timeout_ms=settings.DB_STATEMENT_TIMEOUT_MS
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database on startup and release it on shutdown"""
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

        try:
            database.init_db()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            raise

        logger.info("Application startup complete")
        yield

        logger.info("Shutting down application")
        database.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Quiz backend with teacher-authored questions and student scoring",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database
    app.state.token_service = TokenService(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES
    )
    app.state.credential_service = CredentialService(rounds=settings.BCRYPT_ROUNDS)
    app.state.rate_limiter = RateLimiter(
        requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
        requests_per_hour=settings.RATE_LIMIT_PER_HOUR
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def timeout_middleware(request: Request, call_next):
        """Answer 504 when a request runs past REQUEST_TIMEOUT_SECONDS"""
        try:
            return await asyncio.wait_for(
                call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS
            )
        except asyncio.TimeoutError:
            logger.warning(f"Request timed out: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=504,
                content={"error": "timeout", "message": "Request timed out"}
            )

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        """Apply rate limiting to all requests"""
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)

        try:
            await app.state.rate_limiter.check_rate_limit(request)
        except HTTPException as e:
            return JSONResponse(status_code=e.status_code, content=e.detail)

        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing"""
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Duration: {duration:.3f}s"
        )

        return response

    @app.exception_handler(QuizAPIError)
    async def quiz_api_error_handler(request: Request, exc: QuizAPIError):
        """Render domain errors with their status"""
        if exc.status_code >= 500:
            logger.error(f"{exc.error} on {request.url.path}: {exc.message}", exc_info=exc.__cause__)

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error, "message": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed or missing input is a 400"""
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Invalid request",
                "detail": jsonable_encoder(exc.errors())
            }
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Format HTTP exceptions consistently"""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "http_error",
                "message": exc.detail,
                "status_code": exc.status_code
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors gracefully"""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "detail": str(exc) if settings.DEBUG else None
            }
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": time.time()
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Quiz API",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    app.include_router(auth.router)
    app.include_router(questions.router)
    app.include_router(quiz.router)
    app.include_router(reports.router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "quiz_api.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
