from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


def _error_body(error, message: str) -> dict:
    error_dict = {"code": error.code, "message": message}
    if error.details:
        error_dict["details"] = error.details
    return error_dict


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = _error_body(exc.base_error, exc.base_error.message)
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    if exc.status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        error_dict["message"] = exc.base_error.message
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


def create_app(
    ApplicationConfig, uow_factory=None, password_hasher=None, session_registry=None
) -> FastAPI:
    """
    Build the API.

    uow_factory, password_hasher and session_registry replace the production
    defaults (tests bind them to their own database session).
    """
    from src.adapter.services.password_hasher import BcryptPasswordHasher
    from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
    from src.app.services.auth_settings import AuthSettings
    from src.depends import AsyncSessionLocal, build_session_registry

    auth_settings = AuthSettings.from_config(ApplicationConfig)
    if password_hasher is None:
        password_hasher = BcryptPasswordHasher(ApplicationConfig.BCRYPT_ROUNDS)
    if uow_factory is None:
        uow_factory = lambda: SqlAlchemyUnitOfWork(session_factory=AsyncSessionLocal)

    if session_registry is None:
        session_registry = build_session_registry(
            uow_factory, password_hasher, auth_settings
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await session_registry.close()

    app = FastAPI(title="Document Request Tracker - Access", version="0.1.0", lifespan=lifespan)

    app.state.auth_settings = auth_settings
    app.state.password_hasher = password_hasher
    app.state.session_registry = session_registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import audit, auth, health_check, navigation, notifications, users

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(navigation.router, tags=["Navigation"])
    app.include_router(users.router, tags=["Users"])
    app.include_router(notifications.router, tags=["Notifications"])
    app.include_router(audit.router, tags=["Audit"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
