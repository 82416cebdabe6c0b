"""
═══════════════════════════════════════════════════════════════════════════════
UserAdmin — Главная точка входа сервиса (Application Entry Point)
═══════════════════════════════════════════════════════════════════════════════

Фабрика приложения (Application Factory Pattern). Lifespan владеет пулом
соединений и передаёт хранилище в ``UserService`` явно; приложение
запускается через ``uvicorn`` с ``factory=True``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from useradmin import __version__
from useradmin.config import UserAdminSettings, get_settings
from useradmin.database import Database, create_pool
from useradmin.db.repositories.user_repo import UserRepository
from useradmin.exceptions import UserAdminError
from useradmin.memory_store import MemoryUserRepository
from useradmin.services.user_service import UserService

# ── API роутеры ──────────────────────────────────────────────────────────
from useradmin.api.health import router as health_router
from useradmin.api.users import router as users_router

# ═══════════════════════════════════════════════════════════════════════════════
# Настройка логирования
# ═══════════════════════════════════════════════════════════════════════════════
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

STATUS_MAP = {
    "USERADMIN_INVALID_ARGUMENT": 400,
    "USERADMIN_NOT_FOUND": 404,
    "USERADMIN_INTERNAL": 500,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Lifespan — управление жизненным циклом
# ═══════════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan сервиса.

    Startup:
        1. Создаём пул соединений к PostgreSQL.
        2. При ``USE_MEMORY_STORE`` или недоступности БД вне production —
           in-memory store.
        3. Собираем UserService и кладём его в ``app.state``.

    Shutdown:
        1. Закрываем пул.
    """
    settings: UserAdminSettings = app.state.settings
    logger.info(f"🚀 UserAdmin v{__version__} starting...")
    logger.info(f"   Log level: {settings.log_level}")

    if getattr(app.state, "user_service", None) is not None:
        logger.info("UserService injected — skipping store initialization")
        app.state.store_kind = "injected"
        yield
        logger.info("🛑 UserAdmin stopped")
        return

    db: Database | None = None
    if settings.use_memory_store:
        store = MemoryUserRepository()
        store_kind = "memory"
        logger.warning("🧠 Memory store ACTIVATED — all data is in-memory (lost on restart).")
    else:
        try:
            pool = await create_pool(settings)
            db = Database(pool, timeout=settings.db_command_timeout)
            store = UserRepository(db)
            store_kind = "postgres"
            logger.info("✅ UserAdmin database pool initialized")
        except Exception as e:
            if settings.app_env == "production":
                logger.error(f"UserAdmin DB not available: {e}")
                raise
            logger.warning(f"⚠️  UserAdmin DB not available — activating memory store: {e}")
            store = MemoryUserRepository()
            store_kind = "memory"

    app.state.db = db
    app.state.store_kind = store_kind
    app.state.user_service = UserService(
        store,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )

    yield

    app.state.user_service = None
    app.state.store_kind = "none"
    if db is not None:
        await db.close()
        app.state.db = None
    logger.info("🛑 UserAdmin stopped")


# ═══════════════════════════════════════════════════════════════════════════════
# Фабрика приложения
# ═══════════════════════════════════════════════════════════════════════════════

def create_app(
    settings: UserAdminSettings | None = None,
    user_service: UserService | None = None,
) -> FastAPI:
    """
    Создаёт и конфигурирует FastAPI-приложение.

    ``user_service`` позволяет подставить готовый сервис (тесты, встраивание);
    тогда lifespan не создаёт пул.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    _is_production = settings.app_env == "production"

    app = FastAPI(
        redirect_slashes=False,
        title="UserAdmin",
        description="User administration service: create, read, update, delete and block users.",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if _is_production else "/docs",
        redoc_url=None if _is_production else "/redoc",
        openapi_url=None if _is_production else "/api/v1/openapi.json",
    )
    app.state.settings = settings
    app.state.db = None
    app.state.user_service = user_service
    app.state.store_kind = "none"

    # ── Подключение API-роутеров ─────────────────────────────────────────
    v1_router = APIRouter(prefix="/api/v1")
    v1_router.include_router(users_router)
    v1_router.include_router(health_router)
    app.include_router(v1_router)

    # ── Глобальный обработчик UserAdminError ─────────────────────────────
    @app.exception_handler(UserAdminError)
    async def useradmin_error_handler(request: Request, exc: UserAdminError) -> JSONResponse:
        """Маппинг кодов ошибок на HTTP-статусы."""
        status_code = STATUS_MAP.get(exc.code, 500)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            },
        )

    # ── Корневой эндпоинт ────────────────────────────────────────────────
    @app.get("/")
    async def root():
        return {
            "name": "UserAdmin",
            "version": __version__,
            "docs": "/docs",
            "api": {
                "v1": {
                    "health": "/api/v1/health",
                    "users": "/api/v1/users",
                },
            },
        }

    return app


def main() -> None:
    """Запускает сервис через Uvicorn."""
    settings = get_settings()
    logger.info(f"Starting UserAdmin server on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "useradmin.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
