"""
useradmin/api/health.py — Health check эндпоинт сервиса.

GET /api/v1/health — проверяет доступность PostgreSQL.
``store`` — вид хранилища, выбранный при старте: ``postgres``, ``memory``,
``injected`` (сервис передан в ``create_app``) или ``none``.
"""

from fastapi import APIRouter, Request

from useradmin.database import check_connection

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check сервиса")
async def health(request: Request):
    """Проверяет доступность БД (хранилище без пула считается доступным)."""
    store = getattr(request.app.state, "store_kind", "none")
    db = getattr(request.app.state, "db", None)
    if db is not None:
        db_ok = await check_connection(db)
    else:
        db_ok = store != "none"
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "store": store,
        "service": "useradmin",
    }
