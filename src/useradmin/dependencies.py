"""
═══════════════════════════════════════════════════════════════════════════════
UserAdmin — Зависимости FastAPI (Dependency Injection)
═══════════════════════════════════════════════════════════════════════════════

Сервис и хранилище создаются в lifespan и лежат в ``app.state``;
роутеры получают их через ``Depends``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from useradmin.services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    """
    Возвращает UserService текущего приложения.

    Raises:
        HTTPException(503): хранилище ещё не инициализировано.
    """
    service = getattr(request.app.state, "user_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="User store is not initialized",
        )
    return service
