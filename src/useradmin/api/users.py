"""
useradmin/api/users.py — Эндпоинты администрирования пользователей.

    POST   /users                 — создать
    GET    /users                 — список (keyset: page_size, page_token)
    GET    /users/{user_id}       — получить
    PATCH  /users/{user_id}       — частично обновить
    DELETE /users/{user_id}       — удалить
    POST   /users/{user_id}/block   — заблокировать
    POST   /users/{user_id}/unblock — разблокировать
"""

from fastapi import APIRouter, Depends, Query, Response, status

from useradmin.dependencies import get_user_service
from useradmin.models.user import UserCreate, UserRead, UsersPage, UserUpdate
from useradmin.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Создать пользователя",
)
async def create_user(
    body: UserCreate,
    service: UserService = Depends(get_user_service),
):
    return await service.create_user(body)


@router.get(
    "",
    response_model=UsersPage,
    summary="Список пользователей",
)
async def list_users(
    page_size: int = Query(default=0, description="<= 0 — размер по умолчанию"),
    page_token: str = Query(default="", description="id последнего пользователя предыдущей страницы"),
    service: UserService = Depends(get_user_service),
):
    """Возвращает страницу пользователей и токен следующей страницы."""
    return await service.list_users(page_size, page_token)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Получить пользователя",
)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return await service.get_user(user_id)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    summary="Частично обновить пользователя",
)
async def update_user(
    user_id: int,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """
    Меняет только переданные поля.

    ``"null"`` очищает текстовое поле, ``{"year": 0, "month": 0, "day": 0}`` —
    дату рождения.
    """
    return await service.update_user(user_id, body)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить пользователя",
)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/block",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Заблокировать пользователя",
)
async def block_user(user_id: int, service: UserService = Depends(get_user_service)):
    await service.block_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/unblock",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Разблокировать пользователя",
)
async def unblock_user(user_id: int, service: UserService = Depends(get_user_service)):
    await service.unblock_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
