"""
═══════════════════════════════════════════════════════════════════════════════
UserAdmin — Иерархия доменных ошибок (Custom Exception Hierarchy)
═══════════════════════════════════════════════════════════════════════════════

Базовый класс ``UserAdminError`` и три вида ошибок, которые видит клиент:
InvalidArgument, NotFound и Internal.
HTTP-маппинг кодов выполняется в ``useradmin.main:useradmin_error_handler``.
"""


class UserAdminError(Exception):
    """
    Базовое исключение для всех доменных ошибок сервиса.

    Атрибуты
    ────────
        message (str):  Описание ошибки. Передаётся клиенту в JSON.
        code (str):     Строковый код. Используется для маппинга на HTTP-статус.
        details (dict): Дополнительные данные (entity, id и т.д.).
    """

    def __init__(
        self,
        message: str,
        code: str = "USERADMIN_ERROR",
        details: dict | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class InvalidArgumentError(UserAdminError):
    """Некорректные входные данные: 400 Bad Request."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="USERADMIN_INVALID_ARGUMENT", details=details)


class NotFoundError(UserAdminError):
    """Сущность не найдена: 404 Not Found."""

    def __init__(self, entity: str, entity_id: int | str):
        super().__init__(
            message=f"{entity} not found: {entity_id}",
            code="USERADMIN_NOT_FOUND",
            details={"entity": entity, "id": str(entity_id)},
        )


class InternalError(UserAdminError):
    """
    Сбой хранилища: 500 Internal Server Error.

    Сообщение всегда одно и то же — текст запроса и параметры
    подключения клиенту не передаются. Подробности пишутся в лог.
    """

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="USERADMIN_INTERNAL")


__all__ = [
    "UserAdminError",
    "InvalidArgumentError",
    "NotFoundError",
    "InternalError",
]
