"""
useradmin — Сервис администрирования пользователей.

CRUD-операции над записями пользователей, частичное обновление
и блокировка/разблокировка поверх PostgreSQL.
"""

__version__ = "1.0.0"
