"""useradmin.db — Построение SQL-запросов и репозитории."""
