"""useradmin.api — HTTP-роутеры сервиса."""
