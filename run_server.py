#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Тонкий лаунчер uvicorn для FastAPI-приложения `app/main.py`.

Запуск сервера:
  python run_server.py
или
  uvicorn app.main:app --host 0.0.0.0 --port 3001

Адрес и порт берутся из HOST/PORT (.env поддерживается).
"""

if __name__ == "__main__":
    import uvicorn

    from support_relay.config import load_config

    server = load_config().server
    uvicorn.run("app.main:app", host=server.host, port=server.port, log_level=server.log_level.lower(), reload=False)
