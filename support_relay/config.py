#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


@dataclass
class StoreConfig:
    """Параметры хранилища диалогов и FAQ.

    - backend: "mongo" (MongoDB) или "memory" (в памяти процесса, для тестов и демо)
    - mongodb_uri: строка подключения к MongoDB
    - database: имя базы данных
    - conversations_collection, faqs_collection: имена коллекций
    """
    backend: str = "mongo"
    mongodb_uri: Optional[str] = None
    database: str = "support_relay"
    conversations_collection: str = "conversations"
    faqs_collection: str = "faqs"


@dataclass
class AIConfig:
    """Параметры внешней генеративной модели (fallback, если FAQ не нашёлся).

    - provider: "gemini" (REST generateContent) или "openai" (OpenAI-совместимый Chat API)
    - api_key: ключ доступа; пустой ключ означает, что модель не вызывается вовсе
    - model: имя модели
    - base_url: базовый URL API (None = значение по умолчанию для провайдера)
    - timeout_s: таймаут одного запроса в секундах
    - system_prompt: системный промпт (только для openai, опционально)
    """
    provider: str = "gemini"
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash-preview-05-20"
    base_url: Optional[str] = None
    timeout_s: float = 30.0
    system_prompt: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass
class ServerConfig:
    """Параметры HTTP-сервера: адрес, порт, уровень логов."""
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"


@dataclass
class AppConfig:
    store: StoreConfig = field(default_factory=StoreConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


_DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash-preview-05-20",
    "openai": "gpt-4o-mini",
}


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """Собирает AppConfig из переменных окружения (и .env, если он есть).

    Единственное место, где читается окружение: ядро получает готовые
    конфиги через конструкторы.
    """
    load_dotenv(env_file)

    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    key_var = "OPENAI_API_KEY" if provider == "openai" else "GEMINI_API_KEY"

    store = StoreConfig(
        backend=os.getenv("STORAGE_BACKEND", "mongo").strip().lower(),
        mongodb_uri=os.getenv("MONGODB_URI") or None,
        database=os.getenv("MONGODB_DB", "support_relay"),
    )
    ai = AIConfig(
        provider=provider,
        api_key=(os.getenv(key_var) or "").strip() or None,
        model=os.getenv("AI_MODEL", _DEFAULT_MODELS.get(provider, _DEFAULT_MODELS["gemini"])),
        base_url=os.getenv("AI_BASE_URL") or None,
        timeout_s=float(os.getenv("AI_TIMEOUT", "30")),
        system_prompt=os.getenv("AI_SYSTEM_PROMPT") or None,
    )
    server = ServerConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3001")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    return AppConfig(store=store, ai=ai, server=server)
