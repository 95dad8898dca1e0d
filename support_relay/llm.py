#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Клиенты внешней генеративной модели для ответа, когда FAQ не подошёл.

Контракт ответа одинаков для всех провайдеров:
- успех: текст модели
- ответ пришёл (в том числе JSON-ошибка 4xx/5xx), но без ожидаемого поля: NO_RESPONSE_TEXT
- сетевой сбой/таймаут/не-JSON тело: UNAVAILABLE_TEXT
Каждый вызов однократный (single-turn), без истории и без повторов.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from openai import APIStatusError, AsyncOpenAI, OpenAIError

from .config import AIConfig
from .errors import FallbackError


logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "Sorry, I could not generate a response."
UNAVAILABLE_TEXT = "AI service is unavailable."

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _field(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        return value.get(name)
    return None


def extract_gemini_text(payload: Any) -> Optional[str]:
    """candidates[0].content.parts[0].text или None, если чего-то нет по пути."""
    candidate = _first(_field(payload, "candidates"))
    part = _first(_field(_field(candidate, "content"), "parts"))
    text = _field(part, "text")
    if isinstance(text, str) and text:
        return text
    return None


class FallbackClient(ABC):
    """Базовый клиент: _request() бросает FallbackError, generate() её гасит."""

    def __init__(self, cfg: AIConfig) -> None:
        self._cfg = cfg

    @abstractmethod
    async def _request(self, message: str) -> Optional[str]:
        """Один запрос к модели. None = ответ без текста; FallbackError = сбой сети."""

    async def generate(self, message: str) -> str:
        try:
            text = await self._request(message)
        except FallbackError as exc:
            logger.error("AI fallback unavailable: provider=%s error=%s", self._cfg.provider, exc)
            return UNAVAILABLE_TEXT
        if not text:
            logger.warning("AI fallback returned no text: provider=%s", self._cfg.provider)
            return NO_RESPONSE_TEXT
        return text

    async def aclose(self) -> None:
        pass


class GeminiFallbackClient(FallbackClient):
    """REST-клиент Gemini generateContent поверх httpx."""

    def __init__(self, cfg: AIConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        super().__init__(cfg)
        self._base_url = (cfg.base_url or GEMINI_BASE_URL).rstrip("/")
        self._http = httpx.AsyncClient(timeout=cfg.timeout_s, transport=transport)

    def _make_payload(self, message: str) -> Dict[str, Any]:
        return {"contents": [{"role": "user", "parts": [{"text": message}]}]}

    async def _request(self, message: str) -> Optional[str]:
        url = f"{self._base_url}/models/{self._cfg.model}:generateContent"
        try:
            resp = await self._http.post(
                url,
                params={"key": self._cfg.api_key},
                json=self._make_payload(message),
            )
        except httpx.HTTPError as exc:
            raise FallbackError(f"gemini request failed: {type(exc).__name__}") from exc
        if not resp.is_success:
            logger.warning("Gemini returned HTTP %s", resp.status_code)
        # тело ошибки (400/429/503) тоже JSON: без candidates это NO_RESPONSE_TEXT
        try:
            data = resp.json()
        except ValueError as exc:
            raise FallbackError(f"gemini returned non-JSON body (HTTP {resp.status_code})") from exc
        return extract_gemini_text(data)

    async def aclose(self) -> None:
        await self._http.aclose()


class OpenAIFallbackClient(FallbackClient):
    """Клиент для OpenAI-совместимого Chat Completions API."""

    def __init__(self, cfg: AIConfig, client: Optional[AsyncOpenAI] = None) -> None:
        super().__init__(cfg)
        self._client = client or AsyncOpenAI(
            base_url=cfg.base_url,
            api_key=cfg.api_key,
            timeout=cfg.timeout_s,
            max_retries=0,
        )

    def _make_messages(self, user_prompt: str):
        """system (если задан) + одно сообщение user; истории нет."""
        messages = []
        if self._cfg.system_prompt:
            messages.append({"role": "system", "content": self._cfg.system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return messages

    async def _request(self, message: str) -> Optional[str]:
        try:
            resp = await self._client.chat.completions.create(
                model=self._cfg.model,
                messages=self._make_messages(message),
            )
        except APIStatusError as exc:
            logger.warning("OpenAI-compatible API returned HTTP %s", exc.status_code)
            return None
        except OpenAIError as exc:
            raise FallbackError(f"openai request failed: {type(exc).__name__}") from exc
        choices = getattr(resp, "choices", None) or []
        if not choices:
            return None
        content = getattr(getattr(choices[0], "message", None), "content", None)
        return content if isinstance(content, str) and content else None

    async def aclose(self) -> None:
        await self._client.close()


def build_fallback_client(cfg: AIConfig) -> Optional[FallbackClient]:
    """Клиент по конфигурации; None, если ключ не задан (модель не вызывается)."""
    if not cfg.enabled:
        return None
    if cfg.provider == "gemini":
        return GeminiFallbackClient(cfg)
    if cfg.provider == "openai":
        return OpenAIFallbackClient(cfg)
    raise ValueError(f"Unknown AI provider: {cfg.provider!r}")
