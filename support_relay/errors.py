#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Иерархия ошибок сервиса поддержки."""


class SupportRelayError(Exception):
    """Базовый класс всех ошибок пакета."""


class ValidationError(SupportRelayError):
    """Некорректный ввод клиента (нет userId/message и т.п.) -> HTTP 400."""


class DuplicateFaqError(SupportRelayError):
    """FAQ с таким вопросом уже существует -> HTTP 409."""

    def __init__(self, question: str) -> None:
        super().__init__(f"FAQ already exists: {question!r}")
        self.question = question


class PersistenceError(SupportRelayError):
    """Сбой чтения/записи хранилища -> HTTP 500, без повторов."""


class FallbackError(SupportRelayError):
    """Сбой обращения к внешней модели.

    Наружу не пробрасывается: клиент модели превращает её в текст-заглушку.
    """
