#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Модели данных: сообщение, диалог, FAQ.

На проводе (JSON, MongoDB) ключи в camelCase: userId, createdAt, updatedAt.
"""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class Message(_WireModel):
    """Одна реплика диалога. Неизменяема после создания."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    sender: Sender
    text: str
    timestamp: datetime = Field(default_factory=utcnow)


class Conversation(_WireModel):
    """Полная история переписки одного пользователя.

    Сообщения только добавляются в конец; updated_at строго растёт
    при каждом добавлении.
    """
    user_id: str
    messages: List[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def append(self, sender: Sender, text: str) -> Message:
        msg = Message(sender=sender, text=text)
        self.messages.append(msg)
        self._touch(msg.timestamp)
        return msg

    def _touch(self, now: datetime) -> None:
        # часы могли не сдвинуться между двумя добавлениями
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now


class FAQ(_WireModel):
    question: str
    answer: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
