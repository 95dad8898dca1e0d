#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Контракты хранилищ диалогов и FAQ плюс реализации в памяти процесса.

Реализации в памяти копируют объекты и при чтении, и при записи: изменения
диалога, не дошедшие до save(), не видны другим запросам.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .errors import DuplicateFaqError
from .models import FAQ, Conversation


class ConversationStore(ABC):
    """Хранилище диалогов: одна запись на user_id, запись по принципу create-or-update."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[Conversation]:
        ...

    @abstractmethod
    async def save(self, conversation: Conversation) -> None:
        ...

    async def ensure_indexes(self) -> None:
        pass

    async def aclose(self) -> None:
        pass


class FaqStore(ABC):
    """Хранилище FAQ: вопрос уникален, дубликат -> DuplicateFaqError."""

    @abstractmethod
    async def list_all(self) -> List[FAQ]:
        ...

    @abstractmethod
    async def add(self, faq: FAQ) -> FAQ:
        ...

    async def ensure_indexes(self) -> None:
        pass


class InMemoryConversationStore(ConversationStore):
    def __init__(self) -> None:
        self._items: Dict[str, Conversation] = {}

    async def get(self, user_id: str) -> Optional[Conversation]:
        conv = self._items.get(user_id)
        return conv.model_copy(deep=True) if conv is not None else None

    async def save(self, conversation: Conversation) -> None:
        self._items[conversation.user_id] = conversation.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._items)


class InMemoryFaqStore(FaqStore):
    def __init__(self) -> None:
        self._items: List[FAQ] = []

    async def list_all(self) -> List[FAQ]:
        return [f.model_copy(deep=True) for f in self._items]

    async def add(self, faq: FAQ) -> FAQ:
        if any(f.question == faq.question for f in self._items):
            raise DuplicateFaqError(faq.question)
        self._items.append(faq.model_copy(deep=True))
        return faq

    def __len__(self) -> int:
        return len(self._items)
