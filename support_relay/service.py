#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from .config import AIConfig
from .errors import PersistenceError, ValidationError
from .llm import FallbackClient
from .models import FAQ, Conversation, Message, Sender
from .resolver import FaqMatch, resolve
from .stores import ConversationStore, FaqStore


logger = logging.getLogger(__name__)

DEFAULT_REPLY = "I am not sure how to respond to that."


class _KeyedLock:
    """asyncio.Lock на каждый ключ; запись удаляется, когда её никто не держит."""

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class ConversationService:
    """Обработка сообщения пользователя и работа с FAQ.

    handle_message: загрузка/создание диалога -> реплика пользователя ->
    FAQ или внешняя модель -> реплика бота -> единственная запись в хранилище.
    Запросы одного пользователя сериализуются, разных идут параллельно.
    """
    def __init__(
        self,
        conversations: ConversationStore,
        faqs: FaqStore,
        ai_config: AIConfig,
        fallback: Optional[FallbackClient] = None,
    ) -> None:
        self._conversations = conversations
        self._faqs = faqs
        self._ai_config = ai_config
        self._fallback = fallback
        self._user_locks = _KeyedLock()

    async def handle_message(self, user_id: Optional[str], message: Optional[str]) -> str:
        if not user_id or not message:
            raise ValidationError("User ID and message are required.")

        async with self._user_locks.hold(user_id):
            stage = "load"
            try:
                conversation = await self._conversations.get(user_id)
                if conversation is None:
                    conversation = Conversation(user_id=user_id)
                conversation.append(Sender.USER, message)

                stage = "resolve"
                reply = await self._reply_for(user_id, message)
                conversation.append(Sender.BOT, reply)

                stage = "persist"
                await self._conversations.save(conversation)
            except PersistenceError:
                logger.exception("Chat failed: user_id=%s stage=%s", user_id, stage)
                raise

        logger.info("Chat handled: user_id=%s messages=%s", user_id, len(conversation.messages))
        return reply

    async def _reply_for(self, user_id: str, message: str) -> str:
        faqs = await self._faqs.list_all()
        outcome = resolve(message, faqs)
        if isinstance(outcome, FaqMatch):
            logger.info("FAQ answered: user_id=%s question=%r", user_id, outcome.faq.question)
            return outcome.answer

        reply = None
        if self._fallback is not None and self._ai_config.enabled:
            logger.info("AI fallback: user_id=%s provider=%s", user_id, self._ai_config.provider)
            reply = await self._fallback.generate(message)
        else:
            logger.info("AI fallback skipped (no credential): user_id=%s", user_id)
        return reply or DEFAULT_REPLY

    async def startup(self) -> None:
        """Создаёт индексы хранилищ (уникальность userId и question)."""
        await self._conversations.ensure_indexes()
        await self._faqs.ensure_indexes()

    async def aclose(self) -> None:
        if self._fallback is not None:
            await self._fallback.aclose()
        await self._conversations.aclose()

    async def get_history(self, user_id: Optional[str]) -> List[Message]:
        if not user_id:
            raise ValidationError("User ID is required.")
        conversation = await self._conversations.get(user_id)
        return list(conversation.messages) if conversation else []

    async def list_faqs(self) -> List[FAQ]:
        return await self._faqs.list_all()

    async def upload_faq(
        self,
        question: Optional[str],
        answer: Optional[str],
        tags: Optional[List[str]] = None,
    ) -> FAQ:
        if not question or not answer:
            raise ValidationError("Question and answer are required.")
        faq = await self._faqs.add(FAQ(question=question, answer=answer, tags=list(tags or [])))
        logger.info("FAQ uploaded: question=%r tags=%s", faq.question, faq.tags)
        return faq
