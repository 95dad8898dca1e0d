#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Хранилища диалогов и FAQ поверх MongoDB (асинхронный API pymongo)."""
import logging
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from .config import StoreConfig
from .errors import DuplicateFaqError, PersistenceError
from .models import FAQ, Conversation
from .stores import ConversationStore, FaqStore


logger = logging.getLogger(__name__)


def _from_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


def _to_doc(model: Any) -> Dict[str, Any]:
    # python-режим: datetime остаются BSON Date, а не строками
    return model.model_dump(by_alias=True)


class MongoConversationStore(ConversationStore):
    def __init__(self, collection: Any, client: Optional[AsyncMongoClient] = None) -> None:
        self._col = collection
        self._client = client

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("userId", ASCENDING)], unique=True)

    async def get(self, user_id: str) -> Optional[Conversation]:
        try:
            doc = await self._col.find_one({"userId": user_id})
        except PyMongoError as exc:
            raise PersistenceError(f"load conversation failed: {exc}") from exc
        return Conversation.model_validate(_from_doc(doc)) if doc else None

    async def save(self, conversation: Conversation) -> None:
        try:
            await self._col.replace_one(
                {"userId": conversation.user_id},
                _to_doc(conversation),
                upsert=True,
            )
        except PyMongoError as exc:
            raise PersistenceError(f"save conversation failed: {exc}") from exc

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()


class MongoFaqStore(FaqStore):
    def __init__(self, collection: Any) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("question", ASCENDING)], unique=True)

    async def list_all(self) -> List[FAQ]:
        try:
            docs = await self._col.find({}).sort("_id", ASCENDING).to_list(None)
        except PyMongoError as exc:
            raise PersistenceError(f"list faqs failed: {exc}") from exc
        return [FAQ.model_validate(_from_doc(d)) for d in docs]

    async def add(self, faq: FAQ) -> FAQ:
        try:
            await self._col.insert_one(_to_doc(faq))
        except DuplicateKeyError as exc:
            raise DuplicateFaqError(faq.question) from exc
        except PyMongoError as exc:
            raise PersistenceError(f"insert faq failed: {exc}") from exc
        return faq


def make_mongo_stores(cfg: StoreConfig) -> Tuple[MongoConversationStore, MongoFaqStore]:
    """Создаёт клиента MongoDB и оба хранилища по конфигурации."""
    if not cfg.mongodb_uri:
        raise RuntimeError("MongoDB backend requested but MONGODB_URI is not set.")
    client: AsyncMongoClient = AsyncMongoClient(cfg.mongodb_uri, tz_aware=True)
    db = client[cfg.database]
    logger.info("MongoDB stores: db=%s conversations=%s faqs=%s",
                cfg.database, cfg.conversations_collection, cfg.faqs_collection)
    return (
        MongoConversationStore(db[cfg.conversations_collection], client=client),
        MongoFaqStore(db[cfg.faqs_collection]),
    )
