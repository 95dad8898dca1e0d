#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from support_relay.config import AppConfig, load_config
from support_relay.errors import DuplicateFaqError, PersistenceError, ValidationError
from support_relay.llm import build_fallback_client
from support_relay.mongo import make_mongo_stores
from support_relay.service import ConversationService
from support_relay.stores import InMemoryConversationStore, InMemoryFaqStore


logger = logging.getLogger("support_relay.api")


def build_service(cfg: AppConfig) -> ConversationService:
    """Собирает сервис по конфигурации: хранилища (mongo/memory) и клиента модели."""
    if cfg.store.backend == "memory":
        conversations, faqs = InMemoryConversationStore(), InMemoryFaqStore()
    else:
        conversations, faqs = make_mongo_stores(cfg.store)
    return ConversationService(
        conversations=conversations,
        faqs=faqs,
        ai_config=cfg.ai,
        fallback=build_fallback_client(cfg.ai),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = load_config()
    logging.basicConfig(level=cfg.server.log_level, format="[%(asctime)s] %(levelname)s - %(message)s")
    service = build_service(cfg)
    await service.startup()
    logger.info(
        "Startup: storage=%s ai_provider=%s ai_key_set=%s",
        cfg.store.backend,
        cfg.ai.provider,
        cfg.ai.enabled,
    )
    app.state.service = service
    try:
        yield
    finally:
        await service.aclose()


app = FastAPI(title="Smart-Support Chat Relay", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ChatRequest(BaseModel):
    """Тело запроса чата. Поля необязательны: их наличие проверяет сервис (-> 400)."""
    userId: Optional[str] = None
    message: Optional[str] = None


class ChatResponse(BaseModel):
    response: str


class FaqUploadRequest(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None
    tags: List[str] = []


def _service(request: Request) -> ConversationService:
    return request.app.state.service


@app.exception_handler(ValidationError)
async def _on_validation(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Rejected request: path=%s reason=%s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def _on_bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Malformed body: path=%s errors=%s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.exception_handler(DuplicateFaqError)
async def _on_duplicate(request: Request, exc: DuplicateFaqError) -> JSONResponse:
    logger.warning("Duplicate FAQ rejected: question=%r", exc.question)
    return JSONResponse(status_code=409, content={"error": "FAQ with this question already exists."})


@app.exception_handler(PersistenceError)
async def _on_persistence(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Storage failure: path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error."})


@app.exception_handler(Exception)
async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error."})


@app.get("/health")
def health() -> Dict[str, str]:
    """Простой health-check эндпоинт для мониторинга/оркестраторов."""
    return {"status": "ok"}


@app.post("/api/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, request: Request) -> ChatResponse:
    """Принимает сообщение пользователя и возвращает ответ бота (FAQ или модель)."""
    reply = await _service(request).handle_message(req.userId, req.message)
    return ChatResponse(response=reply)


@app.get("/api/history/{user_id}")
async def history(user_id: str, request: Request) -> Dict[str, Any]:
    """История сообщений пользователя в порядке добавления."""
    messages = await _service(request).get_history(user_id)
    return {"messages": [m.to_wire() for m in messages]}


@app.get("/api/admin/faqs")
async def list_faqs(request: Request) -> List[Dict[str, Any]]:
    faqs = await _service(request).list_faqs()
    return [f.to_wire() for f in faqs]


@app.post("/api/admin/upload-faq", status_code=201)
async def upload_faq(req: FaqUploadRequest, request: Request) -> Dict[str, Any]:
    """Добавляет FAQ; дубликат вопроса отклоняется (409)."""
    faq = await _service(request).upload_faq(req.question, req.answer, req.tags)
    return {"message": "FAQ uploaded successfully.", "faq": faq.to_wire()}
