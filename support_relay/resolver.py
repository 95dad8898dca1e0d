#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Выбор ответа на сообщение пользователя: сначала FAQ, иначе внешняя модель.

Сопоставление: вхождение подстроки после приведения к нижнему регистру,
без токенизации и без очистки пунктуации. Побеждает первый FAQ в порядке
хранилища; оценок релевантности нет.
"""
from dataclasses import dataclass
from typing import Sequence, Union

from .models import FAQ


@dataclass(frozen=True)
class FaqMatch:
    answer: str
    faq: FAQ


@dataclass(frozen=True)
class NeedsAiFallback:
    pass


ReplyOutcome = Union[FaqMatch, NeedsAiFallback]


def resolve(user_message: str, faqs: Sequence[FAQ]) -> ReplyOutcome:
    """Возвращает FaqMatch для первого FAQ, чей вопрос содержится в сообщении.

    Чистая функция: без состояния и побочных эффектов.
    """
    normalized = user_message.lower()
    for faq in faqs:
        if faq.question.lower() in normalized:
            return FaqMatch(answer=faq.answer, faq=faq)
    return NeedsAiFallback()
