"""
Интеграционный тест хранилищ MongoDB (запускайте по флагу).

  SUPPORT_RUN_INTEGRATION=1 MONGODB_URI=mongodb://localhost:27017 \
    pytest -q tests/test_mongo_integration.py -m integration
"""

import asyncio
import os
import uuid

import pytest

from support_relay.config import AIConfig, StoreConfig
from support_relay.errors import DuplicateFaqError
from support_relay.models import FAQ
from support_relay.mongo import make_mongo_stores
from support_relay.service import ConversationService


@pytest.mark.integration
def test_mongo_round_trip_and_unique_question() -> None:
    if os.environ.get("SUPPORT_RUN_INTEGRATION") != "1":
        pytest.skip("Set SUPPORT_RUN_INTEGRATION=1 to run this test")

    cfg = StoreConfig(
        mongodb_uri=os.environ.get("MONGODB_URI", "mongodb://localhost:27017"),
        database=f"support_relay_test_{uuid.uuid4().hex[:8]}",
    )

    async def _run():
        conversations, faqs = make_mongo_stores(cfg)
        svc = ConversationService(conversations, faqs, AIConfig(api_key=None))
        try:
            await svc.startup()
            await svc.upload_faq("operating hours", "9-5 Mon-Fri")
            with pytest.raises(DuplicateFaqError):
                await faqs.add(FAQ(question="operating hours", answer="again"))
            assert len(await faqs.list_all()) == 1

            assert await svc.handle_message("u1", "what are your operating hours?") == "9-5 Mon-Fri"
            assert await svc.handle_message("u1", "something else") == "I am not sure how to respond to that."

            loaded = await conversations.get("u1")
            assert [(m.sender, m.text) for m in loaded.messages] == [
                ("user", "what are your operating hours?"),
                ("bot", "9-5 Mon-Fri"),
                ("user", "something else"),
                ("bot", "I am not sure how to respond to that."),
            ]
            await conversations.save(loaded)
            again = await conversations.get("u1")
            assert again.messages == loaded.messages
        finally:
            await conversations._client.drop_database(cfg.database)
            await svc.aclose()

    asyncio.run(_run())
