"""Ядро чат-ретранслятора поддержки.

Содержит:
- config: dataclass-конфиги хранилища, внешней модели и сервера
- models: сообщение, диалог, FAQ (pydantic)
- resolver: выбор ответа: FAQ по вхождению подстроки или отказ в пользу модели
- llm: клиенты внешней модели (Gemini REST, OpenAI-совместимый Chat API)
- stores: контракты хранилищ и реализации в памяти
- mongo: хранилища поверх MongoDB
- service: оркестрация обработки сообщения, история и загрузка FAQ
"""
