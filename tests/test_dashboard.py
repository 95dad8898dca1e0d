"""
Тесты HTTP-помощников Streamlit-дашборда (без запуска UI).

requests.post подменяется: сеть и сервер не нужны.
"""

import requests

import dashboard


class _DummyResponse:
    def __init__(self, status_code: int, body=None, text: str = "") -> None:
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self.text, 0)
        return self._body


def test_upload_faq_html_error_page_does_not_crash(monkeypatch) -> None:
    html = "<html><body>502 Bad Gateway</body></html>"
    monkeypatch.setattr(dashboard.requests, "post", lambda *a, **kw: _DummyResponse(502, text=html))

    ok, note = dashboard.upload_faq("q", "a", [])

    assert ok is False
    assert note == f"Error uploading FAQ: {html}"


def test_upload_faq_json_error_uses_error_field(monkeypatch) -> None:
    body = {"error": "FAQ with this question already exists."}
    monkeypatch.setattr(dashboard.requests, "post", lambda *a, **kw: _DummyResponse(409, body=body))

    ok, note = dashboard.upload_faq("q", "a", [])

    assert ok is False
    assert note == "Error uploading FAQ: FAQ with this question already exists."


def test_upload_faq_created(monkeypatch) -> None:
    monkeypatch.setattr(dashboard.requests, "post", lambda *a, **kw: _DummyResponse(201, body={"faq": {}}))
    assert dashboard.upload_faq("q", "a", ["t"]) == (True, "FAQ uploaded successfully!")


def test_send_message_html_error_page_does_not_crash(monkeypatch) -> None:
    monkeypatch.setattr(dashboard.requests, "post", lambda *a, **kw: _DummyResponse(502, text="<html>oops</html>"))
    assert dashboard.send_message("u1", "hi") == "Error: Could not get a response."


def test_send_message_connection_error(monkeypatch) -> None:
    def _boom(*a, **kw):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(dashboard.requests, "post", _boom)
    assert dashboard.send_message("u1", "hi") == "Error: Could not connect to the server."


def test_send_message_success(monkeypatch) -> None:
    monkeypatch.setattr(dashboard.requests, "post", lambda *a, **kw: _DummyResponse(200, body={"response": "9-5 Mon-Fri"}))
    assert dashboard.send_message("u1", "operating hours?") == "9-5 Mon-Fri"
