"""HTTP contract tests for /api/generate, /api/chat and /api/health."""

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import HumanMessage
from structlog.testing import capture_logs

from backend.core.config import RelayConfig
from backend.core.errors import UpstreamError
from backend.core.llm_adapter import LLMAdapter
from backend.main import create_app


class TestGenerate:

    def test_plain_json_reply(self, make_client, text_reply):
        client, _ = make_client(text_reply('{"html":"<h1>Hi</h1>","css":"h1{color:red}","js":""}'))
        resp = client.post("/api/generate", json={"prompt": "dark portfolio with contact form"})
        assert resp.status_code == 200
        assert resp.json() == {"html": "<h1>Hi</h1>", "css": "h1{color:red}", "js": ""}

    def test_fenced_reply_backfilled(self, make_client, text_reply):
        client, _ = make_client(text_reply('```json\n{"html":"<p>x</p>"}\n```'))
        resp = client.post("/api/generate", json={"prompt": "x"})
        assert resp.status_code == 200
        assert resp.json() == {"html": "<p>x</p>", "css": "", "js": ""}

    def test_extra_keys_not_returned(self, make_client, text_reply):
        client, _ = make_client(text_reply('{"html": "a", "notes": "b"}'))
        resp = client.post("/api/generate", json={"prompt": "x"})
        assert set(resp.json()) == {"html", "css", "js"}

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": None}])
    def test_missing_prompt_is_400_without_call(self, make_client, body):
        client, llm = make_client()
        resp = client.post("/api/generate", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Prompt is required"}
        assert llm.calls == []

    def test_unparseable_body_is_400(self, make_client):
        client, llm = make_client()
        resp = client.post("/api/generate", content="not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert llm.calls == []

    def test_malformed_reply_returns_raw(self, make_client, text_reply):
        raw = "Here is your website! <div>hi</div>"
        client, _ = make_client(text_reply(raw))
        resp = client.post("/api/generate", json={"prompt": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "AI response is not valid JSON", "raw": raw}

    def test_upstream_error_details_echoed(self, make_client):
        client, _ = make_client(UpstreamError("Gemini API error", details="API key not valid"))
        resp = client.post("/api/generate", json={"prompt": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Gemini API error", "details": "API key not valid"}

    def test_tool_loop_bounded(self, make_client, tool_reply, config):
        client, llm = make_client(tool_reply())
        resp = client.post("/api/generate", json={"prompt": "x"})
        assert resp.status_code == 500
        assert "function calls" in resp.json()["error"]
        assert len(llm.calls) == config.max_tool_round_trips + 1

    def test_missing_credential_is_config_error(self, make_client):
        cfg = RelayConfig(gemini_api_key="")
        client, _ = make_client(cfg=cfg, llm=LLMAdapter(cfg))
        resp = client.post("/api/generate", json={"prompt": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "GEMINI_API_KEY missing in .env"}

    def test_empty_prompt_400_even_without_credential(self, make_client):
        cfg = RelayConfig(gemini_api_key="")
        client, _ = make_client(cfg=cfg, llm=LLMAdapter(cfg))
        assert client.post("/api/generate", json={"prompt": ""}).status_code == 400


class TestChat:

    def test_reply(self, make_client, text_reply, config):
        client, llm = make_client(text_reply("Bhai, flexbox use karo."))
        resp = client.post("/api/chat", json={"message": "center a div?"})
        assert resp.status_code == 200
        assert resp.json() == {"reply": "Bhai, flexbox use karo."}

        messages, model_name = llm.calls[0]
        assert model_name == config.chat_model
        assert "Weburle Assistant" in messages[0].content
        assert messages[1] == HumanMessage(content="center a div?")

    def test_single_call_even_for_tool_reply(self, make_client, tool_reply):
        client, llm = make_client(tool_reply())
        resp = client.post("/api/chat", json={"message": "hi"})
        assert resp.status_code == 200
        assert resp.json() == {"reply": ""}
        assert len(llm.calls) == 1

    @pytest.mark.parametrize("body", [{}, {"message": ""}])
    def test_missing_message_is_400(self, make_client, body):
        client, llm = make_client()
        resp = client.post("/api/chat", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Message required"}
        assert llm.calls == []

    def test_upstream_error_is_generic(self, make_client):
        client, _ = make_client(UpstreamError("Gemini API error", details="secret provider detail"))
        resp = client.post("/api/chat", json={"message": "hi"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Gemini error"}

    def test_missing_credential_is_generic(self, make_client):
        cfg = RelayConfig(gemini_api_key="")
        client, _ = make_client(cfg=cfg, llm=LLMAdapter(cfg))
        resp = client.post("/api/chat", json={"message": "hi"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Gemini error"}


class TestHealth:

    def test_ok_with_credential(self, make_client):
        client, llm = make_client()
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert llm.calls == []

    @pytest.mark.parametrize("key", ["", "   "])
    def test_error_without_credential(self, make_client, key):
        client, _ = make_client(cfg=RelayConfig(gemini_api_key=key))
        resp = client.get("/api/health")
        assert resp.status_code == 500
        assert resp.json() == {"status": "error", "message": "GEMINI_API_KEY missing in .env"}

    def test_reads_config_at_call_time(self, make_client):
        client, _ = make_client()
        client.app.state.config = RelayConfig(gemini_api_key="")
        assert client.get("/api/health").json()["status"] == "error"


class TestStartup:

    @pytest.mark.parametrize("key, healthy", [("test-gemini-key", True), ("", False)])
    def test_startup_logs_adapter_health(self, key, healthy):
        cfg = RelayConfig(gemini_api_key=key)
        with capture_logs() as logs:
            with TestClient(create_app(cfg, LLMAdapter(cfg))):
                pass
        startup = [e for e in logs if e["event"] == "startup.complete"]
        assert startup and startup[0]["credential"] is healthy
