"""Tests for the FastAPI server.

WHY: HTTP callers branch on status code and ErrorResponse.stage. These
tests pin the stage → status mapping and the attachment headers.

HOW: FastAPI's TestClient drives the app in-process. The module-level
client factory is patched so each test chooses what the fake Groq
endpoint answers, the same way the CLI tests swap the client.

RULES:
- The real Groq API is never called
- Each test patches its own transport; nothing is shared between tests
"""

import io

import pytest
from fastapi.testclient import TestClient

from groq_srt import __version__
from groq_srt.api.client import GroqClient
from groq_srt.server.app import _attachment_header, app
from tests.conftest import FAKE_AUDIO, SAMPLE_SRT, make_transport


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def groq_answers(monkeypatch):
    """Make the server's Groq client answer with the given status and body."""

    def _install(status_code=200, body=None, **kwargs):
        transport = make_transport(status_code, body, **kwargs)
        monkeypatch.setattr(
            "groq_srt.server.app._client_factory",
            lambda: GroqClient(transport=transport),
        )
        return transport

    return _install


def _audio(name="talk.mp3", content=FAKE_AUDIO, content_type="audio/mpeg"):
    return {"file": (name, io.BytesIO(content), content_type)}


_AUTH = {"Authorization": "Bearer gsk_test"}


class TestCreateTranscription:
    """POST /transcriptions"""

    def test_returns_srt_attachment(self, client, groq_answers, sample_response):
        groq_answers(200, sample_response)
        resp = client.post("/transcriptions", files=_audio(), headers=_AUTH)

        assert resp.status_code == 200
        assert resp.text == SAMPLE_SRT
        assert resp.headers["content-type"].startswith("application/x-subrip")
        assert resp.headers["content-disposition"] == (
            "attachment; filename=\"talk.srt\"; filename*=UTF-8''talk.srt"
        )

    def test_forwards_model_language_and_key(self, client, groq_answers, sample_response):
        transport = groq_answers(200, sample_response)
        client.post(
            "/transcriptions",
            files=_audio(),
            data={"model": "turbo", "language": "fr"},
            headers=_AUTH,
        )

        sent = transport.requests[0]
        assert sent.headers["Authorization"] == "Bearer gsk_test"
        assert b"whisper-large-v3-turbo" in sent.content
        assert b'name="language"\r\n\r\nfr\r\n' in sent.content

    def test_path_is_stripped_from_filename(self, client, groq_answers, sample_response):
        groq_answers(200, sample_response)
        resp = client.post("/transcriptions", files=_audio(name="../../etc/clip.wav"), headers=_AUTH)
        assert 'filename="clip.srt"' in resp.headers["content-disposition"]

    def test_non_ascii_filename_gets_encoded_header(self, client, groq_answers, sample_response):
        groq_answers(200, sample_response)
        resp = client.post("/transcriptions", files=_audio(name="会议录音.mp3"), headers=_AUTH)

        assert resp.status_code == 200
        assert resp.text == SAMPLE_SRT
        disposition = resp.headers["content-disposition"]
        assert 'filename="____.srt"' in disposition
        assert "filename*=UTF-8''%E4%BC%9A%E8%AE%AE%E5%BD%95%E9%9F%B3.srt" in disposition

    def test_missing_key_is_400(self, client, groq_answers, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        transport = groq_answers(200, {"segments": []})
        resp = client.post("/transcriptions", files=_audio())

        assert resp.status_code == 400
        body = resp.json()
        assert body["stage"] == "validation"
        assert body["failed_in"] == "validating"
        assert transport.requests == []

    def test_key_falls_back_to_environment(self, client, groq_answers, sample_response, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk_env")
        transport = groq_answers(200, sample_response)
        resp = client.post("/transcriptions", files=_audio())

        assert resp.status_code == 200
        assert transport.requests[0].headers["Authorization"] == "Bearer gsk_env"

    def test_unsupported_file_is_400(self, client, groq_answers):
        groq_answers(200, {"segments": []})
        resp = client.post(
            "/transcriptions",
            files=_audio(name="notes.txt", content_type="text/plain"),
            headers=_AUTH,
        )
        assert resp.status_code == 400
        assert resp.json()["stage"] == "validation"

    def test_empty_file_is_400(self, client, groq_answers):
        groq_answers(200, {"segments": []})
        resp = client.post("/transcriptions", files=_audio(content=b""), headers=_AUTH)
        assert resp.status_code == 400

    def test_groq_error_is_502(self, client, groq_answers):
        groq_answers(401, {"error": {"message": "invalid api key"}})
        resp = client.post("/transcriptions", files=_audio(), headers=_AUTH)

        assert resp.status_code == 502
        body = resp.json()
        assert body["stage"] == "network"
        assert "401" in body["detail"]
        assert "invalid api key" in body["detail"]

    def test_empty_segments_is_502(self, client, groq_answers):
        groq_answers(200, {"segments": []})
        resp = client.post("/transcriptions", files=_audio(), headers=_AUTH)

        assert resp.status_code == 502
        assert resp.json()["stage"] == "response_format"
        assert resp.json()["failed_in"] == "requesting"

    def test_no_usable_segments_is_422(self, client, groq_answers):
        groq_answers(200, {"segments": [{"start": 0, "end": 1, "text": " "}]})
        resp = client.post("/transcriptions", files=_audio(), headers=_AUTH)

        assert resp.status_code == 422
        assert resp.json()["stage"] == "encoding"


class TestModelsAndHealth:
    """GET /models and GET /health"""

    def test_models(self, client):
        resp = client.get("/models")
        assert resp.status_code == 200
        assert resp.json() == [
            {"key": "default", "id": "whisper-large-v3"},
            {"key": "turbo", "id": "whisper-large-v3-turbo"},
        ]

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__}


class TestAttachmentHeader:
    """_attachment_header() builds a latin-1 safe Content-Disposition."""

    def test_plain_ascii_name(self):
        assert _attachment_header("talk.srt") == (
            "attachment; filename=\"talk.srt\"; filename*=UTF-8''talk.srt"
        )

    def test_quotes_and_backslashes_replaced_in_fallback(self):
        header = _attachment_header('say "hi"\\.srt')
        assert 'filename="say _hi__.srt"' in header
        assert "filename*=UTF-8''say%20%22hi%22%5C.srt" in header

    def test_header_is_latin1_encodable(self):
        _attachment_header("字幕 é.srt").encode("latin-1")
