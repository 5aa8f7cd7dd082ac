from __future__ import annotations

import base64

import httpx

AUDIO_BYTES = b"RIFF\x00\x00fake-webm-audio"
AUDIO_B64 = base64.b64encode(AUDIO_BYTES).decode()


def test_voice_returns_transcript(client, transcription_provider):
    seen = transcription_provider(lambda request: httpx.Response(200, json={"text": "I have a headache"}))

    response = client.post("/voice", json={"audio": AUDIO_B64, "mimeType": "audio/webm;codecs=opus"})
    assert response.status_code == 200
    assert response.json() == {"status": "success", "text": "I have a headache"}

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.elevenlabs.io/v1/speech-to-text"
    assert request.headers["xi-api-key"] == "test-key"
    assert request.headers["content-type"].startswith("multipart/form-data")

    body = request.read()
    assert b'name="model_id"' in body
    assert b"scribe_v1" in body
    assert b'filename="audio.webm"' in body
    assert AUDIO_BYTES in body


def test_voice_accepts_data_url(client, transcription_provider):
    seen = transcription_provider(lambda request: httpx.Response(200, json={"text": "sore throat"}))

    response = client.post("/voice", json={"audio": f"data:audio/webm;base64,{AUDIO_B64}"})
    assert response.status_code == 200
    assert response.json()["text"] == "sore throat"
    assert AUDIO_BYTES in seen[0].read()


def test_voice_empty_transcript(client, transcription_provider):
    transcription_provider(lambda request: httpx.Response(200, json={}))

    response = client.post("/voice", json={"audio": AUDIO_B64})
    assert response.status_code == 200
    assert response.json()["text"] == ""


def test_voice_propagates_provider_status(client, transcription_provider):
    transcription_provider(lambda request: httpx.Response(401, text="invalid api key"))

    response = client.post("/voice", json={"audio": AUDIO_B64})
    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "ElevenLabs API error: invalid api key"}


def test_voice_missing_audio(client, transcription_provider):
    seen = transcription_provider(lambda request: httpx.Response(200, json={"text": "x"}))

    for body in ({}, {"audio": ""}, None):
        response = client.post("/voice", json=body)
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "No audio data provided"}

    assert seen == []


def test_voice_invalid_base64(client, transcription_provider):
    seen = transcription_provider(lambda request: httpx.Response(200, json={"text": "x"}))

    response = client.post("/voice", json={"audio": "not base64 at all!!"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid audio data"
    assert seen == []


def test_voice_provider_unreachable(client, transcription_provider):
    def _refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    transcription_provider(_refuse)

    response = client.post("/voice", json={"audio": AUDIO_B64})
    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Voice processing failed"}


def test_voice_without_api_key_is_unavailable(client):
    response = client.post("/voice", json={"audio": AUDIO_B64})
    assert response.status_code == 503
    assert response.json()["status"] == "error"
