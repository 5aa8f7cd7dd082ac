from __future__ import annotations

from fastapi.testclient import TestClient

from fakes import FakeOpenAI, detailed_reply, make_settings, triage_reply
from main import create_app
from services.triage_service import (
    DEFAULT_DETAILED_ANALYSIS,
    ERROR_DETAILED_ANALYSIS,
    TriageService,
)


def test_detailed_without_history(client, model_replies):
    fake = model_replies(detailed_reply())

    response = client.post("/detailed-symptom", json={"prompt": "headache every morning"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "success"
    assert payload["output"] == {
        "possible_conditions": "Tension headache.",
        "risk_factors": "Stress, poor sleep.",
        "lifestyle_recommendations": "Regular sleep, hydration.",
        "when_to_seek_immediate_care": "Sudden severe headache or confusion.",
    }
    assert payload["context"] == {"historyUsed": False, "totalHistoryEntries": 0}
    assert "respond **strictly in that language**" in fake.prompts[0]
    assert "Previous symptom checks" not in fake.prompts[0]


def test_detailed_uses_recent_history(client, model_replies):
    fake = model_replies(
        triage_reply(urgency="low"),
        triage_reply(urgency="high"),
        detailed_reply(
            historical_insights="Headaches are getting worse.",
            monitoring_suggestions=["Keep a headache diary", "Track sleep"],
        ),
    )
    client.post("/symptom", json={"prompt": "light headache"})
    client.post("/symptom", json={"prompt": "strong headache"})

    response = client.post("/detailed-symptom", json={"prompt": "headache again"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["context"] == {"historyUsed": True, "totalHistoryEntries": 2}
    assert payload["output"]["historical_insights"] == "Headaches are getting worse."
    assert payload["output"]["monitoring_suggestions"] == "Keep a headache diary\nTrack sleep"

    prompt = fake.prompts[-1]
    assert "Previous symptom checks (newest first):" in prompt
    assert prompt.index("strong headache (urgency: high)") < prompt.index("light headache (urgency: low)")
    assert prompt.endswith("\nUser: headache again")


def test_detailed_history_can_be_skipped(client, model_replies):
    fake = model_replies(triage_reply(), detailed_reply())
    client.post("/symptom", json={"prompt": "cough"})

    payload = client.post(
        "/detailed-symptom", json={"prompt": "cough", "include_history": False}
    ).json()
    assert payload["context"] == {"historyUsed": False, "totalHistoryEntries": 0}
    assert "Previous symptom checks" not in fake.prompts[-1]


def test_detailed_history_context_is_limited(client, model_replies):
    model_replies(triage_reply())
    for i in range(7):
        client.post("/symptom", json={"prompt": f"check {i}"})

    payload = client.post("/detailed-symptom", json={"prompt": "summary"}).json()
    assert payload["context"] == {"historyUsed": True, "totalHistoryEntries": 5}


def test_detailed_falls_back_on_invalid_reply(client, model_replies):
    model_replies("Sorry, I cannot help with that.")

    response = client.post("/detailed-symptom", json={"prompt": "back pain"})
    assert response.status_code == 200
    assert response.json()["output"] == DEFAULT_DETAILED_ANALYSIS


def test_detailed_missing_prompt_is_client_error(client, model_replies):
    fake = model_replies(detailed_reply())

    response = client.post("/detailed-symptom", json={"include_history": True})
    assert response.status_code == 400
    assert response.json()["message"] == "No prompt provided"
    assert fake.completions.calls == []


def test_detailed_handler_failure_returns_error_payload(client, app, monkeypatch):
    async def boom(prompt, history=None):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(app.state.triage_service, "analyze", boom)

    response = client.post("/detailed-symptom", json={"prompt": "fatigue"})
    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": "AI response failed",
        "output": ERROR_DETAILED_ANALYSIS,
    }


def test_detailed_works_without_database():
    app = create_app(make_settings())
    app.state.triage_service = TriageService(client=FakeOpenAI(detailed_reply()))

    with TestClient(app) as client:
        response = client.post("/detailed-symptom", json={"prompt": "rash on arm"})

    assert response.status_code == 200
    assert response.json()["context"] == {"historyUsed": False, "totalHistoryEntries": 0}
    assert response.json()["output"]["possible_conditions"] == "Tension headache."
