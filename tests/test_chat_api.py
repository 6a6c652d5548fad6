"""HTTP tests for the chat router.

The ``ctx`` fixture delivers timers immediately, so follow-ups and delayed
hospital cards are visible in the response that scheduled them.
"""

import pytest


@pytest.fixture()
def session_id(client) -> str:
    response = client.post("/chat/sessions", json={})
    assert response.status_code == 201
    return response.json()["session_id"]


def _send(client, session_id: str, text: str):
    return client.post(f"/chat/sessions/{session_id}/messages", json={"text": text})


def test_create_session(client):
    response = client.post("/chat/sessions", json={"language": "hi"})
    body = response.json()

    assert response.status_code == 201
    assert body["language"] == "hi"
    assert body["status"] == "idle"
    assert body["speech_lang"] == "hi-IN"
    assert len(body["messages"]) == 1
    assert len(body["suggestions"]) == 3


def test_create_session_with_metrics_grounds_prompt(client, gateway):
    response = client.post("/chat/sessions", json={"metrics": {"hemoglobin": 9.5}})
    session_id = response.json()["session_id"]
    gateway.replies = ["Your hemoglobin is low."]

    _send(client, session_id, "tell me about my results")

    _, _, system_prompt = gateway.converse_calls[0]
    assert "9.5" in system_prompt
    assert "Demo Patient" not in system_prompt


def test_create_session_unsupported_language(client):
    response = client.post("/chat/sessions", json={"language": "fr"})
    assert response.status_code == 422
    assert response.json()["error"] == "unsupported_language"


def test_get_and_delete_session(client, session_id):
    assert client.get(f"/chat/sessions/{session_id}").status_code == 200
    assert client.delete(f"/chat/sessions/{session_id}").json() == {
        "status": "deleted",
        "session_id": session_id,
    }
    response = client.get(f"/chat/sessions/{session_id}")
    assert response.status_code == 404
    assert response.json()["error"] == "session_not_found"


def test_message_gets_gateway_reply(client, session_id, gateway):
    gateway.replies = ["Hello! How can I help?"]
    body = _send(client, session_id, "hi").json()

    assert [m["role"] for m in body["messages"]] == ["agent", "user", "agent"]
    assert body["messages"][-1]["text"] == "Hello! How can I help?"
    assert body["suggestions"] == []


def test_empty_message_is_rejected(client, session_id):
    response = _send(client, session_id, "")
    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


def test_voice_uses_same_turn_path(client, session_id, gateway):
    response = client.post(f"/chat/sessions/{session_id}/voice", json={"transcript": "find a hospital"})
    body = response.json()

    assert response.status_code == 200
    assert body["messages"][-2]["text"] == "find a hospital"
    assert body["messages"][-1]["card"] == "hospitals"


def test_hospital_card_follows_text_reply(client, session_id, gateway):
    gateway.replies = ["That sounds worth checking. SHOW_HOSPITAL_CARD"]
    messages = _send(client, session_id, "I have chest pain").json()["messages"]

    assert messages[-2]["text"] == "That sounds worth checking."
    assert messages[-1]["card"] == "hospitals"
    assert len(messages[-1]["card_data"]) == 4


def test_doctor_booking_flow_end_to_end(client, session_id, gateway):
    gateway.replies = ["SHOW_BOOKING_CARD"]
    body = _send(client, session_id, "book a doctor").json()
    assert body["status"] == "flow_active"
    assert body["flow"]["step_name"] == "doctor"
    assert body["messages"][-1]["card"] == "booking"

    url = f"/chat/sessions/{session_id}/flow"
    doctor = body["flow"]["options"][1]["name"]
    body = client.post(f"{url}/choose", json={"value": doctor}).json()
    day = body["flow"]["options"][0]
    body = client.post(f"{url}/choose", json={"value": day}).json()
    assert body["flow"]["step_name"] == "time"

    body = client.post(f"{url}/choose", json={"value": "12:00 PM"}).json()
    assert body["flow"] is None
    assert body["status"] == "idle"

    confirmed = body["messages"][-2]
    assert confirmed["card"] == "confirmation"
    assert confirmed["card_data"]["doctor"] == doctor
    assert confirmed["card_data"]["date"] == day
    assert doctor in body["messages"][-1]["text"]
    assert "12:00 PM" in body["messages"][-1]["text"]


def test_flow_back_and_invalid_choice(client, session_id, gateway):
    gateway.replies = ["SHOW_LAB_BOOKING_CARD"]
    _send(client, session_id, "I need an X-ray")
    url = f"/chat/sessions/{session_id}/flow"

    response = client.post(f"{url}/back")
    assert response.status_code == 422
    assert response.json()["error"] == "flow_validation_error"

    client.post(f"{url}/choose", json={"value": "Asha"})
    response = client.post(f"{url}/choose", json={"value": "PET Scan"})
    assert response.status_code == 422

    body = client.post(f"{url}/back").json()
    assert body["flow"]["step_name"] == "patient_name"
    assert body["flow"]["selection"] == {"patient_name": "Asha"}


def test_flow_commands_without_active_flow(client, session_id):
    response = client.post(f"/chat/sessions/{session_id}/flow/choose", json={"value": "x"})
    assert response.status_code == 409
    assert response.json()["error"] == "no_active_flow"


def test_language_change_resets_conversation(client, session_id, gateway):
    gateway.replies = ["Hello!"]
    _send(client, session_id, "hi")

    response = client.put(f"/chat/sessions/{session_id}/language", json={"language": "te"})
    body = response.json()
    assert body["language"] == "te"
    assert len(body["messages"]) == 1
    assert body["speech_lang"] == "te-IN"
    assert body["placeholder"] != "Ask Lena anything..."


def test_unknown_session(client):
    response = _send(client, "missing", "hi")
    assert response.status_code == 404
    assert response.json()["statusCode"] == 404


def test_gateway_unavailable_uses_local_responder(client, session_id, gateway):
    gateway.replies = [None]
    body = _send(client, session_id, "what about my cholesterol?").json()
    assert "cholesterol" in body["messages"][-2]["text"].lower()
    assert body["messages"][-1]["card"] == "hospitals"
