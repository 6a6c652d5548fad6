"""Tests for run_turn(): gateway replies, local fallback and token dispatch.

Run with:  python -m pytest tests/test_chat_workflow.py -v
"""

import asyncio

import pytest

from conftest import FakeGateway, ManualScheduler
from labassist.agents.chat_workflow import run_turn
from labassist.core.report_synthesizer import synthesize
from labassist.memory.session_store import FLOW_ACTIVE, IDLE, SessionStore
from labassist.prompts.agent import LOCAL_RESPONSES


@pytest.fixture()
def session(test_settings):
    return SessionStore(test_settings, scheduler=ManualScheduler()).create()


def test_gateway_reply_is_used(session, gateway: FakeGateway):
    gateway.replies = ["Your hemoglobin is slightly low."]

    view = asyncio.run(run_turn(session, "what about my hemoglobin?", gateway))

    assert view.status == IDLE
    assert view.messages[-1].text == "Your hemoglobin is slightly low."
    history, user_text, system_prompt = gateway.converse_calls[0]
    assert history == []
    assert user_text == "[Language: en] what about my hemoglobin?"
    assert "Demo Patient" in system_prompt


def test_history_grows_across_turns(session, gateway: FakeGateway):
    gateway.replies = ["Hello!", "Sure."]
    asyncio.run(run_turn(session, "hi", gateway))
    asyncio.run(run_turn(session, "thanks", gateway))

    history, _, _ = gateway.converse_calls[1]
    assert history == [("user", "[Language: en] hi"), ("model", "Hello!")]


def test_no_reply_falls_back_to_local_responder(session, gateway: FakeGateway):
    gateway.replies = [None]
    view = asyncio.run(run_turn(session, "hello", gateway))
    assert view.messages[-1].text.startswith("Hi there!")


def test_gateway_exception_falls_back_to_local_responder(session, gateway: FakeGateway):
    gateway.replies = [RuntimeError("boom")]
    view = asyncio.run(run_turn(session, "book a doctor appointment", gateway))

    assert view.status == FLOW_ACTIVE
    assert view.messages[-1].card == "booking"
    assert view.flow.kind == "booking"


def test_local_fallback_is_localized(test_settings, gateway: FakeGateway):
    session = SessionStore(test_settings, scheduler=ManualScheduler()).create("hi")
    view = asyncio.run(run_turn(session, "नमस्ते", gateway))
    assert view.messages[-1].text.startswith("नमस्ते")


def test_gateway_token_opens_lab_flow(session, gateway: FakeGateway):
    gateway.replies = ["Let's get that scheduled. SHOW_LAB_BOOKING_CARD"]
    view = asyncio.run(run_turn(session, "I need an MRI", gateway))

    assert view.flow.kind == "lab_booking"
    assert view.flow.step_name == "patient_name"
    assert "SHOW_" not in view.messages[-1].text


def test_token_free_reply_keeps_its_layout(session, gateway: FakeGateway):
    reply = "Tips:\n- Diet\n    - iron rich foods\n    - vitamin C\n\n\n\nTake care."
    gateway.replies = [reply]
    view = asyncio.run(run_turn(session, "any tips?", gateway))
    assert view.messages[-1].text == reply


# ── Local fallback grounded in the session report ────────────────────────
def _report_session(test_settings, scheduler, metrics, language="en"):
    report = synthesize(metrics)
    return SessionStore(test_settings, scheduler=scheduler).create(language, report=report)


def test_fallback_quotes_session_report_values(test_settings, gateway: FakeGateway):
    scheduler = ManualScheduler()
    session = _report_session(test_settings, scheduler, {"hemoglobin": 14.5})
    gateway.replies = [None]

    view = asyncio.run(run_turn(session, "what about my hemoglobin", gateway))

    text = view.messages[-1].text
    assert "14.5" in text
    assert "11.8" not in text
    assert view.messages[-1].card is None
    assert view.status == IDLE
    assert scheduler.pending == []


def test_fallback_for_abnormal_value_offers_hospitals(test_settings, gateway: FakeGateway):
    scheduler = ManualScheduler()
    session = _report_session(test_settings, scheduler, {"hemoglobin": 9})
    gateway.replies = [None]

    view = asyncio.run(run_turn(session, "is my hemoglobin ok?", gateway))
    assert "9 g/dL" in view.messages[-1].text
    assert "SHOW_" not in view.messages[-1].text

    scheduler.run_all()
    assert session.messages[-1].card == "hospitals"


def test_fallback_without_matching_metric_gives_generic_answer(test_settings, gateway: FakeGateway):
    session = _report_session(test_settings, ManualScheduler(), {"ldl": 90})
    gateway.replies = [None]

    view = asyncio.run(run_turn(session, "what about my hemoglobin", gateway))
    assert view.messages[-1].text == LOCAL_RESPONSES["default"]["en"]


# ── Cancellation ─────────────────────────────────────────────────────────
class StalledGateway(FakeGateway):
    async def converse(self, history, user_text, system_prompt):
        await asyncio.sleep(3600)


def test_cancelled_turn_releases_session(session):
    async def cancel_turn():
        await asyncio.wait_for(run_turn(session, "hello?", StalledGateway()), timeout=0.01)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(cancel_turn())

    assert session.status == IDLE
    assert session.messages[-1].role == "user"
    session.begin_turn("hello again")
