"""
Chat Turn Workflow

LangGraph workflow for one assistant turn:
  call_gateway
    -> [reply]     -> END
    -> [no reply]  -> local_fallback -> END

The gateway (remote model) is passed per invocation through
``config["configurable"]["gateway"]``.  The local responder is a
deterministic keyword matcher, so every turn produces a reply even when
the remote model is unavailable.  Control tokens in the reply are handled
by the session, whichever source produced them.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional, TypedDict

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph

from labassist.agents.control_tokens import BOOKING_TOKEN, HOSPITAL_TOKEN, LAB_BOOKING_TOKEN
from labassist.core.demo_report import demo_report
from labassist.core.health_ranges import classify
from labassist.core.i18n import DEFAULT_LANGUAGE, lookup
from labassist.memory.session_store import ChatSession
from labassist.models.schemas import LabReport, SessionView, TestResult
from labassist.prompts.agent import (
    LOCAL_RESPONSES,
    METRIC_ACTIONS,
    METRIC_READING,
    METRIC_STATUS_WORDS,
    TOPIC_FOODS,
    TOPIC_METRICS,
    format_user_turn,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Local intent classification
# ---------------------------------------------------------------------------

def _keywords(english: str, *native: str) -> re.Pattern:
    """English alternatives match whole words.

    Devanagari / Telugu alternatives are regex fragments matched anywhere in
    the message (no word boundaries in those scripts).
    """
    parts = [rf"\b(?:{english})\b", *native]
    return re.compile("|".join(parts), re.IGNORECASE)


# Checked in order; first match wins
_INTENT_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("lab_booking", _keywords(
        r"labs?|tests?|testing|mri|x-?rays?|scans?|ct|ultrasound",
        "लैब", "टेस्ट", "ల్యాబ్", "టెస్ట్",
    )),
    ("booking", _keywords(
        r"book|booking|appointments?|doctors?|schedule|consult",
        "अपॉइंट", "डॉक्टर", "అపాయింట్", "డాక్టర్",
    )),
    ("hospitals", _keywords(
        r"hospitals?|clinics?|nearby|near",
        "पास", "अस्पताल", "ఆసుపత్రి", "ఆసుపత్ర", "దగ్గర",
    )),
    ("hemoglobin", _keywords(
        r"hemoglobin|haemoglobin|hb|anemia|anaemia|iron",
        "हीमोग्लो", "హిమోగ్లో",
        # "blood", unless it is "blood sugar"
        r"रक्त(?!\s*शर्करा)", r"రక్తం(?!లో\s*చక్కెర)",
    )),
    ("cholesterol", _keywords(
        r"cholesterol|ldl|hdl|lipids?",
        "कोलेस्ट", "కొలె",
    )),
    ("sugar", _keywords(
        r"sugar|glucose|diabetes|diabetic|sweets?",
        "शुगर", "शर्करा", "ग्लूकोज", "షుగర్", "చక్కెర", "గ్లూకోజ్", "గూకోజ్",
    )),
    ("diet", _keywords(
        r"eat|eating|food|foods|diet|vitamins?|nutrition",
        "खाना", "विटामिन", "తినా", "విటమిన్",
    )),
    ("greet", _keywords(
        r"hi|hello|hey",
        "नमस्ते", "నమస్తే", "హాయ్",
    )),
]

_CARD_TOKENS: dict[str, str] = {
    "lab_booking": LAB_BOOKING_TOKEN,
    "booking": BOOKING_TOKEN,
    "hospitals": HOSPITAL_TOKEN,
}


def classify_intent(message: str) -> str:
    """Classify a user message for the local responder.

    Returns one of:
        "lab_booking", "booking", "hospitals", "hemoglobin", "cholesterol",
        "sugar", "diet", "greet", "default".
    """
    text = message.strip()
    for intent, pattern in _INTENT_PATTERNS:
        if pattern.search(text):
            return intent
    return "default"


_SEVERITY_ICONS = {"normal": "🟢", "warning": "🟡", "critical": "🔴"}


def _localized(answers: dict[str, str], language: str) -> str:
    return answers.get(language) or answers[DEFAULT_LANGUAGE]


def _pick_result(report: LabReport, keys: tuple[str, ...]) -> Optional[TestResult]:
    """First abnormal result among *keys*, else the first one present."""
    by_id = {result.id: result for result in report.tests}
    present = [by_id[key] for key in keys if key in by_id]
    for result in present:
        if result.status != "normal":
            return result
    return present[0] if present else None


def report_answer(intent: str, language: str, report: LabReport) -> str:
    """Answer a metric topic from the values in *report*.

    Falls back to the generic answer when the report has none of the
    topic's metrics.
    """
    result = _pick_result(report, TOPIC_METRICS[intent])
    if result is None:
        return _localized(LOCAL_RESPONSES["default"], language)

    if result.status == "normal":
        icon = _SEVERITY_ICONS["normal"]
    else:
        icon = _SEVERITY_ICONS[classify(result.id, result.value)]
    reading = _localized(METRIC_READING, language).format(
        name=lookup(language, result.id),
        value=f"{result.value:g}",
        unit=result.unit,
        status=(METRIC_STATUS_WORDS.get(language) or METRIC_STATUS_WORDS[DEFAULT_LANGUAGE])[result.status],
        low=f"{result.normal_range.min:g}",
        high=f"{result.normal_range.max:g}",
        icon=icon,
    )
    foods = _localized(TOPIC_FOODS[intent], language)
    action = _localized(METRIC_ACTIONS["normal" if result.status == "normal" else "abnormal"], language)
    return f"{reading} \n\n{foods} \n\n{action}"


def local_response(message: str, language: str, report: Optional[LabReport] = None) -> str:
    """Rule-based reply; card intents answer with the bare control token.

    Metric topics are answered from *report* unless it is the demo report,
    whose canned answers already quote its values.
    """
    intent = classify_intent(message)
    if intent in _CARD_TOKENS:
        return _CARD_TOKENS[intent]
    if intent in TOPIC_METRICS and report is not None and report != demo_report():
        return report_answer(intent, language, report)
    return _localized(LOCAL_RESPONSES[intent], language)


# ---------------------------------------------------------------------------
# State schema
# ---------------------------------------------------------------------------

class TurnState(TypedDict):
    session_id: str
    language: str
    message: str
    history: list
    system_prompt: str
    report: Optional[LabReport]
    reply: Optional[str]
    source: Optional[str]


# ---------------------------------------------------------------------------
# Node 1: call_gateway
# ---------------------------------------------------------------------------

async def call_gateway_node(state: TurnState, config: RunnableConfig) -> dict:
    """Ask the remote model; a None reply means every model failed."""
    gateway = config["configurable"]["gateway"]
    reply = await gateway.converse(
        state["history"],
        format_user_turn(state["language"], state["message"]),
        state["system_prompt"],
    )
    if not reply:
        return {"reply": None, "source": None}
    return {"reply": reply, "source": "gemini"}


def route_after_gateway(state: TurnState) -> str:
    return "reply" if state.get("reply") else "fallback"


# ---------------------------------------------------------------------------
# Node 2: local_fallback
# ---------------------------------------------------------------------------

async def local_fallback_node(state: TurnState) -> dict:
    logger.info("Session %s: using local responder", state["session_id"])
    return {
        "reply": local_response(state["message"], state["language"], state["report"]),
        "source": "local",
    }


# ---------------------------------------------------------------------------
# Build and compile the graph
# ---------------------------------------------------------------------------

def build_turn_graph():
    """Construct the LangGraph StateGraph for one chat turn."""
    graph = StateGraph(TurnState)

    graph.add_node("call_gateway", call_gateway_node)
    graph.add_node("local_fallback", local_fallback_node)

    graph.set_entry_point("call_gateway")
    graph.add_conditional_edges(
        "call_gateway",
        route_after_gateway,
        {
            "reply": END,
            "fallback": "local_fallback",
        },
    )
    graph.add_edge("local_fallback", END)

    return graph.compile()


# Compiled workflow singleton (stateless)
turn_workflow = build_turn_graph()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

async def run_turn(session: ChatSession, text: str, gateway) -> SessionView:
    """Run one user turn against *session*.

    Raises:
        TurnInProgressError: the session is still waiting on a reply.
    """
    epoch = session.begin_turn(text)
    initial_state: TurnState = {
        "session_id": session.session_id,
        "language": session.language,
        "message": text,
        "history": list(session.history),
        "system_prompt": session.system_prompt,
        "report": session.report,
        "reply": None,
        "source": None,
    }

    try:
        result = await turn_workflow.ainvoke(
            initial_state, config={"configurable": {"gateway": gateway}}
        )
        reply, source = result["reply"], result["source"]
    except asyncio.CancelledError:
        session.abort_turn(epoch)
        raise
    except Exception:
        logger.exception("Turn pipeline failed for session %s", session.session_id)
        reply, source = local_response(text, initial_state["language"], session.report), "local"

    logger.info("Session %s: reply from %s", session.session_id, source)
    session.complete_turn(epoch, text, reply)
    return session.view()
