"""
Session Store

In-memory chat sessions for the Lena assistant.

A ChatSession owns the message log, the model-facing dialogue history, the
active booking flow (at most one) and the turn status:

  idle -> awaiting_ai_response -> idle | flow_active
  flow_active -> (final choose) -> flow_complete -> (follow-up) -> idle

Delayed messages go through an injected ``scheduler(delay, callback)``.
Every callback carries the session epoch it was scheduled in; a language
reset bumps the epoch so stale timers deliver nothing.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable, Optional

from labassist.agents.control_tokens import ParsedReply, parse_control_tokens
from labassist.agents.flows import FLOW_TYPES, NEARBY_HOSPITALS, CardFlow
from labassist.config import Settings, settings as default_settings
from labassist.core.demo_report import demo_report
from labassist.core.errors import NoActiveFlowError, SessionNotFoundError, TurnInProgressError
from labassist.core.i18n import SPEECH_LANG_CODES, lookup, require_language
from labassist.models.schemas import (
    AppointmentSelection,
    LabReport,
    Message,
    Selection,
    SessionView,
)
from labassist.prompts.agent import SUGGESTED, format_system_prompt, format_user_turn

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]

IDLE = "idle"
AWAITING = "awaiting_ai_response"
FLOW_ACTIVE = "flow_active"
FLOW_COMPLETE = "flow_complete"

_CARD_INTROS = {
    "booking": "card_booking_intro",
    "lab_booking": "card_lab_booking_intro",
}


def call_later(delay: float, callback: Callable[[], None]) -> None:
    """Default scheduler: a fire-once timer on the running event loop."""
    asyncio.get_running_loop().call_later(delay, callback)


class ChatSession:
    """Dialogue state for one assistant panel."""

    def __init__(
        self,
        session_id: str,
        language: str,
        scheduler: Scheduler,
        hospital_delay: float,
        followup_delay: float,
        report: Optional[LabReport] = None,
    ) -> None:
        self.session_id = session_id
        self.language = require_language(language)
        self._schedule = scheduler
        self._hospital_delay = hospital_delay
        self._followup_delay = followup_delay

        self.report = report or demo_report()
        self.system_prompt = format_system_prompt(self.report)

        self.status = IDLE
        self.messages: list[Message] = []
        self.history: list[tuple[str, str]] = []
        self.flow: Optional[CardFlow] = None
        self.flow_message_id: Optional[str] = None
        self.epoch = 0
        self._reseed()

    # ── Messages ──

    def _add_message(self, role: str, text: str, card: Optional[str] = None, card_data: Any = None) -> Message:
        message = Message(
            id=uuid.uuid4().hex,
            role=role,
            text=text,
            card=card,
            card_data=card_data,
        )
        self.messages.append(message)
        return message

    def _find_message(self, message_id: str) -> Message:
        for message in self.messages:
            if message.id == message_id:
                return message
        raise NoActiveFlowError(f"Card message {message_id} is no longer in the conversation")

    def _later(self, delay: float, deliver: Callable[[], None]) -> None:
        epoch = self.epoch

        def fire() -> None:
            if epoch != self.epoch:
                logger.info("Session %s: dropping timer from epoch %d", self.session_id, epoch)
                return
            deliver()

        self._schedule(delay, fire)

    def _reseed(self) -> None:
        self.messages = []
        self.history = []
        self.flow = None
        self.flow_message_id = None
        self.status = IDLE
        self._add_message("agent", lookup(self.language, "agent_welcome"))

    def reset_language(self, language: str) -> None:
        """Switch display language; clears the conversation entirely."""
        self.language = require_language(language)
        self.epoch += 1
        self._reseed()
        logger.info("Session %s reset to language '%s'", self.session_id, language)

    # ── Turns ──

    def begin_turn(self, text: str) -> int:
        """Record the user's message and mark the session busy.

        Returns:
            The epoch the turn belongs to (pass back to ``complete_turn``).

        Raises:
            TurnInProgressError: a previous turn has not completed.
        """
        if self.status == AWAITING:
            raise TurnInProgressError()
        self._add_message("user", text)
        self.status = AWAITING
        return self.epoch

    def complete_turn(self, epoch: int, user_text: str, reply: str) -> None:
        """Apply the assistant's raw *reply* (tokens included)."""
        if epoch != self.epoch:
            logger.info("Session %s: discarding reply from a reset conversation", self.session_id)
            return

        self.history.append(("user", format_user_turn(self.language, user_text)))
        self.history.append(("model", reply))
        self._dispatch(parse_control_tokens(reply))

    def abort_turn(self, epoch: int) -> None:
        """Release the session after a turn was cancelled; the user message stays."""
        if epoch != self.epoch or self.status != AWAITING:
            return
        logger.info("Session %s: turn cancelled", self.session_id)
        self._settle()

    def _settle(self) -> None:
        self.status = FLOW_ACTIVE if self.flow is not None else IDLE

    def _dispatch(self, parsed: ParsedReply) -> None:
        if parsed.intent in FLOW_TYPES:
            self.flow = FLOW_TYPES[parsed.intent]()
            message = self._add_message(
                "agent", lookup(self.language, _CARD_INTROS[parsed.intent]), card=parsed.intent
            )
            self.flow_message_id = message.id
            logger.info("Session %s: %s flow started", self.session_id, parsed.intent)
        elif parsed.intent == "hospitals":
            if parsed.text:
                self._add_message("agent", parsed.text)
                self._later(self._hospital_delay, self._add_hospital_card)
            else:
                self._add_message(
                    "agent",
                    lookup(self.language, "card_hospitals_intro"),
                    card="hospitals",
                    card_data=list(NEARBY_HOSPITALS),
                )
        else:
            self._add_message("agent", parsed.text)
        self._settle()

    def _add_hospital_card(self) -> None:
        self._add_message(
            "agent",
            lookup(self.language, "card_hospitals_followup"),
            card="hospitals",
            card_data=list(NEARBY_HOSPITALS),
        )

    # ── Flows ──

    def _active_flow(self) -> CardFlow:
        if self.flow is None:
            raise NoActiveFlowError()
        return self.flow

    def choose(self, value: str) -> None:
        """Apply *value* to the active flow's current step."""
        selection = self._active_flow().choose(value)
        if selection is not None:
            self._complete_flow(selection)

    def back(self) -> None:
        self._active_flow().back()

    def _complete_flow(self, selection: Selection) -> None:
        if isinstance(selection, AppointmentSelection):
            confirmed_key, followup_key = "booking_confirmed", "booking_followup"
        else:
            confirmed_key, followup_key = "lab_booking_confirmed", "lab_booking_followup"
        fields = selection.model_dump()

        message = self._find_message(self.flow_message_id)
        message.confirm(selection, lookup(self.language, confirmed_key).format(**fields))

        self.flow = None
        self.flow_message_id = None
        self.status = FLOW_COMPLETE
        logger.info("Session %s: flow confirmed (%s)", self.session_id, message.card)

        followup = lookup(self.language, followup_key).format(**fields)
        self._later(self._followup_delay, lambda: self._deliver_followup(followup))

    def _deliver_followup(self, text: str) -> None:
        self._add_message("agent", text)
        if self.status == FLOW_COMPLETE:
            self.status = IDLE

    # ── View ──

    def view(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            language=self.language,
            status=self.status,
            messages=[m.model_copy() for m in self.messages],
            flow=self.flow.view() if self.flow else None,
            suggestions=list(SUGGESTED[self.language]) if len(self.messages) <= 1 else [],
            placeholder=lookup(self.language, "agent_placeholder"),
            speech_lang=SPEECH_LANG_CODES[self.language],
        )


class SessionStore:
    """In-memory registry of chat sessions."""

    def __init__(self, config: Settings = default_settings, scheduler: Optional[Scheduler] = None) -> None:
        self.settings = config
        self._scheduler = scheduler or call_later
        self._sessions: dict[str, ChatSession] = {}

    def create(self, language: Optional[str] = None, report: Optional[LabReport] = None) -> ChatSession:
        session = ChatSession(
            session_id=uuid.uuid4().hex,
            language=language or self.settings.DEFAULT_LANGUAGE,
            scheduler=self._scheduler,
            hospital_delay=self.settings.HOSPITAL_CARD_DELAY_S,
            followup_delay=self.settings.FOLLOWUP_DELAY_S,
            report=report,
        )
        self._sessions[session.session_id] = session
        logger.info("Created chat session %s (%s)", session.session_id, session.language)
        return session

    def get(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Chat session '{session_id}' not found")
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Chat session '{session_id}' not found")

    def clear_all(self) -> None:
        """Discard every session (timers already scheduled become no-ops)."""
        for session in self._sessions.values():
            session.epoch += 1
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
