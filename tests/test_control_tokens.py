import pytest

from labassist.agents.control_tokens import parse_control_tokens


@pytest.mark.parametrize("reply, intent", [
    ("Sure! SHOW_BOOKING_CARD", "booking"),
    ("SHOW_LAB_BOOKING_CARD", "lab_booking"),
    ("Here are some options. SHOW_HOSPITAL_CARD", "hospitals"),
    ("Just a normal answer.", None),
    ("", None),
])
def test_intent_detection(reply: str, intent):
    assert parse_control_tokens(reply).intent == intent


def test_booking_wins_over_other_tokens():
    parsed = parse_control_tokens("SHOW_HOSPITAL_CARD then SHOW_LAB_BOOKING_CARD and SHOW_BOOKING_CARD")
    assert parsed.intent == "booking"
    assert "SHOW_" not in parsed.text


def test_lab_booking_wins_over_hospitals():
    assert parse_control_tokens("SHOW_HOSPITAL_CARD SHOW_LAB_BOOKING_CARD").intent == "lab_booking"


def test_tokens_are_stripped_and_whitespace_collapsed():
    parsed = parse_control_tokens("Please see a doctor  SHOW_HOSPITAL_CARD  soon.")
    assert parsed.text == "Please see a doctor soon."
    assert parsed.intent == "hospitals"


def test_token_only_reply_leaves_empty_text():
    assert parse_control_tokens("  SHOW_BOOKING_CARD \n").text == ""


def test_token_embedded_in_word_is_still_detected():
    parsed = parse_control_tokens("okSHOW_HOSPITAL_CARD")
    assert parsed.intent == "hospitals"
    assert parsed.text == "ok"


@pytest.mark.parametrize("reply", [
    "First line.\n\n\n\nSecond line.",
    "Tips:\n- Diet\n    - iron rich foods\n    - vitamin C\n\n\n\nTake care.",
    "  indented\tcode  \n",
])
def test_reply_without_token_is_returned_verbatim(reply: str):
    parsed = parse_control_tokens(reply)
    assert parsed.text == reply
    assert parsed.intent is None


def test_whitespace_is_only_cleaned_around_tokens():
    reply = "Steps:\n    - rest\n    - hydrate\n\nSHOW_HOSPITAL_CARD"
    assert parse_control_tokens(reply).text == "Steps:\n    - rest\n    - hydrate"


def test_token_at_line_start_leaves_no_leading_space():
    assert parse_control_tokens("Sure.\nSHOW_BOOKING_CARD Let's begin.").text == "Sure.\nLet's begin."
