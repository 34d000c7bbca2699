from apps.persona.tools.transcript_parser import (
    ChatRecord,
    filter_by_sender,
    parse_chat_line,
    parse_transcript,
)
from tests.conftest import SAMPLE_TRANSCRIPT


def test_parse_well_formed_line():
    record = parse_chat_line("[10/02/24, 9:14 PM] Anju: on my way")
    assert record == ChatRecord(timestamp="10/02/24, 9:14 PM", sender="Anju", message="on my way")


def test_sender_ends_at_first_colon():
    record = parse_chat_line("[10/02/24, 9:14 PM] Anju: meet at 9:30: ok?")
    assert record.sender == "Anju"
    assert record.message == "meet at 9:30: ok?"


def test_malformed_lines_are_dropped():
    text = "\n".join([
        "Messages and calls are end-to-end encrypted.",
        "[10/02/24, 9:14 PM] Anju: kept",
        "[10/02/24, 9:15 PM] no colon here",
        "10/02/24, 9:16 PM Anju: missing brackets",
        "[10/02/24, 9:17 PM]Anju: no space after bracket",
        "   ",
        "",
    ])
    records = parse_transcript(text)
    assert [r.message for r in records] == ["kept"]


def test_zero_width_and_compatibility_characters_are_normalized():
    record = parse_chat_line("\u200b[10/02/24, 9:14 PM] \u200dAnju\ufeff: \ufb01ne")
    assert record is not None
    assert record.sender == "Anju"
    assert record.message == "fine"


def test_windows_line_endings():
    records = parse_transcript("[1] Anju: a\r\n[2] Anju: b\r\n")
    assert [r.message for r in records] == ["a", "b"]


def test_empty_transcript_yields_nothing():
    assert parse_transcript("") == []


def test_filter_is_exact_and_case_sensitive():
    records = parse_transcript("[1] anju: lower\n[2] Anju: exact\n[3] Anju K: longer")
    kept = filter_by_sender(records, "Anju")
    assert [r.message for r in kept] == ["exact"]


def test_sample_transcript_keeps_persona_lines():
    records = filter_by_sender(parse_transcript(SAMPLE_TRANSCRIPT), "Anju")
    assert len(records) == 3
    assert records[0].format() == "[10/02/24, 9:14 PM] Anju: on my way, save me a seat"
