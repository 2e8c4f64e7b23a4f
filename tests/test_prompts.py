"""Unit tests for summarization prompt composition."""

from __future__ import annotations

import pytest

from src.recap.summaries.prompts import (
    DEFAULT_OUTPUT_TEMPLATE,
    SYSTEM_PREAMBLE,
    compose_prompt,
    extract_transcript,
)


TRANSCRIPT = "Alice: let's ship by Friday.\nBob: I'll own the release notes."


class TestComposePrompt:
    """Tests for compose_prompt section order and content."""

    def test_sections_in_fixed_order(self):
        instruction = "Focus on decisions"
        prompt = compose_prompt(TRANSCRIPT, instruction)

        positions = [
            prompt.index(SYSTEM_PREAMBLE),
            prompt.index(instruction),
            prompt.index(DEFAULT_OUTPUT_TEMPLATE),
            prompt.index(TRANSCRIPT),
        ]
        assert positions == sorted(positions)
        assert prompt.startswith(SYSTEM_PREAMBLE)

    def test_preamble_names_sentinel(self):
        assert "No substantial content found." in SYSTEM_PREAMBLE
        assert "Do not invent details" in SYSTEM_PREAMBLE

    def test_template_has_all_sections(self):
        for heading in ("Title:", "Key Points:", "Action Items:", "Next Steps:"):
            assert heading in DEFAULT_OUTPUT_TEMPLATE

    def test_is_deterministic(self):
        assert compose_prompt(TRANSCRIPT, "x") == compose_prompt(TRANSCRIPT, "x")

    def test_instruction_inserted_verbatim(self):
        instruction = "  List owners\nthen deadlines  "
        prompt = compose_prompt(TRANSCRIPT, instruction)
        assert f"CUSTOM INSTRUCTION: {instruction}\n" in prompt


class TestTranscriptRoundTrip:
    """The transcript recovered from a prompt equals the original exactly."""

    @pytest.mark.parametrize(
        "transcript",
        [
            TRANSCRIPT,
            "x",
            "  leading and trailing whitespace  \n\n",
            "TRANSCRIPT TO SUMMARIZE:\nnested marker\nEND OF TRANSCRIPT",
            "unicode — ünïcödé • bullets",
            "y" * 200_000,
        ],
    )
    def test_round_trip(self, transcript):
        prompt = compose_prompt(transcript, "Provide a structured summary")
        assert extract_transcript(prompt, "Provide a structured summary") == transcript

    def test_round_trip_with_markers_in_instruction(self):
        instruction = (
            f"Use this layout:\n{DEFAULT_OUTPUT_TEMPLATE}\n\n"
            "TRANSCRIPT TO SUMMARIZE:\nfake section\nEND OF TRANSCRIPT"
        )
        prompt = compose_prompt(TRANSCRIPT, instruction)
        assert extract_transcript(prompt, instruction) == TRANSCRIPT

    def test_mismatched_instruction_raises(self):
        prompt = compose_prompt(TRANSCRIPT, "Focus on decisions")
        with pytest.raises(ValueError):
            extract_transcript(prompt, "Provide a structured summary")
