"""Prompt construction for transcript summarization.

The composed prompt has a fixed section order that the model relies on
for instruction-following:

1. System preamble
2. Custom instruction, verbatim
3. Default output template
4. Transcript, verbatim, between delimiter lines

Nothing is truncated or re-ordered.
"""

from __future__ import annotations

from src.recap.schemas.summary import NO_CONTENT_SENTINEL

SYSTEM_PREAMBLE = (
    "You are an expert meeting assistant. Produce concise, factual, and "
    "actionable summaries. Obey the custom instruction. If the transcript is "
    f"empty or low-signal, return '{NO_CONTENT_SENTINEL}' Do not invent details."
)

DEFAULT_OUTPUT_TEMPLATE = """Default output structure when user hasn't specified:

Title: <one line>

Key Points:
• <point>
• <point>
• <point>

Action Items:
• <who>: <what> by <when>
• <who>: <what> by <when>

Next Steps:
• <next meeting/follow-up>"""

INSTRUCTION_LABEL = "CUSTOM INSTRUCTION: "
TRANSCRIPT_START = "TRANSCRIPT TO SUMMARIZE:\n"
TRANSCRIPT_END = "\nEND OF TRANSCRIPT"
CLOSING_REQUEST = "Please provide a summary following the custom instruction above."


def compose_prompt(transcript_text: str, custom_instruction: str) -> str:
    """Assemble the full summarization prompt.

    Args:
        transcript_text: Validated transcript, inserted unchanged.
        custom_instruction: Caller instruction (already defaulted if empty).

    Returns:
        The prompt string sent to the provider.
    """
    return (
        f"{SYSTEM_PREAMBLE}\n\n"
        f"{INSTRUCTION_LABEL}{custom_instruction}\n\n"
        f"{DEFAULT_OUTPUT_TEMPLATE}\n\n"
        f"{TRANSCRIPT_START}{transcript_text}{TRANSCRIPT_END}\n\n"
        f"{CLOSING_REQUEST}"
    )


def extract_transcript(prompt: str, custom_instruction: str) -> str:
    """Recover the transcript section from a prompt built by compose_prompt.

    The section is located from the known prefix for ``custom_instruction``,
    so marker text inside the instruction or the transcript does not shift
    it.

    Raises:
        ValueError: ``prompt`` was not composed with ``custom_instruction``.
    """
    tail = f"{TRANSCRIPT_END}\n\n{CLOSING_REQUEST}"
    empty = compose_prompt("", custom_instruction)
    head = empty[: len(empty) - len(tail)]
    if not (prompt.startswith(head) and prompt.endswith(tail)):
        raise ValueError("prompt was not composed with this instruction")
    return prompt[len(head) : len(prompt) - len(tail)]
