"""
Prompt construction and response cleanup for single-value generation.

Models tend to wrap a requested value in chatter ("Here is...", quotes,
trailing punctuation, explanations on later lines). ``extract_value``
strips the common patterns so the field receives just the value.
"""

import re
from typing import Any, Mapping, Optional

VALUE_INSTRUCTION = (
    "IMPORTANT: Respond with ONLY the requested value. "
    "No explanation, no quotes, no extra text. Just the value itself."
)

SYSTEM_PROMPT = (
    "You generate realistic synthetic data values. "
    "Every answer is a single value with no commentary."
)

_CHATTER_PREFIX = re.compile(
    r"^(?:(?:here is|here's|the answer is)\s*:?|(?:result|answer)\s*:)\s*",
    re.IGNORECASE,
)


def visible_context(context: Optional[Mapping[str, Any]]) -> dict:
    """Context entries meant for the model; keys starting with ``__`` are internal."""
    if not context:
        return {}
    return {k: v for k, v in context.items() if not str(k).startswith("__")}


def build_prompt(prompt: str, context: Optional[Mapping[str, Any]] = None) -> str:
    """
    Build the full prompt, folding in coherence context.

    Args:
        prompt: Field prompt
        context: Already-generated values the answer must be consistent with

    Returns:
        Prompt text for the backend
    """
    shown = visible_context(context)
    if not shown:
        return f"{prompt}\n\n{VALUE_INSTRUCTION}"

    context_str = "\n".join(f"{key}: {value}" for key, value in shown.items())
    return (
        f"Given the following context:\n{context_str}\n\n"
        f"Generate: {prompt}\n\n{VALUE_INSTRUCTION}"
    )


def extract_value(text: str) -> str:
    """
    Extract a clean value from a model response.

    Handles common patterns:
    - Leading chatter ("Here is", "The answer is", "Result:")
    - Wrapping quotes
    - Trailing sentence punctuation
    - Explanations on following lines
    """
    if not text:
        return ""

    cleaned = text.strip()

    # First non-empty line only
    for line in cleaned.splitlines():
        if line.strip():
            cleaned = line.strip()
            break

    cleaned = _CHATTER_PREFIX.sub("", cleaned)
    cleaned = re.sub(r"[.!?]$", "", cleaned)

    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("\"", "'"):
        cleaned = cleaned[1:-1]

    return cleaned.strip()
