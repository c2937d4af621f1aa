"""
LLM output helpers.

Functions
---------
lc_text_from_content(content) -> str
    Normalize LangChain message content (str or list of parts) to plain text.
parse_llm_json(raw) -> dict
    Parse model text as JSON, stripping code fences and repairing it with
    `json_repair` when strict parsing fails.
"""

import json
import re

from json_repair import repair_json


def lc_text_from_content(content) -> str:
    """Normalize LangChain message content to plain text.

    - If string → return as-is.
    - If list of content parts → concatenates only 'text' parts.
    - If None → empty string.
    - Else → str(content).
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(p.get("text", "") for p in content if isinstance(p, dict) and p.get("type") == "text")
    return str(content)


def parse_llm_json(raw: str) -> dict:
    """Parse model output into a JSON object with optional repair.

    Steps:
        1) Strip markdown code fences.
        2) Try `json.loads`.
        3) Fallback: `json_repair.repair_json` then `json.loads`.

    Raises:
        ValueError if the text is not a JSON object even after repair.
    """
    raw = (raw or "").strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*\n", "", raw)
        raw = re.sub(r"\n?```$", "", raw)

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        try:
            parsed = json.loads(repair_json(raw))
        except Exception as e:
            raise ValueError(f"Failed to parse LLM JSON: {e}\nRAW:\n{raw[:500]}")

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object from the model, got {type(parsed).__name__}\nRAW:\n{raw[:500]}")
    return parsed
