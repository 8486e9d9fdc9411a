from __future__ import annotations

import copy
import json
import logging
from typing import Any, Dict, Optional

from groq import Groq

from fitbuddy.config import get_settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    pass

# Telemetry for the UI "AI Insight" panel
LAST_USED_MODEL: Optional[str] = None
LAST_REQUEST: Optional[Dict[str, Any]] = None


def _close_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively set additionalProperties=false on all object schemas.
    Groq strict json_schema outputs require closed objects.
    """
    def visit(node: Any) -> Any:
        if isinstance(node, dict):
            for k in ("allOf", "anyOf", "oneOf"):
                if k in node and isinstance(node[k], list):
                    node[k] = [visit(x) for x in node[k]]
            props = node.get("properties")
            if isinstance(props, dict):
                for pk, pv in list(props.items()):
                    props[pk] = visit(pv)
            if "items" in node:
                node["items"] = visit(node["items"])
            for defs_key in ("$defs", "definitions"):
                if isinstance(node.get(defs_key), dict):
                    for dk, dv in list(node[defs_key].items()):
                        node[defs_key][dk] = visit(dv)
            if node.get("type") == "object" or isinstance(props, dict):
                node["additionalProperties"] = False
        elif isinstance(node, list):
            return [visit(x) for x in node]
        return node

    return visit(copy.deepcopy(schema))


def chat_json(*, schema: Dict[str, Any], system: str, user: str, temperature: float | None = None) -> Dict[str, Any]:
    """Single structured-output call to the configured Groq model.
    Any failure is raised as LLMError carrying the underlying message; there is no retry.
    """
    global LAST_USED_MODEL, LAST_REQUEST

    settings = get_settings()
    if not settings.GROQ_API_KEY:
        raise LLMError("GROQ_API_KEY is not set; cannot perform LLM call.")
    if not settings.GROQ_MODEL:
        raise LLMError("GROQ_MODEL is not set; cannot perform LLM call.")

    model = settings.GROQ_MODEL.strip()
    temp = settings.GROQ_TEMPERATURE if temperature is None else temperature
    response_format = {
        "type": "json_schema",
        "json_schema": {
            "name": "exercise_routine",
            "schema": _close_schema(schema),
            "strict": True,
        },
    }
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]
    LAST_USED_MODEL = model
    LAST_REQUEST = {"system": system, "user": user}

    try:
        client = Groq(api_key=settings.GROQ_API_KEY)
        resp = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temp,
            response_format=response_format,
        )
        content = resp.choices[0].message.content
    except Exception as e:
        logger.error("LLM call failed (model=%s): %s", model, e)
        raise LLMError(f"LLM call failed (model='{model}'): {e}") from e
    if not content:
        raise LLMError("Empty response content from LLM.")
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise LLMError(f"LLM returned invalid JSON: {e}") from e
