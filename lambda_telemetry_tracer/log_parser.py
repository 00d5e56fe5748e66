"""Extract span event attributes from free-form function log lines."""

import json

from .records import to_attribute_value

_decoder = json.JSONDecoder()


def parse_function_log(text: str) -> dict[str, str]:
    """Turn a function log line into span event attributes.

    The first JSON object found in the line is treated as structured
    metadata and flattened into one attribute per top-level field. Text
    before the object and anything after it is ignored.

    Lines without a ``{`` yield ``{"raw_log": text}``. Lines where the
    object does not decode yield ``{"error": <reason>, "raw_log": text}``.
    This function never raises.

    Args:
        text: The raw log line

    Returns:
        dict[str, str]: Attributes in the order the fields appeared
    """
    start = text.find("{")
    if start == -1:
        return {"raw_log": text}

    try:
        value, _ = _decoder.raw_decode(text[start:])
    except (ValueError, RecursionError) as e:
        return {"error": str(e) or type(e).__name__, "raw_log": text}

    return {key: to_attribute_value(field) for key, field in value.items()}
