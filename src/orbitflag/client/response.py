"""Response interpretation -- maps an :class:`httpx.Response` to a flag value.

Both clients hand the raw response to :func:`interpret_response`, which
either returns the evaluated ``bool`` or raises the
:class:`~orbitflag.exceptions.EvaluationError` subclass describing why no
value could be derived.  Keeping this in one place means the sync and async
clients cannot drift apart on what counts as a valid answer.

Boolean coercion
----------------

The flag service contract only promises a JSON body with a ``data`` field.
Its value is coerced with :func:`coerce_flag_value`, an explicit rule of
this SDK: the result is ``True`` for literal ``true``, a non-zero non-NaN
number, a non-empty string, or a non-empty array/object, and ``False`` for
everything else.  Empty arrays and objects are ``False`` here, unlike
JavaScript truthiness.  The string ``"false"`` is non-empty and therefore
``True``.
"""

from __future__ import annotations

import math
from typing import Any

import httpx

from orbitflag.exceptions import HTTPStatusError, NoDataError, ResponseParseError


def interpret_response(response: httpx.Response, flag_key: str) -> bool:
    """Derive the flag value from a flag-service response.

    Args:
        response: The response to ``POST /api/evaluate``.
        flag_key: The evaluated flag, used in error messages.

    Returns:
        The coerced flag value.

    Raises:
        HTTPStatusError: The status is outside 2xx; the body is ignored.
        ResponseParseError: The body is not valid JSON.
        NoDataError: The body is empty, ``null``, or has no ``data`` field.
    """
    status = response.status_code
    if not (200 <= status < 300):
        raise HTTPStatusError(
            f"HTTP {status} evaluating flag {flag_key!r}", status, flag_key=flag_key
        )

    payload = extract_response_data(response, flag_key)
    value = extract_flag_value(payload)
    if value is None:
        raise NoDataError(f"No data in response for flag {flag_key!r}", flag_key=flag_key)

    return coerce_flag_value(value)


def extract_response_data(response: httpx.Response, flag_key: str = "") -> Any:
    """Parse the response body as JSON.

    Returns ``None`` for an empty body.

    Raises:
        ResponseParseError: The body is present but is not JSON.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError as exc:
        snippet = response.text[:200] if response.text else ""
        raise ResponseParseError(
            f"Invalid JSON in response for flag {flag_key!r}: {snippet}",
            flag_key=flag_key or None,
        ) from exc


def extract_flag_value(payload: Any) -> Any:
    """Pick the flag value out of a parsed body.

    A JSON object yields its ``data`` field (``None`` when missing).  Any
    other JSON value is taken to be the flag value itself.
    """
    if isinstance(payload, dict):
        return payload.get("data")
    return payload


def coerce_flag_value(value: Any) -> bool:
    """Coerce a JSON value to a flag ``bool``.

    * ``bool`` -- returned as is.
    * ``int`` / ``float`` -- ``True`` unless zero or NaN.
    * ``str`` / ``list`` / ``dict`` -- ``True`` unless empty.
    * ``None`` -- ``False``.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    return bool(value)
