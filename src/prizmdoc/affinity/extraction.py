"""Affinity token extraction from PrizmDoc responses.

PrizmDoc returns an ``affinityToken`` field in JSON bodies identifying the
node that owns a unit of work. These helpers pull that token out of an
``httpx.Response`` without consuming the body and without ever raising.
"""

import json
import logging

import httpx

logger = logging.getLogger(__name__)

AFFINITY_TOKEN_HEADER = "Accusoft-Affinity-Token"
AFFINITY_TOKEN_FIELD = "affinityToken"
JSON_MEDIA_TYPE = "application/json"


def is_json_media_type(content_type: str | None) -> bool:
    """Check whether a Content-Type value denotes plain JSON.

    Parameters such as ``charset`` are ignored. Structured-syntax types like
    ``application/problem+json`` do not count.

    Args:
        content_type: The raw Content-Type header value, if any.

    Returns:
        True if the media type is exactly application/json.
    """
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE


def _coerce_token(value: object) -> str | None:
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value or None
    if isinstance(value, int | float):
        return str(value)
    return None


def extract_affinity_token(response: httpx.Response) -> str | None:
    """Find the affinity token in a response body, if there is one.

    The body is read through the buffered ``response.content`` so the caller
    can still read it afterwards. The status code is not considered.

    Args:
        response: A response whose body has already been read.

    Returns:
        The token as a string, or None when the response carries no usable
        token (non-JSON content type, malformed body, missing field).
    """
    content_type = response.headers.get("Content-Type")
    if not is_json_media_type(content_type):
        return None

    try:
        body = json.loads(response.content)
    except httpx.ResponseNotRead:
        logger.debug("Response body not read; skipping affinity token extraction")
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug("Response declared JSON but body did not parse: %s", e)
        return None

    if not isinstance(body, dict) or AFFINITY_TOKEN_FIELD not in body:
        return None

    token = _coerce_token(body[AFFINITY_TOKEN_FIELD])
    if token is None:
        logger.debug(
            "Ignoring empty or non-scalar %s value of type %s",
            AFFINITY_TOKEN_FIELD,
            type(body[AFFINITY_TOKEN_FIELD]).__name__,
        )
    return token
