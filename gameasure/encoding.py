"""
Turn requests and their default context into encoded hit strings.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, quote

from gameasure.errors import HitEncodingError
from gameasure.models import Collect, Custom, QueryItem, QueryRepresentable

LOG = logging.getLogger(__name__)


def collect_query_items(
    defaults: Collect,
    request: QueryRepresentable,
    custom: Optional[Custom] = None,
) -> List[Tuple[str, str]]:
    """
    Build the ordered key/value pairs for one hit.

    Default context items come first, then the request, then the custom
    dimension and metric. Items without a value are left out.

    Args:
        defaults (Collect): The engine wide default context.
        request (QueryRepresentable): The hit being tracked.
        custom (Optional[Custom]): Custom dimension and metric for this hit.

    Returns:
        List[Tuple[str, str]]: The pairs that will be encoded.
    """
    items: List[QueryItem] = defaults.query_items + request.query_items

    if custom is not None:
        items = items + custom.query_items

    return [(key, value) for key, value in items if value is not None]


def _quote(text: str, key: str) -> str:
    try:
        return quote(text, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise HitEncodingError(key=key, reason=str(e)) from e


def encode_query(items: Iterable[Tuple[str, str]]) -> str:
    """
    Percent-encode pairs into a query string without the leading '?'.

    Only RFC 3986 unreserved characters are left as they are, so spaces
    become %20 and '&', '=' and '+' never leak into the structure.

    Raises:
        HitEncodingError: If a key is empty or a value cannot be encoded.
    """
    parts = []
    for key, value in items:
        if not key:
            raise HitEncodingError(reason="empty query item key")
        parts.append(f"{_quote(key, key)}={_quote(value, key)}")

    return "&".join(parts)


def encode_hit(
    defaults: Collect,
    request: QueryRepresentable,
    custom: Optional[Custom] = None,
) -> str:
    hit = encode_query(collect_query_items(defaults, request, custom))
    LOG.debug("Encoded hit %s", hit)
    return hit


def parse_hit(hit: str) -> List[Tuple[str, str]]:
    """
    Decode a hit back into its key/value pairs.

    Args:
        hit (str): An encoded hit as produced by encode_hit.

    Returns:
        List[Tuple[str, str]]: The pairs, in encoded order.
    """
    if not hit:
        return []

    return parse_qsl(hit, keep_blank_values=True, strict_parsing=True)
