"""FormatClassifier: string subtype detection for schema inference.

Applies an ordered battery of detectors to a string value; the first detector
that matches wins:

 1. calendar date            -> "date"
 2. RFC 3339 date-time       -> "date-time"
 3. IPv4                     -> "ipv4"
 4. IPv6                     -> "ipv6"
 5. email                    -> "email"
 6. generic URL              -> "uri"
 7. URI                      -> "uri"
 8. URI reference            -> "uri-reference"
 9. JSON pointer             -> "json-pointer"
10. relative JSON pointer    -> "relative-json-pointer"
11. regex pattern            -> "regex"
12. boolean literal          -> recognised, no format

Classification is pure and total: it never raises, and "no match" is itself
a result.  Results are memoised per classifier in an LRU cache because API
traffic repeats the same literals (status strings, enum-like values) across
thousands of samples.
"""

from __future__ import annotations

import datetime as dt
import ipaddress
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from cachetools import LRUCache

__all__ = ["FormatClassifier", "FormatMatch", "StringFormat", "classify"]


class StringFormat(StrEnum):
    """JSON-Schema ``format`` values the classifier can emit."""

    DATE = "date"
    DATE_TIME = "date-time"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    EMAIL = "email"
    URI = "uri"
    URI_REFERENCE = "uri-reference"
    JSON_POINTER = "json-pointer"
    RELATIVE_JSON_POINTER = "relative-json-pointer"
    REGEX = "regex"


@dataclass(frozen=True, slots=True)
class FormatMatch:
    """Outcome of classifying one string.

    Attributes:
        format: The detected format, or None.
        matched: True when some detector recognised the value.  A boolean
            literal such as ``"true"`` is matched but carries no format.
    """

    format: StringFormat | None
    matched: bool


NO_MATCH = FormatMatch(None, False)

_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_DATE_TIME = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2}(?:\.\d+)?)"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})"
)
_EMAIL = re.compile(r"[^@\s/:]+@[^@\s.]+(?:\.[^@\s.]+)+")
_URL = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://[^\s/?#]+[^\s]*")
_URI = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:[^\s]+")
_URI_REFERENCE = re.compile(r"(?://|\./|\.\./|[?#])[^\s]*|/[^\s?#]*[?#][^\s]*")
_JSON_POINTER = re.compile(r"(?:/(?:[^~/]|~[01])*)+")
_RELATIVE_JSON_POINTER = re.compile(r"(?:0|[1-9]\d*)(?:#|(?:/(?:[^~/]|~[01])*)+)")
_REGEX_SYNTAX = re.compile(r"[\\\[(*+?{|]")

# Boolean spellings emitted by common string-to-bool serializers.
_BOOLEAN_LITERALS = frozenset(
    {"1", "t", "T", "TRUE", "true", "True", "0", "f", "F", "FALSE", "false", "False"}
)


def _is_date(value: str) -> bool:
    if not _DATE.fullmatch(value):
        return False
    try:
        dt.date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _is_date_time(value: str) -> bool:
    match = _DATE_TIME.fullmatch(value)
    if match is None:
        return False
    offset = match.group("offset")
    normalized = f"{match.group('date')}T{match.group('time')}"
    normalized += "+00:00" if offset in ("Z", "z") else offset
    try:
        dt.datetime.fromisoformat(normalized)
    except ValueError:
        return False
    return True


def _ip_version(value: str) -> int | None:
    try:
        return ipaddress.ip_address(value).version
    except ValueError:
        return None


def _is_regex(value: str) -> bool:
    if len(value) < 2:
        return False
    anchored_end = value.endswith("$") and not value.endswith("\\$")
    if not (value.startswith("^") or (anchored_end and _REGEX_SYNTAX.search(value))):
        return False
    try:
        re.compile(value)
    except re.error:
        return False
    return True


# Ordered battery.  Order is the tie-break and must not be changed.
_DETECTORS: tuple[tuple[Callable[[str], bool], StringFormat | None], ...] = (
    (_is_date, StringFormat.DATE),
    (_is_date_time, StringFormat.DATE_TIME),
    (lambda v: _ip_version(v) == 4, StringFormat.IPV4),
    (lambda v: _ip_version(v) == 6, StringFormat.IPV6),
    (lambda v: _EMAIL.fullmatch(v) is not None, StringFormat.EMAIL),
    (lambda v: _URL.fullmatch(v) is not None, StringFormat.URI),
    (lambda v: _URI.fullmatch(v) is not None, StringFormat.URI),
    (lambda v: _URI_REFERENCE.fullmatch(v) is not None, StringFormat.URI_REFERENCE),
    (lambda v: _JSON_POINTER.fullmatch(v) is not None, StringFormat.JSON_POINTER),
    (
        lambda v: _RELATIVE_JSON_POINTER.fullmatch(v) is not None,
        StringFormat.RELATIVE_JSON_POINTER,
    ),
    (_is_regex, StringFormat.REGEX),
    (lambda v: v in _BOOLEAN_LITERALS, None),
)


def classify(value: str) -> FormatMatch:
    """Classify one string without caching.

    Args:
        value: Any string.

    Returns:
        The first matching ``FormatMatch``, or ``FormatMatch(None, False)``.
    """
    for detector, fmt in _DETECTORS:
        if detector(value):
            return FormatMatch(fmt, True)
    return NO_MATCH


class FormatClassifier:
    """LRU-memoised front end for ``classify``.

    Each instance owns its own ``LRUCache`` -- two classifiers never share
    state.  Eviction is silent.

    Args:
        max_cache_size: Maximum number of distinct strings remembered.
            Defaults to 1024.  Strings longer than ``max_cached_length`` are
            classified but never cached.
        max_cached_length: Length limit for cache entries.  Defaults to 256.

    Example::

        classifier = FormatClassifier()
        classifier.classify("2024-02-29").format   # StringFormat.DATE
        classifier.classify("hello").matched       # False
    """

    def __init__(self, max_cache_size: int = 1024, max_cached_length: int = 256) -> None:
        self._cache: LRUCache[str, FormatMatch] = LRUCache(maxsize=max_cache_size)
        self._max_cached_length = max_cached_length

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    def classify(self, value: str) -> FormatMatch:
        cached = self._cache.get(value)
        if cached is not None:
            return cached
        result = classify(value)
        if len(value) <= self._max_cached_length:
            self._cache[value] = result
        return result
