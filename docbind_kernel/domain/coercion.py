"""
Type coercion engine: pure conversion from raw document value to typed value.

One coercer per SemanticType member, dispatched through a table. Failures
raise ParseError / InvalidArgument; unrecognized tags fall back to identity.
The only side effect is UUID generation on a pattern mismatch.
"""

from __future__ import annotations

import ipaddress
import json
import math
import re
import sys
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import SplitResult, urlsplit
from uuid import UUID, uuid4

from docbind_kernel.domain.types import SemanticType
from docbind_kernel.exceptions import InvalidArgument, ParseError
from docbind_kernel.logging_config import get_logger

logger = get_logger("domain.coercion")

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")
_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_TRUE_WORDS = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_WORDS = frozenset({"false", "f", "no", "n", "0"})
_URL_FORBIDDEN = re.compile(r"[\s\x00-\x1f\x7f<>\"{}|\\^`]")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


# -----------------------------------------------------------------------------
# Numbers
# -----------------------------------------------------------------------------


def _to_integer(value: Any) -> int:
    """Truncating base-10 parse; text without a leading integer yields 0."""
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgument(SemanticType.INTEGER.value, value, "not a finite number")
        return math.trunc(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidArgument(SemanticType.INTEGER.value, value, "not a finite number")
        return int(value)
    m = _INT_PREFIX.match(_text(value))
    return int(m.group(1)) if m else 0


def _to_float(value: Any) -> float:
    if isinstance(value, int | float | Decimal):
        return float(value)
    m = _FLOAT_PREFIX.match(_text(value))
    return float(m.group(1)) if m else 0.0


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidArgument(SemanticType.DECIMAL.value, value, "boolean is not numeric")
    s = _text(value).strip()
    try:
        return Decimal(s)
    except (InvalidOperation, ValueError):
        raise ParseError(SemanticType.DECIMAL.value, value, "not a decimal number") from None


# -----------------------------------------------------------------------------
# Calendar types
# -----------------------------------------------------------------------------


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = _text(value).strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        raise ParseError(SemanticType.DATE.value, value, "expected YYYY-MM-DD") from None


def _to_date_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    else:
        s = _text(value).strip()
        try:
            parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            raise ParseError(
                SemanticType.DATE_TIME.value, value, "expected ISO 8601 date-time"
            ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _to_time(value: Any) -> time:
    if isinstance(value, datetime):
        return value.timetz()
    if isinstance(value, time):
        return value
    s = _text(value).strip().replace("Z", "+00:00")
    try:
        return time.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s).timetz()
    except ValueError:
        raise ParseError(SemanticType.TIME.value, value, "expected HH:MM[:SS]") from None


# -----------------------------------------------------------------------------
# Boolean
# -----------------------------------------------------------------------------


def _to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int):
        value = str(value)
    if isinstance(value, str):
        low = value.strip().lower()
        if low in _TRUE_WORDS:
            return True
        if not low or low in _FALSE_WORDS:
            return False
    elif isinstance(value, Iterable) and not isinstance(value, bytes | bytearray) and not value:
        return False
    raise InvalidArgument(
        SemanticType.BOOLEAN.value, value, f'invalid value for Boolean: "{value}"'
    )


# -----------------------------------------------------------------------------
# Containers
# -----------------------------------------------------------------------------


def _to_array(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


def _to_hash(value: Any) -> Mapping[Any, Any]:
    if isinstance(value, Mapping):
        return value
    if value is None or (isinstance(value, list | tuple) and not value):
        return {}
    if isinstance(value, list | tuple):
        try:
            return dict(value)
        except (TypeError, ValueError):
            pass
    raise InvalidArgument(SemanticType.HASH.value, value, "cannot convert to a mapping")


# -----------------------------------------------------------------------------
# Identifiers and binary
# -----------------------------------------------------------------------------


def _to_uuid(value: Any) -> Any:
    if value is not None and _UUID_PATTERN.fullmatch(str(value)):
        return value
    generated = str(uuid4())
    logger.warning(
        "uuid_regenerated",
        extra={"raw_value": _text(value)[:64], "generated_uuid": generated},
    )
    return generated


def _to_symbol(value: Any) -> str:
    return sys.intern(_text(value))


def _to_binary(value: Any) -> bytes:
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8", errors="surrogateescape")
    raise InvalidArgument(SemanticType.BINARY.value, value, "expected bytes or text")


# -----------------------------------------------------------------------------
# Network and structured text
# -----------------------------------------------------------------------------


def _to_url(value: Any) -> SplitResult:
    if isinstance(value, SplitResult):
        return value
    s = _text(value)
    if _URL_FORBIDDEN.search(s):
        raise ParseError(SemanticType.URL.value, value, "illegal character in URL")
    try:
        parts = urlsplit(s)
        parts.port  # noqa: B018 -- validates the port range
    except ValueError as exc:
        raise ParseError(SemanticType.URL.value, value, str(exc)) from None
    return parts


def _to_ip_address(value: Any) -> Any:
    if isinstance(value, ipaddress.IPv4Address | ipaddress.IPv6Address):
        return value
    if isinstance(value, ipaddress.IPv4Network | ipaddress.IPv6Network):
        return value
    s = _text(value).strip()
    try:
        if "/" in s:
            return ipaddress.ip_network(s, strict=False)
        return ipaddress.ip_address(s)
    except ValueError as exc:
        raise ParseError(SemanticType.IP_ADDRESS.value, value, str(exc)) from None


def _to_json(value: Any) -> Any:
    if isinstance(value, dict | list):
        return value
    if not isinstance(value, str | bytes | bytearray):
        raise ParseError(SemanticType.JSON.value, value, "expected JSON text")
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise ParseError(SemanticType.JSON.value, value, exc.msg) from None


def _identity(value: Any) -> Any:
    return value


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------

COERCERS: dict[SemanticType, Callable[[Any], Any]] = {
    SemanticType.STRING: _text,
    SemanticType.INTEGER: _to_integer,
    SemanticType.FLOAT: _to_float,
    SemanticType.DATE: _to_date,
    SemanticType.DATE_TIME: _to_date_time,
    SemanticType.TIME: _to_time,
    SemanticType.BOOLEAN: _to_boolean,
    SemanticType.DECIMAL: _to_decimal,
    SemanticType.ARRAY: _to_array,
    SemanticType.HASH: _to_hash,
    SemanticType.UUID: _to_uuid,
    SemanticType.SYMBOL: _to_symbol,
    SemanticType.BIG_INTEGER: _to_integer,
    SemanticType.BINARY: _to_binary,
    SemanticType.URL: _to_url,
    SemanticType.EMAIL: _text,
    SemanticType.IP_ADDRESS: _to_ip_address,
    SemanticType.JSON: _to_json,
    SemanticType.ENUM: _identity,
    SemanticType.UNRECOGNIZED: _identity,
}


def coerce(value: Any, semantic_type: SemanticType | str) -> Any:
    """
    Coerce one raw value to `semantic_type`. Pure function.

    Raises:
        ParseError: text does not match the target grammar.
        InvalidArgument: value outside the target type's domain.
    """
    return COERCERS[SemanticType.from_tag(semantic_type)](value)


# -----------------------------------------------------------------------------
# Generic writer (typed value -> JSON-compatible document value)
# -----------------------------------------------------------------------------


def to_document_value(value: Any, semantic_type: SemanticType | str) -> Any:
    """Turn a typed value back into a JSON-compatible primitive."""
    if value is None:
        return None
    st = SemanticType.from_tag(semantic_type)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode("utf-8", errors="surrogateescape")
    if isinstance(value, SplitResult):
        return value.geturl()
    if isinstance(value, Decimal | UUID) or st is SemanticType.IP_ADDRESS:
        return str(value)
    if isinstance(value, tuple):
        return list(value)
    return value
