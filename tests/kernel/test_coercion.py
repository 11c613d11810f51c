"""Tests for the type coercion engine."""

import ipaddress
from datetime import UTC, date, datetime, time, timedelta, timezone
from decimal import Decimal
from urllib.parse import SplitResult
from uuid import UUID, uuid4

import pytest
from hypothesis import given
from hypothesis import strategies as st

from docbind_kernel.domain.coercion import COERCERS, coerce, to_document_value
from docbind_kernel.domain.types import SemanticType
from docbind_kernel.exceptions import CoercionError, InvalidArgument, ParseError

CANONICAL_UUID = "123e4567-e89b-12d3-a456-426614174000"


class TestDispatchTable:
    def test_every_member_has_a_coercer(self):
        assert set(COERCERS) == set(SemanticType)

    def test_accepts_string_tags(self):
        assert coerce("42", "integer") == 42
        assert coerce("42", "Integer") == 42
        assert coerce("2026-02-01", "date") == date(2026, 2, 1)

    def test_unknown_tag_is_identity(self):
        marker = object()
        assert coerce(marker, "no_such_type") is marker
        assert coerce({"a": 1}, "SimpleItem") == {"a": 1}


class TestText:
    def test_string(self):
        assert coerce("hello", SemanticType.STRING) == "hello"

    def test_non_string_values(self):
        assert coerce(42, SemanticType.STRING) == "42"
        assert coerce(None, SemanticType.STRING) == ""
        assert coerce(b"abc", SemanticType.STRING) == "abc"

    def test_email_passthrough(self):
        assert coerce("not-an-email", SemanticType.EMAIL) == "not-an-email"


class TestNumbers:
    def test_integer(self):
        assert coerce("42", SemanticType.INTEGER) == 42
        assert coerce(" -7 ", SemanticType.INTEGER) == -7

    def test_integer_truncates(self):
        assert coerce("12.9", SemanticType.INTEGER) == 12
        assert coerce(3.99, SemanticType.INTEGER) == 3
        assert coerce(-3.99, SemanticType.INTEGER) == -3
        assert coerce(Decimal("8.5"), SemanticType.INTEGER) == 8

    def test_integer_leading_prefix(self):
        assert coerce("12abc", SemanticType.INTEGER) == 12
        assert coerce("abc", SemanticType.INTEGER) == 0
        assert coerce(None, SemanticType.INTEGER) == 0

    def test_integer_rejects_infinity(self):
        with pytest.raises(InvalidArgument):
            coerce(float("inf"), SemanticType.INTEGER)

    def test_big_integer(self):
        big = "123456789012345678901234567890"
        assert coerce(big, SemanticType.BIG_INTEGER) == int(big)
        assert coerce("1.5e3", SemanticType.BIG_INTEGER) == 1

    def test_float(self):
        assert coerce("1.5", SemanticType.FLOAT) == 1.5
        assert coerce("2e3", SemanticType.FLOAT) == 2000.0
        assert coerce(3, SemanticType.FLOAT) == 3.0
        assert coerce("x", SemanticType.FLOAT) == 0.0

    def test_decimal(self):
        assert coerce("12.50", SemanticType.DECIMAL) == Decimal("12.50")
        assert coerce(" 0.1 ", SemanticType.DECIMAL) == Decimal("0.1")
        assert coerce(7, SemanticType.DECIMAL) == Decimal(7)

    def test_decimal_is_exact(self):
        assert coerce("0.1", SemanticType.DECIMAL) + coerce("0.2", SemanticType.DECIMAL) == Decimal("0.3")

    def test_decimal_non_numeric_fails(self):
        with pytest.raises(ParseError) as exc_info:
            coerce("twelve", SemanticType.DECIMAL)
        assert exc_info.value.code == "PARSE_ERROR"
        assert exc_info.value.semantic_type == "decimal"


class TestCalendar:
    def test_date(self):
        assert coerce("2026-02-01", SemanticType.DATE) == date(2026, 2, 1)
        assert coerce(date(2026, 2, 1), SemanticType.DATE) == date(2026, 2, 1)
        assert coerce(datetime(2026, 2, 1, 10, 0), SemanticType.DATE) == date(2026, 2, 1)

    def test_date_from_date_time_text(self):
        assert coerce("2026-02-01T10:30:00Z", SemanticType.DATE) == date(2026, 2, 1)

    @pytest.mark.parametrize("bad", ["2026-13-01", "not a date", "", "01/02/2026"])
    def test_date_malformed(self, bad):
        with pytest.raises(ParseError):
            coerce(bad, SemanticType.DATE)

    def test_date_time_with_offset(self):
        result = coerce("2026-02-01T10:30:00+02:00", SemanticType.DATE_TIME)
        assert result == datetime(2026, 2, 1, 10, 30, tzinfo=timezone(timedelta(hours=2)))

    def test_date_time_zulu(self):
        result = coerce("2026-02-01T10:30:00Z", SemanticType.DATE_TIME)
        assert result == datetime(2026, 2, 1, 10, 30, tzinfo=UTC)

    def test_date_time_naive_gets_utc(self):
        result = coerce("2026-02-01T10:30:00", SemanticType.DATE_TIME)
        assert result.tzinfo is not None
        assert result.utcoffset() == timedelta(0)

    def test_date_time_from_date(self):
        result = coerce(date(2026, 2, 1), SemanticType.DATE_TIME)
        assert result == datetime(2026, 2, 1, tzinfo=UTC)

    def test_date_time_malformed(self):
        with pytest.raises(ParseError):
            coerce("yesterday", SemanticType.DATE_TIME)

    def test_time(self):
        assert coerce("10:30", SemanticType.TIME) == time(10, 30)
        assert coerce("10:30:15", SemanticType.TIME) == time(10, 30, 15)

    def test_time_with_offset(self):
        result = coerce("10:30:00Z", SemanticType.TIME)
        assert result == time(10, 30, tzinfo=UTC)

    def test_time_from_date_time_text(self):
        assert coerce("2026-02-01T08:15:00", SemanticType.TIME) == time(8, 15)

    def test_time_malformed(self):
        with pytest.raises(ParseError):
            coerce("25:99", SemanticType.TIME)


class TestBoolean:
    @pytest.mark.parametrize("raw", ["true", "TRUE", "True", "t", "yes", "y", "1", " yes ", True, 1])
    def test_truthy(self, raw):
        assert coerce(raw, SemanticType.BOOLEAN) is True

    @pytest.mark.parametrize("raw", ["false", "FALSE", "f", "no", "n", "0", "", "   ", None, False, 0, []])
    def test_falsy(self, raw):
        assert coerce(raw, SemanticType.BOOLEAN) is False

    @pytest.mark.parametrize("raw", ["maybe", "2", "on", "truthy", 2, 1.0])
    def test_invalid(self, raw):
        with pytest.raises(InvalidArgument) as exc_info:
            coerce(raw, SemanticType.BOOLEAN)
        assert "invalid value for Boolean" in str(exc_info.value)

    def test_invalid_argument_is_coercion_error(self):
        with pytest.raises(CoercionError):
            coerce("maybe", SemanticType.BOOLEAN)


class TestContainers:
    def test_array_wraps_scalar(self):
        assert coerce("a", SemanticType.ARRAY) == ["a"]
        assert coerce({"k": 1}, SemanticType.ARRAY) == [{"k": 1}]

    def test_array_keeps_sequence(self):
        assert coerce(["a", "b"], SemanticType.ARRAY) == ["a", "b"]
        assert coerce(("a", "b"), SemanticType.ARRAY) == ["a", "b"]

    def test_array_none(self):
        assert coerce(None, SemanticType.ARRAY) == []

    def test_hash_identity(self):
        d = {"a": 1}
        assert coerce(d, SemanticType.HASH) is d

    def test_hash_from_pairs(self):
        assert coerce([("a", 1), ("b", 2)], SemanticType.HASH) == {"a": 1, "b": 2}

    def test_hash_empty(self):
        assert coerce(None, SemanticType.HASH) == {}
        assert coerce([], SemanticType.HASH) == {}

    def test_hash_invalid(self):
        with pytest.raises(InvalidArgument):
            coerce("text", SemanticType.HASH)
        with pytest.raises(InvalidArgument):
            coerce([1, 2, 3], SemanticType.HASH)


class TestUUID:
    def test_canonical_returned_unchanged(self):
        assert coerce(CANONICAL_UUID, SemanticType.UUID) == CANONICAL_UUID
        assert coerce(CANONICAL_UUID.upper(), SemanticType.UUID) == CANONICAL_UUID.upper()

    def test_uuid_object_returned_unchanged(self):
        u = uuid4()
        assert coerce(u, SemanticType.UUID) is u

    @pytest.mark.parametrize("raw", ["not-a-uuid", "", None, "123e4567e89b12d3a456426614174000"])
    def test_mismatch_generates_new(self, raw):
        result = coerce(raw, SemanticType.UUID)
        assert result != raw
        assert str(UUID(result)) == result

    def test_mismatch_generates_distinct_values(self):
        assert coerce("bad", SemanticType.UUID) != coerce("bad", SemanticType.UUID)

    def test_mismatch_is_logged(self, captured_logs):
        coerce("bad", SemanticType.UUID)
        records = [r for r in captured_logs() if r["message"] == "uuid_regenerated"]
        assert len(records) == 1
        assert records[0]["level"] == "WARNING"
        assert records[0]["raw_value"] == "bad"


class TestIdentifiersAndBinary:
    def test_symbol_is_interned(self):
        a = coerce("".join(["sym", "bol"]), SemanticType.SYMBOL)
        b = coerce("".join(["sym", "bol"]), SemanticType.SYMBOL)
        assert a == "symbol"
        assert a is b

    def test_binary_from_text(self):
        assert coerce("héllo", SemanticType.BINARY) == "héllo".encode("utf-8")

    def test_binary_from_bytes(self):
        assert coerce(bytearray(b"\x00\xff"), SemanticType.BINARY) == b"\x00\xff"

    def test_binary_invalid(self):
        with pytest.raises(InvalidArgument):
            coerce(12, SemanticType.BINARY)

    def test_enum_passthrough(self):
        assert coerce("anything", SemanticType.ENUM) == "anything"


class TestNetwork:
    def test_url(self):
        result = coerce("https://example.com:8443/path?q=1", SemanticType.URL)
        assert isinstance(result, SplitResult)
        assert result.scheme == "https"
        assert result.hostname == "example.com"
        assert result.port == 8443
        assert result.path == "/path"

    @pytest.mark.parametrize("bad", ["http://exa mple.com", "http://[::1", "http://host:99999/"])
    def test_url_malformed(self, bad):
        with pytest.raises(ParseError):
            coerce(bad, SemanticType.URL)

    def test_ipv4(self):
        assert coerce("192.168.1.10", SemanticType.IP_ADDRESS) == ipaddress.ip_address("192.168.1.10")

    def test_ipv6(self):
        assert coerce("::1", SemanticType.IP_ADDRESS) == ipaddress.IPv6Address("::1")

    def test_ip_network_notation(self):
        result = coerce("192.168.1.10/24", SemanticType.IP_ADDRESS)
        assert result == ipaddress.ip_network("192.168.1.0/24")

    def test_ip_malformed(self):
        with pytest.raises(ParseError):
            coerce("999.1.1.1", SemanticType.IP_ADDRESS)


class TestJSON:
    def test_parse(self):
        assert coerce('{"a": [1, 2]}', SemanticType.JSON) == {"a": [1, 2]}
        assert coerce("3", SemanticType.JSON) == 3

    def test_already_decoded(self):
        assert coerce({"a": 1}, SemanticType.JSON) == {"a": 1}

    def test_malformed(self):
        with pytest.raises(ParseError):
            coerce("{bad json", SemanticType.JSON)

    def test_non_text(self):
        with pytest.raises(ParseError):
            coerce(12, SemanticType.JSON)


class TestToDocumentValue:
    def test_calendar_values(self):
        assert to_document_value(date(2026, 2, 1), SemanticType.DATE) == "2026-02-01"
        assert to_document_value(time(10, 30), SemanticType.TIME) == "10:30:00"

    def test_text_like_values(self):
        assert to_document_value(Decimal("1.50"), SemanticType.DECIMAL) == "1.50"
        assert to_document_value(UUID(CANONICAL_UUID), SemanticType.UUID) == CANONICAL_UUID
        assert to_document_value(ipaddress.ip_address("10.0.0.1"), SemanticType.IP_ADDRESS) == "10.0.0.1"
        url = coerce("https://example.com/a", SemanticType.URL)
        assert to_document_value(url, SemanticType.URL) == "https://example.com/a"

    def test_json_native_values_unchanged(self):
        assert to_document_value(5, SemanticType.INTEGER) == 5
        assert to_document_value(True, SemanticType.BOOLEAN) is True
        assert to_document_value(None, SemanticType.STRING) is None

    def test_binary_written_as_utf8_text(self):
        assert to_document_value("héllo".encode("utf-8"), SemanticType.BINARY) == "héllo"

    @given(st.binary(max_size=64))
    def test_binary_writer_inverts_reader(self, raw):
        assert coerce(to_document_value(raw, SemanticType.BINARY), SemanticType.BINARY) == raw
