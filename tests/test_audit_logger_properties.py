"""
Property-based tests for Audit Logger module.

Tests output formats, level filtering and masking of contact data and
credentials.
"""

import json
from io import StringIO

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from domain_registrar.audit_logger import AuditLogger
from domain_registrar.enums import LogLevel
from domain_registrar.exceptions import RemoteServiceError


@st.composite
def log_level_strategy(draw) -> LogLevel:
    """Generate valid LogLevel values."""
    return draw(st.sampled_from(list(LogLevel)))


@st.composite
def message_strategy(draw) -> str:
    """Generate single-line log messages."""
    return draw(st.text(
        alphabet=st.characters(
            whitelist_categories=('L', 'N', 'P', 'S', 'Z'),
            blacklist_characters='\x00\n\r',
        ),
        min_size=1,
        max_size=100,
    ))


@st.composite
def non_sensitive_key_strategy(draw) -> str:
    """Generate keys that are NOT sensitive."""
    key = draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"),
        min_size=1,
        max_size=20,
    ))
    for pattern in AuditLogger.SENSITIVE_KEYS:
        assume(pattern not in key)
    return key


@st.composite
def sensitive_key_strategy(draw) -> str:
    """Generate keys that ARE sensitive, in varied case and context."""
    base = draw(st.sampled_from([
        'email', 'phone_number', 'address_line_1', 'zip_code', 'password',
        'aws_secret_access_key', 'session_token', 'credentials', 'postal_code',
    ]))
    return draw(st.sampled_from([base, base.upper(), f"admin_{base}"]))


class TestLevelFilteringProperty:
    """Entries below the minimum level are dropped."""

    @given(level=log_level_strategy(), min_level=log_level_strategy())
    @settings(max_examples=100)
    def test_filtered_iff_below_min_level(self, level: LogLevel, min_level: LogLevel) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="text", output_stream=stream, min_level=min_level)

        entry = logger.log(level, "Test", "message")

        if level.rank < min_level.rank:
            assert entry is None
            assert stream.getvalue() == ""
            assert logger.entries == []
        else:
            assert entry is not None
            assert logger.entries == [entry]

    def test_from_config_falls_back_to_info(self) -> None:
        assert AuditLogger.from_config("DEBUG", "json").min_level == LogLevel.DEBUG
        assert AuditLogger.from_config("chatty", "json").min_level == LogLevel.INFO

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(output_format="xml")


class TestOutputFormatProperty:
    """JSON output parses back; text output has the fixed prefix."""

    @given(level=log_level_strategy(), message=message_strategy())
    @settings(max_examples=100)
    def test_json_line_round_trips(self, level: LogLevel, message: str) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="json", output_stream=stream,
                             min_level=LogLevel.DEBUG)

        logger.log(level, "ZoneGuard", message, {"domain": "example.com"})

        parsed = json.loads(stream.getvalue().strip())
        assert parsed["level"] == level.value
        assert parsed["component"] == "ZoneGuard"
        assert parsed["message"] == message
        assert parsed["data"] == {"domain": "example.com"}

    def test_text_format(self) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="text", output_stream=stream)

        entry = logger.log(LogLevel.WARN, "ZoneGuard", "Skipping", {"reason": "private"})

        line = stream.getvalue().strip()
        assert line.startswith(f"[{entry.timestamp}] WARN [ZoneGuard] Skipping")
        assert line.endswith('{"reason": "private"}')

    def test_both_formats(self) -> None:
        stream = StringIO()
        logger = AuditLogger(output_format="both", output_stream=stream)

        logger.log(LogLevel.INFO, "Test", "hello")

        assert len(stream.getvalue().strip().splitlines()) == 2


class TestMaskingProperty:
    """Contact data and credentials never reach the output."""

    @given(key=sensitive_key_strategy(), value=st.text(min_size=1, max_size=30))
    @settings(max_examples=100)
    def test_sensitive_values_masked(self, key: str, value: str) -> None:
        logger = AuditLogger(output_stream=StringIO())

        masked = logger.mask_sensitive_data({key: value, "nested": {key: value},
                                             "items": [{key: value}]})

        assert masked[key] == AuditLogger.MASK_VALUE
        assert masked["nested"][key] == AuditLogger.MASK_VALUE
        assert masked["items"][0][key] == AuditLogger.MASK_VALUE

    @given(key=non_sensitive_key_strategy(), value=st.text(max_size=30))
    @settings(max_examples=100)
    def test_other_values_untouched(self, key: str, value: str) -> None:
        logger = AuditLogger(output_stream=StringIO())

        assert logger.mask_sensitive_data({key: value}) == {key: value}

    def test_original_dict_not_modified(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        data = {"email": "ada@example.org"}

        logger.log(LogLevel.INFO, "Test", "contact", data)

        assert data == {"email": "ada@example.org"}
        assert logger.entries[0].data == {"email": AuditLogger.MASK_VALUE}


class TestErrorLogging:
    """log_error records type, message and code of the exception."""

    def test_error_fields(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        error = RemoteServiceError(code="Throttling", message="Rate exceeded")

        entry = logger.log_error("Test", "Remote call failed", error=error,
                                 additional_data={"domain": "example.com"})

        assert entry.level == LogLevel.ERROR
        assert entry.data == {
            "domain": "example.com",
            "error_message": "Rate exceeded",
            "error_type": "RemoteServiceError",
            "error_code": "Throttling",
        }

    def test_clear_entries(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        logger.log(LogLevel.INFO, "Test", "one")

        logger.clear_entries()

        assert logger.entries == []
