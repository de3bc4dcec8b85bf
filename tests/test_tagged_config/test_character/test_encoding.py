"""Tests for encoding detection and decoding."""

import codecs

import pytest

from tagged_config.character import (
    BOMDetector,
    DetectionMethod,
    EncodingDetector,
    XMLDeclarationParser,
)
from tagged_config.shared import CharacterConfig, FormatError


class TestBOMDetector:
    """Test byte order mark detection."""

    @pytest.mark.parametrize(
        "bom,encoding",
        [
            (codecs.BOM_UTF8, "utf-8"),
            (codecs.BOM_UTF16_LE, "utf-16-le"),
            (codecs.BOM_UTF16_BE, "utf-16-be"),
            (codecs.BOM_UTF32_LE, "utf-32-le"),
            (codecs.BOM_UTF32_BE, "utf-32-be"),
        ],
    )
    def test_detects_bom(self, bom: bytes, encoding: str) -> None:
        """Test each supported BOM maps to its encoding and length."""
        result = BOMDetector().detect(bom + b"x")

        assert result is not None
        assert result.encoding == encoding
        assert result.bom_length == len(bom)
        assert result.method is DetectionMethod.BOM

    def test_no_bom(self) -> None:
        """Test plain data has no BOM."""
        assert BOMDetector().detect(b"<A></A>") is None
        assert BOMDetector().detect(b"") is None


class TestXMLDeclarationParser:
    """Test encoding declarations."""

    def test_declared_encoding_is_canonical(self) -> None:
        """Test the declared name is normalized by the codec registry."""
        data = b'<?xml version="1.0" encoding="Latin-1"?><A></A>'

        result = XMLDeclarationParser().parse_declaration(data)

        assert result is not None
        assert result.encoding == codecs.lookup("latin-1").name
        assert result.method is DetectionMethod.XML_DECLARATION

    def test_unknown_codec_is_ignored(self) -> None:
        """Test a declaration naming an unknown codec yields nothing."""
        data = b"<?xml version='1.0' encoding='klingon'?>"

        assert XMLDeclarationParser().parse_declaration(data) is None

    def test_declaration_must_be_near_the_start(self) -> None:
        """Test declarations beyond the search window are not honoured."""
        data = b" " * 2048 + b'<?xml version="1.0" encoding="latin-1"?>'

        assert XMLDeclarationParser().parse_declaration(data) is None


class TestEncodingDetector:
    """Test the detection cascade and decoding."""

    def test_empty_input(self) -> None:
        """Test empty input decodes to an empty string."""
        detector = EncodingDetector()

        assert detector.detect(b"").method is DetectionMethod.FALLBACK
        assert detector.decode(b"") == ""

    def test_valid_utf8(self) -> None:
        """Test UTF-8 text is recognized by validation."""
        data = "<A>name = café</A>".encode("utf-8")
        detector = EncodingDetector()

        assert detector.detect(data).method is DetectionMethod.UTF8_VALIDATION
        assert detector.decode(data) == "<A>name = café</A>"

    def test_bom_is_stripped(self) -> None:
        """Test the BOM does not leak into the text."""
        data = codecs.BOM_UTF8 + b"<A>k=v</A>"

        assert EncodingDetector().decode(data) == "<A>k=v</A>"

    def test_utf16_with_bom(self) -> None:
        """Test UTF-16 input is decoded via its BOM."""
        data = codecs.BOM_UTF16_LE + "<A>k=v</A>".encode("utf-16-le")

        assert EncodingDetector().decode(data) == "<A>k=v</A>"

    def test_declaration_beats_validation(self) -> None:
        """Test a declared single-byte encoding is used."""
        data = b'<?xml version="1.0" encoding="latin-1"?><A>k=caf\xe9</A>'

        text = EncodingDetector().decode(data)

        assert text.endswith("<A>k=café</A>")

    def test_fallback_encoding(self) -> None:
        """Test invalid UTF-8 falls back to the configured encoding."""
        config = CharacterConfig(fallback_encoding="cp1252")
        detector = EncodingDetector(config)
        data = b"<A>k=\x93quoted\x94</A>"

        result = detector.detect(data)

        assert result.method is DetectionMethod.FALLBACK
        assert result.encoding == "cp1252"
        assert result.issues == ["Invalid UTF-8 at byte 5"]
        assert detector.decode(data) == "<A>k=“quoted”</A>"

    def test_strict_decode_failure_raises_format_error(self) -> None:
        """Test undecodable bytes raise FormatError in strict mode."""
        with pytest.raises(FormatError, match="cannot decode input as utf-8") as exc_info:
            EncodingDetector().decode(b"<A>k=\xff</A>")

        assert exc_info.value.position == {"offset": 5}

    def test_replace_mode(self) -> None:
        """Test undecodable bytes are replaced when configured."""
        detector = EncodingDetector(CharacterConfig(decode_errors="replace"))

        assert detector.decode(b"<A>k=\xff</A>") == "<A>k=�</A>"

    def test_bom_detection_can_be_disabled(self) -> None:
        """Test detect_bom=False skips the BOM step."""
        detector = EncodingDetector(CharacterConfig(detect_bom=False))
        data = codecs.BOM_UTF8 + b"<A></A>"

        assert detector.detect(data).method is DetectionMethod.UTF8_VALIDATION
