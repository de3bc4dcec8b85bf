"""Encoding detection and decoding of raw configuration buffers.

Detection cascades through BOM detection, the XML declaration and strict
UTF-8 validation before settling on the configured fallback encoding.
"""

import codecs
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from tagged_config.shared.config import CharacterConfig
from tagged_config.shared.errors import FormatError

# Only the head of the buffer is searched for an XML declaration
DECLARATION_SEARCH_LIMIT = 1024


class DetectionMethod(Enum):
    """Enumeration of encoding detection methods."""
    BOM = "bom"
    XML_DECLARATION = "xml_declaration"
    UTF8_VALIDATION = "utf8_validation"
    FALLBACK = "fallback"


@dataclass
class EncodingResult:
    """Result of encoding detection.

    Attributes:
        encoding: Detected encoding name (canonical form)
        method: Detection method used
        bom_length: Number of leading bytes that belong to a byte order mark
        issues: List of issues found during detection
    """
    encoding: str
    method: DetectionMethod
    bom_length: int = 0
    issues: List[str] = field(default_factory=list)


class BOMDetector:
    """Byte Order Mark (BOM) detection for the common Unicode encodings."""

    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        codecs.BOM_UTF8: "utf-8",
        codecs.BOM_UTF32_LE: "utf-32-le",
        codecs.BOM_UTF32_BE: "utf-32-be",
        codecs.BOM_UTF16_LE: "utf-16-le",
        codecs.BOM_UTF16_BE: "utf-16-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        """Detect encoding based on BOM.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingResult if BOM detected, None otherwise
        """
        if not data:
            return None

        # UTF-32 LE starts with the UTF-16 LE mark, so longer patterns go first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda x: len(x[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return EncodingResult(
                    encoding=encoding,
                    method=DetectionMethod.BOM,
                    bom_length=len(bom_bytes),
                )

        return None


class XMLDeclarationParser:
    """Parser for XML encoding declarations."""

    XML_DECLARATION_PATTERN = re.compile(
        rb'<\?xml\s+[^>]*?encoding\s*=\s*["\']([^"\']+)["\'][^>]*?\?>',
        re.IGNORECASE
    )

    def parse_declaration(self, data: bytes) -> Optional[EncodingResult]:
        """Parse encoding from XML declaration.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingResult if a declaration names a known codec, None otherwise
        """
        if not data:
            return None

        match = self.XML_DECLARATION_PATTERN.search(data[:DECLARATION_SEARCH_LIMIT])
        if not match:
            return None

        declared = match.group(1).decode("ascii", errors="ignore").strip().lower()
        try:
            canonical = codecs.lookup(declared).name
        except LookupError:
            return None

        return EncodingResult(
            encoding=canonical,
            method=DetectionMethod.XML_DECLARATION,
        )


class EncodingDetector:
    """Detects the encoding of a raw buffer and decodes it to text."""

    def __init__(self, config: Optional[CharacterConfig] = None) -> None:
        """Initialize detection components.

        Args:
            config: Character settings (defaults to CharacterConfig())
        """
        self.config = config or CharacterConfig()
        self.bom_detector = BOMDetector()
        self.xml_parser = XMLDeclarationParser()

    def detect(self, data: bytes) -> EncodingResult:
        """Detect encoding using the configured detection cascade.

        Args:
            data: Byte data to analyze

        Returns:
            EncodingResult with detected encoding and metadata
        """
        if not data:
            return EncodingResult(encoding="utf-8", method=DetectionMethod.FALLBACK)

        if self.config.detect_bom:
            bom_result = self.bom_detector.detect(data)
            if bom_result:
                return bom_result

        issues: List[str] = []
        if self.config.honor_xml_declaration:
            xml_result = self.xml_parser.parse_declaration(data)
            if xml_result:
                return xml_result

        try:
            data.decode("utf-8")
        except UnicodeDecodeError as e:
            issues.append(f"Invalid UTF-8 at byte {e.start}")
        else:
            return EncodingResult(
                encoding="utf-8", method=DetectionMethod.UTF8_VALIDATION
            )

        return EncodingResult(
            encoding=self.config.fallback_encoding,
            method=DetectionMethod.FALLBACK,
            issues=issues,
        )

    def decode(self, data: bytes) -> str:
        """Decode a raw buffer to text.

        Args:
            data: Byte data to decode

        Returns:
            Decoded text without any byte order mark

        Raises:
            FormatError: If the buffer cannot be decoded and ``decode_errors``
                is ``"strict"``
        """
        result = self.detect(data)
        payload = data[result.bom_length:]
        try:
            return payload.decode(result.encoding, errors=self.config.decode_errors)
        except UnicodeDecodeError as e:
            raise FormatError(
                f"cannot decode input as {result.encoding}: {e.reason}",
                position={"offset": e.start + result.bom_length},
            ) from e
