"""Tag tokenizer for the hybrid tagged-section configuration format.

This module converts decoded text into a flat stream of start-tag, end-tag and
text tokens. It only understands markup boundaries: tag balancing and the
meaning of text content are left to the tree builder.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple

from tagged_config.shared.config import TokenizationConfig
from tagged_config.shared.errors import FormatError

logger = logging.getLogger(__name__)

_TAG_NAME_PATTERN = re.compile(r"[^\s/<>=\"']+")
_ENTITY_PATTERN = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|lt|gt|amp|apos|quot);")
_PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}
_MAX_CODEPOINT = 0x10FFFF


class TokenType(Enum):
    """Token types produced by the tag tokenizer."""

    START_TAG = auto()              # <name ...> or the opening half of <name/>
    END_TAG = auto()                # </name> or the closing half of <name/>
    TEXT = auto()                   # Character content between markup
    CDATA = auto()                  # <![CDATA[ ... ]]>, value kept verbatim
    COMMENT = auto()                # <!-- ... -->
    PROCESSING_INSTRUCTION = auto()  # <? ... ?>
    DOCTYPE = auto()                # <!DOCTYPE ...> and other <! declarations


@dataclass(frozen=True)
class TokenPosition:
    """Position information for tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> dict:
        """Convert position to the dictionary form used by diagnostics."""
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass(frozen=True)
class Token:
    """Represents a single token with its source position."""

    type: TokenType
    value: str
    position: TokenPosition

    @property
    def is_content(self) -> bool:
        """Check if this token carries ``key=value`` content."""
        return self.type in (TokenType.TEXT, TokenType.CDATA)


def decode_entities(text: str) -> str:
    """Replace predefined XML entities and character references in ``text``.

    Unknown entity names are left untouched.
    """
    if "&" not in text:
        return text

    def _replace(match: "re.Match[str]") -> str:
        ref = match.group(1)
        if not ref.startswith("#"):
            return _PREDEFINED_ENTITIES[ref]
        if ref[1] in "xX":
            codepoint = int(ref[2:], 16)
        else:
            codepoint = int(ref[1:])
        if codepoint > _MAX_CODEPOINT:
            return match.group(0)
        return chr(codepoint)

    return _ENTITY_PATTERN.sub(_replace, text)


class TagTokenizer:
    """Converts text into start-tag, end-tag and text tokens.

    Scanning jumps between markup delimiters with ``str.find`` instead of
    walking character by character, and tracks line/column incrementally so
    every token carries an exact source position.
    """

    def __init__(
        self,
        config: Optional[TokenizationConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the tokenizer.

        Args:
            config: Tokenization settings (defaults to TokenizationConfig())
            correlation_id: Optional correlation ID for tracking requests
        """
        self.config = config or TokenizationConfig()
        self.correlation_id = correlation_id
        self._reset_state("")

    def _reset_state(self, text: str) -> None:
        """Reset scanning state for new input."""
        self._text = text
        self._line = 1
        self._line_start = 0
        self._cursor = 0

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize ``text`` into a list of tokens.

        Args:
            text: Decoded document text

        Returns:
            Tokens in document order

        Raises:
            FormatError: On unterminated markup or a tag without a name
        """
        tokens = list(self.iter_tokens(text))

        logger.debug(
            "Tokenization completed",
            extra={
                "component": "tag_tokenizer",
                "correlation_id": self.correlation_id,
                "token_count": len(tokens),
                "character_count": len(text),
            }
        )

        return tokens

    def iter_tokens(self, text: str) -> Iterator[Token]:
        """Lazily yield tokens from ``text``."""
        self._reset_state(text)
        length = len(text)
        i = 0

        while i < length:
            if text[i] != "<":
                next_tag = text.find("<", i)
                if next_tag == -1:
                    next_tag = length
                raw = text[i:next_tag]
                if raw.strip():
                    value = decode_entities(raw) if self.config.decode_entities else raw
                    yield Token(TokenType.TEXT, value, self._position(i))
                i = next_tag
            elif text.startswith("<!--", i):
                end = self._require(text.find("-->", i + 4), i, "comment")
                yield Token(TokenType.COMMENT, text[i + 4:end], self._position(i))
                i = end + 3
            elif text.startswith("<![CDATA[", i):
                end = self._require(text.find("]]>", i + 9), i, "CDATA section")
                yield Token(TokenType.CDATA, text[i + 9:end], self._position(i))
                i = end + 3
            elif text.startswith("<!", i):
                end = self._find_declaration_end(text, i)
                yield Token(TokenType.DOCTYPE, text[i + 2:end].strip(), self._position(i))
                i = end + 1
            elif text.startswith("<?", i):
                end = self._require(text.find("?>", i + 2), i, "processing instruction")
                yield Token(
                    TokenType.PROCESSING_INSTRUCTION,
                    text[i + 2:end].strip(),
                    self._position(i),
                )
                i = end + 2
            elif text.startswith("</", i):
                end = self._require(text.find(">", i + 2), i, "closing tag")
                name = text[i + 2:end].strip()
                if not _TAG_NAME_PATTERN.fullmatch(name):
                    raise FormatError(
                        f"invalid closing tag name {name!r}",
                        position=self._position(i).to_dict(),
                    )
                yield Token(TokenType.END_TAG, name, self._position(i))
                i = end + 1
            else:
                name, end, self_closing = self._scan_start_tag(text, i)
                position = self._position(i)
                yield Token(TokenType.START_TAG, name, position)
                if self_closing:
                    yield Token(TokenType.END_TAG, name, position)
                i = end + 1

    def _scan_start_tag(self, text: str, start: int) -> Tuple[str, int, bool]:
        """Scan an opening tag starting at ``start``.

        Attributes are skipped, honouring quotes so a ``>`` inside a quoted
        attribute value does not end the tag.

        Returns:
            Tuple of tag name, offset of the closing ``>`` and whether the tag
            is self-closing
        """
        match = _TAG_NAME_PATTERN.match(text, start + 1)
        if not match:
            raise FormatError(
                "tag name expected after '<'",
                position=self._position(start).to_dict(),
            )

        quote: Optional[str] = None
        i = match.end()
        while i < len(text):
            char = text[i]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == ">":
                self_closing = text[match.end():i].rstrip().endswith("/")
                return match.group(0), i, self_closing
            elif char == "<":
                break
            i += 1

        raise FormatError(
            f"unterminated tag <{match.group(0)}",
            position=self._position(start).to_dict(),
        )

    def _find_declaration_end(self, text: str, start: int) -> int:
        """Find the ``>`` closing a ``<!`` declaration, skipping ``[...]`` subsets."""
        depth = 0
        for i in range(start + 2, len(text)):
            char = text[i]
            if char == "[":
                depth += 1
            elif char == "]":
                depth = max(0, depth - 1)
            elif char == ">" and depth == 0:
                return i
        return self._require(-1, start, "declaration")

    def _require(self, found: int, start: int, what: str) -> int:
        """Raise a FormatError when a closing delimiter was not found."""
        if found == -1:
            raise FormatError(
                f"unterminated {what}",
                position=self._position(start).to_dict(),
            )
        return found

    def _position(self, offset: int) -> TokenPosition:
        """Compute the line/column of ``offset``.

        Offsets are requested in increasing order, so only the text since the
        previous request is scanned for newlines.
        """
        if offset < self._cursor:
            self._line = 1
            self._line_start = 0
            self._cursor = 0

        segment = self._text[self._cursor:offset]
        newlines = segment.count("\n")
        if newlines:
            self._line += newlines
            self._line_start = self._cursor + segment.rfind("\n") + 1
        self._cursor = offset

        return TokenPosition(self._line, offset - self._line_start + 1, offset)
