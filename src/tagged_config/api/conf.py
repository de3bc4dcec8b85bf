"""Thread-safe configuration object with path-addressed typed lookups.

Usage:
    >>> conf = new_conf("/etc/app/server.conf")
    >>> conf.get_string("/tars/application/server<app>")
    'TestApp'
    >>> conf.get_domain("/tars/application/server")
    ['TestApp.HelloServer.HelloObjAdapter']

Every load builds a brand new tree and publishes it only when the whole
document was accepted, so readers see either the previous configuration or
the new one, never a mixture.
"""

import re
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tagged_config.character import EncodingDetector
from tagged_config.shared import (
    ConfigIOError,
    FormatError,
    ParserConfig,
    PathNotFoundError,
    ReadWriteLock,
    get_logger,
)
from tagged_config.tokenization import TagTokenizer
from tagged_config.tree import BuildResult, Element, PathResolver, TreeBuilder

PathLike = Union[str, Path]

MS_PER_SECOND = 1000
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(2 ** 63), 2 ** 63 - 1
_INT32_MIN, _INT32_MAX = -(2 ** 31), 2 ** 31 - 1
_TRUE_VALUES = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSE_VALUES = frozenset(("0", "f", "F", "FALSE", "false", "False"))


def _parse_int(value: str, low: int, high: int) -> Optional[int]:
    """Parse a signed decimal integer, or return None if invalid or out of range."""
    if not _INT_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if not low <= number <= high:
        return None
    return number


def _parse_bool(value: str) -> Optional[bool]:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def _encode_text(text: str) -> bytes:
    """Encode ``text`` as UTF-8, mapping unencodable characters to FormatError."""
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise FormatError(
            f"cannot encode input as utf-8: {e.reason}",
            position={"offset": e.start},
        ) from e


class Conf:
    """Loaded configuration tree guarded by a reader/writer lock.

    Loading takes the lock exclusively for decoding, tokenizing, building and
    publishing; lookups share it. Lookup results are plain copies, so callers
    never hold references into the tree.

    Examples:
        >>> conf = Conf()
        >>> conf.init_from_string("<db>ip = 10.0.0.1\\nport = 3306</db>")
        >>> conf.get_int("/db/port")
        3306
        >>> conf.get_string("/db<ip>")
        '10.0.0.1'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Create an empty configuration.

        Args:
            config: Loader settings (defaults to ParserConfig())
            correlation_id: Optional correlation ID for log records
        """
        self.config = config or ParserConfig()
        if correlation_id is None and self.config.global_.enable_correlation_tracking:
            correlation_id = uuid.uuid4().hex[:12]
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "conf")

        self._lock = ReadWriteLock()
        self._root = Element.new_root()
        self._content = b""
        self._last_build: Optional[BuildResult] = None

        self._load_count = 0
        self._failed_loads = 0
        self._total_processing_time = 0.0

    def init_from_file(self, file_name: PathLike) -> None:
        """Load the configuration from a file.

        Raises:
            ConfigIOError: If the file cannot be read
            FormatError: If the document is malformed
        """
        try:
            content = Path(file_name).read_bytes()
        except OSError as e:
            self.logger.error(
                "Configuration file unreadable",
                extra={"file_name": str(file_name)},
                exc_info=False
            )
            raise ConfigIOError(
                f"read file {file_name} error: {e}", filename=str(file_name)
            ) from e

        self.init_from_bytes(content)

    def init_from_string(self, content: str) -> None:
        """Load the configuration from a string.

        Raises:
            FormatError: If the string cannot be encoded as UTF-8 or the
                document is malformed
        """
        self._load(content)

    def init_from_bytes(self, content: bytes) -> None:
        """Load the configuration from a raw byte buffer.

        Raises:
            FormatError: If the buffer cannot be decoded or the document is
                malformed
        """
        self._load(bytes(content))

    def _load(self, source: Union[str, bytes]) -> None:
        """Build a tree from ``source`` and publish it on success."""
        start_time = time.time()
        limit = self.config.global_.max_input_size_bytes

        self.logger.info(
            "Starting configuration load",
            extra={"content_length": len(source)}
        )

        with self._lock.write_locked():
            self._load_count += 1
            try:
                if isinstance(source, str):
                    content = _encode_text(source)
                    text: Optional[str] = source.lstrip("\ufeff")
                else:
                    content, text = source, None
                if limit is not None and len(content) > limit:
                    raise FormatError(
                        f"input of {len(content)} bytes exceeds limit of {limit} bytes"
                    )
                if text is None:
                    detector = EncodingDetector(self.config.character)
                    text = detector.decode(content)

                tokenizer = TagTokenizer(self.config.tokenization, self.correlation_id)
                builder = TreeBuilder(self.config.tree, self.correlation_id)
                result = builder.build(tokenizer.iter_tokens(text))
            except FormatError:
                self._failed_loads += 1
                self.logger.error(
                    "Configuration load failed, keeping previous tree",
                    extra={"load_count": self._load_count}
                )
                raise

            processing_time = (time.time() - start_time) * MS_PER_SECOND
            result.metrics.characters_processed = len(text)
            result.metrics.processing_time_ms = processing_time

            self._root = result.root
            self._content = content
            self._last_build = result
            self._total_processing_time += processing_time

        self.logger.info(
            "Configuration load completed",
            extra={
                "processing_time_ms": processing_time,
                "elements_created": result.metrics.elements_created,
                "diagnostic_count": len(result.diagnostics),
            }
        )

    def _lookup(self, path: str) -> Optional[str]:
        """Resolve ``path`` to a value, or None if it does not exist."""
        with self._lock.read_locked():
            try:
                return PathResolver(self._root).get_value(path)
            except PathNotFoundError:
                return None

    def get_string(self, path: str, default: str = "") -> str:
        """Return the value at ``path``, or ``default`` if it does not exist."""
        value = self._lookup(path)
        return default if value is None else value

    def get_int(self, path: str, default: int = 0) -> int:
        """Return the value at ``path`` as a 64-bit integer, or ``default``."""
        value = self._lookup(path)
        if value is None:
            return default
        number = _parse_int(value, _INT64_MIN, _INT64_MAX)
        return default if number is None else number

    def get_int32(self, path: str, default: int = 0) -> int:
        """Return the value at ``path`` as a 32-bit integer, or ``default``."""
        value = self._lookup(path)
        if value is None:
            return default
        number = _parse_int(value, _INT32_MIN, _INT32_MAX)
        return default if number is None else number

    def get_bool(self, path: str, default: bool = False) -> bool:
        """Return the value at ``path`` as a boolean, or ``default``.

        Accepts ``1 t T TRUE true True`` and ``0 f F FALSE false False``.
        """
        value = self._lookup(path)
        if value is None:
            return default
        flag = _parse_bool(value)
        return default if flag is None else flag

    def get_domain(self, path: str) -> List[str]:
        """Return the section names directly under ``path`` (empty if missing)."""
        with self._lock.read_locked():
            try:
                return PathResolver(self._root).get_domain(path)
            except PathNotFoundError:
                return []

    def get_map(self, path: str) -> Dict[str, str]:
        """Return the ``key -> value`` pairs directly under ``path``."""
        with self._lock.read_locked():
            return PathResolver(self._root).get_map(path)

    def to_string(self) -> str:
        """Render the whole tree for diagnostics."""
        with self._lock.read_locked():
            return self._root.render()

    def __str__(self) -> str:
        return self.to_string()

    @property
    def content(self) -> bytes:
        """Raw buffer of the last successful load."""
        with self._lock.read_locked():
            return self._content

    @property
    def last_build(self) -> Optional[BuildResult]:
        """Build result of the last successful load."""
        with self._lock.read_locked():
            return self._last_build

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get load statistics.

        Returns:
            Dictionary with load counts, timings and last build metrics
        """
        with self._lock.read_locked():
            successful = self._load_count - self._failed_loads
            return {
                "total_loads": self._load_count,
                "successful_loads": successful,
                "failed_loads": self._failed_loads,
                "total_processing_time_ms": self._total_processing_time,
                "average_processing_time_ms": (
                    self._total_processing_time / successful
                    if successful > 0 else 0.0
                ),
                "last_build": (
                    self._last_build.metrics.to_dict() if self._last_build else None
                ),
                "correlation_id": self.correlation_id,
            }


def new_conf(
    file_name: PathLike,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Conf:
    """Create a configuration loaded from ``file_name``.

    Raises:
        ConfigIOError: If the file cannot be read
        FormatError: If the document is malformed
    """
    conf = Conf(config, correlation_id)
    conf.init_from_file(file_name)
    return conf


def load_string(
    content: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Conf:
    """Create a configuration loaded from a string."""
    conf = Conf(config, correlation_id)
    conf.init_from_string(content)
    return conf


def load_bytes(
    content: bytes,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Conf:
    """Create a configuration loaded from a raw byte buffer."""
    conf = Conf(config, correlation_id)
    conf.init_from_bytes(content)
    return conf
