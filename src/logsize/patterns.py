"""Size patterns: strategies that pull a byte count out of an access-log line.

A size pattern wraps one compiled regex with exactly one capturing group.
Workers share a single instance read-only, so subclasses must not keep
per-line state.
"""

import re
from abc import ABC, abstractmethod

from logsize.exceptions import PatternError


DEFAULT_PATTERN = 'ok'

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INTEGER = re.compile(r'[+-]?[0-9]+', re.ASCII)


class SizePattern(ABC):
    """Base class for all size patterns.

    Subclass this to support another log layout. Only ``name``,
    ``description`` and ``regex`` are required; ``extract`` handles the
    capture-to-int conversion.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Pattern identifier (e.g., 'ok', 'images')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line human-readable summary."""
        pass

    @property
    @abstractmethod
    def regex(self) -> re.Pattern:
        """Compiled regex with a single capturing group for the size."""
        pass

    def match_size(self, line: str) -> int | None:
        """Return the size captured from ``line``, or None when there is none.

        A capture only counts when it is a plain ASCII integer that fits in a
        signed 64-bit value. Anything else (no match, Unicode digits,
        underscores, whitespace, overflow) is treated as no size at all.
        """
        match = self.regex.search(line)
        if match is None:
            return None
        captured = match.group(1)
        if captured is None or INTEGER.fullmatch(captured) is None:
            return None
        size = int(captured)
        if not INT64_MIN <= size <= INT64_MAX:
            return None
        return size

    def extract(self, line: str) -> int:
        """Return the size captured from ``line``, or 0.

        Non-matching lines and captures that are not integers contribute
        nothing. Neither is an error: access logs are full of them.
        """
        size = self.match_size(line)
        return 0 if size is None else size

    def __repr__(self) -> str:
        return f'{type(self).__name__}(name={self.name!r}, regex={self.regex.pattern!r})'


class OkResponsePattern(SizePattern):
    """Response size of any HTTP/1.1 request answered with 200."""

    REGEX = re.compile(r'HTTP/1\.1" 200 (\d+)', re.ASCII)

    @property
    def name(self) -> str:
        return 'ok'

    @property
    def description(self) -> str:
        return 'Any HTTP/1.1 200 response'

    @property
    def regex(self) -> re.Pattern:
        return self.REGEX


class ImageGetPattern(SizePattern):
    """Response size of successful GET requests for .jpeg, .jpg or .png."""

    REGEX = re.compile(r'"GET /[^"]*\.(?:jpeg|jpg|png) HTTP/1\.1" 200 (\d+)', re.ASCII)

    @property
    def name(self) -> str:
        return 'images'

    @property
    def description(self) -> str:
        return 'Successful GET requests for .jpeg/.jpg/.png'

    @property
    def regex(self) -> re.Pattern:
        return self.REGEX


class RegexSizePattern(SizePattern):
    """User-supplied regex. The first capturing group is the size."""

    def __init__(self, regex: str | re.Pattern, name: str = 'custom'):
        try:
            compiled = regex if isinstance(regex, re.Pattern) else re.compile(regex)
        except re.error as e:
            raise PatternError(f'Invalid regex {regex!r}: {e}') from e
        if compiled.groups != 1:
            raise PatternError(
                f'Size regex {compiled.pattern!r} must have exactly one capturing group, has {compiled.groups}'
            )
        self._regex = compiled
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f'Custom regex {self._regex.pattern}'

    @property
    def regex(self) -> re.Pattern:
        return self._regex


PATTERNS: dict[str, type[SizePattern]] = {
    'ok': OkResponsePattern,
    'images': ImageGetPattern,
}


def available_patterns() -> list[SizePattern]:
    """Get one instance of every built-in pattern, in registry order."""
    return [cls() for cls in PATTERNS.values()]


def get_pattern(name: str) -> SizePattern:
    """Look up a built-in pattern by name.

    Raises:
        PatternError: if no pattern is registered under ``name``
    """
    try:
        return PATTERNS[name]()
    except KeyError:
        known = ', '.join(PATTERNS)
        raise PatternError(f'Unknown size pattern {name!r} (available: {known})') from None
