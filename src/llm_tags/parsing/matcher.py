import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class TagMatch:
    """An opening tag found by TagMatcher.search."""

    name: str
    attr_string: str
    self_closing: bool
    start: int
    end: int
    text: str


class TagMatcher:
    """Recognizes opening and closing tags for a fixed set of names.

    Built once per registry. Matching is case-insensitive and reported names
    are lower-cased. An empty name set matches nothing.
    """

    def __init__(self, tag_names: Iterable[str]) -> None:
        self._names = tuple(dict.fromkeys(name.lower() for name in tag_names))
        self._open_pattern: re.Pattern[str] | None = None
        if self._names:
            alternation = "|".join(re.escape(name) for name in self._names)
            self._open_pattern = re.compile(
                rf"<({alternation})(?:\s([^>]*?))?\s*(/)?>", re.IGNORECASE
            )
        self._close_patterns = {
            name: re.compile(rf"</{re.escape(name)}>", re.IGNORECASE)
            for name in self._names
        }

    @property
    def tag_names(self) -> tuple[str, ...]:
        return self._names

    def search(self, text: str, pos: int = 0) -> TagMatch | None:
        if self._open_pattern is None:
            return None

        match = self._open_pattern.search(text, pos)
        if match is None:
            return None

        return TagMatch(
            name=match.group(1).lower(),
            attr_string=match.group(2) or "",
            self_closing=match.group(3) is not None,
            start=match.start(),
            end=match.end(),
            text=match.group(0),
        )

    def find_close(self, text: str, name: str, pos: int = 0) -> tuple[int, int] | None:
        """Locate ``</name>`` at or after ``pos``; returns its (start, end)."""
        match = self._close_patterns[name.lower()].search(text, pos)
        if match is None:
            return None
        return match.start(), match.end()

    def close_tag_length(self, name: str) -> int:
        return len(name) + 3

    def incomplete_tag_start(self, text: str, pos: int, window: int) -> int:
        """Find a trailing fragment of ``text`` that may still become a tag.

        Only ``<`` characters after the last ``>`` and within ``window``
        characters of the end are considered. The earliest one whose tail is
        still a viable prefix of a registered opening tag wins. Returns -1
        when there is none.
        """
        lower_bound = max(pos, len(text) - window, text.rfind(">") + 1)
        index = text.find("<", lower_bound)
        while index != -1:
            if self._could_open(text[index + 1 :]):
                return index
            index = text.find("<", index + 1)
        return -1

    def _could_open(self, rest: str) -> bool:
        rest = rest.lower()
        for name in self._names:
            if len(rest) <= len(name):
                if name.startswith(rest):
                    return True
            elif rest.startswith(name):
                follower = rest[len(name)]
                if follower.isspace() or follower == "/":
                    return True
        return False
