"""
Allowlist validation for level words.

Each level ships the complete list of words that may legally appear on its
board. The list is normalized once (trimmed, lowercased, letters only) and
every membership test normalizes its input the same way, so malformed input
degrades to "not found" instead of raising.
"""

import re
from typing import Iterable, List, Set, Union

from .models import Run


_WORD_RE = re.compile(r'[a-z]+')


def normalize_word(word: object) -> str:
    """Return the canonical lowercase form of `word`, or '' if it is not a plain word."""
    if not isinstance(word, str):
        return ""
    s = word.strip().lower()
    return s if _WORD_RE.fullmatch(s) else ""


class Allowlist:
    """Lowercase set of permitted words with normalizing membership tests."""

    def __init__(self, words: Iterable[str] = ()):
        self._words: Set[str] = set()
        self.add(list(words))

    @classmethod
    def build(cls, words: Iterable[str]) -> "Allowlist":
        return cls(words)

    def contains(self, word: object) -> bool:
        n = normalize_word(word)
        return bool(n) and n in self._words

    def contains_all_runs(self, runs: Iterable[Run]) -> bool:
        """True iff the text of every run is a permitted word."""
        return all(self.contains(run.text) for run in runs)

    def add(self, words: Union[str, Iterable[str]]) -> "Allowlist":
        if isinstance(words, str):
            words = [words]
        for word in words:
            n = normalize_word(word)
            if n:
                self._words.add(n)
        return self

    def remove(self, words: Union[str, Iterable[str]]) -> "Allowlist":
        if isinstance(words, str):
            words = [words]
        for word in words:
            self._words.discard(normalize_word(word))
        return self

    def words(self) -> List[str]:
        return sorted(self._words)

    def __contains__(self, word: object) -> bool:
        return self.contains(word)

    def __len__(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"Allowlist({len(self._words)} words)"


def is_valid(word: str, allowlist: Allowlist) -> bool:
    return allowlist.contains(word)


def are_all_valid(runs: Iterable[Run], allowlist: Allowlist) -> bool:
    return allowlist.contains_all_runs(runs)
