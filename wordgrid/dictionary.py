"""Sorted word list and the oracles that classify candidate strings against it.

Every oracle answers the same question for the solver: is the candidate a
word, could it still grow into one, or is it a dead end. The dictionary is
expected to be sorted ascending by code point, lowercase and free of
duplicates; none of that is checked.
"""
from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Protocol

logger = logging.getLogger("wordgrid")


class WordValidity(Enum):
    INVALID = "invalid"
    POSSIBLE = "possible"
    REAL = "real"


class StringCompare(Enum):
    """How a candidate relates to a dictionary word, from the candidate's side."""

    LESS = "less"          # first differing letter is smaller, e.g. car / cat
    GREATER = "greater"    # first differing letter is larger, e.g. hat / bat
    EQUAL = "equal"
    SHORTER = "shorter"    # candidate is a strict prefix of the word, e.g. jump / jumps
    LONGER = "longer"      # word is a strict prefix of the candidate, e.g. barmaid / bar


def compare(candidate: str, word: str) -> StringCompare:
    for a, b in zip(candidate, word):
        if a > b:
            return StringCompare.GREATER
        if a < b:
            return StringCompare.LESS

    if len(candidate) < len(word):
        return StringCompare.SHORTER
    if len(candidate) > len(word):
        return StringCompare.LONGER
    return StringCompare.EQUAL


class Dictionary:
    """Immutable, ascending sequence of words."""

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str]):
        self._words = tuple(words)

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index: int) -> str:
        return self._words[index]

    def __iter__(self):
        return iter(self._words)

    def __repr__(self) -> str:
        return f"Dictionary({len(self._words)} words)"


def load_dictionary(path: str | Path) -> Dictionary:
    """Read one word per line. Lines are stripped and blank lines skipped."""
    with open(path, "r", encoding="utf-8") as f:
        words = [line.strip() for line in f]
    dictionary = Dictionary(w for w in words if w)
    logger.info("Loaded %d words from %s", len(dictionary), path)
    return dictionary


class Oracle(Protocol):
    def classify(self, candidate: str) -> WordValidity: ...


def _half_up(n: int) -> int:
    return (n + 1) // 2


class ProbeOracle:
    """Modified binary search that detects both words and prefixes in one pass.

    The probe starts at the middle of the list and moves by a step that is
    halved (rounding up) after every comparison, until the step is 1. Only the
    words on that single trajectory are compared, so a prefix or even an exact
    word lying off the trajectory goes unnoticed. With four words, for
    instance, the first word is never probed.
    """

    __slots__ = ("_words",)

    def __init__(self, dictionary: Dictionary):
        self._words = dictionary.words

    def classify(self, candidate: str) -> WordValidity:
        words = self._words
        count = len(words)
        if not count:
            return WordValidity.INVALID

        step = _half_up(count)
        index = min(step, count - 1)
        seen_prefix = False

        while True:
            outcome = compare(candidate, words[index])
            if outcome is StringCompare.EQUAL:
                return WordValidity.REAL
            if outcome is StringCompare.SHORTER:
                seen_prefix = True

            if step == 1:
                break

            step = _half_up(step)
            if outcome is StringCompare.LESS or outcome is StringCompare.SHORTER:
                index -= step
            else:
                index += step

            if index < 0:
                index = 0
            elif index >= count:
                index = count - 1

        return WordValidity.POSSIBLE if seen_prefix else WordValidity.INVALID


class RangeOracle:
    """Complete classifier: bisect to the first word not below the candidate."""

    __slots__ = ("_words",)

    def __init__(self, dictionary: Dictionary):
        self._words = dictionary.words

    def classify(self, candidate: str) -> WordValidity:
        i = bisect_left(self._words, candidate)
        if i < len(self._words):
            word = self._words[i]
            if word == candidate:
                return WordValidity.REAL
            if word.startswith(candidate):
                return WordValidity.POSSIBLE
        return WordValidity.INVALID


class TrieNode:
    __slots__ = ("children", "is_word")

    def __init__(self):
        self.children: dict[str, TrieNode] = {}
        self.is_word: bool = False


class Trie:
    def __init__(self):
        self.root = TrieNode()

    def insert(self, word: str):
        node = self.root
        for ch in word:
            if ch not in node.children:
                node.children[ch] = TrieNode()
            node = node.children[ch]
        node.is_word = True

    def find(self, prefix: str) -> TrieNode | None:
        node = self.root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node


class TrieOracle:
    """Complete classifier backed by a prefix tree."""

    def __init__(self, dictionary: Dictionary):
        self.trie = Trie()
        for word in dictionary:
            self.trie.insert(word)

    def classify(self, candidate: str) -> WordValidity:
        node = self.trie.find(candidate)
        if node is None:
            return WordValidity.INVALID
        if node.is_word:
            return WordValidity.REAL
        return WordValidity.POSSIBLE


_ORACLES = {
    "probe": ProbeOracle,
    "range": RangeOracle,
    "trie": TrieOracle,
}


ORACLE_KINDS = tuple(_ORACLES)


def make_oracle(dictionary: Dictionary, kind: str = "probe") -> Oracle:
    try:
        factory = _ORACLES[kind]
    except KeyError:
        raise ValueError(f"Unknown oracle {kind!r}, expected one of {', '.join(_ORACLES)}") from None
    return factory(dictionary)
