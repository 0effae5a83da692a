"""
Snippet generation: highlighted fragments of page text around query lemma occurrences
"""

import html
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence

from sitesearch.indexing.lemmatizer import Lemmatizer

TOKEN_PATTERN = re.compile(r'[а-яёА-ЯЁ]+')
ELLIPSIS = "..."
SEPARATOR = "... "


@dataclass(frozen=True)
class Occurrence:
    start: int
    end: int
    lemma: str


@dataclass
class Window:
    start: int
    end: int
    lemmas: FrozenSet[str]


class SnippetBuilder:
    """Build an HTML snippet with query words in ``<b>`` tags.

    Each query lemma gets at most one window of ``max_length / len(lemmas)``
    characters centred on one of its occurrences, preferring windows that also
    cover other query lemmas. Overlapping windows are merged and the visible
    text never exceeds ``max_length`` characters.
    """

    def __init__(self, lemmatizer: Lemmatizer, max_length: int = 200):
        self.lemmatizer = lemmatizer
        self.max_length = max_length

    def build(self, text: str, lemmas: Iterable[str]) -> str:
        lemmas = sorted(set(lemmas))
        occurrences = self._find_occurrences(text, lemmas)
        if not occurrences:
            return self._opening(text)

        window_length = max(self.max_length // len(lemmas), 1)
        windows = self._choose_windows(text, occurrences, lemmas, window_length)
        windows = self._merge(windows)
        return self._render(text, windows, occurrences)

    def _opening(self, text: str) -> str:
        if len(text) <= self.max_length:
            return html.escape(text)
        return html.escape(text[:self.max_length]) + ELLIPSIS

    def _find_occurrences(self, text: str, lemmas: Sequence[str]) -> List[Occurrence]:
        words = self.lemmatizer.words_matching_lemmas(text, lemmas)
        if not words:
            return []

        occurrences = []
        for match in TOKEN_PATTERN.finditer(text):
            word = match.group().lower()
            if word in words:
                occurrences.append(Occurrence(match.start(), match.end(), self.lemmatizer.normalize(word)))
        return occurrences

    def _window_around(self, text: str, occurrence: Occurrence, length: int,
                       occurrences: Sequence[Occurrence]) -> Window:
        center = (occurrence.start + occurrence.end) // 2
        start = max(0, center - length // 2)
        end = min(len(text), start + length)
        start = max(0, end - length)
        # A match wider than the window still has to fit whole
        start = min(start, occurrence.start)
        end = max(end, occurrence.end)
        covered = frozenset(o.lemma for o in occurrences if o.start >= start and o.end <= end)
        return Window(start, end, covered)

    def _choose_windows(self, text: str, occurrences: Sequence[Occurrence],
                        lemmas: Sequence[str], length: int) -> List[Window]:
        candidates = [self._window_around(text, o, length, occurrences) for o in occurrences]

        chosen = []
        covered = set()
        for lemma in lemmas:
            if lemma in covered:
                continue
            options = [w for w in candidates if lemma in w.lemmas]
            if not options:
                continue
            best = max(options, key=lambda w: (len(w.lemmas), -w.start))
            chosen.append(best)
            covered.update(best.lemmas)
        return chosen

    @staticmethod
    def _merge(windows: List[Window]) -> List[Window]:
        merged: List[Window] = []
        for window in sorted(windows, key=lambda w: w.start):
            if merged and window.start <= merged[-1].end:
                last = merged[-1]
                merged[-1] = Window(last.start, max(last.end, window.end), last.lemmas | window.lemmas)
            else:
                merged.append(window)
        return merged

    def _render(self, text: str, windows: Sequence[Window], occurrences: Sequence[Occurrence]) -> str:
        fragments = []
        budget = self.max_length
        last_end = 0
        for window in windows:
            if budget <= 0:
                break
            end = min(window.end, window.start + budget)
            fragments.append(self._highlight(text, window.start, end, occurrences))
            budget -= end - window.start
            last_end = end

        snippet = SEPARATOR.join(fragments)
        if last_end < len(text):
            snippet += ELLIPSIS
        return snippet

    @staticmethod
    def _highlight(text: str, start: int, end: int, occurrences: Sequence[Occurrence]) -> str:
        parts = []
        position = start
        for occurrence in occurrences:
            if occurrence.start < start or occurrence.end > end:
                continue
            parts.append(html.escape(text[position:occurrence.start]))
            parts.append(f"<b>{html.escape(text[occurrence.start:occurrence.end])}</b>")
            position = occurrence.end
        parts.append(html.escape(text[position:end]))
        return "".join(parts)
