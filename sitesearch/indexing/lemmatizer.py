"""
Russian lemmatization backed by pymorphy3
"""

import logging
import re
from collections import Counter
from functools import lru_cache
from typing import Iterable, List, Optional, Set

import pymorphy3
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r'[а-яё]+')
WHITESPACE_PATTERN = re.compile(r'\s+')

# Prepositions, conjunctions and interjections never become index keys
EXCLUDED_POS = frozenset({'PREP', 'CONJ', 'INTJ'})


class Lemmatizer:
    """Reduce Cyrillic words to their dictionary base form"""

    def __init__(self, morph: Optional[pymorphy3.MorphAnalyzer] = None, cache_size: int = 100_000):
        self.morph = morph or pymorphy3.MorphAnalyzer()
        self._normal_form = lru_cache(maxsize=cache_size)(self._analyze)

    def _analyze(self, word: str) -> str:
        parses = self.morph.parse(word)
        if not parses:
            return ""
        if any(parse.tag.POS in EXCLUDED_POS for parse in parses):
            return ""
        return parses[0].normal_form

    def normalize(self, word: str) -> str:
        """Base form of a single word, or "" for blanks and excluded word classes"""
        word = WHITESPACE_PATTERN.sub('', word or '').lower()
        if not word or not WORD_PATTERN.fullmatch(word):
            return ""
        return self._normal_form(word)

    @staticmethod
    def words(text: str) -> List[str]:
        """Lowercase Cyrillic tokens of ``text`` in order of appearance"""
        return WORD_PATTERN.findall(text.lower())

    def lemma_frequencies(self, text: str) -> Counter:
        """Map each lemma of ``text`` (markup stripped) to its occurrence count"""
        counts = Counter()
        for word in self.words(strip_markup(text)):
            lemma = self.normalize(word)
            if lemma:
                counts[lemma] += 1
        return counts

    def lemma_set(self, text: str) -> Set[str]:
        """Distinct lemmas of ``text``; used for queries"""
        return set(self.lemma_frequencies(text))

    def words_matching_lemmas(self, text: str, lemmas: Iterable[str]) -> Set[str]:
        """Surface words of ``text`` whose base form is one of ``lemmas``"""
        lemmas = set(lemmas)
        return {word for word in set(self.words(text)) if self.normalize(word) in lemmas}


def strip_markup(html: str, body_only: bool = False) -> str:
    """Visible text of an HTML document with whitespace collapsed"""
    if '<' not in html:
        return WHITESPACE_PATTERN.sub(' ', html).strip()

    soup = BeautifulSoup(html, 'html.parser')
    for element in soup(['script', 'style', 'noscript', 'template']):
        element.decompose()

    root = soup.body if body_only and soup.body is not None else soup
    return WHITESPACE_PATTERN.sub(' ', root.get_text(' ')).strip()


def extract_title(html: str) -> str:
    """Document title, or "" when the document has none"""
    soup = BeautifulSoup(html, 'html.parser')
    if soup.title is None:
        return ""
    return WHITESPACE_PATTERN.sub(' ', soup.title.get_text()).strip()
