"""
Tests for Russian lemmatization and markup stripping
"""

import pytest

from sitesearch.indexing.lemmatizer import Lemmatizer, extract_title, strip_markup


@pytest.mark.unit
class TestLemmatizer:
    """Test the pymorphy3-backed lemmatizer"""

    @pytest.fixture(autouse=True)
    def _lemmatizer(self, lemmatizer):
        self.lemmatizer = lemmatizer

    def test_normalize_inflected_forms(self):
        assert self.lemmatizer.normalize("кошки") == "кошка"
        assert self.lemmatizer.normalize("Кошками") == "кошка"
        assert self.lemmatizer.normalize("собаки") == "собака"

    @pytest.mark.parametrize("word", ["в", "на", "и", "но", "ой", "", "   ", "cat", "123"])
    def test_normalize_rejects_function_words_and_non_cyrillic(self, word):
        assert self.lemmatizer.normalize(word) == ""

    def test_lemma_frequencies_counts_occurrences(self):
        counts = self.lemmatizer.lemma_frequencies("Кошка и кошки. Собака в доме!")

        assert counts["кошка"] == 2
        assert counts["собака"] == 1
        assert "и" not in counts
        assert "в" not in counts

    def test_lemma_frequencies_strips_markup(self):
        html = "<html><body><p>кошка</p><script>var собака = 1;</script></body></html>"
        counts = self.lemmatizer.lemma_frequencies(html)

        assert counts == {"кошка": 1}

    def test_lemma_set(self):
        assert self.lemmatizer.lemma_set("кошки кошка собаки") == {"кошка", "собака"}

    def test_words_matching_lemmas(self):
        words = self.lemmatizer.words_matching_lemmas("Кошки любят кошку, собаки нет", {"кошка"})
        assert words == {"кошки", "кошку"}

    def test_words_ignores_latin(self):
        assert Lemmatizer.words("Hello, мир!") == ["мир"]


@pytest.mark.unit
class TestMarkupHelpers:
    def test_strip_markup_plain_text(self):
        assert strip_markup("  кошка \n собака ") == "кошка собака"

    def test_strip_markup_body_only(self):
        html = "<html><head><title>Заголовок</title></head><body><p>текст</p></body></html>"
        assert strip_markup(html, body_only=True) == "текст"
        assert "Заголовок" in strip_markup(html)

    def test_extract_title(self):
        assert extract_title("<html><head><title> Главная </title></head></html>") == "Главная"
        assert extract_title("<html><body>нет</body></html>") == ""
