"""
Tests for Hypothesis accumulation and word error rate
"""

import pytest

from lattice_app.hypothesis import Hypothesis


class TestAddWord:
    def test_plain_word(self):
        hyp = Hypothesis()
        hyp.add_word("hello", 3.5)
        assert hyp.words == ["hello"]
        assert hyp.path_score == 3.5
        assert len(hyp) == 1

    def test_silence_scores_but_is_hidden(self):
        hyp = Hypothesis()
        hyp.add_word("-silence-", 2.0)
        hyp.add_word("yes", 1.0)
        assert hyp.words == ["yes"]
        assert hyp.path_score == 3.0

    def test_multiword_split_in_order(self):
        hyp = Hypothesis()
        hyp.add_word("new_york_city", 1.0)
        hyp.add_word("now", 1.0)
        assert hyp.words == ["new", "york", "city", "now"]

    def test_text_form(self):
        hyp = Hypothesis()
        assert hyp.text == ""
        hyp.add_word("a_b", 0.0)
        assert hyp.text == "a b "
        assert str(hyp) == "a b "

    def test_stray_separators_add_no_empty_words(self):
        hyp = Hypothesis()
        hyp.add_word("uh_", 0.0)
        hyp.add_word("a__b", 0.0)
        hyp.add_word("_c", 0.0)
        assert hyp.words == ["uh", "a", "b", "c"]
        assert hyp.text == "uh a b c "

    def test_fresh_instances_do_not_share_words(self):
        a, b = Hypothesis(), Hypothesis()
        a.add_word("x", 1.0)
        assert b.words == []


class TestWordErrorRate:
    def _hyp(self, *words):
        hyp = Hypothesis()
        for w in words:
            hyp.add_word(w, 0.0)
        return hyp

    def test_exact_match(self):
        assert self._hyp("the", "cat").word_error_rate(["the", "cat"]) == 0.0

    def test_deletion(self):
        assert self._hyp("the", "cat", "sat").word_error_rate("the cat sat on".split()) == pytest.approx(0.25)

    def test_substitution_and_insertion(self):
        wer = self._hyp("a", "dog", "sat", "down").word_error_rate(["a", "cat", "sat"])
        assert wer == pytest.approx(2 / 3)

    def test_empty_hypothesis(self):
        assert Hypothesis().word_error_rate(["one", "two"]) == 1.0

    def test_empty_reference(self):
        with pytest.raises(ValueError):
            self._hyp("x").word_error_rate([])
