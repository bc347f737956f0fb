from mhclassifier.domain.models import Category, KeywordSet
from mhclassifier.domain.scanner import scan


def test_empty_text_yields_all_zero_counts(profile):
    for text in ("", "   ", None):
        counts = scan(text, profile.keyword_sets)
        assert all(counts.count(c) == 0 for c in Category)
        assert all(counts.negated(c) == 0 for c in Category)
        assert counts.total_emotion_words == 0
        assert counts.has_positive_indicators is False


def test_matching_is_case_insensitive(profile):
    counts = scan("Saya CEMAS sekali", profile.keyword_sets)
    assert counts.count(Category.ANXIETY) == 1
    assert counts.total_emotion_words == 1


def test_multi_word_keywords_match_as_substrings(profile):
    counts = scan("kadang terpikir bunuh diri", profile.keyword_sets)
    assert counts.count(Category.SUICIDAL) == 1

    counts = scan("mood swing parah", profile.keyword_sets)
    assert counts.count(Category.BIPOLAR) == 1


def test_substring_not_word_bounded(profile):
    # "kebaikan" contains "baik"
    counts = scan("terima kasih atas kebaikan kalian", profile.keyword_sets)
    assert counts.count(Category.NORMAL) == 1


def test_one_count_per_distinct_keyword(profile):
    counts = scan("cemas cemas cemas", profile.keyword_sets)
    assert counts.count(Category.ANXIETY) == 1

    counts = scan("cemas dan takut dan gelisah", profile.keyword_sets)
    assert counts.count(Category.ANXIETY) == 3


def test_tidak_bigram_is_counted_as_negation(profile):
    counts = scan("saya tidak cemas", profile.keyword_sets)
    assert counts.count(Category.ANXIETY) == 1
    assert counts.negated(Category.ANXIETY) == 1
    assert counts.negated(Category.DEPRESSION) == 0


def test_negation_spanning_words_is_not_detected(profile):
    counts = scan("saya tidak terlalu cemas", profile.keyword_sets)
    assert counts.count(Category.ANXIETY) == 1
    assert counts.negated(Category.ANXIETY) == 0


def test_categories_without_keyword_sets_still_present():
    counts = scan("saya cemas", {})
    assert set(counts.counts) == set(Category)
    assert counts.total_emotion_words == 0


def test_custom_keyword_sets():
    sets = {Category.BIPOLAR: KeywordSet(keywords=("naik turun",), weight=0.1, base_score=0.1)}
    counts = scan("Mood saya naik turun", sets)
    assert counts.count(Category.BIPOLAR) == 1
    assert counts.count(Category.NORMAL) == 0


def test_text_shape_is_recorded(profile):
    text = "kenapa? kenapa? kenapa? aku benci!!!"
    counts = scan(text, profile.keyword_sets)
    assert counts.question_marks == 3
    assert counts.exclamation_marks == 3
    assert counts.text_length == len(text)


def test_positive_indicator_flag(profile):
    assert scan("saya sehat", profile.keyword_sets).has_positive_indicators is True
    assert scan("saya lelah", profile.keyword_sets).has_positive_indicators is False
