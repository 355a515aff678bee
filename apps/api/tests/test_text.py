import pytest

from pocketnavi.services.search.text import (
    build_search_query,
    case_variants,
    fold_variants,
    match_candidates,
    normalize_query,
    split_terms,
    to_hiragana,
    to_katakana,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  安藤   教会  ", "安藤 教会"),
        ("安藤　教会", "安藤 教会"),
        ("\tchurch\n of  light ", "church of light"),
        ("", ""),
        ("   　  ", ""),
        (None, ""),
    ],
)
def test_normalize_query(raw, expected):
    assert normalize_query(raw) == expected


def test_normalize_query_is_idempotent():
    once = normalize_query(" 光の　　教会  Osaka ")
    assert normalize_query(once) == once


def test_fold_variants_latin_is_noop():
    assert fold_variants("Church") == ()
    assert fold_variants("21st") == ()


def test_fold_variants_kana():
    assert fold_variants("きょうかい") == ("キョウカイ", "きょうかい")
    assert fold_variants("キリン") == ("キリン", "きりん")


def test_fold_variants_han_passes_through():
    assert fold_variants("教会") == ("教会", "教会")
    assert fold_variants("光のきょうかい") == ("光ノキョウカイ", "光のきょうかい")


def test_folding_preserves_length():
    term = "すみよしのながや"
    assert len(to_katakana(term)) == len(term)
    assert to_hiragana(to_katakana(term)) == term


def test_split_terms():
    assert split_terms("安藤 教会") == ("安藤", "教会")
    assert split_terms("") == ()


def test_case_variants_dedupes_in_order():
    assert case_variants("Osaka") == ("Osaka", "osaka", "OSAKA")
    assert case_variants("osaka") == ("osaka", "OSAKA")
    assert case_variants("大阪") == ("大阪",)


def test_match_candidates_adds_folds_after_case_variants():
    assert match_candidates("きりん") == ("きりん", "キリン")
    assert match_candidates("Church") == ("Church", "church", "CHURCH")


def test_build_search_query():
    q = build_search_query("  安藤　 教会 ")
    assert q.raw == "  安藤　 教会 "
    assert q.normalized == "安藤 教会"
    assert q.terms == ("安藤", "教会")
    assert q.is_multi_term
    assert build_search_query(" ").is_empty
