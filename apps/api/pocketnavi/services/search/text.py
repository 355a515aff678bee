"""Query text handling: whitespace normalization, kana folding and term splitting."""

import re

from pocketnavi.domain import SearchQuery

# Any run of whitespace, including U+3000 ideographic space (covered by \s on str patterns)
_WHITESPACE_RUN = re.compile(r"\s+")

_JAPANESE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff]")

# Hiragana U+3041..U+3096 map one-to-one onto Katakana U+30A1..U+30F6
_KANA_OFFSET = 0x60
_HIRAGANA_FIRST, _HIRAGANA_LAST = 0x3041, 0x3096
_KATAKANA_FIRST, _KATAKANA_LAST = 0x30A1, 0x30F6


def normalize_query(raw: str | None) -> str:
    """Trim and collapse whitespace runs into a single ASCII space. Idempotent."""
    if not raw:
        return ""
    return _WHITESPACE_RUN.sub(" ", raw).strip()


def has_japanese(term: str) -> bool:
    return bool(_JAPANESE.search(term or ""))


def to_katakana(term: str) -> str:
    return "".join(
        chr(ord(ch) + _KANA_OFFSET) if _HIRAGANA_FIRST <= ord(ch) <= _HIRAGANA_LAST else ch
        for ch in term
    )


def to_hiragana(term: str) -> str:
    return "".join(
        chr(ord(ch) - _KANA_OFFSET) if _KATAKANA_FIRST <= ord(ch) <= _KATAKANA_LAST else ch
        for ch in term
    )


def fold_variants(term: str) -> tuple[str, ...]:
    """(katakana form, hiragana form) for Japanese terms; () for anything else.

    Han characters pass through unchanged, so a kanji-only term folds to itself.
    """
    if not has_japanese(term):
        return ()
    return (to_katakana(term), to_hiragana(term))


def split_terms(normalized: str) -> tuple[str, ...]:
    return tuple(t for t in normalized.split(" ") if t)


def case_variants(term: str) -> tuple[str, ...]:
    """Verbatim, lower and upper forms with duplicates removed, order kept."""
    return dedupe((term, term.lower(), term.upper()))


def match_candidates(term: str) -> tuple[str, ...]:
    """Every string the predicate path tries for one term: case variants then kana folds."""
    return dedupe(case_variants(term) + fold_variants(term))


def dedupe(values) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return tuple(out)


def build_search_query(raw: str | None) -> SearchQuery:
    normalized = normalize_query(raw)
    return SearchQuery(raw=raw or "", normalized=normalized, terms=split_terms(normalized))
