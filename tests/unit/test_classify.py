import json

import pytest

from pipelinetheatre.utils.classify import (
    BILINGUAL_KEYWORDS_PATH,
    NON_THEATRE,
    POSITIVE_KEYWORDS,
    THEATRE,
    UNKNOWN,
    TheatreKeywords,
    classify_theatre,
    load_keywords,
    should_emit,
)

UNKNOWN_REP = {"titre": "Afternoon at the venue"}


def test_classify_theatre_play_with_credits():
    result = classify_theatre({"titre": "Pièce de théâtre: Le Misanthrope, mise en scène par X"})
    assert result.score >= 2
    assert result.decision == THEATRE
    assert "pos:credits" in result.reasons


def test_classify_concert_is_non_theatre():
    result = classify_theatre({"titre": "Concert live DJ set"})
    assert result.score <= -2
    assert result.decision == NON_THEATRE
    assert result.confidence == 0.0


def test_classify_without_signal_is_unknown():
    result = classify_theatre(UNKNOWN_REP)
    assert -2 < result.score < 2
    assert result.decision == UNKNOWN
    assert result.confidence == pytest.approx(0.5)


def test_classify_weights():
    keywords = TheatreKeywords(positive=["drame"], negative=["expo"], soft_negative=["festival"], credits=[])
    assert classify_theatre({"titre": "Drame"}, keywords).score == 3
    assert classify_theatre({"description": "un drame"}, keywords).score == 1
    assert classify_theatre({"titre": "Expo"}, keywords).score == -4
    assert classify_theatre({"description": "expo"}, keywords).score == -2
    assert classify_theatre({"url": "https://x.be/expo/1"}, keywords).score == -1
    assert classify_theatre({"titre": "Festival", "description": "festival"}, keywords).score == -1


def test_should_emit_strict_and_lenient():
    ok, classification = should_emit(UNKNOWN_REP, strict=True)
    assert ok is False
    assert classification.decision == UNKNOWN

    ok, _ = should_emit(UNKNOWN_REP, strict=False)
    assert ok is True

    ok, _ = should_emit({"titre": "Concert live DJ set"}, strict=False)
    assert ok is False


def test_should_emit_respects_connector_veto():
    rep = {"titre": "Théâtre: Hamlet, mise en scène par Y", "is_theatre": False}
    ok, classification = should_emit(rep, strict=False)
    assert classification.decision == THEATRE
    assert ok is False


def test_keyword_table_is_injectable(tmp_path):
    path = tmp_path / "keywords.json"
    path.write_text(json.dumps({"positive": ["Opérette"], "negative": []}))
    keywords = load_keywords(path)

    assert keywords.positive == ["Opérette"]
    assert classify_theatre({"titre": "Une opérette"}, keywords).decision == THEATRE
    assert classify_theatre({"titre": "Concert"}, keywords).decision == UNKNOWN


def test_accent_variants_each_score():
    result = classify_theatre({"titre": "Théâtre live"})
    assert result.score == 2
    assert result.decision == THEATRE
    assert "pos:title:theatre" in result.reasons
    assert "pos:title:théâtre" in result.reasons


def test_default_table_has_no_dutch_terms():
    assert "voorstelling" not in POSITIVE_KEYWORDS
    assert classify_theatre({"titre": "Voorstelling"}).decision == UNKNOWN


def test_bilingual_table_extends_defaults():
    keywords = load_keywords(BILINGUAL_KEYWORDS_PATH)

    assert keywords.positive[:len(POSITIVE_KEYWORDS)] == POSITIVE_KEYWORDS
    assert "voorstelling" in keywords.positive
    assert "tentoonstelling" in keywords.negative
    assert classify_theatre({"titre": "Voorstelling"}, keywords).decision == THEATRE
    assert classify_theatre({"titre": "Tentoonstelling"}, keywords).decision == NON_THEATRE
    assert "pos:credits" in classify_theatre({"description": "regie: Jan"}, keywords).reasons
