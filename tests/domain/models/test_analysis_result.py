"""Tests for analysis result helpers."""

from datetime import datetime, timezone

import pytest

from truthmeter.domain.models.analysis_result import AnalysisResult, count_relevance
from truthmeter.domain.models.source import CategorizedSource, Relevance


def make_result(**overrides) -> AnalysisResult:
    values = dict(
        id="result-1",
        claim_text="Coffee consumption lowers mortality risk.",
        accuracy_score=72.5,
        agreement_score=50.0,
        disagreement_score=25.0,
        neutral_score=25.0,
        summary="Most sources support the claim.",
        summary_translations={"fr": "La plupart des sources soutiennent l'affirmation."},
        sources=[
            CategorizedSource(url="https://a.example.com/1", relevance_score=0.9, relevance=Relevance.SUPPORTING),
            CategorizedSource(url="https://b.example.com/2", relevance_score=0.8, relevance=Relevance.SUPPORTING),
            CategorizedSource(url="https://c.example.com/3", relevance_score=0.7, relevance=Relevance.NEUTRAL),
        ],
        total_sources_retrieved=4,
        analyzed_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return AnalysisResult(**values)


@pytest.mark.parametrize("language", ["fr", "FR"])
def test_summary_for_translated_language(language):
    assert make_result().summary_for(language) == "La plupart des sources soutiennent l'affirmation."


@pytest.mark.parametrize("language", ["en", "ar"])
def test_summary_for_falls_back_to_original(language):
    assert make_result().summary_for(language) == "Most sources support the claim."


def test_summary_for_without_translations():
    result = make_result(summary_translations={})

    assert result.summary_for("fr") == result.summary


def test_sources_by_relevance_and_counts():
    result = make_result()

    assert [s.url for s in result.sources_by_relevance(Relevance.SUPPORTING)] == [
        "https://a.example.com/1",
        "https://b.example.com/2",
    ]
    assert result.sources_by_relevance(Relevance.CONTRADICTING) == []
    assert count_relevance(result.sources) == {
        Relevance.SUPPORTING: 2,
        Relevance.CONTRADICTING: 0,
        Relevance.NEUTRAL: 1,
    }


def test_serializes_with_camel_case_keys():
    data = make_result().model_dump(by_alias=True)

    assert data["claimText"] == "Coffee consumption lowers mortality risk."
    assert data["summaryTranslations"] == {"fr": "La plupart des sources soutiennent l'affirmation."}
    assert data["cached"] is False
