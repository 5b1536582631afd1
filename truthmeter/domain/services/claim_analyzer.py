"""Service for categorizing sources and summarizing a claim with a language model."""

import asyncio
import json
import logging
import math
from typing import Dict, List, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import AnalysisError, LLMProviderError, TranslationError
from ..models.analysis_result import AnalysisOutcome, count_relevance
from ..models.source import CandidateSource, CategorizedSource, Relevance
from ..ports.llm_provider import LLMProvider
from .scoring import PercentageBreakdown, normalize_percentages

logger = logging.getLogger(__name__)

DEFAULT_BATCH_COUNT = 5
PROMPT_CONTENT_LENGTH = 200
CATEGORIZATION_MAX_TOKENS = 4096
SUMMARY_MAX_TOKENS = 500
TRANSLATION_MAX_TOKENS = 2000

TRANSLATION_LANGUAGES: Dict[str, str] = {
    "ar": "Arabic",
    "fr": "French",
    "tr": "Turkish",
    "fa": "Farsi",
    "ur": "Urdu",
    "hi": "Hindi",
    "es": "Spanish",
    "de": "German",
    "pt": "Portuguese",
    "ja": "Japanese",
    "zh": "Chinese",
    "it": "Italian",
    "sv": "Swedish",
}

ANALYST_SYSTEM_PROMPT = "You are a fact-checking assistant. Respond with valid JSON only."
TRANSLATOR_SYSTEM_PROMPT = "You are a professional translator. Respond with valid JSON only."

T = TypeVar("T", bound=BaseModel)


class SourceLabel(BaseModel):
    """One stance label as returned by the model."""

    url: str
    title: str = ""
    relevance: Relevance

    @field_validator("relevance", mode="before")
    @classmethod
    def _normalize_label(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class CategorizationResponse(BaseModel):
    """Expected shape of a categorization reply."""

    sources: List[SourceLabel]


class SummaryResponse(BaseModel):
    """Expected shape of a summary reply."""

    model_config = ConfigDict(populate_by_name=True)

    accuracy_score: float = Field(..., alias="accuracyScore", ge=0, le=100)
    summary: str = Field(..., min_length=1)


def split_into_batches(sources: Sequence[CandidateSource], batch_count: int) -> List[List[CandidateSource]]:
    """Split sources into at most ``batch_count`` consecutive batches of near-equal size."""
    if not sources:
        return []
    batch_size = math.ceil(len(sources) / batch_count)
    return [list(sources[i : i + batch_size]) for i in range(0, len(sources), batch_size)]


def _decode(raw: str, schema: Type[T], what: str) -> T:
    try:
        return schema.model_validate_json(raw)
    except ValidationError as e:
        raise AnalysisError(f"Malformed {what} response: {e}") from e


class ClaimAnalyzer:
    """Analyzes a claim against retrieved sources.

    Categorization batches run in parallel. The summary call follows once
    every batch is labelled, and the optional translation call follows the
    summary. Categorization and summary failures raise ``AnalysisError``;
    translation failures only cost the translations.
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        batch_count: int = DEFAULT_BATCH_COUNT,
        enable_translations: bool = True,
    ):
        """Initialize the analyzer.

        Args:
            llm_provider: Language model provider
            batch_count: Number of parallel categorization batches
            enable_translations: Whether to translate the summary
        """
        if batch_count < 1:
            raise ValueError("batch_count must be positive")
        self._llm = llm_provider
        self._batch_count = batch_count
        self._enable_translations = enable_translations

    async def analyze(self, claim: str, sources: Sequence[CandidateSource]) -> AnalysisOutcome:
        """Categorize all sources, score the claim and summarize the findings.

        Args:
            claim: Claim text
            sources: Retrieved sources, in rank order

        Returns:
            Analysis outcome covering every input source

        Raises:
            AnalysisError: If no sources were given, a model call failed or
                a categorization or summary reply was malformed
        """
        if not sources:
            raise AnalysisError("Cannot analyze a claim without sources")

        batches = split_into_batches(sources, self._batch_count)
        logger.info(f"🤖 Analyzing {len(sources)} sources in {len(batches)} parallel batches")

        results = await asyncio.gather(
            *(self._categorize_batch(claim, batch, number) for number, batch in enumerate(batches, start=1)),
            return_exceptions=True,
        )

        categorized: List[CategorizedSource] = []
        for number, result in enumerate(results, start=1):
            if isinstance(result, AnalysisError):
                raise result
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                raise AnalysisError(f"Categorization batch {number} failed: {result}") from result
            categorized.extend(result)

        if len(categorized) != len(sources):
            logger.warning(f"⚠️ Categorized {len(categorized)} sources but {len(sources)} were retrieved")

        counts = count_relevance(categorized)
        supporting = counts[Relevance.SUPPORTING]
        contradicting = counts[Relevance.CONTRADICTING]
        neutral = counts[Relevance.NEUTRAL]
        breakdown = normalize_percentages(supporting, contradicting, neutral)
        logger.info(
            f"📊 Categorization: {supporting} supporting, {contradicting} contradicting, {neutral} neutral"
        )

        summary = await self._summarize(claim, counts, breakdown)
        translations = await self._translate(summary.summary) if self._enable_translations else {}

        return AnalysisOutcome(
            accuracy_score=round(summary.accuracy_score, 1),
            agreement_score=breakdown.agreement,
            disagreement_score=breakdown.disagreement,
            neutral_score=breakdown.neutral,
            summary=summary.summary.strip(),
            sources=categorized,
            summary_translations=translations,
        )

    async def _complete(self, system_prompt: str, user_prompt: str, max_tokens: int, what: str) -> str:
        try:
            return await self._llm.complete_json(system_prompt, user_prompt, max_tokens=max_tokens)
        except LLMProviderError as e:
            raise AnalysisError(f"{what} call failed: {e}") from e
        except Exception as e:
            logger.error(f"❌ {what} call raised {type(e).__name__}: {e}", exc_info=True)
            raise AnalysisError(f"{what} call failed: {type(e).__name__}: {e}") from e

    async def _categorize_batch(
        self,
        claim: str,
        batch: List[CandidateSource],
        batch_number: int,
    ) -> List[CategorizedSource]:
        """Label one batch, returning exactly one categorized source per input source."""
        raw = await self._complete(
            ANALYST_SYSTEM_PROMPT,
            self._categorization_prompt(claim, batch, batch_number),
            CATEGORIZATION_MAX_TOKENS,
            f"Categorization batch {batch_number}",
        )
        labels = _decode(raw, CategorizationResponse, f"categorization batch {batch_number}").sources

        if len(labels) != len(batch):
            logger.warning(
                f"⚠️ Batch {batch_number}: model returned {len(labels)} labels for {len(batch)} sources"
            )

        by_url: Dict[str, Relevance] = {}
        by_title: Dict[str, Relevance] = {}
        for label in labels:
            by_url.setdefault(label.url.strip(), label.relevance)
            if label.title:
                by_title.setdefault(label.title.strip(), label.relevance)

        categorized = []
        unlabelled = 0
        for source in batch:
            relevance = by_url.get(source.url) or by_title.get(source.title.strip())
            if relevance is None:
                unlabelled += 1
                relevance = Relevance.NEUTRAL
            categorized.append(CategorizedSource.from_candidate(source, relevance))

        if unlabelled:
            logger.warning(f"⚠️ Batch {batch_number}: {unlabelled} sources unlabelled, counted as neutral")
        return categorized

    async def _summarize(
        self,
        claim: str,
        counts: Dict[Relevance, int],
        breakdown: PercentageBreakdown,
    ) -> SummaryResponse:
        total = sum(counts.values())
        prompt = (
            f'Based on fact-checking analysis: The claim "{claim}" was analyzed against {total} sources. '
            f"{counts[Relevance.SUPPORTING]} sources support it ({breakdown.agreement}%), "
            f"{counts[Relevance.CONTRADICTING]} contradict it ({breakdown.disagreement}%), "
            f"and {counts[Relevance.NEUTRAL]} are neutral ({breakdown.neutral}%). "
            "Write a brief 2-3 sentence summary of these findings and provide an accuracy score (0-100).\n\n"
            "Respond with JSON:\n"
            '{\n  "accuracyScore": <number 0-100>,\n  "summary": "<2-3 sentence summary>"\n}'
        )
        raw = await self._complete(ANALYST_SYSTEM_PROMPT, prompt, SUMMARY_MAX_TOKENS, "Summary")
        return _decode(raw, SummaryResponse, "summary")

    async def _translate(self, summary: str) -> Dict[str, str]:
        """Translations of the summary, or an empty mapping if translation fails."""
        try:
            translations = await self._request_translations(summary)
        except TranslationError as e:
            logger.warning(f"⚠️ Summary translation skipped: {e}")
            return {}

        missing = sorted(set(TRANSLATION_LANGUAGES) - set(translations))
        if missing:
            logger.warning(f"⚠️ Summary not translated to: {', '.join(missing)}")
        logger.info(f"🌐 Summary translated to {len(translations)} languages")
        return translations

    async def _request_translations(self, summary: str) -> Dict[str, str]:
        language_lines = "\n".join(
            f'  "{code}": "{name} translation",' for code, name in TRANSLATION_LANGUAGES.items()
        ).rstrip(",")
        prompt = (
            f"Translate this fact-checking summary to the following {len(TRANSLATION_LANGUAGES)} languages. "
            "Keep translations concise and accurate.\n\n"
            f'Summary in English: "{summary}"\n\n'
            f"Provide translations in JSON format:\n{{\n{language_lines}\n}}\n\n"
            "Respond with valid JSON only."
        )
        try:
            raw = await self._llm.complete_json(TRANSLATOR_SYSTEM_PROMPT, prompt, max_tokens=TRANSLATION_MAX_TOKENS)
        except LLMProviderError as e:
            raise TranslationError(f"Translation call failed: {e}") from e
        except Exception as e:
            logger.warning(f"⚠️ Translation call raised {type(e).__name__}: {e}", exc_info=True)
            raise TranslationError(f"Translation call failed: {type(e).__name__}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise TranslationError(f"Translation reply is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise TranslationError("Translation reply is not a JSON object")

        return {
            code: text.strip()
            for code, text in data.items()
            if code in TRANSLATION_LANGUAGES and isinstance(text, str) and text.strip()
        }

    @staticmethod
    def _categorization_prompt(claim: str, batch: List[CandidateSource], batch_number: int) -> str:
        sources_text = "\n".join(
            f"{index}. {source.title}\nURL: {source.url}\nContent: {source.content[:PROMPT_CONTENT_LENGTH]}...\n"
            for index, source in enumerate(batch, start=1)
        )
        return f"""You are a fact-checking assistant. Categorize each of these {len(batch)} sources based on the claim.

Claim: "{claim}"

Sources (batch {batch_number}):
{sources_text}
For each source, determine if it is:
- "supporting": The source supports or agrees with the claim
- "contradicting": The source contradicts or disagrees with the claim
- "neutral": The source is neutral, unrelated, or provides mixed information

Respond with JSON:
{{
  "sources": [
    {{
      "url": "<exact source url>",
      "title": "<exact source title>",
      "relevance": "supporting" | "contradicting" | "neutral"
    }}
  ]
}}

Return ALL {len(batch)} sources with their categorization. Respond with valid JSON only."""
