"""Main script for running TruthMeter from the terminal."""

import asyncio
import logging

from dotenv import load_dotenv

from .domain.errors import TruthMeterError
from .domain.models.analysis_result import AnalysisResult
from .domain.models.source import Relevance
from .infrastructure.config import AppConfig
from .infrastructure.dependencies import ServiceContainer

TOP_SOURCES = 3


def print_result(result: AnalysisResult, language: str = "en") -> None:
    """Print scores, summary and the top sources of each stance.

    The summary is shown in ``language`` when a translation exists.
    """
    print("\nResults" + (" (cached)" if result.cached else "") + ":")
    print(f"Accuracy: {result.accuracy_score:.1f}%")
    print(
        f"Agree: {result.agreement_score:.1f}%  "
        f"Disagree: {result.disagreement_score:.1f}%  "
        f"Neutral: {result.neutral_score:.1f}%"
    )
    print(f"Sources analyzed: {result.total_sources_retrieved}")
    print(f"\nSummary: {result.summary_for(language)}")

    for relevance in Relevance:
        sources = result.sources_by_relevance(relevance)[:TOP_SOURCES]
        if not sources:
            continue
        print(f"\n{relevance.value.title()} sources:")
        for i, source in enumerate(sources, 1):
            print(f"{i}. {source.title or source.url}\n   {source.url}")

    print(f"\nShare id: {result.id}")


async def main():
    """Run the interactive fact checker."""
    print("TruthMeter - claim fact checking against web sources")
    print("----------------------------------------------------")

    load_dotenv()
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level.upper())

    container = ServiceContainer(config)
    await asyncio.to_thread(container.startup)

    try:
        orchestrator = await container.get_orchestrator()
        while True:
            # Get claim from user
            claim = input("\nEnter a claim to fact-check (or 'quit' to exit): ")
            if claim.strip().lower() in ('quit', 'exit', 'q'):
                break

            print("\nChecking sources...")
            try:
                print_result(await orchestrator.analyze_claim(claim), config.display_language)
            except TruthMeterError as e:
                print(f"\nError checking claim: {e.user_message}")

    finally:
        # Clean up
        await container.shutdown()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
