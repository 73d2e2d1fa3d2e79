#!/usr/bin/env python3
"""
Command-line entry point.

Usage:
    pagegen analyze <url>
    pagegen batch <url> [<url> ...] [--continue-on-error]
    pagegen generate <test|page|feature|steps> [-f FEATURE] [-u URL] [-e ELEMENTS]
                     [-a ACTIONS] [-s SCENARIOS] [-o OUTPUT]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pagegen import __version__
from pagegen.models.artifacts import ArtifactKind, GenerationRequest
from pagegen.services.artifact_synthesizer import ArtifactGenerationError
from pagegen.services.orchestrator import AnalysisOrchestrator, SurfaceAnalysisError
from pagegen.utils.config import Settings, validate_settings
from pagegen.utils.logging import log_configuration, setup_logging

logger = logging.getLogger(__name__)

GENERATE_KINDS = {
    "test": ArtifactKind.TEST,
    "page": ArtifactKind.PAGE_OBJECT,
    "feature": ArtifactKind.FEATURE,
    "steps": ArtifactKind.STEPS,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagegen",
        description="Analyze pages and generate page objects, tests, features and step definitions"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze URL and generate/update all artifacts")
    analyze.add_argument("url", help="Address of the page to analyze")

    batch = subparsers.add_parser("batch", help="Analyze multiple URLs one after another")
    batch.add_argument("urls", nargs="+", help="Addresses to analyze")
    batch.add_argument(
        "--continue-on-error",
        action="store_true",
        default=None,
        help="Keep going after a URL fails"
    )

    generate = subparsers.add_parser("generate", help="Generate a specific artifact")
    generate.add_argument("type", choices=sorted(GENERATE_KINDS), help="Artifact type")
    generate.add_argument("-f", "--feature", help="Feature description")
    generate.add_argument("-u", "--url", help="Target URL")
    generate.add_argument("-e", "--elements", help="UI elements")
    generate.add_argument("-a", "--actions", help="Page actions")
    generate.add_argument("-s", "--scenarios", help="Test scenarios")
    generate.add_argument("-o", "--output", help="Output file path (relative to OUTPUT_ROOT)")

    return parser


def build_generation_request(kind: ArtifactKind, args: argparse.Namespace) -> GenerationRequest:
    """Map CLI options onto the inputs each kind expects."""
    if kind == ArtifactKind.TEST:
        return GenerationRequest(feature_description=args.feature, url=args.url, elements=args.elements)
    if kind == ArtifactKind.PAGE_OBJECT:
        return GenerationRequest(url=args.url, elements=args.elements, actions=args.actions)
    if kind == ArtifactKind.FEATURE:
        return GenerationRequest(feature=args.feature, scenarios=args.scenarios, user_story=args.feature)
    return GenerationRequest(feature=args.feature, scenarios=args.scenarios)


async def run_command(args: argparse.Namespace, orchestrator: AnalysisOrchestrator) -> None:
    if args.command == "analyze":
        result = await orchestrator.analyze(args.url)
        print(f"{result.action.value}: {result.page_name}")
        for path in result.written:
            print(f"  {path}")
        print("Analysis and generation completed!")

    elif args.command == "batch":
        batch = await orchestrator.batch(args.urls, continue_on_error=args.continue_on_error)
        for result in batch.results:
            if result.success:
                print(f"{result.url}: {result.action.value} {result.page_name}")
            else:
                print(f"{result.url}: FAILED {result.error}")
        print(f"All URLs analyzed! ({len(batch.failed)} failed)")

    elif args.command == "generate":
        kind = GENERATE_KINDS[args.type]
        artifact = await orchestrator.generate(kind, build_generation_request(kind, args), args.output)
        if args.output:
            print(f"Saved to: {args.output}")
        else:
            print(artifact.content)


async def _main(args: argparse.Namespace, settings: Settings) -> None:
    orchestrator = AnalysisOrchestrator.from_settings(settings)
    try:
        await run_command(args, orchestrator)
    finally:
        await orchestrator.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    setup_logging(settings)

    try:
        validate_settings(settings)
        log_configuration(settings)
        asyncio.run(_main(args, settings))
    except (SurfaceAnalysisError, ArtifactGenerationError, ValueError) as e:
        print(f"{args.command.capitalize()} failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
