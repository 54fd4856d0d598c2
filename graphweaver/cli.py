"""
Command line entry point: process every note in a vault.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from ai_providers import AIProviderType, create_provider_manager, resolve_provider_type
from config.logging_config import get_logger
from config.settings import Settings
from graphweaver.batch import (
    BatchError,
    BatchEvent,
    BatchOrchestrator,
    BatchRequest,
    StatsAggregator,
    create_logging_observer,
)
from graphweaver.generators import build_generators
from graphweaver.storage import JsonFileStatsSink, LocalDocumentStore

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphweaver",
        description="Generate front matter and wikilinks for every note in a Markdown vault",
        epilog="""
Examples:
  %(prog)s ~/notes
  %(prog)s ~/notes --wikilinks --no-front-matter
  %(prog)s ~/notes --chunk-size 5 --delay-ms 2000 --provider openai
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'vault',
        nargs='?',
        help='Vault directory (default: VAULT_DIR from settings)'
    )

    parser.add_argument(
        '--front-matter',
        dest='front_matter',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Generate front matter for notes without any'
    )

    parser.add_argument(
        '--wikilinks',
        dest='wikilinks',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Link phrases to other notes'
    )

    parser.add_argument('--chunk-size', type=int, help='Files per chunk')
    parser.add_argument('--delay-ms', type=int, help='Delay between chunks in ms')
    parser.add_argument('--max-retries', type=int, help='Retries per file')
    parser.add_argument('--concurrency', type=int, help='Concurrent files per chunk')

    parser.add_argument(
        '--provider',
        choices=[p.value for p in AIProviderType],
        help='AI provider (default: PROVIDER from settings)'
    )
    parser.add_argument('--model', help='Model name (default: provider default)')

    parser.add_argument(
        '--stats-file',
        type=Path,
        help='JSON file receiving run summaries'
    )

    return parser


def _overrides(args: argparse.Namespace) -> dict:
    mapping = {
        'chunk_size': args.chunk_size,
        'delay_between_chunks_ms': args.delay_ms,
        'max_retries': args.max_retries,
        'max_concurrent_processing': args.concurrency,
    }
    return {k: v for k, v in mapping.items() if v is not None}


async def run(args: argparse.Namespace, settings: Settings) -> int:
    vault = args.vault or settings.vault_dir
    if not vault:
        raise ValueError("No vault directory given (argument or VAULT_DIR)")

    store = LocalDocumentStore(vault)
    files = await store.list()
    if not files:
        logger.warning(f"No documents found in {store.root}")
        return 0

    provider_name = args.provider or settings.provider
    manager = create_provider_manager(
        provider_name,
        api_keys={"claude": settings.anthropic_api_key, "openai": settings.openai_api_key},
    )
    provider = await manager.get_provider(
        resolve_provider_type(provider_name),
        model=args.model or settings.model or None,
    )

    generators = build_generators(
        provider,
        custom_tags=settings.custom_tags,
        custom_properties=settings.custom_properties,
    )
    sink = JsonFileStatsSink(
        args.stats_file or settings.stats_file,
        debounce_ms=settings.stats_save_debounce_ms,
        history_limit=settings.stats_history_limit,
    )

    orchestrator = BatchOrchestrator(
        store,
        generators,
        stats_sink=sink,
        options=settings.to_processing_options(),
    )
    orchestrator.on(BatchEvent.PROGRESS, create_logging_observer())

    request = BatchRequest(
        files=files,
        generate_front_matter=(
            settings.generate_front_matter if args.front_matter is None else args.front_matter
        ),
        generate_wikilinks=(
            settings.generate_wikilinks if args.wikilinks is None else args.wikilinks
        ),
        options=_overrides(args),
    )

    try:
        result = await orchestrator.process(request)
    finally:
        await orchestrator.destroy()

    stats = result.stats
    print(
        f"\n✅ {stats.processed_files}/{stats.total_files} notes processed "
        f"({stats.skipped_files} unchanged, {stats.error_files} failed) "
        f"in {stats.duration_ms / 1000:.1f}s"
    )
    for path in StatsAggregator.failed_paths(result.file_results):
        print(f"   ❌ {path}")

    return 0 if stats.error_files == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        return asyncio.run(run(args, Settings()))
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted", file=sys.stderr)
        return 130
    except (BatchError, ValueError, FileNotFoundError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
