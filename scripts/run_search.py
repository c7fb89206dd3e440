"""
Run one intent search from the command line.

This script:
1) Loads settings from CINESEARCH_* environment variables (or .env)
2) Optionally swaps in a catalog (JSON Lines) and knowledge base (JSON) from disk
3) Runs the query through the provider fallback chain
4) Prints the ranked list and the providers visited

Usage:
    python -m scripts.run_search "movies that require a lot of thinking" --intent drama
"""

import argparse  # command-line options
import sys  # stderr sink

from loguru import logger  # console logging

from cinesearch.config import ProviderKind, get_settings  # settings and provider names
from cinesearch.data_loader import DataLoader  # optional alternate data
from cinesearch.knowledge_base import KnowledgeBase  # curated answers
from cinesearch.search_engine import SearchEngine  # core engine


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Find movies and TV shows by free-text intent.")
	parser.add_argument("query", help="what you feel like watching")
	parser.add_argument("--intent", default=None, help="coarse hint: inspiring, family, comedy, drama, ...")
	parser.add_argument("--provider", choices=[k.value for k in ProviderKind], default=None, help="override the configured provider")
	parser.add_argument("--max-results", type=int, default=None)
	parser.add_argument("--catalog", default=None, help="JSON Lines catalog for the offline scorer")
	parser.add_argument("--knowledge", default=None, help="JSON knowledge base document")
	return parser


def main(argv=None) -> int:
	args = build_parser().parse_args(argv)

	settings = get_settings()
	overrides = {}
	if args.provider:
		overrides["provider"] = args.provider
	if args.max_results:
		overrides["max_results"] = args.max_results
	if overrides:
		settings = settings.model_copy(update=overrides)

	logger.remove()
	logger.add(sys.stderr, level=settings.log_level.upper())

	loader = DataLoader()
	catalog = loader.load_catalog_from_jsonl(args.catalog) if args.catalog else None
	knowledge = KnowledgeBase(loader.load_knowledge_from_json(args.knowledge)) if args.knowledge else None

	engine = SearchEngine(settings.to_search_config(), knowledge_base=knowledge, catalog=catalog)
	outcome = engine.search_with_trace(args.query, args.intent)

	print(f"Query: {outcome.query}" + (f"  [intent: {outcome.intent}]" if outcome.intent else ""))
	print(f"Providers: {' -> '.join(outcome.trace.providers) or '-'}")
	if not outcome.results:
		print("No results.")
		return 0
	for i, r in enumerate(outcome.results, 1):
		year = f" ({r.year})" if r.year else ""
		print(f"  {i}. [{r.confidence:.2f}] {r.title}{year} - {r.media_type.value} - {r.source}")
	return 0


if __name__ == '__main__':
	sys.exit(main())
