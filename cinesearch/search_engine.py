"""
Search engine module.
Builds the provider chain from configuration and exposes the single `search` entry point.
"""

from dataclasses import dataclass  # lightweight containers for results
from typing import List, Mapping, Optional, Sequence  # type annotations for clarity

# Import project modules for data structures and components
from .config import ProviderKind, SearchConfig  # engine configuration
from .data_loader import DEFAULT_CATALOG  # embedded offline catalog
from .fallback import FallbackOrchestrator  # provider state machine
from .knowledge_base import KeywordFallback, KnowledgeBase  # curated phrase and trigger-word answers
from .models import CandidateResult, CatalogEntry, SearchTrace  # core data classes
from .providers import OfflineProvider, Provider, RemoteApiProvider, ScrapingProvider  # adapters
from .query_parser import QueryParser  # normalizer / tokenizer
from .ranking import Ranker  # merge, dedup, sort
from .scoring import HeuristicScorer, IntentRule  # catalog scorer

# Import loguru for console logging
from loguru import logger  # simple structured logger


@dataclass
class SearchOutcome:
	query: str  # original query string
	intent: Optional[str]  # normalized intent, if any
	results: List[CandidateResult]  # ranked, confidence on 0..1
	trace: SearchTrace  # providers visited


class SearchEngine:
	"""
	High-level search API combining query parsing, provider fallback and ranking.
	Catalogs are injected (defaults are the embedded ones) and never modified.
	"""

	def __init__(
		self,
		config: Optional[SearchConfig] = None,
		knowledge_base: Optional[KnowledgeBase] = None,
		catalog: Optional[Sequence[CatalogEntry]] = None,
		intent_rules: Optional[Mapping[str, IntentRule]] = None,
		keyword_fallback: Optional[KeywordFallback] = None,
		session=None,  # shared HTTP session for network providers (requests.Session-like)
	):
		self.config = config or SearchConfig()
		self.parser = QueryParser()
		self.knowledge_base = KnowledgeBase() if knowledge_base is None else knowledge_base
		self.keyword_fallback = KeywordFallback() if keyword_fallback is None else keyword_fallback
		self.scorer = HeuristicScorer(DEFAULT_CATALOG if catalog is None else catalog, intent_rules=intent_rules)
		self.ranker = Ranker(max_results=self.config.max_results, duplicate_threshold=self.config.duplicate_threshold)
		self.providers = self._build_chain(session)
		self.orchestrator = FallbackOrchestrator(self.providers, self.ranker)
		logger.info(
			f"[Engine] Ready | chain={[p.name for p in self.providers]} | "
			f"knowledge={len(self.knowledge_base)} phrases | catalog={len(self.scorer.catalog)} titles"
		)

	def _build_chain(self, session) -> List[Provider]:
		"""Provider order for the configured selection; the offline provider always closes it."""
		offline = OfflineProvider(
			self.knowledge_base,
			self.scorer,
			max_results=self.config.max_results,
			parser=self.parser,
			keyword_fallback=self.keyword_fallback,
		)
		kind = self.config.provider
		if kind == ProviderKind.SIMULATION:
			return [offline]

		remote = RemoteApiProvider(self.config, offline, session=session, parser=self.parser)
		if kind == ProviderKind.REMOTE_API:
			return [remote, offline]

		engine = ProviderKind.BING if kind == ProviderKind.BING else ProviderKind.GOOGLE
		scraping = ScrapingProvider(self.config, self.knowledge_base, search_engine=engine, session=session, parser=self.parser)
		return [scraping, remote, offline]

	def search(self, query: Optional[str], intent: Optional[str] = None) -> List[CandidateResult]:
		"""Ranked candidates for a free-text query. Never raises for provider failures."""
		return self.search_with_trace(query, intent).results

	def search_with_trace(self, query: Optional[str], intent: Optional[str] = None) -> SearchOutcome:
		parsed = self.parser.parse(query, intent)
		if parsed.is_empty:
			logger.info("[Engine] Empty query, nothing to search")
			return SearchOutcome(query=parsed.raw_query, intent=parsed.intent, results=[], trace=SearchTrace())

		logger.debug(f"[Engine] Searching '{parsed.normalized}' intent={parsed.intent}")
		results, trace = self.orchestrator.run(parsed)
		logger.info(f"[Engine] Returning {len(results)} results for '{parsed.normalized}' via {trace.providers}")
		return SearchOutcome(query=parsed.raw_query, intent=parsed.intent, results=results, trace=trace)
