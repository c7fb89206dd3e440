"""
Provider adapters.
One adapter per search backend. Every adapter turns its backend's response into candidates
and converts failures into a failed ProviderResult instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import List, Optional
from urllib.parse import quote_plus

import requests  # HTTP client for the proxy and the search API
from loguru import logger

from .config import ProviderKind, SearchConfig
from .errors import ProviderError, TransportError
from .extraction import ExtractionStrategy, PatternExtraction, SearchApiExtraction
from .knowledge_base import KeywordFallback, KnowledgeBase
from .models import CandidateResult, ConfidenceScale, ParsedQuery, ProviderResult
from .query_parser import QueryParser
from .scoring import HeuristicScorer


class Provider(ABC):
	"""
	Base adapter. Subclasses implement `_search` and may raise ProviderError or
	requests exceptions; `fetch` turns those into a failed ProviderResult.
	"""

	name = "provider"
	result_limit: Optional[int] = None  # ranked cap when a walk ends on this provider; None keeps max_results

	def __init__(self, parser: Optional[QueryParser] = None):
		self.parser = parser or QueryParser()

	@abstractmethod
	def _search(self, query: ParsedQuery) -> List[CandidateResult]:
		...

	def fetch(self, query: ParsedQuery) -> ProviderResult:
		try:
			candidates = self._search(query)
		except TransportError as e:
			status = f" (status {e.status_code})" if e.status_code else ""
			logger.warning(f"[{self.name}] Transport failure{status}: {e}")
			return ProviderResult.failure(self.name, str(e))
		except ProviderError as e:
			logger.warning(f"[{self.name}] Provider failure: {e}")
			return ProviderResult.failure(self.name, str(e))
		except requests.RequestException as e:
			logger.warning(f"[{self.name}] Request failed: {e}")
			return ProviderResult.failure(self.name, str(e))
		logger.debug(f"[{self.name}] {len(candidates)} candidates for '{query.normalized}'")
		return ProviderResult.ok(self.name, candidates)

	def search(self, query: str, intent: Optional[str] = None) -> List[CandidateResult]:
		"""Adapter contract: never raises, failure means an empty list."""
		return list(self.fetch(self.parser.parse(query, intent)).candidates)


class OfflineProvider(Provider):
	"""
	Final link of the fallback chain: knowledge base answers followed by the
	heuristic scorer's catalog matches, or the keyword fallback when both are empty.
	No I/O, always succeeds.
	"""

	name = "simulation"

	def __init__(
		self,
		knowledge_base: KnowledgeBase,
		scorer: HeuristicScorer,
		max_results: int = 5,
		parser: Optional[QueryParser] = None,
		keyword_fallback: Optional[KeywordFallback] = None,
	):
		super().__init__(parser)
		self.knowledge_base = knowledge_base
		self.scorer = scorer
		self.max_results = max_results
		self.keyword_fallback = keyword_fallback

	def _search(self, query: ParsedQuery) -> List[CandidateResult]:
		known = self.knowledge_base.lookup(query)
		scored = self.scorer.score(query, max_results=self.max_results)
		logger.debug(f"[Offline] knowledge={len(known)} scored={len(scored)}")
		if not known and not scored and self.keyword_fallback is not None:
			return self.keyword_fallback.lookup(query)
		return known + scored


class ScrapingProvider(Provider):
	"""
	Searches a generic web search engine through a rendering proxy and pattern-extracts
	titles from the returned markup. Known answers from the knowledge base go first.
	"""

	SEARCH_ENGINES = {
		ProviderKind.GOOGLE: "https://www.google.com/search?q={q}",
		ProviderKind.BING: "https://www.bing.com/search?q={q}",
	}
	SITE_FILTER = "site:imdb.com OR site:rottentomatoes.com OR site:netflix.com"
	KNOWLEDGE_SOURCE = "Web Search + Knowledge"
	KNOWLEDGE_CONFIDENCE = 95

	def __init__(
		self,
		config: SearchConfig,
		knowledge_base: KnowledgeBase,
		search_engine: ProviderKind = ProviderKind.GOOGLE,
		strategy: Optional[ExtractionStrategy] = None,
		session=None,
		parser: Optional[QueryParser] = None,
	):
		super().__init__(parser)
		if search_engine not in self.SEARCH_ENGINES:
			search_engine = ProviderKind.GOOGLE
		self.config = config
		self.knowledge_base = knowledge_base
		self.search_engine = search_engine
		self.strategy = strategy or PatternExtraction()
		self.session = session or requests.Session()
		self.name = f"scraping:{search_engine.value}"
		self.result_limit = config.extraction_limit

	def _search(self, query: ParsedQuery) -> List[CandidateResult]:
		if not self.config.scraping_api_key:
			raise ProviderError("scraping proxy credential not configured")

		known = [
			replace(c, source=self.KNOWLEDGE_SOURCE, confidence=self.KNOWLEDGE_CONFIDENCE, scale=ConfidenceScale.PERCENT)
			for c in self.knowledge_base.lookup(query)
		]

		attempts = (
			f"{query.raw_query} movies tv shows {self.SITE_FILTER}",
			f"{query.raw_query} movies TV shows",  # retry without site restrictions
		)
		results: List[CandidateResult] = []
		for search_text in attempts:
			markup = self._fetch_markup(search_text)
			extracted = self.strategy.extract(markup, query.raw_query, existing=[c.title for c in known])
			results = known + extracted
			logger.debug(f"[Scraping] '{search_text}' -> {len(extracted)} extracted, {len(known)} known")
			if results:
				break

		return results[:self.config.extraction_limit]

	def _fetch_markup(self, search_text: str) -> str:
		target = self.SEARCH_ENGINES[self.search_engine].format(q=quote_plus(search_text))
		params = {
			"api_key": self.config.scraping_api_key,
			"url": target,
			"render_js": str(self.config.render_js).lower(),
			"premium_proxy": str(self.config.premium_proxy).lower(),
			"country_code": self.config.country_code,
		}
		response = self.session.get(self.config.proxy_url, params=params, timeout=self.config.request_timeout)
		if response.status_code == 429:
			raise TransportError("scraping proxy rate limit reached", status_code=429)
		if not 200 <= response.status_code < 300:
			raise TransportError(f"scraping proxy returned {response.status_code}", status_code=response.status_code)
		return response.text or ""


class RemoteApiProvider(Provider):
	"""
	Licensed search API (JSON organic results). Without a credential, or when the call
	fails in any way, it answers with the offline provider's results for the same query.
	"""

	name = "remote-api"

	def __init__(
		self,
		config: SearchConfig,
		offline: OfflineProvider,
		strategy: Optional[ExtractionStrategy] = None,
		session=None,
		parser: Optional[QueryParser] = None,
	):
		super().__init__(parser)
		self.config = config
		self.offline = offline
		self.strategy = strategy or SearchApiExtraction()
		self.session = session or requests.Session()

	def _search(self, query: ParsedQuery) -> List[CandidateResult]:
		if not self.config.remote_api_key:
			logger.info("[RemoteAPI] No credential configured, deferring to offline search")
			return self._defer(query)

		try:
			payload = self._fetch_json(query)
		except (TransportError, requests.RequestException, ValueError) as e:
			logger.warning(f"[RemoteAPI] Search API failed, deferring to offline search: {e}")
			return self._defer(query)

		return self.strategy.extract(payload, query.raw_query)[:self.config.extraction_limit]

	def _defer(self, query: ParsedQuery) -> List[CandidateResult]:
		return list(self.offline.fetch(query).candidates)

	def _fetch_json(self, query: ParsedQuery) -> dict:
		params = {
			"engine": "google",
			"q": f"{query.raw_query} movies tv shows",
			"api_key": self.config.remote_api_key,
			"num": 10,
		}
		response = self.session.get(self.config.remote_api_url, params=params, timeout=self.config.request_timeout)
		if not 200 <= response.status_code < 300:
			raise TransportError(f"search API returned {response.status_code}", status_code=response.status_code)
		payload = response.json()  # ValueError on malformed JSON
		if not isinstance(payload, dict):
			raise ValueError("search API payload is not a JSON object")
		return payload
