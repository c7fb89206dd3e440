"""
Candidate extraction strategies.
Best-effort pattern matching over raw provider payloads; finding nothing is a normal outcome.
"""

import re  # title patterns
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from .models import CandidateResult, ConfidenceScale, MediaType

_TITLE = r"[A-Z][a-zA-Z\s&:'-]+"  # case-insensitive below, so any letter may start a title


class ExtractionStrategy(ABC):
	"""Turns a raw provider payload into candidates. Must not raise on odd input."""

	name = "base"

	@abstractmethod
	def extract(self, payload, query: str, existing: Sequence[str] = ()) -> List[CandidateResult]:
		"""Return new candidates whose titles are not already covered by `existing`."""


class PatternExtraction(ExtractionStrategy):
	"""
	Regex rules over search-result markup:
	title (year) ... IMDb, quoted title after movie/film/show/series,
	title (year), and "watch <title>".
	"""

	name = "pattern"

	PATTERNS = (
		re.compile(r"(?:The\s+)?(" + _TITLE + r")\s*\((\d{4})\).*?IMDb", re.I),
		re.compile(r"(?:movie|film|show|series).*?[\"'](" + _TITLE + r")[\"']", re.I),
		re.compile(r"(" + _TITLE + r")\s+\((\d{4})\)", re.I),
		re.compile(r"watch\s+(" + _TITLE + r")", re.I),
	)
	RE_UNWANTED = re.compile(r"[^\w\s&:'-]")
	RE_SPACES = re.compile(r"\s+")

	TV_INDICATORS = ('series', 'season', 'episode', 'tv show', 'netflix series')
	MOVIE_INDICATORS = ('film', 'movie', 'cinema')

	def __init__(
		self,
		source: str = "Web Search",
		confidence: float = 75,
		scale: ConfidenceScale = ConfidenceScale.PERCENT,
		collect_limit: int = 20,
	):
		self.source = source
		self.confidence = confidence
		self.scale = scale
		self.collect_limit = collect_limit  # stop collecting once this many titles are known

	def extract(self, payload, query: str, existing: Sequence[str] = ()) -> List[CandidateResult]:
		text = payload if isinstance(payload, str) else ""
		if not text:
			return []

		seen = [t.lower() for t in existing]
		found: List[CandidateResult] = []
		for pattern in self.PATTERNS:
			for match in pattern.finditer(text):
				if len(seen) >= self.collect_limit:
					break
				title = (match.group(1) or "").strip()
				if not (2 < len(title) < 100):
					continue
				cleaned = self.clean_title(title)
				if not cleaned or self._already_seen(cleaned, seen):
					continue
				year = match.group(2) if pattern.groups >= 2 else None
				found.append(CandidateResult(
					title=cleaned,
					year=int(year) if year else None,
					description=f"Found via web search for: {query}",
					media_type=self.guess_media_type(cleaned, text),
					source=self.source,
					confidence=self.confidence,
					scale=self.scale,
				))
				seen.append(cleaned.lower())

		logger.debug(f"[Extraction] {self.name}: {len(found)} titles from {len(text)} chars")
		return found

	def clean_title(self, title: str) -> str:
		"""Strip special characters (keeping & : ' -) and collapse whitespace."""
		return self.RE_SPACES.sub(' ', self.RE_UNWANTED.sub('', title)).strip()

	def guess_media_type(self, title: str, context: str) -> MediaType:
		lower_title = title.lower()
		lower_context = context.lower()
		if any(i in lower_context or i in lower_title for i in self.TV_INDICATORS):
			return MediaType.TV
		if any(i in lower_context or i in lower_title for i in self.MOVIE_INDICATORS):
			return MediaType.MOVIE
		return MediaType.MOVIE  # default to movie

	@staticmethod
	def _already_seen(title: str, seen: Iterable[str]) -> bool:
		lower = title.lower()
		return any(lower in s or s in lower for s in seen)


class SearchApiExtraction(ExtractionStrategy):
	"""
	Structured search-API payloads ({"organic_results": [{"title", "snippet"}, ...]}).
	Each result's title and snippet go through the same pattern rules.
	"""

	name = "search-api"

	def __init__(self, patterns: Optional[PatternExtraction] = None):
		self.patterns = patterns or PatternExtraction(source="Search API")

	def extract(self, payload, query: str, existing: Sequence[str] = ()) -> List[CandidateResult]:
		if not isinstance(payload, dict):
			return []
		organic = payload.get("organic_results") or []
		if not isinstance(organic, list):
			return []

		found: List[CandidateResult] = []
		titles = list(existing)
		for item in organic:
			if not isinstance(item, dict):
				continue
			line = f"{item.get('title') or ''} {item.get('snippet') or ''}".strip()
			new = self.patterns.extract(line, query, existing=titles)
			found.extend(new)
			titles.extend(c.title for c in new)
		return found
