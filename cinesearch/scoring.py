"""
Heuristic scoring module.
Scores catalog entries against a parsed query with additive weighted text signals.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from .models import CandidateResult, CatalogEntry, ConfidenceScale, ParsedQuery

SCORER_SOURCE = "Intelligent Web Search"


@dataclass(frozen=True)
class IntentRule:
	"""Attributes an entry needs for an intent boost: any listed genre or any listed keyword."""
	genres: FrozenSet[str] = frozenset()
	keywords: FrozenSet[str] = frozenset()

	def matches(self, entry: CatalogEntry) -> bool:
		return bool(self.genres.intersection(entry.genres) or self.keywords.intersection(entry.keywords))


DEFAULT_INTENT_RULES: Dict[str, IntentRule] = {
	"inspiring": IntentRule(keywords=frozenset({"inspiring"})),
	"family": IntentRule(genres=frozenset({"Family"}), keywords=frozenset({"family"})),
	"comedy": IntentRule(genres=frozenset({"Comedy"})),
	"drama": IntentRule(genres=frozenset({"Drama"})),
}


class HeuristicScorer:
	"""
	Computes an integer relevance score per catalog entry:
	- whole query inside the title / plot
	- per-token hits on keyword tags, genres and people
	- an intent boost layered on top (never a filter)
	Entries at or below the threshold are dropped; the rest get confidence = min(score / 20, 1).
	"""

	def __init__(
		self,
		catalog: Sequence[CatalogEntry],
		intent_rules: Optional[Mapping[str, IntentRule]] = None,
		title_weight: int = 10,
		plot_weight: int = 5,
		keyword_weight: int = 3,
		genre_weight: int = 4,
		people_weight: int = 6,
		intent_weight: int = 5,
		min_score: int = 3,
		score_ceiling: float = 20.0,
	):
		self.catalog: Tuple[CatalogEntry, ...] = tuple(catalog)
		self.intent_rules: Mapping[str, IntentRule] = dict(DEFAULT_INTENT_RULES if intent_rules is None else intent_rules)
		self.title_weight = title_weight
		self.plot_weight = plot_weight
		self.keyword_weight = keyword_weight
		self.genre_weight = genre_weight
		self.people_weight = people_weight
		self.intent_weight = intent_weight
		self.min_score = min_score  # scores <= min_score are discarded
		self.score_ceiling = score_ceiling

	def score_entry(self, entry: CatalogEntry, query: ParsedQuery) -> int:
		"""Raw additive score of one entry; 0 for an empty query."""
		if query.is_empty:
			return 0

		q = query.normalized
		score = 0

		if q in entry.title.lower():
			score += self.title_weight
		if q in entry.plot.lower():
			score += self.plot_weight

		people = f"{entry.director} {' '.join(entry.cast)}".lower()
		genres = [g.lower() for g in entry.genres]
		for token in query.tokens:
			for keyword in entry.keywords:
				if token in keyword or keyword in token:
					score += self.keyword_weight
			for genre in genres:
				if token in genre:
					score += self.genre_weight
			if token in people:
				score += self.people_weight

		if query.intent:
			rule = self.intent_rules.get(query.intent)
			if rule is not None and rule.matches(entry):
				score += self.intent_weight

		return score

	def score(self, query: ParsedQuery, max_results: int = 5) -> List[CandidateResult]:
		"""Score the whole catalog; return the best entries as candidates, highest first."""
		results: List[CandidateResult] = []
		for entry in self.catalog:
			raw = self.score_entry(entry, query)
			if raw <= self.min_score:
				continue
			confidence = min(raw / self.score_ceiling, 1.0)
			logger.debug(f"[Scorer] {entry.title} | score={raw} | confidence={confidence:.2f}")
			results.append(self._to_candidate(entry, confidence))

		results.sort(key=lambda c: c.confidence, reverse=True)  # stable: catalog order on ties
		logger.debug(f"[Scorer] {len(results)} of {len(self.catalog)} catalog entries above threshold")
		return results[:max_results]

	def _to_candidate(self, entry: CatalogEntry, confidence: float) -> CandidateResult:
		return CandidateResult(
			title=entry.title,
			year=entry.year or None,
			description=entry.plot,
			rating=entry.rating,
			genres=frozenset(entry.genres),
			media_type=entry.media_type,
			director=entry.director or None,
			cast=entry.cast,
			source=SCORER_SOURCE,
			confidence=confidence,
			scale=ConfidenceScale.UNIT,
		)
