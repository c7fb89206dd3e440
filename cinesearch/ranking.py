"""
Ranking module.
Merges candidates from every provider visited, normalizes confidence, removes
near-duplicate titles and keeps the best few.
"""

import re
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from loguru import logger
from rapidfuzz import fuzz  # near-duplicate title detection

from .models import CandidateResult, ConfidenceScale


class Ranker:
	"""
	- confidence: every candidate converted to the 0..1 scale
	- dedup: first seen wins; a title is dropped when it contains, is contained by,
	  or is a near-identical spelling of an already kept title
	- order: descending confidence, stable, truncated to max_results
	"""

	RE_PUNCT = re.compile(r"[^\w\s]")

	def __init__(self, max_results: int = 5, duplicate_threshold: float = 92.0):
		self.max_results = max_results
		self.duplicate_threshold = duplicate_threshold

	def rank(self, groups: Iterable[Sequence[CandidateResult]], limit: Optional[int] = None) -> List[CandidateResult]:
		"""`limit`, when given, replaces max_results for this call."""
		limit = limit or self.max_results
		merged = [self.normalize(c) for group in groups for c in group]

		kept: List[CandidateResult] = []
		for candidate in merged:
			if not candidate.title.strip():
				continue
			duplicate = next((k for k in kept if self.is_duplicate(k.title, candidate.title)), None)
			if duplicate is not None:
				logger.debug(f"[Ranker] Dropped '{candidate.title}' ({candidate.source}) as duplicate of '{duplicate.title}'")
				continue
			kept.append(candidate)

		kept.sort(key=lambda c: c.confidence, reverse=True)
		logger.debug(f"[Ranker] {len(merged)} merged -> {len(kept)} unique -> top {min(limit, len(kept))}")
		return kept[:limit]

	def normalize(self, candidate: CandidateResult) -> CandidateResult:
		"""Return the candidate with its confidence on the unit scale."""
		return replace(candidate, confidence=candidate.unit_confidence(), scale=ConfidenceScale.UNIT)

	def is_duplicate(self, a: str, b: str) -> bool:
		la, lb = a.strip().lower(), b.strip().lower()
		if la in lb or lb in la:
			return True
		ca, cb = self._canonical(la), self._canonical(lb)
		if not ca or not cb:
			return False
		return fuzz.ratio(ca, cb) >= self.duplicate_threshold

	def _canonical(self, title: str) -> str:
		return " ".join(self.RE_PUNCT.sub(" ", title).split())
