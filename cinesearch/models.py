"""
Data models for the intent search engine.
Defines the core data structures passed between parser, providers, scorer and ranker.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
from enum import Enum  # fixed vocabularies (media type, confidence scale)
# Import typing helpers for precise and self-documenting types
from typing import FrozenSet, List, Optional, Tuple


class MediaType(str, Enum):
	"""Kind of title a candidate refers to."""
	MOVIE = "movie"
	TV = "tv"
	UNKNOWN = "unknown"


class ConfidenceScale(str, Enum):
	"""Scale a producer expressed its confidence on."""
	PERCENT = "percent"  # 0..100
	UNIT = "unit"  # 0.0..1.0


@dataclass(frozen=True)
class ParsedQuery:
	"""
	Normalized form of what the user typed.
	The full lowercased text is kept for substring checks; tokens drive keyword matching.
	"""
	raw_query: str  # the original text the user typed
	normalized: str  # stripped, lowercased text
	tokens: Tuple[str, ...]  # words longer than 3 characters, in order
	intent: Optional[str] = None  # coarse category hint (e.g. "comedy"), lowercased

	@property
	def is_empty(self) -> bool:
		return not self.normalized


@dataclass(frozen=True)
class CandidateResult:
	"""
	A single proposed title from any provider or knowledge path.
	Confidence is stored on the producer's own scale; see `ConfidenceScale`.
	"""
	title: str
	source: str  # which provider / knowledge path produced it
	confidence: float
	scale: ConfidenceScale = ConfidenceScale.UNIT
	year: Optional[int] = None
	description: str = ""
	rating: Optional[float] = None  # 0-10
	genres: FrozenSet[str] = frozenset()
	media_type: MediaType = MediaType.UNKNOWN
	director: Optional[str] = None
	cast: Tuple[str, ...] = ()
	url: Optional[str] = None

	def unit_confidence(self) -> float:
		"""Confidence on the shared 0.0..1.0 scale."""
		value = self.confidence / 100.0 if self.scale == ConfidenceScale.PERCENT else self.confidence
		return max(0.0, min(1.0, value))

	def to_dict(self) -> dict:
		"""JSON-friendly record with the confidence already normalized."""
		return {
			"title": self.title,
			"year": self.year,
			"description": self.description,
			"rating": self.rating,
			"media_type": self.media_type.value,
			"source": self.source,
			"confidence": round(self.unit_confidence(), 4),
		}


@dataclass(frozen=True)
class CatalogEntry:
	"""
	One title in the static in-process catalog scanned by the heuristic scorer.
	"""
	title: str
	year: int
	director: str
	cast: Tuple[str, ...]
	plot: str
	rating: float  # 0-10
	genres: Tuple[str, ...]  # e.g. ("Biography", "Drama")
	keywords: Tuple[str, ...]  # free-form tags, lowercase
	media_type: MediaType = MediaType.MOVIE


@dataclass(frozen=True)
class ProviderResult:
	"""Raw output of one provider adapter before ranking."""
	provider: str
	candidates: Tuple[CandidateResult, ...] = ()
	failed: bool = False
	error: Optional[str] = None

	@classmethod
	def ok(cls, provider: str, candidates: List[CandidateResult]) -> "ProviderResult":
		return cls(provider=provider, candidates=tuple(candidates))

	@classmethod
	def failure(cls, provider: str, error: str) -> "ProviderResult":
		return cls(provider=provider, failed=True, error=error)

	@property
	def usable(self) -> bool:
		"""True when the provider succeeded and produced at least one candidate."""
		return not self.failed and bool(self.candidates)


@dataclass(frozen=True)
class TraceStep:
	state: str  # fallback state the step was taken in
	provider: str
	candidates: int
	failed: bool
	error: Optional[str] = None


@dataclass
class SearchTrace:
	"""Per-call record of the fallback walk, created fresh for every search."""
	steps: List[TraceStep] = field(default_factory=list)

	def record(self, state: str, result: ProviderResult) -> None:
		self.steps.append(TraceStep(
			state=state,
			provider=result.provider,
			candidates=len(result.candidates),
			failed=result.failed,
			error=result.error,
		))

	@property
	def providers(self) -> List[str]:
		return [s.provider for s in self.steps]
