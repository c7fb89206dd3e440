"""
Fallback orchestration.
Walks the provider chain as a small state machine:
TryPrimary -> TrySecondary -> TryTertiary -> Done.
One attempt per provider, no retries or backoff. The first provider that returns
candidates ends the walk; failures and empty answers advance to the next state.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .errors import ConfigurationError
from .models import CandidateResult, ParsedQuery, ProviderResult, SearchTrace
from .providers import Provider
from .ranking import Ranker


class FallbackState(str, Enum):
	TRY_PRIMARY = "TryPrimary"
	TRY_SECONDARY = "TrySecondary"
	TRY_TERTIARY = "TryTertiary"
	DONE = "Done"


TRANSITIONS: Dict[FallbackState, FallbackState] = {
	FallbackState.TRY_PRIMARY: FallbackState.TRY_SECONDARY,
	FallbackState.TRY_SECONDARY: FallbackState.TRY_TERTIARY,
	FallbackState.TRY_TERTIARY: FallbackState.DONE,
	FallbackState.DONE: FallbackState.DONE,
}

_SLOTS = (FallbackState.TRY_PRIMARY, FallbackState.TRY_SECONDARY, FallbackState.TRY_TERTIARY)


class FallbackOrchestrator:
	"""Runs one query through up to three providers and ranks what they produced."""

	def __init__(self, providers: Sequence[Provider], ranker: Ranker):
		if not providers:
			raise ConfigurationError("fallback chain needs at least one provider")
		if len(providers) > len(_SLOTS):
			raise ConfigurationError(f"fallback chain supports at most {len(_SLOTS)} providers, got {len(providers)}")
		self.providers: Tuple[Provider, ...] = tuple(providers)
		self.ranker = ranker

	@staticmethod
	def next_state(state: FallbackState) -> FallbackState:
		return TRANSITIONS[state]

	def provider_for(self, state: FallbackState) -> Optional[Provider]:
		if state == FallbackState.DONE:
			return None
		index = _SLOTS.index(state)
		return self.providers[index] if index < len(self.providers) else None

	def run(self, query: ParsedQuery) -> Tuple[List[CandidateResult], SearchTrace]:
		trace = SearchTrace()
		collected: List[Tuple[CandidateResult, ...]] = []
		limit: Optional[int] = None

		state = FallbackState.TRY_PRIMARY
		while state != FallbackState.DONE:
			provider = self.provider_for(state)
			if provider is None:  # chain shorter than three
				state = FallbackState.DONE
				break

			result = self._attempt(provider, query)
			trace.record(state.value, result)
			if result.candidates:
				collected.append(result.candidates)

			if result.usable:
				logger.info(f"[Fallback] {state.value}: {provider.name} returned {len(result.candidates)} candidates")
				limit = provider.result_limit
				state = FallbackState.DONE
			else:
				reason = result.error if result.failed else "no candidates"
				logger.info(f"[Fallback] {state.value}: {provider.name} gave nothing ({reason}), advancing")
				state = self.next_state(state)

		ranked = self.ranker.rank(collected, limit=limit)
		logger.debug(f"[Fallback] Walk {' -> '.join(trace.providers) or '-'} produced {len(ranked)} ranked results")
		return ranked, trace

	def _attempt(self, provider: Provider, query: ParsedQuery) -> ProviderResult:
		# adapters already convert their own failures; this guards against bugs inside one
		try:
			return provider.fetch(query)
		except Exception as e:
			logger.exception(f"[Fallback] Unexpected error from {provider.name}: {e}")
			return ProviderResult.failure(provider.name, f"unexpected error: {e}")
