"""
Fallback state machine: transitions, single attempt per provider, terminal guarantee.
"""

import pytest

from cinesearch.errors import ConfigurationError, TransportError
from cinesearch.fallback import FallbackOrchestrator, FallbackState
from cinesearch.models import CandidateResult, ConfidenceScale
from cinesearch.providers import Provider
from cinesearch.query_parser import QueryParser
from cinesearch.ranking import Ranker

parser = QueryParser()


class StubProvider(Provider):
	def __init__(self, name, candidates=(), error=None, result_limit=None):
		super().__init__()
		self.result_limit = result_limit
		self.name = name
		self.candidates = list(candidates)
		self.error = error
		self.calls = 0

	def _search(self, query):
		self.calls += 1
		if self.error is not None:
			raise self.error
		return self.candidates


def cand(title, confidence=0.5, scale=ConfidenceScale.UNIT):
	return CandidateResult(title=title, confidence=confidence, scale=scale, source="stub")


def run(*providers):
	return FallbackOrchestrator(providers, Ranker()).run(parser.parse("some query"))


def test_transition_table():
	assert FallbackOrchestrator.next_state(FallbackState.TRY_PRIMARY) == FallbackState.TRY_SECONDARY
	assert FallbackOrchestrator.next_state(FallbackState.TRY_SECONDARY) == FallbackState.TRY_TERTIARY
	assert FallbackOrchestrator.next_state(FallbackState.TRY_TERTIARY) == FallbackState.DONE
	assert FallbackOrchestrator.next_state(FallbackState.DONE) == FallbackState.DONE


def test_primary_success_stops_the_walk():
	primary = StubProvider("a", [cand("Heat", 75, ConfidenceScale.PERCENT)])
	secondary = StubProvider("b", [cand("Ronin")])
	results, trace = run(primary, secondary)
	assert [r.title for r in results] == ["Heat"]
	assert results[0].confidence == 0.75
	assert secondary.calls == 0
	assert [s.state for s in trace.steps] == ["TryPrimary"]


def test_failure_and_empty_both_advance():
	primary = StubProvider("a", error=TransportError("down", status_code=502))
	secondary = StubProvider("b", [])
	tertiary = StubProvider("c", [cand("Soul")])
	results, trace = run(primary, secondary, tertiary)
	assert [r.title for r in results] == ["Soul"]
	assert [(s.state, s.provider, s.failed) for s in trace.steps] == [
		("TryPrimary", "a", True),
		("TrySecondary", "b", False),
		("TryTertiary", "c", False),
	]
	assert (primary.calls, secondary.calls, tertiary.calls) == (1, 1, 1)


def test_unexpected_errors_never_escape():
	primary = StubProvider("a", error=RuntimeError("bug"))
	tertiary = StubProvider("c", [cand("Soul")])
	results, trace = run(primary, tertiary)
	assert [r.title for r in results] == ["Soul"]
	assert trace.steps[0].failed


def test_total_outage_is_an_empty_list():
	results, trace = run(
		StubProvider("a", error=TransportError("down")),
		StubProvider("b", error=RuntimeError("bug")),
		StubProvider("c", error=TransportError("down")),
	)
	assert results == []
	assert len(trace.steps) == 3


def test_single_provider_chain():
	results, trace = run(StubProvider("only", []))
	assert results == []
	assert trace.providers == ["only"]


def test_chain_size_is_validated():
	with pytest.raises(ConfigurationError):
		FallbackOrchestrator([], Ranker())
	with pytest.raises(ConfigurationError):
		FallbackOrchestrator([StubProvider(str(i)) for i in range(4)], Ranker())


def test_limit_comes_from_the_provider_that_ended_the_walk():
	many = [cand(f"Title {chr(65 + i)}", 0.5) for i in range(10)]
	results, _ = run(StubProvider("web", many, result_limit=8))
	assert len(results) == 8

	# a failed provider's limit does not carry over to the one that answered
	results, _ = run(StubProvider("web", error=TransportError("down"), result_limit=8), StubProvider("offline", many))
	assert len(results) == 5
