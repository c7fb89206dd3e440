"""
Unit tests for QueryParser: normalization, token filtering and intent handling.
Run: python tests/test_query_parser.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from cinesearch.query_parser import QueryParser


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def test_normalization():
	pq = QueryParser().parse("  Movies That Require THINKING  ")
	assert_equal(pq.normalized, "movies that require thinking", "lowercased and trimmed")
	assert_equal(pq.raw_query, "  Movies That Require THINKING  ", "raw query kept")


def test_short_tokens_dropped():
	pq = QueryParser().parse("a lot of thinking for the mind")
	assert_equal(pq.tokens, ("thinking", "mind"), "tokens of 3 chars or less removed, 4 kept")
	# full text still available for substring checks
	assert_true("a lot of" in pq.normalized, "short words kept in normalized text")


def test_token_order_and_duplicates():
	pq = QueryParser().parse("space space opera")
	assert_equal(pq.tokens, ("space", "space", "opera"), "order and repeats preserved")


def test_empty_input_never_fails():
	for raw in ("", "   ", "\t\n", None):
		pq = QueryParser().parse(raw)
		assert_equal(pq.normalized, "", f"empty normalized for {raw!r}")
		assert_equal(pq.tokens, (), f"no tokens for {raw!r}")
		assert_true(pq.is_empty, "is_empty flag")


def test_intent_normalized():
	parser = QueryParser()
	assert_equal(parser.parse("x", " Comedy ").intent, "comedy", "intent lowercased")
	assert_equal(parser.parse("x", "   ").intent, None, "blank intent dropped")
	assert_equal(parser.parse("x").intent, None, "no intent")


def main():
	print("Running QueryParser tests...")
	test_normalization()
	test_short_tokens_dropped()
	test_token_order_and_duplicates()
	test_empty_input_never_fails()
	test_intent_normalized()
	print("All QueryParser tests passed!")


if __name__ == '__main__':
	main()
