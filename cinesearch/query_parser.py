"""
Query parsing module.
Normalizes free-text queries and splits them into the tokens used for keyword matching.
Never fails: blank input yields an empty ParsedQuery.
"""

from typing import Optional, Tuple  # type annotations

from loguru import logger  # console logging

from .models import ParsedQuery  # structured query representation


class QueryParser:
	"""
	Turns a raw query string (plus optional intent label) into a ParsedQuery.
	Short words are dropped from the token list as noise, but the full lowercased
	string is kept so substring checks against titles and plots still see them.
	"""

	MIN_TOKEN_LENGTH = 4  # tokens must be longer than 3 characters

	def __init__(self, min_token_length: int = MIN_TOKEN_LENGTH):
		self.min_token_length = min_token_length

	def parse(self, query: Optional[str], intent: Optional[str] = None) -> ParsedQuery:
		"""Main entry: produce a ParsedQuery from a raw string."""
		raw = query or ""  # None behaves like an empty query
		normalized = self.normalize(raw)
		tokens = self.tokenize(normalized)
		parsed = ParsedQuery(
			raw_query=raw,
			normalized=normalized,
			tokens=tokens,
			intent=self.normalize_intent(intent),
		)
		logger.debug(f"[Parser] '{raw}' -> normalized='{normalized}' tokens={list(tokens)} intent={parsed.intent}")
		return parsed

	def normalize(self, text: str) -> str:
		"""Lowercase and trim; whitespace-only input becomes the empty string."""
		return text.strip().lower()

	def tokenize(self, normalized: str) -> Tuple[str, ...]:
		# Whitespace split keeps order and duplicates; punctuation stays attached
		return tuple(word for word in normalized.split() if len(word) >= self.min_token_length)

	def normalize_intent(self, intent: Optional[str]) -> Optional[str]:
		if not intent or not intent.strip():  # blank intent means "no hint"
			return None
		return intent.strip().lower()
