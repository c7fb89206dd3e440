"""
Error taxonomy for the search core.
Provider errors never leave the adapters; configuration errors surface at construction.
"""

from typing import Optional


class SearchError(Exception):
	"""Base class for every error raised inside the search core."""


class ProviderError(SearchError):
	"""A provider adapter could not produce results (not configured, bad payload, ...)."""


class TransportError(ProviderError):
	"""Network-level failure or non-2xx response from an upstream service."""

	def __init__(self, message: str, status_code: Optional[int] = None):
		super().__init__(message)
		self.status_code = status_code  # HTTP status when the server answered

	@property
	def rate_limited(self) -> bool:
		return self.status_code == 429


class ConfigurationError(SearchError):
	"""Invalid engine configuration (unknown provider, max_results < 1, ...)."""
