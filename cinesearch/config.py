"""
Configuration for the search engine.
SearchConfig is what the engine is built from; Settings reads the same values from the environment.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class ProviderKind(str, Enum):
	"""Which provider heads the fallback chain."""
	SCRAPING = "scraping"
	REMOTE_API = "remote-api"
	GOOGLE = "google"
	BING = "bing"
	SIMULATION = "simulation"

	@classmethod
	def parse(cls, value) -> "ProviderKind":
		if isinstance(value, cls):
			return value
		try:
			return cls(str(value).strip().lower())
		except ValueError:
			choices = ", ".join(k.value for k in cls)
			raise ConfigurationError(f"Unknown provider '{value}' (expected one of: {choices})")


DEFAULT_PROXY_URL = "https://app.scrapingbee.com/api/v1/"
DEFAULT_REMOTE_API_URL = "https://serpapi.com/search.json"


@dataclass(frozen=True)
class SearchConfig:
	provider: ProviderKind = ProviderKind.SIMULATION
	scraping_api_key: Optional[str] = None  # rendering proxy credential
	remote_api_key: Optional[str] = None  # licensed search API credential
	max_results: int = 5
	extraction_limit: int = 12  # cap for the pure web-extraction path
	request_timeout: float = 15.0  # seconds, per network call
	proxy_url: str = DEFAULT_PROXY_URL
	remote_api_url: str = DEFAULT_REMOTE_API_URL
	country_code: str = "US"
	render_js: bool = False
	premium_proxy: bool = False
	duplicate_threshold: float = 92.0  # rapidfuzz ratio treated as the same title

	def __post_init__(self):
		# frozen dataclass: coerce through object.__setattr__
		object.__setattr__(self, "provider", ProviderKind.parse(self.provider))
		if self.max_results < 1:
			raise ConfigurationError(f"max_results must be >= 1, got {self.max_results}")
		if self.extraction_limit < 1:
			raise ConfigurationError(f"extraction_limit must be >= 1, got {self.extraction_limit}")
		if self.request_timeout <= 0:
			raise ConfigurationError(f"request_timeout must be positive, got {self.request_timeout}")
		if not 0 < self.duplicate_threshold <= 100:
			raise ConfigurationError(f"duplicate_threshold must be in (0, 100], got {self.duplicate_threshold}")

	def __repr__(self) -> str:
		# keep credentials out of logs
		return (
			f"SearchConfig(provider={self.provider.value}, max_results={self.max_results}, "
			f"scraping_key={'set' if self.scraping_api_key else 'unset'}, "
			f"remote_key={'set' if self.remote_api_key else 'unset'})"
		)


class Settings(BaseSettings):
	"""Environment-backed settings (CINESEARCH_* variables or a .env file)."""

	model_config = SettingsConfigDict(env_prefix="CINESEARCH_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

	provider: str = ProviderKind.SIMULATION.value
	scraping_api_key: Optional[str] = None
	remote_api_key: Optional[str] = None
	max_results: int = 5
	extraction_limit: int = 12
	request_timeout: float = 15.0
	proxy_url: str = DEFAULT_PROXY_URL
	remote_api_url: str = DEFAULT_REMOTE_API_URL
	country_code: str = "US"
	render_js: bool = False
	premium_proxy: bool = False
	duplicate_threshold: float = 92.0
	log_level: str = "INFO"

	def to_search_config(self) -> SearchConfig:
		return SearchConfig(
			provider=ProviderKind.parse(self.provider),
			scraping_api_key=self.scraping_api_key or None,
			remote_api_key=self.remote_api_key or None,
			max_results=self.max_results,
			extraction_limit=self.extraction_limit,
			request_timeout=self.request_timeout,
			proxy_url=self.proxy_url,
			remote_api_url=self.remote_api_url,
			country_code=self.country_code,
			render_js=self.render_js,
			premium_proxy=self.premium_proxy,
			duplicate_threshold=self.duplicate_threshold,
		)


@lru_cache
def get_settings() -> Settings:
	"""Get cached settings instance."""
	return Settings()
