"""
Provider adapters with a fake HTTP session: success, empty, transport failures, deferral.
"""

import requests

from cinesearch.config import ProviderKind, SearchConfig
from cinesearch.data_loader import DEFAULT_CATALOG
from cinesearch.knowledge_base import KeywordFallback, KnowledgeBase
from cinesearch.models import ConfidenceScale
from cinesearch.providers import OfflineProvider, RemoteApiProvider, ScrapingProvider
from cinesearch.query_parser import QueryParser
from cinesearch.scoring import HeuristicScorer

MARKUP = "<h3>Inception (2010) - IMDb</h3><p>Watch Memento</p>"
parser = QueryParser()


def offline():
	return OfflineProvider(KnowledgeBase(), HeuristicScorer(DEFAULT_CATALOG))


def scraping(session, **config):
	config.setdefault("scraping_api_key", "test-key")
	return ScrapingProvider(SearchConfig(provider="scraping", **config), KnowledgeBase(), session=session)


# --- offline -----------------------------------------------------------------

def test_offline_combines_knowledge_and_scorer():
	result = offline().fetch(parser.parse("complex movies"))
	assert not result.failed
	assert [c.title for c in result.candidates][:2] == ["Primer", "Mulholland Drive"]


def test_offline_empty_when_nothing_matches():
	result = offline().fetch(parser.parse("zzzz qqqq"))
	assert result.candidates == ()
	assert not result.failed


def test_search_contract_returns_list():
	assert offline().search("inspiring true story about space")[0].title == "Hidden Figures"


# --- scraping ----------------------------------------------------------------

def test_scraping_extracts_titles(fake_session, fake_response):
	session = fake_session(fake_response(200, text=MARKUP))
	result = scraping(session).fetch(parser.parse("mind bending films"))
	assert [c.title for c in result.candidates] == ["Inception", "Memento"]
	assert len(session.calls) == 1
	params = session.calls[0]["params"]
	assert params["api_key"] == "test-key"
	assert params["url"].startswith("https://www.google.com/search?q=")
	assert "site%3Aimdb.com" in params["url"]
	assert params["country_code"] == "US"
	assert session.calls[0]["timeout"] == 15.0


def test_scraping_retries_without_site_filter(fake_session, fake_response):
	session = fake_session(fake_response(200, text="<p>nothing</p>"), fake_response(200, text=MARKUP))
	result = scraping(session).fetch(parser.parse("mind bending films"))
	assert [c.title for c in result.candidates] == ["Inception", "Memento"]
	assert len(session.calls) == 2
	assert "site%3A" not in session.calls[1]["params"]["url"]


def test_scraping_knowledge_goes_first(fake_session, fake_response):
	session = fake_session(fake_response(200, text=MARKUP))
	result = scraping(session).fetch(parser.parse("movies of a man age backwards"))
	first = result.candidates[0]
	assert first.title == "The Curious Case of Benjamin Button"
	assert first.source == "Web Search + Knowledge"
	assert first.confidence == 95 and first.scale == ConfidenceScale.PERCENT
	assert [c.source for c in result.candidates[1:]] == ["Web Search", "Web Search"]
	assert len(session.calls) == 1  # known answers make the first attempt sufficient


def test_scraping_caps_results(fake_session, fake_response):
	session = fake_session(fake_response(200, text=MARKUP))
	result = scraping(session, extraction_limit=1).fetch(parser.parse("anything"))
	assert len(result.candidates) == 1


def test_scraping_uses_bing(fake_session, fake_response):
	session = fake_session(fake_response(200, text=MARKUP))
	provider = ScrapingProvider(SearchConfig(scraping_api_key="k"), KnowledgeBase(), search_engine=ProviderKind.BING, session=session)
	provider.fetch(parser.parse("anything"))
	assert session.calls[0]["params"]["url"].startswith("https://www.bing.com/search?q=")
	assert provider.name == "scraping:bing"


def test_scraping_without_credential_makes_no_request(fake_session):
	session = fake_session()
	provider = ScrapingProvider(SearchConfig(), KnowledgeBase(), session=session)
	result = provider.fetch(parser.parse("anything"))
	assert result.failed and result.candidates == ()
	assert session.calls == []


def test_scraping_transport_failures_become_failed_results(fake_session, fake_response):
	for outcome in (fake_response(500), fake_response(429), requests.Timeout("slow"), requests.ConnectionError("down")):
		result = scraping(fake_session(outcome)).fetch(parser.parse("anything"))
		assert result.failed
		assert result.candidates == ()


def test_scraping_search_contract_never_raises(fake_session):
	provider = scraping(fake_session(requests.ConnectionError("down")))
	assert provider.search("anything") == []


# --- remote API ----------------------------------------------------------------

def test_remote_without_key_defers_to_offline(fake_session):
	session = fake_session()
	provider = RemoteApiProvider(SearchConfig(), offline(), session=session)
	result = provider.fetch(parser.parse("complex movies"))
	assert [c.title for c in result.candidates][:2] == ["Primer", "Mulholland Drive"]
	assert session.calls == []


def test_remote_failure_defers_to_offline(fake_session, fake_response):
	for outcome in (fake_response(503), requests.ConnectionError("down"), fake_response(200, payload=None)):
		provider = RemoteApiProvider(SearchConfig(remote_api_key="k"), offline(), session=fake_session(outcome))
		result = provider.fetch(parser.parse("complex movies"))
		assert not result.failed
		assert result.candidates[0].title == "Primer"


def test_remote_parses_organic_results(fake_session, fake_response):
	payload = {"organic_results": [{"title": "Inception (2010) - IMDb", "snippet": "Watch Memento"}]}
	session = fake_session(fake_response(200, payload=payload))
	provider = RemoteApiProvider(SearchConfig(remote_api_key="k"), offline(), session=session)
	result = provider.fetch(parser.parse("mind bending"))
	assert [c.title for c in result.candidates] == ["Inception", "Memento"]
	assert session.calls[0]["params"]["api_key"] == "k"
	assert session.calls[0]["url"] == "https://serpapi.com/search.json"


def test_offline_keyword_fallback_only_when_nothing_else_matches():
	provider = OfflineProvider(KnowledgeBase(), HeuristicScorer(DEFAULT_CATALOG), keyword_fallback=KeywordFallback())
	result = provider.fetch(parser.parse("mind bending"))
	assert [c.title for c in result.candidates] == ["Inception", "Black Mirror"]
	assert provider.fetch(parser.parse("complex movies")).candidates[0].source == "Web Knowledge"
	assert offline().fetch(parser.parse("mind bending")).candidates == ()


def test_scraping_provider_carries_extraction_limit(fake_session):
	assert scraping(fake_session(), extraction_limit=9).result_limit == 9
	assert offline().result_limit is None
