"""
Shared test doubles: a requests.Session stand-in that never touches the network.
"""

import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))


class FakeResponse:
	def __init__(self, status_code=200, text="", payload=None):
		self.status_code = status_code
		self.text = text
		self._payload = payload

	def json(self):
		if self._payload is None:
			raise ValueError("No JSON object could be decoded")
		return self._payload


class FakeSession:
	"""Returns queued responses in order; exceptions in the queue are raised instead."""

	def __init__(self, *responses):
		self.responses = list(responses)
		self.calls = []

	def get(self, url, params=None, timeout=None):
		self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
		if not self.responses:
			raise requests.ConnectionError("no more fake responses")
		nxt = self.responses.pop(0)
		if isinstance(nxt, Exception):
			raise nxt
		return nxt


@pytest.fixture
def fake_response():
	return FakeResponse


@pytest.fixture
def fake_session():
	return FakeSession
