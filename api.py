"""
FastAPI server exposing the intent search API.
Endpoints:
- GET /health: basic health check
- GET /search?q=...&intent=...&top_k=5: returns ranked candidates with normalized confidence

Startup builds the engine once from CINESEARCH_* environment settings.
Run: uvicorn api:app --reload
"""

# Import standard libraries for logging sinks and timing
import sys  # stderr sink for loguru
import time  # measure startup and request latencies
from contextlib import asynccontextmanager  # lifespan handler
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, Query  # FastAPI primitives
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for configuration and search
from cinesearch.config import get_settings  # environment-backed settings
from cinesearch.search_engine import SearchEngine  # core search engine

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Globals that hold the search engine instance and measured startup time
ENGINE: Optional[SearchEngine] = None  # will point to the initialized engine
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model for a single ranked candidate
class CandidateOut(BaseModel):
	title: str
	year: Optional[int] = None
	description: str = ""
	rating: Optional[float] = None  # 0-10
	media_type: str  # movie | tv | unknown
	source: str  # provider that produced it
	confidence: float  # 0..1


# Pydantic model for the complete search response payload
class SearchResponse(BaseModel):
	query: str  # original query string
	intent: Optional[str] = None  # normalized intent hint
	elapsed_ms: float  # server-side search time in ms
	providers: List[str] = []  # fallback walk, in order
	results: List[CandidateOut]  # ranked items


# Lifespan handler: initialize the search engine once before serving
@asynccontextmanager
async def lifespan(app: FastAPI):
	"""Initialize the search engine and log how it was configured."""
	global ENGINE, STARTUP_TIME_S
	start = time.time()

	settings = get_settings()
	logger.remove()  # replace the default sink so the configured level applies
	logger.add(sys.stderr, level=settings.log_level.upper())

	config = settings.to_search_config()
	logger.info(f"[API] Startup: building engine with {config!r}")
	ENGINE = SearchEngine(config)

	STARTUP_TIME_S = time.time() - start
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s.")
	yield
	ENGINE = None
	logger.info("[API] Shutdown: engine released")


# Instantiate the FastAPI application with metadata
app = FastAPI(title="Intent Search API", version="1.0.0", lifespan=lifespan)  # web app


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",
		"engine_ready": ENGINE is not None,
		"startup_seconds": round(STARTUP_TIME_S, 2),
	}


# Main search endpoint that accepts a free-text query
@app.get("/search", response_model=SearchResponse)
def search(
	q: str = Query("", description="Free-text description of what to watch"),
	intent: Optional[str] = Query(None, description="Optional coarse intent, e.g. comedy or inspiring"),
	top_k: Optional[int] = Query(None, ge=1, le=50, description="Trim the ranked list further"),
):
	"""Run the fallback search and return ranked candidates."""
	if ENGINE is None:  # engine must be ready to serve
		logger.warning("[API] Search requested but engine not initialized")
		return SearchResponse(query=q, intent=intent, elapsed_ms=0.0, results=[])

	start = time.time()
	logger.debug(f"[API] /search q='{q}' intent={intent} top_k={top_k}")

	outcome = ENGINE.search_with_trace(q, intent)
	results = outcome.results[:top_k] if top_k else outcome.results
	elapsed_ms = (time.time() - start) * 1000
	logger.info(f"[API] /search served {len(results)} results in {elapsed_ms:.2f} ms")

	return SearchResponse(
		query=q,
		intent=outcome.intent,
		elapsed_ms=round(elapsed_ms, 2),
		providers=outcome.trace.providers,
		results=[CandidateOut(**r.to_dict()) for r in results],
	)
