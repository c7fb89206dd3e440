"""
Data loading module.
Holds the embedded offline catalog and loads alternate catalogs / knowledge bases from disk.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON / JSON lines
from typing import Dict, List, Tuple  # type hints
from pathlib import Path  # filesystem-safe paths

# Our data classes used across the project
from .models import CandidateResult, CatalogEntry, ConfidenceScale, MediaType
from .knowledge_base import KNOWLEDGE_SOURCE

# Console logging
from loguru import logger  # console logger


DEFAULT_CATALOG: Tuple[CatalogEntry, ...] = (
	CatalogEntry(
		title="The Pursuit of Happyness",
		year=2006,
		director="Gabriele Muccino",
		cast=("Will Smith", "Jaden Smith"),
		plot="A struggling salesman takes custody of his son as he's poised to begin a life-changing professional career.",
		rating=8.0,
		genres=("Biography", "Drama"),
		keywords=("struggle", "father", "son", "success", "homeless", "determination", "inspiring"),
	),
	CatalogEntry(
		title="Hidden Figures",
		year=2016,
		director="Theodore Melfi",
		cast=("Taraji P. Henson", "Octavia Spencer", "Janelle Monáe"),
		plot="The story of a team of female African-American mathematicians who served a vital role in NASA during the early years of the U.S. space program.",
		rating=7.8,
		genres=("Biography", "Drama", "History"),
		keywords=("nasa", "space", "mathematics", "women", "civil rights", "inspiring", "true story"),
	),
	CatalogEntry(
		title="The Intouchables",
		year=2011,
		director="Olivier Nakache",
		cast=("François Cluzet", "Omar Sy"),
		plot="After he becomes a quadriplegic from a paragliding accident, an aristocrat hires a young man from the projects to be his caregiver.",
		rating=8.5,
		genres=("Biography", "Comedy", "Drama"),
		keywords=("friendship", "disability", "class", "humor", "heartwarming", "french", "inspiring"),
	),
	CatalogEntry(
		title="Parasite",
		year=2019,
		director="Bong Joon-ho",
		cast=("Song Kang-ho", "Lee Sun-kyun", "Cho Yeo-jeong"),
		plot="A poor family schemes to become employed by a wealthy family by infiltrating their household and posing as unrelated, highly qualified individuals.",
		rating=8.6,
		genres=("Comedy", "Drama", "Thriller"),
		keywords=("class", "society", "dark comedy", "thriller", "korean", "oscar winner", "social commentary"),
	),
	CatalogEntry(
		title="Everything Everywhere All at Once",
		year=2022,
		director="Daniels",
		cast=("Michelle Yeoh", "Stephanie Hsu", "Ke Huy Quan"),
		plot="An aging Chinese immigrant is swept up in an insane adventure, where she alone can save what's important to her by connecting with the lives she could have lived in other universes.",
		rating=8.1,
		genres=("Action", "Adventure", "Comedy", "Sci-Fi"),
		keywords=("multiverse", "family", "identity", "surreal", "action", "comedy", "philosophical"),
	),
	CatalogEntry(
		title="Nomadland",
		year=2020,
		director="Chloé Zhao",
		cast=("Frances McDormand", "David Strathairn"),
		plot="A woman in her sixties embarks on a journey through the western United States after losing everything in the Great Recession.",
		rating=7.3,
		genres=("Drama",),
		keywords=("travel", "solitude", "economic", "recession", "van life", "contemplative", "oscar winner"),
	),
	CatalogEntry(
		title="Soul",
		year=2020,
		director="Pete Docter",
		cast=("Jamie Foxx", "Tina Fey"),
		plot="A musician who has lost his passion for music is transported out of his body and must find his way back with the help of an infant soul learning about herself.",
		rating=8.0,
		genres=("Animation", "Adventure", "Comedy", "Family"),
		keywords=("music", "jazz", "purpose", "life", "death", "pixar", "philosophical", "inspiring"),
	),
)


class DataLoader:
	"""
	Loads catalogs (JSON Lines) and knowledge bases (JSON) into immutable records.
	"""

	def load_catalog_from_jsonl(self, filepath: str) -> List[CatalogEntry]:
		"""
		Load catalog entries from a JSON Lines file where each line is one JSON object.
		Malformed lines are skipped with a warning.
		"""
		entries = []  # accumulator for parsed entries
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Catalog file not found: {filepath}")

		logger.info(f"[DataLoader] Loading catalog from {filepath}...")

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # line number for diagnostics
				if not line.strip():
					continue  # tolerate blank lines
				try:
					data = json.loads(line.strip())
					entries.append(self._parse_catalog_entry(data))
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")
					continue
				except (KeyError, TypeError, ValueError) as e:
					logger.warning(f"[DataLoader] Error parsing catalog entry at line {line_num}: {e}")
					continue

		logger.info(f"[DataLoader] Successfully loaded {len(entries)} catalog entries.")
		return entries

	def load_knowledge_from_json(self, filepath: str) -> List[Tuple[str, Tuple[CandidateResult, ...]]]:
		"""
		Load a knowledge base document: {"phrase": [{title, year, ...}, ...], ...}.
		Phrase order in the document is kept; it decides partial-match priority.
		"""
		filepath = Path(filepath)
		if not filepath.exists():
			raise FileNotFoundError(f"Knowledge base file not found: {filepath}")

		logger.info(f"[DataLoader] Loading knowledge base from {filepath}...")
		with open(filepath, 'r', encoding='utf-8') as f:
			document: Dict[str, list] = json.load(f)

		entries = []
		for phrase, results in document.items():
			entries.append((phrase, tuple(self._parse_known_result(r) for r in results)))
		logger.info(f"[DataLoader] Loaded {len(entries)} knowledge phrases.")
		return entries

	def _parse_catalog_entry(self, data: Dict) -> CatalogEntry:
		"""Convert a raw dictionary into a CatalogEntry with safe defaults."""
		return CatalogEntry(
			title=str(data['title']).strip(),  # title is required
			year=int(data.get('year') or 0),
			director=str(data.get('director') or '').strip(),
			cast=tuple(self._parse_comma_separated(data.get('cast'))),
			plot=str(data.get('plot') or '').strip(),
			rating=float(data.get('rating') or 0.0),
			genres=tuple(self._parse_comma_separated(data.get('genres'))),
			keywords=tuple(k.lower() for k in self._parse_comma_separated(data.get('keywords'))),
			media_type=self._parse_media_type(data.get('type')),
		)

	def _parse_known_result(self, data: Dict) -> CandidateResult:
		return CandidateResult(
			title=str(data['title']).strip(),
			year=int(data['year']) if data.get('year') else None,
			description=str(data.get('description') or ''),
			rating=self._parse_rating(data.get('rating')),
			media_type=self._parse_media_type(data.get('type')),
			source=str(data.get('source') or KNOWLEDGE_SOURCE),
			confidence=float(data.get('confidence', 90)),
			scale=ConfidenceScale.PERCENT,
		)

	def _parse_comma_separated(self, value) -> List[str]:
		"""
		Normalize a value that may be None, a list, or a comma-separated string
		into a list of clean strings.
		"""
		if value is None:  # missing field
			return []
		if isinstance(value, list):  # already a list
			return [str(item).strip() for item in value if item]
		if isinstance(value, str):  # comma-separated string
			return [item.strip() for item in value.split(',') if item.strip()]
		return []  # any other type becomes empty

	def _parse_rating(self, value):
		"""Accept 7.8, "7.8" or "7.8/10"."""
		if value is None or value == '':
			return None
		if isinstance(value, str):
			value = value.split('/', 1)[0]
		return float(value)

	def _parse_media_type(self, value) -> MediaType:
		try:
			return MediaType(str(value).lower()) if value else MediaType.MOVIE
		except ValueError:
			return MediaType.UNKNOWN
