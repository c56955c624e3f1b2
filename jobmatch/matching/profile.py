"""Loading candidate and job snapshots from YAML or JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from jobmatch.matching.config import MatchingConfig, get_matching_config
from jobmatch.matching.models import CandidateProfile, JobPosting


class ProfileService:
    """Service for loading and validating candidate and job snapshots."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        self.config = config or get_matching_config()

    def load_candidate(self, path: Path | str | None = None) -> CandidateProfile:
        """Load and validate a candidate profile from YAML or JSON."""
        profile_path = Path(path) if path is not None else self.config.profile_path
        data = self._load_file(profile_path)
        if not isinstance(data, dict):
            raise ValueError(f"Candidate profile must be a mapping/dict: {profile_path}")
        return CandidateProfile.model_validate(data)

    def load_candidates(self, path: Path | str) -> list[CandidateProfile]:
        """Load a list of candidate profiles (a list or ``{"candidates": [...]}``)."""
        data = self._load_file(Path(path))
        items = self._unwrap_list(data, key="candidates", path=Path(path))
        return [CandidateProfile.model_validate(item) for item in items]

    def load_job(self, path: Path | str) -> JobPosting:
        """Load and validate a single job posting."""
        job_path = Path(path)
        data = self._load_file(job_path)
        if not isinstance(data, dict):
            raise ValueError(f"Job posting must be a mapping/dict: {job_path}")
        return JobPosting.model_validate(data)

    def load_jobs(self, path: Path | str | None = None) -> list[JobPosting]:
        """Load a list of job postings (a list or ``{"jobs": [...]}``)."""
        jobs_path = Path(path) if path is not None else self.config.jobs_path
        data = self._load_file(jobs_path)
        items = self._unwrap_list(data, key="jobs", path=jobs_path)
        return [JobPosting.model_validate(item) for item in items]

    def validate_candidate(self, candidate: CandidateProfile) -> list[str]:
        """Return warnings for incomplete profiles."""
        warnings: list[str] = []

        if not candidate.skills:
            warnings.append("Skills list is empty")
        if not candidate.experiences:
            warnings.append("No work experience listed")
        if not candidate.headline:
            warnings.append("Missing headline")
        if not candidate.address:
            warnings.append("Missing location")

        return warnings

    def _unwrap_list(self, data: Any, *, key: str, path: Path) -> list:
        if isinstance(data, dict) and isinstance(data.get(key), list):
            data = data[key]
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of {key}: {path}")
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"{key}[{index}] must be a mapping/dict: {path}")
        return data

    def _load_file(self, path: Path) -> Any:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            return self._load_yaml(path)
        if suffix == ".json":
            return self._load_json(path)
        return self._load_unknown(path)

    def _load_yaml(self, path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML file: {path}") from e

    def _load_json(self, path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON file: {path}") from e

    def _load_unknown(self, path: Path) -> Any:
        """Auto-detect JSON vs YAML when the file extension is unknown."""
        raw = path.read_text(encoding="utf-8")
        raw_stripped = raw.lstrip()

        if raw_stripped.startswith("{") or raw_stripped.startswith("["):
            try:
                return json.loads(raw)
            except json.JSONDecodeError:
                pass

        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid file format: {path}") from e
