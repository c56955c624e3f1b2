"""Main entry point for the jobmatch CLI."""

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from jobmatch import __version__
from jobmatch.config.settings import Settings
from jobmatch.utils.logging import configure_logging


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError("--limit must be a positive integer")
    return number


def _resolve_out_path(
    settings: Settings, *, mode: str, out: Path | None, save: bool
) -> Path | None:
    if out is not None:
        return out
    if not save:
        return None
    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    return settings.output_dir / f"{mode}_{timestamp}.json"


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--out", type=Path, default=None, help="Optional path to write results as JSON"
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write results as JSON under OUTPUT_DIR (ignored when --out is given)",
    )


def _write_json(path: Path, payload: object, *, indent: int = 2) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload, indent=indent or None, default=_default),
        encoding="utf-8",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="jobmatch",
        description="jobmatch: deterministic CV to job matching and scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m jobmatch match --profile candidate.yaml --jobs jobs.json --limit 10
  python -m jobmatch score --profile candidate.yaml --job job.json
  python -m jobmatch candidates --job job.json --candidates candidates.json
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    match_parser = subparsers.add_parser(
        "match",
        help="Rank jobs for a candidate profile",
    )
    match_parser.add_argument(
        "--profile", type=Path, default=None, help="Candidate profile (YAML or JSON)"
    )
    match_parser.add_argument(
        "--jobs", type=Path, default=None, help="Job postings (YAML or JSON list)"
    )
    match_parser.add_argument(
        "--limit", type=_positive_int, default=None, help="Maximum results to return"
    )
    match_parser.add_argument(
        "--entitled",
        action="store_true",
        help="Include breakdown, details and suggestions (full-access view)",
    )
    _add_output_args(match_parser)

    score_parser = subparsers.add_parser(
        "score",
        help="Score a single candidate/job pair with full explanation",
    )
    score_parser.add_argument(
        "--profile", type=Path, default=None, help="Candidate profile (YAML or JSON)"
    )
    score_parser.add_argument(
        "--job", type=Path, required=True, help="Job posting (YAML or JSON)"
    )
    _add_output_args(score_parser)

    candidates_parser = subparsers.add_parser(
        "candidates",
        help="Rank candidates for a job posting",
    )
    candidates_parser.add_argument(
        "--job", type=Path, required=True, help="Job posting (YAML or JSON)"
    )
    candidates_parser.add_argument(
        "--candidates",
        type=Path,
        required=True,
        help="Candidate profiles (YAML or JSON list)",
    )
    candidates_parser.add_argument(
        "--limit", type=_positive_int, default=None, help="Maximum results to return"
    )
    candidates_parser.add_argument(
        "--entitled",
        action="store_true",
        help="List ranked candidates (without it only score band counts are shown)",
    )
    _add_output_args(candidates_parser)

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level, format_string=settings.log_format)

    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.debug(f"jobmatch v{__version__} running {parsed.mode}")

    from jobmatch.matching.profile import ProfileService
    from jobmatch.matching.service import MatchingService, MatchRequestError

    profile_service = ProfileService()
    matching_service = MatchingService()

    try:
        if parsed.mode == "match":
            candidate = profile_service.load_candidate(parsed.profile)
            for warning in profile_service.validate_candidate(candidate):
                logger.warning(f"Profile warning: {warning}")
            jobs = profile_service.load_jobs(parsed.jobs)
            results = matching_service.compute_matches(
                candidate, jobs, limit=parsed.limit, entitled=parsed.entitled
            )
            if not results:
                print("No jobs to match.")
            for rank, result in enumerate(results, start=1):
                print(f"{rank:>3}. [{result.match_score:>3}] {result.job_title} ({result.job_id})")
            payload: object = [result.to_dict() for result in results]

        elif parsed.mode == "score":
            candidate = profile_service.load_candidate(parsed.profile)
            job = profile_service.load_job(parsed.job)
            result = matching_service.score_job(candidate, job)
            print(matching_service.format_result(result))
            payload = result.to_dict()

        elif parsed.mode == "candidates":
            job = profile_service.load_job(parsed.job)
            candidates = profile_service.load_candidates(parsed.candidates)
            page = matching_service.compute_candidate_page(
                job, candidates, limit=parsed.limit, entitled=parsed.entitled
            )
            if page.total_matches == 0:
                print("No candidates to match.")
            for rank, result in enumerate(page.items, start=1):
                print(f"{rank:>3}. [{result.match_score:>3}] candidate {result.candidate_id}")
            if page.teaser is not None and page.total_matches:
                teaser = page.teaser
                print(
                    f"{teaser.total_matches} matching candidates: "
                    f"{teaser.high_matches} high, {teaser.medium_matches} medium, "
                    f"{teaser.low_matches} low"
                )
            payload = page.to_dict()

        else:
            parser.print_help()
            return 1

    except (FileNotFoundError, ValueError, ValidationError, MatchRequestError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    out_path = _resolve_out_path(
        settings, mode=parsed.mode, out=parsed.out, save=parsed.save
    )
    if out_path is not None:
        _write_json(out_path, payload, indent=settings.json_indent)
        print(f"Wrote: {out_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
