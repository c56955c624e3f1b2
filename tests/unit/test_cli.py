from __future__ import annotations

import json
from pathlib import Path

import pytest

CANDIDATE_YAML = """\
id: cand-1
headline: Frontend Developer
skills: [React, Node.js]
experiences:
  - position: Frontend Developer
    startDate: 2021-01-01
    isCurrent: true
"""

JOBS = [
    {
        "id": "job-1",
        "title": "Frontend Engineer",
        "experienceLevel": "mid",
        "isRemote": True,
        "requiredSkills": ["React", "TypeScript"],
    },
    {
        "id": "job-2",
        "title": "Data Engineer",
        "experienceLevel": "senior",
        "location": "Berlin",
        "requiredSkills": ["Python", "Spark"],
    },
]


@pytest.fixture
def cli_inputs(tmp_path, monkeypatch):
    monkeypatch.setenv("MATCHING_MAX_WORKERS", "1")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    profile = tmp_path / "candidate.yaml"
    profile.write_text(CANDIDATE_YAML, encoding="utf-8")
    jobs = tmp_path / "jobs.json"
    jobs.write_text(json.dumps(JOBS), encoding="utf-8")
    job = tmp_path / "job.json"
    job.write_text(json.dumps(JOBS[0]), encoding="utf-8")
    candidates = tmp_path / "candidates.yaml"
    candidates.write_text(
        "candidates:\n  - id: a\n    skills: [React, TypeScript]\n  - id: b\n",
        encoding="utf-8",
    )
    return {"profile": profile, "jobs": jobs, "job": job, "candidates": candidates}


def test_cli_parser_supports_subcommands() -> None:
    from jobmatch.__main__ import create_parser

    parser = create_parser()

    match_args = parser.parse_args(
        ["match", "--profile", "p.yaml", "--jobs", "j.json", "--limit", "5", "--entitled"]
    )
    assert match_args.mode == "match"
    assert match_args.profile == Path("p.yaml")
    assert match_args.limit == 5
    assert match_args.entitled is True

    score_args = parser.parse_args(["score", "--profile", "p.yaml", "--job", "j.json"])
    assert score_args.mode == "score"
    assert score_args.job == Path("j.json")

    candidates_args = parser.parse_args(
        ["candidates", "--job", "j.json", "--candidates", "c.yaml", "--out", "out.json"]
    )
    assert candidates_args.mode == "candidates"
    assert candidates_args.out == Path("out.json")


def test_cli_parser_rejects_non_positive_limit() -> None:
    from jobmatch.__main__ import create_parser

    with pytest.raises(SystemExit):
        create_parser().parse_args(["match", "--limit", "0"])


def test_cli_without_mode_prints_help(capsys) -> None:
    from jobmatch.__main__ import main

    assert main([]) == 0
    assert "usage:" in capsys.readouterr().out


def test_cli_match_writes_gated_json_by_default(cli_inputs, tmp_path, capsys) -> None:
    from jobmatch.__main__ import main

    out = tmp_path / "out" / "matches.json"

    exit_code = main(
        [
            "match",
            "--profile",
            str(cli_inputs["profile"]),
            "--jobs",
            str(cli_inputs["jobs"]),
            "--out",
            str(out),
        ]
    )

    assert exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [item["jobId"] for item in data] == ["job-1", "job-2"]
    assert "breakdown" not in data[0]
    assert "Frontend Engineer (job-1)" in capsys.readouterr().out


def test_cli_match_entitled_includes_details(cli_inputs, tmp_path) -> None:
    from jobmatch.__main__ import main

    out = tmp_path / "matches.json"

    exit_code = main(
        [
            "match",
            "--profile",
            str(cli_inputs["profile"]),
            "--jobs",
            str(cli_inputs["jobs"]),
            "--limit",
            "1",
            "--entitled",
            "--out",
            str(out),
        ]
    )

    assert exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data) == 1
    assert data[0]["details"]["missingSkills"] == ["TypeScript"]


def test_cli_save_writes_under_output_dir(cli_inputs, tmp_path, monkeypatch) -> None:
    from jobmatch.__main__ import main

    output_dir = tmp_path / "artifacts"
    monkeypatch.setenv("OUTPUT_DIR", str(output_dir))

    exit_code = main(
        [
            "score",
            "--profile",
            str(cli_inputs["profile"]),
            "--job",
            str(cli_inputs["job"]),
            "--save",
        ]
    )

    assert exit_code == 0
    written = list(output_dir.glob("score_*.json"))
    assert len(written) == 1
    assert json.loads(written[0].read_text(encoding="utf-8"))["jobId"] == "job-1"


def test_cli_score_prints_explanation(cli_inputs, capsys) -> None:
    from jobmatch.__main__ import main

    exit_code = main(
        ["score", "--profile", str(cli_inputs["profile"]), "--job", str(cli_inputs["job"])]
    )

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Match Score:" in output
    assert "Add missing skill: TypeScript" in output


def test_cli_candidates_ranks_candidates(cli_inputs, capsys) -> None:
    from jobmatch.__main__ import main

    exit_code = main(
        [
            "candidates",
            "--job",
            str(cli_inputs["job"]),
            "--candidates",
            str(cli_inputs["candidates"]),
            "--entitled",
        ]
    )

    assert exit_code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("candidate a")


def test_cli_candidates_shows_only_counts_by_default(cli_inputs, tmp_path, capsys) -> None:
    from jobmatch.__main__ import main

    out = tmp_path / "candidates.json"

    exit_code = main(
        [
            "candidates",
            "--job",
            str(cli_inputs["job"]),
            "--candidates",
            str(cli_inputs["candidates"]),
            "--out",
            str(out),
        ]
    )

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "2 matching candidates" in output
    assert "candidate a" not in output
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["data"] == []
    assert payload["teaserData"]["totalMatches"] == 2


def test_cli_missing_profile_errors_cleanly(cli_inputs, tmp_path, capsys) -> None:
    from jobmatch.__main__ import main

    exit_code = main(
        [
            "match",
            "--profile",
            str(tmp_path / "missing.yaml"),
            "--jobs",
            str(cli_inputs["jobs"]),
        ]
    )

    assert exit_code == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_invalid_job_errors_cleanly(cli_inputs, tmp_path) -> None:
    from jobmatch.__main__ import main

    bad_job = tmp_path / "bad.json"
    bad_job.write_text(json.dumps({"title": "No id"}), encoding="utf-8")

    exit_code = main(["score", "--profile", str(cli_inputs["profile"]), "--job", str(bad_job)])

    assert exit_code == 1
