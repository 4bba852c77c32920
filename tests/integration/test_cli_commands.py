from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hirecore.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    analysis = {
        "overallScore": 82,
        "technicalCompetency": 90,
        "experienceLevel": "senior",
        "culturalFit": 80,
        "leadershipPotential": 60,
        "strengths": ["Kubernetes"],
    }
    snapshot = {
        "jobs": [{"id": "J1", "title": "SRE", "requirements": "Kubernetes"}],
        "applications": [
            {
                "id": "A1",
                "job_id": "J1",
                "candidate_email": "jane@x.com",
                "candidate_name": "Jane Doe",
                "candidate_phone": "+1-555-0001",
                "ai_score": 82,
                "ai_analysis": analysis,
            },
            {
                "id": "A2",
                "job_id": "J1",
                "candidate_email": "sam@y.com",
                "candidate_name": "Sam Roe",
                "ai_score": 95,
                "ai_analysis": {**analysis, "technicalCompetency": 99, "culturalFit": 90},
            },
            {
                "id": "A3",
                "job_id": "J1",
                "candidate_email": "new@z.com",
                "candidate_name": "Pat Lee",
            },
        ],
        "interviews": [
            {
                "id": "I1",
                "application_id": "A1",
                "interviewer": {"name": "Lee Park", "email": "lee@corp.com"},
                "candidate": {"name": "Jane Doe", "email": "jane@x.com"},
                "scheduled_time": "2024-06-04T10:00:00+00:00",
                "duration": 60,
                "type": "video",
                "status": "scheduled",
                "created_at": "2024-06-01T09:00:00+00:00",
                "updated_at": "2024-06-01T09:00:00+00:00",
            }
        ],
    }
    path = tmp_path / "snapshot.json"
    write_json(path, snapshot)
    return path


def test_rank_command_outputs_ranked_entries(runner: CliRunner, snapshot_path: Path) -> None:
    result = runner.invoke(app, ["rank", "J1", "--data", str(snapshot_path)])

    assert result.exit_code == 0, result.output
    entries = json.loads(result.stdout)
    assert [entry["application_id"] for entry in entries] == ["A2", "A1"]
    assert [entry["rank"] for entry in entries] == [1, 2]
    assert entries[1]["composite_score"] == 84
    assert "Exceptional technical skills" in entries[0]["differentiators"]


def test_rank_command_unknown_job_fails(runner: CliRunner, snapshot_path: Path) -> None:
    result = runner.invoke(app, ["rank", "J404", "--data", str(snapshot_path)])

    assert result.exit_code == 1


def test_duplicates_command(runner: CliRunner, snapshot_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "duplicates",
            "--email",
            "Jane@X.com",
            "--name",
            "Jane D.",
            "--job-id",
            "J1",
            "--data",
            str(snapshot_path),
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload == {
        "is_duplicate": True,
        "matched_application_ids": ["A1"],
        "confidence": 95.0,
        "matching_factors": ["Email match"],
    }


def test_slots_command_respects_existing_interviews(
    runner: CliRunner, snapshot_path: Path, tmp_path: Path
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("scheduling:\n  max_slots: 10\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "slots",
            "--interviewer-email",
            "lee@corp.com",
            "--now",
            "2024-06-03T08:00:00+00:00",
            "--data",
            str(snapshot_path),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0, result.output
    windows = json.loads(result.stdout)
    starts = [window["start"] for window in windows]
    assert len(starts) == 10
    assert starts[0] == "2024-06-03T09:00:00Z"
    assert "2024-06-04T09:00:00Z" in starts
    assert "2024-06-04T10:00:00Z" not in starts
    assert "2024-06-04T11:00:00Z" in starts


def test_invalid_config_is_reported(runner: CliRunner, snapshot_path: Path, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("scheduling:\n  first_hour: 99\n", encoding="utf-8")

    result = runner.invoke(
        app, ["rank", "J1", "--data", str(snapshot_path), "--config", str(config_path)]
    )

    assert result.exit_code != 0
