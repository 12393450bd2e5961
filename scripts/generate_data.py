"""
Synthetic data generator for the tracker store.

Implements deterministic pseudo-random contests, problems, contest/problem
pairs and submissions, writes them to a JSON fixture file, and optionally
loads them through the PgSqlClient gateway.
"""

from __future__ import annotations

import json
import random
import string
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, List

import typer
from psycopg_pool import ConnectionPool

from tracker_store.config import FIRST_AGC_EPOCH_SECOND, UNRATED_STATE, build_dsn
from tracker_store.gateway.postgres import PgSqlClient

app = typer.Typer(help="Generate synthetic tracker data and load it into Postgres.")

RATE_CHANGES = [UNRATED_STATE, " ~ 1999", " ~ 2799", "All", "1200 ~ "]
RESULTS = ["AC", "WA", "TLE", "RE", "CE", "WJ"]
LANGUAGES = ["C++ (GCC 9.2.1)", "Python (3.8.2)", "Rust (1.42.0)", "Java (OpenJDK 11.0.6)"]
# Contests are spread one week apart, starting a year before the first AGC.
_CONTEST_SPACING = 7 * 24 * 60 * 60
_FIRST_START = FIRST_AGC_EPOCH_SECOND - 52 * _CONTEST_SPACING


def _generate_dataset(
    contests: int, problems_per_contest: int, submissions: int, users: int, seed: int
) -> Dict[str, List[Any]]:
    rng = random.Random(seed)
    dataset: Dict[str, List[Any]] = {
        "contests": [],
        "problems": [],
        "contest_problem": [],
        "submissions": [],
    }

    for n in range(contests):
        contest_id = f"abc{n + 1:03d}"
        start = _FIRST_START + n * _CONTEST_SPACING
        dataset["contests"].append(
            {
                "id": contest_id,
                "start_epoch_second": start,
                "duration_second": 100 * 60,
                "title": f"Beginner Contest {n + 1:03d}",
                "rate_change": rng.choice(RATE_CHANGES),
            }
        )
        for letter in string.ascii_lowercase[:problems_per_contest]:
            problem_id = f"{contest_id}_{letter}"
            dataset["problems"].append(
                {"id": problem_id, "contest_id": contest_id, "title": f"{letter.upper()}. Task"}
            )
            dataset["contest_problem"].append([contest_id, problem_id])

    problems = dataset["problems"]
    contest_starts = {c["id"]: c["start_epoch_second"] for c in dataset["contests"]}
    for n in range(submissions if problems else 0):
        problem = rng.choice(problems)
        result = rng.choice(RESULTS)
        dataset["submissions"].append(
            {
                "id": n + 1,
                "epoch_second": contest_starts[problem["contest_id"]] + rng.randint(0, 6000),
                "problem_id": problem["id"],
                "contest_id": problem["contest_id"],
                "user_id": f"user{rng.randint(1, users)}",
                "language": rng.choice(LANGUAGES),
                "point": float(rng.choice([100, 200, 300, 400])) if result == "AC" else 0.0,
                "length": rng.randint(50, 5000),
                "result": result,
                "execution_time": None if result in ("WJ", "CE") else rng.randint(1, 2000),
            }
        )
    return dataset


def _write_json(path: Path, dataset: Dict[str, List[Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(dataset, f)


def _load_into_store(client: PgSqlClient, dataset: Dict[str, List[Any]]) -> Dict[str, int]:
    return {
        "contests": client.insert_contests(dataset["contests"]),
        "problems": client.insert_problems(dataset["problems"]),
        "contest_problem": client.insert_contest_problem_pairs(dataset["contest_problem"]),
        "submissions": client.insert_submissions(dataset["submissions"]),
    }


@app.command()
def main(
    contests: int = typer.Option(20, "--contests", "-c", help="Number of contests."),
    problems_per_contest: int = typer.Option(
        6, "--problems", "-p", min=0, max=26, help="Problems per contest."
    ),
    submissions: int = typer.Option(10_000, "--submissions", "-s", help="Number of submissions."),
    users: int = typer.Option(500, "--users", "-u", help="Distinct user ids to draw from."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional JSON output path (if omitted, a temp file will be used).",
    ),
    dsn: str | None = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
    no_load: bool = typer.Option(
        False, "--no-load", help="Only generate JSON; skip loading into Postgres."
    ),
) -> None:
    """
    Generate synthetic data and optionally load it through the gateway.
    """
    start = time.perf_counter()
    if output:
        json_path = output
        json_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        json_path = Path(tempfile.mkdtemp(prefix="tracker_data_")) / "dataset.json"

    dataset = _generate_dataset(contests, problems_per_contest, submissions, users, seed)
    _write_json(json_path, dataset)
    typer.echo(
        f"Generated {len(dataset['contests'])} contests, {len(dataset['problems'])} problems, "
        f"{len(dataset['submissions']):,} submissions -> {json_path} "
        f"in {time.perf_counter() - start:.2f}s"
    )

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    load_start = time.perf_counter()
    with ConnectionPool(conninfo=dsn or build_dsn(), min_size=1, max_size=2) as pool:
        counts = _load_into_store(PgSqlClient(pool), dataset)
    typer.echo(
        f"Load completed in {time.perf_counter() - load_start:.2f}s: "
        + ", ".join(f"{table}={count:,}" for table, count in counts.items())
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
