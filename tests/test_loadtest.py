"""Load generator against the in-process app."""

import asyncio

import httpx

from paygate.loadtest import pct, run
from paygate.services.orchestrator.main import app, get_orchestrator


def test_load_run_tallies_outcomes(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        summary = asyncio.run(run(8, 4, "http://paygate.test", transport=httpx.ASGITransport(app=app)))
    finally:
        app.dependency_overrides.clear()

    assert summary["total"] == 8
    assert summary["completed"] == 6
    assert summary["rejected"] == 2
    assert summary["errors"] == 0


def test_percentile_helper():
    assert pct([], 50) == 0.0
    assert pct([5.0, 1.0, 3.0, 2.0], 50) == 2.0
    assert pct([5.0, 1.0, 3.0, 2.0], 99) == 3.0
