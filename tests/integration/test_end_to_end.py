"""End-to-end runs through the CLI with the Python host."""

import json
from pathlib import Path

import pytest
from aioresponses import aioresponses as aioresponses_cls

from conformance_harness.cli import run

RESOURCE_BASE_URL = "http://web-platform.test:8000"

COMPOSITE_SUITE = '''
import asyncio

from conformance_harness.assertions import assert_class_of, assert_equals


def register(harness, host):
    t = harness.declare_async_test(
        "drawImage() draws pixels not covered by the source object as (0,0,0,0)"
    )

    async def load():
        response = await host.fetch("/images/yellow.png", "blob")
        assert_class_of(response, "blob", "response is a Blob")
        assert_equals(response.type, "image/png")
        t.complete()

    asyncio.get_running_loop().create_task(t.step(load)())

    async def buffer_is_not_blob():
        data = await host.fetch("/images/yellow.png")
        assert_class_of(data, "blob", "arraybuffer responses are not blobs")

    harness.declare_promise_test("arraybuffer response", buffer_is_not_blob)
'''


@pytest.fixture
def suite(tmp_path: Path) -> Path:
    """Write the compositing suite."""
    path = tmp_path / "composite_uncovered.py"
    path.write_text(COMPOSITE_SUITE)
    return path


async def test_runs_suite_against_python_host(
    suite: Path,
    aioresponses: aioresponses_cls,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Blob responses pass and raw buffers fail the class check."""
    for _ in range(2):
        aioresponses.get(
            f"{RESOURCE_BASE_URL}/images/yellow.png",
            body=b"\x89PNG",
            content_type="image/png",
        )

    exit_code = await run(
        suite_paths=[suite],
        host_key="python",
        host_config_json=json.dumps({"resource_base_url": RESOURCE_BASE_URL}),
    )

    assert exit_code == 1
    output = json.loads(capsys.readouterr().out)
    statuses = {r["name"]: r["status"] for r in output["results"]}
    assert statuses == {
        "drawImage() draws pixels not covered by the source object as (0,0,0,0)": (
            "passed"
        ),
        "arraybuffer response": "failed",
    }
    failed = output["results"][1]
    assert failed["expected"] == "blob"
    assert failed["actual"] == "array-buffer"
