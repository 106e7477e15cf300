"""Shared fixtures.

The external converter is replaced by a small Python script that behaves
like ``polygon-city`` closely enough for the orchestrator: it honours ``-o``,
reads the input file named by the final argument, and writes
``<output>/index.geojson``. The content of each input file drives it:

- a JSON list of ``[lon, lat]`` positions: success, fragment with those points
- ``FAIL``: prints to stderr and exits 3
- ``EMPTY``: creates the output directory but no fragment
- ``BROKEN``: writes a fragment that is not JSON
- ``SIGNAL``: terminates itself with SIGTERM

Every invocation appends its argv as a JSON line to ``$FAKE_CONVERTER_LOG``.
"""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from helpers import StubGateway
from polycity.config import RunConfig

_FAKE_CONVERTER = '''
import json
import os
import signal
import sys
from pathlib import Path

argv = sys.argv[1:]
log_path = os.environ.get("FAKE_CONVERTER_LOG")
if log_path:
    with open(log_path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(argv) + "\\n")

if argv == ["resume"]:
    sys.exit(int(os.environ.get("FAKE_RESUME_EXIT", "0")))

output = Path(argv[argv.index("-o") + 1])
source = Path(argv[-1]).read_text(encoding="utf-8").strip()
if source == "FAIL":
    print("boom: cannot convert " + argv[-1], file=sys.stderr)
    sys.exit(3)
if source == "SIGNAL":
    os.kill(os.getpid(), signal.SIGTERM)
output.mkdir(parents=True, exist_ok=True)
if source == "EMPTY":
    sys.exit(0)
fragment = output / "index.geojson"
if source == "BROKEN":
    fragment.write_text("{not json", encoding="utf-8")
    sys.exit(0)
points = json.loads(source)
fragment.write_text(
    json.dumps(
        {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {},
                    "geometry": {"type": "MultiPoint", "coordinates": points},
                }
            ],
        }
    ),
    encoding="utf-8",
)
print("converted " + argv[-1])
'''


@pytest.fixture
def fake_converter(tmp_path: Path) -> Path:
    script = tmp_path / "bin" / "polygon-city"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{_FAKE_CONVERTER}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def converter_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    log_path = tmp_path / "converter.log"
    monkeypatch.setenv("FAKE_CONVERTER_LOG", str(log_path))
    return log_path


@pytest.fixture
def make_config(tmp_path: Path):
    def _make(**overrides) -> RunConfig:
        values = {
            "epsg": "4326",
            "elevation_key": "K",
            "input_dir": tmp_path / "input",
            "output_dir": tmp_path / "out",
        }
        values.update(overrides)
        return RunConfig().merged(**values)

    return _make


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture(autouse=True)
def _clean_converter_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FAKE_CONVERTER_LOG", "FAKE_RESUME_EXIT"):
        if name in os.environ:
            monkeypatch.delenv(name)
