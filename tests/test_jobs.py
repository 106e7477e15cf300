from __future__ import annotations

from pathlib import Path

import pytest

from polycity.jobs import build_argv, build_job, is_eligible, output_unit_name


def test_unit_name_uses_prefix_when_configured(make_config):
    config = make_config(prefix="bld-")
    assert output_unit_name(config, "A.gml") == "bld-A"


def test_unit_name_without_prefix_is_basename(make_config):
    assert output_unit_name(make_config(), "Tower Hamlets.gml") == "Tower Hamlets"


def test_unit_name_strips_only_final_extension(make_config):
    assert output_unit_name(make_config(), "tile.01.gml") == "tile.01"


@pytest.mark.parametrize("name", ["notes.txt", "A.GML", "A.gml.bak", "gml", ".gml"])
def test_ineligible_files_produce_no_job(make_config, name):
    config = make_config()
    assert not is_eligible(config, name)
    assert build_job(config, name) is None


def test_minimal_argument_vector(make_config, tmp_path: Path):
    config = make_config()
    job = build_job(config, "A.gml")
    assert job is not None
    assert job.argv == (
        "-e",
        "4326",
        "-m",
        "K",
        "-o",
        str(tmp_path / "out" / "A"),
        str(tmp_path / "input" / "A.gml"),
    )


def test_full_argument_vector_order(make_config, tmp_path: Path):
    config = make_config(
        prefix="bld-",
        elevation_endpoint="http://elevation.local",
        wof_endpoint="http://wof.local",
        license="CC-BY",
    )
    job = build_job(config, "A.gml")
    assert job is not None
    assert list(job.argv) == [
        "-e", "4326",
        "-m", "K",
        "-p", "bld-",
        "-el", "http://elevation.local",
        "-w", "http://wof.local",
        "-l", "CC-BY",
        "-o", str(tmp_path / "out" / "bld-A"),
        str(tmp_path / "input" / "A.gml"),
    ]  # fmt: skip


def test_optional_pairs_are_independent(make_config, tmp_path: Path):
    config = make_config(wof_endpoint="http://wof.local")
    argv = build_argv(config, tmp_path / "out" / "A", tmp_path / "input" / "A.gml")
    assert argv[4:6] == ("-w", "http://wof.local")
    assert "-p" not in argv and "-el" not in argv and "-l" not in argv


def test_job_paths(make_config, tmp_path: Path):
    job = build_job(make_config(prefix="bld-"), "B.gml")
    assert job is not None
    assert job.unit_name == "bld-B"
    assert job.output_dir == tmp_path / "out" / "bld-B"
    assert job.input_path == tmp_path / "input" / "B.gml"


def test_build_job_is_deterministic(make_config):
    config = make_config(prefix="bld-", license="CC0")
    assert build_job(config, "A.gml") == build_job(config, "A.gml")
