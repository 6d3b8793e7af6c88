import os
from pathlib import Path
import subprocess
import sys

import pytest
import yaml


def _cli_env() -> dict[str, str]:
    env = os.environ.copy()
    src_root = Path(__file__).resolve().parents[1] / "src"
    pythonpath = env.get("PYTHONPATH")
    if pythonpath:
        env["PYTHONPATH"] = f"{src_root}{os.pathsep}{pythonpath}"
    else:
        env["PYTHONPATH"] = str(src_root)
    return env


def _run_cli(*args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "grid_stress.cli", *args],
        capture_output=True,
        text=True,
        cwd=str(cwd),
        env=_cli_env(),
    )


def _write_ring(path: Path, size: int = 6) -> None:
    lines = []
    for index in range(size):
        neighbors = sorted({(index - 1) % size, (index + 1) % size})
        produced = size if index == 0 else 0
        lines.append(",".join([str(produced), "1", *map(str, neighbors)]))
    path.write_text("\n".join(lines), encoding="utf-8")


def test_cli_help(tmp_path: Path) -> None:
    result = _run_cli("--help", cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    for command in ("run", "randomize", "test", "stress", "batch-stress", "cfg"):
        assert command in result.stdout


@pytest.mark.parametrize("command", ["run", "stress", "cfg"])
def test_cli_subcommand_help(tmp_path: Path, command: str) -> None:
    result = _run_cli(command, "--help", cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    assert "--settings" in result.stdout


def test_cli_without_command_prints_help(tmp_path: Path) -> None:
    result = _run_cli(cwd=tmp_path)

    assert result.returncode == 2
    assert "usage" in result.stdout


def test_cli_stress_run_writes_output_and_log(tmp_path: Path) -> None:
    _write_ring(tmp_path / "ring.graph")
    (tmp_path / "settings.config").write_text(
        "ProgramMethod=Stress\n"
        "GraphFilename=ring.graph\n"
        "PowerSuppliedThreshold=0.5\n"
        "PercentageOfEdgesToCut=0.2\n",
        encoding="utf-8",
    )

    result = _run_cli("run", "--seed", "3", cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    assert (tmp_path / "ring.graph.output").exists()
    log_text = (tmp_path / "runtime.log").read_text(encoding="utf-8")
    assert "Program start." in log_text
    assert "GraphFilename = ring.graph" in log_text
    assert "Number of edges cut" in log_text
    assert "Program done." in log_text


def test_cli_overrides_select_mode_and_values(tmp_path: Path) -> None:
    _write_ring(tmp_path / "ring.graph")

    result = _run_cli(
        "--log-file",
        "",
        "test",
        "GraphFilename=ring.graph",
        cwd=tmp_path,
    )

    assert result.returncode == 0, result.stderr
    assert "Test complete." in result.stderr
    assert "1 components" in result.stderr
    assert not (tmp_path / "runtime.log").exists()


def test_cli_missing_settings_is_logged_and_exits_cleanly(tmp_path: Path) -> None:
    result = _run_cli("run", cwd=tmp_path)

    assert result.returncode == 0
    assert "Unable to read config file" in result.stderr
    assert "Missing required configuration" in result.stderr
    assert "Program done." in result.stderr


def test_cli_cfg_prints_merged_settings(tmp_path: Path) -> None:
    settings = tmp_path / "stress.yaml"
    settings.write_text(
        "GraphFilename: ring.graph\nPowerSuppliedThreshold: 0.5\n",
        encoding="utf-8",
    )

    result = _run_cli(
        "--log-file",
        "",
        "cfg",
        "--settings",
        str(settings),
        "PowerSuppliedThreshold=0.25",
        cwd=tmp_path,
    )

    assert result.returncode == 0, result.stderr
    assert yaml.safe_load(result.stdout) == {
        "GraphFilename": "ring.graph",
        "PowerSuppliedThreshold": 0.25,
    }
