"""Tests for the command line entry point."""

import json
from pathlib import Path

import yaml

from constant_heading.cli import main
from constant_heading.config import SolverConfig


def write_config(path: Path, config: SolverConfig, solver: dict) -> Path:
    with open(path, "w") as f:
        yaml.safe_dump({"problem": config.model_dump(mode="json"), "solver": solver}, f)
    return path


class TestCli:
    """Tests for constant-heading-solve."""

    def test_writes_result(self, tmp_path: Path, scenario_config: SolverConfig) -> None:
        config_path = write_config(
            tmp_path / "run.yaml",
            scenario_config,
            {"step": 0.05, "max_iterations": 5, "max_function_evaluations": 300},
        )
        output_path = tmp_path / "out" / "result.json"

        code = main(["--config", str(config_path), "--output", str(output_path)])

        assert code == 0
        with open(output_path) as f:
            data = json.load(f)
        assert {"theta", "control_points", "t1", "t2", "penalty", "line"} <= set(data)
        assert data["line"]["endPoint"]["heading"] == "constant"

    def test_missing_config(self, tmp_path: Path) -> None:
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 1

    def test_invalid_config(self, tmp_path: Path, scenario_config: SolverConfig) -> None:
        data = scenario_config.model_dump(mode="json")
        data["v_max"] = -1.0
        path = tmp_path / "bad.yaml"
        with open(path, "w") as f:
            yaml.safe_dump({"problem": data}, f)

        assert main(["--config", str(path)]) == 1

    def test_budget_exhausted(self, tmp_path: Path, scenario_config: SolverConfig) -> None:
        config_path = write_config(
            tmp_path / "run.yaml",
            scenario_config,
            {"max_evaluations": 50, "max_iterations": 2, "max_function_evaluations": 50},
        )

        assert main(["--config", str(config_path)]) == 1

    def test_empty_problem_section(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("problem:\n")

        assert main(["--config", str(path)]) == 1

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("problem: [unclosed\n")

        assert main(["--config", str(path)]) == 1
