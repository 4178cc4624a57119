"""Tests for CLI commands."""

import json
import textwrap
from pathlib import Path

import polars as pl
import pytest
import typer
from typer.testing import CliRunner

from model_parameters.cli.__main__ import app
from model_parameters.cli.tree import convert_command, render_tree, show_command
from model_parameters.cli.sampling import draw_samples, sample_command, transform_command
from model_parameters.config import load_yaml_config
from model_parameters.settings import read_pyproject


@pytest.fixture
def transformers_file(tmp_path):
    path = tmp_path / "gas_transformers.py"
    path.write_text(
        textwrap.dedent(
            """
            TRANSFORMERS = {
                "temperature": lambda c: c + 273.15,
                "pressure": lambda bar: bar * 1e5,
            }
            NOT_A_TABLE = 3
            """
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def broadcast_yaml(tmp_path):
    path = tmp_path / "batch.yaml"
    path.write_text(
        textwrap.dedent(
            """
            id: batch
            size: 4
            children:
              - {id: volume, value: 20.0, units: L, perturbation: 0.1}
              - id: vessel
                children:
                  - {id: height, value: 2.0, units: m}
            """
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def nested_broadcast_yaml(tmp_path):
    path = tmp_path / "plant.yaml"
    path.write_text(
        textwrap.dedent(
            """
            id: plant
            children:
              - {id: pressure, value: 2.0, units: bar}
              - id: tanks
                size: 2
                children:
                  - {id: volume, value: 20.0, units: L, perturbation: 0.1}
            """
        ),
        encoding="utf-8",
    )
    return path


def _run_transform(config, capsys, **kwargs):
    options = {"seed": None, "transformers": None, "overrides": None, "project_root": str(config.parent)}
    options.update(kwargs)
    transform_command(config=config, **options)
    return json.loads(capsys.readouterr().out)


class TestShow:
    """Tests for the show command."""

    def test_render_tree(self, gas_yaml):
        lines = render_tree(load_yaml_config(gas_yaml))
        assert lines[0] == "gas (Gas sample) [ParameterContainer]"
        assert lines[1] == "  temperature [Parameter] = 30.0 °C"
        assert lines[2] == "  pressure [PerturbedParameter] = 2.0 bar ±0.1"
        assert lines[3] == "  model [ParameterOptions] selection=vdw"
        assert lines[4] == "    ideal [Parameter] = 1.0 -"

    def test_show_command(self, gas_yaml, capsys):
        show_command(config=gas_yaml, transformers=None, project_root=str(gas_yaml.parent))
        out = capsys.readouterr().out
        assert "pressure [PerturbedParameter]" in out
        assert "vdw [Parameter] = 0.9 -" in out

    def test_show_missing_file(self, tmp_path, capsys):
        with pytest.raises(typer.Exit):
            show_command(config=tmp_path / "nope.yaml", transformers=None, project_root=str(tmp_path))
        assert "Error" in capsys.readouterr().err


class TestTransform:
    """Tests for the transform command."""

    def test_transform_prints_json(self, gas_yaml, capsys):
        result = _run_transform(gas_yaml, capsys, seed=1)
        assert result["temperature"] == 30.0
        assert result["model"] == 0.9
        assert 1.8 <= result["pressure"] <= 2.2

    def test_seed_is_reproducible(self, gas_yaml, capsys):
        first = _run_transform(gas_yaml, capsys, seed=11)
        second = _run_transform(gas_yaml, capsys, seed=11)
        assert first == second

    def test_transformers_from_file(self, gas_yaml, transformers_file, capsys):
        result = _run_transform(gas_yaml, capsys, transformers=f"{transformers_file}:TRANSFORMERS")
        assert result["temperature"] == pytest.approx(303.15)
        assert 1.8e5 <= result["pressure"] <= 2.2e5

    def test_bad_transformer_table(self, gas_yaml, transformers_file, capsys):
        with pytest.raises(typer.Exit):
            _run_transform(gas_yaml, capsys, transformers=f"{transformers_file}:NOT_A_TABLE")
        assert "mapping" in capsys.readouterr().err

    def test_overrides(self, gas_yaml, capsys):
        result = _run_transform(gas_yaml, capsys, overrides=["temperature=12.5", "model.ideal=2"])
        assert result["temperature"] == 12.5
        assert result["model"] == 0.9

    def test_override_unknown_path(self, gas_yaml, capsys):
        with pytest.raises(typer.Exit):
            _run_transform(gas_yaml, capsys, overrides=["volume=1"])
        assert "volume" in capsys.readouterr().err

    def test_malformed_override(self, gas_yaml, capsys):
        with pytest.raises(typer.Exit):
            _run_transform(gas_yaml, capsys, overrides=["temperature"])

    def test_settings_from_pyproject(self, gas_yaml, transformers_file, capsys):
        (gas_yaml.parent / "pyproject.toml").write_text(
            textwrap.dedent(
                f"""
                [tool.model-parameters]
                transformers = "{transformers_file.stem}:TRANSFORMERS"
                seed = 5
                """
            ),
            encoding="utf-8",
        )
        assert read_pyproject(gas_yaml.parent)["seed"] == 5

        first = _run_transform(gas_yaml, capsys)
        second = _run_transform(gas_yaml, capsys)
        assert first == second
        assert first["temperature"] == pytest.approx(303.15)

    def test_bad_seed_in_pyproject(self, gas_yaml, capsys):
        (gas_yaml.parent / "pyproject.toml").write_text(
            '[tool.model-parameters]\nseed = "abc"\n', encoding="utf-8"
        )
        with pytest.raises(typer.Exit):
            _run_transform(gas_yaml, capsys)
        assert "seed must be an integer" in capsys.readouterr().err


class TestSample:
    """Tests for the sample command."""

    def test_draw_samples_rows(self, gas_yaml):
        df = draw_samples(load_yaml_config(gas_yaml), 10)
        assert df.height == 10
        assert df.columns == ["sample", "temperature", "pressure", "model"]
        assert df["pressure"].n_unique() == 10

    def test_draw_samples_broadcaster(self, broadcast_yaml):
        df = draw_samples(load_yaml_config(broadcast_yaml), 3)
        assert df.height == 12
        assert df.columns == ["sample", "item", "volume", "vessel.height"]
        assert df["volume"].n_unique() == 12

    def test_sample_writes_csv(self, gas_yaml, tmp_path, capsys):
        output = tmp_path / "out.csv"
        sample_command(
            config=gas_yaml,
            n_samples=5,
            output=str(output),
            seed=3,
            transformers=None,
            overrides=None,
            project_root=str(tmp_path),
        )
        df = pl.read_csv(output)
        assert df.height == 5
        assert "Wrote 5 rows" in capsys.readouterr().out

    def test_draw_samples_nested_broadcaster(self, nested_broadcast_yaml):
        df = draw_samples(load_yaml_config(nested_broadcast_yaml), 3)
        assert df.height == 3
        assert df.columns == ["sample", "pressure", "tanks.0.volume", "tanks.1.volume"]

    def test_sample_nested_broadcaster_to_csv(self, nested_broadcast_yaml, tmp_path, capsys):
        output = tmp_path / "plant.csv"
        sample_command(
            config=nested_broadcast_yaml,
            n_samples=4,
            output=str(output),
            seed=3,
            transformers=None,
            overrides=None,
            project_root=str(tmp_path),
        )
        df = pl.read_csv(output)
        assert df.height == 4
        assert "tanks.1.volume" in df.columns
        assert "Wrote 4 rows" in capsys.readouterr().out

    def test_sample_writes_parquet(self, broadcast_yaml, tmp_path):
        output = tmp_path / "out.parquet"
        sample_command(
            config=broadcast_yaml,
            n_samples=2,
            output=str(output),
            seed=3,
            transformers=None,
            overrides=None,
            project_root=str(tmp_path),
        )
        assert pl.read_parquet(output).height == 8

    def test_sample_default_output(self, gas_yaml, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        sample_command(
            config=gas_yaml,
            n_samples=2,
            output=None,
            seed=None,
            transformers=None,
            overrides=None,
            project_root=None,
        )
        assert (tmp_path / "gas-samples.csv").exists()

    def test_sample_rejects_unknown_format(self, gas_yaml, tmp_path):
        with pytest.raises(typer.Exit):
            sample_command(
                config=gas_yaml,
                n_samples=2,
                output=str(tmp_path / "out.xlsx"),
                seed=None,
                transformers=None,
                overrides=None,
                project_root=str(tmp_path),
            )

    def test_sample_rejects_zero(self, gas_yaml, tmp_path):
        with pytest.raises(typer.Exit):
            sample_command(
                config=gas_yaml,
                n_samples=0,
                output=None,
                seed=None,
                transformers=None,
                overrides=None,
                project_root=str(tmp_path),
            )


class TestUnitsCommands:
    """Tests for convert and units."""

    def test_convert_to_si(self, capsys):
        convert_command(value=150.0, from_unit="cm", to_unit="SI")
        assert capsys.readouterr().out.strip() == "1.5"

    def test_convert_between_units(self, capsys):
        convert_command(value=2.0, from_unit="h", to_unit="min")
        assert capsys.readouterr().out.strip() == "120"

    def test_convert_keeps_full_precision(self, capsys):
        convert_command(value=123456789.0, from_unit="cm", to_unit="SI")
        assert capsys.readouterr().out.strip() == "1234567.89"

    def test_convert_small_factor(self, capsys):
        convert_command(value=1.0, from_unit="L/m2.h", to_unit="SI")
        assert float(capsys.readouterr().out) == pytest.approx(1.0 / 3.6e6, rel=1e-12)

    def test_convert_unknown_unit(self, capsys):
        with pytest.raises(typer.Exit):
            convert_command(value=1.0, from_unit="furlong", to_unit="SI")
        assert "furlong" in capsys.readouterr().err


class TestApp:
    """Tests for the Typer application wiring."""

    def test_units_listed(self):
        result = CliRunner().invoke(app, ["units"])
        assert result.exit_code == 0
        assert "km/h" in result.output.splitlines()

    def test_version(self):
        result = CliRunner().invoke(app, ["version"])
        assert result.exit_code == 0
        assert "model-parameters version" in result.output

    def test_missing_command(self):
        result = CliRunner().invoke(app, [])
        assert result.exit_code == 1

    def test_show_via_runner(self, gas_yaml):
        result = CliRunner().invoke(app, ["show", str(gas_yaml), "--project-root", str(gas_yaml.parent)])
        assert result.exit_code == 0
        assert "model [ParameterOptions] selection=vdw" in result.output

    def test_convert_via_runner(self):
        result = CliRunner().invoke(app, ["convert", "36", "km/h"])
        assert result.exit_code == 0
        assert result.output.strip() == "10"
