"""Shared fixtures for model-parameters tests."""

import pytest

from model_parameters import parameter, rng


@pytest.fixture(autouse=True)
def seeded_rng():
    """Make perturbation draws reproducible in every test."""
    return rng.seed(20240611)


@pytest.fixture
def idealgas():
    """Container of two leaves with their own transformers."""
    return parameter(
        name="Ideal gas",
        id="idealgas",
        children=[
            parameter(
                name="Temperature",
                id="temperature",
                value=30.0,
                units="°C",
                transformer=lambda x: x + 273.15,
            ),
            parameter(
                name="Pressure",
                id="pressure",
                value=2.0,
                units="bar",
                transformer=lambda x: x * 1e5,
            ),
        ],
    )


@pytest.fixture
def temps():
    """Options between a Celsius and a Kelvin temperature."""
    return parameter(
        name="Temperature",
        id="temperature",
        children=[
            parameter(
                name="T (°C)",
                id="celcius",
                value=30.0,
                units="°C",
                transformer=lambda x: x + 273.15,
            ),
            parameter(name="T (K)", id="kelvin", value=293.15, units="K"),
        ],
        selection="celcius",
    )


@pytest.fixture
def gas_yaml(tmp_path):
    """YAML file describing a small parameter tree."""
    path = tmp_path / "gas.yaml"
    path.write_text(
        """\
id: gas
name: Gas sample
description: Example gas
children:
  - id: temperature
    value: 30.0
    units: °C
  - name: pressure
    value: 2.0
    units: bar
    perturbation: 0.1
  - id: model
    selection: vdw
    options:
      - {id: ideal, value: 1.0}
      - {id: vdw, value: 0.9}
""",
        encoding="utf-8",
    )
    return path
