import os
import tempfile

import numpy as np
import pytest
import yaml

from cityscore.alternatives import Alternative


def mock_alternatives(values: dict[str, list[float]], names: list[str] = None):
    """Create alternatives with flat numeric attributes.

    Parameters
    ----------

    values : dict
        Mapping of attribute name to one value per alternative.

    names : list[str], optional
        Names of the alternatives, defaults to 'A', 'B', 'C', ...

    Returns
    -------

    list[Alternative]
        One alternative per value position.

    """
    n = len(next(iter(values.values())))
    if names is None:
        names = [chr(ord("A") + i) for i in range(n)]

    return [
        Alternative(name, {key: column[i] for key, column in values.items()})
        for i, name in enumerate(names)
    ]


def mock_city(name: str, scale: float = 1.0) -> dict:
    """Create a city record in the shape of the scoring input file.

    `scale` shifts all values so different cities get different scores.
    """
    return {
        "name": name,
        "education": {
            "usnews": int(1000 * scale),
            "math": 0.5 * scale,
            "reading": 0.6 * scale,
            "graduation": 0.9 + 0.01 * scale,
            "college": 30.0 * scale,
        },
        "real_estate": {"market": 400000 * scale, "assessed": 300000 * scale},
        "taxes": {"property": 0.01 * scale, "sales": 0.06, "income": 0.04 * scale},
        "crime": {"violent": 2.0 * scale, "property": 20.0 * scale},
        "climate": {
            "sunny_days": 200 * scale,
            "rain_inches": 30.0 * scale,
            "snow_inches": 10.0 / scale,
        },
        "family": {
            "miles_to_margaret": 100 * scale,
            "miles_to_nich": 500 / scale,
            "miles_to_peggy": 300 * scale,
            "miles_to_ryan": 1000 / scale,
            "multiple_suites": 1.0,
        },
        "livability": {
            "politics": 0.5 + 0.1 * scale,
            "culture": 10 * scale,
            "running": 5 / scale,
            "walk_score": 50 * scale,
            "miles_to_airport": 20 * scale,
        },
    }


def mock_scoring_input(n_cities: int = 3) -> dict:
    return {
        "annual_expenses": 60000,
        "annual_income": 150000,
        "home_equity": 200000.0,
        "candidate_cities": [
            mock_city(f"City{i}", scale=1.0 + 0.25 * i) for i in range(n_cities)
        ],
    }


def random_tempfolder():
    """Create a randomly named temp folder in the system temp folder

    Returns
    -------
    path : str
        Path to the created temp folder

    """
    tempdir = tempfile.gettempdir()
    # 6 alphanumeric characters
    random_foldername = "cityscore_" + "".join(
        np.random.choice(list("abcdefghijklmnopqrstuvwxyz0123456789"), 6)
    )
    path = os.path.join(tempdir, random_foldername)
    os.makedirs(path, exist_ok=True)
    return path


@pytest.fixture
def abc_alternatives():
    """Three alternatives A, B, C with raw values 10, 20, 30 on attribute 'x'."""
    return mock_alternatives({"x": [10, 20, 30], "y": [3, 1, 2]})


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "data.yaml"
    with open(path, "w") as f:
        yaml.dump(mock_scoring_input(), f)
    return str(path)
