from io import StringIO

import pytest
import yaml

from cityscore.config import Config
from cityscore.exceptions import KeyAddedConfigError, TypeMismatchConfigError

generic_default_config = """
    simple_value_int: 1
    simple_value_float: 2.0
    simple_value_str: three
    nullable_value: null
    nested_values:
        nested_value_1: 1
        nested_value_2: 2
    simple_list:
        - 1
        - 2
        - 3
    """

expected_generic_default_config_dict = {
    "simple_value_int": 1,
    "simple_value_float": 2.0,
    "simple_value_str": "three",
    "nullable_value": None,
    "nested_values": {"nested_value_1": 1, "nested_value_2": 2},
    "simple_list": [1, 2, 3],
}


def _default_config() -> Config:
    config = Config(name="default")
    config.from_dict(yaml.safe_load(StringIO(generic_default_config)))
    return config


def test_config_update_empty_list():
    """Test updating a config with an empty list."""
    config_1 = _default_config()

    # when
    config_1.update([])

    assert config_1.to_dict() == expected_generic_default_config_dict


def test_config_update_simple_two_files():
    """Test updating a config with simple values from two files, the last one wins."""
    config_1 = _default_config()
    config_2 = Config({"simple_value_int": 2, "simple_value_float": 4.0}, "first")
    config_3 = Config(
        {"simple_value_float": 5.0, "simple_value_str": "six"}, name="second"
    )

    # when
    config_1.update([config_2, config_3], do_print=True)

    assert config_1.to_dict() == expected_generic_default_config_dict | {
        "simple_value_int": 2,
        "simple_value_float": 5.0,
        "simple_value_str": "six",
    }


def test_config_update_nested_and_list():
    config_1 = _default_config()
    config_2 = Config(
        {"nested_values": {"nested_value_2": 42}, "simple_list": [43]}, name="first"
    )

    # when
    config_1.update([config_2], do_print=True)

    assert config_1["nested_values"] == {"nested_value_1": 1, "nested_value_2": 42}
    assert config_1["simple_list"] == [43]


def test_config_update_int_float_and_null():
    config_1 = _default_config()
    config_2 = Config(
        {"simple_value_float": 3, "nullable_value": "/some/path"}, name="first"
    )

    # when
    config_1.update([config_2])

    assert config_1["simple_value_float"] == 3
    assert config_1["nullable_value"] == "/some/path"


def test_config_update_bool_from_string():
    config_1 = Config({"flag": False})

    # when
    config_1.update([Config({"flag": "True"}, name="cli")])

    assert config_1["flag"] is True


def test_config_update_new_key_raises():
    config_1 = _default_config()

    with pytest.raises(KeyAddedConfigError):
        config_1.update([Config({"new_key": 0}, name="first")])


def test_config_update_type_mismatch_raises():
    config_1 = _default_config()

    with pytest.raises(TypeMismatchConfigError):
        config_1.update([Config({"simple_value_int": "one"}, name="first")])


def test_config_is_read_only():
    config_1 = _default_config()

    with pytest.raises(NotImplementedError):
        config_1["simple_value_int"] = 2
    with pytest.raises(NotImplementedError):
        del config_1["simple_value_int"]
    with pytest.raises(NotImplementedError):
        config_1.copy()


def test_config_yaml_round_trip(tmp_path):
    # given
    config_1 = _default_config()
    path = tmp_path / "config.yaml"

    # when
    config_1.to_yaml(path)
    config_2 = Config()
    config_2.from_yaml(path)

    assert config_2.to_dict() == expected_generic_default_config_dict


def test_config_json_round_trip(tmp_path):
    # given
    config_1 = _default_config()
    path = tmp_path / "config.json"

    # when
    config_1.to_json(path)
    config_2 = Config()
    config_2.from_json(path)

    assert config_2.to_dict() == expected_generic_default_config_dict


def test_default_config():
    config = Config.default()

    assert config["scoring"]["zero_variance"] == "zeros"
    assert config["scoring"]["weight_tolerance"] == 1e-9
    assert config["input_path"] is None
