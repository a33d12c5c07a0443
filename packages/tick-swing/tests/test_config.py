"""Tests for configuration and geometry dataclasses."""
from __future__ import annotations

import math

import pytest

from tick_swing.config import Fulcrum, Hitbox, ModelPart, SwingConfig, SwingGeometry
from tick_swing.transform import Transformation


def test_defaults_are_the_tuned_constants():
    c = SwingConfig()
    assert c.gravity == 9.81
    assert c.length == 1.0
    assert c.mass == 1.0
    assert c.drive_frequency == 3.20
    assert c.time_step == 0.05
    assert c.acceleration_ticks == 30
    assert c.acceleration_amplitude == 2.0
    assert c.normal_damping == 0.5
    assert c.deceleration_damping == 1.2
    assert c.still_threshold == 0.5
    assert c.angle_threshold == 0.01
    assert math.isclose(c.wrap_modulus, 3 * math.pi / 2)


def test_config_is_frozen():
    c = SwingConfig()
    with pytest.raises(AttributeError):
        c.gravity = 1.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "field,value",
    [
        ("length", 0.0),
        ("mass", -1.0),
        ("time_step", 0.0),
        ("acceleration_ticks", -1),
        ("wrap_degrees", 0.0),
        ("area_size", 0),
    ],
)
def test_invalid_config_rejected(field, value):
    with pytest.raises(ValueError):
        SwingConfig(**{field: value})


def test_negative_radius_rejected():
    with pytest.raises(ValueError):
        Fulcrum(position=(0.0, 0.0, 0.0), block="oak_fence", radius=-1.0)


def test_negative_hitbox_rejected():
    with pytest.raises(ValueError):
        Hitbox(position=(0.0, 0.0, 0.0), width=-1.0, height=1.0)


def test_model_part_defaults_to_identity():
    part = ModelPart("head")
    assert part.transformation == Transformation()


_DATA = {
    "location": {"x": 12.5, "y": 70.0, "z": -4.5},
    "interaction": {"location": {"x": 12.5, "y": 67.5, "z": -4.5}, "width": 1.2, "height": 1.5},
    "fulcrum": {
        "location": {"x": 12.5, "y": 72.0, "z": -4.5},
        "material": "oak_fence",
        "radius": 2.25,
        "left_rotation": {"w": 0.0, "x": 1.0, "y": 0.0, "z": 0.0},
    },
    "model": {
        "still": [{"texture": "frame", "translation": {"x": 0.0, "y": 1.0, "z": 0.0}}],
        "rope": [{"texture": "rope", "scale": {"x": 0.2, "y": 1.0, "z": 0.2}}],
        "rotational": [
            {"texture": "tire"},
            {"texture": "tire", "left_rotation": {"w": 0.5, "x": 0.5, "y": 0.5, "z": 0.5}},
        ],
    },
}


def test_from_dict():
    geometry = SwingGeometry.from_dict(_DATA)

    assert geometry.location == (12.5, 70.0, -4.5)
    assert geometry.interaction == Hitbox((12.5, 67.5, -4.5), 1.2, 1.5)
    assert geometry.fulcrum.block == "oak_fence"
    assert geometry.fulcrum.radius == 2.25
    assert geometry.fulcrum.transformation.left_rotation == (0.0, 1.0, 0.0, 0.0)
    assert geometry.fulcrum.transformation.right_rotation == (1.0, 0.0, 0.0, 0.0)

    assert [p.kind for p in geometry.rotating] == ["tire", "tire"]
    assert geometry.still[0].transformation.translation == (0.0, 1.0, 0.0)
    assert geometry.rope[0].transformation.scale == (0.2, 1.0, 0.2)
    assert geometry.rotating[0].transformation == Transformation()
    assert geometry.rotating[1].transformation.left_rotation == (0.5, 0.5, 0.5, 0.5)


def test_from_dict_missing_section():
    data = dict(_DATA)
    del data["fulcrum"]
    with pytest.raises(KeyError):
        SwingGeometry.from_dict(data)
