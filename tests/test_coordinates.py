"""Tests for pixel/percent coordinate conversion."""

import pytest

from ecml_canvas.core.coordinates import percent_to_pixel, pixel_to_percent, to_render_props


def test_pixel_to_percent_center_box():
    """A 72x40.5 box at the canvas center is 10% wide at 50%/50%."""
    obj = {"x": 360, "y": 202.5, "w": 72, "h": 40.5, "rotate": "15"}
    pixel_to_percent(obj)
    assert obj == {"x": 50.0, "y": 50.0, "w": 10.0, "h": 10.0, "rotate": 15.0}


def test_pixel_to_percent_rounds_to_two_decimals():
    obj = {"x": 100, "y": 100}
    pixel_to_percent(obj)
    assert obj["x"] == 13.89
    assert obj["y"] == 24.69


def test_percent_to_pixel_does_not_round():
    obj = {"x": 33.333, "y": 10, "w": 50, "h": 100, "rotate": 45}
    percent_to_pixel(obj)
    assert obj["x"] == pytest.approx(33.333 * 7.2)
    assert obj["y"] == pytest.approx(40.5)
    assert obj["w"] == pytest.approx(360)
    assert obj["h"] == pytest.approx(405)
    assert obj["rotate"] == 45


def test_conversions_only_touch_present_keys():
    obj = {"visible": True, "fill": "red"}
    pixel_to_percent(obj)
    percent_to_pixel(obj)
    assert obj == {"visible": True, "fill": "red"}


def test_unparseable_rotation_passes_through():
    obj = {"rotate": None}
    pixel_to_percent(obj)
    assert obj["rotate"] is None


@pytest.mark.parametrize("value", list(range(0, 721, 7)) + [0.5, 719.9])
def test_round_trip_error_bounded_on_x_axis(value):
    obj = {"x": value, "w": value}
    pixel_to_percent(obj)
    percent_to_pixel(obj)
    # half of 0.01% of 720px
    assert abs(obj["x"] - value) <= 0.036 + 1e-9
    assert abs(obj["w"] - value) <= 0.036 + 1e-9


@pytest.mark.parametrize("value", list(range(0, 406, 5)) + [0.25, 404.9])
def test_round_trip_error_bounded_on_y_axis(value):
    obj = {"y": value, "h": value}
    pixel_to_percent(obj)
    percent_to_pixel(obj)
    assert abs(obj["y"] - value) <= 0.02025 + 1e-9
    assert abs(obj["h"] - value) <= 0.02025 + 1e-9


def test_round_trip_exact_on_rounding_grid():
    obj = {"x": 7.2, "y": 4.05}
    pixel_to_percent(obj)
    assert obj == {"x": 1.0, "y": 1.0}
    percent_to_pixel(obj)
    assert obj["x"] == pytest.approx(7.2, abs=1e-12)
    assert obj["y"] == pytest.approx(4.05, abs=1e-12)


def test_to_render_props_maps_names_and_keeps_originals():
    props = to_render_props({"x": 10, "y": 20, "w": 30, "h": 40, "rotate": 90, "color": "red", "radius": 4})
    assert props["left"] == 10
    assert props["top"] == 20
    assert props["width"] == 30
    assert props["height"] == 40
    assert props["angle"] == 90
    assert props["fill"] == "red"
    assert props["rx"] == 4
    assert props["x"] == 10


def test_numeric_strings_are_coerced():
    obj = {"x": "10", "y": "20", "w": "50.0", "h": " 100 "}
    assert percent_to_pixel(obj) == []
    assert obj["x"] == pytest.approx(72.0)
    assert obj["y"] == pytest.approx(81.0)
    assert obj["w"] == pytest.approx(360.0)
    assert obj["h"] == pytest.approx(405.0)


def test_non_numeric_geometry_left_unchanged_and_reported():
    obj = {"x": None, "y": "top", "w": 72, "h": True}
    assert sorted(pixel_to_percent(obj)) == ["h", "x", "y"]
    assert obj == {"x": None, "y": "top", "w": 10.0, "h": True}

    obj = {"x": None, "w": "wide"}
    assert percent_to_pixel(obj) == ["x", "w"]
    assert obj == {"x": None, "w": "wide"}
