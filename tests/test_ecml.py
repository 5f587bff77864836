"""Tests for ECML marshalling."""

import copy
import json

import pytest

from ecml_canvas.core import ECMLDecodeError, FieldStatus


GEOMETRY = ("x", "y", "w", "h")


def _full_tree():
    return {
        "id": "node-1",
        "x": 12.5,
        "y": 33.33,
        "w": 25,
        "h": 10.01,
        "rotate": 30.0,
        "visible": True,
        "editable": False,
        "data": {"__cdata": json.dumps({"questions": [{"q": "2+2", "a": 4}]})},
        "config": {"__cdata": json.dumps({"opacity": 80, "stroke": "red"})},
        "event": [{"type": "click", "action": [{"type": "command", "command": "play"}]}],
        "param": [{"name": "score", "value": 10}, {"name": "attempts", "value": 2}],
    }


def test_shape_scenario_serializes_to_percent(logical_session):
    """Pixel geometry set on a live shape serializes as percent; no autoplay offered.

    Instance data is always percent-space ECML, so pixel geometry is set on
    the hydrated node rather than passed to instantiate_plugin.
    """
    node = logical_session.instantiate_plugin("shape")
    node.set_attributes({"x": 360, "y": 202.5, "w": 72, "h": 40.5, "rotate": 0})

    tree = node.to_ecml()

    assert tree["x"] == pytest.approx(50.0)
    assert tree["y"] == pytest.approx(50.0)
    assert tree["w"] == pytest.approx(10.0)
    assert tree["h"] == pytest.approx(10.0)
    assert tree["rotate"] == 0.0
    assert tree["id"] == node.id
    names = [d.get("propertyName") for d in node.get_config_manifest()]
    assert "autoplay" not in names


def test_round_trip_preserves_documented_fields(logical_session):
    tree = _full_tree()
    node = logical_session.instantiate_plugin("shape", copy.deepcopy(tree))

    out = node.to_ecml()

    assert set(out) == set(tree)
    for key in GEOMETRY:
        assert out[key] == pytest.approx(tree[key], abs=0.01)
    for key in set(tree) - set(GEOMETRY):
        assert out[key] == tree[key], key


def test_hydration_moves_special_fields_onto_node(logical_session):
    node = logical_session.instantiate_plugin("shape", _full_tree())

    assert node.id == "node-1"
    assert node.get_data() == {"questions": [{"q": "2+2", "a": 4}]}
    assert node.get_config() == {"opacity": 80, "stroke": "red"}
    assert node.get_events() == [{"type": "click", "action": [{"type": "command", "command": "play"}]}]
    for key in ("data", "config", "event", "param"):
        assert key not in node.attributes
    # geometry is in pixels while live
    assert node.attributes["x"] == pytest.approx(90.0)
    assert node.attributes["y"] == pytest.approx(33.33 * 4.05)
    assert node.ecml_report.complete


def test_param_replay(logical_session):
    node = logical_session.instantiate_plugin(
        "blank", {"param": [{"name": "a", "value": 1}, {"name": "b", "value": 2}]}
    )
    assert node.get_param("a") == 1
    assert node.get_param("b") == 2
    assert "param" not in node.attributes


def test_params_serialize_as_name_value_list(logical_session):
    node = logical_session.instantiate_plugin("blank")
    node.add_param("a", 1)
    node.add_param("b", {"nested": True})
    node.delete_param("missing")
    assert node.to_ecml()["param"] == [{"name": "a", "value": 1}, {"name": "b", "value": {"nested": True}}]


def test_unset_fields_are_omitted(logical_session):
    node = logical_session.instantiate_plugin("blank")
    node.set_config(None)

    out = node.to_ecml()

    for key in ("data", "config", "event", "param"):
        assert key not in out
    assert None not in out.values()


def test_legacy_events_field_is_discarded(logical_session):
    node = logical_session.instantiate_plugin("blank", {"events": [{"type": "old"}]})

    assert "events" not in node.attributes
    assert node.get_events() is None
    assert node.ecml_report.status_of("events") is FieldStatus.DISCARDED
    out = node.to_ecml()
    assert "events" not in out
    assert "event" not in out


def test_unwrapped_blocks_are_adopted_as_is(logical_session):
    node = logical_session.instantiate_plugin("blank", {"data": {"words": ["cat"]}, "config": {"opacity": 10}})

    assert node.get_data() == {"words": ["cat"]}
    assert node.get_config() == {"opacity": 10}
    assert node.ecml_report.status_of("data") is FieldStatus.ADOPTED
    assert node.to_ecml()["data"] == {"__cdata": json.dumps({"words": ["cat"]})}


def test_undecodable_block_is_ignored_not_raised(logical_session):
    node = logical_session.instantiate_plugin("blank", {"config": {"__cdata": "{not json"}, "x": 10})

    assert node.get_config() is None
    assert "config" not in node.attributes
    assert node.ecml_report.status_of("config") is FieldStatus.IGNORED
    assert not node.ecml_report.complete
    assert node.attributes["x"] == pytest.approx(72.0)


def test_strict_mode_raises_on_undecodable_block(logical_session):
    node = logical_session.instantiate_plugin("blank")
    with pytest.raises(ECMLDecodeError) as exc_info:
        node.from_ecml({"data": {"__cdata": "[1, 2"}}, strict=True)
    assert exc_info.value.field == "data"


def test_malformed_param_entries_are_skipped(logical_session):
    node = logical_session.instantiate_plugin("blank", {"param": [{"name": "ok", "value": 1}, "junk", {"value": 3}]})
    assert node.get_params() == {"ok": 1}
    assert node.ecml_report.status_of("param") is FieldStatus.IGNORED


def test_inline_asset_media_wins_over_registry(logical_session):
    media = {"id": "img2", "src": "/inline.png", "type": "image"}
    node = logical_session.instantiate_plugin("blank", {"asset": "img2", "assetMedia": media})

    assert node.get_media() == {"img2": media}
    assert "assetMedia" not in node.attributes
    assert node.attributes["asset"] == "img2"
    assert node.to_ecml()["asset"] == "img2"


def test_asset_resolved_through_media_registry(logical_session):
    node = logical_session.instantiate_plugin("blank", {"asset": "img2"})
    assert node.get_media()["img2"]["src"] == "/assets/img2.png"


def test_unknown_asset_leaves_media_unset(logical_session):
    node = logical_session.instantiate_plugin("blank", {"asset": "nope"})
    assert node.get_media() is None
    assert node.ecml_report.status_of("asset") is FieldStatus.IGNORED


def test_hydration_does_not_mutate_input_tree(logical_session):
    tree = _full_tree()
    snapshot = copy.deepcopy(tree)
    logical_session.instantiate_plugin("shape", tree)
    assert tree == snapshot


def test_get_copy_is_full_ecml(logical_session):
    node = logical_session.instantiate_plugin("shape", _full_tree())
    assert node.get_copy() == node.to_ecml()


def test_render_only_keys_stay_out_of_ecml(logical_session):
    node = logical_session.instantiate_plugin("blank")
    node.set_attributes({"left": 1, "top": 2, "width": 3, "height": 4, "fill": "red"})
    out = node.to_ecml()
    for key in ("left", "top", "width", "height"):
        assert key not in out
    assert out["fill"] == "red"


def test_string_geometry_from_markup_is_coerced(logical_session):
    node = logical_session.instantiate_plugin("blank", {"x": "10", "y": "20", "w": "30", "h": "40"})
    assert node.attributes["x"] == pytest.approx(72.0)
    assert node.attributes["h"] == pytest.approx(162.0)
    assert node.ecml_report.complete
    assert node.to_ecml()["w"] == 30.0


def test_non_numeric_geometry_is_ignored(logical_session):
    node = logical_session.instantiate_plugin("blank", {"id": "n", "x": None, "y": "abc", "w": 10})

    assert node.attributes["x"] is None
    assert node.attributes["y"] == "abc"
    assert node.attributes["w"] == pytest.approx(72.0)
    assert node.ecml_report.status_of("x") is FieldStatus.IGNORED
    assert node.ecml_report.status_of("y") is FieldStatus.IGNORED
    assert node.ecml_report.status_of("w") is None
    assert node.to_ecml()["x"] is None


def test_non_numeric_geometry_on_rendered_shape(qt_session, stage):
    shape = qt_session.instantiate_plugin("shape", {"id": "s", "x": None, "y": 10, "w": 20, "h": 20}, stage)
    assert qt_session.surface.contains(shape.render_handle)
    assert shape.ecml_report.status_of("x") is FieldStatus.IGNORED


def test_rendered_round_trip_keeps_attribute_set(qt_session, stage):
    tree = {"id": "s", "x": 10, "y": 20, "w": 30, "h": 40, "visible": True}
    shape = qt_session.instantiate_plugin("shape", tree, stage)

    out = shape.to_ecml()
    out.pop("config", None)

    assert set(out) == set(tree)
    for key in GEOMETRY:
        assert out[key] == pytest.approx(tree[key])


def test_rendered_round_trip_writes_rotation_once_rotated(qt_session, stage):
    shape = qt_session.instantiate_plugin("shape", {"id": "s", "x": 10, "y": 20, "w": 30, "h": 40}, stage)
    qt_session.surface.rotate(shape.render_handle, 45)
    assert shape.to_ecml()["rotate"] == 45.0


def test_rendered_round_trip_keeps_zero_rotation(qt_session, stage):
    shape = qt_session.instantiate_plugin("shape", {"id": "s", "x": 10, "y": 20, "w": 30, "h": 40, "rotate": 0}, stage)
    assert shape.to_ecml()["rotate"] == 0.0
