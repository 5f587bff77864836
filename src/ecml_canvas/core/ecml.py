"""
ECML marshalling for plugin nodes.

``to_ecml`` turns a node into the attribute tree used for storage and
interchange; ``from_ecml`` hydrates a node from such a tree. Geometry is
held in pixels on a live node and in percent inside the tree.

Field shapes on the wire:
    id, x, y, w, h, rotate, visible, editable   plain values
    data, config                                 {"__cdata": "<json text>"}
    event                                        list of event mappings
    param                                        list of {"name", "value"}
    asset, assetMedia                            media reference / override

Hydration is permissive. Instead of raising on malformed input, every
special field gets a FieldOutcome in the returned ECMLReport, so callers
that want strict validation can inspect it (or pass ``strict=True``).
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ecml_canvas.core.coordinates import percent_to_pixel, pixel_to_percent
from ecml_canvas.core.errors import ECMLDecodeError

if TYPE_CHECKING:
    from ecml_canvas.core.node import PluginNode

logger = logging.getLogger(__name__)

CDATA_KEY = "__cdata"


class FieldStatus(Enum):
    """What hydration did with a special ECML field."""
    ADOPTED = "adopted"      # taken as-is
    DECODED = "decoded"      # JSON text block decoded
    DISCARDED = "discarded"  # known dead field, dropped on purpose
    IGNORED = "ignored"      # malformed, dropped and left unset on the node


@dataclass(frozen=True)
class FieldOutcome:
    field: str
    status: FieldStatus
    detail: str = ""


@dataclass
class ECMLReport:
    """Per-field outcomes of one ``from_ecml`` call."""
    outcomes: List[FieldOutcome] = field(default_factory=list)

    def record(self, name: str, status: FieldStatus, detail: str = "") -> None:
        self.outcomes.append(FieldOutcome(name, status, detail))

    def status_of(self, name: str) -> Optional[FieldStatus]:
        for outcome in self.outcomes:
            if outcome.field == name:
                return outcome.status
        return None

    @property
    def ignored(self) -> List[FieldOutcome]:
        return [o for o in self.outcomes if o.status is FieldStatus.IGNORED]

    @property
    def complete(self) -> bool:
        """True when no field had to be ignored."""
        return not self.ignored


def wrap_text_block(value: Any) -> Dict[str, str]:
    """Encode a value as a JSON text block."""
    return {CDATA_KEY: json.dumps(value)}


def is_text_block(value: Any) -> bool:
    return isinstance(value, Mapping) and bool(value.get(CDATA_KEY))


def _read_block(name: str, value: Any, report: ECMLReport, strict: bool) -> Any:
    """Decode a text block, or adopt the value when it is not wrapped."""
    if not is_text_block(value):
        report.record(name, FieldStatus.ADOPTED)
        return value
    try:
        decoded = json.loads(value[CDATA_KEY])
    except (TypeError, ValueError) as e:
        if strict:
            raise ECMLDecodeError(name, str(e)) from e
        logger.warning(f"Ignoring undecodable ECML '{name}' block: {e}")
        report.record(name, FieldStatus.IGNORED, str(e))
        return None
    report.record(name, FieldStatus.DECODED)
    return decoded


def to_ecml(node: "PluginNode") -> Dict[str, Any]:
    """
    Serialize a node into an ECML attribute tree.

    Live geometry is synced from the render handle first. Unset data,
    config, events and params are left out of the tree entirely.

    Args:
        node: Node to serialize

    Returns:
        New attribute tree in percent space
    """
    if node.render_handle is not None:
        node.sync_dimensions()

    attr = dict(node.get_attributes())
    attr["id"] = node.id
    pixel_to_percent(attr)

    data = node.get_data()
    if data is not None:
        attr["data"] = wrap_text_block(data)

    config = node.get_config()
    if config is not None:
        attr["config"] = wrap_text_block(config)

    events = node.get_events()
    if events is not None:
        attr["event"] = events

    params = node.get_params()
    if params is not None:
        attr["param"] = [{"name": name, "value": value} for name, value in params.items()]

    return attr


def from_ecml(node: "PluginNode", tree: Mapping[str, Any], strict: bool = False) -> ECMLReport:
    """
    Hydrate a node from an ECML attribute tree.

    The tree (shallow-copied) becomes the node's attributes; special
    fields are moved out of it onto the node, then remaining geometry is
    converted to pixels.

    Args:
        node: Node to hydrate
        tree: Attribute tree in percent space
        strict: Raise ECMLDecodeError instead of ignoring bad text blocks

    Returns:
        ECMLReport describing what happened to each special field
    """
    report = ECMLReport()
    attributes = dict(tree)
    node.attributes = attributes

    if "data" in attributes:
        node.data = _read_block("data", attributes.pop("data"), report, strict)

    if "config" in attributes:
        node.config = _read_block("config", attributes.pop("config"), report, strict)

    if "events" in attributes:
        # Legacy field, accepted on input and never written back
        attributes.pop("events")
        report.record("events", FieldStatus.DISCARDED)

    if "event" in attributes:
        node.events = attributes.pop("event")
        report.record("event", FieldStatus.ADOPTED)

    if "param" in attributes:
        _replay_params(node, attributes.pop("param"), report)

    if "asset" in attributes:
        _resolve_asset(node, attributes, report)

    for key in percent_to_pixel(attributes):
        logger.warning(f"Ignoring non-numeric ECML '{key}' on {node.id}: {attributes[key]!r}")
        report.record(key, FieldStatus.IGNORED, "not a number")
    logger.debug(f"Hydrated {node.id} from ECML: {[(o.field, o.status.value) for o in report.outcomes]}")
    return report


def _replay_params(node: "PluginNode", params: Any, report: ECMLReport) -> None:
    if not isinstance(params, list):
        logger.warning(f"Ignoring ECML 'param' on {node.id}: expected a list, got {type(params).__name__}")
        report.record("param", FieldStatus.IGNORED, "not a list")
        return
    skipped = 0
    for param in params:
        if isinstance(param, Mapping) and "name" in param:
            node.add_param(param["name"], param.get("value"))
        else:
            skipped += 1
    if skipped:
        logger.warning(f"Skipped {skipped} malformed param entries on {node.id}")
        report.record("param", FieldStatus.IGNORED, f"{skipped} malformed entries")
    else:
        report.record("param", FieldStatus.ADOPTED)


def _resolve_asset(node: "PluginNode", attributes: Dict[str, Any], report: ECMLReport) -> None:
    asset_id = attributes["asset"]
    if "assetMedia" in attributes:
        media = attributes.pop("assetMedia")
        if isinstance(media, Mapping):
            node.add_media(media)
            report.record("asset", FieldStatus.ADOPTED, "inline assetMedia")
        else:
            report.record("asset", FieldStatus.IGNORED, "assetMedia is not a mapping")
        return
    media = node.lookup_media(asset_id)
    if media is not None:
        node.add_media(media)
        report.record("asset", FieldStatus.ADOPTED, "media registry")
    else:
        logger.debug(f"No media registered for asset '{asset_id}'")
        report.record("asset", FieldStatus.IGNORED, "unknown asset")
