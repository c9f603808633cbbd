from __future__ import annotations

import json
import math
from typing import Any, Dict, List

from sp1.model import SP1Data, SP1Point

DEFAULT_CRS = "EPSG:4326"


def point_feature(point: SP1Point) -> Dict[str, Any]:
    # Missing elevation flattens to 0 in the geometry; properties keep it absent
    z = point.elevation if point.elevation is not None else 0
    props: Dict[str, Any] = {"id": point.id}
    if point.elevation is not None:
        props["elevation"] = point.elevation
    if point.attributes:
        props.update(point.attributes)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [point.x, point.y, z]},
        "properties": props,
    }


def to_geojson(data: SP1Data) -> Dict[str, Any]:
    """Project SP1Data into a GeoJSON FeatureCollection, one Feature per point in order.

    No reprojection happens: the ``crs`` member just names the header projection
    (or EPSG:4326 when none is set).
    """
    features: List[Dict[str, Any]] = [point_feature(p) for p in data.points]
    return {
        "type": "FeatureCollection",
        "features": features,
        "crs": {
            "type": "name",
            "properties": {"name": data.header.projection or DEFAULT_CRS},
        },
    }


def _json_safe(obj: Any) -> Any:
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_json_safe(v) for v in obj]
    return obj


def dumps_geojson(obj: Dict[str, Any]) -> str:
    """Serialize with 2-space indent; NaN/Infinity become null."""
    return json.dumps(_json_safe(obj), indent=2, ensure_ascii=False)


__all__ = ["to_geojson", "point_feature", "dumps_geojson", "DEFAULT_CRS"]
