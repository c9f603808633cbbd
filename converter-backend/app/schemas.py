from __future__ import annotations

import math
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from sp1.model import SP1Data, SP1Header, SP1Point


def _finite_or_none(v: Optional[float]) -> Optional[float]:
    if v is None or not math.isfinite(v):
        return None
    return v


class SP1HeaderModel(BaseModel):
    """Survey metadata from the SP1 header block."""

    version: Optional[str] = None
    survey: Optional[str] = None
    datum: Optional[str] = None
    projection: Optional[str] = None
    comments: List[str] = Field(default_factory=list, description="Comment lines in source order")

    def to_header(self) -> SP1Header:
        return SP1Header(
            version=self.version,
            survey=self.survey,
            datum=self.datum,
            projection=self.projection,
            comments=list(self.comments),
        )

    @classmethod
    def from_header(cls, h: SP1Header) -> "SP1HeaderModel":
        return cls(
            version=h.version,
            survey=h.survey,
            datum=h.datum,
            projection=h.projection,
            comments=list(h.comments or []),
        )


class SP1PointModel(BaseModel):
    id: str
    # null stands for a coordinate that could not be parsed (NaN in the core model)
    x: Optional[float] = Field(description="Easting / longitude")
    y: Optional[float] = Field(description="Northing / latitude")
    elevation: Optional[float] = None
    attributes: Optional[Dict[str, str]] = None

    @field_validator("attributes", mode="before")
    @classmethod
    def _stringify_attributes(cls, v):
        if v is None:
            return None
        return {str(k): str(val) for k, val in dict(v).items()}

    def to_point(self) -> SP1Point:
        return SP1Point(
            id=self.id,
            x=math.nan if self.x is None else self.x,
            y=math.nan if self.y is None else self.y,
            elevation=self.elevation,
            attributes=dict(self.attributes) if self.attributes is not None else None,
        )

    @classmethod
    def from_point(cls, p: SP1Point) -> "SP1PointModel":
        return cls(
            id=p.id,
            x=_finite_or_none(p.x),
            y=_finite_or_none(p.y),
            elevation=_finite_or_none(p.elevation),
            attributes=p.attributes,
        )


class SP1DataModel(BaseModel):
    header: SP1HeaderModel = Field(default_factory=SP1HeaderModel)
    points: List[SP1PointModel] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "header": {
                    "version": "1.0",
                    "survey": "Demo",
                    "datum": "WGS84",
                    "comments": ["Test survey"],
                },
                "points": [
                    {"id": "P1", "x": 100.123456, "y": 200.654321, "elevation": 50.25},
                    {"id": "P2", "x": 150.0, "y": 250.0},
                ],
            }
        }
    )

    def to_data(self) -> SP1Data:
        return SP1Data(header=self.header.to_header(), points=[p.to_point() for p in self.points])

    @classmethod
    def from_data(cls, data: SP1Data) -> "SP1DataModel":
        return cls(
            header=SP1HeaderModel.from_header(data.header),
            points=[SP1PointModel.from_point(p) for p in data.points],
        )
