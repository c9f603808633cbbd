from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SP1Header:
    version: Optional[str] = None
    survey: Optional[str] = None
    datum: Optional[str] = None
    projection: Optional[str] = None
    comments: List[str] = field(default_factory=list)


@dataclass
class SP1Point:
    id: str
    x: float
    y: float
    elevation: Optional[float] = None
    # SP1 sources use positional keys (attr1, attr2, ...); CSV sources keep column names
    attributes: Optional[Dict[str, str]] = None


@dataclass
class SP1Data:
    header: SP1Header = field(default_factory=SP1Header)
    points: List[SP1Point] = field(default_factory=list)

