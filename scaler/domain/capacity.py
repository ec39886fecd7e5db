from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Final, Union

PU_PER_NODE: Final[int] = 1000
PU_SMALL_STEP: Final[int] = 100


class Units(str, Enum):
    NODES = "NODES"
    PROCESSING_UNITS = "PROCESSING_UNITS"


@dataclass(frozen=True)
class NodeCount:
    nodes: int

    field_name: ClassVar[str] = "nodeCount"

    @property
    def size(self) -> int:
        return self.nodes


@dataclass(frozen=True)
class ProcessingUnits:
    units: int

    field_name: ClassVar[str] = "processingUnits"

    @property
    def size(self) -> int:
        return self.units


Capacity = Union[NodeCount, ProcessingUnits]


def capacity_for(size: int, units: Units) -> Capacity:
    if units is Units.NODES:
        return NodeCount(size)
    return ProcessingUnits(size)


def is_valid_size(size: int, units: Units) -> bool:
    if size < 1:
        return False
    if units is Units.NODES:
        return True
    if size <= PU_PER_NODE:
        return size % PU_SMALL_STEP == 0
    return size % PU_PER_NODE == 0


def _tidy(size: float) -> float:
    # 1000 * 0.7 / 0.7 must not ceil to 1001
    return round(size, 6)


def round_up(size: float, units: Units) -> int:
    size = _tidy(size)
    if units is Units.NODES:
        return max(1, math.ceil(size))
    if size <= PU_PER_NODE:
        return max(PU_SMALL_STEP, math.ceil(size / PU_SMALL_STEP) * PU_SMALL_STEP)
    return math.ceil(size / PU_PER_NODE) * PU_PER_NODE


def round_down(size: float, units: Units) -> int:
    size = _tidy(size)
    if units is Units.NODES:
        return math.floor(size)
    if size < PU_PER_NODE:
        return math.floor(size / PU_SMALL_STEP) * PU_SMALL_STEP
    return math.floor(size / PU_PER_NODE) * PU_PER_NODE


def clamp(size: int, min_size: int, max_size: int) -> int:
    return max(min_size, min(size, max_size))
