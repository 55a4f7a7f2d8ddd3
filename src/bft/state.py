from __future__ import annotations

import logging

from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 30000

CELL_DTYPES: Dict[int, type] = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
    64: np.uint64,
}


@dataclass(frozen=True)
class TapeConfig:
    capacity: Optional[int] = None
    growable: bool = False
    cell_bits: int = 8

    def __post_init__(self) -> None:
        if self.capacity is not None and self.capacity < 0:
            raise ValueError(f'Tape capacity must be positive, got {self.capacity}')
        if self.cell_bits not in CELL_DTYPES:
            supported = ', '.join(str(b) for b in CELL_DTYPES)
            raise ValueError(f'Unsupported cell width {self.cell_bits}; expected one of {supported}')

    @property
    def initial_capacity(self) -> int:
        # None and 0 both mean "use the default".
        return self.capacity or DEFAULT_CAPACITY


@dataclass(eq=False)
class Tape:
    config: TapeConfig = field(default_factory=TapeConfig)
    cells: np.ndarray = field(init=False, repr=False)
    head: int = 0

    def __post_init__(self) -> None:
        self.cells = np.zeros(self.config.initial_capacity, dtype=CELL_DTYPES[self.config.cell_bits])
        self.mask = (1 << self.config.cell_bits) - 1

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def growable(self) -> bool:
        return self.config.growable

    @property
    def value(self) -> int:
        return int(self.cells[self.head])

    @value.setter
    def value(self, v: int) -> None:
        self.cells[self.head] = v & self.mask

    def add(self, delta: int) -> None:
        # Python ints, then mask: numpy scalar overflow would warn instead of wrapping quietly.
        self.cells[self.head] = (int(self.cells[self.head]) + delta) & self.mask

    def grow_to(self, index: int) -> None:
        """Extend the tape rightwards so that ``index`` is addressable."""
        size = len(self.cells)
        if index < size:
            return
        new_size = max(size * 2, index + 1)
        grown = np.zeros(new_size, dtype=self.cells.dtype)
        grown[:size] = self.cells
        self.cells = grown
        logger.debug('tape grown from %d to %d cells', size, new_size)
