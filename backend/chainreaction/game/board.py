from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import CellAtCapacity, CellOwnershipConflict, NotExplodable, OutOfBounds

Position = Tuple[int, int]

# Up, down, left, right
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))

EXPLOSION = 'explosion'
CAPTURE = 'capture'


@dataclass
class Cell:
    capacity: int
    token_count: int = 0
    owner: Optional[str] = None

    def to_dict(self):
        return {
            'token_count': self.token_count,
            'owner': self.owner,
            'capacity': self.capacity,
        }


@dataclass(frozen=True)
class ExplosionEvent:
    """One affected position of an explosion, with its post-explosion values."""
    row: int
    col: int
    kind: str  # EXPLOSION for the source cell, CAPTURE for each neighbour
    owner: Optional[str]
    token_count: int

    def to_dict(self):
        return {
            'row': self.row,
            'col': self.col,
            'type': self.kind,
            'owner': self.owner,
            'token_count': self.token_count,
        }


class Board:
    """Grid of cells; capacities depend only on position and never change."""

    def __init__(self, rows: int = 6, cols: int = 10):
        self.rows = rows
        self.cols = cols
        self.cells: List[List[Cell]] = self._initialize_cells()

    def _initialize_cells(self) -> List[List[Cell]]:
        return [
            [Cell(capacity=self.capacity_for(row, col)) for col in range(self.cols)]
            for row in range(self.rows)
        ]

    def capacity_for(self, row: int, col: int) -> int:
        """Corner cells hold 2, edge cells 3, everything else 4."""
        row_extreme = row in (0, self.rows - 1)
        col_extreme = col in (0, self.cols - 1)
        if row_extreme and col_extreme:
            return 2
        if row_extreme or col_extreme:
            return 3
        return 4

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise OutOfBounds(f'Position ({row}, {col}) is outside the {self.rows}x{self.cols} board')
        return self.cells[row][col]

    def place_token(self, row: int, col: int, player_id: str) -> Cell:
        cell = self.cell(row, col)
        # Ownership is checked before capacity so a foreign cell is always a conflict
        if cell.owner is not None and cell.owner != player_id:
            raise CellOwnershipConflict()
        if cell.token_count >= cell.capacity:
            raise CellAtCapacity()

        cell.token_count += 1
        cell.owner = player_id
        return cell

    def neighbors_of(self, row: int, col: int) -> List[Position]:
        return [
            (row + dr, col + dc)
            for dr, dc in DIRECTIONS
            if self.in_bounds(row + dr, col + dc)
        ]

    def explode(self, row: int, col: int, owner_id: str) -> List[ExplosionEvent]:
        """Clear an at-capacity cell and push one token into each neighbour.

        Every neighbour is captured by ``owner_id`` whatever it held before.
        """
        cell = self.cell(row, col)
        if cell.token_count < cell.capacity or cell.owner != owner_id:
            raise NotExplodable()

        cell.token_count = 0
        cell.owner = None
        events = [ExplosionEvent(row, col, EXPLOSION, None, 0)]

        for n_row, n_col in self.neighbors_of(row, col):
            neighbor = self.cells[n_row][n_col]
            neighbor.token_count += 1
            neighbor.owner = owner_id
            events.append(ExplosionEvent(n_row, n_col, CAPTURE, owner_id, neighbor.token_count))

        return events

    def settled_candidates(self) -> List[Position]:
        """Positions currently eligible to explode, in row-major order."""
        return [
            (row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self.cells[row][col].owner is not None
            and self.cells[row][col].token_count >= self.cells[row][col].capacity
        ]

    def cells_owned_by(self, player_id: str) -> List[Position]:
        return [
            (row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self.cells[row][col].owner == player_id and self.cells[row][col].token_count > 0
        ]

    def is_settled(self) -> bool:
        return not any(
            cell.token_count >= cell.capacity for line in self.cells for cell in line
        )

    def reset(self) -> None:
        self.cells = self._initialize_cells()

    def to_dict(self):
        return {
            'rows': self.rows,
            'cols': self.cols,
            'cells': [[cell.to_dict() for cell in line] for line in self.cells],
        }
