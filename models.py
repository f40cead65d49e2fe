"""Legacy four-week training grid.

A training record stores one exercise over 4 weeks x 6 days, each cell a
(reps, weight-kg) pair. Storage keeps the 48 wide columns and the JSON keeps
the legacy ``week{w}d{d}Reps`` / ``week{w}d{d}Kg`` keys; in memory the cells
are a read-only numpy array of shape (4, 6, 2).
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, create_model

from algorithms import MathTools

WEEKS = 4
DAYS = 6
REPS = 0
WEIGHT = 1

GRID_SHAPE = (WEEKS, DAYS, 2)


def cell_field(week: int, day: int, kind: int) -> str:
    """Return the JSON key of a grid cell."""
    suffix = "Reps" if kind == REPS else "Kg"
    return f"week{week}d{day}{suffix}"


def cell_column(week: int, day: int, kind: int) -> str:
    """Return the SQL column of a grid cell."""
    suffix = "reps" if kind == REPS else "kg"
    return f"week{week}_d{day}_{suffix}"


def _cells() -> list[tuple[int, int, int]]:
    return [
        (w, d, k)
        for w in range(1, WEEKS + 1)
        for d in range(1, DAYS + 1)
        for k in (REPS, WEIGHT)
    ]


CELL_FIELDS = [cell_field(w, d, k) for w, d, k in _cells()]
CELL_COLUMNS = [cell_column(w, d, k) for w, d, k in _cells()]


class TrainingRecord:
    """One logged exercise with its 4 x 6 grid of sets."""

    __slots__ = ("id", "profile_id", "exercise", "weeks", "grid")

    def __init__(
        self,
        id: Optional[int] = None,
        profile_id: int = 0,
        exercise: str = "",
        weeks: int = 0,
        grid: Any = None,
    ) -> None:
        if grid is None:
            arr = np.zeros(GRID_SHAPE, dtype=np.int64)
        else:
            arr = np.array(grid, dtype=np.int64)
        if arr.shape != GRID_SHAPE:
            raise ValueError("grid must have shape (4, 6, 2)")
        arr.flags.writeable = False
        self.id = id
        self.profile_id = profile_id
        self.exercise = exercise or ""
        self.weeks = int(weeks or 0)
        self.grid = arr

    def __repr__(self) -> str:
        return (
            f"TrainingRecord(id={self.id!r}, profile_id={self.profile_id!r}, "
            f"exercise={self.exercise!r})"
        )

    @classmethod
    def from_cells(cls, values: Iterable[Any], **kwargs: Any) -> "TrainingRecord":
        """Build a record from 48 cell values in column order."""
        flat = [int(v or 0) for v in values]
        if len(flat) != len(CELL_COLUMNS):
            raise ValueError("expected 48 cell values")
        return cls(grid=np.array(flat).reshape(GRID_SHAPE), **kwargs)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **kwargs: Any) -> "TrainingRecord":
        """Build a record from a legacy JSON mapping; absent cells are 0."""
        values = [data.get(name) or 0 for name in CELL_FIELDS]
        kwargs.setdefault("exercise", data.get("exercise", ""))
        kwargs.setdefault("weeks", data.get("weeks", 0))
        return cls.from_cells(values, **kwargs)

    def cells(self) -> list[int]:
        return [int(v) for v in self.grid.reshape(-1)]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "profileId": self.profile_id,
            "exercise": self.exercise,
            "weeks": self.weeks,
        }
        data.update(zip(CELL_FIELDS, self.cells()))
        return data

    def with_cell(self, week: int, day: int, reps: int, kg: int) -> "TrainingRecord":
        """Return a copy with one cell replaced."""
        grid = self.grid.copy()
        grid[week - 1, day - 1] = (reps, kg)
        return TrainingRecord(self.id, self.profile_id, self.exercise, self.weeks, grid)

    def week_cells(self, week: int) -> np.ndarray:
        return self.grid[week - 1]

    def volume(self) -> float:
        return MathTools.grid_volume(self.grid)

    def max_weight(self) -> float:
        return float(self.grid[..., WEIGHT].max())

    def week_volume(self, week: int) -> float:
        return MathTools.grid_volume(self.week_cells(week))

    def week_max_weight(self, week: int) -> float:
        return float(self.week_cells(week)[:, WEIGHT].max())

    def week_intensity(self, week: int) -> float:
        """Average loaded weight as a percentage of the week's top weight.

        Only cells with a positive weight count. Returns 0 when the week has
        no reps or no weight.
        """
        cells = self.week_cells(week)
        loaded = cells[cells[:, WEIGHT] > 0]
        total_reps = float(loaded[:, REPS].sum()) if loaded.size else 0.0
        top = float(loaded[:, WEIGHT].max()) if loaded.size else 0.0
        if total_reps <= 0 or top <= 0:
            return 0.0
        average = MathTools.grid_volume(loaded) / total_reps
        return average / top * 100


class _PayloadBase(BaseModel):
    # cell keys are used verbatim, no alias generator
    model_config = ConfigDict(populate_by_name=True)


TrainingPayload = create_model(
    "TrainingPayload",
    __base__=_PayloadBase,
    exercise=(str, Field(min_length=1)),
    weeks=(int, Field(default=0, ge=0)),
    profile_id=(Optional[int], Field(default=None, alias="profileId")),
    **{name: (int, Field(default=0, ge=0)) for name in CELL_FIELDS},
)
TrainingPayload.__doc__ = "Request body for creating or updating a training record."
