"""Grid State Synchronizer — (round x zone) cell grid for multi-round entry.

Invariants:
    - Cell identity is (bucket, zone); a ZoneGrid never holds two cells per key
    - After ensure_grid the keys are exactly [0, rounds_count) x zone_labels
    - Values survive re-syncs by key, never by position, so direction changes
      cannot misattribute attempts/made
    - Every edit leaves 0 <= made <= attempts on the edited cell
    - Per-bucket directions always have exactly rounds_count entries

Design Decisions:
    - ZoneGrid is a read-only Mapping keyed by (bucket, zone); transitions return
      a new grid instead of mutating cells in place
    - Membership is direction-independent: direction only changes traversal
      order at flatten time
    - Shrinking rounds_count or switching zone group drops cells that no longer
      map to a position; their values are lost on purpose
    - First-zone auto-fill is off by default and toggled per editor
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace

from smartshooter.core.coerce import to_count
from smartshooter.core.domain_types import (
    Direction, DirectionMode, ZoneGroup,
    DEFAULT_DIRECTION, DEFAULT_TRAINING_TYPE, DEFAULT_ZONE_GROUP,
)
from smartshooter.core.session_types import Round
from smartshooter.core.zone_presets import (
    ordered_zones, resolve_direction, resolve_zone_group,
)


GridKey = tuple[int, str]

MIN_ROUNDS_COUNT = 1
DEFAULT_MAX_ROUNDS_COUNT = 20


@dataclass(frozen=True)
class GridCell:
    """A Round positioned in the grid by bucket (round group) and zone."""
    bucket: int
    zone: str
    attempts: int = 0
    made: int = 0
    type: str | None = None
    idx: int = 0  # placeholder, rewritten by the draft assembler
    duration_sec: int | None = None
    notes: str | None = None

    @property
    def key(self) -> GridKey:
        return (self.bucket, self.zone)

    def to_dict(self) -> dict:
        data = {
            "bucket": self.bucket,
            "zone": self.zone,
            "attempts": self.attempts,
            "made": self.made,
            "type": self.type,
        }
        for optional in ("duration_sec", "notes"):
            if getattr(self, optional) is not None:
                data[optional] = getattr(self, optional)
        return data


class ZoneGrid(Mapping):
    """Read-only mapping (bucket, zone) -> GridCell."""

    def __init__(self, cells: Iterable[GridCell] = ()):
        self._cells: dict[GridKey, GridCell] = {}
        if isinstance(cells, ZoneGrid):
            cells = cells.cells()
        for cell in cells:
            # first occurrence wins when the input carries duplicates
            self._cells.setdefault(cell.key, cell)

    def __getitem__(self, key: GridKey) -> GridCell:
        return self._cells[key]

    def __iter__(self) -> Iterator[GridKey]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"ZoneGrid({list(self._cells.values())!r})"

    def cell(self, bucket: int, zone: str) -> GridCell | None:
        return self._cells.get((bucket, zone))

    def cells(self) -> list[GridCell]:
        return list(self._cells.values())

    def bucket_cells(self, bucket: int) -> list[GridCell]:
        return [c for c in self._cells.values() if c.bucket == bucket]

    def with_cells(self, updated: Iterable[GridCell]) -> "ZoneGrid":
        """New grid with the given cells replacing those sharing their keys."""
        merged = dict(self._cells)
        for cell in updated:
            merged[cell.key] = cell
        return ZoneGrid(merged.values())


def ensure_grid(
    prev_cells: Iterable[GridCell],
    rounds_count: int,
    zone_labels: Iterable[str],
    training_type: str | None,
) -> ZoneGrid:
    """Reconcile prev_cells into the full [0, rounds_count) x zone_labels grid.

    Cells outside the cross product are dropped; missing positions get a fresh
    zeroed cell of training_type. Idempotent for identical arguments.
    """
    previous = ZoneGrid(prev_cells)
    labels = list(dict.fromkeys(zone_labels))
    cells = []
    for bucket in range(max(0, rounds_count)):
        for zone in labels:
            existing = previous.cell(bucket, zone)
            cells.append(existing if existing is not None else GridCell(
                bucket=bucket, zone=zone, attempts=0, made=0,
                type=training_type, idx=0,
            ))
    return ZoneGrid(cells)


def handle_grid_change(
    grid: ZoneGrid,
    bucket: int,
    zone: str,
    patch: Mapping,
    first_zone: str | None = None,
    autofill: bool = False,
) -> ZoneGrid:
    """Apply patch to the (bucket, zone) cell, clamping made into [0, attempts].

    With autofill, an attempts change on first_zone is copied to same-bucket
    cells still at 0 attempts. Unknown cells leave the grid unchanged.
    """
    cell = grid.cell(bucket, zone)
    if cell is None:
        return grid

    attempts = to_count(patch["attempts"]) if "attempts" in patch else cell.attempts
    made = to_count(patch["made"]) if "made" in patch else cell.made
    changes: dict = {"attempts": attempts, "made": min(made, attempts)}
    if "type" in patch:
        changes["type"] = patch["type"]
    edited = replace(cell, **changes)

    updated = [edited]
    if autofill and zone == first_zone and edited.attempts != cell.attempts:
        updated.extend(
            replace(sibling, attempts=edited.attempts)
            for sibling in grid.bucket_cells(bucket)
            if sibling.zone != zone and sibling.attempts == 0
        )
    return grid.with_cells(updated)


def resize_directions(
    directions: Iterable[Direction],
    rounds_count: int,
    default: Direction = DEFAULT_DIRECTION,
) -> list[Direction]:
    """Truncate or pad per-bucket directions to rounds_count entries."""
    resized = [resolve_direction(d) for d in directions][:max(0, rounds_count)]
    resized.extend([default] * (rounds_count - len(resized)))
    return resized


def clamp_rounds_count(
    rounds_count: object, max_rounds: int = DEFAULT_MAX_ROUNDS_COUNT,
) -> int:
    return max(MIN_ROUNDS_COUNT, min(max_rounds, to_count(rounds_count)))


@dataclass
class GridEditor:
    """Grid editing state machine — keeps cells in sync with its settings."""

    zone_group: ZoneGroup = DEFAULT_ZONE_GROUP
    rounds_count: int = MIN_ROUNDS_COUNT
    training_type: str = DEFAULT_TRAINING_TYPE.value
    direction_mode: DirectionMode = DirectionMode.GLOBAL
    direction: Direction = DEFAULT_DIRECTION
    directions: list[Direction] = field(default_factory=list)
    autofill_first_zone: bool = False
    max_rounds: int = DEFAULT_MAX_ROUNDS_COUNT
    cells: ZoneGrid = field(default_factory=ZoneGrid)

    def __post_init__(self) -> None:
        self.zone_group = resolve_zone_group(self.zone_group)
        self.direction = resolve_direction(self.direction)
        self.direction_mode = DirectionMode(self.direction_mode)
        self.rounds_count = clamp_rounds_count(self.rounds_count, self.max_rounds)
        self.directions = resize_directions(self.directions, self.rounds_count)
        self.sync()

    # ─── Derived ─────────────────────────────────────────────────

    @property
    def zone_labels(self) -> list[str]:
        return ordered_zones(self.zone_group, Direction.LTR)

    def direction_for(self, bucket: int) -> Direction:
        """Effective direction of a bucket — the flatten-time resolver."""
        if self.direction_mode is DirectionMode.PER_BUCKET:
            if 0 <= bucket < len(self.directions):
                return self.directions[bucket]
            return DEFAULT_DIRECTION
        return self.direction

    def zones_for(self, bucket: int) -> list[str]:
        return ordered_zones(self.zone_group, self.direction_for(bucket))

    # ─── Transitions ─────────────────────────────────────────────

    def sync(self) -> None:
        self.cells = ensure_grid(
            self.cells, self.rounds_count, self.zone_labels, self.training_type,
        )

    def set_rounds_count(self, rounds_count: object) -> None:
        self.rounds_count = clamp_rounds_count(rounds_count, self.max_rounds)
        self.directions = resize_directions(self.directions, self.rounds_count)
        self.sync()

    def set_zone_group(self, zone_group: object) -> None:
        self.zone_group = resolve_zone_group(zone_group)
        self.sync()

    def set_training_type(self, training_type: str) -> None:
        """Applies to cells created from now on; existing cells keep theirs."""
        self.training_type = training_type

    def set_direction_mode(self, mode: DirectionMode) -> None:
        mode = DirectionMode(mode)
        if mode is self.direction_mode:
            return
        if mode is DirectionMode.PER_BUCKET:
            self.directions = [self.direction] * self.rounds_count
        else:
            self.direction = self.directions[0] if self.directions else DEFAULT_DIRECTION
        self.direction_mode = mode

    def set_direction(self, direction: object, bucket: int | None = None) -> bool:
        """Set the global direction, or one bucket's in per-bucket mode.

        Returns False when bucket is out of range in per-bucket mode.
        """
        resolved = resolve_direction(direction)
        if self.direction_mode is DirectionMode.GLOBAL:
            self.direction = resolved
            return True
        if bucket is None or not 0 <= bucket < self.rounds_count:
            return False
        self.directions[bucket] = resolved
        return True

    def toggle_direction(self, bucket: int | None = None) -> bool:
        current = self.direction_for(bucket if bucket is not None else 0)
        flipped = Direction.LTR if current is Direction.RTL else Direction.RTL
        return self.set_direction(flipped, bucket)

    def edit_cell(self, bucket: int, zone: str, patch: Mapping) -> GridCell | None:
        """Patch one cell; returns the updated cell or None if it doesn't exist."""
        if self.cells.cell(bucket, zone) is None:
            return None
        zones = self.zones_for(bucket)
        self.cells = handle_grid_change(
            self.cells, bucket, zone, patch,
            first_zone=zones[0] if zones else None,
            autofill=self.autofill_first_zone,
        )
        return self.cells.cell(bucket, zone)

    def snapshot(self) -> dict:
        return {
            "zone_group": self.zone_group.value,
            "rounds_count": self.rounds_count,
            "training_type": self.training_type,
            "direction_mode": self.direction_mode.value,
            "directions": [
                self.direction_for(b).value for b in range(self.rounds_count)
            ],
            "autofill_first_zone": self.autofill_first_zone,
            "buckets": [
                {
                    "bucket": b,
                    "zones": [
                        self.cells[(b, z)].to_dict() for z in self.zones_for(b)
                    ],
                }
                for b in range(self.rounds_count)
            ],
        }

    # ─── Hydration ───────────────────────────────────────────────

    @classmethod
    def from_rounds(
        cls,
        rounds: Iterable[Round],
        zone_group: object = DEFAULT_ZONE_GROUP,
        training_type: str = DEFAULT_TRAINING_TYPE.value,
        **settings,
    ) -> "GridEditor":
        """Rebuild an editor from a saved, idx-ordered round sequence.

        Rounds are chunked into buckets of one zone-group width; a bucket whose
        zones follow the reversed preset is read back as rtl. Rounds whose zone
        is not in the preset are pruned by the first sync.
        """
        group = resolve_zone_group(zone_group)
        width = len(ordered_zones(group))
        ordered = sorted(rounds, key=lambda r: r.idx)
        rtl_order = ordered_zones(group, Direction.RTL)

        cells = []
        directions = []
        for start in range(0, len(ordered), width):
            bucket = start // width
            chunk = ordered[start:start + width]
            is_rtl = [r.zone for r in chunk] == rtl_order
            directions.append(Direction.RTL if is_rtl else Direction.LTR)
            cells.extend(
                GridCell(
                    bucket=bucket, zone=r.zone, attempts=r.attempts,
                    made=r.made, type=r.type, duration_sec=r.duration_sec,
                    notes=r.notes,
                )
                for r in chunk
            )

        mixed = len(set(directions)) > 1
        return cls(
            zone_group=group,
            rounds_count=max(MIN_ROUNDS_COUNT, len(directions)),
            training_type=training_type,
            direction_mode=DirectionMode.PER_BUCKET if mixed else DirectionMode.GLOBAL,
            direction=directions[0] if directions and not mixed else DEFAULT_DIRECTION,
            directions=directions,
            cells=ZoneGrid(cells),
            **settings,
        )
