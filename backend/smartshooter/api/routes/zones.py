"""Zone Presets — read-only access to the zone preset registry.

Invariants:
    - Unknown groups resolve to 3PT (the registry is total), never 404
"""

from fastapi import APIRouter, Query

from smartshooter.core.domain_types import (
    DEFAULT_TRAINING_TYPE, Direction, TrainingType,
)
from smartshooter.core.zone_presets import (
    ordered_zones, resolve_zone_group, zone_groups,
)

router = APIRouter(prefix="/api/v1/zones", tags=["zones"])


@router.get("/presets")
async def list_presets():
    """Zone groups with ltr labels, and the training types the editor offers."""
    return {
        "presets": [
            {"group": g.value, "zones": ordered_zones(g, Direction.LTR)}
            for g in zone_groups()
        ],
        "training_types": [t.value for t in TrainingType],
        "default_training_type": DEFAULT_TRAINING_TYPE.value,
    }


@router.get("/presets/{group}")
async def get_preset(group: str, direction: Direction = Query(Direction.LTR)):
    return {
        "group": resolve_zone_group(group).value,
        "direction": direction.value,
        "zones": ordered_zones(group, direction),
    }
