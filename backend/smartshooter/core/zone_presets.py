"""Zone Preset Registry — ordered zone labels per zone group.

Invariants:
    - Every preset holds exactly 5 labels, listed left-to-right
    - ordered_zones is total: unknown group -> 3PT, unknown direction -> ltr
    - Returned lists are fresh copies; the registry itself is never mutated
"""

from smartshooter.core.domain_types import (
    Direction, ZoneGroup, DEFAULT_ZONE_GROUP,
)


ZONE_PRESETS: dict[ZoneGroup, tuple[str, ...]] = {
    ZoneGroup.THREE_POINT: (
        "Left Corner", "Left Wing 3pt", "Top of Key 3pt",
        "Right Wing 3pt", "Right Corner",
    ),
    ZoneGroup.MIDRANGE: (
        "Left Short Corner", "Left Elbow", "Free Throw",
        "Right Elbow", "Right Short Corner",
    ),
    ZoneGroup.PAINT: (
        "Left Block", "Left Low Paint", "Restricted Area",
        "Right Low Paint", "Right Block",
    ),
}

# Spellings used by older session documents
_GROUP_ALIASES: dict[str, ZoneGroup] = {
    "3pt": ZoneGroup.THREE_POINT,
    "three_point": ZoneGroup.THREE_POINT,
    "mid": ZoneGroup.MIDRANGE,
    "midrange": ZoneGroup.MIDRANGE,
    "paint": ZoneGroup.PAINT,
}


def resolve_zone_group(group: object) -> ZoneGroup:
    """Map any input to a known ZoneGroup, falling back to 3PT."""
    if isinstance(group, ZoneGroup):
        return group
    if isinstance(group, str):
        try:
            return ZoneGroup(group)
        except ValueError:
            return _GROUP_ALIASES.get(group.strip().lower(), DEFAULT_ZONE_GROUP)
    return DEFAULT_ZONE_GROUP


def resolve_direction(direction: object) -> Direction:
    if isinstance(direction, Direction):
        return direction
    return Direction.RTL if direction == Direction.RTL.value else Direction.LTR


def ordered_zones(group: object, direction: object = Direction.LTR) -> list[str]:
    """Zone labels for group in traversal order."""
    labels = list(ZONE_PRESETS[resolve_zone_group(group)])
    if resolve_direction(direction) is Direction.RTL:
        labels.reverse()
    return labels


def zone_groups() -> list[ZoneGroup]:
    return list(ZONE_PRESETS)


def group_for_zone(zone: str) -> ZoneGroup | None:
    """First preset that contains this exact label, if any."""
    for group, labels in ZONE_PRESETS.items():
        if zone in labels:
            return group
    return None
