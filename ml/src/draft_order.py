"""
Draft order helpers
Maps a team's own pick sequence onto the shared ten-pick draft order
"""

from typing import Any, Mapping, Optional

BLUE = "Blue"
RED = "Red"
SIDES = (BLUE, RED)

PICKS_PER_TEAM = 5

# Blue opens the draft, Red answers with two picks, then the sides
# alternate in pairs until Red takes the last pick.
GLOBAL_PICK_ORDER = {
    (BLUE, 1): 1,
    (RED, 1): 2,
    (RED, 2): 3,
    (BLUE, 2): 4,
    (BLUE, 3): 5,
    (RED, 3): 6,
    (RED, 4): 7,
    (BLUE, 4): 8,
    (BLUE, 5): 9,
    (RED, 5): 10,
}

DRAFT_PICK_SLOTS = {
    BLUE: {1: "B1", 2: "B2", 3: "B3", 4: "B4", 5: "B5"},
    RED: {1: "R1", 2: "R2", 3: "R3", 4: "R4", 5: "R5"},
}


def get_global_pick_order(side: str, team_pick_index: Optional[int]) -> Optional[int]:
    """Global draft position (1-10) of a team's N-th pick, or None when unknown."""
    if team_pick_index is None:
        return None
    return GLOBAL_PICK_ORDER.get((side, team_pick_index))


def get_team_pick_index(team_row: Optional[Mapping[str, Any]], champion: str) -> Optional[int]:
    """
    Position of `champion` in the team's own pick order.

    Scans pick1..pick5 of the team row and returns the first slot whose
    value equals the champion name, or None if the champion was never
    listed (or there is no team row).
    """
    if not team_row or not champion:
        return None
    for i in range(1, PICKS_PER_TEAM + 1):
        value = team_row.get(f"pick{i}")
        if value is not None and str(value) == champion:
            return i
    return None


def get_pick_slot_label(side: str, team_pick_index: int) -> Optional[str]:
    return DRAFT_PICK_SLOTS.get(side, {}).get(team_pick_index)
