import pytest

from builders import BLUE_PICKS, RED_PICKS, game_rows


@pytest.fixture
def single_game_rows():
    return game_rows("G1", blue_bans=["Zed"], red_bans=["Azir"])


@pytest.fixture
def season_rows():
    rows = []
    rows += game_rows("G1", blue_bans=["Zed", "Azir"], red_bans=["Kalista"])
    rows += game_rows("G2", blue=RED_PICKS, red=BLUE_PICKS, blue_wins=False,
                      blue_team="GEN", red_team="T1", red_bans=["Zed"])
    rows += game_rows("G3", blue=["Renekton", "Vi", "Azir", "Kalista", "Rakan"],
                      red=["Aatrox", "Sejuani", "Ahri", "Xayah", "Thresh"],
                      blue_team="HLE", red_team="T1", league="LPL", patch="14.9")
    rows += game_rows("G4", blue=["Gnar", "Vi", "Orianna", "Jinx", "Thresh"],
                      red=["Aatrox", "Sejuani", "Ahri", "Xayah", "Rakan"],
                      blue_wins=False, league="LEC", patch="14.9")
    return rows
