import math

import pytest

from builders import game_rows, player_row, team_row
from data_processor import (
    DatasetError,
    LoLDataProcessor,
    RowKind,
    classify_row,
    filter_rows,
    group_games,
    normalize_row,
    to_number,
)


@pytest.mark.parametrize("value,expected", [
    (3, 3.0), ("4", 4.0), (" 2.5 ", 2.5), ("", 0.0), (None, 0.0),
    ("abc", 0.0), (math.nan, 0.0), ([1], 0.0),
    ("inf", 0.0), ("-Infinity", 0.0), (math.inf, 0.0),
])
def test_to_number(value, expected):
    assert to_number(value) == expected


def test_normalize_row_lowercases_keys_and_coerces_numbers():
    row = normalize_row({"GameID": "G1", "ParticipantID": "3", "Kills": "x",
                         "Position": "MID", "Champion": math.nan})
    assert row["gameid"] == "G1"
    assert row["participantid"] == 3.0
    assert row["kills"] == 0.0
    assert row["deaths"] == 0.0
    assert row["position"] == "mid"
    assert row["champion"] == ""


def test_normalize_row_missing_position_is_unknown():
    assert normalize_row({"gameid": "G1"})["position"] == "unknown"


def test_classify_rows():
    player = player_row("G1", 1, "Blue", "Vi", "jng", 1, "T1")
    team = team_row("G1", "Blue", ["Vi"], [], 1, "T1")
    assert classify_row(player) is RowKind.PLAYER
    assert classify_row(team) is RowKind.TEAM

    assert classify_row({**player, "playername": ""}) is RowKind.UNCLASSIFIED
    assert classify_row({**player, "champion": ""}) is RowKind.UNCLASSIFIED
    assert classify_row({**player, "participantid": 11}) is RowKind.UNCLASSIFIED
    assert classify_row({**player, "gameid": ""}) is RowKind.UNCLASSIFIED
    assert classify_row({**team, "teamname": ""}) is RowKind.UNCLASSIFIED
    assert classify_row({**team, "participantid": 150}) is RowKind.UNCLASSIFIED


def test_group_games_complete_game_is_eligible(single_game_rows):
    games = group_games(single_game_rows)
    game = games["G1"]
    assert len(game.players) == 10
    assert game.blue_team["teamname"] == "T1"
    assert game.red_team["teamname"] == "GEN"
    assert game.is_pick_order_eligible
    assert game.side_won("Blue") and not game.side_won("Red")


def test_group_games_ignores_mismatched_team_row():
    rows = game_rows("G1")
    rows[-1] = {**rows[-1], "participantid": 100}
    game = group_games(rows)["G1"]
    assert game.red_team is None
    assert game.blue_team is not None
    assert not game.is_pick_order_eligible


def test_group_games_with_missing_players_is_not_eligible():
    rows = [r for r in game_rows("G1") if r["participantid"] not in (4, 9)]
    game = group_games(rows)["G1"]
    assert len(game.players) == 8
    assert not game.is_pick_order_eligible


def test_empty_dataset_is_rejected():
    with pytest.raises(DatasetError, match="No data provided"):
        LoLDataProcessor([]).normalize()


def test_missing_core_columns_are_named():
    with pytest.raises(DatasetError, match="gameid"):
        LoLDataProcessor([{"participantid": 1, "champion": "Vi"}]).normalize()


def test_dataset_without_player_or_team_rows_is_rejected():
    rows = [{"gameid": "G1", "participantid": 42}, {"gameid": "G2", "participantid": 7}]
    with pytest.raises(DatasetError, match="No valid player rows"):
        LoLDataProcessor(rows).separate_team_player_data()


def test_player_rows_without_team_rows_only_warn(caplog):
    rows = [r for r in game_rows("G1") if r["participantid"] <= 10]
    players, teams = LoLDataProcessor(rows).separate_team_player_data()
    assert len(players) == 10
    assert teams == []
    assert "No valid team rows" in caplog.text


def test_unique_values_and_summary(season_rows):
    processor = LoLDataProcessor(season_rows)
    unique = processor.get_unique_values()

    assert "Zed" in unique.champions
    assert "Kalista" in unique.champions
    assert unique.champions == sorted(unique.champions)
    assert unique.teams == ["GEN", "HLE", "T1"]
    assert unique.leagues == ["LCK", "LEC", "LPL"]
    assert unique.patches == ["14.10", "14.9"]

    summary = processor.get_summary_stats().to_dict()
    assert summary["totalGames"] == 4
    assert summary["totalTeams"] == 3
    assert summary["totalChampions"] == len(unique.champions)


def test_patches_sort_newest_first():
    rows = game_rows("G1", patch="14.9") + game_rows("G2", patch="14.10") + game_rows("G3", patch="13.24")
    assert LoLDataProcessor(rows).get_unique_values().patches == ["14.10", "14.9", "13.24"]


def test_filter_rows(season_rows):
    rows = [normalize_row(r) for r in season_rows]
    assert {r["gameid"] for r in filter_rows(rows, patch="14.9")} == {"G3", "G4"}
    assert {r["gameid"] for r in filter_rows(rows, league="LPL")} == {"G3"}
    assert {r["gameid"] for r in filter_rows(rows, league="LPL", top_leagues=True)} == {"G1", "G2", "G3", "G4"}
    assert {r["gameid"] for r in filter_rows(rows, tier="a")} == {"G1", "G2", "G3", "G4"}
    assert filter_rows(rows, league="LCS") == []


def test_filtered_processor_keeps_normalized_rows(season_rows):
    processor = LoLDataProcessor(season_rows).filtered(league="LEC")
    games = processor.group_games()
    assert list(games) == ["G4"]


def test_player_stats(season_rows):
    stats = LoLDataProcessor(season_rows).get_player_stats().set_index("player")
    top = stats.loc["T1 top"]
    assert top["games"] == 4
    assert top["wins"] == 2
    assert top["losses"] == 2
    assert top["winrate"] == 50.0
    assert top["kda"] == 8.0
    assert top["main_champion"] == "Aatrox"
    assert top["unique_champions"] == 2
    assert top["main_position"] == "top"
    assert top["avg_damage_share"] == 20.0


def test_team_stats(season_rows):
    stats = LoLDataProcessor(season_rows).get_team_stats()
    assert stats.iloc[0]["team"] == "HLE"
    by_team = stats.set_index("team")
    assert by_team.loc["T1", "games"] == 4
    assert by_team.loc["T1", "wins"] == 2
    assert by_team.loc["GEN", "winrate"] == pytest.approx(33.3)


def test_normalize_row_trims_champion_cells():
    row = normalize_row({"gameid": "G1", "Champion": " Ahri ", "Pick1": "Vi  ", "Ban2": " Zed", "playername": " Faker "})
    assert row["champion"] == "Ahri"
    assert row["pick1"] == "Vi"
    assert row["ban2"] == "Zed"
    assert row["playername"] == " Faker "
    assert "pick2" not in row
