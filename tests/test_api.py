import pytest
from fastapi.testclient import TestClient

import api.main as main


@pytest.fixture
def client():
    main.reset_dataset()
    yield TestClient(main.app)
    main.reset_dataset()


@pytest.fixture
def loaded_client(client, season_rows):
    response = client.post("/api/dataset", json={"rows": season_rows})
    assert response.status_code == 200
    return client


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["version"] == "1.0.0"
    assert "champions" in body["endpoints"]


def test_endpoints_need_a_dataset(client):
    assert client.get("/api/stats").status_code == 503
    assert client.get("/api/champions").status_code == 503
    assert client.get("/api/draft/slots").status_code == 503


def test_upload_rejects_empty_dataset(client):
    response = client.post("/api/dataset", json={"rows": []})
    assert response.status_code == 422
    assert "No data provided" in response.json()["detail"]
    assert client.get("/api/stats").status_code == 503


def test_failed_upload_clears_previous_snapshot(loaded_client):
    response = loaded_client.post("/api/dataset", json={"rows": [{"champion": "Vi"}]})
    assert response.status_code == 422
    assert loaded_client.get("/api/stats").status_code == 503


def test_upload_summary(client, season_rows):
    body = client.post("/api/dataset", json={"rows": season_rows}).json()
    assert body["rows"] == len(season_rows)
    assert body["stats"]["totalGames"] == 4
    assert body["total_games_processed_for_pick_rates"] == 4


def test_stats_and_unique_values(loaded_client):
    stats = loaded_client.get("/api/stats").json()
    assert stats["totalGamesProcessedForPickRates"] == 4
    assert stats["totalTeams"] == 3

    unique = loaded_client.get("/api/unique-values").json()
    assert unique["leagues"] == ["LCK", "LEC", "LPL"]
    assert "Zed" in unique["champions"]


def test_champions_sorted_by_picks(loaded_client):
    body = loaded_client.get("/api/champions", params={"sort_by": "picks", "limit": 3}).json()
    assert body["count"] == 3
    assert [c["picks"] for c in body["champions"]] == [4, 4, 4]


def test_champions_min_games_drops_ban_only(loaded_client):
    body = loaded_client.get("/api/champions", params={"min_games": 1, "limit": 100}).json()
    names = {c["name"] for c in body["champions"]}
    assert "Zed" not in names
    assert "Aatrox" in names


def test_champions_reject_unknown_sort(loaded_client):
    assert loaded_client.get("/api/champions", params={"sort_by": "name"}).status_code == 400


def test_champions_filtered_by_league(loaded_client):
    body = loaded_client.get("/api/champions", params={"league": "LEC", "min_games": 1}).json()
    assert body["totalGamesProcessedForPickRates"] == 1
    assert body["count"] == 10
    assert all(c["pickRate"] == 100.0 for c in body["champions"])


def test_champions_filter_without_rows(loaded_client):
    body = loaded_client.get("/api/champions", params={"league": "LCS"}).json()
    assert body["count"] == 0
    assert body["champions"] == []


def test_single_champion(loaded_client):
    ahri = loaded_client.get("/api/champions/ahri").json()
    assert ahri["name"] == "Ahri"
    assert ahri["picks"] == 4
    assert loaded_client.get("/api/champions/Teemo").status_code == 404


def test_champion_synergy_and_matchups(loaded_client):
    synergy = loaded_client.get("/api/champions/Aatrox/synergy").json()
    assert synergy["allies"][0]["champion"] == "Ahri"

    matchups = loaded_client.get("/api/champions/Aatrox/matchups", params={"limit": 5}).json()
    assert len(matchups["opponents"]) == 5
    assert loaded_client.get("/api/champions/Teemo/matchups").status_code == 404


def test_head_to_head(loaded_client):
    params = {"champion1": "Aatrox", "champion2": "Gnar", "position": "top"}
    body = loaded_client.get("/api/matchups/head-to-head", params=params).json()
    assert body["totalGames"] == 3
    assert body["champion1WinRate"] == 100.0


def test_head_to_head_errors(loaded_client):
    same = {"champion1": "Aatrox", "champion2": "Aatrox"}
    assert loaded_client.get("/api/matchups/head-to-head", params=same).status_code == 400
    allies = {"champion1": "Aatrox", "champion2": "Ahri"}
    assert loaded_client.get("/api/matchups/head-to-head", params=allies).status_code == 404


def test_duo_matchup(loaded_client):
    params = {
        "duo1_champion1": "Jinx", "duo1_role1": "bot", "duo1_champion2": "Thresh", "duo1_role2": "sup",
        "duo2_champion1": "Xayah", "duo2_role1": "bot", "duo2_champion2": "Rakan", "duo2_role2": "sup",
    }
    body = loaded_client.get("/api/matchups/duo", params=params).json()
    assert body["totalGames"] == 3

    params["duo1_role1"] = "mid"
    assert loaded_client.get("/api/matchups/duo", params=params).status_code == 404


def test_draft_slots(loaded_client):
    body = loaded_client.get("/api/draft/slots").json()
    assert body["totalPicksPerSlot"]["B1"] == 4
    assert body["championPickCounts"]["Aatrox"]["R1"] == 3


def test_players_and_teams(loaded_client):
    players = loaded_client.get("/api/players", params={"limit": 5}).json()
    assert players["count"] == 5
    assert players["players"][0]["games"] == 4

    teams = loaded_client.get("/api/teams").json()
    assert teams["count"] == 3
    assert teams["teams"][0]["team"] == "HLE"


def test_head_to_head_all_positions(loaded_client):
    params = {"champion1": "Aatrox", "champion2": "Gnar", "position": "All"}
    response = loaded_client.get("/api/matchups/head-to-head", params=params)
    assert response.status_code == 200
    assert response.json()["totalGames"] == 3
