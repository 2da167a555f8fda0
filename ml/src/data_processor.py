"""
Data Processor for LoL Esports Match Data
Handles loading, row normalization, game grouping and summary tables
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from draft_order import BLUE, PICKS_PER_TEAM, RED
from league_config import get_league_tier, is_top_league

logger = logging.getLogger(__name__)

STANDARD_POSITIONS = ["top", "jng", "mid", "bot", "sup"]
NUMERIC_FIELDS = ["participantid", "result", "kills", "deaths", "assists", "gamelength"]
CHAMPION_FIELDS = ["champion"] + [f"pick{i}" for i in range(1, 6)] + [f"ban{i}" for i in range(1, 6)]
REQUIRED_COLUMNS = ["gameid", "participantid"]

BLUE_TEAM_ID = 100
RED_TEAM_ID = 200
PLAYERS_PER_GAME = 10


class DatasetError(ValueError):
    """The dataset as a whole cannot produce statistics."""


class RowKind(Enum):
    PLAYER = "player"
    TEAM = "team"
    UNCLASSIFIED = "unclassified"


def to_number(value: Any) -> float:
    """Coerce a cell to a float; blanks, garbage, NaN and infinities all become 0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if np.isnan(number) or np.isinf(number):
        return 0.0
    return number


def to_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    return str(value)


def normalize_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Lower-case keys, blank out missing cells, trim champion names and coerce the core numeric fields."""
    normalized = {}
    for key, value in row.items():
        if value is None or (isinstance(value, float) and np.isnan(value)):
            value = ""
        normalized[str(key).lower()] = value

    for field_name in NUMERIC_FIELDS:
        normalized[field_name] = to_number(normalized.get(field_name))
    for field_name in CHAMPION_FIELDS:
        if field_name in normalized:
            normalized[field_name] = to_text(normalized[field_name]).strip()

    normalized["position"] = to_text(normalized.get("position")).lower() or "unknown"
    return normalized


def validate_columns(rows: List[Mapping[str, Any]]) -> None:
    if not rows:
        raise DatasetError("No data provided.")

    columns = set()
    for row in rows:
        columns.update(str(key).lower() for key in row.keys())

    missing = [col for col in REQUIRED_COLUMNS if col not in columns]
    if missing:
        raise DatasetError(
            f"Core columns ({', '.join(missing)}) missing in the data. "
            "Check column names and data integrity."
        )


def classify_row(row: Mapping[str, Any]) -> RowKind:
    if not to_text(row.get("gameid")):
        return RowKind.UNCLASSIFIED

    participant_id = to_number(row.get("participantid"))
    if 1 <= participant_id <= PLAYERS_PER_GAME and to_text(row.get("playername")) and to_text(row.get("champion")):
        return RowKind.PLAYER
    if participant_id in (BLUE_TEAM_ID, RED_TEAM_ID) and to_text(row.get("teamname")):
        return RowKind.TEAM
    return RowKind.UNCLASSIFIED


@dataclass
class Game:
    """All rows of one match: up to ten player rows and the two team rows."""

    game_id: Any
    players: List[Dict[str, Any]] = field(default_factory=list)
    blue_team: Optional[Dict[str, Any]] = None
    red_team: Optional[Dict[str, Any]] = None

    @property
    def is_pick_order_eligible(self) -> bool:
        return (
            self.blue_team is not None
            and self.red_team is not None
            and len(self.players) == PLAYERS_PER_GAME
        )

    def team_row(self, side: str) -> Optional[Dict[str, Any]]:
        if side == BLUE:
            return self.blue_team
        if side == RED:
            return self.red_team
        return None

    def players_on(self, side: str) -> List[Dict[str, Any]]:
        return [p for p in self.players if to_text(p.get("side")) == side]

    def side_won(self, side: str) -> bool:
        team = self.team_row(side)
        if team is not None:
            return to_number(team.get("result")) == 1
        return any(to_number(p.get("result")) == 1 for p in self.players_on(side))

    @property
    def league(self) -> str:
        for row in self.players + [self.blue_team, self.red_team]:
            if row and to_text(row.get("league")):
                return to_text(row.get("league"))
        return ""


def group_games(rows: Iterable[Mapping[str, Any]]) -> Dict[Any, Game]:
    """
    Group classified rows by gameid, keeping first-seen game order.

    Team rows land on a side only when side and participant id agree
    (Blue/100, Red/200); anything else is ignored for that game.
    """
    games: Dict[Any, Game] = {}
    for row in rows:
        kind = classify_row(row)
        if kind is RowKind.UNCLASSIFIED:
            continue

        game_id = row.get("gameid")
        game = games.get(game_id)
        if game is None:
            game = games[game_id] = Game(game_id=game_id)

        if kind is RowKind.PLAYER:
            game.players.append(row)
            continue

        side = to_text(row.get("side"))
        participant_id = to_number(row.get("participantid"))
        if side == BLUE and participant_id == BLUE_TEAM_ID:
            game.blue_team = row
        elif side == RED and participant_id == RED_TEAM_ID:
            game.red_team = row
    return games


def _natural_key(value: str) -> list:
    return [
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in re.split(r"(\d+)", value)
        if part
    ]


@dataclass
class UniqueValues:
    champions: List[str]
    players: List[str]
    teams: List[str]
    leagues: List[str]
    patches: List[str]

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "champions": self.champions,
            "players": self.players,
            "teams": self.teams,
            "leagues": self.leagues,
            "patches": self.patches,
        }


@dataclass
class SummaryStats:
    total_games: int
    total_champions: int
    total_players: int
    total_teams: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalGames": self.total_games,
            "totalChampions": self.total_champions,
            "totalPlayers": self.total_players,
            "totalTeams": self.total_teams,
        }


def filter_rows(
    rows: Iterable[Mapping[str, Any]],
    patch: Optional[str] = "all",
    league: Optional[str] = "all",
    top_leagues: bool = False,
    tier: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Keep rows matching patch and league filters; the top-leagues toggle overrides `league`."""
    filtered = []
    for row in rows:
        if patch and patch != "all" and to_text(row.get("patch")) != patch:
            continue

        row_league = to_text(row.get("league"))
        if top_leagues:
            if not is_top_league(row_league):
                continue
        elif league and league != "all" and row_league != league:
            continue

        if tier and get_league_tier(row_league) != tier.upper():
            continue
        filtered.append(row)

    if not filtered:
        logger.warning(
            "Filter left no rows (patch=%s, league=%s, top_leagues=%s, tier=%s)",
            patch, league, top_leagues, tier,
        )
    return filtered


def load_rows(data_path) -> List[Dict[str, Any]]:
    """Read a CSV or Excel export into row dicts (every cell read as text)."""
    path = Path(data_path)
    if path.suffix.lower() in (".xlsx", ".xls"):
        df = pd.read_excel(path, dtype=str)
    else:
        df = pd.read_csv(path, dtype=str, low_memory=False)
    logger.info("Loaded %d rows, %d columns from %s", len(df), len(df.columns), path)
    return df.to_dict(orient="records")


def _numeric_frame(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    df = df.copy()
    for col in columns:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)
        else:
            df[col] = 0.0
    return df


def _most_common(values: pd.Series):
    counts = values.value_counts()
    return counts.index[0] if len(counts) else "unknown"


class LoLDataProcessor:
    """Normalize LoL esports match rows and split them into players, teams and games"""

    def __init__(self, rows: Iterable[Mapping[str, Any]]):
        self.raw_rows = list(rows)
        self.rows = None
        self.player_rows = None
        self.team_rows = None
        self.games = None

    @classmethod
    def from_file(cls, data_path) -> "LoLDataProcessor":
        return cls(load_rows(data_path))

    def normalize(self) -> List[Dict[str, Any]]:
        validate_columns(self.raw_rows)
        self.rows = [normalize_row(row) for row in self.raw_rows]
        return self.rows

    def filtered(self, patch: Optional[str] = "all", league: Optional[str] = "all",
                 top_leagues: bool = False, tier: Optional[str] = None) -> "LoLDataProcessor":
        """New processor over the normalized rows that pass the filters"""
        if self.rows is None:
            self.normalize()
        return LoLDataProcessor(filter_rows(self.rows, patch, league, top_leagues, tier))

    def separate_team_player_data(self) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """Separate player rows (participantid 1-10) from team rows (100/200)"""
        if self.rows is None:
            self.normalize()

        self.player_rows = []
        self.team_rows = []
        for row in self.rows:
            kind = classify_row(row)
            if kind is RowKind.PLAYER:
                self.player_rows.append(row)
            elif kind is RowKind.TEAM:
                self.team_rows.append(row)

        if not self.player_rows and not self.team_rows:
            raise DatasetError(
                "No valid player rows (participantid 1-10 with playername/champion) or "
                "team rows (participantid 100/200 with teamname) identified in the data."
            )
        if not self.player_rows:
            logger.warning("No valid player rows (participantid 1-10 with playername/champion) identified.")
        if not self.team_rows:
            logger.warning(
                "No valid team rows (participantid 100/200 with teamname) identified. "
                "Ban/pick order data will be unavailable."
            )

        logger.info("Player rows: %d, team rows: %d", len(self.player_rows), len(self.team_rows))
        return self.player_rows, self.team_rows

    def group_games(self) -> Dict[Any, Game]:
        if self.player_rows is None:
            self.separate_team_player_data()
        self.games = group_games(self.rows)
        eligible = sum(1 for game in self.games.values() if game.is_pick_order_eligible)
        logger.info("Grouped %d games (%d complete drafts)", len(self.games), eligible)
        return self.games

    def get_unique_values(self) -> UniqueValues:
        if self.player_rows is None:
            self.separate_team_player_data()

        champions, players, teams, leagues, patches = set(), set(), set(), set(), set()
        for row in self.rows:
            leagues.add(to_text(row.get("league")))
            patches.add(to_text(row.get("patch")))

        for row in self.player_rows:
            champions.add(to_text(row.get("champion")))
            players.add(to_text(row.get("playername")))
            teams.add(to_text(row.get("teamname")))

        for row in self.team_rows:
            teams.add(to_text(row.get("teamname")))
            for i in range(1, PICKS_PER_TEAM + 1):
                champions.add(to_text(row.get(f"pick{i}")))
                champions.add(to_text(row.get(f"ban{i}")))

        return UniqueValues(
            champions=sorted(filter(None, champions)),
            players=sorted(filter(None, players)),
            teams=sorted(filter(None, teams)),
            leagues=sorted(filter(None, leagues)),
            patches=sorted(filter(None, patches), key=_natural_key, reverse=True),
        )

    def get_summary_stats(self) -> SummaryStats:
        unique = self.get_unique_values()
        return SummaryStats(
            total_games=len({row.get("gameid") for row in self.rows}),
            total_champions=len(unique.champions),
            total_players=len(unique.players),
            total_teams=len(unique.teams),
        )

    @property
    def player_df(self) -> pd.DataFrame:
        if self.player_rows is None:
            self.separate_team_player_data()
        return pd.DataFrame(self.player_rows)

    @property
    def team_df(self) -> pd.DataFrame:
        if self.team_rows is None:
            self.separate_team_player_data()
        return pd.DataFrame(self.team_rows)

    def get_player_stats(self) -> pd.DataFrame:
        """Calculate player statistics"""
        df = self.player_df
        if len(df) == 0:
            return pd.DataFrame(columns=["player", "games", "wins", "losses", "winrate"])

        df = _numeric_frame(df, ["result", "kills", "deaths", "assists",
                                 "damageshare", "earnedgoldshare", "cspm", "vspm", "dpm"])
        df["win"] = (df["result"] == 1).astype(int)

        player_stats = df.groupby("playername", sort=False).agg({
            "gameid": "count",
            "win": "sum",
            "kills": "sum",
            "deaths": "sum",
            "assists": "sum",
            "damageshare": "mean",
            "earnedgoldshare": "mean",
            "cspm": "mean",
            "vspm": "mean",
            "dpm": "mean",
            "position": _most_common,
            "champion": [_most_common, "nunique"],
        }).reset_index()

        player_stats.columns = [
            "player", "games", "wins", "kills", "deaths", "assists",
            "avg_damage_share", "avg_gold_share", "avg_cspm", "avg_vspm", "avg_dpm",
            "main_position", "main_champion", "unique_champions",
        ]

        player_stats["losses"] = player_stats["games"] - player_stats["wins"]
        player_stats["winrate"] = (player_stats["wins"] / player_stats["games"] * 100).round(1)
        player_stats["kda"] = np.where(
            player_stats["deaths"] > 0,
            (player_stats["kills"] + player_stats["assists"]) / player_stats["deaths"].replace(0, 1),
            player_stats["kills"] + player_stats["assists"],
        ).round(2)
        for col in ["kills", "deaths", "assists"]:
            player_stats[f"avg_{col}"] = (player_stats[col] / player_stats["games"]).round(1)
        player_stats["avg_damage_share"] = (player_stats["avg_damage_share"] * 100).round(1)
        player_stats["avg_gold_share"] = (player_stats["avg_gold_share"] * 100).round(1)
        player_stats["avg_cspm"] = player_stats["avg_cspm"].round(1)
        player_stats["avg_vspm"] = player_stats["avg_vspm"].round(1)
        player_stats["avg_dpm"] = player_stats["avg_dpm"].round(0)

        return player_stats.sort_values("games", ascending=False, kind="stable")

    def get_team_stats(self) -> pd.DataFrame:
        """Calculate team statistics"""
        df = self.team_df
        if len(df) == 0:
            return pd.DataFrame(columns=["team", "games", "wins", "winrate"])

        optional = [col for col in ["teamkills", "teamdeaths", "dragons", "barons", "towers", "gamelength"]
                    if col in df.columns]
        df = _numeric_frame(df, ["result"] + optional)
        df["win"] = (df["result"] == 1).astype(int)

        agg = {"gameid": "count", "win": "sum"}
        agg.update({col: "mean" for col in optional})
        team_stats = df.groupby("teamname", sort=False).agg(agg).reset_index()
        team_stats.columns = ["team", "games", "wins"] + [f"avg_{col}" for col in optional]

        team_stats["winrate"] = (team_stats["wins"] / team_stats["games"] * 100).round(1)
        if "avg_gamelength" in team_stats.columns:
            team_stats["avg_gamelength"] = (team_stats["avg_gamelength"] / 60).round(1)
        for col in ["avg_teamkills", "avg_teamdeaths"]:
            if col in team_stats.columns:
                team_stats[col] = team_stats[col].round(1)
        for col in ["avg_dragons", "avg_barons", "avg_towers"]:
            if col in team_stats.columns:
                team_stats[col] = team_stats[col].round(2)

        return team_stats.sort_values("winrate", ascending=False, kind="stable")
