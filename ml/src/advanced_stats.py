"""
Advanced Statistics: synergy, matchups and draft slots
Built on the grouped games produced by the data processor
"""

from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from data_processor import Game, to_number, to_text
from draft_order import PICKS_PER_TEAM, SIDES, get_pick_slot_label

Row = Mapping[str, Any]

PERFORMANCE_FIELDS = {
    "avg_kills": ("kills", 1),
    "avg_deaths": ("deaths", 1),
    "avg_assists": ("assists", 1),
    "avg_damage_share": ("damageshare", 100),
    "avg_gold_share": ("earnedgoldshare", 100),
    "avg_cspm": ("cspm", 1),
    "avg_gold_at10": ("goldat10", 1),
    "avg_gold_at15": ("goldat15", 1),
    "avg_xp_at10": ("xpat10", 1),
    "avg_xp_at15": ("xpat15", 1),
    "avg_cs_at10": ("csat10", 1),
    "avg_cs_at15": ("csat15", 1),
}

LANE_DIFF_FIELDS = ["golddiffat10", "golddiffat15", "xpdiffat10", "xpdiffat15", "csdiffat10", "csdiffat15"]
DUO_DIFF_FIELDS = ["goldat10", "goldat15", "xpat10", "xpat15", "csat10", "csat15"]


def _rate(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _average(values: Iterable[float]) -> float:
    values = list(values)
    return float(np.mean(values)) if values else 0.0


def _leagues_found(leagues: Iterable[str]) -> List[Dict[str, Any]]:
    counts = Counter(leagues)
    return [{"league": league, "games": games} for league, games in counts.most_common()]


# ==================== DRAFT SLOTS ====================

@dataclass
class DraftSlotPicks:
    champion_pick_counts: Dict[str, Dict[str, int]]
    total_picks_per_slot: Dict[str, int]

    def slot_share(self, champion: str, label: str) -> float:
        """Percent of all picks made in `label` that went to `champion`"""
        picks = self.champion_pick_counts.get(champion, {}).get(label, 0)
        return _rate(picks, self.total_picks_per_slot.get(label, 0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "championPickCounts": self.champion_pick_counts,
            "totalPicksPerSlot": self.total_picks_per_slot,
        }


def calculate_draft_slot_picks(games: Iterable[Game]) -> DraftSlotPicks:
    champion_pick_counts: Dict[str, Dict[str, int]] = {}
    total_picks_per_slot: Dict[str, int] = {}

    for game in games:
        for side in SIDES:
            team = game.team_row(side)
            if team is None:
                continue
            for i in range(1, PICKS_PER_TEAM + 1):
                champion = to_text(team.get(f"pick{i}"))
                if not champion:
                    continue
                label = get_pick_slot_label(side, i)
                slots = champion_pick_counts.setdefault(champion, {})
                slots[label] = slots.get(label, 0) + 1
                total_picks_per_slot[label] = total_picks_per_slot.get(label, 0) + 1

    return DraftSlotPicks(champion_pick_counts, total_picks_per_slot)


# ==================== SYNERGY & MATCHUPS ====================

@dataclass
class PairRecord:
    games_played: int = 0
    wins: int = 0

    def to_dict(self, total_games: int) -> Dict[str, Any]:
        return {
            "gamesPlayed": self.games_played,
            "wins": self.wins,
            "winRate": _rate(self.wins, self.games_played),
            "pickRate": _rate(self.games_played, total_games),
        }


def _champions_on(game: Game, side: str) -> List[str]:
    champions = []
    for player in game.players_on(side):
        champion = to_text(player.get("champion"))
        if champion and champion not in champions:
            champions.append(champion)
    return champions


def _record(table: Dict[str, Dict[str, PairRecord]], champ_a: str, champ_b: str, won: bool) -> None:
    record = table.setdefault(champ_a, {}).setdefault(champ_b, PairRecord())
    record.games_played += 1
    if won:
        record.wins += 1


def calculate_synergy(games: Iterable[Game]) -> Dict[str, Dict[str, PairRecord]]:
    """Games played and won by every pair of allied champions (both directions)"""
    synergy: Dict[str, Dict[str, PairRecord]] = {}
    for game in games:
        for side in SIDES:
            won = game.side_won(side)
            for champ_a, champ_b in combinations(_champions_on(game, side), 2):
                _record(synergy, champ_a, champ_b, won)
                _record(synergy, champ_b, champ_a, won)
    return synergy


def calculate_matchups(games: Iterable[Game]) -> Dict[str, Dict[str, PairRecord]]:
    """Games played and won by every champion against every opposing champion"""
    matchups: Dict[str, Dict[str, PairRecord]] = {}
    for game in games:
        blue_side, red_side = SIDES
        blue_won = game.side_won(blue_side)
        red_won = game.side_won(red_side)
        for blue_champ in _champions_on(game, blue_side):
            for red_champ in _champions_on(game, red_side):
                _record(matchups, blue_champ, red_champ, blue_won)
                _record(matchups, red_champ, blue_champ, red_won)
    return matchups


def pair_table_to_dict(table: Mapping[str, Mapping[str, PairRecord]], champion: str,
                       total_games: int) -> List[Dict[str, Any]]:
    """One champion's row of a synergy/matchup table, most frequent partner first"""
    partners = table.get(champion, {})
    rows = [{"champion": partner, **record.to_dict(total_games)} for partner, record in partners.items()]
    return sorted(rows, key=lambda r: -r["gamesPlayed"])


# ==================== HEAD TO HEAD ====================

@dataclass
class HeadToHead:
    champion1: str
    champion2: str
    position: str
    total_games: int
    champion1_wins: int
    champion2_wins: int
    champion1_win_rate: float
    champion2_win_rate: float
    leagues_found: List[Dict[str, Any]]
    champion1_stats: Dict[str, float]
    champion2_stats: Dict[str, float]
    lane_diffs: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "champion1": self.champion1,
            "champion2": self.champion2,
            "position": self.position,
            "totalGames": self.total_games,
            "champion1Wins": self.champion1_wins,
            "champion2Wins": self.champion2_wins,
            "champion1WinRate": self.champion1_win_rate,
            "champion2WinRate": self.champion2_win_rate,
            "leaguesFound": self.leagues_found,
            "champion1Stats": self.champion1_stats,
            "champion2Stats": self.champion2_stats,
            "laneDiffs": self.lane_diffs,
        }


def _performance(players: Sequence[Row]) -> Dict[str, float]:
    return {
        name: _average(to_number(p.get(column)) * scale for p in players)
        for name, (column, scale) in PERFORMANCE_FIELDS.items()
    }


def _position_of(player: Row) -> str:
    return to_text(player.get("position")).lower()


def head_to_head(games: Iterable[Game], champion1: str, champion2: str,
                 position: Optional[str] = None) -> Optional[HeadToHead]:
    """
    Compare two champions over every game where they faced each other.

    Each pairing of a champion1 player and a champion2 player on opposite
    sides counts once; with `position` both must have played it.
    """
    if not champion1 or not champion2 or champion1 == champion2:
        return None
    position = position.lower() if position else None
    if position == "all":
        position = None

    pairs: List[Tuple[Row, Row, str]] = []
    for game in games:
        firsts = [p for p in game.players if to_text(p.get("champion")) == champion1]
        seconds = [p for p in game.players if to_text(p.get("champion")) == champion2]
        for first in firsts:
            for second in seconds:
                if to_text(first.get("side")) == to_text(second.get("side")):
                    continue
                if position and (_position_of(first) != position or _position_of(second) != position):
                    continue
                pairs.append((first, second, game.league))

    if not pairs:
        return None

    total = len(pairs)
    champion1_wins = sum(1 for first, _, _ in pairs if to_number(first.get("result")) == 1)
    champion2_wins = total - champion1_wins

    return HeadToHead(
        champion1=champion1,
        champion2=champion2,
        position=position or _position_of(pairs[0][0]) or "unknown",
        total_games=total,
        champion1_wins=champion1_wins,
        champion2_wins=champion2_wins,
        champion1_win_rate=_rate(champion1_wins, total),
        champion2_win_rate=_rate(champion2_wins, total),
        leagues_found=_leagues_found(league for _, _, league in pairs),
        champion1_stats=_performance([first for first, _, _ in pairs]),
        champion2_stats=_performance([second for _, second, _ in pairs]),
        lane_diffs={
            f"avg_{column}": _average(to_number(first.get(column)) for first, _, _ in pairs)
            for column in LANE_DIFF_FIELDS
        },
    )


# ==================== DUO VS DUO ====================

DuoSlot = Tuple[str, str]


@dataclass
class DuoHeadToHead:
    duo1: Tuple[DuoSlot, DuoSlot]
    duo2: Tuple[DuoSlot, DuoSlot]
    total_games: int
    duo1_wins: int
    duo2_wins: int
    duo1_win_rate: float
    duo2_win_rate: float
    leagues_found: List[Dict[str, Any]]
    duo1_stats: Dict[str, float]
    duo2_stats: Dict[str, float]
    duo_diffs: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duo1": [{"champion": c, "position": p} for c, p in self.duo1],
            "duo2": [{"champion": c, "position": p} for c, p in self.duo2],
            "totalGames": self.total_games,
            "duo1Wins": self.duo1_wins,
            "duo2Wins": self.duo2_wins,
            "duo1WinRate": self.duo1_win_rate,
            "duo2WinRate": self.duo2_win_rate,
            "leaguesFound": self.leagues_found,
            "duo1Stats": self.duo1_stats,
            "duo2Stats": self.duo2_stats,
            "duoDiffs": self.duo_diffs,
        }


def _slot_players(game: Game, slot: DuoSlot) -> List[Row]:
    champion, position = slot
    return [
        p for p in game.players
        if to_text(p.get("champion")) == champion and _position_of(p) == position.lower()
    ]


def _duo_sum(players: Sequence[Row], column: str, scale: float = 1) -> float:
    return sum(to_number(p.get(column)) * scale for p in players)


def _duo_performance(duos: Sequence[Sequence[Row]]) -> Dict[str, float]:
    return {
        name: _average(_duo_sum(duo, column, scale) for duo in duos)
        for name, (column, scale) in PERFORMANCE_FIELDS.items()
    }


def duo_head_to_head(games: Iterable[Game], duo1: Tuple[DuoSlot, DuoSlot],
                     duo2: Tuple[DuoSlot, DuoSlot]) -> Optional[DuoHeadToHead]:
    """Compare two (champion, position) pairs over games where each duo shared a side against the other."""
    matches: List[Tuple[List[Row], List[Row], str]] = []

    def same_side_pairs(game: Game, duo: Tuple[DuoSlot, DuoSlot]) -> List[List[Row]]:
        found = []
        for a in _slot_players(game, duo[0]):
            for b in _slot_players(game, duo[1]):
                same_side = to_text(a.get("side")) == to_text(b.get("side"))
                if same_side and to_number(a.get("participantid")) != to_number(b.get("participantid")):
                    found.append([a, b])
        return found

    for game in games:
        for first in same_side_pairs(game, duo1):
            for second in same_side_pairs(game, duo2):
                if to_text(first[0].get("side")) != to_text(second[0].get("side")):
                    matches.append((first, second, game.league))

    if not matches:
        return None

    total = len(matches)
    duo1_wins = sum(1 for first, _, _ in matches if to_number(first[0].get("result")) == 1)
    duo2_wins = total - duo1_wins
    duo1_stats = _duo_performance([first for first, _, _ in matches])
    duo2_stats = _duo_performance([second for _, second, _ in matches])

    duo_diffs = {
        f"avg_{column}_diff": _average(_duo_sum(first, column) - _duo_sum(second, column)
                                       for first, second, _ in matches)
        for column in DUO_DIFF_FIELDS
    }
    for name in ["avg_kills", "avg_deaths", "avg_assists", "avg_damage_share", "avg_gold_share", "avg_cspm"]:
        duo_diffs[f"{name}_diff"] = duo1_stats[name] - duo2_stats[name]

    return DuoHeadToHead(
        duo1=duo1,
        duo2=duo2,
        total_games=total,
        duo1_wins=duo1_wins,
        duo2_wins=duo2_wins,
        duo1_win_rate=_rate(duo1_wins, total),
        duo2_win_rate=_rate(duo2_wins, total),
        leagues_found=_leagues_found(league for _, _, league in matches),
        duo1_stats=duo1_stats,
        duo2_stats=duo2_stats,
        duo_diffs=duo_diffs,
    )
