"""
Champion Statistics Engine
Folds grouped games into per-champion totals and turns them into rates
"""

import logging
from dataclasses import dataclass, field
from functools import reduce
from itertools import combinations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from data_processor import STANDARD_POSITIONS, Game, LoLDataProcessor, SummaryStats, UniqueValues, to_number, to_text
from draft_order import BLUE, PICKS_PER_TEAM, RED, SIDES, get_global_pick_order, get_team_pick_index

logger = logging.getLogger(__name__)

NO_POSITION = "N/A"
PERFECT = "Perfect"


@dataclass(frozen=True)
class FiniteKda:
    value: float

    def formatted(self) -> str:
        return f"{self.value:.2f}"

    def sort_key(self) -> float:
        return self.value

    def to_json(self) -> float:
        return self.value


@dataclass(frozen=True)
class PerfectKda:
    """Deaths were zero but the champion took part in at least one kill."""

    def formatted(self) -> str:
        return PERFECT

    def sort_key(self) -> float:
        return float("inf")

    def to_json(self) -> str:
        return PERFECT


Kda = Union[FiniteKda, PerfectKda]


def calculate_kda(kills: float, deaths: float, assists: float) -> Kda:
    if deaths == 0:
        if kills > 0 or assists > 0:
            return PerfectKda()
        return FiniteKda(kills + assists)
    return FiniteKda((kills + assists) / deaths)


@dataclass
class ChampionTotals:
    """Running counters for one champion while games are folded in."""

    name: str
    picks: int = 0
    wins: int = 0
    losses: int = 0
    kills: float = 0.0
    deaths: float = 0.0
    assists: float = 0.0
    total_games_played: int = 0
    damage_share: float = 0.0
    gold_share: float = 0.0
    bans: int = 0
    positions: Dict[str, int] = field(default_factory=dict)
    pairings: Dict[str, int] = field(default_factory=dict)
    total_lane_matchups: int = 0
    blind_pick_matchups: int = 0
    counter_pick_matchups: int = 0


@dataclass
class PairingCount:
    name: str
    count: int


@dataclass
class ChampionStat:
    name: str
    picks: int
    wins: int
    losses: int
    bans: int
    kills: float
    deaths: float
    assists: float
    total_games_played: int
    damage_share: float
    gold_share: float
    positions: Dict[str, int]
    pairings: List[PairingCount]
    total_lane_matchups: int
    blind_pick_matchups: int
    counter_pick_matchups: int
    win_rate: float
    kda: Kda
    avg_kills: float
    avg_deaths: float
    avg_assists: float
    avg_damage_share: float
    avg_gold_share: float
    pick_rate: float
    ban_rate: float
    presence: float
    blind_pick_rate: float
    counter_pick_rate: float
    main_position: str

    @property
    def win_rate_formatted(self) -> str:
        return f"{self.win_rate:.1f}"

    @property
    def kda_formatted(self) -> str:
        return self.kda.formatted()

    def to_dict(self) -> Dict[str, Any]:
        """Camel-cased record for the dashboard views"""
        return {
            "name": self.name,
            "picks": self.picks,
            "wins": self.wins,
            "losses": self.losses,
            "bans": self.bans,
            "kills": self.kills,
            "deaths": self.deaths,
            "assists": self.assists,
            "totalGamesPlayed": self.total_games_played,
            "damageShare": self.damage_share,
            "goldShare": self.gold_share,
            "positions": dict(self.positions),
            "pairings": [{"name": p.name, "count": p.count} for p in self.pairings],
            "totalLaneMatchups": self.total_lane_matchups,
            "blindPickMatchups": self.blind_pick_matchups,
            "counterPickMatchups": self.counter_pick_matchups,
            "winRate": self.win_rate,
            "winRateFormatted": self.win_rate_formatted,
            "kda": self.kda.to_json(),
            "kdaFormatted": self.kda_formatted,
            "avgKills": self.avg_kills,
            "avgKillsFormatted": f"{self.avg_kills:.1f}",
            "avgDeaths": self.avg_deaths,
            "avgDeathsFormatted": f"{self.avg_deaths:.1f}",
            "avgAssists": self.avg_assists,
            "avgAssistsFormatted": f"{self.avg_assists:.1f}",
            "avgDamageShare": self.avg_damage_share,
            "avgDamageShareFormatted": f"{self.avg_damage_share:.1f}",
            "avgGoldShare": self.avg_gold_share,
            "avgGoldShareFormatted": f"{self.avg_gold_share:.1f}",
            "pickRate": self.pick_rate,
            "pickRateFormatted": f"{self.pick_rate:.1f}",
            "banRate": self.ban_rate,
            "banRateFormatted": f"{self.ban_rate:.1f}",
            "presence": self.presence,
            "presenceFormatted": f"{self.presence:.1f}",
            "blindPickRate": self.blind_pick_rate,
            "blindPickRateFormatted": f"{self.blind_pick_rate:.1f}",
            "counterPickRate": self.counter_pick_rate,
            "counterPickRateFormatted": f"{self.counter_pick_rate:.1f}",
            "mainPosition": self.main_position,
        }


def init_champion_totals(champions: Iterable[str]) -> Dict[str, ChampionTotals]:
    return {name: ChampionTotals(name=name) for name in champions if name}


def _add_basic_stats(totals: Dict[str, ChampionTotals], game: Game) -> None:
    for player in game.players:
        champion = to_text(player.get("champion"))
        champ = totals.get(champion)
        if champ is None:
            logger.warning("Champion %r (game %s) is not in the stat map; row skipped", champion, game.game_id)
            continue

        champ.picks += 1
        champ.total_games_played += 1
        if to_number(player.get("result")) == 1:
            champ.wins += 1
        else:
            champ.losses += 1

        champ.kills += to_number(player.get("kills"))
        champ.deaths += to_number(player.get("deaths"))
        champ.assists += to_number(player.get("assists"))

        position = to_text(player.get("position")).lower() or "unknown"
        champ.positions[position] = champ.positions.get(position, 0) + 1

        champ.damage_share += to_number(player.get("damageshare"))
        champ.gold_share += to_number(player.get("earnedgoldshare"))


def _add_pairings(totals: Dict[str, ChampionTotals], game: Game) -> None:
    for side in SIDES:
        champions = [to_text(p.get("champion")) for p in game.players_on(side)]
        for champ_a, champ_b in combinations(champions, 2):
            if champ_a == champ_b or champ_a not in totals or champ_b not in totals:
                continue
            pairings_a = totals[champ_a].pairings
            pairings_b = totals[champ_b].pairings
            pairings_a[champ_b] = pairings_a.get(champ_b, 0) + 1
            pairings_b[champ_a] = pairings_b.get(champ_a, 0) + 1


def _add_bans(totals: Dict[str, ChampionTotals], game: Game) -> None:
    for team in (game.blue_team, game.red_team):
        if team is None:
            continue
        for i in range(1, PICKS_PER_TEAM + 1):
            banned = to_text(team.get(f"ban{i}"))
            if banned and banned in totals:
                totals[banned].bans += 1


def _lane_player(game: Game, side: str, position: str) -> Optional[Mapping[str, Any]]:
    for player in game.players_on(side):
        if to_text(player.get("position")).lower() == position:
            return player
    return None


def _global_order(game: Game, side: str, player: Mapping[str, Any]) -> Optional[int]:
    pick_index = get_team_pick_index(game.team_row(side), to_text(player.get("champion")))
    return get_global_pick_order(side, pick_index)


def _add_pick_order(totals: Dict[str, ChampionTotals], game: Game) -> None:
    if not game.is_pick_order_eligible:
        logger.debug("Game %s lacks a complete draft; pick order skipped", game.game_id)
        return

    for position in STANDARD_POSITIONS:
        blue_player = _lane_player(game, BLUE, position)
        red_player = _lane_player(game, RED, position)
        if blue_player is None or red_player is None:
            continue

        blue_champ = totals.get(to_text(blue_player.get("champion")))
        red_champ = totals.get(to_text(red_player.get("champion")))
        if blue_champ is None or red_champ is None:
            continue

        blue_order = _global_order(game, BLUE, blue_player)
        red_order = _global_order(game, RED, red_player)
        if blue_order is None or red_order is None:
            continue

        assert blue_order != red_order, (
            f"Game {game.game_id}: {position} picks share global pick order {blue_order}"
        )

        blind, counter = (blue_champ, red_champ) if blue_order < red_order else (red_champ, blue_champ)
        blind.blind_pick_matchups += 1
        counter.counter_pick_matchups += 1
        blue_champ.total_lane_matchups += 1
        red_champ.total_lane_matchups += 1


def fold_game(totals: Dict[str, ChampionTotals], game: Game) -> Dict[str, ChampionTotals]:
    """Fold one game into the running totals and hand them back."""
    _add_basic_stats(totals, game)
    _add_pairings(totals, game)
    _add_bans(totals, game)
    _add_pick_order(totals, game)
    return totals


def accumulate_games(games: Iterable[Game], totals: Dict[str, ChampionTotals]) -> Dict[str, ChampionTotals]:
    return reduce(fold_game, games, totals)


def _main_position(positions: Mapping[str, int], games_played: int) -> str:
    if games_played == 0:
        return NO_POSITION

    main, best = NO_POSITION, 0
    for position, count in positions.items():
        if position in STANDARD_POSITIONS and count > best:
            main, best = position, count
    return main


def _rate(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def finalize_champion(
    champ: ChampionTotals,
    total_games_processed_for_pick_rates: int,
    total_games: int = 0,
) -> ChampionStat:
    """Turn running totals into rates, averages and the sorted pairing list."""
    games = champ.total_games_played
    pick_rate = _rate(champ.picks, total_games_processed_for_pick_rates)
    ban_rate = _rate(champ.bans, total_games)

    return ChampionStat(
        name=champ.name,
        picks=champ.picks,
        wins=champ.wins,
        losses=champ.losses,
        bans=champ.bans,
        kills=champ.kills,
        deaths=champ.deaths,
        assists=champ.assists,
        total_games_played=games,
        damage_share=champ.damage_share,
        gold_share=champ.gold_share,
        positions=dict(champ.positions),
        pairings=[
            PairingCount(name, count)
            for name, count in sorted(champ.pairings.items(), key=lambda item: -item[1])
        ],
        total_lane_matchups=champ.total_lane_matchups,
        blind_pick_matchups=champ.blind_pick_matchups,
        counter_pick_matchups=champ.counter_pick_matchups,
        win_rate=_rate(champ.wins, games),
        kda=calculate_kda(champ.kills, champ.deaths, champ.assists),
        avg_kills=champ.kills / games if games else 0.0,
        avg_deaths=champ.deaths / games if games else 0.0,
        avg_assists=champ.assists / games if games else 0.0,
        avg_damage_share=_rate(champ.damage_share, games),
        avg_gold_share=_rate(champ.gold_share, games),
        pick_rate=pick_rate,
        ban_rate=ban_rate,
        presence=min(pick_rate + ban_rate, 100.0),
        blind_pick_rate=_rate(champ.blind_pick_matchups, champ.total_lane_matchups),
        counter_pick_rate=_rate(champ.counter_pick_matchups, champ.total_lane_matchups),
        main_position=_main_position(champ.positions, games),
    )


def finalize_champions(
    totals: Mapping[str, ChampionTotals],
    total_games_processed_for_pick_rates: int,
    total_games: int = 0,
) -> Dict[str, ChampionStat]:
    return {
        name: finalize_champion(champ, total_games_processed_for_pick_rates, total_games)
        for name, champ in totals.items()
    }


def count_pick_order_eligible(games: Iterable[Game]) -> int:
    return sum(1 for game in games if game.is_pick_order_eligible)


def build_champion_stats(games: Iterable[Game], champions: Iterable[str]) -> Dict[str, ChampionStat]:
    """Fresh totals for `champions`, every game folded in, then finalized."""
    games = list(games)
    totals = accumulate_games(games, init_champion_totals(champions))
    return finalize_champions(totals, count_pick_order_eligible(games), len(games))


@dataclass
class ChampionStatsResult:
    """Snapshot of one calculation over a dataset"""

    champions: Dict[str, ChampionStat]
    games: Dict[Any, Game]
    unique_values: UniqueValues
    stats: SummaryStats
    total_games_processed_for_pick_rates: int

    def champion_list(self) -> List[ChampionStat]:
        return list(self.champions.values())

    def get(self, name: str) -> Optional[ChampionStat]:
        if name in self.champions:
            return self.champions[name]
        lowered = name.lower()
        for champ_name, stat in self.champions.items():
            if champ_name.lower() == lowered:
                return stat
        return None


def compute_champion_stats(processor: LoLDataProcessor) -> ChampionStatsResult:
    """Run the whole calculation for a processor's rows."""
    games = processor.group_games()
    unique_values = processor.get_unique_values()
    game_list = list(games.values())
    eligible = count_pick_order_eligible(game_list)

    champions = build_champion_stats(game_list, unique_values.champions)
    logger.info("Calculated stats for %d champions over %d games (%d complete drafts)",
                len(champions), len(game_list), eligible)

    return ChampionStatsResult(
        champions=champions,
        games=games,
        unique_values=unique_values,
        stats=processor.get_summary_stats(),
        total_games_processed_for_pick_rates=eligible,
    )


SORTABLE_FIELDS = [
    "picks", "wins", "losses", "bans", "total_games_played", "win_rate", "kda",
    "avg_kills", "avg_deaths", "avg_assists", "avg_damage_share", "avg_gold_share",
    "pick_rate", "ban_rate", "presence", "total_lane_matchups",
    "blind_pick_rate", "counter_pick_rate",
]


def sort_champions(stats: Iterable[ChampionStat], sort_by: str = "presence") -> List[ChampionStat]:
    """Descending sort on a numeric field; a Perfect KDA ranks above every number."""
    if sort_by not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort champions by {sort_by!r}")
    if sort_by == "kda":
        return sorted(stats, key=lambda s: s.kda.sort_key(), reverse=True)
    return sorted(stats, key=lambda s: getattr(s, sort_by), reverse=True)
