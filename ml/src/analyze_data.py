"""
Analyze a LoL esports match export and print champion draft statistics
"""
import argparse
import logging
import sys
from collections import Counter
from pathlib import Path

from champion_stats import SORTABLE_FIELDS, compute_champion_stats, sort_champions
from data_processor import DatasetError, LoLDataProcessor
from league_config import get_league_tier, get_region


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Champion pick/ban/blind-pick statistics for a match export")
    parser.add_argument("data_path", type=Path, help="CSV or Excel file with one row per player/team per game")
    parser.add_argument("--top", type=int, default=15, help="Number of champions to list")
    parser.add_argument("--sort-by", default="presence", choices=SORTABLE_FIELDS)
    parser.add_argument("--patch", default="all")
    parser.add_argument("--league", default="all")
    parser.add_argument("--top-leagues", action="store_true", help="Only LPL, LCK and LEC")
    parser.add_argument("--tier", choices=["S", "A", "B", "C", "D"], help="Only leagues of this tier")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    print(f"📂 Loading data from {args.data_path}...")
    try:
        processor = LoLDataProcessor.from_file(args.data_path).filtered(
            patch=args.patch, league=args.league, top_leagues=args.top_leagues, tier=args.tier)
        result = compute_champion_stats(processor)
    except DatasetError as e:
        print(f"❌ {e}")
        return 1

    summary = result.stats
    print("=" * 60)
    print("📊 DATASET SUMMARY")
    print("=" * 60)
    print(f"🎮 Games: {summary.total_games:,}")
    print(f"📝 Complete drafts (pick rate base): {result.total_games_processed_for_pick_rates:,}")
    print(f"🏆 Champions: {summary.total_champions:,}")
    print(f"👤 Players: {summary.total_players:,}")
    print(f"🛡️ Teams: {summary.total_teams:,}")
    if result.unique_values.patches:
        print(f"🔖 Latest patch: {result.unique_values.patches[0]}")

    games_per_league = Counter(game.league for game in result.games.values())
    if games_per_league:
        print("\n🌍 Leagues:")
        for league, count in games_per_league.most_common():
            print(f"   {league or '?':<10} tier {get_league_tier(league)}  {get_region(league):<16}{count:>6,} games")

    print("\n" + "=" * 60)
    print(f"🏅 TOP {args.top} CHAMPIONS BY {args.sort_by.upper()}")
    print("=" * 60)
    print(f"{'Champion':<16}{'Pos':<6}{'Picks':>6}{'Bans':>6}{'PR%':>7}{'BR%':>7}"
          f"{'WR%':>7}{'KDA':>9}{'Blind%':>8}{'Ctr%':>7}")
    for stat in sort_champions(result.champion_list(), args.sort_by)[:args.top]:
        print(f"{stat.name:<16}{stat.main_position:<6}{stat.picks:>6}{stat.bans:>6}"
              f"{stat.pick_rate:>7.1f}{stat.ban_rate:>7.1f}{stat.win_rate:>7.1f}"
              f"{stat.kda_formatted:>9}{stat.blind_pick_rate:>8.1f}{stat.counter_pick_rate:>7.1f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
