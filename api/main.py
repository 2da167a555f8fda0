"""
FastAPI Backend for LoL Draft Statistics
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from advanced_stats import (
    calculate_draft_slot_picks,
    calculate_matchups,
    calculate_synergy,
    duo_head_to_head,
    head_to_head,
    pair_table_to_dict,
)
from champion_stats import SORTABLE_FIELDS, compute_champion_stats, sort_champions
from data_processor import DatasetError, LoLDataProcessor

app = FastAPI(
    title="LoL Draft Statistics API",
    description="Champion pick, ban, blind/counter-pick and pairing statistics for esports drafts",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Paths
BASE_DIR = Path(__file__).parent.parent
DATA_PATH = Path(os.environ.get("DRAFT_STATS_DATA", BASE_DIR / "match_data.csv"))

# Snapshot of the current dataset, replaced wholesale on every load
processor = None
snapshot = None
synergy = None
matchups = None
draft_slots = None


def reset_dataset():
    global processor, snapshot, synergy, matchups, draft_slots
    processor = snapshot = synergy = matchups = draft_slots = None


def load_dataset(rows: List[Dict[str, Any]]):
    """Recompute every derived collection from scratch for a new dataset"""
    global processor, snapshot, synergy, matchups, draft_slots

    reset_dataset()
    new_processor = LoLDataProcessor(rows)
    new_snapshot = compute_champion_stats(new_processor)
    games = list(new_snapshot.games.values())

    processor = new_processor
    snapshot = new_snapshot
    synergy = calculate_synergy(games)
    matchups = calculate_matchups(games)
    draft_slots = calculate_draft_slot_picks(games)
    return snapshot


def load_resources():
    """Load the default dataset if one is on disk"""
    if not DATA_PATH.exists():
        print(f"⚠️ No dataset at {DATA_PATH} - upload one via POST /api/dataset")
        return

    try:
        load_dataset(LoLDataProcessor.from_file(DATA_PATH).raw_rows)
        print(f"✅ Dataset loaded ({len(processor.raw_rows):,} rows, {len(snapshot.games):,} games)")
    except DatasetError as e:
        print(f"❌ Error loading dataset: {e}")


@app.on_event("startup")
async def startup_event():
    load_resources()


def require_snapshot():
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Dataset not loaded")
    return snapshot


def find_champion(champion_name: str):
    stat = require_snapshot().get(champion_name)
    if stat is None:
        raise HTTPException(status_code=404, detail="Champion not found")
    return stat


# ==================== SCHEMAS ====================

class DatasetUpload(BaseModel):
    rows: List[Dict[str, Any]]


class DatasetSummary(BaseModel):
    message: str
    rows: int
    stats: Dict[str, int]
    total_games_processed_for_pick_rates: int


# ==================== API ENDPOINTS ====================

@app.get("/")
async def root():
    return {
        "message": "🎮 LoL Draft Statistics API",
        "version": "1.0.0",
        "endpoints": {
            "dataset": "/api/dataset",
            "stats": "/api/stats",
            "unique_values": "/api/unique-values",
            "champions": "/api/champions",
            "head_to_head": "/api/matchups/head-to-head",
            "duo": "/api/matchups/duo",
            "draft_slots": "/api/draft/slots",
            "players": "/api/players",
            "teams": "/api/teams",
        }
    }


@app.post("/api/dataset", response_model=DatasetSummary)
async def upload_dataset(upload: DatasetUpload):
    """Replace the dataset and recalculate every statistic"""
    try:
        result = load_dataset(upload.rows)
    except DatasetError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return DatasetSummary(
        message="Dataset processed",
        rows=len(upload.rows),
        stats=result.stats.to_dict(),
        total_games_processed_for_pick_rates=result.total_games_processed_for_pick_rates,
    )


@app.get("/api/stats")
async def get_stats():
    """Get overall statistics"""
    result = require_snapshot()
    return {
        **result.stats.to_dict(),
        "totalGamesProcessedForPickRates": result.total_games_processed_for_pick_rates,
    }


@app.get("/api/unique-values")
async def get_unique_values():
    return require_snapshot().unique_values.to_dict()


@app.get("/api/champions")
async def get_champions(
    limit: int = 50,
    min_games: int = 0,
    sort_by: str = "presence",
    patch: Optional[str] = None,
    league: Optional[str] = None,
    top_leagues: bool = False,
    tier: Optional[str] = None
):
    """Get champion statistics, optionally recalculated for a patch, league or tier"""
    result = require_snapshot()
    if sort_by not in SORTABLE_FIELDS:
        raise HTTPException(status_code=400, detail=f"sort_by must be one of {SORTABLE_FIELDS}")

    filters = {"patch": patch, "league": league, "top_leagues": top_leagues, "tier": tier}
    if patch or league or top_leagues or tier:
        try:
            result = compute_champion_stats(processor.filtered(**filters))
        except DatasetError:
            return {"count": 0, "champions": [], "filter": filters}

    stats = [s for s in result.champion_list() if s.picks >= min_games]
    stats = sort_champions(stats, sort_by)[:limit]

    return {
        "count": len(stats),
        "totalGamesProcessedForPickRates": result.total_games_processed_for_pick_rates,
        "champions": [s.to_dict() for s in stats],
        "filter": filters,
    }


@app.get("/api/champions/{champion_name}")
async def get_champion(champion_name: str):
    """Get specific champion statistics"""
    return find_champion(champion_name).to_dict()


@app.get("/api/champions/{champion_name}/synergy")
async def get_champion_synergy(champion_name: str, limit: int = 20):
    stat = find_champion(champion_name)
    rows = pair_table_to_dict(synergy, stat.name, len(snapshot.games))
    return {"champion": stat.name, "allies": rows[:limit]}


@app.get("/api/champions/{champion_name}/matchups")
async def get_champion_matchups(champion_name: str, limit: int = 20):
    stat = find_champion(champion_name)
    rows = pair_table_to_dict(matchups, stat.name, len(snapshot.games))
    return {"champion": stat.name, "opponents": rows[:limit]}


@app.get("/api/matchups/head-to-head")
async def get_head_to_head(champion1: str, champion2: str, position: Optional[str] = None):
    """Compare two champions over the games where they faced each other"""
    result = require_snapshot()
    if champion1 == champion2:
        raise HTTPException(status_code=400, detail="Pick two different champions")

    comparison = head_to_head(result.games.values(), champion1, champion2, position)
    if comparison is None:
        raise HTTPException(status_code=404, detail="No games found for this matchup")
    return comparison.to_dict()


@app.get("/api/matchups/duo")
async def get_duo_matchup(
    duo1_champion1: str, duo1_role1: str, duo1_champion2: str, duo1_role2: str,
    duo2_champion1: str, duo2_role1: str, duo2_champion2: str, duo2_role2: str,
):
    """Compare two champion duos over games where they faced each other"""
    result = require_snapshot()
    comparison = duo_head_to_head(
        result.games.values(),
        ((duo1_champion1, duo1_role1), (duo1_champion2, duo1_role2)),
        ((duo2_champion1, duo2_role1), (duo2_champion2, duo2_role2)),
    )
    if comparison is None:
        raise HTTPException(status_code=404, detail="No games found for this duo matchup")
    return comparison.to_dict()


@app.get("/api/draft/slots")
async def get_draft_slots():
    require_snapshot()
    return draft_slots.to_dict()


@app.get("/api/players")
async def get_players(limit: int = 50, min_games: int = 1):
    """Get player statistics"""
    require_snapshot()
    df = processor.get_player_stats()
    df = df[df["games"] >= min_games].head(limit)
    return {"count": len(df), "players": df.to_dict(orient="records")}


@app.get("/api/teams")
async def get_teams(limit: int = 50, min_games: int = 1):
    """Get team statistics"""
    require_snapshot()
    df = processor.get_team_stats()
    df = df[df["games"] >= min_games].head(limit)
    return {"count": len(df), "teams": df.to_dict(orient="records")}
