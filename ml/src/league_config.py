"""
League Configuration for dataset filters
Tiers, regions and the top-league set used to narrow a dataset
"""

# Leagues behind the "top leagues" toggle
TOP_LEAGUES = ["LPL", "LCK", "LEC"]

# League Tiers
LEAGUE_TIERS = {
    # Tier S - International
    "S": {
        "name": "International",
        "leagues": ["WLDs", "MSI", "Worlds", "FST"],
    },

    # Tier A - Major Regions
    "A": {
        "name": "Major Regions",
        "leagues": ["LCK", "LPL", "LEC", "LCS", "LTA N", "LTA S"],
    },

    # Tier B - Minor Regions
    "B": {
        "name": "Minor Regions",
        "leagues": ["PCS", "VCS", "LJL", "CBLOL", "LLA", "LCO", "TCL", "LCP"],
    },

    # Tier C - Regional Leagues
    "C": {
        "name": "Regional Leagues",
        "leagues": [
            "LFL", "PRM", "NLC", "LVP SL", "LIT", "EBL", "HLL", "UL",
            "EM", "LAS", "CD", "AL", "RL", "HM", "LRS", "LRN",
            "ESLOL", "GLL", "LFL2", "ROL"
        ],
    },

    # Tier D - Academy/Challenger
    "D": {
        "name": "Academy/Challenger",
        "leagues": ["LCKC", "LCK CL", "NACL", "LDL", "EUM", "LLA CL", "CBLOLA"],
    }
}

# Region mapping
REGIONS = {
    "Korea": ["LCK", "LCKC", "LCK CL", "KeSPA"],
    "China": ["LPL", "LDL", "DCup"],
    "Europe": ["LEC", "LFL", "LFL2", "PRM", "NLC", "LVP SL", "LIT", "EBL",
               "UL", "HLL", "EM", "GLL", "ESLOL", "AL", "HM", "TCL", "EUM"],
    "North America": ["LCS", "NACL", "LTA N"],
    "Latin America": ["LLA", "LTA S", "CD", "LAS", "LLA CL"],
    "Southeast Asia": ["PCS", "VCS", "LCP"],
    "Japan": ["LJL"],
    "Brazil": ["CBLOL", "CBLOLA"],
    "Oceania": ["LCO"],
    "International": ["WLDs", "MSI", "Worlds", "FST", "EWC", "All-Star"],
}


def get_league_tier(league: str) -> str:
    """Get tier for a league"""
    for tier, tier_data in LEAGUE_TIERS.items():
        if league in tier_data["leagues"]:
            return tier
    return "C"


def get_region(league: str) -> str:
    """Get region for a league"""
    for region, leagues in REGIONS.items():
        if league in leagues:
            return region
    return "Other"


def is_top_league(league: str) -> bool:
    return league in TOP_LEAGUES
