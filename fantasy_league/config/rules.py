FANTASY_RULES = {
    "squad": {
        "budget": 100.0,  # in millions, total spend across all 15 athletes
        "size": 15,
        "positions": {"GK": 2, "DEF": 5, "MID": 5, "FWD": 3},
        "max_per_club": 3,
        "starters": 11,
        "bench": 4,
    },
    "lineup": {
        # One formation rule for lineup saves and auto-substitution alike
        "min_starters": {"GK": 1, "DEF": 3, "MID": 3, "FWD": 2},
        "bench_goalkeepers": 1,
        # Lineup assigned to a brand new squad: 1-4-4-2 with one of each position on the bench
        "default_starters": {"GK": 1, "DEF": 4, "MID": 4, "FWD": 2},
    },
    "scoring": {
        "appearance": {
            "full_minutes": 60,
            "under_60": 1,
            "60_plus": 2,
        },
        "goal": {"GK": 6, "DEF": 6, "MID": 5, "FWD": 4},
        "assist": 3,
        "clean_sheet": {"GK": 4, "DEF": 4, "MID": 1, "FWD": 0},
        "goals_conceded": {
            "per_goals": 2,        # -1 for every full 2 conceded
            "points": -1,
            "positions": ("GK", "DEF"),
        },
        "penalty_saved": 5,
        "penalty_missed": -2,
        "yellow_card": -1,
        "red_card": -3,
        "own_goal": -2,
        "man_of_the_match": 2,
    },
    "transfers": {
        "free_transfers_min": 1,
        "free_transfers_max": 5,
        "free_transfers_per_round": 1,  # banked each round, capped at the max
        "penalty_per_extra_transfer": 4,
    },
    "chips": {
        "bench_boost": {
            "effect": "bench athletes' points count alongside the starting eleven; no auto-substitution",
            "once_per_season": True,
        },
        "triple_captain": {
            "effect": "captain's points are tripled instead of doubled",
            "once_per_season": True,
        },
        "two_captains": {
            "effect": "captain and vice-captain are both doubled, with no fallback between them",
            "once_per_season": True,
        },
        "wildcard": {
            "effect": "unlimited transfers for one round without a points penalty",
            "once_per_season": True,
        },
    },
}
