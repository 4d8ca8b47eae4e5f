"""
World Archery constants

Single source of truth for category distances, score values, the set
system used in elimination rounds and the curated seeding tables.
"""

# =====================================================
# Categories and distances
# =====================================================

AGE_CATEGORIES = ("u10", "u13", "u15", "u18", "u21", "senior", "master", "open")

CATEGORY_LABELS = {
    "u10": "Under 10",
    "u13": "Under 13",
    "u15": "Under 15",
    "u18": "Under 18",
    "u21": "Under 21",
    "senior": "Senior",
    "master": "Master (50+)",
    "open": "Open",
}

GENDER_LABELS = {
    "male": "Men",
    "female": "Women",
}

# Outdoor distances in meters
OUTDOOR_DISTANCES = {
    "u10": 20,
    "u13": 40,
    "u15": 50,
    "u18": 60,
    "u21": 70,
    "senior": 70,
    "master": 70,
    "open": 70,
}

INDOOR_DISTANCES = {category: 18 for category in AGE_CATEGORIES}


# =====================================================
# Targets
# =====================================================

TARGET_POSITIONS = ("A", "B", "C", "D")
SHOOTING_TURNS = ("AB", "AB", "CD", "CD")  # indexed by position
ARCHERS_PER_TARGET = len(TARGET_POSITIONS)


# =====================================================
# Scores
# =====================================================

SCORE_X = 11     # inner ten
SCORE_MAX = 10
SCORE_MIN = 0    # miss

SCORE_LABELS = {SCORE_X: "X", SCORE_MIN: "M"}
SCORE_LABELS.update({value: str(value) for value in range(1, SCORE_MAX + 1)})


# =====================================================
# Set system (elimination rounds)
# =====================================================

POINTS_TO_WIN = 6
POINTS_FOR_SET_WIN = 2
POINTS_FOR_SET_TIE = 1
POINTS_FOR_SET_LOSS = 0
ARROWS_PER_SET = 3
MAX_SETS = 5
SHOOTOFF_SET_NUMBER = 99


# =====================================================
# Brackets
# =====================================================

BRACKET_SIZES = (8, 16, 32, 64, 128)
MIN_BRACKET_ARCHERS = 2
MIN_BRONZE_ARCHERS = 4     # both semifinals contested
BRONZE_ROUND = 0

# Round 1 matchups, listed top of the bracket to bottom.
# Seed 1 sits in the first match and seed 2 in the last, so they can only
# meet in the final.
BRACKET_SEEDINGS = {
    8: [
        (1, 8), (4, 5),
        (3, 6), (2, 7),
    ],
    16: [
        (1, 16), (8, 9), (5, 12), (4, 13),
        (3, 14), (6, 11), (7, 10), (2, 15),
    ],
    32: [
        (1, 32), (16, 17), (9, 24), (8, 25),
        (5, 28), (12, 21), (13, 20), (4, 29),
        (3, 30), (14, 19), (11, 22), (6, 27),
        (7, 26), (10, 23), (15, 18), (2, 31),
    ],
}

# rounds-from-final -> label
ROUND_NAMES = {
    1: "Final",
    2: "Semifinal",
    3: "Quarterfinals",
    4: "1/8",
    5: "1/16",
    6: "1/32",
    7: "1/64",
}
BRONZE_ROUND_NAME = "Bronze"


# =====================================================
# Tournament lifecycle
# =====================================================

ACTIVE_TOURNAMENT_STATUSES = ("qualification", "elimination")
