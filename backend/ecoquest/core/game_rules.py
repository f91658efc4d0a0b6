"""Game rule constants."""

from __future__ import annotations

# XP needed to go from level L-1 to L is XP_PER_LEVEL_STEP * L
XP_PER_LEVEL_STEP = 100

# Mission completion XP = MISSION_BASE_XP + reward_amount / MISSION_REWARD_XP_DIVISOR
MISSION_BASE_XP = 50
MISSION_REWARD_XP_DIVISOR = 10

# Global corruption-cleared counter a user needs before gated missions unlock
CORRUPTION_UNLOCK_THRESHOLD = 100

# Per-region corruption starts fully corrupted and is floored at zero
REGION_START_CORRUPTION = 100
REGION_MIN_CORRUPTION = 0

REGIONS: list[dict[str, str]] = [
    {"id": "forest_restoration", "name": "Forest Restoration", "description": "Ancient forests corrupted by waste"},
    {"id": "river_cleanup", "name": "River Cleanup", "description": "Polluted rivers need purification"},
    {"id": "urban_pollution", "name": "Urban Pollution", "description": "Cities drowning in waste"},
]
REGION_IDS = frozenset(r["id"] for r in REGIONS)

GODS: dict[str, dict[str, str]] = {
    "zeus": {
        "name": "Zeus",
        "description": "God of Sky and Thunder. Commands lightning and storms.",
        "power": "Thunder Strike",
        "color": "#FFD700",
    },
    "athena": {
        "name": "Athena",
        "description": "Goddess of Wisdom and Strategy. Master of tactical thinking.",
        "power": "Wisdom Shield",
        "color": "#4169E1",
    },
    "artemis": {
        "name": "Artemis",
        "description": "Goddess of Nature and Hunting. Protector of forests and wildlife.",
        "power": "Nature's Blessing",
        "color": "#228B22",
    },
    "persephone": {
        "name": "Persephone",
        "description": "Goddess of Spring and Renewal. Brings life back to corrupted lands.",
        "power": "Spring Renewal",
        "color": "#FF69B4",
    },
}

# Proof scoring bounds
PHOTO_MIN_BYTES = 1024
PHOTO_MAX_BYTES = 10 * 1024 * 1024
VIDEO_MIN_BYTES = 100 * 1024
VIDEO_MAX_BYTES = 100 * 1024 * 1024
PHOTO_CONTENT_TYPES = ("image/jpeg", "image/jpg", "image/png")
VIDEO_CONTENT_TYPES = ("video/mp4", "video/mpeg")
PROOF_MAX_AGE_HOURS = 24
PROOF_APPROVE_AT = 0.7
PROOF_REJECT_BELOW = 0.3

# Presigned proof upload URLs stay valid this long
PROOF_UPLOAD_EXPIRES_SECONDS = 3600
PROOF_UPLOAD_CONTENT_TYPES = {"photo": "image/jpeg", "video": "video/mp4"}

# Quiz score (0-100) at or above which the lesson counts as completed
QUIZ_PASS_SCORE = 70

# Replay guard on state-changing requests
REPLAY_MAX_AGE_SECONDS = 5 * 60
REPLAY_FUTURE_SKEW_SECONDS = 60
REPLAY_SWEEP_ABOVE = 10_000
