"""
Constants used across the leaderboard.
"""

# Points ledger
MATCH_WIN_POINTS = 10  # Awarded to the winner of every recorded match

# Object store layout
AVATAR_KEY_PREFIX = "avatars"
ASSET_PATH_PREFIX = "/assets/"
LEGACY_ASSET_PATH_PREFIX = "/api/assets/"  # Older rows written by the Next.js proxy
ASSET_CACHE_CONTROL = "public, max-age=31536000, immutable"
