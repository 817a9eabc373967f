RESPONSE_LABEL_PREFIX = "Response "

DEFAULT_TEMPERATURE = 1.0
MIN_TEMPERATURE = 0.001
OUTLIER_HIGH_CONFIDENCE = 0.95
OUTLIER_LOW_CONFIDENCE = 0.10
DEFAULT_CONFIDENCE = 0.5

DEFAULT_MODE = "council"

DATE_PRESET_DAYS: dict[str, int | None] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "all": None,
}
DEFAULT_DATE_PRESET = "30d"

# Average response time at which the leaderboard score bottoms out at 0
LEADERBOARD_TIME_CAP_MS = 60_000

BYE_REASONING = "Bye - auto-advance"
DEFAULT_WIN_REASONING = "Judge verdict unavailable. Contestant A advances by default."

DEFAULT_CONFIG_FILE = "deliberation.yml"
DEFAULT_LOG_CACHE_SIZE = 1000
