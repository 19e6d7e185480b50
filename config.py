import os

from dotenv import load_dotenv

# ============================================================
# ENVIRONMENT
# ============================================================

# Load the .env file before reading any overrides
load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

PORTFOLIO_DATA_FILE = os.environ.get(
    "PORTFOLIO_DATA_FILE", os.path.join(BASE_DIR, "data", "portfolio.json")
)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Chat sessions with no activity for this long are disposed
SESSION_IDLE_TIMEOUT_S = int(os.environ.get("SESSION_IDLE_TIMEOUT_S", "1800"))
SESSION_TOMBSTONE_LIMIT = 1000

# ============================================================
# ASSISTANT TIMINGS (milliseconds)
# ============================================================
REPLY_DELAY_MS = 800        # simulated thinking time before a bot reply
ORNAMENT_DELAY_MS = 250     # header ornaments appear this long after opening
HINT_DURATION_MS = 5000     # onboarding hint lifetime after mount

# How often the browser ticks the session clock while timers are pending
CHAT_TICK_INTERVAL_MS = 100

# ============================================================
# KNOWLEDGE BASE LIMITS
# ============================================================
SKILLS_IN_SUMMARY = 8
PROJECTS_IN_SUMMARY = 6
STRENGTHS_IN_SUMMARY = 4

DEFAULT_ASSISTANT_OWNER = "Ankush"

# ============================================================
# GLOBAL COLOR PALETTE
# ============================================================
GLOBAL_PALETTE = [
    "#4C6A92",  # steel blue
    "#8064A2",  # muted purple
    "#C0504D",  # muted red
    "#9BBB59",  # olive green
    "#4F81BD",  # corporate blue
    "#B1A0C7",  # lavender gray
    "#F2C200",  # muted gold (accent)
    "#8C9CB1",  # soft gray-blue
]
