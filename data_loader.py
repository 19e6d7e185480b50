import json
import logging
import os

import pandas as pd

import config

logger = logging.getLogger(__name__)

# ============================================================
# CONFIG
# ============================================================
COLLECTION_KEYS = (
    "skills",
    "experiences",
    "projects",
    "education",
    "testimonials",
    "blogPosts",
    "navItems",
    "achievements",
    "certifications",
)
SECTION_KEYS = ("hero", "contact")

# In-memory snapshot cache. A reload replaces the object, so callers can use
# identity to detect that the data changed.
_SNAPSHOT_CACHE = None

# ------------------------------------------------------------
# Snapshot Loading
# ------------------------------------------------------------

def load_portfolio_snapshot(path=None) -> dict:
    """
    Reads the portfolio JSON file and normalises its top-level shape.

    Every collection key is guaranteed to be a list and every section key a
    dict, so downstream code only needs `.get()` on individual records.
    A missing or unreadable file produces an empty snapshot.
    """
    path = path or config.PORTFOLIO_DATA_FILE
    raw = {}

    if not os.path.exists(path):
        logger.warning("Portfolio data file not found: %s. Serving empty snapshot.", path)
    else:
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read portfolio data from %s: %s", path, e)
            raw = {}

    if not isinstance(raw, dict):
        logger.warning("Portfolio data in %s is not a JSON object. Ignoring it.", path)
        raw = {}

    return normalize_snapshot(raw)


def normalize_snapshot(raw: dict) -> dict:
    """Coerce the optional top-level fields into predictable container types."""
    snapshot = dict(raw)

    for key in SECTION_KEYS:
        value = snapshot.get(key)
        snapshot[key] = value if isinstance(value, dict) else {}

    for key in COLLECTION_KEYS:
        value = snapshot.get(key)
        if isinstance(value, list):
            snapshot[key] = [item for item in value if isinstance(item, dict)]
        else:
            snapshot[key] = []

    return snapshot


def get_portfolio_snapshot() -> dict:
    """Return the cached snapshot, loading it on first use."""
    global _SNAPSHOT_CACHE
    if _SNAPSHOT_CACHE is None:
        _SNAPSHOT_CACHE = load_portfolio_snapshot()
        logger.info(
            "Loaded portfolio snapshot: %d skills, %d experiences, %d projects.",
            len(_SNAPSHOT_CACHE["skills"]),
            len(_SNAPSHOT_CACHE["experiences"]),
            len(_SNAPSHOT_CACHE["projects"]),
        )
    return _SNAPSHOT_CACHE


def refresh_portfolio_snapshot(path=None) -> dict:
    """Force a reload of the snapshot cache."""
    global _SNAPSHOT_CACHE
    _SNAPSHOT_CACHE = load_portfolio_snapshot(path)
    logger.info("Portfolio snapshot reloaded.")
    return _SNAPSHOT_CACHE

# ------------------------------------------------------------
# Tabular Views (for charts)
# ------------------------------------------------------------

def get_skills_df(snapshot: dict) -> pd.DataFrame:
    """
    Skills as a DataFrame with `name` and numeric `level` columns.
    Entries without a name are dropped; unparseable levels become 0.
    """
    skills = snapshot.get("skills") or []
    df = pd.DataFrame(skills, columns=["name", "level"])
    if df.empty:
        return df

    df = df[df["name"].notna() & (df["name"].astype(str).str.strip() != "")].copy()
    df["level"] = pd.to_numeric(df["level"], errors="coerce").fillna(0).clip(0, 100)
    return df.reset_index(drop=True)
