"""Configuration: sheet profiles, Gusto targets and timing profiles"""

# ========================================
# BROWSER ATTACH
# ========================================
# Chrome started by the launcher with --remote-debugging-port
CDP_URL = "http://127.0.0.1:9222"

# ========================================
# SHEET PROFILES
# ========================================
# Exactly one profile is active per run (--profile / --sheet-b).
# Columns are spreadsheet letters; values are compared case-insensitively.

SHEET_PROFILES = {
    "a": {
        "name": "Sheet A",
        "url_fragment": "docs.google.com/spreadsheets/d/1gBryReeOb7g8zQBcmXZfL57p-kbcC-gC_xkCF_qqoFY",
        "columns": {
            "full_name": "D",
            "email": "F",
            "status": "O",  # "Gusto Sent"
            "verification": "P",  # "GUSTO COMPLETED"
        },
        "status_value": "Yes",
        "completed_yes": "YES",
        "completed_no": "NO",
    },
    "b": {
        "name": "Sheet B",
        "url_fragment": "docs.google.com/spreadsheets/d/1vQm3kRk0cYzWbPz7oQ4c2xUe9T8hJ5nLdA6sGfE1iXw",
        "columns": {
            "full_name": "C",
            "email": "E",
            "status": "M",
            "verification": "N",
        },
        "status_value": "Yes",
        "completed_yes": "YES",
        "completed_no": "NO",
    },
}

DEFAULT_PROFILE = "a"


def get_profile(key=DEFAULT_PROFILE):
    """Return the sheet profile for key (raises KeyError for unknown keys)"""
    if key not in SHEET_PROFILES:
        raise KeyError(
            f"Unknown sheet profile '{key}' (choose from: {', '.join(SHEET_PROFILES)})"
        )
    return SHEET_PROFILES[key]


# ========================================
# GUSTO TARGETS
# ========================================

GUSTO = {
    "base_url": "https://app.gusto.com",
    "add_person_path": "/people/add_team_member/basics",
    "url_fragment": "app.gusto.com",
    "onboarding_fragment": "people/onboarding",
    "roster_fragment": "people/all",
    "contract_start_date": {"month": "02", "day": "17", "year": "2026"},
    "wage_type": "Fixed",
    "worker_type": "individual_contractor",
}

# ========================================
# WORKFLOW WAITS
# ========================================
# All values in milliseconds

WORKFLOW = {
    "ready_timeout": 20000,  # "Loading" gone + action button visible
    "ready_poll": 250,
    "navigation_timeout": 20000,  # URL change after a commit click
    "navigation_poll": 100,
    "settle_idle": 300,  # No DOM mutations for this long
    "settle_cap": 8000,  # ...or give up waiting after this
    "first_field_timeout": 10000,
    "loading_text": "Loading",
    "ready_phrases": ("continue", "send"),
}

VERIFICATION = {
    "search_settle": 600,
    "search_idle": 200,
    "search_idle_cap": 2000,
    "no_results_patterns": (
        r"no (people|team members|results)",
        r"couldn.t find",
        r"\b0 results",
    ),
}

# ========================================
# BATCH PACING
# ========================================
# Spacing submissions out keeps Gusto's fraud heuristics (ThreatMetrix) quiet

DELAYS = {
    "between_contractors": 5000,
    "batch_size": 10,  # take a long break after this many submissions
    "batch_pause": 6000,
    "max_empty_rows": 3,  # consecutive empty rows that end an open-ended run
}

# ========================================
# TIMING PROFILES
# ========================================
# Human-like jitter; every delay is drawn uniformly from [min, max] ms

TIMING_PROFILES = {
    "default": {
        "action_min": 50,
        "action_max": 100,
        "type_min": 10,  # per-character typing delay
        "type_max": 30,
        "focus_min": 80,  # after switching tabs
        "focus_max": 100,
        "cell_settle_min": 80,  # after go-to-cell
        "cell_settle_max": 100,
        "commit_settle_min": 300,  # after pressing Enter in a cell
        "commit_settle_max": 400,
    },
    "fast": {
        "action_min": 25,
        "action_max": 50,
        "type_min": 5,
        "type_max": 15,
        "focus_min": 40,
        "focus_max": 60,
        "cell_settle_min": 50,
        "cell_settle_max": 70,
        "commit_settle_min": 200,
        "commit_settle_max": 250,
    },
}

SPEED_MODE = "default"

# Safety floors - Sheets drops keystrokes below these
_MIN_TYPE_DELAY_MS = 5
_MIN_COMMIT_SETTLE_MS = 150


def get_active_timing():
    """Get the active timing profile, falling back to default if it breaks a floor"""
    timing = TIMING_PROFILES.get(SPEED_MODE, TIMING_PROFILES["default"])

    violations = []
    for key, value in timing.items():
        if key.startswith("type_") and value < _MIN_TYPE_DELAY_MS:
            violations.append(f"{key}={value}ms < {_MIN_TYPE_DELAY_MS}ms minimum")
        if key.startswith("commit_settle") and value < _MIN_COMMIT_SETTLE_MS:
            violations.append(
                f"{key}={value}ms < {_MIN_COMMIT_SETTLE_MS}ms minimum"
            )

    if violations:
        print("⚠️ TIMING PROFILE VIOLATIONS - Falling back to default profile:")
        for violation in violations:
            print(f"  - {violation}")
        return TIMING_PROFILES["default"]

    return timing


TIMING = get_active_timing()

# ========================================
# FILES
# ========================================

CACHE_FILE = ".cache/rows.json"
RESULT_LOG = "log.jsonl"
RESULTS_DIR = "results"
