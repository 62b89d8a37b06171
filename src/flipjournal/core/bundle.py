"""Storage key layout and backup bundle validation - no I/O dependencies."""

import json
from datetime import date

from .entry import EntryFormatError, JournalEntry

ENTRY_PREFIX = "journal_"
PREFERENCE_PREFIX = "flipJournal"

LAST_DATE_KEY = "journal_lastDate"
LAST_PAGE_KEY = "journal_lastPage"
THEME_KEY = "flipJournalTheme"
BIN_ID_KEY = "jsonbin_bin_id"

BUNDLE_PREFIXES = (ENTRY_PREFIX, PREFERENCE_PREFIX)


class InvalidBundleError(Exception):
    """Raised when a backup bundle is malformed."""

    pass


def entry_key(entry_date: date) -> str:
    return f"{ENTRY_PREFIX}{entry_date.isoformat()}"


def date_from_key(key: str) -> date | None:
    """
    Date for a `journal_<date>` key.

    Returns None for every other key, including the preference keys that
    share the journal prefix (journal_lastDate, journal_lastPage).
    """
    if not key.startswith(ENTRY_PREFIX):
        return None
    try:
        parsed = date.fromisoformat(key[len(ENTRY_PREFIX):])
    except ValueError:
        return None
    # fromisoformat also takes compact and week dates; only the canonical key counts
    return parsed if entry_key(parsed) == key else None


def is_bundle_key(key: str) -> bool:
    return key.startswith(BUNDLE_PREFIXES)


def validate_bundle(data: object) -> dict:
    """
    Check a decoded bundle before anything is written.

    Entry keys must hold well-formed entry records (or JSON strings encoding
    one); other bundle keys must hold scalars. Keys outside the bundle prefixes are dropped.
    """
    if not isinstance(data, dict):
        raise InvalidBundleError(f"Backup must be a JSON object, got {type(data).__name__}")

    bundle = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise InvalidBundleError(f"Backup key must be a string: {key!r}")
        if not is_bundle_key(key):
            continue

        if date_from_key(key) is not None:
            if isinstance(value, str):
                try:
                    decoded = json.loads(value)
                except json.JSONDecodeError as e:
                    raise InvalidBundleError(f"Entry {key} is not valid JSON: {e}") from e
            else:
                decoded = value
            try:
                JournalEntry.from_dict(decoded)
            except EntryFormatError as e:
                raise InvalidBundleError(f"Entry {key} is malformed: {e}") from e
        elif not isinstance(value, (str, int, float, bool)) and value is not None:
            raise InvalidBundleError(f"Preference {key} must be a scalar, got {type(value).__name__}")

        bundle[key] = value
    return bundle
