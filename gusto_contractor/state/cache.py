"""
Per-row memo of what has already been observed in the sheet.

Layout on disk (JSON):

    {
      "<profile>": {
        "<row>": {"sent": true, "name": "...", "completed": "yes",
                  "completed_raw": "YES", "empty": false,
                  "marker_pending": false}
      }
    }

Entries merge on write and are never deleted except by reset(). The
cache only ever lets a run skip work; with it disabled every fact is
re-read from the sheet and the outcome is the same.
"""

import json
import os

from gusto_contractor.utils.logging import log

ENTRY_FIELDS = ("sent", "name", "completed", "completed_raw", "empty", "marker_pending")


class JsonFileStore:
    """Whole-cache JSON file; unreadable or corrupt files load as empty"""

    def __init__(self, path):
        self.path = path

    def load(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            log("warn", f"Cache file {self.path} unreadable ({e}), starting empty")
            return {}
        if not isinstance(data, dict):
            log("warn", f"Cache file {self.path} is not an object, starting empty")
            return {}
        return data

    def save(self, data):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)


class MemoryStore:
    """In-process store for tests and --no-cache style throwaway runs"""

    def __init__(self, data=None):
        self.data = json.loads(json.dumps(data or {}))
        self.saves = 0

    def load(self):
        return json.loads(json.dumps(self.data))

    def save(self, data):
        self.data = json.loads(json.dumps(data))
        self.saves += 1


class RowCache:
    """Profile-scoped view over a store with open/flush/close lifecycle"""

    def __init__(self, store, profile):
        self.store = store
        self.profile = profile
        self._data = None

    def open(self):
        self._data = self.store.load()
        return self

    def close(self):
        if self._data is not None:
            self.flush()
        self._data = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _profile_entries(self, create=False):
        if self._data is None:
            raise RuntimeError("RowCache used before open()")
        entries = self._data.get(self.profile)
        if entries is None and create:
            entries = self._data[self.profile] = {}
        return entries

    def get(self, row):
        entries = self._profile_entries()
        if not entries:
            return None
        entry = entries.get(str(row))
        return dict(entry) if entry is not None else None

    def set(self, row, **fields):
        """Merge fields into the row's entry and persist immediately"""
        unknown = set(fields) - set(ENTRY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown cache fields: {', '.join(sorted(unknown))}")
        entries = self._profile_entries(create=True)
        merged = dict(entries.get(str(row)) or {})
        merged.update(fields)
        entries[str(row)] = merged
        self.flush()
        return dict(merged)

    def reset(self):
        """Drop every entry for the active profile"""
        self._profile_entries()
        self._data[self.profile] = {}
        self.flush()

    def flush(self):
        if self._data is None:
            raise RuntimeError("RowCache used before open()")
        self.store.save(self._data)
