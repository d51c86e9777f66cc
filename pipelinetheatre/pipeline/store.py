"""
Representation stores.

Every store offers the same small interface the pipeline relies on:
upsert by a unique key, filtered select / update / delete, and a soft
delete (hide) that stamps hidden_at and hidden_reason. Filters are plain
dicts of field -> value; a None value matches a null field.
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path

from pipelinetheatre import config
from pipelinetheatre.pipeline.r2 import download_from_r2, upload_to_r2


class StoreError(Exception):
    """A batch could not be committed; nothing from it was written."""


def utc_now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _matches(row, filters):
    return all(row.get(key) == value for key, value in (filters or {}).items())


def is_hidden(row):
    return bool(row.get("hidden_at"))


class MemoryStore:
    """In-process store. Each call is applied to a copy and committed whole."""

    def __init__(self, rows=None):
        self._rows = [dict(r) for r in rows or []]

    def _commit(self, rows):
        self._rows = rows

    def upsert(self, rows, conflict_key="fingerprint"):
        """
        Insert rows, or overwrite the fields of the existing row sharing the
        same conflict_key value. Returns the number of rows written.
        """
        rows = list(rows)
        keys = set()
        for row in rows:
            key = row.get(conflict_key)
            if not key:
                raise StoreError(f"Row without {conflict_key}: {row.get('titre')!r}")
            if key in keys:
                raise StoreError(f"Duplicate {conflict_key} in batch: {key}")
            keys.add(key)

        staged = [dict(r) for r in self._rows]
        index = {r.get(conflict_key): i for i, r in enumerate(staged) if r.get(conflict_key)}
        for row in rows:
            key = row[conflict_key]
            if key in index:
                staged[index[key]].update(row)
            else:
                index[key] = len(staged)
                staged.append(dict(row))

        self._commit(staged)
        return len(rows)

    def select(self, filters=None, include_hidden=False):
        """Matching rows (copies). Hidden rows are left out unless include_hidden."""
        return [
            dict(r)
            for r in self._rows
            if _matches(r, filters) and (include_hidden or not is_hidden(r))
        ]

    def update(self, filters, patch):
        """Apply patch to every matching row. Returns the number of rows changed."""
        staged = [dict(r) for r in self._rows]
        count = 0
        for row in staged:
            if _matches(row, filters):
                row.update(patch)
                count += 1
        if count:
            self._commit(staged)
        return count

    def delete(self, filters):
        kept = [dict(r) for r in self._rows if not _matches(r, filters)]
        count = len(self._rows) - len(kept)
        if count:
            self._commit(kept)
        return count

    def hide(self, filters, reason):
        """Soft delete: stamp hidden_at/hidden_reason on visible matching rows."""
        return self.update(
            {**(filters or {}), "hidden_at": None},
            {"hidden_at": utc_now_iso(), "hidden_reason": reason},
        )


class JsonFileStore(MemoryStore):
    """
    Store persisted as a JSON document:
    {"representations": [...], "last_updated": "...Z"}

    With a remote_key, the file is first downloaded from R2 (when R2 is
    configured) and publish() uploads it back.
    """

    def __init__(self, path=None, remote_key=None, log_func=None):
        self.path = Path(path or config.STORE_PATH)
        self.remote_key = remote_key
        self.log = log_func or print
        super().__init__(self._load())

    def _load(self):
        if self.remote_key and download_from_r2(self.remote_key, self.path):
            self.log(f"  Downloaded {self.remote_key} from R2")

        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read {self.path}: {e}") from e

        if isinstance(data, dict):
            return data.get("representations", [])
        return data

    def _commit(self, rows):
        payload = {"representations": rows, "last_updated": utc_now_iso()}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Could not write {self.path}: {e}") from e
        self._rows = rows

    def publish(self):
        """Upload the store file to R2 under remote_key."""
        if not self.remote_key:
            return False
        return upload_to_r2({self.remote_key: self.path}, log_func=self.log)
