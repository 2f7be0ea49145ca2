"""Storage of named hosts profiles in an SQLite database."""

from __future__ import annotations

import json
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import platformdirs

from hostsprofiles.hosts import Line, line_from_json, line_to_json

APP_DIR_NAME = "hosts_manager"
DB_FILE_NAME = "profiles.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    hosts_json TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 0
)
"""


class ProfileError(Exception):
    """A profile could not be stored, read or decoded."""


@dataclass
class Profile:
    """A named set of hosts lines."""

    id: str
    name: str
    hosts: list[Line] = field(default_factory=list)
    is_active: bool = False

    def __str__(self) -> str:
        return self.name


def default_db_path() -> Path:
    """Path of the profiles database in the user's data directory."""
    return Path(platformdirs.user_data_dir(APP_DIR_NAME, appauthor=False, roaming=True)) / DB_FILE_NAME


def _hosts_to_json(hosts: list[Line]) -> str:
    return json.dumps([line_to_json(line) for line in hosts], separators=(",", ":"), ensure_ascii=False)


def _hosts_from_json(text: str) -> list[Line]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("hosts must be a list")
    return [line_from_json(item) for item in data]


def profile_to_dict(profile: Profile) -> dict[str, Any]:
    """Return the JSON-ready form of a profile."""
    return {
        "id": profile.id,
        "name": profile.name,
        "hosts": [line_to_json(line) for line in profile.hosts],
        "is_active": profile.is_active,
    }


def profile_from_dict(data: Any) -> Profile:
    """Build a profile from its JSON form; raise ProfileError if malformed."""
    if not isinstance(data, dict):
        raise ProfileError("Il profilo deve essere un oggetto JSON.")
    try:
        profile_id = data["id"]
        name = data["name"]
        hosts = data["hosts"]
        is_active = data["is_active"]
    except KeyError as exc:
        raise ProfileError(f"Campo mancante: {exc.args[0]}") from exc
    if not isinstance(profile_id, str) or not isinstance(name, str):
        raise ProfileError("id e name devono essere stringhe.")
    if not isinstance(is_active, bool):
        raise ProfileError("is_active deve essere un booleano.")
    if not isinstance(hosts, list):
        raise ProfileError("hosts deve essere una lista.")
    try:
        lines = [line_from_json(item) for item in hosts]
    except ValueError as exc:
        raise ProfileError(str(exc)) from exc
    return Profile(profile_id, name, lines, is_active)


@contextmanager
def _db_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise ProfileError(str(exc)) from exc


class ProfileStore:
    """Profiles kept in an SQLite database file."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        db_path = Path(path) if path is not None else default_db_path()
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProfileError(str(exc)) from exc
        self.path = db_path
        with _db_errors():
            self._conn = sqlite3.connect(str(db_path))
            with self._conn:
                self._conn.execute(_SCHEMA)

    def create_profile(self, name: str, hosts: list[Line]) -> Profile:
        """Insert a new inactive profile with a fresh id."""
        profile = Profile(str(uuid.uuid4()), name, list(hosts), False)
        with _db_errors(), self._conn:
            self._conn.execute(
                "INSERT INTO profiles (id, name, hosts_json, is_active) VALUES (?, ?, ?, ?)",
                (profile.id, name, _hosts_to_json(profile.hosts), 0),
            )
        return profile

    def all_profiles(self) -> list[Profile]:
        """Return every stored profile in insertion order."""
        with _db_errors():
            rows = self._conn.execute(
                "SELECT id, name, hosts_json, is_active FROM profiles ORDER BY rowid"
            ).fetchall()
        profiles = []
        for profile_id, name, hosts_json, is_active in rows:
            try:
                hosts = _hosts_from_json(hosts_json)
            except ValueError as exc:
                raise ProfileError(f"hosts_json non valido per '{name}': {exc}") from exc
            profiles.append(Profile(profile_id, name, hosts, is_active != 0))
        return profiles

    def set_active(self, profile_id: str) -> None:
        """Make the given profile the only active one."""
        with _db_errors(), self._conn:
            self._conn.execute("UPDATE profiles SET is_active = 0")
            self._conn.execute("UPDATE profiles SET is_active = 1 WHERE id = ?", (profile_id,))

    def delete_profile(self, profile_id: str) -> None:
        """Remove the profile with the given id, if any."""
        with _db_errors(), self._conn:
            self._conn.execute("DELETE FROM profiles WHERE id = ?", (profile_id,))

    def update_profile(self, profile: Profile) -> None:
        """Store the profile's hosts under its id."""
        with _db_errors(), self._conn:
            self._conn.execute(
                "UPDATE profiles SET hosts_json = ? WHERE id = ?",
                (_hosts_to_json(profile.hosts), profile.id),
            )

    def import_profile(self, profile: Profile) -> Profile:
        """Insert a copy of the profile under a new id; its name must be unused."""
        with _db_errors():
            (count,) = self._conn.execute(
                "SELECT COUNT(*) FROM profiles WHERE name = ?", (profile.name,)
            ).fetchone()
        if count > 0:
            raise ProfileError(f"Un profilo con il nome '{profile.name}' esiste già.")
        imported = Profile(str(uuid.uuid4()), profile.name, list(profile.hosts), profile.is_active)
        with _db_errors(), self._conn:
            self._conn.execute(
                "INSERT INTO profiles (id, name, hosts_json, is_active) VALUES (?, ?, ?, ?)",
                (imported.id, imported.name, _hosts_to_json(imported.hosts), int(imported.is_active)),
            )
        return imported

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> "ProfileStore":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()