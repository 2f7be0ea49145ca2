"""Parsing, rendering and writing of hosts files."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

HOSTS_PATH = "/etc/hosts"


@dataclass(frozen=True)
class HostEntry:
    """An address/hostname record, with the trailing comment if there was one."""

    ip: str
    hostname: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class Comment:
    """A line kept verbatim: a comment or a line that is not a valid record."""

    text: str


@dataclass(frozen=True)
class Empty:
    """A blank line."""


Line = Union[HostEntry, Comment, Empty]

LOCALHOST = HostEntry("127.0.0.1", "localhost")


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _parse_line(line: str) -> Line:
    stripped = line.strip()
    if not stripped:
        return Empty()
    if stripped.startswith("#"):
        return Comment(line)
    record, sep, comment = line.partition("#")
    fields = record.split()
    if len(fields) < 2:
        return Comment(line)
    return HostEntry(fields[0], fields[1], comment if sep else None)


def parse_hosts(text: str) -> list[Line]:
    """Split hosts-file text into records, comments and blank lines."""
    return [_parse_line(line) for line in _split_lines(text)]


def load_hosts_entries(path: Union[str, Path] = HOSTS_PATH) -> list[Line]:
    """Read and parse a hosts file; an unreadable file gives an empty list."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Errore nella lettura del file hosts: {exc}", file=sys.stderr)
        return []
    return parse_hosts(text)


def _render_line(line: Line) -> str:
    if isinstance(line, HostEntry):
        return f"{line.ip} {line.hostname}\n"
    if isinstance(line, Comment):
        return f"{line.text}\n"
    return "\n"


def render_hosts(entries: Iterable[Line]) -> str:
    """Render lines as hosts-file text, putting localhost first if it is missing."""
    lines = list(entries)
    if LOCALHOST not in lines:
        lines.insert(0, LOCALHOST)
    return "".join(_render_line(line) for line in lines)


def write_hosts_entries(entries: Iterable[Line], path: Union[str, Path] = HOSTS_PATH) -> None:
    """Write the rendered lines to the hosts file, replacing its contents."""
    Path(path).write_bytes(render_hosts(entries).encode("utf-8"))


def line_to_json(line: Line) -> Any:
    """Return the JSON-ready form of a line."""
    if isinstance(line, HostEntry):
        return {"Entry": {"ip": line.ip, "hostname": line.hostname, "comment": line.comment}}
    if isinstance(line, Comment):
        return {"Comment": line.text}
    if isinstance(line, Empty):
        return "Empty"
    raise TypeError(f"not a hosts line: {line!r}")


def line_from_json(data: Any) -> Line:
    """Build a line from its JSON form; raise ValueError if it is malformed."""
    if data == "Empty":
        return Empty()
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"invalid hosts line: {data!r}")
    ((kind, value),) = data.items()
    if kind == "Comment":
        if not isinstance(value, str):
            raise ValueError(f"invalid comment: {value!r}")
        return Comment(value)
    if kind == "Entry":
        if not isinstance(value, dict):
            raise ValueError(f"invalid entry: {value!r}")
        ip = value.get("ip")
        hostname = value.get("hostname")
        comment = value.get("comment")
        if not isinstance(ip, str) or not isinstance(hostname, str):
            raise ValueError(f"invalid entry: {value!r}")
        if comment is not None and not isinstance(comment, str):
            raise ValueError(f"invalid entry comment: {comment!r}")
        return HostEntry(ip, hostname, comment)
    raise ValueError(f"unknown hosts line kind: {kind!r}")