"""Typed form of the JSON document stored in each backup row.

A stored payload looks like::

    {
        "timestamp": "2026-01-31T09:15:00.000Z",
        "workspace": {"notes": {"todo.md": "[FILE_CONTENT]"}},
        "memory": [{"name": "2026-01-31.md", "content": "..."}],
        "config": {...},
        "meta": {"name": "Manual Backup"}
    }

``workspace`` is a directory tree whose leaves are the file marker,
``memory`` carries full text and ``config`` is kept opaque.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Union

DEFAULT_BACKUP_NAME = "Manual Backup"

# A tree value is either a nested tree or a string leaf (normally the file marker).
DirectoryTree = Dict[str, Union["DirectoryTree", str]]


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


@dataclass
class NamedContent:
    name: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamedContent":
        return cls(name=data["name"], content=data.get("content", ""))


@dataclass
class BackupPayload:
    name: str = DEFAULT_BACKUP_NAME
    timestamp: str = field(default_factory=utc_timestamp)
    workspace: DirectoryTree = field(default_factory=dict)
    memory: List[NamedContent] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)

    def memory_dicts(self) -> List[Dict[str, str]]:
        return [entry.to_dict() for entry in self.memory]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "workspace": self.workspace,
            "memory": self.memory_dicts(),
            "config": self.config,
            "meta": {"name": self.name},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackupPayload":
        meta = data.get("meta") or {}
        return cls(
            name=meta.get("name", DEFAULT_BACKUP_NAME),
            timestamp=data.get("timestamp", ""),
            workspace=data.get("workspace") or {},
            memory=[NamedContent.from_dict(m) for m in data.get("memory") or []],
            config=data.get("config") or {},
        )
