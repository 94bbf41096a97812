"""Serialisable Q-table snapshots and a JSON file store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .agent import QTable


LOGGER = logging.getLogger(__name__)

FORMAT_VERSION = 1

Entry = Tuple[str, str, float]


@dataclass(frozen=True)
class TableSnapshot:
    """Ordered ``(state, action, value)`` triples tagged with their encoder."""

    encoder: str
    entries: Tuple[Entry, ...]
    episode: int = 0

    @classmethod
    def from_table(cls, table: QTable, *, encoder: str, episode: int = 0) -> "TableSnapshot":
        return cls(encoder=encoder, entries=tuple(table.snapshot()), episode=episode)

    def to_table(self) -> QTable:
        return QTable.from_entries(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": FORMAT_VERSION,
            "encoder": self.encoder,
            "episode": self.episode,
            "entries": [list(entry) for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "TableSnapshot":
        version = payload.get("version")
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported table format version: {version!r}")
        entries = tuple(
            (str(state), str(action), float(value))
            for state, action, value in payload.get("entries", [])
        )
        return cls(
            encoder=str(payload["encoder"]),
            entries=entries,
            episode=int(payload.get("episode", 0)),
        )


class JsonTableStore:
    """Read and write :class:`TableSnapshot` objects as JSON.

    Instances are callable so they can be handed to the trainer as a
    snapshot sink.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def save(self, snapshot: TableSnapshot) -> None:
        """Write ``snapshot`` atomically by replacing the target file."""

        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(snapshot.to_dict(), handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        LOGGER.debug(
            "Saved %d table entries after episode %d to %s",
            len(snapshot.entries),
            snapshot.episode,
            self.path,
        )

    def load(self) -> TableSnapshot:
        with self.path.open("r", encoding="utf-8") as handle:
            return TableSnapshot.from_dict(json.load(handle))

    def __call__(self, snapshot: TableSnapshot) -> None:
        self.save(snapshot)


def load_table(path: Union[str, Path], encoder: Optional[str] = None) -> QTable:
    """Load a Q-table, refusing one trained with a different encoder.

    Raises:
        ValueError: If ``encoder`` is given and does not match the file.
    """

    snapshot = JsonTableStore(path).load()
    if encoder is not None and snapshot.encoder != encoder:
        raise ValueError(
            f"Table was trained with encoder {snapshot.encoder!r}, not {encoder!r}"
        )
    return snapshot.to_table()


__all__ = ["FORMAT_VERSION", "JsonTableStore", "TableSnapshot", "load_table"]
