"""Abbreviation registry: bank abbreviations and their canonical names."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from bankr.core.exceptions import StartupError
from bankr.schemas.bank import AbbreviationEntry, BankRecord

logger = logging.getLogger(__name__)

SOURCE_CURATED = "curated"
SOURCE_RECORDS = "records"


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable set of abbreviation entries, unique by abbreviation.

    Built once before the service accepts traffic and only read afterwards,
    so it is shared between request handlers without locking.
    """

    entries: tuple[AbbreviationEntry, ...] = ()
    source: str | None = None
    rejected: int = 0
    _lowered: tuple[tuple[str, str, str], ...] = field(
        default=(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.abbreviation in seen:
                raise ValueError(f"Duplicate abbreviation in registry: {entry.abbreviation}")
            seen.add(entry.abbreviation)
        lowered = tuple(
            (e.abbreviation, e.abbreviation.lower(), e.name.lower()) for e in self.entries
        )
        object.__setattr__(self, "_lowered", lowered)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def degraded(self) -> bool:
        """True when some source entries could not be used."""
        return self.rejected > 0

    def prefix_matches(self, token: str) -> frozenset[str]:
        """Abbreviations that start with ``token`` (case-insensitive)."""
        token = token.lower()
        return frozenset(abb for abb, abb_lower, _ in self._lowered if abb_lower.startswith(token))

    def substring_matches(self, token: str) -> frozenset[str]:
        """Abbreviations whose canonical name contains ``token`` (case-insensitive)."""
        token = token.lower()
        return frozenset(abb for abb, _, name_lower in self._lowered if token in name_lower)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[AbbreviationEntry],
        *,
        source: str | None = None,
        rejected: int = 0,
    ) -> RegistrySnapshot:
        """Build a snapshot, keeping the first entry seen per abbreviation."""
        unique: dict[str, AbbreviationEntry] = {}
        for entry in entries:
            if entry.abbreviation in unique:
                if unique[entry.abbreviation].name != entry.name:
                    logger.debug(
                        "Ignoring duplicate abbreviation %s (%s)", entry.abbreviation, entry.name
                    )
                continue
            unique[entry.abbreviation] = entry
        return cls(entries=tuple(unique.values()), source=source, rejected=rejected)


def parse_curated_list(data: Any) -> tuple[list[AbbreviationEntry], int]:
    """Parse a curated abbreviation list.

    Accepts either a list of ``{"abbreviation": ..., "name": ...}`` objects
    or a mapping keyed by abbreviation. Malformed items are skipped and
    counted.

    Returns:
        Parsed entries and the number of rejected items.

    Raises:
        ValueError: If the top-level structure is neither a list nor a mapping.
    """
    if isinstance(data, dict):
        items: list[Any] = [{"abbreviation": k, "name": v} for k, v in data.items()]
    elif isinstance(data, list):
        items = data
    else:
        raise ValueError(f"Expected a list or an object, got {type(data).__name__}")

    entries: list[AbbreviationEntry] = []
    rejected = 0
    for position, item in enumerate(items):
        try:
            entries.append(AbbreviationEntry.model_validate(item))
        except ValidationError as e:
            rejected += 1
            logger.warning(
                "Skipping malformed abbreviation entry #%d: %s",
                position,
                e.errors(include_url=False)[0]["msg"],
            )
    return entries, rejected


def entries_from_records(records: Iterable[BankRecord]) -> list[AbbreviationEntry]:
    """One entry per distinct non-empty abbreviation, first record wins."""
    seen: dict[str, AbbreviationEntry] = {}
    for record in records:
        if not record.abbreviation or record.abbreviation in seen:
            continue
        if not record.name:
            continue
        seen[record.abbreviation] = AbbreviationEntry(
            abbreviation=record.abbreviation, name=record.name
        )
    return list(seen.values())


def load_curated(path: Path) -> RegistrySnapshot:
    """Load the registry from a curated JSON list.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a usable JSON list.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    entries, rejected = parse_curated_list(data)
    if not entries:
        raise ValueError(f"No usable abbreviation entries in {path}")
    if rejected:
        logger.warning(
            "Abbreviation list %s partially malformed: %d entries skipped, %d loaded",
            path,
            rejected,
            len(entries),
        )
    return RegistrySnapshot.from_entries(entries, source=SOURCE_CURATED, rejected=rejected)


def load_registry(
    banks_list_path: Path | None,
    records_loader=None,
) -> RegistrySnapshot:
    """Build the registry, preferring the curated list.

    Args:
        banks_list_path: Curated abbreviation list, may be missing.
        records_loader: Zero-argument callable returning branch records,
            used when the curated list is missing or unusable.

    Raises:
        StartupError: If neither source yields a registry.
    """
    if banks_list_path is not None and Path(banks_list_path).exists():
        try:
            snapshot = load_curated(Path(banks_list_path))
            logger.info(
                "Loaded %d abbreviations from %s", len(snapshot), banks_list_path
            )
            return snapshot
        except (OSError, ValueError) as e:
            logger.error("Unable to use abbreviation list %s: %s", banks_list_path, e)
    else:
        logger.info("Abbreviation list %s not found, deriving from records", banks_list_path)

    if records_loader is None:
        raise StartupError("No abbreviation source available")

    records = records_loader()
    snapshot = RegistrySnapshot.from_entries(
        entries_from_records(records), source=SOURCE_RECORDS
    )
    logger.info("Derived %d abbreviations from %d records", len(snapshot), len(records))
    return snapshot
