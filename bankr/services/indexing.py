"""Branch data ingestion and index bootstrap."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence

import pandas as pd
from elasticsearch import ApiError, Elasticsearch, TransportError, helpers

from bankr.config import Settings
from bankr.core.exceptions import EngineError, StartupError
from bankr.schemas.bank import CSV_COLUMNS, BankRecord
from bankr.search.analysis import build_index

logger = logging.getLogger(__name__)

RecordsLoader = Callable[[], Sequence[BankRecord]]


def load_records(path: Path) -> list[BankRecord]:
    """Read branch records from the RBI CSV export.

    Every column is read as a string; empty cells stay empty strings.

    Raises:
        StartupError: If the file is missing, unreadable, or lacks a
            required column.
    """
    path = Path(path)
    if not path.exists():
        raise StartupError(f"Data path {path} doesn't exist")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise StartupError(f"Unable to parse branch data {path}: {e}") from e

    df.columns = [str(c).strip().upper() for c in df.columns]
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise StartupError(f"Branch data {path} is missing columns: {', '.join(missing)}")

    df = df[list(CSV_COLUMNS)].rename(columns=CSV_COLUMNS)
    records = [BankRecord.model_validate(row) for row in df.to_dict(orient="records")]
    logger.info("Loaded %d branch records from %s", len(records), path)
    return records


def iter_batches(
    records: Iterable[BankRecord], batch_size: int
) -> Iterator[list[tuple[int, BankRecord]]]:
    """Yield ``(doc_id, record)`` lists of at most ``batch_size`` items."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    batch: list[tuple[int, BankRecord]] = []
    for doc_id, record in enumerate(records):
        batch.append((doc_id, record))
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


def index_records(
    client: Elasticsearch,
    index_name: str,
    records: Sequence[BankRecord],
    batch_size: int,
) -> int:
    """Bulk index records in fixed-size batches.

    Document ids are the 0-based row numbers. Batches are committed one by
    one; a failing batch stops ingestion without undoing the batches
    before it.

    Returns:
        Number of documents indexed.

    Raises:
        EngineError: If a batch is rejected.
    """
    logger.info("Indexing %d branch records into %s", len(records), index_name)
    start_time = time.perf_counter()
    indexed = 0

    for batch_number, batch in enumerate(iter_batches(records, batch_size), start=1):
        actions = [
            {"_index": index_name, "_id": str(doc_id), "_source": record.to_document()}
            for doc_id, record in batch
        ]
        try:
            success, _ = helpers.bulk(client, actions, chunk_size=len(actions))
        except (helpers.BulkIndexError, ApiError, TransportError) as e:
            logger.error(
                "Batch %d of %d documents failed after %d documents were indexed: %s",
                batch_number,
                len(actions),
                indexed,
                e,
            )
            raise EngineError(
                "Bulk indexing failed",
                operation="index",
                cause=e,
                context={"batch": batch_number, "indexed": indexed},
            ) from e
        indexed += success
        logger.debug("Batch %d committed (%d documents so far)", batch_number, indexed)

    try:
        client.indices.refresh(index=index_name)
    except (ApiError, TransportError) as e:
        raise EngineError("Index refresh failed", operation="index", cause=e) from e

    logger.info("Indexed %d documents in %.2fs", indexed, time.perf_counter() - start_time)
    return indexed


def ensure_index(
    client: Elasticsearch,
    settings: Settings,
    records_loader: RecordsLoader,
    *,
    re_index: bool | None = None,
) -> bool:
    """Open the branch index, creating and populating it when needed.

    Args:
        client: Engine client.
        settings: Application settings (index name, data path, batch size).
        records_loader: Zero-argument callable returning branch records.
        re_index: Drop and rebuild an existing index. Defaults to
            ``settings.re_index``.

    Returns:
        True if the index was (re)built, False if an existing one was opened.

    Raises:
        StartupError: If the index must be built but no data file exists.
        EngineError: If the engine fails to open, create or fill the index.
    """
    index_name = settings.index_name
    if re_index is None:
        re_index = settings.re_index

    try:
        exists = bool(client.indices.exists(index=index_name))
        if exists and re_index:
            logger.info("Dropping search index %s for rebuild", index_name)
            client.indices.delete(index=index_name)
            exists = False
    except (ApiError, TransportError) as e:
        logger.error("Error while opening index %s: %s", index_name, e)
        raise EngineError("Unable to open search index", operation="open", cause=e) from e

    if exists:
        logger.info("Opening existing index %s", index_name)
        return False

    if not Path(settings.data_path).exists():
        logger.error("Data path %s doesn't exist.", settings.data_path)
        raise StartupError(
            f"Search index {index_name} does not exist and data path "
            f"{settings.data_path} is missing"
        )

    records = records_loader()

    logger.info("Creating new search index %s", index_name)
    index = build_index(index_name, phonetic=settings.enable_phonetic_profile)
    try:
        index.create(using=client)
    except (ApiError, TransportError) as e:
        logger.error("Error while creating index %s: %s", index_name, e)
        raise EngineError("Unable to create search index", operation="create", cause=e) from e

    index_records(client, index_name, records, settings.batch_size)
    return True
