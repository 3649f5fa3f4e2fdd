"""High-level orchestration for downloading embedded files and rewriting links."""

from __future__ import annotations

import logging
from typing import Dict, List

from .config import EmbedConfig
from .fetcher import ResourceFetcher
from .links import find_candidate_links
from .models import LogEntry, Record, RecordResult, Replacement
from .rewrite import append_log, rewrite_text
from .store import RecordStore

logger = logging.getLogger("moodle_embedded.pipeline")


def collect_replacements(
    record: Record,
    config: EmbedConfig,
    fetcher: ResourceFetcher,
) -> Dict[str, Replacement]:
    """Fetch each qualifying URL of a record once and map it to its local path."""
    replacements: Dict[str, Replacement] = {}
    for link in find_candidate_links(record.text, config.match, config.exceptions):
        if link.url in replacements:
            continue
        filename = fetcher.fetch(link.url)
        if filename is None:
            continue
        replacements[link.url] = Replacement(
            url=link.url,
            kind=link.kind,
            path=config.web_path + filename,
        )
        logger.debug("%s: %s -> %s", record.name, link.url, config.web_path + filename)
    return replacements


def process_record(
    record: Record,
    config: EmbedConfig,
    store: RecordStore,
    fetcher: ResourceFetcher,
) -> RecordResult:
    """Download, rewrite, persist and log a single record."""
    logger.info("Processing %s", record.name)
    replacements = collect_replacements(record, config, fetcher)

    record.text = rewrite_text(
        record.text,
        {url: replacement.path for url, replacement in replacements.items()},
    )
    store.update_field(config.table, config.field, record.id, record.text)

    append_log(
        config.log_path,
        (
            LogEntry(
                context_id=record.context_id,
                table=config.table,
                field=config.field,
                record_id=record.id,
                kind=replacement.kind,
                url=replacement.url,
                path=replacement.path,
            )
            for replacement in replacements.values()
        ),
    )
    logger.info("%s: %d link(s) replaced", record.name, len(replacements))
    return RecordResult(record=record, replacements=replacements)


def run_rewriter(
    config: EmbedConfig,
    store: RecordStore,
    fetcher: ResourceFetcher,
) -> List[RecordResult]:
    """Process every matching record sequentially.

    Each record is persisted and logged before the next one is read, so an
    interrupted run keeps the work done so far.
    """
    records = store.find_records(config.table, config.field, config.match)
    logger.info(
        "Found %d record(s) in %s.%s containing %s",
        len(records),
        config.table,
        config.field,
        config.match,
    )
    results: List[RecordResult] = []
    for record in records:
        results.append(process_record(record, config, store, fetcher))
    return results
