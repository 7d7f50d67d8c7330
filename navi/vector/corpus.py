"""
Corpus loading: JSON records -> embedded KnowledgeEntry objects.
Used by the seed script and by the API when serving from an in-memory store.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .embeddings import IEmbeddingProvider
from .types import KnowledgeEntry, GENERAL_CATEGORY
from ..core.errors import EmbeddingUnavailable
from ..util.logging import logger


@dataclass
class CorpusLoadReport:
    entries: List[KnowledgeEntry] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)  # (record id, error)


def read_corpus_file(path: str) -> List[Dict[str, Any]]:
    """
    Read a corpus file: a JSON list of {"id", "text", "category"} objects.
    A missing category means "General".
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Corpus file {path} must contain a JSON list")

    records = []
    for position, item in enumerate(data):
        if not isinstance(item, dict) or not str(item.get("text", "")).strip():
            raise ValueError(f"Corpus record #{position} has no text")
        records.append({
            "id": str(item.get("id", position)),
            "text": item["text"],
            "category": item.get("category") or GENERAL_CATEGORY,
        })
    return records


async def embed_records(records: List[Dict[str, Any]], embedder: IEmbeddingProvider) -> CorpusLoadReport:
    """Embed each record in order; failed records are reported and skipped."""
    report = CorpusLoadReport()
    for record in records:
        try:
            vector = await embedder.embed(record["text"])
        except EmbeddingUnavailable as e:
            logger.log_operation("corpus.embed", "failed", {"id": record["id"], "error": str(e)[:100]})
            report.failures.append((record["id"], str(e)))
            continue

        report.entries.append(KnowledgeEntry.create(
            content=record["text"],
            embedding=vector,
            category=record["category"],
            entry_id=record["id"],
        ))

    logger.log_operation("corpus.embed", "success", {
        "embedded": len(report.entries),
        "failed": len(report.failures),
    })
    return report
