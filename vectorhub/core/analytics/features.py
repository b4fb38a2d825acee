"""
Cluster key features.

Summarises what a cluster's members have in common from their metadata: a
value shared by more than half of the members is reported as "key: value",
and a numeric key whose values sit within 10% of their mean as
"key: ~mean". Chunk provenance keys are ignored.
"""

from collections import Counter
from typing import Any, Sequence

MAJORITY_SHARE = 0.5
NARROW_SPREAD = 0.1

PROVENANCE_KEYS = frozenset({
    "content",
    "source",
    "chunk_index",
    "start_offset",
    "end_offset",
    "job_id",
    "chunk_index_in_job",
    "total_chunks_in_job",
    "source_row_index",
    "chunk_index_in_row",
    "original_row_text_preview",
    "query",
})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: float) -> str:
    return f"{round(value, 2):g}"


def extract_key_features(metadata: Sequence[dict[str, Any]]) -> list[str]:
    """
    Describe the values most members of a cluster share.

    Args:
        metadata: Metadata dict per cluster member

    Returns:
        list[str]: Features in order of first key appearance
    """
    total = len(metadata)
    if total == 0:
        return []

    keys: list[str] = []
    for meta in metadata:
        for key in meta:
            if key not in PROVENANCE_KEYS and key not in keys:
                keys.append(key)

    features: list[str] = []
    for key in keys:
        values = [
            meta[key] for meta in metadata
            if isinstance(meta.get(key), (str, int, float, bool))
        ]
        if not values:
            continue

        if all(_is_number(v) for v in values) and len(values) > total * MAJORITY_SHARE:
            low, high = min(values), max(values)
            mean = sum(values) / len(values)
            if high == low or (mean != 0 and high - low <= NARROW_SPREAD * abs(mean)):
                features.append(f"{key}: ~{_format_number(mean)}")
                continue

        value, count = Counter(values).most_common(1)[0]
        if count > total * MAJORITY_SHARE:
            features.append(f"{key}: {value}")

    return features
