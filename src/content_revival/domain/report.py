"""
Read-only views over a RevivalStrategy.

The strategy comes straight from model output, so every accessor here
tolerates missing fields and segment indices that point nowhere.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from content_revival.domain.models import (
    Frame,
    OutdatedItem,
    RevivalPlan,
    RevivalStrategy,
    Segment,
    VideoMetadata,
)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def segments_of(strategy: RevivalStrategy) -> List[Segment]:
    return _as_list(_as_dict(strategy).get("segments"))


def outdated_items_of(strategy: RevivalStrategy) -> List[OutdatedItem]:
    return [i for i in _as_list(_as_dict(strategy).get("outdatedItems")) if isinstance(i, dict)]


def engagement_score(strategy: RevivalStrategy) -> Any:
    return _as_dict(strategy).get("predictedEngagement") or 0


def _valid_indices(item: OutdatedItem, segment_count: int) -> List[int]:
    indices = []
    for idx in _as_list(_as_dict(item).get("affectedSegmentIndices")):
        # bool is an int subclass; true/false are not indices
        if isinstance(idx, bool) or not isinstance(idx, int):
            continue
        if 0 <= idx < segment_count:
            indices.append(idx)
    return indices


def affected_segments(
    strategy: RevivalStrategy,
    item: OutdatedItem,
) -> List[Tuple[int, Segment]]:
    """Segments an outdated item points at. Out-of-range indices are skipped."""
    segments = segments_of(strategy)
    return [
        (idx, segments[idx])
        for idx in _valid_indices(item, len(segments))
        if isinstance(segments[idx], dict)
    ]


def timestamp_seconds(time_str: str) -> Optional[int]:
    """'HH:MM:SS' or 'MM:SS' to seconds; None if it does not parse."""
    if not time_str:
        return None
    try:
        parts = [int(p) for p in str(time_str).strip().split(":")]
    except ValueError:
        return None
    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    if len(parts) == 2:
        return parts[0] * 60 + parts[1]
    return 0


def timestamp_link(youtube_url: str, time_str: str) -> str:
    """Deep link into the video at a segment start time."""
    seconds = timestamp_seconds(time_str)
    if seconds is None:
        return youtube_url
    clean_url = youtube_url.split("&")[0]
    return f"{clean_url}&t={seconds}s"


def display_metadata(strategy: RevivalStrategy) -> VideoMetadata:
    meta = _as_dict(_as_dict(strategy).get("originalVideoMetadata"))
    return {
        "title": meta.get("title") or "Untitled Video",
        "publishDate": meta.get("publishDate") or "Unknown Date",
        "currentViews": meta.get("currentViews") or 0,
    }


def display_plan(strategy: RevivalStrategy) -> RevivalPlan:
    plan = _as_dict(_as_dict(strategy).get("revivalPlan"))
    return {
        "title": plan.get("title") or "",
        "description": plan.get("description") or "",
        "scriptOutline": plan.get("scriptOutline") or "*No plan generated*",
    }


def update_scope(strategy: RevivalStrategy) -> Dict[str, Any]:
    """Counts for the 'update scope' summary."""
    segments = segments_of(strategy)
    items = outdated_items_of(strategy)
    impacted = set()
    for item in items:
        impacted.update(_valid_indices(item, len(segments)))
    segment_total = max(1, len(segments))
    return {
        "outdated_tools": len(items),
        "segments_impacted": len(impacted),
        "segment_total": segment_total,
        "coverage_pct": min(100.0, round(len(items) / segment_total * 100, 1)),
    }


def view_comparison(strategy: RevivalStrategy) -> List[Dict[str, Any]]:
    """Current vs predicted views, in display order."""
    return [
        {"name": "Current", "label": "Actual Views",
         "value": display_metadata(strategy)["currentViews"]},
        {"name": "Predicted", "label": "Revival Potential",
         "value": _as_dict(strategy).get("predictedViews") or 0},
    ]


def overlay_instruction(item: OutdatedItem) -> str:
    item = _as_dict(item)
    return (
        f"Replace {item.get('oldTool', '')} with {item.get('newTool', '')}. "
        f"Context: {item.get('reason', '')}"
    )


def pick_overlay_frame(frames: Sequence[Frame]) -> Optional[Frame]:
    """Middle frame of the context frames, or None when there are none."""
    if not frames:
        return None
    return frames[min(len(frames) - 1, len(frames) // 2)]
