from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Hashable, Iterable, Mapping

ACTOR_PHRASE_RE = re.compile(r"^(a|an)\s+([^,]+?)\s+(could|with)", re.IGNORECASE)
ASSET_PHRASE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"of\s+([a-z0-9\s]+?)\s+in order", re.IGNORECASE),
    re.compile(r"target(?:ing)?\s+(?:the\s+)?([a-z0-9\s]+?)\s+to", re.IGNORECASE),
    re.compile(r"impacting\s+\w+\s+of\s+([a-z0-9\s]+?)\s+in order", re.IGNORECASE),
)


@dataclass(slots=True, frozen=True)
class ThreatRecord:
    id: Hashable
    threat_statement: str
    stage: str = "initial"
    parent_threat_id: Hashable | None = None
    project_id: Hashable | None = None
    created_at: datetime | None = None


def _get(threat: Any, name: str) -> Any:
    if isinstance(threat, Mapping):
        return threat.get(name)
    return getattr(threat, name, None)


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _parent_of(threat: Any) -> Hashable | None:
    parent = _get(threat, "parent_threat_id")
    if parent is None or parent == "" or not _hashable(parent):
        return None
    return parent


def extract_actor_phrase(statement: str) -> str | None:
    match = ACTOR_PHRASE_RE.match((statement or "").lower())
    if not match:
        return None
    return match.group(2).strip() or None


def extract_asset_phrase(statement: str) -> str | None:
    text = (statement or "").lower()
    for pattern in ASSET_PHRASE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def _heuristic_matches(seed_id: Hashable, seed_text: str, threats: Iterable[Any]) -> set[Hashable]:
    actor_phrase = extract_actor_phrase(seed_text)
    if not actor_phrase:
        return set()

    seed_asset = extract_asset_phrase(seed_text)
    matched: set[Hashable] = set()
    for other in threats:
        other_id = _get(other, "id")
        if other_id == seed_id or not _hashable(other_id):
            continue
        other_text = str(_get(other, "threat_statement") or "").lower()
        if actor_phrase not in other_text:
            continue
        other_asset = extract_asset_phrase(other_text)
        if not seed_asset or not other_asset or seed_asset == other_asset:
            matched.add(other_id)
    return matched


def resolve_family(threat_id: Hashable, threats: Iterable[Any]) -> set[Hashable]:
    """Return every statement id in the same lineage as ``threat_id``.

    Explicit ``parent_threat_id`` links are followed up and down. Statements
    without any explicit link fall back to actor/asset text matching.
    """
    snapshot = list(threats)
    if not _hashable(threat_id):
        return set()
    by_id: dict[Hashable, Any] = {}
    children: dict[Hashable, list[Hashable]] = defaultdict(list)
    for threat in snapshot:
        tid = _get(threat, "id")
        # Malformed rows cannot take part in the lineage.
        if not _hashable(tid):
            continue
        by_id.setdefault(tid, threat)
        parent = _parent_of(threat)
        if parent is not None:
            children[parent].append(tid)

    seed = by_id.get(threat_id)
    related: set[Hashable] = {threat_id}
    if seed is None:
        return related

    current = seed
    while True:
        parent = _parent_of(current)
        if parent is None or parent in related:
            break
        related.add(parent)
        current = by_id.get(parent)
        if current is None:
            break

    pending = list(related)
    while pending:
        for child in children.get(pending.pop(), []):
            if child not in related:
                related.add(child)
                pending.append(child)

    if len(related) == 1:
        related |= _heuristic_matches(threat_id, str(_get(seed, "threat_statement") or ""), snapshot)
    return related


def family_members(threat_id: Hashable, threats: Iterable[Any]) -> list[Any]:
    snapshot = list(threats)
    ids = resolve_family(threat_id, snapshot)
    return [t for t in snapshot if _hashable(_get(t, "id")) and _get(t, "id") in ids]


def asset_annotations(assets: Iterable[str], statements: Iterable[str]) -> dict[int, str]:
    """Map asset index to the 1-based numbers of statements that mention it."""
    lowered = [str(s or "").lower() for s in statements]
    annotations: dict[int, str] = {}
    for asset_index, asset in enumerate(assets):
        needle = str(asset or "").lower()
        if not needle:
            continue
        numbers = [str(n) for n, text in enumerate(lowered, start=1) if needle in text]
        if numbers:
            annotations[asset_index] = ", ".join(numbers)
    return annotations
