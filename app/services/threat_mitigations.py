from __future__ import annotations

import re
from typing import Any, Iterable

from config.attack_mitigations import ENTERPRISE_MITIGATIONS

TECHNIQUE_ID_RE = re.compile(r"T\d{4}(?:\.\d{3})?")


def technique_ids(text: str) -> list[str]:
    """ATT&CK technique IDs mentioned in ``text``, first occurrence order."""
    found: list[str] = []
    for technique_id in TECHNIQUE_ID_RE.findall(text or ""):
        if technique_id not in found:
            found.append(technique_id)
    return found


def _copy(mitigation: dict[str, Any]) -> dict[str, Any]:
    return {**mitigation, "techniques": list(mitigation["techniques"])}


def mitigations_for_technique(technique_id: str) -> list[dict[str, Any]]:
    # A sub-technique also picks up mitigations listed against its parent.
    parent_id = technique_id.split(".")[0]
    return [
        _copy(m)
        for m in ENTERPRISE_MITIGATIONS
        if technique_id in m["techniques"] or parent_id in m["techniques"]
    ]


def mitigations_for_techniques(ids: Iterable[str]) -> list[dict[str, Any]]:
    merged: dict[str, dict[str, Any]] = {}
    for technique_id in ids:
        for mitigation in mitigations_for_technique(technique_id):
            merged.setdefault(mitigation["id"], mitigation)
    return [merged[key] for key in sorted(merged)]


def mitigations_for_statement(text: str) -> dict[str, Any]:
    ids = technique_ids(text)
    return {"techniques": ids, "mitigations": mitigations_for_techniques(ids)}
