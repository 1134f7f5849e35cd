from __future__ import annotations

from typing import Any, Hashable, Iterable

from app.services.threat_composer import ComposedStatement, compose_statement
from app.services.threat_relations import resolve_family

from ..models import ComposeRequest


def compose_request(request: ComposeRequest) -> ComposedStatement:
    return compose_statement(request.stage, request.links, request.tables, request.stage_inputs)


def threat_family(threat_id: Hashable, threats: Iterable[Any]) -> list[Hashable]:
    """Family ids of ``threat_id`` in input order, unknown ids last."""
    threats = list(threats)
    family = resolve_family(threat_id, threats)
    ordered = [t.id for t in threats if t.id in family]
    ordered.extend(tid for tid in family if tid not in ordered)
    return ordered
