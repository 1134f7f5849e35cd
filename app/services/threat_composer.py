from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from config.table_presets import TABLE_ROLES

STAGE_INITIAL = "initial"
STAGE_INTERMEDIATE = "intermediate"
STAGE_FINAL = "final"
STAGES: tuple[str, ...] = (STAGE_INITIAL, STAGE_INTERMEDIATE, STAGE_FINAL)

_ALL_TABLES = [0, 1, 2, 3, 4, 5, 6, 7]
_STAGE_TABLES: dict[str, list[int]] = {
    STAGE_INITIAL: [0, 1, 3, 5, 7],
    STAGE_INTERMEDIATE: _ALL_TABLES,
    STAGE_FINAL: _ALL_TABLES,
}
_STAGE_LABELS: dict[str, str] = {
    STAGE_INITIAL: "Initial Threat Statement",
    STAGE_INTERMEDIATE: "Intermediate Threat Statement",
    STAGE_FINAL: "Complete Threat Statement",
}

MSG_SELECT_INITIAL_BASE = "Select an initial threat statement to build upon."
MSG_SELECT_INTERMEDIATE_BASE = "Select an intermediate threat statement to build upon."
MSG_SELECT_TECHNIQUES = "Select ATT&CK techniques to complete the final threat statement."

INITIAL_STATEMENT_RE = re.compile(
    r"^(An?\s+)(.+?)\s+with\s+(.+?)\s+could\s+target\s+the\s+(.+?)\s+to\s+conduct\s+(.+?)\s+in\s+order\s+to\s+(.+)$",
    re.IGNORECASE,
)
_VOWEL_RE = re.compile(r"^[aeiou]", re.IGNORECASE)
_DIAGNOSTIC_RE = re.compile(
    r"^(?:Select items from .+ to build the initial threat statement\."
    r"|Provide .+ to enhance the threat statement\."
    + "|" + re.escape(MSG_SELECT_INITIAL_BASE)
    + "|" + re.escape(MSG_SELECT_INTERMEDIATE_BASE)
    + "|" + re.escape(MSG_SELECT_TECHNIQUES)
    + r")$"
)

# Roles recovered from an initial statement, in template order.
BASE_ROLES: tuple[str, ...] = ("actor", "vector", "asset", "localObjective", "strategicObjective")

_INITIAL_REQUIRED: list[tuple[str, str]] = [
    ("actor", "Actors"),
    ("vector", "Vectors"),
    ("asset", "Assets"),
    ("localObjective", "Local Objectives"),
    ("strategicObjective", "Strategic Objectives"),
]


@dataclass(slots=True, frozen=True)
class Link:
    table1: int
    item1: int
    table2: int
    item2: int

    def endpoints(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.table1, self.item1), (self.table2, self.item2)


@dataclass(slots=True, frozen=True)
class SelectedTechnique:
    technique_id: str
    technique_name: str
    sub_technique_id: str = ""
    sub_technique_name: str = ""
    matrix: str = ""
    tactic_id: str = ""
    tactic_name: str = ""

    def render(self) -> str:
        name = self.sub_technique_name or self.technique_name
        ident = self.sub_technique_id or self.technique_id
        return f"{name} ({ident})"

    def to_payload(self) -> dict[str, str]:
        return {
            "techniqueId": self.technique_id,
            "techniqueName": self.technique_name,
            "subTechniqueId": self.sub_technique_id,
            "subTechniqueName": self.sub_technique_name,
            "matrix": self.matrix,
            "tacticId": self.tactic_id,
            "tacticName": self.tactic_name,
        }


@dataclass(slots=True)
class StageInputs:
    """Free-text and selection inputs supplied by the stage-specific builder.

    ``base_payload`` / ``base_intermediate_payload`` carry the structured fields
    stored with the selected base statement. When present they are read
    directly; otherwise the base text is parsed.
    """

    base_threat_statement: str = ""
    local_impact: str = ""
    selected_attack_techniques: list[SelectedTechnique] = field(default_factory=list)
    base_intermediate_threat: str = ""
    base_payload: dict[str, Any] = field(default_factory=dict)
    base_intermediate_payload: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ComposedStatement:
    text: str
    stage: str
    complete: bool
    fields: dict[str, Any] = field(default_factory=dict)
    conflicts: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "stage": self.stage,
            "complete": self.complete,
            "fields": dict(self.fields),
            "conflicts": list(self.conflicts),
        }


def tables_for_stage(stage: str) -> list[int]:
    return list(_STAGE_TABLES.get(stage, _ALL_TABLES))


def stage_label(stage: str) -> str:
    return _STAGE_LABELS.get(stage, "Threat Statement")


def parse_stage(value: Any) -> str:
    key = str(value or "").strip().lower()
    if key not in STAGES:
        raise ValueError(f"Unknown stage: {value!r}")
    return key


def stage_rank(stage: str) -> int:
    return STAGES.index(stage) if stage in STAGES else -1


def is_diagnostic(text: str) -> bool:
    return bool(_DIAGNOSTIC_RE.match(text or ""))


def to_link(value: Link | Mapping[str, Any] | Sequence[int]) -> Link:
    if isinstance(value, Link):
        return value
    if isinstance(value, Mapping):
        return Link(
            table1=int(value.get("table1", -1)),
            item1=int(value.get("item1", -1)),
            table2=int(value.get("table2", -1)),
            item2=int(value.get("item2", -1)),
        )
    table1, item1, table2, item2 = (int(v) for v in value)
    return Link(table1=table1, item1=item1, table2=table2, item2=item2)


def to_technique(value: SelectedTechnique | Mapping[str, Any]) -> SelectedTechnique:
    if isinstance(value, SelectedTechnique):
        return value
    return SelectedTechnique(
        technique_id=str(value.get("techniqueId", "") or ""),
        technique_name=str(value.get("techniqueName", "") or ""),
        sub_technique_id=str(value.get("subTechniqueId", "") or ""),
        sub_technique_name=str(value.get("subTechniqueName", "") or ""),
        matrix=str(value.get("matrix", "") or ""),
        tactic_id=str(value.get("tacticId", "") or ""),
        tactic_name=str(value.get("tacticName", "") or ""),
    )


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def to_stage_inputs(value: StageInputs | Mapping[str, Any] | None) -> StageInputs:
    if isinstance(value, StageInputs):
        return value
    data = _mapping(value)
    raw_techniques = data.get("selected_attack_techniques")
    if not isinstance(raw_techniques, (list, tuple)):
        raw_techniques = []
    techniques = [
        to_technique(t) for t in raw_techniques if t and isinstance(t, (SelectedTechnique, Mapping))
    ]
    return StageInputs(
        base_threat_statement=str(data.get("base_threat_statement", "") or ""),
        local_impact=str(data.get("local_impact", "") or ""),
        selected_attack_techniques=techniques,
        base_intermediate_threat=str(data.get("base_intermediate_threat", "") or ""),
        base_payload=_mapping(data.get("base_payload")),
        base_intermediate_payload=_mapping(data.get("base_intermediate_payload")),
    )


def _table_items(tables: Sequence[Any], table_index: int) -> Sequence[Any]:
    if not isinstance(tables, (list, tuple)) or table_index < 0 or table_index >= len(tables):
        return []
    table = tables[table_index]
    if isinstance(table, Mapping):
        table = table.get("items")
    return table if isinstance(table, (list, tuple)) else []


def resolve_item(tables: Sequence[Any], table_index: int, item_index: int) -> str:
    items = _table_items(tables, table_index)
    if item_index < 0 or item_index >= len(items):
        return ""
    return str(items[item_index] or "")


def extract_roles(links: Iterable[Any], tables: Sequence[Any]) -> tuple[dict[str, str], list[str]]:
    """Map linked items to their roles; later links win for a repeated role."""
    selected: dict[str, str] = {}
    seen: dict[str, set[str]] = {}
    for raw in links:
        try:
            link = to_link(raw)
        except (TypeError, ValueError):
            continue
        for table_index, item_index in link.endpoints():
            if table_index < 0 or table_index >= len(TABLE_ROLES):
                continue
            text = resolve_item(tables, table_index, item_index)
            if not text:
                continue
            role = TABLE_ROLES[table_index]
            selected[role] = text
            seen.setdefault(role, set()).add(text)
    conflicts = [role for role in TABLE_ROLES if len(seen.get(role, ())) > 1]
    return selected, conflicts


def join_labels(labels: Sequence[str]) -> str:
    if len(labels) == 1:
        return labels[0]
    return ", ".join(labels[:-1]) + " and " + labels[-1]


def article_for(actor: str) -> str:
    return "An" if _VOWEL_RE.match(actor or "") else "A"


def render_initial(actor: str, vector: str, asset: str, local_objective: str, strategic_objective: str) -> str:
    return (
        f"{article_for(actor)} {actor} with {vector} could target the {asset} "
        f"to conduct {local_objective} in order to {strategic_objective}"
    )


def parse_initial_statement(text: str) -> dict[str, str] | None:
    match = INITIAL_STATEMENT_RE.match(text or "")
    if not match:
        return None
    article, actor, vector, asset, local_objective, strategic_objective = match.groups()
    return {
        "article": article,
        "actor": actor,
        "vector": vector,
        "asset": asset,
        "localObjective": local_objective,
        "strategicObjective": strategic_objective,
    }


def _base_from_payload(payload: Mapping[str, Any]) -> dict[str, str] | None:
    values = {role: str(payload.get(role, "") or "") for role in BASE_ROLES}
    if not all(values.values()):
        return None
    values["article"] = article_for(values["actor"]) + " "
    return values


def _compose_initial(roles: dict[str, str], conflicts: list[str]) -> ComposedStatement:
    missing = [label for role, label in _INITIAL_REQUIRED if not roles.get(role)]
    if missing:
        text = f"Select items from {join_labels(missing)} to build the initial threat statement."
        return ComposedStatement(text=text, stage=STAGE_INITIAL, complete=False, conflicts=conflicts)

    fields = {role: roles[role] for role in BASE_ROLES}
    text = render_initial(
        fields["actor"],
        fields["vector"],
        fields["asset"],
        fields["localObjective"],
        fields["strategicObjective"],
    )
    return ComposedStatement(text=text, stage=STAGE_INITIAL, complete=True, fields=fields, conflicts=conflicts)


def _compose_intermediate(roles: dict[str, str], conflicts: list[str], inputs: StageInputs) -> ComposedStatement:
    base_text = inputs.base_threat_statement
    if not base_text:
        return ComposedStatement(text=MSG_SELECT_INITIAL_BASE, stage=STAGE_INTERMEDIATE, complete=False)

    adversarial_action = roles.get("adversarialAction", "")
    ciana = roles.get("ciana", "")
    local_impact = inputs.local_impact

    missing: list[str] = []
    if not adversarial_action:
        missing.append("Adversarial actions")
    if not local_impact.strip():
        missing.append("Local Impact (free text)")
    if not ciana:
        missing.append("CIANA")
    if missing:
        text = f"Provide {join_labels(missing)} to enhance the threat statement."
        return ComposedStatement(text=text, stage=STAGE_INTERMEDIATE, complete=False, conflicts=conflicts)

    base = _base_from_payload(inputs.base_payload) or parse_initial_statement(base_text)
    if base is None:
        text = f"{base_text} [Enhanced: {adversarial_action}, {local_impact}, {ciana}]"
        fields = {"adversarialAction": adversarial_action, "localImpact": local_impact, "ciana": ciana}
        return ComposedStatement(
            text=text, stage=STAGE_INTERMEDIATE, complete=True, fields=fields, conflicts=conflicts
        )

    text = (
        f"{base['article']}{base['actor']} with {base['vector']} could {adversarial_action} "
        f"which leads to {local_impact}, resulting in {base['localObjective']} impacting {ciana} "
        f"of {base['asset']} in order to {base['strategicObjective']}"
    )
    fields = {role: base[role] for role in BASE_ROLES}
    fields.update({"adversarialAction": adversarial_action, "localImpact": local_impact, "ciana": ciana})
    return ComposedStatement(text=text, stage=STAGE_INTERMEDIATE, complete=True, fields=fields, conflicts=conflicts)


def _compose_final(conflicts: list[str], inputs: StageInputs) -> ComposedStatement:
    base_text = inputs.base_intermediate_threat
    if not base_text:
        return ComposedStatement(text=MSG_SELECT_INTERMEDIATE_BASE, stage=STAGE_FINAL, complete=False)
    techniques = inputs.selected_attack_techniques
    if not techniques:
        return ComposedStatement(text=MSG_SELECT_TECHNIQUES, stage=STAGE_FINAL, complete=False)

    joined = " or ".join(t.render() for t in techniques)
    text = f"Using {joined}, {base_text[:1].lower()}{base_text[1:]}"
    fields: dict[str, Any] = dict(inputs.base_intermediate_payload)
    fields["techniques"] = [t.to_payload() for t in techniques]
    return ComposedStatement(text=text, stage=STAGE_FINAL, complete=True, fields=fields, conflicts=conflicts)


def compose_statement(
    stage: str,
    links: Iterable[Any],
    tables: Sequence[Any],
    stage_inputs: StageInputs | Mapping[str, Any] | None = None,
) -> ComposedStatement:
    inputs = to_stage_inputs(stage_inputs)
    roles, conflicts = extract_roles(links, tables)
    if stage == STAGE_INITIAL:
        return _compose_initial(roles, conflicts)
    if stage == STAGE_INTERMEDIATE:
        return _compose_intermediate(roles, conflicts, inputs)
    return _compose_final(conflicts, inputs)


def compose(
    stage: str,
    links: Iterable[Any],
    tables: Sequence[Any],
    stage_inputs: StageInputs | Mapping[str, Any] | None = None,
) -> str:
    return compose_statement(stage, links, tables, stage_inputs).text
