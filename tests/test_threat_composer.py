from __future__ import annotations

import pytest

from app.services.threat_composer import (
    MSG_SELECT_INITIAL_BASE,
    MSG_SELECT_INTERMEDIATE_BASE,
    MSG_SELECT_TECHNIQUES,
    Link,
    SelectedTechnique,
    StageInputs,
    compose,
    compose_statement,
    is_diagnostic,
    parse_initial_statement,
    parse_stage,
    render_initial,
    tables_for_stage,
)

TABLES = [
    ["attacker", "Hacker"],
    ["phishing", "stolen credentials"],
    ["Spoofing"],
    ["database", "payment gateway"],
    ["steal credentials"],
    ["exfiltrate data"],
    ["Authentication"],
    ["cause reputational harm"],
]

INITIAL_LINKS = [Link(0, 0, 1, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)]
INITIAL_TEXT = (
    "An attacker with phishing could target the database to conduct exfiltrate data "
    "in order to cause reputational harm"
)


def test_initial_statement_renders_template_with_vowel_article() -> None:
    assert compose("initial", INITIAL_LINKS, TABLES) == INITIAL_TEXT


def test_initial_statement_uses_a_for_consonant_actor() -> None:
    links = [Link(0, 1, 1, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)]
    assert compose("initial", links, TABLES).startswith("A Hacker with phishing could target")


def test_initial_accepts_titled_tables_and_mapping_links() -> None:
    titled = [{"title": f"T{i}", "items": items} for i, items in enumerate(TABLES)]
    links = [{"table1": 0, "item1": 0, "table2": 1, "item2": 0}, (3, 0, 5, 0), [5, 0, 7, 0]]
    assert compose("initial", links, titled) == INITIAL_TEXT


def test_initial_missing_everything_lists_all_roles() -> None:
    result = compose_statement("initial", [], TABLES)
    assert not result.complete
    assert result.text == (
        "Select items from Actors, Vectors, Assets, Local Objectives and Strategic Objectives "
        "to build the initial threat statement."
    )


def test_initial_missing_single_role_has_no_conjunction() -> None:
    links = [Link(0, 0, 3, 0), Link(5, 0, 7, 0)]
    assert compose("initial", links, TABLES) == "Select items from Vectors to build the initial threat statement."


def test_initial_missing_list_never_names_a_set_role() -> None:
    text = compose("initial", [Link(0, 0, 1, 0)], TABLES)
    assert text == (
        "Select items from Assets, Local Objectives and Strategic Objectives to build the initial threat statement."
    )
    assert "Actors" not in text
    assert "Vectors" not in text


def test_later_link_wins_and_is_reported_as_conflict() -> None:
    links = [Link(0, 0, 1, 0), Link(0, 1, 3, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)]
    result = compose_statement("initial", links, TABLES)
    assert result.text.startswith("A Hacker with phishing")
    assert result.conflicts == ["actor"]


def test_repeating_the_same_item_is_not_a_conflict() -> None:
    links = INITIAL_LINKS + [Link(0, 0, 1, 0)]
    assert compose_statement("initial", links, TABLES).conflicts == []


def test_unresolvable_endpoints_are_skipped() -> None:
    links = [Link(0, 9, 1, 0), Link(42, 0, 3, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)]
    result = compose_statement("initial", links, TABLES)
    assert result.text == "Select items from Actors to build the initial threat statement."


def test_initial_output_always_parses_back() -> None:
    for actor in ("insider", "Nation State", "Organised Crime Group"):
        text = render_initial(actor, "usb drop", "file server", "data theft", "disrupt operations")
        parsed = parse_initial_statement(text)
        assert parsed is not None
        assert parsed["actor"] == actor
        assert parsed["vector"] == "usb drop"
        assert parsed["asset"] == "file server"
        assert parsed["localObjective"] == "data theft"
        assert parsed["strategicObjective"] == "disrupt operations"


def _intermediate_inputs(base: str = INITIAL_TEXT, local_impact: str = "account takeover") -> StageInputs:
    return StageInputs(base_threat_statement=base, local_impact=local_impact)


def test_intermediate_reassembles_base_statement() -> None:
    result = compose_statement("intermediate", [Link(4, 0, 6, 0)], TABLES, _intermediate_inputs())
    assert result.complete
    assert result.text == (
        "An attacker with phishing could steal credentials which leads to account takeover, "
        "resulting in exfiltrate data impacting Authentication of database in order to cause reputational harm"
    )
    assert result.fields["asset"] == "database"
    assert result.fields["ciana"] == "Authentication"


def test_intermediate_requires_base_statement() -> None:
    result = compose_statement("intermediate", [Link(4, 0, 6, 0)], TABLES, _intermediate_inputs(base=""))
    assert result.text == MSG_SELECT_INITIAL_BASE
    assert not result.complete


def test_intermediate_lists_missing_inputs() -> None:
    result = compose_statement("intermediate", [], TABLES, _intermediate_inputs(local_impact="   "))
    assert result.text == "Provide Adversarial actions, Local Impact (free text) and CIANA to enhance the threat statement."


def test_intermediate_falls_back_for_edited_base() -> None:
    inputs = _intermediate_inputs(base="Someone could break things")
    result = compose_statement("intermediate", [Link(4, 0, 6, 0)], TABLES, inputs)
    assert result.complete
    assert result.text == "Someone could break things [Enhanced: steal credentials, account takeover, Authentication]"


def test_intermediate_prefers_structured_base_fields() -> None:
    inputs = StageInputs(
        base_threat_statement="free text that no longer matches",
        local_impact="lost laptops",
        base_payload={
            "actor": "insider",
            "vector": "usb drop",
            "asset": "file server",
            "localObjective": "data theft",
            "strategicObjective": "disrupt operations",
        },
    )
    text = compose("intermediate", [Link(4, 0, 6, 0)], TABLES, inputs)
    assert text == (
        "An insider with usb drop could steal credentials which leads to lost laptops, "
        "resulting in data theft impacting Authentication of file server in order to disrupt operations"
    )


def test_final_joins_techniques_and_lowercases_base() -> None:
    techniques = [
        SelectedTechnique(
            technique_id="T1566",
            technique_name="Phishing",
            sub_technique_id="T1566.001",
            sub_technique_name="Spearphishing Attachment",
        ),
        SelectedTechnique(technique_id="T1078", technique_name="Valid Accounts"),
        SelectedTechnique(technique_id="T1110", technique_name="Brute Force"),
    ]
    inputs = StageInputs(base_intermediate_threat="An attacker could steal credentials", selected_attack_techniques=techniques)
    result = compose_statement("final", [], TABLES, inputs)
    assert result.text == (
        "Using Spearphishing Attachment (T1566.001) or Valid Accounts (T1078) or Brute Force (T1110), "
        "an attacker could steal credentials"
    )
    assert result.text.count(" or ") == len(techniques) - 1
    assert [t["techniqueId"] for t in result.fields["techniques"]] == ["T1566", "T1078", "T1110"]


def test_final_accepts_camel_case_technique_mappings() -> None:
    inputs = {
        "base_intermediate_threat": "A hacker could pivot",
        "selected_attack_techniques": [{"techniqueId": "T1078", "techniqueName": "Valid Accounts"}],
    }
    assert compose("final", [], TABLES, inputs) == "Using Valid Accounts (T1078), a hacker could pivot"


def test_final_diagnostics() -> None:
    assert compose("final", [], TABLES, StageInputs()) == MSG_SELECT_INTERMEDIATE_BASE
    assert compose("final", [], TABLES, StageInputs(base_intermediate_threat="An x could y")) == MSG_SELECT_TECHNIQUES


def test_unknown_stage_composes_as_final() -> None:
    assert compose("draft", INITIAL_LINKS, TABLES) == MSG_SELECT_INTERMEDIATE_BASE
    assert tables_for_stage("draft") == [0, 1, 2, 3, 4, 5, 6, 7]


def test_stage_tables_and_parsing() -> None:
    assert tables_for_stage("initial") == [0, 1, 3, 5, 7]
    assert tables_for_stage("intermediate") == [0, 1, 2, 3, 4, 5, 6, 7]
    assert parse_stage(" Final ") == "final"
    with pytest.raises(ValueError):
        parse_stage("draft")


def test_diagnostics_are_recognised() -> None:
    assert is_diagnostic(compose("initial", [], TABLES))
    assert is_diagnostic(compose("intermediate", [], TABLES, _intermediate_inputs()))
    assert is_diagnostic(MSG_SELECT_TECHNIQUES)
    assert not is_diagnostic(INITIAL_TEXT)
    assert not is_diagnostic("Select items from the shelf, then leave")


def test_malformed_tables_resolve_to_nothing() -> None:
    assert compose("initial", [[0, 0, 1, 0]], [5, 5]) == (
        "Select items from Actors, Vectors, Assets, Local Objectives and Strategic Objectives "
        "to build the initial threat statement."
    )
    assert compose("initial", [[0, 0, 1, 0]], "not tables").startswith("Select items from Actors")
    assert compose("initial", [[0, 0, 1, 0]], [{"items": 7}, ["phishing"]]).startswith("Select items from Actors,")
    assert compose("initial", [[0, 0, 1], "x", {"table1": "a"}], TABLES).startswith("Select items from Actors,")


def test_malformed_stage_inputs_are_ignored() -> None:
    inputs = {
        "base_intermediate_threat": "A hacker could pivot",
        "selected_attack_techniques": ["T1566", None, {"techniqueId": "T1078", "techniqueName": "Valid Accounts"}],
        "base_payload": [1, 2],
    }
    assert compose("final", [], TABLES, inputs) == "Using Valid Accounts (T1078), a hacker could pivot"

    only_strings = {"base_intermediate_threat": "A hacker could pivot", "selected_attack_techniques": "T1566"}
    assert compose("final", [], TABLES, only_strings) == MSG_SELECT_TECHNIQUES
    assert compose("final", [], TABLES, ["not", "a", "mapping"]) == MSG_SELECT_INTERMEDIATE_BASE
