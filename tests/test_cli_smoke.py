from __future__ import annotations

import json
import os

from threat_workbench.cli.main import main


def test_compose_cli_smoke(tmp_path, capsys) -> None:
    input_path = tmp_path / "input.json"
    output_path = tmp_path / "out" / "result.json"
    input_path.write_text(
        json.dumps(
            {
                "stage": "initial",
                "tables": [["attacker"], ["phishing"], [], ["database"], [], ["exfiltrate data"], [], ["cause harm"]],
                "links": [[0, 0, 1, 0], [3, 0, 5, 0], {"table1": 5, "item1": 0, "table2": 7, "item2": 0}],
            }
        ),
        encoding="utf-8",
    )

    code = main(["compose", str(input_path), "--out", str(output_path)])

    assert code == 0
    expected = "An attacker with phishing could target the database to conduct exfiltrate data in order to cause harm"
    assert capsys.readouterr().out.splitlines()[0] == expected
    result = json.loads(output_path.read_text(encoding="utf-8"))
    assert result["complete"] is True
    assert result["fields"]["actor"] == "attacker"
    assert result["conflicts"] == []


def test_family_cli_smoke(tmp_path, capsys) -> None:
    input_path = tmp_path / "threats.json"
    input_path.write_text(
        json.dumps(
            [
                {"id": 1, "threat_statement": "initial"},
                {"id": 2, "threat_statement": "intermediate", "parent_threat_id": 1},
                {"id": 3, "threat_statement": "final", "parent_threat_id": 2},
                {"id": 4, "threat_statement": "other"},
            ]
        ),
        encoding="utf-8",
    )

    code = main(["family", str(input_path), "3"])

    assert code == 0
    assert capsys.readouterr().out.split() == ["1", "2", "3"]


def test_cli_rejects_bad_input(tmp_path) -> None:
    missing = tmp_path / "missing.json"
    assert main(["compose", str(missing)]) == 2

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2", encoding="utf-8")
    assert main(["compose", str(bad)]) == 2

    wrong_shape = tmp_path / "wrong.json"
    wrong_shape.write_text(json.dumps({"not": "a list"}), encoding="utf-8")
    assert main(["family", str(wrong_shape), "1"]) == 2


def test_cli_rejects_malformed_fields(tmp_path, capsys) -> None:
    techniques = tmp_path / "techniques.json"
    techniques.write_text(
        json.dumps(
            {
                "stage": "final",
                "tables": [],
                "links": [],
                "stage_inputs": {"base_intermediate_threat": "A hacker could pivot", "selected_attack_techniques": ["T1566"]},
            }
        ),
        encoding="utf-8",
    )
    assert main(["compose", str(techniques)]) == 2
    assert "selected_attack_techniques" in capsys.readouterr().err

    tables = tmp_path / "tables.json"
    tables.write_text(json.dumps({"stage": "initial", "tables": [5, 5], "links": [[0, 0, 1, 0]]}), encoding="utf-8")
    assert main(["compose", str(tables)]) == 2

    parents = tmp_path / "parents.json"
    parents.write_text(
        json.dumps([{"id": 1, "threat_statement": "x"}, {"id": 2, "threat_statement": "y", "parent_threat_id": [1]}]),
        encoding="utf-8",
    )
    assert main(["family", str(parents), "1"]) == 2
    assert "parent_threat_id" in capsys.readouterr().err


def test_launcher_picks_a_free_port(monkeypatch, tmp_path) -> None:
    from threat_workbench.packaged_app import configure_runtime_env, find_port, port_is_free

    port = find_port()
    assert port_is_free(port)

    monkeypatch.setenv("RUNTIME_DIR", str(tmp_path / "launcher"))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    runtime_dir = configure_runtime_env()
    assert runtime_dir.is_dir()
    assert os.environ["DATABASE_URL"].endswith("launcher/threat_workbench.db")
