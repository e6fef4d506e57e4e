"""Tests for the command line."""

import io
import json

import pytest

from anonimizador import cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)


def run(monkeypatch, capsys, argv, stdin=""):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
    cli.main(argv)
    return capsys.readouterr().out


def test_redact_text(monkeypatch, capsys):
    out = run(monkeypatch, capsys, ["redact-text"], "CPF: 123.456.789-00")
    assert out == "CPF: [CPF]"


def test_redact_text_with_names_and_json(monkeypatch, capsys, tmp_path):
    names = tmp_path / "partes.txt"
    names.write_text("Empresa ABC Ltda (reclamada)\n\n", encoding="utf-8")
    out = run(
        monkeypatch, capsys,
        ["--name", "João Silva", "--names-file", str(names), "redact-text", "--json"],
        "João Silva trabalhou na Empresa ABC Ltda.",
    )
    data = json.loads(out)
    assert data["text"] == "[PESSOA 1] trabalhou na [PESSOA 2]."
    assert data["counts"] == {"PESSOA": 2}


def test_disable_and_valores(monkeypatch, capsys):
    out = run(
        monkeypatch, capsys,
        ["--disable", "cpf,email", "--valores", "redact-text"],
        "CPF 123.456.789-00, a@b.com, R$ 10,00",
    )
    assert out == "CPF 123.456.789-00, a@b.com, [VALOR]"


def test_config_file(monkeypatch, capsys, tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"enabled": True, "nomesUsuario": ["Pedro"]}), encoding="utf-8")
    out = run(monkeypatch, capsys, ["--config", str(settings), "redact-text"], "Pedro, CEP 12.345-678")
    assert out == "[PESSOA 1], CEP [CEP]"


def test_redact_messages(monkeypatch, capsys):
    messages = [{"role": "user", "content": "Tel: (11) 9876-5432"}]
    out = run(monkeypatch, capsys, ["redact"], json.dumps(messages))
    assert json.loads(out) == [{"role": "user", "content": "Tel: [TELEFONE]"}]


def test_categories(monkeypatch, capsys):
    out = run(monkeypatch, capsys, ["--disable", "cep", "categories"])
    lines = out.splitlines()
    assert len(lines) == 12
    assert lines[0].split() == ["PROCESSO", "[PROCESSO]", "on"]
    assert "off" in next(line for line in lines if line.startswith("CEP"))
    assert "off" in next(line for line in lines if line.startswith("VALOR"))


def test_unknown_category_exits_2(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["--disable", "nope", "redact-text"], "x")
    assert exc.value.code == 2


def test_bad_json_exits_2(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, capsys, ["redact"], "{not json")
    assert exc.value.code == 2
