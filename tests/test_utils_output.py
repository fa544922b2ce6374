"""Tests for utils/output.py: JSON/CSV/table output routing."""
import json

from minimax.models.resources import Customer
from minimax.utils.output import OutputFormat, print_csv, print_json, print_output, to_rows


# ── print_json ───────────────────────────────────────────────────────

def test_print_json_list(capsys):
    print_json([{"Id": 1}, {"Id": 2}])
    assert len(json.loads(capsys.readouterr().out)) == 2


def test_print_json_empty(capsys):
    print_json([])
    assert json.loads(capsys.readouterr().out) == []


# ── print_csv ────────────────────────────────────────────────────────

def test_print_csv_basic(capsys):
    print_csv([{"name": "a", "val": "1"}, {"name": "b", "val": "2"}])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "name,val"
    assert len(lines) == 3


def test_print_csv_selected_columns(capsys):
    print_csv([{"name": "a", "val": "1", "extra": "x"}], columns=["name", "val"])
    assert "extra" not in capsys.readouterr().out


def test_print_csv_empty(capsys):
    print_csv([])
    assert capsys.readouterr().out == ""


def test_print_csv_dict_input(capsys):
    print_csv({"name": "a", "val": "1"})
    assert len(capsys.readouterr().out.strip().split("\n")) == 2


# ── print_output routing ────────────────────────────────────────────

def test_output_routes_to_json(capsys):
    print_output([{"x": 1}], fmt=OutputFormat.JSON)
    assert json.loads(capsys.readouterr().out) == [{"x": 1}]


def test_output_table_goes_to_stderr(capsys):
    print_output([{"x": 1}], fmt=OutputFormat.TABLE, title="T")
    captured = capsys.readouterr()
    assert captured.out == ""


# ── to_rows ──────────────────────────────────────────────────────────

def test_to_rows_models():
    rows = to_rows([Customer(Id=1, Name="Acme"), Customer(Id=2, Name="Beta", Code="B")])
    assert rows == [{"Id": 1, "Name": "Acme"}, {"Id": 2, "Name": "Beta", "Code": "B"}]


def test_to_rows_single_model_keeps_extra_fields():
    assert to_rows(Customer(Id=1, Name="Acme", Custom="x")) == {"Id": 1, "Name": "Acme", "Custom": "x"}
