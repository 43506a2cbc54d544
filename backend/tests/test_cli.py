"""
Tests for the maintenance CLI
"""
from tipsplit.cli import build_parser, main
from tipsplit.services.calculation_service import CalculationService


def test_parser_knows_subcommands():
    parser = build_parser()

    assert parser.parse_args(["stamp"]).revision == "head"
    assert parser.parse_args(["clear", "--yes"]).yes is True
    assert parser.parse_args(["serve", "--port", "9000"]).port == 9000


def test_no_subcommand_prints_help(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().out


def test_clear_requires_confirmation(db, make_calculation, capsys):
    make_calculation()

    assert main(["clear"]) == 1
    assert CalculationService(db).count() == 1
    assert "--yes" in capsys.readouterr().out


def test_clear_with_confirmation(db, make_calculation, capsys):
    make_calculation()
    make_calculation()

    assert main(["clear", "--yes"]) == 0
    assert "Deleted 2 calculations" in capsys.readouterr().out
    assert CalculationService(db).count() == 0


def test_stats(db, make_calculation, capsys):
    make_calculation(bill_amount="100.00", tip_percentage="10", people_count=2)

    assert main(["stats"]) == 0
    out = capsys.readouterr().out
    assert "Total calculations:     1" in out
    assert "UGX 100.00" in out
    assert "Average party size:     2.0" in out
