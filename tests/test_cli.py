"""Tests for CLI parsing, dispatch and runtime handlers."""

import csv

import pytest

import main as entrypoint
from config.settings import Settings
from var_service.cli import runtime
from var_service.cli.arguments import apply_common_settings, build_argument_parser, dispatch
from var_service.cli.registry import get_registry
from var_service.data.returns import ReturnSeriesProvider


def test_parser_accepts_negative_returns():
    args = build_argument_parser().parse_args(
        ["var", "--returns", "-0.05", "-0.02", "0.01", "--confidence", "0.8"]
    )
    assert args.mode == "var"
    assert args.returns == [-0.05, -0.02, 0.01]
    assert args.confidence == 0.8


def test_apply_common_settings_overrides():
    args = build_argument_parser().parse_args(
        ["fetch", "--ticker", "AAPL", "--sources", "YFinance", "--seed", "3", "--lookback-days", "30"]
    )
    settings = Settings()
    apply_common_settings(args, settings)

    assert settings.data.sources == ["yfinance"]
    assert settings.var.monte_carlo_seed == 3
    assert settings.data.lookback_days == 30


def test_dispatch_requires_ticker_for_fetch():
    args = build_argument_parser().parse_args(["fetch"])
    with pytest.raises(SystemExit):
        dispatch(args, Settings(), handlers={})


def test_dispatch_routes_to_handler():
    calls = []
    handlers = {"var": lambda settings, method, **kwargs: calls.append((method, kwargs))}
    args = build_argument_parser().parse_args(["var", "--returns", "0.01", "--method", "parametric"])

    dispatch(args, Settings(), handlers=handlers)

    assert calls == [("parametric", {"ticker": None, "returns": [0.01], "json_output": False})]


def test_runtime_handlers_fill_the_registry():
    table = get_registry()

    assert {"serve", "fetch", "var", "report"} <= set(table)
    assert table["var"] is runtime.cmd_var


def test_main_var_prints_result(capsys):
    entrypoint.main(
        ["var", "--returns", "-0.05", "-0.02", "0.01", "0.03", "0.04", "--confidence", "0.8"]
    )

    out = capsys.readouterr().out
    assert "historical VaR @ 80.00%: 0.020000" in out


def test_main_exits_non_zero_on_service_error():
    with pytest.raises(SystemExit) as excinfo:
        entrypoint.main(["var", "--returns", "0.01", "--method", "bogus"])
    assert excinfo.value.code == 1


def test_cmd_fetch_and_report(monkeypatch, tmp_path, fake_provider, prices, fixed_clock):
    provider = ReturnSeriesProvider(
        [fake_provider("yahoo", prices([100.0, 105.0, 103.0, 104.0]))], clock=fixed_clock
    )
    monkeypatch.setattr(runtime.ReturnSeriesProvider, "from_settings", lambda settings: provider)

    settings = Settings()
    settings.var.monte_carlo_seed = 1

    payload = runtime.cmd_fetch(settings, "aapl")
    assert payload["ticker"] == "AAPL"
    assert len(payload["returns"]) == 3
    assert payload["preview"][-1]["date"] == "2024-01-05"

    path = runtime.cmd_report(
        settings,
        "aapl",
        "montecarlo",
        output=str(tmp_path / "AAPL.csv"),
        horizon_days=10,
    )
    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    assert rows[0] == ["Date", "Return"]
    assert ["Method", "montecarlo"] in rows
    assert [row[0] for row in rows[-2:]] == ["95%", "99%"]
