"""Tests for bjsim/analysis/balance_plot.py — Plotly balance trajectory chart.

No display server is required: Plotly figures are in-memory objects and the
save helper writes HTML without rendering.
"""

from __future__ import annotations

import os
import runpy
import sys

import numpy as np
import plotly.graph_objects as go
import pytest

from bjsim.analysis.balance_plot import build_balance_figure, save_balance_html
from bjsim.analysis.simulator import SimulationResult, run_simulation


@pytest.fixture(scope="module")
def result() -> SimulationResult:
    return run_simulation(player_ids=("yo", "mo"), initial_balance=500, n_rounds=100, seed=1)


class TestBuildBalanceFigure:
    def test_returns_figure(self, result) -> None:
        assert isinstance(build_balance_figure(result), go.Figure)

    def test_one_trace_per_player(self, result) -> None:
        fig = build_balance_figure(result)
        assert [trace.name for trace in fig.data] == ["yo", "mo"]

    def test_trace_data_matches_history(self, result) -> None:
        fig = build_balance_figure(result)
        for index, trace in enumerate(fig.data):
            assert np.array_equal(np.asarray(trace.y), result.history[:, index])
            assert len(trace.x) == result.history.shape[0]

    def test_default_title_mentions_rounds(self, result) -> None:
        fig = build_balance_figure(result)
        assert f"{result.n_rounds:,}" in fig.layout.title.text

    def test_custom_title(self, result) -> None:
        fig = build_balance_figure(result, title="Session")
        assert fig.layout.title.text == "Session"


class TestSaveBalanceHtml:
    def test_writes_file(self, result, tmp_path) -> None:
        path = os.path.join(tmp_path, "balance.html")
        save_balance_html(build_balance_figure(result), path)
        assert os.path.exists(path)
        with open(path, encoding="utf-8") as f:
            assert "<html>" in f.read()


class TestSimulatorReport:
    def test_main_writes_balance_chart(self, tmp_path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(sys, "argv", ["simulator", "20"])
        runpy.run_module("bjsim.analysis.simulator", run_name="__main__")

        assert (tmp_path / "balance.html").exists()
        out = capsys.readouterr().out
        assert "Saved: balance.html" in out
        assert "That's all Folks!" in out
