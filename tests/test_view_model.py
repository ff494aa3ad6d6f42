"""Tests for ViewModel."""

import logging

from livex import ViewModel


class _Model(ViewModel):
    def __init__(self):
        super().__init__()
        self.cleared_calls = 0

    def on_cleared(self):
        self.cleared_calls += 1


class TestViewModel:
    def test_default_on_cleared_does_nothing(self):
        model = ViewModel()
        model.clear()
        assert model.cleared

    def test_on_cleared_runs_once(self):
        model = _Model()
        assert not model.cleared
        model.clear()
        model.clear()
        assert model.cleared_calls == 1

    def test_clear_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="livex.view_model"):
            _Model().clear()
        assert "Clearing _Model" in caplog.text
