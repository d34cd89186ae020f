"""Tests for the rowshift-describe entry point."""

import json
import logging
from unittest.mock import patch

import pytest

from main import main

pytestmark = pytest.mark.smoke


@pytest.fixture
def describe_env(app_home, isolated_root_logger):
    with patch("main.sentry_sdk.init") as mock_init, patch(
        "diagnostics.faulthandler.enable"
    ):
        yield app_home, mock_init


def _log_entries(app_home):
    lines = (app_home / "logs" / "rowshift.log").read_text().splitlines()
    return [json.loads(line) for line in lines]


def test_prints_step_for_active_type(describe_env, capsys):
    app_home, mock_init = describe_env
    code = main(['{"shift_type": "XY Multiply", "multiply_x": true}'])
    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert "SHIFT_TYPE=XY_MULTIPLY" in out
    step = [line for line in out if line.startswith("STEP=")][0]
    assert "-x" in step
    assert "-y" not in step
    mock_init.assert_called_once()


def test_no_params_is_default(describe_env, capsys):
    assert main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert "SHIFT_TYPE=DEFAULT" in out
    assert "STEP=" in out


def test_log_record_carries_shift_context(describe_env):
    app_home, _ = describe_env
    main(['{"shift_type": "Scale", "scale_x": 3}'])
    for handler in logging.getLogger().handlers:
        handler.flush()
    entries = [e for e in _log_entries(app_home) if e["logger"] == "main"]
    assert entries[-1]["effect_id"] == "fx.row_shift"
    assert entries[-1]["shift_type"] == "SCALE"


@pytest.mark.parametrize(
    "raw", ["{not json", "[1, 2]", '{"linear_form": "sideways"}']
)
def test_bad_params_exit_code(describe_env, capsys, raw):
    assert main([raw]) == 2
    assert "ERROR:" in capsys.readouterr().err
