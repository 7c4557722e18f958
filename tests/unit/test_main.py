"""Unit tests for the command-line entry point."""

from unittest.mock import MagicMock, patch

import pytest

import assistant_relay.main as main_module


class TestMain:
    """Tests for run mode selection."""

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            ("separate", "run_separate"),
            ("integrated", "run_integrated"),
            ("other", "run_integrated"),
        ],
    )
    def test_run_mode_selects_runner(self, mode: str, expected: str) -> None:
        with (
            patch.dict("os.environ", {"RUN_MODE": mode}),
            patch.object(main_module, "run_separate") as run_separate,
            patch.object(main_module, "run_integrated") as run_integrated,
        ):
            main_module.main()

        runners = {"run_separate": run_separate, "run_integrated": run_integrated}
        runners[expected].assert_called_once()
        for name, runner in runners.items():
            if name != expected:
                runner.assert_not_called()


class TestRunSeparate:
    """Tests for the two-process mode."""

    def test_exit_of_one_child_stops_both(self) -> None:
        api_proc, ui_proc = MagicMock(), MagicMock()
        api_proc.poll.return_value = None
        ui_proc.poll.return_value = 1

        with patch("subprocess.Popen", side_effect=[api_proc, ui_proc]) as popen:
            main_module.run_separate()

        assert popen.call_count == 2
        assert "assistant_relay.api.app:app" in popen.call_args_list[0].args[0]
        for proc in (api_proc, ui_proc):
            proc.terminate.assert_called_once()
            proc.wait.assert_called_once()
