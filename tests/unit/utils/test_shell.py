"""Unit tests for local process execution."""

import base64
from unittest.mock import MagicMock, patch

import pytest
from profsweep.utils.shell import (
    CommandResult,
    encode_script,
    find_powershell,
    run_command,
    run_powershell,
)


class TestRunCommand:
    """Tests for run_command."""

    @patch("profsweep.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """Output and exit code are captured without raising."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["tool", "--flag"], timeout=5)

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)
        assert not result.success
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False
        assert kwargs["timeout"] == 5


class TestFindPowershell:
    """Tests for find_powershell."""

    @patch("profsweep.utils.shell.shutil.which")
    def test_prefers_pwsh(self, mock_which: MagicMock) -> None:
        mock_which.side_effect = lambda name: f"/usr/bin/{name}"
        assert find_powershell() == "pwsh"

    @patch("profsweep.utils.shell.shutil.which")
    def test_falls_back(self, mock_which: MagicMock) -> None:
        mock_which.side_effect = lambda name: "C:\\ps.exe" if name == "powershell" else None
        assert find_powershell() == "powershell"

    @patch("profsweep.utils.shell.shutil.which", return_value=None)
    def test_none_available(self, mock_which: MagicMock) -> None:
        assert find_powershell() is None


class TestRunPowershell:
    """Tests for run_powershell."""

    def test_encode_script(self) -> None:
        """Scripts are base64 encoded UTF-16LE."""
        encoded = encode_script("Write-Output 'ä'")
        assert base64.b64decode(encoded).decode("utf-16-le") == "Write-Output 'ä'"

    @patch("profsweep.utils.shell.run_command")
    @patch("profsweep.utils.shell.find_powershell", return_value="pwsh")
    def test_runs_encoded(self, mock_find: MagicMock, mock_run: MagicMock) -> None:
        """Scripts run encoded, without profile or interaction."""
        mock_run.return_value = CommandResult(stdout="[]", stderr="", returncode=0)

        result = run_powershell('Get-ADComputer -Filter "*"', timeout=30)

        assert result.stdout == "[]"
        mock_run.assert_called_once_with(
            [
                "pwsh",
                "-NoProfile",
                "-NonInteractive",
                "-EncodedCommand",
                encode_script('Get-ADComputer -Filter "*"'),
            ],
            timeout=30,
        )

    @patch("profsweep.utils.shell.find_powershell", return_value=None)
    def test_missing_powershell(self, mock_find: MagicMock) -> None:
        with pytest.raises(FileNotFoundError, match="PowerShell"):
            run_powershell("Get-Date")
