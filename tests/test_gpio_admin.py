"""Tests for the gpio-admin helper implementations."""

import shutil
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pi_gpio.errors import ExportError, UnexportError
from pi_gpio.gpio_admin import CommandGPIOAdmin, MockGPIOAdmin, get_gpio_admin
from pi_gpio.options import Pull


def _fake_process(returncode: int, stderr: bytes = b"") -> MagicMock:
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(b"", stderr))
    return process


def test_get_gpio_admin_mock(tmp_path: Path) -> None:
    """Test that get_gpio_admin returns MockGPIOAdmin when requested."""
    admin = get_gpio_admin(mock=True, root=tmp_path)
    assert isinstance(admin, MockGPIOAdmin)
    assert admin.root == tmp_path


def test_get_gpio_admin_real() -> None:
    """Test that get_gpio_admin returns the command runner otherwise."""
    admin = get_gpio_admin(mock=False, command="/usr/local/bin/gpio-admin")
    assert isinstance(admin, CommandGPIOAdmin)
    assert admin.command == "/usr/local/bin/gpio-admin"


def test_mock_admin_creates_temporary_root() -> None:
    """Test that the mock picks its own directory when none is given."""
    admin = MockGPIOAdmin()
    try:
        assert admin.root.is_dir()
    finally:
        shutil.rmtree(admin.root)


class TestCommandGPIOAdmin:
    """Tests for CommandGPIOAdmin."""

    @pytest.mark.asyncio
    @patch("asyncio.create_subprocess_exec", new_callable=AsyncMock)
    async def test_export_argv_with_pull(self, mock_exec: AsyncMock) -> None:
        """Test that export passes the channel and pull argument."""
        mock_exec.return_value = _fake_process(0)

        await CommandGPIOAdmin().export(7, Pull.UP)

        args = mock_exec.call_args.args
        assert args == ("gpio-admin", "export", "7", "pullup")

    @pytest.mark.asyncio
    @patch("asyncio.create_subprocess_exec", new_callable=AsyncMock)
    async def test_export_argv_without_pull(self, mock_exec: AsyncMock) -> None:
        """Test that no pull argument is passed when none is requested."""
        mock_exec.return_value = _fake_process(0)

        await CommandGPIOAdmin("my-admin").export(14)

        assert mock_exec.call_args.args == ("my-admin", "export", "14")

    @pytest.mark.asyncio
    @patch("asyncio.create_subprocess_exec", new_callable=AsyncMock)
    async def test_unexport_argv(self, mock_exec: AsyncMock) -> None:
        """Test the unexport command line."""
        mock_exec.return_value = _fake_process(0)

        await CommandGPIOAdmin().unexport(29)

        assert mock_exec.call_args.args == ("gpio-admin", "unexport", "29")

    @pytest.mark.asyncio
    @patch("asyncio.create_subprocess_exec", new_callable=AsyncMock)
    async def test_export_nonzero_exit(self, mock_exec: AsyncMock) -> None:
        """Test that a non-zero exit raises ExportError with the helper's stderr."""
        mock_exec.return_value = _fake_process(1, b"gpio-admin: permission denied\n")

        with pytest.raises(ExportError) as exc_info:
            await CommandGPIOAdmin().export(7)

        assert exc_info.value.channel == 7
        assert exc_info.value.returncode == 1
        assert "permission denied" in exc_info.value.stderr

    @pytest.mark.asyncio
    @patch("asyncio.create_subprocess_exec", new_callable=AsyncMock)
    async def test_unexport_nonzero_exit(self, mock_exec: AsyncMock) -> None:
        """Test that a non-zero exit raises UnexportError."""
        mock_exec.return_value = _fake_process(2)

        with pytest.raises(UnexportError, match="exit status 2"):
            await CommandGPIOAdmin().unexport(7)

    @pytest.mark.asyncio
    async def test_missing_command(self) -> None:
        """Test that a helper which cannot be started raises ExportError."""
        admin = CommandGPIOAdmin("/nonexistent/gpio-admin")

        with pytest.raises(ExportError) as exc_info:
            await admin.export(7)

        assert exc_info.value.returncode is None
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_real_process_exit_status(self) -> None:
        """Test against real executables that ignore their arguments."""
        true_path = shutil.which("true")
        false_path = shutil.which("false")
        if true_path is None or false_path is None:
            pytest.skip("true/false not available")

        await CommandGPIOAdmin(true_path).export(7, Pull.DOWN)
        with pytest.raises(UnexportError):
            await CommandGPIOAdmin(false_path).unexport(7)


class TestMockGPIOAdmin:
    """Tests for MockGPIOAdmin."""

    @pytest.mark.asyncio
    async def test_export_creates_control_files(self, mock_admin: MockGPIOAdmin) -> None:
        """Test that export fakes the kernel's gpio<channel> directory."""
        await mock_admin.export(7)

        assert mock_admin.is_exported(7)
        assert (mock_admin.root / "gpio7" / "direction").read_text() == "in\n"
        assert (mock_admin.root / "gpio7" / "value").read_text() == "0\n"
        assert mock_admin.calls == [("export", 7, Pull.NONE)]

    @pytest.mark.asyncio
    async def test_pullup_idles_high(self, mock_admin: MockGPIOAdmin) -> None:
        """Test that a pull-up channel reads high after export."""
        await mock_admin.export(8, Pull.UP)

        assert (mock_admin.root / "gpio8" / "value").read_text() == "1\n"
        assert mock_admin.get_pull(8) is Pull.UP

    @pytest.mark.asyncio
    async def test_unexport_removes_control_files(self, mock_admin: MockGPIOAdmin) -> None:
        """Test that unexport removes the channel directory."""
        await mock_admin.export(7)
        await mock_admin.unexport(7)

        assert not mock_admin.is_exported(7)
        assert not (mock_admin.root / "gpio7").exists()
        assert mock_admin.get_pull(7) is None

    @pytest.mark.asyncio
    async def test_export_twice_fails(self, mock_admin: MockGPIOAdmin) -> None:
        """Test that exporting an exported channel is refused like the kernel does."""
        await mock_admin.export(7)

        with pytest.raises(ExportError, match="busy"):
            await mock_admin.export(7)

    @pytest.mark.asyncio
    async def test_unexport_not_exported_fails(self, mock_admin: MockGPIOAdmin) -> None:
        """Test that unexporting an unknown channel fails."""
        with pytest.raises(UnexportError):
            await mock_admin.unexport(7)

    @pytest.mark.asyncio
    async def test_fail_next(self, mock_admin: MockGPIOAdmin) -> None:
        """Test injecting a single helper failure."""
        mock_admin.fail_next("export", returncode=3, stderr="boom")

        with pytest.raises(ExportError) as exc_info:
            await mock_admin.export(7)
        assert exc_info.value.returncode == 3
        assert not mock_admin.is_exported(7)

        # Only the next call fails
        await mock_admin.export(7)
        assert mock_admin.is_exported(7)

    def test_fail_next_invalid_action(self, mock_admin: MockGPIOAdmin) -> None:
        """Test that only export and unexport can be failed."""
        with pytest.raises(ValueError, match="Invalid action"):
            mock_admin.fail_next("read")

    @pytest.mark.asyncio
    async def test_state_shared_through_filesystem(self, tmp_path: Path) -> None:
        """Test that a second mock on the same root sees exported channels."""
        await MockGPIOAdmin(tmp_path).export(7)

        other = MockGPIOAdmin(tmp_path)
        assert other.is_exported(7)
        await other.unexport(7)
        assert not (tmp_path / "gpio7").exists()
