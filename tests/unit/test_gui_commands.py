"""
Unit tests for the command lines the GUI launches.
"""
import pytest

pytest.importorskip("tkinter")

from mockbatch.gui import mockups_command, trim_command  # noqa: E402
from mockbatch.main import build_parser  # noqa: E402


@pytest.mark.unit
class TestGuiCommands:

    def test_trim_command_parses(self):
        cmd = trim_command("/in", "/out", alpha_threshold=3)

        assert cmd[1:3] == ["-m", "mockbatch.main"]
        args = build_parser().parse_args(cmd[3:])
        assert (args.command, args.input_dir, args.output_dir, args.alpha_threshold) == ("trim", "/in", "/out", 3)

    def test_mockups_command_parses(self):
        cmd = mockups_command(["a.png", "b.png"], ["tee.psd"], "/out", "Art", native_png=True)

        args = build_parser().parse_args(cmd[3:])
        assert args.designs == ["a.png", "b.png"]
        assert args.mockups == ["tee.psd"]
        assert args.layer == "Art"
        assert args.native_png
