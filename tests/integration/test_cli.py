"""
Integration tests for the command line entry point.
"""
import pytest
from PIL import Image

from mockbatch.main import build_parser, config_from_args, main
from mockbatch.services.report_service import ReportService


@pytest.mark.integration
class TestCli:

    def test_trim_writes_report(self, padded_png, tmp_path):
        out = tmp_path / "out"

        code = main(["trim", str(tmp_path), str(out)])

        assert code == 0
        with Image.open(out / "padded.png") as img:
            assert img.size == (20, 20)
        rows = ReportService(out / "report.csv").read_rows()
        assert rows[0]["status"] == "ok"

    def test_no_report(self, padded_png, tmp_path):
        out = tmp_path / "out"

        assert main(["--no-report", "trim", str(tmp_path), str(out)]) == 0
        assert not (out / "report.csv").exists()

    def test_trim_failure_exit_code(self, tmp_path):
        (tmp_path / "broken.png").write_bytes(b"nope")

        assert main(["--no-report", "trim", str(tmp_path), str(tmp_path / "out")]) == 1

    def test_mockups(self, wide_design, manifest_mockup, tmp_path):
        out = tmp_path / "out"

        code = main(["mockups", "--designs", str(wide_design), "--mockups", str(manifest_mockup),
                     "--out", str(out)])

        assert code == 0
        assert (out / "wide_tee.png").exists()
        assert (out / "report.csv").exists()

    def test_missing_input_folder(self, capsys):
        assert main(["trim"]) == 2
        assert "Nothing to do" in capsys.readouterr().err

    def test_invalid_option(self, tmp_path):
        assert main(["trim", str(tmp_path), str(tmp_path), "--alpha-threshold", "300"]) == 2

    def test_box_disables_detection(self):
        args = build_parser().parse_args(["mockups", "--box", "1", "2", "30", "40", "--native-png"])

        cfg = config_from_args(args)

        assert not cfg.DETECT_PLACEHOLDER
        assert cfg.PLACEHOLDER_BOX == (1, 2, 30, 40)
        assert not cfg.USE_SAVE_FOR_WEB
