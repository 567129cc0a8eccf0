"""
Tests for the command line interface in ..module::solvefield.__main__
"""
import io
import logging
from pathlib import Path
from unittest.mock import patch

from solvefield.__main__ import get_config, get_parser, main, read_stdin_inputs
from solvefield.config import PLOT_STAGES, FailurePolicy
from solvefield.paths import PACKAGE_NAME
from solvefield.testing import BaseTestCase, FakeExecutor, make_fake_bin_dir
from solvefield.utils import ExecutionOutcome

logger = logging.getLogger(__name__)


class TestMain(BaseTestCase):
    """Class for testing the command line interface"""

    def test_parse_options(self):
        args = get_parser().parse_args(
            ["-D", "out", "-o", "f{index}", "-O", "-K", "-J", "-p", "-G", "a.png"]
        )
        config = get_config(args)
        self.assertEqual(config.output_dir, Path("out"))
        self.assertEqual(config.base_name_template, "f{index}")
        self.assertTrue(config.overwrite)
        self.assertTrue(config.continue_run)
        self.assertTrue(config.skip_solved)
        self.assertFalse(config.make_plots)
        self.assertTrue(config.use_wget)
        self.assertEqual(args.inputs, ["a.png"])

    def test_degrade_plot_failures(self):
        args = get_parser().parse_args(["--degrade-plot-failures", "a.png"])
        config = get_config(args)
        self.assertEqual(
            config.plot_failure_policy, {x: FailurePolicy.DEGRADE for x in PLOT_STAGES}
        )

    def test_stdin_inputs(self):
        stream = io.StringIO("a.png\n\nhttp://host/b.fits\n   \nc.xyls")
        self.assertEqual(
            list(read_stdin_inputs(stream)), ["a.png", "http://host/b.fits", "c.xyls"]
        )

    def test_no_inputs(self):
        with self.assertRaises(SystemExit) as err:
            main([])
        self.assertEqual(err.exception.code, 2)

    def test_exit_status(self):
        bin_dir = make_fake_bin_dir(self.temp_path.joinpath("bin"))
        out_dir = self.temp_path.joinpath("out")
        common = ["--bin-dir", str(bin_dir), "-D", str(out_dir)]

        executor = FakeExecutor(outcomes={"curl": ExecutionOutcome(7)})
        with patch("solvefield.pipeline.execute", executor):
            self.assertEqual(main(common + ["http://host/img.fits"]), 1)

        executor = FakeExecutor()
        missing = self.temp_path.joinpath("missing.png")
        missing.write_bytes(b"not an image")
        with patch("solvefield.pipeline.execute", executor):
            self.assertEqual(main(common + [str(missing)]), 0)
        self.assertEqual(executor.keys, ["augment-xylist", "backend"])

    def test_stdin_read_at_call_time(self):
        stream = io.StringIO("late.png\n")
        with patch("solvefield.__main__.sys.stdin", stream):
            self.assertEqual(list(read_stdin_inputs()), ["late.png"])

    def test_temp_dir_option(self):
        bin_dir = make_fake_bin_dir(self.temp_path.joinpath("bin"))
        image = self.temp_path.joinpath("sky.png")
        image.write_bytes(b"not an image")
        common = ["--bin-dir", str(bin_dir), "-D", str(self.temp_path.joinpath("out"))]

        temp_dir = self.temp_path.joinpath("nope", "tmp")
        with patch("solvefield.pipeline.execute", FakeExecutor()):
            status = main(common + ["--temp-dir", str(temp_dir), str(image)])
        self.assertEqual(status, 0)
        self.assertTrue(temp_dir.is_dir())

        blocker = self.temp_path.joinpath("blocker")
        blocker.touch()
        bad_temp_dir = blocker.joinpath("tmp")
        executor = FakeExecutor()
        with patch("solvefield.pipeline.execute", executor):
            with self.assertLogs("solvefield.__main__", level="ERROR") as logs:
                status = main(common + ["--temp-dir", str(bad_temp_dir), str(image)])
        self.assertEqual(status, 1)
        self.assertEqual(executor.commands, [])
        self.assertTrue(any("Failed to create directory" in x for x in logs.output))

    def test_logging_handlers_removed(self):
        log = logging.getLogger(PACKAGE_NAME)
        n_handlers = len(log.handlers)
        bin_dir = make_fake_bin_dir(self.temp_path.joinpath("bin"))
        image = self.temp_path.joinpath("sky.png")
        out_dir = self.temp_path.joinpath("out")
        image.write_bytes(b"not an image")

        for _ in range(3):
            with patch("solvefield.pipeline.execute", FakeExecutor()):
                main(["--bin-dir", str(bin_dir), "-D", str(out_dir), str(image)])
        self.assertEqual(len(log.handlers), n_handlers)
