"""
Tests for the output naming conventions in ..module::solvefield.paths
"""
import logging
from pathlib import Path

from solvefield.paths import (
    OutputRole,
    get_base_name,
    get_output_files,
    get_solved_in_path,
    split_suffix,
)
from solvefield.testing import BaseTestCase

logger = logging.getLogger(__name__)


class TestPaths(BaseTestCase):
    """Class for testing output names"""

    def test_split_suffix(self):
        self.assertEqual(split_suffix("foo.png"), ("foo", "png"))
        self.assertEqual(split_suffix("foo.jpeg"), ("foo", "jpeg"))
        self.assertEqual(split_suffix("foo.xy"), ("foo", "xy"))
        self.assertEqual(split_suffix("foo"), ("foo", None))
        # Too short to have a suffix
        self.assertEqual(split_suffix("a.fi"), ("a.fi", None))
        # Dot too far from the end
        self.assertEqual(split_suffix("image.fitsgz"), ("image.fitsgz", None))
        # Only the last dot in the window counts
        self.assertEqual(split_suffix("img.fits.gz"), ("img.fits", "gz"))

    def test_base_name(self):
        self.assertEqual(get_base_name("/data/night/sky.png", 1), ("sky", "png"))
        self.assertEqual(
            get_base_name("/data/night/sky.png", 1, output_dir="out"),
            ("out/sky", "png"),
        )
        self.assertEqual(
            get_base_name("http://host/path/img.fits", 3), ("img", "fits")
        )
        self.assertEqual(get_base_name("field", 1), ("field", None))

    def test_template(self):
        self.assertEqual(
            get_base_name("sky.png", 7, template="field-{index:03d}"),
            ("field-007", None),
        )
        self.assertEqual(
            get_base_name("/data/sky.png", 2, template="{index}-{name}"),
            ("sky", "png"),
        )
        self.assertEqual(
            get_base_name("sky.png", 2, output_dir="out", template="run{0}-{1}"),
            ("out/run2-sky", "png"),
        )

    def test_output_files(self):
        outputs = get_output_files("/data/stars.xyls", 1, output_dir="out")

        expected = [
            "out/stars.axy",
            "out/stars.match",
            "out/stars.rdls",
            "out/stars.solved",
            "out/stars.wcs",
            "out/stars-objs.png",
            "out/stars-indx.png",
            "out/stars-ngc.png",
            "out/stars-indx.xyls",
            "out/stars-downloaded.xyls",
        ]
        self.assertEqual(outputs.paths(), [Path(x) for x in expected])
        self.assertEqual(outputs[OutputRole.SOLVED], Path("out/stars.solved"))

        no_suffix = get_output_files("stars", 1)
        self.assertEqual(no_suffix[OutputRole.DOWNLOADED], Path("stars-downloaded"))

    def test_output_files_deterministic(self):
        first = get_output_files("/data/sky.jpeg", 4, output_dir="out")
        second = get_output_files("/data/sky.jpeg", 4, output_dir="out")
        self.assertEqual(first, second)

    def test_exclude(self):
        outputs = get_output_files("stars.xyls", 1)
        outputs.exclude(OutputRole.SOLVED)
        self.assertEqual(len(outputs), len(OutputRole) - 1)
        self.assertNotIn(Path("stars.solved"), outputs.paths())
        # Still accessible by role
        self.assertEqual(outputs[OutputRole.SOLVED], Path("stars.solved"))

    def test_solved_in_path(self):
        self.assertIsNone(get_solved_in_path("out/stars"))
        self.assertEqual(
            get_solved_in_path("out/stars", solved_in="a.solved"), Path("a.solved")
        )
        self.assertEqual(
            get_solved_in_path("out/stars", solved_in="a.solved", solved_in_dir="d"),
            Path("d/a.solved"),
        )
        self.assertEqual(
            get_solved_in_path("out/stars", solved_in_dir="d"),
            Path("d/stars.solved"),
        )
