"""
Base class for unit testing, with common cleanup method, plus fakes for the
external programs and writers for small FITS fixtures
"""
import os
import tempfile
import unittest
from pathlib import Path
from typing import Callable, Optional

import numpy as np
from astropy.io import fits

from solvefield.paths import TEMP_DIR
from solvefield.utils import CommandLine, ExecutionOutcome

SUITE_EXECUTABLES = [
    "augment-xylist",
    "backend",
    "plotxy",
    "plotquad",
    "plot-constellations",
]


class BaseTestCase(unittest.TestCase):
    """Base TestCase object with additional cleanup"""

    def __init__(self, *arg, **kwargs):
        super().__init__(*arg, **kwargs)
        self.temp_dir = None

    def setUp(self):
        # pylint: disable=consider-using-with
        self.temp_dir = tempfile.TemporaryDirectory(dir=TEMP_DIR)
        self.addCleanup(self.temp_dir.cleanup)

    @property
    def temp_path(self) -> Path:
        """Path of the per-test temporary directory"""
        return Path(self.temp_dir.name)


class FakeExecutor:
    """
    Stand-in for :func:`solvefield.utils.execute` which records every command
    line instead of running it.

    Outcomes and side effects are keyed by the programs in the command line,
    joined with ' | ', e.g. 'backend' or 'plotxy | plotxy | plotquad'.
    """

    def __init__(
        self,
        outcomes: Optional[dict[str, ExecutionOutcome]] = None,
        side_effects: Optional[dict[str, Callable[[CommandLine], None]]] = None,
    ):
        self.outcomes = outcomes if outcomes is not None else {}
        self.side_effects = side_effects if side_effects is not None else {}
        self.commands: list[CommandLine] = []

    @staticmethod
    def get_key(command_line: CommandLine) -> str:
        """
        Get the key for a command line

        :param command_line: command line
        :return: key
        """
        return " | ".join(command_line.programs)

    def __call__(self, command_line: CommandLine, capture_output: bool = False):
        self.commands.append(command_line)
        key = self.get_key(command_line)

        if key in self.side_effects:
            self.side_effects[key](command_line)

        outcome = self.outcomes.get(key, ExecutionOutcome(0))
        if capture_output and (outcome.lines is None):
            outcome = ExecutionOutcome(
                outcome.returncode, cancelled=outcome.cancelled, lines=[]
            )
        return outcome

    @property
    def keys(self) -> list[str]:
        """Keys of all commands run so far, in order"""
        return [self.get_key(x) for x in self.commands]

    def get_commands(self, key: str) -> list[CommandLine]:
        """
        Get all command lines run with a given key

        :param key: key
        :return: list of command lines
        """
        return [x for x in self.commands if self.get_key(x) == key]


def make_fake_bin_dir(bin_dir: Path, names: Optional[list[str]] = None) -> Path:
    """
    Create a directory of (empty) executables, so that the external programs
    can be found

    :param bin_dir: directory to create
    :param names: programs to create
    :return: directory
    """
    if names is None:
        names = SUITE_EXECUTABLES
    bin_dir.mkdir(parents=True, exist_ok=True)
    for name in names:
        path = bin_dir.joinpath(name)
        path.write_text("#!/bin/sh\nexit 0\n", encoding="utf8")
        os.chmod(path, 0o755)
    return bin_dir


def write_xylist(path: Path, n_sources: int = 10, x_col="X", y_col="Y") -> Path:
    """
    Write a small coordinate list

    :param path: output path
    :param n_sources: number of sources
    :param x_col: x column name
    :param y_col: y column name
    :return: path
    """
    rng = np.random.default_rng(42)
    columns = [
        fits.Column(name=x_col, format="D", array=rng.uniform(1, 100, n_sources)),
        fits.Column(name=y_col, format="D", array=rng.uniform(1, 100, n_sources)),
    ]
    hdul = fits.HDUList([fits.PrimaryHDU(), fits.BinTableHDU.from_columns(columns)])
    hdul.writeto(path, overwrite=True)
    return path


def write_wcs(
    path: Path,
    ra_deg: float = 150.0,
    dec_deg: float = 2.0,
    pixel_scale_arcsec: float = 1.0,
    image_size: int = 100,
) -> Path:
    """
    Write a TAN world-coordinate solution header, centered on (ra, dec)

    :param path: output path
    :param ra_deg: center RA
    :param dec_deg: center Dec
    :param pixel_scale_arcsec: pixel scale
    :param image_size: width and height of the image in pixels
    :return: path
    """
    header = fits.Header()
    header["CTYPE1"] = "RA---TAN"
    header["CTYPE2"] = "DEC--TAN"
    header["CRVAL1"] = ra_deg
    header["CRVAL2"] = dec_deg
    header["CRPIX1"] = (image_size + 1.0) / 2.0
    header["CRPIX2"] = (image_size + 1.0) / 2.0
    header["CD1_1"] = -pixel_scale_arcsec / 3600.0
    header["CD1_2"] = 0.0
    header["CD2_1"] = 0.0
    header["CD2_2"] = pixel_scale_arcsec / 3600.0
    header["IMAGEW"] = image_size
    header["IMAGEH"] = image_size
    fits.PrimaryHDU(header=header).writeto(path, overwrite=True)
    return path


def write_rdls(path: Path, ra_deg: list[float], dec_deg: list[float]) -> Path:
    """
    Write a list of catalog positions

    :param path: output path
    :param ra_deg: RA values
    :param dec_deg: Dec values
    :return: path
    """
    columns = [
        fits.Column(name="RA", format="D", array=np.array(ra_deg)),
        fits.Column(name="DEC", format="D", array=np.array(dec_deg)),
    ]
    hdul = fits.HDUList([fits.PrimaryHDU(), fits.BinTableHDU.from_columns(columns)])
    hdul.writeto(path, overwrite=True)
    return path


def write_match(path: Path, quadpix: list[float], dimquads: int = 4) -> Path:
    """
    Write a match file with a single record

    :param path: output path
    :param quadpix: pixel coordinates of the quad stars
    :param dimquads: number of stars in the quad
    :return: path
    """
    columns = [
        fits.Column(name="DIMQUADS", format="J", array=np.array([dimquads])),
        fits.Column(
            name="QUADPIX", format=f"{len(quadpix)}D", array=np.array([quadpix])
        ),
    ]
    hdul = fits.HDUList([fits.PrimaryHDU(), fits.BinTableHDU.from_columns(columns)])
    hdul.writeto(path, overwrite=True)
    return path
