"""
Tests for reading coordinate lists, match files and WCS solutions in
..module::solvefield.io
"""
import logging

import numpy as np
from astropy.io import fits

from solvefield.io import (
    is_xylist,
    project_rdls_to_xyls,
    read_field_summary,
    read_first_match,
)
from solvefield.testing import (
    BaseTestCase,
    write_match,
    write_rdls,
    write_wcs,
    write_xylist,
)

logger = logging.getLogger(__name__)


class TestClassification(BaseTestCase):
    """Class for testing image/coordinate list classification"""

    def test_xylist(self):
        path = write_xylist(self.temp_path.joinpath("stars.xyls"))
        self.assertEqual(is_xylist(path), (True, None))

    def test_custom_columns(self):
        path = write_xylist(
            self.temp_path.joinpath("stars.fits"), x_col="XIMAGE", y_col="YIMAGE"
        )
        res, reason = is_xylist(path)
        self.assertFalse(res)
        self.assertIn("'X'", reason)

        self.assertEqual(
            is_xylist(path, x_column="XIMAGE", y_column="YIMAGE"), (True, None)
        )

    def test_fits_image(self):
        path = self.temp_path.joinpath("image.fits")
        fits.PrimaryHDU(np.zeros((10, 10))).writeto(path)
        res, reason = is_xylist(path)
        self.assertFalse(res)
        self.assertEqual(reason, "file has no table extension")

    def test_not_fits(self):
        path = self.temp_path.joinpath("sky.png")
        path.write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 20)
        res, reason = is_xylist(path)
        self.assertFalse(res)
        self.assertIsNotNone(reason)


class TestSolutionFiles(BaseTestCase):
    """Class for testing the files written by the backend"""

    def test_first_match(self):
        quadpix = [1.5, 2.0, 30.25, 4.0, 50.0, 60.0, 7.0, 80.0]
        path = write_match(self.temp_path.joinpath("f.match"), quadpix=quadpix)
        match = read_first_match(path)
        self.assertEqual(match.dimquads, 4)
        np.testing.assert_allclose(match.quadpix, quadpix)

    def test_first_match_trims_padding(self):
        quadpix = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 0.0, 0.0, 0.0, 0.0]
        path = write_match(
            self.temp_path.joinpath("f.match"), quadpix=quadpix, dimquads=3
        )
        match = read_first_match(path)
        self.assertEqual(match.dimquads, 3)
        self.assertEqual(len(match.quadpix), 6)

    def test_field_summary(self):
        path = write_wcs(
            self.temp_path.joinpath("f.wcs"),
            ra_deg=150.0,
            dec_deg=2.0,
            pixel_scale_arcsec=1.0,
            image_size=120,
        )
        summary = read_field_summary(path)
        self.assertAlmostEqual(summary.ra_deg, 150.0, places=6)
        self.assertAlmostEqual(summary.dec_deg, 2.0, places=6)
        self.assertEqual(summary.ra_hms, "10:00:00.000")
        self.assertEqual(summary.dec_dms, "+02:00:00.000")
        self.assertEqual(summary.units, "arcminutes")
        self.assertAlmostEqual(summary.width, 2.0, places=6)
        self.assertAlmostEqual(summary.height, 2.0, places=6)

    def test_field_size_units(self):
        small = write_wcs(
            self.temp_path.joinpath("small.wcs"), pixel_scale_arcsec=0.1
        )
        self.assertEqual(read_field_summary(small).units, "arcseconds")
        self.assertAlmostEqual(read_field_summary(small).width, 10.0, places=6)

        large = write_wcs(
            self.temp_path.joinpath("large.wcs"), pixel_scale_arcsec=72.0
        )
        self.assertEqual(read_field_summary(large).units, "degrees")
        self.assertAlmostEqual(read_field_summary(large).width, 2.0, places=6)

    def test_project_rdls(self):
        wcs_path = write_wcs(self.temp_path.joinpath("f.wcs"))
        rdls_path = write_rdls(
            self.temp_path.joinpath("f.rdls"), ra_deg=[150.0], dec_deg=[2.0]
        )
        output_path = self.temp_path.joinpath("f-indx.xyls")

        project_rdls_to_xyls(wcs_path, rdls_path, output_path)

        self.assertTrue(is_xylist(output_path)[0])
        with fits.open(output_path) as hdul:
            data = hdul[1].data  # pylint: disable=no-member
            self.assertAlmostEqual(float(data["X"][0]), 50.5, places=6)
            self.assertAlmostEqual(float(data["Y"][0]), 50.5, places=6)
