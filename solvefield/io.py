"""
Python script containing all FITS IO functions.

All reading of coordinate lists, match files and world-coordinate solutions should
run via this script.
"""

import logging
import warnings
from pathlib import Path
from typing import Optional

import numpy as np
from astropy import units as u
from astropy.coordinates import SkyCoord
from astropy.io import fits
from astropy.utils.exceptions import AstropyWarning
from astropy.wcs import WCS

logger = logging.getLogger(__name__)

DEFAULT_X_COLUMN = "X"
DEFAULT_Y_COLUMN = "Y"
RA_COLUMN = "RA"
DEC_COLUMN = "DEC"
DIMQUADS_COLUMN = "DIMQUADS"
QUADPIX_COLUMN = "QUADPIX"

ARCSEC_PER_ARCMIN = 60.0
ARCSEC_PER_DEG = 3600.0


class FieldSummary:
    """
    Center and size of a solved field
    """

    def __init__(
        self,
        ra_deg: float,
        dec_deg: float,
        ra_hms: str,
        dec_dms: str,
        width: float,
        height: float,
        units: str,
    ):
        self.ra_deg = ra_deg
        self.dec_deg = dec_deg
        self.ra_hms = ra_hms
        self.dec_dms = dec_dms
        self.width = width
        self.height = height
        self.units = units


class MatchRecord:
    """
    A single quad match read from a match file
    """

    def __init__(self, dimquads: int, quadpix: np.ndarray):
        self.dimquads = dimquads
        self.quadpix = quadpix


def _find_table_hdu(hdul: fits.HDUList) -> Optional[fits.BinTableHDU]:
    for hdu in hdul[1:]:
        if isinstance(hdu, (fits.BinTableHDU, fits.TableHDU)):
            return hdu
    return None


def is_xylist(
    path: str | Path,
    x_column: Optional[str] = None,
    y_column: Optional[str] = None,
) -> tuple[bool, Optional[str]]:
    """
    Function to check whether a file is a coordinate list, i.e a FITS file
    with a table containing x and y columns

    :param path: file to check
    :param x_column: name of x column
    :param y_column: name of y column
    :return: boolean whether file is a coordinate list, and the reason if not
    """
    if x_column is None:
        x_column = DEFAULT_X_COLUMN
    if y_column is None:
        y_column = DEFAULT_Y_COLUMN

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", AstropyWarning)
            with fits.open(path, memmap=False) as hdul:
                table = _find_table_hdu(hdul)
                if table is None:
                    return False, "file has no table extension"
                columns = [x.upper() for x in table.columns.names]
    except (OSError, ValueError) as err:
        return False, f"failed to read file as FITS: {err}"

    for col in [x_column, y_column]:
        if col.upper() not in columns:
            return False, f"table has no column named '{col}' (found {columns})"

    return True, None


def read_first_match(path: str | Path) -> MatchRecord:
    """
    Read the first match record from a match file

    :param path: path of match file
    :return: MatchRecord
    """
    with fits.open(path, memmap=False) as hdul:
        table = _find_table_hdu(hdul)
        if (table is None) or (len(table.data) == 0):
            raise ValueError(f"No match records found in {path}")
        row = table.data[0]
        dimquads = int(row[DIMQUADS_COLUMN])
        quadpix = np.array(row[QUADPIX_COLUMN], dtype=float).ravel()

    return MatchRecord(dimquads=dimquads, quadpix=quadpix[: 2 * dimquads])


def load_wcs(path: str | Path) -> tuple[WCS, fits.Header]:
    """
    Load a world-coordinate solution from a header file

    :param path: path of WCS file
    :return: WCS and the header it was read from
    """
    header = fits.getheader(path)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", AstropyWarning)
        wcs = WCS(header)
    return wcs, header


def get_image_size(wcs: WCS, header: fits.Header) -> tuple[float, float]:
    """
    Get the size in pixels of the image a solution refers to

    :param wcs: WCS
    :param header: header of the WCS file
    :return: width, height
    """
    if ("IMAGEW" in header) & ("IMAGEH" in header):
        return float(header["IMAGEW"]), float(header["IMAGEH"])
    if wcs.pixel_shape is not None:
        return float(wcs.pixel_shape[0]), float(wcs.pixel_shape[1])
    raise KeyError("WCS header has no IMAGEW/IMAGEH or NAXISn keywords")


def get_pixel_scale(wcs: WCS) -> float:
    """
    Get the pixel scale of a solution, in arcseconds per pixel

    :param wcs: WCS
    :return: pixel scale
    """
    det = np.linalg.det(wcs.pixel_scale_matrix)
    return float(np.sqrt(np.abs(det))) * ARCSEC_PER_DEG


def read_field_summary(path: str | Path) -> FieldSummary:
    """
    Read a world-coordinate solution and summarise the field center and size

    :param path: path of WCS file
    :return: FieldSummary
    """
    wcs, header = load_wcs(path)
    width, height = get_image_size(wcs, header)

    ra_deg, dec_deg = wcs.all_pix2world((width + 1.0) / 2.0, (height + 1.0) / 2.0, 1)
    ra_deg, dec_deg = float(ra_deg), float(dec_deg)

    center = SkyCoord(ra=ra_deg * u.deg, dec=dec_deg * u.deg)
    ra_hms = center.ra.to_string(unit=u.hourangle, sep=":", precision=3, pad=True)
    dec_dms = center.dec.to_string(
        unit=u.deg, sep=":", precision=3, alwayssign=True, pad=True
    )

    scale = get_pixel_scale(wcs)
    field_w, field_h = width * scale, height * scale

    min_size = min(field_w, field_h)
    if min_size < ARCSEC_PER_ARCMIN:
        units = "arcseconds"
    elif min_size < ARCSEC_PER_DEG:
        units = "arcminutes"
        field_w, field_h = field_w / ARCSEC_PER_ARCMIN, field_h / ARCSEC_PER_ARCMIN
    else:
        units = "degrees"
        field_w, field_h = field_w / ARCSEC_PER_DEG, field_h / ARCSEC_PER_DEG

    return FieldSummary(
        ra_deg=ra_deg,
        dec_deg=dec_deg,
        ra_hms=ra_hms,
        dec_dms=dec_dms,
        width=field_w,
        height=field_h,
        units=units,
    )


def project_rdls_to_xyls(
    wcs_path: str | Path, rdls_path: str | Path, output_path: str | Path
):
    """
    Project the catalog (RA, Dec) positions of an rdls file into field pixel
    coordinates, and write them as a coordinate list

    :param wcs_path: path of WCS file
    :param rdls_path: path of rdls file
    :param output_path: path of output xyls file
    :return: None
    """
    wcs, _ = load_wcs(wcs_path)

    with fits.open(rdls_path, memmap=False) as hdul:
        table = _find_table_hdu(hdul)
        if table is None:
            raise ValueError(f"No table found in {rdls_path}")
        ra = np.array(table.data[RA_COLUMN], dtype=float)
        dec = np.array(table.data[DEC_COLUMN], dtype=float)

    x_pix, y_pix = wcs.all_world2pix(ra, dec, 1)

    columns = [
        fits.Column(name=DEFAULT_X_COLUMN, format="D", array=x_pix),
        fits.Column(name=DEFAULT_Y_COLUMN, format="D", array=y_pix),
    ]
    hdul = fits.HDUList(
        [fits.PrimaryHDU(), fits.BinTableHDU.from_columns(columns)]
    )
    logger.debug(f"Saving {len(ra)} projected index stars to {output_path}")
    hdul.writeto(output_path, overwrite=True)
