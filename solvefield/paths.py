"""
Central module hosting all shared paths/directory conventions/output names
"""
import logging
import os
import tempfile
from enum import Enum
from importlib import metadata
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

PACKAGE_NAME = "solvefield"
__version__ = metadata.version(PACKAGE_NAME)

# Set up default directories

_temp_dir: str | None = os.getenv("SOLVEFIELD_TEMP_DIR")

if _temp_dir is None:
    TEMP_DIR = Path(tempfile.gettempdir())
else:
    TEMP_DIR = Path(_temp_dir)
    TEMP_DIR.mkdir(parents=True, exist_ok=True)

_bin_dir: str | None = os.getenv("SOLVEFIELD_BIN_DIR")
BIN_DIR: Path | None = None if _bin_dir is None else Path(_bin_dir)

DOWNLOADED_TAG = "downloaded"


class OutputRole(Enum):
    """
    Every artifact a single input can produce, with the name suffix appended to
    the base name. Member order is the order in which outputs are checked.
    """

    AXY = ".axy"
    MATCH = ".match"
    RDLS = ".rdls"
    SOLVED = ".solved"
    WCS = ".wcs"
    OBJS_PLOT = "-objs.png"
    INDEX_PLOT = "-indx.png"
    NGC_PLOT = "-ngc.png"
    INDEX_XYLS = "-indx.xyls"
    DOWNLOADED = f"-{DOWNLOADED_TAG}"


class OutputFileSet:
    """
    Ordered collection of output paths for a single input, keyed by
    :class:`OutputRole`. All paths share one base name.
    """

    def __init__(self, base: str, suffix: Optional[str] = None):
        self.base = base
        self.suffix = suffix
        self._paths: dict[OutputRole, Path] = {}
        for role in OutputRole:
            name = f"{base}{role.value}"
            if (role == OutputRole.DOWNLOADED) & (suffix is not None):
                name += f".{suffix}"
            self._paths[role] = Path(name)
        self._excluded: set[OutputRole] = set()

    def __getitem__(self, role: OutputRole) -> Path:
        return self._paths[role]

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths())

    def __len__(self) -> int:
        return len(self.paths())

    def __eq__(self, other) -> bool:
        if not isinstance(other, OutputFileSet):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def exclude(self, role: OutputRole):
        """
        Remove a role from the set of paths treated as outputs, e.g. because
        the path is actually an input.

        :param role: role to exclude
        :return: None
        """
        self._excluded.add(role)

    def items(self) -> list[tuple[OutputRole, Path]]:
        """
        Returns the (role, path) pairs, in construction order

        :return: list of pairs
        """
        return [(x, y) for x, y in self._paths.items() if x not in self._excluded]

    def paths(self) -> list[Path]:
        """
        Returns all output paths, in construction order

        :return: list of paths
        """
        return [y for _, y in self.items()]


def split_suffix(base: str) -> tuple[str, Optional[str]]:
    """
    Trims a '.xx', '.xxx' or '.xxxx' suffix from a name. Only a dot at 3, 4 or 5
    characters from the end counts, and only for names longer than 4 characters.

    :param base: name to split
    :return: (name without suffix, suffix or None)
    """
    length = len(base)
    if length > 4:
        for j in range(3, 6):
            if base[length - j] == ".":
                return base[: length - j], base[length - j + 1 :]
    return base, None


def get_base_name(
    infile: str,
    index: int,
    output_dir: Optional[str | Path] = None,
    template: Optional[str] = None,
) -> tuple[str, Optional[str]]:
    """
    Get the base name shared by all outputs of an input

    :param infile: input reference (path or URL)
    :param index: 1-based position of the input in the batch
    :param output_dir: optional directory for all outputs
    :param template: optional template for the name, formatted with
        ``{0}``/``{index}`` for the index and ``{1}``/``{name}`` for the input
    :return: base name and suffix (or None)
    """
    if template is not None:
        name = template.format(index, infile, index=index, name=infile)
    else:
        name = infile

    stripped = name.rstrip("/")
    name = os.path.basename(stripped) if stripped else name

    if output_dir is not None:
        name = os.path.join(str(output_dir), name)

    return split_suffix(name)


def get_output_files(
    infile: str,
    index: int,
    output_dir: Optional[str | Path] = None,
    template: Optional[str] = None,
) -> OutputFileSet:
    """
    Get the full set of output paths for an input

    :param infile: input reference (path or URL)
    :param index: 1-based position of the input in the batch
    :param output_dir: optional directory for all outputs
    :param template: optional base name template
    :return: OutputFileSet
    """
    base, suffix = get_base_name(
        infile, index=index, output_dir=output_dir, template=template
    )
    return OutputFileSet(base, suffix=suffix)


def get_solved_in_path(
    base: str, solved_in: Optional[str] = None, solved_in_dir: Optional[str] = None
) -> Path | None:
    """
    Get the path of a pre-supplied 'solved' file, if one was configured

    :param base: base name of the input
    :param solved_in: name of solved file
    :param solved_in_dir: directory containing solved files
    :return: path or None
    """
    if solved_in_dir is None:
        if solved_in is None:
            return None
        return Path(solved_in)

    if solved_in is not None:
        return Path(solved_in_dir).joinpath(solved_in)

    return Path(solved_in_dir).joinpath(f"{os.path.basename(base)}.solved")
