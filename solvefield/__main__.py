"""
Main executable for solvefield. You can execute the code from the terminal like:

.. codeblock:: bash
    python -m solvefield -args... image1.fits image2.png http://host/image3.jpg
"""
import argparse
import logging
import sys
from typing import Iterator, Optional

from pydantic import ValidationError

from solvefield.config import PLOT_STAGES, FailurePolicy, SolveFieldConfig
from solvefield.errors import FatalError
from solvefield.paths import PACKAGE_NAME
from solvefield.pipeline import SolveFieldPipeline

logger = logging.getLogger(__name__)


def get_parser() -> argparse.ArgumentParser:
    """
    Build the command line parser

    :return: parser
    """
    parser = argparse.ArgumentParser(
        prog=PACKAGE_NAME,
        description=f"{PACKAGE_NAME}: solve the astrometry of images or "
        f"coordinate lists. You can specify http://, https:// or ftp:// URLs "
        f"instead of filenames; 'curl' or 'wget' will be used to retrieve them.",
    )
    parser.add_argument(
        "inputs", nargs="*", help="Image files, coordinate lists (xyls) or URLs"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False, help="Be more chatty"
    )
    parser.add_argument(
        "-D", "--dir", default=None, help="Place all output files in this directory"
    )
    parser.add_argument(
        "-o",
        "--out",
        default=None,
        help="Name the output files with this base name. "
        "May contain {index} and/or {name} placeholders",
    )
    parser.add_argument(
        "-b",
        "--backend-config",
        default=None,
        help="Use this config file for the 'backend' program",
    )
    parser.add_argument(
        "-f",
        "--files-on-stdin",
        action="store_true",
        default=False,
        help="Read filenames to solve on stdin, one per line",
    )
    parser.add_argument(
        "-p",
        "--no-plots",
        action="store_true",
        default=False,
        help="Don't create any plots of the results",
    )
    parser.add_argument(
        "-G",
        "--use-wget",
        action="store_true",
        default=False,
        help="Use wget instead of curl",
    )
    parser.add_argument(
        "-O",
        "--overwrite",
        action="store_true",
        default=False,
        help="Overwrite output files if they already exist",
    )
    parser.add_argument(
        "-K",
        "--continue",
        dest="continue_run",
        action="store_true",
        default=False,
        help="Don't overwrite output files if they already exist; "
        "continue a previous run",
    )
    parser.add_argument(
        "-J",
        "--skip-solved",
        action="store_true",
        default=False,
        help="Skip input files for which the 'solved' output file already exists; "
        "NOTE: this assumes single-field input files",
    )
    parser.add_argument("-X", "--x-column", default=None, help="X column name")
    parser.add_argument("-Y", "--y-column", default=None, help="Y column name")
    parser.add_argument(
        "--solved-in", default=None, help="Input 'solved' file for the backend"
    )
    parser.add_argument(
        "--solved-in-dir",
        default=None,
        help="Directory containing input 'solved' files",
    )
    parser.add_argument("--scale-low", type=float, default=None)
    parser.add_argument("--scale-high", type=float, default=None)
    parser.add_argument(
        "--scale-units",
        default=None,
        help="Scale units, e.g 'degwidth', 'arcsecperpix'",
    )
    parser.add_argument("--downsample", type=int, default=None)
    parser.add_argument("--parity", default=None, choices=["pos", "neg"])
    parser.add_argument(
        "--temp-dir", default=None, help="Directory for temporary files"
    )
    parser.add_argument(
        "--bin-dir",
        default=None,
        help="Directory to search first for the external programs",
    )
    parser.add_argument(
        "--degrade-plot-failures",
        action="store_true",
        default=False,
        help="Disable plotting instead of exiting when any plot fails",
    )
    parser.add_argument(
        "--logfile",
        default=None,
        help="If a path is passed, all logs will be written to this file.",
    )
    parser.add_argument("--level", default="INFO", help="Python logging level")
    return parser


def read_stdin_inputs(stream=None) -> Iterator[str]:
    """
    Lazily read one input per line

    :param stream: stream to read (defaults to sys.stdin)
    :return: iterator of inputs
    """
    if stream is None:
        stream = sys.stdin

    for line in stream:
        infile = line.rstrip("\n")
        if infile.strip() == "":
            continue
        yield infile


def get_config(args: argparse.Namespace) -> SolveFieldConfig:
    """
    Build the batch configuration from parsed arguments

    :param args: parsed arguments
    :return: configuration
    """
    kwargs = {
        "output_dir": args.dir,
        "base_name_template": args.out,
        "backend_config": args.backend_config,
        "verbose": args.verbose,
        "make_plots": not args.no_plots,
        "use_wget": args.use_wget,
        "overwrite": args.overwrite,
        "continue_run": args.continue_run,
        "skip_solved": args.skip_solved,
        "x_column": args.x_column,
        "y_column": args.y_column,
        "solved_in": args.solved_in,
        "solved_in_dir": args.solved_in_dir,
        "scale_low": args.scale_low,
        "scale_high": args.scale_high,
        "scale_units": args.scale_units,
        "downsample": args.downsample,
        "parity": args.parity,
    }
    if args.temp_dir is not None:
        kwargs["temp_dir"] = args.temp_dir
    if args.bin_dir is not None:
        kwargs["bin_dir"] = args.bin_dir
    if args.degrade_plot_failures:
        kwargs["plot_failure_policy"] = {x: FailurePolicy.DEGRADE for x in PLOT_STAGES}
    return SolveFieldConfig(**kwargs)


def setup_logging(level: str, logfile: Optional[str] = None) -> logging.Handler:
    """
    Attach a handler to the package logger

    :param level: logging level
    :param logfile: optional file to log to
    :return: the handler, to be removed with :func:`teardown_logging`
    """
    log = logging.getLogger(PACKAGE_NAME)

    if logfile is None:
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.FileHandler(logfile)

    formatter = logging.Formatter(
        "%(name)s [l %(lineno)d] - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    log.addHandler(handler)
    log.setLevel(level)
    return handler


def teardown_logging(handler: logging.Handler):
    """
    Detach and close a handler added by :func:`setup_logging`

    :param handler: handler to remove
    :return: None
    """
    logging.getLogger(PACKAGE_NAME).removeHandler(handler)
    handler.close()


def run(args: argparse.Namespace, config: SolveFieldConfig) -> int:
    """
    Solve every input, and summarise the inputs which were skipped

    :param args: parsed arguments
    :param config: configuration
    :return: exit status
    """
    inputs = read_stdin_inputs() if args.files_on_stdin else args.inputs

    try:
        pipe = SolveFieldPipeline(config)
        _, errorstack = pipe.process_inputs(inputs)
    except FatalError as err:
        logger.error(f"{type(err).__name__}: {err}")
        return 1

    if len(errorstack) > 0:
        print(errorstack.summarise_error_stack(verbose=args.verbose))

    logger.info(f"End of {PACKAGE_NAME} execution")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run solvefield from the command line

    :param argv: arguments (defaults to sys.argv)
    :return: exit status
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    if (not args.files_on_stdin) and (len(args.inputs) == 0):
        parser.error("You didn't specify any files to process.")

    handler = setup_logging(
        "DEBUG" if args.verbose else args.level, logfile=args.logfile
    )
    try:
        try:
            config = get_config(args)
        except ValidationError as err:
            parser.error(str(err))

        return run(args, config)
    finally:
        teardown_logging(handler)


if __name__ == "__main__":
    sys.exit(main())
