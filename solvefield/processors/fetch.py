"""
Module containing a stage to download remote inputs
"""
import logging
from pathlib import Path

from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors.base_processor import BaseStage
from solvefield.utils import CommandLine, ProcessSpec

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ["http://", "https://", "ftp://"]


def is_remote(infile: str) -> bool:
    """
    Check whether an input looks like a URL we can download

    :param infile: input reference
    :return: boolean
    """
    return any(infile.lower().startswith(x) for x in REMOTE_PREFIXES)


class Downloader(BaseStage):
    """
    Stage to fetch a remote input with curl or wget
    """

    base_key = "download"

    def __str__(self) -> str:
        tool = ["curl", "wget"][self.config.use_wget]
        return f"Stage to download remote input files with {tool}."

    def get_command(self, url: str, output_path: Path) -> CommandLine:
        """
        Build the download command

        :param url: URL to fetch
        :param output_path: path to save to
        :return: CommandLine
        """
        if self.config.use_wget:
            process = ProcessSpec("wget")
            if not self.config.verbose:
                process.add("--quiet")
            process.add("-O", output_path, url)
        else:
            process = ProcessSpec("curl")
            if not self.config.verbose:
                process.add("--silent")
            process.add("--output", output_path, url)
        return CommandLine(process)

    def apply(self, job: JobContext):
        if Path(job.infile).exists() or not is_remote(job.infile):
            return

        download_path = job[OutputRole.DOWNLOADED]
        command_line = self.get_command(job.infile, download_path)

        logger.info("Downloading...")
        self.run_command(
            command_line, description=f"{command_line.programs[0]} command"
        )

        logger.debug(f"Downloaded {job.infile} to {download_path}")
        job.infile = str(download_path)
