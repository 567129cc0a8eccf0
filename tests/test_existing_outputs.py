"""
Tests for the handling of existing outputs in
..module::solvefield.processors.existing
"""
import logging
import os

from solvefield.config import SolveFieldConfig
from solvefield.errors import AlreadySolvedError, FatalError, OutputExistsError
from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors import ExistingOutputResolver
from solvefield.testing import BaseTestCase, FakeExecutor

logger = logging.getLogger(__name__)


class TestExistingOutputs(BaseTestCase):
    """Class for testing the overwrite/continue/skip policies"""

    def setUp(self):
        super().setUp()
        self.out_dir = self.temp_path.joinpath("out")
        self.out_dir.mkdir()
        self.executor = FakeExecutor()

    def get_job(self, **kwargs) -> tuple[ExistingOutputResolver, JobContext]:
        """
        Get a resolver and a job for 'stars.xyls'

        :param kwargs: config options
        :return: resolver, job
        """
        config = SolveFieldConfig(
            output_dir=self.out_dir, temp_dir=self.temp_path, **kwargs
        )
        job = JobContext("/data/stars.xyls", index=1, config=config)
        return ExistingOutputResolver(config, self.executor), job

    def touch(self, name: str):
        """Create an empty output file"""
        path = self.out_dir.joinpath(name)
        path.touch()
        return path

    def test_nothing_exists(self):
        resolver, job = self.get_job()
        resolver.apply(job)
        self.assertEqual(self.executor.commands, [])

    def test_default_skips(self):
        existing = self.touch("stars.wcs")
        resolver, job = self.get_job()
        with self.assertRaises(OutputExistsError):
            resolver.apply(job)
        self.assertTrue(existing.exists())

    def test_overwrite_deletes(self):
        existing = self.touch("stars.wcs")
        other = self.touch("unrelated.wcs")
        resolver, job = self.get_job(overwrite=True)
        resolver.apply(job)
        self.assertFalse(existing.exists())
        self.assertTrue(other.exists())

    def test_continue_keeps(self):
        existing = self.touch("stars.wcs")
        resolver, job = self.get_job(continue_run=True)
        resolver.apply(job)
        self.assertTrue(existing.exists())

    def test_continue_beats_overwrite(self):
        existing = self.touch("stars.wcs")
        resolver, job = self.get_job(continue_run=True, overwrite=True)
        resolver.apply(job)
        self.assertTrue(existing.exists())

    def test_overwrite_failure_is_fatal(self):
        # A directory cannot be unlinked
        self.out_dir.joinpath("stars.match").mkdir()
        resolver, job = self.get_job(overwrite=True)
        with self.assertRaises(FatalError):
            resolver.apply(job)

    def test_skip_solved(self):
        self.touch("stars.solved")
        resolver, job = self.get_job(skip_solved=True, overwrite=True)
        with self.assertRaises(AlreadySolvedError):
            resolver.apply(job)
        self.assertTrue(self.out_dir.joinpath("stars.solved").exists())

    def test_skip_solved_with_solved_in(self):
        solved_in = self.temp_path.joinpath("previous.solved")
        solved_in.touch()
        resolver, job = self.get_job(skip_solved=True, solved_in=str(solved_in))
        with self.assertRaises(AlreadySolvedError):
            resolver.apply(job)

    def test_skip_solved_nothing_solved(self):
        resolver, job = self.get_job(skip_solved=True)
        resolver.apply(job)

    def test_solved_in_is_not_an_output(self):
        solved = self.touch("stars.solved")
        resolver, job = self.get_job(
            overwrite=True, solved_in=os.path.join(self.out_dir, "stars.solved")
        )
        resolver.apply(job)
        self.assertTrue(solved.exists())
        self.assertNotIn(job[OutputRole.SOLVED], job.outputs.paths())

    def test_solved_in_default_policy(self):
        self.touch("stars.solved")
        resolver, job = self.get_job(solved_in_dir=str(self.out_dir))
        # The only existing file is an input, so there is nothing to skip for
        resolver.apply(job)
