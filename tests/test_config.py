"""
Tests for the batch configuration in ..module::solvefield.config
"""
import logging

from pydantic import ValidationError

from solvefield.config import (
    CONSTELLATIONS_STAGE,
    INDEX_OVERLAY_STAGE,
    SOURCE_OVERLAY_STAGE,
    BackendArgs,
    FailurePolicy,
    SolveFieldConfig,
)
from solvefield.testing import BaseTestCase

logger = logging.getLogger(__name__)


class TestConfig(BaseTestCase):
    """Class for testing the configuration model"""

    def test_default_plot_policy(self):
        config = SolveFieldConfig()
        self.assertEqual(
            config.plot_failure_policy,
            {
                SOURCE_OVERLAY_STAGE: FailurePolicy.DEGRADE,
                INDEX_OVERLAY_STAGE: FailurePolicy.ABORT,
                CONSTELLATIONS_STAGE: FailurePolicy.ABORT,
            },
        )

    def test_partial_plot_policy(self):
        config = SolveFieldConfig(plot_failure_policy={INDEX_OVERLAY_STAGE: "degrade"})
        self.assertEqual(
            config.plot_failure_policy[INDEX_OVERLAY_STAGE], FailurePolicy.DEGRADE
        )
        self.assertEqual(
            config.plot_failure_policy[CONSTELLATIONS_STAGE], FailurePolicy.ABORT
        )

    def test_invalid_values(self):
        with self.assertRaises(ValidationError):
            SolveFieldConfig(plot_failure_policy={"histogram": "degrade"})
        with self.assertRaises(ValidationError):
            SolveFieldConfig(parity="odd")
        with self.assertRaises(ValidationError):
            SolveFieldConfig(scale_low=2.0, scale_high=1.0)
        with self.assertRaises(ValidationError):
            SolveFieldConfig(base_name_template="field-{night}")
        with self.assertRaises(ValidationError):
            SolveFieldConfig(unknown_option=True)

    def test_config_is_frozen(self):
        config = SolveFieldConfig()
        with self.assertRaises(ValidationError):
            config.overwrite = True

    def test_backend_args(self):
        config = SolveFieldConfig(verbose=True, backend_config="backend.cfg")
        backend_args = BackendArgs.from_config("/opt/bin/backend", config)
        self.assertEqual(backend_args.n_batch_args, 4)

        first = backend_args.reset()
        first.append("a.axy")
        second = backend_args.reset()
        self.assertEqual(
            second, ["/opt/bin/backend", "--verbose", "--config", "backend.cfg"]
        )
