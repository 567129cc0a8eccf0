"""
Batch-wide configuration, resolved once before any input is processed
"""
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from solvefield.paths import BIN_DIR, TEMP_DIR

logger = logging.getLogger(__name__)

SOURCE_OVERLAY_STAGE = "source-overlay"
INDEX_OVERLAY_STAGE = "index-overlay"
CONSTELLATIONS_STAGE = "constellations"

PLOT_STAGES = [SOURCE_OVERLAY_STAGE, INDEX_OVERLAY_STAGE, CONSTELLATIONS_STAGE]


class FailurePolicy(str, Enum):
    """
    What to do when a plotting command fails
    """

    DEGRADE = "degrade"
    ABORT = "abort"


default_plot_failure_policy = {
    SOURCE_OVERLAY_STAGE: FailurePolicy.DEGRADE,
    INDEX_OVERLAY_STAGE: FailurePolicy.ABORT,
    CONSTELLATIONS_STAGE: FailurePolicy.ABORT,
}


class SolveFieldConfig(BaseModel):
    """
    A pydantic model for the options shared by every input of a batch
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    output_dir: Optional[Path] = Field(
        default=None, description="Directory for all output files"
    )
    base_name_template: Optional[str] = Field(
        default=None,
        description="Template for output base names, "
        "with {index} and/or {name} placeholders",
    )
    backend_config: Optional[Path] = None
    verbose: bool = False
    make_plots: bool = True
    use_wget: bool = False
    overwrite: bool = False
    continue_run: bool = False
    skip_solved: bool = False
    x_column: Optional[str] = None
    y_column: Optional[str] = None
    solved_in: Optional[str] = None
    solved_in_dir: Optional[str] = None
    temp_dir: Path = TEMP_DIR
    bin_dir: Optional[Path] = BIN_DIR
    scale_low: Optional[float] = Field(default=None, gt=0.0)
    scale_high: Optional[float] = Field(default=None, gt=0.0)
    scale_units: Optional[str] = None
    downsample: Optional[int] = Field(default=None, ge=1)
    parity: Optional[str] = None
    plot_failure_policy: dict[str, FailurePolicy] = Field(
        default_factory=lambda: dict(default_plot_failure_policy)
    )

    @field_validator("parity")
    @classmethod
    def parity_is_known(cls, value: Optional[str]) -> Optional[str]:
        """
        Validator for the parity option

        :param value: parity
        :return: parity
        """
        if (value is not None) and (value not in ["pos", "neg"]):
            raise ValueError(f"Parity must be 'pos' or 'neg', not '{value}'")
        return value

    @field_validator("base_name_template")
    @classmethod
    def template_is_valid(cls, value: Optional[str]) -> Optional[str]:
        """
        Validator to check the base name template only uses known placeholders

        :param value: template
        :return: template
        """
        if value is not None:
            try:
                value.format(1, "input", index=1, name="input")
            except (KeyError, IndexError, ValueError) as err:
                raise ValueError(
                    f"Invalid base name template '{value}'. Only {{index}} and "
                    f"{{name}} placeholders are allowed."
                ) from err
        return value

    @field_validator("plot_failure_policy")
    @classmethod
    def policy_covers_stages(cls, value: dict) -> dict:
        """
        Validator to fill in missing plotting stages, and reject unknown ones

        :param value: policy table
        :return: policy table
        """
        unknown = [x for x in value if x not in PLOT_STAGES]
        if len(unknown) > 0:
            raise ValueError(
                f"Unknown plotting stages {unknown}, must be one of {PLOT_STAGES}"
            )
        return {**default_plot_failure_policy, **value}

    @model_validator(mode="after")
    def check_scale_bounds(self):
        """
        Validator to check the scale bounds are ordered, and warn about
        conflicting output policies

        :return: model
        """
        if (self.scale_low is not None) and (self.scale_high is not None):
            if self.scale_low > self.scale_high:
                raise ValueError(
                    f"scale_low ({self.scale_low}) is greater than "
                    f"scale_high ({self.scale_high})"
                )
        if self.overwrite and self.continue_run:
            logger.warning(
                "Both overwrite and continue were requested. "
                "Existing output files will not be overwritten."
            )
        return self


class BackendArgs:
    """
    Arguments for the solver backend. The batch-wide prefix (executable and global
    flags) is fixed once; each input gets a fresh copy truncated to that prefix.
    """

    def __init__(self, batch_args: list[str]):
        self.batch_args = tuple(str(x) for x in batch_args)

    @property
    def n_batch_args(self) -> int:
        """
        Number of arguments which are not specific to any input

        :return: int
        """
        return len(self.batch_args)

    def reset(self) -> list[str]:
        """
        Get a new argument list containing only the batch-wide prefix

        :return: list of arguments
        """
        return list(self.batch_args)

    @classmethod
    def from_config(cls, backend_path: str | Path, config: SolveFieldConfig):
        """
        Build the batch-wide prefix from a configuration

        :param backend_path: path of the backend executable
        :param config: configuration
        :return: BackendArgs
        """
        args = [str(backend_path)]
        if config.verbose:
            args.append("--verbose")
        if config.backend_config is not None:
            args += ["--config", str(config.backend_config)]
        return cls(args)
