"""
Stages applied, in order, to each input of a batch
"""
from solvefield.processors.augment import AugmentXylist
from solvefield.processors.backend import Backend
from solvefield.processors.base_processor import BaseStage
from solvefield.processors.classify import Classifier
from solvefield.processors.existing import ExistingOutputResolver
from solvefield.processors.fetch import Downloader
from solvefield.processors.plots import (
    ConstellationPlotter,
    IndexOverlayPlotter,
    PlottingDegradedError,
    SourceOverlayPlotter,
)
from solvefield.processors.report import FieldReporter
