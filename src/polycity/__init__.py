"""Batch conversion of CityGML directories with polygon-city plus a combined extent index."""

from .batch import BatchReport, BatchRunner, discover_jobs
from .catalog import AggregationReport, EnvelopeRecord, aggregate, build_catalog, write_catalog
from .config import RunConfig
from .envelope import Bounds, compute_bounds, envelope_feature
from .errors import (
    CatalogWriteError,
    ConfigurationError,
    ConverterNotFoundError,
    FragmentReadError,
    InputDirectoryError,
    OutputDirectoryError,
    PolycityError,
    PreconditionError,
)
from .gateway import ConverterGateway, JobOutcome, JobStatus
from .jobs import ConversionJob, build_job, output_unit_name
from .orchestrator import RunResult, main, resume, run
from .scanner import find_fragments

__all__ = [
    "AggregationReport",
    "BatchReport",
    "BatchRunner",
    "Bounds",
    "CatalogWriteError",
    "ConfigurationError",
    "ConversionJob",
    "ConverterGateway",
    "ConverterNotFoundError",
    "EnvelopeRecord",
    "FragmentReadError",
    "InputDirectoryError",
    "JobOutcome",
    "JobStatus",
    "OutputDirectoryError",
    "PolycityError",
    "PreconditionError",
    "RunConfig",
    "RunResult",
    "aggregate",
    "build_catalog",
    "build_job",
    "compute_bounds",
    "discover_jobs",
    "envelope_feature",
    "find_fragments",
    "main",
    "output_unit_name",
    "resume",
    "run",
    "write_catalog",
]
