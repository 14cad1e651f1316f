"""Errors raised while loading run metrics and building plot data."""


class SavPlotError(Exception):
    """Base class for all errors raised by this package."""


class InvalidMetricTypeError(SavPlotError, ValueError):
    """Unknown metric name given to the metric type parser."""


class IndexOutOfBoundsError(SavPlotError, IndexError):
    """Index outside a histogram, bin list or heatmap grid."""


class InvalidFilterOption(SavPlotError, ValueError):
    """Filter selector points outside the run."""


class InteropAssertionError(SavPlotError, AssertionError):
    """Internal invariant violated while building plot data."""


class BadFormatError(SavPlotError):
    """InterOp binary file could not be parsed."""


class EmptyInteropError(SavPlotError):
    """Run folder contains no InterOp records."""


class MissingRunInfoError(SavPlotError, FileNotFoundError):
    """RunInfo.xml is missing from the run folder."""


class MalformedXmlError(SavPlotError):
    """RunInfo.xml is not valid XML or lacks a Run element."""
