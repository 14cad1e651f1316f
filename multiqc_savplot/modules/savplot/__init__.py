from .savplot import SAVPlotModule as MultiqcModule

__all__ = ["MultiqcModule"]
