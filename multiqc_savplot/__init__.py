"""
MultiQC SAVPlot

Aggregates Illumina InterOp run metrics into plot-ready data: candle-stick
summaries of tile metrics by lane and the Q-score heatmap over cycles,
similar to the plots of Illumina's Sequencing Analysis Viewer application.
"""

__version__ = "0.1.0"
