import logging

import importlib_metadata
from multiqc import config
from multiqc.utils.util_functions import update_dict

log = logging.getLogger("multiqc")


def savplot_execution_start():
    # Plugin's version number defined in setup.py:
    version = importlib_metadata.version("multiqc_savplot")
    log.debug(f"Running MultiQC SAVPlot Plugin v{version}")

    log.debug("SAVPlot - Updating config")
    # Add module to module order
    config.module_order.append({"savplot": {"module_tag": ["DNA", "RNA", "BCL"]}})

    # Set RunInfo to shared so other Illumina modules still see it
    update_dict(
        config.sp,
        {
            "savplot/runinfo": {"fn": "RunInfo.xml", "shared": True},
        },
    )
