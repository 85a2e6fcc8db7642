"""
stormimpact package
===================

Exploratory report on the NOAA storm database: which weather event types
are most harmful to population health, and which have the greatest
economic consequences.

- The CLI entry point is in `stormimpact/cli.py`.
- The load -> normalize -> aggregate -> report chain is in `stormimpact/pipeline.py`.
- Dataset loading is in `stormimpact/loader.py`.
"""

__version__ = '0.1.0'
