"""
Open named groups ("parcels") of applications, files, URLs and deep links.
"""

__version__ = "0.2.0"
