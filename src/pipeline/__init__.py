"""
Reconciliation pipeline: locations, catalog, order normalizers, integrity.
"""

from .build_catalog import CATALOG_SOURCE_ORDER, build_unified_catalog
from .build_locations import build_locations
from .integrity import check_data_integrity, log_data_integrity_report
from .orchestrator import preprocess_data
from .runner import load_source_data, run_preprocess, save_preprocessed_data

__all__ = [
    "CATALOG_SOURCE_ORDER",
    "build_unified_catalog",
    "build_locations",
    "check_data_integrity",
    "log_data_integrity_report",
    "preprocess_data",
    "load_source_data",
    "run_preprocess",
    "save_preprocessed_data",
]
