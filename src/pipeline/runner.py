"""
Batch runner: reads every configured file, runs the pipeline, checks
integrity and exports the result as JSON.
"""

from pathlib import Path
from typing import Optional, Union

from src.config.loader import load_json_config, load_locations_config
from src.config.settings import Settings
from src.matching.context import MatchingContext
from src.models.catalog import PreprocessedData, PreprocessResult
from src.models.sources import (
    DoorDashData,
    SourceData,
    SquareCatalogData,
    SquareData,
    SquareLocationsData,
    SquareOrdersData,
    SquarePaymentsData,
    ToastData,
)
from src.pipeline.integrity import check_data_integrity, log_data_integrity_report
from src.pipeline.orchestrator import preprocess_data
from src.utils.logging_config import logger, setup_logging


def load_source_data(settings: Settings) -> SourceData:
    """Reads and validates all vendor exports. Raises ConfigError."""
    return SourceData(
        toast=load_json_config(settings.toast_pos_path, ToastData, "Toast export"),
        doordash=load_json_config(settings.doordash_orders_path, DoorDashData, "DoorDash export"),
        square=SquareData(
            locations=load_json_config(settings.square_locations_path, SquareLocationsData, "Square locations export"),
            catalog=load_json_config(settings.square_catalog_path, SquareCatalogData, "Square catalog export"),
            orders=load_json_config(settings.square_orders_path, SquareOrdersData, "Square orders export"),
            payments=load_json_config(settings.square_payments_path, SquarePaymentsData, "Square payments export"),
        ),
    )


def run_preprocess(settings: Settings, context: Optional[MatchingContext] = None) -> PreprocessResult:
    """
    Runs one batch end to end.

    Any failure is reported in the result's error field instead of raised.
    """
    try:
        setup_logging(level=settings.log_level.upper())
        locations = load_locations_config(settings.locations_path)
        if context is None:
            context = MatchingContext.from_files(
                settings.variation_patterns_path, settings.product_groups_path
            )
        sources = load_source_data(settings)

        normalized = preprocess_data(sources, locations.locations, context)
        integrity = check_data_integrity(sources, normalized)
        log_data_integrity_report(integrity)

        return PreprocessResult(
            success=True,
            data=PreprocessedData(normalized=normalized, integrity=integrity),
        )
    except Exception as e:
        logger.error(f"Preprocessing failed: {e}", exc_info=True)
        return PreprocessResult(success=False, error=str(e) or type(e).__name__)


def save_preprocessed_data(data: PreprocessedData, path: Union[str, Path]) -> Path:
    """Writes the preprocessed bundle as pretty-printed JSON."""
    output_path = Path(path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(data.model_dump_json(indent=2), encoding='utf-8')
    logger.info(f"Preprocessed data written to {output_path}")
    return output_path
