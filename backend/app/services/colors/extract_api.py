"""
Color Extraction API Orchestrator

Handles URL and upload modes for palette extraction. Coordinates the full
request from fetch/read through decoding and the extraction pipeline to the
response models, with per-request context, timings, logs and metrics.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.schemas import CandidateEntry, ColorArtifacts, ColorExtractResponse, HSLValue
from app.services.colors.conversion import rgb_to_hex, rgb_to_hsl
from app.services.colors.errors import InvalidInput, PaletteError
from app.services.colors.partition import RegionColor
from app.services.colors.pipeline import ExtractionParams, ExtractionResult, extract_palette
from app.services.colors.swatches import render_region_grid, render_swatch_strip
from app.services.imaging import decode_raster, fetch_image_bytes, file_name_from_url, read_upload
from app.utils.ids import generate_request_id
from app.utils.logging import get_logger
from app.utils.metrics import get_metrics

logger = get_logger()


@dataclass
class ExtractionContext:
    """Everything known about one extraction request."""
    params: ExtractionParams
    mode: str
    image_url: Optional[str] = None
    file_name: str = ""
    request_id: str = field(default_factory=lambda: generate_request_id("pal"))
    started_at: float = field(default_factory=time.time)

    @property
    def log_extra(self) -> dict:
        return {
            "request_id": self.request_id,
            "mode": self.mode,
            "file_name": self.file_name,
            "strategy": self.params.strategy
        }


def _record_failure(context: ExtractionContext, error: Exception) -> None:
    error_time = time.time() - context.started_at
    logger.error(f"Color extraction failed: {str(error)}",
                 extra={
                     **context.log_extra,
                     "ms_total": error_time * 1000,
                     "result": "error",
                     "error_type": type(error).__name__
                 })

    get_metrics().increment_failure_count(type(error).__name__.lower())


def run_extraction(context: ExtractionContext, image_bytes: Optional[bytes] = None) -> ExtractionResult:
    """
    Fetch (when no bytes are given), decode and extract a palette.

    Raises:
        PaletteError: Any fetch, decode, parameter or computation failure
    """
    metrics = get_metrics()
    logger.info("Starting color extraction", extra=context.log_extra)

    try:
        if image_bytes is None:
            fetch_start = time.time()
            image_bytes = fetch_image_bytes(context.image_url)
            fetch_time = time.time() - fetch_start
            logger.info(f"Downloaded {context.file_name} with size {len(image_bytes)}",
                        extra={**context.log_extra, "ms_fetch": fetch_time * 1000})
            metrics.record_timing("fetch", fetch_time * 1000)

        decode_start = time.time()
        raster = decode_raster(image_bytes)
        decode_time = time.time() - decode_start

        extract_start = time.time()
        result = extract_palette(raster, context.params)
        extract_time = time.time() - extract_start

    except PaletteError as e:
        _record_failure(context, e)
        raise

    total_time = time.time() - context.started_at
    logger.info("Color extraction completed successfully",
                extra={
                    **context.log_extra,
                    "dims": f"{result.width}x{result.height}",
                    "colors": result.colors,
                    "ms_decode": decode_time * 1000,
                    "ms_extract": extract_time * 1000,
                    "ms_total": total_time * 1000,
                    "result": "ok"
                })

    metrics.increment_request_count(result.strategy)
    metrics.increment_counter(f"palette_mode_total_{context.mode}")
    metrics.record_timing("decode", decode_time * 1000)
    metrics.record_timing(f"extract_{result.strategy}", extract_time * 1000)
    metrics.record_timing("total", total_time * 1000)

    return result


def extract_from_url(image_url: str, params: ExtractionParams) -> ExtractionResult:
    """Run one extraction for a remote image URL."""
    context = ExtractionContext(
        params=params,
        mode="url",
        image_url=image_url,
        file_name=file_name_from_url(image_url or "")
    )
    return run_extraction(context)


async def handle_extract(params: ExtractionParams,
                         file: Optional[UploadFile] = None,
                         image_url: Optional[str] = None,
                         include_swatch: bool = False) -> ColorExtractResponse:
    """
    Detailed extraction for an uploaded file or a remote URL.

    Raises:
        InvalidInput: If neither or both of file and image_url are given
        PaletteError: Any extraction failure
    """
    if file is None and image_url is None:
        raise InvalidInput("Either 'file' or 'image_url' must be provided")
    if file is not None and image_url is not None:
        raise InvalidInput("Cannot specify both 'file' and 'image_url' simultaneously")

    if file is not None:
        context = ExtractionContext(params=params, mode="upload", file_name=file.filename or "")
        try:
            image_bytes = await read_upload(file)
        except PaletteError as e:
            _record_failure(context, e)
            raise
        result = await run_in_threadpool(run_extraction, context, image_bytes)
    else:
        context = ExtractionContext(params=params, mode="url", image_url=image_url,
                                    file_name=file_name_from_url(image_url))
        result = await run_in_threadpool(run_extraction, context)

    artifacts = None
    if include_swatch:
        artifacts = _render_artifacts(context, result)

    return ColorExtractResponse(
        request_id=context.request_id,
        width=result.width,
        height=result.height,
        strategy=result.strategy,
        colors=result.colors,
        candidates=_candidate_entries(result),
        params=params.as_dict(),
        artifacts=artifacts
    )


def _candidate_entries(result: ExtractionResult) -> List[CandidateEntry]:
    selected_ids = {id(c) for c in result.selected}
    entries = []
    for candidate in result.candidates:
        hsl = rgb_to_hsl(*candidate.rgb)
        entry = {
            "hex": rgb_to_hex(candidate.rgb),
            "hsl": HSLValue(h=hsl.h, s=hsl.s, l=hsl.l),
            "selected": id(candidate) in selected_ids
        }
        if isinstance(candidate, RegionColor):
            entry.update(index=candidate.index, row=candidate.row, col=candidate.col,
                         pixel_count=candidate.pixel_count)
        else:
            entry.update(population=candidate.population, ratio=candidate.ratio)
        entries.append(CandidateEntry(**entry))
    return entries


def _render_artifacts(context: ExtractionContext, result: ExtractionResult) -> ColorArtifacts:
    swatch_b64 = None
    grid_b64 = None

    try:
        swatch_b64 = render_swatch_strip(result.colors)
        if result.strategy == "grid":
            grid_b64 = render_region_grid(
                [rgb_to_hex(c.rgb) for c in result.candidates],
                context.params.rows,
                context.params.cols,
                highlight=[c.index for c in result.selected]
            )
    except (PaletteError, RuntimeError) as e:
        logger.warning(f"Swatch generation failed: {str(e)}", extra=context.log_extra)

    return ColorArtifacts(swatch_png_b64=swatch_b64, region_grid_png_b64=grid_b64)
