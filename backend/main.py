from typing import List, Optional

from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import config
from app.schemas import ColorExtractResponse, ColorResponse, ErrorResponse, HealthResponse
from app.services.colors import __version__
from app.services.colors.errors import PaletteError
from app.services.colors.extract_api import extract_from_url, handle_extract
from app.services.colors.pipeline import ExtractionParams
from app.utils.logging import get_logger
from app.utils.metrics import get_metrics

logger = get_logger()

app = FastAPI(
    title="Palette Service",
    description="Extracts a small hue-ordered color palette from an image",
    version=__version__
)

# Add CORS middleware; preflight OPTIONS requests are answered here
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
    allow_headers=["*"]
)


@app.exception_handler(PaletteError)
async def palette_error_handler(request: Request, exc: PaletteError):
    """Map typed extraction errors onto structured HTTP failures."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.message).model_dump()
    )


def extraction_params(
    strategy: str = Query(config.DEFAULT_STRATEGY, pattern="^(grid|kmeans)$", description="Extraction strategy"),

    # Grid partition parameters
    rows: int = Query(config.GRID_ROWS, le=64, description="Grid rows"),
    cols: int = Query(config.GRID_COLS, le=64, description="Grid columns"),
    normalization: str = Query(config.NORMALIZATION, pattern="^(actual|theoretical)$",
                               description="Region mean divisor: actual or theoretical pixel count"),

    # K-means parameters
    k: int = Query(config.KMEANS_K, le=32, description="Number of color clusters"),
    max_iter: int = Query(config.KMEANS_MAX_ITER, le=1000, description="K-means iteration cap"),
    cluster_order: str = Query("population", pattern="^(population|hue)$", description="Cluster output order"),

    # Selection parameters
    selection: Optional[str] = Query(None, pattern="^(rank|saturation|all)$", description="Palette selection rule"),
    ranks: Optional[List[int]] = Query(None, description="Hue-sorted rank positions for rank selection"),
    palette_size: int = Query(2, le=64, description="Palette size for saturation selection")
) -> ExtractionParams:
    """Collect extraction parameters from the query string."""
    return ExtractionParams(
        strategy=strategy,
        rows=rows,
        cols=cols,
        normalization=normalization,
        k=k,
        max_iter=max_iter,
        cluster_order=cluster_order,
        selection=selection,
        ranks=ranks,
        palette_size=palette_size
    )


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Palette service health check."""
    return HealthResponse(ok=True, version=__version__, service="palette-service")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Palette Service API",
        "version": __version__,
        "docs": "/docs"
    }


@app.api_route("/colors", methods=["GET", "PUT", "PATCH"], response_model=ColorResponse)
def get_colors(
    image_url: str = Query(..., description="URL of the image to analyze"),
    params: ExtractionParams = Depends(extraction_params)
):
    """
    Extract a palette from a remote image.

    - **image_url**: http(s) URL of a PNG, JPEG or GIF image
    - **strategy**: grid (region means, default 4x4) or kmeans
    - **selection**: rank (default for grid), saturation or all

    Returns `{"colors": ["#rrggbb", ...]}` in hue order.
    """
    result = extract_from_url(image_url, params)
    return ColorResponse(colors=result.colors)


@app.post("/colors/extract", response_model=ColorExtractResponse)
async def extract_colors(
    file: Optional[UploadFile] = File(None),
    image_url: Optional[str] = Query(None, description="URL of the image to analyze"),
    include_swatch: bool = Query(False, description="Include rendered palette PNGs"),
    params: ExtractionParams = Depends(extraction_params)
):
    """
    Detailed palette extraction for an uploaded file or a remote URL.

    Returns the palette together with every candidate color (grid regions or
    cluster centroids), the parameters used and optional swatch images.
    """
    return await handle_extract(params, file=file, image_url=image_url,
                                include_swatch=include_swatch)


@app.get("/metrics")
def palette_metrics():
    """Get palette extraction metrics."""
    return get_metrics().get_summary()
