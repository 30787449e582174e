"""
Palette Service API Schemas
Pydantic models for color extraction request/response validation.
"""
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

HEX_PATTERN = r"^#[0-9a-f]{6}$"


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palette-service", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class ColorResponse(BaseModel):
    """Compact palette response of the /colors endpoint."""
    colors: List[str] = Field(
        ...,
        description="Palette as lowercase #rrggbb strings, in output order"
    )


class HSLValue(BaseModel):
    """HSL color representation on the unit scale."""
    h: float = Field(..., ge=0.0, lt=1.0, description="Hue [0, 1)")
    s: float = Field(..., ge=0.0, le=1.0, description="Saturation [0, 1]")
    l: float = Field(..., ge=0.0, le=1.0, description="Lightness [0, 1]")


class CandidateEntry(BaseModel):
    """One candidate color (grid region or cluster centroid)."""
    hex: str = Field(..., pattern=HEX_PATTERN, description="Candidate color #rrggbb")
    hsl: HSLValue = Field(..., description="Candidate color in HSL")
    selected: bool = Field(False, description="Whether this candidate is in the palette")

    # Grid regions
    index: Optional[int] = Field(None, ge=0, description="Row-major region index")
    row: Optional[int] = Field(None, ge=0, description="Grid row")
    col: Optional[int] = Field(None, ge=0, description="Grid column")
    pixel_count: Optional[int] = Field(None, ge=0, description="Pixels in the region")

    # Cluster centroids
    population: Optional[int] = Field(None, ge=0, description="Pixels assigned to the cluster")
    ratio: Optional[float] = Field(None, ge=0.0, le=1.0, description="Population share of the cluster")


class ColorArtifacts(BaseModel):
    """Optional rendered previews of the extraction."""
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG strip of the palette"
    )
    region_grid_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG of the grid region colors (grid strategy only)"
    )


class ColorExtractResponse(BaseModel):
    """Detailed color extraction response."""
    request_id: str = Field(..., description="Request identifier for log correlation")
    width: int = Field(..., description="Decoded image width in pixels")
    height: int = Field(..., description="Decoded image height in pixels")
    strategy: str = Field(..., description="Extraction strategy used: 'grid' or 'kmeans'")
    colors: List[str] = Field(..., description="Palette as lowercase #rrggbb strings")
    candidates: List[CandidateEntry] = Field(
        ...,
        description="Candidates in spatial (grid) or population (kmeans) order"
    )
    params: Dict[str, Any] = Field(..., description="Extraction parameters used")
    artifacts: Optional[ColorArtifacts] = Field(None, description="Optional rendered previews")
