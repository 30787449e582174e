"""
Palette Colors Module

Provides grid partitioning, k-means clustering, HSL conversion and hue-ordered
palette selection for decoded images. The core works on in-memory rasters
only; fetching and decoding live in app.services.imaging.
"""

__version__ = "1.0.0"
