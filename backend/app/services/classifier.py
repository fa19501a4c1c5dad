"""
Orientation classification from stream geometry.

Coarse bucketing against a 16:9 reference, not a general aspect-ratio
classifier: only exact 16:9 (landscape) and 9:16 (portrait) frames get a
named bucket, everything else (square, 4:3, 21:9, zero-sized) is OTHER.
"""

from app.models.schemas import Geometry, Orientation


def classify(geometry: Geometry) -> Orientation:
    """
    Map geometry to an orientation bucket.

    Rule:
        width  == floor(16 * height / 9) -> LANDSCAPE
        height == floor(16 * width / 9)  -> PORTRAIT
        otherwise                        -> OTHER

    Args:
        geometry: Width and height of the video stream

    Returns:
        Orientation bucket

    Example:
        >>> classify(Geometry(width=1920, height=1080))
        <Orientation.LANDSCAPE: 'landscape'>
        >>> classify(Geometry(width=1080, height=1920))
        <Orientation.PORTRAIT: 'portrait'>
    """
    width, height = geometry.width, geometry.height

    # 0x0 satisfies the landscape equation
    if width <= 0 or height <= 0:
        return Orientation.OTHER

    if width == (16 * height) // 9:
        return Orientation.LANDSCAPE
    if height == (16 * width) // 9:
        return Orientation.PORTRAIT
    return Orientation.OTHER
