'''
File contains utility functions for laying out a five-segment Fresnel Zone Plate (FZP)
on a printed raster: unit conversion, pixel coordinates and the region geometry.

fzplate contributors, 2026

'''

import numpy as np
import math


MM_PER_INCH = 25.4

# Midpoints of the five regions, in sixths of the plate width.
CENTER_FRACTIONS = (1.5, 2., 3., 4., 4.5)

# Cut points between adjacent regions, in sixths of the plate width.
CUT_FRACTIONS = (1.5, 2.5, 3.5, 4.5)


def convertUnits(value, unit):
    if unit == 'm':
        return value
    elif unit == 'cm':
        return value / 100
    elif unit == 'mm':
        return value / 1000
    elif unit == 'um':
        return value / 1e6
    elif unit == 'nm':
        return value / 1e9
    elif unit == 'in':
        return value * MM_PER_INCH / 1000
    else:
        raise ValueError(f"Unknown unit: {unit}")


def pixelPitch(dpi):
    # Size of one printed dot in mm
    return MM_PER_INCH / dpi


def pixelToMm(index, dpi):
    """Physical coordinate (mm) of a column or row index. Works on scalars and arrays."""
    return MM_PER_INCH * index / dpi


def gridShape(widthInches, heightInches, dpiX, dpiY):
    """
    Number of printable dots covering the plate, as (height, width).

    Parameters
    ----------
    widthInches, heightInches : float
        Physical plate size in inches.
    dpiX, dpiY : float
        Print resolution along each axis.

    Returns
    -------
    tuple of int
        (rows, columns) of the raster.
    """
    return (int(math.ceil(dpiY * heightInches)),
            int(math.ceil(dpiX * widthInches)))


def columnSpans(width):
    """
    Split the columns [0, width-1] into the five inclusive region spans.

    The plate is cut into six equal slices and the outer two regions take one and
    a half slices each. Cut points are rounded outwards (floor for the end of one
    region, ceiling for the start of the next), so two neighbours either share a
    boundary column or are adjacent.

    Parameters
    ----------
    width : int
        Number of columns in the raster.

    Returns
    -------
    list of (int, int)
        (xBegin, xEnd) for each of the five regions.
    """
    w = width - 1
    cuts = [c * w / 6 for c in CUT_FRACTIONS]

    begins = [0] + [int(math.ceil(c)) for c in cuts]
    ends = [int(math.floor(c)) for c in cuts] + [w]
    return list(zip(begins, ends))


def regionCentersX(width, dpiX):
    # mm, one focal axis per region
    return [MM_PER_INCH * (width - 1) * c / dpiX / 6 for c in CENTER_FRACTIONS]


def centerY(height, dpiY):
    # mm, shared by all regions
    return MM_PER_INCH * (height - 1) / dpiY / 2


def focalLengths(distanceInches):
    """Focal lengths in mm: full distance for the outer regions, half for the inner three."""
    f = MM_PER_INCH * distanceInches
    return [f, f / 2, f / 2, f / 2, f]


def focalLengthsSquared(distanceInches):
    # mm^2, built from the distance directly rather than by squaring focalLengths()
    f2 = MM_PER_INCH * MM_PER_INCH * distanceInches * distanceInches
    return [f2, f2 / 4, f2 / 4, f2 / 4, f2]


def outermostZoneWidth(wavelength, focal_length, diameter):
    return (wavelength * focal_length) / diameter


def numberOfZones(wavelength, focal_length, diameter):
    """
    Calculate the number of Fresnel zones in a zone plate.

    Parameters
    ----------
    wavelength : float
        Wavelength of light in meters.
    focal_length : float
        Focal length of the zone plate in meters.
    diameter : float
        Diameter of the zone plate in meters.

    Returns
    -------
    int
        Number of Fresnel zones (rounded down to nearest whole number).
    """
    N = (diameter ** 2) / (4 * wavelength * focal_length)
    return int(N)


def farthestDistance(cx, cy, x0, y0, x1, y1):
    """Max distance from (cx,cy) to the corners of the rectangle [x0,x1]x[y0,y1]."""
    return max(
        math.hypot(x0 - cx, y0 - cy),
        math.hypot(x0 - cx, y1 - cy),
        math.hypot(x1 - cx, y0 - cy),
        math.hypot(x1 - cx, y1 - cy),
    )


def coordinateAxes(xBegin, xEnd, height, dpiX, dpiY):
    """Column and row coordinate vectors (mm) for one region, in float64."""
    x = pixelToMm(np.arange(xBegin, xEnd + 1, dtype=np.float64), dpiX)
    y = pixelToMm(np.arange(height, dtype=np.float64), dpiY)
    return x, y
