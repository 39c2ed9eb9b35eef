'''  Class for rendering a five-segment Fresnel Zone Plate (FZP) as a printable raster.

The plate is split into five column bands, each a zone plate with its own focal axis.
The two outer bands focus at the full target distance and the three inner ones at half
of it. Every dot of the raster receives the transmittance of the plate at that point,
either as hard opaque/transparent zones (binary) or as a graded, sinusoidal profile.

fzplate contributors, 2026

'''

from enum import Enum
from typing import NamedTuple, List, Tuple

import numpy as np
from PIL import Image
from p_tqdm import p_map, t_map

from fzputils import (MM_PER_INCH, columnSpans, regionCentersX, centerY, focalLengths,
                      focalLengthsSquared, gridShape, coordinateAxes, pixelPitch, convertUnits,
                      numberOfZones, outermostZoneWidth, farthestDistance)


REGION_COUNT = 5
MIN_WIDTH = 6  # one column per sixth of the plate

# Converts a path difference in mm over a wavelength in nm into radians.
PHASE_SCALE = 2000000.0 * np.pi

OPAQUE = 0.0
TRANSPARENT = 255.0

DEFAULT_DISTANCE = 12.    # in
DEFAULT_DPI = 600.
DEFAULT_WAVELENGTH = 500. # nm


class PlateMode(Enum):
    """
    Unlike a standard lens, a binary zone plate produces intensity maxima along its axis
    at odd fractions of the focal length (f/3, f/5, ...). A plate whose opacity varies
    sinusoidally forms a single focal point instead, and is the equivalent of a
    transmission hologram of a converging lens.
    """
    BINARY = 0
    SINUSOIDAL = 1


class UnsupportedModeError(ValueError):
    pass


class PlateGeometryError(ValueError):
    pass


class Region(NamedTuple):
    index: int
    xBegin: int         # first column, inclusive
    xEnd: int           # last column, inclusive
    centerX: float      # mm
    focalLength: float  # mm
    focalLengthSq: float  # mm^2


def plateMode(mode):
    """Resolve a PlateMode from the enum itself, its value or its name."""
    if isinstance(mode, PlateMode):
        return mode
    if isinstance(mode, str):
        try:
            return PlateMode[mode.strip().upper()]
        except KeyError:
            raise UnsupportedModeError(f"Unsupported plate mode: {mode!r}") from None
    if isinstance(mode, (int, np.integer)) and not isinstance(mode, bool):
        try:
            return PlateMode(int(mode))
        except ValueError:
            raise UnsupportedModeError(f"Unsupported plate mode: {mode!r}") from None
    raise UnsupportedModeError(f"Unsupported plate mode: {mode!r}")


def transmittance(cosine, mode):
    """
    Map cos(phase) to an intensity in [0, 255].

    Binary plates use the sign of the cosine, so a cosine of exactly zero gives
    mid-gray (127.5) rather than one of the two levels.
    """
    mode = plateMode(mode)
    if mode is PlateMode.BINARY:
        return (1.0 + np.sign(cosine)) * TRANSPARENT / 2
    if mode is PlateMode.SINUSOIDAL:
        return (1.0 + cosine) * TRANSPARENT / 2
    raise UnsupportedModeError(f"Unsupported plate mode: {mode!r}")


def regionOpacity(k, xBegin, xEnd, x0, y0, f, f2, height, dpiX, dpiY, waveLength, mode):
    """
    Return (k, block) where block is the (height, xEnd-xBegin+1) float32 intensity of region k.

    Only picklable arguments go in and out, so the function can run in a worker process.
    All geometry is in mm and the wavelength in nm; f2 is the squared focal length.
    """
    x, y = coordinateAxes(xBegin, xEnd, height, dpiX, dpiY)
    dx = x - x0
    dy = y - y0

    # path difference between a plate point and the focal point, relative to f
    dr = np.sqrt(f2 + (dx * dx)[np.newaxis, :] + (dy * dy)[:, np.newaxis]) - f
    phase = PHASE_SCALE * dr / waveLength

    return k, transmittance(np.cos(phase), mode).astype(np.float32)


def paintSeparators(grid, regions):
    """Force the first and last column of every region to zero, all rows and channels."""
    for region in regions:
        grid[:, region.xBegin, ...] = OPAQUE
        grid[:, region.xEnd, ...] = OPAQUE
    return grid


class FZPlate:
    """
    Render a five-segment Fresnel Zone Plate into a raster of intensities.

    The raster is a float32 array indexed [row, column, channel]. Every channel of a
    dot gets the same value, so a single-channel (or plain 2-D) array is enough for
    printing. The caller may supply the array (fill) or let the plate allocate it from
    a physical size (build).

    The five regions are evaluated as independent tasks. Each task returns its own
    block, the blocks are written into the raster in region order, and only after all
    tasks have returned are the separator columns painted. Neighbouring spans can share
    a boundary column; that column always ends up zero.
    """

    def __init__(self,
                 mode=PlateMode.BINARY,          # transmittance law, PlateMode or its name
                 distance=DEFAULT_DISTANCE,      # target focal distance in inches
                 dpiX=DEFAULT_DPI,               # printable dots per inch along x
                 dpiY=DEFAULT_DPI,               # printable dots per inch along y
                 waveLength=DEFAULT_WAVELENGTH,  # design wavelength in nm
                 parallel=True,                  # evaluate regions in a process pool
                 numCpus=REGION_COUNT,           # workers; never more than one per region is useful
                 verbose=True,                   # progress bars and informational output
                 ):

        self.mode = mode
        # numpy scalars, so zero or negative values give inf/NaN instead of raising
        self.distance = np.float64(distance)
        self.dpiX = np.float64(dpiX)
        self.dpiY = np.float64(dpiY)
        self.waveLength = np.float64(waveLength)
        self.parallel = parallel
        self.numCpus = min(numCpus, REGION_COUNT)
        self.verbose = verbose

        # Set by build()
        self.image = None
        self.plateSize = None   # (width, height) in inches


    def describe(self, width=None, height=None):
        """Print a description of the plate, and of its regions when a raster size is known."""
        if (width is None or height is None) and self.image is not None:
            height, width = self.image.shape[:2]

        print("Fresnel zone plate parameters:")
        print(f"Mode: {self.mode.name if isinstance(self.mode, PlateMode) else self.mode}")
        print(f"Distance: {self.distance} in ({MM_PER_INCH * self.distance} mm)")
        print(f"Wavelength: {self.waveLength} nm")
        print(f"Resolution: {self.dpiX} x {self.dpiY} dpi")
        print(f"Pixel pitch: {pixelPitch(self.dpiX):.4f} x {pixelPitch(self.dpiY):.4f} mm")
        if self.plateSize is not None:
            print(f"Plate size: {self.plateSize[0]} x {self.plateSize[1]} in")
        if width is None:
            return

        print(f"Raster: {width} x {height} dots")
        regions, yCenter = self.regions(width, height)
        print(f"Vertical center: {yCenter:.4f} mm")
        for region, stats in zip(regions, self.regionZoneStats(width, height)):
            flag = "  UNDERSAMPLED" if stats["outerZoneWidth"] < pixelPitch(self.dpiX) else ""
            print(f"Region {region.index}: columns [{region.xBegin}, {region.xEnd}], "
                  f"center {region.centerX:.4f} mm, focal length {region.focalLength:.2f} mm, "
                  f"{stats['zones']} zones, outer zone width {stats['outerZoneWidth']:.4f} mm{flag}")


    def regions(self, width, height) -> Tuple[List[Region], float]:
        """Return the five regions of a width x height raster and the shared vertical center (mm)."""
        if width < MIN_WIDTH:
            raise PlateGeometryError(f"Raster width must be at least {MIN_WIDTH} columns, got {width}")

        spans = columnSpans(width)
        centers = regionCentersX(width, self.dpiX)
        focus = focalLengths(self.distance)
        focus2 = focalLengthsSquared(self.distance)

        regions = [Region(k, xBegin, xEnd, centers[k], focus[k], focus2[k])
                   for k, (xBegin, xEnd) in enumerate(spans)]
        return regions, centerY(height, self.dpiY)


    def regionZoneStats(self, width, height):
        """
        Zone count and outermost zone width (mm) seen by each region.

        The radius used is the distance from the region's focal axis to the farthest
        corner of its column span.
        """
        regions, yCenter = self.regions(width, height)
        wavelength = convertUnits(self.waveLength, 'nm')
        yMax = MM_PER_INCH * (height - 1) / self.dpiY

        stats = []
        for region in regions:
            x0 = MM_PER_INCH * region.xBegin / self.dpiX
            x1 = MM_PER_INCH * region.xEnd / self.dpiX
            rMax = farthestDistance(region.centerX, yCenter, x0, 0.0, x1, yMax)

            focal = convertUnits(region.focalLength, 'mm')
            diameter = convertUnits(2 * rMax, 'mm')
            stats.append({
                "radius": rMax,
                "zones": numberOfZones(wavelength, focal, diameter),
                "outerZoneWidth": outermostZoneWidth(wavelength, focal, diameter) * 1000,
            })
        return stats


    def allocate(self, widthInches, heightInches, channels=1):
        """Return a zeroed float32 raster covering the plate."""
        height, width = gridShape(widthInches, heightInches, self.dpiX, self.dpiY)
        return np.zeros((height, width, channels), dtype=np.float32)


    def fill(self, grid):
        """
        Write the zone plate into grid in place and return it.

        grid is indexed [row, column, channel]; a 2-D array is treated as a single
        channel. The array is never resized.
        """
        mode = plateMode(self.mode)

        if grid.ndim == 2:
            field = grid[:, :, np.newaxis]
        elif grid.ndim == 3:
            field = grid
        else:
            raise PlateGeometryError(f"Expected a 2-D or 3-D raster, got {grid.ndim} dimensions")

        height, width = field.shape[:2]
        regions, yCenter = self.regions(width, height)

        tasks = (
            [r.index for r in regions],
            [r.xBegin for r in regions],
            [r.xEnd for r in regions],
            [r.centerX for r in regions],
            [yCenter] * REGION_COUNT,
            [r.focalLength for r in regions],
            [r.focalLengthSq for r in regions],
            [height] * REGION_COUNT,
            [self.dpiX] * REGION_COUNT,
            [self.dpiY] * REGION_COUNT,
            [self.waveLength] * REGION_COUNT,
            [mode.value] * REGION_COUNT,
        )

        progress = dict(desc="regions", disable=not self.verbose)
        if self.parallel:
            results = p_map(regionOpacity, *tasks, num_cpus=self.numCpus, **progress)
        else:
            results = t_map(regionOpacity, *tasks, **progress)

        # all region tasks have returned here
        for k, block in results:
            region = regions[k]
            field[:, region.xBegin:region.xEnd + 1, :] = block[:, :, np.newaxis]

        paintSeparators(field, regions)
        return grid


    def build(self, widthInches, heightInches, channels=1):
        """Allocate a raster for a widthInches x heightInches plate and fill it."""
        self.plateSize = (widthInches, heightInches)
        self.image = self.fill(self.allocate(widthInches, heightInches, channels))
        return self.image


    def defaultFilename(self, extension='.bmp'):
        """File name proposed for a built plate: width x height x distance x wavelength."""
        if self.plateSize is None:
            raise ValueError("Plate has not been built; no size to name it by")
        width, height = self.plateSize
        return f"{width:g}x{height:g}x{self.distance:g}x{self.waveLength:g}{extension}"


    def writeImage(self, filename=None, image=None):
        """Save the first channel as an 8-bit grayscale image carrying the plate resolution."""
        image = self.image if image is None else image
        if image is None:
            raise ValueError("No image to write; build the plate or pass a raster")
        if filename is None:
            filename = self.defaultFilename()

        data = image[:, :, 0] if image.ndim == 3 else image
        gray = np.clip(np.nan_to_num(data), OPAQUE, TRANSPARENT).astype(np.uint8)
        Image.fromarray(gray).save(filename, dpi=(float(self.dpiX), float(self.dpiY)))
        if self.verbose:
            print(f"Image file saved as {filename}")
        return filename
