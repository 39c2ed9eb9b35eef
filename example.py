'''
Example script for rendering a five-segment Fresnel Zone Plate (FZP) as a printable bitmap.

The plate below is 18 x 3 inches printed at 600 dpi, focusing 500 nm light at 12 inches.
The image is saved next to the script, named after the plate parameters.

fzplate contributors, 2026

'''

from fzplate import FZPlate, PlateMode

plateWidth = 18.   # in
plateHeight = 3.   # in

# Initialise the Fresnel Zone Plate
fzp = FZPlate(mode = PlateMode.BINARY,  # BINARY for opaque/transparent zones, SINUSOIDAL for graded zones
              distance = 12.,           # Focal distance of the outer regions in inches; inner regions use half
              dpiX = 600.,
              dpiY = 600.,
              waveLength = 500.,        # Design wavelength in nm
              parallel = True,          # One worker per region
              )

if __name__ == '__main__':
    fzp.build(plateWidth, plateHeight)  # Render the FZP

    fzp.describe()  # Print a description of the FZP

    fzp.writeImage()  # Write the bitmap, e.g. 18x3x12x500.bmp
