"""
Script to convert contour files (KML / GeoJSON) into WorldEdit schematics.

## Usage:
```bash python convert.py contours.geojson --fill --offset 0 -2016 0
```

## Output:
- One .schem / .schematic file in 'output', or 'geotoschematic.zip' when
  several inputs are given.

## Dependencies:
- geoschem.cli

## Note:
- Paste the result with "//paste -a -o" so the stored origin is honored.
- GEOSCHEM_LOG_LEVEL=DEBUG prints per-stage details.
"""
import sys

from geoschem.cli import main

if __name__ == "__main__":
    sys.exit(main())
