from .errors import (
    ConversionError,
    EmptyContourMapError,
    VolumeTooLargeError,
    UnsupportedOptionsError,
    UnsupportedBlockError,
    BatchConversionError,
)
from .models import (
    AIR,
    CellKind,
    Cell,
    Grid,
    GridBounds,
    Schematic,
    ConverterConfig,
    OFFSET_PRESETS,
    FORMAT_SPONGE_V3,
    FORMAT_LEGACY,
    load_config,
)
from .generator import (
    ConversionPipeline,
    ConversionResult,
    convert_geodata,
    package_results,
    save_package,
)
from .schematic import encode_schematic, decode_schematic

__version__ = "0.1.0"
