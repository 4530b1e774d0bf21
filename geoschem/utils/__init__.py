from .logging import get_logger, set_level
from .blocks import (
    AIR_BLOCK,
    LEGACY_BLOCK_IDS,
    normalize_block_id,
    legacy_id,
    split_legacy_id,
)
