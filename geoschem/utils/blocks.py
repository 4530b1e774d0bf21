"""
Block identifier helpers and the legacy (pre-flattening) numeric id table.

Legacy ids are packed as ``block_type << 4 | data_value``: the high part
goes to a legacy schematic's ``Blocks`` array, the low nibble to ``Data``.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from ..errors import UnsupportedOptionsError

NAMESPACE = "minecraft"
AIR_BLOCK = "minecraft:air"

_BLOCK_ID_RE = re.compile(r"^[a-z0-9_.\-]+(:[a-z0-9_./\-]+)?$")

_COLORS = (
    "white", "orange", "magenta", "light_blue", "yellow", "lime", "pink", "gray",
    "light_gray", "cyan", "purple", "blue", "brown", "green", "red", "black",
)

# modern name -> (legacy block type, data value), Java Edition 1.12
_LEGACY_BLOCKS: Dict[str, Tuple[int, int]] = {
    "air": (0, 0),
    "stone": (1, 0),
    "granite": (1, 1),
    "polished_granite": (1, 2),
    "diorite": (1, 3),
    "polished_diorite": (1, 4),
    "andesite": (1, 5),
    "polished_andesite": (1, 6),
    "grass_block": (2, 0),
    "dirt": (3, 0),
    "coarse_dirt": (3, 1),
    "podzol": (3, 2),
    "cobblestone": (4, 0),
    "oak_planks": (5, 0),
    "spruce_planks": (5, 1),
    "birch_planks": (5, 2),
    "jungle_planks": (5, 3),
    "acacia_planks": (5, 4),
    "dark_oak_planks": (5, 5),
    "bedrock": (7, 0),
    "water": (9, 0),
    "lava": (11, 0),
    "sand": (12, 0),
    "red_sand": (12, 1),
    "gravel": (13, 0),
    "gold_ore": (14, 0),
    "iron_ore": (15, 0),
    "coal_ore": (16, 0),
    "oak_log": (17, 0),
    "spruce_log": (17, 1),
    "birch_log": (17, 2),
    "jungle_log": (17, 3),
    "oak_leaves": (18, 0),
    "spruce_leaves": (18, 1),
    "birch_leaves": (18, 2),
    "jungle_leaves": (18, 3),
    "sponge": (19, 0),
    "wet_sponge": (19, 1),
    "glass": (20, 0),
    "lapis_ore": (21, 0),
    "lapis_block": (22, 0),
    "sandstone": (24, 0),
    "chiseled_sandstone": (24, 1),
    "cut_sandstone": (24, 2),
    "gold_block": (41, 0),
    "iron_block": (42, 0),
    "bricks": (45, 0),
    "tnt": (46, 0),
    "bookshelf": (47, 0),
    "mossy_cobblestone": (48, 0),
    "obsidian": (49, 0),
    "diamond_ore": (56, 0),
    "diamond_block": (57, 0),
    "crafting_table": (58, 0),
    "farmland": (60, 0),
    "redstone_ore": (73, 0),
    "snow": (78, 0),
    "ice": (79, 0),
    "snow_block": (80, 0),
    "clay": (82, 0),
    "pumpkin": (86, 0),
    "netherrack": (87, 0),
    "soul_sand": (88, 0),
    "glowstone": (89, 0),
    "stone_bricks": (98, 0),
    "mossy_stone_bricks": (98, 1),
    "cracked_stone_bricks": (98, 2),
    "chiseled_stone_bricks": (98, 3),
    "melon": (103, 0),
    "mycelium": (110, 0),
    "nether_bricks": (112, 0),
    "end_stone": (121, 0),
    "emerald_ore": (129, 0),
    "emerald_block": (133, 0),
    "redstone_block": (152, 0),
    "nether_quartz_ore": (153, 0),
    "quartz_block": (155, 0),
    "chiseled_quartz_block": (155, 1),
    "quartz_pillar": (155, 2),
    "slime_block": (165, 0),
    "prismarine": (168, 0),
    "prismarine_bricks": (168, 1),
    "dark_prismarine": (168, 2),
    "sea_lantern": (169, 0),
    "hay_block": (170, 0),
    "terracotta": (172, 0),
    "coal_block": (173, 0),
    "packed_ice": (174, 0),
    "red_sandstone": (179, 0),
    "purpur_block": (201, 0),
    "end_stone_bricks": (206, 0),
    "magma_block": (213, 0),
    "nether_wart_block": (214, 0),
    "red_nether_bricks": (215, 0),
    "bone_block": (216, 0),
}

for _data, _color in enumerate(_COLORS):
    _LEGACY_BLOCKS[f"{_color}_wool"] = (35, _data)
    _LEGACY_BLOCKS[f"{_color}_stained_glass"] = (95, _data)
    _LEGACY_BLOCKS[f"{_color}_terracotta"] = (159, _data)
    _LEGACY_BLOCKS[f"{_color}_concrete"] = (251, _data)
    _LEGACY_BLOCKS[f"{_color}_concrete_powder"] = (252, _data)

LEGACY_BLOCK_IDS: Dict[str, int] = {
    f"{NAMESPACE}:{name}": (block_type << 4) | data
    for name, (block_type, data) in _LEGACY_BLOCKS.items()
}


def normalize_block_id(value: Optional[str], default: Optional[str] = None) -> str:
    """Return a namespaced block id, e.g. ``stone`` -> ``minecraft:stone``.

    Numeric ids are rejected: only text identifiers are supported.
    """
    text = (value or "").strip().lower()
    if not text:
        if default is None:
            raise UnsupportedOptionsError("Block id must not be empty")
        return normalize_block_id(default)
    if text.isdigit() or not _BLOCK_ID_RE.match(text):
        raise UnsupportedOptionsError(
            f"Invalid block id {value!r}: use a text id such as 'stone' or 'minecraft:stone'"
        )
    if ":" not in text:
        text = f"{NAMESPACE}:{text}"
    return text


def legacy_id(block_id: str, table: Optional[Dict[str, int]] = None) -> Optional[int]:
    """Packed legacy id for ``block_id`` or None when the table has no entry."""
    table = LEGACY_BLOCK_IDS if table is None else table
    return table.get(block_id)


def split_legacy_id(packed: int) -> Tuple[int, int]:
    """Split a packed legacy id into ``(block_type, data_value)``."""
    return packed >> 4, packed & 0x0F
