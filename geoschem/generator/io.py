import io
import os
import zipfile
from dataclasses import dataclass
from typing import Dict, Sequence

from ..errors import ConversionError
from ..utils.logging import get_logger

logger = get_logger(__name__)

ARCHIVE_STEM = "geotoschematic"


@dataclass(frozen=True)
class ExportPackage:
    data: bytes
    filename: str
    is_archive: bool


def _unique_names(results) -> Dict[str, bytes]:
    members: Dict[str, bytes] = {}
    for result in results:
        filename = result.filename
        n = 2
        while filename in members:
            filename = f"{result.name}_{n}{result.extension}"
            n += 1
        members[filename] = result.data
    return members


def package_results(results: Sequence) -> ExportPackage:
    """One schematic file for a single result, a zip archive for several.

    Archive members are named ``<name><extension>`` in result order.
    """
    if not results:
        raise ConversionError("No data to process")
    if len(results) == 1:
        only = results[0]
        return ExportPackage(data=only.data, filename=only.filename, is_archive=False)

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for filename, data in _unique_names(results).items():
            zf.writestr(filename, data)
    logger.info("Archived %d schematic(s)", len(results))
    return ExportPackage(data=buffer.getvalue(), filename=ARCHIVE_STEM + ".zip", is_archive=True)


def save_package(package: ExportPackage, output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, package.filename)
    with open(output_path, "wb") as f:
        f.write(package.data)
    logger.info("Saved %s", output_path)
    return output_path
