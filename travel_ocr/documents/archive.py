"""Load a batch from a local zip archive of traveler folders.

Expected layouts, one folder per traveler::

    bundle/passengers/<traveler>/<files>
    bundle/<traveler>/<files>

Document kinds are inferred from file names.
"""

import re
import zipfile
from pathlib import Path, PurePosixPath

from travel_ocr.utils.logger import get_logger

from .models import DocumentKind, DocumentRef

logger = get_logger(__name__)


def classify_filename(filename: str) -> str:
    """Infer a document kind from a file name.

    ``PPF``/``PPB`` prefixes mark passport front/back. Other names are
    matched on keywords.

    Args:
        filename: Base name of the file.

    Returns:
        A ``DocumentKind`` value, ``"passport"`` when the side is unknown,
        or ``"other"``.
    """
    name = filename.lower()

    if "ppf" in name:
        return DocumentKind.PASSPORT_FRONT
    if "ppb" in name:
        return DocumentKind.PASSPORT_BACK
    if "passport" in name:
        if "front" in name or "_f" in name:
            return DocumentKind.PASSPORT_FRONT
        if "back" in name or "_b" in name:
            return DocumentKind.PASSPORT_BACK
        return "passport"
    if name.startswith("front"):
        return DocumentKind.PASSPORT_FRONT
    if name.startswith("back"):
        return DocumentKind.PASSPORT_BACK
    if "flight" in name or ("ticket" in name and "hotel" not in name):
        return DocumentKind.FLIGHT
    if "hotel" in name or "accommodation" in name:
        return DocumentKind.HOTEL
    return "other"


def _traveler_folder(parts: tuple[str, ...]) -> str | None:
    if len(parts) >= 4 and parts[1].lower() == "passengers":
        return parts[2]
    if len(parts) >= 3:
        return parts[1]
    if len(parts) == 2:
        return parts[0]
    return None


def _traveler_id(folder: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", folder.lower()).strip("-")


def load_archive(zip_path: Path, workdir: Path) -> list[DocumentRef]:
    """Extract a traveler archive and build document references.

    Files are written under ``workdir/<traveler_id>/`` and referenced
    through ``file://`` URLs. Files of kinds the pipeline does not
    process are skipped.

    Args:
        zip_path: Path to the zip archive.
        workdir: Directory to extract files into.

    Returns:
        Document references in archive order.
    """
    documents: list[DocumentRef] = []

    with zipfile.ZipFile(zip_path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue

            parts = PurePosixPath(info.filename).parts
            folder = _traveler_folder(parts)
            if folder is None:
                logger.debug("Skipping root-level archive entry %s", info.filename)
                continue

            filename = parts[-1]
            kind = classify_filename(filename)
            if kind not in set(DocumentKind):
                logger.debug("Skipping %s (kind %s)", info.filename, kind)
                continue

            traveler_id = _traveler_id(folder)
            target_dir = workdir / traveler_id
            target_dir.mkdir(parents=True, exist_ok=True)
            target = target_dir / filename
            target.write_bytes(archive.read(info))

            documents.append(
                DocumentRef(
                    document_id=f"{traveler_id}/{filename}",
                    traveler_id=traveler_id,
                    traveler_name=folder.replace("_", " ").strip(),
                    source_url=target.resolve().as_uri(),
                    document_kind=kind,
                )
            )

    logger.info("Loaded %d documents from %s", len(documents), zip_path)
    return documents
