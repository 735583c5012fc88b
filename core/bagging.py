"""BagIt packaging for archival-grade records.

A bagged record lives at ``{database}/{id}/`` as a BagIt bag whose payload
is the single file ``data/{id}.json``. The store writes the record as a flat
``{id}.json`` first; ``create_package`` then wraps it into the bag.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import bagit

from core.errors import AdapterError, FileMissingAdapterError
from core.paths import RECORD_SUFFIX

logger = logging.getLogger(__name__)

DEFAULT_CHECKSUMS = ["sha256"]


class BagPackager(Protocol):
    def create_package(self, store_root: Path, record_id: int) -> Path:
        """Wrap the freshly written ``{id}.json`` into ``{id}/data/{id}.json``."""
        ...

    def refresh_package(self, store_root: Path, record_id: int) -> None:
        """Recompute the bag's manifests after its payload changed."""
        ...


class BagItPackager:
    def __init__(self, checksums: list[str] | None = None, contact: str | None = None) -> None:
        self._checksums = checksums or list(DEFAULT_CHECKSUMS)
        self._contact = contact

    def _bag_info(self, record_id: int) -> dict[str, str]:
        info = {"External-Identifier": str(record_id)}
        if self._contact:
            info["Contact-Name"] = self._contact
        return info

    def create_package(self, store_root: Path, record_id: int) -> Path:
        flat_file = store_root / f"{record_id}{RECORD_SUFFIX}"
        bag_dir = store_root / str(record_id)
        if not flat_file.is_file():
            raise FileMissingAdapterError("package", str(flat_file))

        try:
            bag_dir.mkdir()
            flat_file.rename(bag_dir / flat_file.name)
            # make_bag moves the directory contents into data/
            bagit.make_bag(str(bag_dir), self._bag_info(record_id), checksums=self._checksums)
        except (OSError, bagit.BagError) as exc:
            raise AdapterError("package", str(bag_dir), str(exc)) from exc

        logger.info("Packaged record %s as a bag at %s", record_id, bag_dir)
        return bag_dir

    def refresh_package(self, store_root: Path, record_id: int) -> None:
        bag_dir = store_root / str(record_id)
        try:
            bag = bagit.Bag(str(bag_dir))
            bag.save(manifests=True)
        except (OSError, bagit.BagError) as exc:
            raise AdapterError("refresh package", str(bag_dir), str(exc)) from exc
        logger.debug("Refreshed manifests of bag %s", bag_dir)

    @staticmethod
    def is_valid(bag_dir: Path) -> bool:
        try:
            return bagit.Bag(str(bag_dir)).is_valid()
        except bagit.BagError:
            return False
