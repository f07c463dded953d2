"""
Provider Module

Resolves logical paths to payload bytes from a disk overlay or from
mounted archive containers.

Lookup order:
1. Disk overlay (if enabled): the sanitized location, when it is a
   regular file
2. Mounted archives in mount order: the first container whose index
   holds the path key

Author: YSNRFD
Version: 1.0.0
"""

import os
import threading
from typing import Optional, List, Tuple

from .path_hasher import PathHasher
from .path_sanitizer import PathSanitizer
from veloxio.archive.container import ArchiveContainer
from veloxio.archive.loader import ArchiveLoader
from veloxio.archive.reader import ArchiveEntryReader
from veloxio.core.config_loader import Config, get_config
from veloxio.core.subsystem import Subsystem, SubsystemState
from veloxio.exceptions import (
    VFSException,
    SanitizeError,
    ArchiveIOError,
    NotFoundError,
)


class Provider(Subsystem):
    """
    Read-only virtual file system facade.

    Mounting is serialized by a lock and publishes a new immutable tuple
    of containers. Lookups read whichever tuple is current and never
    take the lock, so any number of ``get`` calls can run concurrently
    with each other and with a mount.

    Example:
        >>> provider = Provider(disk_enabled=True, disk_root='/srv/assets')
        >>> provider.register_archive('/srv/base.pak')
        True
        >>> provider.get('/textures/stone.png')
        b'\\x89PNG...'
    """

    def __init__(
        self,
        disk_enabled: bool = False,
        disk_root: str = ".",
        loader: Optional[ArchiveLoader] = None,
        reader: Optional[ArchiveEntryReader] = None,
        archives: Optional[List[str]] = None
    ):
        super().__init__('provider')
        self._disk_enabled = disk_enabled
        self._disk_root = disk_root
        self._sanitizer = PathSanitizer(disk_root)
        self._loader = loader or ArchiveLoader()
        self._reader = reader or ArchiveEntryReader()
        self._configured_archives = list(archives or [])
        self._containers: Tuple[ArchiveContainer, ...] = ()
        self._mount_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'Provider':
        """Build a Provider from configuration (the global one by default)."""
        config = config or get_config()
        prov = config.provider
        return cls(
            disk_enabled=prov.disk_enabled,
            disk_root=prov.disk_root,
            loader=ArchiveLoader(backing=prov.backing),
            reader=ArchiveEntryReader(verify_checksums=prov.verify_checksums),
            archives=prov.archives,
        )

    @property
    def disk_enabled(self) -> bool:
        return self._disk_enabled

    @property
    def disk_root(self) -> str:
        return self._disk_root

    @property
    def mounted_archives(self) -> List[str]:
        """Source paths of mounted archives, in mount order."""
        return [c.source_path for c in self._containers]

    def initialize(self) -> None:
        """Mount the archives listed in configuration."""
        self.set_state(SubsystemState.INITIALIZING)
        self._logger.info(
            "Initializing provider",
            context={'disk_enabled': self._disk_enabled, 'archives': len(self._configured_archives)}
        )

        for path in self._configured_archives:
            self.register_archive(path)

        self.set_state(SubsystemState.INITIALIZED)

    def cleanup(self) -> None:
        """Unmount every archive."""
        self.close()

    def register_archive(self, source_path: str) -> bool:
        """
        Mount an archive container.

        Args:
            source_path: Path of the archive; mounts are keyed by this
                exact string

        Returns:
            True if the archive was mounted; False if it was already
            mounted or failed to load (the failure is logged)
        """
        with self._mount_lock:
            if any(c.source_path == source_path for c in self._containers):
                self._logger.debug("Archive already mounted", context={'path': source_path})
                return False

            try:
                container = self._loader.load(source_path)
            except VFSException as e:
                self._logger.error(
                    f"Failed to mount archive: {e.message}",
                    context={
                        'path': source_path,
                        'error': type(e).__name__,
                        'error_code': e.error_code,
                        'kind': e.context.get('kind'),
                    }
                )
                return False

            self._containers = self._containers + (container,)

        self._logger.info(
            "Mounted archive",
            context={'path': source_path, 'entries': len(container)}
        )
        return True

    def unregister_archive(self, source_path: str) -> bool:
        """
        Unmount an archive.

        The container disappears from lookups at once; its source is
        closed after in-flight reads finish.

        Returns:
            True if the archive was mounted
        """
        with self._mount_lock:
            remaining = tuple(c for c in self._containers if c.source_path != source_path)
            removed = [c for c in self._containers if c.source_path == source_path]
            self._containers = remaining

        for container in removed:
            container.retire()

        if removed:
            self._logger.info("Unmounted archive", context={'path': source_path})
        return bool(removed)

    def close(self) -> None:
        """Unmount every archive."""
        with self._mount_lock:
            removed = self._containers
            self._containers = ()

        for container in removed:
            container.retire()

        self.set_state(SubsystemState.STOPPED)

    def _read_disk(self, raw_path: str) -> Optional[bytes]:
        try:
            location = self._sanitizer.sanitize(raw_path)
        except SanitizeError as e:
            self._logger.debug(
                "Disk lookup skipped",
                context={'path': raw_path, 'reason': e.context.get('reason')}
            )
            return None

        if not os.path.isfile(location):
            return None

        try:
            with open(location, 'rb') as f:
                return f.read()
        except OSError as e:
            self._logger.warning(
                "Disk read failed",
                context={'path': raw_path, 'error': str(e)}
            )
            return None

    def get(self, raw_path: str) -> bytes:
        """
        Get the contents of a logical path.

        Args:
            raw_path: Logical path as supplied by the caller

        Returns:
            Payload bytes

        An archive unmounted while the lookup is scanning it is skipped.

        Raises:
            NotFoundError: If neither the disk overlay nor any mounted
                archive provides the path
        """
        if self._disk_enabled:
            data = self._read_disk(raw_path)
            if data is not None:
                return data

        key = PathHasher.hash(raw_path)
        for container in self._containers:
            entry = container.get_entry(key)
            if entry is None:
                continue
            try:
                return self._reader.read(container, entry)
            except ArchiveIOError as e:
                if container.retired:
                    # Unmounted between the index snapshot and the read.
                    self._logger.debug(
                        "Archive unmounted during lookup",
                        context={'path': raw_path, 'archive': container.source_path}
                    )
                    continue
                self._logger.error(
                    f"Archive read failed: {e.message}",
                    context={'path': raw_path, 'archive': container.source_path}
                )
                raise NotFoundError(raw_path) from e

        raise NotFoundError(raw_path)

    def has(self, raw_path: str) -> bool:
        """Check whether ``get`` would find a file, without reading archive payloads."""
        if self._disk_enabled:
            try:
                if os.path.isfile(self._sanitizer.sanitize(raw_path)):
                    return True
            except SanitizeError:
                pass

        key = PathHasher.hash(raw_path)
        return any(key in container for container in self._containers)
