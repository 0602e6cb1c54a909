"""Access to the kernel enclosure class tree"""

import logging
import os
from typing import List, NamedTuple, Optional

from .errors import SysfsPathError, UnsupportedEnvironmentError


SYSFS_ENCLOSURE_ROOT = "/sys/class/enclosure"


class SlotPath(NamedTuple):
    """Named segments of <root>/<enclosure>/<slot_dir>/device/scsi_generic/<node>"""

    enclosure: str
    slot_dir: str
    node: str

    @property
    def slot(self) -> str:
        """Bay label, some firmware appends ",<extra>" to the directory name"""
        return self.slot_dir.split(",")[0]


class SysfsAccessor:
    """Reads, validates and writes the sysfs enclosure tree

    All paths handed out by this class are absolute paths under ``root``.
    """

    def __init__(self, root: str = SYSFS_ENCLOSURE_ROOT, logger: Optional[logging.Logger] = None):
        self.root = root.rstrip("/") or "/"
        self.logger = logger or logging.getLogger(__name__)

    def verify(self) -> None:
        """Make sure the enclosure tree exists and has entries

        Raises:
            UnsupportedEnvironmentError: If the root is absent or empty
        """
        try:
            with os.scandir(self.root) as entries:
                if next(entries, None) is not None:
                    return
        except OSError as e:
            self.logger.debug(f"Cannot read {self.root}: {e}")

        raise UnsupportedEnvironmentError(self.root)

    def path(self, *parts: str) -> str:
        """Build a path below the enclosure root"""
        return os.path.join(self.root, *parts)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def list_entries(self, enclosure_slot: str) -> List[str]:
        """List the entries of an enclosure directory, sorted by name

        Raises:
            FileNotFoundError: If the enclosure has no directory in the tree
        """
        return sorted(os.listdir(self.path(enclosure_slot)))

    def generic_devices(self, enclosure_slot: str, slot_dir: str) -> List[str]:
        """List full paths under <slot>/device/scsi_generic/, empty if absent"""
        generic_dir = self.path(enclosure_slot, slot_dir, "device", "scsi_generic")
        try:
            names = sorted(os.listdir(generic_dir))
        except (FileNotFoundError, NotADirectoryError):
            return []
        return [os.path.join(generic_dir, name) for name in names]

    def parse_slot_path(self, path: str) -> SlotPath:
        """Split a generic device path into its named segments

        Raises:
            SysfsPathError: If the path is not below the root or has the wrong shape
        """
        rel = os.path.relpath(path, self.root)
        parts = rel.split(os.sep)

        if rel.startswith(os.pardir) or len(parts) != 5:
            raise SysfsPathError(f"Unexpected slot path layout: {path}")
        if parts[2] != "device" or parts[3] != "scsi_generic":
            raise SysfsPathError(f"Path does not point into device/scsi_generic: {path}")
        if not all(parts):
            raise SysfsPathError(f"Empty segment in slot path: {path}")

        return SlotPath(enclosure=parts[0], slot_dir=parts[1], node=parts[4])

    def read_bytes(self, path: str) -> Optional[bytes]:
        """Read an attribute file, None when it cannot be read"""
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            self.logger.debug(f"Unable to read {path}: {e}")
            return None

    def read_text(self, path: str) -> Optional[str]:
        """Read an attribute file with its trailing newline removed"""
        data = self.read_bytes(path)
        if data is None:
            return None
        return data.decode("utf-8", errors="replace").rstrip("\n")

    def write_text(self, path: str, value: str) -> None:
        """Write a value to a control file"""
        self.logger.debug(f"Writing {value!r} to {path}")
        with open(path, "w") as f:
            f.write(value)
