"""Per-disk attribute collection"""

import logging
import os
from typing import Dict, Optional

from .models import NOT_AVAILABLE
from .sysfs import SysfsAccessor
from .tools import ScsiTools


FIRMWARE_LABEL = "Revision level"
VPD_SERIAL_PAGE = 0x80


def extract_digits(text: str) -> str:
    """Keep only the decimal digits of text, "" when there are none"""
    return "".join(c for c in text if c.isdigit() and c.isascii())


def decode_vpd_serial(data: bytes) -> str:
    """Decode the Unit Serial Number VPD page (0x80)

    The page starts with a 4 byte header whose last byte is the length of the
    serial that follows. Kernels that already strip the header are handled by
    falling back to the raw text.
    """
    if len(data) >= 4 and data[1] == VPD_SERIAL_PAGE:
        serial = data[4:4 + data[3]]
    else:
        serial = data
    return serial.decode("ascii", errors="replace").strip(" \x00\n") or NOT_AVAILABLE


class AttributeCollector:
    """Collects temperature, firmware, vendor, model and serial of a disk

    Every attribute is an independent read: a failure degrades that one field.
    """

    def __init__(self, tools: ScsiTools, sysfs: SysfsAccessor, logger: Optional[logging.Logger] = None):
        self.tools = tools
        self.sysfs = sysfs
        self.logger = logger or logging.getLogger(__name__)

    def collect(self, device_path: str, sysfs_device: str) -> Dict[str, str]:
        """Collect all attributes of a disk

        Args:
            device_path: Generic device node (e.g., /dev/sg105)
            sysfs_device: The slot's device directory in sysfs

        Returns:
            Dict with temperature, fw_revision, vendor, model and serial
        """
        return {
            "temperature": self.temperature(device_path),
            "fw_revision": self.firmware(device_path),
            "vendor": self.vendor(sysfs_device),
            "model": self.model(sysfs_device),
            "serial": self.serial(sysfs_device),
        }

    def temperature(self, device_path: str) -> str:
        """Digits of the third line of scsi_temperature output

        No range or unit validation happens here, callers treat an empty or
        non-numeric value as unreadable.
        """
        lines = self.tools.temperature(device_path).split("\n")
        if len(lines) < 3:
            self.logger.debug(f"No temperature line for {device_path}")
            return ""
        return extract_digits(lines[2])

    def firmware(self, device_path: str) -> str:
        for line in self.tools.device_info(device_path).splitlines():
            if FIRMWARE_LABEL in line:
                value = line.split(FIRMWARE_LABEL, 1)[1].lstrip(":").strip()
                return value or NOT_AVAILABLE

        self.logger.debug(f"No '{FIRMWARE_LABEL}' in sginfo output for {device_path}")
        return NOT_AVAILABLE

    def vendor(self, sysfs_device: str) -> str:
        return self._read_attribute(sysfs_device, "vendor")

    def model(self, sysfs_device: str) -> str:
        return self._read_attribute(sysfs_device, "model")

    def serial(self, sysfs_device: str) -> str:
        data = self.sysfs.read_bytes(os.path.join(sysfs_device, "vpd_pg80"))
        if data is None:
            return NOT_AVAILABLE
        return decode_vpd_serial(data)

    def _read_attribute(self, sysfs_device: str, name: str) -> str:
        value = self.sysfs.read_text(os.path.join(sysfs_device, name))
        if value is None:
            return NOT_AVAILABLE
        return value
