"""Disk enumeration by walking the sysfs enclosure tree"""

import logging
import os
from typing import List, Optional

from .attributes import AttributeCollector
from .correlator import DeviceCorrelator
from .errors import SysfsPathError
from .models import Disk, Enclosure, LED_FAULT, LED_LOCATE, NO_LED
from .sysfs import SysfsAccessor
from .tools import ScsiTools


# Slot directory naming seen across enclosure firmware, e.g.
#   /sys/class/enclosure/15:0:1:0/Slot00/
#   /sys/class/enclosure/13:0:0:0/Disk #00/
#   /sys/class/enclosure/13:0:0:0/Array Device 00/
#   /sys/class/enclosure/0:0:0:0/0/
SLOT_NAME_PATTERNS = ("slot", "disk", "array device")


def is_slot_entry(name: str) -> bool:
    """Check whether a directory name under an enclosure denotes a drive bay"""
    lowered = name.lower()
    if any(pattern in lowered for pattern in SLOT_NAME_PATTERNS):
        return True
    return name.isascii() and name.isdigit()


class DiskEnumerator:
    """Finds populated slots and builds a Disk record for each"""

    def __init__(self, tools: ScsiTools, sysfs: SysfsAccessor, device_dir: str = "/dev",
                 logger: Optional[logging.Logger] = None):
        """Initialize the enumerator

        Args:
            tools: External tool adapters
            sysfs: Accessor for the enclosure tree
            device_dir: Directory holding the generic device nodes
            logger: Logger instance
        """
        self.tools = tools
        self.sysfs = sysfs
        self.device_dir = device_dir
        self.logger = logger or logging.getLogger(__name__)
        self.attributes = AttributeCollector(tools, sysfs, logger=self.logger)

    def enumerate(self, enclosures: List[Enclosure]) -> List[Disk]:
        """Get every disk of the given enclosures

        The caller is expected to have verified the sysfs tree for this scan.

        Raises:
            CorrelationError: If a generic device is missing from sg_map
        """
        self.logger.info("Matching enclosure slots with system devices")
        correlator = DeviceCorrelator.from_tools(self.tools, logger=self.logger)

        disks = []
        for enclosure in enclosures:
            try:
                entries = self.sysfs.list_entries(enclosure.slot)
            except OSError as e:
                self.logger.warning(f"Skipping enclosure {enclosure.slot}: {e}")
                continue

            for entry in entries:
                disk = self._walk_slot(enclosure, entry, correlator)
                if disk:
                    self.logger.debug(f"Found disk: {disk}")
                    disks.append(disk)

        self.logger.debug(f"Found {len(disks)} disks in {len(enclosures)} enclosures")
        return disks

    def _walk_slot(self, enclosure: Enclosure, entry: str, correlator: DeviceCorrelator) -> Optional[Disk]:
        """Build the Disk sitting in one slot directory, None for empty slots"""
        if not is_slot_entry(entry):
            return None

        generic_devices = self.sysfs.generic_devices(enclosure.slot, entry)
        if not generic_devices:
            return None

        if len(generic_devices) > 1:
            names = ", ".join(os.path.basename(path) for path in generic_devices)
            self.logger.warning(
                f"Skipping slot {entry} of enclosure {enclosure.slot}: "
                f"ambiguous scsi_generic entries ({names})"
            )
            return None

        try:
            slot_path = self.sysfs.parse_slot_path(generic_devices[0])
        except SysfsPathError as e:
            self.logger.warning(f"Skipping slot {entry} of enclosure {enclosure.slot}: {e}")
            return None

        device_path = os.path.join(self.device_dir, slot_path.node)
        device_map = correlator.correlate(device_path)

        sysfs_device = self.sysfs.path(slot_path.enclosure, slot_path.slot_dir, "device")
        attributes = self.attributes.collect(device_path, sysfs_device)

        return Disk(
            enclosure=slot_path.enclosure,
            slot=slot_path.slot,
            device_path=device_path,
            device_map=device_map,
            led_locate_path=self._led_path(slot_path.enclosure, slot_path.slot_dir, LED_LOCATE),
            led_fault_path=self._led_path(slot_path.enclosure, slot_path.slot_dir, LED_FAULT),
            **attributes
        )

    def _led_path(self, enclosure_slot: str, slot_dir: str, kind: str) -> str:
        """Get the indicator control file of a slot, NO_LED when not exposed"""
        path = self.sysfs.path(enclosure_slot, slot_dir, kind)
        if self.sysfs.exists(path):
            return path
        return NO_LED
