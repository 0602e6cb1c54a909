"""Slot indicator (locate/fault LED) control"""

import logging
import os
from typing import Callable, List, Optional

from .errors import DeviceNotFoundError, IndicatorUnsupportedError, IndicatorWriteError
from .models import Disk, LedResult, LED_KINDS, NO_LED
from .sysfs import SysfsAccessor


LED_VALUES = {"on": "1", "off": "0"}


class LedController:
    """Resolves a device name to its slot and toggles the slot indicator"""

    def __init__(self, rebuild: Callable[[], List[Disk]], sysfs: SysfsAccessor,
                 logger: Optional[logging.Logger] = None):
        """Initialize the controller

        Args:
            rebuild: Returns a freshly discovered disk topology
            sysfs: Accessor used for the control file write
            logger: Logger instance
        """
        self.rebuild = rebuild
        self.sysfs = sysfs
        self.logger = logger or logging.getLogger(__name__)

    def set_indicator(self, identifier: str, kind: str, value: str) -> LedResult:
        """Turn the locate or fault LED of a disk on or off

        Args:
            identifier: Generic (/dev/sgN) or block (/dev/sdX) device path
            kind: "locate" or "fault"
            value: "on" or "off"

        Returns:
            LedResult: disk is None when no slot holds the device

        Raises:
            DeviceNotFoundError: If identifier does not exist at all
            IndicatorUnsupportedError: If the slot has no control file for kind
            IndicatorWriteError: If the control file rejects the write
        """
        if kind not in LED_KINDS:
            raise ValueError(f"Unknown LED kind: {kind}")
        if value not in LED_VALUES:
            raise ValueError(f"LED value must be 'on' or 'off', got {value!r}")

        if not os.path.exists(identifier):
            raise DeviceNotFoundError(identifier)

        written = LED_VALUES[value]
        disk = self.find_disk(identifier)
        if disk is None:
            self.logger.warning(f"No enclosure slot holds {identifier}")
            return LedResult(identifier=identifier, kind=kind, value=written)

        led_path = disk.led_path(kind)
        if led_path == NO_LED or not self.sysfs.exists(led_path):
            raise IndicatorUnsupportedError(identifier, kind)

        try:
            self.sysfs.write_text(led_path, written)
        except OSError as e:
            raise IndicatorWriteError(identifier, kind, led_path, e) from e
        self.logger.info(f"Set {kind} led of {identifier} (slot {disk.slot}) to {value}")
        return LedResult(identifier=identifier, kind=kind, value=written, disk=disk)

    def find_disk(self, identifier: str) -> Optional[Disk]:
        """Find the disk named by identifier in a fresh topology"""
        for disk in self.rebuild():
            if disk.matches(identifier):
                return disk
        return None
