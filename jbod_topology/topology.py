"""JbodTopology - entry point of the discovery engine"""

import logging
from typing import List, Optional

from .config import ConfigManager
from .disks import DiskEnumerator
from .enclosure import EnclosureDiscovery
from .fans import FanEnumerator
from .leds import LedController
from .models import Disk, Enclosure, EnclosureFan, LedResult
from .runner import ProcessRunner
from .sysfs import SysfsAccessor
from .tools import ScsiTools


class JbodTopology:
    """High-level interface for JBOD topology operations

    It orchestrates the work of specialized components:
    - Enclosure discovery (lsscsi, sg_inq)
    - Disk enumeration over /sys/class/enclosure with sg_map correlation
    - Fan enumeration (sg_ses)
    - Slot indicator control

    Nothing is cached: every call performs a full rediscovery.
    """

    def __init__(self, tools: ScsiTools, sysfs: SysfsAccessor, device_dir: str = "/dev",
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.tools = tools
        self.sysfs = sysfs

        self.enclosure_discovery = EnclosureDiscovery(tools, logger=self.logger)
        self.disk_enumerator = DiskEnumerator(tools, sysfs, device_dir=device_dir, logger=self.logger)
        self.fan_enumerator = FanEnumerator(tools, logger=self.logger)
        self.led_controller = LedController(self.disk_map, sysfs, logger=self.logger)

    @classmethod
    def from_config(cls, config: ConfigManager, logger: Optional[logging.Logger] = None) -> "JbodTopology":
        """Build the engine from a loaded configuration"""
        logger = logger or logging.getLogger(__name__)
        runner = ProcessRunner(timeout=config.command_timeout, logger=logger)
        tools = ScsiTools(config.tools, runner=runner, logger=logger)
        sysfs = SysfsAccessor(config.sysfs_root, logger=logger)
        return cls(tools, sysfs, device_dir=config.device_dir, logger=logger)

    def verify_prerequisites(self) -> None:
        """Raise MissingToolsError listing every tool that is not installed"""
        self.tools.verify_tools()

    def discover_enclosures(self) -> List[Enclosure]:
        """Get all enclosures

        Raises:
            UnsupportedEnvironmentError: If the sysfs enclosure tree is unusable
        """
        self.sysfs.verify()
        return self.enclosure_discovery.discover()

    def disk_map(self) -> List[Disk]:
        """Get every disk of every enclosure

        Raises:
            UnsupportedEnvironmentError: If the sysfs enclosure tree is unusable
            CorrelationError: If a generic device cannot be mapped
        """
        enclosures = self.discover_enclosures()
        return self.disk_enumerator.enumerate(enclosures)

    def enclosure_fans(self) -> List[EnclosureFan]:
        """Get the deduplicated fan list of every enclosure"""
        enclosures = self.discover_enclosures()
        return self.fan_enumerator.enumerate(enclosures)

    def set_indicator(self, identifier: str, kind: str, value: str) -> LedResult:
        """Turn a slot LED on or off, see LedController.set_indicator"""
        return self.led_controller.set_indicator(identifier, kind, value)
