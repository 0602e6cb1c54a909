"""Adapters for the lsscsi and sg3_utils command line tools"""

import logging
from typing import Dict, Iterator, Optional

from .config import DEFAULT_TOOLS
from .errors import MissingToolsError
from .runner import ProcessRunner


# Package that provides each tool, used when reporting missing prerequisites
TOOL_PACKAGES = {
    "lsscsi": "lsscsi",
    "sg_inq": "sg3-utils",
    "scsi_temperature": "sg3-utils: scsi_temperature",
    "sg_map": "sg3-utils",
    "sg_ses": "sg3-utils",
    "sginfo": "sg3-utils",
}

COOLING_MARKER = "Cooling"


class ScsiTools:
    """Thin wrappers returning the raw output of each diagnostic tool"""

    def __init__(self, tools: Optional[Dict[str, str]] = None, runner: Optional[ProcessRunner] = None,
                 logger: Optional[logging.Logger] = None):
        """Initialize the adapters

        Args:
            tools: Tool name to executable path, defaults to /usr/bin
            runner: Process runner used for every invocation
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.tools = dict(DEFAULT_TOOLS)
        self.tools.update(tools or {})
        self.runner = runner or ProcessRunner(logger=self.logger)

    def verify_tools(self) -> None:
        """Check that every tool is installed

        Raises:
            MissingToolsError: Listing every missing tool at once
        """
        missing = []
        for name, path in self.tools.items():
            if not self.runner.exists(path):
                self.logger.debug(f"{name} not found at {path}")
                missing.append((path, TOOL_PACKAGES.get(name, name)))

        if missing:
            raise MissingToolsError(missing)

    def list_devices(self) -> str:
        """lsscsi -g: one line per SCSI device with its generic node"""
        return self.runner.run([self.tools["lsscsi"], "-g"])

    def inquiry(self, device_path: str) -> str:
        """sg_inq: standard INQUIRY labels for one device"""
        return self.runner.run([self.tools["sg_inq"], device_path])

    def temperature(self, device_path: str) -> str:
        """scsi_temperature: the third line carries the reading"""
        return self.runner.run([self.tools["scsi_temperature"], device_path])

    def device_info(self, device_path: str) -> str:
        """sginfo: includes the 'Revision level' line"""
        return self.runner.run([self.tools["sginfo"], device_path])

    def generic_map(self) -> str:
        """sg_map: every generic node with its block node, system wide"""
        return self.runner.run([self.tools["sg_map"]])

    def cooling_components(self, device_path: str) -> Iterator[str]:
        """sg_ses -j -ff streamed, keeping only lines naming a cooling element"""
        cmd = [self.tools["sg_ses"], "-j", "-ff", device_path]
        for line in self.runner.stream(cmd):
            if COOLING_MARKER in line:
                yield line

    def component_status(self, device_path: str, index: str) -> str:
        """sg_ses --index: status page of a single enclosure element"""
        return self.runner.run([self.tools["sg_ses"], f"--index={index}", device_path])
