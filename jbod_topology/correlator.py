"""Generic to block device correlation"""

import logging
from typing import Dict, Optional

from .errors import CorrelationError
from .models import UNMAPPED
from .tools import ScsiTools


class DeviceCorrelator:
    """Maps generic SCSI nodes (/dev/sgN) to block nodes (/dev/sdX)

    sg_map walks every SCSI device in the system, so the table is built once
    per scan and every lookup afterwards is a dictionary access.
    """

    def __init__(self, table: Dict[str, str], logger: Optional[logging.Logger] = None):
        self.table = table
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_tools(cls, tools: ScsiTools, logger: Optional[logging.Logger] = None) -> "DeviceCorrelator":
        """Build the correlator from a single sg_map invocation"""
        correlator = cls(cls.parse(tools.generic_map()), logger=logger)
        correlator.logger.debug(f"sg_map reported {len(correlator.table)} generic devices")
        return correlator

    @staticmethod
    def parse(output: str) -> Dict[str, str]:
        """Parse sg_map output

        Each line is "<generic> [<block>]"; a missing block node is recorded as
        unmapped.
        """
        table = {}
        for line in output.splitlines():
            tokens = line.split()
            if not tokens:
                continue
            table[tokens[0]] = tokens[1] if len(tokens) > 1 else UNMAPPED
        return table

    def correlate(self, device_path: str) -> str:
        """Get the block device for a generic device

        Raises:
            CorrelationError: If sg_map did not report the generic device
        """
        try:
            return self.table[device_path]
        except KeyError:
            raise CorrelationError(device_path) from None
