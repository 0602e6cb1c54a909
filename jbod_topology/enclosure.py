"""Enclosure discovery via lsscsi and sg_inq"""

import logging
from typing import Dict, List, Optional, Tuple

from .models import Enclosure, NOT_AVAILABLE
from .tools import ScsiTools


# lsscsi truncates the peripheral type to seven characters
ENCLOSURE_CLASS = "enclosu"

# sg_inq label -> Enclosure field
INQUIRY_LABELS = {
    "Vendor identification": "vendor",
    "Product identification": "model",
    "Product revision level": "revision",
    "Unit serial number": "serial",
}


class EnclosureDiscovery:
    """Lists enclosure services devices and their identity"""

    def __init__(self, tools: ScsiTools, logger: Optional[logging.Logger] = None):
        self.tools = tools
        self.logger = logger or logging.getLogger(__name__)

    def discover(self) -> List[Enclosure]:
        """Get all enclosures in the order lsscsi reports them

        Returns:
            List[Enclosure]: Enclosures with identity fields, N/A where unknown
        """
        self.logger.info("Getting enclosure information")
        enclosures = []

        for slot, device_path in self.parse_listing(self.tools.list_devices()):
            details = self.parse_inquiry(self.tools.inquiry(device_path))
            enclosure = Enclosure(slot=slot, device_path=device_path, **details)
            self.logger.debug(f"Found enclosure: {enclosure}")
            enclosures.append(enclosure)

        self.logger.debug(f"Found {len(enclosures)} enclosures")
        return enclosures

    def parse_listing(self, output: str) -> List[Tuple[str, str]]:
        """Extract (slot, device path) pairs from lsscsi -g output

        A line looks like:
            [15:0:1:0]   enclosu HGST     H4060-J          2033  -          /dev/sg9
        """
        found = []

        for line in output.splitlines():
            if ENCLOSURE_CLASS not in line:
                continue

            parsed = self._parse_listing_line(line)
            if parsed:
                found.append(parsed)

        return found

    def _parse_listing_line(self, line: str) -> Optional[Tuple[str, str]]:
        tokens = line.split()
        if not tokens:
            return None

        device_path = next((token for token in tokens if "/dev/" in token), None)
        if device_path is None:
            self.logger.warning(f"Skipping enclosure without generic device: {line.strip()}")
            return None

        slot = tokens[0].strip("[]")
        return slot, device_path

    def parse_inquiry(self, output: str) -> Dict[str, str]:
        """Extract vendor, model, revision and serial from sg_inq output

        Missing labels are reported as N/A.
        """
        details = {field: NOT_AVAILABLE for field in INQUIRY_LABELS.values()}

        for line in output.splitlines():
            for label, field in INQUIRY_LABELS.items():
                if label in line:
                    value = line.split(label, 1)[1].lstrip(":").strip()
                    if value:
                        details[field] = value

        return details
