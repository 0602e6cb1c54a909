"""Enclosure fan enumeration via sg_ses"""

import logging
import re
from typing import List, Optional, Set, Tuple

from .errors import FanSpeedError
from .models import Enclosure, EnclosureFan
from .tools import ScsiTools


SPEED_MARKER = "speed"


def parse_component(line: str) -> Optional[Tuple[str, str]]:
    """Split a 'description [index]' line, None when either part is empty"""
    if "[" not in line:
        return None

    description, rest = line.split("[", 1)
    description = description.strip()
    index = rest.split("]", 1)[0].strip()

    if not description or not index:
        return None
    return description, index


def parse_speed(output: str) -> Optional[Tuple[int, str]]:
    """Find the RPM and vendor comment in sg_ses --index output

    The status line is comma separated, e.g.
        Off=0, Actual speed=7640 rpm, Fan at third lowest speed
    where the second field holds the digits and the third the comment.
    """
    for line in output.splitlines():
        if SPEED_MARKER not in line:
            continue

        fields = line.split(",")
        if len(fields) < 3:
            continue

        match = re.search(r"\d+", fields[1])
        if match:
            return int(match.group(0)), fields[2].strip()

    return None


class FanEnumerator:
    """Collects the cooling components of every enclosure

    The same physical enclosure can show up more than once (one SES device
    per path) and firmware may reuse slot addresses, so components are keyed
    on (index, enclosure serial). The first occurrence of a key wins.
    """

    def __init__(self, tools: ScsiTools, logger: Optional[logging.Logger] = None):
        self.tools = tools
        self.logger = logger or logging.getLogger(__name__)

    def enumerate(self, enclosures: List[Enclosure]) -> List[EnclosureFan]:
        """Get the fans of all enclosures with their RPM readings"""
        self.logger.info("Getting enclosure fan information")
        fans = []
        seen: Set[Tuple[str, str]] = set()

        for enclosure in enclosures:
            for line in self.tools.cooling_components(enclosure.device_path):
                component = parse_component(line)
                if component is None:
                    self.logger.debug(f"Ignoring cooling line without index: {line.strip()}")
                    continue

                description, index = component
                key = (index, enclosure.serial)
                if key in seen:
                    self.logger.debug(f"Skipping duplicate fan {index} of enclosure {enclosure.serial}")
                    continue
                seen.add(key)

                try:
                    speed, comment = self._fan_speed(enclosure.device_path, index)
                except FanSpeedError as e:
                    self.logger.warning(f"Skipping fan {description}: {e}")
                    continue

                fans.append(EnclosureFan(
                    slot=enclosure.slot,
                    serial=enclosure.serial,
                    description=description,
                    index=index,
                    speed=speed,
                    comment=comment
                ))

        self.logger.debug(f"Found {len(fans)} fans")
        return fans

    def _fan_speed(self, device_path: str, index: str) -> Tuple[int, str]:
        """Query one component's RPM

        Raises:
            FanSpeedError: If no speed can be parsed, zero is never assumed
        """
        parsed = parse_speed(self.tools.component_status(device_path, index))
        if parsed is None:
            raise FanSpeedError(device_path, index)
        return parsed
