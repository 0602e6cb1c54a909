#!/usr/bin/env python3
"""
JBOD Topology Tool

Lists enclosures, maps every enclosure slot to its /dev/sgN and /dev/sdX
devices, shows enclosure fan speeds and switches slot locate/fault LEDs.
"""

from jbod_topology.cli import main


if __name__ == "__main__":
    main()
