"""
JBOD Topology Tool

This module inventories disk-shelf enclosures: it maps enclosure slots to
generic and block device names, collects per-disk attributes, lists
enclosure fans and switches the per-slot locate and fault LEDs.
"""

from .models import Disk, Enclosure, EnclosureFan, LedResult
from .topology import JbodTopology

__version__ = "1.0.0"
__all__ = ["Disk", "Enclosure", "EnclosureFan", "LedResult", "JbodTopology"]
