"""Data models for JBOD topology"""

from dataclasses import dataclass
from typing import Optional


NOT_AVAILABLE = "N/A"    # Field could not be read from a tool or sysfs
UNMAPPED = "NONE"        # Generic device without a block device
NO_LED = "NONE"          # Slot does not expose the indicator control file

LED_LOCATE = "locate"
LED_FAULT = "fault"
LED_KINDS = (LED_LOCATE, LED_FAULT)


@dataclass(frozen=True)
class Enclosure:
    """Represents a physical enclosure reported by the listing tool"""

    slot: str                        # SCSI address (e.g., 15:0:1:0)
    device_path: str                 # Generic device node (e.g., /dev/sg9)
    vendor: str = NOT_AVAILABLE      # Vendor identification
    model: str = NOT_AVAILABLE       # Product identification
    revision: str = NOT_AVAILABLE    # Product revision level
    serial: str = NOT_AVAILABLE      # Unit serial number

    def to_dict(self) -> dict:
        """Convert enclosure to dictionary representation"""
        return {
            "slot": self.slot,
            "device_path": self.device_path,
            "vendor": self.vendor,
            "model": self.model,
            "revision": self.revision,
            "serial": self.serial
        }


@dataclass(frozen=True)
class Disk:
    """Represents a disk sitting in an enclosure slot"""

    enclosure: str                   # Owning enclosure SCSI address (e.g., 15:0:1:0)
    slot: str                        # Bay label within the enclosure (e.g., Slot00)
    device_path: str                 # Generic device node (e.g., /dev/sg105)
    device_map: str = UNMAPPED       # Block device node (e.g., /dev/sdcz)
    temperature: str = ""            # Digits only, empty when unreadable
    vendor: str = NOT_AVAILABLE
    model: str = NOT_AVAILABLE
    serial: str = NOT_AVAILABLE
    fw_revision: str = NOT_AVAILABLE
    led_locate_path: str = NO_LED
    led_fault_path: str = NO_LED

    @property
    def key(self) -> tuple:
        """Composite key (enclosure, slot)"""
        return (self.enclosure, self.slot)

    @property
    def temperature_celsius(self) -> Optional[int]:
        """Temperature as an integer, or None when the reading is unusable"""
        if self.temperature.isdigit():
            return int(self.temperature)
        return None

    @property
    def is_mapped(self) -> bool:
        """Whether the generic device has a block device"""
        return self.device_map != UNMAPPED

    def led_path(self, kind: str) -> str:
        """Get the indicator control path for the given LED kind"""
        if kind == LED_LOCATE:
            return self.led_locate_path
        if kind == LED_FAULT:
            return self.led_fault_path
        raise ValueError(f"Unknown LED kind: {kind}")

    def matches(self, identifier: str) -> bool:
        """Check whether identifier names this disk in either naming domain"""
        if identifier == self.device_path:
            return True
        return self.is_mapped and identifier == self.device_map

    def to_dict(self) -> dict:
        """Convert disk to dictionary representation"""
        return {
            "enclosure": self.enclosure,
            "slot": self.slot,
            "device_path": self.device_path,
            "device_map": self.device_map,
            "temperature": self.temperature,
            "vendor": self.vendor,
            "model": self.model,
            "serial": self.serial,
            "fw_revision": self.fw_revision,
            "led_locate_path": self.led_locate_path,
            "led_fault_path": self.led_fault_path
        }


@dataclass(frozen=True)
class EnclosureFan:
    """Represents a cooling component of an enclosure"""

    slot: str                        # Owning enclosure SCSI address
    serial: str                      # Owning enclosure serial number
    description: str                 # Component name reported by the enclosure
    index: str                       # Component index used by sg_ses --index
    speed: int                       # RPM
    comment: str = ""                # Free-text vendor annotation

    @property
    def key(self) -> tuple:
        """Uniqueness key (index, serial)"""
        return (self.index, self.serial)

    def to_dict(self) -> dict:
        """Convert fan to dictionary representation"""
        return {
            "slot": self.slot,
            "serial": self.serial,
            "description": self.description,
            "index": self.index,
            "speed": self.speed,
            "comment": self.comment
        }


@dataclass(frozen=True)
class LedResult:
    """Outcome of an indicator operation"""

    identifier: str                  # Device name as supplied by the caller
    kind: str                        # locate or fault
    value: str                       # "0" or "1" written to the control file
    disk: Optional[Disk] = None      # Matched disk, None when nothing matched

    @property
    def found(self) -> bool:
        """Whether a disk matched the identifier"""
        return self.disk is not None
