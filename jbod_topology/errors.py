"""Exceptions raised by the topology engine"""

from typing import List, Tuple


SYSFS_ALTERNATIVES = ["lsscsi", "sas-lsi-tools", "sas2ircu-status", "sg3-utils"]


class JbodError(Exception):
    """Base class for all topology errors"""


class UnsupportedEnvironmentError(JbodError):
    """The sysfs enclosure tree is missing or empty"""

    def __init__(self, root: str):
        self.root = root
        self.alternatives = list(SYSFS_ALTERNATIVES)
        super().__init__(
            f"jbod-topology not supported in this machine: {root} is missing or empty. "
            f"Use one of these alternatives: {', '.join(self.alternatives)}"
        )


class MissingToolsError(JbodError):
    """One or more prerequisite binaries are not installed"""

    def __init__(self, missing: List[Tuple[str, str]]):
        # (path, package) pairs
        self.missing = missing
        details = ", ".join(f"{path} (install package {package})" for path, package in missing)
        super().__init__(f"Packages missing: {details}")


class CorrelationError(JbodError):
    """A generic device has no entry in the block device mapping"""

    def __init__(self, device_path: str):
        self.device_path = device_path
        super().__init__(f"Generic device {device_path} is not present in the sg_map output")


class SysfsPathError(JbodError):
    """A sysfs slot path does not have the expected structure"""


class FanSpeedError(JbodError):
    """The RPM reading of a fan component could not be parsed"""

    def __init__(self, device_path: str, index: str):
        self.device_path = device_path
        self.index = index
        super().__init__(f"No speed reading for component {index} on {device_path}")


class DeviceNotFoundError(JbodError):
    """The device given for an LED operation does not exist"""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"device {identifier} not found")


class IndicatorUnsupportedError(JbodError):
    """The enclosure slot does not expose the requested indicator"""

    def __init__(self, identifier: str, kind: str):
        self.identifier = identifier
        self.kind = kind
        super().__init__(f"{identifier} does not expose {kind} led")


class IndicatorWriteError(JbodError):
    """The indicator control file exists but could not be written"""

    def __init__(self, identifier: str, kind: str, path: str, reason: OSError):
        self.identifier = identifier
        self.kind = kind
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to set {kind} led of {identifier} through {path}: {reason}")
