"""Configuration management for JBOD topology"""

import os
import logging
from typing import Dict, List, Optional
import yaml

from .sysfs import SYSFS_ENCLOSURE_ROOT


DEFAULT_TOOLS = {
    "lsscsi": "/usr/bin/lsscsi",
    "sg_inq": "/usr/bin/sg_inq",
    "scsi_temperature": "/usr/bin/scsi_temperature",
    "sg_map": "/usr/bin/sg_map",
    "sg_ses": "/usr/bin/sg_ses",
    "sginfo": "/usr/bin/sginfo",
}


class ConfigManager:
    """Manages loading and accessing configuration from YAML file"""

    def __init__(self, config_file: str = "./jbod.conf", logger: Optional[logging.Logger] = None):
        """Initialize configuration manager

        Args:
            config_file: Path to configuration file
            logger: Logger instance
        """
        self.config_file = os.path.expanduser(config_file)
        self.logger = logger or logging.getLogger(__name__)

        self.tools: Dict[str, str] = dict(DEFAULT_TOOLS)
        self.sysfs_root: str = SYSFS_ENCLOSURE_ROOT
        self.device_dir: str = "/dev"
        self.command_timeout: Optional[float] = None
        self.enclosure_names: Dict[str, str] = {}

        self.load()

    def load(self) -> None:
        """Load configuration from YAML file

        Configuration file structure:
        ```yaml
        tools:
          sg_ses: /usr/local/bin/sg_ses   # Override any tool path
        sysfs_enclosure_root: /sys/class/enclosure
        device_dir: /dev
        command_timeout: 30               # Seconds, omit to wait forever

        enclosures:
          - serial: "USWSJ03918EZ0069"    # Unit serial number of the enclosure
            name: "Front JBOD"            # Human-readable name
        ```
        """
        if not os.path.exists(self.config_file):
            self.logger.warning(f"Configuration file {self.config_file} not found. Using default settings.")
            return

        try:
            self.logger.info(f"Loading user configuration from {self.config_file}")

            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f)

            if not config or not isinstance(config, dict):
                self.logger.warning(f"Configuration file {self.config_file} is empty or invalid")
                return

            if 'tools' in config:
                self._load_tools(config['tools'] or {})

            if config.get('sysfs_enclosure_root'):
                self.sysfs_root = str(config['sysfs_enclosure_root'])

            if config.get('device_dir'):
                self.device_dir = str(config['device_dir']).rstrip("/") or "/"

            if 'command_timeout' in config:
                self._load_timeout(config['command_timeout'])

            if isinstance(config.get('enclosures'), list):
                self._load_enclosure_names(config['enclosures'])

        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing YAML in configuration file: {e}")
        except IOError as e:
            self.logger.error(f"Error reading configuration file: {e}")

    def _load_tools(self, tools_data: Dict) -> None:
        """Override tool paths from data"""
        if not isinstance(tools_data, dict):
            self.logger.warning("Ignoring 'tools' section, expected a mapping")
            return

        for name, path in tools_data.items():
            if name not in DEFAULT_TOOLS:
                self.logger.warning(f"Ignoring unknown tool {name} in configuration")
                continue
            self.tools[name] = str(path)
            self.logger.debug(f"Using {path} for {name}")

    def _load_timeout(self, value) -> None:
        if value is None:
            self.command_timeout = None
            return

        try:
            timeout = float(value)
        except (TypeError, ValueError):
            self.logger.warning(f"Invalid command_timeout {value!r}, waiting forever")
            return

        if timeout <= 0:
            self.logger.warning(f"command_timeout must be positive, got {value}")
            return
        self.command_timeout = timeout

    def _load_enclosure_names(self, enclosures_data: List[Dict]) -> None:
        """Load enclosure display names from data

        Args:
            enclosures_data: List of {serial, name} dictionaries
        """
        self.logger.info(f"Found {len(enclosures_data)} enclosure configurations")

        for encl_config_data in enclosures_data:
            if not isinstance(encl_config_data, dict):
                self.logger.warning(f"Skipping malformed enclosure config: {encl_config_data!r}")
                continue

            serial = str(encl_config_data.get('serial', '')).strip()
            name = str(encl_config_data.get('name', '')).strip()
            if not serial or not name:
                self.logger.warning("Skipping enclosure config without serial or name")
                continue

            self.enclosure_names[serial] = name
            self.logger.debug(f"Loaded enclosure name for {serial}: {name}")

    def get_enclosure_name(self, serial: str) -> Optional[str]:
        """Get the configured display name for an enclosure serial"""
        return self.enclosure_names.get(serial.strip())
