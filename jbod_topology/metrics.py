"""Prometheus metrics built from a topology scan"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from .topology import JbodTopology


class JbodMetrics:
    """Gauges for enclosures, slot temperatures and fan speeds

    The registry is owned by the instance, so several exporters (or tests)
    can live in one process without sharing state.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None, logger: Optional[logging.Logger] = None):
        self.registry = registry or CollectorRegistry()
        self.logger = logger or logging.getLogger(__name__)

        self.number_of_enclosures = Gauge(
            'number_of_enclosures', 'Number of enclosures',
            registry=self.registry)
        self.slot_temperature = Gauge(
            'jbod_slot_temperature', 'Enclosure number, slot position and temperature',
            ['slot', 'enclosure'], registry=self.registry)
        self.fan_rpm = Gauge(
            'jbod_fan_rpm', 'The RPM speed of FAN components, device, slot and enclosure serial',
            ['device', 'slot', 'enclosure'], registry=self.registry)

    def refresh(self, topology: JbodTopology) -> None:
        """Rediscover everything and update the gauges"""
        fans = sorted(topology.enclosure_fans(), key=lambda f: f.index)
        for fan in fans:
            self.fan_rpm.labels(device=fan.description, slot=fan.index, enclosure=fan.serial).set(fan.speed)

        self.number_of_enclosures.set(len(topology.discover_enclosures()))

        disks = sorted(topology.disk_map(), key=lambda d: d.slot)
        for disk in disks:
            temperature = disk.temperature_celsius
            if temperature is None:
                self.logger.warning(
                    f"Failed to read temperature {disk.temperature!r} of disk {disk.device_path}"
                )
                continue
            self.slot_temperature.labels(slot=disk.slot, enclosure=disk.enclosure).set(temperature)

    def render(self) -> bytes:
        """Text exposition of the registry"""
        return generate_latest(self.registry)
