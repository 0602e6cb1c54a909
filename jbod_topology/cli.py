"""Command line interface for the JBOD topology tool"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import ConfigManager
from .errors import (
    IndicatorUnsupportedError,
    JbodError,
    MissingToolsError,
    UnsupportedEnvironmentError,
)
from .metrics import JbodMetrics
from .models import Disk, Enclosure, LED_FAULT, LED_LOCATE
from .topology import JbodTopology


class JbodApp:
    """Console front-end: list enclosures, disks and fans, toggle slot LEDs"""

    def __init__(self, topology: Optional[JbodTopology] = None):
        """Initialize the application

        Args:
            topology: Engine to use, built from the configuration when omitted
        """
        self.logger = self._setup_logger()
        self.topology = topology
        self.config_manager: Optional[ConfigManager] = None
        self.args: Optional[argparse.Namespace] = None

    def _setup_logger(self) -> logging.Logger:
        """Set up the logger for the application"""
        logger = logging.getLogger("jbod-topology")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            ch = logging.StreamHandler()
            ch.setLevel(logging.INFO)

            formatter = logging.Formatter('[%(levelname)s] %(message)s')
            ch.setFormatter(formatter)

            logger.addHandler(ch)

        return logger

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser with the list, led and metrics subcommands"""
        parser = argparse.ArgumentParser(
            prog="jbod",
            description="A generic storage enclosure tool: enclosures, disk slots, fans and slot LEDs."
        )
        parser.add_argument("-c", "--config", default="./jbod.conf", metavar="FILE",
                            help="Configuration file (default: ./jbod.conf)")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
        parser.add_argument("-q", "--quiet", action="store_true", help="Suppress INFO messages")

        subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

        list_parser = subparsers.add_parser("list", help="List enclosures, disks or fans")
        list_parser.add_argument("-e", "--enclosure", action="store_true", help="List enclosures")
        list_parser.add_argument("-d", "--disks", action="store_true", help="List disks")
        list_parser.add_argument("-f", "--fan", action="store_true", help="List fans")
        list_parser.add_argument("-j", "--json", action="store_true", help="Output results in JSON format")

        led_parser = subparsers.add_parser("led", help="Turn a slot locate or fault LED on or off")
        led_parser.add_argument("-l", "--locate", metavar="DEVICE",
                                help="Device (/dev/sgN or /dev/sdX) whose locate LED to switch")
        led_parser.add_argument("-f", "--fault", metavar="DEVICE",
                                help="Device (/dev/sgN or /dev/sdX) whose fault LED to switch")
        switch = led_parser.add_mutually_exclusive_group(required=True)
        switch.add_argument("--on", action="store_true", help="Turn the LED on")
        switch.add_argument("--off", action="store_true", help="Turn the LED off")

        metrics_parser = subparsers.add_parser("metrics", help="Print Prometheus metrics")
        metrics_parser.add_argument("-o", "--output", metavar="FILE",
                                    help="Write the metrics to FILE (textfile collector) instead of stdout")

        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command line arguments"""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            parser.exit(0)

        if args.command == "led" and not (args.locate or args.fault):
            parser.error("led requires --locate DEVICE and/or --fault DEVICE")

        # Configure logger
        if args.verbose:
            self.logger.setLevel(logging.DEBUG)
            for handler in self.logger.handlers:
                handler.setLevel(logging.DEBUG)
        elif args.quiet:
            self.logger.setLevel(logging.WARNING)
            for handler in self.logger.handlers:
                handler.setLevel(logging.WARNING)

        return args

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point for the application

        Returns:
            int: Process exit status
        """
        self.args = self.parse_arguments(argv)

        self.config_manager = ConfigManager(self.args.config, logger=self.logger)
        if self.topology is None:
            self.topology = JbodTopology.from_config(self.config_manager, logger=self.logger)

        try:
            self.topology.verify_prerequisites()

            if self.args.command == "list":
                self._handle_list()
            elif self.args.command == "led":
                self._handle_led()
            elif self.args.command == "metrics":
                self._handle_metrics()

        except MissingToolsError as e:
            self.logger.error("Packages missing")
            for path, package in e.missing:
                self.logger.error(f":: Install package {package} ({path} not found)")
            return 1
        except UnsupportedEnvironmentError as e:
            self.logger.error(f"jbod-topology not supported in this machine ({e.root} is missing or empty)")
            self.logger.error("Use one of these alternatives: " + ", ".join(e.alternatives))
            return 1
        except JbodError as e:
            self.logger.error(f"Error: {e}")
            return 1

        return 0

    def _handle_list(self) -> None:
        """Handle the list subcommand"""
        if self.args.fan:
            self._display_fans()
        elif self.args.enclosure and not self.args.disks:
            self._display_enclosures()
        else:
            self._display_disks()

    def _display_enclosures(self) -> None:
        enclosures = self.topology.discover_enclosures()

        if self.args.json:
            print(json.dumps([enc.to_dict() for enc in enclosures], indent=2))
            return

        if not enclosures:
            print("No enclosures found")
            return

        self._print_table(self._enclosure_headers(), [self._enclosure_row(enc) for enc in enclosures])

    def _display_disks(self) -> None:
        """Display every enclosure followed by the disks in its slots"""
        enclosures = self.topology.discover_enclosures()
        disks = sorted(self.topology.disk_map(), key=lambda d: d.slot)

        if self.args.json:
            output = []
            for enc in enclosures:
                entry = enc.to_dict()
                entry["disks"] = [disk.to_dict() for disk in disks if disk.enclosure == enc.slot]
                output.append(entry)
            print(json.dumps(output, indent=2))
            return

        if not enclosures:
            print("No enclosures found")
            return

        for enc in enclosures:
            self._print_table(self._enclosure_headers(), [self._enclosure_row(enc)])
            print("     '")
            for disk in disks:
                if disk.enclosure == enc.slot:
                    print(self._disk_line(disk))

    def _display_fans(self) -> None:
        fans = self.topology.enclosure_fans()

        if self.args.json:
            print(json.dumps([fan.to_dict() for fan in fans], indent=2))
            return

        headers = ["SLOT", "IDENT", "DESCRIPTION", "STATUS", "RPM"]
        table_data = [[fan.slot, fan.index, fan.description, fan.comment, str(fan.speed)] for fan in fans]
        self._print_table(headers, table_data)

    def _enclosure_headers(self) -> List[str]:
        return ["SLOT", "DEVICE", "NAME", "VENDOR", "MODEL", "REVISION", "SERIAL"]

    def _enclosure_row(self, enc: Enclosure) -> List[str]:
        name = self.config_manager.get_enclosure_name(enc.serial) if self.config_manager else None
        return [enc.slot, enc.device_path, name or "-", enc.vendor, enc.model, enc.revision, enc.serial]

    def _disk_line(self, disk: Disk) -> str:
        """Format one disk as a branch of the enclosure tree"""
        temperature = disk.temperature_celsius
        temp = f"{temperature}c" if temperature is not None else "ERR"

        return (
            f"     `+- Disk: {disk.device_path:<10} Map: {disk.device_map:<10} Slot: {disk.slot:<10}"
            f" Vendor: {disk.vendor:<10} Model: {disk.model:<10} Serial: {disk.serial:<10}"
            f" Temp: {temp:<4} Fw: {disk.fw_revision}"
        )

    def _handle_led(self) -> None:
        """Handle the led subcommand"""
        value = "on" if self.args.on else "off"

        for kind, device in ((LED_LOCATE, self.args.locate), (LED_FAULT, self.args.fault)):
            if not device:
                continue

            try:
                result = self.topology.set_indicator(device, kind, value)
            except IndicatorUnsupportedError as e:
                self.logger.error(f"Error: {e}")
                continue

            if result.found:
                print(f"Disk slot: {result.disk.slot} {result.value}")
            else:
                print(f"No enclosure slot found for {device}")

    def _handle_metrics(self) -> None:
        """Handle the metrics subcommand"""
        metrics = JbodMetrics(logger=self.logger)
        metrics.refresh(self.topology)
        output = metrics.render()

        if self.args.output:
            with open(self.args.output, "wb") as f:
                f.write(output)
            self.logger.info(f"Wrote metrics to {self.args.output}")
        else:
            sys.stdout.write(output.decode("utf-8"))

    def _print_table(self, headers: List[str], data: List[List[str]]) -> None:
        """Print a formatted table"""
        # Calculate column widths
        widths = [len(h) for h in headers]
        for row in data:
            for i, val in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(val)))

        header_line = "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        print(header_line)

        for row in data:
            print("  ".join(str(val).ljust(widths[i]) for i, val in enumerate(row)))


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point"""
    try:
        app = JbodApp()
        sys.exit(app.run(argv))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(1)
