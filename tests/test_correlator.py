"""
Tests for generic to block device correlation.
"""
import pytest

from jbod_topology.correlator import DeviceCorrelator
from jbod_topology.errors import CorrelationError
from jbod_topology.models import UNMAPPED
from jbod_topology.tools import ScsiTools

from conftest import FakeRunner, SG_MAP


def test_correlate_mapped_and_unmapped():
    correlator = DeviceCorrelator(DeviceCorrelator.parse("/dev/sg10 /dev/sdz\n/dev/sg11\n"))

    assert correlator.correlate("/dev/sg10") == "/dev/sdz"
    assert correlator.correlate("/dev/sg11") == UNMAPPED


def test_parse_ignores_blank_lines_and_extra_spacing():
    table = DeviceCorrelator.parse("\n/dev/sg0     /dev/sda\n   \n/dev/sg1\t/dev/sdb\n")

    assert table == {"/dev/sg0": "/dev/sda", "/dev/sg1": "/dev/sdb"}


def test_unknown_generic_device_is_an_error():
    correlator = DeviceCorrelator({"/dev/sg10": "/dev/sdz"})

    with pytest.raises(CorrelationError):
        correlator.correlate("/dev/sg12")


def test_from_tools_runs_sg_map_once():
    runner = FakeRunner({(SG_MAP,): "/dev/sg10 /dev/sdz\n"})

    correlator = DeviceCorrelator.from_tools(ScsiTools(runner=runner))
    correlator.correlate("/dev/sg10")
    correlator.correlate("/dev/sg10")

    assert runner.calls == [(SG_MAP,)]
