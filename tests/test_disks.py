"""
Tests for the sysfs walker and disk enumeration.
"""
import pytest

from jbod_topology.disks import is_slot_entry
from jbod_topology.errors import CorrelationError, UnsupportedEnvironmentError
from jbod_topology.models import NO_LED, UNMAPPED

from conftest import ENCLOSURE_SLOT, FakeRunner, SCSI_TEMP, SG_MAP, scenario_outputs


@pytest.mark.parametrize("name", [
    "Slot00", "SLOT_001", "slot00       ", "Disk #00", "Drive Slot #0_0000000000000000",
    "Array Device 05", "array device 5", "0", "23",
])
def test_slot_entries_accepted(name):
    assert is_slot_entry(name)


@pytest.mark.parametrize("name", ["power", "components", "id", "uevent", "Fan 1", "12a", ""])
def test_other_entries_rejected(name):
    assert not is_slot_entry(name)


def test_end_to_end_single_disk(scenario):
    """Enclosure 15:0:1:0 with sg105 in Slot00 yields exactly one disk."""
    topology, _ = scenario

    disks = topology.disk_map()

    assert len(disks) == 1
    disk = disks[0]
    assert disk.device_path == "/dev/sg105"
    assert disk.device_map == "/dev/sdcz"
    assert disk.temperature == "37"
    assert disk.enclosure == "15:0:1:0"
    assert disk.slot == "Slot00"
    assert disk.vendor == "HGST"
    assert disk.model == "HUH721010AL4200"
    assert disk.serial == "7JH0ABCD"
    assert disk.fw_revision == "A21D"


def test_led_paths_resolved_at_discovery(scenario, sysfs_tree):
    topology, _ = scenario

    disk = topology.disk_map()[0]

    assert disk.led_locate_path == str(sysfs_tree.root / ENCLOSURE_SLOT / "Slot00" / "locate")
    assert disk.led_fault_path == str(sysfs_tree.root / ENCLOSURE_SLOT / "Slot00" / "fault")


def test_missing_led_files_use_sentinel(sysfs_tree, make_topology):
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot00", nodes=["sg105"], locate=False, fault=False)
    topology = make_topology(FakeRunner(scenario_outputs()))

    disk = topology.disk_map()[0]

    assert disk.led_locate_path == NO_LED
    assert disk.led_fault_path == NO_LED


def test_slot_label_cut_at_comma(sysfs_tree, make_topology):
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot 01,5000CCA2530F1D3D", nodes=["sg105"])
    topology = make_topology(FakeRunner(scenario_outputs()))

    disk = topology.disk_map()[0]

    assert disk.slot == "Slot 01"
    assert disk.led_locate_path.endswith("Slot 01,5000CCA2530F1D3D/locate")


def test_sysfs_attributes_missing_degrade_to_sentinel(sysfs_tree, make_topology):
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot00", nodes=["sg105"], vendor=None, model=None, vpd=None)
    runner = FakeRunner(scenario_outputs())
    del runner.outputs[(SCSI_TEMP, "/dev/sg105")]
    topology = make_topology(runner)

    disk = topology.disk_map()[0]

    assert disk.vendor == "N/A"
    assert disk.model == "N/A"
    assert disk.serial == "N/A"
    assert disk.temperature == ""
    # firmware still collected
    assert disk.fw_revision == "A21D"


def test_unmapped_generic_device(sysfs_tree, make_topology):
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot00", nodes=["sg105"])
    runner = FakeRunner(scenario_outputs())
    runner.outputs[(SG_MAP,)] = "/dev/sg9\n/dev/sg105\n"
    topology = make_topology(runner)

    disk = topology.disk_map()[0]

    assert disk.device_map == UNMAPPED
    assert not disk.is_mapped


def test_correlation_fault_aborts_scan(sysfs_tree, make_topology):
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot00", nodes=["sg105"])
    runner = FakeRunner(scenario_outputs())
    runner.outputs[(SG_MAP,)] = "/dev/sg0  /dev/sda\n"
    topology = make_topology(runner)

    with pytest.raises(CorrelationError) as exc_info:
        topology.disk_map()

    assert exc_info.value.device_path == "/dev/sg105"


def test_sg_map_runs_once_per_scan(sysfs_tree, make_topology):
    for i, node in enumerate(["sg105", "sg106", "sg107"]):
        sysfs_tree.add_slot(ENCLOSURE_SLOT, f"Slot0{i}", nodes=[node])
    runner = FakeRunner(scenario_outputs())
    runner.outputs[(SG_MAP,)] = "/dev/sg105 /dev/sdcz\n/dev/sg106 /dev/sdda\n/dev/sg107 /dev/sddb\n"
    topology = make_topology(runner)

    disks = topology.disk_map()

    assert [d.device_map for d in disks] == ["/dev/sdcz", "/dev/sdda", "/dev/sddb"]
    assert len(runner.called(SG_MAP)) == 1


def test_ambiguous_slot_is_skipped(sysfs_tree, make_topology):
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot00", nodes=["sg105", "sg200"])
    runner = FakeRunner(scenario_outputs())
    runner.outputs[(SG_MAP,)] = "/dev/sg105 /dev/sdcz\n/dev/sg200 /dev/sdzz\n"
    topology = make_topology(runner)

    assert topology.disk_map() == []


def test_enclosure_without_sysfs_directory_is_skipped(sysfs_tree, make_topology):
    sysfs_tree.add_slot("16:0:1:0", "Slot00", nodes=["sg105"])
    topology = make_topology(FakeRunner(scenario_outputs()))

    assert topology.disk_map() == []


def test_empty_sysfs_root_stops_before_traversal(sysfs_tree, make_topology):
    runner = FakeRunner(scenario_outputs())
    topology = make_topology(runner)

    with pytest.raises(UnsupportedEnvironmentError):
        topology.disk_map()

    assert runner.calls == []
