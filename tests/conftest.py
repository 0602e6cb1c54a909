"""
Pytest configuration and shared fixtures.
"""
import os
import pytest
from pathlib import Path

from jbod_topology.config import DEFAULT_TOOLS
from jbod_topology.sysfs import SysfsAccessor
from jbod_topology.tools import ScsiTools
from jbod_topology.topology import JbodTopology


LSSCSI = DEFAULT_TOOLS["lsscsi"]
SG_INQ = DEFAULT_TOOLS["sg_inq"]
SCSI_TEMP = DEFAULT_TOOLS["scsi_temperature"]
SG_MAP = DEFAULT_TOOLS["sg_map"]
SG_SES = DEFAULT_TOOLS["sg_ses"]
SGINFO = DEFAULT_TOOLS["sginfo"]

ENCLOSURE_SLOT = "15:0:1:0"

LSSCSI_OUTPUT = """\
[0:0:0:0]    disk    ATA      Samsung SSD 860  4B6Q  /dev/sda   /dev/sg0
[15:0:1:0]   enclosu VENDOR-X H4060-J          2033  -          /dev/sg9
"""

SG_INQ_OUTPUT = """\
standard INQUIRY:
  PQual=0  Device_type=13  RMB=0  LU_CONG=0  version=0x06  [SPC-4]
  [AERC=0]  [TrmTsk=0]  NormACA=0  HiSUP=1  Resp_data_format=2
 Vendor identification: VENDOR-X
 Product identification: H4060-J
 Product revision level: 2033
 Unit serial number: SER123
"""

SCSI_TEMP_OUTPUT = """\
/dev/sg105: HGST      HUH721010AL4200   A21D
Temperature
Current temperature = 37 C
Reference temperature = 85 C
"""

SGINFO_OUTPUT = """\
INQUIRY response (cmd: 0x12)
----------------------------
Device Type                        0
Vendor:                    HGST
Product:                   HUH721010AL4200
Revision level:            A21D
"""

VPD_PG80 = b"\x00\x80\x00\x08" + b"7JH0ABCD"


class FakeRunner:
    """Process runner answering from canned outputs keyed by the command"""

    def __init__(self, outputs=None, missing=()):
        self.outputs = dict(outputs or {})
        self.missing = set(missing)
        self.calls = []

    def run(self, cmd, decode_method='utf-8'):
        self.calls.append(tuple(cmd))
        return self.outputs.get(tuple(cmd), "")

    def stream(self, cmd, decode_method='utf-8'):
        self.calls.append(tuple(cmd))
        for line in self.outputs.get(tuple(cmd), "").splitlines():
            yield line

    def exists(self, path):
        return path not in self.missing

    def called(self, tool):
        return [call for call in self.calls if call[0] == tool]


class SysfsTree:
    """Builds an enclosure class tree under a temporary directory"""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add_enclosure(self, enclosure):
        path = self.root / enclosure
        path.mkdir(parents=True, exist_ok=True)
        return path

    def add_slot(self, enclosure, slot_dir, nodes=(), vendor="HGST", model="HUH721010AL4200",
                 vpd=VPD_PG80, locate=True, fault=True):
        slot = self.add_enclosure(enclosure) / slot_dir
        slot.mkdir(parents=True, exist_ok=True)

        if nodes:
            device = slot / "device"
            for node in nodes:
                (device / "scsi_generic" / node).mkdir(parents=True, exist_ok=True)
            if vendor is not None:
                (device / "vendor").write_text(vendor + "\n")
            if model is not None:
                (device / "model").write_text(model + "\n")
            if vpd is not None:
                (device / "vpd_pg80").write_bytes(vpd)

        if locate:
            (slot / "locate").write_text("0")
        if fault:
            (slot / "fault").write_text("0")
        return slot


def scenario_outputs(device_dir="/dev"):
    """Canned tool outputs for one enclosure holding one disk in Slot00"""
    sg105 = os.path.join(device_dir, "sg105")
    return {
        (LSSCSI, "-g"): LSSCSI_OUTPUT,
        (SG_INQ, "/dev/sg9"): SG_INQ_OUTPUT,
        (SG_MAP,): f"/dev/sg0  /dev/sda\n/dev/sg9\n{sg105}  /dev/sdcz\n",
        (SCSI_TEMP, sg105): SCSI_TEMP_OUTPUT,
        (SGINFO, sg105): SGINFO_OUTPUT,
    }


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def sysfs_tree(tmp_path):
    return SysfsTree(tmp_path / "sys" / "class" / "enclosure")


@pytest.fixture
def make_topology(sysfs_tree):
    """Create a topology over the fake runner and the temporary sysfs tree"""
    def _make(runner, device_dir="/dev"):
        tools = ScsiTools(runner=runner)
        sysfs = SysfsAccessor(str(sysfs_tree.root))
        return JbodTopology(tools, sysfs, device_dir=device_dir)
    return _make


@pytest.fixture
def scenario(sysfs_tree, make_topology):
    """One enclosure 15:0:1:0 with /dev/sg105 (/dev/sdcz) in Slot00"""
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot00", nodes=["sg105"])
    sysfs_tree.add_slot(ENCLOSURE_SLOT, "Slot01")
    (sysfs_tree.root / ENCLOSURE_SLOT / "power").mkdir()
    (sysfs_tree.root / ENCLOSURE_SLOT / "components").write_text("24\n")

    runner = FakeRunner(scenario_outputs())
    return make_topology(runner), runner
