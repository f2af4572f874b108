import io
import os
import sys

import pytest

# the nfsstats.py script lives beside the package in src/
SRC_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


EVENTS_V3 = ' '.join([ str(x) for x in range(1, 28) ])

MOUNTSTATS = """\
device rootfs mounted on / with fstype rootfs
device proc mounted on /proc with fstype proc
device sysfs mounted on /sys with fstype sysfs
device filer:/vol/home mounted on /home with fstype nfs statvers=1.1
\topts:\trw,vers=3,rsize=65536,wsize=65536,namlen=255,acregmin=3,hard,proto=tcp
\tage:\t86400
\tcaps:\tcaps=0x3fef,wtmult=4096,dtsize=4096,bsize=0,namlen=255
\tsec:\tflavor=1,pseudoflavor=1
\tevents:\t%(events)s
\tbytes:\t1048576 2048 0 0 1048576 4096 256 1
\tRPC iostats version: 1.0  p/v: 100003/3 (nfs)
\txprt:\ttcp 875 1 2 0 30 1500 1500 0 3000 0 2 1800 20
\tper-op statistics
\t        NULL: 0 0 0 0 0 0 0 0
\t     GETATTR: 1000 1000 0 120000 112000 10 3000 3500
\t        READ: 256 258 1 30720 1081344 50 2560 2816
\t       WRITE: 1 1 0 4228 136 0 4 5

device nas:/export/data mounted on /data with fstype nfs4 statvers=1.1
\topts:\trw,vers=4.1,rsize=1048576,wsize=1048576,hard,proto=tcp
\tage:\t3600
\tbytes:\t0 0 0 0 0 0 0 0
\tRPC iostats version: 1.0  p/v: 100003/4 (nfs)
\txprt:\tudp 0 0 10 10 0 0 0
\tper-op statistics
\t        NULL: 0 0 0 0 0 0 0 0
\t      ACCESS: 40 40 0 6400 4800 2 80 100

device tmpfs mounted on /tmp with fstype tmpfs
""" % {'events': EVENTS_V3}

EXAMPLE_MOUNT = """\
device 192.168.1.1:/export mounted on /mnt with fstype nfs statvers=1.1
age: 12345
bytes: 1 2 3 4 5 6 7 8
events: 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0
xprt: tcp 800 1 1 0 0 10 10 0 0 0 1 0
READ: 10 10 0 100 200 1 2 3
"""


@pytest.fixture
def mountstats_text():
    return MOUNTSTATS


@pytest.fixture
def mountstats_file(tmp_path):
    path = tmp_path / 'mountstats'
    path.write_text(MOUNTSTATS)
    return str(path)


@pytest.fixture
def example_stream():
    return io.StringIO(EXAMPLE_MOUNT)
