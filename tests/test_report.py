import io
import json

from nfsstatslib.config import fmt_bytes
from nfsstatslib.parse import MountRecord, parse_mountstats
from nfsstatslib.report import (
    dump_json,
    filter_mounts,
    fmt_float,
    mounts_to_dict,
    render_report,
)


def parsed(text):
    return parse_mountstats(io.StringIO(text))


def test_fmt_bytes():
    assert fmt_bytes(0) == '0 B'
    assert fmt_bytes(512) == '512 B'
    assert fmt_bytes(1048576) == '1.00 MB'
    assert fmt_bytes(3 * 1024 * 1024 * 1024) == '3.00 GB'


def test_fmt_float():
    assert fmt_float(2.5) == '2.5'
    assert fmt_float(10.0, 2) == '10'
    assert fmt_float(0.0, 2) == '0'
    assert fmt_float(None) is None


def test_dump_json(mountstats_text):
    mounts = parsed(mountstats_text)
    out = io.StringIO()

    dump_json(mounts, out)

    data = json.loads(out.getvalue())
    assert data == mounts_to_dict(mounts)
    assert [ x['mountpoint'] for x in data ] == ['/home', '/data']
    assert data[0]['statistics']['operations']['GETATTR']['requests'] == 1000
    assert data[1]['version'] == 4


def test_dump_json_empty():
    out = io.StringIO()
    dump_json([], out, indent=0)
    assert json.loads(out.getvalue()) == []


def test_filter_mounts():
    mounts = [ MountRecord('a:/x', '/a', 3), MountRecord('b:/x', '/b', 4) ]

    assert filter_mounts(mounts, []) == mounts
    assert [ m.mountpoint for m in filter_mounts(mounts, ['/b/']) ] == ['/b']
    assert filter_mounts(mounts, ['/c']) == []


def test_render_report(mountstats_text):
    text = render_report(parsed(mountstats_text))

    assert 'filer:/vol/home mounted on /home (nfsv3)' in text
    assert 'nas:/export/data mounted on /data (nfsv4)' in text
    assert 'age: 86400 seconds' in text
    assert '1.00 MB' in text
    assert '1500 RPC requests sent, 1500 RPC replies received' in text
    assert 'GETATTR' in text
    # NULL was never called
    assert 'NULL' not in text


def test_render_report_no_transport(example_stream):
    text = render_report(parse_mountstats(example_stream))

    assert '192.168.1.1:/export mounted on /mnt (nfsv3)' in text
    assert 'RPC statistics' not in text
    assert 'READ' in text


def test_render_report_empty():
    text = render_report([], title='nothing here')
    assert text.startswith('nothing here')
    assert 'no NFS mounts' in text
