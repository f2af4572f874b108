"""
Copyright 2012 NetApp, Inc. All Rights Reserved,
contribution by Weston Andros Adamson <dros@netapp.com>

This program is free software; you can redistribute it and/or modify it under
the terms of the GNU General Public License as published by the Free Software
Foundation; either version 2 of the License, or (at your option) any later
version.
This program is distributed in the hope that it will be useful, but WITHOUT
ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
FOR A PARTICULAR PURPOSE. See the GNU General Public License for more details.
"""

import json

from nfsstatslib.config import *
from nfsstatslib.opstats import op_summary

# byte counters shown in the report, with their description
REPORT_BYTES = (
    ('normal_read_bytes',  'applications read via read(2)'),
    ('normal_write_bytes', 'applications wrote via write(2)'),
    ('direct_read_bytes',  'applications read via O_DIRECT read(2)'),
    ('direct_write_bytes', 'applications wrote via O_DIRECT write(2)'),
    ('server_read_bytes',  'client read via NFS READ'),
    ('server_write_bytes', 'client wrote via NFS WRITE'),
)

def fmt_float(f, precision=4):
    if f != None:
        w_fmt = "%%.%uf" % precision
        w_fmt = w_fmt % f
        seen_dot = False
        while len(w_fmt):
            if not seen_dot and w_fmt[-1] == '0':
                w_fmt = w_fmt[:-1]
            elif w_fmt[-1] == '.':
                w_fmt = w_fmt[:-1]
                seen_dot = True
            else:
                break

        return w_fmt or '0'
    return f

def mounts_to_dict(mounts):
    return [ m.to_dict() for m in mounts ]

def dump_json(mounts, fp, indent=JSON_INDENT_DEFAULT):
    json.dump(mounts_to_dict(mounts), fp, indent=indent, sort_keys=True)
    fp.write('\n')

def filter_mounts(mounts, mountpoints):
    """ only keep mounts on 'mountpoints' (all mounts if empty) """
    if not mountpoints:
        return list(mounts)

    wanted = set([ x.rstrip('/') or '/' for x in mountpoints ])
    return [ m for m in mounts if m.mountpoint in wanted ]

class MountReport:
    """
        Text report section of one mount
    """
    def __init__(self, mount):
        self.mount = mount
        self.stats = mount.statistics
        self.ops = op_summary(self.stats)

    def title(self):
        return '%s mounted on %s (nfsv%u)' % (self.mount.device,
                                              self.mount.mountpoint,
                                              self.mount.version)

    def byte_lines(self):
        lines = []
        for key, descr in REPORT_BYTES:
            val = getattr(self.stats.bytes, key)
            lines.append((descr, fmt_bytes(val)))
        return lines

    def has_transport(self):
        return any(self.stats.transport)

    def avg_backlog(self):
        xprt = self.stats.transport
        if not xprt.rpc_sends:
            return 0.0
        return float(xprt.backlog_utilization) / xprt.rpc_sends

class Report:
    def __init__(self, mounts, title=None):
        self.mounts = [ MountReport(m) for m in mounts ]
        if title is None:
            title = 'NFS mount statistics'
        self.title = title

    def empty(self):
        return len(self.mounts) == 0

    def text(self):
        template = text_template(TEMPLATE_REPORT)
        return template.render(report=self, fmt_float=fmt_float,
                               pluralize=pluralize)

def render_report(mounts, title=None):
    return Report(mounts, title=title).text()
