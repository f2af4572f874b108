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

from collections import namedtuple

from nfsstatslib.config import *
from nfsstatslib.parse import *

# column indexes into op_table() rows
OP_COL = dict([ (name, i) for i, name in enumerate(OPERATION_FIELDS) ])

OpSummary = namedtuple('OpSummary', (
    'name',
    'requests',
    'percent',          # of all requests on the mount
    'retrans',
    'timeouts',
    'avg_bytes_sent',
    'avg_bytes_received',
    'avg_queue_ms',     # backlog wait
    'avg_rtt_ms',
    'avg_exec_ms',
))

def op_table(statistics):
    """
        return (names, table) where table is a uint64 array with a row
        per operation, columns in OPERATION_FIELDS order
    """
    names = sorted(statistics.operations.keys())
    rows = [ tuple(statistics.operations[name]) for name in names ]
    table = np.array(rows, dtype=np.uint64).reshape((len(names),
                                                     len(OPERATION_FIELDS)))

    return names, table

def op_summary(statistics, sort=True):
    """
        Per-op averages the way mountstats(8) prints them.

        Operations that were never requested are left out. When 'sort'
        is set, the busiest operations come first.
    """
    names, table = op_table(statistics)

    if not names:
        return []

    # float64 so divisions and subtractions can't wrap
    t = table.astype(np.float64)
    requests = t[:, OP_COL['requests']]

    total = requests.sum()
    used = requests > 0
    if not used.any():
        return []

    # only divide rows with requests
    div = np.where(used, requests, 1.0)

    percent = (requests * 100.0) / (total if total else 1.0)
    retrans = np.maximum(t[:, OP_COL['transmissions']] - requests, 0.0)
    avg_sent = t[:, OP_COL['bytes_sent']] / div
    avg_recv = t[:, OP_COL['bytes_received']] / div
    avg_queue = t[:, OP_COL['total_queue_time']] / div
    avg_rtt = t[:, OP_COL['total_response_time']] / div
    avg_exec = t[:, OP_COL['total_execution_time']] / div

    result = []
    for i in np.flatnonzero(used):
        result.append(OpSummary(
            name=names[i],
            requests=int(table[i, OP_COL['requests']]),
            percent=float(percent[i]),
            retrans=int(retrans[i]),
            timeouts=int(table[i, OP_COL['timeouts']]),
            avg_bytes_sent=float(avg_sent[i]),
            avg_bytes_received=float(avg_recv[i]),
            avg_queue_ms=float(avg_queue[i]),
            avg_rtt_ms=float(avg_rtt[i]),
            avg_exec_ms=float(avg_exec[i]),
        ))

    if sort:
        result.sort(key=lambda x: (-x.requests, x.name))

    return result

def _counter_diff(new, old):
    """ new - old per field, clamped at zero for counter resets """
    a = np.array(new, dtype=np.uint64)
    b = np.array(old, dtype=np.uint64)
    d = np.where(a >= b, a - b, np.uint64(0))
    return type(new)._make([ int(x) for x in d ])

def diff_statistics(new, old):
    """ return the Statistics accumulated between snapshots 'old' and 'new' """
    result = Statistics()

    result.age = max(new.age - old.age, 0)
    result.bytes = _counter_diff(new.bytes, old.bytes)
    result.events = _counter_diff(new.events, old.events)
    result.transport = _counter_diff(new.transport, old.transport)

    for name, ops in new.operations.items():
        old_ops = old.operations.get(name)
        if old_ops is None:
            result.operations[name] = ops
        else:
            result.operations[name] = _counter_diff(ops, old_ops)

    return result

def diff_mounts(old, new):
    """
        Interval statistics between two mountstats snapshots.

        Mounts are matched on (device, mountpoint). Mounts that only show
        up in 'new' are returned as-is, mounts gone from 'new' are
        dropped.
    """
    old_map = dict([ (m.key(), m) for m in old ])

    result = []
    for m in new:
        prev = old_map.get(m.key())
        if prev is None:
            debug('%s on %s: no previous sample' % (m.device, m.mountpoint))
            result.append(m)
            continue

        if prev.version != m.version:
            warn('%s on %s: nfs version changed between samples (v%u -> v%u)'
                 % (m.device, m.mountpoint, prev.version, m.version))

        result.append(MountRecord(m.device, m.mountpoint, m.version,
                                  diff_statistics(m.statistics,
                                                  prev.statistics)))

    return result
