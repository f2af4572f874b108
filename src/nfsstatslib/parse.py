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

import re
from collections import namedtuple

from nfsstatslib.config import *

#
# Regular Expressions section
#  these are precompiled so they are only compiled once
#
def _re(regex):
    """ short-hand wrapper for regex compilation """
    return re.compile(regex)

RE = {
  'u64': _re(r'^[0-9]+$'),
}

##
# Counter Definitions
#  field order is the order of the values on the mountstats line
##

# linux/nfs_iostat.h: nfs_stat_bytecounters
BYTE_FIELDS = (
    'normal_read_bytes', 'normal_write_bytes',
    'direct_read_bytes', 'direct_write_bytes',
    'server_read_bytes', 'server_write_bytes',
    'read_pages', 'write_pages',
)

# linux/nfs_iostat.h: nfs_stat_eventcounters
EVENT_FIELDS = (
    'inode_revalidate', 'dentry_revalidate', 'data_invalidate',
    'attr_invalidate', 'vfs_open', 'vfs_lookup', 'vfs_access',
    'vfs_update_page', 'vfs_read_page', 'vfs_read_pages', 'vfs_write_page',
    'vfs_write_pages', 'vfs_getdents', 'vfs_setattr', 'vfs_flush',
    'vfs_fsync', 'vfs_lock', 'vfs_release', 'congestion_wait',
    'setattr_trunc', 'extend_write', 'silly_rename', 'short_read',
    'short_write', 'delay', 'pnfs_read', 'pnfs_write',
)

# net/sunrpc/xprtsock.c: xs_tcp_print_stats
TRANSPORT_FIELDS = (
    'source_port', 'bind_count', 'connect_count', 'connect_time',
    'idle_time', 'rpc_sends', 'rpc_receives', 'bad_xids',
    'request_utilization', 'backlog_utilization', 'max_slots_used',
    'sending_queue_utilization', 'pending_queue_utilization',
)

# net/sunrpc/stats.c: rpc_count_iostats_metrics
OPERATION_FIELDS = (
    'requests', 'transmissions', 'timeouts', 'bytes_sent', 'bytes_received',
    'total_queue_time', 'total_response_time', 'total_execution_time',
)

ByteCounters = namedtuple('ByteCounters', BYTE_FIELDS)
EventCounters = namedtuple('EventCounters', EVENT_FIELDS)
TransportCounters = namedtuple('TransportCounters', TRANSPORT_FIELDS)
OperationCounters = namedtuple('OperationCounters', OPERATION_FIELDS)

def zero_counters(cls):
    """ return an instance of counter record 'cls' with every field zero """
    return cls._make([0] * len(cls._fields))

def make_counters(cls, tokens):
    """ build counter record 'cls' from string 'tokens' by position """
    if len(tokens) != len(cls._fields):
        raise ParseError('%s expects %u values, got %u' %
                         (cls.__name__, len(cls._fields), len(tokens)))
    return cls._make([ parse_u64(x) for x in tokens ])

def parse_u64(token):
    """
        Convert a base-10 unsigned 64 bit token.

        Anything that isn't a plain run of ASCII digits, or doesn't fit
        in 64 bits, converts to 0.
    """
    if not RE['u64'].match(token):
        debug('not an unsigned integer: %r' % (token,))
        return 0

    val = int(token)
    if val > U64_MAX:
        debug('value out of 64 bit range: %r' % (token,))
        return 0

    return val


class Statistics:
    """
        Counters of one NFS mount
    """
    def __init__(self):
        self.age = 0
        self.bytes = zero_counters(ByteCounters)
        self.events = zero_counters(EventCounters)
        self.transport = zero_counters(TransportCounters)
        self.operations = {}

    def __eq__(self, other):
        if not isinstance(other, Statistics):
            return NotImplemented
        return (self.age == other.age and
                self.bytes == other.bytes and
                self.events == other.events and
                self.transport == other.transport and
                self.operations == other.operations)

    def __repr__(self):
        return '<Statistics age=%u ops=%u>' % (self.age,
                                               len(self.operations))

    def to_dict(self):
        return {
            'age': self.age,
            'bytes': dict(self.bytes._asdict()),
            'events': dict(self.events._asdict()),
            'transport': dict(self.transport._asdict()),
            'operations': dict([ (name, dict(ops._asdict()))
                                 for name, ops
                                 in sorted(self.operations.items()) ]),
        }


class MountRecord:
    """
        An NFS mount found in mountstats
    """
    def __init__(self, device, mountpoint, version, statistics=None):
        self.device = device
        self.mountpoint = mountpoint
        self.version = version
        if statistics is None:
            statistics = Statistics()
        self.statistics = statistics

    def key(self):
        """ identity of this mount across snapshots """
        return (self.device, self.mountpoint)

    def __eq__(self, other):
        if not isinstance(other, MountRecord):
            return NotImplemented
        return (self.device == other.device and
                self.mountpoint == other.mountpoint and
                self.version == other.version and
                self.statistics == other.statistics)

    def __repr__(self):
        return '<MountRecord %s on %s nfsv%u>' % (self.device,
                                                  self.mountpoint,
                                                  self.version)

    def to_dict(self):
        return {
            'device': self.device,
            'mountpoint': self.mountpoint,
            'version': self.version,
            'statistics': self.statistics.to_dict(),
        }


class LineReader:
    """
        Forward-only cursor over the lines of a stream with one line
        of push-back.

        next_fields() returns the whitespace separated tokens of the next
        line or None at end of stream. Read failures are raised as
        StreamError.
    """
    def __init__(self, stream):
        self._iter = iter(stream)
        self._pushed = None
        self.lineno = 0

    def next_fields(self):
        if self._pushed is not None:
            fields = self._pushed
            self._pushed = None
            return fields

        try:
            line = next(self._iter)
        except StopIteration:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StreamError('error reading line %u: %s' %
                              (self.lineno + 1, e))

        self.lineno += 1

        if isinstance(line, bytes):
            line = line.decode('utf-8', 'replace')

        return line.split()

    def push_back(self, fields):
        if self._pushed is not None:
            raise ParseError('only one line of push-back')
        self._pushed = fields


def is_mount_header(fields):
    """
        True if 'fields' is the header line of an NFS mount with
        statistics we understand, ie:

        device <dev> mounted on <dir> with fstype nfs[4] statvers=1.1
    """
    return (len(fields) == 9 and
            fields[0] == 'device' and
            fields[7] in NFS_FSTYPES and
            fields[8] == SUPPORTED_STATVERS)

def _is_op_line(fields):
    """ a per-op row: 'NAME:' followed by 8 counters """
    if len(fields) != OP_NTOKENS or not fields[0].endswith(':'):
        return False
    for x in fields[1:]:
        if not RE['u64'].match(x):
            return False
    return True

def _op_name(token):
    if token.endswith(':'):
        return token[:-1]
    return token

def _store_op(statistics, fields):
    name = _op_name(fields[0])
    statistics.operations[name] = make_counters(OperationCounters,
                                                fields[1:])

def parse_statistics(reader, statistics):
    """
        Parse the statistics block following a mount header.

        Stops at a blank line, the 'per-op' marker or the end of the
        stream; the line it stops at is consumed. A 'device' line is
        pushed back for the mount scan.
    """
    while True:
        fields = reader.next_fields()

        if not fields:
            # end of stream or blank line
            return

        key = fields[0]

        if key == 'per-op':
            return

        if key == 'device':
            reader.push_back(fields)
            return

        if key == 'age:':
            if len(fields) > 1:
                statistics.age = parse_u64(fields[1])
            else:
                statistics.age = 0

        elif key == 'bytes:':
            if len(fields) != BYTES_NTOKENS:
                debug('line %u: bytes: expected %u fields, got %u' %
                      (reader.lineno, BYTES_NTOKENS, len(fields)))
                continue
            statistics.bytes = make_counters(ByteCounters, fields[1:])

        elif key == 'events:':
            if len(fields) != EVENTS_NTOKENS:
                debug('line %u: events: expected %u fields, got %u' %
                      (reader.lineno, EVENTS_NTOKENS, len(fields)))
                continue
            statistics.events = make_counters(EventCounters, fields[1:])

        elif key == 'xprt:':
            if len(fields) < 2 or fields[1] != 'tcp':
                # udp (and anything else) isn't supported
                continue
            if len(fields) != XPRT_TCP_NTOKENS:
                debug('line %u: xprt: tcp expected %u fields, got %u' %
                      (reader.lineno, XPRT_TCP_NTOKENS, len(fields)))
                continue
            statistics.transport = make_counters(TransportCounters,
                                                 fields[2:])

        elif _is_op_line(fields):
            # per-op row without a preceding 'per-op' marker
            _store_op(statistics, fields)

def parse_operations(reader, statistics):
    """
        Parse the per-op table.

        Stops at a blank line or the end of the stream. A 'device' line
        is pushed back for the mount scan.
    """
    while True:
        fields = reader.next_fields()

        if not fields:
            return

        if fields[0] == 'device':
            reader.push_back(fields)
            return

        if len(fields) != OP_NTOKENS:
            debug('line %u: skipping malformed per-op line' %
                  (reader.lineno,))
            continue

        _store_op(statistics, fields)

def parse_mountstats(stream):
    """
        Parse a mountstats stream and return a list of MountRecord, one
        per NFS mount in the order they appear.

        Raises StreamError if the stream can't be read; the error carries
        the mounts parsed up to that point.
    """
    mounts = []
    reader = LineReader(stream)

    try:
        while True:
            fields = reader.next_fields()

            if fields is None:
                break

            if not fields:
                continue

            if fields[0] != 'device':
                continue

            if not is_mount_header(fields):
                debug('line %u: skipping mount %s' %
                      (reader.lineno, ' '.join(fields[1:])))
                continue

            mount = MountRecord(fields[1], fields[4], NFS_FSTYPES[fields[7]])

            parse_statistics(reader, mount.statistics)
            parse_operations(reader, mount.statistics)

            mounts.append(mount)

    except StreamError as e:
        e.mounts = mounts
        raise

    return mounts

def parse_file(path):
    """ parse the mountstats file at 'path' """
    try:
        f = open(path, 'rb')
    except OSError as e:
        raise StreamError("can't open %s: %s" % (path, e))

    with f:
        return parse_mountstats(f)
