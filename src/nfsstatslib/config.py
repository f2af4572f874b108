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

import os
import sys

NFSSTATS_VERSION='1.0'

NFSSTATSLIB_DIR=os.path.split(__file__)[0]

#
# Locations
#
MOUNTSTATS_PATH='/proc/self/mountstats'
PROC_MOUNTSTATS_FMT='/proc/%s/mountstats'

def mountstats_path(pid=None):
    """ return the mountstats path of process 'pid' (default: self) """
    if pid is None:
        return MOUNTSTATS_PATH
    return PROC_MOUNTSTATS_FMT % (pid,)

#
# Parser
#
class ParseError(Exception):
    pass

class StreamError(ParseError):
    """
        The mountstats stream could not be read any further.

        'mounts' holds every record assembled before the failure.
    """
    def __init__(self, msg, mounts=None):
        ParseError.__init__(self, msg)
        if mounts is None:
            mounts = []
        self.mounts = mounts

# only this format version of the nfs header line is understood
SUPPORTED_STATVERS='statvers=1.1'
NFS_FSTYPES = {
    'nfs':  3,
    'nfs4': 4,
}

# token counts of the fixed-width lines, including the leading key
BYTES_NTOKENS = 9
EVENTS_NTOKENS = 28
XPRT_TCP_NTOKENS = 15
OP_NTOKENS = 9

U64_MAX = (1 << 64) - 1

#
# Report
#
TEMPLATE_DIR=os.path.join(NFSSTATSLIB_DIR, 'templates')
TEMPLATE_REPORT=os.path.join(TEMPLATE_DIR, 'report.txt')

_TEMPLATE_CACHE={}
def text_template(filename):
    global _TEMPLATE_CACHE
    if filename not in _TEMPLATE_CACHE:
        _TEMPLATE_CACHE[filename] = Template(filename=filename)
    return _TEMPLATE_CACHE[filename]

JSON_INDENT_DEFAULT=2

#
# Formatting
#
def pluralize(x, pluralstr='s'):
    if x != 1:
        return pluralstr
    return ''

#
# Unit Scaling
#
SCALE = {
 'T': 1024 * 1024 * 1024 * 1024,
 'G': 1024 * 1024 * 1024,
 'M': 1024 * 1024,
 'K': 1024,
}

def fmt_scale_units(val, units):
    def near(_val, _scale):
        return _val >= (_scale * 0.9)

    scale = 1.0

    if units == 'B':
        if near(val, SCALE['T']):
            scale = SCALE['T']
            units = 'TB'

        elif near(val, SCALE['G']):
            scale = SCALE['G']
            units = 'GB'

        elif near(val, SCALE['M']):
            scale = SCALE['M']
            units = 'MB'

        elif near(val, SCALE['K']):
            scale = SCALE['K']
            units = 'KB'

    return scale, units

def fmt_bytes(val):
    scale, units = fmt_scale_units(val, 'B')
    if units == 'B':
        return '%u B' % (val,)
    return '%.2f %s' % (float(val) / scale, units)

#
# Console formatting
#
_VERBOSE = False

def set_verbose(verbose):
    global _VERBOSE
    _VERBOSE = bool(verbose)

def inform(msg):
    pre, post = '> ', ''
    for x in msg.split('\n'):
        if x.strip():
            sys.stdout.write("%s%s%s\n" % (pre, x, post))
    sys.stdout.flush()

def warn(msg):
    pre, post = 'WARNING: ', ''
    for x in msg.split('\n'):
        if x.strip():
            sys.stderr.write("%s%s%s\n" % (pre, x, post))
    sys.stderr.flush()

def debug(msg):
    if not _VERBOSE:
        return
    pre, post = 'DEBUG: ', ''
    for x in msg.split('\n'):
        if x.strip():
            sys.stderr.write("%s%s%s\n" % (pre, x, post))
    sys.stderr.flush()

def import_error(m):
     warn(m)
     sys.exit(1)


#
# Import third-party modules
#

try:
    import numpy as np
except ImportError:
    import_error("Error importing numpy - Make sure numpy is installed")

try:
    from mako.template import Template
except ImportError:
    import_error("Error importing mako - Make sure mako is installed")
