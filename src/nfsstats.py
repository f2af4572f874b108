#!/usr/bin/env python3
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

import sys

from nfsstatslib import options

from nfsstatslib.config import *
from nfsstatslib.parse import parse_file
from nfsstatslib.opstats import diff_mounts
from nfsstatslib.report import dump_json, filter_mounts, render_report

def load_mounts(opts, path):
    """
        parse 'path', returning (mounts, ok)

        a read error is reported and the mounts parsed before it are
        still returned
    """
    try:
        mounts = parse_file(path)
        ok = True
    except StreamError as e:
        warn(str(e))
        mounts = e.mounts
        ok = False

    debug('%s: %u nfs mount%s' % (path, len(mounts), pluralize(len(mounts))))

    return filter_mounts(mounts, opts.mountpoints), ok

def mode_dump(opts):
    mounts, ok = load_mounts(opts, opts.filename)
    dump_json(mounts, sys.stdout, indent=opts.indent)
    return ok

def mode_report(opts):
    mounts, ok = load_mounts(opts, opts.filename)
    sys.stdout.write(render_report(mounts))
    return ok

def mode_list(opts):
    mounts, ok = load_mounts(opts, opts.filename)

    if not mounts:
        inform('No NFS mounts found in %s' % (opts.filename,))

    for m in mounts:
        sys.stdout.write('%s %s nfsv%u\n' % (m.device, m.mountpoint,
                                             m.version))
    return ok

def mode_diff(opts):
    old, old_ok = load_mounts(opts, opts.diff_old)
    new, new_ok = load_mounts(opts, opts.diff_new)

    title = 'NFS mount statistics between %s and %s' % (opts.diff_old,
                                                         opts.diff_new)
    sys.stdout.write(render_report(diff_mounts(old, new), title=title))
    return old_ok and new_ok

def mode_help(opts):
    opts.usage()

def mode_version(opts):
    sys.stdout.write('%s %s\n' % (options._progname, NFSSTATS_VERSION))
    return True

MODES = {
    'dump':   mode_dump,
    'report': mode_report,
    'list':   mode_list,
    'diff':   mode_diff,
    'help':   mode_help,
    'version': mode_version,
}

def main(argv=None):
    opts = options.Options()
    opts.parse(argv)

    if not MODES[opts.mode](opts):
        sys.exit(1)

if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled by user...\n")
