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

import os, sys
import getopt
import re

from nfsstatslib.config import *

_progname = sys.argv[0]

if _progname.startswith('/'):
    _progname = os.path.split(_progname)[-1]

# options class for parsing command line
OTYPE_BOOL=1
OTYPE_ARG=2
OTYPE_LIST=3
OTYPE_HELP=4

# no arguments expected
OMODES_ARG_NONE=0
# modes that need <old> and <new> snapshot files
OMODES_ARG_TWO_FILES=1

OMODES = {
 'dump':   OMODES_ARG_NONE,
 'report': OMODES_ARG_NONE,
 'list':   OMODES_ARG_NONE,
 'diff':   OMODES_ARG_TWO_FILES,
 'help':   OMODES_ARG_NONE,
 'version': OMODES_ARG_NONE,
}
OMODE_DEFAULT='dump'

class Options:

    # opts
    mode = None
    filename = None
    pid = None
    indent = JSON_INDENT_DEFAULT
    verbose = False

    diff_old = None
    diff_new = None

    _synopsis_fmt = "%s [options] [mode] [<old> <new>]"
    _modes_description_fmt = """
Basic usage (no mode specified):

 %(script)s

  Parse /proc/self/mountstats and print the statistics of every
  NFS mount as JSON, same as the 'dump' mode.

Advanced usage (specify modes):

 %(script)s dump

    Print the statistics of all NFS mounts as JSON.

 %(script)s report

    Print a human readable report of all NFS mounts, including
    per-operation averages.

 %(script)s list

    List the NFS mounts found.

 %(script)s diff <old> <new>

    Print a report of the statistics accumulated between two saved
    copies of a mountstats file.

 %(script)s help

    Show this message.

 %(script)s version

    Show the version of %(script)s.
    """

    _options_def = [
        ('f',  'file',        OTYPE_ARG,  'filename',
         ("The mountstats file to parse.",
          "Defaults to %s." % MOUNTSTATS_PATH,),
         "path"),

        ('p',  'pid',         OTYPE_ARG,  'pid',
         ("Parse the mountstats file of process <pid>.",),
         "pid"),

        ('m',  'mountpoint',  OTYPE_LIST, 'mountpoints',
         ("Only show the NFS mount on this directory.",
          "This option may be used multiple times.",),
         "dir"),

        ('i',  'indent',      OTYPE_ARG,  'indent',
         ("Indentation of JSON output.",),
         "num spaces"),

        ('v',  'verbose',     OTYPE_BOOL, 'verbose',
         ("Log skipped and malformed lines to stderr.",),
         None),

        ('h', 'help', OTYPE_HELP, None,
         ("Show the help message",),
         None),
    ]

    def __init__(self):
        self.mountpoints = []

    def _getopt_short(self):
        ret = ''
        for oshort, olong, otype, oname, ohelp, odesc in self._options_def:
            if oshort:
                assert len(oshort) == 1, 'multi character short option!'
                if otype in (OTYPE_ARG, OTYPE_LIST):
                    ret += oshort + ':'
                else:
                    ret += oshort
        return ret

    def _getopt_long(self):
        ret = []
        for oshort, olong, otype, oname, ohelp, odesc in self._options_def:
            if olong:
                if otype in (OTYPE_ARG, OTYPE_LIST):
                    ret.append(olong + '=')
                else:
                    ret.append(olong)
        return ret

    def parse(self, argv=None):
        if argv is None:
            argv = sys.argv[1:]

        shortstr = self._getopt_short()
        longlist = self._getopt_long()

        try:
            opts, args = getopt.getopt(argv, shortstr, longlist)

        except getopt.GetoptError as err:
            self.usage(str(err))

        # parse options
        for o, a in opts:
            found = False
            for oshort, olong, otype, oname, ohelp, odesc in self._options_def:
                if (oshort and o == '-' + oshort) or \
                   (olong and o == '--' + olong):
                    if otype == OTYPE_BOOL:
                        setattr(self, oname, True)
                    elif otype == OTYPE_ARG:
                        setattr(self, oname, a)
                    elif otype == OTYPE_LIST:
                        getattr(self, oname).append(a)
                    elif otype == OTYPE_HELP:
                        self.usage()
                    else:
                        raise ValueError('Invalid OTYPE: %u' % (otype,))

                    found = True
                    break
            if not found:
                self.error('Invalid option: %s' % (o,))

        # parse and validate args

        # parse mode
        if len(args) >= 1 and args[0] in OMODES:
            self.mode = args[0]
            args = args[1:]
        else:
            self.mode = OMODE_DEFAULT

        mode_arg_type = OMODES[self.mode]

        if mode_arg_type == OMODES_ARG_TWO_FILES:
            # <old> <new>
            if len(args) != 2:
                self.error('mode %s expects <old> and <new> arguments' %
                           (self.mode,))

            self.diff_old, self.diff_new = args
            args = []

            if self.filename or self.pid:
                self.error('-f and -p are not allowed for mode %s' %
                           (self.mode,))

        elif mode_arg_type == OMODES_ARG_NONE:
            if len(args):
                self.error("unexpected arguments: %s" % (' '.join(args),))

        else:
            raise ValueError("unhandled mode_arg_type %r" % (mode_arg_type,))

        # normalize
        if self.filename and self.pid:
            self.error('-f and -p are mutually exclusive')

        if self.pid is not None:
            if not re.match(r'^(\d+|self)$', self.pid):
                self.error('invalid pid: %r' % (self.pid,))

        if not self.filename:
            self.filename = mountstats_path(self.pid)

        try:
            self.indent = int(self.indent)
        except ValueError:
            self.error('invalid indent: %r' % (self.indent,))

        if self.indent < 0:
            self.error('invalid indent: %r' % (self.indent,))

        set_verbose(self.verbose)

    def _option_help(self):
        lines = []
        for oshort, olong, otype, oname, ohelp, odesc in self._options_def:
            if not odesc:
                odesc = ''
            optstrs = []
            if oshort:
                ods = ''
                if odesc:
                    ods = ' <%s>' % odesc
                optstrs.append('-' + oshort + ods)
            if olong:
                ods = ''
                if odesc:
                    ods = '=<%s>' % odesc
                optstrs.append('--' + olong + ods)

            optstrs = ',  '.join(optstrs)

            if oname:
                val = getattr(self, oname, None)
            else:
                val = None
            if val:
                defaultstr = 'default: %r' % (val,)
            else:
                defaultstr = ''

            rfmt = '\n' + (' ' * 17)

            lines.append('%s' % (optstrs,))
            lines.append('%-15s%s' % ('', rfmt.join(ohelp)))
            if defaultstr:
                lines.append('%-15s%s' % ('', defaultstr))

            lines.append('')

        return lines

    def error(self, msg=''):
        sys.stderr.write('%s\n' % msg)
        sys.stderr.write('\nrun "%s --help" for more info\n' % (_progname,))
        sys.stderr.flush()
        sys.exit(1)

    def _modes_description(self, script):
        return self._modes_description_fmt % {'script': script}

    def _synopsis(self, script):
        return self._synopsis_fmt % script

    def usage(self, msg=''):
        sys.stderr.write("usage: %s\n" % self._synopsis(_progname))
        sys.stderr.write("%s\n" % self._modes_description(_progname))

        sys.stderr.write("\nOptions:\n")
        sys.stderr.write('  %s\n' % '\n  '.join(self._option_help()))

        if msg:
            sys.stderr.write("\nError: %s\n" % msg)

        sys.exit(1)
