"""
Sources of the raw text dumped by ovs-ofctl

A source returns the dump of a bridge as a list of lines, excluding the
reply header ovs-ofctl prints, such as:
NXST_FLOW reply (xid=0x4):
OFPST_PORT reply (xid=0x2): 3 ports

Each of the tunnel, external and integration bridges can be dumped.
"""

# Copyright 2026 The ovsdump Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import logging
import subprocess

from .records import DumpSourceError
from .utils import as_file_handle, COMPRESSED_SUFFIXES

log = logging.getLogger('ovsdump.dump_source')

ROLES = ("tun", "ex", "int")
KINDS = ("flows", "ports", "groups", "group_stats")

DEFAULT_BRIDGES = {
    "tun": "br-tun",
    "ex": "br-ex",
    "int": "br-int",
    }

OFCTL_COMMANDS = {
    "flows": "dump-flows",
    "ports": "dump-ports",
    "groups": "dump-groups",
    "group_stats": "dump-group-stats",
    }

LOCAL_HOSTS = (None, "", "localhost", "127.0.0.1", "::1")


def clean_dump_lines(lines, kind):
    """ Removes the lines of a dump which are not records

        Drops blank lines and the OFPST_/NXST_ reply headers. For port
        dumps also drops the duration= line newer versions of ovs print
        after each port, leaving the rx and tx line pairs.

        lines: An iterable of lines, with or without line endings
        kind: The dump kind, one of KINDS
        return: A list of lines without line endings
    """
    cleaned = []
    for line in lines:
        line = line.rstrip("\r\n")
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(("OFPST_", "NXST_")):
            continue
        if kind == "ports" and stripped.startswith("duration="):
            continue
        cleaned.append(line)
    return cleaned


class DumpSource(object):
    """ The interface consumed by DumpReader

        Subclasses implement dump(), the named methods select the bridge
        and kind of dump.
        All methods raise a DumpSourceError if the dump cannot be
        collected.
    """

    def dump(self, role, kind, host, port):
        """ Dumps a bridge

            role: The bridge role, one of ROLES. None for group dumps.
            kind: The kind of dump, one of KINDS
            host: The host the switch runs on
            port: The port used to reach the host
            return: A list of lines
        """
        raise NotImplementedError("Subclasses must implement dump()")

    def tun_dump_flows(self, host, port):
        return self.dump("tun", "flows", host, port)

    def tun_dump_ports(self, host, port):
        return self.dump("tun", "ports", host, port)

    def ex_dump_flows(self, host, port):
        return self.dump("ex", "flows", host, port)

    def ex_dump_ports(self, host, port):
        return self.dump("ex", "ports", host, port)

    def int_dump_flows(self, host, port):
        return self.dump("int", "flows", host, port)

    def int_dump_ports(self, host, port):
        return self.dump("int", "ports", host, port)

    def dump_groups(self, host, port):
        return self.dump(None, "groups", host, port)

    def dump_group_stats(self, host, port):
        return self.dump(None, "group_stats", host, port)


class CLIDumpSource(DumpSource):
    """ Dumps bridges by running ovs-ofctl

        ovs-ofctl is run locally when the host is local, otherwise over
        ssh, with the port passed to ssh -p.

        e.g. for int_dump_flows("10.0.0.2", 22):
        ssh -p 22 10.0.0.2 ovs-ofctl dump-flows br-int
    """

    def __init__(self, bridges=None, ofctl="ovs-ofctl", protocols="OpenFlow13",
                 ssh="ssh", group_role="int", timeout=None):
        """
            bridges: A mapping from role to bridge name, updating
                     DEFAULT_BRIDGES
            ofctl: The ovs-ofctl command
            protocols: The OpenFlow version used to dump groups, which
                       OpenFlow 1.0 does not support. None to use the
                       ovs-ofctl default.
            ssh: The ssh command
            group_role: The role of the bridge whose groups are dumped
            timeout: The number of seconds to wait for a dump, None to
                     wait indefinitely
        """
        self.bridges = dict(DEFAULT_BRIDGES)
        if bridges:
            self.bridges.update(bridges)
        self.ofctl = ofctl
        self.protocols = protocols
        self.ssh = ssh
        self.group_role = group_role
        self.timeout = timeout

    def command(self, role, kind, host, port):
        """ Builds the command line which dumps a bridge

            return: A list of arguments
        """
        if role is None:
            role = self.group_role
        args = [self.ofctl]
        if kind in ("groups", "group_stats") and self.protocols:
            args += ["-O", self.protocols]
        args += [OFCTL_COMMANDS[kind], self.bridges[role]]

        if host not in LOCAL_HOSTS:
            remote = [self.ssh]
            if port is not None:
                remote += ["-p", str(port)]
            args = remote + [host] + args
        return args

    def dump(self, role, kind, host, port):
        args = self.command(role, kind, host, port)
        log.debug("Running: %s", " ".join(args))
        try:
            proc = subprocess.run(args, stdout=subprocess.PIPE,
                                  stderr=subprocess.PIPE,
                                  universal_newlines=True,
                                  timeout=self.timeout)
        except subprocess.TimeoutExpired:
            raise DumpSourceError("Timed out after {}s: {}".format(
                self.timeout, " ".join(args)))
        except OSError as e:
            raise DumpSourceError("Could not run {}: {}".format(args[0], e))

        if proc.returncode != 0:
            raise DumpSourceError("{} exited with status {}: {}".format(
                " ".join(args), proc.returncode, proc.stderr.strip()))
        return clean_dump_lines(proc.stdout.splitlines(), kind)


@as_file_handle
def read_dump(file, kind):
    """ Reads a saved dump

        file: The file path or a file handle, if a path gzip and bz2
              files are decompressed based on the extension
        kind: The dump kind, one of KINDS
        return: A list of lines
    """
    return clean_dump_lines(file, kind)


class FileDumpSource(DumpSource):
    """ Dumps read from saved ovs-ofctl output

        The host and port are ignored.
    """

    def __init__(self, paths):
        """
            paths: A mapping from (role, kind) to a file path or handle.
                   The role is None for groups and group_stats.
                   A handle is read once, here, so each dump returns the
                   same lines.
        """
        self.paths = {}
        self.lines = {}
        for (role, kind), path in paths.items():
            if hasattr(path, 'read'):
                self.lines[(role, kind)] = read_dump(path, kind)
            else:
                self.paths[(role, kind)] = path

    @classmethod
    def from_directory(cls, dirname):
        """ Finds the dumps saved in a directory

            Dumps are named <role>_<kind>.txt, e.g. tun_flows.txt, or
            groups.txt and group_stats.txt. Each may also be compressed,
            e.g. int_ports.txt.gz.
        """
        names = [((role, kind), role + "_" + kind + ".txt")
                 for role in ROLES for kind in ("flows", "ports")]
        names += [((None, kind), kind + ".txt")
                  for kind in ("groups", "group_stats")]

        paths = {}
        for key, name in names:
            for suffix in ("",) + COMPRESSED_SUFFIXES:
                path = os.path.join(dirname, name + suffix)
                if os.path.isfile(path):
                    paths[key] = path
                    break
        return cls(paths)

    def dump(self, role, kind, host, port):
        if (role, kind) in self.lines:
            return list(self.lines[(role, kind)])
        if (role, kind) not in self.paths:
            raise DumpSourceError("No saved dump of {} {}".format(
                role or "group", kind))
        path = self.paths[(role, kind)]
        try:
            return read_dump(path, kind)
        except (IOError, OSError) as e:
            raise DumpSourceError("Could not read {}: {}".format(path, e))
