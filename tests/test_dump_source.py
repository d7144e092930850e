#!/usr/bin/env python
""" Tests for ovsdump.dump_source """

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
import io
import bz2
import gzip
import subprocess
import unittest
from unittest import mock
from tempfile import NamedTemporaryFile, TemporaryDirectory

from ovsdump.dump_source import (clean_dump_lines, read_dump, DumpSource,
                                 CLIDumpSource, FileDumpSource)
from ovsdump.reader import DumpReader
from ovsdump.records import DumpSourceError
from .dumps import (INT_FLOWS_RAW, INT_FLOWS, INT_PORTS_RAW, INT_PORTS,
                    INT_PORTS_OF13_RAW, GROUPS_RAW, GROUP_STATS_RAW, GROUPS)


def completed(args, stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args, returncode, stdout, stderr)


class TestCleanDumpLines(unittest.TestCase):
    """ Test removing the lines which are not records """

    def test_headers_removed(self):
        lines = clean_dump_lines(INT_FLOWS_RAW.splitlines(True), "flows")
        self.assertEqual(len(lines), 3)
        self.assertTrue(all(l.startswith(" cookie=") for l in lines))
        self.assertFalse(any(l.endswith("\n") for l in lines))

        lines = clean_dump_lines(GROUPS_RAW.splitlines(), "groups")
        self.assertEqual(len(lines), 2)

    def test_port_pairs(self):
        """ Test only the rx and tx line of each port are kept """
        lines = clean_dump_lines(INT_PORTS_RAW.splitlines(), "ports")
        self.assertEqual(len(lines), 6)
        lines = clean_dump_lines(INT_PORTS_OF13_RAW.splitlines(), "ports")
        self.assertEqual(len(lines), 2)
        self.assertIn("rx pkts", lines[0])
        self.assertIn("tx pkts", lines[1])

    def test_blank_lines(self):
        self.assertEqual(clean_dump_lines(["", "  ", "\n", "\r\n"], "flows"), [])


class TestDumpSource(unittest.TestCase):

    def test_not_implemented(self):
        with self.assertRaises(NotImplementedError):
            DumpSource().int_dump_flows("h", 22)


class TestCLIDumpSource(unittest.TestCase):
    """ Test running ovs-ofctl, with subprocess mocked out """

    def test_local_command(self):
        source = CLIDumpSource()
        self.assertEqual(source.command("int", "flows", None, None),
                         ["ovs-ofctl", "dump-flows", "br-int"])
        self.assertEqual(source.command("tun", "ports", "localhost", 22),
                         ["ovs-ofctl", "dump-ports", "br-tun"])
        self.assertEqual(source.command(None, "groups", "127.0.0.1", None),
                         ["ovs-ofctl", "-O", "OpenFlow13", "dump-groups", "br-int"])

    def test_remote_command(self):
        source = CLIDumpSource(bridges={"ex": "br-provider"}, protocols=None,
                               group_role="ex")
        self.assertEqual(source.command("ex", "ports", "10.0.0.2", 2222),
                         ["ssh", "-p", "2222", "10.0.0.2",
                          "ovs-ofctl", "dump-ports", "br-provider"])
        self.assertEqual(source.command(None, "group_stats", "10.0.0.2", None),
                         ["ssh", "10.0.0.2",
                          "ovs-ofctl", "dump-group-stats", "br-provider"])
        self.assertEqual(source.bridges["tun"], "br-tun")

    @mock.patch("ovsdump.dump_source.subprocess.run")
    def test_dump(self, run):
        """ Test the output is split into lines and cleaned """
        run.return_value = completed([], stdout=INT_FLOWS_RAW)
        source = CLIDumpSource(timeout=5)
        lines = source.int_dump_flows("10.0.0.2", 22)
        self.assertEqual(lines, clean_dump_lines(INT_FLOWS_RAW.splitlines(), "flows"))
        args, kwargs = run.call_args
        self.assertEqual(args[0], ["ssh", "-p", "22", "10.0.0.2",
                                   "ovs-ofctl", "dump-flows", "br-int"])
        self.assertEqual(kwargs["timeout"], 5)

    @mock.patch("ovsdump.dump_source.subprocess.run")
    def test_read_through_reader(self, run):
        """ Test parsing each dump as collected from ovs-ofctl """
        outputs = {
            "dump-flows": INT_FLOWS_RAW,
            "dump-ports": INT_PORTS_OF13_RAW,
            "dump-groups": GROUPS_RAW,
            "dump-group-stats": GROUP_STATS_RAW,
            }
        run.side_effect = lambda args, **kwargs: completed(
            args, stdout=outputs[args[-2]])
        reader = DumpReader(CLIDumpSource())
        self.assertEqual(reader.int_flows(None, None), INT_FLOWS)
        self.assertEqual(reader.tun_ports(None, None), INT_PORTS[1:2])
        self.assertEqual(reader.groups(None, None), GROUPS)

    @mock.patch("ovsdump.dump_source.subprocess.run")
    def test_exit_status(self, run):
        run.return_value = completed(
            [], stderr="ovs-ofctl: br-tun is not a bridge or a socket\n",
            returncode=1)
        with self.assertRaises(DumpSourceError) as ctx:
            CLIDumpSource().tun_dump_flows(None, None)
        self.assertIn("is not a bridge", str(ctx.exception))
        self.assertIn("status 1", str(ctx.exception))

    @mock.patch("ovsdump.dump_source.subprocess.run")
    def test_missing_command(self, run):
        run.side_effect = OSError(2, "No such file or directory")
        with self.assertRaises(DumpSourceError):
            CLIDumpSource().ex_dump_ports(None, None)

    @mock.patch("ovsdump.dump_source.subprocess.run")
    def test_timeout(self, run):
        run.side_effect = subprocess.TimeoutExpired(["ovs-ofctl"], 1)
        with self.assertRaises(DumpSourceError):
            CLIDumpSource(timeout=1).dump_groups("10.0.0.2", 22)


class TestFileDumpSource(unittest.TestCase):
    """ Test reading saved dumps, which may be compressed """

    def test_from_directory(self):
        with TemporaryDirectory() as dirname:
            with open(os.path.join(dirname, "int_flows.txt"), "w") as f_handle:
                f_handle.write(INT_FLOWS_RAW)
            with gzip.open(os.path.join(dirname, "int_ports.txt.gz"), "wt") as f_handle:
                f_handle.write(INT_PORTS_RAW)
            with bz2.open(os.path.join(dirname, "groups.txt.bz2"), "wt") as f_handle:
                f_handle.write(GROUPS_RAW)
            with open(os.path.join(dirname, "group_stats.txt"), "w") as f_handle:
                f_handle.write(GROUP_STATS_RAW)

            reader = DumpReader(FileDumpSource.from_directory(dirname))
            self.assertEqual(reader.int_flows("ignored", 0), INT_FLOWS)
            self.assertEqual(reader.int_ports("ignored", 0), INT_PORTS)
            self.assertEqual(reader.groups("ignored", 0), GROUPS)

            with self.assertRaises(DumpSourceError):
                reader.tun_flows("ignored", 0)

    def test_missing_file(self):
        source = FileDumpSource({("int", "flows"): "/nonexistent/int_flows.txt"})
        with self.assertRaises(DumpSourceError):
            source.int_dump_flows(None, None)

    def test_handle_dumped_twice(self):
        """ Test a handle gives the same dump each time it is queried """
        source = FileDumpSource({("int", "flows"): io.StringIO(INT_FLOWS_RAW),
                                 ("int", "ports"): io.StringIO(INT_PORTS_RAW)})
        reader = DumpReader(source)
        self.assertEqual(reader.int_flows(None, None), INT_FLOWS)
        self.assertEqual(reader.int_flows(None, None), INT_FLOWS)
        self.assertEqual(reader.int_ports(None, None), INT_PORTS)
        self.assertEqual(reader.int_ports(None, None), INT_PORTS)

    def test_read_dump_handles(self):
        """ Test reading from a path, and text and binary handles """
        expected = clean_dump_lines(INT_FLOWS_RAW.splitlines(), "flows")
        with NamedTemporaryFile(suffix=".gz") as tmp_f:
            with gzip.open(tmp_f.name, "wt") as f_handle:
                f_handle.write(INT_FLOWS_RAW)
            self.assertEqual(read_dump(tmp_f.name, "flows"), expected)
        self.assertEqual(read_dump(io.StringIO(INT_FLOWS_RAW), "flows"), expected)
        binary = io.BytesIO(INT_FLOWS_RAW.encode())
        self.assertEqual(read_dump(binary, "flows"), expected)
        # The binary handle is left open
        self.assertFalse(binary.closed)


if __name__ == '__main__':
    unittest.main()
