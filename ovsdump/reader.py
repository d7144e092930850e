"""
Reads the flows, ports and groups of the bridges of an OvS switch

A DumpReader takes the lines from a DumpSource and parses them to records.
Lines which cannot be parsed, such as banners or truncated lines, are
logged and dropped, while errors from the source are raised to the caller.

Usage:
reader = DumpReader(CLIDumpSource())
for flow in reader.int_flows("10.0.0.2", 22):
    print(flow.priority, flow.match, flow.action)
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

import logging

from .records import DumpParseError
from .parse_dump import (parse_flow_line, parse_port_lines, parse_group_line,
                         parse_group_stats_line)
from .dump_source import ROLES

log = logging.getLogger('ovsdump.reader')


def flows_from_lines(lines):
    """ Parses the lines of a flow dump, dropping those which fail

        lines: A list of lines from ovs-ofctl dump-flows
        return: A list of Flows, in the order of lines
    """
    flows = []
    for line in lines:
        try:
            flows.append(parse_flow_line(line))
        except DumpParseError as e:
            log.debug("Dropping line: %s", e)
    log.debug("Parsed %d flows from %d lines", len(flows), len(lines))
    return flows


def ports_from_lines(lines):
    """ Parses the line pairs of a port dump, dropping those which fail

        lines: A list of lines from ovs-ofctl dump-ports, each port is
               a pair of lines. A trailing unpaired line is ignored.
        return: A list of Ports, in the order of lines
    """
    if len(lines) % 2:
        log.debug("Ignoring unpaired port line: %s", lines[-1])
    ports = []
    for first_line, second_line in zip(lines[::2], lines[1::2]):
        try:
            ports.append(parse_port_lines(first_line, second_line))
        except DumpParseError as e:
            log.debug("Dropping lines: %s", e)
    log.debug("Parsed %d ports from %d lines", len(ports), len(lines))
    return ports


def groups_from_lines(group_lines, group_stats_lines):
    """ Parses groups and then applies their stats

        group_lines: A list of lines from ovs-ofctl dump-groups
        group_stats_lines: A list of lines from ovs-ofctl dump-group-stats
        return: A list of Groups, in the order of group_lines
    """
    groups = []
    groups_by_id = {}
    for line in group_lines:
        try:
            group = parse_group_line(line)
        except DumpParseError as e:
            log.debug("Dropping line: %s", e)
            continue
        if group.group_id in groups_by_id:
            log.warning("Duplicate group %s, stats apply to the last",
                        group.group_id)
        groups.append(group)
        groups_by_id[group.group_id] = group

    for line in group_stats_lines:
        try:
            parse_group_stats_line(line, groups_by_id)
        except DumpParseError as e:
            log.warning("Dropping group stats: %s", e)
    return groups


class DumpReader(object):
    """ Parses the dumps of a DumpSource to records

        Calls do not share any state, other than the DumpSource.
    """

    def __init__(self, dump_source):
        self.dump_source = dump_source

    def tun_flows(self, host, port):
        """ The flows of the tunnel bridge as a list of Flows """
        return flows_from_lines(self.dump_source.tun_dump_flows(host, port))

    def ex_flows(self, host, port):
        """ The flows of the external bridge as a list of Flows """
        return flows_from_lines(self.dump_source.ex_dump_flows(host, port))

    def int_flows(self, host, port):
        """ The flows of the integration bridge as a list of Flows """
        return flows_from_lines(self.dump_source.int_dump_flows(host, port))

    def tun_ports(self, host, port):
        """ The ports of the tunnel bridge as a list of Ports """
        return ports_from_lines(self.dump_source.tun_dump_ports(host, port))

    def ex_ports(self, host, port):
        """ The ports of the external bridge as a list of Ports """
        return ports_from_lines(self.dump_source.ex_dump_ports(host, port))

    def int_ports(self, host, port):
        """ The ports of the integration bridge as a list of Ports """
        return ports_from_lines(self.dump_source.int_dump_ports(host, port))

    def groups(self, host, port):
        """ The groups, including their stats, as a list of Groups

            Both dumps are collected before either is parsed.
        """
        group_lines = self.dump_source.dump_groups(host, port)
        group_stats_lines = self.dump_source.dump_group_stats(host, port)
        return groups_from_lines(group_lines, group_stats_lines)

    def flows(self, role, host, port):
        """ The flows of the bridge with the role tun, ex or int """
        if role not in ROLES:
            raise ValueError("Unknown bridge role: " + str(role))
        return getattr(self, role + "_flows")(host, port)

    def ports(self, role, host, port):
        """ The ports of the bridge with the role tun, ex or int """
        if role not in ROLES:
            raise ValueError("Unknown bridge role: " + str(role))
        return getattr(self, role + "_ports")(host, port)
