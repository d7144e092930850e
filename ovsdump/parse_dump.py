"""
Parsers for the text output of ovs-ofctl dump-flows, dump-ports,
dump-groups and dump-group-stats

Sample lines of each:
 cookie=0x0, duration=12.345s, table=0, n_packets=5, n_bytes=420, idle_age=3, hard_age=7, priority=100,ip actions=output:2
  port  1: rx pkts=?, bytes=?, drop=0, errs=0, frame=0, over=0, crc=0
           tx pkts=10, bytes=800, drop=0, errs=0, coll=0
 group_id=7,type=select,bucket=bucket_id:0,actions=output:1,bucket=bucket_id:1,actions=output:2
 group_id=7,duration=30.123s,ref_count=1,packet_count=100,byte_count=9000,bucket0:packet_count=60,byte_count=5400,bucket1:packet_count=40,byte_count=3600

Each parser returns a record or raises DumpParseError.
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

import re
import logging

from .records import Flow, Port, Group, Bucket, DumpParseError

log = logging.getLogger('ovsdump.parse_dump')


FLOW_LINE = re.compile(
    r"cookie=(?P<cookie>[^,]*), duration=(?P<duration>[^,]*)s, "
    r"table=(?P<table>[^,]*), n_packets=(?P<packets>[^,]*), "
    r"n_bytes=(?P<bytes>[^,]*), idle_age=(?P<idle_age>[^,]*), "
    r"hard_age=(?P<hard_age>[^,]*), priority=(?P<priority>[^,]*)"
    r"(,(?P<match>[^ ]*))? actions=(?P<actions>.*)")

# Both halves of a port block joined, the rx half is followed by
# whitespace (typically a newline and indentation) then the tx half
PORT_LINES = re.compile(
    r"port\s*(?P<port>[^:]*):\s+rx\s+pkts=(?P<rxpackets>[^,]*),"
    r"\s*bytes=(?P<rxbytes>[^,]*),\s*drop=(?P<rxdrops>[^,]*),"
    r"\s*errs=(?P<rxerrors>[^,]*),\s*frame=(?P<rxframerr>[^,]*),"
    r"\s*over=(?P<rxoverruns>[^,]*),\s*crc=(?P<rxcrcerrors>[^,\s]*)\s.*"
    r"tx\s+pkts=(?P<txpackets>[^,]*),\s*bytes=(?P<txbytes>[^,]*),"
    r"\s*drop=(?P<txdrops>[^,]*),\s*errs=(?P<txerrors>[^,]*),"
    r"\s*coll=(?P<txcollisions>.*)", re.DOTALL)

# Extra group arguments, such as selection_method, may come before the
# buckets. Buckets are always last.
GROUP_LINE = re.compile(
    r"group_id=(?P<groupid>.*?),\s*type=(?P<type>[^,]*)"
    r"(?:,(?!bucket=)[^,]*)*(?:,bucket=(?P<buckets>.*))?$")

BUCKET_ACTIONS = re.compile(r"actions=(.*?),?$")

GROUP_STATS_LINE = re.compile(
    r"group_id=(?P<groupid>.*?),duration=(?P<duration>[^,]*)s,"
    r"(?P<counts>.*)$")

DECIMAL = re.compile(r"[+-]?[0-9]+")

# ref_count is only included in the aggregate counters of the group
COUNTS = re.compile(
    r"(?:ref_count=(?P<ref_count>[0-9]+),)?packet_count=(?P<packet_count>[0-9]+),"
    r"byte_count=(?P<byte_count>[0-9]+)")


def _to_int(value):
    """ Parses a decimal integer, returning 0 if value is not one

        Only an optional sign and the digits 0-9 are accepted, so
        whitespace and underscores give 0, as they are not printed by ovs.
    """
    if value is None or not DECIMAL.fullmatch(value):
        return 0
    return int(value, 10)


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_seconds(value):
    """ Parses a duration in seconds, truncating any fractional part

        value: The duration as a string excluding the trailing 's'
        return: The whole number of seconds, or 0 if not a number
    """
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _groupdict(re_match):
    """ The named captures of a match, with unmatched groups as '' """
    return {k: v if v is not None else "" for k, v in re_match.groupdict().items()}


def parse_flow_line(line, require_match=True):
    """ Parses a flow from one line of ovs-ofctl dump-flows

        line: A string, one line of the dump
        require_match: If True, a flow without a match (such as the
                       table-miss flow) is rejected. By default True.
        return: A Flow
        raises: DumpParseError if the line is not a flow, or if the
                table, priority, match or actions are empty

        Note: Counters which are not numbers are set to 0 rather than
              rejecting the flow
    """
    re_match = FLOW_LINE.search(line)
    if not re_match:
        raise DumpParseError("Not a flow", line)
    result = _groupdict(re_match)

    flow = Flow(
        cookie=result["cookie"],
        duration=_to_float(result["duration"]),
        table=result["table"],
        packets=_to_int(result["packets"]),
        bytes=_to_int(result["bytes"]),
        idle_age=_to_int(result["idle_age"]),
        hard_age=_to_int(result["hard_age"]),
        priority=result["priority"],
        match=result["match"],
        action=result["actions"]
        )

    if not (flow.action and flow.table and flow.priority):
        raise DumpParseError("Incomplete flow", line)
    if require_match and not flow.match:
        raise DumpParseError("Flow without a match", line)
    return flow


def parse_port_lines(first_line, second_line):
    """ Parses a port from its two line block in ovs-ofctl dump-ports

        first_line: The rx line, beginning with the port number
        second_line: The tx line
        return: A Port
        raises: DumpParseError if the lines are not a port or the port
                number is empty

        Note: ovs prints '?' for counters the port does not support,
              these are treated as 0
    """
    line = first_line + second_line
    line = line.replace("=?", "=0")
    line = line.replace('"', "")

    re_match = PORT_LINES.search(line)
    if not re_match:
        raise DumpParseError("Not a port", line)
    result = {k: v.strip() for k, v in _groupdict(re_match).items()}

    if not result["port"]:
        raise DumpParseError("Port without a number", line)

    return Port(
        port_number=result["port"],
        rx_packets=_to_int(result["rxpackets"]),
        tx_packets=_to_int(result["txpackets"]),
        rx_bytes=_to_int(result["rxbytes"]),
        tx_bytes=_to_int(result["txbytes"]),
        rx_drops=_to_int(result["rxdrops"]),
        tx_drops=_to_int(result["txdrops"]),
        rx_errors=result["rxerrors"],
        tx_errors=result["txerrors"],
        rx_frame_err=result["rxframerr"],
        rx_overruns=result["rxoverruns"],
        rx_crc_errors=result["rxcrcerrors"],
        tx_collisions=result["txcollisions"]
        )


def _parse_bucket(bucket):
    """ Parses the actions of one bucket, excluding the leading bucket= """
    re_match = BUCKET_ACTIONS.search(bucket)
    if re_match:
        return Bucket(actions=re_match.group(1))
    return Bucket()


def parse_group_line(line):
    """ Parses a group from one line of ovs-ofctl dump-groups

        The duration and counters are left as 0, see
        parse_group_stats_line.

        line: A string, one line of the dump
        return: A Group, with a Bucket for each bucket= in the line
        raises: DumpParseError if the line is not a group
    """
    re_match = GROUP_LINE.search(line.strip())
    if not re_match:
        raise DumpParseError("Not a group", line)
    result = _groupdict(re_match)

    group = Group(group_id=result["groupid"], group_type=result["type"])

    if result["buckets"]:
        # Everything before the first bucket= was consumed by GROUP_LINE
        for bucket in result["buckets"].split("bucket="):
            group.buckets.append(_parse_bucket(bucket))

    return group


def _parse_counts(counts):
    """ Parses packet and byte counts, returns a (packets, bytes) tuple """
    re_match = COUNTS.search(counts)
    if not re_match:
        return 0, 0
    return (_to_int(re_match.group("packet_count")),
            _to_int(re_match.group("byte_count")))


def parse_group_stats_line(line, groups_by_id):
    """ Parses one line of ovs-ofctl dump-group-stats onto its group

        The counters are colon separated, first the group's aggregate
        counters then those of each bucket in order.

        line: A string, one line of the dump
        groups_by_id: A mapping from group id to the Group parsed from
                      dump-groups. The Group is updated in-place.
        return: The updated Group
        raises: DumpParseError if the line is not group stats, or the
                group id is unknown
    """
    re_match = GROUP_STATS_LINE.search(line.strip())
    if not re_match:
        raise DumpParseError("Not group stats", line)
    result = _groupdict(re_match)

    if result["groupid"] not in groups_by_id:
        raise DumpParseError("Stats for unknown group " + result["groupid"],
                             line)
    group = groups_by_id[result["groupid"]]

    group.duration = _to_seconds(result["duration"])
    bucket_counts = result["counts"].split(":")

    group.packets, group.bytes = _parse_counts(bucket_counts[0])

    if len(bucket_counts) - 1 > len(group.buckets):
        log.warning("Group %s has %d buckets but stats for %d",
                    group.group_id, len(group.buckets), len(bucket_counts) - 1)
    for bucket, counts in zip(group.buckets, bucket_counts[1:]):
        bucket.packets, bucket.bytes = _parse_counts(counts)

    return group
