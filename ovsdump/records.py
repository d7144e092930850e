"""
The records parsed from an OvS dump

Each record is a plain value, two records compare equal when all of their
fields are equal.
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


class OVSDumpError(Exception):
    """ Base class of the errors raised by ovsdump """


class DumpParseError(OVSDumpError):
    """ A dump line, or block of lines, could not be parsed to a record """

    def __init__(self, message, line):
        super(DumpParseError, self).__init__(message, line)

    @property
    def message(self):
        return self.args[0]

    @property
    def line(self):
        return self.args[1]

    def __str__(self):
        return "{}: {!r}".format(*self.args)


class DumpSourceError(OVSDumpError):
    """ The dump could not be collected from the switch """


class _Record(object):
    """ Shared equality and printing, driven by the _fields of a subclass """
    _fields = ()

    def _values(self):
        return tuple(getattr(self, field) for field in self._fields)

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self._values() == other._values()
        return False

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    def __str__(self):
        return self.__class__.__name__ + "(" + ", ".join(
            "{}={!r}".format(f, getattr(self, f)) for f in self._fields) + ")"

    def __repr__(self):
        return str(self)


class Flow(_Record):
    """
    A flow table entry, one line of ovs-ofctl dump-flows

    The match and action are kept as the raw ovs strings.
    """
    _fields = ("cookie", "duration", "table", "packets", "bytes", "idle_age",
               "hard_age", "priority", "match", "action")

    def __init__(self, cookie="", duration=0.0, table="", packets=0, bytes=0,
                 idle_age=0, hard_age=0, priority="", match="", action=""):
        self.cookie = cookie
        self.duration = duration
        self.table = table
        self.packets = packets
        self.bytes = bytes
        self.idle_age = idle_age
        self.hard_age = hard_age
        self.priority = priority
        self.match = match
        self.action = action


class Port(_Record):
    """
    The counters of a port, one two-line block of ovs-ofctl dump-ports

    Only the packet, byte and drop counters are numbers, the error counters
    are kept as printed.
    """
    _fields = ("port_number", "rx_packets", "tx_packets", "rx_bytes",
               "tx_bytes", "rx_drops", "tx_drops", "rx_errors", "tx_errors",
               "rx_frame_err", "rx_overruns", "rx_crc_errors", "tx_collisions")

    def __init__(self, port_number="", rx_packets=0, tx_packets=0,
                 rx_bytes=0, tx_bytes=0, rx_drops=0, tx_drops=0,
                 rx_errors="", tx_errors="", rx_frame_err="", rx_overruns="",
                 rx_crc_errors="", tx_collisions=""):
        self.port_number = port_number
        self.rx_packets = rx_packets
        self.tx_packets = tx_packets
        self.rx_bytes = rx_bytes
        self.tx_bytes = tx_bytes
        self.rx_drops = rx_drops
        self.tx_drops = tx_drops
        self.rx_errors = rx_errors
        self.tx_errors = tx_errors
        self.rx_frame_err = rx_frame_err
        self.rx_overruns = rx_overruns
        self.rx_crc_errors = rx_crc_errors
        self.tx_collisions = tx_collisions


class Bucket(_Record):
    """ One action bucket of a Group, with its own counters """
    _fields = ("actions", "packets", "bytes")

    def __init__(self, actions="", packets=0, bytes=0):
        self.actions = actions
        self.packets = packets
        self.bytes = bytes


class Group(_Record):
    """
    A group table entry, including its buckets stored as a list.

    The id, type and buckets come from ovs-ofctl dump-groups, the duration
    and counters are filled in later from dump-group-stats.
    """
    _fields = ("group_id", "group_type", "duration", "packets", "bytes",
               "buckets")

    def __init__(self, group_id="", group_type="", duration=0, packets=0,
                 bytes=0, buckets=None):
        self.group_id = group_id
        self.group_type = group_type
        self.duration = duration
        self.packets = packets
        self.bytes = bytes
        if buckets is None:
            buckets = []
        self.buckets = buckets

    def empty(self):
        return len(self.buckets) == 0
