#!/usr/bin/python
"""
A script to dump and parse the flows, ports and groups of OvS bridges

Run dump_bridge.py -h to see the full usage
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

import argparse
import logging
import sys
from pprint import pprint

from tqdm import tqdm

from .records import DumpSourceError
from .dump_source import ROLES, CLIDumpSource, FileDumpSource
from .reader import DumpReader

KINDS = ("flows", "ports", "groups")

log = logging.getLogger('ovsdump.dump_bridge')


def build_queries(roles, kinds):
    """ Lists the (role, kind) pairs to dump

        Groups are not per role and are only listed once, with role None
    """
    queries = []
    for kind in kinds:
        if kind == "groups":
            queries.append((None, kind))
        else:
            queries.extend((role, kind) for role in roles)
    return queries


def run_query(reader, role, kind, host, port):
    """ Returns the records of one query """
    if kind == "groups":
        return reader.groups(host, port)
    if kind == "flows":
        return reader.flows(role, host, port)
    return reader.ports(role, host, port)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Dumps and parses the flows, ports and groups of OvS bridges')

    parser.add_argument('host', nargs='?', default=None,
                        help="the host running OvS, reached using ssh (local if omitted)")
    parser.add_argument('-p', '--port', type=int, default=None,
                        help="the ssh port of the host")
    parser.add_argument('-r', '--role', action='append', choices=ROLES,
                        help="the bridge roles to dump, may be repeated (default all)")
    parser.add_argument('-k', '--kind', action='append', choices=KINDS,
                        help="the dumps to parse, may be repeated (default flows and ports)")
    parser.add_argument('-d', '--dir', default=None,
                        help="read saved dumps from this directory rather than running ovs-ofctl")
    parser.add_argument('--bridge', action='append', default=[], metavar="ROLE=BRIDGE",
                        help="override the bridge name of a role, e.g. int=br0")
    parser.add_argument('-t', '--timeout', type=float, default=None,
                        help="the seconds to wait for each ovs-ofctl dump")
    parser.add_argument('--progress', action='store_true',
                        help="show the progress through the dumps")
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="log more, repeat for debug output")

    args = parser.parse_args(argv)

    logging.basicConfig(level=[logging.WARNING, logging.INFO,
                               logging.DEBUG][min(args.verbose, 2)])

    if args.dir:
        source = FileDumpSource.from_directory(args.dir)
    else:
        bridges = {}
        for item in args.bridge:
            role, _, name = item.partition("=")
            if role not in ROLES or not name:
                parser.error("--bridge must be ROLE=BRIDGE: " + item)
            bridges[role] = name
        source = CLIDumpSource(bridges=bridges, timeout=args.timeout)

    reader = DumpReader(source)
    queries = build_queries(args.role or ROLES, args.kind or ("flows", "ports"))
    if args.progress:
        queries = tqdm(queries)

    for role, kind in queries:
        try:
            records = run_query(reader, role, kind, args.host, args.port)
        except DumpSourceError as e:
            print("Error dumping {} {}: {}".format(role or "group", kind, e),
                  file=sys.stderr)
            return 1
        log.info("%s %s: %d records", role or "group", kind, len(records))
        print("# {} {}".format(role or "group", kind))
        pprint(records)
    return 0


if __name__ == "__main__":
    sys.exit(main())
