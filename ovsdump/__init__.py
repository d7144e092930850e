""" Parses the flows, ports and groups dumped from Open vSwitch bridges
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

from .records import (Flow, Port, Group, Bucket, OVSDumpError,
                      DumpParseError, DumpSourceError)
from .dump_source import DumpSource, CLIDumpSource, FileDumpSource
from .reader import DumpReader

__all__ = ["Flow", "Port", "Group", "Bucket", "OVSDumpError",
           "DumpParseError", "DumpSourceError", "DumpSource", "CLIDumpSource",
           "FileDumpSource", "DumpReader"]
