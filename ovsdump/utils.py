""" Helpers for reading saved dumps
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

import functools
import gzip
import bz2
from io import TextIOWrapper

COMPRESSED_SUFFIXES = (".gz", ".bz2")


def open_compressed(f_name, mode="r"):
    """ open() a file which might be compressed, always in text mode """
    if f_name.endswith(".gz"):
        f_handle = gzip.GzipFile(f_name, mode)
        # Inconsistency GzipFile is binary by default
        f_handle = TextIOWrapper(f_handle)
    elif f_name.endswith(".bz2"):
        f_handle = bz2.BZ2File(f_name, mode)
        f_handle = TextIOWrapper(f_handle)
    else:
        f_handle = open(f_name, mode)
    return f_handle


def as_file_handle(func):
    """ Ensures the first argument to a function is a text file handle

        The first argument can be a path, which is opened and decompressed
        based on the file extension, or a file handle in either text or
        binary mode.

        Example Usage:
        @as_file_handle
        def read_file(file):
            print(file.read())
    """
    @functools.wraps(func)
    def wrapper(_file, *args, **kwargs):
        if hasattr(_file, 'read'):
            if _file.read(0) == b'':
                _file = TextIOWrapper(_file)
                try:
                    return func(_file, *args, **kwargs)
                finally:
                    # TextIOWrapper closes the underlying stream unless detached
                    _file.detach()
            return func(_file, *args, **kwargs)

        # This is a path
        with open_compressed(str(_file), "r") as f_handle:
            return func(f_handle, *args, **kwargs)

    return wrapper
