# Copyright 2026 The Johns Hopkins University Applied Physics Laboratory
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import sys
from contextlib import contextmanager

from . import console
from .exceptions import CanceledError, ValidationError

@contextmanager
def open_(filename, mode='r'):
    """Custom version of open that understands stdin/stdout"""
    is_std = filename is None or filename == '-'
    if is_std:
        if 'r' in mode:
            fh = sys.stdin
        else:
            fh = sys.stdout
    else:
        fh = open(filename, mode)

    try:
        yield fh
    finally:
        if not is_std:
            fh.close()

def parse_tags(pairs):
    """Parse KEY=VALUE command line arguments into a dictionary

    Args:
        pairs (list[str]): Arguments in the form KEY=VALUE

    Returns:
        dict: Tags
    """
    tags = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValidationError("Tag '{}' is not in the form KEY=VALUE".format(pair))
        tags[key] = value
    return tags

def confirm_or_cancel(message, yes=False):
    """Prompt the user before making a change

    Raises:
        CanceledError: If the user doesn't confirm
    """
    if yes:
        return
    if not console.confirm(message):
        raise CanceledError()

def format_bytes(count):
    for unit in ('B', 'KiB', 'MiB', 'GiB', 'TiB'):
        if count < 1024 or unit == 'TiB':
            return "{:.1f} {}".format(count, unit) if unit != 'B' else "{} B".format(count)
        count /= 1024.0
