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

"""
Terminal output for the s3-cost commands. Messages are colored with colorama,
which strips the escape codes when output is piped or redirected.
"""

import sys
import json
import signal
import colorama
from colorama import Fore, Style

def init():
    colorama.init()

def _print(color, label, msg, **kwargs):
    print(color, label, msg, Style.RESET_ALL, sep='', **kwargs)

def error(msg, **kwargs):
    _print(Fore.RED, 'ERROR: ', msg, **kwargs)

def warning(msg, **kwargs):
    _print(Fore.YELLOW, ' WARN: ', msg, **kwargs)

def info(msg, **kwargs):
    _print(Fore.BLUE, ' INFO: ', msg, **kwargs)

def ok(msg, **kwargs):
    _print(Fore.GREEN, '   OK: ', msg, **kwargs)

def print_json(data, fh=None):
    """Pretty print a policy or configuration document"""
    print(json.dumps(data, indent=4, default=str), file=fh or sys.stdout)

def table(rows, headers, fh=None):
    """Print rows of values as aligned columns"""
    fh = fh or sys.stdout
    rows = [[str(v) for v in row] for row in rows]
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(headers)]
    fmt = '  '.join('{:<%d}' % w for w in widths)
    print(fmt.format(*headers), file=fh)
    print(fmt.format(*['-' * w for w in widths]), file=fh)
    for row in rows:
        print(fmt.format(*row), file=fh)

class _Timeout(Exception):
    pass

def _alarm(signum, frame):
    raise _Timeout()

def confirm(message, default=False, timeout=None):
    """Ask a yes / no question before making a change

    When stdout is not a terminal the question times out after 3 seconds
    (unless `timeout` is given) and the default answer is used.

    Args:
        message (str): Question to display
        default (bool): Answer used for an empty response or a timeout
        timeout (optional[int]): Seconds to wait for a response

    Returns:
        bool: If the user answered yes
    """
    if timeout is None and not sys.stdout.isatty():
        timeout = 3

    choices = "[Y/n]" if default else "[y/N]"
    if timeout is not None:
        signal.signal(signal.SIGALRM, _alarm)
        signal.alarm(timeout)
    try:
        answer = input("{} {}: ".format(message, choices))
    except _Timeout:
        print(" (timeout)")
        return default
    finally:
        if timeout is not None:
            signal.alarm(0)

    if not sys.stdin.isatty():
        # Piped answers are not echoed by the terminal
        print(answer)

    answer = answer.strip()
    if not answer:
        return default
    return answer[0] in 'yY'
