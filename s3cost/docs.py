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

"""Quality checks for the rendered reference document.

The document is plain Markdown, so the checks work from the text alone:
every technique needs a description and every embedded example must be a
payload S3 would accept.
"""

import re
import ast
import json
from collections import namedtuple

from . import lifecycle
from . import policy
from .catalog import TECHNIQUE_COUNT
from .exceptions import ValidationError

Section = namedtuple('Section', ['number', 'title', 'description', 'blocks'])

HEADING = re.compile(r'^###\s+(\d+)\.\s+(.+?)\s*$')
FENCE = re.compile(r'^```(\w*)\s*$')

def parse_document(text):
    """Split the document into one Section per numbered technique

    Returns:
        list[Section]: Sections in document order. `blocks` is a list of
                       (language, body) tuples for the fenced code blocks
    """
    sections = []
    current = None
    description = []
    block = None

    def finish():
        if current is not None:
            sections.append(current._replace(description=' '.join(description).strip()))

    for line in text.splitlines():
        if block is not None:
            if FENCE.match(line) and line.strip() == '```':
                if current is not None:
                    current.blocks.append((block[0], '\n'.join(block[1])))
                block = None
            else:
                block[1].append(line)
            continue

        match = FENCE.match(line)
        if match:
            block = (match.group(1), [])
            continue

        match = HEADING.match(line)
        if match:
            finish()
            current = Section(int(match.group(1)), match.group(2), '', [])
            description = []
        elif line.startswith('#'):
            # Category heading, ends the current description
            finish()
            current = None
            description = []
        elif current is not None and line.strip():
            description.append(line.strip())

    finish()
    return sections

def _check_lifecycle(number, doc, problems):
    try:
        lifecycle.validate_configuration(doc)
    except ValidationError as ex:
        problems.append("Technique {}: invalid lifecycle configuration: {}".format(number, ex))
        return False

    if len(doc['Rules']) != 1:
        problems.append("Technique {}: lifecycle example must have exactly one rule".format(number))
        return False

    dated = [t for t in doc['Rules'][0].get('Transitions', []) if 'Date' in t]
    if not dated:
        problems.append("Technique {}: lifecycle example has no dated transition".format(number))
        return False

    return True

def _check_policy(number, doc, problems):
    try:
        policy.validate_policy(doc)
    except ValidationError as ex:
        problems.append("Technique {}: invalid bucket policy: {}".format(number, ex))
        return False
    return policy.has_deny_condition(doc, 'StringNotEquals')

def check_document(text):
    """Check the reference document

    Returns:
        list[str]: Problems located, empty if the document is valid
    """
    problems = []
    sections = parse_document(text)

    numbers = [s.number for s in sections]
    if numbers != list(range(1, TECHNIQUE_COUNT + 1)):
        problems.append("Expected techniques numbered 1 through {}, found {}".format(
                        TECHNIQUE_COUNT, numbers))

    lifecycle_found = False
    deny_found = False
    for section in sections:
        if not section.description:
            problems.append("Technique {} has no description".format(section.number))

        for language, body in section.blocks:
            if language == 'json':
                try:
                    doc = json.loads(body)
                except ValueError as ex:
                    problems.append("Technique {}: JSON example does not parse: {}".format(
                                    section.number, ex))
                    continue

                if not isinstance(doc, dict):
                    problems.append("Technique {}: JSON example is not an object".format(section.number))
                    continue

                if 'Rules' in doc:
                    lifecycle_found |= _check_lifecycle(section.number, doc, problems)
                elif 'Statement' in doc:
                    deny_found |= _check_policy(section.number, doc, problems)
            elif language == 'python':
                try:
                    ast.parse(body)
                except SyntaxError as ex:
                    problems.append("Technique {}: Python example does not parse: {}".format(
                                    section.number, ex))

    if not lifecycle_found:
        problems.append("No valid lifecycle configuration example")
    if not deny_found:
        problems.append("No bucket policy example with a Deny statement gated on StringNotEquals")

    return problems

def check_file(path):
    with open(path, 'r') as fh:
        return check_document(fh.read())
