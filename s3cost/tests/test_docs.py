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

import unittest
import os, sys

# Allow unit test files to import the target library modules
cur_dir = os.path.dirname(os.path.realpath(__file__))
parent_dir = os.path.normpath(os.path.join(cur_dir, '..', '..'))
sys.path.append(parent_dir)

import json

from s3cost import catalog
from s3cost import lifecycle
from s3cost import constants as const
from s3cost.docs import check_document, check_file, parse_document


class TestParse(unittest.TestCase):
    def test_sections(self):
        text = ('# Title\n'
                '\n'
                'Introduction\n'
                '\n'
                '## Category\n'
                '\n'
                '### 1. First\n'
                '\n'
                'Line one\n'
                'line two.\n'
                '\n'
                '```json\n'
                '{"a": 1}\n'
                '```\n'
                '\n'
                '### 2. Second\n'
                '\n'
                '```python\n'
                '# not a heading\n'
                'x = 1\n'
                '```\n')

        sections = parse_document(text)

        self.assertEqual(2, len(sections))
        self.assertEqual((1, 'First', 'Line one line two.'), sections[0][:3])
        self.assertEqual([('json', '{"a": 1}')], sections[0].blocks)
        self.assertEqual('', sections[1].description)
        self.assertEqual([('python', '# not a heading\nx = 1')], sections[1].blocks)


class TestCheck(unittest.TestCase):
    def setUp(self):
        self.catalog = catalog.load_catalog()
        self.text = catalog.render_markdown(self.catalog)

    def test_committed_document(self):
        self.assertEqual([], check_file(const.DOCUMENT_FILE))

    def test_committed_document_matches_catalog(self):
        # Regenerate with `bin/s3-cost.py docs render` after editing the catalog
        with open(const.DOCUMENT_FILE) as fh:
            committed = fh.read()

        self.assertEqual(self.text, committed)

    def test_not_an_object(self):
        text = self.text.replace('zone is lost.\n\n### 4.',
                                 'zone is lost.\n\n```json\n42\n```\n\n### 4.')
        problems = check_document(text)
        self.assertEqual(['Technique 3: JSON example is not an object'], problems)

    def test_rules_not_objects(self):
        text = self.text.replace('zone is lost.\n\n### 4.',
                                 'zone is lost.\n\n```json\n{"Rules": ["x"]}\n```\n\n### 4.')
        problems = check_document(text)
        self.assertEqual(1, len(problems))
        self.assertIn('Technique 3: invalid lifecycle configuration', problems[0])

    def test_statements_not_objects(self):
        text = self.text.replace('zone is lost.\n\n### 4.',
                                 'zone is lost.\n\n```json\n{"Version": "2012-10-17", "Statement": ["x"]}\n```\n\n### 4.')
        problems = check_document(text)
        self.assertEqual(1, len(problems))
        self.assertIn('Technique 3: invalid bucket policy', problems[0])

    def test_missing_description(self):
        techniques = list(self.catalog)
        techniques[2] = techniques[2]._replace(description='')
        broken = catalog.Catalog(self.catalog.title, self.catalog.introduction,
                                 self.catalog.categories, techniques)

        problems = check_document(catalog.render_markdown(broken))

        self.assertEqual(['Technique 3 has no description'], problems)

    def test_missing_technique(self):
        text = self.text.replace('### 13. ', '### 31. ')
        problems = check_document(text)
        self.assertEqual(1, len(problems))
        self.assertIn('numbered 1 through 25', problems[0])

    def test_bad_json(self):
        text = self.text.replace('"Rules": [', '"Rules": [,')
        problems = check_document(text)

        self.assertTrue(any('JSON example does not parse' in p for p in problems))
        self.assertIn('No valid lifecycle configuration example', problems)

    def test_bad_python(self):
        text = self.text.replace('from s3cost.objects import upload_file',
                                 'from s3cost.objects import')
        problems = check_document(text)
        self.assertEqual(1, len(problems))
        self.assertIn('Technique 12: Python example does not parse', problems[0])

    def test_no_deny_condition(self):
        text = self.text.replace('StringNotEquals', 'StringEquals')
        problems = check_document(text)
        self.assertEqual(['No bucket policy example with a Deny statement gated on StringNotEquals'],
                         problems)

    def test_lifecycle_two_rules(self):
        example = json.dumps(lifecycle.lifecycle_example(), indent=2)
        doc = lifecycle.lifecycle_example()
        doc['Rules'].append(dict(doc['Rules'][0], ID='Second'))
        text = self.text.replace(example, json.dumps(doc, indent=2))

        problems = check_document(text)

        self.assertIn('Technique 7: lifecycle example must have exactly one rule', problems)

    def test_lifecycle_bad_storage_class(self):
        text = self.text.replace('"StorageClass": "GLACIER"', '"StorageClass": "TAPE"')
        problems = check_document(text)
        self.assertTrue(any(p.startswith('Technique 7: invalid lifecycle configuration')
                            for p in problems))
