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

import shutil
import tempfile
from io import StringIO

from s3cost import catalog
from s3cost.docs import check_document, parse_document
from s3cost.exceptions import CatalogError


class TestCatalog(unittest.TestCase):
    def setUp(self):
        self.catalog = catalog.load_catalog()

    def test_bundled_catalog(self):
        self.assertEqual(catalog.TECHNIQUE_COUNT, len(self.catalog))
        self.assertEqual(list(range(1, 26)), [t.number for t in self.catalog])
        self.assertTrue(self.catalog.title)
        self.assertTrue(self.catalog.introduction)

    def test_verify(self):
        fh = StringIO()
        self.assertTrue(catalog.verify_catalog(self.catalog, fh))
        self.assertEqual('', fh.getvalue())

    def test_verify_missing_description(self):
        techniques = list(self.catalog)
        techniques[4] = techniques[4]._replace(description='')
        broken = catalog.Catalog(self.catalog.title, self.catalog.introduction,
                                 self.catalog.categories, techniques)

        fh = StringIO()
        self.assertFalse(catalog.verify_catalog(broken, fh))
        self.assertIn('Technique 5 has no description', fh.getvalue())

    def test_verify_missing_technique(self):
        broken = catalog.Catalog(self.catalog.title, self.catalog.introduction,
                                 self.catalog.categories, list(self.catalog)[:-1])

        fh = StringIO()
        self.assertFalse(catalog.verify_catalog(broken, fh))

    def test_by_category(self):
        groups = self.catalog.by_category()
        self.assertEqual(self.catalog.categories, [category for category, _ in groups])
        self.assertEqual(25, sum(len(techniques) for _, techniques in groups))

    def test_find(self):
        self.assertEqual('lifecycle', catalog.find(self.catalog, 7).example)
        with self.assertRaises(KeyError):
            catalog.find(self.catalog, 26)

    def test_examples(self):
        examples = {t.example for t in self.catalog if t.example is not None}
        self.assertEqual(set(catalog.EXAMPLE_KINDS), examples)

    def test_unknown_example(self):
        with self.assertRaises(CatalogError):
            catalog.example_block('terraform')


class TestCatalogFile(unittest.TestCase):
    def setUp(self):
        self.dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.dir)

    def write(self, content):
        path = os.path.join(self.dir, 'catalog.yml')
        with open(path, 'w') as fh:
            fh.write(content)
        return path

    def test_missing_file(self):
        with self.assertRaises(CatalogError):
            catalog.load_catalog(os.path.join(self.dir, 'missing.yml'))

    def test_invalid_yaml(self):
        with self.assertRaises(CatalogError):
            catalog.load_catalog(self.write('techniques: [\n'))

    def test_no_techniques(self):
        with self.assertRaises(CatalogError):
            catalog.load_catalog(self.write('title: Empty\n'))

    def test_entry_without_number(self):
        with self.assertRaises(CatalogError):
            catalog.load_catalog(self.write('techniques:\n  - title: No number\n'))

    def test_minimal(self):
        path = self.write('title: Small\n'
                          'categories: [Storage]\n'
                          'techniques:\n'
                          '  - number: 2\n'
                          '    title: Second\n'
                          '    category: Storage\n'
                          '    description: Two\n'
                          '  - number: 1\n'
                          '    title: First\n'
                          '    category: Storage\n'
                          '    description: One\n')

        loaded = catalog.load_catalog(path)

        self.assertEqual(['First', 'Second'], [t.title for t in loaded])
        self.assertIsNone(loaded.techniques[0].example)


class TestRender(unittest.TestCase):
    def test_rendered_document_is_valid(self):
        text = catalog.render_markdown(catalog.load_catalog())
        self.assertEqual([], check_document(text))

    def test_rendered_sections(self):
        loaded = catalog.load_catalog()
        sections = parse_document(catalog.render_markdown(loaded))

        self.assertEqual([t.title for t in loaded], [s.title for s in sections])
        self.assertEqual([t.description for t in loaded], [s.description for s in sections])

    def test_example_languages(self):
        sections = parse_document(catalog.render_markdown(catalog.load_catalog()))
        blocks = {s.number: [language for language, _ in s.blocks] for s in sections}

        self.assertEqual(['json'], blocks[7])
        self.assertEqual(['python'], blocks[12])
        self.assertEqual(['python'], blocks[21])
        self.assertEqual(['python'], blocks[24])
        self.assertEqual(['json'], blocks[25])
        self.assertEqual([], blocks[1])
