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

"""The catalog of S3 cost optimization techniques and the reference document
rendered from it.

The catalog data lives in recommendations.yml next to this file.
"""

import sys
import json
from collections import namedtuple

import yaml

from . import console
from . import constants as const
from . import lifecycle
from . import policy
from .exceptions import CatalogError

TECHNIQUE_COUNT = 25

EXAMPLE_KINDS = ('lifecycle', 'policy', 'upload', 'tagging', 'batch')

EXAMPLE_BUCKET = 'example-bucket'

Technique = namedtuple('Technique', ['number', 'title', 'category', 'description', 'example'])

UPLOAD_EXAMPLE = """\
from boto3.session import Session
from s3cost.objects import upload_file

session = Session(region_name='us-east-1')
upload_file(session, 'access.log', 'example-bucket',
            key='logs/access.log.gz', compress=True)
"""

TAGGING_EXAMPLE = """\
from boto3.session import Session
from s3cost.objects import tag_object

session = Session(region_name='us-east-1')
tag_object(session, 'example-bucket', 'logs/access.log.gz',
           {'project': 'analytics', 'environment': 'production'})
"""

BATCH_EXAMPLE = """\
from boto3.session import Session
from s3cost import batch

session = Session(region_name='us-east-1')
account_id = batch.account_id(session)
etag = batch.manifest_etag(session, 'example-bucket', 'manifests/archive.csv')

request = batch.job_request(
    account_id,
    batch.copy_operation('example-bucket', 'GLACIER_IR'),
    batch.manifest('example-bucket', 'manifests/archive.csv', etag),
    batch.report('example-reports'),
    'arn:aws:iam::{}:role/S3BatchOperations'.format(account_id),
    'Archive objects listed in manifests/archive.csv')
job_id = batch.submit_job(session, request)
"""

class Catalog(object):
    """The techniques, in number order, with the document title, introduction
    and category order
    """
    def __init__(self, title, introduction, categories, techniques):
        self.title = title
        self.introduction = introduction
        self.categories = categories
        self.techniques = sorted(techniques, key=lambda t: t.number)

    def __iter__(self):
        return iter(self.techniques)

    def __len__(self):
        return len(self.techniques)

    def by_category(self):
        """Techniques grouped by category, in category order"""
        return [(category, [t for t in self.techniques if t.category == category])
                for category in self.categories]

def load_catalog(path=None):
    """Load the technique catalog

    Args:
        path (optional[str]): Catalog YAML file, defaults to the bundled catalog

    Returns:
        Catalog: The loaded catalog

    Raises:
        CatalogError: If the file doesn't exist or cannot be parsed
    """
    if path is None:
        path = const.CATALOG_FILE

    try:
        with open(path, 'r') as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        raise CatalogError("Catalog file '{}' doesn't exist".format(path))
    except yaml.YAMLError as ex:
        raise CatalogError("Problem loading catalog file '{}': {}".format(path, ex))

    if not isinstance(data, dict) or not isinstance(data.get('techniques'), list):
        raise CatalogError("Catalog file '{}' has no techniques".format(path))

    techniques = []
    for item in data['techniques']:
        try:
            techniques.append(Technique(number = item['number'],
                                        title = (item.get('title') or '').strip(),
                                        category = item.get('category'),
                                        description = (item.get('description') or '').strip(),
                                        example = item.get('example')))
        except (KeyError, TypeError):
            raise CatalogError("Catalog entry {!r} has no number".format(item))

    return Catalog(data.get('title', ''),
                   (data.get('introduction') or '').strip(),
                   data.get('categories', []),
                   techniques)

def verify_catalog(catalog, fh=sys.stdout):
    """Check the catalog for problems, printing each one

    Returns:
        bool: If the catalog is valid
    """
    ret = True

    numbers = [t.number for t in catalog]
    if sorted(numbers) != list(range(1, TECHNIQUE_COUNT + 1)):
        console.error("Techniques must be numbered 1 through {}, found {}".format(
                      TECHNIQUE_COUNT, numbers), file=fh)
        ret = False

    for t in catalog:
        if not t.title:
            console.error("Technique {} has no title".format(t.number), file=fh)
            ret = False
        if not t.description:
            console.error("Technique {} has no description".format(t.number), file=fh)
            ret = False
        if t.category not in catalog.categories:
            console.error("Technique {} has unknown category '{}'".format(t.number, t.category), file=fh)
            ret = False
        if t.example is not None and t.example not in EXAMPLE_KINDS:
            console.error("Technique {} has unknown example '{}'".format(t.number, t.example), file=fh)
            ret = False

    return ret

def find(catalog, number):
    for t in catalog:
        if t.number == number:
            return t
    raise KeyError(number)

def example_block(kind):
    """The fenced code block illustrating a technique

    Returns:
        (str, str): The block language and body
    """
    if kind == 'lifecycle':
        return 'json', json.dumps(lifecycle.lifecycle_example(), indent=2)
    elif kind == 'policy':
        doc = policy.policy(policy.deny_unencrypted_uploads(EXAMPLE_BUCKET))
        return 'json', json.dumps(doc, indent=2)
    elif kind == 'upload':
        return 'python', UPLOAD_EXAMPLE.rstrip()
    elif kind == 'tagging':
        return 'python', TAGGING_EXAMPLE.rstrip()
    elif kind == 'batch':
        return 'python', BATCH_EXAMPLE.rstrip()
    else:
        raise CatalogError("Unknown example '{}'".format(kind))

def render_markdown(catalog):
    """Render the reference document as Markdown"""
    lines = ['# ' + catalog.title, '']
    if catalog.introduction:
        lines += [catalog.introduction, '']

    for category, techniques in catalog.by_category():
        if not techniques:
            continue
        lines += ['## ' + category, '']
        for t in techniques:
            lines += ['### {}. {}'.format(t.number, t.title), '', t.description, '']
            if t.example is not None:
                language, body = example_block(t.example)
                lines += ['```' + language, body, '```', '']

    return '\n'.join(lines)
