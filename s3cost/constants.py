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

import os

########################
# Path functions
def find_dir(dir_):
    return os.path.dirname(os.path.realpath(dir_))

def path(*args):
    return os.path.realpath(os.path.join(*args))

cur_dir = find_dir(__file__)
REPO_ROOT = path(cur_dir, '..')

def repo_path(*args):
    return path(REPO_ROOT, *args)

CATALOG_FILE = path(cur_dir, 'recommendations.yml')
DOCUMENT_FILE = repo_path('docs', 'S3_COST_OPTIMIZATION.md')


########################
# Storage Classes

# Values accepted by PutObject / upload_file ExtraArgs['StorageClass']
UPLOAD_STORAGE_CLASSES = (
    'STANDARD',
    'REDUCED_REDUNDANCY',
    'STANDARD_IA',
    'ONEZONE_IA',
    'INTELLIGENT_TIERING',
    'GLACIER',
    'DEEP_ARCHIVE',
    'OUTPOSTS',
    'GLACIER_IR',
    'EXPRESS_ONEZONE',
)

# Values accepted as a Lifecycle Transition StorageClass
TRANSITION_STORAGE_CLASSES = (
    'GLACIER',
    'STANDARD_IA',
    'ONEZONE_IA',
    'INTELLIGENT_TIERING',
    'DEEP_ARCHIVE',
    'GLACIER_IR',
)

# S3 storage pricing in USD per GB-month (us-east-1 baseline rates)
STORAGE_CLASS_PRICING = {
    'STANDARD': 0.023,
    'REDUCED_REDUNDANCY': 0.024,
    'STANDARD_IA': 0.0125,
    'ONEZONE_IA': 0.01,
    'INTELLIGENT_TIERING': 0.023,
    'GLACIER_IR': 0.004,
    'GLACIER': 0.0036,
    'DEEP_ARCHIVE': 0.00099,
    'OUTPOSTS': 0.068,
    'EXPRESS_ONEZONE': 0.16,
}

# Storage classes that bill small objects as if they were this size
MINIMUM_BILLABLE_SIZE = {
    'STANDARD_IA': 128 * 1024,
    'ONEZONE_IA': 128 * 1024,
    'GLACIER_IR': 128 * 1024,
}

GB = 1024 ** 3


########################
# Lifecycle limits
MAX_LIFECYCLE_RULES = 1000
MAX_RULE_ID_LENGTH = 255


########################
# Batch Operations formats
MANIFEST_FORMAT = 'S3BatchOperations_CSV_20180820'
REPORT_FORMAT = 'Report_CSV_20180820'
REPORT_SCOPES = ('AllTasks', 'FailedTasksOnly')
