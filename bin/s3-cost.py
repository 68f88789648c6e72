#!/usr/bin/env python3

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

import importlib

import alter_path
from s3cost import configuration

def ref(module, cli):
    mod = importlib.import_module(module)
    return mod.__dict__[cli]

class S3CostManageCLI(configuration.NestedS3CostCLI):
    COMMANDS = {
        'config': ref('s3-config', 'ConfigCLI'),
        'lifecycle': ref('s3-lifecycle', 'LifecycleCLI'),
        'policy': ref('s3-policy', 'PolicyCLI'),
        'upload': ref('s3-objects', 'UploadCLI'),
        'tag': ref('s3-objects', 'TagCLI'),
        'mark-delete': ref('s3-objects', 'MarkDeleteCLI'),
        'batch': ref('s3-batch', 'BatchCLI'),
        'audit': ref('s3-audit', 'AuditCLI'),
        'multipart': ref('s3-audit', 'MultipartCLI'),
        'docs': ref('s3-docs', 'DocsCLI'),
    }

    PARSER_ARGS = {
        'description': 'Command for reducing the cost of S3 storage',
    }

    SUBPARSER_ARGS = {
        'dest': 'command',
        'metavar': 'command',
        'help': 's3-cost commands',
    }

    def add_common_arguments(self, parser):
        parser.add_argument('--verbose', '-v',
                            action = 'store_true',
                            help = 'Log the AWS calls being made')

if __name__ == '__main__':
    cli = S3CostManageCLI()
    cli.main()
