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

import alter_path
from s3cost import catalog
from s3cost import configuration
from s3cost import console
from s3cost import constants as const
from s3cost import docs
from s3cost.utils import open_

class DocsRenderCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Render the cost optimization reference document " +
                                   "from the technique catalog",
                                   help = 'Render the reference document')
        self.parser.add_argument('--catalog', '-c',
                                 default = const.CATALOG_FILE,
                                 help = 'Technique catalog YAML file')
        self.parser.add_argument('--output', '-o',
                                 default = const.DOCUMENT_FILE,
                                 help = "Output Markdown file, '-' for stdout")
        return self.parser

    def run(self, args):
        techniques = catalog.load_catalog(args.catalog)
        if not catalog.verify_catalog(techniques):
            return 1

        with open_(args.output, 'w') as fh:
            fh.write(catalog.render_markdown(techniques))

        if args.output != '-':
            console.ok("Wrote {}".format(args.output))

class DocsCheckCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Check the reference document: every technique is " +
                                   "described and every example payload is valid",
                                   help = 'Check the reference document')
        self.parser.add_argument('document',
                                 nargs = '?',
                                 default = const.DOCUMENT_FILE,
                                 help = "Markdown file to check, '-' for stdin")
        return self.parser

    def run(self, args):
        with open_(args.document) as fh:
            problems = docs.check_document(fh.read())

        for problem in problems:
            console.error(problem)

        if problems:
            return 1
        console.ok("{} is valid".format(args.document))
        return 0

class DocsCLI(configuration.NestedS3CostCLI):
    COMMANDS = {
        'render': DocsRenderCLI,
        'check': DocsCheckCLI,
    }

    PARSER_ARGS = {
        'description': 'Command for the cost optimization reference document',
    }

    SUBPARSER_ARGS = {
        'dest': 'docs_command',
        'metavar': 'command',
        'help': 'docs commands',
    }

if __name__ == '__main__':
    cli = DocsCLI()
    cli.main()
