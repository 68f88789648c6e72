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

import argparse
import textwrap

import alter_path
from s3cost import configuration

class ConfigCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        extended_help = textwrap.dedent("""Verify and print the account configuration file, including the
        default value of any optional setting that the file doesn't define.
        """)
        self.parser = ParentParser(description = 'Command for interacting with account configuration files',
                                   formatter_class = argparse.RawDescriptionHelpFormatter,
                                   epilog = extended_help)
        self.parser.add_account()
        return self.parser

    def run(self, args):
        args.account_config.display()

if __name__ == '__main__':
    cli = ConfigCLI()
    cli.main()
