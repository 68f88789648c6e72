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
from s3cost import configuration
from s3cost import console
from s3cost import lifecycle
from s3cost.utils import confirm_or_cancel, open_

def account_lifecycle(account_config, prefix=''):
    """Build the Lifecycle configuration for an account from its settings"""
    cfg = account_config
    return lifecycle.configuration(
        lifecycle.tiering_rules(prefix,
                                cfg.IA_DAYS,
                                cfg.GLACIER_DAYS,
                                cfg.EXPIRATION_DAYS),
        lifecycle.abort_multipart_rule(cfg.MULTIPART_ABORT_DAYS),
        lifecycle.noncurrent_version_rule(cfg.NONCURRENT_DAYS),
        lifecycle.delete_marker_rule(),
        lifecycle.marked_for_deletion_rule(cfg.MARKED_FOR_DELETION_DAYS),
    )

class LifecycleShowCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Display the current Lifecycle rules of the account's bucket",
                                   help = 'Show current Lifecycle rules')
        self.parser.add_account()
        return self.parser

    def run(self, args):
        cfg = args.account_config
        rules = lifecycle.get_lifecycle(cfg.require_session(), cfg.BUCKET)
        if not rules:
            console.warning("Bucket {} has no Lifecycle configuration".format(cfg.BUCKET))
            return 1
        console.print_json(lifecycle.configuration(*rules))

class LifecycleGenerateCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Print the Lifecycle configuration built from the " +
                                   "account's tiering settings",
                                   help = 'Generate Lifecycle rules')
        self.parser.add_account()
        self.parser.add_argument('--prefix',
                                 default = '',
                                 help = 'Key prefix to tier (default: whole bucket)')
        return self.parser

    def run(self, args):
        console.print_json(account_lifecycle(args.account_config, args.prefix))

class LifecycleApplyCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Replace the Lifecycle configuration of the account's bucket",
                                   help = 'Apply Lifecycle rules')
        self.parser.add_account()
        self.parser.add_yes()
        self.parser.add_argument('--prefix',
                                 default = '',
                                 help = 'Key prefix to tier (default: whole bucket)')
        self.parser.add_argument('--file', '-f',
                                 help = 'JSON Lifecycle configuration to apply instead of the generated one')
        return self.parser

    def run(self, args):
        cfg = args.account_config
        if args.file:
            with open_(args.file) as fh:
                config = lifecycle.load_configuration(fh)
        else:
            config = account_lifecycle(cfg, args.prefix)
            lifecycle.validate_configuration(config)
        console.print_json(config)
        confirm_or_cancel("Replace the Lifecycle configuration of {}?".format(cfg.BUCKET),
                          args.yes)

        lifecycle.apply_lifecycle(cfg.require_session(), cfg.BUCKET, config)
        console.ok("Applied {} rules to {}".format(len(config['Rules']), cfg.BUCKET))

class LifecycleMissingCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "List the buckets in the account without Lifecycle rules",
                                   help = 'Find buckets without Lifecycle rules')
        self.parser.add_account()
        return self.parser

    def run(self, args):
        buckets = lifecycle.buckets_without_lifecycle(args.account_config.require_session())
        for bucket in buckets:
            print(bucket)
        return 1 if buckets else 0

class LifecycleCLI(configuration.NestedS3CostCLI):
    COMMANDS = {
        'show': LifecycleShowCLI,
        'generate': LifecycleGenerateCLI,
        'apply': LifecycleApplyCLI,
        'missing': LifecycleMissingCLI,
    }

    PARSER_ARGS = {
        'description': 'Command for working with bucket Lifecycle rules',
    }

    SUBPARSER_ARGS = {
        'dest': 'lifecycle_command',
        'metavar': 'command',
        'help': 'lifecycle commands',
    }

if __name__ == '__main__':
    cli = LifecycleCLI()
    cli.main()
