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
from s3cost import policy
from s3cost.utils import confirm_or_cancel

def merged_policy(current, statements):
    """Add the statements to the current policy, skipping any already present"""
    if current is None:
        return policy.policy(*statements)

    for sid in policy.merge_statements(current, statements):
        console.info("Statement '{}' already present".format(sid))
    return current

class PolicyShowCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Display the bucket policy of the account's bucket",
                                   help = 'Show the bucket policy')
        self.parser.add_account()
        return self.parser

    def run(self, args):
        cfg = args.account_config
        doc = policy.get_policy(cfg.require_session(), cfg.BUCKET)
        if doc is None:
            console.warning("Bucket {} has no bucket policy".format(cfg.BUCKET))
            return 1
        console.print_json(doc)

class PolicyApplyCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Add statements denying unencrypted uploads " +
                                   "to the account's bucket policy",
                                   help = 'Enforce encryption with the bucket policy')
        self.parser.add_account()
        self.parser.add_yes()
        self.parser.add_argument('--allow-http',
                                 action = 'store_true',
                                 help = "Don't deny requests made without TLS")
        return self.parser

    def run(self, args):
        cfg = args.account_config
        session = cfg.require_session()

        current = policy.get_policy(session, cfg.BUCKET)
        statements = policy.encryption_statements(cfg.BUCKET,
                                                  kms_key = cfg.get('KMS_KEY'),
                                                  transport = not args.allow_http)
        doc = merged_policy(current, statements)
        policy.validate_policy(doc)

        console.print_json(doc)
        confirm_or_cancel("Replace the bucket policy of {}?".format(cfg.BUCKET), args.yes)

        policy.apply_policy(session, cfg.BUCKET, doc)
        console.ok("Applied bucket policy to {}".format(cfg.BUCKET))

class PolicyCLI(configuration.NestedS3CostCLI):
    COMMANDS = {
        'show': PolicyShowCLI,
        'apply': PolicyApplyCLI,
    }

    PARSER_ARGS = {
        'description': 'Command for working with bucket policies',
    }

    SUBPARSER_ARGS = {
        'dest': 'policy_command',
        'metavar': 'command',
        'help': 'policy commands',
    }

if __name__ == '__main__':
    cli = PolicyCLI()
    cli.main()
