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
from s3cost import audit
from s3cost import configuration
from s3cost import console
from s3cost import constants as const
from s3cost.utils import confirm_or_cancel, format_bytes

class AuditCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Break down the objects in the account's bucket " +
                                   "by storage class and estimate their monthly cost",
                                   help = 'Audit storage classes and cost')
        self.parser.add_account()
        self.parser.add_argument('--prefix',
                                 default = '',
                                 help = 'Only include keys with this prefix')
        self.parser.add_argument('--target-class', '-t',
                                 choices = sorted(const.STORAGE_CLASS_PRICING),
                                 metavar = 'CLASS',
                                 help = 'Estimate savings of moving all objects to this storage class')
        return self.parser

    def run(self, args):
        cfg = args.account_config
        breakdown = audit.storage_class_breakdown(cfg.require_session(), cfg.BUCKET, args.prefix)
        if not breakdown:
            console.warning("No objects found in s3://{}/{}".format(cfg.BUCKET, args.prefix))
            return

        rows = []
        for cls in sorted(breakdown):
            stats = breakdown[cls]
            rows.append([cls,
                         stats['count'],
                         format_bytes(stats['bytes']),
                         "${:.2f}".format(audit.monthly_cost({cls: stats}))])
        console.table(rows, ['Storage Class', 'Objects', 'Size', 'Monthly Cost'])
        console.info("Estimated monthly storage cost: ${:.2f}".format(audit.monthly_cost(breakdown)))

        if args.target_class:
            est = audit.transition_savings(breakdown, args.target_class)
            console.info("Moving to {}: ${:.2f} -> ${:.2f} (saves ${:.2f} per month)".format(
                         args.target_class, est['current'], est['projected'], est['savings']))

class MultipartListCLI(configuration.S3CostCLI):
    DESCRIPTION = "List incomplete multipart uploads in the account's bucket"
    HELP = "List incomplete multipart uploads"

    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = self.DESCRIPTION,
                                   help = self.HELP)
        self.parser.add_account()
        self.parser.add_argument('--days', '-d',
                                 type = int,
                                 default = None,
                                 help = 'Minimum upload age in days (default: MULTIPART_ABORT_DAYS)')
        return self.parser

    def uploads(self, args):
        cfg = args.account_config
        days = args.days if args.days is not None else cfg.MULTIPART_ABORT_DAYS
        return audit.incomplete_multipart_uploads(cfg.require_session(), cfg.BUCKET, days)

    def run(self, args):
        uploads = self.uploads(args)
        if not uploads:
            console.ok("No incomplete multipart uploads")
            return
        console.table([[u['Key'], u['UploadId'], u['Initiated']] for u in uploads],
                      ['Key', 'Upload ID', 'Initiated'])

class MultipartAbortCLI(MultipartListCLI):
    DESCRIPTION = "Abort incomplete multipart uploads in the account's bucket"
    HELP = "Abort incomplete multipart uploads"

    def get_parser(self, ParentParser=configuration.S3CostParser):
        super().get_parser(ParentParser)
        self.parser.add_yes()
        return self.parser

    def run(self, args):
        uploads = self.uploads(args)
        if not uploads:
            console.ok("No incomplete multipart uploads")
            return

        cfg = args.account_config
        confirm_or_cancel("Abort {} multipart uploads in {}?".format(len(uploads), cfg.BUCKET),
                          args.yes)
        count = audit.abort_multipart_uploads(cfg.require_session(), cfg.BUCKET, uploads)
        console.ok("Aborted {} uploads".format(count))

class MultipartCLI(configuration.NestedS3CostCLI):
    COMMANDS = {
        'list': MultipartListCLI,
        'abort': MultipartAbortCLI,
    }

    PARSER_ARGS = {
        'description': 'Command for cleaning up incomplete multipart uploads',
    }

    SUBPARSER_ARGS = {
        'dest': 'multipart_command',
        'metavar': 'command',
        'help': 'multipart commands',
    }

if __name__ == '__main__':
    cli = AuditCLI()
    cli.main()
