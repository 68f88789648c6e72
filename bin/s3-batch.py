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
from s3cost import batch
from s3cost import configuration
from s3cost import console
from s3cost import constants as const
from s3cost.exceptions import S3CostError
from s3cost.utils import confirm_or_cancel, parse_tags

def submit(args, operation, description):
    """Build, confirm, and submit a job over the manifest in the account's bucket"""
    cfg = args.account_config
    for key in ('REPORT_BUCKET', 'BATCH_ROLE'):
        if cfg.get(key) is None:
            raise S3CostError("Account configuration must define {} to run batch jobs".format(key))

    session = cfg.require_session()
    etag = batch.manifest_etag(session, cfg.BUCKET, args.manifest)
    request = batch.job_request(cfg.account_id,
                                operation,
                                batch.manifest(cfg.BUCKET, args.manifest, etag),
                                batch.report(cfg.REPORT_BUCKET),
                                cfg.BATCH_ROLE,
                                description,
                                priority = args.priority)

    console.print_json(request)
    confirm_or_cancel("Submit batch job?", args.yes)

    job_id = batch.submit_job(session, request)
    console.ok("Submitted job {}".format(job_id))
    return job_id

class BatchParserMixin(object):
    def add_job_arguments(self):
        self.parser.add_account()
        self.parser.add_yes()
        self.parser.add_argument('manifest',
                                 help = "Key of the CSV manifest in the account's bucket")
        self.parser.add_argument('--priority', '-p',
                                 type = int,
                                 default = 10,
                                 help = 'Job priority (default: 10)')

class BatchTagCLI(BatchParserMixin, configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Replace the tags of every object in a manifest",
                                   help = 'Submit a tagging job')
        self.add_job_arguments()
        self.parser.add_argument('tags',
                                 nargs = '+',
                                 metavar = 'KEY=VALUE',
                                 help = 'Tags to set')
        return self.parser

    def run(self, args):
        tags = parse_tags(args.tags)
        submit(args,
               batch.tagging_operation(tags),
               'Tag objects in {} with {}'.format(args.manifest, tags))

class BatchCopyCLI(BatchParserMixin, configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Copy every object in a manifest into a new storage class",
                                   help = 'Submit a storage class copy job')
        self.add_job_arguments()
        self.parser.add_argument('--storage-class', '-s',
                                 choices = const.UPLOAD_STORAGE_CLASSES,
                                 metavar = 'CLASS',
                                 required = True,
                                 help = 'Target storage class')
        self.parser.add_argument('--target-bucket', '-t',
                                 help = "Bucket to copy into (default: the account's bucket)")
        return self.parser

    def run(self, args):
        target = args.target_bucket or args.account_config.BUCKET
        submit(args,
               batch.copy_operation(target, args.storage_class),
               'Copy objects in {} to {}'.format(args.manifest, args.storage_class))

class BatchStatusCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Display the status of a batch job",
                                   help = 'Show batch job status')
        self.parser.add_account()
        self.parser.add_argument('job_id')
        return self.parser

    def run(self, args):
        cfg = args.account_config
        job = batch.describe_job(cfg.require_session(), cfg.account_id, args.job_id)
        progress = job.get('ProgressSummary', {})
        console.info("Job {} is {}".format(args.job_id, job['Status']))
        console.table([[progress.get('TotalNumberOfTasks', 0),
                        progress.get('NumberOfTasksSucceeded', 0),
                        progress.get('NumberOfTasksFailed', 0)]],
                      ['Tasks', 'Succeeded', 'Failed'])

class BatchCLI(configuration.NestedS3CostCLI):
    COMMANDS = {
        'tag': BatchTagCLI,
        'copy': BatchCopyCLI,
        'status': BatchStatusCLI,
    }

    PARSER_ARGS = {
        'description': 'Command for working with S3 Batch Operations jobs',
    }

    SUBPARSER_ARGS = {
        'dest': 'batch_command',
        'metavar': 'command',
        'help': 'batch commands',
    }

if __name__ == '__main__':
    cli = BatchCLI()
    cli.main()
