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
from s3cost import constants as const
from s3cost import objects
from s3cost.aws import s3_object_exists
from s3cost.utils import confirm_or_cancel, parse_tags

class UploadCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Upload a file to the account's bucket",
                                   help = 'Upload a file')
        self.parser.add_account()
        self.parser.add_yes()
        self.parser.add_argument('path',
                                 help = 'Local file to upload')
        self.parser.add_argument('--key', '-k',
                                 help = 'Object key (default: the file name)')
        self.parser.add_argument('--storage-class', '-s',
                                 choices = const.UPLOAD_STORAGE_CLASSES,
                                 metavar = 'CLASS',
                                 help = 'Storage class of the object')
        self.parser.add_argument('--compress', '-z',
                                 action = 'store_true',
                                 help = 'gzip the file before uploading')
        return self.parser

    def run(self, args):
        cfg = args.account_config
        session = cfg.require_session()
        key = objects.object_key(args.path, args.key, args.compress)
        if s3_object_exists(session, cfg.BUCKET, key):
            confirm_or_cancel("Overwrite s3://{}/{}?".format(cfg.BUCKET, key), args.yes)

        objects.upload_file(session,
                            args.path,
                            cfg.BUCKET,
                            key = key,
                            storage_class = args.storage_class,
                            compress = args.compress,
                            kms_key = cfg.get('KMS_KEY'))
        console.ok("Uploaded s3://{}/{}".format(cfg.BUCKET, key))

class TagCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Set the tags of an object in the account's bucket",
                                   help = 'Tag an object')
        self.parser.add_account()
        self.parser.add_argument('key',
                                 help = 'Object key')
        self.parser.add_argument('tags',
                                 nargs = '+',
                                 metavar = 'KEY=VALUE',
                                 help = 'Tags to set')
        self.parser.add_argument('--merge', '-m',
                                 action = 'store_true',
                                 help = 'Keep existing tags that are not being set')
        return self.parser

    def run(self, args):
        cfg = args.account_config
        tags = objects.tag_object(cfg.require_session(),
                                  cfg.BUCKET,
                                  args.key,
                                  parse_tags(args.tags),
                                  merge = args.merge)
        console.ok("Tagged s3://{}/{} with {}".format(cfg.BUCKET, args.key, tags))

class MarkDeleteCLI(configuration.S3CostCLI):
    def get_parser(self, ParentParser=configuration.S3CostParser):
        self.parser = ParentParser(description = "Tag an object so the MarkedForDeletion " +
                                   "Lifecycle rule expires it",
                                   help = 'Mark an object for deletion')
        self.parser.add_account()
        self.parser.add_argument('key',
                                 help = 'Object key')
        return self.parser

    def run(self, args):
        cfg = args.account_config
        objects.mark_for_deletion(cfg.require_session(), cfg.BUCKET, args.key)
        console.ok("Marked s3://{}/{} for deletion in {} days".format(
                   cfg.BUCKET, args.key, cfg.MARKED_FOR_DELETION_DAYS))

if __name__ == '__main__':
    cli = UploadCLI()
    cli.main()
