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
import sys
import glob
import logging
import itertools
import importlib.util
from argparse import ArgumentParser
from pprint import pformat

from boto3.session import Session
from botocore.exceptions import ClientError

from . import exceptions
from . import constants as const
from . import console

CONFIGS_GLOBS = [const.repo_path('config', '*.py'),
                 const.repo_path('config', 'custom', '*.py')]
CONFIGS_FMTS = [const.repo_path('config', '{}.py'),
                const.repo_path('config', 'custom', '{}.py')]

def valid_account(account_name):
    return account_name in list_accounts()

def list_accounts():
    return [os.path.basename(f)[:-3].replace('_','.')
            for f in itertools.chain(*[glob.glob(g) for g in CONFIGS_GLOBS])
            if not os.path.basename(f).startswith('__')]

def _load_module(name, path):
    spec = importlib.util.spec_from_file_location('s3cost_config_' + name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module

class S3CostConfiguration(object):
    """The settings for one AWS account / bucket pair, loaded from
    config/<name>.py or config/custom/<name>.py

    Values are read as attributes, falling back to the defaults for optional
    values. Example:

        config = S3CostConfiguration('example')
        config.BUCKET # => 'example-data-bucket'
        config.IA_DAYS # => 30 (default)
    """
    __REQUIRED_KEYS = [
        'REGION',
        'BUCKET',
    ]

    __OPTIONAL_KEYS = [
        'PROFILE',
        'ACCOUNT_ID',
        'REPORT_BUCKET',
        'BATCH_ROLE',
        'KMS_KEY',
    ]

    __DEFAULTS = {
        'IA_DAYS': 30,
        'GLACIER_DAYS': 90,
        'EXPIRATION_DAYS': 365,
        'MULTIPART_ABORT_DAYS': 7,
        'NONCURRENT_DAYS': 30,
        'MARKED_FOR_DELETION_DAYS': 3,
    }

    def __init__(self, account, session=None):
        self.account = account

        name = account.replace('.', '_')
        for fmt in CONFIGS_FMTS:
            path = fmt.format(name)
            if os.path.exists(path):
                try:
                    self._config = _load_module(name, path)
                except Exception as ex:
                    raise exceptions.S3CostError("Problem importing '{}': {}".format(path, ex))
                break
        else:
            raise ValueError("Cannot locate account configuration '{}'".format(self.account))

        if not self.verify():
            raise exceptions.S3CostError("Account config is not valid")

        if session is None:
            session = Session(profile_name = self.get('PROFILE'),
                              region_name = self._config.REGION)
            if session.get_credentials() is None:
                console.warning("Could not locate AWS credentials")
                session = None
        self.session = session

    def __getattr__(self, attr):
        if attr.startswith('_'):
            raise AttributeError(attr)
        if hasattr(self._config, attr):
            return getattr(self._config, attr)
        elif attr in self.__DEFAULTS:
            return self.__DEFAULTS[attr]
        else:
            msg = "'{}' object has no attribute '{}'".format(self.__class__.__name__,
                                                             attr)
            raise AttributeError(msg)

    def get(self, key, default=None):
        try:
            return self.__getattr__(key)
        except AttributeError:
            return default

    def __repr__(self):
        return "S3CostConfiguration('{}')".format(self.account)

    def require_session(self):
        """Get the boto3 session, raising an error if there are no credentials"""
        if self.session is None:
            raise exceptions.MissingSessionError(self.account)
        return self.session

    @property
    def account_id(self):
        """The configured ACCOUNT_ID or the account of the session's credentials"""
        account_id = self.get('ACCOUNT_ID')
        if account_id is None:
            from .batch import account_id as lookup
            account_id = lookup(self.require_session())
        return str(account_id)

    def verify(self, fh=sys.stdout):
        ret = True
        for key in self.__REQUIRED_KEYS:
            if not hasattr(self._config, key):
                console.error("Variable '{}' not defined".format(key), file=fh)
                ret = False

        known = self.__REQUIRED_KEYS + self.__OPTIONAL_KEYS + list(self.__DEFAULTS)
        for key in dir(self._config):
            if key not in known and not key.startswith('_'):
                console.warning("Extra variable '{}' defined".format(key), file=fh)

        return ret

    def display(self, fh = sys.stdout):
        for key in self.__REQUIRED_KEYS + self.__OPTIONAL_KEYS + list(self.__DEFAULTS):
            val = self.get(key)
            if val is not None:
                print("{} = {}".format(key, pformat(val)), file=fh)

class S3CostParser(ArgumentParser):
    """ArgumentParser that loads the account configuration named on the
    command line
    """

    def __init__(self, *args, **kwargs):
        if 'help' in kwargs:
            # 'help' is a valid keyword argument for subparsers, but not the initial parser
            del kwargs['help']

        super().__init__(*args, **kwargs)
        self._subparsers_ = {}

    def create_subparser(self, dest, **kwargs):
        """Start a group of subcommands, filled in with `add_subcommand()`

        Args:
            dest (str): Attribute holding the chosen subcommand name
            kwargs (dict): Passed through to `add_subparsers()`
        """
        subparser = self.add_subparsers(dest=dest,
                                        parser_class=S3CostParser,
                                        **kwargs)
        subparser.required = True

        self._subparsers_[dest] = subparser

    def add_subcommand(self, dest, subcommand):
        """Register a subcommand in the group created for `dest`

        Returns:
            function: Takes S3CostParser keyword arguments and returns the
                      parser for `subcommand`
        """
        def add_parser(**kwargs):
            # Subcommands without 'help' are hidden from --help
            if 'description' in kwargs and 'help' not in kwargs:
                kwargs['help'] = kwargs['description']
            return self._subparsers_[dest].add_parser(subcommand, **kwargs)
        return add_parser

    def add_account(self, help = "Name of the target account configuration"):
        """Adds the 'account_name' argument to the parser"""
        self.add_argument("account_name",
                          metavar = "account_name",
                          choices = list_accounts(),
                          help = help)

    def add_yes(self):
        self.add_argument("--yes", "-y",
                          action = "store_true",
                          help = "Don't prompt before making changes")

    def parse_args(self, *args, **kwargs):
        """Parse the arguments and, when an account was given, load its
        S3CostConfiguration into `account_config`
        """
        a = super().parse_args(*args, **kwargs)

        # Subcommand arguments are only on the namespace when that subcommand ran
        try:
            if 'account_name' in a:
                a.account_config = S3CostConfiguration(a.account_name)
            return a
        except exceptions.S3CostError as ex: # Config import or verification error
            self.error(str(ex))
        except ValueError as ex: # Invalid account name
            self.error(str(ex))

class S3CostCLI(object):
    """Base class for a command. Subclasses build their parser in
    `get_parser()` and do their work in `run()`.
    """
    def get_parser(self, ParentParser=S3CostParser):
        """Build the parser for this command

        Args:
            ParentParser: Parser factory. When the command is nested this is
                          the function returned by `S3CostParser.add_subcommand`

        Returns:
            S3CostParser
        """
        raise NotImplementedError()

    def run(self, args):
        """Execute the command

        Args:
            args (Namespace): Parsed arguments

        Returns:
            optional[int|bool]: Exit code, or success
        """
        raise NotImplementedError()

    def main(self, argv=None):
        """Parse `argv` (default sys.argv), run the command and exit"""
        console.init()
        parser = self.get_parser()
        args = parser.parse_args(argv)

        if getattr(args, 'verbose', False):
            logging.basicConfig(level=logging.DEBUG)

        try:
            ret = self.run(args)
        except exceptions.CanceledError as ex:
            console.warning(str(ex))
            sys.exit(1)
        except (exceptions.S3CostError, ClientError) as ex:
            console.error(str(ex))
            sys.exit(1)

        if type(ret) == int:
            sys.exit(ret)
        elif type(ret) == bool:
            sys.exit(0 if ret else 1)

class NestedS3CostCLI(S3CostCLI):
    """A command made of subcommands, each implemented by its own S3CostCLI

    Attributes:
        COMMANDS: Subcommand name to S3CostCLI class
        PARSER_ARGS: Keyword arguments for the S3CostParser
        SUBPARSER_ARGS: Keyword arguments for `S3CostParser.create_subparser`,
                        must include 'dest'
    """
    COMMANDS = {}
    PARSER_ARGS = {}
    SUBPARSER_ARGS = {}

    def __init__(self):
        self.dest = self.SUBPARSER_ARGS['dest']
        self.subcommands = {}
        for name, cli in self.COMMANDS.items():
            self.subcommands[name] = cli()

    def add_common_arguments(self, parser):
        """Add arguments shared by every subcommand

        Positional arguments added here come before the subcommand name
        """
        pass

    def get_parser(self, ParentParser=S3CostParser):
        self.parser = ParentParser(**self.PARSER_ARGS)
        self.add_common_arguments(self.parser)
        self.parser.create_subparser(**self.SUBPARSER_ARGS)
        for name, cli in self.subcommands.items():
            cli.get_parser(self.parser.add_subcommand(self.dest, name))
        return self.parser

    def run(self, args):
        return self.subcommands[getattr(args, self.dest)].run(args)
