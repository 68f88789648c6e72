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

class S3CostError(Exception):
    pass

class CanceledError(S3CostError):
    def __init__(self):
        super().__init__("Action Canceled")

class ValidationError(S3CostError):
    """A document or argument does not match the format S3 expects"""
    pass

class CatalogError(S3CostError):
    pass

class MissingResourceError(S3CostError):
    def __init__(self, resource_type, resource_name):
        msg = "{} {} does not exist".format(resource_type, resource_name)
        super().__init__(msg)

class MissingSessionError(S3CostError):
    def __init__(self, account):
        msg = "No AWS credentials available for account '{}'".format(account)
        super().__init__(msg)
