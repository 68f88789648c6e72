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

"""Building and submitting S3 Batch Operations jobs.

A job runs one operation over every object listed in a CSV manifest stored
in S3 and writes a completion report to a second bucket.
"""

import uuid
import logging

from . import constants as const
from .aws import bucket_arn
from .exceptions import ValidationError
from .objects import tag_set

log = logging.getLogger(__name__)

def manifest(bucket, key, etag, fields=('Bucket', 'Key')):
    """Describe the CSV manifest listing the objects to operate on

    Args:
        bucket (str): Bucket holding the manifest
        key (str): Manifest object key
        etag (str): ETag of the manifest object, without quotes
        fields (list[str]): CSV columns in the manifest

    Returns:
        dict: Manifest argument for create_job
    """
    fields = list(fields)
    if fields[:2] != ['Bucket', 'Key'] or len(fields) > 3 or \
       (len(fields) == 3 and fields[2] != 'VersionId'):
        raise ValidationError("Manifest fields must be Bucket, Key and optionally VersionId")

    return {
        'Spec': {
            'Format': const.MANIFEST_FORMAT,
            'Fields': fields,
        },
        'Location': {
            'ObjectArn': bucket_arn(bucket, key),
            'ETag': etag.strip('"'),
        }
    }

def report(bucket, prefix='batch-reports', scope='AllTasks', enabled=True):
    if scope not in const.REPORT_SCOPES:
        raise ValidationError("Report scope must be one of {}".format(', '.join(const.REPORT_SCOPES)))

    return {
        'Bucket': bucket_arn(bucket),
        'Format': const.REPORT_FORMAT,
        'Enabled': enabled,
        'Prefix': prefix,
        'ReportScope': scope,
    }

def tagging_operation(tags):
    """Replace the tag set of every object in the manifest"""
    return {
        'S3PutObjectTagging': {
            'TagSet': tag_set(tags)
        }
    }

def copy_operation(target_bucket, storage_class):
    """Copy every object in the manifest into the given storage class"""
    if storage_class not in const.UPLOAD_STORAGE_CLASSES:
        raise ValidationError("'{}' is not a valid storage class".format(storage_class))

    return {
        'S3PutObjectCopy': {
            'TargetResource': bucket_arn(target_bucket),
            'StorageClass': storage_class,
            'MetadataDirective': 'COPY',
        }
    }

def job_request(account_id, operation, manifest, report, role_arn, description,
                priority=10, confirmation_required=False):
    """Build the full create_job request

    Args:
        account_id (str): AWS account that owns the job
        operation (dict): Result of tagging_operation() or copy_operation()
        manifest (dict): Result of manifest()
        report (dict): Result of report()
        role_arn (str): IAM role S3 assumes to run the job
        description (str): Human readable job description
        priority (int): Relative job priority, higher runs first
        confirmation_required (bool): If the job waits for confirmation before running

    Returns:
        dict: Keyword arguments for s3control.create_job
    """
    if len(operation) != 1:
        raise ValidationError("A job runs exactly one operation")
    if priority < 0:
        raise ValidationError("Job priority must be non-negative")

    return {
        'AccountId': str(account_id),
        'ConfirmationRequired': confirmation_required,
        'Operation': operation,
        'Report': report,
        'ClientRequestToken': str(uuid.uuid4()),
        'Manifest': manifest,
        'Description': description,
        'Priority': priority,
        'RoleArn': role_arn,
    }

def manifest_etag(session, bucket, key):
    client = session.client('s3')
    resp = client.head_object(Bucket=bucket, Key=key)
    return resp['ETag'].strip('"')

def account_id(session):
    """Lookup the AWS account ID of the session's credentials"""
    client = session.client('sts')
    return client.get_caller_identity()['Account']

def submit_job(session, request):
    """Submit a Batch Operations job

    Returns:
        str: The JobId of the new job
    """
    log.debug("Submitting batch job '%s'", request['Description'])
    client = session.client('s3control')
    resp = client.create_job(**request)
    return resp['JobId']

def describe_job(session, account_id, job_id):
    client = session.client('s3control')
    resp = client.describe_job(AccountId=str(account_id), JobId=job_id)
    return resp['Job']
