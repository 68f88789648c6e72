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

"""Storage analysis and cost estimation for a bucket."""

import datetime
import logging

from . import constants as const
from .aws import get_all
from .exceptions import ValidationError

log = logging.getLogger(__name__)

# Objects smaller than this are billed at the minimum size in the IA classes
SMALL_OBJECT_SIZE = 128 * 1024

def _empty():
    return {'count': 0, 'bytes': 0, 'small_count': 0, 'small_bytes': 0}

def storage_class_breakdown(session, bucket, prefix=''):
    """Count objects and bytes per storage class

    Args:
        session (Session): Boto3 session
        bucket (str): Bucket to analyze
        prefix (str): Only include keys with this prefix

    Returns:
        dict: {storage_class: {'count', 'bytes', 'small_count', 'small_bytes'}}
    """
    client = session.client('s3')
    objects = get_all(client.list_objects_v2, 'Contents',
                      'ContinuationToken', 'NextContinuationToken') \
                     (Bucket=bucket, Prefix=prefix)

    rtn = {}
    for obj in objects:
        cls = obj.get('StorageClass', 'STANDARD')
        stats = rtn.setdefault(cls, _empty())
        stats['count'] += 1
        stats['bytes'] += obj['Size']
        if obj['Size'] < SMALL_OBJECT_SIZE:
            stats['small_count'] += 1
            stats['small_bytes'] += obj['Size']

    log.debug("Analyzed %d objects in s3://%s/%s", len(objects), bucket, prefix)
    return rtn

def _billed_bytes(stats, storage_class):
    minimum = const.MINIMUM_BILLABLE_SIZE.get(storage_class)
    if minimum is None:
        return stats['bytes']
    return stats['bytes'] - stats['small_bytes'] + (stats['small_count'] * minimum)

def _price(storage_class):
    try:
        return const.STORAGE_CLASS_PRICING[storage_class]
    except KeyError:
        raise ValidationError("No pricing for storage class '{}'".format(storage_class))

def monthly_cost(breakdown):
    """Estimate the monthly storage cost in USD of a storage_class_breakdown()"""
    total = 0.0
    for cls, stats in breakdown.items():
        total += _billed_bytes(stats, cls) / const.GB * _price(cls)
    return total

def transition_savings(breakdown, target_class):
    """Estimate the monthly savings of moving every object into target_class

    Note: Only storage cost is estimated, transition request and retrieval
          charges are not included

    Returns:
        dict: {'current', 'projected', 'savings'} in USD per month
    """
    target_price = _price(target_class)

    current = 0.0
    projected = 0.0
    for cls, stats in breakdown.items():
        if cls == target_class:
            continue
        current += _billed_bytes(stats, cls) / const.GB * _price(cls)
        projected += _billed_bytes(stats, target_class) / const.GB * target_price

    return {
        'current': current,
        'projected': projected,
        'savings': current - projected,
    }

def incomplete_multipart_uploads(session, bucket, older_than_days=7, now=None):
    """Locate multipart uploads that were started but never completed

    Parts of an incomplete upload are billed as storage until aborted.

    Args:
        session (Session): Boto3 session
        bucket (str): Bucket to search
        older_than_days (int): Only return uploads initiated this many days ago
        now (optional[datetime]): Current time, for testing

    Returns:
        list[dict]: Uploads with 'Key', 'UploadId', and 'Initiated'
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    cutoff = now - datetime.timedelta(days=older_than_days)

    client = session.client('s3')
    kwargs = {'Bucket': bucket}
    uploads = []
    while True:
        resp = client.list_multipart_uploads(**kwargs)
        uploads.extend(resp.get('Uploads', []))

        if not resp.get('IsTruncated'):
            break
        kwargs['KeyMarker'] = resp['NextKeyMarker']
        kwargs['UploadIdMarker'] = resp['NextUploadIdMarker']

    return [upload for upload in uploads if upload['Initiated'] <= cutoff]

def abort_multipart_uploads(session, bucket, uploads):
    """Abort the given multipart uploads, freeing their stored parts

    Returns:
        int: Number of uploads aborted
    """
    client = session.client('s3')
    for upload in uploads:
        log.debug("Aborting upload %s of s3://%s/%s", upload['UploadId'], bucket, upload['Key'])
        client.abort_multipart_upload(Bucket=bucket,
                                      Key=upload['Key'],
                                      UploadId=upload['UploadId'])
    return len(uploads)
