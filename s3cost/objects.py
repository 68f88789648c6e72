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

"""Uploading and tagging individual S3 objects."""

import os
import gzip
import shutil
import logging
import tempfile

from . import constants as const
from . import tags as tag_limits
from .exceptions import ValidationError, MissingResourceError

log = logging.getLogger(__name__)

def compress_file(path, dest=None, level=9):
    """Gzip a local file

    Args:
        path (str): File to compress
        dest (optional[str]): Compressed file name, defaults to `path` + '.gz'
        level (int): gzip compression level (1-9)

    Returns:
        str: Path to the compressed file
    """
    if not os.path.isfile(path):
        raise MissingResourceError("File", path)

    if dest is None:
        dest = path + '.gz'

    with open(path, 'rb') as src, gzip.open(dest, 'wb', compresslevel=level) as dst:
        shutil.copyfileobj(src, dst)

    log.debug("Compressed %s (%d bytes) to %s (%d bytes)",
              path, os.path.getsize(path), dest, os.path.getsize(dest))
    return dest

def object_key(path, key=None, compress=False):
    """The key upload_file() stores `path` under

    Args:
        path (str): Local file
        key (optional[str]): Explicit key, returned unchanged
        compress (bool): If the file will be gzipped, adding '.gz' to the default key

    Returns:
        str: Object key
    """
    if key is not None:
        return key
    key = os.path.basename(path)
    if compress:
        key += '.gz'
    return key

def upload_file(session, path, bucket, key=None, storage_class=None, compress=False,
                encryption='AES256', kms_key=None):
    """Upload a local file, optionally compressing it first

    The compressed copy is written to a temporary file and removed after the
    upload, the local file is never modified.

    Args:
        session (Session): Boto3 session
        path (str): Local file to upload
        bucket (str): Target bucket
        key (optional[str]): Object key, defaults to object_key(path, compress=compress)
        storage_class (optional[str]): Storage class of the new object
        compress (bool): If the file should be gzipped before upload
        encryption (optional[str]): Server side encryption, 'AES256' or 'aws:kms'
        kms_key (optional[str]): KMS key ID or ARN, implies 'aws:kms' encryption

    Returns:
        str: The object key
    """
    if storage_class is not None and storage_class not in const.UPLOAD_STORAGE_CLASSES:
        raise ValidationError("'{}' is not a valid storage class".format(storage_class))

    extra = {}
    if storage_class is not None:
        extra['StorageClass'] = storage_class
    if kms_key is not None:
        extra['ServerSideEncryption'] = 'aws:kms'
        extra['SSEKMSKeyId'] = kms_key
    elif encryption is not None:
        extra['ServerSideEncryption'] = encryption

    key = object_key(path, key, compress)

    compressed = None
    if compress:
        fd, compressed = tempfile.mkstemp(suffix='.gz')
        os.close(fd)
        extra['ContentEncoding'] = 'gzip'

    try:
        if compressed is not None:
            upload = compress_file(path, compressed)
        else:
            upload = path

        log.debug("Uploading %s to s3://%s/%s", upload, bucket, key)
        client = session.client('s3')
        client.upload_file(upload, bucket, key, ExtraArgs=extra)
    finally:
        if compressed is not None:
            os.remove(compressed)

    return key

def tag_set(tags):
    """Convert a dictionary into an S3 TagSet, enforcing the S3 tag limits

    Args:
        tags (dict): Tag key / value pairs

    Returns:
        list[dict]: TagSet
    """
    if len(tags) > tag_limits.MAX_TAGS:
        raise ValidationError("An object can have at most {} tags".format(tag_limits.MAX_TAGS))

    rtn = []
    for key, value in tags.items():
        key, value = str(key), str(value)
        if not key or len(key) > tag_limits.MAX_TAG_KEY_LENGTH:
            raise ValidationError("Tag key '{}' must be 1-{} characters".format(
                                  key, tag_limits.MAX_TAG_KEY_LENGTH))
        if len(value) > tag_limits.MAX_TAG_VALUE_LENGTH:
            raise ValidationError("Tag value for '{}' is longer than {} characters".format(
                                  key, tag_limits.MAX_TAG_VALUE_LENGTH))
        if key.startswith(tag_limits.RESERVED_TAG_PREFIX):
            raise ValidationError("Tag key '{}' uses the reserved 'aws:' prefix".format(key))
        rtn.append({'Key': key, 'Value': value})
    return rtn

def tags_from_tag_set(tag_set_):
    return {tag['Key']: tag['Value'] for tag in tag_set_}

def get_tags(session, bucket, key):
    client = session.client('s3')
    resp = client.get_object_tagging(Bucket=bucket, Key=key)
    return tags_from_tag_set(resp['TagSet'])

def tag_object(session, bucket, key, tags, merge=False):
    """Attach tags to an object

    Note: S3 replaces the full tag set of the object, use `merge` to keep
          the existing tags that are not being updated

    Args:
        session (Session): Boto3 session
        bucket (str): Bucket name
        key (str): Object key
        tags (dict): Tags to set
        merge (bool): If the existing tags should be kept

    Returns:
        dict: The tags now on the object
    """
    if merge:
        current = get_tags(session, bucket, key)
        current.update(tags)
        tags = current

    log.debug("Tagging s3://%s/%s with %s", bucket, key, tags)
    client = session.client('s3')
    client.put_object_tagging(Bucket=bucket,
                              Key=key,
                              Tagging={'TagSet': tag_set(tags)})
    return tags

def mark_for_deletion(session, bucket, key):
    """Tag an object so the MarkedForDeletion lifecycle rule expires it"""
    return tag_object(session, bucket, key,
                      {tag_limits.TAG_DELETE_KEY: tag_limits.TAG_DELETE_VALUE},
                      merge=True)
