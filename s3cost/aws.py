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

"""Library for common methods that are used when talking to S3 and related
AWS services.

Library contains a set of AWS lookup methods for locating AWS data and other
related helper functions.
"""

import logging

from botocore.exceptions import ClientError

log = logging.getLogger(__name__)

def get_all(to_wrap, key, token_in='NextToken', token_out=None):
    """Utility helper method for requesting all results from AWS

    Usage:
        items = get_all(session.client('s3').list_objects_v2, 'Contents',
                        'ContinuationToken', 'NextContinuationToken') \
                (Bucket='my-bucket')
        items # => List of objects returned by list_objects_v2

    Args:
        to_wrap (method): AWS client method to execute to get results
        key (str): The dictionary key in the `to_wrap` response where results
                   are stored
        token_in (str): The request argument used to continue a listing
        token_out (optional[str]): The response key holding the next token,
                                   defaults to `token_in`

    Returns:
        function: Function that takes arguments for `to_wrap` and will continue to call
                  `to_wrap` until there is not a valid token in the response. The
                  result is a list of values that were stored under `key` in the original
                  response from AWS
    """
    if token_out is None:
        token_out = token_in

    def wrapper(*args, **kwargs):
        rtn = []
        while True:
            resp = to_wrap(*args, **kwargs)
            rtn.extend(resp.get(key, []))

            if resp.get(token_out) is not None:
                kwargs[token_in] = resp[token_out]
            else:
                return rtn
    return wrapper

def error_code(ex):
    """Get the AWS error code from a botocore ClientError

    Args:
        ex (ClientError): Exception raised by a boto3 client call

    Returns:
        (str|None): The error code, such as 'NoSuchBucket'
    """
    return ex.response.get('Error', {}).get('Code')

def list_buckets(session):
    """List the names of all buckets owned by the caller"""
    client = session.client('s3')
    resp = client.list_buckets()
    return [bucket['Name'] for bucket in resp['Buckets']]

def s3_bucket_exists(session, name):
    """Test for existence of an S3 bucket.

    Note that this method can only test for the existence of buckets owned by
    the user.

    Args:
        session (Session): Boto3 session used to lookup information in AWS.
        name (string): Name of S3 bucket.

    Returns:
        (bool): True if bucket exists.
    """
    return name in list_buckets(session)

def s3_object_exists(session, bucket, key):
    client = session.client('s3')
    try:
        client.head_object(Bucket=bucket, Key=key)
        return True
    except ClientError as ex:
        if error_code(ex) in ('404', 'NoSuchKey', 'NotFound'):
            return False
        raise

def bucket_arn(bucket, key=None):
    """Build the ARN for a bucket or an object in the bucket"""
    arn = 'arn:aws:s3:::' + bucket
    if key is not None:
        arn += '/' + key
    return arn
