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

"""Builders and validation for S3 bucket policy documents."""

import json
import logging

from botocore.exceptions import ClientError

from .aws import bucket_arn, error_code
from .exceptions import ValidationError

log = logging.getLogger(__name__)

POLICY_VERSION = '2012-10-17'

# Versions AWS accepts on a stored bucket policy
POLICY_VERSIONS = (POLICY_VERSION, '2008-10-17')

CONDITION_OPERATORS = (
    'StringEquals', 'StringNotEquals',
    'StringEqualsIgnoreCase', 'StringNotEqualsIgnoreCase',
    'StringLike', 'StringNotLike',
    'NumericEquals', 'NumericNotEquals',
    'NumericLessThan', 'NumericLessThanEquals',
    'NumericGreaterThan', 'NumericGreaterThanEquals',
    'DateEquals', 'DateNotEquals',
    'DateLessThan', 'DateLessThanEquals',
    'DateGreaterThan', 'DateGreaterThanEquals',
    'Bool', 'BinaryEquals',
    'IpAddress', 'NotIpAddress',
    'ArnEquals', 'ArnLike', 'ArnNotEquals', 'ArnNotLike',
    'Null',
)

def _as_list(value):
    return value if isinstance(value, list) else [value]

def _resource(bucket, bucket_only):
    if bucket_only:
        return bucket_arn(bucket)
    # Actions apply to the bucket's objects.
    return bucket_arn(bucket, '*')

def deny_unencrypted_uploads(bucket, algorithm='AES256', sid='DenyUnencryptedUploads'):
    """Statement rejecting PutObject calls without the given server side encryption

    Args:
        bucket (str): Bucket name
        algorithm (str): 'AES256' or 'aws:kms'
        sid (str): Statement ID

    Returns:
        dict: Policy statement
    """
    return {
        'Sid': sid,
        'Effect': 'Deny',
        'Principal': '*',
        'Action': 's3:PutObject',
        'Resource': _resource(bucket, False),
        'Condition': {
            'StringNotEquals': {
                's3:x-amz-server-side-encryption': algorithm
            }
        }
    }

def deny_other_kms_keys(bucket, kms_key, sid='DenyOtherKMSKeys'):
    """Statement rejecting PutObject calls encrypted with any KMS key except `kms_key`

    Note: The condition compares the key ARN, so `kms_key` must be the full ARN
          of the key and not an alias
    """
    return {
        'Sid': sid,
        'Effect': 'Deny',
        'Principal': '*',
        'Action': 's3:PutObject',
        'Resource': _resource(bucket, False),
        'Condition': {
            'StringNotEquals': {
                's3:x-amz-server-side-encryption-aws-kms-key-id': kms_key
            }
        }
    }

def deny_insecure_transport(bucket, sid='DenyInsecureTransport'):
    return {
        'Sid': sid,
        'Effect': 'Deny',
        'Principal': '*',
        'Action': 's3:*',
        'Resource': [_resource(bucket, True), _resource(bucket, False)],
        'Condition': {
            'Bool': {
                'aws:SecureTransport': 'false'
            }
        }
    }

def allow_statement(bucket, actions, principal, bucket_only=False, sid=None):
    """Statement granting permissions on an S3 bucket.

    Args:
        bucket (str): Bucket name
        actions (list): List of strings for the types of actions to allow.
        principal (dict): Dictionary identifying the entity given permission to the S3 bucket.
        bucket_only (Optional[bool]): If True, don't append /* to the bucket ARN.  Defaults to False.
        sid (optional[str]): Statement ID
    """
    statement = {
        'Effect': 'Allow',
        'Principal': principal,
        'Action': actions,
        'Resource': _resource(bucket, bucket_only),
    }
    if sid is not None:
        statement['Sid'] = sid
    return statement

def policy(*statements):
    return {
        'Version': POLICY_VERSION,
        'Statement': list(statements),
    }

def append_statement(doc, statement):
    """Add an additional statement to a policy document

    A single statement object, as AWS may return it, is converted into a list.

    Raises:
        ValidationError: If a statement with the same Sid already exists
    """
    doc['Statement'] = _as_list(doc.get('Statement', []))

    sid = statement.get('Sid')
    if sid is not None:
        for existing in doc['Statement']:
            if isinstance(existing, dict) and existing.get('Sid') == sid:
                raise ValidationError("Statement '{}' already exists".format(sid))
    doc['Statement'].append(statement)
    return doc

def merge_statements(doc, statements):
    """Add statements to an existing policy, skipping those whose Sid is
    already present

    Returns:
        list[str]: Sids of the skipped statements
    """
    skipped = []
    for statement in statements:
        try:
            append_statement(doc, statement)
        except ValidationError:
            skipped.append(statement['Sid'])
    return skipped

def encryption_statements(bucket, kms_key=None, transport=True):
    """The statements enforcing encrypted uploads, and optionally TLS, on a bucket

    Args:
        bucket (str): Bucket name
        kms_key (optional[str]): ARN of the only KMS key uploads may use,
                                 SSE-S3 is required when not given
        transport (bool): If requests without TLS should be denied
    """
    algorithm = 'aws:kms' if kms_key else 'AES256'
    statements = [deny_unencrypted_uploads(bucket, algorithm)]
    if kms_key:
        statements.append(deny_other_kms_keys(bucket, kms_key))
    if transport:
        statements.append(deny_insecure_transport(bucket))
    return statements

def _valid_operator(operator):
    for prefix in ('ForAllValues:', 'ForAnyValue:'):
        if operator.startswith(prefix):
            operator = operator[len(prefix):]
    if operator.endswith('IfExists') and operator != 'IfExists':
        operator = operator[:-len('IfExists')]
    return operator in CONDITION_OPERATORS

def _validate_statement(idx, statement):
    if not isinstance(statement, dict):
        raise ValidationError("Statement {} is not an object".format(idx))

    name = statement.get('Sid', str(idx))

    if statement.get('Effect') not in ('Allow', 'Deny'):
        raise ValidationError("Statement '{}' has invalid Effect '{}'".format(name, statement.get('Effect')))

    for required in (('Principal', 'NotPrincipal'),
                     ('Action', 'NotAction'),
                     ('Resource', 'NotResource')):
        if not any(k in statement for k in required):
            raise ValidationError("Statement '{}' is missing {}".format(name, required[0]))

    for key in ('Action', 'NotAction'):
        for action in _as_list(statement.get(key, [])):
            if not isinstance(action, str) or (action != '*' and not action.startswith('s3:')):
                raise ValidationError("Statement '{}' has non S3 action '{}'".format(name, action))

    for key in ('Resource', 'NotResource'):
        for resource in _as_list(statement.get(key, [])):
            if isinstance(resource, str) and not (resource == '*' or resource.startswith('arn:')):
                raise ValidationError("Statement '{}' has invalid resource '{}'".format(name, resource))

    condition = statement.get('Condition', {})
    if not isinstance(condition, dict):
        raise ValidationError("Statement '{}' Condition is not an object".format(name))
    for operator, values in condition.items():
        if not _valid_operator(operator):
            raise ValidationError("Statement '{}' has unknown condition operator '{}'".format(name, operator))
        if not isinstance(values, dict) or not values:
            raise ValidationError("Statement '{}' condition '{}' has no keys".format(name, operator))

def validate_policy(doc):
    """Verify a bucket policy document before it is sent to S3

    Raises:
        ValidationError: On the first problem located
    """
    if not isinstance(doc, dict):
        raise ValidationError("Policy is not an object")

    if doc.get('Version') not in POLICY_VERSIONS:
        raise ValidationError("Policy Version must be one of {}".format(', '.join(POLICY_VERSIONS)))

    statements = _as_list(doc.get('Statement', []))
    if not statements:
        raise ValidationError("Policy has no statements")

    for idx, statement in enumerate(statements):
        _validate_statement(idx, statement)

def has_deny_condition(doc, operator='StringNotEquals'):
    """If the policy contains a Deny statement gated on the given condition operator"""
    for statement in _as_list(doc.get('Statement', [])):
        if statement.get('Effect') == 'Deny' and operator in statement.get('Condition', {}):
            return True
    return False

def apply_policy(session, bucket, doc):
    validate_policy(doc)

    log.debug("Applying bucket policy with %d statements to %s", len(doc['Statement']), bucket)
    client = session.client('s3')
    client.put_bucket_policy(Bucket=bucket, Policy=json.dumps(doc))

def get_policy(session, bucket):
    """Get the bucket policy of a bucket

    Returns:
        (dict|None): The parsed policy or None if the bucket doesn't have one
    """
    client = session.client('s3')
    try:
        resp = client.get_bucket_policy(Bucket=bucket)
    except ClientError as ex:
        if error_code(ex) == 'NoSuchBucketPolicy':
            return None
        raise
    return json.loads(resp['Policy'])
