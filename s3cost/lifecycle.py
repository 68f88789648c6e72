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

"""Builders and validation for S3 Lifecycle configuration documents.

The documents produced here use the PutBucketLifecycleConfiguration wire
format and can be passed directly to boto3 or dumped as JSON. Example:

    config = configuration(tiering_rules('logs/'),
                           abort_multipart_rule(7))
    apply_lifecycle(session, 'my-bucket', config)
"""

import json
import datetime
import logging

from botocore.exceptions import ClientError

from . import constants as const
from .aws import error_code, list_buckets
from .exceptions import ValidationError
from .tags import TAG_DELETE_KEY, TAG_DELETE_VALUE

log = logging.getLogger(__name__)

VALID_STATUS = ('Enabled', 'Disabled')
FILTER_KEYS = ('Prefix', 'Tag', 'And', 'ObjectSizeGreaterThan', 'ObjectSizeLessThan')
ACTION_KEYS = ('Transitions',
               'Expiration',
               'NoncurrentVersionTransitions',
               'NoncurrentVersionExpiration',
               'AbortIncompleteMultipartUpload')

# Minimum object age before S3 accepts a transition into these classes
MINIMUM_TRANSITION_DAYS = {
    'STANDARD_IA': 30,
    'ONEZONE_IA': 30,
}

DATE_FORMAT = '%Y-%m-%dT00:00:00.000Z'

def parse_date(value):
    """Parse an ISO-8601 date or timestamp used by a lifecycle action.

    S3 requires lifecycle dates to be at midnight UTC.

    Args:
        value (str|date|datetime): Date to parse

    Returns:
        date: The calendar day the action takes effect

    Raises:
        ValidationError: If the value is not ISO-8601 or not midnight UTC
    """
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, datetime.date):
        return value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            dt = datetime.datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError("Date '{}' is not ISO-8601".format(value))
    else:
        raise ValidationError("Date '{}' is not a date".format(value))

    if dt.tzinfo is not None:
        if dt.utcoffset() != datetime.timedelta(0):
            raise ValidationError("Date '{}' is not in UTC".format(value))
    if (dt.hour, dt.minute, dt.second, dt.microsecond) != (0, 0, 0, 0):
        raise ValidationError("Date '{}' is not at midnight UTC".format(value))
    return dt.date()

def lifecycle_date(value):
    """Normalize a date into the ISO-8601 string used in lifecycle documents"""
    return parse_date(value).strftime(DATE_FORMAT)

def transition(when, storage_class):
    """Create a single Transition action

    Args:
        when (int|str|date): Days after creation, or the date of the transition
        storage_class (str): Target storage class

    Returns:
        dict: Transition action
    """
    if storage_class not in const.TRANSITION_STORAGE_CLASSES:
        raise ValidationError("'{}' is not a valid transition storage class".format(storage_class))

    if isinstance(when, bool):
        raise ValidationError("Transition time '{}' is not days or a date".format(when))
    elif isinstance(when, int):
        return {'Days': when, 'StorageClass': storage_class}
    else:
        return {'Date': lifecycle_date(when), 'StorageClass': storage_class}

def transition_rule(rule_id, prefix='', transitions=(), expiration_days=None, status='Enabled'):
    """Create a rule that moves objects under a prefix between storage classes

    Args:
        rule_id (str): Unique ID of the rule
        prefix (str): Key prefix the rule applies to, '' for the whole bucket
        transitions (list[tuple]): (days or date, storage class) pairs
        expiration_days (optional[int]): Days after creation to delete objects
        status (str): 'Enabled' or 'Disabled'

    Returns:
        dict: Lifecycle rule
    """
    rule = {
        'ID': rule_id,
        'Filter': {'Prefix': prefix},
        'Status': status,
    }

    if transitions:
        rule['Transitions'] = [transition(when, cls) for when, cls in transitions]

    if expiration_days is not None:
        rule['Expiration'] = {'Days': expiration_days}

    return rule

def lifecycle_example(rule_id='ArchiveOldLogs', prefix='logs/', date='2027-01-01',
                      storage_class='GLACIER', expiration_days=3650):
    """The illustrative Lifecycle configuration quoted in the reference document

    One rule with a prefix filter, a single dated transition and an
    expiration day count.
    """
    return configuration(transition_rule(rule_id,
                                         prefix=prefix,
                                         transitions=[(date, storage_class)],
                                         expiration_days=expiration_days))

def tiering_rules(prefix='', ia_days=30, glacier_days=90, expiration_days=365, rule_id=None):
    """Standard tiering ladder: STANDARD_IA, then GLACIER, then expiration"""
    if not (ia_days < glacier_days < expiration_days):
        raise ValidationError("Tiering days must increase: {} < {} < {}".format(
                              ia_days, glacier_days, expiration_days))

    if rule_id is None:
        rule_id = 'Tiering-' + (prefix.strip('/') or 'all')

    return transition_rule(rule_id,
                           prefix=prefix,
                           transitions=[(ia_days, 'STANDARD_IA'),
                                        (glacier_days, 'GLACIER')],
                           expiration_days=expiration_days)

def abort_multipart_rule(days=7, prefix=''):
    return {
        'ID': 'AbortIncompleteMultipartUploads',
        'Filter': {'Prefix': prefix},
        'Status': 'Enabled',
        'AbortIncompleteMultipartUpload': {'DaysAfterInitiation': days},
    }

def noncurrent_version_rule(days=30, transition_days=None, storage_class='GLACIER_IR', prefix=''):
    """Expire previous object versions, optionally archiving them first"""
    rule = {
        'ID': 'NoncurrentVersions',
        'Filter': {'Prefix': prefix},
        'Status': 'Enabled',
        'NoncurrentVersionExpiration': {'NoncurrentDays': days},
    }

    if transition_days is not None:
        if storage_class not in const.TRANSITION_STORAGE_CLASSES:
            raise ValidationError("'{}' is not a valid transition storage class".format(storage_class))
        rule['NoncurrentVersionTransitions'] = [{
            'NoncurrentDays': transition_days,
            'StorageClass': storage_class,
        }]

    return rule

def delete_marker_rule():
    """Remove delete markers that no longer have any noncurrent versions"""
    return {
        'ID': 'ExpiredDeleteMarkers',
        'Filter': {'Prefix': ''},
        'Status': 'Enabled',
        'Expiration': {'ExpiredObjectDeleteMarker': True},
    }

def marked_for_deletion_rule(days=3):
    """Expire objects tagged for deletion with objects.mark_for_deletion()"""
    return {
        'ID': 'MarkedForDeletion',
        'Filter': {
            'Tag': {
                'Key': TAG_DELETE_KEY,
                'Value': TAG_DELETE_VALUE,
            }
        },
        'Status': 'Enabled',
        'Expiration': {'Days': days},
    }

def configuration(*rules):
    return {'Rules': list(rules)}

def _check_days(rule_id, what, days, minimum=0):
    if isinstance(days, bool) or not isinstance(days, int) or days < minimum:
        raise ValidationError("Rule '{}' {} days must be an integer >= {}".format(
                              rule_id, what, minimum))

def _validate_transitions(rule_id, transitions):
    if not isinstance(transitions, list):
        raise ValidationError("Rule '{}' Transitions is not a list".format(rule_id))

    kinds = set()
    last = None
    for item in transitions:
        _check_object(rule_id, 'transition', item)
        cls = item.get('StorageClass')
        if cls not in const.TRANSITION_STORAGE_CLASSES:
            raise ValidationError("Rule '{}' has invalid storage class '{}'".format(rule_id, cls))

        has_date = 'Date' in item
        has_days = 'Days' in item
        if has_date == has_days:
            raise ValidationError("Rule '{}' transition needs exactly one of Date or Days".format(rule_id))

        if has_date:
            when = parse_date(item['Date'])
            kinds.add('Date')
        else:
            _check_days(rule_id, 'transition', item['Days'],
                        MINIMUM_TRANSITION_DAYS.get(cls, 0))
            when = item['Days']
            kinds.add('Days')

        if len(kinds) > 1:
            raise ValidationError("Rule '{}' mixes Date and Days transitions".format(rule_id))
        last = when if last is None else max(last, when)

    return last

def _check_object(rule_id, what, value):
    if not isinstance(value, dict):
        raise ValidationError("Rule '{}' {} is not an object".format(rule_id, what))

def _validate_rule(rule):
    if not isinstance(rule, dict):
        raise ValidationError("Lifecycle rule {!r} is not an object".format(rule))

    rule_id = rule.get('ID', '')
    if not isinstance(rule_id, str):
        raise ValidationError("Rule ID {!r} is not a string".format(rule_id))
    if len(rule_id) > const.MAX_RULE_ID_LENGTH:
        raise ValidationError("Rule ID '{}' is longer than {} characters".format(
                              rule_id, const.MAX_RULE_ID_LENGTH))

    if rule.get('Status') not in VALID_STATUS:
        raise ValidationError("Rule '{}' has invalid status '{}'".format(rule_id, rule.get('Status')))

    if 'Filter' in rule:
        filter_ = rule['Filter']
        _check_object(rule_id, 'filter', filter_)
        extra = [k for k in filter_ if k not in FILTER_KEYS]
        if extra:
            raise ValidationError("Rule '{}' has unknown filter keys {}".format(rule_id, extra))
        if len(filter_) > 1:
            raise ValidationError("Rule '{}' filter must use And to combine conditions".format(rule_id))
        tag_filtered = 'Tag' in filter_ or 'Tags' in filter_.get('And', {})
    elif 'Prefix' in rule:
        tag_filtered = False
    else:
        raise ValidationError("Rule '{}' has no Filter".format(rule_id))

    if not any(k in rule for k in ACTION_KEYS):
        raise ValidationError("Rule '{}' has no actions".format(rule_id))

    last_transition = None
    if 'Transitions' in rule:
        last_transition = _validate_transitions(rule_id, rule['Transitions'])

    expiration = rule.get('Expiration')
    if expiration is not None:
        _check_object(rule_id, 'expiration', expiration)
        keys = [k for k in ('Date', 'Days', 'ExpiredObjectDeleteMarker') if k in expiration]
        if len(keys) != 1:
            raise ValidationError("Rule '{}' expiration needs exactly one of Date, Days, ExpiredObjectDeleteMarker".format(rule_id))

        if 'Days' in expiration:
            _check_days(rule_id, 'expiration', expiration['Days'], 1)
            if isinstance(last_transition, int) and expiration['Days'] <= last_transition:
                raise ValidationError("Rule '{}' expires before its last transition".format(rule_id))
        elif 'Date' in expiration:
            when = parse_date(expiration['Date'])
            if isinstance(last_transition, datetime.date) and when <= last_transition:
                raise ValidationError("Rule '{}' expires before its last transition".format(rule_id))
        elif tag_filtered:
            raise ValidationError("Rule '{}' cannot expire delete markers with a tag filter".format(rule_id))

    abort = rule.get('AbortIncompleteMultipartUpload')
    if abort is not None:
        _check_object(rule_id, 'abort', abort)
        if tag_filtered:
            raise ValidationError("Rule '{}' cannot abort multipart uploads with a tag filter".format(rule_id))
        _check_days(rule_id, 'abort', abort.get('DaysAfterInitiation'), 1)

    noncurrent = rule.get('NoncurrentVersionExpiration')
    if noncurrent is not None:
        _check_object(rule_id, 'noncurrent expiration', noncurrent)
        _check_days(rule_id, 'noncurrent expiration', noncurrent.get('NoncurrentDays'), 1)

    for item in rule.get('NoncurrentVersionTransitions', []):
        _check_object(rule_id, 'noncurrent transition', item)
        if item.get('StorageClass') not in const.TRANSITION_STORAGE_CLASSES:
            raise ValidationError("Rule '{}' has invalid storage class '{}'".format(
                                  rule_id, item.get('StorageClass')))
        _check_days(rule_id, 'noncurrent transition', item.get('NoncurrentDays'))

def validate_configuration(config):
    """Verify a Lifecycle configuration before it is sent to S3

    Args:
        config (dict): Lifecycle configuration with a 'Rules' list

    Raises:
        ValidationError: On the first problem located
    """
    if not isinstance(config, dict):
        raise ValidationError("Lifecycle configuration is not an object")

    rules = config.get('Rules')
    if not isinstance(rules, list):
        raise ValidationError("Lifecycle configuration Rules is not a list")
    if not rules:
        raise ValidationError("Lifecycle configuration has no rules")
    if len(rules) > const.MAX_LIFECYCLE_RULES:
        raise ValidationError("Lifecycle configuration has more than {} rules".format(
                              const.MAX_LIFECYCLE_RULES))

    seen = set()
    for rule in rules:
        rule_id = rule.get('ID')
        if rule_id is not None:
            if rule_id in seen:
                raise ValidationError("Duplicate rule ID '{}'".format(rule_id))
            seen.add(rule_id)
        _validate_rule(rule)

def load_configuration(fh):
    """Read and validate a JSON Lifecycle configuration

    Args:
        fh (file): Open file holding the JSON document

    Raises:
        ValidationError: If the file is not JSON or not a valid configuration
    """
    try:
        config = json.load(fh)
    except ValueError as ex:
        raise ValidationError("Lifecycle configuration is not valid JSON: {}".format(ex))

    validate_configuration(config)
    return config

def apply_lifecycle(session, bucket, config):
    """Replace the Lifecycle configuration of a bucket

    Note: S3 replaces the whole configuration, existing rules not included in
          `config` are removed
    """
    validate_configuration(config)

    log.debug("Applying %d lifecycle rules to %s", len(config['Rules']), bucket)
    client = session.client('s3')
    client.put_bucket_lifecycle_configuration(Bucket=bucket,
                                              LifecycleConfiguration=config)

def get_lifecycle(session, bucket):
    """Get the Lifecycle rules of a bucket

    Returns:
        list: The rules, or an empty list if the bucket has no configuration
    """
    client = session.client('s3')
    try:
        resp = client.get_bucket_lifecycle_configuration(Bucket=bucket)
    except ClientError as ex:
        if error_code(ex) == 'NoSuchLifecycleConfiguration':
            return []
        raise
    return resp.get('Rules', [])

def buckets_without_lifecycle(session):
    return [bucket for bucket in list_buckets(session)
            if not get_lifecycle(session, bucket)]
