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

import unittest
import os, sys

# Allow unit test files to import the target library modules
cur_dir = os.path.dirname(os.path.realpath(__file__))
parent_dir = os.path.normpath(os.path.join(cur_dir, '..', '..'))
sys.path.append(parent_dir)

import json
from unittest import mock

from s3cost import policy
from s3cost.exceptions import ValidationError


class TestPolicyBuilders(unittest.TestCase):
    def test_deny_unencrypted_uploads(self):
        expected = {
            'Sid': 'DenyUnencryptedUploads',
            'Effect': 'Deny',
            'Principal': '*',
            'Action': 's3:PutObject',
            'Resource': 'arn:aws:s3:::bucket/*',
            'Condition': {
                'StringNotEquals': {
                    's3:x-amz-server-side-encryption': 'AES256'
                }
            }
        }

        self.assertEqual(expected, policy.deny_unencrypted_uploads('bucket'))

    def test_deny_unencrypted_uploads_kms(self):
        statement = policy.deny_unencrypted_uploads('bucket', 'aws:kms')
        self.assertEqual('aws:kms',
                         statement['Condition']['StringNotEquals']['s3:x-amz-server-side-encryption'])

    def test_allow_statement_objects(self):
        statement = policy.allow_statement('bucket', ['s3:GetObject'], {'AWS': 'arn:aws:iam::1:root'})
        self.assertEqual('arn:aws:s3:::bucket/*', statement['Resource'])
        self.assertEqual('Allow', statement['Effect'])

    def test_allow_statement_bucket_only(self):
        statement = policy.allow_statement('bucket', ['s3:ListBucket'], {'AWS': '*'}, bucket_only=True)
        self.assertEqual('arn:aws:s3:::bucket', statement['Resource'])

    def test_append_duplicate_sid(self):
        doc = policy.policy(policy.deny_unencrypted_uploads('bucket'))
        with self.assertRaises(ValidationError):
            policy.append_statement(doc, policy.deny_unencrypted_uploads('bucket'))

    def test_append_statement(self):
        doc = policy.policy(policy.deny_unencrypted_uploads('bucket'))
        policy.append_statement(doc, policy.deny_insecure_transport('bucket'))
        self.assertEqual(2, len(doc['Statement']))
        policy.validate_policy(doc)

    def test_append_to_single_statement(self):
        # AWS may return a policy with one statement that is not in a list
        doc = {'Version': '2012-10-17', 'Statement': policy.deny_insecure_transport('bucket')}

        policy.append_statement(doc, policy.deny_unencrypted_uploads('bucket'))

        self.assertEqual(['DenyInsecureTransport', 'DenyUnencryptedUploads'],
                         [s['Sid'] for s in doc['Statement']])
        policy.validate_policy(doc)

    def test_merge_statements(self):
        doc = {'Version': '2012-10-17', 'Statement': policy.deny_insecure_transport('bucket')}

        skipped = policy.merge_statements(doc, policy.encryption_statements('bucket'))

        self.assertEqual(['DenyInsecureTransport'], skipped)
        self.assertEqual(2, len(doc['Statement']))

    def test_encryption_statements(self):
        statements = policy.encryption_statements('bucket', transport=False)
        self.assertEqual([policy.deny_unencrypted_uploads('bucket')], statements)

    def test_encryption_statements_kms(self):
        key = 'arn:aws:kms:us-east-1:123456789012:key/1234abcd'
        statements = policy.encryption_statements('bucket', kms_key=key)

        self.assertEqual(['DenyUnencryptedUploads', 'DenyOtherKMSKeys', 'DenyInsecureTransport'],
                         [s['Sid'] for s in statements])
        self.assertEqual('aws:kms',
                         statements[0]['Condition']['StringNotEquals']['s3:x-amz-server-side-encryption'])
        self.assertEqual(key,
                         statements[1]['Condition']['StringNotEquals']['s3:x-amz-server-side-encryption-aws-kms-key-id'])
        policy.validate_policy(policy.policy(*statements))


class TestValidatePolicy(unittest.TestCase):
    def statement(self, **kwargs):
        statement = policy.deny_unencrypted_uploads('bucket')
        statement.update(kwargs)
        return statement

    def assertInvalid(self, doc):
        with self.assertRaises(ValidationError):
            policy.validate_policy(doc)

    def test_valid(self):
        doc = policy.policy(self.statement())
        policy.validate_policy(doc)
        self.assertTrue(policy.has_deny_condition(doc, 'StringNotEquals'))

    def test_no_deny_condition(self):
        doc = policy.policy(policy.allow_statement('bucket', ['s3:GetObject'], '*'))
        self.assertFalse(policy.has_deny_condition(doc))

    def test_version(self):
        doc = policy.policy(self.statement())
        doc['Version'] = '2020-01-01'
        self.assertInvalid(doc)

    def test_legacy_version(self):
        doc = policy.policy(self.statement())
        doc['Version'] = '2008-10-17'
        policy.validate_policy(doc)

    def test_single_statement(self):
        policy.validate_policy({'Version': '2012-10-17', 'Statement': self.statement()})

    def test_statement_not_object(self):
        self.assertInvalid({'Version': '2012-10-17', 'Statement': ['x']})

    def test_policy_not_object(self):
        self.assertInvalid(['x'])

    def test_action_not_string(self):
        self.assertInvalid(policy.policy(self.statement(Action=[42])))

    def test_no_statements(self):
        self.assertInvalid(policy.policy())

    def test_effect(self):
        self.assertInvalid(policy.policy(self.statement(Effect='Maybe')))

    def test_missing_principal(self):
        statement = self.statement()
        del statement['Principal']
        self.assertInvalid(policy.policy(statement))

    def test_non_s3_action(self):
        self.assertInvalid(policy.policy(self.statement(Action='ec2:RunInstances')))

    def test_unknown_operator(self):
        self.assertInvalid(policy.policy(self.statement(Condition={'StringSortOfEquals': {'k': 'v'}})))

    def test_operator_qualifiers(self):
        doc = policy.policy(self.statement(Condition={
            'ForAnyValue:StringLike': {'s3:prefix': 'home/*'},
            'StringNotEqualsIfExists': {'s3:x-amz-server-side-encryption': 'AES256'},
        }))
        policy.validate_policy(doc)


class TestPolicyAWS(unittest.TestCase):
    def test_apply_policy(self):
        session = mock.MagicMock()
        doc = policy.policy(policy.deny_unencrypted_uploads('bucket'))

        policy.apply_policy(session, 'bucket', doc)

        client = session.client.return_value
        client.put_bucket_policy.assert_called_once_with(Bucket='bucket', Policy=json.dumps(doc))

    def test_get_policy(self):
        session = mock.MagicMock()
        doc = policy.policy(policy.deny_unencrypted_uploads('bucket'))
        session.client.return_value.get_bucket_policy.return_value = {'Policy': json.dumps(doc)}

        self.assertEqual(doc, policy.get_policy(session, 'bucket'))
