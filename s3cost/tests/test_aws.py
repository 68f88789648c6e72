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

from unittest import mock

from botocore.exceptions import ClientError

from s3cost import aws


class TestGetAll(unittest.TestCase):
    def test_single_page(self):
        method = mock.Mock(return_value={'Items': [1, 2]})

        self.assertEqual([1, 2], aws.get_all(method, 'Items')(Arg='a'))
        method.assert_called_once_with(Arg='a')

    def test_token_names(self):
        method = mock.Mock(side_effect=[
            {'Contents': [1], 'NextContinuationToken': 'next'},
            {'Contents': [2, 3]},
        ])

        rtn = aws.get_all(method, 'Contents', 'ContinuationToken', 'NextContinuationToken')(Bucket='b')

        self.assertEqual([1, 2, 3], rtn)
        self.assertEqual(2, method.call_count)
        self.assertEqual({'Bucket': 'b', 'ContinuationToken': 'next'}, method.call_args[1])

    def test_missing_key(self):
        method = mock.Mock(return_value={})
        self.assertEqual([], aws.get_all(method, 'Items')())


class TestHelpers(unittest.TestCase):
    def test_error_code(self):
        ex = ClientError({'Error': {'Code': 'NoSuchBucket', 'Message': ''}}, 'HeadBucket')
        self.assertEqual('NoSuchBucket', aws.error_code(ex))

    def test_bucket_arn(self):
        self.assertEqual('arn:aws:s3:::bucket', aws.bucket_arn('bucket'))
        self.assertEqual('arn:aws:s3:::bucket/a/b.csv', aws.bucket_arn('bucket', 'a/b.csv'))

    def test_bucket_exists(self):
        session = mock.MagicMock()
        session.client.return_value.list_buckets.return_value = {
            'Buckets': [{'Name': 'logs'}, {'Name': 'data'}]
        }

        self.assertTrue(aws.s3_bucket_exists(session, 'data'))
        self.assertFalse(aws.s3_bucket_exists(session, 'backups'))

    def test_object_exists(self):
        session = mock.MagicMock()
        self.assertTrue(aws.s3_object_exists(session, 'bucket', 'key'))

    def test_object_missing(self):
        session = mock.MagicMock()
        session.client.return_value.head_object.side_effect = \
            ClientError({'Error': {'Code': '404', 'Message': 'Not Found'}}, 'HeadObject')

        self.assertFalse(aws.s3_object_exists(session, 'bucket', 'key'))

    def test_object_exists_error(self):
        session = mock.MagicMock()
        session.client.return_value.head_object.side_effect = \
            ClientError({'Error': {'Code': '403', 'Message': 'Forbidden'}}, 'HeadObject')

        with self.assertRaises(ClientError):
            aws.s3_object_exists(session, 'bucket', 'key')
