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

###########################
# S3 Object Life Cycle Tags

# Delete tags mark an S3 object for deletion by a life cycle policy instead of
# deleting it directly. The object is expired by the rule generated by
# lifecycle.marked_for_deletion_rule() after MARKED_FOR_DELETION_DAYS.
TAG_DELETE_KEY = "delete"
TAG_DELETE_VALUE = "true"

# Object tagging limits enforced by S3
MAX_TAGS = 10
MAX_TAG_KEY_LENGTH = 128
MAX_TAG_VALUE_LENGTH = 256
RESERVED_TAG_PREFIX = "aws:"
