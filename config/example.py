#
# Example account configuration file
# Copy to config/custom/<name>.py and run `bin/s3-cost.py config <name>`
# to verify it.
#

REGION = "us-east-1"
PROFILE = None # Use the default credential chain

# Bucket managed by the lifecycle, policy, upload, tag, audit, and multipart commands
BUCKET = "example-data-bucket"

# Required to submit Batch Operations jobs
ACCOUNT_ID = "123456789012"
REPORT_BUCKET = "example-batch-reports"
BATCH_ROLE = "arn:aws:iam::123456789012:role/S3BatchOperations"

# Set to use SSE-KMS instead of SSE-S3 when uploading and enforcing encryption
KMS_KEY = None

# Tiering ladder generated by `lifecycle generate`
IA_DAYS = 30
GLACIER_DAYS = 90
EXPIRATION_DAYS = 365
