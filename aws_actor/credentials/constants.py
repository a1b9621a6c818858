"""Constants for credential providers."""

PROVIDER_EXPLICIT = "explicit"
PROVIDER_ENVIRONMENT = "environment"
PROVIDER_SHARED_FILE = "shared-credentials-file"
PROVIDER_INSTANCE_METADATA = "instance-metadata"

# EC2 instance metadata service
IMDS_BASE_URL = "http://169.254.169.254"
IMDS_TOKEN_PATH = "/latest/api/token"
IMDS_CREDENTIALS_PATH = "/latest/meta-data/iam/security-credentials/"
IMDS_TOKEN_HEADER = "X-aws-ec2-metadata-token"
IMDS_TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
IMDS_TOKEN_TTL_SECONDS = 21600
