# GCP Cloud Configuration for terraunit
# Provider: Google Cloud Platform (google provider)
# Lowering: Service Account > Cloud Run Service > Log Sink > Invoker binding

# Provider metadata
PROVIDER_NAME = "GCP"
PROVIDER_PREFIX = ["google_"]
TERRAFORM_PROVIDER = "hashicorp/google"
TERRAFORM_PROVIDER_NAME = "google"
PROVIDER_BLOCK = {}
DEFAULT_REGION = "us-central1"

# Resource types emitted by the translator, in lowering order
GCP_SERVICE_ACCOUNT = "google_service_account"
GCP_SERVICE = "google_cloud_run_v2_service"
GCP_LOG_SINK = "google_logging_project_sink"
GCP_INVOKER = "google_cloud_run_v2_service_iam_member"

RESOURCE_TYPES = [
    GCP_SERVICE_ACCOUNT,
    GCP_SERVICE,
    GCP_LOG_SINK,
    GCP_INVOKER,
]

# Defaults
# Service account ids are limited to 30 characters
SERVICE_ACCOUNT_ID_MAX_LENGTH = 30
INGRESS_ALL = "INGRESS_TRAFFIC_ALL"
INGRESS_INTERNAL = "INGRESS_TRAFFIC_INTERNAL_ONLY"
VPC_EGRESS = "PRIVATE_RANGES_ONLY"
INVOKER_ROLE = "roles/run.invoker"
PUBLIC_MEMBER = "allUsers"
LOG_SINK_PREFIX = "logging.googleapis.com/projects/"
LOG_BUCKET_PATH = "/locations/global/buckets/_Default"
LOG_FILTER_TEMPLATE = 'resource.type="cloud_run_revision" AND resource.labels.service_name="%s"'

# Module invocation option names (concept -> option)
OPTION_NAMES = {
    "name": "service_name",
    "min_instances": "min_instances",
    "max_instances": "max_instances",
    "environment": "env_vars",
    "network_id": "network",
    "subnet_ids": "subnetwork",
}
