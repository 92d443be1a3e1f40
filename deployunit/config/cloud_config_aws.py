# AWS Cloud Configuration for terraunit
# Provider: Amazon Web Services (aws provider)
# Lowering: CloudWatch Logs > IAM Role > ECS Task Definition > ECS Service > App Auto Scaling

# Provider metadata
PROVIDER_NAME = "AWS"
PROVIDER_PREFIX = ["aws_"]
TERRAFORM_PROVIDER = "hashicorp/aws"
TERRAFORM_PROVIDER_NAME = "aws"
PROVIDER_BLOCK = {}
DEFAULT_REGION = "us-east-1"

# Resource types emitted by the translator, in lowering order
AWS_LOG_GROUP = "aws_cloudwatch_log_group"
AWS_IAM_ROLE = "aws_iam_role"
AWS_IAM_POLICY_ATTACHMENT = "aws_iam_role_policy_attachment"
AWS_IAM_ROLE_POLICY = "aws_iam_role_policy"
AWS_SECURITY_GROUP = "aws_security_group"
AWS_TASK_DEFINITION = "aws_ecs_task_definition"
AWS_SERVICE = "aws_ecs_service"
AWS_SCALING_TARGET = "aws_appautoscaling_target"
AWS_SCALING_POLICY = "aws_appautoscaling_policy"

RESOURCE_TYPES = [
    AWS_LOG_GROUP,
    AWS_IAM_ROLE,
    AWS_IAM_POLICY_ATTACHMENT,
    AWS_IAM_ROLE_POLICY,
    AWS_SECURITY_GROUP,
    AWS_TASK_DEFINITION,
    AWS_SERVICE,
    AWS_SCALING_TARGET,
    AWS_SCALING_POLICY,
]

# Defaults
LOG_RETENTION_DAYS = 30
LOG_GROUP_PREFIX = "/ecs/"
DEFAULT_CLUSTER = "default"
LAUNCH_TYPE = "FARGATE"
EXECUTION_ROLE_POLICY_ARN = (
    "arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy"
)
TASK_ASSUME_ROLE_SERVICE = "ecs-tasks.amazonaws.com"
SCALABLE_DIMENSION = "ecs:service:DesiredCount"
SCALING_METRIC = "ECSServiceAverageCPUUtilization"
SCALE_IN_COOLDOWN = 300
SCALE_OUT_COOLDOWN = 60

# Module invocation option names (concept -> option)
OPTION_NAMES = {
    "name": "app_name",
    "min_instances": "min_capacity",
    "max_instances": "max_capacity",
    "environment": "environment",
    "network_id": "vpc_id",
    "subnet_ids": "subnet_ids",
}

# Actions the execution role needs to inject secrets
SECRET_READ_ACTIONS = ["secretsmanager:GetSecretValue", "ssm:GetParameters"]
DEFAULT_INGRESS_CIDR = "0.0.0.0/0"
