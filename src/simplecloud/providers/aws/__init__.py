"""AWS resource managers backed by boto3."""

from simplecloud.providers.aws.autoscaling import AutoScalingGroupManager
from simplecloud.providers.aws.base import AwsManagerError, AwsResourceManager
from simplecloud.providers.aws.cloud import AwsCloud
from simplecloud.providers.aws.ec2 import LaunchTemplateManager, SubnetManager, VpcManager
from simplecloud.providers.aws.elbv2 import LoadBalancerManager
from simplecloud.providers.aws.provider import AwsResourceProvider
from simplecloud.providers.aws.route53 import RecordSetManager

__all__ = [
    "AutoScalingGroupManager",
    "AwsCloud",
    "AwsManagerError",
    "AwsResourceManager",
    "AwsResourceProvider",
    "LaunchTemplateManager",
    "LoadBalancerManager",
    "RecordSetManager",
    "SubnetManager",
    "VpcManager",
]
