from __future__ import annotations

from typing import Any

from simplecloud.providers.aws.autoscaling import AutoScalingGroupManager
from simplecloud.providers.aws.ec2 import LaunchTemplateManager, SubnetManager, VpcManager
from simplecloud.providers.aws.elbv2 import LoadBalancerManager
from simplecloud.providers.aws.route53 import RecordSetManager


class AwsResourceProvider:
    """Hands out one boto3-backed manager per AWS resource kind.

    Clients are created lazily from the session and shared between managers
    of the same service.
    """

    def __init__(
        self,
        session: Any,
        *,
        poll_delay_seconds: int = 5,
        poll_max_attempts: int = 60,
    ) -> None:
        self._session = session
        self._clients: dict[str, Any] = {}
        self.poll_delay_seconds = poll_delay_seconds
        self.poll_max_attempts = poll_max_attempts

    @classmethod
    def from_region(cls, region_name: str, **kwargs: Any) -> "AwsResourceProvider":
        import boto3

        return cls(boto3.Session(region_name=region_name), **kwargs)

    def client(self, service_name: str) -> Any:
        if service_name not in self._clients:
            self._clients[service_name] = self._session.client(service_name)
        return self._clients[service_name]

    def vpc(self) -> VpcManager:
        return VpcManager(
            self.client("ec2"),
            poll_delay_seconds=self.poll_delay_seconds,
            poll_max_attempts=self.poll_max_attempts,
        )

    def subnet(self) -> SubnetManager:
        return SubnetManager(self.client("ec2"))

    def dns_record_set(self) -> RecordSetManager:
        return RecordSetManager(self.client("route53"))

    def load_balancer(self) -> LoadBalancerManager:
        return LoadBalancerManager(self.client("elbv2"))

    def launch_template(self) -> LaunchTemplateManager:
        return LaunchTemplateManager(self.client("ec2"))

    def autoscaling_group(self) -> AutoScalingGroupManager:
        return AutoScalingGroupManager(self.client("autoscaling"))
