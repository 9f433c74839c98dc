"""EC2 resource managers: VPCs, subnets and launch templates."""

from __future__ import annotations

from typing import Any

from botocore.exceptions import ClientError

from simplecloud.providers.aws.base import (
    AwsManagerError,
    AwsResourceManager,
    is_not_found,
    logger,
    tags_from_specifications,
)


class VpcManager(AwsResourceManager):
    """Creates VPCs and waits until they report ``available``."""

    kind = "VPC"

    def __init__(self, client: Any, *, poll_delay_seconds: int = 5, poll_max_attempts: int = 60) -> None:
        super().__init__(client)
        self._poll_delay = poll_delay_seconds
        self._poll_max_attempts = poll_max_attempts

    def create(self, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        response = self._client.create_vpc(**input)
        vpc_id = response["Vpc"]["VpcId"]
        logger.info("vpc_waiting_available", vpc_id=vpc_id)
        waiter = self._client.get_waiter("vpc_available")
        waiter.wait(
            VpcIds=[vpc_id],
            WaiterConfig={"Delay": self._poll_delay, "MaxAttempts": self._poll_max_attempts},
        )
        return vpc_id, self.retrieve(vpc_id)

    def retrieve(self, provider_id: str) -> dict[str, Any]:
        response = self._client.describe_vpcs(VpcIds=[provider_id])
        vpcs = response.get("Vpcs") or []
        if not vpcs:
            raise AwsManagerError(f"VPC {provider_id} not found")
        return vpcs[0]

    def update(self, provider_id: str, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        current = self.retrieve(provider_id)
        self._require_unchanged(current, input, ("CidrBlock", "InstanceTenancy"))
        tags = tags_from_specifications(input)
        if tags:
            self._client.create_tags(Resources=[provider_id], Tags=tags)
        return provider_id, self.retrieve(provider_id)

    def delete(self, provider_id: str) -> bool:
        try:
            self._client.delete_vpc(VpcId=provider_id)
        except ClientError as exc:
            if is_not_found(exc, ("InvalidVpcID.NotFound",)):
                return False
            raise
        return True


class SubnetManager(AwsResourceManager):
    kind = "Subnet"

    def create(self, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        response = self._client.create_subnet(**input)
        subnet = response["Subnet"]
        return subnet["SubnetId"], subnet

    def retrieve(self, provider_id: str) -> dict[str, Any]:
        response = self._client.describe_subnets(SubnetIds=[provider_id])
        subnets = response.get("Subnets") or []
        if not subnets:
            raise AwsManagerError(f"Subnet {provider_id} not found")
        return subnets[0]

    def update(self, provider_id: str, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        current = self.retrieve(provider_id)
        self._require_unchanged(current, input, ("CidrBlock", "VpcId", "AvailabilityZone"))
        tags = tags_from_specifications(input)
        if tags:
            self._client.create_tags(Resources=[provider_id], Tags=tags)
        return provider_id, self.retrieve(provider_id)

    def delete(self, provider_id: str) -> bool:
        try:
            self._client.delete_subnet(SubnetId=provider_id)
        except ClientError as exc:
            if is_not_found(exc, ("InvalidSubnetID.NotFound",)):
                return False
            raise
        return True


class LaunchTemplateManager(AwsResourceManager):
    """Launch templates; updates publish a new default version."""

    kind = "LaunchTemplate"

    def create(self, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        response = self._client.create_launch_template(**input)
        template = response["LaunchTemplate"]
        return template["LaunchTemplateId"], template

    def retrieve(self, provider_id: str) -> dict[str, Any]:
        response = self._client.describe_launch_templates(LaunchTemplateIds=[provider_id])
        templates = response.get("LaunchTemplates") or []
        if not templates:
            raise AwsManagerError(f"Launch Template {provider_id} not found")
        return templates[0]

    def update(self, provider_id: str, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        data = input.get("LaunchTemplateData")
        if data:
            response = self._client.create_launch_template_version(
                LaunchTemplateId=provider_id,
                LaunchTemplateData=data,
            )
            version = response["LaunchTemplateVersion"]["VersionNumber"]
            self._client.modify_launch_template(
                LaunchTemplateId=provider_id,
                DefaultVersion=str(version),
            )
            logger.info("launch_template_version_published", template_id=provider_id, version=version)
        return provider_id, self.retrieve(provider_id)

    def delete(self, provider_id: str) -> bool:
        try:
            self._client.delete_launch_template(LaunchTemplateId=provider_id)
        except ClientError as exc:
            if is_not_found(exc, ("InvalidLaunchTemplateId.NotFound", "InvalidLaunchTemplateId.Malformed")):
                return False
            raise
        return True
