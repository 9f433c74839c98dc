from __future__ import annotations

from typing import Any

from simplecloud.providers.aws.base import AwsManagerError, AwsResourceManager

# Fields UpdateAutoScalingGroup accepts out of a CreateAutoScalingGroup request.
UPDATABLE_FIELDS = frozenset(
    {
        "LaunchConfigurationName",
        "LaunchTemplate",
        "MixedInstancesPolicy",
        "MinSize",
        "MaxSize",
        "DesiredCapacity",
        "DefaultCooldown",
        "AvailabilityZones",
        "HealthCheckType",
        "HealthCheckGracePeriod",
        "PlacementGroup",
        "VPCZoneIdentifier",
        "TerminationPolicies",
        "NewInstancesProtectedFromScaleIn",
        "ServiceLinkedRoleARN",
        "MaxInstanceLifetime",
        "CapacityRebalance",
    }
)


class AutoScalingGroupManager(AwsResourceManager):
    """Auto Scaling groups are addressed by name, which doubles as provider id."""

    kind = "AutoScalingGroup"

    def create(self, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        name = input.get("AutoScalingGroupName")
        if not name:
            raise AwsManagerError("AutoScalingGroupName is required")
        self._client.create_auto_scaling_group(**input)
        return name, self.retrieve(name)

    def _describe(self, name: str) -> dict[str, Any] | None:
        response = self._client.describe_auto_scaling_groups(AutoScalingGroupNames=[name])
        groups = response.get("AutoScalingGroups") or []
        return groups[0] if groups else None

    def retrieve(self, provider_id: str) -> dict[str, Any]:
        group = self._describe(provider_id)
        if group is None:
            raise AwsManagerError(f"Auto Scaling group {provider_id} not found")
        return group

    def update(self, provider_id: str, input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        name = input.get("AutoScalingGroupName")
        if name and name != provider_id:
            raise AwsManagerError(
                f"AutoScalingGroup attribute AutoScalingGroupName cannot change in place "
                f"({provider_id!r} -> {name!r})"
            )
        request = {k: v for k, v in input.items() if k in UPDATABLE_FIELDS}
        self._client.update_auto_scaling_group(AutoScalingGroupName=provider_id, **request)
        return provider_id, self.retrieve(provider_id)

    def delete(self, provider_id: str) -> bool:
        if self._describe(provider_id) is None:
            return False
        self._client.delete_auto_scaling_group(AutoScalingGroupName=provider_id, ForceDelete=True)
        return True
