"""AWS-flavoured engine: typed declaration helpers and dependency wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from simplecloud.core.errors import ConfigurationError, ErrorCode
from simplecloud.logging import configure_logging
from simplecloud.orchestration.engine import ProvisioningEngine
from simplecloud.planning.planner import Planner, TopologicalPlanner
from simplecloud.providers.aws.provider import AwsResourceProvider
from simplecloud.resources.models import LazyResource, Resource
from simplecloud.store.backends import build_backend
from simplecloud.store.base import ResourceStorer
from simplecloud.store.store import ResourceStore

if TYPE_CHECKING:
    from simplecloud.config.settings import Settings


def subnet_vpc(input: Dict[str, Any], vpc: Resource[Any, Any]) -> None:
    input["VpcId"] = vpc.provider_id


def load_balancer_subnet(input: Dict[str, Any], subnet: Resource[Any, Any]) -> None:
    subnets = input.setdefault("Subnets", [])
    if subnet.provider_id not in subnets:
        subnets.append(subnet.provider_id)


def autoscaling_group_launch_template(input: Dict[str, Any], template: Resource[Any, Any]) -> None:
    version = (input.get("LaunchTemplate") or {}).get("Version", "$Latest")
    input["LaunchTemplate"] = {"LaunchTemplateId": template.provider_id, "Version": version}


def autoscaling_group_subnet(input: Dict[str, Any], subnet: Resource[Any, Any]) -> None:
    current = [s for s in (input.get("VPCZoneIdentifier") or "").split(",") if s]
    if subnet.provider_id not in current:
        current.append(subnet.provider_id)
    input["VPCZoneIdentifier"] = ",".join(current)


def dns_record_load_balancer(input: Dict[str, Any], load_balancer: Resource[Any, Any]) -> None:
    """Point every record set in the change batch at the load balancer alias."""
    balancers = load_balancer.output or []
    if not balancers:
        raise ValueError(f"Load balancer {load_balancer.id} has no recorded output")
    target = balancers[0]
    alias = {
        "HostedZoneId": target["CanonicalHostedZoneId"],
        "DNSName": target["DNSName"],
        "EvaluateTargetHealth": False,
    }
    for change in (input.get("ChangeBatch") or {}).get("Changes") or []:
        record_set = change.get("ResourceRecordSet")
        if record_set is None:
            continue
        record_set.pop("ResourceRecords", None)
        record_set.pop("TTL", None)
        record_set["AliasTarget"] = dict(alias)


class AwsCloud(ProvisioningEngine):
    """Provisioning engine with one declaration method per AWS resource kind."""

    def __init__(
        self,
        provider: Optional[AwsResourceProvider],
        store: Optional[ResourceStorer],
        planner: Optional[Planner],
        **kwargs: Any,
    ) -> None:
        if provider is None:
            raise ConfigurationError(
                "Resource manager provider is missing",
                code=ErrorCode.MISSING_MANAGER,
            )
        self._provider = provider
        super().__init__(store, planner, **kwargs)

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        planner: Optional[Planner] = None,
        provider: Optional[AwsResourceProvider] = None,
        **kwargs: Any,
    ) -> "AwsCloud":
        configure_logging(settings.log_level)
        if provider is None:
            provider = AwsResourceProvider.from_region(
                settings.aws_region,
                poll_delay_seconds=settings.poll_delay_seconds,
                poll_max_attempts=settings.poll_max_attempts,
            )
        return cls(
            provider,
            ResourceStore(build_backend(settings)),
            planner or TopologicalPlanner(),
            rollback=settings.rollback,
            halt_on_destroy_error=settings.halt_on_destroy_error,
            skip_unchanged_updates=settings.skip_unchanged_updates,
            **kwargs,
        )

    @property
    def provider(self) -> AwsResourceProvider:
        return self._provider

    def create_vpc(self, resource_id: str, input: Dict[str, Any], *, depends_on: Iterable[str] = ()) -> LazyResource[Any]:
        return self.create_resource(resource_id, input, self._provider.vpc(), depends_on=depends_on)

    def create_subnet(self, resource_id: str, input: Dict[str, Any], *, depends_on: Iterable[str] = ()) -> LazyResource[Any]:
        return self.create_resource(resource_id, input, self._provider.subnet(), depends_on=depends_on)

    def create_dns_record_set(
        self, resource_id: str, input: Dict[str, Any], *, depends_on: Iterable[str] = ()
    ) -> LazyResource[Any]:
        return self.create_resource(resource_id, input, self._provider.dns_record_set(), depends_on=depends_on)

    def create_load_balancer(
        self, resource_id: str, input: Dict[str, Any], *, depends_on: Iterable[str] = ()
    ) -> LazyResource[Any]:
        return self.create_resource(resource_id, input, self._provider.load_balancer(), depends_on=depends_on)

    def create_launch_template(
        self, resource_id: str, input: Dict[str, Any], *, depends_on: Iterable[str] = ()
    ) -> LazyResource[Any]:
        return self.create_resource(resource_id, input, self._provider.launch_template(), depends_on=depends_on)

    def create_autoscaling_group(
        self, resource_id: str, input: Dict[str, Any], *, depends_on: Iterable[str] = ()
    ) -> LazyResource[Any]:
        return self.create_resource(
            resource_id, input, self._provider.autoscaling_group(), depends_on=depends_on
        )

    # Dependency wiring

    def set_subnet_vpc(self, subnet: LazyResource[Any], vpc: LazyResource[Any]) -> None:
        self.add_dependency(subnet, vpc, subnet_vpc)

    def set_load_balancer_subnet(self, load_balancer: LazyResource[Any], subnet: LazyResource[Any]) -> None:
        self.add_dependency(load_balancer, subnet, load_balancer_subnet)

    def set_autoscaling_group_launch_template(
        self, group: LazyResource[Any], template: LazyResource[Any]
    ) -> None:
        self.add_dependency(group, template, autoscaling_group_launch_template)

    def set_autoscaling_group_subnet(self, group: LazyResource[Any], subnet: LazyResource[Any]) -> None:
        self.add_dependency(group, subnet, autoscaling_group_subnet)

    def set_dns_record_load_balancer(self, record: LazyResource[Any], load_balancer: LazyResource[Any]) -> None:
        self.add_dependency(record, load_balancer, dns_record_load_balancer)
