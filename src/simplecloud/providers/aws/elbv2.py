"""Elastic Load Balancing v2 manager.

``CreateLoadBalancer`` answers with a list of load balancers, so the
provider id is the JSON-encoded list of their ARNs.
"""

from __future__ import annotations

import json
from typing import Any, List

from botocore.exceptions import ClientError

from simplecloud.providers.aws.base import (
    AwsManagerError,
    AwsResourceManager,
    is_not_found,
    logger,
)


def encode_arns(arns: List[str]) -> str:
    return json.dumps(arns)


def decode_arns(provider_id: str) -> List[str]:
    try:
        arns = json.loads(provider_id)
    except ValueError as exc:
        raise AwsManagerError(f"Malformed load balancer provider id: {provider_id!r}") from exc
    if not isinstance(arns, list) or not all(isinstance(a, str) for a in arns):
        raise AwsManagerError(f"Malformed load balancer provider id: {provider_id!r}")
    return arns


class LoadBalancerManager(AwsResourceManager):
    kind = "LoadBalancer"

    def create(self, input: dict[str, Any]) -> tuple[str, List[dict[str, Any]]]:
        response = self._client.create_load_balancer(**input)
        balancers = response.get("LoadBalancers") or []
        if not balancers:
            raise AwsManagerError("CreateLoadBalancer returned no load balancers")
        arns = [lb["LoadBalancerArn"] for lb in balancers]
        return encode_arns(arns), balancers

    def retrieve(self, provider_id: str) -> List[dict[str, Any]]:
        arns = decode_arns(provider_id)
        response = self._client.describe_load_balancers(LoadBalancerArns=arns)
        return response.get("LoadBalancers") or []

    def update(self, provider_id: str, input: dict[str, Any]) -> tuple[str, List[dict[str, Any]]]:
        for arn in decode_arns(provider_id):
            if input.get("Subnets"):
                self._client.set_subnets(LoadBalancerArn=arn, Subnets=input["Subnets"])
            if input.get("SecurityGroups"):
                self._client.set_security_groups(
                    LoadBalancerArn=arn,
                    SecurityGroups=input["SecurityGroups"],
                )
        return provider_id, self.retrieve(provider_id)

    def delete(self, provider_id: str) -> bool:
        deleted = False
        for arn in decode_arns(provider_id):
            try:
                self._client.delete_load_balancer(LoadBalancerArn=arn)
            except ClientError as exc:
                if is_not_found(exc, ("LoadBalancerNotFound",)):
                    logger.debug("load_balancer_already_absent", arn=arn)
                    continue
                raise
            deleted = True
        return deleted
