"""Route 53 record set manager.

Input is a ``ChangeResourceRecordSets`` request. The provider id is a JSON
document naming the hosted zone and the (name, type) pairs it manages.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Tuple

from simplecloud.providers.aws.base import AwsManagerError, AwsResourceManager


def _normalize_name(name: str) -> str:
    return name.rstrip(".").lower()


def _record_sets(input: Dict[str, Any]) -> List[Dict[str, Any]]:
    changes = (input.get("ChangeBatch") or {}).get("Changes") or []
    return [change["ResourceRecordSet"] for change in changes if "ResourceRecordSet" in change]


def encode_provider_id(hosted_zone_id: str, records: List[Tuple[str, str]]) -> str:
    return json.dumps(
        {"hostedZoneId": hosted_zone_id, "records": [list(r) for r in records]},
        sort_keys=True,
    )


def decode_provider_id(provider_id: str) -> Tuple[str, List[Tuple[str, str]]]:
    try:
        data = json.loads(provider_id)
        return data["hostedZoneId"], [(name, rtype) for name, rtype in data["records"]]
    except (ValueError, KeyError, TypeError) as exc:
        raise AwsManagerError(f"Malformed record set provider id: {provider_id!r}") from exc


class RecordSetManager(AwsResourceManager):
    kind = "RecordSet"

    def _submit(self, input: Dict[str, Any], action: str) -> Tuple[str, Dict[str, Any]]:
        hosted_zone_id = input.get("HostedZoneId")
        if not hosted_zone_id:
            raise AwsManagerError("HostedZoneId is required")
        record_sets = _record_sets(input)
        if not record_sets:
            raise AwsManagerError("ChangeBatch has no record sets")

        request = copy.deepcopy(input)
        for change in request["ChangeBatch"]["Changes"]:
            change["Action"] = action
        response = self._client.change_resource_record_sets(**request)

        records = [(rs["Name"], rs["Type"]) for rs in record_sets]
        output = {"ChangeInfo": response["ChangeInfo"], "ResourceRecordSets": record_sets}
        return encode_provider_id(hosted_zone_id, records), output

    def create(self, input: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        return self._submit(input, "CREATE")

    def update(self, provider_id: str, input: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        return self._submit(input, "UPSERT")

    def _lookup(self, hosted_zone_id: str, name: str, rtype: str) -> Dict[str, Any] | None:
        response = self._client.list_resource_record_sets(
            HostedZoneId=hosted_zone_id,
            StartRecordName=name,
            StartRecordType=rtype,
            MaxItems="1",
        )
        for record in response.get("ResourceRecordSets") or []:
            if _normalize_name(record["Name"]) == _normalize_name(name) and record["Type"] == rtype:
                return record
        return None

    def retrieve(self, provider_id: str) -> Dict[str, Any]:
        hosted_zone_id, records = decode_provider_id(provider_id)
        live = []
        for name, rtype in records:
            record = self._lookup(hosted_zone_id, name, rtype)
            if record is not None:
                live.append(record)
        return {"HostedZoneId": hosted_zone_id, "ResourceRecordSets": live}

    def delete(self, provider_id: str) -> bool:
        hosted_zone_id, records = decode_provider_id(provider_id)
        changes = []
        for name, rtype in records:
            record = self._lookup(hosted_zone_id, name, rtype)
            if record is not None:
                changes.append({"Action": "DELETE", "ResourceRecordSet": record})
        if not changes:
            return False
        self._client.change_resource_record_sets(
            HostedZoneId=hosted_zone_id,
            ChangeBatch={"Changes": changes},
        )
        return True
