"""
Conversion of raw AWS CLI documents into DataFrames
"""

import pandas as pd

from .errors import MalformedInputError
from .utils import name_tag, to_utc_timestamp

INSTANCE_COLUMNS = [
    "InstanceId",
    "Name",
    "InstanceType",
    "State",
    "AvailabilityZone",
    "PrivateIp",
    "PublicIp",
    "LaunchTime",
    "Monitoring",
]

OBJECT_COLUMNS = ["Key", "Size", "LastModified", "LastModifiedUtc"]


class DataProcessor:
    """Flattens describe-instances and list-objects-v2 responses"""

    def __init__(self, config):
        self.config = config

    def _require_mapping(self, document, what):
        if not isinstance(document, dict):
            raise MalformedInputError(
                f"Expected a JSON object for {what}, got {type(document).__name__}"
            )

    def instances_frame(self, document):
        """
        Flatten an ec2 describe-instances response

        Args:
            document: Decoded JSON of `aws ec2 describe-instances`

        Returns:
            DataFrame with one row per instance, in document order
        """
        self._require_mapping(document, "ec2 describe-instances")
        rows = []
        try:
            for reservation in document.get("Reservations", []):
                for instance in reservation.get("Instances", []):
                    rows.append(self._instance_row(instance))
        except (AttributeError, TypeError) as e:
            raise MalformedInputError(
                f"Unexpected ec2 describe-instances structure: {e}"
            ) from e
        return pd.DataFrame(rows, columns=INSTANCE_COLUMNS)

    def _instance_row(self, instance):
        try:
            instance_id = instance["InstanceId"]
        except (KeyError, TypeError) as e:
            raise MalformedInputError("Instance entry without InstanceId") from e
        return {
            "InstanceId": instance_id,
            "Name": name_tag(instance.get("Tags")),
            "InstanceType": instance.get("InstanceType", ""),
            "State": instance.get("State", {}).get("Name", "unknown"),
            "AvailabilityZone": instance.get("Placement", {}).get(
                "AvailabilityZone", ""
            ),
            "PrivateIp": instance.get("PrivateIpAddress", ""),
            "PublicIp": instance.get("PublicIpAddress", ""),
            "LaunchTime": instance.get("LaunchTime", ""),
            "Monitoring": instance.get("Monitoring", {}).get("State", "disabled"),
        }

    def objects_frame(self, document):
        """
        Flatten an s3api list-objects-v2 response

        An empty bucket has no Contents key at all.
        """
        self._require_mapping(document, "s3api list-objects-v2")
        contents = document.get("Contents", [])
        if not isinstance(contents, list):
            raise MalformedInputError(
                f"Expected a list for Contents, got {type(contents).__name__}"
            )
        rows = []
        for obj in contents:
            try:
                rows.append(
                    {
                        "Key": obj["Key"],
                        "Size": int(obj.get("Size", 0)),
                        "LastModified": obj["LastModified"],
                        "LastModifiedUtc": to_utc_timestamp(obj["LastModified"]),
                    }
                )
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise MalformedInputError(f"Bad object entry: {obj!r}") from e
        frame = pd.DataFrame(rows, columns=OBJECT_COLUMNS)
        frame["LastModifiedUtc"] = pd.to_datetime(frame["LastModifiedUtc"], utc=True)
        frame["Size"] = frame["Size"].astype("int64")
        return frame
