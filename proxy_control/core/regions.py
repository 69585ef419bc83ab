"""Region to proxy AMI mapping."""

from __future__ import annotations

from proxy_control.core.errors import ConfigurationError

AMI_MAP: dict[str, str] = {
    "us-east-1": "ami-0a95742fa68074ab3",
    "us-east-2": "ami-0a937113f61d791c4",
    "us-west-1": "ami-03f95ca09b41eb7cf",
    "us-west-2": "ami-08d58210ab59c8bb4",
    "ca-central-1": "ami-07325bb2fb3708ff4",
    "eu-west-3": "ami-0d8efe36c7feccc14",
    "eu-south-1": "ami-0850cc588c27111ae",
    "eu-south-2": "ami-0fcff755a596caf64",
    "eu-central-1": "ami-069ea64ab004b5891",
    "eu-west-2": "ami-0d325f80fc1c02e87",
    "eu-north-1": "ami-0c8c5b4f5fe0290d9",
    "ap-east-1": "ami-0c215dc8c54f3af64",
    "ap-northeast-1": "ami-03132fd81a4078070",
    "ap-northeast-2": "ami-09fbc56c965fcebfa",
    "ap-southeast-1": "ami-050f8157cce4f66e6",
    "ap-southeast-2": "ami-01a1b612ef3beb4dd",
}


def ami_for_region(region: str, catalog: dict[str, str] | None = None) -> str:
    """Return the AMI id for a region, raising ConfigurationError if unmapped."""
    catalog = AMI_MAP if catalog is None else catalog
    ami_id = catalog.get(region)
    if not ami_id:
        raise ConfigurationError(f"No AMI mapped for region: {region}")
    return ami_id
