#!/usr/bin/env python3
"""Grant an AWS account launch permission on the proxy AMI in every mapped region."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure repository root is importable when running from a checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def main() -> None:
    parser = argparse.ArgumentParser(description="Share the proxy AMI with an AWS account")
    parser.add_argument("account_id", help="12-digit AWS account ID to grant launch permission to")
    parser.add_argument(
        "--max-workers",
        type=int,
        default=4,
        help="Regions processed in parallel (default: 4)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the regions and AMIs that would be shared without calling AWS",
    )
    args = parser.parse_args()

    from proxy_control.core.regions import AMI_MAP

    if args.dry_run:
        print(f"Would grant {args.account_id} launch permission on {len(AMI_MAP)} AMI(s):")
        for region, ami_id in AMI_MAP.items():
            print(f"  {region}: {ami_id}")
        return

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    from proxy_control.backends.aws.cloud import EC2CloudProvider
    from proxy_control.core.ami import grant_to_account

    # Uses the caller's default AWS credential chain (profile, env vars, role).
    results = grant_to_account(args.account_id, cloud_factory=EC2CloudProvider, max_workers=args.max_workers)
    print(json.dumps(results, indent=2))

    if any(r["status"] == "failed" for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
