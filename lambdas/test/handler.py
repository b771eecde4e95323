"""
Test Lambda — TestStack
Invoked manually after the pipeline deploys TestStack.

Responsibilities:
  - List the objects the BucketDeployment uploaded under ASSET_PREFIX
  - Return them as a JSON body so a deploy can be smoke-checked
"""

import os
import json
import logging

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# ── Config ────────────────────────────────────────────────────────────────────
BUCKET_NAME = os.environ["BUCKET_NAME"]
ASSET_PREFIX = os.environ.get("ASSET_PREFIX", "assets")

# ── AWS client ────────────────────────────────────────────────────────────────
s3 = boto3.client("s3")


# ── Helpers ───────────────────────────────────────────────────────────────────

def list_assets(prefix: str) -> list[str]:
    """Return every object key under prefix, following pagination."""
    keys = []
    try:
        paginator = s3.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=BUCKET_NAME, Prefix=f"{prefix}/"):
            keys.extend(obj["Key"] for obj in page.get("Contents", []))
    except ClientError as e:
        logger.error(f"Listing s3://{BUCKET_NAME}/{prefix}/ failed: {e}")
        raise
    return keys


# ── Handler ───────────────────────────────────────────────────────────────────

def main(event, context):
    """Lambda entry point."""
    logger.info(f"Smoke check requested: {json.dumps(event)}")
    function_name = getattr(context, "function_name", None)

    try:
        keys = list_assets(ASSET_PREFIX)
        logger.info(f"Found {len(keys)} assets in s3://{BUCKET_NAME}/{ASSET_PREFIX}/")

        if not keys:
            logger.warning("No deployed assets found — BucketDeployment may not have run")

        return {
            "statusCode": 200,
            "body": json.dumps({
                "function": function_name,
                "bucket": BUCKET_NAME,
                "count": len(keys),
                "assets": sorted(keys),
            }),
        }

    except Exception as e:
        logger.error(f"Unhandled error in smoke check: {e}", exc_info=True)
        return {
            "statusCode": 500,
            "body": json.dumps({"error": "Internal server error", "message": str(e)}),
        }
