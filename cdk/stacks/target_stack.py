from aws_cdk import (
    CfnOutput,
    Stack,
    aws_lambda as lambda_,
    aws_logs as logs,
    aws_s3 as s3,
    aws_s3_deployment as s3deploy,
)
from constructs import Construct
import os

from stacks.buildspec import LAMBDA_DIST_DIR

ROOT_DIR = os.path.join(os.path.dirname(__file__), "../..")
ASSETS_DIR = os.path.join(os.path.dirname(__file__), "../assets")
DEFAULT_LAMBDA_CODE_PATH = os.path.join(ROOT_DIR, LAMBDA_DIST_DIR)

TARGET_BUCKET_NAME = "sdg-dummy"
ASSET_PREFIX = "assets"


class TestStack(Stack):
    """Deployment target of the pipeline: one asset upload, one function."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        lambda_code_path: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        bucket = s3.Bucket.from_bucket_name(self, "bucket", TARGET_BUCKET_NAME)

        s3deploy.BucketDeployment(
            self,
            "deployment",
            sources=[s3deploy.Source.asset(ASSETS_DIR)],
            destination_bucket=bucket,
            destination_key_prefix=ASSET_PREFIX,
        )

        # ─────────────────────────────────────────────
        # Lambda — code comes from the build step's packaged output
        # ─────────────────────────────────────────────
        log_group = logs.LogGroup(
            self,
            "functionLogs",
            retention=logs.RetentionDays.THREE_MONTHS,
        )

        fn = lambda_.Function(
            self,
            "function",
            function_name=construct_id,
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="handler.main",
            code=lambda_.Code.from_asset(
                os.path.normpath(lambda_code_path or DEFAULT_LAMBDA_CODE_PATH)
            ),
            log_group=log_group,
            environment={
                "BUCKET_NAME": TARGET_BUCKET_NAME,
                "ASSET_PREFIX": ASSET_PREFIX,
            },
        )

        bucket.grant_read(fn)

        CfnOutput(
            self,
            "FunctionName",
            value=fn.function_name,
            description="Smoke-check function listing the deployed assets",
        )
