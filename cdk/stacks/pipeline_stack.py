from enum import Enum

from aws_cdk import (
    Aws,
    CfnCapabilities,
    CfnOutput,
    DefaultStackSynthesizer,
    Fn,
    Stack,
    aws_codebuild as codebuild,
    aws_codepipeline as codepipeline,
    aws_codepipeline_actions as cpactions,
    aws_iam as iam,
    aws_kms as kms,
    aws_s3 as s3,
)
from constructs import Construct

from stacks.buildspec import cdk_build_spec


class Accounts(Enum):
    DEVOPS = "506746435521"
    TEST = "769916547052"


QUALIFIER = DefaultStackSynthesizer.DEFAULT_QUALIFIER
TEST_REGION = "eu-west-1"

PIPELINE_NAME = "MyTestPipeline"
ARTIFACT_KEY_EXPORT = "sdg-pipeline-artifact-bucket-encryptionkeyArn"
SOURCE_BUCKET_NAME = f"test-bucket-{Accounts.DEVOPS.value}"
SOURCE_OBJECT_KEY = "source.zip"

TARGET_STACK_NAME = "TestStack"
TARGET_TEMPLATE_FILE = f"{TARGET_STACK_NAME}.template.json"


class DynamicPipelineStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        pipeline = PipelineConstruct(self, "TestPipeline")

        CfnOutput(
            self,
            "PipelineName",
            value=pipeline.pipeline.pipeline_name,
            description="CodePipeline deploying TestStack into the TEST account",
        )


class DynamicPipelineConstruct(Construct):
    """
    Pipeline skeleton shared by every pipeline built on the devops account.

    Imports the shared role, artifact bucket and key, creates the pipeline and
    its Source stage, and references the cross-account roles of the TEST
    account. Subclasses add the Build and Deploy stages.
    """

    def __init__(self, scope: Construct, construct_id: str) -> None:
        super().__init__(scope, construct_id)

        # ─────────────────────────────────────────────
        # 1. Shared PipelineRole from the devops-infra stack
        #    (one role for all CodePipeline and CodeBuild operations)
        # ─────────────────────────────────────────────
        self.devops_pipeline_role = iam.Role.from_role_arn(
            self,
            "pipelineRole",
            f"arn:aws:iam::{Accounts.DEVOPS.value}:role/PipelineRole",
        )

        # ─────────────────────────────────────────────
        # 2. Shared artifact key and bucket
        #    every artifact object is encrypted with the exported CMK
        # ─────────────────────────────────────────────
        self.encryption_key = kms.Key.from_key_arn(
            self,
            "pipelineArtifactKeyArn",
            Fn.import_value(ARTIFACT_KEY_EXPORT),
        )

        self.artifact_bucket = s3.Bucket.from_bucket_attributes(
            self,
            "cdkBucket",
            bucket_arn=f"arn:aws:s3:::cdk-{QUALIFIER}-assets-{Accounts.DEVOPS.value}-{Aws.REGION}",
            encryption_key=self.encryption_key,
        )

        # ─────────────────────────────────────────────
        # 3. Pipeline
        # ─────────────────────────────────────────────
        self.pipeline = codepipeline.Pipeline(
            self,
            "TestPipeline",
            pipeline_name=PIPELINE_NAME,
            artifact_bucket=self.artifact_bucket,
            restart_execution_on_update=True,
            role=self.devops_pipeline_role,
        )

        # ─────────────────────────────────────────────
        # 4. Source stage — zipped sources in S3, started manually
        # ─────────────────────────────────────────────
        self.source_output = codepipeline.Artifact()
        self.pipeline.add_stage(
            stage_name="Source",
            actions=[
                cpactions.S3SourceAction(
                    action_name="SCM-source",
                    bucket=s3.Bucket.from_bucket_name(self, "SourceBucket", SOURCE_BUCKET_NAME),
                    bucket_key=SOURCE_OBJECT_KEY,
                    output=self.source_output,
                    trigger=cpactions.S3Trigger.NONE,
                    role=self.pipeline.role,
                )
            ],
        )

        # ─────────────────────────────────────────────
        # 5. Cross-account roles (CDK bootstrap roles of the TEST account)
        # ─────────────────────────────────────────────
        self.test_deploy_role = iam.Role.from_role_arn(
            self,
            "testRole",
            bootstrap_role_arn("deploy-role", Accounts.TEST, TEST_REGION),
            mutable=False,
        )

        self.test_cfn_exec_role = iam.Role.from_role_arn(
            self,
            "testCfnRole",
            bootstrap_role_arn("cfn-exec-role", Accounts.TEST, TEST_REGION),
            mutable=False,
        )


class CdkBuildConstruct(Construct):
    """CodeBuild project plus the pipeline action that runs it."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        encryption_key: kms.IKey,
        source_input: codepipeline.Artifact,
        role: iam.IRole,
        run_order: int = 1,
    ) -> None:
        super().__init__(scope, construct_id)

        self.artifact = codepipeline.Artifact()

        project = codebuild.PipelineProject(
            self,
            construct_id,
            project_name="CodeBuild",
            environment=codebuild.BuildEnvironment(
                build_image=codebuild.LinuxBuildImage.STANDARD_7_0,
            ),
            encryption_key=encryption_key,
            role=role,
            build_spec=codebuild.BuildSpec.from_object(cdk_build_spec()),
        )

        self.action = cpactions.CodeBuildAction(
            action_name=construct_id,
            run_order=run_order,
            project=project,
            input=source_input,
            outputs=[self.artifact],
            role=role,
        )


class PipelineConstruct(DynamicPipelineConstruct):
    def __init__(self, scope: Construct, construct_id: str) -> None:
        super().__init__(scope, construct_id)

        build = CdkBuildConstruct(
            self,
            "CdkBuild",
            encryption_key=self.encryption_key,
            source_input=self.source_output,
            role=self.pipeline.role,
            run_order=1,
        )

        self.pipeline.add_stage(
            stage_name="Build",
            actions=[build.action],
        )

        # Actions run as the TEST deploy role; CloudFormation itself runs
        # as the TEST exec role.
        self.pipeline.add_stage(
            stage_name="Deployment-DEV",
            actions=[
                cpactions.CloudFormationCreateUpdateStackAction(
                    action_name="DeployCF",
                    run_order=1,
                    stack_name=TARGET_STACK_NAME,
                    admin_permissions=False,
                    role=self.test_deploy_role,
                    deployment_role=self.test_cfn_exec_role,
                    template_path=build.artifact.at_path(TARGET_TEMPLATE_FILE),
                    cfn_capabilities=[
                        CfnCapabilities.NAMED_IAM,
                        CfnCapabilities.AUTO_EXPAND,
                    ],
                )
            ],
        )


def bootstrap_role_arn(kind: str, account: Accounts, region: str) -> str:
    """ARN of a role created by `cdk bootstrap` in the given account/region."""
    return f"arn:aws:iam::{account.value}:role/cdk-{QUALIFIER}-{kind}-{account.value}-{region}"
