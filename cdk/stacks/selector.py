import logging

import aws_cdk as cdk

from stacks.pipeline_stack import DynamicPipelineStack, TARGET_STACK_NAME
from stacks.target_stack import TestStack

logger = logging.getLogger(__name__)

PIPELINE_STACK_NAME = "PipelineStack"


def environment(app: cdk.App) -> cdk.Environment:
    """Stack environment from context; environment-agnostic when unset."""
    return cdk.Environment(
        account=app.node.try_get_context("account"),
        region=app.node.try_get_context("region"),
    )


def build_stack(app: cdk.App) -> cdk.Stack:
    """
    Add the one stack this invocation synthesizes.

    `-c pipeline=<anything>` selects the pipeline, otherwise the test stack
    the pipeline deploys.
    """
    if app.node.try_get_context("pipeline"):
        logger.info(f"Synthesizing {PIPELINE_STACK_NAME}")
        return DynamicPipelineStack(app, PIPELINE_STACK_NAME, env=environment(app))

    logger.info(f"Synthesizing {TARGET_STACK_NAME}")
    return TestStack(
        app,
        TARGET_STACK_NAME,
        lambda_code_path=app.node.try_get_context("lambdaAssetPath"),
        env=environment(app),
    )
