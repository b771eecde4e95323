"""Shared fixtures for the CDK and Lambda tests."""

import importlib.util
import os

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from stacks.selector import build_stack

ROOT_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), "../.."))
LAMBDA_SOURCE_PATH = os.path.join(ROOT_DIR, "lambdas", "test")


@pytest.fixture
def pipeline_template() -> Template:
    app = cdk.App(context={"pipeline": "true"})
    return Template.from_stack(build_stack(app))


@pytest.fixture
def pipeline_resource(pipeline_template) -> dict:
    """Properties of the single AWS::CodePipeline::Pipeline resource."""
    pipelines = pipeline_template.find_resources("AWS::CodePipeline::Pipeline")
    assert len(pipelines) == 1
    return next(iter(pipelines.values()))["Properties"]


@pytest.fixture
def target_template() -> Template:
    app = cdk.App(context={"lambdaAssetPath": LAMBDA_SOURCE_PATH})
    return Template.from_stack(build_stack(app))


@pytest.fixture
def handler(monkeypatch):
    """Fresh import of the test Lambda with its environment in place."""
    monkeypatch.setenv("BUCKET_NAME", "sdg-dummy")
    monkeypatch.setenv("ASSET_PREFIX", "assets")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")

    spec = importlib.util.spec_from_file_location(
        "smoke_handler", os.path.join(LAMBDA_SOURCE_PATH, "handler.py")
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
