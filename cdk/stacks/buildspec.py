"""
CodeBuild manifest for the CdkBuild action.

The Lambda is packaged before `cdk synth` because TestStack reads the
packaged directory as its code asset.
"""

PYTHON_VERSION = "3.12"
NODEJS_VERSION = "20"

LAMBDA_SOURCE_DIR = "lambdas/test"
LAMBDA_DIST_DIR = "lambdas/dist"
CDK_OUT_DIR = "cdk/cdk.out"


def install_commands() -> list[str]:
    return [
        "aws --version",
        "npm install -g aws-cdk",
        "cdk --version",
        "pip install .",
    ]


def build_commands() -> list[str]:
    return [
        # lambda packaging first, synth needs the produced asset
        f"rm -rf {LAMBDA_DIST_DIR} && mkdir -p {LAMBDA_DIST_DIR}",
        f"cp {LAMBDA_SOURCE_DIR}/*.py {LAMBDA_DIST_DIR}/",
        "cd cdk && cdk synth '*' && cd $CODEBUILD_SRC_DIR",
    ]


def cdk_build_spec() -> dict:
    """Build spec object for `BuildSpec.from_object`."""
    return {
        "version": "0.2",
        "phases": {
            "install": {
                "runtime-versions": {
                    "python": PYTHON_VERSION,
                    "nodejs": NODEJS_VERSION,
                },
                "commands": install_commands(),
            },
            "build": {
                "commands": build_commands(),
            },
        },
        "artifacts": {
            "base-directory": CDK_OUT_DIR,
            "files": ["**/*"],
        },
    }
