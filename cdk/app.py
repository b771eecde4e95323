#!/usr/bin/env python3
import logging

import aws_cdk as cdk
from stacks.selector import build_stack

logging.basicConfig(level=logging.INFO)

app = cdk.App()

build_stack(app)

app.synth()
