#!/usr/bin/env python3
import logging
from os import environ
from os import getenv

import aws_cdk as cdk
from dotenv import load_dotenv

from site_deployment.settings import load_settings
from site_deployment.site_deployment_stack import SiteDeploymentStack

load_dotenv("app.env")

logging.basicConfig(
    level=getattr(logging, getenv("LOGGING", "INFO").upper(), logging.INFO)
)

app = cdk.App()

site_deployment_stack = SiteDeploymentStack(
    app,
    "SiteDeploymentStack",
    description="Pipeline copying site content from GitHub into an S3 bucket",
    settings=load_settings(),
    env=cdk.Environment(
        account=environ["CDK_DEFAULT_ACCOUNT"],
        region=getenv("CDK_DEFAULT_REGION", "us-east-2"),
    ),
)

app.synth()
