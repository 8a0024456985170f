import aws_cdk.assertions as assertions
import pytest
from aws_cdk import App
from aws_cdk import SecretValue
from aws_cdk import Stack

from site_deployment.deploy_pipeline import minimal_pipeline
from site_deployment.models import DeploySettings
from site_deployment.models import DeployTarget
from site_deployment.models import SourceRepository
from site_deployment.site_deployment_stack import SiteDeploymentStack


@pytest.fixture(scope="module")
def module_app():
    module_app = App()
    return module_app


@pytest.fixture(scope="module")
def minimal_stack():
    stack = Stack()
    return stack


@pytest.fixture(scope="module")
def minimal_deploy_stage(minimal_stack):
    return minimal_pipeline(minimal_stack)


@pytest.fixture(scope="module")
def minimal_template(minimal_stack, minimal_deploy_stage):
    template = assertions.Template.from_stack(minimal_stack)
    return template


@pytest.fixture(scope="module")
def site_deployment_settings():
    return DeploySettings(
        source=SourceRepository(owner="fccsedgwick", repo="site-content"),
        target=DeployTarget(
            access_control="private",
            cache_control=["public", "max-age=1d"],
            object_key="site/",
            run_order=2,
        ),
        pipeline_name="site-pipeline",
    )


@pytest.fixture(scope="module")
def site_deployment_stack(module_app, site_deployment_settings):
    stack = SiteDeploymentStack(
        module_app,
        "site-deployment",
        settings=site_deployment_settings,
    )
    return stack


@pytest.fixture(scope="module")
def site_deployment_template(site_deployment_stack):
    template = assertions.Template.from_stack(site_deployment_stack)
    return template


def plain_token() -> SecretValue:
    return SecretValue.unsafe_plain_text("secret")
