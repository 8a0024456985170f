# pylint: disable="redefined-outer-name,missing-function-docstring"
import pytest
from aws_cdk import aws_s3 as s3

from site_deployment.settings import load_settings
from site_deployment.settings import SettingsError


@pytest.fixture
def env():
    return {
        "SOURCE_REPOSITORY": "fccsedgwick/site-content",
        "SOURCE_BRANCH": "release",
        "GITHUB_TOKEN_SECRET": "site-token",
        "DEPLOY_BUCKET": "my-deploy-bucket",
        "DEPLOY_BUCKET_REGION": "ap-southeast-1",
        "DEPLOY_ACCESS_CONTROL": "public-read",
        "DEPLOY_CACHE_CONTROL": "public,max-age=12h",
        "DEPLOY_OBJECT_KEY": "",
        "DEPLOY_EXTRACT": "yes",
        "DEPLOY_KMS_KEY_ARN": "",
    }


def test_load_settings(env):
    settings = load_settings(env)
    assert settings.source.owner == "fccsedgwick"
    assert settings.source.repo == "site-content"
    assert settings.source.branch == "release"
    assert settings.source.oauth_secret_name == "site-token"
    assert settings.target.bucket_name == "my-deploy-bucket"
    assert settings.target.bucket_region == "ap-southeast-1"
    assert settings.target.access_control == s3.BucketAccessControl.PUBLIC_READ
    assert settings.target.cache_control == ("public", "max-age=12h")
    assert settings.target.object_key is None
    assert settings.target.extract
    assert settings.target.encryption_key_arn is None
    assert settings.pipeline_name is None


def test_load_settings_minimal():
    settings = load_settings({"SOURCE_REPOSITORY": "aws/aws-cdk"})
    assert settings.source.branch == "main"
    assert settings.target.cache_control == ()


def test_missing_source_repository():
    with pytest.raises(SettingsError):
        load_settings({"DEPLOY_BUCKET": "my-deploy-bucket"})


def test_bad_extract_flag(env):
    env["DEPLOY_EXTRACT"] = "maybe"
    with pytest.raises(SettingsError):
        load_settings(env)


def test_extract_disabled_without_object_key(env):
    env["DEPLOY_EXTRACT"] = "false"
    with pytest.raises(SettingsError):
        load_settings(env)


def test_invalid_values_wrapped_in_settings_error(env):
    env["DEPLOY_ACCESS_CONTROL"] = "world-writable"
    with pytest.raises(SettingsError, match="invalid deployment settings"):
        load_settings(env)


def test_bad_repository_name(env):
    env["SOURCE_REPOSITORY"] = "site-content"
    with pytest.raises(SettingsError):
        load_settings(env)


def test_malformed_cache_control_wrapped_in_settings_error():
    with pytest.raises(SettingsError, match="max-age=soon"):
        load_settings(
            {"SOURCE_REPOSITORY": "aws/aws-cdk", "DEPLOY_CACHE_CONTROL": "max-age=soon"}
        )
