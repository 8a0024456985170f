import logging
from typing import List
from typing import Optional

from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_codepipeline_actions as codepipeline_actions
from aws_cdk import aws_kms as kms
from aws_cdk import aws_s3 as s3
from aws_cdk import SecretValue
from aws_cdk import Stack
from constructs import Construct

from site_deployment.cache_control import cache_control_header
from site_deployment.cache_control import parse_cache_control
from site_deployment.models import DeploySettings
from site_deployment.models import DeployTarget
from site_deployment.models import SourceRepository

logger = logging.getLogger(__name__)


class DeployPipeline:
    """IAC for a two stage pipeline: GitHub source, then copy to S3"""

    def __init__(
        self,
        construct: Construct,
        settings: DeploySettings,
        oauth_token: Optional[SecretValue] = None,
        bucket: Optional[s3.IBucket] = None,
        cache_control: Optional[List[codepipeline_actions.CacheControl]] = None,
    ):
        """Create the pipeline resources inside `construct`

        Args:
            construct (Construct): stack (or other scope) owning the resources
            settings (DeploySettings): source repository and deploy action options
            oauth_token (SecretValue): GitHub token. Read from Secrets Manager
                                       (`settings.source.oauth_secret_name`)
                                       when omitted
            bucket (s3.IBucket): target bucket, overrides the bucket described by
                                 `settings.target`
            cache_control (List[CacheControl]): overrides the directives in
                                                `settings.target.cache_control`
        """
        self._construct = construct
        self._settings = settings

        self._create_encryption_key(settings.target)
        self._create_target_bucket(settings.target, bucket)
        self._create_pipeline(settings.source, oauth_token)
        self.deploy_stage = self._create_deploy_stage(settings, cache_control)

    def _create_encryption_key(self, target: DeployTarget) -> None:
        if target.encryption_key_arn is not None:
            logger.debug(f"Importing KMS key {target.encryption_key_arn}")
            self.encryption_key = kms.Key.from_key_arn(
                self._construct, "EnvVarEncryptKey", target.encryption_key_arn
            )
        else:
            self.encryption_key = kms.Key(
                self._construct, "EnvVarEncryptKey", description="sample key"
            )

    def _create_target_bucket(
        self, target: DeployTarget, bucket: Optional[s3.IBucket]
    ) -> None:
        if bucket is not None:
            self.bucket = bucket
        elif target.bucket_name is not None:
            logger.debug(
                f"Importing bucket {target.bucket_name} "
                f"(region: {target.bucket_region or 'stack region'})"
            )
            self.bucket = s3.Bucket.from_bucket_attributes(
                self._construct,
                "DeployBucket",
                bucket_name=target.bucket_name,
                region=target.bucket_region,
            )
        else:
            self.bucket = s3.Bucket(self._construct, "MyBucket", enforce_ssl=True)

    def _create_pipeline(
        self, source: SourceRepository, oauth_token: Optional[SecretValue]
    ) -> None:
        if oauth_token is None:
            oauth_token = SecretValue.secrets_manager(source.oauth_secret_name)

        self.source_output = codepipeline.Artifact()
        source_action = codepipeline_actions.GitHubSourceAction(
            action_name="Source",
            owner=source.owner,
            repo=source.repo,
            branch=source.branch,
            output=self.source_output,
            oauth_token=oauth_token,
        )

        self.pipeline = codepipeline.Pipeline(
            self._construct,
            "MyPipeline",
            pipeline_name=self._settings.pipeline_name,
            stages=[
                codepipeline.StageProps(stage_name="Source", actions=[source_action])
            ],
        )

    def _create_deploy_stage(
        self,
        settings: DeploySettings,
        cache_control: Optional[List[codepipeline_actions.CacheControl]],
    ) -> codepipeline.IStage:
        target = settings.target
        if cache_control is None:
            cache_control = parse_cache_control(target.cache_control)

        logger.debug(f"CannedACL: {target.access_control}")
        logger.debug(f"CacheControl: {cache_control_header(cache_control)}")
        logger.debug(f"ObjectKey: {target.object_key}")
        logger.debug(f"Extract: {target.extract}")

        self.deploy_action = codepipeline_actions.S3DeployAction(
            action_name=settings.action_name,
            bucket=self.bucket,
            input=self.source_output,
            access_control=target.access_control,
            cache_control=cache_control or None,
            extract=target.extract,
            object_key=target.object_key,
            encryption_key=self.encryption_key,
            run_order=target.run_order,
        )
        stage = self.pipeline.add_stage(
            stage_name=settings.stage_name, actions=[self.deploy_action]
        )
        logger.info(
            f"Deploying {settings.source.owner}/{settings.source.repo} "
            f"({settings.source.branch}) through stage '{settings.stage_name}'"
        )
        return stage


def minimal_pipeline(
    stack: Stack,
    access_control: Optional[s3.BucketAccessControl] = None,
    bucket: Optional[s3.IBucket] = None,
    cache_control: Optional[List[codepipeline_actions.CacheControl]] = None,
    extract: Optional[bool] = None,
    object_key: Optional[str] = None,
) -> codepipeline.IStage:
    """Smallest pipeline ending in an S3 deploy action, returns its deploy stage

    Source is the aws/aws-cdk GitHub repo with a plain text token, so the
    synthesized template has no dependency on Secrets Manager.
    """
    target = {"access_control": access_control, "object_key": object_key}
    if extract is not None:
        target["extract"] = extract
    settings = DeploySettings(
        source=SourceRepository(owner="aws", repo="aws-cdk"),
        target=DeployTarget(**target),
    )
    deploy_pipeline = DeployPipeline(
        stack,
        settings,
        oauth_token=SecretValue.unsafe_plain_text("secret"),
        bucket=bucket,
        cache_control=cache_control,
    )
    return deploy_pipeline.deploy_stage
