from typing import Optional

from aws_cdk import CfnOutput
from aws_cdk import SecretValue
from aws_cdk import Stack
from constructs import Construct

from site_deployment.deploy_pipeline import DeployPipeline
from site_deployment.models import DeploySettings


class SiteDeploymentStack(Stack):
    """Pipeline copying a GitHub repository's content into an S3 bucket"""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: DeploySettings,
        oauth_token: Optional[SecretValue] = None,
        **kwargs,
    ) -> None:
        """Instantiates the Site Deployment Stack

        Args:
            scope (Construct): Construct to which this stack belongs. Should be 'app'
                               in 'app.py'
            construct_id (str): Name of the stack
            settings (DeploySettings): source repository and deploy action options
            oauth_token (SecretValue): GitHub token, read from Secrets Manager when
                                       omitted
        """
        super().__init__(scope, construct_id, **kwargs)

        self.deploy_pipeline = DeployPipeline(self, settings, oauth_token=oauth_token)

        self.pipeline_name = CfnOutput(
            self,
            "cfOutputPipelineName",
            value=self.deploy_pipeline.pipeline.pipeline_name,
            description="Pipeline deploying the site content",
        )
        self.deploy_bucket_name = CfnOutput(
            self,
            "cfOutputDeployBucketName",
            value=self.deploy_pipeline.bucket.bucket_name,
            description="Bucket the site content is deployed to",
        )
