from re import match
from typing import Optional
from typing import Tuple

from aws_cdk import aws_s3 as s3
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator
from pydantic import model_validator

from site_deployment.cache_control import CacheControlError
from site_deployment.cache_control import parse_directive


class SourceRepository(BaseModel):
    """GitHub repository holding the content to deploy.

    Attributes:
        owner (str): GitHub user or organisation
        repo (str): repository name
        branch (str): branch the pipeline tracks
        oauth_secret_name (str): Secrets Manager secret holding the GitHub token
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: str
    repo: str
    branch: str = "main"
    oauth_secret_name: str = "github-token"

    @classmethod
    def from_string(cls, full_name: str, **kwargs) -> "SourceRepository":
        """Build from the usual <owner>/<repo> format

        Raises:
            ValueError: full_name does not match <owner>/<repo>
        """
        if not match("^[a-zA-Z0-9-]+/[a-zA-Z0-9._-]+$", full_name):
            raise ValueError("repo does not match expected pattern (<owner>/<repo>)")
        (owner, repo) = full_name.split("/")
        return cls(owner=owner, repo=repo, **kwargs)

    @field_validator("owner", "repo", "branch")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class DeployTarget(BaseModel):
    """Configuration of the S3 deploy action.

    Attributes:
        bucket_name (str): existing bucket to deploy into, a new one is created when
                           omitted
        bucket_region (str): region of the existing bucket. A region other than
                             the stack's makes the action cross-region
        access_control (s3.BucketAccessControl): canned ACL applied to the objects
        cache_control (Tuple[str, ...]): Cache-Control directives, e.g.
                                        ("public", "max-age=12h")
        object_key (str): destination path in the bucket
        extract (bool): unzip the artifact before upload
        encryption_key_arn (str): existing KMS key, a new one is created when
                                  omitted
        run_order (int): position of the action in its stage
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    bucket_name: Optional[str] = None
    bucket_region: Optional[str] = None
    access_control: Optional[s3.BucketAccessControl] = None
    cache_control: Tuple[str, ...] = ()
    object_key: Optional[str] = None
    extract: bool = True
    encryption_key_arn: Optional[str] = None
    run_order: Optional[int] = None

    @field_validator("access_control", mode="before")
    @classmethod
    def parse_access_control(cls, value):
        if value is None or isinstance(value, s3.BucketAccessControl):
            return value
        name = str(value).strip().upper().replace("-", "_")
        try:
            return s3.BucketAccessControl[name]
        except KeyError:
            raise ValueError(f"unknown access control '{value}'") from None

    @field_validator("cache_control", mode="before")
    @classmethod
    def check_cache_control(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        directives = tuple(x.strip() for x in value if x.strip())
        for directive in directives:
            try:
                parse_directive(directive)
            except CacheControlError as err:
                raise ValueError(
                    f"invalid cache-control directive '{directive}': {err}"
                ) from err
        return directives

    @field_validator("run_order")
    @classmethod
    def positive_run_order(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("run_order must be 1 or greater")
        return value

    @model_validator(mode="after")
    def check_bucket_and_key(self) -> "DeployTarget":
        if self.bucket_region is not None and self.bucket_name is None:
            raise ValueError("bucket_region requires bucket_name")
        if not self.extract and not self.object_key:
            raise ValueError("object_key is required when extract is disabled")
        return self


class DeploySettings(BaseModel):
    """Everything needed to synthesize the deployment pipeline"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: SourceRepository
    target: DeployTarget = DeployTarget()
    pipeline_name: Optional[str] = None
    stage_name: str = "Deploy"
    action_name: str = "CopyFiles"
