"""Identity of the current EC2 instance and the EC2 client scoped to it."""

import logging
from dataclasses import dataclass

import boto3
import botocore.session
from ec2_metadata import EC2Metadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstanceIdentity:
    """Instance id and region from the instance identity document."""

    instance_id: str
    region: str


class InstanceIdentityProvider:
    """
    Reads the instance identity from the instance metadata service and
    creates EC2 clients that authenticate with the instance role.
    """

    def __init__(self, metadata_service_num_attempts: int = 3):
        self.metadata_service_num_attempts = metadata_service_num_attempts

    def get_identity(self) -> InstanceIdentity:
        # Fresh object per call: EC2Metadata caches its lookups
        metadata = EC2Metadata()
        identity = InstanceIdentity(
            instance_id=metadata.instance_id, region=metadata.region
        )
        logger.debug(f"Instance identity: {identity.instance_id} in {identity.region}")
        return identity

    def create_ec2_client(self, identity: InstanceIdentity):
        # Credentials resolve through botocore's chain, which ends with the
        # instance role served by the metadata service.
        core_session = botocore.session.get_session()
        core_session.set_config_variable(
            "metadata_service_num_attempts", self.metadata_service_num_attempts
        )
        session = boto3.session.Session(
            botocore_session=core_session, region_name=identity.region
        )
        return session.client("ec2")
