import logging
from typing import Iterable, List, NamedTuple, Optional, TYPE_CHECKING
from .topology import split_list

if TYPE_CHECKING:
    from .minio_client import MinioClient

log = logging.getLogger(__name__)


class BucketSpec(NamedTuple):
    name: str
    policy: Optional[str] = None


def parse_bucket_list(raw: Optional[str]) -> List[BucketSpec]:
    """
    Parses MINIO_DEFAULT_BUCKETS, e.g. `logs,data:download;public:public`.

    Entries are separated by commas or semicolons; an optional policy follows
    the bucket name after a colon.
    """
    buckets = []
    for entry in split_list(raw):
        name, _, policy = entry.partition(":")
        if not name:
            continue
        buckets.append(BucketSpec(name=name, policy=policy or None))
    return buckets


class BucketProvisioner:
    """Creates the declared buckets that do not exist yet and applies their policies."""

    def __init__(self, client: "MinioClient", region: str = ""):
        self.client = client
        self.region = region

    def provision(self, buckets: Iterable[BucketSpec]) -> List[str]:
        """
        Ensures every declared bucket exists.

        Existing buckets are skipped untouched, including their policy. Any
        failure of the admin channel propagates: a half-provisioned node should
        not come up silently.

        :param buckets: The declared buckets.
        :return: The names of the buckets created by this call.
        """
        buckets = list(buckets)
        if not buckets:
            return []

        log.info("Creating default buckets...")
        created = []
        for bucket in buckets:
            if self.client.bucket_exists(bucket.name):
                log.info(f"Bucket {self.client.alias}/{bucket.name} already exists, skipping creation.")
                continue

            self.client.make_bucket(bucket.name, region=self.region or None)
            created.append(bucket.name)
            if bucket.policy:
                log.info(f"Setting policy {bucket.policy} for {self.client.alias} bucket {bucket.name}")
                self.client.set_policy(bucket.name, bucket.policy)
        return created
