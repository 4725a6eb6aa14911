# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
S3 bucket.

This module maps the Bucket primitives onto the S3 API through boto3:
head_object for existence and attributes, get_object for whole-object
reads and list_objects_v2 for delimiter-grouped prefix listings. Every call
goes through the retry decorator, which also converts botocore errors into
blobfs exceptions.
"""
import time
from typing import Optional

import boto3
from botocore.config import Config

from .bucket import Bucket, DEFAULT_PAGE_SIZE
from .exceptions import ObjectNotFoundError
from .retry import retry
from .types import ListObject, ListPage, ObjectAttributes
from ..utils import logger, time_function

class S3Bucket(Bucket):
    """
    Bucket backed by an S3 (or S3-compatible) service.

    Attributes:
        name (str): Name of the S3 bucket
        client: boto3 S3 client
    """

    def __init__(self, name: str, region: Optional[str] = None, endpoint_url: Optional[str] = None,
                 client=None, connect_timeout: float = 10.0, read_timeout: float = 60.0):
        """
        Initialize the bucket client.

        Args:
            name (str): Name of the S3 bucket
            region (str, optional): AWS region. Defaults to the boto3 default.
            endpoint_url (str, optional): Endpoint of an S3-compatible service.
            client (optional): Preconfigured boto3 S3 client. When given, the
                region, endpoint and timeouts are ignored.
            connect_timeout (float): Connection timeout in seconds.
            read_timeout (float): Read timeout in seconds.
        """
        self.name = name
        if client is None:
            config = Config(
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": 1, "mode": "standard"},
            )
            client = boto3.session.Session().client(
                "s3", region_name=region, endpoint_url=endpoint_url, config=config
            )
        self.client = client
        logger.info(f"Opened S3 bucket {name} (region={region}, endpoint={endpoint_url})")

    def exists(self, key: str) -> bool:
        try:
            self.attributes(key)
        except ObjectNotFoundError:
            return False
        return True

    @retry()
    def attributes(self, key: str) -> ObjectAttributes:
        start_time = time.time()
        response = self.client.head_object(Bucket=self.name, Key=key)
        time_function(f"head_object({key})", start_time)
        return ObjectAttributes(
            size=response["ContentLength"],
            mod_time=response["LastModified"],
            content_type=response.get("ContentType"),
            etag=response.get("ETag"),
        )

    @retry()
    def read_all(self, key: str) -> bytes:
        start_time = time.time()
        response = self.client.get_object(Bucket=self.name, Key=key)
        data = response["Body"].read()
        time_function(f"get_object({key}) fetched {len(data)} bytes", start_time)
        return data

    @retry()
    def list_page(self, prefix: str, delimiter: str = "/", page_size: int = DEFAULT_PAGE_SIZE,
                  token: Optional[str] = None) -> ListPage:
        params = {"Bucket": self.name, "Prefix": prefix, "MaxKeys": page_size}
        if delimiter:
            params["Delimiter"] = delimiter
        if token is not None:
            params["ContinuationToken"] = token

        start_time = time.time()
        response = self.client.list_objects_v2(**params)
        time_function(f"list_objects_v2(prefix={prefix!r})", start_time)

        objects = [
            ListObject(key=obj["Key"], size=obj.get("Size", 0), mod_time=obj["LastModified"])
            for obj in response.get("Contents", [])
        ]
        objects.extend(
            ListObject(key=common["Prefix"], is_dir=True)
            for common in response.get("CommonPrefixes", [])
        )
        objects.sort(key=lambda obj: obj.key)

        next_token = None
        if response.get("IsTruncated"):
            next_token = response.get("NextContinuationToken")
        return ListPage(objects=objects, next_token=next_token)

    def close(self) -> None:
        self.client.close()
        logger.info(f"S3 client for bucket {self.name} closed")

    def __repr__(self):
        return f"S3Bucket({self.name!r})"
