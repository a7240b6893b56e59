"""
DynamoDB-backed key/value store for the durable session copy.

An alternative to the local session file: the token and cached user are kept
as two items in a DynamoDB table instead of on disk. Same key/value contract
as the other stores.
"""

import time
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from collegehub.utils.logger import get_logger
from .exceptions import (
    NetworkError,
    NotFoundError,
    PermissionError,
    StorageException,
    ThrottlingError,
)


logger = get_logger(__name__)


class DynamoDBSessionStore:
    """
    Session storage in DynamoDB.

    Table Schema:
        Partition Key: id (the storage key, e.g. "authToken")
        Attribute: value (string payload)
    """

    def __init__(
        self,
        table_name: str = "session",
        dynamodb_resource: Optional[Any] = None,
        region_name: Optional[str] = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
    ):
        """
        Initialize DynamoDBSessionStore.

        Args:
            table_name: DynamoDB table name (default: "session")
            dynamodb_resource: boto3 DynamoDB resource (default: creates new)
            region_name: AWS region used when creating the resource
            max_retries: Number of retries for throttling errors
            backoff_base: Base exponential backoff multiplier (seconds)
        """
        self.table_name = table_name
        self.dynamodb = dynamodb_resource or boto3.resource("dynamodb", region_name=region_name)
        self.table = self.dynamodb.Table(table_name)
        self.max_retries = max_retries
        self.backoff_base = backoff_base

    def _translate_client_error(self, e: ClientError, operation: str, context: dict):
        error_code = e.response.get("Error", {}).get("Code", "Unknown")

        if error_code in ("AccessDeniedException", "UnrecognizedClientException"):
            logger.error(
                "Permission denied",
                operation=operation,
                context=context,
                error=error_code,
            )
            return PermissionError(f"Insufficient IAM permissions: {error_code}")

        if error_code == "ResourceNotFoundException":
            logger.error(
                "Session table not found",
                operation=operation,
                context={**context, "table": self.table_name},
                error=error_code,
            )
            return NotFoundError(f"DynamoDB table '{self.table_name}' not found")

        logger.error(
            "DynamoDB error",
            operation=operation,
            context=context,
            error=str(e),
        )
        return StorageException(f"DynamoDB error: {e}")

    def get_item(self, key: str) -> Optional[str]:  # type: ignore[return]
        """
        Read a stored value.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent

        Raises:
            NetworkError: If connection fails
            PermissionError: If IAM permissions insufficient
        """
        context = {"key": key}

        try:
            start_time = time.time()
            response = self.table.get_item(Key={"id": key})
            duration_ms = (time.time() - start_time) * 1000

            item = response.get("Item")
            if item is None:
                logger.debug("Key not found", operation="get_item", context=context)
                return None

            logger.debug(
                "Key retrieved",
                operation="get_item",
                context={**context, "duration_ms": round(duration_ms, 2)},
            )
            return item.get("value")

        except ClientError as e:
            raise self._translate_client_error(e, "get_item", context)

        except (BotoCoreError, OSError) as e:
            logger.error(
                "Network error",
                operation="get_item",
                context=context,
                error=str(e),
            )
            raise NetworkError(f"Network error: {e}")

    def set_item(self, key: str, value: str) -> bool:  # type: ignore[return]
        """
        Write a value (upsert semantics).

        Retries with exponential backoff while DynamoDB throttles the write.

        Returns:
            True if successful

        Raises:
            ThrottlingError: If still throttled after max_retries
            NetworkError: If connection fails
            PermissionError: If IAM permissions insufficient
        """
        context = {"key": key, "value_length": len(value)}

        for attempt in range(self.max_retries):
            try:
                start_time = time.time()
                self.table.put_item(Item={"id": key, "value": value})
                duration_ms = (time.time() - start_time) * 1000

                logger.info(
                    "Key saved",
                    operation="set_item",
                    context=context,
                    duration_ms=duration_ms,
                )
                return True

            except ClientError as e:
                error_code = e.response.get("Error", {}).get("Code", "Unknown")

                if error_code == "ProvisionedThroughputExceededException":
                    if attempt < self.max_retries - 1:
                        wait_time = self.backoff_base * (2**attempt)
                        logger.warning(
                            f"Throttled, retrying after {wait_time}s",
                            operation="set_item",
                            context=context,
                            error=error_code,
                        )
                        time.sleep(wait_time)
                        continue
                    raise ThrottlingError(f"DynamoDB throttled after {self.max_retries} retries")

                raise self._translate_client_error(e, "set_item", context)

            except (BotoCoreError, OSError) as e:
                logger.error(
                    "Network error",
                    operation="set_item",
                    context=context,
                    error=str(e),
                )
                raise NetworkError(f"Network error: {e}")

    def remove_item(self, key: str) -> bool:  # type: ignore[return]
        """
        Delete a stored value.

        Returns:
            True if successful (or the key didn't exist)

        Raises:
            NetworkError: If connection fails
            PermissionError: If IAM permissions insufficient
        """
        context = {"key": key}

        try:
            self.table.delete_item(Key={"id": key})
            logger.info("Key removed", operation="remove_item", context=context)
            return True

        except ClientError as e:
            raise self._translate_client_error(e, "remove_item", context)

        except (BotoCoreError, OSError) as e:
            logger.error(
                "Network error",
                operation="remove_item",
                context=context,
                error=str(e),
            )
            raise NetworkError(f"Network error: {e}")
