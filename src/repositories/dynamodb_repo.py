"""DynamoDB repository for the projects, tickets and users collections."""

from typing import Any, Dict, Iterable, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from utils.error_handling import DocumentStoreError


class DynamoDbRepository:
    """Get, set and merge documents keyed by ``id`` in one table."""

    def __init__(self, table_name: str, key_name: str = "id"):
        self.table_name = table_name
        self.key_name = key_name
        self.table = boto3.resource("dynamodb").Table(table_name)

    def get(self, doc_id: str, fields: Optional[Iterable[str]] = None) -> Optional[Dict[str, Any]]:
        """Read one document, optionally projecting only ``fields``."""
        kwargs: Dict[str, Any] = {"Key": {self.key_name: doc_id}}
        if fields:
            names = {f"#f{i}": name for i, name in enumerate(fields)}
            kwargs["ProjectionExpression"] = ", ".join(names)
            kwargs["ExpressionAttributeNames"] = names
        try:
            resp = self.table.get_item(**kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise DocumentStoreError(
                f"Read {self.table_name}/{doc_id} failed: {exc}"
            ) from exc
        return resp.get("Item")

    def put(self, item: Dict[str, Any]) -> None:
        """Create or fully replace a document (no existence condition)."""
        try:
            self.table.put_item(Item=item)
        except (BotoCoreError, ClientError) as exc:
            raise DocumentStoreError(
                f"Write {self.table_name}/{item.get(self.key_name)} failed: {exc}"
            ) from exc

    def merge(self, doc_id: str, fields: Dict[str, Any]) -> None:
        """
        Set ``fields`` on a document, keeping every other attribute.

        Creates the document if it does not exist yet.
        """
        names = {f"#f{i}": name for i, name in enumerate(fields)}
        values = {f":v{i}": value for i, value in enumerate(fields.values())}
        assignments = ", ".join(f"#f{i} = :v{i}" for i in range(len(fields)))
        self._update(
            doc_id,
            UpdateExpression=f"SET {assignments}",
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
        )

    def append_to_list(self, doc_id: str, field: str, values: List[Any]) -> None:
        """Atomically append ``values`` to a list attribute, creating it if absent."""
        self._update(
            doc_id,
            UpdateExpression="SET #f = list_append(if_not_exists(#f, :empty), :vals)",
            ExpressionAttributeNames={"#f": field},
            ExpressionAttributeValues={":empty": [], ":vals": list(values)},
        )

    def _update(self, doc_id: str, **kwargs: Any) -> None:
        try:
            self.table.update_item(Key={self.key_name: doc_id}, **kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise DocumentStoreError(
                f"Update {self.table_name}/{doc_id} failed: {exc}"
            ) from exc
