"""DynamoDB data client: a small query builder whose calls return (data, error) results.

Usage mirrors the hosted store's REST client:

    client.table("blogs").select().eq("user_id", uid).order("updated_at", ascending=False).execute()
    client.table("blogs").insert([{...}]).select().single().execute()

Store failures never raise; they come back as ``Result.error`` strings.
Every table is keyed by a string ``id``.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from shared import config

logger = logging.getLogger(__name__)

SINGLE_ROW_ERROR = "JSON object requested, multiple (or no) rows returned"

# DynamoDB limit on the operands of one IN condition.
_MAX_IN_VALUES = 100


@dataclass
class Result:
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class _Embed:
    alias: str
    through: str
    local: str
    remote: str
    target: str
    key: str
    columns: list[str] | None = field(default=None)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_update_expression(data: dict) -> tuple[str, dict, dict]:
    """
    Build a DynamoDB SET expression from a flat dict of {field: value}.

    Returns (UpdateExpression, ExpressionAttributeNames, ExpressionAttributeValues).

    All attribute names are aliased via ExpressionAttributeNames to avoid
    conflicts with DynamoDB reserved words (e.g. status, name, content).
    """
    parts: list[str] = []
    names: dict[str, str] = {}
    values: dict[str, object] = {}

    for i, (key, value) in enumerate(data.items()):
        name_ph = f"#k{i}"
        val_ph = f":v{i}"
        parts.append(f"{name_ph} = {val_ph}")
        names[name_ph] = key
        values[val_ph] = value

    return "SET " + ", ".join(parts), names, values


def _from_dynamo(value):
    """DynamoDB hands numbers back as Decimal; callers expect int/float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


def _parse_columns(columns: str) -> list[str] | None:
    if columns.strip() == "*":
        return None
    return [c.strip() for c in columns.split(",") if c.strip()]


def _project(row: dict, columns: list[str] | None) -> dict:
    if columns is None:
        return dict(row)
    return {c: row.get(c) for c in columns}


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Message") or str(exc)
    return str(exc)


class Query:
    """One request against one table. Builder methods return ``self``."""

    def __init__(self, client: "DataClient", table_name: str):
        self._client = client
        self._table_name = table_name
        self._action = "select"
        self._payload: Any = None
        self._columns: list[str] | None = None
        self._filters: list[tuple[str, str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._range: tuple[int, int] | None = None
        self._single = False
        self._embeds: list[_Embed] = []

    # ── Actions ───────────────────────────────────────────────────────────────

    def select(self, columns: str = "*") -> "Query":
        # After insert/update/delete this only narrows the returned rows.
        self._columns = _parse_columns(columns)
        return self

    def insert(self, rows: list[dict]) -> "Query":
        self._action = "insert"
        self._payload = rows
        return self

    def update(self, values: dict) -> "Query":
        self._action = "update"
        self._payload = {k: v for k, v in values.items() if k != "id"}
        return self

    def delete(self) -> "Query":
        self._action = "delete"
        return self

    # ── Modifiers ─────────────────────────────────────────────────────────────

    def eq(self, column: str, value: Any) -> "Query":
        self._filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values) -> "Query":
        self._filters.append(("in", column, list(values)))
        return self

    def order(self, column: str, ascending: bool = True) -> "Query":
        self._order = (column, ascending)
        return self

    def range(self, start: int, end: int) -> "Query":
        """Inclusive on both ends."""
        self._range = (start, end)
        return self

    def single(self) -> "Query":
        self._single = True
        return self

    def embed(
        self,
        alias: str,
        *,
        through: str,
        local: str,
        remote: str,
        target: str,
        key: str,
        columns: str = "*",
    ) -> "Query":
        """
        Attach many-to-many rows the way the store nests a join:

            row[alias] = [{key: <target row or None>}, ...]

        ``through`` rows link ``through.local == row.id`` to ``target.id == through.remote``.
        """
        self._embeds.append(
            _Embed(alias, through, local, remote, target, key, _parse_columns(columns))
        )
        return self

    # ── Execution ─────────────────────────────────────────────────────────────

    def execute(self) -> Result:
        try:
            if self._action == "insert":
                rows = self._run_insert()
            elif self._action == "update":
                rows = self._run_update()
            elif self._action == "delete":
                rows = self._run_delete()
            else:
                rows = self._run_select()
        except (ClientError, BotoCoreError) as exc:
            logger.warning(
                "Store request failed",
                extra={"table": self._table_name, "action": self._action, "error": str(exc)},
            )
            return Result(error=_error_message(exc))

        if self._single:
            if len(rows) != 1:
                return Result(error=SINGLE_ROW_ERROR)
            return Result(data=rows[0])
        return Result(data=rows)

    def _table(self, name: str | None = None):
        return self._client.resource.Table(name or self._table_name)

    def _condition(self):
        condition = None
        for op, column, value in self._filters:
            part = Attr(column).eq(value) if op == "eq" else Attr(column).is_in(value)
            condition = part if condition is None else condition & part
        return condition

    def _scan(self, table_name: str | None = None, condition=None) -> list[dict]:
        kwargs: dict = {}
        if condition is not None:
            kwargs["FilterExpression"] = condition

        table = self._table(table_name)
        items: list[dict] = []
        while True:
            response = table.scan(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return [_from_dynamo(item) for item in items]

    def _scan_in(self, table_name: str, column: str, values: list) -> list[dict]:
        rows: list[dict] = []
        for i in range(0, len(values), _MAX_IN_VALUES):
            chunk = values[i:i + _MAX_IN_VALUES]
            rows.extend(self._scan(table_name, Attr(column).is_in(chunk)))
        return rows

    def _matches(self) -> list[dict]:
        # DynamoDB rejects an empty IN list; nothing can match it anyway.
        if any(op == "in" and not value for op, _, value in self._filters):
            return []
        return self._scan(condition=self._condition())

    def _sort(self, rows: list[dict]) -> list[dict]:
        column, ascending = self._order
        present = [r for r in rows if r.get(column) is not None]
        missing = [r for r in rows if r.get(column) is None]
        present.sort(key=lambda r: r[column], reverse=not ascending)
        # Store semantics: NULLS LAST ascending, NULLS FIRST descending.
        return present + missing if ascending else missing + present

    def _run_select(self) -> list[dict]:
        rows = self._matches()
        if self._order:
            rows = self._sort(rows)
        if self._range:
            start, end = self._range
            rows = rows[max(start, 0):max(end + 1, 0)]

        projected = [_project(row, self._columns) for row in rows]
        for embed in self._embeds:
            self._attach(embed, rows, projected)
        return projected

    def _attach(self, embed: _Embed, rows: list[dict], projected: list[dict]) -> None:
        ids = [row["id"] for row in rows]
        links: list[dict] = []
        if ids:
            links = self._scan_in(embed.through, embed.local, ids)
        links.sort(key=lambda link: link.get("created_at") or "")

        target_ids = list({link[embed.remote] for link in links if link.get(embed.remote)})
        targets: dict[str, dict] = {}
        if target_ids:
            for target in self._scan_in(embed.target, "id", target_ids):
                targets[target["id"]] = _project(target, embed.columns)

        for row, out in zip(rows, projected):
            out[embed.alias] = [
                {embed.key: targets.get(link.get(embed.remote))}
                for link in links
                if link[embed.local] == row["id"]
            ]

    def _run_insert(self) -> list[dict]:
        ts = now_iso()
        table = self._table()
        rows: list[dict] = []
        for values in self._payload:
            row = {"id": str(uuid.uuid4()), "created_at": ts, "updated_at": ts, **values}
            table.put_item(Item=row)
            rows.append(_project(row, self._columns))
        return rows

    def _run_update(self) -> list[dict]:
        matches = self._matches()
        if not matches:
            return []

        values = {**self._payload, "updated_at": now_iso()}
        expr, names, attr_values = build_update_expression(values)
        table = self._table()
        rows: list[dict] = []
        for row in matches:
            table.update_item(
                Key={"id": row["id"]},
                UpdateExpression=expr,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=attr_values,
            )
            rows.append(_project({**row, **values}, self._columns))
        return rows

    def _run_delete(self) -> list[dict]:
        matches = self._matches()
        table = self._table()
        for row in matches:
            table.delete_item(Key={"id": row["id"]})
        return [_project(row, self._columns) for row in matches]


class DataClient:
    def __init__(self, resource):
        self.resource = resource

    def table(self, name: str) -> Query:
        return Query(self, name)


def get_client() -> DataClient:
    """Build a client for the configured store. Raises ConfigurationError when unset."""
    return DataClient(boto3.resource("dynamodb", **config.check_store_config()))
