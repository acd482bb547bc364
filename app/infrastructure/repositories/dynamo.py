# app/infrastructure/repositories/dynamo.py
# Utilidades comuns aos repositórios DynamoDB.
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from app.core.errors import PersistenceError
from app.core.metrics import DDB_OPS

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_conditional_failure(exc: BaseException) -> bool:
    return (
        isinstance(exc, ClientError)
        and exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED
    )


@contextmanager
def ddb_call(op: str) -> Iterator[None]:
    """Conta a operação e traduz falhas do boto em PersistenceError.

    Falha de condição passa adiante como ClientError: quem chamou decide se é
    "não encontrado" ou conflito.
    """
    try:
        yield
    except ClientError as e:
        if is_conditional_failure(e):
            DDB_OPS.labels(op=op, status="conflict").inc()
            raise
        DDB_OPS.labels(op=op, status="error").inc()
        raise PersistenceError(f"Falha no DynamoDB ({op})", [str(e)]) from e
    except BotoCoreError as e:
        DDB_OPS.labels(op=op, status="error").inc()
        raise PersistenceError(f"Falha no DynamoDB ({op})", [str(e)]) from e
    else:
        DDB_OPS.labels(op=op, status="ok").inc()


def to_ddb(value: Any) -> Any:
    # boto3 não aceita float
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def to_item(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: to_ddb(v) for k, v in data.items() if v is not None}


def set_expression(fields: Dict[str, Any]) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """Monta ``SET #f0 = :f0, ...`` para um dict de campos."""
    parts, names, values = [], {}, {}
    for i, (name, value) in enumerate(fields.items()):
        names[f"#f{i}"] = name
        values[f":f{i}"] = to_ddb(value)
        parts.append(f"#f{i} = :f{i}")
    return "SET " + ", ".join(parts), names, values


def scan_all(table, **kwargs) -> List[dict]:
    """Scan seguindo LastEvaluatedKey até o fim."""
    items: List[dict] = []
    while True:
        with ddb_call("scan"):
            resp = table.scan(**kwargs)
        items.extend(resp.get("Items", []))
        last = resp.get("LastEvaluatedKey")
        if not last:
            return items
        kwargs["ExclusiveStartKey"] = last


def query_all(table, **kwargs) -> List[dict]:
    items: List[dict] = []
    while True:
        with ddb_call("query"):
            resp = table.query(**kwargs)
        items.extend(resp.get("Items", []))
        last = resp.get("LastEvaluatedKey")
        if not last:
            return items
        kwargs["ExclusiveStartKey"] = last
