# app/core/metrics.py
from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# HTTP
REQUESTS = Counter("http_requests_total", "HTTP requests", ["path", "method", "status"])
LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration (s)", ["path", "method"],
    # publicação inclui upload para o S3, daí a cauda longa
    buckets=(0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)

# Storage
UPLOAD_BYTES = Counter("asset_upload_bytes_total", "Total bytes sent to object storage")
S3_OPS = Counter("s3_operations_total", "S3 operations", ["op", "status"])  # op: put, delete
ASSET_COMPENSATIONS = Counter(
    "asset_compensations_total", "Asset cleanups after a failed publish", ["outcome"],  # ok, failed
)

# DynamoDB
DDB_OPS = Counter("dynamodb_operations_total", "DynamoDB operations", ["op", "status"])
TOGGLE_CONFLICTS = Counter("video_toggle_conflicts_total", "Compare-and-swap retries on publish toggle")

router_metrics = APIRouter(tags=["observability"])


@router_metrics.get("/metrics", include_in_schema=False)
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
