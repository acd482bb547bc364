from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", include_in_schema=False)
def health(request: Request):
    # liveness: não toca DynamoDB nem S3
    return {"status": "ok", "service": request.app.title, "version": request.app.version}
