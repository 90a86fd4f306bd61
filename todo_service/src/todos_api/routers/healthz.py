from fastapi import APIRouter

from ..schemas import HealthzResponse

router = APIRouter(tags=["health"])


# PUBLIC_INTERFACE
@router.get("/healthz", response_model=HealthzResponse, summary="Health Check")
def healthz() -> HealthzResponse:
    """
    Liveness probe. Always answers 200 with a static payload.
    """
    return HealthzResponse()
