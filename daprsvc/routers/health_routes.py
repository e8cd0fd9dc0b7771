from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz(req: Request):
    return {"status": "ok", "service": req.app.state.settings.SERVICE_NAME}
