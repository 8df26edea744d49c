from fastapi import APIRouter

from lightchat.app.version import __version__

router = APIRouter()


@router.get("/health")
def health():
    """Constant-time health check."""
    return {"status": "healthy"}


@router.get("/version")
async def version():
    return {"version": __version__}
