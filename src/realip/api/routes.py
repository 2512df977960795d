"""Demo routes echoing what the application sees as the client."""

from fastapi import APIRouter
from pydantic import BaseModel

from .deps import ClientAddressDep, ClientIPDep

router = APIRouter()


class WhoAmIResponse(BaseModel):
    ip: str
    address: str


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(ip: ClientIPDep, address: ClientAddressDep) -> WhoAmIResponse:
    return WhoAmIResponse(ip=ip, address=address)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
