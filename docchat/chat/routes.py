from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from docchat.auth.deps import get_db, get_current_user, get_blob_store, get_gateway, get_settings
from docchat.chat.context import build_context
from docchat.config import Settings
from docchat.files.blob_store import BlobStore
from docchat.files.registry import FileRegistry
from docchat.llm.llm_gateway import InferenceGateway
from docchat.models.user import User
from docchat.schemas import ChatIn, ChatOut

router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("", response_model=ChatOut)
async def chat(
    body: ChatIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blobs: BlobStore = Depends(get_blob_store),
    gateway: InferenceGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    question = body.message.strip()
    if not question:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"reply": "Message required"})

    ctx = await run_in_threadpool(
        build_context, FileRegistry(db), blobs, user.id, settings.context_max_chars
    )
    if not ctx.ready:
        return ChatOut(reply=ctx.diagnostic)

    return ChatOut(reply=await gateway.ask(ctx.text, question))
