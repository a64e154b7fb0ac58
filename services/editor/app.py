"""Editor service API endpoints for the short-form caption editor."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, Response, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from services.editor.session import EditorSession
from shared.enums import ANIMATION_LABELS, VOICE_LABELS
from shared.models import (
    BACKGROUND_OPTIONS,
    APIResponse,
    AudioOffsetRequest,
    BackgroundOption,
    BackgroundRequest,
    CaptionGenerationRequest,
    ManualTextElement,
    SeekRequest,
    SelectionRequest,
    TextElementCreateRequest,
    TextElementUpdate,
    TimelineSnapshot,
    UploadedVideo,
    VisibleOverlays,
)
from shared.utils import config, setup_logging

logger = setup_logging("editor-service")

session = EditorSession()


@asynccontextmanager
async def lifespan(app: FastAPI):
    session.start_clock()
    try:
        yield
    finally:
        await session.stop_clock()
        await session.notifier.reset()


app = FastAPI(
    title="Editor Service",
    description="Timed caption overlays, narration and playback synchronization for short videos",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("allowed_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint for the editor service."""
    return APIResponse(message="Editor Service is healthy")


@app.get("/state", response_model=TimelineSnapshot)
async def get_state() -> TimelineSnapshot:
    return session.snapshot()


@app.get("/overlays", response_model=VisibleOverlays)
async def get_overlays() -> VisibleOverlays:
    """Overlay elements visible at the current playback time."""
    return session.overlays()


# Playback

@app.post("/playback/play", response_model=TimelineSnapshot)
async def play() -> TimelineSnapshot:
    session.play()
    return session.snapshot()


@app.post("/playback/pause", response_model=TimelineSnapshot)
async def pause() -> TimelineSnapshot:
    session.pause()
    return session.snapshot()


@app.post("/playback/toggle", response_model=TimelineSnapshot)
async def toggle_playback() -> TimelineSnapshot:
    session.toggle_playback()
    return session.snapshot()


@app.post("/playback/reset", response_model=TimelineSnapshot)
async def reset_playback() -> TimelineSnapshot:
    session.reset()
    return session.snapshot()


@app.post("/playback/seek", response_model=TimelineSnapshot)
async def seek(request: SeekRequest) -> TimelineSnapshot:
    session.seek(request.time)
    return session.snapshot()


@app.put("/audio-offset", response_model=TimelineSnapshot)
async def set_audio_offset(request: AudioOffsetRequest) -> TimelineSnapshot:
    """Set the audio sync offset; values are clamped to the allowed range."""
    session.set_audio_offset(request.offset)
    return session.snapshot()


# Text elements

@app.post("/text-elements", response_model=ManualTextElement, status_code=201)
async def add_text_element(request: TextElementCreateRequest):
    element = session.add_text_element(request.text)
    if element is None:
        return Response(status_code=204)
    return element


@app.patch("/text-elements/{element_id}", response_model=ManualTextElement)
async def update_text_element(element_id: str, updates: TextElementUpdate) -> ManualTextElement:
    element = session.update_text_element(element_id, updates)
    if element is None:
        raise HTTPException(status_code=404, detail=f"Text element {element_id} not found")
    return element


@app.post("/text-elements/{element_id}/toggle-visibility", response_model=ManualTextElement)
async def toggle_text_visibility(element_id: str) -> ManualTextElement:
    element = session.toggle_text_visibility(element_id)
    if element is None:
        raise HTTPException(status_code=404, detail=f"Text element {element_id} not found")
    return element


@app.delete("/text-elements/{element_id}")
async def delete_text_element(element_id: str):
    if not session.delete_text_element(element_id):
        raise HTTPException(status_code=404, detail=f"Text element {element_id} not found")
    return APIResponse(message="Text element deleted", data={"id": element_id})


@app.post("/selection")
async def select_element(request: SelectionRequest):
    if not session.select_element(request.element_id):
        raise HTTPException(status_code=404, detail=f"Text element {request.element_id} not found")
    return APIResponse(message="Selection updated", data={"selected_element_id": request.element_id})


# Captions

@app.post("/captions/generate")
async def generate_captions(request: CaptionGenerationRequest):
    """Narrate text and replace the word timeline.

    Failures are reported through the notification channel and leave the
    previous captions untouched.
    """
    if not request.text.strip():
        return APIResponse(success=False, message="No narration text provided")

    published = await session.generate_captions(request.text, request.voice)
    if not published:
        return APIResponse(success=False, message="Caption generation did not complete")

    snapshot = session.snapshot()
    return APIResponse(
        message="Captions generated",
        data={
            "generation": snapshot.generation,
            "words": len(snapshot.word_elements),
            "segments": len(snapshot.segments),
            "narration_duration": snapshot.narration.duration if snapshot.narration else None,
            "video_duration": snapshot.video_duration,
        },
    )


@app.delete("/captions")
async def clear_captions():
    session.clear_generated()
    return APIResponse(message="Generated captions cleared")


# Background

@app.get("/backgrounds", response_model=list[BackgroundOption])
async def get_backgrounds() -> list[BackgroundOption]:
    return BACKGROUND_OPTIONS


@app.put("/background", response_model=BackgroundOption)
async def set_background(request: BackgroundRequest) -> BackgroundOption:
    option = session.set_background(request.value)
    if option is None:
        raise HTTPException(status_code=404, detail=f"Unknown background {request.value}")
    return option


@app.post("/video", response_model=UploadedVideo)
async def upload_video(video_file: UploadFile = File(...)) -> UploadedVideo:
    data = await video_file.read()
    video = await session.upload_video(data, video_file.filename or "video.mp4", video_file.content_type)
    if video is None:
        raise HTTPException(status_code=400, detail="Video upload failed")
    return video


# Catalogues

@app.get("/voices")
async def get_voices() -> list[dict]:
    return [{"value": voice.value, "label": label} for voice, label in VOICE_LABELS.items()]


@app.get("/animations")
async def get_animations() -> list[dict]:
    return [{"value": kind.value, "label": label} for kind, label in ANIMATION_LABELS.items()]


@app.websocket("/ws")
async def editor_updates(websocket: WebSocket) -> None:
    """Push state snapshots and notifications to the presentation layer."""
    client_id = await session.notifier.connect(websocket)
    try:
        await websocket.send_json({"event": "state", "state": session.snapshot().model_dump(mode="json")})
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"Client {client_id} disconnected")
    finally:
        await session.notifier.disconnect(client_id)


if __name__ == "__main__":
    try:
        import uvicorn
    except ImportError as e:
        raise RuntimeError("uvicorn must be installed to run this service.") from e
    uvicorn.run(app, host="0.0.0.0", port=8010)
