"""
FastAPI server — expõe o assistente educacional via HTTP.

Rotas finas: transcrição, síntese de voz e PDF ficam aqui; todo o diálogo
passa pelo DialogueController.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response
from starlette.concurrency import run_in_threadpool

from assistente.artifacts import find_lesson_plan
from assistente.audio import (
    OpenAISpeechSynthesizer,
    OpenAITranscriber,
    SpeechSynthesisError,
    TranscriptionError,
)
from assistente.chat_log import ChatLogger
from assistente.config import (
    LOG_LEVEL,
    MAX_AUDIO_BYTES,
    MAX_TTS_CHARS,
    SESSION_SWEEP_INTERVAL_SECONDS,
    SESSION_TTL_MINUTES,
    VALID_VOICES,
    VIDEO_DIR,
    VIDEO_FILES,
)
from assistente.controller import DialogueController
from assistente.fallbacks import (
    NO_PLAN_FOR_PDF,
    PDF_FAILED,
    SPEECH_FAILED,
    TRANSCRIPTION_FAILED,
)
from assistente.llm import LLMIntentClassifier, LLMSlotExtractor, LLMTextGenerator
from assistente.oracles import Oracles, PdfRenderer, SpeechSynthesizer, Transcriber
from assistente.pdf import HttpPdfRenderer, PdfRenderError, format_plan_for_pdf
from assistente.schemas import (
    AudioResponse,
    ChatRequest,
    ChatResponse,
    ContextResponse,
    LogsToggle,
    MessageType,
    ProcessResult,
    TTSRequest,
)
from assistente.session import SessionStore

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def default_oracles() -> Oracles:
    return Oracles(
        classifier=LLMIntentClassifier(),
        extractor=LLMSlotExtractor(),
        generator=LLMTextGenerator(),
    )


async def sweep_sessions(store: SessionStore, interval_seconds: float, ttl_minutes: float) -> None:
    """Remove periodicamente as sessões inativas."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            store.sweep_inactive(ttl_minutes)
        except Exception as e:
            logger.exception(f"Falha no sweep de sessões: {e}")


def create_app(
    store: Optional[SessionStore] = None,
    oracles: Optional[Oracles] = None,
    transcriber: Optional[Transcriber] = None,
    synthesizer: Optional[SpeechSynthesizer] = None,
    pdf_renderer: Optional[PdfRenderer] = None,
    sweep_interval: float = SESSION_SWEEP_INTERVAL_SECONDS,
) -> FastAPI:
    """Monta a aplicação. Colaboradores ausentes são criados no startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = app.state
        if state.controller is None:
            state.controller = DialogueController(state.store, oracles or default_oracles())
        if state.transcriber is None:
            state.transcriber = OpenAITranscriber()
        if state.synthesizer is None:
            state.synthesizer = OpenAISpeechSynthesizer()
        if state.pdf_renderer is None:
            state.pdf_renderer = HttpPdfRenderer()

        sweeper = asyncio.create_task(sweep_sessions(state.store, sweep_interval, SESSION_TTL_MINUTES))
        logger.info("🚀 Assistente Educacional started")
        yield
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            logger.info("Sweep de sessões encerrado")
        logger.info("👋 Assistente Educacional stopped")

    app = FastAPI(
        title="Assistente Educacional",
        description="Assistente conversacional para professores com LangGraph + OpenAI",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store or SessionStore()
    app.state.controller = DialogueController(app.state.store, oracles) if oracles else None
    app.state.transcriber = transcriber
    app.state.synthesizer = synthesizer
    app.state.pdf_renderer = pdf_renderer

    def controller() -> DialogueController:
        return app.state.controller

    # ── Chat ──────────────────────────────────────────────────────────

    def _speak(text: str, voice: str, session_id: str) -> Optional[str]:
        """Áudio da resposta como data URL; falha vira resposta sem áudio."""
        try:
            audio = app.state.synthesizer.synthesize(text[:MAX_TTS_CHARS], voice)
        except SpeechSynthesisError as e:
            logger.warning(f"[{session_id}] TTS falhou: {e}")
            ChatLogger.log_error(session_id, e, {"context": "tts"})
            return None
        return "data:audio/mpeg;base64," + base64.b64encode(audio).decode("ascii")

    def _chat_response(result: ProcessResult, audio_url: Optional[str] = None) -> ChatResponse:
        return ChatResponse(
            session_id=result.session_id,
            response=result.text,
            intent=result.intent,
            side_effects=result.side_effects,
            audio_url=audio_url,
        )

    @app.post("/chat", response_model=ChatResponse)
    def chat(request: ChatRequest):
        """Endpoint principal de chat."""
        if not request.message.strip():
            raise HTTPException(status_code=400, detail="Mensagem é obrigatória")
        if request.voice not in VALID_VOICES:
            raise HTTPException(status_code=400, detail=f"Voz inválida. Use: {', '.join(VALID_VOICES)}")

        session_id = request.session_id or str(uuid.uuid4())
        result = controller().process_message(request.message, session_id)

        audio_url = None
        if request.generate_audio and result.text:
            audio_url = _speak(result.text, request.voice, session_id)
            result.side_effects.audio_voice = request.voice if audio_url else None
        return _chat_response(result, audio_url)

    @app.post("/audio", response_model=AudioResponse)
    async def audio(
        request: Request,
        session_id: Optional[str] = Query(default=None),
        filename: str = Query(default="audio.webm"),
    ):
        """Recebe o áudio bruto no corpo, transcreve e processa como mensagem."""
        body = await request.body()
        if not body:
            raise HTTPException(status_code=400, detail="Arquivo de áudio é obrigatório")
        if len(body) > MAX_AUDIO_BYTES:
            raise HTTPException(status_code=413, detail="Arquivo de áudio muito grande. Máximo 25MB.")

        session_id = session_id or str(uuid.uuid4())
        try:
            transcription = await run_in_threadpool(app.state.transcriber.transcribe, body, filename)
        except TranscriptionError as e:
            logger.warning(f"[{session_id}] Transcrição falhou: {e}")
            ChatLogger.log_error(session_id, e, {"context": "transcription"})
            raise HTTPException(status_code=422, detail=TRANSCRIPTION_FAILED)

        result = await run_in_threadpool(
            controller().process_message, transcription, session_id, MessageType.audio
        )
        response = _chat_response(result)
        return AudioResponse(**response.model_dump(), transcription=transcription)

    @app.post("/tts")
    def tts(request: TTSRequest):
        if len(request.text) > MAX_TTS_CHARS:
            raise HTTPException(status_code=400, detail=f"Texto muito longo. Máximo {MAX_TTS_CHARS} caracteres.")
        if request.voice not in VALID_VOICES:
            raise HTTPException(status_code=400, detail=f"Voz inválida. Use: {', '.join(VALID_VOICES)}")

        try:
            audio = app.state.synthesizer.synthesize(request.text, request.voice)
        except SpeechSynthesisError as e:
            ChatLogger.log_error(request.session_id or "tts", e, {"context": "tts"})
            raise HTTPException(status_code=502, detail=SPEECH_FAILED)
        return Response(content=audio, media_type="audio/mpeg")

    # ── Artefatos ─────────────────────────────────────────────────────

    @app.get("/pdf")
    def pdf(session_id: str = Query(...)):
        context = controller().get_context(session_id)
        found = find_lesson_plan(context) if context else None
        if found is None:
            raise HTTPException(status_code=404, detail=NO_PLAN_FOR_PDF)

        try:
            document = app.state.pdf_renderer.render(format_plan_for_pdf(found.content), "Plano de Aula")
        except PdfRenderError as e:
            ChatLogger.log_error(session_id, e, {"context": "pdf"})
            raise HTTPException(status_code=502, detail=PDF_FAILED)

        return Response(
            content=document,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="plano-de-aula-{session_id}.pdf"'},
        )

    @app.get("/video")
    def video(kind: str = Query(..., alias="type")):
        filename = VIDEO_FILES.get(kind)
        if filename is None:
            raise HTTPException(status_code=400, detail="Tipo de vídeo não especificado")
        path = VIDEO_DIR / filename
        if not path.is_file():
            raise HTTPException(status_code=404, detail="Arquivo de vídeo não encontrado")
        return FileResponse(path, media_type="video/mp4", headers={"Cache-Control": "public, max-age=31536000"})

    # ── Sessões ───────────────────────────────────────────────────────

    @app.get("/context", response_model=ContextResponse)
    def get_context(session_id: str = Query(...)):
        context = controller().get_context(session_id)
        if context is None:
            raise HTTPException(status_code=404, detail="Sessão não encontrada")
        return ContextResponse(**context.model_dump())

    @app.get("/context/history")
    def get_history(session_id: str = Query(...)):
        history = controller().get_history(session_id)
        return {"session_id": session_id, "history": [m.model_dump(mode="json") for m in history]}

    @app.delete("/context")
    def delete_context(session_id: str = Query(...)):
        controller().clear_context(session_id)
        return {"status": "deleted", "session_id": session_id}

    @app.get("/sessions")
    def list_sessions():
        return {"sessions": app.state.store.list_sessions()}

    # ── Logs / Health ─────────────────────────────────────────────────

    @app.get("/logs")
    def get_logs():
        return {"enabled": ChatLogger.is_enabled()}

    @app.post("/logs")
    def toggle_logs(toggle: LogsToggle):
        ChatLogger.set_enabled(toggle.enabled)
        logger.info(f"Log de conversa {'ativado' if toggle.enabled else 'desativado'}")
        return {"enabled": ChatLogger.is_enabled()}

    @app.get("/health")
    def health():
        return {"status": "ok", "service": "assistente-educacional", "version": VERSION}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("assistente.server:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
