"""
Transcrição (Whisper) e síntese de voz (TTS) via SDK da OpenAI.
"""

from __future__ import annotations

import io
import logging
from typing import Optional

from openai import OpenAI

from assistente.config import TRANSCRIPTION_MODEL, TTS_MODEL, TTS_VOICE, get_openai_client

logger = logging.getLogger(__name__)


class TranscriptionError(RuntimeError):
    pass


class SpeechSynthesisError(RuntimeError):
    pass


class OpenAITranscriber:
    def __init__(self, client: Optional[OpenAI] = None, model: str = TRANSCRIPTION_MODEL):
        self.client = client or get_openai_client()
        self.model = model

    def transcribe(self, audio: bytes, filename: str = "audio.webm") -> str:
        logger.info(f"Transcrevendo áudio ({len(audio)} bytes)")
        buffer = io.BytesIO(audio)
        buffer.name = filename
        try:
            response = self.client.audio.transcriptions.create(
                file=buffer,
                model=self.model,
                language="pt",
            )
        except Exception as e:
            raise TranscriptionError(str(e)) from e

        text = (response.text or "").strip()
        if not text:
            raise TranscriptionError("Transcrição vazia")
        return text


class OpenAISpeechSynthesizer:
    def __init__(self, client: Optional[OpenAI] = None, model: str = TTS_MODEL):
        self.client = client or get_openai_client()
        self.model = model

    def synthesize(self, text: str, voice: str = TTS_VOICE) -> bytes:
        try:
            response = self.client.audio.speech.create(
                model=self.model,
                voice=voice,
                input=text,
                response_format="mp3",
                speed=1.0,
            )
        except Exception as e:
            raise SpeechSynthesisError(str(e)) from e
        return response.content
