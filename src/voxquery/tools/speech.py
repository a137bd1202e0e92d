"""Text-to-speech tool: Gemini TTS to a WAV file on disk."""

from __future__ import annotations

import base64
import os
import uuid
from pathlib import Path
from typing import Any

import requests

from voxquery.logging import get_logger
from voxquery.tools.results import ToolResult
from voxquery.tools.wav import encode_wav, parse_audio_format


logger = get_logger(__name__)

TOOL_NAME = "generate_and_save_audio"

DEFAULT_VOICE = "Charon"
KNOWN_VOICES = ("Charon", "Kore", "Puck")

NO_AUDIO_MESSAGE = "No audio data was returned."

_DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
_DEFAULT_MODEL = "gemini-2.5-flash-preview-tts"


def _sounds_dir() -> Path:
    raw = (os.getenv("VOXQUERY_SOUNDS_DIR") or "").strip()
    return Path(raw).expanduser() if raw else Path("sounds")


def _speech_model() -> str:
    return (os.getenv("VOXQUERY_TTS_MODEL") or _DEFAULT_MODEL).strip() or _DEFAULT_MODEL


def _speech_api_base() -> str:
    raw = (os.getenv("VOXQUERY_TTS_API_BASE") or _DEFAULT_API_BASE).strip().rstrip("/")
    return raw or _DEFAULT_API_BASE


def _speech_api_key() -> str | None:
    raw = (os.getenv("GEMINI_API_KEY") or "").strip()
    return raw or None


def _speech_timeout_seconds() -> float | None:
    raw = (os.getenv("VOXQUERY_TTS_TIMEOUT_SECONDS") or "").strip()
    if not raw:
        return None
    try:
        return max(1.0, float(raw))
    except ValueError:
        return None


def build_speech_payload(text: str, voice_name: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": text}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": voice_name},
                },
            },
        },
        "model": _speech_model(),
    }


def extract_inline_audio(payload: Any) -> tuple[str, str] | None:
    """Return ``(base64_data, mime_type)`` from the first candidate part."""

    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    inline = parts[0].get("inlineData")
    if not isinstance(inline, dict):
        return None

    data = inline.get("data")
    mime_type = inline.get("mimeType")
    if not data or not mime_type:
        return None
    return str(data), str(mime_type)


def request_speech(text: str, voice_name: str) -> dict[str, Any]:
    api_key = _speech_api_key()
    if api_key is None:
        raise ValueError("GEMINI_API_KEY is not set")

    url = f"{_speech_api_base()}/models/{_speech_model()}:generateContent"
    response = requests.post(
        url,
        params={"key": api_key},
        json=build_speech_payload(text, voice_name),
        headers={"Content-Type": "application/json"},
        timeout=_speech_timeout_seconds(),
    )
    response.raise_for_status()
    return response.json()


def generate_audio(
    text: str,
    voice_name: str | None = DEFAULT_VOICE,
    *,
    output_dir: str | Path | None = None,
) -> ToolResult:
    """Synthesize ``text`` and save it as a WAV file."""

    voice = (voice_name or "").strip() or DEFAULT_VOICE
    target_dir = Path(output_dir) if output_dir is not None else _sounds_dir()

    try:
        target_dir.mkdir(parents=True, exist_ok=True)

        payload = request_speech(text, voice)
        audio = extract_inline_audio(payload)
        if audio is None:
            logger.info("Speech API returned no audio part (voice=%s)", voice)
            return ToolResult(tool=TOOL_NAME, status="empty", kind="no_audio", message=NO_AUDIO_MESSAGE)

        data_b64, mime_type = audio
        audio_format = parse_audio_format(mime_type)
        pcm = base64.b64decode(data_b64)

        file_path = target_dir / f"audio_output_{uuid.uuid4()}.wav"
        file_path.write_bytes(encode_wav(pcm, audio_format))
    except Exception as exc:
        logger.warning("An error occurred during audio generation: %s", exc)
        return ToolResult(
            tool=TOOL_NAME,
            status="error",
            kind="audio_error",
            message=f"An error occurred during audio generation: {exc}",
        )

    logger.info(
        "Saved %s bytes of audio (%s Hz, %s bit) to %s",
        len(pcm),
        audio_format.sample_rate,
        audio_format.bits_per_sample,
        file_path,
    )
    return ToolResult(
        tool=TOOL_NAME,
        status="ok",
        message=f"Audio successfully saved to: {file_path}",
        data={
            "path": str(file_path),
            "sample_rate": audio_format.sample_rate,
            "bits_per_sample": audio_format.bits_per_sample,
            "pcm_bytes": len(pcm),
        },
    )


def synthesize(text: str, voice_name: str | None = DEFAULT_VOICE, *, output_dir: str | Path | None = None) -> str:
    """Return the saved file message, or an error description."""

    return generate_audio(text, voice_name, output_dir=output_dir).message
