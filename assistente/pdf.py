"""
Exportação do plano de aula em PDF.

A renderização é feita por um serviço HTTP externo; aqui só montamos o texto
formatado (cabeçalho com ano, tema, dificuldade e data) e chamamos o serviço.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

import httpx

from assistente.config import PDF_SERVICE_API_KEY, PDF_SERVICE_URL

logger = logging.getLogger(__name__)

_ANO = re.compile(r"(\d+\s*[º°]\s*ano|Ensino\s*Médio)", re.IGNORECASE)
_TEMA = (
    re.compile(r"Tema[:\s]+([^\n]+)", re.IGNORECASE),
    re.compile(r"Habilidade[:\s]+([^\n]+)", re.IGNORECASE),
    re.compile(r"Conteúdo[:\s]+([^\n]+)", re.IGNORECASE),
)
_NIVEL = (
    re.compile(r"NÍVEL DE DIFICULDADE[:\s]+([^\n]+)", re.IGNORECASE),
    re.compile(r"nível[:\s]+([^\n]+)", re.IGNORECASE),
)


class PdfRenderError(RuntimeError):
    pass


def _first_match(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip(" *#")
    return None


def extract_plan_info(content: str, today: Optional[date] = None) -> dict[str, Optional[str]]:
    """Informações do cabeçalho, lidas do próprio texto do plano."""
    ano = _ANO.search(content)
    return {
        "ano": ano.group(1) if ano else None,
        "tema": _first_match(_TEMA, content),
        "nivel_dificuldade": _first_match(_NIVEL, content),
        "data": (today or date.today()).strftime("%d/%m/%Y"),
    }


def format_plan_for_pdf(content: str, today: Optional[date] = None) -> str:
    info = extract_plan_info(content, today)
    header = ["# Plano de Aula"]
    labels = (("ano", "Ano"), ("tema", "Tema"), ("nivel_dificuldade", "Nível"), ("data", "Data"))
    for key, label in labels:
        if info.get(key):
            header.append(f"**{label}:** {info[key]}")
    return "\n".join(header) + "\n\n---\n\n" + content.strip()


class HttpPdfRenderer:
    """Cliente do serviço de renderização (POST /render → application/pdf)."""

    def __init__(self, base_url: str = PDF_SERVICE_URL, api_key: str = PDF_SERVICE_API_KEY, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def render(self, formatted_text: str, title: str = "Plano de Aula") -> bytes:
        url = f"{self.base_url}/render"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {"title": title, "content": formatted_text, "format": "markdown"}

        try:
            with httpx.Client(timeout=self.timeout) as client:
                resp = client.post(url, json=payload, headers=headers)
                resp.raise_for_status()
        except httpx.ConnectError as e:
            logger.warning(f"Serviço de PDF indisponível: {e}")
            raise PdfRenderError("Serviço de PDF indisponível") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Erro HTTP do serviço de PDF: {e.response.status_code}")
            raise PdfRenderError(f"Serviço de PDF retornou HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Falha ao chamar o serviço de PDF: {e}")
            raise PdfRenderError(str(e)) from e

        if not resp.content:
            raise PdfRenderError("Serviço de PDF retornou conteúdo vazio")
        return resp.content
