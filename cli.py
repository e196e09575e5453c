"""
CLI interativo para testar o assistente educacional.

  python cli.py                # Via HTTP (server rodando)
  python cli.py --direct       # Executa o controller diretamente
"""

from __future__ import annotations

import argparse
import uuid


def _print_debug(data: dict):
    """Imprime debug info de forma legível."""
    side_effects = data.get("side_effects") or {}
    print(f"\033[90m  ┌─ intent: {data.get('intent') or '-'}\033[0m")
    if side_effects.get("video"):
        print(f"\033[90m  │  video: {side_effects['video']['url']}\033[0m")
    if side_effects.get("pdf_url"):
        print(f"\033[90m  │  pdf: {side_effects['pdf_url']}\033[0m")

    context = data.get("context")
    if context:
        print(
            f"\033[90m  └─ slots={context.get('collected_data', {})} "
            f"waiting_for={context.get('waiting_for') or '-'}\033[0m"
        )


def _prompt(show_debug: bool):
    """Lê a próxima mensagem; None encerra, "" ignora."""
    try:
        user_input = input("\033[92mVocê:\033[0m ").strip()
    except (KeyboardInterrupt, EOFError):
        print("\nAté logo!")
        return None, show_debug

    if user_input.lower() in ("exit", "quit"):
        return None, show_debug
    if user_input.lower() == "debug":
        show_debug = not show_debug
        print(f"  Debug {'ON' if show_debug else 'OFF'}")
        return "", show_debug
    return user_input, show_debug


def run_via_api():
    """Testa via HTTP."""
    import httpx

    base_url = "http://localhost:8000"
    session_id = None

    print("\n╔══════════════════════════════════════════════╗")
    print("║   Assistente Educacional — CLI (API)         ║")
    print("╚══════════════════════════════════════════════╝")
    print("  'exit' para encerrar | 'debug' para toggle\n")

    show_debug = True

    while True:
        user_input, show_debug = _prompt(show_debug)
        if user_input is None:
            break
        if not user_input:
            continue

        try:
            resp = httpx.post(
                f"{base_url}/chat",
                json={"session_id": session_id, "message": user_input},
                timeout=120,
            )
            resp.raise_for_status()
            data = resp.json()
            session_id = data["session_id"]

            if show_debug:
                ctx = httpx.get(f"{base_url}/context", params={"session_id": session_id}, timeout=10)
                if ctx.status_code == 200:
                    data["context"] = ctx.json()
                _print_debug(data)

            print(f"\033[94mAssistente:\033[0m {data['response']}\n")

        except httpx.ConnectError:
            print("\033[91m  ✗ Server não rodando. Use: uvicorn assistente.server:app\033[0m")
        except httpx.HTTPError as e:
            print(f"\033[91m  ✗ Erro: {e}\033[0m")


def run_direct():
    """Executa o controller diretamente, sem HTTP."""
    from assistente.controller import DialogueController
    from assistente.server import default_oracles
    from assistente.session import SessionStore

    print("\n╔══════════════════════════════════════════════╗")
    print("║   Assistente Educacional — CLI (Direto)      ║")
    print("╚══════════════════════════════════════════════╝")
    print("  'exit' para encerrar | 'debug' para toggle\n")

    store = SessionStore()
    controller = DialogueController(store, default_oracles())
    session_id = str(uuid.uuid4())
    print(f"  Session: {session_id}\n")
    show_debug = True

    while True:
        user_input, show_debug = _prompt(show_debug)
        if user_input is None:
            break
        if not user_input:
            continue

        result = controller.process_message(user_input, session_id)

        if show_debug:
            context = controller.get_context(session_id)
            _print_debug({
                "intent": result.intent.value if result.intent else None,
                "side_effects": result.side_effects.model_dump(),
                "context": context.model_dump() if context else None,
            })

        print(f"\033[94mAssistente:\033[0m {result.text}\n")


def main():
    parser = argparse.ArgumentParser(description="Assistente Educacional CLI")
    parser.add_argument("--direct", action="store_true", help="Executa o controller diretamente")
    args = parser.parse_args()

    if args.direct:
        run_direct()
    else:
        run_via_api()


if __name__ == "__main__":
    main()
