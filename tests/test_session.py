"""Testes do SessionStore: limite de histórico, expiração e concorrência."""

from __future__ import annotations

import threading
from datetime import timedelta

from assistente.schemas import Intent, Message, Sender, utcnow
from assistente.session import SessionStore


def _msg(text: str, sender: Sender = Sender.user) -> Message:
    return Message(text=text, sender=sender)


class TestHistoryLimit:
    def test_history_keeps_newest_fifty(self, store: SessionStore):
        """Após 60 mensagens, ficam as 50 mais recentes em ordem."""
        for i in range(60):
            store.append_message("s1", _msg(f"m{i}"))

        history = store.get_history("s1")
        assert len(history) == 50
        assert history[0].text == "m10"
        assert history[-1].text == "m59"

    def test_custom_limit(self):
        store = SessionStore(history_limit=3)
        for i in range(5):
            store.append_message("s1", _msg(f"m{i}"))
        assert [m.text for m in store.get_history("s1")] == ["m2", "m3", "m4"]

    def test_save_truncates_working_copy(self):
        store = SessionStore(history_limit=2)
        context = store.get_or_create("s1")
        for i in range(4):
            context.conversation_history.append(_msg(f"m{i}"))
        store.save(context)
        assert [m.text for m in store.get_history("s1")] == ["m2", "m3"]


class TestSessionState:
    def test_get_or_create_returns_copy(self, store: SessionStore):
        context = store.get_or_create("s1")
        context.collected_data["ano"] = "5º ano"
        assert store.get_or_create("s1").collected_data == {}

    def test_reset_keeps_history_and_artifacts(self, store: SessionStore):
        store.append_message("s1", _msg("oi"))
        store.update_intent("s1", Intent.plano_aula, 0.9)
        store.set_collected_field("s1", "ano", "5º ano")
        store.set_collected_field("s1", "last_plano_content", "Plano antigo")
        store.set_waiting_for("s1", "tema", "Qual o tema?")

        store.reset_keeping_history("s1")

        context = store.get("s1")
        assert context.current_intent is None
        assert context.intent_confidence == 0.0
        assert context.collected_data == {}
        assert context.waiting_for is None
        assert context.last_bot_question is None
        assert context.artifacts.last_plano_content == "Plano antigo"
        assert [m.text for m in context.conversation_history] == ["oi"]

    def test_reset_can_drop_artifacts(self, store: SessionStore):
        store.set_collected_field("s1", "last_plano_content", "Plano antigo")
        store.reset_keeping_history("s1", preserve_keys=())
        assert store.get("s1").artifacts.last_plano_content is None

    def test_clear_waiting_for(self, store: SessionStore):
        store.set_waiting_for("s1", "ano", "Para qual ano?")
        store.clear_waiting_for("s1")
        context = store.get("s1")
        assert context.waiting_for is None
        assert context.last_bot_question is None

    def test_clear_removes_session(self, store: SessionStore):
        store.touch("s1")
        assert store.exists("s1")
        store.clear("s1")
        assert not store.exists("s1")
        assert store.get("s1") is None

    def test_clear_drops_session_lock(self, store: SessionStore):
        for i in range(100):
            store.touch(f"s{i}")
            store.clear(f"s{i}")
        assert store.list_sessions() == []
        assert store._locks == {}

    def test_update_intent_between_tasks_drops_slots(self, store: SessionStore):
        store.update_intent("s1", Intent.plano_aula, 0.9)
        store.set_collected_field("s1", "ano", "5º ano")
        store.set_waiting_for("s1", "tema", "Qual o tema?")

        store.update_intent("s1", Intent.planejamento_semanal, 0.9)

        context = store.get("s1")
        assert context.current_intent == Intent.planejamento_semanal
        assert context.collected_data == {}
        assert context.waiting_for is None

    def test_list_sessions(self, store: SessionStore):
        store.touch("a")
        store.touch("b")
        assert sorted(store.list_sessions()) == ["a", "b"]


class TestSweep:
    def _age(self, store: SessionStore, session_id: str, minutes: float) -> None:
        context = store.get_or_create(session_id)
        store.save(context)
        # save() atualiza last_activity; envelhece direto no mapa
        store._sessions[session_id].last_activity = utcnow() - timedelta(minutes=minutes)

    def test_removes_only_inactive_sessions(self, store: SessionStore):
        self._age(store, "velha", 20)
        self._age(store, "nova", 5)

        removed = store.sweep_inactive(15)

        assert removed == 1
        assert not store.exists("velha")
        assert store.exists("nova")

    def test_skips_session_in_flight(self, store: SessionStore):
        """Sessão com turno em andamento (lock preso) não é removida."""
        self._age(store, "ocupada", 30)
        locked = threading.Event()
        release = threading.Event()

        def hold_lock():
            with store.lock("ocupada"):
                locked.set()
                release.wait(timeout=5)

        worker = threading.Thread(target=hold_lock)
        worker.start()
        locked.wait(timeout=5)
        try:
            assert store.sweep_inactive(15) == 0
            assert store.exists("ocupada")
        finally:
            release.set()
            worker.join()

        assert store.sweep_inactive(15) == 1


class TestConcurrency:
    def test_concurrent_appends_are_not_lost(self, store: SessionStore):
        def append_many(prefix: str):
            for i in range(20):
                store.append_message("s1", _msg(f"{prefix}{i}"))

        workers = [threading.Thread(target=append_many, args=(f"t{n}-",)) for n in range(2)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        texts = [m.text for m in store.get_history("s1")]
        assert len(texts) == 40
        assert texts.index("t0-0") < texts.index("t0-19")
        assert texts.index("t1-0") < texts.index("t1-19")
