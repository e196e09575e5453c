"""Assistente Educacional — assistente conversacional para professores."""
