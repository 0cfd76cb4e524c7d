"""Tick-driven snake game engine."""
