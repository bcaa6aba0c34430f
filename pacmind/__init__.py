"""Autonomous maze-forager simulation: board graph, entities, scanning and decisions."""
