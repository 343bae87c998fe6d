"""
Baseline Gap Agent Package

A simple heuristic agent that hops just above the lower edge of the
next gap. Serves as a benchmark and example.
"""

from .agent import FlappyAgent, create_agent

__all__ = ["FlappyAgent", "create_agent"]
