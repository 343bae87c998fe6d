"""
Evaluation Package
==================

Seed bank and harness for scoring agents by pairs passed.
"""

from flappy_sim.evaluation.run_eval import evaluate_agent, load_agent, load_seed_bank, play_round

__all__ = ["evaluate_agent", "load_agent", "load_seed_bank", "play_round"]
