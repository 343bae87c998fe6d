"""
Evaluation Harness
==================

Plays an agent through one round per seed and reports how far it got:
pairs passed, frames survived, how each round ended and how hard the
difficulty ramp had become by then.

Usage:
    python -m flappy_sim.evaluation.run_eval --agent contestants/baseline_gap
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import logging
import os
import sys
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from flappy_sim.flappy_core.env_gym import FlappyEnv

logger = logging.getLogger(__name__)

Policy = Callable[[Dict[str, np.ndarray]], int]

# Reported when a round hits max_frames instead of ending in a collision
FRAME_CAP = "frame_cap"
END_REASONS = ("out_of_bounds", "obstacle", FRAME_CAP)


@dataclass
class RoundResult:
    """Outcome of one round."""
    seed: int
    pairs_passed: int
    frames: int
    jumps: int
    end_reason: str
    spawn_interval: float       # Ramp state when the round ended
    obstacle_velocity: float
    wall_time: float
    actions: Optional[List[int]] = None


@dataclass
class EvalSummary:
    """Aggregate over all rounds."""
    mean_pairs: float
    std_pairs: float
    median_pairs: float
    best_pairs: int
    worst_pairs: int
    mean_frames: float
    end_reasons: Dict[str, int]
    rounds: List[RoundResult] = field(default_factory=list)

    @property
    def best_round(self) -> RoundResult:
        return max(self.rounds, key=lambda r: (r.pairs_passed, r.frames))


def load_seed_bank(path: Optional[str] = None) -> List[int]:
    """Read the seed list from seed_bank.json (the packaged one if path is None)."""
    if path is None:
        path = os.path.join(os.path.dirname(__file__), "seed_bank.json")

    with open(path, "r") as f:
        return [int(s) for s in json.load(f)["seeds"]]


def _agent_file(agent_path: str) -> Path:
    path = Path(agent_path)
    agent_file = path / "agent.py" if path.is_dir() else path
    if not agent_file.exists():
        raise FileNotFoundError(f"Agent file not found: {agent_file}")
    return agent_file


def load_agent(agent_path: str) -> Policy:
    """
    Import an agent and return its policy.

    The module may provide, in order of preference, a `create_agent()`
    factory, a `FlappyAgent` class, or a plain `act(obs)` function. Agent
    objects must have an `act` method.

    Args:
        agent_path: Agent directory (containing agent.py) or a .py file.

    Returns:
        Callable mapping an observation to 0 (nothing) or 1 (jump).
    """
    agent_file = _agent_file(agent_path)

    module_spec = importlib.util.spec_from_file_location("flappy_agent", agent_file)
    if module_spec is None or module_spec.loader is None:
        raise ImportError(f"Cannot import agent from {agent_file}")
    module = importlib.util.module_from_spec(module_spec)
    sys.modules["flappy_agent"] = module
    module_spec.loader.exec_module(module)

    if hasattr(module, "create_agent"):
        agent = module.create_agent()
    elif hasattr(module, "FlappyAgent"):
        agent = module.FlappyAgent()
    elif callable(getattr(module, "act", None)):
        return module.act
    else:
        raise AttributeError(
            f"{agent_file} defines neither create_agent, FlappyAgent nor act"
        )

    if not callable(getattr(agent, "act", None)):
        raise AttributeError(f"{type(agent).__name__} has no act() method")
    logger.debug("Loaded %s from %s", type(agent).__name__, agent_file)
    return agent.act


def play_round(
    policy: Policy,
    seed: int,
    max_frames: Optional[int] = None,
    record_actions: bool = False
) -> RoundResult:
    """
    Play one round to game over or the frame cap.

    Args:
        policy: Observation -> action.
        seed: Seed for gap placement.
        max_frames: Frame cap. Uses the config value if None.
        record_actions: Keep the chosen action of every frame.

    Returns:
        RoundResult for this seed.
    """
    env = FlappyEnv(max_frames=max_frames)
    actions: Optional[List[int]] = [] if record_actions else None
    jumps = 0

    started = time.perf_counter()
    try:
        obs, info = env.reset(seed=seed)
        terminated = truncated = False
        while not (terminated or truncated):
            action = int(policy(obs))
            if actions is not None:
                actions.append(action)
            obs, _, terminated, truncated, info = env.step(action)
            jumps += int(info["jumped"])
    finally:
        env.close()

    result = RoundResult(
        seed=seed,
        pairs_passed=info["score"],
        frames=info["frame"],
        jumps=jumps,
        end_reason=info["terminated_reason"] if terminated else FRAME_CAP,
        spawn_interval=info["spawn_interval"],
        obstacle_velocity=info["obstacle_velocity"],
        wall_time=time.perf_counter() - started,
        actions=actions
    )
    logger.info(
        "seed=%d pairs=%d frames=%d end=%s",
        seed, result.pairs_passed, result.frames, result.end_reason
    )
    return result


def evaluate_agent(
    policy: Policy,
    seeds: Optional[List[int]] = None,
    max_frames: Optional[int] = None,
    record_actions: bool = False
) -> EvalSummary:
    """
    Play one round per seed and aggregate.

    Args:
        policy: Observation -> action.
        seeds: Seeds to play. Uses the seed bank if None.
        max_frames: Frame cap per round. Uses the config value if None.
        record_actions: Keep per-frame actions in each RoundResult.
    """
    if seeds is None:
        seeds = load_seed_bank()
    if not seeds:
        raise ValueError("No seeds to evaluate")

    rounds = [play_round(policy, s, max_frames, record_actions) for s in seeds]
    pairs = np.array([r.pairs_passed for r in rounds])

    reasons = Counter(r.end_reason for r in rounds)
    return EvalSummary(
        mean_pairs=float(pairs.mean()),
        std_pairs=float(pairs.std()),
        median_pairs=float(np.median(pairs)),
        best_pairs=int(pairs.max()),
        worst_pairs=int(pairs.min()),
        mean_frames=float(np.mean([r.frames for r in rounds])),
        end_reasons={reason: reasons.get(reason, 0) for reason in END_REASONS},
        rounds=rounds
    )


def format_summary(summary: EvalSummary) -> str:
    """Human-readable report: one line per round, then totals."""
    lines = [f"{'seed':>12} {'pairs':>6} {'frames':>7} {'jumps':>6} "
             f"{'interval':>9} {'speed':>6}  end"]
    for r in summary.rounds:
        lines.append(
            f"{r.seed:>12} {r.pairs_passed:>6} {r.frames:>7} {r.jumps:>6} "
            f"{r.spawn_interval:>9.0f} {abs(r.obstacle_velocity):>6.2f}  {r.end_reason}"
        )

    ends = ", ".join(f"{k}={v}" for k, v in summary.end_reasons.items())
    lines += [
        "",
        f"Rounds:        {len(summary.rounds)}",
        f"Pairs passed:  mean {summary.mean_pairs:.2f} (std {summary.std_pairs:.2f}), "
        f"median {summary.median_pairs:.1f}, "
        f"range {summary.worst_pairs}..{summary.best_pairs}",
        f"Mean frames:   {summary.mean_frames:.1f}",
        f"Round ends:    {ends}",
        f"Best seed:     {summary.best_round.seed}",
    ]
    return "\n".join(lines)


def write_report(summary: EvalSummary, agent_name: str, output_path: str) -> None:
    """Write the summary as JSON. Recorded actions are left out."""
    report = asdict(summary)
    for r in report["rounds"]:
        r.pop("actions")
    report["agent"] = agent_name
    report["timestamp"] = time.strftime("%Y-%m-%d %H:%M:%S")

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)


def main():
    parser = argparse.ArgumentParser(description="Evaluate a Flappy Sim agent")
    parser.add_argument("--agent", required=True, help="Agent directory or agent.py file")
    parser.add_argument("--seeds", default=None, help="Seed bank JSON (default: packaged bank)")
    parser.add_argument("--max-frames", type=int, default=None,
                        help="Frame cap per round (default: config value)")
    parser.add_argument("--output", default=None, help="Write a JSON report here")
    parser.add_argument("--debug", action="store_true", help="Log every round and core event")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        policy = load_agent(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as e:
        print(f"Error loading agent: {e}")
        return 1

    seeds = load_seed_bank(args.seeds) if args.seeds else None
    summary = evaluate_agent(policy, seeds=seeds, max_frames=args.max_frames)
    print(format_summary(summary))

    if args.output:
        write_report(summary, Path(args.agent).name, args.output)
        print(f"\nReport written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
