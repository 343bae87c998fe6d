"""
Flappy Sim Package
==================

This package contains the game simulation core and the evaluation harness
for scripted agents. It controls:

- Body physics and jump debounce
- Obstacle spawning, scrolling and recycling
- Difficulty ramp
- Collision and scoring rules
- Agent evaluation

All tunable parameters are in game_config.yaml and are fixed at load time.
"""
