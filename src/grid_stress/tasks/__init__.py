"""Run modes: Randomize, Test, Stress and BatchStress."""
