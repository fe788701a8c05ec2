"""Test package for the mathquest session engine.

The engines are headless and deterministic, so every test drives them with a
``FakeClock`` and a fixed seed.  Run ``pytest`` from the project root.
"""
