"""Test package for Math Magician Quest.

Core tests drive the problem generator and session with scripted random
sources and fake clocks. UI tests run headlessly using pygame's dummy video
driver. To run these tests, execute ``pytest`` from the project root.
"""
