"""Test package for termotype.

Core tests drive the typing engine with a fake clock and need nothing beyond
pytest. The smoke tests run the pygame shell headlessly using SDL's dummy
video driver. To run these tests, execute ``pytest`` from the project root.
"""
