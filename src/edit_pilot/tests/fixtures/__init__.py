"""
Shared test fixtures for Edit Pilot.
"""
