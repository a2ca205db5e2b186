"""
Test suite for Edit Pilot.
"""
