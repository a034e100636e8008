"""Test suite for the ranking admin API."""
