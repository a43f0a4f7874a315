"""Tests - Test suite for expression chains and their evaluator."""
