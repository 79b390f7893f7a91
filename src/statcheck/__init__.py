"""Statistic-threshold tests for automation plans."""
