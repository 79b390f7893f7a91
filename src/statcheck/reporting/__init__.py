"""Run result reporting."""
