"""Absence timers: per-student countdowns, the recurring day cycle and streak counting."""
