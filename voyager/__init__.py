"""Voyager trip planner: day-by-day schedules and a packing list."""
