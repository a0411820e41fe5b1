"""Notification agent orchestration and record assembly."""
