"""Scheduled jobs — entry points meant to be run by cron or a platform scheduler."""
