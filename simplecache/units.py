"""Durations in milliseconds, for TTL arguments."""

second = 1000
minute = 60 * second
hour = 60 * minute
day = 24 * hour
week = 7 * day
month = 30 * day
