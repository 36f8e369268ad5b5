"""
Infrastructure package

- orchestration: export job manager and application lifecycle
- storage: durable export job table
"""
